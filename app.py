from __future__ import annotations
import logging
import streamlit as st
import pandas as pd
from lms_report.ingest import load_table_from_upload, FileType, IngestError
from lms_report.pipeline import process_data
from lms_report.stats import (compute_stats, filter_rows, filter_options, completion_status, ALL)
from lms_report.export import (export_to_excel_bytes, export_summary_pdf_bytes, EXCEL_FILE_NAME, PDF_FILE_NAME)
from lms_report.reminder import supervisors_with_pending, build_reminder_message
from lms_report.enrich import COMPLETION_RATE
from lms_report.schema import DISTRICT, SUPERVISOR
from lms_report.log import setup_logging
from lms_report.utils import round_half_up

setup_logging()
log = logging.getLogger("lms_report.app")

st.set_page_config(page_title="United Pharmacy - LMS Automation Tool", layout="wide")
st.title("United Pharmacy - LMS Automation Tool")
# =========================

# Helpers
# =========================
PROCESS_ERROR_MSG = "Error processing files. Please ensure the column names match the requirements exactly."
MISSING_FILES_MSG = "Please upload all 3 required files before processing."
TABLE_PREVIEW_ROWS = 50


def _reset():
    # новый key у file_uploader = очистка загруженных файлов
    st.session_state["result"] = None
    st.session_state["uploads_version"] += 1


def _view_df(rows: list[dict]) -> pd.DataFrame:
    # для экрана: процент + статус
    df = pd.DataFrame(rows)
    if df.empty:
        return df
    df["Rate"] = df[COMPLETION_RATE].map(lambda x: f"{round_half_up(x * 100)}%")
    df["Status"] = df[COMPLETION_RATE].map(completion_status)
    return df.drop(columns=[COMPLETION_RATE])


st.session_state.setdefault("result", None)
st.session_state.setdefault("uploads_version", 0)
ver = st.session_state["uploads_version"]

# =========================

# Upload
# =========================
if st.session_state["result"] is None:
    st.subheader("Data Processor")
    st.write(
        "Upload your raw data from **Talent** and **Pharmacy** platforms along with the Master Sheet."
    )

    uploads = {}
    cols = st.columns(3)
    for col, ftype in zip(cols, [FileType.TALENT, FileType.PHARMACY, FileType.MASTER]):
        with col:
            uploads[ftype] = st.file_uploader(
                ftype.value,
                type=["xlsx", "xls", "csv"],
                key=f"upload__{ftype.name}__{ver}",
            )

    if st.button("Run Automation", type="primary"):
        if not all(uploads.values()):
            st.error(MISSING_FILES_MSG)
        else:
            with st.spinner("Processing Data..."):
                try:
                    talent = load_table_from_upload(uploads[FileType.TALENT])
                    pharmacy = load_table_from_upload(uploads[FileType.PHARMACY])
                    master = load_table_from_upload(uploads[FileType.MASTER])
                    st.session_state["result"] = process_data(talent, pharmacy, master)
                except IngestError as e:
                    log.exception("failed to read uploads")
                    st.error(f"{PROCESS_ERROR_MSG} ({e})")
                else:
                    st.rerun()

# =========================

# Dashboard
# =========================
result = st.session_state["result"]
if result is not None:
    head1, head2 = st.columns([4, 1])
    with head1:
        st.subheader("Analytics Dashboard")
    with head2:
        if st.button("Start Over"):
            _reset()
            st.rerun()

    data = result.rows

    f1, f2 = st.columns(2)
    with f1:
        district = st.selectbox(
            "District",
            filter_options(data, DISTRICT),
            format_func=lambda x: "All Districts" if x == ALL else x,
        )
    with f2:
        supervisor = st.selectbox(
            "Supervisor",
            filter_options(data, SUPERVISOR),
            format_func=lambda x: "All Supervisors" if x == ALL else x,
        )

    filtered = filter_rows(data, district=district, supervisor=supervisor)
    stats = compute_stats(filtered)

    m1, m2, m3, m4 = st.columns(4)
    with m1:
        st.metric("Total Students", stats["total"])
    with m2:
        st.metric("Completed", stats["completed"], f"{round_half_up(stats['completion_percentage'])}%")
    with m3:
        st.metric("In Progress", stats["in_progress"])
    with m4:
        st.metric("Not Started", stats["not_started"])

    c1, c2 = st.columns([2, 1])
    with c1:
        st.caption("Completion by District (Top 10)")
        if stats["by_district"]:
            st.bar_chart(pd.DataFrame(stats["by_district"]).set_index("name")[["Completed", "Pending"]])
    with c2:
        st.caption("Completion Status")
        st.bar_chart(pd.DataFrame(stats["by_status"]).set_index("name"))

    st.caption(f"Showing {min(TABLE_PREVIEW_ROWS, len(filtered))} of {len(filtered)} records")
    st.dataframe(_view_df(filtered[:TABLE_PREVIEW_ROWS]), width="stretch")

    with st.expander("Processing details", expanded=False):
        d1, d2, d3, d4 = st.columns(4)
        with d1:
            st.metric("LMS rows", result.talent_rows + result.pharmacy_rows)
        with d2:
            st.metric("Lesson columns", len(result.lesson_columns))
        with d3:
            st.metric("Duplicates resolved", len(result.duplicates))
        with d4:
            st.metric("Rows without email", result.dropped_without_email)
        if result.lesson_columns:
            st.write("Lesson columns: " + ", ".join(result.lesson_columns))
        else:
            st.warning("No lesson status columns were found; every completion rate is 0.")
        if result.duplicates:
            st.dataframe(result.duplicates_dataframe().head(1000), width="stretch")

    b1, b2 = st.columns(2)
    with b1:
        st.download_button(
            "Export Excel",
            data=export_to_excel_bytes(filtered, stats),
            file_name=EXCEL_FILE_NAME,
            mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        )
    with b2:
        st.download_button(
            "Export PDF",
            data=export_summary_pdf_bytes(stats),
            file_name=PDF_FILE_NAME,
            mime="application/pdf",
        )

    st.divider()
    st.subheader("Reminder Message Generator")
    pending = supervisors_with_pending(filtered)
    options = [""] + [s for s, _ in pending]
    labels = {s: f"{s} ({n} pending)" for s, n in pending}
    sel = st.selectbox(
        "Select Supervisor",
        options,
        format_func=lambda x: "-- Choose Supervisor --" if x == "" else labels.get(x, x),
    )
    if sel:
        st.text_area("Preview Message", build_reminder_message(filtered, sel), height=260)
