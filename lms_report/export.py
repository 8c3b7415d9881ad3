from __future__ import annotations
from datetime import date
from io import BytesIO
from typing import Any, Dict, List, Optional
import pandas as pd
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle
from .enrich import FINAL_COLUMNS, COMPLETION_RATE
from .stats import compute_stats, pivot_table, PIVOT_FIELDS
from .utils import round_half_up

EXCEL_FILE_NAME = "United_Pharmacy_Completion_Report.xlsx"
PDF_FILE_NAME = "LMS_Executive_Summary.pdf"

DASHBOARD_SHEET = "Dashboard Report"
PIVOT_SHEET = "Pivot Analysis"

# таблица данных начинается с A9 (строка 8, 0-based), сводка - с C2
DATA_START_ROW = 8
SUMMARY_ROW, SUMMARY_COL = 1, 2

COLUMN_WIDTHS = [15, 15, 30, 20, 20, 25, 25, 15, 15, 15]


def _summary_block(stats: Dict[str, Any]) -> List[List[Any]]:
    total = stats["total"]

    def share(n: int) -> float:
        return n / total if total > 0 else 0

    return [
        ["Summarization Status", "Number Count", "Percentage"],
        ["Number Of Student", total, 1],
        ["Number Of Student Who Completed", stats["completed"], share(stats["completed"])],
        ["Number OF Student Who In Progress", stats["in_progress"], share(stats["in_progress"])],
        ["Number Of Students Who Did Not Started", stats["not_started"], share(stats["not_started"])],
    ]


def export_to_excel_bytes(rows: List[Dict[str, Any]], stats: Optional[Dict[str, Any]] = None) -> bytes:
    """
    Excel-отчёт из двух листов:
      - "Dashboard Report": сводка (C2) + итоговая таблица (A9) с автофильтром
      - "Pivot Analysis": разбивки по District / Supervisor Name / City
    """
    if stats is None:
        stats = compute_stats(rows)
    data_df = pd.DataFrame(rows, columns=FINAL_COLUMNS)

    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="xlsxwriter") as writer:
        data_df.to_excel(writer, index=False, sheet_name=DASHBOARD_SHEET, startrow=DATA_START_ROW)

        wb = writer.book
        ws = writer.sheets[DASHBOARD_SHEET]

        fmt_header = wb.add_format({"bold": True, "bg_color": "#F2F2F2", "border": 1, "valign": "vcenter"})
        fmt_text = wb.add_format({"border": 1, "valign": "top"})
        fmt_pct = wb.add_format({"num_format": "0%"})
        fmt_pct_cell = wb.add_format({"border": 1, "valign": "top", "num_format": "0%"})
        fmt_title = wb.add_format({"bold": True, "bg_color": "#E8F0FE", "border": 1, "valign": "vcenter"})

        # сводка
        for i, line in enumerate(_summary_block(stats)):
            r = SUMMARY_ROW + i
            if i == 0:
                for j, v in enumerate(line):
                    ws.write(r, SUMMARY_COL + j, v, fmt_header)
                continue
            ws.write(r, SUMMARY_COL, line[0], fmt_text)
            ws.write_number(r, SUMMARY_COL + 1, line[1], fmt_text)
            ws.write_number(r, SUMMARY_COL + 2, line[2], fmt_pct_cell)

        # таблица
        for col, name in enumerate(data_df.columns):
            ws.write(DATA_START_ROW, col, name, fmt_header)
        for col, w in enumerate(COLUMN_WIDTHS[: len(data_df.columns)]):
            ws.set_column(col, col, w)
        rate_col = FINAL_COLUMNS.index(COMPLETION_RATE)
        ws.set_column(rate_col, rate_col, COLUMN_WIDTHS[rate_col], fmt_pct)
        ws.freeze_panes(DATA_START_ROW + 1, 0)
        ws.autofilter(DATA_START_ROW, 0, DATA_START_ROW + max(1, len(data_df)), len(data_df.columns) - 1)

        # pivot
        wsp = wb.add_worksheet(PIVOT_SHEET)
        writer.sheets[PIVOT_SHEET] = wsp
        wsp.write(0, 0, "Pivot Analysis Report", fmt_title)
        wsp.set_column(0, 0, 30)
        wsp.set_column(1, 4, 12)
        wsp.set_column(5, 5, 15)

        r = 2
        for field, title in PIVOT_FIELDS:
            pv = pivot_table(rows, field)
            wsp.merge_range(r, 0, r, len(pv.columns) - 1, title, fmt_title)
            r += 1
            for c, name in enumerate(pv.columns):
                wsp.write(r, c, name, fmt_header)
            r += 1
            for rec in pv.itertuples(index=False):
                wsp.write(r, 0, rec[0], fmt_text)
                for c in range(1, 5):
                    wsp.write_number(r, c, int(rec[c]), fmt_text)
                wsp.write_number(r, 5, float(rec[5]), fmt_pct_cell)
                r += 1
            r += 2

    return bio.getvalue()


def export_summary_pdf_bytes(stats: Dict[str, Any], generated_on: Optional[date] = None) -> bytes:
    """PDF executive summary: общие показатели + топ районов."""
    generated_on = generated_on or date.today()
    total = stats["total"]

    def pct(n: int) -> str:
        return f"{round_half_up((n / total) * 100) if total else 0}%"

    bio = BytesIO()
    doc = SimpleDocTemplate(bio, pagesize=A4, title="LMS Executive Summary")
    styles = getSampleStyleSheet()
    story = [
        Paragraph("United Pharmacy - LMS Executive Summary", styles["Title"]),
        Paragraph(f"Generated on: {generated_on.isoformat()}", styles["Normal"]),
        Spacer(1, 18),
        Paragraph("High-Level Overview", styles["Heading2"]),
    ]

    overview = Table([
        ["Metric", "Value", "Percentage"],
        ["Total Students", total, "100%"],
        ["Completed", stats["completed"], f"{round_half_up(stats['completion_percentage'])}%"],
        ["In Progress", stats["in_progress"], pct(stats["in_progress"])],
        ["Not Started", stats["not_started"], pct(stats["not_started"])],
    ], hAlign="LEFT")
    overview.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#F4A460")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#F5F5F5")]),
    ]))
    story += [overview, Spacer(1, 18), Paragraph("Top Districts Performance", styles["Heading2"])]

    district_data = [["District", "Completed", "Pending", "Total"]]
    for d in stats["by_district"]:
        district_data.append([d["name"], d["Completed"], d["Pending"], d["Completed"] + d["Pending"]])
    if len(district_data) == 1:
        district_data.append(["-", 0, 0, 0])
    districts = Table(district_data, hAlign="LEFT")
    districts.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3C3C3C")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))
    story.append(districts)

    def footer(canvas, doc_):
        canvas.saveState()
        canvas.setFont("Helvetica", 8)
        canvas.drawString(40, 20, "United Pharmacy LMS Automation Tool")
        canvas.drawRightString(A4[0] - 40, 20, f"Page {doc_.page}")
        canvas.restoreState()

    doc.build(story, onFirstPage=footer, onLaterPages=footer)
    return bio.getvalue()
