from __future__ import annotations
from typing import Any, Dict, List
import numpy as np
import pandas as pd
from .enrich import COMPLETION_RATE
from .schema import DISTRICT, SUPERVISOR, CITY

# 0.999 вместо 1.0 - погрешность float (например 0.99999)
COMPLETED_THRESHOLD = 0.999

STATUS_COMPLETED = "Completed"
STATUS_IN_PROGRESS = "In Progress"
STATUS_NOT_STARTED = "Not Started"

ALL = "All"


def completion_status(rate: float) -> str:
    if rate >= COMPLETED_THRESHOLD:
        return STATUS_COMPLETED
    if rate > 0:
        return STATUS_IN_PROGRESS
    return STATUS_NOT_STARTED


def _rates(rows: List[Dict[str, Any]]) -> np.ndarray:
    return np.array([float(r.get(COMPLETION_RATE, 0.0) or 0.0) for r in rows], dtype=float)


def filter_options(rows: List[Dict[str, Any]], field: str) -> List[str]:
    return [ALL] + sorted({str(r.get(field, "")) for r in rows})


def filter_rows(rows: List[Dict[str, Any]], district: str = ALL, supervisor: str = ALL) -> List[Dict[str, Any]]:
    out = []
    for r in rows:
        if district != ALL and r.get(DISTRICT) != district:
            continue
        if supervisor != ALL and r.get(SUPERVISOR) != supervisor:
            continue
        out.append(r)
    return out


def compute_stats(rows: List[Dict[str, Any]], top_districts: int = 10) -> Dict[str, Any]:
    """
    Сводка для дашборда:
      total / completed / in_progress / not_started
      completion_percentage (0..100)
      by_district: топ районов по числу завершивших (Completed / Pending)
      by_status: для круговой диаграммы
    """
    rates = _rates(rows)
    total = int(rates.size)
    completed = int((rates >= COMPLETED_THRESHOLD).sum())
    in_progress = int(((rates > 0) & (rates < COMPLETED_THRESHOLD)).sum())
    not_started = int((rates == 0).sum())
    pct = (completed / total) * 100 if total > 0 else 0.0

    by_district: List[Dict[str, Any]] = []
    if total:
        df = pd.DataFrame({
            "name": [str(r.get(DISTRICT, "")) for r in rows],
            "done": rates >= COMPLETED_THRESHOLD,
        })
        grp = df.groupby("name", sort=False).agg(total=("done", "size"), Completed=("done", "sum")).reset_index()
        grp["Pending"] = grp["total"] - grp["Completed"]
        grp["name"] = grp["name"].replace("", "Unknown")
        grp = grp.sort_values("Completed", ascending=False, kind="stable").head(top_districts)
        by_district = [
            {"name": n, "Completed": int(c), "Pending": int(p)}
            for n, c, p in zip(grp["name"], grp["Completed"], grp["Pending"])
        ]

    return {
        "total": total,
        "completed": completed,
        "in_progress": in_progress,
        "not_started": not_started,
        "completion_percentage": float(pct),
        "by_district": by_district,
        "by_status": [
            {"name": STATUS_COMPLETED, "value": completed},
            {"name": STATUS_IN_PROGRESS, "value": in_progress},
            {"name": STATUS_NOT_STARTED, "value": not_started},
        ],
    }


def pivot_table(rows: List[Dict[str, Any]], field: str) -> pd.DataFrame:
    # разбивка по полю (District / Supervisor Name / City), пустое значение -> "(Blank)"
    cols = [field, "Total Count", STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_NOT_STARTED, "Completion %"]
    if not rows:
        return pd.DataFrame(columns=cols)

    df = pd.DataFrame({
        field: [str(r.get(field, "") or "(Blank)") for r in rows],
        "status": [completion_status(x) for x in _rates(rows)],
    })
    for s in (STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_NOT_STARTED):
        df[s] = (df["status"] == s).astype(int)

    # порядок при равном количестве - по первому появлению
    out = df.groupby(field, sort=False)[[STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_NOT_STARTED]].sum().reset_index()
    out.insert(1, "Total Count", out[[STATUS_COMPLETED, STATUS_IN_PROGRESS, STATUS_NOT_STARTED]].sum(axis=1))
    out["Completion %"] = out[STATUS_COMPLETED] / out["Total Count"]
    out = out.sort_values("Total Count", ascending=False, kind="stable").reset_index(drop=True)
    return out[cols]


PIVOT_FIELDS = [
    (DISTRICT, "Pivot: Breakdown by District"),
    (SUPERVISOR, "Pivot: Breakdown by Supervisor"),
    (CITY, "Pivot: Breakdown by City"),
]
