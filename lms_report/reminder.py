from __future__ import annotations
from typing import Any, Dict, List, Tuple
from .enrich import COMPLETION_RATE
from .schema import SUPERVISOR, DISPLAY_NAME, EMPLOYEE_ID
from .stats import COMPLETED_THRESHOLD
from .utils import round_half_up


def incomplete_rows(rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    return [r for r in rows if float(r.get(COMPLETION_RATE, 0.0) or 0.0) < COMPLETED_THRESHOLD]


def supervisors_with_pending(rows: List[Dict[str, Any]]) -> List[Tuple[str, int]]:
    # (руководитель, сколько сотрудников не завершили), по алфавиту
    counts: Dict[str, int] = {}
    for r in incomplete_rows(rows):
        s = str(r.get(SUPERVISOR, ""))
        counts[s] = counts.get(s, 0) + 1
    return sorted(counts.items())


def _status_text(rate: float) -> str:
    if rate == 0:
        return "Not Started"
    return f"{round_half_up(rate * 100)}%"


def build_reminder_message(rows: List[Dict[str, Any]], supervisor: str) -> str:
    if not supervisor:
        return ""

    employees = [r for r in incomplete_rows(rows) if r.get(SUPERVISOR) == supervisor]

    lines = [
        f"Dear {supervisor},",
        "",
        "Please note that the following employees under your supervision have not completed their assigned training:",
        "",
    ]
    for emp in employees:
        rate = float(emp.get(COMPLETION_RATE, 0.0) or 0.0)
        lines.append(f"- {emp.get(DISPLAY_NAME, '')} ({emp.get(EMPLOYEE_ID, '')}) - Status: {_status_text(rate)}")

    lines += [
        "",
        "Please ensure they complete it by the deadline.",
        "",
        "Best Regards,",
        "LMS Admin",
    ]
    return "\n".join(lines)
