from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, Set
from .utils import clean_text

log = logging.getLogger(__name__)

STATUS_COMPLETED_PASS = "completed (achieved pass grade)"
STATUS_COMPLETED = "completed"
STATUS_NOT_COMPLETED = "not completed"

LESSON_STATUS_VALUES = frozenset({STATUS_COMPLETED_PASS, STATUS_COMPLETED, STATUS_NOT_COMPLETED})
COMPLETED_VALUES = frozenset({STATUS_COMPLETED_PASS, STATUS_COMPLETED})


def detect_lesson_columns(rows: Iterable[Dict[str, Any]]) -> Set[str]:
    """
    Проход 1 (глобальный): колонка считается колонкой урока, если ХОТЯ БЫ в одной
    строке всего набора в ней стоит статус из словаря
    ("completed (achieved pass grade)" / "completed" / "not completed").
    Имена колонок не важны - у разных выгрузок они разные.
    Пустое множество = данных по урокам нет.
    """
    lesson_cols: Set[str] = set()
    for r in rows:
        for key, val in r.items():
            if key in lesson_cols:
                continue
            if clean_text(val) in LESSON_STATUS_VALUES:
                lesson_cols.add(key)

    log.debug("lesson columns detected: %s", sorted(lesson_cols))
    return lesson_cols


def completion_rate(row: Dict[str, Any], lesson_columns: Set[str]) -> float:
    """
    Проход 2 (построчный): доля колонок уроков со статусом "completed"/"completed (achieved pass grade)".
    Пустая ячейка и "not completed" = 0. Без колонок уроков rate = 0.
    """
    if not lesson_columns:
        return 0.0

    done = 0
    for col in lesson_columns:
        if clean_text(row.get(col)) in COMPLETED_VALUES:
            done += 1
    return done / len(lesson_columns)
