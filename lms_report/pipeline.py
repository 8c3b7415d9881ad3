from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional
import pandas as pd
from .dedupe import resolve_identities, identity_key
from .enrich import merge_with_registry, FINAL_COLUMNS
from .lessons import detect_lesson_columns
from .schema import load_aliases, normalize_rows

log = logging.getLogger(__name__)


@dataclass
class ProcessResult:
    rows: List[Dict[str, Any]]
    lesson_columns: List[str] = field(default_factory=list)
    duplicates: List[Dict[str, Any]] = field(default_factory=list)

    talent_rows: int = 0
    pharmacy_rows: int = 0
    registry_rows: int = 0
    dropped_without_email: int = 0
    dropped_unidentified: int = 0

    def to_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.rows, columns=FINAL_COLUMNS)

    def duplicates_dataframe(self) -> pd.DataFrame:
        return pd.DataFrame(self.duplicates)


def process_data(
    talent: List[Dict[str, Any]],
    pharmacy: List[Dict[str, Any]],
    registry: List[Dict[str, Any]],
    aliases: Optional[Dict[str, str]] = None,
) -> ProcessResult:
    """
    talent + pharmacy (LMS) + registry (мастер-таблица) -> итоговый отчёт
      1) нормализация заголовков (алиасы)
      2) поиск колонок уроков по значениям (по обеим LMS-выгрузкам сразу)
      3) одна запись на email, конфликт решается по rate, затем по Date
      4) обогащение из мастер-таблицы
    Чистая функция: без I/O и состояния между запусками.
    """
    if aliases is None:
        aliases = load_aliases()

    talent_n = normalize_rows(talent, aliases)
    pharmacy_n = normalize_rows(pharmacy, aliases)
    registry_n = normalize_rows(registry, aliases)

    lesson_cols = detect_lesson_columns(talent_n + pharmacy_n)
    log.info("found %d lesson columns in %d LMS rows", len(lesson_cols), len(talent_n) + len(pharmacy_n))
    if not lesson_cols:
        log.warning("no lesson status columns detected, every completion rate will be 0")

    resolved, duplicates = resolve_identities(talent_n, pharmacy_n, lesson_cols)
    rows = merge_with_registry(resolved, registry_n)

    no_email = sum(1 for r in talent_n + pharmacy_n if not identity_key(r))

    return ProcessResult(
        rows=rows,
        lesson_columns=sorted(lesson_cols),
        duplicates=duplicates,
        talent_rows=len(talent_n),
        pharmacy_rows=len(pharmacy_n),
        registry_rows=len(registry_n),
        dropped_without_email=no_email,
        dropped_unidentified=len(resolved) - len(rows),
    )
