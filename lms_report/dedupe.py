from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Set, Tuple
from .lessons import completion_rate
from .schema import EMAIL, DATE
from .utils import clean_text, parse_date_value

log = logging.getLogger(__name__)

SOURCE_TALENT = "talent"
SOURCE_PHARMACY = "pharmacy"


@dataclass
class ResolvedIdentity:
    row: Dict[str, Any]
    rate: float
    source: str = ""


def identity_key(row: Dict[str, Any]) -> str:
    # нормализованный email; "" если идентифицировать нельзя
    key = clean_text(row.get(EMAIL))
    if not key or key == "undefined":
        return ""
    return key


def _prefer(new: ResolvedIdentity, old: ResolvedIdentity) -> Tuple[bool, str]:
    """
    Решает, заменить ли уже сохранённую запись новой.
    Приоритеты:
      1) rate строго больше
      2) при равном rate - более поздняя Date (нераспознанная дата = 0)
      3) иначе остаётся первая увиденная
    Rate всегда важнее даты, даже если запись с большим rate сильно старше.
    """
    if new.rate > old.rate:
        return True, "higher_rate"
    if new.rate == old.rate:
        if parse_date_value(new.row.get(DATE)) > parse_date_value(old.row.get(DATE)):
            return True, "later_date"
    return False, "not_better"


def _duplicate_entry(key: str, kept: ResolvedIdentity, dropped: ResolvedIdentity, reason: str) -> Dict[str, Any]:
    return {
        "reason": reason,
        "email_key": key,

        "kept_source": kept.source,
        "kept_rate": kept.rate,
        "kept_date": kept.row.get(DATE, ""),

        "dropped_source": dropped.source,
        "dropped_rate": dropped.rate,
        "dropped_date": dropped.row.get(DATE, ""),
    }


def resolve_identities(
    talent: List[Dict[str, Any]],
    pharmacy: List[Dict[str, Any]],
    lesson_columns: Set[str],
) -> Tuple[Dict[str, ResolvedIdentity], List[Dict[str, Any]]]:
    """
    Сводит строки двух LMS-выгрузок в одну запись на email.
    Возвращает:
      - resolved: email_key -> ResolvedIdentity (порядок = первое появление ключа)
      - duplicates: лог проигравших строк (что оставили, что выкинули и почему)
    Строки без email отбрасываются.
    """
    combined = [(SOURCE_TALENT, r) for r in talent] + [(SOURCE_PHARMACY, r) for r in pharmacy]

    resolved: Dict[str, ResolvedIdentity] = {}
    duplicates: List[Dict[str, Any]] = []
    no_email = 0

    for source, row in combined:
        key = identity_key(row)
        if not key:
            no_email += 1
            continue

        cand = ResolvedIdentity(row=row, rate=completion_rate(row, lesson_columns), source=source)
        existing = resolved.get(key)
        if existing is None:
            resolved[key] = cand
            continue

        replace, reason = _prefer(cand, existing)
        if replace:
            resolved[key] = cand
            duplicates.append(_duplicate_entry(key, cand, existing, reason))
        else:
            duplicates.append(_duplicate_entry(key, existing, cand, reason))
        log.debug("duplicate %s: %s (%s)", key, "replaced" if replace else "kept first", reason)

    log.info(
        "resolved %d identities from %d rows (%d duplicates, %d without email)",
        len(resolved), len(combined), len(duplicates), no_email,
    )
    return resolved, duplicates
