from __future__ import annotations
import logging
from typing import Any, Dict, List, Optional
from .dedupe import ResolvedIdentity, identity_key
from .schema import (
    DISTRICT, CITY, SUPERVISOR, PHARMACY_NO, EMPLOYEE_ID, EMAIL, DISPLAY_NAME, PHONE, SCFHS,
)
from .utils import is_blank, to_display_str

log = logging.getLogger(__name__)

COMPLETION_RATE = "Completion Rate"

# поля, которые берутся из мастер-таблицы (если там непусто), иначе из LMS
OVERRIDE_FIELDS = [
    DISTRICT, CITY, SUPERVISOR, PHARMACY_NO, EMPLOYEE_ID, EMAIL, DISPLAY_NAME, PHONE, SCFHS,
]

FINAL_COLUMNS = OVERRIDE_FIELDS + [COMPLETION_RATE]

# хотя бы одно из них должно быть непустым, иначе строку не выводим
IDENTIFYING_FIELDS = [EMPLOYEE_ID, EMAIL, DISPLAY_NAME]


def build_registry_index(registry: List[Dict[str, Any]]) -> Dict[str, Dict[str, Any]]:
    # email_key -> строка мастер-таблицы; при дублях побеждает последняя
    index: Dict[str, Dict[str, Any]] = {}
    for r in registry:
        key = identity_key(r)
        if key:
            index[key] = r
    return index


def _pick(master: Optional[Dict[str, Any]], lms: Dict[str, Any], field: str) -> str:
    if master is not None:
        v = master.get(field)
        if not is_blank(v):
            return to_display_str(v)
    v = lms.get(field)
    if not is_blank(v):
        return to_display_str(v)
    return ""


def merge_with_registry(
    resolved: Dict[str, ResolvedIdentity],
    registry: List[Dict[str, Any]],
) -> List[Dict[str, Any]]:
    """
    Итоговые строки отчёта: одна на идентичность из LMS-выгрузок.
      - демография: мастер (если непусто) -> LMS -> ""
      - Completion Rate: только рассчитанный по LMS (rate из мастер-таблицы игнорируется)
      - люди только из мастер-таблицы в отчёт не попадают
      - строки без ID/email/имени отбрасываются
    """
    index = build_registry_index(registry)

    final_rows: List[Dict[str, Any]] = []
    matched = 0
    unidentified = 0

    for key, ident in resolved.items():
        master = index.get(key)
        if master is not None:
            matched += 1

        out: Dict[str, Any] = {f: _pick(master, ident.row, f) for f in OVERRIDE_FIELDS}
        out[COMPLETION_RATE] = float(ident.rate)

        if not any(out[f] for f in IDENTIFYING_FIELDS):
            unidentified += 1
            log.debug("dropping %s: no identifying fields", key)
            continue

        final_rows.append(out)

    log.info(
        "merged %d identities with registry (%d matched, %d registry rows, %d unidentified dropped)",
        len(resolved), matched, len(index), unidentified,
    )
    return final_rows
