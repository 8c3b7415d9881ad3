from __future__ import annotations
import logging
from typing import Any, Dict, Iterable, List, Optional
from .utils import is_blank, load_settings

log = logging.getLogger(__name__)

EMAIL = "Username (Email)"
EMPLOYEE_ID = "User/Employee ID"
DISPLAY_NAME = "Display Name (Pharmacist name)"
PHONE = "Phone number (Whatsapp)"
PHARMACY_NO = "Pharmacy No."
SUPERVISOR = "Supervisor Name"
DISTRICT = "District"
CITY = "City"
DATE = "Date"
SCFHS = "SCFHS"

CANONICAL_FIELDS = [
    DISTRICT, CITY, SUPERVISOR, DATE, PHARMACY_NO, EMPLOYEE_ID, EMAIL, DISPLAY_NAME, PHONE, SCFHS,
]

# вариант заголовка -> каноническое имя (many-to-one)
COLUMN_ALIASES: Dict[str, str] = {
    # "Email address" (LMS) -> "Username (Email)" (Master)
    "Email address": EMAIL,
    "Username": EMAIL,
    "Email": EMAIL,
    "User Email": EMAIL,
    "E-mail": EMAIL,

    "User ID": EMPLOYEE_ID,
    "Employee ID": EMPLOYEE_ID,
    "EmployeeID": EMPLOYEE_ID,
    "UserID": EMPLOYEE_ID,
    "User/EmployeeID": EMPLOYEE_ID,
    "ID": EMPLOYEE_ID,
    "Emp ID": EMPLOYEE_ID,

    "Display Name": DISPLAY_NAME,
    "Pharmacist Name": DISPLAY_NAME,
    "Pharmacist": DISPLAY_NAME,
    "Full Name": DISPLAY_NAME,
    "Name": DISPLAY_NAME,

    "Phone": PHONE,
    "Mobile": PHONE,
    "Phone Number": PHONE,
    "Whatsapp": PHONE,
    "Contact No": PHONE,

    "Pharmacy ID": PHARMACY_NO,
    "Pharmacy #": PHARMACY_NO,
    "Pharmacy Code": PHARMACY_NO,

    "Supervisor": SUPERVISOR,
    "Manager": SUPERVISOR,
}


def load_aliases(settings: Optional[dict] = None) -> Dict[str, str]:
    """
    Встроенная таблица + дополнительные варианты из settings.json ("column_aliases").
    Пользовательские записи только добавляют варианты, встроенные не переопределяются;
    цель должна быть одним из CANONICAL_FIELDS.
    """
    if settings is None:
        settings = load_settings()
    aliases = dict(COLUMN_ALIASES)
    extra = settings.get("column_aliases", {})
    if isinstance(extra, dict):
        for k, v in extra.items():
            k = str(k).strip()
            v = str(v).strip()
            if not k or not v or k in aliases:
                continue
            if v not in CANONICAL_FIELDS:
                log.warning("alias %r -> %r ignored: unknown target field", k, v)
                continue
            aliases[k] = v
    return aliases


def resolve_column_name(name: Any, aliases: Optional[Dict[str, str]] = None) -> str:
    # trim -> точное совпадение -> без учёта регистра -> как есть (колонки уроков)
    if aliases is None:
        aliases = COLUMN_ALIASES
    key = str(name).strip()
    if key in aliases:
        return aliases[key]

    lower = key.lower()
    for alias, canon in aliases.items():
        if alias.lower() == lower:
            return canon
    return key


def normalize_keys(row: Dict[str, Any], aliases: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
    """
    Переименовывает поля строки в канонические имена.
    Значения не меняются (исходный регистр нужен для отображения).
    Если несколько исходных колонок дают одно имя - остаётся первое непустое значение.
    """
    out: Dict[str, Any] = {}
    for raw_key, val in row.items():
        key = resolve_column_name(raw_key, aliases)
        if not key:
            continue
        if key not in out or (is_blank(out[key]) and not is_blank(val)):
            out[key] = val
    return out


def normalize_rows(rows: Iterable[Dict[str, Any]], aliases: Optional[Dict[str, str]] = None) -> List[Dict[str, Any]]:
    if aliases is None:
        aliases = load_aliases()
    return [normalize_keys(r, aliases) for r in rows]
