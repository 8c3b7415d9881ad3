import os
import re
import json
import math
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Any, Optional
from dateutil import parser as dtparser

BASE_DIR = Path(__file__).resolve().parent.parent
DEFAULT_DATA_DIR = BASE_DIR / "data"

APPDATA = os.environ.get("APPDATA")
if APPDATA:
    USER_DATA_DIR = Path(APPDATA) / "LMSReport" / "data"
else:
    USER_DATA_DIR = DEFAULT_DATA_DIR  # fallback

def load_json(path: Path, default: Any):
    try:
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)
    except (OSError, ValueError):
        return default

def settings_path() -> Path:
    p = USER_DATA_DIR / "settings.json"
    if p.exists():
        return p
    return DEFAULT_DATA_DIR / "settings.json"

def load_settings() -> dict:
    obj = load_json(settings_path(), {})
    return obj if isinstance(obj, dict) else {}

# неразрывные, нулевой ширины, идеографический пробелы и BOM
_INVISIBLE_SPACE_RE = re.compile(r"[\u00A0\u1680\u180E\u2000-\u200B\u202F\u205F\u3000\uFEFF]")
_WS_RE = re.compile(r"\s+")


def is_nan(v: Any) -> bool:
    return isinstance(v, float) and math.isnan(v)


def to_display_str(v: Any) -> str:
    """
    Строковое представление значения ячейки так, как его показывает таблица:
    - None / NaN -> ""
    - 12345.0 -> "12345" (Excel отдаёт целые ID как float)
    - остальное через str()
    """
    if v is None or is_nan(v):
        return ""
    if isinstance(v, bool):
        return str(v).lower()
    if isinstance(v, float) and v.is_integer():
        return str(int(v))
    return str(v)


def clean_text(v: Any) -> str:
    """
    Форма значения для сравнения (ключи, статусы уроков):
    - невидимые/расширенные пробелы -> ' '
    - схлопывание пробелов
    - strip + lower
    Идемпотентна: clean_text(clean_text(x)) == clean_text(x)
    """
    s = to_display_str(v)
    if not s:
        return ""
    s = _INVISIBLE_SPACE_RE.sub(" ", s)
    s = _WS_RE.sub(" ", s)
    return s.strip().lower()


def is_blank(v: Any) -> bool:
    # пусто в смысле "нет значения": None, NaN, ""
    return v is None or is_nan(v) or (isinstance(v, str) and v == "")


_NUMERIC_RE = re.compile(r"^[-+]?\d+(\.\d+)?$")


def _epoch_ms(dt: datetime) -> float:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.timestamp() * 1000.0


def _as_number(v: Any) -> float:
    try:
        x = float(v)
    except (TypeError, ValueError):
        return 0.0
    return 0.0 if math.isnan(x) else x


# недостающие части даты: январь, 1-е число, полночь (не сегодняшний день)
_DATE_DEFAULT = datetime(1970, 1, 1)
_ALT_DEFAULT = datetime(1971, 2, 2)


def _parse_calendar_ms(txt: str) -> Optional[float]:
    """
    Строка -> epoch ms. Без года ("12:30", "Monday", "15/06") -> None:
    такой результат зависел бы от подставленного значения.
    """
    dt = dtparser.parse(txt, default=_DATE_DEFAULT)
    alt = dtparser.parse(txt, default=_ALT_DEFAULT)
    if dt.year != alt.year:
        return None
    return _epoch_ms(dt)


def parse_date_value(v: Any) -> float:
    """
    Сравнимое значение поля Date для тай-брейка:
      1) календарная дата -> миллисекунды epoch (naive считаем UTC)
      2) иначе число как есть (серийный номер Excel)
      3) иначе 0 (раньше любой распознанной даты)
    """
    if v is None or is_nan(v) or isinstance(v, bool):
        return 0.0

    # pandas.Timestamp тоже datetime
    if isinstance(v, datetime):
        try:
            ts = _epoch_ms(v)
        except (OverflowError, OSError, ValueError):
            ts = 0.0
        return ts
    if isinstance(v, date):
        return _epoch_ms(datetime(v.year, v.month, v.day))

    if isinstance(v, (int, float)):
        return _as_number(v)

    txt = clean_text(v)
    if not txt:
        return 0.0
    if _NUMERIC_RE.match(txt):
        return _as_number(txt)

    ts: Optional[float] = None
    try:
        ts = _parse_calendar_ms(txt)
    except (ValueError, OverflowError, OSError):
        ts = None
    if ts:
        return ts
    return _as_number(txt)


def round_half_up(x: float) -> int:
    # 12.5 -> 13 (встроенный round() округляет к чётному)
    return int(math.floor(x + 0.5))
