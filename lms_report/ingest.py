from __future__ import annotations
import csv
import logging
from enum import Enum
from io import BytesIO
from typing import List, Dict, Any
import pandas as pd

log = logging.getLogger(__name__)


class FileType(str, Enum):
    TALENT = "Talent Platform Data"
    PHARMACY = "Pharmacy Platform Data"
    MASTER = "Master Saudi Data Sheet"


class IngestError(ValueError):
    """Файл не удалось прочитать; текст ошибки показывается пользователю как есть."""


EXCEL_EXTENSIONS = (".xlsx", ".xlsm", ".xls")
# =========================

# CSV: устойчивое чтение из bytes (выгрузки LMS)
# =========================
def _decode_sample(data: bytes, enc: str, limit: int = 65536) -> str:
    # Декодирует кусок текста для sniff delimiter
    try:
        return data[:limit].decode(enc, errors="replace")
    except LookupError:
        return data[:limit].decode("utf-8", errors="replace")


def _guess_delimiter(sample_text: str) -> str:
    # ',' (en-US) или ';' (локали с запятой в числах), иногда табы
    try:
        dialect = csv.Sniffer().sniff(sample_text, delimiters=";,\t|")
        if dialect.delimiter:
            return dialect.delimiter
    except csv.Error:
        pass

    # fallback по количеству в первых строках
    candidates = [";", ",", "\t", "|"]
    lines = [ln for ln in sample_text.splitlines() if ln.strip()][:20]
    if not lines:
        return ","

    scores = {}
    for d in candidates:
        cnts = [ln.count(d) for ln in lines]
        scores[d] = sum(cnts) / max(1, len(cnts))

    best = max(scores.items(), key=lambda x: x[1])[0]
    return best if scores.get(best, 0) > 0 else ","


def _read_csv_bytes(data: bytes) -> pd.DataFrame:
    # первая строка - заголовки; все значения строками, пустые ячейки -> ""
    encodings = ["utf-8-sig", "utf-8", "cp1251"]
    last_err: Exception | None = None

    for enc in encodings:
        try:
            sample = _decode_sample(data, enc)
            delim = _guess_delimiter(sample)
            return pd.read_csv(
                BytesIO(data),
                header=0,
                sep=delim,
                engine="python",
                encoding=enc,
                dtype=str,
                keep_default_na=False,
                skip_blank_lines=True,
            )
        except (UnicodeDecodeError, pd.errors.ParserError) as e:
            last_err = e
            continue
        except pd.errors.EmptyDataError as e:
            raise IngestError("The uploaded file appears to be empty or invalid.") from e

    raise IngestError("The uploaded file could not be read as CSV.") from last_err


def _read_excel_bytes(data: bytes) -> pd.DataFrame:
    try:
        xls = pd.ExcelFile(BytesIO(data))
    except Exception as e:  # openpyxl/xlrd бросают разные типы на битых файлах
        raise IngestError("The uploaded file appears to be empty or invalid.") from e

    if not xls.sheet_names:
        raise IngestError("The uploaded file appears to be empty or invalid.")

    # как в исходной выгрузке: только первый лист
    first = xls.sheet_names[0]
    try:
        df = pd.read_excel(xls, sheet_name=first, header=0, dtype=object)
    except ValueError as e:
        raise IngestError(
            "Sheet could not be loaded. Please confirm the file is not empty and the header row exists."
        ) from e
    return df


def _frame_to_rows(df: pd.DataFrame) -> List[Dict[str, Any]]:
    # пустые ячейки -> "" (ключ остаётся в строке), заголовки - строками
    if df.columns.empty:
        raise IngestError(
            "Sheet could not be loaded. Please confirm the file is not empty and the header row exists."
        )
    df = df.astype(object).where(pd.notna(df), "")
    df.columns = [str(c) for c in df.columns]
    return df.to_dict(orient="records")


# =========================

# Main: upload -> rows
# =========================
def load_table_from_bytes(name: str, data: bytes) -> List[Dict[str, Any]]:
    """
    Читает одну загруженную таблицу в список строк {заголовок: значение}:
      - CSV: разделитель определяется автоматически
      - Excel: только первый лист
      - первая строка = заголовки, пустые ячейки = ""
    Ошибки чтения -> IngestError с сообщением для пользователя.
    """
    if not data:
        raise IngestError("The uploaded file appears to be empty or invalid.")

    if name.lower().endswith(".csv"):
        df = _read_csv_bytes(data)
    else:
        df = _read_excel_bytes(data)

    rows = _frame_to_rows(df)
    log.info("loaded %s: %d rows, %d columns", name, len(rows), len(df.columns))
    return rows


def load_table_from_upload(upload) -> List[Dict[str, Any]]:
    # streamlit UploadedFile: .name / .getvalue()
    return load_table_from_bytes(upload.name, upload.getvalue())
