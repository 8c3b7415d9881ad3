"""
Этот пакет содержит:
- загрузку таблиц (CSV/XLSX) из трёх источников
- нормализацию заголовков по таблице алиасов
- поиск колонок уроков по значениям
- дедупликацию сотрудников по email
- обогащение из мастер-таблицы
- статистику, экспорт отчётов и тексты напоминаний
"""
from .ingest import load_table_from_bytes, load_table_from_upload, FileType, IngestError
from .schema import COLUMN_ALIASES, normalize_keys, normalize_rows
from .lessons import detect_lesson_columns, completion_rate
from .dedupe import resolve_identities, ResolvedIdentity
from .enrich import merge_with_registry, FINAL_COLUMNS
from .pipeline import process_data, ProcessResult
from .stats import compute_stats, filter_rows, pivot_table
from .export import export_to_excel_bytes, export_summary_pdf_bytes
from .reminder import build_reminder_message
from .utils import clean_text

__all__ = [
    "load_table_from_bytes",
    "load_table_from_upload",
    "FileType",
    "IngestError",
    "COLUMN_ALIASES",
    "normalize_keys",
    "normalize_rows",
    "detect_lesson_columns",
    "completion_rate",
    "resolve_identities",
    "ResolvedIdentity",
    "merge_with_registry",
    "FINAL_COLUMNS",
    "process_data",
    "ProcessResult",
    "compute_stats",
    "filter_rows",
    "pivot_table",
    "export_to_excel_bytes",
    "export_summary_pdf_bytes",
    "build_reminder_message",
    "clean_text",
]
