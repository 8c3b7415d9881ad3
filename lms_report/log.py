from __future__ import annotations
import logging
import os
import sys

LOG_LEVEL_ENV = "LMS_REPORT_LOG_LEVEL"
PACKAGE_LOGGER = "lms_report"
LOG_FORMAT = "%(asctime)s [lms-report] %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def setup_logging(level: str | None = None) -> logging.Logger:
    """
    Логи пакета lms_report в stdout. Корневой логгер не трогаем:
    у streamlit свои handlers.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    level = level or os.environ.get(LOG_LEVEL_ENV, "INFO")
    logger.setLevel(getattr(logging, str(level).upper(), logging.INFO))

    # скрипт перезапускается на каждое действие в UI - handler ставим один раз
    if not any(getattr(h, "_lms_report", False) for h in logger.handlers):
        h = logging.StreamHandler(sys.stdout)
        h.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT))
        h._lms_report = True
        logger.addHandler(h)
        logger.propagate = False
    return logger
