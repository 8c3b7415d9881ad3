from datetime import datetime

import pandas as pd
import pytest

from conftest import xlsx_bytes
from lms_report.ingest import IngestError, load_table_from_bytes, load_table_from_upload


class _Upload:
    def __init__(self, name, data):
        self.name = name
        self._data = data

    def getvalue(self):
        return self._data


def test_csv_comma():
    data = b"Email address,Lesson 1,City\na@x.com,Completed,\nb@x.com,,Riyadh\n"
    rows = load_table_from_bytes("talent.csv", data)
    assert rows == [
        {"Email address": "a@x.com", "Lesson 1": "Completed", "City": ""},
        {"Email address": "b@x.com", "Lesson 1": "", "City": "Riyadh"},
    ]


def test_csv_semicolon_with_bom():
    data = "\ufeffEmail;User ID\na@x.com;1001\n".encode("utf-8")
    rows = load_table_from_bytes("export.CSV", data)
    assert rows == [{"Email": "a@x.com", "User ID": "1001"}]


def test_xlsx_first_sheet_only():
    first = pd.DataFrame({
        "Email": ["a@x.com", "b@x.com"],
        "User ID": [1001, 1002],
        "District": ["Central", None],
        "Date": [datetime(2024, 1, 5), datetime(2024, 2, 5)],
    })
    second = pd.DataFrame({"Email": ["ignored@x.com"]})
    rows = load_table_from_bytes("talent.xlsx", xlsx_bytes(first, second))

    assert len(rows) == 2
    assert rows[0]["Email"] == "a@x.com"
    assert rows[0]["User ID"] == 1001
    assert rows[1]["District"] == ""
    assert pd.Timestamp(rows[0]["Date"]) == pd.Timestamp(2024, 1, 5)


def test_upload_wrapper():
    rows = load_table_from_upload(_Upload("a.csv", b"Email\na@x.com\n"))
    assert rows == [{"Email": "a@x.com"}]


@pytest.mark.parametrize(
    "name,data",
    [
        ("empty.csv", b""),
        ("empty.xlsx", b""),
        ("broken.xlsx", b"definitely not a workbook"),
    ],
)
def test_unreadable_files_raise_ingest_error(name, data):
    with pytest.raises(IngestError):
        load_table_from_bytes(name, data)


def test_sheet_without_header_row():
    with pytest.raises(IngestError):
        load_table_from_bytes("blank.xlsx", xlsx_bytes(pd.DataFrame()))
