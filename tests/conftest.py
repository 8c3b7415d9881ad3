from io import BytesIO
import pandas as pd
import pytest


@pytest.fixture
def talent_rows():
    return [
        {
            "District": "Central",
            "City": "Riyadh",
            "Supervisor": "Khalid",
            "Date": "2024-03-01",
            "Pharmacy ID": "P-01",
            "Employee ID": 1001,
            "Email address": "Sara@Example.com ",
            "Pharmacist Name": "Sara Ali",
            "Mobile": "0500000001",
            "SCFHS": "S1",
            "Lesson 1": "Completed",
            "Module: Safety": "Not Completed",
        },
        {
            "District": "West",
            "City": "Jeddah",
            "Supervisor": "Huda",
            "Date": "2024-03-02",
            "Pharmacy ID": "P-02",
            "Employee ID": 1002,
            "Email address": "omar@example.com",
            "Pharmacist Name": "Omar Saleh",
            "Mobile": "0500000002",
            "SCFHS": "S2",
            "Lesson 1": "Completed (achieved pass grade)",
            "Module: Safety": "Completed",
        },
    ]


@pytest.fixture
def pharmacy_rows():
    return [
        {
            "District": "Central",
            "City": "Riyadh",
            "Supervisor Name": "Khalid",
            "Date": "2024-05-01",
            "Pharmacy No.": "P-01",
            "User ID": 1001,
            "Email": "sara@example.com",
            "Display Name": "Sara Ali",
            "Phone": "0500000001",
            "SCFHS": "S1",
            "Lesson 1": "Completed",
            "Module: Safety": "",
        },
        {
            "District": "East",
            "City": "Dammam",
            "Supervisor Name": "Huda",
            "Date": "",
            "Pharmacy No.": "P-03",
            "User ID": "",
            "Email": "",
            "Display Name": "",
            "Phone": "",
            "SCFHS": "",
            "Lesson 1": "Completed",
            "Module: Safety": "Completed",
        },
    ]


@pytest.fixture
def registry_rows():
    return [
        {
            "District": "Riyadh Region",
            "City": "",
            "Supervisor Name": "Khalid A.",
            "Pharmacy No.": "P-01",
            "User/Employee ID": 1001,
            "Username (Email)": "sara@example.com",
            "Display Name (Pharmacist name)": "Sara Ali Hassan",
            "Phone number (Whatsapp)": "",
            "SCFHS": "S1",
            "Completion Rate": 1,
        },
        {
            "District": "North",
            "City": "Hail",
            "Supervisor Name": "Fahad",
            "Pharmacy No.": "P-09",
            "User/Employee ID": 2001,
            "Username (Email)": "registry.only@example.com",
            "Display Name (Pharmacist name)": "Registry Only",
            "Phone number (Whatsapp)": "",
            "SCFHS": "",
        },
    ]


def xlsx_bytes(*sheets: pd.DataFrame) -> bytes:
    bio = BytesIO()
    with pd.ExcelWriter(bio, engine="openpyxl") as writer:
        for i, df in enumerate(sheets):
            df.to_excel(writer, index=False, sheet_name=f"Sheet{i + 1}")
    return bio.getvalue()
