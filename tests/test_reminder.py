from lms_report.reminder import build_reminder_message, incomplete_rows, supervisors_with_pending

ROWS = [
    {"Supervisor Name": "Khalid", "Display Name (Pharmacist name)": "Sara Ali", "User/Employee ID": "1001", "Completion Rate": 0.0},
    {"Supervisor Name": "Khalid", "Display Name (Pharmacist name)": "Omar Saleh", "User/Employee ID": "1002", "Completion Rate": 0.125},
    {"Supervisor Name": "Khalid", "Display Name (Pharmacist name)": "Done Person", "User/Employee ID": "1003", "Completion Rate": 1.0},
    {"Supervisor Name": "Huda", "Display Name (Pharmacist name)": "Lina", "User/Employee ID": "2001", "Completion Rate": 0.5},
]


def test_incomplete_rows():
    assert [r["User/Employee ID"] for r in incomplete_rows(ROWS)] == ["1001", "1002", "2001"]


def test_supervisors_with_pending():
    assert supervisors_with_pending(ROWS) == [("Huda", 1), ("Khalid", 2)]


def test_build_reminder_message():
    msg = build_reminder_message(ROWS, "Khalid")
    assert msg == (
        "Dear Khalid,\n"
        "\n"
        "Please note that the following employees under your supervision have not completed their assigned training:\n"
        "\n"
        "- Sara Ali (1001) - Status: Not Started\n"
        "- Omar Saleh (1002) - Status: 13%\n"
        "\n"
        "Please ensure they complete it by the deadline.\n"
        "\n"
        "Best Regards,\n"
        "LMS Admin"
    )


def test_no_supervisor_selected():
    assert build_reminder_message(ROWS, "") == ""
