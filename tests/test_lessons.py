import pytest

from lms_report.lessons import completion_rate, detect_lesson_columns


def test_detects_columns_by_value_not_name():
    rows = [
        {"Username (Email)": "a@x.com", "Lesson 1": "Completed", "Notes": "called twice"},
        {"Username (Email)": "b@x.com", "Module: Safety": "Not Completed", "Notes": ""},
        {"Username (Email)": "c@x.com", "Quiz": "COMPLETED (Achieved Pass Grade)"},
    ]
    assert detect_lesson_columns(rows) == {"Lesson 1", "Module: Safety", "Quiz"}


def test_detection_is_dataset_wide():
    rows = [
        {"Lesson 1": "", "Lesson 2": "Completed"},
        {"Lesson 1": "Not Completed", "Lesson 2": ""},
    ]
    cols = detect_lesson_columns(rows)
    assert cols == {"Lesson 1", "Lesson 2"}
    # пустая ячейка у конкретного человека = не завершено
    assert completion_rate(rows[0], cols) == 0.5
    assert completion_rate(rows[1], cols) == 0.0


def test_no_lesson_columns():
    rows = [{"Attendance Status": "Attended", "City": "Riyadh"}]
    cols = detect_lesson_columns(rows)
    assert cols == set()
    assert completion_rate(rows[0], cols) == 0.0


def test_partial_matches_are_not_status_values():
    rows = [{"Comment": "completed late", "Other": "in progress"}]
    assert detect_lesson_columns(rows) == set()


@pytest.mark.parametrize(
    "values,expected",
    [
        (["Completed", "Completed", "Completed", "Completed"], 1.0),
        (["Completed", "Not Completed", "", "In Progress"], 0.25),
        (["completed (achieved pass grade)", "Completed", "not completed", ""], 0.5),
        (["", "", "", ""], 0.0),
        ([" Completed\u00a0", "Completed\u200b", "x", "y"], 0.5),
    ],
)
def test_rate_is_completed_over_lesson_count(values, expected):
    cols = {"L1", "L2", "L3", "L4"}
    row = dict(zip(["L1", "L2", "L3", "L4"], values))
    rate = completion_rate(row, cols)
    assert rate == expected
    assert 0.0 <= rate <= 1.0


def test_missing_lesson_key_counts_as_not_completed():
    assert completion_rate({"L1": "Completed"}, {"L1", "L2", "L3"}) == pytest.approx(1 / 3)
