from lms_report.dedupe import ResolvedIdentity
from lms_report.enrich import FINAL_COLUMNS, build_registry_index, merge_with_registry


def test_registry_value_overrides_blank_raw_value():
    ident = ResolvedIdentity(row={"Username (Email)": "a@x.com", "District": ""}, rate=0.5)
    registry = [{"Username (Email)": "A@x.com", "District": "Riyadh"}]
    out = merge_with_registry({"a@x.com": ident}, registry)
    assert out[0]["District"] == "Riyadh"


def test_raw_value_used_when_registry_blank():
    ident = ResolvedIdentity(row={"Username (Email)": "a@x.com", "District": "Jeddah"}, rate=0.5)
    registry = [{"Username (Email)": "a@x.com", "District": ""}]
    out = merge_with_registry({"a@x.com": ident}, registry)
    assert out[0]["District"] == "Jeddah"


def test_registry_wins_when_both_present():
    ident = ResolvedIdentity(row={"Username (Email)": "a@x.com", "City": "Jeddah"}, rate=0.0)
    registry = [{"Username (Email)": "a@x.com", "City": "Makkah"}]
    out = merge_with_registry({"a@x.com": ident}, registry)
    assert out[0]["City"] == "Makkah"


def test_missing_everywhere_is_empty_string():
    ident = ResolvedIdentity(row={"Username (Email)": "a@x.com"}, rate=0.0)
    out = merge_with_registry({"a@x.com": ident}, [])
    assert out[0]["SCFHS"] == ""
    assert out[0]["Supervisor Name"] == ""


def test_output_shape_and_types():
    ident = ResolvedIdentity(
        row={"Username (Email)": "a@x.com", "User/Employee ID": 1001.0, "Pharmacy No.": 7, "Lesson 1": "Completed"},
        rate=1.0,
    )
    out = merge_with_registry({"a@x.com": ident}, [])
    assert list(out[0]) == FINAL_COLUMNS
    assert out[0]["User/Employee ID"] == "1001"
    assert out[0]["Pharmacy No."] == "7"
    assert out[0]["Completion Rate"] == 1.0
    assert "Lesson 1" not in out[0]
    for col in FINAL_COLUMNS[:-1]:
        assert isinstance(out[0][col], str)


def test_registry_completion_rate_is_ignored():
    ident = ResolvedIdentity(row={"Username (Email)": "a@x.com"}, rate=0.25)
    registry = [{"Username (Email)": "a@x.com", "Completion Rate": 1}]
    out = merge_with_registry({"a@x.com": ident}, registry)
    assert out[0]["Completion Rate"] == 0.25


def test_registry_only_identities_are_excluded():
    ident = ResolvedIdentity(row={"Username (Email)": "a@x.com"}, rate=0.0)
    registry = [
        {"Username (Email)": "a@x.com", "District": "Riyadh"},
        {"Username (Email)": "only@x.com", "District": "Hail", "Display Name (Pharmacist name)": "Only"},
    ]
    out = merge_with_registry({"a@x.com": ident}, registry)
    assert [r["Username (Email)"] for r in out] == ["a@x.com"]


def test_registry_duplicates_last_write_wins():
    registry = [
        {"Username (Email)": "a@x.com", "District": "First"},
        {"Username (Email)": "A@X.COM", "District": "Second"},
        {"Username (Email)": "", "District": "No key"},
    ]
    index = build_registry_index(registry)
    assert list(index) == ["a@x.com"]
    assert index["a@x.com"]["District"] == "Second"


def test_registry_email_display_value_preferred():
    ident = ResolvedIdentity(row={"Username (Email)": " SARA@example.com"}, rate=0.0)
    registry = [{"Username (Email)": "sara@example.com"}]
    out = merge_with_registry({"sara@example.com": ident}, registry)
    assert out[0]["Username (Email)"] == "sara@example.com"


def test_rows_without_any_identifier_are_dropped():
    ident = ResolvedIdentity(row={"Username (Email)": "", "District": "Riyadh", "L1": "Completed"}, rate=1.0)
    assert merge_with_registry({"ghost": ident}, []) == []
