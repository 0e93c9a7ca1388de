import pytest

from smsrelay.core.exceptions import ValidationError
from smsrelay.services.sms.recipients import (
    Recipient,
    apply_template,
    build_batches,
    group_by_message,
    resolve_message,
    split_into_batches,
    validate_submission,
)


def test_apply_template_fills_placeholders_in_order():
    assert apply_template("Hi {#var#}, code {#var#}", ["Sam", "123"]) == "Hi Sam, code 123"


def test_apply_template_missing_values_become_empty():
    assert apply_template("Hi {#var#}", []) == "Hi "
    assert apply_template("{#var#}-{#var#}-{#var#}", ["a"]) == "a--"


def test_apply_template_ignores_extra_values_and_stringifies():
    assert apply_template("Total {#var#}", [42, "unused"]) == "Total 42"


def test_resolve_message_prefers_literal_message():
    recipient = Recipient(phone="9876543210", message="Literal", template_vars=["x"])
    assert resolve_message(recipient, "Hi {#var#}") == "Literal"

    templated = Recipient(phone="9876543210", template_vars=["Asha"])
    assert resolve_message(templated, "Hi {#var#}") == "Hi Asha"


def test_validate_submission_rejects_empty_list():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission([], "Hi", max_recipients=1000)
    assert "non-empty" in exc_info.value.message


def test_validate_submission_rejects_oversized_list():
    recipients = [Recipient(phone="9876543210", message="x")] * 1001
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(recipients, None, max_recipients=1000)
    assert exc_info.value.details == {"count": 1001, "limit": 1000}


def test_validate_submission_rejects_invalid_phone_anywhere_in_list():
    recipients = [
        Recipient(phone="9876543210", message="ok"),
        Recipient(phone="5876543210", message="bad"),
    ]
    with pytest.raises(ValidationError) as exc_info:
        validate_submission(recipients, None, max_recipients=1000)
    assert exc_info.value.message == "Invalid phone number: 5876543210"
    assert exc_info.value.details["index"] == 1


def test_validate_submission_reports_missing_phone():
    with pytest.raises(ValidationError) as exc_info:
        validate_submission([Recipient(phone="", message="x")], None, max_recipients=1000)
    assert exc_info.value.message == "Invalid phone number: missing"


def test_validate_submission_requires_message_or_template():
    with pytest.raises(ValidationError):
        validate_submission([Recipient(phone="9876543210")], None, max_recipients=1000)

    # A template makes the same recipient acceptable
    validate_submission([Recipient(phone="9876543210")], "Hi {#var#}", max_recipients=1000)


def test_group_by_message_keeps_first_occurrence_order():
    recipients = [
        Recipient(phone="9000000001", template_vars=["A"]),
        Recipient(phone="9000000002", message="Custom"),
        Recipient(phone="9000000003", template_vars=["A"]),
        Recipient(phone="9000000004", template_vars=["B"]),
    ]
    groups = group_by_message(recipients, "Hello {#var#}")

    assert list(groups) == ["Hello A", "Custom", "Hello B"]
    assert [r.phone for r in groups["Hello A"]] == ["9000000001", "9000000003"]


def test_identical_text_splits_into_capped_batches_in_order():
    recipients = [Recipient(phone=f"9{i:09d}", message="Same text") for i in range(250)]

    batches = build_batches(recipients, None, cap=100)

    assert [len(b.recipients) for b in batches] == [100, 100, 50]
    flattened = [r.phone for b in batches for r in b.recipients]
    assert flattened == [r.phone for r in recipients]
    assert all(b.message_text == "Same text" for b in batches)


def test_split_into_batches_keeps_small_groups_whole():
    groups = {
        "one": [Recipient(phone="9000000001", message="one")],
        "two": [Recipient(phone="9000000002", message="two")] * 3,
    }
    batches = split_into_batches(groups, cap=100)
    assert [(b.message_text, len(b.recipients)) for b in batches] == [("one", 1), ("two", 3)]


def test_split_into_batches_rejects_non_positive_cap():
    with pytest.raises(ValueError):
        split_into_batches({"x": []}, cap=0)
