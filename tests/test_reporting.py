"""Tests for field and form issue reporting."""

from stepform.reporting import (
    FieldError,
    FormError,
    FormErrorCode,
    cross_field_error,
    field_issues,
    invalid_fields_error,
    missing_fields_error,
    submission_error,
)
from stepform.validation import ValidationResult

LABELS = {"fullName": "Full Name", "email": "Email", "phone": "Phone Number"}


def _describe(issue: FieldError | FormError) -> str:
    match issue:
        case FieldError(label=label):
            return f"field:{label}"
        case FormError(code=code):
            return f"form:{code}"
    return "unknown"


def test_field_issues_skip_valid_and_untouched() -> None:
    errors = {
        "fullName": ValidationResult.fail("Full Name is required"),
        "email": ValidationResult.ok(),
        "phone": ValidationResult.fail("Phone number is too short", "Please enter a valid phone number"),
    }
    issues = field_issues(errors, {"phone": True}, LABELS)
    assert issues == [
        FieldError(
            field="phone",
            label="Phone Number",
            messages=("Phone number is too short", "Please enter a valid phone number"),
        )
    ]
    assert issues[0].message == "Phone number is too short. Please enter a valid phone number"
    assert [issue.field for issue in field_issues(errors, {}, LABELS, only_touched=False)] == [
        "fullName",
        "phone",
    ]


def test_missing_fields_uses_labels() -> None:
    error = missing_fields_error(["fullName", "phone"], LABELS)
    assert error.code is FormErrorCode.MISSING_FIELDS
    assert error.message == "Please fill in the required fields: Full Name, Phone Number"
    assert error.fields == ("fullName", "phone")


def test_invalid_fields_joins_messages() -> None:
    error = invalid_fields_error({
        "fullName": ValidationResult.ok(),
        "email": ValidationResult.fail("Please enter a valid email address"),
        "phone": ValidationResult.fail("Phone number is too short"),
    })
    assert error.message == (
        "Please fix the following: Please enter a valid email address; Phone number is too short"
    )
    assert error.fields == ("email", "phone")


def test_cross_field_error() -> None:
    error = cross_field_error(ValidationResult.fail("Dates out of order"), ["a", "b"])
    assert error.code is FormErrorCode.CROSS_FIELD
    assert error.message == "Dates out of order"
    assert error.fields == ("a", "b")
    assert cross_field_error(ValidationResult(is_valid=False)).message


def test_submission_error() -> None:
    assert submission_error(RuntimeError("offline")).message == "offline"
    assert submission_error(RuntimeError()).message == "RuntimeError"


def test_issue_union_is_matchable() -> None:
    issues = [
        FieldError(field="email", label="Email", messages=("bad",)),
        missing_fields_error(["phone"], LABELS),
    ]
    assert [_describe(issue) for issue in issues] == ["field:Email", "form:missing_fields"]
