"""Uniform issue reporting for the presentation layer.

Every problem a form can surface is one of two shapes:

- ``FieldError``: attached to a single field, rendered inline.
- ``FormError``: step- or form-level (missing fields, cross-field rule,
  submission failure), rendered as one aggregated notice.

``type Issue = FieldError | FormError`` lets a renderer consume both
through a single ``match`` statement.
"""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum

from stepform.validation.result import ValidationResult


class FormErrorCode(StrEnum):
    MISSING_FIELDS = "missing_fields"
    INVALID_FIELDS = "invalid_fields"
    CROSS_FIELD = "cross_field"
    SUBMISSION = "submission"


@dataclass(frozen=True, slots=True)
class FieldError:
    """Validation errors for one field."""

    field: str
    label: str
    messages: tuple[str, ...]

    @property
    def message(self) -> str:
        return ". ".join(self.messages)


@dataclass(frozen=True, slots=True)
class FormError:
    """A single blocking notice not owned by any one field."""

    code: FormErrorCode
    message: str
    fields: tuple[str, ...] = ()


type Issue = FieldError | FormError


def field_issues(
    errors: Mapping[str, ValidationResult],
    touched: Mapping[str, bool],
    labels: Mapping[str, str],
    *,
    only_touched: bool = True,
) -> list[FieldError]:
    """Project invalid results into ``FieldError``s, in errors-map order.

    Untouched fields are skipped unless *only_touched* is False, matching
    when inline errors become eligible for display.
    """
    issues: list[FieldError] = []
    for field, result in errors.items():
        if result.is_valid:
            continue
        if only_touched and not touched.get(field, False):
            continue
        issues.append(FieldError(field=field, label=labels.get(field, field), messages=result.errors))
    return issues


def missing_fields_error(fields: Sequence[str], labels: Mapping[str, str]) -> FormError:
    names = ", ".join(labels.get(field, field) for field in fields)
    return FormError(
        code=FormErrorCode.MISSING_FIELDS,
        message=f"Please fill in the required fields: {names}",
        fields=tuple(fields),
    )


def invalid_fields_error(results: Mapping[str, ValidationResult]) -> FormError:
    invalid = [field for field, result in results.items() if not result.is_valid]
    messages = [message for field in invalid for message in results[field].errors]
    return FormError(
        code=FormErrorCode.INVALID_FIELDS,
        message="Please fix the following: " + "; ".join(messages),
        fields=tuple(invalid),
    )


def cross_field_error(result: ValidationResult, fields: Iterable[str] = ()) -> FormError:
    return FormError(
        code=FormErrorCode.CROSS_FIELD,
        message=". ".join(result.errors) or "These values are not consistent",
        fields=tuple(fields),
    )


def submission_error(exc: BaseException) -> FormError:
    return FormError(code=FormErrorCode.SUBMISSION, message=str(exc) or type(exc).__name__)


def submission_in_progress_error() -> FormError:
    return FormError(code=FormErrorCode.SUBMISSION, message="A submission is already in progress")
