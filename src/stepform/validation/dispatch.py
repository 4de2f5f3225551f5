"""Validator dispatch and batch helpers.

Dispatch is a pure lookup from a field's ``FieldKind`` to its validator;
it holds no state and is safe to share between forms.
"""

import dataclasses
from collections.abc import Callable, Iterable, Mapping

from stepform.validation.config import FieldKind, ValidationConfig
from stepform.validation.generic import validate_with_config
from stepform.validation.result import ValidationResult
from stepform.validation.rules import (
    validate_batch,
    validate_call_up_number,
    validate_confirm_password,
    validate_email,
    validate_name,
    validate_password,
    validate_phone,
    validate_state_code,
    validate_stream,
)

type FieldValidator = Callable[[str, ValidationConfig, str, Mapping[str, str]], ValidationResult]


# Adapters give every specialized validator the same signature:
# (value, config, label, sibling values) -> ValidationResult

_VALIDATORS: dict[FieldKind, FieldValidator] = {
    FieldKind.EMAIL: lambda value, _cfg, _label, _values: validate_email(value),
    FieldKind.PASSWORD: lambda value, _cfg, _label, _values: validate_password(value),
    FieldKind.CONFIRM_PASSWORD: lambda value, cfg, _label, values: validate_confirm_password(
        values.get(cfg.match_field) or "", value
    ),
    FieldKind.PHONE: lambda value, cfg, _label, _values: validate_phone(value, cfg.country),
    FieldKind.NAME: lambda value, _cfg, label, _values: validate_name(value, label),
    FieldKind.CALL_UP_NUMBER: lambda value, _cfg, _label, _values: validate_call_up_number(value),
    FieldKind.BATCH: lambda value, _cfg, _label, _values: validate_batch(value),
    FieldKind.STATE_CODE: lambda value, _cfg, _label, _values: validate_state_code(value),
    FieldKind.STREAM: lambda value, _cfg, _label, _values: validate_stream(value),
}


def validate_value(
    field_name: str,
    value: str,
    config: ValidationConfig,
    values: Mapping[str, str] | None = None,
) -> ValidationResult:
    """Validate one field value, choosing the validator by ``config.kind``.

    Args:
        field_name: Declared field name (used for the default label).
        value: Raw value to validate.
        config: The field's declarative config.
        values: Current values of the whole form. Only read by
            validators that compare against a sibling field.

    Optional fields of a specialized kind accept an empty value, the
    same way the generic validator does.
    """
    label = config.display_label(field_name)
    validator = _VALIDATORS.get(config.kind)
    if validator is None:
        return validate_with_config(value, config, label)
    if not config.required and not (value and value.strip()):
        return ValidationResult.ok()
    return validator(value, config, label, values or {})


def validate_form(
    values: Mapping[str, str],
    rules: Mapping[str, ValidationConfig],
) -> dict[str, ValidationResult]:
    """Validate every field in *rules* against *values*.

    Missing values are treated as empty strings. Each field is validated
    independently; only sibling-reading kinds see other values.
    """
    return {
        field_name: validate_value(field_name, values.get(field_name) or "", config, values)
        for field_name, config in rules.items()
    }


def is_form_valid(results: Mapping[str, ValidationResult]) -> bool:
    return all(result.is_valid for result in results.values())


def form_errors(results: Mapping[str, ValidationResult]) -> list[str]:
    """Every error message, flattened in field order."""
    return [message for result in results.values() for message in result.errors if message]


def form_warnings(results: Mapping[str, ValidationResult]) -> list[str]:
    """Every warning message, flattened in field order."""
    return [message for result in results.values() for message in result.warnings if message]


def infer_kinds(rules: Mapping[str, ValidationConfig]) -> dict[str, ValidationConfig]:
    """Return a copy of *rules* with ``TEXT`` kinds replaced by name inference.

    Bridges rule tables written before fields carried explicit kinds.
    Configs that already name a kind are left alone.
    """
    inferred: dict[str, ValidationConfig] = {}
    for field_name, config in rules.items():
        if config.kind is FieldKind.TEXT:
            kind = FieldKind.infer(field_name)
            if kind is not FieldKind.TEXT:
                config = dataclasses.replace(config, kind=kind)
        inferred[field_name] = config
    return inferred


def undeclared_fields(rules: Mapping[str, ValidationConfig], names: Iterable[str]) -> list[str]:
    """Names from *names* that are not declared in *rules*."""
    return [name for name in names if name not in rules]
