"""Field validation — declarative configs, specialized validators, clean results.

Usage::

    from stepform.validation import FieldKind, ValidationConfig, is_form_valid, validate_form

    rules = {
        "email": ValidationConfig(required=True, kind=FieldKind.EMAIL),
        "password": ValidationConfig(required=True, kind=FieldKind.PASSWORD),
        "institution": ValidationConfig(max_length=100),
    }
    results = validate_form({"email": "bad-email", "password": "weakpass"}, rules)
    if not is_form_valid(results):
        ...
"""

from stepform.validation.config import CustomValidator, FieldKind, ValidationConfig, humanize
from stepform.validation.dispatch import (
    form_errors,
    form_warnings,
    infer_kinds,
    is_form_valid,
    undeclared_fields,
    validate_form,
    validate_value,
)
from stepform.validation.generic import validate_with_config
from stepform.validation.result import Strength, ValidationResult
from stepform.validation.rules import (
    DISPOSABLE_DOMAINS,
    STATE_CODES,
    STREAMS,
    is_trivial_password,
    iso_date,
    one_of,
    parse_iso_date,
    password_strength,
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

__all__ = [
    "DISPOSABLE_DOMAINS",
    "STATE_CODES",
    "STREAMS",
    "CustomValidator",
    "FieldKind",
    "Strength",
    "ValidationConfig",
    "ValidationResult",
    "form_errors",
    "form_warnings",
    "humanize",
    "infer_kinds",
    "is_form_valid",
    "is_trivial_password",
    "iso_date",
    "one_of",
    "parse_iso_date",
    "password_strength",
    "undeclared_fields",
    "validate_batch",
    "validate_call_up_number",
    "validate_confirm_password",
    "validate_email",
    "validate_form",
    "validate_name",
    "validate_password",
    "validate_phone",
    "validate_state_code",
    "validate_stream",
    "validate_value",
    "validate_with_config",
]
