"""Generic config-driven validator for fields with no specialized kind."""

from stepform.validation.config import ValidationConfig
from stepform.validation.result import ValidationResult


def validate_with_config(value: str, config: ValidationConfig, label: str) -> ValidationResult:
    """Validate *value* against a declarative ``ValidationConfig``.

    Empty values short-circuit: an error when required, otherwise valid
    with no further checks. Non-empty values (compared after trimming)
    run every check so that simultaneous violations are all reported:
    length bounds, then pattern, then the custom validator, whose errors
    and warnings are appended to those already collected.
    """
    if not value or not value.strip():
        if config.required:
            return ValidationResult.fail(f"{label} is required")
        return ValidationResult.ok()

    text = value.strip()
    errors: list[str] = []
    warnings: list[str] = []

    if config.min_length is not None and len(text) < config.min_length:
        errors.append(f"{label} must be at least {config.min_length} characters long")
    if config.max_length is not None and len(text) > config.max_length:
        errors.append(f"{label} must be at most {config.max_length} characters")

    pattern = config.compiled_pattern
    if pattern is not None and not pattern.search(text):
        errors.append(f"{label} format is invalid")

    if config.custom_validator is not None:
        custom = config.custom_validator(text)
        errors.extend(custom.errors)
        warnings.extend(custom.warnings)

    return ValidationResult.from_messages(errors, warnings)
