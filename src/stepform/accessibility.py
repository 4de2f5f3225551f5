"""Accessibility hints — a pure projection of field state into text.

Screen readers announce the hint after the label. Errors and warnings
are only included once the field is touched, the same moment they
become visible inline.
"""

from dataclasses import dataclass

from stepform.validation.config import ValidationConfig
from stepform.validation.result import ValidationResult


@dataclass(frozen=True, slots=True)
class AccessibilityProps:
    """What an input widget needs for assistive technology."""

    label: str
    hint: str | None
    invalid: bool
    required: bool


def _append(hint: str, part: str) -> str:
    return f"{hint}. {part}" if hint else part


def accessibility_hint(
    result: ValidationResult | None,
    touched: bool,
    config: ValidationConfig,
    *,
    base_hint: str = "",
    show_password: bool = False,
) -> str:
    """Build the hint string for one field.

    Order: *base_hint*, "Required field", then either "Error: ..." or
    "Warning: ...", then "Password field" with its visibility for
    secret fields. Returns ``""`` when there is nothing to say.
    """
    hint = base_hint

    if config.required and "required" not in hint.lower():
        hint = _append(hint, "Required field")

    if result is not None and touched:
        if not result.is_valid and result.errors:
            hint = _append(hint, "Error: " + ". ".join(result.errors))
        elif result.warnings:
            hint = _append(hint, "Warning: " + ". ".join(result.warnings))

    if config.is_secret:
        hint = _append(hint, "Password field")
        hint += ". Password is visible" if show_password else ". Password is hidden"

    return hint


def field_accessibility(
    field: str,
    result: ValidationResult | None,
    touched: bool,
    config: ValidationConfig,
    *,
    base_hint: str = "",
    show_password: bool = False,
) -> AccessibilityProps:
    """Label, hint, and state flags for *field*."""
    hint = accessibility_hint(
        result, touched, config, base_hint=base_hint, show_password=show_password
    )
    return AccessibilityProps(
        label=config.display_label(field),
        hint=hint or None,
        invalid=bool(result is not None and touched and not result.is_valid),
        required=config.required,
    )
