"""Form-wide configuration.

FormConfig is a frozen dataclass: immutable after creation, one per form,
no string-key dict lookups.
"""

from dataclasses import dataclass
from enum import StrEnum

from stepform.errors import ConfigurationError


class HiddenFieldPolicy(StrEnum):
    """What happens to a branch field when its branch is not selected."""

    RETAIN = "retain"  # keep value and errors
    CLEAR = "clear"  # reset value to "" and drop errors


@dataclass(frozen=True, slots=True)
class FormConfig:
    """Form behaviour switches. Immutable after creation.

    Override what you need::

        config = FormConfig(validate_on_change=False, debounce_ms=500)
    """

    # When validation runs
    validate_on_change: bool = True
    validate_on_blur: bool = True

    # Fallback delay for fields whose ValidationConfig leaves debounce_ms unset
    debounce_ms: int = 300

    # Wizard branches
    hidden_field_policy: HiddenFieldPolicy = HiddenFieldPolicy.RETAIN

    def __post_init__(self) -> None:
        if self.debounce_ms < 0:
            msg = f"debounce_ms must be >= 0, got {self.debounce_ms}"
            raise ConfigurationError(msg)
