"""Per-field declarative validation configuration.

Each declared field gets exactly one ``ValidationConfig``, set once when
the form is constructed. The config's ``kind`` selects a specialized
validator; ``TEXT`` fields fall back to the generic config validator.
"""

import re
from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum

from stepform.errors import ConfigurationError
from stepform.validation.result import ValidationResult

type CustomValidator = Callable[[str], ValidationResult]


class FieldKind(StrEnum):
    """Semantic identity of a field, resolved once per form."""

    TEXT = "text"
    EMAIL = "email"
    PASSWORD = "password"
    CONFIRM_PASSWORD = "confirm_password"
    PHONE = "phone"
    NAME = "name"
    CALL_UP_NUMBER = "call_up_number"
    BATCH = "batch"
    STATE_CODE = "state_code"
    STREAM = "stream"

    @classmethod
    def infer(cls, field_name: str) -> "FieldKind":
        """Guess a kind from a field name.

        Kept for callers that only have bare field names (legacy rule
        tables). Substring matching is ambiguous, so forms built with
        explicit kinds never go through here.
        """
        lowered = field_name.lower()
        if "email" in lowered:
            return cls.EMAIL
        if "password" in lowered:
            return cls.CONFIRM_PASSWORD if "confirm" in lowered else cls.PASSWORD
        if "phone" in lowered:
            return cls.PHONE
        if "name" in lowered:
            return cls.NAME
        return _EXACT_NAMES.get(field_name, cls.TEXT)


_EXACT_NAMES: dict[str, FieldKind] = {
    "callUpNumber": FieldKind.CALL_UP_NUMBER,
    "batch": FieldKind.BATCH,
    "stateCode": FieldKind.STATE_CODE,
    "stream": FieldKind.STREAM,
}

_SECRET_KINDS = frozenset({FieldKind.PASSWORD, FieldKind.CONFIRM_PASSWORD})

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")


def humanize(field_name: str) -> str:
    """Turn ``checkInDate`` or ``check_in_date`` into ``Check In Date``."""
    spaced = _CAMEL_BOUNDARY.sub(" ", field_name).replace("_", " ").replace("-", " ")
    return " ".join(word[:1].upper() + word[1:] for word in spaced.split())


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Declarative validation contract for one field.

    Usage::

        rules = {
            "email": ValidationConfig(required=True, kind=FieldKind.EMAIL, debounce_ms=500),
            "otp": ValidationConfig(required=True, pattern=r"^\\d{6}$", real_time=True),
            "institution": ValidationConfig(max_length=100),
        }
    """

    required: bool = False
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | re.Pattern[str] | None = None
    custom_validator: CustomValidator | None = None

    # Real-time validation; debounce_ms=None defers to FormConfig.debounce_ms
    real_time: bool = True
    debounce_ms: int | None = None

    kind: FieldKind = FieldKind.TEXT
    label: str | None = None

    # Kind-specific knobs
    match_field: str = "password"  # CONFIRM_PASSWORD sibling
    country: str = "NG"  # PHONE
    secret: bool | None = None  # None = derived from kind

    def __post_init__(self) -> None:
        if isinstance(self.pattern, str):
            object.__setattr__(self, "pattern", re.compile(self.pattern))
        if self.min_length is not None and self.min_length < 0:
            msg = f"min_length must be >= 0, got {self.min_length}"
            raise ConfigurationError(msg)
        if (
            self.min_length is not None
            and self.max_length is not None
            and self.min_length > self.max_length
        ):
            msg = f"min_length ({self.min_length}) exceeds max_length ({self.max_length})"
            raise ConfigurationError(msg)
        if self.debounce_ms is not None and self.debounce_ms < 0:
            msg = f"debounce_ms must be >= 0, got {self.debounce_ms}"
            raise ConfigurationError(msg)

    @property
    def compiled_pattern(self) -> re.Pattern[str] | None:
        # re.compile hands back an already compiled pattern unchanged
        if self.pattern is None:
            return None
        return re.compile(self.pattern)

    @property
    def is_secret(self) -> bool:
        if self.secret is not None:
            return self.secret
        return self.kind in _SECRET_KINDS

    def display_label(self, field_name: str) -> str:
        """Human label for *field_name* under this config."""
        return self.label or humanize(field_name)

    def delay_ms(self, default: int) -> int:
        """Effective debounce delay, falling back to the form default."""
        return default if self.debounce_ms is None else self.debounce_ms
