"""Validation result — immutable outcome of validating one field."""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum


class Strength(StrEnum):
    """Password strength label."""

    WEAK = "weak"
    MEDIUM = "medium"
    STRONG = "strong"


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """The outcome of validating a single field value.

    A fresh result is produced on every validation run; results are never
    mutated in place. The result is falsy when invalid::

        result = validate_email(value)
        if not result:
            show(result.errors)

    ``warnings`` never affect validity. ``strength`` is only set by the
    password validator.
    """

    is_valid: bool
    errors: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    strength: Strength | None = None

    @classmethod
    def ok(cls, warnings: Iterable[str] = ()) -> "ValidationResult":
        """A passing result, optionally with warnings."""
        return cls(is_valid=True, warnings=tuple(warnings))

    @classmethod
    def fail(cls, *errors: str) -> "ValidationResult":
        """A failing result carrying *errors* in order."""
        return cls(is_valid=False, errors=errors)

    @classmethod
    def from_messages(
        cls,
        errors: Iterable[str],
        warnings: Iterable[str] = (),
        strength: Strength | None = None,
    ) -> "ValidationResult":
        """Build a result whose validity is derived from *errors*."""
        errors = tuple(errors)
        return cls(
            is_valid=not errors,
            errors=errors,
            warnings=tuple(warnings),
            strength=strength,
        )

    @property
    def has_warnings(self) -> bool:
        return bool(self.warnings)

    def __bool__(self) -> bool:
        """Falsy when invalid, so ``if not result:`` reads naturally."""
        return self.is_valid

