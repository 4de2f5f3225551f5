"""Stepform exception hierarchy.

Validation never raises: field failures are ``ValidationResult`` data and
step failures are ``FormError`` data. Exceptions are reserved for broken
configuration, state-machine misuse, and submission failures.
"""

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stepform.reporting import FormError


class StepformError(Exception):
    """Base for all stepform-specific errors."""


class ConfigurationError(StepformError):
    """Raised when form, field, or wizard configuration is invalid.

    Typically raised at construction time, or when a caller names a
    field that was never declared in the form's rules.
    """


class FormLockedError(StepformError):
    """Raised when a completed form is mutated."""


class WizardError(StepformError):
    """Raised when the wizard state machine is driven out of order."""


class SubmissionError(StepformError):
    """Raised when a submission callable or sink fails.

    Attributes:
        original: The underlying exception, if any (also ``__cause__``).
        status: HTTP status for sink failures, else ``None``.
        detail: Response body or message text.
        form_error: The failure as a ``FormError`` with code ``submission``,
            for renderers that consume the uniform issue stream.
    """

    def __init__(
        self,
        message: str,
        *,
        original: BaseException | None = None,
        status: int | None = None,
        detail: str = "",
    ) -> None:
        self.original = original
        self.status = status
        self.detail = detail
        super().__init__(message)

    @property
    def form_error(self) -> "FormError":
        from stepform.reporting import submission_error

        return submission_error(self)
