"""Form state controller.

Owns the values, errors, and touched maps plus the submitting flag for
one form, and decides when validation runs:

- on change: debounced through ``DebounceScheduler`` (or immediately when
  no scheduler is running, or the field's delay is zero)
- on blur: ``set_field_touched`` validates synchronously
- on submit: ``handle_submit`` touches and validates every field

Usage::

    async with FormController(rules, initial_values={"email": ""}) as form:
        form.set_value("email", "user@example.com")
        form.set_field_touched("email")
        result = await form.handle_submit(api.register)

Threading model:
    One controller per form, driven from one event loop. The debounce
    callback is the only place control re-enters the controller outside
    of direct calls, so no locking is needed.
"""

import logging
from collections.abc import Awaitable, Callable, Iterable, Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from types import MappingProxyType, TracebackType
from typing import Any, Self

from stepform._internal.invoke import invoke
from stepform.accessibility import AccessibilityProps, field_accessibility
from stepform.config import FormConfig
from stepform.debounce import DebounceScheduler
from stepform.errors import ConfigurationError, FormLockedError, SubmissionError
from stepform.reporting import (
    FieldError,
    FormError,
    field_issues,
    invalid_fields_error,
    submission_in_progress_error,
)
from stepform.sinks import PrefillSource, SubmissionSink
from stepform.validation.config import ValidationConfig
from stepform.validation.dispatch import undeclared_fields, validate_value
from stepform.validation.result import ValidationResult

logger = logging.getLogger("stepform.form")

type ValidationChangeCallback = Callable[[bool, Mapping[str, ValidationResult]], None]
type Submitter = Callable[[dict[str, str]], Any | Awaitable[Any]] | SubmissionSink


class SubmitStatus(StrEnum):
    SUBMITTED = "submitted"
    INVALID = "invalid"
    REJECTED = "rejected"  # a submission was already in flight


@dataclass(frozen=True, slots=True)
class SubmitResult:
    """Outcome of ``handle_submit`` when it does not raise.

    ``error`` is set for ``INVALID`` (code ``invalid_fields``) and
    ``REJECTED`` (code ``submission``). A failed submitter raises
    ``SubmissionError`` instead, whose ``form_error`` has the same shape.
    """

    status: SubmitStatus
    payload: Any = None
    errors: Mapping[str, ValidationResult] = field(default_factory=dict)
    first_invalid_field: str | None = None
    error: FormError | None = None

    @property
    def submitted(self) -> bool:
        return self.status is SubmitStatus.SUBMITTED

    def __bool__(self) -> bool:
        return self.submitted


@dataclass(frozen=True, slots=True)
class FormSnapshot:
    """Read-only view of a form's state for the presentation layer."""

    values: Mapping[str, str]
    errors: Mapping[str, ValidationResult]
    touched: Mapping[str, bool]
    is_submitting: bool

    @property
    def is_valid(self) -> bool:
        return all(result.is_valid for result in self.errors.values())

    @property
    def has_errors(self) -> bool:
        return not self.is_valid

    @property
    def has_warnings(self) -> bool:
        return any(result.warnings for result in self.errors.values())


class FormController:
    """Values, errors, touched, and submission state for one form.

    Args:
        rules: One ``ValidationConfig`` per declared field. Errors and
            touched flags only ever exist for these names.
        initial_values: Starting values (undeclared keys are kept as
            plain values, never validated).
        prefill: Optional source merged over *initial_values* at
            construction and on ``reset()`` without arguments.
        config: Form-wide switches.
        scheduler: Debounce scheduler. Entered together with the
            controller when used as ``async with``.
        on_validation_change: Called with ``(is_valid, errors)`` after
            every write to the errors map.
    """

    __slots__ = (
        "_config",
        "_errors",
        "_initial",
        "_is_submitting",
        "_locked",
        "_on_validation_change",
        "_owns_scheduler",
        "_prefill",
        "_rules",
        "_scheduler",
        "_touched",
        "_values",
    )

    def __init__(
        self,
        rules: Mapping[str, ValidationConfig],
        *,
        initial_values: Mapping[str, str] | None = None,
        prefill: PrefillSource | None = None,
        config: FormConfig | None = None,
        scheduler: DebounceScheduler | None = None,
        on_validation_change: ValidationChangeCallback | None = None,
    ) -> None:
        if not rules:
            msg = "A form needs at least one declared field"
            raise ConfigurationError(msg)
        self._rules: dict[str, ValidationConfig] = dict(rules)
        self._config = config or FormConfig()
        self._owns_scheduler = scheduler is None
        self._scheduler = scheduler or DebounceScheduler()
        self._on_validation_change = on_validation_change
        self._prefill = prefill
        self._initial: dict[str, str] = dict(initial_values or {})
        self._values: dict[str, str] = self._starting_values()
        self._errors: dict[str, ValidationResult] = {}
        self._touched: dict[str, bool] = {}
        self._is_submitting = False
        self._locked = False

    # -- Lifecycle --

    async def __aenter__(self) -> Self:
        if self._owns_scheduler:
            await self._scheduler.__aenter__()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> bool | None:
        if self._owns_scheduler:
            return await self._scheduler.__aexit__(exc_type, exc, tb)
        self._scheduler.cancel_owner(self)
        return None

    # -- Read-only state --

    @property
    def rules(self) -> Mapping[str, ValidationConfig]:
        return MappingProxyType(self._rules)

    @property
    def config(self) -> FormConfig:
        return self._config

    @property
    def scheduler(self) -> DebounceScheduler:
        return self._scheduler

    @property
    def values(self) -> Mapping[str, str]:
        return MappingProxyType(self._values)

    @property
    def errors(self) -> Mapping[str, ValidationResult]:
        return MappingProxyType(self._errors)

    @property
    def touched(self) -> Mapping[str, bool]:
        return MappingProxyType(self._touched)

    @property
    def is_submitting(self) -> bool:
        return self._is_submitting

    @property
    def is_valid(self) -> bool:
        return all(result.is_valid for result in self._errors.values())

    @property
    def has_errors(self) -> bool:
        return not self.is_valid

    @property
    def has_warnings(self) -> bool:
        return any(result.warnings for result in self._errors.values())

    @property
    def locked(self) -> bool:
        return self._locked

    def is_pending(self, field: str) -> bool:
        """True while a debounced validation for *field* is waiting to fire."""
        return self._scheduler.pending(field, owner=self) is not None

    def value(self, field: str) -> str:
        return self._values.get(field) or ""

    def label(self, field: str) -> str:
        return self._require(field).display_label(field)

    def labels(self) -> dict[str, str]:
        return {name: config.display_label(name) for name, config in self._rules.items()}

    def snapshot(self) -> FormSnapshot:
        """Copy the current state for rendering."""
        return FormSnapshot(
            values=MappingProxyType(dict(self._values)),
            errors=MappingProxyType(dict(self._errors)),
            touched=MappingProxyType(dict(self._touched)),
            is_submitting=self._is_submitting,
        )

    def field_issues(self, *, only_touched: bool = True) -> list[FieldError]:
        return field_issues(self._errors, self._touched, self.labels(), only_touched=only_touched)

    def accessibility(
        self, field: str, *, base_hint: str = "", show_password: bool = False
    ) -> AccessibilityProps:
        return field_accessibility(
            field,
            self._errors.get(field),
            self._touched.get(field, False),
            self._require(field),
            base_hint=base_hint,
            show_password=show_password,
        )

    # -- Mutators --

    def set_value(self, field: str, value: str) -> None:
        """Store *value* and, if real-time validation applies, validate it.

        With a running scheduler and a non-zero delay the validation is
        debounced; otherwise it runs immediately. Fields with real-time
        validation off keep their current errors until blur or submit.
        """
        self._ensure_unlocked()
        self._values[field] = value

        config = self._rules.get(field)
        if config is None or not self._config.validate_on_change or not config.real_time:
            return

        delay_ms = config.delay_ms(self._config.debounce_ms)
        if self._scheduler.running and delay_ms > 0:
            self._scheduler.schedule(field, value, delay_ms, self._apply_debounced, owner=self)
        else:
            self._store(field, self._validate(field, value))

    def set_values(self, values: Mapping[str, str]) -> None:
        """Replace every value at once.

        Pending debounced validations are dropped. When change validation
        is on, all declared fields are validated immediately.
        """
        self._ensure_unlocked()
        self._scheduler.cancel_owner(self)
        self._values = dict(values)
        if self._config.validate_on_change:
            self.validate_all_fields()

    def set_field_touched(self, field: str, touched: bool = True) -> None:
        """Mark *field* touched (blur) and validate it when blur validation is on.

        Touched is monotonic: ``touched=False`` never un-touches a field,
        only ``reset()`` does.
        """
        self._ensure_unlocked()
        self._require(field)
        if not touched:
            self._touched.setdefault(field, False)
            return
        self._touched[field] = True
        if self._config.validate_on_blur:
            self.validate_field(field)

    def touch(self, fields: Iterable[str]) -> None:
        """Mark *fields* touched without validating them."""
        self._ensure_unlocked()
        names = list(fields)
        self._require_all(names)
        for name in names:
            self._touched[name] = True

    def validate_field(self, field: str) -> ValidationResult:
        """Validate *field* against its current value, store and return the result."""
        self._require(field)
        self._scheduler.cancel(field, owner=self)
        result = self._validate(field, self.value(field))
        self._store(field, result)
        return result

    def validate_all_fields(
        self, fields: Iterable[str] | None = None
    ) -> dict[str, ValidationResult]:
        """Validate every declared field (or just *fields*) synchronously.

        Returns a copy of the full errors map after the writes.
        """
        names = list(self._rules) if fields is None else list(fields)
        self._require_all(names)
        for name in names:
            self._scheduler.cancel(name, owner=self)
            self._errors[name] = self._validate(name, self.value(name))
        self._notify()
        return dict(self._errors)

    def clear_errors(self) -> None:
        self._scheduler.cancel_owner(self)
        self._errors.clear()
        self._notify()

    def clear_field_error(self, field: str) -> None:
        self._scheduler.cancel(field, owner=self)
        if self._errors.pop(field, None) is not None:
            self._notify()

    def clear_field(self, field: str) -> None:
        """Empty *field*'s value and drop its errors, keeping touched."""
        self._ensure_unlocked()
        self._require(field)
        self._values[field] = ""
        self.clear_field_error(field)

    async def handle_submit(
        self,
        on_submit: Submitter,
        *,
        fields: Iterable[str] | None = None,
    ) -> SubmitResult:
        """Touch and validate every field, then submit if all are valid.

        Args:
            on_submit: Sync or async callable receiving a copy of the
                values, or a ``SubmissionSink``. Its return value becomes
                ``SubmitResult.payload``.
            fields: Restrict validation to these declared fields (the
                wizard excludes unselected branches this way).

        Returns ``INVALID`` without calling *on_submit* when any field
        fails, and ``REJECTED`` when a submission is already in flight.

        Raises:
            SubmissionError: *on_submit* raised. ``is_submitting`` is
                already reset when this propagates.
        """
        self._ensure_unlocked()
        if self._is_submitting:
            logger.warning("Submit ignored: a submission is already in progress")
            return SubmitResult(
                status=SubmitStatus.REJECTED,
                error=submission_in_progress_error(),
            )

        names = list(self._rules) if fields is None else list(fields)
        self._require_all(names)
        self._is_submitting = True
        try:
            self.touch(names)
            errors = self.validate_all_fields(names)
            invalid = [name for name in names if not errors[name].is_valid]
            if invalid:
                logger.info("Submit blocked: %d invalid field(s), first %r", len(invalid), invalid[0])
                return SubmitResult(
                    status=SubmitStatus.INVALID,
                    errors=errors,
                    first_invalid_field=invalid[0],
                    error=invalid_fields_error({name: errors[name] for name in names}),
                )

            submit = on_submit.submit if isinstance(on_submit, SubmissionSink) else on_submit
            try:
                payload = await invoke(submit, dict(self._values))
            except SubmissionError:
                logger.exception("Submission failed")
                raise
            except Exception as exc:
                logger.exception("Submission failed")
                msg = f"Submission failed: {exc}"
                raise SubmissionError(msg, original=exc, detail=str(exc)) from exc

            logger.info("Submitted %d field(s)", len(names))
            return SubmitResult(status=SubmitStatus.SUBMITTED, payload=payload, errors=errors)
        finally:
            self._is_submitting = False

    def reset(self, initial_values: Mapping[str, str] | None = None) -> None:
        """Restore initial values and clear errors, touched, and submitting.

        Without *initial_values*, the original initial values (re-read
        from the prefill source) are restored. Resetting also unlocks a
        form locked by a completed wizard.
        """
        self._scheduler.cancel_owner(self)
        if initial_values is not None:
            self._values = dict(initial_values)
        else:
            self._values = self._starting_values()
        self._errors.clear()
        self._touched.clear()
        self._is_submitting = False
        self._locked = False
        self._notify()

    def lock(self) -> None:
        """Forbid further mutation (terminal success state)."""
        self._scheduler.cancel_owner(self)
        self._locked = True

    # -- Internals --

    def _starting_values(self) -> dict[str, str]:
        values = dict(self._initial)
        if self._prefill is not None:
            loaded = self._prefill.load()
            values.update({key: value for key, value in loaded.items() if key in self._rules})
        return values

    def _validate(self, field: str, value: str) -> ValidationResult:
        values = {**self._values, field: value}
        return validate_value(field, value, self._rules[field], values)

    def _apply_debounced(self, field: str, value: str) -> None:
        self._store(field, self._validate(field, value))

    def _store(self, field: str, result: ValidationResult) -> None:
        self._errors[field] = result
        self._notify()

    def _notify(self) -> None:
        if self._on_validation_change is not None:
            self._on_validation_change(self.is_valid, MappingProxyType(dict(self._errors)))

    def _require(self, field: str) -> ValidationConfig:
        config = self._rules.get(field)
        if config is None:
            msg = f"Field {field!r} is not declared in this form's rules"
            raise ConfigurationError(msg)
        return config

    def _require_all(self, names: Iterable[str]) -> None:
        unknown = undeclared_fields(self._rules, names)
        if unknown:
            msg = f"Fields not declared in this form's rules: {', '.join(unknown)}"
            raise ConfigurationError(msg)

    def _ensure_unlocked(self) -> None:
        if self._locked:
            msg = "This form has been completed and can no longer be changed"
            raise FormLockedError(msg)

    def __repr__(self) -> str:
        return f"FormController(fields={list(self._rules)!r}, valid={self.is_valid})"
