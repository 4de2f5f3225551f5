"""Wizard step controller — a form sequenced over gated steps.

Each step declares the fields it requires. ``next()`` only advances when
every required field of the current step is filled in and valid and the
step's cross-field rule (if any) holds. ``previous()`` never validates.
The last step is finished with ``complete()``, which hands the values to
a submitter and, on success, freezes the flow.

Branching::

    payment = StepDescriptor(
        "Payment",
        required_fields={"paymentMethod"},
        branch_fields={"cardNumber", "cardExpiry", "transferReference"},
        branch_predicate=lambda values: (
            {"cardNumber", "cardExpiry"} if values.get("paymentMethod") == "card"
            else {"transferReference"}
        ),
    )

Fields of an unselected branch are neither validated nor blocking.
Whether their stored values survive is ``FormConfig.hidden_field_policy``.
"""

import logging
from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from stepform.config import HiddenFieldPolicy
from stepform.errors import ConfigurationError, WizardError
from stepform.form import FormController, Submitter
from stepform.reporting import (
    FormError,
    cross_field_error,
    invalid_fields_error,
    missing_fields_error,
)
from stepform.validation.result import ValidationResult

logger = logging.getLogger("stepform.wizard")

type CrossFieldCheck = Callable[[Mapping[str, str]], ValidationResult]
type BranchPredicate = Callable[[Mapping[str, str]], Iterable[str]]


@dataclass(frozen=True, slots=True)
class StepDescriptor:
    """One stage of a multi-step flow.

    Args:
        title: Display title.
        required_fields: Always required on this step.
        cross_field_check: Runs after field-level checks pass; a failure
            blocks the step as a whole.
        cross_field_fields: Fields the cross-field rule is about (used
            for reporting only).
        branch_predicate: Extra required fields chosen by current values.
        branch_fields: Every field any branch of this step may require.
    """

    title: str
    required_fields: frozenset[str] = frozenset()
    cross_field_check: CrossFieldCheck | None = None
    cross_field_fields: tuple[str, ...] = ()
    branch_predicate: BranchPredicate | None = None
    branch_fields: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        object.__setattr__(self, "required_fields", frozenset(self.required_fields))
        object.__setattr__(self, "branch_fields", frozenset(self.branch_fields))
        object.__setattr__(self, "cross_field_fields", tuple(self.cross_field_fields))

    @property
    def fields(self) -> frozenset[str]:
        """Every field this step can ever require."""
        return self.required_fields | self.branch_fields

    def active_fields(self, values: Mapping[str, str]) -> frozenset[str]:
        """Required fields given the current branch selection."""
        if self.branch_predicate is None:
            return self.required_fields
        return self.required_fields | frozenset(self.branch_predicate(values))

    def inactive_fields(self, values: Mapping[str, str]) -> frozenset[str]:
        """Branch fields not selected by the current values."""
        return self.branch_fields - self.active_fields(values)


class WizardPhase(StrEnum):
    IN_PROGRESS = "in_progress"
    SUCCEEDED = "succeeded"


@dataclass(frozen=True, slots=True)
class StepOutcome:
    """Result of ``next()`` or ``complete()``.

    Falsy when the transition was blocked; ``error`` then holds the one
    aggregated notice to show.
    """

    ok: bool
    step: int
    error: FormError | None = None
    results: Mapping[str, ValidationResult] = field(default_factory=dict)
    payload: Any = None

    def __bool__(self) -> bool:
        return self.ok


class WizardController:
    """Drive a ``FormController`` through ordered, gated steps.

    ``current_step`` is 1-based and only changes through ``next()`` and
    ``previous()``.
    """

    __slots__ = ("_current", "_form", "_phase", "_steps")

    def __init__(self, form: FormController, steps: Sequence[StepDescriptor]) -> None:
        if not steps:
            msg = "A wizard needs at least one step"
            raise ConfigurationError(msg)
        for number, step in enumerate(steps, start=1):
            unknown = sorted(name for name in step.fields if name not in form.rules)
            if unknown:
                msg = f"Step {number} ({step.title!r}) uses undeclared fields: {', '.join(unknown)}"
                raise ConfigurationError(msg)
        self._form = form
        self._steps: tuple[StepDescriptor, ...] = tuple(steps)
        self._current = 1
        self._phase = WizardPhase.IN_PROGRESS

    # -- State --

    @property
    def form(self) -> FormController:
        return self._form

    @property
    def steps(self) -> tuple[StepDescriptor, ...]:
        return self._steps

    @property
    def current_step(self) -> int:
        return self._current

    @property
    def step(self) -> StepDescriptor:
        return self._steps[self._current - 1]

    @property
    def step_count(self) -> int:
        return len(self._steps)

    @property
    def is_first(self) -> bool:
        return self._current == 1

    @property
    def is_last(self) -> bool:
        return self._current == len(self._steps)

    @property
    def phase(self) -> WizardPhase:
        return self._phase

    @property
    def succeeded(self) -> bool:
        return self._phase is WizardPhase.SUCCEEDED

    def required_fields(self) -> list[str]:
        """Required fields of the current step, in declaration order."""
        return self._ordered(self.step.active_fields(self._form.values))

    # -- Transitions --

    def check_step(self) -> StepOutcome:
        """Touch and validate the current step without moving."""
        self._ensure_in_progress()
        return self._gate(self.step)

    def next(self) -> StepOutcome:
        """Advance one step if the current step passes its gate.

        Raises:
            WizardError: Already on the last step (use ``complete()``).
        """
        self._ensure_in_progress()
        if self.is_last:
            msg = "Already on the final step; finish the flow with complete()"
            raise WizardError(msg)

        outcome = self._gate(self.step)
        if not outcome:
            return outcome

        self._apply_hidden_field_policy(self.step)
        self._current += 1
        logger.debug("Wizard: advanced to step %d/%d", self._current, len(self._steps))
        return StepOutcome(ok=True, step=self._current, results=outcome.results)

    def previous(self) -> bool:
        """Go back one step without validating. No-op on the first step."""
        self._ensure_in_progress()
        if self.is_first:
            return False
        self._current -= 1
        logger.debug("Wizard: back to step %d/%d", self._current, len(self._steps))
        return True

    async def complete(self, on_submit: Submitter) -> StepOutcome:
        """Gate the final step, then submit every field still in play.

        Fields belonging to unselected branches are left out of the
        submission's validation. On success the wizard enters
        ``WizardPhase.SUCCEEDED`` and the form is locked.

        Raises:
            WizardError: Not on the final step.
            SubmissionError: The submitter failed. Its ``form_error`` carries
                the same failure as a ``submission`` ``FormError``.
        """
        self._ensure_in_progress()
        if not self.is_last:
            msg = f"complete() is only available on the final step (currently {self._current})"
            raise WizardError(msg)

        outcome = self._gate(self.step)
        if not outcome:
            return outcome

        values = self._form.values
        inactive: set[str] = set()
        for step in self._steps:
            inactive |= step.inactive_fields(values)
        fields = [name for name in self._form.rules if name not in inactive]

        result = await self._form.handle_submit(on_submit, fields=fields)
        if not result:
            return StepOutcome(
                ok=False,
                step=self._current,
                error=result.error,
                results=result.errors,
            )

        self._phase = WizardPhase.SUCCEEDED
        self._form.lock()
        logger.info("Wizard: completed after %d steps", len(self._steps))
        return StepOutcome(ok=True, step=self._current, results=result.errors, payload=result.payload)

    def restart(self) -> None:
        """Back to step 1 with a freshly reset form."""
        self._form.reset()
        self._current = 1
        self._phase = WizardPhase.IN_PROGRESS

    # -- Internals --

    def _gate(self, step: StepDescriptor) -> StepOutcome:
        form = self._form
        required = self._ordered(step.active_fields(form.values))
        unknown = [name for name in required if name not in form.rules]
        if unknown:
            msg = f"Branch of step {step.title!r} selected undeclared fields: {', '.join(unknown)}"
            raise ConfigurationError(msg)

        form.touch(required)
        all_errors = form.validate_all_fields(required)
        results = {name: all_errors[name] for name in required}

        missing = [name for name in required if not form.value(name).strip()]
        if missing:
            error = missing_fields_error(missing, form.labels())
            return self._blocked(error, results)

        if not all(result.is_valid for result in results.values()):
            return self._blocked(invalid_fields_error(results), results)

        if step.cross_field_check is not None:
            cross = step.cross_field_check(form.values)
            if not cross.is_valid:
                return self._blocked(cross_field_error(cross, step.cross_field_fields), results)

        return StepOutcome(ok=True, step=self._current, results=results)

    def _blocked(self, error: FormError, results: Mapping[str, ValidationResult]) -> StepOutcome:
        logger.info("Wizard: step %d blocked (%s)", self._current, error.code)
        return StepOutcome(ok=False, step=self._current, error=error, results=results)

    def _apply_hidden_field_policy(self, step: StepDescriptor) -> None:
        if self._form.config.hidden_field_policy is not HiddenFieldPolicy.CLEAR:
            return
        for name in self._ordered(step.inactive_fields(self._form.values)):
            self._form.clear_field(name)

    def _ordered(self, names: Iterable[str]) -> list[str]:
        # Declaration order of the form's rules, then any strays
        wanted = set(names)
        ordered = [name for name in self._form.rules if name in wanted]
        ordered.extend(sorted(wanted.difference(ordered)))
        return ordered

    def _ensure_in_progress(self) -> None:
        if self._phase is WizardPhase.SUCCEEDED:
            msg = "The flow has already been completed"
            raise WizardError(msg)

    def __repr__(self) -> str:
        return f"WizardController(step={self._current}/{len(self._steps)}, phase={self._phase})"
