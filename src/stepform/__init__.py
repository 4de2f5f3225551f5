"""Stepform — declarative form validation and step-gated wizards.

Validates user input with field-aware rules, debounces real-time checks,
and drives multi-screen flows whose steps only advance when their fields
are valid.

Basic usage::

    from stepform import FieldKind, FormController, ValidationConfig

    rules = {
        "email": ValidationConfig(required=True, kind=FieldKind.EMAIL),
        "password": ValidationConfig(required=True, kind=FieldKind.PASSWORD),
    }

    async with FormController(rules) as form:
        form.set_value("email", "user@example.com")
        form.set_field_touched("email")
        result = await form.handle_submit(api.sign_up)

Wizards::

    from stepform import StepDescriptor, WizardController

    wizard = WizardController(form, [
        StepDescriptor("Account", required_fields={"email", "password"}),
        StepDescriptor("Confirm"),
    ])
    outcome = wizard.next()
    if not outcome:
        show_notice(outcome.error.message)
"""

__version__ = "0.1.0"
__all__ = [
    "ConfigurationError",
    "DebounceScheduler",
    "FieldError",
    "FieldKind",
    "FormConfig",
    "FormController",
    "FormError",
    "FormLockedError",
    "FormSnapshot",
    "HTTPSubmissionSink",
    "HiddenFieldPolicy",
    "MappingPrefill",
    "StepDescriptor",
    "StepOutcome",
    "StepformError",
    "Strength",
    "SubmissionError",
    "SubmitResult",
    "SubmitStatus",
    "ValidationConfig",
    "ValidationResult",
    "WizardController",
    "WizardError",
    "WizardPhase",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import stepform`` fast while providing a flat top-level API.
    """
    if name in ("FormController", "FormSnapshot", "SubmitResult", "SubmitStatus"):
        from stepform import form as _form

        return getattr(_form, name)

    if name in ("StepDescriptor", "StepOutcome", "WizardController", "WizardPhase"):
        from stepform import wizard as _wizard

        return getattr(_wizard, name)

    if name in ("FieldKind", "ValidationConfig"):
        from stepform.validation import config as _config

        return getattr(_config, name)

    if name in ("Strength", "ValidationResult"):
        from stepform.validation import result as _result

        return getattr(_result, name)

    if name == "DebounceScheduler":
        from stepform.debounce import DebounceScheduler

        return DebounceScheduler

    if name in ("FormConfig", "HiddenFieldPolicy"):
        from stepform import config as _cfg

        return getattr(_cfg, name)

    if name in ("FieldError", "FormError"):
        from stepform import reporting as _reporting

        return getattr(_reporting, name)

    if name in ("HTTPSubmissionSink", "MappingPrefill"):
        from stepform import sinks as _sinks

        return getattr(_sinks, name)

    if name in (
        "ConfigurationError",
        "FormLockedError",
        "StepformError",
        "SubmissionError",
        "WizardError",
    ):
        from stepform import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
