"""Prebuilt flows: registration, password reset, booking, and checkout.

Each factory returns a ``WizardController`` wrapping a fresh
``FormController``; reach the form through ``wizard.form``::

    wizard = booking_wizard(prefill=MappingPrefill(profile))
    async with wizard.form:
        ...
        outcome = await wizard.complete(HTTPSubmissionSink(BOOKINGS_URL))
"""

from collections.abc import Mapping

from stepform.config import FormConfig
from stepform.debounce import DebounceScheduler
from stepform.form import FormController
from stepform.sinks import PrefillSource
from stepform.validation.config import FieldKind, ValidationConfig
from stepform.validation.result import ValidationResult
from stepform.validation.rules import iso_date, one_of, parse_iso_date
from stepform.wizard import CrossFieldCheck, StepDescriptor, WizardController

PAYMENT_TRANSFER = "transfer"
PAYMENT_CARD = "card"
PAYMENT_DELIVERY = "delivery"

_CARD_FIELDS = frozenset({"cardNumber", "cardExpiry", "cardCvv"})
_TRANSFER_FIELDS = frozenset({"senderAccountName"})

_NYSC_FIELDS = frozenset({"stateCode", "batch", "stream", "callUpNumber"})


def dates_in_order(start_field: str, end_field: str, message: str) -> CrossFieldCheck:
    """Cross-field rule: *end_field* must fall strictly after *start_field*."""

    def check(values: Mapping[str, str]) -> ValidationResult:
        start = parse_iso_date(values.get(start_field) or "")
        end = parse_iso_date(values.get(end_field) or "")
        if start is None or end is None:
            return ValidationResult.fail(message)
        if end <= start:
            return ValidationResult.fail(message)
        return ValidationResult.ok()

    return check


def _payment_branch(values: Mapping[str, str]) -> frozenset[str]:
    method = (values.get("paymentMethod") or "").lower()
    if method == PAYMENT_CARD:
        return _CARD_FIELDS
    if method == PAYMENT_TRANSFER:
        return _TRANSFER_FIELDS
    return frozenset()


def _card_rules() -> dict[str, ValidationConfig]:
    return {
        "cardNumber": ValidationConfig(pattern=r"^\d{13,19}$", label="Card Number"),
        "cardExpiry": ValidationConfig(pattern=r"^(0[1-9]|1[0-2])/\d{2}$", label="Expiry (MM/YY)"),
        "cardCvv": ValidationConfig(pattern=r"^\d{3,4}$", label="CVV", secret=True),
        "senderAccountName": ValidationConfig(kind=FieldKind.NAME, label="Sender Account Name"),
    }


def _form(
    rules: Mapping[str, ValidationConfig],
    initial_values: Mapping[str, str] | None,
    prefill: PrefillSource | None,
    config: FormConfig | None,
    scheduler: DebounceScheduler | None,
) -> FormController:
    return FormController(
        rules,
        initial_values={name: "" for name in rules} | dict(initial_values or {}),
        prefill=prefill,
        config=config,
        scheduler=scheduler,
    )


# ---------------------------------------------------------------------------
# Registration
# ---------------------------------------------------------------------------


def registration_rules() -> dict[str, ValidationConfig]:
    """Account fields plus the optional corps-member section."""
    return {
        "name": ValidationConfig(required=True, kind=FieldKind.NAME, label="Name"),
        "email": ValidationConfig(required=True, kind=FieldKind.EMAIL, debounce_ms=500),
        "password": ValidationConfig(required=True, kind=FieldKind.PASSWORD),
        "confirmPassword": ValidationConfig(
            required=True, kind=FieldKind.CONFIRM_PASSWORD, label="Confirm Password"
        ),
        "phone": ValidationConfig(kind=FieldKind.PHONE, debounce_ms=500),
        "isCorpsMember": ValidationConfig(
            custom_validator=one_of("yes", "no"), real_time=False, label="Corps Member"
        ),
        "gender": ValidationConfig(custom_validator=one_of("male", "female")),
        "stateCode": ValidationConfig(kind=FieldKind.STATE_CODE, label="State Code"),
        "batch": ValidationConfig(kind=FieldKind.BATCH),
        "stream": ValidationConfig(kind=FieldKind.STREAM),
        "callUpNumber": ValidationConfig(kind=FieldKind.CALL_UP_NUMBER, label="Call-up Number"),
        "institution": ValidationConfig(max_length=100),
        "course": ValidationConfig(max_length=100),
    }


def _corps_member_branch(values: Mapping[str, str]) -> frozenset[str]:
    if (values.get("isCorpsMember") or "").lower() == "yes":
        return _NYSC_FIELDS
    return frozenset()


def registration_wizard(
    *,
    initial_values: Mapping[str, str] | None = None,
    prefill: PrefillSource | None = None,
    config: FormConfig | None = None,
    scheduler: DebounceScheduler | None = None,
) -> WizardController:
    """Account details, then profile with the corps-member fields as a branch."""
    form = _form(registration_rules(), initial_values, prefill, config, scheduler)
    return WizardController(
        form,
        [
            StepDescriptor(
                "Account",
                required_fields={"name", "email", "password", "confirmPassword"},
            ),
            StepDescriptor(
                "Profile",
                branch_fields=_NYSC_FIELDS,
                branch_predicate=_corps_member_branch,
            ),
        ],
    )


# ---------------------------------------------------------------------------
# Password reset
# ---------------------------------------------------------------------------


def password_reset_rules() -> dict[str, ValidationConfig]:
    return {
        "email": ValidationConfig(required=True, kind=FieldKind.EMAIL, debounce_ms=500),
        "otp": ValidationConfig(
            required=True,
            min_length=6,
            max_length=6,
            pattern=r"^\d{6}$",
            label="Verification Code",
        ),
        "newPassword": ValidationConfig(required=True, kind=FieldKind.PASSWORD, label="New Password"),
        "confirmPassword": ValidationConfig(
            required=True,
            kind=FieldKind.CONFIRM_PASSWORD,
            match_field="newPassword",
            label="Confirm Password",
        ),
    }


def password_reset_wizard(
    *,
    initial_values: Mapping[str, str] | None = None,
    prefill: PrefillSource | None = None,
    config: FormConfig | None = None,
    scheduler: DebounceScheduler | None = None,
) -> WizardController:
    """Email, then the emailed code, then the new password."""
    form = _form(password_reset_rules(), initial_values, prefill, config, scheduler)
    return WizardController(
        form,
        [
            StepDescriptor("Email", required_fields={"email"}),
            StepDescriptor("Verification", required_fields={"otp"}),
            StepDescriptor("New Password", required_fields={"newPassword", "confirmPassword"}),
        ],
    )


# ---------------------------------------------------------------------------
# Accommodation booking
# ---------------------------------------------------------------------------


def booking_rules() -> dict[str, ValidationConfig]:
    """Booking fields. ``stateCode`` here is the corps member's code
    (``FC/24A/1234``), not a two-letter state, hence the explicit kind."""
    return {
        "fullName": ValidationConfig(required=True, kind=FieldKind.NAME, label="Full Name"),
        "phone": ValidationConfig(required=True, kind=FieldKind.PHONE, label="Phone Number"),
        "stateCode": ValidationConfig(
            required=True,
            min_length=5,
            pattern=r"^[A-Za-z]{2}/\d{2}[A-Ca-c]/\d{4,5}$",
            label="NYSC State Code",
        ),
        "emergencyContact": ValidationConfig(
            required=True, kind=FieldKind.PHONE, label="Emergency Contact"
        ),
        "checkInDate": ValidationConfig(
            required=True, custom_validator=iso_date, real_time=False, label="Check-in Date"
        ),
        "checkOutDate": ValidationConfig(
            required=True, custom_validator=iso_date, real_time=False, label="Check-out Date"
        ),
        "specialRequests": ValidationConfig(max_length=500, label="Special Requests"),
        "paymentMethod": ValidationConfig(
            required=True,
            custom_validator=one_of(PAYMENT_TRANSFER, PAYMENT_CARD),
            label="Payment Method",
        ),
        **_card_rules(),
    }


def booking_wizard(
    *,
    initial_values: Mapping[str, str] | None = None,
    prefill: PrefillSource | None = None,
    config: FormConfig | None = None,
    scheduler: DebounceScheduler | None = None,
) -> WizardController:
    """Personal details, dates, payment, confirmation."""
    form = _form(
        booking_rules(),
        initial_values,
        prefill,
        config or FormConfig(validate_on_change=False),
        scheduler,
    )
    return WizardController(
        form,
        [
            StepDescriptor(
                "Personal Details",
                required_fields={"fullName", "phone", "stateCode", "emergencyContact"},
            ),
            StepDescriptor(
                "Booking Dates",
                required_fields={"checkInDate", "checkOutDate"},
                cross_field_check=dates_in_order(
                    "checkInDate", "checkOutDate", "Check-out date must be after check-in date"
                ),
                cross_field_fields=("checkInDate", "checkOutDate"),
            ),
            StepDescriptor(
                "Payment",
                required_fields={"paymentMethod"},
                branch_fields=_CARD_FIELDS | _TRANSFER_FIELDS,
                branch_predicate=_payment_branch,
            ),
            StepDescriptor("Confirmation"),
        ],
    )


# ---------------------------------------------------------------------------
# Shop checkout
# ---------------------------------------------------------------------------


def checkout_rules() -> dict[str, ValidationConfig]:
    return {
        "fullName": ValidationConfig(required=True, kind=FieldKind.NAME, label="Full Name"),
        "phone": ValidationConfig(required=True, kind=FieldKind.PHONE, label="Phone Number"),
        "address": ValidationConfig(required=True, min_length=5, max_length=200),
        "city": ValidationConfig(required=True, max_length=100),
        "state": ValidationConfig(required=True, max_length=100),
        "paymentMethod": ValidationConfig(
            required=True,
            custom_validator=one_of(PAYMENT_TRANSFER, PAYMENT_CARD, PAYMENT_DELIVERY),
            label="Payment Method",
        ),
        **_card_rules(),
    }


def checkout_wizard(
    *,
    initial_values: Mapping[str, str] | None = None,
    prefill: PrefillSource | None = None,
    config: FormConfig | None = None,
    scheduler: DebounceScheduler | None = None,
) -> WizardController:
    """Shipping, payment (transfer, card, or pay on delivery), review."""
    form = _form(checkout_rules(), initial_values, prefill, config, scheduler)
    return WizardController(
        form,
        [
            StepDescriptor(
                "Shipping",
                required_fields={"fullName", "phone", "address", "city", "state"},
            ),
            StepDescriptor(
                "Payment",
                required_fields={"paymentMethod"},
                branch_fields=_CARD_FIELDS | _TRANSFER_FIELDS,
                branch_predicate=_payment_branch,
            ),
            StepDescriptor("Review"),
        ],
    )
