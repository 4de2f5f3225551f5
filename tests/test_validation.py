"""Tests for config-driven validation, kind dispatch, and batch helpers."""

import re

import pytest

from stepform.errors import ConfigurationError
from stepform.validation import (
    FieldKind,
    ValidationConfig,
    ValidationResult,
    form_errors,
    form_warnings,
    humanize,
    infer_kinds,
    is_form_valid,
    undeclared_fields,
    validate_form,
    validate_value,
    validate_with_config,
)

# ---------------------------------------------------------------------------
# ValidationResult
# ---------------------------------------------------------------------------


class TestValidationResult:
    def test_ok_is_truthy(self) -> None:
        assert ValidationResult.ok()
        assert not ValidationResult.fail("nope")

    def test_from_messages_derives_validity(self) -> None:
        assert ValidationResult.from_messages([]).is_valid
        assert not ValidationResult.from_messages(["bad"]).is_valid

    def test_warnings_do_not_affect_validity(self) -> None:
        result = ValidationResult.ok(["careful"])
        assert result.is_valid
        assert result.has_warnings


# ---------------------------------------------------------------------------
# ValidationConfig
# ---------------------------------------------------------------------------


class TestValidationConfig:
    def test_pattern_string_is_compiled(self) -> None:
        config = ValidationConfig(pattern=r"^\d+$")
        assert isinstance(config.pattern, re.Pattern)

    def test_compiled_pattern(self) -> None:
        compiled = re.compile(r"^[A-Z]{2}$")
        assert ValidationConfig(pattern=compiled).compiled_pattern is compiled
        assert ValidationConfig(pattern=r"^\d+$").compiled_pattern.search("123")
        assert ValidationConfig().compiled_pattern is None

    def test_min_exceeds_max(self) -> None:
        with pytest.raises(ConfigurationError, match="exceeds"):
            ValidationConfig(min_length=5, max_length=2)

    def test_negative_debounce(self) -> None:
        with pytest.raises(ConfigurationError):
            ValidationConfig(debounce_ms=-1)

    def test_delay_falls_back_to_form_default(self) -> None:
        assert ValidationConfig().delay_ms(300) == 300
        assert ValidationConfig(debounce_ms=0).delay_ms(300) == 0
        assert ValidationConfig(debounce_ms=500).delay_ms(300) == 500

    def test_secret_derived_from_kind(self) -> None:
        assert ValidationConfig(kind=FieldKind.PASSWORD).is_secret
        assert ValidationConfig(kind=FieldKind.CONFIRM_PASSWORD).is_secret
        assert not ValidationConfig().is_secret
        assert ValidationConfig(secret=True).is_secret

    def test_display_label(self) -> None:
        assert ValidationConfig().display_label("checkInDate") == "Check In Date"
        assert ValidationConfig(label="Arrival").display_label("checkInDate") == "Arrival"


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("checkInDate", "Check In Date"),
        ("call_up_number", "Call Up Number"),
        ("email", "Email"),
    ],
)
def test_humanize(name: str, expected: str) -> None:
    assert humanize(name) == expected


@pytest.mark.parametrize(
    ("name", "kind"),
    [
        ("email", FieldKind.EMAIL),
        ("userEmail", FieldKind.EMAIL),
        ("password", FieldKind.PASSWORD),
        ("confirmPassword", FieldKind.CONFIRM_PASSWORD),
        ("phoneNumber", FieldKind.PHONE),
        ("fullName", FieldKind.NAME),
        ("callUpNumber", FieldKind.CALL_UP_NUMBER),
        ("batch", FieldKind.BATCH),
        ("stateCode", FieldKind.STATE_CODE),
        ("stream", FieldKind.STREAM),
        ("city", FieldKind.TEXT),
    ],
)
def test_kind_inference(name: str, kind: FieldKind) -> None:
    assert FieldKind.infer(name) is kind


# ---------------------------------------------------------------------------
# Generic validator
# ---------------------------------------------------------------------------


class TestGeneric:
    def test_required_empty(self) -> None:
        result = validate_with_config("", ValidationConfig(required=True), "City")
        assert result.errors == ("City is required",)

    def test_optional_empty_skips_other_checks(self) -> None:
        config = ValidationConfig(min_length=3, pattern=r"^\d+$")
        assert validate_with_config("  ", config, "Code").is_valid

    def test_min_length(self) -> None:
        result = validate_with_config("ab", ValidationConfig(min_length=3), "Code")
        assert result.errors == ("Code must be at least 3 characters long",)

    def test_max_length(self) -> None:
        result = validate_with_config("abcdef", ValidationConfig(max_length=5), "Code")
        assert result.errors == ("Code must be at most 5 characters",)

    def test_lengths_compare_trimmed_value(self) -> None:
        assert validate_with_config("  abc  ", ValidationConfig(max_length=3), "Code").is_valid

    def test_pattern(self) -> None:
        result = validate_with_config("12a", ValidationConfig(pattern=r"^\d+$"), "OTP")
        assert result.errors == ("OTP format is invalid",)

    def test_simultaneous_violations_all_reported(self) -> None:
        config = ValidationConfig(min_length=5, pattern=r"^\d+$")
        result = validate_with_config("ab", config, "OTP")
        assert result.errors == ("OTP must be at least 5 characters long", "OTP format is invalid")

    def test_custom_validator_merged(self) -> None:
        def custom(value: str) -> ValidationResult:
            return ValidationResult.from_messages(["no spaces"], ["odd"])

        config = ValidationConfig(max_length=2, custom_validator=custom)
        result = validate_with_config("abc", config, "Tag")
        assert result.errors == ("Tag must be at most 2 characters", "no spaces")
        assert result.warnings == ("odd",)

    def test_custom_warning_only(self) -> None:
        config = ValidationConfig(custom_validator=lambda value: ValidationResult.ok(["hmm"]))
        result = validate_with_config("x", config, "Tag")
        assert result.is_valid
        assert result.warnings == ("hmm",)


# ---------------------------------------------------------------------------
# Dispatch
# ---------------------------------------------------------------------------


class TestDispatch:
    def test_kind_selects_validator(self) -> None:
        config = ValidationConfig(required=True, kind=FieldKind.EMAIL)
        assert validate_value("contact", "nope", config).errors[0] == (
            "Please enter a valid email address"
        )

    def test_text_uses_generic(self) -> None:
        result = validate_value("city", "", ValidationConfig(required=True))
        assert result.errors == ("City is required",)

    def test_optional_specialized_field_accepts_empty(self) -> None:
        assert validate_value("phone", "", ValidationConfig(kind=FieldKind.PHONE)).is_valid

    def test_required_specialized_field_rejects_empty(self) -> None:
        config = ValidationConfig(required=True, kind=FieldKind.PHONE)
        assert validate_value("phone", "", config).errors == ("Phone number is required",)

    def test_name_kind_uses_label(self) -> None:
        config = ValidationConfig(required=True, kind=FieldKind.NAME)
        assert validate_value("fullName", "", config).errors == ("Full Name is required",)

    def test_confirm_reads_match_field(self) -> None:
        config = ValidationConfig(
            required=True, kind=FieldKind.CONFIRM_PASSWORD, match_field="newPassword"
        )
        values = {"newPassword": "Xk9#mPq2", "confirm": "Xk9#mPq2"}
        assert validate_value("confirm", "Xk9#mPq2", config, values).is_valid
        assert validate_value("confirm", "other", config, values).errors == (
            "Passwords do not match",
        )

    def test_phone_country(self) -> None:
        config = ValidationConfig(kind=FieldKind.PHONE, country="US")
        assert validate_value("phone", "+14155552671", config).is_valid


class TestValidateForm:
    RULES = {
        "email": ValidationConfig(required=True, kind=FieldKind.EMAIL),
        "city": ValidationConfig(required=True),
        "nickname": ValidationConfig(),
    }

    def test_missing_values_treated_as_empty(self) -> None:
        results = validate_form({}, self.RULES)
        assert set(results) == {"email", "city", "nickname"}
        assert not results["email"].is_valid
        assert not results["city"].is_valid
        assert results["nickname"].is_valid

    def test_helpers(self) -> None:
        results = validate_form({"email": "a@tempmail.org", "city": ""}, self.RULES)
        assert not is_form_valid(results)
        assert form_errors(results) == ["City is required"]
        assert form_warnings(results) == [
            "Temporary email addresses may not receive important notifications"
        ]

    def test_all_valid(self) -> None:
        results = validate_form({"email": "a@b.co", "city": "Lagos"}, self.RULES)
        assert is_form_valid(results)

    def test_undeclared_fields(self) -> None:
        assert undeclared_fields(self.RULES, ["email", "zip", "country"]) == ["zip", "country"]


def test_infer_kinds_only_touches_text() -> None:
    rules = {
        "email": ValidationConfig(required=True),
        "username": ValidationConfig(kind=FieldKind.TEXT, label="Handle"),
        "contact": ValidationConfig(kind=FieldKind.PHONE),
    }
    inferred = infer_kinds(rules)
    assert inferred["email"].kind is FieldKind.EMAIL
    assert inferred["email"].required
    assert inferred["username"].kind is FieldKind.NAME
    assert inferred["username"].label == "Handle"
    assert inferred["contact"].kind is FieldKind.PHONE
    assert rules["email"].kind is FieldKind.TEXT
