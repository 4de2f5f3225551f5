"""Specialized field validators.

Each validator is a pure function with the signature::

    def validate_x(value: str) -> ValidationResult

Validators never raise and never touch form state. The confirm-password
validator is the only one that looks at a sibling value, which the
caller passes in explicitly.

Messages are ordered: the first error is the most fundamental one.
"""

import re
from collections.abc import Callable
from datetime import date

from stepform.validation.result import Strength, ValidationResult

# ---------------------------------------------------------------------------
# Email
# ---------------------------------------------------------------------------

# Structure only, not deliverability
_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_DOMAIN_RE = re.compile(
    r"^[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?"
    r"(\.[a-zA-Z0-9]([a-zA-Z0-9-]{0,61}[a-zA-Z0-9])?)*$"
)

MAX_EMAIL_LENGTH = 254
MAX_LOCAL_PART_LENGTH = 64

DISPOSABLE_DOMAINS: tuple[str, ...] = (
    "tempmail.org",
    "10minutemail.com",
    "guerrillamail.com",
)


def validate_email(value: str) -> ValidationResult:
    """Required email address with format, length, and domain checks.

    Disposable-mail domains produce a warning, not an error.
    """
    if not value or not value.strip():
        return ValidationResult.fail("Email is required")

    email = value.strip().lower()
    errors: list[str] = []
    warnings: list[str] = []

    if not _EMAIL_RE.match(email):
        errors.append("Please enter a valid email address")

    if len(email) > MAX_EMAIL_LENGTH:
        errors.append("Email address is too long")

    local_part, _, domain = email.partition("@")
    if len(local_part) > MAX_LOCAL_PART_LENGTH:
        errors.append("Email address format is invalid")

    if domain:
        if not _DOMAIN_RE.match(domain):
            errors.append("Email domain is invalid")
        if any(disposable in domain for disposable in DISPOSABLE_DOMAINS):
            warnings.append("Temporary email addresses may not receive important notifications")

    return ValidationResult.from_messages(errors, warnings)


# ---------------------------------------------------------------------------
# Password
# ---------------------------------------------------------------------------

MIN_PASSWORD_LENGTH = 8
STRONG_PASSWORD_LENGTH = 12

_LOWER_RE = re.compile(r"[a-z]")
_UPPER_RE = re.compile(r"[A-Z]")
_DIGIT_RE = re.compile(r"\d")
_SPECIAL_RE = re.compile(r"""[!@#$%^&*()_+\-=\[\]{};':"\\|,.<>/?]""")

_TRIVIAL_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^(.)\1+$"),  # one repeated character
    re.compile(
        r"^(012|123|234|345|456|567|678|789|890|abc|bcd|cde|def|efg|fgh|ghi|hij|ijk"
        r"|jkl|klm|lmn|mno|nop|opq|pqr|qrs|rst|stu|tuv|uvw|vwx|wxy|xyz)",
        re.IGNORECASE,
    ),
    re.compile(r"^(password|123456|qwerty|admin|login|welcome)", re.IGNORECASE),
)

TRIVIAL_PENALTY = 2


def password_strength(score: int) -> Strength:
    """Map a 0-6 point score to a strength label."""
    if score >= 5:
        return Strength.STRONG
    if score >= 3:
        return Strength.MEDIUM
    return Strength.WEAK


def is_trivial_password(password: str) -> bool:
    """True for repeated characters, sequential runs, and common literals."""
    return any(pattern.search(password) for pattern in _TRIVIAL_PATTERNS)


def validate_password(value: str) -> ValidationResult:
    """Required password with a 0-6 point strength score.

    One point each for length >= 8, length >= 12, lowercase, uppercase,
    digit, and special character. Missing lowercase/uppercase/digit is an
    error; a missing special character is only a warning. Trivial
    passwords are an error and lose two points (floored at zero).
    """
    if not value:
        return ValidationResult.fail("Password is required")

    errors: list[str] = []
    warnings: list[str] = []
    score = 0

    if len(value) < MIN_PASSWORD_LENGTH:
        errors.append(f"Password must be at least {MIN_PASSWORD_LENGTH} characters long")
    else:
        score += 1
    if len(value) >= STRONG_PASSWORD_LENGTH:
        score += 1

    for pattern, message in (
        (_LOWER_RE, "Password must contain at least one lowercase letter"),
        (_UPPER_RE, "Password must contain at least one uppercase letter"),
        (_DIGIT_RE, "Password must contain at least one number"),
    ):
        if pattern.search(value):
            score += 1
        else:
            errors.append(message)

    if _SPECIAL_RE.search(value):
        score += 1
    else:
        warnings.append("Consider adding special characters for stronger security")

    if is_trivial_password(value):
        errors.append("Password is too common or predictable")
        score = max(0, score - TRIVIAL_PENALTY)

    return ValidationResult.from_messages(errors, warnings, strength=password_strength(score))


def validate_confirm_password(password: str, confirmation: str) -> ValidationResult:
    """Confirmation must be non-empty and equal to *password*."""
    if not confirmation:
        return ValidationResult.fail("Password confirmation is required")
    if password != confirmation:
        return ValidationResult.fail("Passwords do not match")
    return ValidationResult.ok()


# ---------------------------------------------------------------------------
# Phone
# ---------------------------------------------------------------------------

_PHONE_SEPARATORS = re.compile(r"[\s\-()]")
_NIGERIAN_PHONE_RE = re.compile(r"^(\+234|234|0)?[7-9][01]\d{8}$")
_INTERNATIONAL_PHONE_RE = re.compile(r"^\+?[1-9]\d{7,14}$")

MIN_PHONE_LENGTH = 10
MAX_PHONE_LENGTH = 15


def validate_phone(value: str, country: str = "NG") -> ValidationResult:
    """Required phone number, checked after stripping separators.

    ``country="NG"`` (the default) expects a Nigerian mobile number;
    any other country uses a generic international pattern.
    """
    if not value or not value.strip():
        return ValidationResult.fail("Phone number is required")

    phone = _PHONE_SEPARATORS.sub("", value)
    errors: list[str] = []

    if country.upper() == "NG":
        if not _NIGERIAN_PHONE_RE.match(phone):
            errors.append("Please enter a valid Nigerian phone number")
    elif not _INTERNATIONAL_PHONE_RE.match(phone):
        errors.append("Please enter a valid phone number")

    if len(phone) < MIN_PHONE_LENGTH:
        errors.append("Phone number is too short")
    elif len(phone) > MAX_PHONE_LENGTH:
        errors.append("Phone number is too long")

    return ValidationResult.from_messages(errors)


# ---------------------------------------------------------------------------
# Name
# ---------------------------------------------------------------------------

_NAME_CHARS_RE = re.compile(r"^[a-zA-Z\s\-'.]+$")
_DIGITS_ONLY_RE = re.compile(r"^\d+$")


def validate_name(value: str, label: str = "Name") -> ValidationResult:
    """Required personal name, 2-50 characters of letters and punctuation."""
    if not value or not value.strip():
        return ValidationResult.fail(f"{label} is required")

    name = value.strip()
    errors: list[str] = []
    warnings: list[str] = []

    if len(name) < 2:
        errors.append(f"{label} must be at least 2 characters long")
    if len(name) > 50:
        errors.append(f"{label} must be at most 50 characters")
    if not _NAME_CHARS_RE.match(name):
        errors.append(f"{label} can only contain letters, spaces, hyphens, and apostrophes")
    if _DIGITS_ONLY_RE.match(name):
        errors.append(f"{label} cannot be only numbers")
    if len(name) < 3:
        warnings.append(f"{label} seems quite short")

    return ValidationResult.from_messages(errors, warnings)


# ---------------------------------------------------------------------------
# Deployment record codes
# ---------------------------------------------------------------------------

# NYSC/YEAR/BATCH/STATE/STREAM/NUMBER, e.g. NYSC/2023/B/LA/A/12345
_CALL_UP_RE = re.compile(r"^NYSC/\d{4}/[ABC]/[A-Z]{2}/[ABC]/\d{4,6}$")
_BATCH_RE = re.compile(r"^(\d{4})\s+BATCH\s+[ABC]$")

FIRST_BATCH_YEAR = 1973

STATE_CODES: frozenset[str] = frozenset({
    "AB", "AD", "AK", "AN", "BA", "BY", "BN", "BO", "CR", "DT",
    "EB", "ED", "EK", "EN", "FC", "GM", "IM", "JG", "KD", "KN",
    "KT", "KB", "KG", "KW", "LA", "NA", "NI", "OG", "ON", "OS",
    "OY", "PL", "RI", "SO", "TA", "YO", "ZA",
})  # fmt: skip

STREAMS: frozenset[str] = frozenset({"A", "B", "C"})


def validate_call_up_number(value: str) -> ValidationResult:
    """Required call-up number in ``NYSC/YYYY/B/SS/S/NNNN`` form."""
    if not value or not value.strip():
        return ValidationResult.fail("Call-up number is required")

    call_up = value.strip().upper()
    errors: list[str] = []

    if not _CALL_UP_RE.match(call_up):
        errors.append("Call-up number format should be: NYSC/YEAR/BATCH/STATE/STREAM/NUMBER")
        errors.append("Example: NYSC/2023/B/LA/A/12345")
    if not 15 <= len(call_up) <= 25:
        errors.append("Call-up number length is invalid")

    return ValidationResult.from_messages(errors)


def validate_batch(value: str, *, current_year: int | None = None) -> ValidationResult:
    """Required batch label such as ``2023 Batch B``.

    The year must fall between the first service year and next year.
    """
    if not value or not value.strip():
        return ValidationResult.fail("Batch is required")

    batch = value.strip().upper()
    errors: list[str] = []

    match = _BATCH_RE.match(batch)
    if match is None:
        errors.append("Batch format should be: YYYY Batch [A|B|C]")
        errors.append("Example: 2023 Batch B")

    year_digits = batch[:4]
    if year_digits.isdigit():
        latest = (current_year or date.today().year) + 1
        if not FIRST_BATCH_YEAR <= int(year_digits) <= latest:
            errors.append("Batch year seems invalid")

    return ValidationResult.from_messages(errors)


def validate_state_code(value: str) -> ValidationResult:
    """Required two-letter state code from the fixed allow-list."""
    if not value or not value.strip():
        return ValidationResult.fail("State code is required")

    code = value.strip().upper()
    errors: list[str] = []

    if code not in STATE_CODES:
        errors.append("Please select a valid Nigerian state code")
    if len(code) != 2:
        errors.append("State code must be exactly 2 characters")

    return ValidationResult.from_messages(errors)


def validate_stream(value: str) -> ValidationResult:
    """Required stream letter: A, B, or C."""
    if not value or not value.strip():
        return ValidationResult.fail("Stream is required")
    if value.strip().upper() not in STREAMS:
        return ValidationResult.fail("Stream must be A, B, or C")
    return ValidationResult.ok()


# ---------------------------------------------------------------------------
# Custom validator factories (for ValidationConfig.custom_validator)
# ---------------------------------------------------------------------------


def one_of(*choices: str, case_sensitive: bool = False) -> Callable[[str], ValidationResult]:
    """Value must be one of *choices*."""
    allowed = frozenset(choices if case_sensitive else (choice.lower() for choice in choices))

    def check(value: str) -> ValidationResult:
        candidate = value if case_sensitive else value.lower()
        if candidate not in allowed:
            return ValidationResult.fail(f"Must be one of: {', '.join(choices)}")
        return ValidationResult.ok()

    return check


_ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_iso_date(value: str) -> date | None:
    """``YYYY-MM-DD`` to a date, or None when it is not a real date."""
    try:
        return date.fromisoformat(value.strip())
    except ValueError:
        return None


def iso_date(value: str) -> ValidationResult:
    """Value must be a calendar date written as ``YYYY-MM-DD``."""
    if not _ISO_DATE_RE.match(value.strip()) or parse_iso_date(value) is None:
        return ValidationResult.fail("Enter a valid date (YYYY-MM-DD)")
    return ValidationResult.ok()

