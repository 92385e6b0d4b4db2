"""Field validators shared by the request schemas (CPF, phone, password, free text)."""
import re
from datetime import datetime, timezone
from typing import List, Optional

_NON_DIGITS = re.compile(r"\D")
_REPEATED_DIGITS = re.compile(r"^(\d)\1{10}$")
_REPEATED_CHARS = re.compile(r"(.)\1{2,}")
_OBVIOUS_SEQUENCES = re.compile(r"123|abc|qwe", re.IGNORECASE)
_SPECIAL_CHARS = re.compile(r"[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?]")

# Upper bound for free-text clinical notes, enforced by the request schemas
MAX_TEXT_LENGTH = 1000


def only_digits(value: str) -> str:
    return _NON_DIGITS.sub("", value or "")


def normalize_cpf(cpf: str) -> str:
    """Strip punctuation: ``529.982.247-25`` -> ``52998224725``."""
    return only_digits(cpf)


def _cpf_check_digit(digits: str) -> int:
    weight = len(digits) + 1
    total = sum(int(d) * (weight - i) for i, d in enumerate(digits))
    remainder = (total * 10) % 11
    return 0 if remainder == 10 else remainder


def validate_cpf(cpf: str) -> bool:
    """Brazilian CPF: 11 digits, not all equal, both check digits valid."""
    digits = normalize_cpf(cpf)
    if len(digits) != 11 or _REPEATED_DIGITS.match(digits):
        return False
    if _cpf_check_digit(digits[:9]) != int(digits[9]):
        return False
    return _cpf_check_digit(digits[:10]) == int(digits[10])


def validate_phone(phone: str) -> bool:
    """Brazilian landline (10 digits) or mobile (11 digits) including area code."""
    return len(only_digits(phone)) in (10, 11)


def password_feedback(password: str) -> List[str]:
    """Return the list of strength problems; an empty list means acceptable."""
    if not password:
        return ["Password is required"]
    problems = []
    if len(password) < 8:
        problems.append("Password must be at least 8 characters long")
    if not re.search(r"[a-z]", password):
        problems.append("Password must contain a lowercase letter")
    if not re.search(r"[A-Z]", password):
        problems.append("Password must contain an uppercase letter")
    if not re.search(r"\d", password):
        problems.append("Password must contain a digit")
    if not _SPECIAL_CHARS.search(password):
        problems.append("Password must contain a special character")
    if _REPEATED_CHARS.search(password):
        problems.append("Avoid repeating the same character three times in a row")
    if _OBVIOUS_SEQUENCES.search(password):
        problems.append("Avoid obvious sequences such as 123 or abc")
    return problems


def sanitize_text(value: str) -> str:
    """Trim and strip markup fragments from free-text clinical notes."""
    if not value:
        return ""
    cleaned = value.strip()
    cleaned = re.sub(r"[<>]", "", cleaned)
    cleaned = re.sub(r"javascript:", "", cleaned, flags=re.IGNORECASE)
    cleaned = re.sub(r"on\w+=", "", cleaned, flags=re.IGNORECASE)
    return cleaned


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Timestamps are stored as naive UTC; convert aware values on the way in."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
