"""
Input validation helpers

Each validator returns a human-readable error message, or None when the value
is acceptable. Use cases wrap the message in a validation Failure.
"""

import re
from typing import List, Optional

from pydantic import BaseModel, Field

EMAIL_PATTERN = re.compile(r"^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$")
PHONE_PATTERN = re.compile(r"^\+?[1-9]\d{1,14}$")
OTP_PATTERN = re.compile(r"^\d{6}$")
SPECIAL_CHARACTERS = re.compile(r"[!@#$%^&*(),.?\":{}|<>]")

COMMON_PASSWORDS = frozenset(
    {
        "password",
        "12345678",
        "qwerty123",
        "abc123456",
        "password123",
        "123456789",
        "qwertyuiop",
    }
)


def is_valid_email(email: Optional[str]) -> bool:
    return bool(email) and EMAIL_PATTERN.match(email.strip()) is not None


def is_valid_phone_number(phone_number: Optional[str]) -> bool:
    return bool(phone_number) and PHONE_PATTERN.match(phone_number.strip()) is not None


def is_valid_otp(otp: Optional[str]) -> bool:
    return bool(otp) and OTP_PATTERN.match(otp.strip()) is not None


def validate_email(email: Optional[str]) -> Optional[str]:
    if email is None or not email.strip():
        return "Email is required"
    if not is_valid_email(email):
        return "Please enter a valid email address"
    return None


def validate_password(password: Optional[str], min_length: int = 8) -> Optional[str]:
    if not password:
        return "Password is required"
    if len(password) < min_length:
        return f"Password must be at least {min_length} characters"
    return None


def validate_strong_password(
    password: Optional[str], min_length: int = 8, max_length: int = 128
) -> Optional[str]:
    """
    Validate a password chosen at sign up or reset.

    Requires length within bounds, upper and lower case letters, a digit and a
    special character, and rejects well-known weak passwords.
    """
    if not password:
        return "Password is required"
    if len(password) < min_length:
        return f"Password must be at least {min_length} characters long"
    if len(password) > max_length:
        return f"Password must be less than {max_length} characters"
    if not re.search(r"[A-Z]", password):
        return "Password must contain at least one uppercase letter"
    if not re.search(r"[a-z]", password):
        return "Password must contain at least one lowercase letter"
    if not re.search(r"\d", password):
        return "Password must contain at least one number"
    if not SPECIAL_CHARACTERS.search(password):
        return "Password must contain at least one special character"
    if password.lower() in COMMON_PASSWORDS:
        return "Password is too common. Please choose a stronger password"
    return None


def validate_name(name: Optional[str], label: str = "Name") -> Optional[str]:
    if name is None or not name.strip():
        return f"{label} is required"
    if len(name.strip()) < 2:
        return f"{label} must be at least 2 characters"
    return None


def validate_phone_number(phone_number: Optional[str]) -> Optional[str]:
    """Phone numbers are optional; only a present value is checked."""
    if phone_number is None or not phone_number.strip():
        return None
    if not is_valid_phone_number(phone_number):
        return "Please enter a valid phone number"
    return None


def validate_otp(otp: Optional[str]) -> Optional[str]:
    if otp is None or not otp.strip():
        return "OTP is required"
    if not is_valid_otp(otp):
        return "OTP must be 6 digits"
    return None


_SEQUENTIAL = re.compile(
    r"(012|123|234|345|456|567|678|789|890|abc|bcd|cde|def|efg|fgh|ghi|hij|ijk"
    r"|jkl|klm|lmn|mno|nop|opq|pqr|qrs|rst|stu|tuv|uvw|vwx|wxy|xyz)"
)


class PasswordStrength(BaseModel):
    level: str = Field(..., description="weak, medium or strong")
    score: int = Field(..., ge=0, le=6)
    max_score: int = 6
    feedback: List[str] = Field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return self.score >= 4


def password_strength(password: str) -> PasswordStrength:
    """Score a password from 0 to 6 with feedback for the user."""
    score = 0
    feedback: List[str] = []

    if len(password) >= 8:
        score += 1
    else:
        feedback.append("Use at least 8 characters")
    if len(password) >= 12:
        score += 1
    elif len(password) >= 8:
        feedback.append("Consider using 12+ characters for better security")

    for pattern, hint in (
        (r"[a-z]", "Include lowercase letters"),
        (r"[A-Z]", "Include uppercase letters"),
        (r"\d", "Include numbers"),
    ):
        if re.search(pattern, password):
            score += 1
        else:
            feedback.append(hint)
    if SPECIAL_CHARACTERS.search(password):
        score += 1
    else:
        feedback.append("Include special characters")

    if password.lower() in COMMON_PASSWORDS:
        score = 0
        feedback = ["This password is too common. Choose something unique."]

    if re.search(r"(.)\1{2,}", password):
        score = max(score - 1, 0)
        feedback.append("Avoid repeating characters")
    if _SEQUENTIAL.search(password.lower()):
        score = max(score - 1, 0)
        feedback.append("Avoid sequential patterns")

    if score <= 2:
        level = "weak"
    elif score <= 4:
        level = "medium"
    else:
        level = "strong"
    return PasswordStrength(level=level, score=score, feedback=feedback)
