"""
GullyCric Utility Functions

This package contains common utility functions for:
- Input validation (email, phone, OTP, names, passwords)
- Logging setup for command-line entry points
"""

from .logging import configure_logging
from .validators import (
    validate_email,
    validate_name,
    validate_otp,
    validate_password,
    validate_phone_number,
    validate_strong_password,
)

__all__ = [
    "configure_logging",
    "validate_email",
    "validate_name",
    "validate_otp",
    "validate_password",
    "validate_phone_number",
    "validate_strong_password",
]
