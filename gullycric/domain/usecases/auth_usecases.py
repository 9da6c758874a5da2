"""
Authentication use cases

Login, registration, password management and session queries. Every use
case validates its input before touching the repository; emails are
trimmed and lower-cased before delegation.
"""

from typing import Optional

from loguru import logger
from pydantic import BaseModel

from ...config.settings import AuthConfig
from ...utils.validators import (
    is_valid_email,
    is_valid_otp,
    is_valid_phone_number,
    password_strength,
    PasswordStrength,
    validate_name,
    validate_strong_password,
)
from ..common.result import AuthFailures, Result
from ..models.user import AuthSession, UserDomain
from ..repositories.auth_repository import AuthRepository
from .base import NoParams, UseCase


def _normalize_email(email: str) -> str:
    return email.strip().lower()


class LoginWithEmailParams(BaseModel):
    email: str
    password: str


class LoginWithEmailUseCase(UseCase[UserDomain, LoginWithEmailParams]):
    def __init__(self, repository: AuthRepository, auth_config: AuthConfig = None):
        self.repository = repository
        self.auth_config = auth_config or AuthConfig()

    def __call__(self, params: LoginWithEmailParams) -> Result[UserDomain]:
        if not is_valid_email(params.email):
            return Result.failure(AuthFailures.invalid_email())
        if not params.password:
            return self.invalid("Password cannot be empty")
        min_length = self.auth_config.min_login_password_length
        if len(params.password) < min_length:
            return self.invalid(f"Password must be at least {min_length} characters")

        email = _normalize_email(params.email)
        logger.debug(f"Signing in {email}")
        return self.repository.sign_in_with_email(email, params.password)


class LoginWithPhoneParams(BaseModel):
    phone_number: str
    otp: str


class LoginWithPhoneUseCase(UseCase[UserDomain, LoginWithPhoneParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: LoginWithPhoneParams) -> Result[UserDomain]:
        if not is_valid_phone_number(params.phone_number):
            return Result.failure(AuthFailures.invalid_phone_number())
        if not is_valid_otp(params.otp):
            return self.invalid("OTP must be 6 digits")
        return self.repository.sign_in_with_phone(
            params.phone_number.strip(), params.otp.strip()
        )


class SendOtpParams(BaseModel):
    phone_number: str


class SendOtpUseCase(UseCase[None, SendOtpParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: SendOtpParams) -> Result[None]:
        if not is_valid_phone_number(params.phone_number):
            return Result.failure(AuthFailures.invalid_phone_number())
        return self.repository.send_otp(params.phone_number.strip())


class VerifyOtpParams(BaseModel):
    phone_number: str
    otp: str


class VerifyOtpUseCase(UseCase[bool, VerifyOtpParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: VerifyOtpParams) -> Result[bool]:
        if not is_valid_phone_number(params.phone_number):
            return Result.failure(AuthFailures.invalid_phone_number())
        if not is_valid_otp(params.otp):
            return self.invalid("OTP must be 6 digits")
        return self.repository.verify_otp(
            params.phone_number.strip(), params.otp.strip()
        )


class SignUpWithEmailParams(BaseModel):
    email: str
    password: str
    first_name: str
    last_name: str
    phone_number: Optional[str] = None


class SignUpWithEmailUseCase(UseCase[UserDomain, SignUpWithEmailParams]):
    """
    Register a new account.

    Availability of the email, then of the phone number, is checked through
    the repository before the account is created.
    """

    def __init__(self, repository: AuthRepository, auth_config: AuthConfig = None):
        self.repository = repository
        self.auth_config = auth_config or AuthConfig()

    def __call__(self, params: SignUpWithEmailParams) -> Result[UserDomain]:
        if not is_valid_email(params.email):
            return Result.failure(AuthFailures.invalid_email())

        error = validate_strong_password(
            params.password,
            min_length=self.auth_config.min_password_length,
            max_length=self.auth_config.max_password_length,
        )
        if error:
            return self.invalid(error, password=error)

        for value, label, field in (
            (params.first_name, "First name", "first_name"),
            (params.last_name, "Last name", "last_name"),
        ):
            error = validate_name(value, label=label)
            if error:
                return self.invalid(error, **{field: error})

        phone = params.phone_number.strip() if params.phone_number else None
        if phone and not is_valid_phone_number(phone):
            return Result.failure(AuthFailures.invalid_phone_number())

        email = _normalize_email(params.email)
        email_available = self.repository.is_email_available(email)
        if email_available.is_failure:
            return Result.failure(email_available.error)
        if not email_available.value:
            return Result.failure(AuthFailures.email_already_exists())

        if phone:
            phone_available = self.repository.is_phone_available(phone)
            if phone_available.is_failure:
                return Result.failure(phone_available.error)
            if not phone_available.value:
                return Result.failure(AuthFailures.phone_already_exists())

        logger.info(f"👤 Registering {email}")
        return self.repository.sign_up_with_email(
            email=email,
            password=params.password,
            first_name=params.first_name.strip(),
            last_name=params.last_name.strip(),
            phone_number=phone,
        )


class EmailParams(BaseModel):
    email: str


class CheckEmailAvailabilityUseCase(UseCase[bool, EmailParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: EmailParams) -> Result[bool]:
        if not is_valid_email(params.email):
            return Result.failure(AuthFailures.invalid_email())
        return self.repository.is_email_available(_normalize_email(params.email))


class CheckPhoneAvailabilityUseCase(UseCase[bool, SendOtpParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: SendOtpParams) -> Result[bool]:
        if not is_valid_phone_number(params.phone_number):
            return Result.failure(AuthFailures.invalid_phone_number())
        return self.repository.is_phone_available(params.phone_number.strip())


class SendPasswordResetEmailUseCase(UseCase[None, EmailParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: EmailParams) -> Result[None]:
        if not is_valid_email(params.email):
            return Result.failure(AuthFailures.invalid_email())
        return self.repository.send_password_reset_email(_normalize_email(params.email))


class ResetPasswordWithTokenParams(BaseModel):
    token: str
    new_password: str


class ResetPasswordWithTokenUseCase(UseCase[None, ResetPasswordWithTokenParams]):
    def __init__(self, repository: AuthRepository, auth_config: AuthConfig = None):
        self.repository = repository
        self.auth_config = auth_config or AuthConfig()

    def __call__(self, params: ResetPasswordWithTokenParams) -> Result[None]:
        if not params.token.strip():
            return self.invalid("Reset token is required")
        error = validate_strong_password(
            params.new_password,
            min_length=self.auth_config.min_password_length,
            max_length=self.auth_config.max_password_length,
        )
        if error:
            return self.invalid(error)
        return self.repository.reset_password_with_token(
            params.token.strip(), params.new_password
        )


class ChangePasswordParams(BaseModel):
    current_password: str
    new_password: str


class ChangePasswordUseCase(UseCase[None, ChangePasswordParams]):
    def __init__(self, repository: AuthRepository, auth_config: AuthConfig = None):
        self.repository = repository
        self.auth_config = auth_config or AuthConfig()

    def __call__(self, params: ChangePasswordParams) -> Result[None]:
        if not params.current_password:
            return self.invalid("Current password is required")
        error = validate_strong_password(
            params.new_password,
            min_length=self.auth_config.min_password_length,
            max_length=self.auth_config.max_password_length,
        )
        if error:
            return self.invalid(error)
        if params.current_password == params.new_password:
            return self.invalid("New password must be different from current password")
        return self.repository.change_password(
            params.current_password, params.new_password
        )


class PasswordParams(BaseModel):
    password: str


class ValidatePasswordStrengthUseCase(UseCase[PasswordStrength, PasswordParams]):
    """Score a candidate password; never fails."""

    def __call__(self, params: PasswordParams) -> Result[PasswordStrength]:
        return Result.success(password_strength(params.password))


class GetCurrentUserUseCase(UseCase[Optional[UserDomain], NoParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[Optional[UserDomain]]:
        return self.repository.get_current_user()


class CheckAuthStatusUseCase(UseCase[bool, NoParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[bool]:
        return self.repository.is_authenticated()


class LogoutUseCase(UseCase[None, NoParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[None]:
        return self.repository.sign_out()


class RefreshTokenUseCase(UseCase[AuthSession, NoParams]):
    def __init__(self, repository: AuthRepository):
        self.repository = repository

    def __call__(self, params: NoParams = NoParams()) -> Result[AuthSession]:
        return self.repository.refresh_token()
