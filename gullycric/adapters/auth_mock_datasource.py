"""
Mock authentication backend

Keeps registered users in memory, seeded with a demo account. Every phone
number accepts the fixed demo OTP. Rejections raise AuthException with a
code the repository maps onto auth failures.
"""

import uuid
from datetime import datetime, timedelta
from typing import Dict, Optional

from loguru import logger

from ..domain.common.exceptions import AuthException, NotFoundException
from ..domain.models.enums import UserRole
from ..domain.models.user import AuthSession, UserDomain

DEMO_EMAIL = "demo@gullycric.com"
DEMO_PASSWORD = "password123"
DEMO_PHONE = "+1234567890"
DEMO_OTP = "123456"


def _token(prefix: str) -> str:
    return f"{prefix}_{uuid.uuid4().hex}"


class AuthMockDataSource:
    def __init__(self, session_hours: int = 24):
        self.session_hours = session_hours
        self.users: Dict[str, UserDomain] = {}
        self.passwords: Dict[str, str] = {}
        self.refresh_tokens: Dict[str, str] = {}
        self.reset_tokens: Dict[str, str] = {}
        self.pending_otps: Dict[str, str] = {}

        self._register(
            UserDomain(
                id="user_001",
                email=DEMO_EMAIL,
                first_name="Demo",
                last_name="User",
                phone_number=DEMO_PHONE,
                is_email_verified=True,
                is_phone_verified=True,
                role=UserRole.USER,
            ),
            DEMO_PASSWORD,
        )

    def _register(self, user: UserDomain, password: Optional[str]) -> UserDomain:
        self.users[user.email] = user
        if password is not None:
            self.passwords[user.email] = password
        return user

    def _session(self, user: UserDomain) -> AuthSession:
        session = AuthSession(
            user=user,
            access_token=_token("access"),
            refresh_token=_token("refresh"),
            expires_at=datetime.now() + timedelta(hours=self.session_hours),
        )
        self.refresh_tokens[session.refresh_token] = user.email
        return session

    def _user_by_phone(self, phone_number: str) -> Optional[UserDomain]:
        return next((u for u in self.users.values() if u.phone_number == phone_number), None)

    def sign_in_with_email(self, email: str, password: str) -> AuthSession:
        email = email.strip().lower()
        if email not in self.users or self.passwords.get(email) != password:
            raise AuthException("Invalid credentials", code="INVALID_CREDENTIALS")
        logger.debug(f"Mock sign-in for {email}")
        return self._session(self.users[email])

    def send_otp(self, phone_number: str) -> None:
        self.pending_otps[phone_number] = DEMO_OTP
        logger.debug(f"Mock OTP sent to {phone_number}")

    def verify_otp(self, phone_number: str, otp: str) -> bool:
        return otp == self.pending_otps.get(phone_number, DEMO_OTP)

    def sign_in_with_phone(self, phone_number: str, otp: str) -> AuthSession:
        if not self.verify_otp(phone_number, otp):
            raise AuthException("Invalid OTP", code="INVALID_OTP")
        self.pending_otps.pop(phone_number, None)

        user = self._user_by_phone(phone_number)
        if user is None:
            digits = phone_number.lstrip("+")
            user = self._register(
                UserDomain(
                    id=_token("user"),
                    email=f"{digits}@phone.gullycric.com",
                    phone_number=phone_number,
                    first_name="Phone",
                    last_name="User",
                    is_phone_verified=True,
                ),
                None,
            )
        return self._session(user)

    def sign_up_with_email(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone_number: Optional[str] = None,
    ) -> AuthSession:
        email = email.strip().lower()
        if not self.is_email_available(email):
            raise AuthException("Email already exists", code="EMAIL_EXISTS")
        if phone_number and not self.is_phone_available(phone_number):
            raise AuthException("Phone number already exists", code="PHONE_EXISTS")
        user = self._register(
            UserDomain(
                id=_token("user"),
                email=email,
                first_name=first_name,
                last_name=last_name,
                phone_number=phone_number,
            ),
            password,
        )
        logger.debug(f"Mock sign-up for {email}")
        return self._session(user)

    def is_email_available(self, email: str) -> bool:
        return email.strip().lower() not in self.users

    def is_phone_available(self, phone_number: str) -> bool:
        return self._user_by_phone(phone_number) is None

    def send_password_reset_email(self, email: str) -> str:
        """Issue a reset token; unknown addresses get one too so accounts can't be probed."""
        token = _token("reset")
        email = email.strip().lower()
        if email in self.users:
            self.reset_tokens[token] = email
        logger.debug(f"Mock password reset email sent to {email}")
        return token

    def reset_password_with_token(self, token: str, new_password: str) -> None:
        email = self.reset_tokens.pop(token, None)
        if email is None:
            raise AuthException("Invalid or expired reset token", code="INVALID_TOKEN")
        self.passwords[email] = new_password

    def change_password(self, email: str, current_password: str, new_password: str) -> None:
        if email not in self.users:
            raise NotFoundException(f"User {email} not found")
        if self.passwords.get(email) != current_password:
            raise AuthException("Current password is incorrect", code="INVALID_CREDENTIALS")
        self.passwords[email] = new_password

    def refresh_session(self, refresh_token: str) -> AuthSession:
        email = self.refresh_tokens.pop(refresh_token, None)
        if email is None or email not in self.users:
            raise AuthException("Refresh token is no longer valid", code="SESSION_EXPIRED")
        return self._session(self.users[email])
