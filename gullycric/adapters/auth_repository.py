"""Authentication repository over the mock backend and the stored session."""

from typing import Callable, Optional, TypeVar

from loguru import logger

from ..domain.common.exceptions import AuthException
from ..domain.common.result import AuthFailures, Failure, Result
from ..domain.models.user import AuthSession, UserDomain
from ..domain.repositories.auth_repository import AuthRepository
from .auth_local_datasource import AuthLocalDataSource
from .auth_mock_datasource import AuthMockDataSource
from .cricket_repository import translate_exception

T = TypeVar("T")


class AuthRepositoryImpl(AuthRepository):
    def __init__(self, remote: AuthMockDataSource, local: AuthLocalDataSource):
        self.remote = remote
        self.local = local

    def _guard(self, operation: str, action: Callable[[], Result[T]]) -> Result[T]:
        try:
            return action()
        except AuthException as e:
            logger.warning(f"🔒 {operation} rejected: {e.message}")
            if e.code == "INVALID_CREDENTIALS":
                return Result.failure(Failure.invalid_credentials(e.message))
            return Result.failure(Failure.auth(e.message, code=e.code))
        except Exception as e:
            failure = translate_exception(operation, e)
            logger.error(f"❌ Failed to {operation}: {failure.message}")
            return Result.failure(failure)

    def _signed_in(self, session: AuthSession) -> Result[UserDomain]:
        self.local.save_session(session)
        logger.info(f"🔓 Signed in as {session.user.display_name}")
        return Result.success(session.user)

    def _active_session(self) -> Optional[AuthSession]:
        """The stored session, or None. An expired session is removed."""
        session = self.local.get_session()
        if session is not None and session.is_expired():
            self.local.clear_session()
            return None
        return session

    def sign_in_with_email(self, email: str, password: str) -> Result[UserDomain]:
        return self._guard(
            "sign in",
            lambda: self._signed_in(self.remote.sign_in_with_email(email, password)),
        )

    def sign_in_with_phone(self, phone_number: str, otp: str) -> Result[UserDomain]:
        return self._guard(
            "sign in with phone",
            lambda: self._signed_in(self.remote.sign_in_with_phone(phone_number, otp)),
        )

    def send_otp(self, phone_number: str) -> Result[None]:
        def action():
            self.remote.send_otp(phone_number)
            return Result.success(None)

        return self._guard("send OTP", action)

    def verify_otp(self, phone_number: str, otp: str) -> Result[bool]:
        return self._guard(
            "verify OTP", lambda: Result.success(self.remote.verify_otp(phone_number, otp))
        )

    def sign_up_with_email(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone_number: Optional[str] = None,
    ) -> Result[UserDomain]:
        return self._guard(
            "sign up",
            lambda: self._signed_in(
                self.remote.sign_up_with_email(
                    email, password, first_name, last_name, phone_number
                )
            ),
        )

    def is_email_available(self, email: str) -> Result[bool]:
        return self._guard(
            "check email", lambda: Result.success(self.remote.is_email_available(email))
        )

    def is_phone_available(self, phone_number: str) -> Result[bool]:
        return self._guard(
            "check phone number",
            lambda: Result.success(self.remote.is_phone_available(phone_number)),
        )

    def send_password_reset_email(self, email: str) -> Result[None]:
        def action():
            self.remote.send_password_reset_email(email)
            logger.info(f"📧 Password reset email sent to {email}")
            return Result.success(None)

        return self._guard("send password reset email", action)

    def reset_password_with_token(self, token: str, new_password: str) -> Result[None]:
        def action():
            self.remote.reset_password_with_token(token, new_password)
            return Result.success(None)

        return self._guard("reset password", action)

    def change_password(
        self, current_password: str, new_password: str
    ) -> Result[None]:
        def action():
            session = self._active_session()
            if session is None:
                return Result.failure(AuthFailures.no_tokens_found())
            self.remote.change_password(session.user.email, current_password, new_password)
            logger.info("🔑 Password changed")
            return Result.success(None)

        return self._guard("change password", action)

    def get_current_user(self) -> Result[Optional[UserDomain]]:
        def action():
            session = self.local.get_session()
            if session is None:
                return Result.success(None)
            if session.is_expired():
                self.local.clear_session()
                return Result.failure(AuthFailures.session_expired())
            return Result.success(session.user)

        return self._guard("get current user", action)

    def is_authenticated(self) -> Result[bool]:
        return self._guard(
            "check authentication",
            lambda: Result.success(self._active_session() is not None),
        )

    def sign_out(self) -> Result[None]:
        def action():
            self.local.clear_session()
            logger.info("👋 Signed out")
            return Result.success(None)

        return self._guard("sign out", action)

    def refresh_token(self) -> Result[AuthSession]:
        def action():
            session = self.local.get_session()
            if session is None:
                return Result.failure(AuthFailures.no_tokens_found())
            refreshed = self.remote.refresh_session(session.refresh_token)
            self.local.save_session(refreshed)
            return Result.success(refreshed)

        return self._guard("refresh token", action)
