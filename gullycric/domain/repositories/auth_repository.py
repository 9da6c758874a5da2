"""Repository interface for authentication."""

from abc import ABC, abstractmethod
from typing import Optional

from ..common.result import Result
from ..models.user import AuthSession, UserDomain


class AuthRepository(ABC):
    """
    Abstract repository for authentication and account management.

    Implementations persist the session locally so that the current user
    survives restarts.
    """

    @abstractmethod
    def sign_in_with_email(self, email: str, password: str) -> Result[UserDomain]:
        """
        Sign in with email and password.

        Returns:
            Result containing the signed-in user or an auth failure
        """
        pass

    @abstractmethod
    def sign_in_with_phone(self, phone_number: str, otp: str) -> Result[UserDomain]:
        pass

    @abstractmethod
    def send_otp(self, phone_number: str) -> Result[None]:
        pass

    @abstractmethod
    def verify_otp(self, phone_number: str, otp: str) -> Result[bool]:
        pass

    @abstractmethod
    def sign_up_with_email(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        phone_number: Optional[str] = None,
    ) -> Result[UserDomain]:
        """
        Register a new account and sign it in.

        Args:
            email: Normalized (trimmed, lower-cased) email
            password: Password already checked for strength
            first_name: Trimmed first name
            last_name: Trimmed last name
            phone_number: Optional phone number

        Returns:
            Result containing the new user or an auth failure
        """
        pass

    @abstractmethod
    def is_email_available(self, email: str) -> Result[bool]:
        pass

    @abstractmethod
    def is_phone_available(self, phone_number: str) -> Result[bool]:
        pass

    @abstractmethod
    def send_password_reset_email(self, email: str) -> Result[None]:
        pass

    @abstractmethod
    def reset_password_with_token(self, token: str, new_password: str) -> Result[None]:
        pass

    @abstractmethod
    def change_password(
        self, current_password: str, new_password: str
    ) -> Result[None]:
        pass

    @abstractmethod
    def get_current_user(self) -> Result[Optional[UserDomain]]:
        """
        Get the signed-in user from the stored session.

        Returns:
            Result containing the user, None when signed out, or a
            SESSION_EXPIRED failure
        """
        pass

    @abstractmethod
    def is_authenticated(self) -> Result[bool]:
        pass

    @abstractmethod
    def sign_out(self) -> Result[None]:
        pass

    @abstractmethod
    def refresh_token(self) -> Result[AuthSession]:
        pass
