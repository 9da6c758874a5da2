"""Result and Failure types for frontend-agnostic error handling."""

from enum import Enum
from typing import Any, Callable, Dict, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")
U = TypeVar("U")


class FailureType(str, Enum):
    """Failure taxonomy shared by every layer."""

    # Network
    NETWORK = "network"
    CONNECTION = "connection"
    TIMEOUT = "timeout"
    SERVER = "server"

    # Authentication
    AUTH = "auth"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    TOKEN_EXPIRED = "token_expired"
    INVALID_CREDENTIALS = "invalid_credentials"

    # Validation
    VALIDATION = "validation"
    REQUIRED_FIELD = "required_field"
    INVALID_FORMAT = "invalid_format"

    # Data
    DATA = "data"
    NOT_FOUND = "not_found"
    DUPLICATE = "duplicate"
    CONFLICT = "conflict"

    # Storage
    STORAGE = "storage"
    CACHE = "cache"
    DATABASE = "database"

    # Cricket
    MATCH = "match"
    INVALID_MATCH_STATE = "invalid_match_state"
    SCORE_UPDATE = "score_update"
    PLAYER = "player"
    TEAM = "team"
    INSUFFICIENT_PLAYERS = "insufficient_players"

    # Platform
    PERMISSION = "permission"
    PLATFORM = "platform"
    FILE = "file"

    CALCULATION = "calculation"


NETWORK_FAILURES = frozenset(
    {
        FailureType.NETWORK,
        FailureType.CONNECTION,
        FailureType.TIMEOUT,
        FailureType.SERVER,
    }
)
AUTH_FAILURES = frozenset(
    {
        FailureType.AUTH,
        FailureType.UNAUTHORIZED,
        FailureType.FORBIDDEN,
        FailureType.TOKEN_EXPIRED,
        FailureType.INVALID_CREDENTIALS,
    }
)
VALIDATION_FAILURES = frozenset(
    {
        FailureType.VALIDATION,
        FailureType.REQUIRED_FIELD,
        FailureType.INVALID_FORMAT,
    }
)


def default_code(failure_type: FailureType) -> str:
    """Default machine-readable code for a failure type, e.g. SERVER_FAILURE."""
    return f"{failure_type.name}_FAILURE"


class Failure(BaseModel):
    """Structured failure information for frontend consumption."""

    failure_type: FailureType = Field(..., description="Failure category")
    message: str = Field(..., min_length=1, description="Human-readable message")
    code: Optional[str] = Field(None, description="Specific code for handling")
    details: Optional[Dict[str, Any]] = Field(
        None, description="Additional failure context"
    )
    field_errors: Optional[Dict[str, str]] = Field(
        None, description="Field-specific validation errors"
    )
    status_code: Optional[int] = Field(None, description="Upstream status code")

    def model_post_init(self, __context: Any) -> None:
        if self.code is None:
            self.code = default_code(self.failure_type)

    def __str__(self) -> str:
        return f"Failure({self.code}): {self.message}"

    # Network
    @classmethod
    def network(cls, message: str, details: Optional[Dict] = None) -> "Failure":
        return cls(failure_type=FailureType.NETWORK, message=message, details=details)

    @classmethod
    def connection(cls, message: str = "No internet connection") -> "Failure":
        return cls(failure_type=FailureType.CONNECTION, message=message)

    @classmethod
    def timeout(cls, message: str = "Request timed out") -> "Failure":
        return cls(failure_type=FailureType.TIMEOUT, message=message)

    @classmethod
    def server(
        cls, message: str, status_code: Optional[int] = None, code: Optional[str] = None
    ) -> "Failure":
        """Create a server failure."""
        return cls(
            failure_type=FailureType.SERVER,
            message=message,
            status_code=status_code,
            code=code,
        )

    # Authentication
    @classmethod
    def auth(cls, message: str, code: Optional[str] = None) -> "Failure":
        """Create an authentication failure with an optional specific code."""
        return cls(failure_type=FailureType.AUTH, message=message, code=code)

    @classmethod
    def unauthorized(cls, message: str = "Unauthorized") -> "Failure":
        return cls(failure_type=FailureType.UNAUTHORIZED, message=message)

    @classmethod
    def forbidden(cls, message: str = "Forbidden") -> "Failure":
        return cls(failure_type=FailureType.FORBIDDEN, message=message)

    @classmethod
    def token_expired(cls, message: str = "Session has expired") -> "Failure":
        return cls(failure_type=FailureType.TOKEN_EXPIRED, message=message)

    @classmethod
    def invalid_credentials(
        cls, message: str = "Invalid email or password"
    ) -> "Failure":
        return cls(
            failure_type=FailureType.INVALID_CREDENTIALS,
            message=message,
            code="INVALID_CREDENTIALS",
        )

    # Validation
    @classmethod
    def validation(
        cls,
        message: str,
        field_errors: Optional[Dict[str, str]] = None,
        details: Optional[Dict] = None,
    ) -> "Failure":
        """Create a validation failure."""
        return cls(
            failure_type=FailureType.VALIDATION,
            message=message,
            field_errors=field_errors,
            details=details,
        )

    @classmethod
    def required_field(cls, field_name: str) -> "Failure":
        return cls(
            failure_type=FailureType.REQUIRED_FIELD,
            message=f"{field_name} is required",
            field_errors={field_name: "required"},
        )

    @classmethod
    def invalid_format(cls, field_name: str, expected_format: str) -> "Failure":
        return cls(
            failure_type=FailureType.INVALID_FORMAT,
            message=f"{field_name} must match format: {expected_format}",
            field_errors={field_name: expected_format},
        )

    # Data
    @classmethod
    def not_found(
        cls,
        message: str,
        resource_type: Optional[str] = None,
        resource_id: Optional[str] = None,
    ) -> "Failure":
        """Create a not found failure."""
        details = None
        if resource_type is not None:
            details = {"resource_type": resource_type, "resource_id": resource_id}
        return cls(failure_type=FailureType.NOT_FOUND, message=message, details=details)

    @classmethod
    def duplicate(cls, message: str, details: Optional[Dict] = None) -> "Failure":
        return cls(failure_type=FailureType.DUPLICATE, message=message, details=details)

    @classmethod
    def conflict(cls, message: str, details: Optional[Dict] = None) -> "Failure":
        return cls(failure_type=FailureType.CONFLICT, message=message, details=details)

    # Storage
    @classmethod
    def storage(cls, message: str) -> "Failure":
        return cls(failure_type=FailureType.STORAGE, message=message)

    @classmethod
    def cache(cls, message: str) -> "Failure":
        """Create a local cache failure."""
        return cls(failure_type=FailureType.CACHE, message=message)

    # Cricket
    @classmethod
    def match(cls, message: str, details: Optional[Dict] = None) -> "Failure":
        return cls(failure_type=FailureType.MATCH, message=message, details=details)

    @classmethod
    def invalid_match_state(
        cls, current_state: str, required_state: str
    ) -> "Failure":
        """Create a failure for an operation attempted in the wrong match state."""
        return cls(
            failure_type=FailureType.INVALID_MATCH_STATE,
            message=f"Match is {current_state}, expected {required_state}",
            details={"current_state": current_state, "required_state": required_state},
        )

    @classmethod
    def score_update(cls, message: str) -> "Failure":
        return cls(failure_type=FailureType.SCORE_UPDATE, message=message)

    @classmethod
    def player(cls, message: str) -> "Failure":
        return cls(failure_type=FailureType.PLAYER, message=message)

    @classmethod
    def team(cls, message: str) -> "Failure":
        return cls(failure_type=FailureType.TEAM, message=message)

    @classmethod
    def insufficient_players(cls, current_count: int, required_count: int) -> "Failure":
        return cls(
            failure_type=FailureType.INSUFFICIENT_PLAYERS,
            message=f"Team has {current_count} players, needs {required_count}",
            details={"current_count": current_count, "required_count": required_count},
        )

    # Platform
    @classmethod
    def permission(cls, permission: str, message: Optional[str] = None) -> "Failure":
        return cls(
            failure_type=FailureType.PERMISSION,
            message=message or f"Permission denied: {permission}",
            details={"permission": permission},
        )

    @classmethod
    def platform(cls, platform: str, message: str) -> "Failure":
        return cls(
            failure_type=FailureType.PLATFORM,
            message=message,
            details={"platform": platform},
        )

    @classmethod
    def file(cls, message: str, file_path: Optional[str] = None) -> "Failure":
        return cls(
            failure_type=FailureType.FILE,
            message=message,
            details={"file_path": file_path} if file_path else None,
        )


class AuthFailures:
    """Shortcuts for common authentication failures and their codes."""

    @staticmethod
    def invalid_email(message: str = "Invalid email format") -> Failure:
        return Failure.auth(message, code="INVALID_EMAIL")

    @staticmethod
    def invalid_phone_number(message: str = "Invalid phone number format") -> Failure:
        return Failure.auth(message, code="INVALID_PHONE")

    @staticmethod
    def invalid_otp(message: str = "Invalid or expired OTP") -> Failure:
        return Failure.auth(message, code="INVALID_OTP")

    @staticmethod
    def email_already_exists(message: str = "Email already exists") -> Failure:
        return Failure.auth(message, code="EMAIL_EXISTS")

    @staticmethod
    def phone_already_exists(message: str = "Phone number already exists") -> Failure:
        return Failure.auth(message, code="PHONE_EXISTS")

    @staticmethod
    def session_expired(message: str = "Session has expired") -> Failure:
        return Failure.auth(message, code="SESSION_EXPIRED")

    @staticmethod
    def no_tokens_found(message: str = "No authentication tokens found") -> Failure:
        return Failure.auth(message, code="NO_TOKENS_FOUND")

    @staticmethod
    def unknown(message: str = "An unknown error occurred") -> Failure:
        return Failure.auth(message, code="UNKNOWN_ERROR")


def is_network_failure(failure: Failure) -> bool:
    return failure.failure_type in NETWORK_FAILURES


def is_auth_failure(failure: Failure) -> bool:
    return failure.failure_type in AUTH_FAILURES


def is_validation_failure(failure: Failure) -> bool:
    return failure.failure_type in VALIDATION_FAILURES


def can_retry(failure: Failure) -> bool:
    """Whether retrying the same operation may succeed."""
    if failure.failure_type == FailureType.SERVER and failure.status_code is not None:
        return failure.status_code >= 500
    if is_network_failure(failure):
        return True
    if failure.failure_type == FailureType.TOKEN_EXPIRED:
        return True
    return False


def action_text(failure: Failure) -> str:
    """Label for the action a frontend should offer alongside the message."""
    if failure.failure_type == FailureType.TOKEN_EXPIRED:
        return "Login Again"
    if can_retry(failure):
        return "Retry"
    if is_validation_failure(failure):
        return "Fix Input"
    return "OK"


def user_friendly_message(failure: Failure) -> str:
    return failure.message


class Result(Generic[T]):
    """
    Result type for frontend-agnostic error handling.

    Allows domain operations to return either success values or structured
    failures without throwing exceptions that frontend adapters need to catch.
    """

    def __init__(
        self,
        value: Optional[T] = None,
        error: Optional[Failure] = None,
        _allow_none: bool = False,
    ):
        if value is not None and error is not None:
            raise ValueError("Result cannot have both value and error")
        if not _allow_none and value is None and error is None:
            raise ValueError("Result must have either value or error")

        self._value = value
        self._error = error

    @property
    def value(self) -> T:
        """Get the success value. Raises error if result is failure."""
        if self._error is not None:
            raise ValueError(
                f"Cannot access value on failed result: {self._error.message}"
            )
        return self._value

    @property
    def error(self) -> Failure:
        """Get the failure. Raises error if result is success."""
        if self._error is None:
            raise ValueError("Cannot access error on successful result")
        return self._error

    @property
    def is_success(self) -> bool:
        """Check if result represents success."""
        return self._error is None

    @property
    def is_failure(self) -> bool:
        """Check if result represents failure."""
        return self._error is not None

    @classmethod
    def success(cls, value: T = None) -> "Result[T]":
        """Create a successful result."""
        return cls(value=value, _allow_none=True)

    @classmethod
    def failure(cls, error: Failure) -> "Result[T]":
        """Create a failed result."""
        return cls(error=error)

    def map(self, func: Callable[[T], U]) -> "Result[U]":
        """Transform the value if successful, otherwise return the failure."""
        if self.is_success:
            try:
                return Result.success(func(self.value))
            except Exception as e:
                return Result.failure(
                    Failure(
                        failure_type=FailureType.CALCULATION,
                        message=f"Transformation failed: {str(e)}",
                    )
                )
        return Result.failure(self.error)

    def flat_map(self, func: Callable[[T], "Result[U]"]) -> "Result[U]":
        """Apply a function that returns a Result, flattening the result."""
        if self.is_success:
            try:
                return func(self.value)
            except Exception as e:
                return Result.failure(
                    Failure(
                        failure_type=FailureType.CALCULATION,
                        message=f"Operation failed: {str(e)}",
                    )
                )
        return Result.failure(self.error)

    def fold(
        self, on_failure: Callable[[Failure], U], on_success: Callable[[T], U]
    ) -> U:
        if self.is_success:
            return on_success(self._value)
        return on_failure(self._error)

    def value_or(self, default: T) -> T:
        return self._value if self.is_success else default

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Result):
            return NotImplemented
        return self._value == other._value and self._error == other._error

    def __repr__(self) -> str:
        if self.is_success:
            return f"Result.success({self._value!r})"
        return f"Result.failure({self._error})"
