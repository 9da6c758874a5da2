"""Common domain types and utilities."""

from .exceptions import (
    AuthException,
    CacheException,
    DataSourceException,
    NetworkException,
    NotFoundException,
    ServerException,
)
from .result import (
    AuthFailures,
    Failure,
    FailureType,
    Result,
    action_text,
    can_retry,
    is_auth_failure,
    is_network_failure,
    is_validation_failure,
    user_friendly_message,
)

__all__ = [
    "Result",
    "Failure",
    "FailureType",
    "AuthFailures",
    "action_text",
    "can_retry",
    "is_auth_failure",
    "is_network_failure",
    "is_validation_failure",
    "user_friendly_message",
    "DataSourceException",
    "CacheException",
    "ServerException",
    "NetworkException",
    "NotFoundException",
    "AuthException",
]
