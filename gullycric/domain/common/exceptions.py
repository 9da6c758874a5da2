"""Exceptions raised by data sources and translated to Failures by repositories."""

from typing import Optional


class DataSourceException(Exception):
    """Base class for data source errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.code = code


class CacheException(DataSourceException):
    """Local storage could not be read or written."""


class ServerException(DataSourceException):
    """The (mock) remote backend rejected or failed a request."""

    def __init__(
        self, message: str, code: Optional[str] = None, status_code: Optional[int] = None
    ):
        super().__init__(message, code)
        self.status_code = status_code


class NetworkException(DataSourceException):
    """The remote backend is unreachable."""


class NotFoundException(DataSourceException):
    """A requested record does not exist."""


class AuthException(DataSourceException):
    """Authentication was rejected by the backend."""
