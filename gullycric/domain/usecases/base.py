"""Base class for use cases."""

from abc import ABC, abstractmethod
from typing import Generic, TypeVar

from pydantic import BaseModel

from ..common.result import Failure, Result

T = TypeVar("T")
P = TypeVar("P")


class NoParams(BaseModel):
    """Parameters for use cases that take none."""


class UseCase(ABC, Generic[T, P]):
    """
    A single application operation.

    Use cases validate their parameters and then delegate to a repository.
    Expected failures come back as Result failures; invalid input never
    reaches the repository.
    """

    @abstractmethod
    def __call__(self, params: P) -> Result[T]:
        pass

    @staticmethod
    def invalid(message: str, **field_errors: str) -> Result:
        return Result.failure(
            Failure.validation(message, field_errors=field_errors or None)
        )
