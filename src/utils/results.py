from __future__ import annotations

import asyncio
import inspect
from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar, Union

from utils.logger import get_logger

_logger = get_logger(__name__)

T = TypeVar("T")


class Status(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class Result(Generic[T]):
    """
    Outcome of an account, cart or contact operation.

    Expected failures (wrong credentials, a taken email, an unreachable
    endpoint) come back as failures instead of exceptions.
    """

    status: Status
    value: Optional[T] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == Status.SUCCESS

    @classmethod
    def success(cls, value: Optional[T] = None) -> "Result[T]":
        return cls(Status.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: str) -> "Result[T]":
        return cls(Status.FAILURE, error=error)


Operation = Callable[[], Union[Awaitable[Any], Any]]


class Submission:
    """
    Tracks one form submission through idle -> pending -> success/failure.

    The form's simulated network delay is awaited while the status reads
    PENDING, so callers (and tests) can observe the intermediate state.
    Two runs started back to back are not coordinated.
    """

    GENERIC_ERROR = "Something went wrong. Please try again."

    def __init__(self, delay: float = 0.0) -> None:
        self.delay = delay
        self.status = Status.IDLE
        self.result: Optional[Result] = None

    @property
    def pending(self) -> bool:
        return self.status == Status.PENDING

    def reset(self) -> None:
        self.status = Status.IDLE
        self.result = None

    async def run(self, operation: Operation) -> Result:
        self.status = Status.PENDING
        self.result = None
        try:
            if self.delay > 0:
                await asyncio.sleep(self.delay)
            value = operation()
            if inspect.isawaitable(value):
                value = await value
        except Exception:
            _logger.exception("Form submission failed.")
            result = Result.failure(self.GENERIC_ERROR)
        else:
            result = value if isinstance(value, Result) else Result.success(value)

        self.result = result
        self.status = result.status
        return result
