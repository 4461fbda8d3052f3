"""Typed outcomes returned by the connection and topology layers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class FailureKind(Enum):
    CONNECTION_EXHAUSTED = "connection_exhausted"
    MISSING_OUTPUT_EXCHANGE = "missing_output_exchange"
    ABORTED = "aborted"

    @property
    def is_fatal(self) -> bool:
        return self is not FailureKind.ABORTED


@dataclass(frozen=True)
class Failure:
    kind: FailureKind
    message: str


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Either a value or a failure, never both."""

    value: Optional[T] = None
    failure: Optional[Failure] = None

    @property
    def ok(self) -> bool:
        return self.failure is None

    @classmethod
    def success(cls, value: T) -> "Outcome[T]":
        return cls(value=value)

    @classmethod
    def failed(cls, kind: FailureKind, message: str) -> "Outcome[T]":
        return cls(failure=Failure(kind=kind, message=message))


class StartupError(RuntimeError):
    """Raised where a failed outcome cannot be returned, such as a ``with`` block."""

    def __init__(self, failure: Failure) -> None:
        super().__init__(failure.message)
        self.kind = failure.kind
        self.failure = failure
