"""Bounded retry schedule for establishing the broker connection."""

from dataclasses import dataclass
from typing import Iterator


@dataclass(frozen=True)
class RetryPolicy:
    """Linear backoff: wait ``initial_wait`` seconds after the first failure,
    then ``wait_increment`` seconds longer after every further failure.

    With the defaults the waits are 10, 25, 40, 55, ... seconds.
    """

    max_attempts: int = 10
    initial_wait: float = 10
    wait_increment: float = 15

    def __post_init__(self) -> None:
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")

    def wait_before(self, attempt: int) -> float:
        """Seconds to wait after failed attempt number ``attempt`` (1-based)."""
        return self.initial_wait + (attempt - 1) * self.wait_increment

    def waits(self) -> Iterator[float]:
        """Every wait the policy can schedule; there is none after the last attempt."""
        for attempt in range(1, self.max_attempts):
            yield self.wait_before(attempt)
