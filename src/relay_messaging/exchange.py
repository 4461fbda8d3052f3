"""Exchange handles shared between the channel and dispatch units."""

from dataclasses import dataclass

DIRECT = "direct"


@dataclass(frozen=True)
class Exchange:
    """A named routing endpoint on the broker.

    The empty name is the broker's default exchange, which routes a message to
    the queue whose name equals the routing key.
    """

    name: str
    exchange_type: str = DIRECT

    @property
    def is_default(self) -> bool:
        return self.name == ""
