from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Optional, Union


@dataclass
class Delivery:
    """A message received from the broker."""
    body: bytes
    routing_key: Optional[str] = None
    exchange: Optional[str] = None
    consumer_tag: Optional[str] = None
    content_type: Optional[str] = None
    headers: Dict[str, Any] = field(default_factory=dict)

    def text(self) -> str:
        return self.body.decode("utf-8", errors="replace")

    @classmethod
    def from_message(cls, message: Any) -> 'Delivery':
        """Create a Delivery from an aio-pika incoming message."""
        return cls(
            body=message.body,
            routing_key=message.routing_key,
            exchange=message.exchange,
            consumer_tag=message.consumer_tag,
            content_type=message.content_type,
            headers=dict(message.headers or {})
        )


MessageHandler = Callable[[Delivery], Union[Awaitable[Any], Any]]
