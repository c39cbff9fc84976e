# app/core/events.py

from dataclasses import dataclass, field
from inspect import isawaitable
from typing import Any, Awaitable, Callable, List, Union
from uuid import UUID

from app.core.logger import event_logger, logger

SALE_CREATED = "SaleCreated"
SALE_MODIFIED = "SaleModified"
SALE_CANCELLED = "SaleCancelled"
ITEM_CANCELLED = "ItemCancelled"


@dataclass(slots=True, frozen=True)
class DomainEvent:
    name: str
    sale_id: UUID
    payload: dict[str, Any] = field(default_factory=dict)

    def describe(self) -> str:
        line = f"[EVENT] {self.name} - SaleId: {self.sale_id}"
        if "product_name" in self.payload:
            line += f", Product: {self.payload['product_name']}"
        return line


EventHandler = Callable[[DomainEvent], Union[None, Awaitable[None]]]


class EventPublisher:
    """
    Transient, in-process notification of sale mutations.

    Every published event produces one log line; subscribers are then
    called in registration order. A handler that raises is dropped.
    """

    def __init__(self) -> None:
        self._handlers: List[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> None:
        if handler not in self._handlers:
            self._handlers.append(handler)

    def unsubscribe(self, handler: EventHandler) -> None:
        if handler in self._handlers:
            self._handlers.remove(handler)

    async def publish(self, event: DomainEvent) -> None:
        event_logger.info(event.describe())

        dead: list[EventHandler] = []
        for handler in list(self._handlers):
            try:
                ret = handler(event)
                if isawaitable(ret):
                    await ret
            except Exception as e:
                logger.error("[Events] handler %r failed on %s: %s", handler, event.name, e, exc_info=True)
                dead.append(handler)

        for handler in dead:
            self.unsubscribe(handler)
