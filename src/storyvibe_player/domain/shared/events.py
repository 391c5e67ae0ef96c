"""Domain event bus for publishing and subscribing to events."""

from __future__ import annotations

import asyncio
import logging
from collections import defaultdict
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime
from typing import Any, TypeVar
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field

from storyvibe_player.domain.shared.messages import LogTemplates
from storyvibe_player.domain.shared.types import NonEmptyStr

logger = logging.getLogger(__name__)

T = TypeVar("T", bound="DomainEvent")
EventHandler = Callable[[T], Awaitable[None]]


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


class DomainEvent(BaseModel):
    """Base class for all domain events."""

    model_config = ConfigDict(frozen=True)

    event_id: NonEmptyStr = Field(default_factory=lambda: str(uuid4()))
    occurred_at: datetime = Field(default_factory=utcnow)


class EventBus:
    """In-memory pub/sub bus for playback events.

    A handler subscribed to a base event class also receives every subclass,
    so subscribing to ``DomainEvent`` observes the whole stream. Handlers run
    concurrently; a failing handler is logged and never affects the others.
    """

    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler[Any]]] = defaultdict(list)

    def subscribe(self, event_type: type[T], handler: EventHandler[T]) -> Callable[[], None]:
        """Register *handler*; returns a callable that removes it again."""
        self._handlers[event_type].append(handler)
        logger.debug(LogTemplates.EVENT_SUBSCRIBED, event_type.__name__)
        return lambda: self.unsubscribe(event_type, handler)

    def unsubscribe(self, event_type: type[T], handler: EventHandler[T]) -> None:
        handlers = self._handlers.get(event_type, [])
        if handler in handlers:
            handlers.remove(handler)
            logger.debug(LogTemplates.EVENT_UNSUBSCRIBED, event_type.__name__)

    def handlers_for(self, event_type: type[DomainEvent]) -> list[EventHandler[Any]]:
        """Handlers that receive *event_type*, most specific subscription first."""
        matched: list[EventHandler[Any]] = []
        for cls in event_type.__mro__:
            if isinstance(cls, type) and issubclass(cls, DomainEvent):
                matched.extend(self._handlers.get(cls, []))
        return matched

    async def publish(self, event: DomainEvent) -> int:
        """Deliver *event* and wait for every handler; returns how many ran."""
        name = type(event).__name__
        handlers = self.handlers_for(type(event))
        if not handlers:
            logger.debug(LogTemplates.EVENT_NO_HANDLERS, name)
            return 0

        logger.debug(LogTemplates.EVENT_PUBLISHING, name, len(handlers))

        async def deliver(handler: EventHandler[Any]) -> None:
            try:
                await handler(event)
            except Exception as e:
                logger.exception(LogTemplates.EVENT_HANDLER_ERROR, name, e)

        async with asyncio.TaskGroup() as tg:
            for handler in handlers:
                tg.create_task(deliver(handler))
        return len(handlers)

    def clear(self) -> None:
        self._handlers.clear()
        logger.debug(LogTemplates.EVENT_HANDLERS_CLEARED)
