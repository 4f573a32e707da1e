"""
Unity Ledger Event Bus

Name-keyed publish/subscribe used to observe ledger state changes.

Handlers run synchronously, in registration order, with a single data
argument. The bus does not isolate handlers from each other; callers that
must not depend on observers (the ledger) guard the publish call.
"""

from __future__ import annotations
import logging
from collections import defaultdict
from typing import Any, Callable, DefaultDict, List

logger = logging.getLogger(__name__)

Handler = Callable[[Any], None]


class EventBus:
    """In-process notification facility."""

    def __init__(self):
        self._handlers: DefaultDict[str, List[Handler]] = defaultdict(list)

    def subscribe(self, event: str, handler: Handler) -> None:
        self._handlers[event].append(handler)

    def publish(self, event: str, data: Any = None) -> None:
        for handler in list(self._handlers.get(event, ())):
            handler(data)

    def handler_count(self, event: str) -> int:
        return len(self._handlers.get(event, ()))
