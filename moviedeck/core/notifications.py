# moviedeck/core/notifications.py

import asyncio
import json
import logging
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Deque, List

from moviedeck.core.logger import setup_logger
from moviedeck.core.models.enums import NotificationLevel

logger = setup_logger(__name__)

_LOG_LEVELS = {
    NotificationLevel.INFO:    logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.DANGER:  logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    message: str
    level: NotificationLevel = NotificationLevel.INFO
    # "tile" toasts concern a single card; "view" toasts follow a grid change
    scope: str = "view"
    created_at: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )

    def to_dict(self) -> dict:
        return {
            "message": self.message,
            "level": self.level.value,
            "scope": self.scope,
            "created_at": self.created_at,
        }


class Notifier:
    """
    Transient user-facing messages. Keeps a bounded history and broadcasts
    each message to every connected /notifications/stream listener.
    """

    def __init__(self, history: int = 50):
        self.history: Deque[Notification] = deque(maxlen=history)
        self.listeners: List[asyncio.Queue] = []

    def notify(
        self,
        message: str,
        level: NotificationLevel = NotificationLevel.INFO,
        scope: str = "view",
    ) -> Notification:
        note = Notification(message=message, level=level, scope=scope)
        self.history.append(note)
        logger.log(_LOG_LEVELS[level], "[NOTIFY] %s", message)
        payload = json.dumps(note.to_dict())
        for q in self.listeners:
            try:
                q.put_nowait(payload)
            except asyncio.QueueFull:
                # drop if listener is slow
                pass
        return note

    def subscribe(self, maxsize: int = 100) -> asyncio.Queue:
        q: asyncio.Queue = asyncio.Queue(maxsize=maxsize)
        self.listeners.append(q)
        return q

    def unsubscribe(self, q: asyncio.Queue) -> None:
        if q in self.listeners:
            self.listeners.remove(q)

    def recent(self, limit: int = 10) -> List[Notification]:
        if limit <= 0:
            return []
        return list(self.history)[-limit:]

    @property
    def last(self):
        return self.history[-1] if self.history else None
