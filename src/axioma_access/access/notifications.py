"""
axioma_access.access.notifications

Side channel for user-visible denial notifications.

Responsibilities:
- Define the `Notifier` interface the engine calls once per surfaced denial.
- Provide a collecting notifier whose contents travel back in HTTP responses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Protocol

from axioma_access.access.policy import NotificationCategory
from axioma_access.observability.logging import get_logger

log = get_logger(__name__)


class Notifier(Protocol):
    def notify(self, category: NotificationCategory, message: str) -> None: ...


@dataclass(frozen=True, slots=True)
class Notification:
    category: NotificationCategory
    message: str


@dataclass
class CollectingNotifier:
    """
    Keeps notifications so the API can hand them to the front end for toast display.
    """

    notifications: list[Notification] = field(default_factory=list)

    def notify(self, category: NotificationCategory, message: str) -> None:
        log.info("access.notification", category=str(category))
        self.notifications.append(Notification(category=category, message=message))

    @property
    def last(self) -> Notification | None:
        return self.notifications[-1] if self.notifications else None
