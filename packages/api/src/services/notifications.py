# This project was developed with assistance from AI tools.
"""Fire-and-forget notification dispatch.

Delivery is an external concern. The lifecycle calls ``notify_*`` after
its transaction commits; any dispatcher failure is logged and swallowed
so a notification can never roll back a state change.
"""

import logging
from typing import Protocol

from db.enums import ApplicationStatus

logger = logging.getLogger(__name__)


class NotificationDispatcher(Protocol):
    async def status_changed(
        self,
        application_id: int,
        previous_status: ApplicationStatus,
        new_status: ApplicationStatus,
        actor_id: str,
        reason: str | None,
    ) -> None: ...

    async def lease_signed(self, application_id: int, fully_signed: bool) -> None: ...


class LoggingNotificationDispatcher:
    """Default dispatcher: writes the signal to the log."""

    async def status_changed(self, application_id, previous_status, new_status, actor_id, reason):
        logger.info(
            "Notify: application %s %s -> %s by %s",
            application_id,
            previous_status.value,
            new_status.value,
            actor_id,
        )

    async def lease_signed(self, application_id, fully_signed):
        logger.info("Notify: application %s lease signed (complete=%s)", application_id, fully_signed)


_dispatcher: NotificationDispatcher = LoggingNotificationDispatcher()


def get_dispatcher() -> NotificationDispatcher:
    return _dispatcher


def set_dispatcher(dispatcher: NotificationDispatcher) -> None:
    """Swap the process-wide dispatcher (wiring and tests)."""
    global _dispatcher  # noqa: PLW0603
    _dispatcher = dispatcher


async def notify_status_changed(
    application_id: int,
    previous_status: ApplicationStatus,
    new_status: ApplicationStatus,
    actor_id: str,
    reason: str | None = None,
) -> None:
    try:
        await get_dispatcher().status_changed(application_id, previous_status, new_status, actor_id, reason)
    except Exception:
        logger.warning("Status notification failed for application %s", application_id, exc_info=True)


async def notify_lease_signed(application_id: int, fully_signed: bool) -> None:
    try:
        await get_dispatcher().lease_signed(application_id, fully_signed)
    except Exception:
        logger.warning("Lease notification failed for application %s", application_id, exc_info=True)
