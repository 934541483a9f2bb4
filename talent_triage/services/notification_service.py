"""
Candidate notification dispatch.

E-mail delivery belongs to another service; this module defines the sender
contract, a sender that only logs, and a dispatcher that runs senders in
the background so a slow or failing sender never affects the caller.
"""

from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional, Protocol, Sequence

from talent_triage.utils.config import get_settings
from talent_triage.utils.logger import get_logger

logger = get_logger(__name__)


class NotificationSender(Protocol):
    """Delivers a status notification for a set of applications."""

    def send(self, application_ids: Sequence[str], action: str) -> None:
        ...


class LoggingNotificationSender:
    """Sender that records the notification in the application log."""

    def send(self, application_ids: Sequence[str], action: str) -> None:
        logger.info(
            f"Notification queued for {len(application_ids)} applications "
            f"({action}): {', '.join(application_ids)}"
        )


class NotificationDispatcher:
    """
    Fire-and-forget wrapper around a NotificationSender.

    dispatch() returns immediately; sender failures are logged from the
    worker thread and never propagate.
    """

    def __init__(
        self,
        sender: Optional[NotificationSender] = None,
        max_workers: Optional[int] = None,
        enabled: Optional[bool] = None,
    ):
        settings = get_settings().notifications
        self.sender = sender or LoggingNotificationSender()
        self.enabled = settings.enabled if enabled is None else enabled
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers or settings.max_workers,
            thread_name_prefix="notify",
        )

    def dispatch(self, application_ids: Sequence[str], action: str) -> Optional[Future]:
        """
        Schedule a notification.

        Returns:
            The pending future, or None if notifications are disabled or
            could not be scheduled
        """
        if not self.enabled or not application_ids:
            return None

        ids = list(application_ids)
        try:
            future = self._executor.submit(self.sender.send, ids, action)
        except RuntimeError as e:
            # Executor already shut down
            logger.error(f"Could not schedule {action} notification for {len(ids)} applications: {e}")
            return None

        future.add_done_callback(lambda f: self._report(f, ids, action))
        return future

    @staticmethod
    def _report(future: Future, application_ids: list[str], action: str) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.opt(exception=error).error(
                f"{action} notification failed for {len(application_ids)} applications"
            )

    def shutdown(self, wait: bool = True) -> None:
        """Stop accepting work; optionally wait for queued notifications."""
        self._executor.shutdown(wait=wait)


# Singleton instance
_dispatcher: Optional[NotificationDispatcher] = None


def get_notification_dispatcher() -> NotificationDispatcher:
    """Get the notification dispatcher singleton instance."""
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = NotificationDispatcher()
    return _dispatcher
