"""Notification sink port — abstract interface for alert delivery."""

from abc import ABC, abstractmethod


class NotificationSinkPort(ABC):
    """Abstract interface for notification sinks."""

    @abstractmethod
    def publish(self, event_type: str, payload: dict) -> dict:
        """Deliver an alert.

        Returns:
            dict with keys: alert_id, status ("sent" or "failed"), error (optional)
        """
        ...
