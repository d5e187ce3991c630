"""Notification sink adapter — where storage alerts are delivered."""

from warehousing.config import NOTIFICATION_SINK

_sink_instance = None


def get_notification_sink():
    """Return the configured notification sink (singleton).

    Uses FakeNotificationSink by default. Select another sink with the
    WAREHOUSING_NOTIFICATION_SINK environment variable.
    """
    global _sink_instance
    if _sink_instance is None:
        if NOTIFICATION_SINK == "fake":
            from warehousing.alerts.fake_sink import FakeNotificationSink

            _sink_instance = FakeNotificationSink()
        else:
            raise ValueError(f"Unknown notification sink: {NOTIFICATION_SINK}")
    return _sink_instance


def reset_notification_sink():
    """Reset the sink singleton (useful for testing)."""
    global _sink_instance
    _sink_instance = None
