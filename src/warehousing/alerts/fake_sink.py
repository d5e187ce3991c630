"""Fake notification sink — records alerts for testing."""

from uuid import uuid4

from warehousing.alerts.sink_port import NotificationSinkPort


class FakeNotificationSink(NotificationSinkPort):
    """Sink that records published alerts in memory for test assertions."""

    def __init__(self):
        self.published: list[dict] = []
        self.should_succeed = True
        self.failure_reason = "Alert delivery failed"

    def configure(self, should_succeed: bool = True, failure_reason: str = "Alert delivery failed"):
        """Configure the fake sink behavior for testing."""
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def publish(self, event_type: str, payload: dict) -> dict:
        if not self.should_succeed:
            return {"alert_id": None, "status": "failed", "error": self.failure_reason}

        alert_id = f"alert-{uuid4().hex[:12]}"
        self.published.append({"alert_id": alert_id, "event_type": event_type, "payload": payload})
        return {"alert_id": alert_id, "status": "sent"}

    def of_type(self, event_type: str) -> list[dict]:
        return [alert for alert in self.published if alert["event_type"] == event_type]

    def reset(self):
        """Clear published alerts (useful between tests)."""
        self.published.clear()
        self.should_succeed = True
        self.failure_reason = "Alert delivery failed"
