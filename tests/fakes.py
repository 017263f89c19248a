"""In-memory stand-ins for collaborators that would talk to the broker."""


class FakeNotificationService:

    def __init__(self, fail: bool = False) -> None:
        self.sent: list[tuple[str, int, str]] = []
        self.fail = fail

    def send_order_notification(self, owner: str, order_id: int, status: str = "pending") -> None:
        if self.fail:
            raise ConnectionError("broker unreachable")
        self.sent.append((owner, order_id, status))
