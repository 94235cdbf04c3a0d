from datetime import date, datetime, timezone

from invoice_engine.app.services.clock import Clock


class FixedClock(Clock):
    """Clock pinned to noon UTC of one day"""

    def __init__(self, today: date):
        self._now = datetime(today.year, today.month, today.day, 12, 0, tzinfo=timezone.utc)

    def now(self) -> datetime:
        return self._now
