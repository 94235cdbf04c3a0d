from datetime import datetime, timezone
from invoice_engine.app.services.clock import Clock


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)
