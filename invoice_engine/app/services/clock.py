"""Clock Interface

Supplies "now" to proration and late fee logic so it can be pinned in tests.
"""

from abc import ABC, abstractmethod
from datetime import datetime, date


class Clock(ABC):
    @abstractmethod
    def now(self) -> datetime:
        """Current UTC timestamp"""
        pass

    def today(self) -> date:
        return self.now().date()
