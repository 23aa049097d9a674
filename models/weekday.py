"""Wochentage als feste Bezeichner (Pydantic-kompatibles Enum)."""

from datetime import datetime
from enum import Enum
from typing import Optional


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @classmethod
    def parse(cls, value: Optional[str]) -> Optional["Weekday"]:
        """Toleranter Abgleich ("monday", " Mon ") → Weekday oder None."""
        if value is None:
            return None
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        if not text:
            return None
        for day in cls:
            if day.value.lower() == text or day.value[:3].lower() == text:
                return day
        return None

    @classmethod
    def of(cls, moment: datetime) -> "Weekday":
        """Wochentag eines Zeitpunkts."""
        return list(cls)[moment.weekday()]
