"""Strukturierte Absichten, die der KI-Dienst aus Freitext ableitet.

Die Feldnamen entsprechen dem JSON des Dienstes (camelCase), in Python
werden sie in snake_case angesprochen. Alle Felder sind optional.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel

from models.weekday import Weekday


class _IntentModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SearchIntent(_IntentModel):
    """Suchfilter. Leere Absicht (alles None) filtert nichts."""

    day: Optional[Weekday] = None
    filter_type: Optional[str] = None
    search_keyword: Optional[str] = None
    time_start: Optional[float] = None   # 24h, z.B. 13.5
    time_end: Optional[float] = None
    target_status: Optional[str] = None
    min_capacity: Optional[int] = None
    equipment: list[str] = []

    @field_validator("day", mode="before")
    @classmethod
    def _lenient_day(cls, v):
        # Unverständliche Tagesangaben verwerfen statt die ganze Absicht
        if isinstance(v, Weekday) or v is None:
            return v
        return Weekday.parse(str(v))

    @field_validator("filter_type", "search_keyword", "target_status", mode="before")
    @classmethod
    def _blank_to_none(cls, v):
        if isinstance(v, str) and not v.strip():
            return None
        return v.strip() if isinstance(v, str) else v

    @field_validator("equipment", mode="before")
    @classmethod
    def _equipment_list(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            return [e.strip() for e in v.split(",") if e.strip()]
        return v

    @model_validator(mode="after")
    def _drop_inverted_window(self):
        if (self.time_start is not None and self.time_end is not None
                and self.time_end <= self.time_start):
            self.time_end = None
        return self


class BookingIntent(_IntentModel):
    """Eckdaten einer gewünschten Buchung ("Math 101 in CL5 Montag 9-10")."""

    subject: Optional[str] = None
    room_name: Optional[str] = None
    day: Optional[str] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    professor: Optional[str] = None
    capacity: Optional[int] = None


ISSUE_CATEGORIES = ["Electrical", "Plumbing", "HVAC", "Equipment", "Cleaning", "Other"]
ISSUE_URGENCIES = ["Low", "Medium", "High", "Critical"]


class MaintenanceAnalysis(_IntentModel):
    """Einordnung einer Schadensmeldung."""

    category: str
    urgency: str
    summary: str
    suggested_action: str

    @field_validator("category")
    @classmethod
    def _known_category(cls, v: str) -> str:
        for c in ISSUE_CATEGORIES:
            if c.lower() == v.strip().lower():
                return c
        return "Other"

    @field_validator("urgency")
    @classmethod
    def _known_urgency(cls, v: str) -> str:
        for u in ISSUE_URGENCIES:
            if u.lower() == v.strip().lower():
                return u
        raise ValueError(f"Unbekannte Dringlichkeit: {v!r}")
