"""Datenmodell für eine Reservierung (eine Lehrveranstaltung im Wochenplan)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from models.weekday import Weekday
from scheduling.timecodec import encode, normalize


class Reservation(BaseModel):
    """Ein belegter Zeitblock eines Raums an einem Wochentag.

    Zeiten werden als "H:MM AM/PM" gespeichert und beim Validieren
    normalisiert ("09:00 am" → "9:00 AM"). Start muss vor Ende liegen.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None
    room_id: int = Field(alias="roomId")
    day: Weekday
    subject: str = Field(min_length=1)     # "Math 101"
    professor: str = Field(min_length=1)   # "Dr. Smith"
    start_time: str = Field(alias="startTime")
    end_time: str = Field(alias="endTime")

    @field_validator("day", mode="before")
    @classmethod
    def _parse_day(cls, v):
        if isinstance(v, str):
            day = Weekday.parse(v)
            if day is None:
                raise ValueError(f"Unbekannter Wochentag: {v!r}")
            return day
        return v

    @field_validator("subject", "professor")
    @classmethod
    def _strip_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Feld darf nicht leer sein.")
        return v

    @field_validator("start_time", "end_time")
    @classmethod
    def _normalize_time(cls, v: str) -> str:
        # Leere Zeit wäre für encode() Mitternacht – hier nicht zulässig
        if not v or not v.strip():
            raise ValueError("Uhrzeit fehlt.")
        return normalize(v)

    @model_validator(mode="after")
    def _start_before_end(self):
        if self.start_hours >= self.end_hours:
            raise ValueError(
                f"Beginn ({self.start_time}) muss vor dem Ende ({self.end_time}) liegen."
            )
        return self

    @property
    def start_hours(self) -> float:
        return encode(self.start_time)

    @property
    def end_hours(self) -> float:
        return encode(self.end_time)

    def __str__(self) -> str:
        return f"{self.subject} ({self.professor}) {self.start_time}–{self.end_time}"
