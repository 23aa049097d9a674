"""Abgeleiteter Raumstatus (wird nie gespeichert, pro Abfrage berechnet)."""

from enum import Enum

from pydantic import BaseModel

from models.reservation import Reservation
from models.room import Room
from models.weekday import Weekday


class RoomStatus(str, Enum):
    AVAILABLE = "Available"
    OCCUPIED = "Occupied"
    MAINTENANCE = "Maintenance"
    RESERVED = "Reserved"


# Farbe ist eine reine Funktion des Status
STATUS_COLORS: dict[RoomStatus, str] = {
    RoomStatus.AVAILABLE:   "green",
    RoomStatus.OCCUPIED:    "red",
    RoomStatus.MAINTENANCE: "orange",
    RoomStatus.RESERVED:    "blue",
}


class StatusInfo(BaseModel):
    """Status plus Anzeigefarbe."""

    status: RoomStatus
    color: str

    @classmethod
    def of(cls, status: RoomStatus) -> "StatusInfo":
        return cls(status=status, color=STATUS_COLORS[status])


class RoomView(BaseModel):
    """Raum mit berechnetem Status und dem Stundenplan des angezeigten Tages."""

    room: Room
    status: RoomStatus
    color: str
    day: Weekday
    daily_schedule: list[Reservation] = []

    @property
    def id(self) -> int:
        return self.room.id

    @property
    def name(self) -> str:
        return self.room.name

    @property
    def room_type(self) -> str:
        return self.room.room_type
