"""Datenmodell für einen Raum (Pydantic v2)."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from config.defaults import ROOM_TYPES


class AdminStatus(str, Enum):
    """Vom Admin gesetzter Raumstatus. Überschreibt die Belegung laut Stundenplan."""

    AVAILABLE = "Available"
    MAINTENANCE = "Maintenance"
    RESERVED = "Reserved"


class Room(BaseModel):
    """Repräsentiert einen Raum auf dem Campus.

    Gespeichert wird exakt {id, name, capacity, type, status, equipment};
    die Ausstattung als kommagetrennter String ("Projector,WiFi").
    """

    model_config = ConfigDict(populate_by_name=True)

    id: Optional[int] = None              # Vergibt der Store
    name: str = Field(min_length=1)       # "101-A", "CL5"
    room_type: str = Field(alias="type")  # Einer aus ROOM_TYPES
    capacity: int = Field(gt=0)           # Sitzplätze
    status: AdminStatus = AdminStatus.AVAILABLE
    equipment: list[str] = []

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Raumname darf nicht leer sein.")
        return v

    @field_validator("room_type")
    @classmethod
    def _known_type(cls, v: str) -> str:
        for known in ROOM_TYPES:
            if known.lower() == v.strip().lower():
                return known
        raise ValueError(f"Unbekannter Raumtyp '{v}'. Erlaubt: {', '.join(ROOM_TYPES)}")

    @field_validator("status", mode="before")
    @classmethod
    def _default_status(cls, v):
        # Alte Datensätze ohne Status gelten als verfügbar
        if v is None or v == "":
            return AdminStatus.AVAILABLE
        if isinstance(v, str):
            for s in AdminStatus:
                if s.value.lower() == v.strip().lower():
                    return s
        return v

    @field_validator("equipment", mode="before")
    @classmethod
    def _split_equipment(cls, v):
        if v is None:
            return []
        if isinstance(v, str):
            v = v.split(",")
        items: list[str] = []
        for item in v:
            item = str(item).strip()
            if item and item not in items:
                items.append(item)
        return items

    @field_serializer("equipment")
    def _join_equipment(self, equipment: list[str]) -> str:
        return ",".join(equipment)

    @property
    def is_blocked(self) -> bool:
        """True bei Wartung oder Admin-Reservierung."""
        return self.status in (AdminStatus.MAINTENANCE, AdminStatus.RESERVED)

    def has_equipment(self, item: str) -> bool:
        return item.strip().lower() in {e.lower() for e in self.equipment}
