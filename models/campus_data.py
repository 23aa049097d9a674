"""CampusData: persistierter Datensatz aus Räumen und Reservierungen (Pydantic v2)."""

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from pydantic import BaseModel

from models.reservation import Reservation
from models.room import Room


class CampusData(BaseModel):
    """Vollständiger lokaler Datenbestand: Räume, Reservierungen, ID-Zähler."""

    rooms: list[Room] = []
    reservations: list[Reservation] = []
    next_room_id: int = 1
    next_reservation_id: int = 1
    created_at: Optional[datetime] = None
    modified_at: Optional[datetime] = None
    data_version: str = "1.0"

    # ─── Übersicht ───

    def summary(self) -> str:
        """Kurze Übersicht über den Datensatz."""
        lines = [
            f"Räume: {len(self.rooms)}",
            f"Reservierungen: {len(self.reservations)}",
        ]
        blocked = [r for r in self.rooms if r.is_blocked]
        if blocked:
            lines.append(
                f"Gesperrt (Wartung/reserviert): {', '.join(r.name for r in blocked)}"
            )
        return "\n".join(lines)

    # ─── Persistenz ────────────────────────────────────────────────────────

    def save_json(self, path: Path) -> None:
        """Speichert den kompletten Datensatz als JSON-Datei."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        now = datetime.now(timezone.utc)
        updated = self.model_copy(update={
            "modified_at": now,
            "created_at": self.created_at or now,
        })
        with open(path, "w", encoding="utf-8") as f:
            f.write(updated.model_dump_json(indent=2, by_alias=True))

    @classmethod
    def load_json(cls, path: Path) -> "CampusData":
        """Lädt einen Datensatz aus einer JSON-Datei."""
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"JSON-Datei nicht gefunden: {path}")
        with open(path, "r", encoding="utf-8") as f:
            return cls.model_validate_json(f.read())
