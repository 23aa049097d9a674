"""ScheduleStore – Räume und Reservierungen mit Konfliktschutz beim Schreiben.

Alle schreibenden Operationen laufen unter einer Sperre: Konfliktprüfung und
Speichern sind ein einziger kritischer Abschnitt, dazwischen kann keine
andere Änderung angenommen werden.

Mit `path` wird nach jeder Änderung als JSON gespeichert (CampusData),
ohne `path` bleibt alles im Speicher (Tests, Demo).
"""

import logging
import threading
from pathlib import Path
from typing import Optional

from models.campus_data import CampusData
from models.reservation import Reservation
from models.room import Room
from models.weekday import Weekday
from scheduling.conflict import check_conflict
from scheduling.errors import ConflictError, NotFoundError

logger = logging.getLogger(__name__)


class ScheduleStore:
    """Verwaltet Räume und deren Wochen-Reservierungen."""

    def __init__(self, path: Optional[Path] = None) -> None:
        self.path = Path(path) if path is not None else None
        self._lock = threading.RLock()
        if self.path is not None and self.path.exists():
            self._data = CampusData.load_json(self.path)
            logger.info(f"Datenbestand geladen: {self.path} "
                        f"({len(self._data.rooms)} Räume)")
        else:
            self._data = CampusData()

    # ─── Räume ───

    def list_rooms(self) -> list[Room]:
        """Alle Räume in Anlagereihenfolge."""
        with self._lock:
            return list(self._data.rooms)

    def get_room(self, room_id: int) -> Optional[Room]:
        with self._lock:
            return next((r for r in self._data.rooms if r.id == room_id), None)

    def insert_room(self, room: Room) -> int:
        """Legt einen Raum an und gibt die neue ID zurück (eine mitgegebene ID wird ignoriert)."""
        with self._lock:
            new_id = self._data.next_room_id
            self._data.rooms.append(room.model_copy(update={"id": new_id}))
            self._data.next_room_id += 1
            self._commit()
        logger.info(f"Raum angelegt: {room.name} (#{new_id})")
        return new_id

    def update_room(self, room_id: int, **fields) -> Room:
        """Ändert einzelne Felder eines Raums. Das Ergebnis wird komplett neu validiert.

        Raises:
            NotFoundError: Raum existiert nicht.
            pydantic.ValidationError: Ergebnis ist kein gültiger Raum.
        """
        with self._lock:
            idx = self._room_index(room_id)
            current = self._data.rooms[idx]
            merged = current.model_dump()
            merged.update(fields)
            merged["id"] = room_id
            updated = Room.model_validate(merged)
            self._data.rooms[idx] = updated
            self._commit()
        logger.info(f"Raum geändert: #{room_id} {sorted(fields)}")
        return updated

    def delete_room(self, room_id: int) -> None:
        """Löscht einen Raum samt aller seiner Reservierungen."""
        with self._lock:
            idx = self._room_index(room_id)
            del self._data.rooms[idx]
            before = len(self._data.reservations)
            self._data.reservations = [
                r for r in self._data.reservations if r.room_id != room_id
            ]
            removed = before - len(self._data.reservations)
            self._commit()
        logger.info(f"Raum #{room_id} gelöscht ({removed} Reservierungen entfernt)")

    # ─── Reservierungen ───

    def list_reservations(self, room_id: int, day: Weekday) -> list[Reservation]:
        """Reservierungen eines Raums an einem Tag, nach Beginn sortiert."""
        with self._lock:
            found = [
                r for r in self._data.reservations
                if r.room_id == room_id and r.day == day
            ]
        return sorted(found, key=lambda r: r.start_hours)

    def all_reservations(self) -> list[Reservation]:
        with self._lock:
            return list(self._data.reservations)

    def get_reservation(self, reservation_id: int) -> Optional[Reservation]:
        with self._lock:
            return next(
                (r for r in self._data.reservations if r.id == reservation_id), None
            )

    def insert_reservation(self, reservation: Reservation) -> int:
        """Speichert eine neue Reservierung, sofern sie keine bestehende überschneidet.

        Raises:
            NotFoundError: Raum existiert nicht.
            ConflictError: Überschneidung (enthält die blockierende Reservierung).
        """
        with self._lock:
            self._room_index(reservation.room_id)
            self._guard(reservation)
            new_id = self._data.next_reservation_id
            self._data.reservations.append(reservation.model_copy(update={"id": new_id}))
            self._data.next_reservation_id += 1
            self._commit()
        logger.info(f"Reservierung #{new_id} angelegt: {reservation}")
        return new_id

    def update_reservation(self, reservation_id: int, **fields) -> Reservation:
        """Ändert eine Reservierung; die Konfliktprüfung ignoriert sie selbst.

        Raises:
            NotFoundError: Reservierung oder (neuer) Raum existiert nicht.
            ConflictError: Überschneidung mit einer anderen Reservierung.
            pydantic.ValidationError: Ergebnis ist keine gültige Reservierung.
        """
        with self._lock:
            idx = self._reservation_index(reservation_id)
            merged = self._data.reservations[idx].model_dump()
            merged.update(fields)
            merged["id"] = reservation_id
            updated = Reservation.model_validate(merged)
            self._room_index(updated.room_id)
            self._guard(updated, exclude_id=reservation_id)
            self._data.reservations[idx] = updated
            self._commit()
        logger.info(f"Reservierung #{reservation_id} geändert: {updated}")
        return updated

    def delete_reservation(self, reservation_id: int) -> None:
        with self._lock:
            idx = self._reservation_index(reservation_id)
            del self._data.reservations[idx]
            self._commit()
        logger.info(f"Reservierung #{reservation_id} gelöscht")

    # ─── Intern ───

    def _guard(self, candidate: Reservation, exclude_id: Optional[int] = None) -> None:
        result = check_conflict(
            candidate.room_id, candidate.day,
            candidate.start_time, candidate.end_time,
            self._data.reservations, exclude_id=exclude_id,
        )
        if result.conflict:
            logger.warning(f"Konflikt abgelehnt: {candidate} ↔ {result.conflict_with}")
            raise ConflictError(result.conflict_with)

    def _room_index(self, room_id: int) -> int:
        for i, room in enumerate(self._data.rooms):
            if room.id == room_id:
                return i
        raise NotFoundError("Raum", room_id)

    def _reservation_index(self, reservation_id: int) -> int:
        for i, res in enumerate(self._data.reservations):
            if res.id == reservation_id:
                return i
        raise NotFoundError("Reservierung", reservation_id)

    def _commit(self) -> None:
        if self.path is not None:
            self._data.save_json(self.path)

    @property
    def data(self) -> CampusData:
        """Kopie des aktuellen Datenbestands."""
        with self._lock:
            return self._data.model_copy(deep=True)

    def __repr__(self) -> str:
        return f"ScheduleStore({self.path or 'memory'}, {len(self._data.rooms)} rooms)"
