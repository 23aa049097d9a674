"""Buchungsentwurf aus einer KI-Buchungsabsicht erzeugen."""

from typing import Optional

from models.intent import BookingIntent
from models.reservation import Reservation
from models.room import Room
from models.weekday import Weekday
from scheduling.errors import NotFoundError


def find_room_by_name(rooms: list[Room], name: Optional[str]) -> Room:
    """Sucht einen Raum über den Namen: erst exakt, dann eindeutiger Teilstring."""
    if not name or not name.strip():
        raise NotFoundError("Raum", name)
    needle = name.strip().lower()

    for room in rooms:
        if room.name.lower() == needle:
            return room

    partial = [r for r in rooms if needle in r.name.lower()]
    if len(partial) == 1:
        return partial[0]
    raise NotFoundError("Raum", name)


def draft_from_booking(intent: BookingIntent, rooms: list[Room],
                       default_day: Optional[Weekday] = None) -> Reservation:
    """Macht aus einer Buchungsabsicht eine (noch nicht gespeicherte) Reservierung.

    Raises:
        NotFoundError: Raumname unbekannt oder mehrdeutig.
        pydantic.ValidationError: Pflichtfelder fehlen oder Zeiten sind ungültig.
    """
    room = find_room_by_name(rooms, intent.room_name)
    day = Weekday.parse(intent.day) or default_day
    return Reservation(
        room_id=room.id,
        day=day,
        subject=intent.subject or "",
        professor=intent.professor or "",
        start_time=intent.start_time or "",
        end_time=intent.end_time or "",
    )
