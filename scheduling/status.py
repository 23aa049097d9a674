"""Raumstatus-Ermittlung: Admin-Status + Belegung laut Stundenplan → ein Status.

Die Reihenfolge der Regeln ist eine Prioritätskette:
1. Admin-Status Wartung/Reserviert gewinnt immer (Stundenplan egal).
2. Läuft gerade eine Veranstaltung → Occupied.
3. Sonst → Available.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Callable, Optional

from models.reservation import Reservation
from models.room import AdminStatus, Room
from models.status import RoomStatus, RoomView, StatusInfo
from models.weekday import Weekday
from scheduling.overlap import contains
from scheduling.timecodec import hours_since_midnight

if TYPE_CHECKING:
    from store.schedule_store import ScheduleStore

logger = logging.getLogger(__name__)

StatusRule = Callable[[Room, list[Reservation], float], Optional[RoomStatus]]


def _administrative_override(room: Room, reservations: list[Reservation],
                             now_hours: float) -> Optional[RoomStatus]:
    if room.status == AdminStatus.MAINTENANCE:
        return RoomStatus.MAINTENANCE
    if room.status == AdminStatus.RESERVED:
        return RoomStatus.RESERVED
    return None


def _scheduled_occupancy(room: Room, reservations: list[Reservation],
                         now_hours: float) -> Optional[RoomStatus]:
    for res in reservations:
        if contains(res.start_hours, res.end_hours, now_hours):
            return RoomStatus.OCCUPIED
    return None


def _available(room: Room, reservations: list[Reservation],
               now_hours: float) -> Optional[RoomStatus]:
    return RoomStatus.AVAILABLE


# Reihenfolge = Priorität. Die erste Regel mit Ergebnis entscheidet.
STATUS_RULES: list[StatusRule] = [
    _administrative_override,
    _scheduled_occupancy,
    _available,
]


def resolve_status(room: Room, reservations_for_today: list[Reservation],
                   now: datetime) -> StatusInfo:
    """Ermittelt den maßgeblichen Status eines Raums zum Zeitpunkt `now`.

    Args:
        room: Der Raum (inkl. Admin-Status).
        reservations_for_today: Reservierungen dieses Raums am Wochentag von `now`.
        now: Zeitpunkt der Abfrage.
    """
    now_hours = hours_since_midnight(now)
    for rule in STATUS_RULES:
        status = rule(room, reservations_for_today, now_hours)
        if status is not None:
            return StatusInfo.of(status)
    # _available liefert immer ein Ergebnis
    return StatusInfo.of(RoomStatus.AVAILABLE)


def build_room_views(store: "ScheduleStore", day: Weekday,
                     now: datetime) -> list[RoomView]:
    """Stempelt alle Räume mit aktuellem Status und dem Stundenplan von `day`.

    Der Status richtet sich nach dem Wochentag von `now`, der angezeigte
    Stundenplan nach `day` (kann ein anderer Tag sein).
    """
    today = Weekday.of(now)
    views: list[RoomView] = []
    for room in store.list_rooms():
        todays = store.list_reservations(room.id, today)
        info = resolve_status(room, todays, now)
        schedule = todays if day == today else store.list_reservations(room.id, day)
        views.append(RoomView(
            room=room,
            status=info.status,
            color=info.color,
            day=day,
            daily_schedule=schedule,
        ))
    logger.debug(f"Status für {len(views)} Räume berechnet ({day.value}, {now:%H:%M})")
    return views
