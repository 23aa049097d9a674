"""Suchfilter auf die Raumliste anwenden (manuell und KI-gestützt).

Reihenfolge der Filter: Typ → Stichwort → Zeitfenster → Status,
danach Kapazität und Ausstattung. Jeder Filter verengt das Ergebnis weiter.
"""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from config.defaults import FILTER_WILDCARD, ROOM_TYPES
from models.intent import SearchIntent
from models.status import RoomView
from models.weekday import Weekday
from scheduling.overlap import overlaps
from scheduling.status import build_room_views

if TYPE_CHECKING:
    from store.schedule_store import ScheduleStore

logger = logging.getLogger(__name__)


def _by_type(rooms: list[RoomView], filter_type: Optional[str]) -> list[RoomView]:
    if not filter_type or filter_type.lower() == FILTER_WILDCARD.lower():
        return rooms
    needle = filter_type.lower()
    return [r for r in rooms if needle in r.room_type.lower()]


def _by_keyword(rooms: list[RoomView], keyword: Optional[str]) -> list[RoomView]:
    if not keyword:
        return rooms
    needle = keyword.lower()
    return [
        r for r in rooms
        if needle in r.name.lower() or needle in r.room_type.lower()
    ]


def _by_time_window(rooms: list[RoomView], start: Optional[float],
                    end: Optional[float]) -> list[RoomView]:
    if start is None:
        return rooms
    if end is None:
        end = start + 1

    result = []
    for view in rooms:
        busy = any(
            overlaps(start, end, res.start_hours, res.end_hours)
            for res in view.daily_schedule
        )
        if not busy:
            result.append(view)
    return result


def _by_status(rooms: list[RoomView], target: Optional[str]) -> list[RoomView]:
    if not target:
        return rooms
    wanted = target.lower()
    return [r for r in rooms if r.status.value.lower() == wanted]


def _by_capacity(rooms: list[RoomView], min_capacity: Optional[int]) -> list[RoomView]:
    if not min_capacity:
        return rooms
    return [r for r in rooms if r.room.capacity >= min_capacity]


def _by_equipment(rooms: list[RoomView], equipment: list[str]) -> list[RoomView]:
    if not equipment:
        return rooms
    return [r for r in rooms if all(r.room.has_equipment(e) for e in equipment)]


def apply_intent(rooms: list[RoomView], intent: SearchIntent) -> list[RoomView]:
    """Filtert die (bereits mit Status gestempelte) Raumliste anhand einer Suchabsicht.

    Eine leere Absicht gibt die Eingabeliste unverändert zurück (Inhalt und Reihenfolge).
    Der Zeitfenster-Filter prüft gegen `daily_schedule` der Views – diese müssen
    für den Zieltag gebaut sein (siehe search_rooms).
    """
    result = list(rooms)
    result = _by_type(result, intent.filter_type)
    result = _by_keyword(result, intent.search_keyword)
    result = _by_time_window(result, intent.time_start, intent.time_end)
    result = _by_status(result, intent.target_status)
    result = _by_capacity(result, intent.min_capacity)
    result = _by_equipment(result, intent.equipment)
    return result


def merge_intent(manual: SearchIntent, ai: Optional[SearchIntent]) -> SearchIntent:
    """Kombiniert manuell gesetzte Filter mit der KI-Absicht.

    - KI-Tag ersetzt den gewählten Tag.
    - KI-Raumtyp ersetzt den manuellen nur, wenn er bekannt ist (oder "All").
    - KI-Stichwort ersetzt den Suchtext; fehlt es, wird der Suchtext geleert
      (der Freitext war ja die KI-Anfrage selbst).
    - Zeitfenster und Zielstatus kommen ausschließlich von der KI.
    - Mindestkapazität und Ausstattung der KI ersetzen die manuellen Werte,
      wenn die KI sie nennt.

    Ohne KI-Ergebnis (None) bleiben nur die manuellen Filter.
    """
    if ai is None:
        return manual

    filter_type = manual.filter_type
    if ai.filter_type and (ai.filter_type in ROOM_TYPES or ai.filter_type == FILTER_WILDCARD):
        filter_type = ai.filter_type

    return manual.model_copy(update={
        "day": ai.day or manual.day,
        "filter_type": filter_type,
        "search_keyword": ai.search_keyword,
        "time_start": ai.time_start,
        "time_end": ai.time_end,
        "target_status": ai.target_status,
        "min_capacity": ai.min_capacity or manual.min_capacity,
        "equipment": ai.equipment or manual.equipment,
    })


def search_rooms(store: "ScheduleStore", intent: SearchIntent,
                 default_day: Weekday, now: datetime) -> list[RoomView]:
    """Baut die Raum-Views für den Zieltag der Absicht und filtert sie."""
    day = intent.day or default_day
    views = build_room_views(store, day, now)
    result = apply_intent(views, intent)
    logger.info(f"Suche ({day.value}): {len(result)} von {len(views)} Räumen passen")
    return result
