"""Konfliktprüfung für neue oder geänderte Reservierungen."""

from dataclasses import dataclass
from typing import Iterable, Optional

from models.reservation import Reservation
from models.weekday import Weekday
from scheduling.overlap import overlaps
from scheduling.timecodec import encode


@dataclass(frozen=True)
class ConflictCheck:
    """Ergebnis der Prüfung: ok, oder die erste blockierende Reservierung."""

    conflict_with: Optional[Reservation] = None

    @property
    def ok(self) -> bool:
        return self.conflict_with is None

    @property
    def conflict(self) -> bool:
        return self.conflict_with is not None


def check_conflict(
    room_id: int,
    day: Weekday,
    start: str,
    end: str,
    existing: Iterable[Reservation],
    exclude_id: Optional[int] = None,
) -> ConflictCheck:
    """Prüft [start, end) gegen alle Reservierungen desselben Raums am selben Tag.

    Args:
        room_id: Raum der Kandidaten-Reservierung.
        day: Wochentag der Kandidaten-Reservierung.
        start: Beginn als "H:MM AM/PM".
        end: Ende als "H:MM AM/PM".
        existing: Bestehende Reservierungen (beliebige Räume/Tage, wird gefiltert).
        exclude_id: ID der gerade bearbeiteten Reservierung (zählt nicht gegen sich selbst).

    Raises:
        ParseError: wenn start oder end keine gültige Uhrzeit ist.
    """
    cand_start = encode(start)
    cand_end = encode(end)

    for res in existing:
        if res.room_id != room_id or res.day != day:
            continue
        if exclude_id is not None and res.id == exclude_id:
            continue
        if overlaps(cand_start, cand_end, res.start_hours, res.end_hours):
            return ConflictCheck(conflict_with=res)

    return ConflictCheck()
