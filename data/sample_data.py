"""Demo-Daten für den Raumplan.

Erzeugt einen kleinen Campus mit Räumen aller Typen und einem Wochenplan
(Mo–Fr). Alle Reservierungen laufen über den Store, also über dieselbe
Konfliktprüfung wie echte Eingaben – Kollisionen werden übersprungen.

Absichtlich enthalten:
  1. Ein Raum in Wartung (Status schlägt Stundenplan)
  2. Ein vom Admin reservierter Raum
  3. Direkt aufeinanderfolgende Kurse (9:00–10:30, 10:30–12:00) im selben Raum
"""

import logging
import random

from rich.console import Console
from rich.table import Table
from rich import box

from config.defaults import EQUIPMENT_OPTIONS
from models.reservation import Reservation
from models.room import AdminStatus, Room
from models.weekday import Weekday
from scheduling.errors import ConflictError
from scheduling.timecodec import decode
from store.schedule_store import ScheduleStore

logger = logging.getLogger(__name__)

# ─── Räume (Name, Typ, Kapazität, Status) ────────────────────────────────────

_ROOMS: list[tuple[str, str, int, AdminStatus]] = [
    ("101-A",   "Lecture Hall",    120, AdminStatus.AVAILABLE),
    ("102-B",   "Seminar Room",     30, AdminStatus.AVAILABLE),
    ("CL5",     "Computer Lab",     40, AdminStatus.AVAILABLE),
    ("LAB-2",   "Laboratory",       24, AdminStatus.MAINTENANCE),
    ("AUD-1",   "Auditorium",      300, AdminStatus.AVAILABLE),
    ("SH-1",    "Study Hall",       60, AdminStatus.AVAILABLE),
    ("CONF-3",  "Conference Room",  16, AdminStatus.RESERVED),
]

_SUBJECTS = [
    "Math 101", "Physics 201", "Chemistry 110", "Programming 1",
    "Data Structures", "Statistics", "English Composition", "History 150",
    "Economics 101", "Databases",
]

_PROFESSORS = [
    "Dr. Smith", "Dr. Garcia", "Prof. Nguyen", "Dr. Okafor",
    "Prof. Müller", "Dr. Rossi", "Prof. Tanaka", "Dr. Haddad",
]

# Mögliche Kursblöcke (Start, Dauer) in Stunden
_BLOCKS: list[tuple[float, float]] = [
    (8.0, 1.5), (9.0, 1.5), (10.5, 1.5), (13.0, 1.0), (14.0, 2.0), (16.0, 1.5),
]

_WEEKDAYS = [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY,
             Weekday.THURSDAY, Weekday.FRIDAY]


class SampleDataGenerator:
    """Füllt einen ScheduleStore mit reproduzierbaren Demo-Daten."""

    def __init__(self, seed: int = 42) -> None:
        self.rng = random.Random(seed)

    def populate(self, store: ScheduleStore) -> tuple[int, int]:
        """Legt Räume und Reservierungen an. Gibt (Räume, Reservierungen) zurück."""
        room_ids: list[int] = []
        for name, room_type, capacity, status in _ROOMS:
            equipment = self.rng.sample(EQUIPMENT_OPTIONS, k=self.rng.randint(1, 4))
            room_ids.append(store.insert_room(Room(
                name=name, room_type=room_type, capacity=capacity,
                status=status, equipment=equipment,
            )))

        # Fester Block zuerst: direkt aufeinanderfolgende Kurse in 101-A am Montag
        first = room_ids[0]
        for subject, start, end in [("Math 101", "9:00 AM", "10:30 AM"),
                                    ("Physics 201", "10:30 AM", "12:00 PM")]:
            store.insert_reservation(Reservation(
                room_id=first, day=Weekday.MONDAY, subject=subject,
                professor="Dr. Smith", start_time=start, end_time=end,
            ))
        created = 2
        skipped = 0

        for room_id in room_ids:
            for day in _WEEKDAYS:
                for start, length in self.rng.sample(_BLOCKS, k=self.rng.randint(1, 3)):
                    try:
                        store.insert_reservation(Reservation(
                            room_id=room_id,
                            day=day,
                            subject=self.rng.choice(_SUBJECTS),
                            professor=self.rng.choice(_PROFESSORS),
                            start_time=decode(start),
                            end_time=decode(start + length),
                        ))
                        created += 1
                    except ConflictError:
                        skipped += 1

        logger.info(f"Demo-Daten: {len(room_ids)} Räume, {created} Reservierungen "
                    f"({skipped} Kollisionen übersprungen)")
        return len(room_ids), created

    def print_summary(self, store: ScheduleStore) -> None:
        """Gibt eine Übersicht der angelegten Räume aus."""
        console = Console()
        table = Table(title="Demo-Räume", box=box.ROUNDED)
        table.add_column("#", justify="right")
        table.add_column("Name", style="bold")
        table.add_column("Typ")
        table.add_column("Plätze", justify="right")
        table.add_column("Status")
        table.add_column("Reservierungen/Woche", justify="right")
        all_res = store.all_reservations()
        for room in store.list_rooms():
            count = sum(1 for r in all_res if r.room_id == room.id)
            table.add_row(str(room.id), room.name, room.room_type,
                          str(room.capacity), room.status.value, str(count))
        console.print(table)
