from config.schema import (
    AssistConfig,
    CampusConfig,
    GridConfig,
    StoreConfig,
)


# Feste Raumtypen (Reihenfolge wie in der Auswahl)
ROOM_TYPES: list[str] = [
    "Lecture Hall",
    "Laboratory",
    "Seminar Room",
    "Computer Lab",
    "Auditorium",
    "Study Hall",
    "Conference Room",
]

# Platzhalter im Typ-Filter für "alle Typen"
FILTER_WILDCARD = "All"

EQUIPMENT_OPTIONS: list[str] = [
    "Projector",
    "Smart TV",
    "Whiteboard",
    "AC",
    "Computer",
    "Sound System",
    "WiFi",
]


def default_grid() -> GridConfig:
    """Standard-Raster der Tagesansicht: 7 AM bis 6 PM.

    Stundenraster:
     7 AM ─ erste Zeile
     ...
     6 PM ─ letzte Zeile (Veranstaltungen bis 7 PM sichtbar)
    """
    return GridConfig(start_hour=7, end_hour=18)


def default_campus_config() -> CampusConfig:
    """Vollständige Standard-Konfiguration."""
    return CampusConfig(
        campus_name="Campus",
        refresh_seconds=60,
        grid=default_grid(),
        assist=AssistConfig(),
        store=StoreConfig(),
    )
