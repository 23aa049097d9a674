"""Renderer für das Stundenraster eines Tages im Terminal.

Wird von cmd_grid (Rich-Tabelle) und cmd_watch (Live-Ansicht) verwendet.
"""

from typing import TYPE_CHECKING

from scheduling.overlap import overlaps
from scheduling.timecodec import hour_label

if TYPE_CHECKING:
    from models.status import RoomView

# Farb-Tag des Status → Rich-Style
_STATUS_STYLES: dict[str, str] = {
    "green":  "green",
    "red":    "bold red",
    "orange": "dark_orange",
    "blue":   "blue",
}


def status_style(color: str) -> str:
    """Rich-Style für ein Status-Farbtag (unbekannt → ohne Stil)."""
    return _STATUS_STYLES.get(color, "")


def render_day_grid_rows(
    views: list["RoomView"],
    start_hour: int,
    end_hour: int,
) -> list[list[str]]:
    """Gibt Tabellenzeilen für das Stundenraster zurück.

    Jede Zeile: [Stunde, Raum 1, Raum 2, ...]
    Gesperrte Räume (Wartung/reserviert) zeigen in jeder Zeile ihren Admin-Status.
    Sonst: Fach der Veranstaltung, die [h, h+1) schneidet, oder '—'.
    """
    rows: list[list[str]] = []

    for hour in range(start_hour, end_hour + 1):
        cells = [hour_label(hour)]
        for view in views:
            if view.room.is_blocked:
                cells.append(f"[{view.room.status.value}]")
                continue
            hits = [
                res for res in view.daily_schedule
                if overlaps(hour, hour + 1, res.start_hours, res.end_hours)
            ]
            if not hits:
                cells.append("—")
            else:
                cells.append("\n".join(
                    f"{res.subject} ({res.start_time}–{res.end_time})" for res in hits
                ))
        rows.append(cells)

    return rows
