"""Uhrzeit-Kodierung: "9:00 AM" ⇄ Stunden seit Mitternacht (float).

Beispiele:
    encode("1:30 PM")  → 13.5
    encode("12:00 AM") → 0.0
    decode(13.5)       → "1:30 PM"

Leere Strings ergeben 0.0 statt eines Fehlers (historisches Verhalten,
siehe DESIGN.md). Alles andere, was nicht passt, wirft ParseError.
"""

import re
from datetime import datetime

from scheduling.errors import ParseError

_CLOCK_RE = re.compile(r"^\s*(\d{1,2}):(\d{2})\s*([AaPp][Mm])?\s*$")


def encode(clock: str) -> float:
    """Wandelt einen Uhrzeit-String in Stunden seit Mitternacht um."""
    if clock is None or not clock.strip():
        return 0.0

    match = _CLOCK_RE.match(clock)
    if match is None:
        raise ParseError(clock, "erwartet 'H:MM AM/PM'")

    hours = int(match.group(1))
    minutes = int(match.group(2))
    period = match.group(3)

    if minutes > 59:
        raise ParseError(clock, "Minuten außerhalb 0–59")

    if period is None:
        # 24-Stunden-Form ohne Suffix
        if hours > 23:
            raise ParseError(clock, "Stunde außerhalb 0–23")
    else:
        if not 1 <= hours <= 12:
            raise ParseError(clock, "Stunde außerhalb 1–12")
        period = period.upper()
        if hours == 12 and period == "AM":
            hours = 0
        elif hours != 12 and period == "PM":
            hours += 12

    return hours + minutes / 60


def decode(hours: float) -> str:
    """Gibt Stunden seit Mitternacht als "H:MM AM/PM" zurück (nur für die Anzeige)."""
    total_minutes = int(round(hours * 60)) % (24 * 60)
    h, m = divmod(total_minutes, 60)
    period = "PM" if h >= 12 else "AM"
    display = h % 12 or 12
    return f"{display}:{m:02d} {period}"


def normalize(clock: str) -> str:
    """Kanonische Schreibweise, z.B. "09:00 am" → "9:00 AM"."""
    return decode(encode(clock))


def hours_since_midnight(moment: datetime) -> float:
    """Aktuelle Uhrzeit als Stundenwert (Sekunden werden ignoriert)."""
    return moment.hour + moment.minute / 60


def hour_label(hour: int) -> str:
    """Beschriftung einer Rasterzeile, z.B. 13 → "1 PM"."""
    period = "PM" if hour % 24 >= 12 else "AM"
    return f"{hour % 12 or 12} {period}"
