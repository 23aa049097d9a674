"""Fehlerklassen der Raumplan-Kernlogik.

Alle Fehler sind Wertfehler für den Aufrufer: nichts davon beendet den Prozess.
Die CLI fängt sie ab und gibt eine rote Meldung aus.
"""

from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from models.reservation import Reservation


class RaumplanError(Exception):
    """Basisklasse aller fachlichen Fehler."""


class ParseError(RaumplanError, ValueError):
    """Uhrzeit-String entspricht nicht dem Format "H:MM" mit optionalem AM/PM."""

    def __init__(self, value: str, reason: str = "") -> None:
        self.value = value
        msg = f"Ungültige Uhrzeit: {value!r}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class ConflictError(RaumplanError):
    """Eine Reservierung überschneidet sich mit einer bestehenden (gleicher Raum, gleicher Tag)."""

    def __init__(self, reservation: "Reservation") -> None:
        self.reservation = reservation
        super().__init__(
            f"Konflikt mit '{reservation.subject}' ({reservation.professor}), "
            f"{reservation.day.value} {reservation.start_time}–{reservation.end_time}"
        )


class NotFoundError(RaumplanError, LookupError):
    """Raum oder Reservierung mit dieser ID existiert nicht."""

    def __init__(self, kind: str, item_id: Optional[object]) -> None:
        self.kind = kind
        self.item_id = item_id
        super().__init__(f"{kind} nicht gefunden: {item_id}")


class IntentUnavailable(RaumplanError):
    """Der KI-Dienst hat keine verwertbare Struktur geliefert."""
