"""Übersetzung von Freitext in strukturierte Absichten über den KI-Client.

Jede Methode liefert None, wenn der Dienst nichts Verwertbares liefert.
None bedeutet für den Aufrufer "keine zusätzliche Einschränkung", nie Abbruch.
"""

import logging
from datetime import datetime
from typing import Callable, Optional, TypeVar

from pydantic import BaseModel, ValidationError

from assist.client import GeminiClient
from config.defaults import ROOM_TYPES
from models.intent import (
    ISSUE_CATEGORIES,
    ISSUE_URGENCIES,
    BookingIntent,
    MaintenanceAnalysis,
    SearchIntent,
)
from models.weekday import Weekday
from scheduling.errors import IntentUnavailable

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


_SEARCH_PROMPT = """
Context: Today is {today}. User Query: "{query}"
Task: Extract search filters.
Ref Data: Types: {types}

Rules:
1. 'day': Convert relative terms ("tomorrow") to a weekday name.
2. 'filterType': Fuzzy-match to Types. For "room"/"any"/"empty" return "All".
3. 'searchKeyword': Specific room names (e.g. "CL5").
4. 'timeStart'/'timeEnd': 24h numbers. "12pm" = start:12, end:13.
5. 'targetStatus': "Available" (default) or "Maintenance".
6. 'minCapacity': Number of seats if mentioned.
7. 'equipment': List of required equipment if mentioned.

OUTPUT RAW JSON ONLY:
{{ "day": "Monday"|null, "filterType": "string"|null, "searchKeyword": "string"|null, "timeStart": number|null, "timeEnd": number|null, "targetStatus": "Available"|null, "minCapacity": number|null, "equipment": ["string"]|null }}
"""

_BOOKING_PROMPT = """
Context: Today is {today}. User Query: "{query}"
Task: Extract schedule details. Times as "H:MM AM/PM".
OUTPUT RAW JSON ONLY:
{{ "subject": "string"|null, "roomName": "string"|null, "day": "string"|null, "startTime": "string"|null, "endTime": "string"|null, "professor": "string"|null, "capacity": number|null }}
"""

_ISSUE_PROMPT = """
User Report: "{query}"
Task: Analyze issue.
Rules:
1. Category: {categories}.
2. Urgency: {urgencies}.
OUTPUT RAW JSON ONLY:
{{ "category": "Equipment", "urgency": "Medium", "summary": "string", "suggestedAction": "string" }}
"""


class IntentService:
    """Fachliche Fassade über dem KI-Client (ein Aufruf pro Anfrage, kein Retry)."""

    def __init__(self, client: GeminiClient,
                 clock: Callable[[], datetime] = datetime.now) -> None:
        self.client = client
        self.clock = clock

    def _today(self) -> str:
        return Weekday.of(self.clock()).value

    def _ask(self, prompt: str, model: type[T]) -> Optional[T]:
        try:
            raw = self.client.generate_json(prompt)
            return model.model_validate(raw)
        except IntentUnavailable as e:
            logger.warning(f"KI-Absicht nicht verfügbar: {e}")
            return None
        except ValidationError as e:
            logger.warning(f"KI-Antwort passt nicht zu {model.__name__}: "
                           f"{e.error_count()} Fehler")
            return None

    def translate_search(self, text: str) -> Optional[SearchIntent]:
        """Freitext-Suche → SearchIntent (oder None)."""
        if not text or not text.strip():
            return None
        prompt = _SEARCH_PROMPT.format(today=self._today(), query=text.strip(),
                                       types=ROOM_TYPES)
        return self._ask(prompt, SearchIntent)

    def translate_booking(self, text: str) -> Optional[BookingIntent]:
        """Freitext-Buchungswunsch → BookingIntent (oder None)."""
        if not text or not text.strip():
            return None
        prompt = _BOOKING_PROMPT.format(today=self._today(), query=text.strip())
        return self._ask(prompt, BookingIntent)

    def analyze_issue(self, text: str) -> Optional[MaintenanceAnalysis]:
        """Schadensmeldung → Kategorie, Dringlichkeit, Zusammenfassung, Maßnahme."""
        if not text or not text.strip():
            return None
        prompt = _ISSUE_PROMPT.format(query=text.strip(),
                                      categories=", ".join(ISSUE_CATEGORIES),
                                      urgencies=", ".join(ISSUE_URGENCIES))
        return self._ask(prompt, MaintenanceAnalysis)
