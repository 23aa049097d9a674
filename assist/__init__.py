"""KI-Assistent: Freitext → strukturierte Such-/Buchungs-/Schadensabsicht."""

from assist.client import GeminiClient, extract_json
from assist.intents import IntentService

__all__ = ["GeminiClient", "IntentService", "extract_json"]
