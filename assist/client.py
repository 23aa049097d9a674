"""HTTP-Client für die Gemini-API (generateContent).

Das gewählte Modell wird pro Client-Instanz in `active_model` gehalten –
kein prozessweiter Cache. Fehler werden als IntentUnavailable gemeldet;
IntentService fängt sie ab und liefert None.
"""

import json
import logging
import os
import re
from typing import Optional

import httpx

from config.schema import AssistConfig
from scheduling.errors import IntentUnavailable

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def extract_json(text: str) -> Optional[dict]:
    """Liest JSON aus einer Modellantwort, auch wenn Text oder ```-Blöcke drumherum stehen."""
    try:
        value = json.loads(text)
    except (json.JSONDecodeError, TypeError):
        match = _JSON_OBJECT_RE.search(text or "")
        if match is None:
            return None
        try:
            value = json.loads(match.group(0))
        except json.JSONDecodeError:
            return None
    return value if isinstance(value, dict) else None


class GeminiClient:
    """Schlanker Client für Modell-Auswahl und Textgenerierung."""

    def __init__(
        self,
        api_key: Optional[str],
        config: Optional[AssistConfig] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        self.config = config or AssistConfig()
        self.api_key = api_key
        self.base_url = self.config.base_url.rstrip("/")
        self.active_model: Optional[str] = None
        self._http = http or httpx.Client(timeout=self.config.timeout_seconds)

    @classmethod
    def from_config(cls, config: AssistConfig) -> "GeminiClient":
        """Erzeugt einen Client; der Schlüssel kommt aus der Umgebungsvariable."""
        api_key = os.environ.get(config.api_key_env)
        logger.debug(f"API-Schlüssel ({config.api_key_env}): "
                     f"{'geladen' if api_key else 'FEHLT'}")
        return cls(api_key, config)

    @property
    def has_key(self) -> bool:
        return bool(self.api_key)

    # ─── Modell-Auswahl ───

    def resolve_model(self) -> str:
        """Wählt das Modell einmalig pro Client aus der Liste der verfügbaren Modelle.

        Reihenfolge: erstes bevorzugtes Modell → irgendein "flash"-Modell →
        erstes verfügbares Modell → Fallback aus der Config.
        """
        if self.active_model:
            return self.active_model

        try:
            response = self._http.get(f"{self.base_url}/models",
                                      params={"key": self.api_key})
            response.raise_for_status()
            models = response.json().get("models") or []
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Modell-Liste nicht abrufbar: {e}")
            return self.config.fallback_model

        available = [
            m for m in models
            if "generateContent" in (m.get("supportedGenerationMethods") or [])
        ]

        best = None
        for preferred in self.config.preferred_models:
            best = next((m for m in available if preferred in m.get("name", "")), None)
            if best:
                break
        if best is None:
            best = next((m for m in available if "flash" in m.get("name", "")), None)
        if best is None and available:
            best = available[0]

        if best is None:
            logger.warning("Keine passenden Modelle gelistet – nutze Fallback")
            return self.config.fallback_model

        self.active_model = best["name"].replace("models/", "")
        logger.info(f"Verwende Modell: {self.active_model}")
        return self.active_model

    # ─── Anfrage ───

    def generate_json(self, prompt: str) -> dict:
        """Schickt einen Prompt und gibt das JSON-Objekt der Antwort zurück.

        Raises:
            IntentUnavailable: Netzwerk-/API-Fehler oder keine JSON-Antwort.
        """
        if not self.has_key:
            raise IntentUnavailable("Kein API-Schlüssel konfiguriert.")

        model = self.resolve_model()
        logger.info(f"KI-Anfrage ({model}): {prompt.strip()[:30]}...")

        try:
            response = self._http.post(
                f"{self.base_url}/models/{model}:generateContent",
                params={"key": self.api_key},
                json={"contents": [{"parts": [{"text": prompt}]}]},
            )
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            raise IntentUnavailable(f"Netzwerkfehler: {e}") from e

        if data.get("error"):
            message = data["error"].get("message", "unbekannt")
            raise IntentUnavailable(f"API-Fehler: {message}")

        candidates = data.get("candidates") or []
        if not candidates:
            raise IntentUnavailable("Antwort ohne Kandidaten.")
        try:
            text = candidates[0]["content"]["parts"][0]["text"]
        except (KeyError, IndexError, TypeError) as e:
            raise IntentUnavailable("Antwort hat unerwartete Struktur.") from e

        parsed = extract_json(text)
        if parsed is None:
            raise IntentUnavailable("Antwort enthält kein JSON-Objekt.")
        return parsed

    def close(self) -> None:
        self._http.close()
