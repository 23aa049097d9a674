"""Konfigurationsmanager: Laden, Speichern und Validieren.

Nutzt ruamel.yaml für YAML-Serialisierung mit Kommentaren.
"""

import json
import logging
from datetime import date
from pathlib import Path
from typing import Optional

from rich.console import Console
from ruamel.yaml import YAML
from ruamel.yaml.comments import CommentedMap

from config.defaults import default_campus_config
from config.schema import CampusConfig

console = Console()
logger = logging.getLogger(__name__)
yaml = YAML()
yaml.default_flow_style = False
yaml.width = 120


# ─── YAML-KOMMENTAR-AUFBAU ───

_YAML_HEADER = f"""\
# ============================================
# Raumplan: Campus-Konfiguration
# Version: 1.0
# Erstellt: {date.today().isoformat()}
# ============================================
"""

_SECTION_COMMENTS = {
    "refresh_seconds": (
        "Statusanzeige",
        "Intervall, in dem 'watch' den Raumstatus neu berechnet.",
    ),
    "grid": (
        "Stundenraster",
        "Volle Stunden im 24h-Format. end_hour ist die letzte angezeigte Zeile.",
    ),
    "assist": (
        "KI-Assistent",
        "Der API-Schlüssel wird aus der Umgebungsvariable api_key_env gelesen.",
    ),
    "store": (
        "Datenspeicher",
        None,
    ),
}


class ConfigManager:
    CONFIG_DIR = Path("config")
    DEFAULT_CONFIG = CONFIG_DIR / "campus_config.yaml"

    def __init__(self, path: Optional[Path] = None) -> None:
        self.config_path = Path(path) if path is not None else self.DEFAULT_CONFIG

    def first_run_check(self) -> bool:
        """Gibt True zurück wenn noch keine Config existiert (Erstaufruf)."""
        return not self.config_path.exists()

    # ─── Laden ───

    def load(self, path: Optional[Path] = None) -> CampusConfig:
        """Lade Config aus YAML. Validiert automatisch via Pydantic."""
        target = Path(path) if path is not None else self.config_path
        if not target.exists():
            raise FileNotFoundError(
                f"Konfigurationsdatei nicht gefunden: {target}\n"
                f"Führen Sie 'python main.py config init' aus."
            )
        with open(target, "r", encoding="utf-8") as f:
            raw = yaml.load(f)
        try:
            config = CampusConfig.model_validate(dict(raw or {}))
            return config
        except Exception as e:
            raise ValueError(
                f"Konfigurationsdatei ungültig: {target}\n"
                f"Pydantic-Fehler: {e}"
            ) from e

    def load_or_default(self) -> CampusConfig:
        """Wie load(), fällt aber ohne Datei auf die Standard-Konfiguration zurück."""
        if self.first_run_check():
            logger.debug(f"Keine Konfiguration unter {self.config_path}, nutze Defaults")
            return default_campus_config()
        return self.load()

    # ─── Speichern ───

    def save(self, config: CampusConfig, path: Optional[Path] = None) -> None:
        """Speichere Config als YAML mit Kommentaren."""
        target = Path(path) if path is not None else self.config_path
        target.parent.mkdir(parents=True, exist_ok=True)

        data = self._build_commented_yaml(config)

        with open(target, "w", encoding="utf-8") as f:
            f.write(_YAML_HEADER + "\n")
            yaml.dump(data, f)

        console.print(f"[green]✓[/green] Konfiguration gespeichert: {target}")

    def _build_commented_yaml(self, config: CampusConfig) -> CommentedMap:
        """Baut die YAML-Struktur mit Kommentaren auf."""
        raw = json.loads(config.model_dump_json())
        cm = CommentedMap(raw)

        for field, (label, comment) in _SECTION_COMMENTS.items():
            cm.yaml_set_comment_before_after_key(
                field,
                before=f"\n─── {label} ───" + (f"\n{comment}" if comment else ""),
            )

        # Inline-Kommentar für das Zeitlimit
        if "assist" in cm:
            assist_map = CommentedMap(cm["assist"])
            if "timeout_seconds" in assist_map:
                assist_map.yaml_add_eol_comment("leer = kein Limit", "timeout_seconds")
            cm["assist"] = assist_map

        return cm
