from pydantic import BaseModel, Field, model_validator
from typing import Optional


# ─── ZEITRASTER (Stundenraster der Tagesansicht) ───

class GridConfig(BaseModel):
    """Sichtbarer Bereich des Stundenrasters (volle Stunden, 24h)."""
    # Erste angezeigte Stunde
    start_hour: int = Field(7, ge=0, le=23,
        description="Erste Stunde im Raster")
    # Letzte angezeigte Stunde (inklusive)
    end_hour: int = Field(18, ge=1, le=24,
        description="Letzte Stunde im Raster")

    @model_validator(mode='after')
    def validate_range(self):
        """Rasterbeginn muss vor dem Rasterende liegen."""
        if self.start_hour >= self.end_hour:
            raise ValueError(
                f"Rasterbeginn {self.start_hour} liegt nicht vor Rasterende {self.end_hour}")
        return self


# ─── KI-ASSISTENT ───

class AssistConfig(BaseModel):
    """Anbindung an den generativen Textdienst (Gemini-API)."""
    # Assistent global an/aus
    enabled: bool = Field(True,
        description="KI-Suche aktiv")
    # Name der Umgebungsvariable mit dem API-Schlüssel (Schlüssel selbst nie in der Datei)
    api_key_env: str = Field("GEMINI_API_KEY",
        description="Umgebungsvariable mit dem API-Schlüssel")
    # Basis-URL der API
    base_url: str = Field("https://generativelanguage.googleapis.com/v1beta",
        description="Basis-URL der API")
    # Bevorzugte Modelle in absteigender Priorität
    preferred_models: list[str] = Field(
        default=[
            "gemini-2.5-flash",
            "gemini-2.0-flash",
            "gemini-2.0-flash-001",
            "gemini-flash-latest",
            "gemini-1.5-flash",
        ],
        description="Bevorzugte Modelle (Reihenfolge = Priorität)")
    # Modell, falls die Modell-Liste nicht abrufbar ist
    fallback_model: str = Field("gemini-2.0-flash",
        description="Modell, wenn die Modell-Liste nicht abrufbar ist")
    # Zeitlimit pro Anfrage in Sekunden (None = warten bis Antwort)
    timeout_seconds: Optional[float] = Field(None, gt=0,
        description="Zeitlimit pro Anfrage (leer = kein Limit)")


# ─── DATENSPEICHER ───

class StoreConfig(BaseModel):
    """Ablage des lokalen Datenbestands."""
    # Pfad zur JSON-Datei mit Räumen und Reservierungen
    data_path: str = Field("output/campus_data.json",
        description="JSON-Datei mit Räumen und Reservierungen")


# ─── GESAMT-CONFIG ───

class CampusConfig(BaseModel):
    """Gesamtkonfiguration des Raumplans."""
    # Name des Campus (Anzeige)
    campus_name: str = Field("Campus",
        description="Name des Campus")
    # Aktualisierungsintervall der Statusanzeige in Sekunden
    refresh_seconds: int = Field(60, ge=5, le=3600,
        description="Status-Aktualisierung (Sekunden)")
    # Stundenraster der Tagesansicht
    grid: GridConfig = Field(default_factory=GridConfig)
    # KI-Assistent
    assist: AssistConfig = Field(default_factory=AssistConfig)
    # Datenspeicher
    store: StoreConfig = Field(default_factory=StoreConfig)
