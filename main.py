"""Raumplan — Haupt-CLI.

Verwendung:
  python main.py config init               Standard-Konfiguration anlegen
  python main.py config show               Konfiguration anzeigen
  python main.py seed                      Demo-Räume und -Stundenplan anlegen
  python main.py room list                 Räume mit aktuellem Status
  python main.py room add|edit|delete      Räume verwalten
  python main.py class list <raum-id>      Stundenplan eines Raums
  python main.py class add|edit|delete     Veranstaltungen verwalten (mit Konfliktprüfung)
  python main.py grid                      Stundenraster eines Tages
  python main.py search "<text>" [--ai]    Räume suchen (optional per KI)
  python main.py book "<text>"             Veranstaltung per Freitext buchen (KI)
  python main.py issue "<text>"            Schadensmeldung einordnen (KI)
  python main.py watch                     Live-Status, Aktualisierung alle 60 s
"""

import logging
import sys
import time
from datetime import datetime
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.live import Live
from rich.logging import RichHandler
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table
from rich import box

from models.weekday import Weekday

console = Console()

_DAY_CHOICE = click.Choice([d.value for d in Weekday], case_sensitive=False)
_AT_FORMATS = ["%Y-%m-%d %H:%M", "%Y-%m-%dT%H:%M"]


# ─── Hilfsfunktionen ──────────────────────────────────────────────────────────

def _fail(message: str) -> None:
    """Gibt eine Fehlermeldung aus und beendet mit Exit-Code 1."""
    console.print(f"[red bold]Fehler:[/red bold] {escape(message)}")
    sys.exit(1)


def _validation_message(e: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(p) for p in err['loc']) or 'Eingabe'}: {err['msg']}"
        for err in e.errors()
    )


def _config(ctx: click.Context):
    return ctx.obj["config"]


def _open_store(ctx: click.Context):
    from store.schedule_store import ScheduleStore
    return ScheduleStore(ctx.obj["data_path"])


def _now(at: Optional[datetime]) -> datetime:
    return at or datetime.now()


def _default_day(now: datetime) -> Weekday:
    """Heutiger Wochentag; am Wochenende Montag."""
    today = Weekday.of(now)
    if today in (Weekday.SATURDAY, Weekday.SUNDAY):
        return Weekday.MONDAY
    return today


def _intent_service(ctx: click.Context):
    from assist import GeminiClient, IntentService
    assist_cfg = _config(ctx).assist
    if not assist_cfg.enabled:
        return None
    client = GeminiClient.from_config(assist_cfg)
    if not client.has_key:
        console.print(
            f"[yellow]Kein API-Schlüssel in ${assist_cfg.api_key_env} – "
            f"KI-Assistent nicht verfügbar.[/yellow]"
        )
        return None
    return IntentService(client)


def _room_table(views, title: str) -> Table:
    from export.tui_renderer import status_style
    table = Table(title=title, box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Name", style="bold")
    table.add_column("Typ")
    table.add_column("Plätze", justify="right")
    table.add_column("Ausstattung")
    table.add_column("Status")
    table.add_column("Kurse", justify="right")
    for v in views:
        style = status_style(v.color)
        table.add_row(
            str(v.id), v.name, v.room_type, str(v.room.capacity),
            ", ".join(v.room.equipment),
            f"[{style}]{v.status.value}[/{style}]" if style else v.status.value,
            str(len(v.daily_schedule)),
        )
    return table


def _grid_table(views, config, day: Weekday) -> Table:
    from export.tui_renderer import render_day_grid_rows, status_style
    table = Table(title=f"Stundenraster {day.value}", box=box.SIMPLE_HEAVY,
                  show_lines=True)
    table.add_column("Zeit", style="dim")
    for v in views:
        style = status_style(v.color)
        table.add_column(f"[{style}]{v.name}[/{style}]\n{v.status.value}" if style else v.name)
    for row in render_day_grid_rows(views, config.grid.start_hour, config.grid.end_hour):
        table.add_row(*row)
    return table


# ─── CONFIG ───────────────────────────────────────────────────────────────────

@click.group("config")
def cmd_config():
    """Konfiguration anlegen oder anzeigen."""


@cmd_config.command("init")
@click.option("--force", is_flag=True, default=False,
              help="Bestehende Konfiguration überschreiben.")
@click.pass_context
def config_init(ctx: click.Context, force: bool):
    """Schreibt die Standard-Konfiguration als YAML."""
    from config.defaults import default_campus_config
    mgr = ctx.obj["config_manager"]
    if not mgr.first_run_check() and not force:
        console.print(
            "[yellow]Eine Konfiguration existiert bereits.[/yellow]\n"
            "Verwenden Sie [bold]--force[/bold] zum Überschreiben."
        )
        return
    mgr.save(default_campus_config())


@cmd_config.command("show")
@click.pass_context
def config_show(ctx: click.Context):
    """Zeigt die aktuelle Konfiguration an."""
    from config.defaults import ROOM_TYPES

    config = _config(ctx)

    console.print(Panel(
        f"[bold]{config.campus_name}[/bold]  |  "
        f"Aktualisierung alle {config.refresh_seconds}s",
        title="Campus-Konfiguration",
        border_style="cyan",
    ))

    table = Table(title="Raumtypen", box=box.ROUNDED)
    table.add_column("Typ")
    for t in ROOM_TYPES:
        table.add_row(t)
    console.print(table)

    console.print(
        f"[bold]Stundenraster:[/bold] {config.grid.start_hour}:00 – "
        f"{config.grid.end_hour}:00"
    )
    console.print(
        f"[bold]KI:[/bold] {'aktiv' if config.assist.enabled else 'aus'} | "
        f"Schlüssel aus ${config.assist.api_key_env} | "
        f"Modelle: {', '.join(config.assist.preferred_models)}"
    )
    console.print(f"[bold]Daten:[/bold] {ctx.obj['data_path']}")


# ─── SEED ─────────────────────────────────────────────────────────────────────

@click.command("seed")
@click.option("--seed", default=42, help="Zufalls-Seed für reproduzierbare Daten.")
@click.option("--reset", is_flag=True, default=False,
              help="Vorhandene Daten vorher löschen.")
@click.pass_context
def cmd_seed(ctx: click.Context, seed: int, reset: bool):
    """Legt Demo-Räume und einen Demo-Wochenplan an."""
    from data.sample_data import SampleDataGenerator

    data_path: Path = ctx.obj["data_path"]
    if data_path.exists():
        if not reset:
            _fail(f"Datenbestand existiert bereits: {data_path} (--reset zum Überschreiben)")
        data_path.unlink()

    store = _open_store(ctx)
    gen = SampleDataGenerator(seed=seed)
    gen.populate(store)
    gen.print_summary(store)
    console.print(Panel(store.data.summary(), title="Datenbestand", border_style="cyan"))
    console.print(f"[green]✓[/green] Gespeichert: {data_path}")


# ─── ROOM ─────────────────────────────────────────────────────────────────────

@click.group("room")
def cmd_room():
    """Räume anzeigen und verwalten."""


@cmd_room.command("list")
@click.option("--day", type=_DAY_CHOICE, default=None, help="Angezeigter Tag (Standard: heute).")
@click.option("--type", "filter_type", default="All", help="Raumtyp-Filter.")
@click.option("--search", "keyword", default="", help="Suchtext (Name oder Typ).")
@click.option("--at", type=click.DateTime(formats=_AT_FORMATS), default=None,
              help="Zeitpunkt für die Statusberechnung (Standard: jetzt).")
@click.pass_context
def room_list(ctx: click.Context, day: Optional[str], filter_type: str,
              keyword: str, at: Optional[datetime]):
    """Listet alle Räume mit aktuellem Status."""
    from models.intent import SearchIntent
    from scheduling.search import search_rooms

    now = _now(at)
    store = _open_store(ctx)
    intent = SearchIntent(day=day, filter_type=filter_type, search_keyword=keyword)
    views = search_rooms(store, intent, _default_day(now), now)
    shown_day = intent.day or _default_day(now)
    if not views:
        console.print("[dim]Keine Räume gefunden.[/dim]")
        return
    console.print(_room_table(views, f"Räume – {shown_day.value}, {now:%H:%M}"))


@cmd_room.command("add")
@click.option("--name", required=True, help="Raumname, z.B. 101-A.")
@click.option("--capacity", type=int, required=True, help="Sitzplätze.")
@click.option("--type", "room_type", required=True, help="Raumtyp.")
@click.option("--equipment", default="", help="Ausstattung, kommagetrennt.")
@click.pass_context
def room_add(ctx: click.Context, name: str, capacity: int, room_type: str, equipment: str):
    """Legt einen neuen Raum an."""
    from models.room import Room

    try:
        room = Room(name=name, capacity=capacity, room_type=room_type, equipment=equipment)
    except ValidationError as e:
        _fail(_validation_message(e))
    new_id = _open_store(ctx).insert_room(room)
    console.print(f"[green]✓[/green] Raum angelegt: {room.name} (#{new_id})")


@cmd_room.command("edit")
@click.argument("room_id", type=int)
@click.option("--name", default=None)
@click.option("--capacity", type=int, default=None)
@click.option("--type", "room_type", default=None)
@click.option("--status", type=click.Choice(["Available", "Maintenance", "Reserved"],
                                            case_sensitive=False), default=None)
@click.option("--equipment", default=None, help="Ausstattung, kommagetrennt.")
@click.pass_context
def room_edit(ctx: click.Context, room_id: int, **fields):
    """Ändert einzelne Felder eines Raums (inkl. Admin-Status)."""
    from scheduling.errors import NotFoundError

    changes = {k: v for k, v in fields.items() if v is not None}
    if not changes:
        console.print("[yellow]Keine Änderungen angegeben.[/yellow]")
        return
    try:
        room = _open_store(ctx).update_room(room_id, **changes)
    except NotFoundError as e:
        _fail(str(e))
    except ValidationError as e:
        _fail(_validation_message(e))
    console.print(f"[green]✓[/green] Raum #{room_id} aktualisiert: {room.name} ({room.status.value})")


@cmd_room.command("delete")
@click.argument("room_id", type=int)
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage löschen.")
@click.pass_context
def room_delete(ctx: click.Context, room_id: int, yes: bool):
    """Löscht einen Raum samt Stundenplan."""
    from scheduling.errors import NotFoundError

    if not yes and not click.confirm(
            f"Raum #{room_id} und alle Reservierungen löschen?", default=False):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return
    try:
        _open_store(ctx).delete_room(room_id)
    except NotFoundError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Raum #{room_id} gelöscht.")


# ─── CLASS (Reservierungen) ───────────────────────────────────────────────────

@click.group("class")
def cmd_class():
    """Veranstaltungen (Reservierungen) eines Raums verwalten."""


@cmd_class.command("list")
@click.argument("room_id", type=int)
@click.option("--day", type=_DAY_CHOICE, default=None, help="Nur dieser Tag.")
@click.pass_context
def class_list(ctx: click.Context, room_id: int, day: Optional[str]):
    """Zeigt den Wochenplan (oder einen Tag) eines Raums."""
    store = _open_store(ctx)
    room = store.get_room(room_id)
    if room is None:
        _fail(f"Raum nicht gefunden: {room_id}")

    days = [Weekday(day.title())] if day else list(Weekday)
    table = Table(title=f"Stundenplan {room.name}", box=box.ROUNDED)
    table.add_column("#", justify="right")
    table.add_column("Tag")
    table.add_column("Zeit")
    table.add_column("Fach", style="bold")
    table.add_column("Dozent")
    rows = 0
    for d in days:
        for res in store.list_reservations(room_id, d):
            table.add_row(str(res.id), d.value, f"{res.start_time}–{res.end_time}",
                          res.subject, res.professor)
            rows += 1
    if rows == 0:
        console.print("[dim]Keine Veranstaltungen.[/dim]")
        return
    console.print(table)


@cmd_class.command("add")
@click.argument("room_id", type=int)
@click.option("--day", type=_DAY_CHOICE, required=True)
@click.option("--subject", required=True, help="z.B. Math 101")
@click.option("--professor", required=True, help="z.B. Dr. Smith")
@click.option("--start", "start_time", required=True, help='z.B. "9:00 AM"')
@click.option("--end", "end_time", required=True, help='z.B. "10:30 AM"')
@click.pass_context
def class_add(ctx: click.Context, room_id: int, day: str, subject: str,
              professor: str, start_time: str, end_time: str):
    """Plant eine Veranstaltung ein (lehnt Überschneidungen ab)."""
    from models.reservation import Reservation
    from scheduling.errors import ConflictError, NotFoundError

    try:
        res = Reservation(room_id=room_id, day=day, subject=subject, professor=professor,
                          start_time=start_time, end_time=end_time)
        new_id = _open_store(ctx).insert_reservation(res)
    except ValidationError as e:
        _fail(_validation_message(e))
    except ConflictError as e:
        _fail(f"Konflikt erkannt – {e}")
    except NotFoundError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Eingeplant: {res} am {res.day.value} (#{new_id})")


@cmd_class.command("edit")
@click.argument("reservation_id", type=int)
@click.option("--day", type=_DAY_CHOICE, default=None)
@click.option("--subject", default=None)
@click.option("--professor", default=None)
@click.option("--start", "start_time", default=None)
@click.option("--end", "end_time", default=None)
@click.option("--room", "room_id", type=int, default=None, help="In anderen Raum verlegen.")
@click.pass_context
def class_edit(ctx: click.Context, reservation_id: int, **fields):
    """Ändert eine Veranstaltung (Konfliktprüfung ohne sich selbst)."""
    from scheduling.errors import ConflictError, NotFoundError

    changes = {k: v for k, v in fields.items() if v is not None}
    if not changes:
        console.print("[yellow]Keine Änderungen angegeben.[/yellow]")
        return
    try:
        res = _open_store(ctx).update_reservation(reservation_id, **changes)
    except ValidationError as e:
        _fail(_validation_message(e))
    except ConflictError as e:
        _fail(f"Konflikt erkannt – {e}")
    except NotFoundError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Aktualisiert: {res} am {res.day.value}")


@cmd_class.command("delete")
@click.argument("reservation_id", type=int)
@click.pass_context
def class_delete(ctx: click.Context, reservation_id: int):
    """Löscht eine Veranstaltung."""
    from scheduling.errors import NotFoundError

    try:
        _open_store(ctx).delete_reservation(reservation_id)
    except NotFoundError as e:
        _fail(str(e))
    console.print(f"[green]✓[/green] Veranstaltung #{reservation_id} gelöscht.")


# ─── GRID ─────────────────────────────────────────────────────────────────────

@click.command("grid")
@click.option("--day", type=_DAY_CHOICE, default=None, help="Tag (Standard: heute).")
@click.option("--type", "filter_type", default="All", help="Raumtyp-Filter.")
@click.option("--at", type=click.DateTime(formats=_AT_FORMATS), default=None)
@click.pass_context
def cmd_grid(ctx: click.Context, day: Optional[str], filter_type: str,
             at: Optional[datetime]):
    """Zeigt das Stundenraster eines Tages (Räume × Stunden)."""
    from models.intent import SearchIntent
    from scheduling.search import search_rooms

    now = _now(at)
    intent = SearchIntent(day=day, filter_type=filter_type)
    views = search_rooms(_open_store(ctx), intent, _default_day(now), now)
    if not views:
        console.print("[dim]Keine Räume gefunden.[/dim]")
        return
    console.print(_grid_table(views, _config(ctx), intent.day or _default_day(now)))


# ─── SEARCH ───────────────────────────────────────────────────────────────────

@click.command("search")
@click.argument("query", default="")
@click.option("--ai", "use_ai", is_flag=True, default=False,
              help="Freitext über den KI-Assistenten auswerten.")
@click.option("--day", type=_DAY_CHOICE, default=None)
@click.option("--type", "filter_type", default="All")
@click.option("--from", "time_start", type=float, default=None, help="Frei ab (24h, z.B. 13.5).")
@click.option("--to", "time_end", type=float, default=None, help="Frei bis (24h).")
@click.option("--status", "target_status", default=None, help="z.B. Available")
@click.option("--min-capacity", type=int, default=None)
@click.option("--equipment", multiple=True, help="Benötigte Ausstattung (mehrfach).")
@click.option("--at", type=click.DateTime(formats=_AT_FORMATS), default=None)
@click.pass_context
def cmd_search(ctx: click.Context, query: str, use_ai: bool, day: Optional[str],
               filter_type: str, time_start: Optional[float], time_end: Optional[float],
               target_status: Optional[str], min_capacity: Optional[int],
               equipment: tuple, at: Optional[datetime]):
    """Sucht freie/passende Räume – manuell oder per KI-Freitext."""
    from models.intent import SearchIntent
    from scheduling.search import merge_intent, search_rooms

    now = _now(at)
    manual = SearchIntent(
        day=day, filter_type=filter_type,
        search_keyword=None if use_ai else query,
        time_start=time_start, time_end=time_end,
        target_status=target_status, min_capacity=min_capacity,
        equipment=list(equipment),
    )

    intent = manual
    if use_ai and query.strip():
        service = _intent_service(ctx)
        ai_intent = service.translate_search(query) if service else None
        if ai_intent is None:
            console.print("[yellow]KI konnte die Anfrage nicht auswerten – "
                          "nur manuelle Filter aktiv.[/yellow]")
        else:
            console.print(f"[dim]KI-Filter: {ai_intent.model_dump(exclude_defaults=True, by_alias=True)}[/dim]")
        intent = merge_intent(manual, ai_intent)

    views = search_rooms(_open_store(ctx), intent, _default_day(now), now)
    shown_day = intent.day or _default_day(now)
    if not views:
        console.print("[dim]Keine Räume gefunden.[/dim]")
        return
    console.print(_room_table(views, f"Suchergebnis – {shown_day.value}"))


# ─── BOOK ─────────────────────────────────────────────────────────────────────

@click.command("book")
@click.argument("text")
@click.option("--yes", is_flag=True, default=False, help="Ohne Rückfrage speichern.")
@click.pass_context
def cmd_book(ctx: click.Context, text: str, yes: bool):
    """Plant eine Veranstaltung aus Freitext ein (KI-Buchungsassistent)."""
    from scheduling.booking import draft_from_booking
    from scheduling.errors import ConflictError, NotFoundError

    service = _intent_service(ctx)
    intent = service.translate_booking(text) if service else None
    if intent is None:
        _fail("Buchungswunsch konnte nicht ausgewertet werden.")

    store = _open_store(ctx)
    try:
        draft = draft_from_booking(intent, store.list_rooms())
    except NotFoundError as e:
        _fail(str(e))
    except ValidationError as e:
        _fail(f"Angaben unvollständig – {_validation_message(e)}")

    room = store.get_room(draft.room_id)
    console.print(Panel(
        f"[bold]{draft.subject}[/bold] ({draft.professor})\n"
        f"{room.name} – {draft.day.value} {draft.start_time}–{draft.end_time}",
        title="Buchungsentwurf", border_style="cyan",
    ))
    if not yes and not click.confirm("Speichern?", default=True):
        console.print("[yellow]Abgebrochen.[/yellow]")
        return
    try:
        new_id = store.insert_reservation(draft)
    except ConflictError as e:
        _fail(f"Konflikt erkannt – {e}")
    console.print(f"[green]✓[/green] Eingeplant (#{new_id}).")


# ─── ISSUE ────────────────────────────────────────────────────────────────────

@click.command("issue")
@click.argument("text")
@click.pass_context
def cmd_issue(ctx: click.Context, text: str):
    """Ordnet eine Schadensmeldung ein (Kategorie, Dringlichkeit, Maßnahme)."""
    service = _intent_service(ctx)
    analysis = service.analyze_issue(text) if service else None
    if analysis is None:
        _fail("Meldung konnte nicht ausgewertet werden.")

    urgency_style = {"Low": "green", "Medium": "yellow",
                     "High": "dark_orange", "Critical": "bold red"}[analysis.urgency]
    console.print(Panel(
        f"[bold]Kategorie:[/bold] {analysis.category}\n"
        f"[bold]Dringlichkeit:[/bold] [{urgency_style}]{analysis.urgency}[/{urgency_style}]\n"
        f"[bold]Zusammenfassung:[/bold] {analysis.summary}\n"
        f"[bold]Empfehlung:[/bold] {analysis.suggested_action}",
        title="Schadensmeldung", border_style="cyan",
    ))


# ─── WATCH ────────────────────────────────────────────────────────────────────

@click.command("watch")
@click.option("--day", type=_DAY_CHOICE, default=None)
@click.option("--iterations", type=int, default=0,
              help="Anzahl Aktualisierungen (0 = bis Strg+C).")
@click.pass_context
def cmd_watch(ctx: click.Context, day: Optional[str], iterations: int):
    """Live-Ansicht: berechnet den Raumstatus periodisch neu."""
    from scheduling.status import build_room_views

    config = _config(ctx)
    store = _open_store(ctx)

    def _render() -> Table:
        now = datetime.now()
        shown = Weekday(day.title()) if day else _default_day(now)
        return _room_table(build_room_views(store, shown, now),
                           f"Live-Status {now:%H:%M} – {shown.value}")

    count = 0
    try:
        with Live(_render(), console=console, auto_refresh=False,
                  vertical_overflow="visible") as live:
            count = 1
            while iterations == 0 or count < iterations:
                time.sleep(config.refresh_seconds)
                live.update(_render(), refresh=True)
                count += 1
    except KeyboardInterrupt:
        console.print("[dim]Beendet.[/dim]")


# ─── HAUPT-CLI ────────────────────────────────────────────────────────────────

@click.group()
@click.option("--config", "config_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zur Konfigurationsdatei (Standard: config/campus_config.yaml).")
@click.option("--data", "data_path", type=click.Path(path_type=Path), default=None,
              help="Pfad zum Datenbestand (überschreibt die Konfiguration).")
@click.option("--verbose", "-v", is_flag=True, default=False, help="Ausführliches Logging.")
@click.pass_context
def cli(ctx: click.Context, config_path: Optional[Path], data_path: Optional[Path],
        verbose: bool):
    """Raumplan: Campus-Räume, Stundenpläne und Live-Belegung.

    Starten Sie mit: python main.py seed
    """
    from config.manager import ConfigManager

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )

    mgr = ConfigManager(config_path)
    try:
        config = mgr.load_or_default()
    except ValueError as e:
        _fail(str(e))

    ctx.ensure_object(dict)
    ctx.obj["config_manager"] = mgr
    ctx.obj["config"] = config
    ctx.obj["data_path"] = data_path or Path(config.store.data_path)


def main():
    """Einstiegspunkt."""
    cli(obj={})


# Befehle registrieren
cli.add_command(cmd_config)
cli.add_command(cmd_seed)
cli.add_command(cmd_room)
cli.add_command(cmd_class)
cli.add_command(cmd_grid)
cli.add_command(cmd_search)
cli.add_command(cmd_book)
cli.add_command(cmd_issue)
cli.add_command(cmd_watch)


if __name__ == "__main__":
    main()
