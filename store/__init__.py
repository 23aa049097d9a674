"""Lokaler Datenspeicher für Räume und Reservierungen."""

from store.schedule_store import ScheduleStore

__all__ = ["ScheduleStore"]
