"""Kernlogik: Uhrzeiten, Überschneidungen, Raumstatus, Konfliktprüfung und Suche."""
