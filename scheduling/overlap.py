"""Überschneidungstest für halboffene Zeitintervalle [start, end)."""


def overlaps(a_start: float, a_end: float, b_start: float, b_end: float) -> bool:
    """True wenn sich [a_start, a_end) und [b_start, b_end) schneiden.

    Intervalle, die sich nur am Rand berühren (10.0 Ende / 10.0 Beginn),
    überschneiden sich NICHT – direkt aufeinanderfolgende Kurse sind erlaubt.
    """
    return a_start < b_end and b_start < a_end


def contains(start: float, end: float, t: float) -> bool:
    """True wenn t in [start, end) liegt."""
    return start <= t < end
