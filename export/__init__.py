"""Export-Modul: Terminal-Darstellung des Stundenrasters (Rich)."""

from export.tui_renderer import render_day_grid_rows, status_style

__all__ = ["render_day_grid_rows", "status_style"]
