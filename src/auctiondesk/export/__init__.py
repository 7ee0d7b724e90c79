"""Roster export helpers (JSON, CSV, print document)."""

from .rosters import (
    DocumentLine,
    export_rosters_csv,
    export_rosters_json,
    format_money,
    paginate_rosters,
    render_rosters_document,
    roster_summary,
)

__all__ = [
    "DocumentLine",
    "export_rosters_csv",
    "export_rosters_json",
    "format_money",
    "paginate_rosters",
    "render_rosters_document",
    "roster_summary",
]
