"""Final-roster exports: JSON, CSV and a paginated print document."""

from __future__ import annotations

import csv
import json
from dataclasses import dataclass
from html import escape
from io import StringIO
from typing import Any, List, Sequence

from auctiondesk.config import DEFAULT_PAGE_LINES
from auctiondesk.models import AuctionState


DOCUMENT_TITLE = "Football Auction - Final Teams"

# Vertical budget of a team block, in document lines.
_TEAM_HEADER_LINES = 3
_TEAM_TRAILER_LINES = 1
_MIN_TEAM_LINES = _TEAM_HEADER_LINES + 2


def format_money(amount: int | float) -> str:
    return f"{round(amount):,}"


def roster_summary(state: AuctionState) -> list[dict[str, Any]]:
    """One entry per captain in captain order; rosters in acquisition order."""

    return [
        {
            "captain": captain.name,
            "teamName": captain.team_name,
            "remainingBudget": captain.budget,
            "players": [
                {
                    "name": entry.name,
                    "position": entry.position,
                    "rating": entry.rating,
                    "price": entry.price,
                }
                for entry in captain.roster
            ],
        }
        for captain in state.captains
    ]


def export_rosters_json(state: AuctionState) -> str:
    return json.dumps(roster_summary(state), indent=2)


def export_rosters_csv(state: AuctionState) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer)
    writer.writerow(["captain", "team_name", "remaining_budget", "pick", "name", "position", "rating", "price"])
    for team in roster_summary(state):
        if not team["players"]:
            writer.writerow([team["captain"], team["teamName"], team["remainingBudget"], "", "", "", "", ""])
            continue
        for pick, player in enumerate(team["players"], start=1):
            writer.writerow([
                team["captain"],
                team["teamName"],
                team["remainingBudget"],
                pick,
                player["name"],
                player["position"],
                player["rating"],
                player["price"],
            ])
    return buffer.getvalue()


@dataclass(frozen=True)
class DocumentLine:
    kind: str  # title | team | budget | label | player | empty | spacer
    text: str


def _team_lines(team: dict[str, Any]) -> list[DocumentLine]:
    lines = [
        DocumentLine("team", f"{team['teamName']}  ({team['captain']})"),
        DocumentLine("budget", f"Remaining Budget: {format_money(team['remainingBudget'])}"),
    ]
    if not team["players"]:
        lines.append(DocumentLine("empty", "Players: None"))
        return lines
    lines.append(DocumentLine("label", "Players:"))
    for idx, player in enumerate(team["players"], start=1):
        lines.append(
            DocumentLine(
                "player",
                f"{idx}. {player['name']}  •  {player['position']}  •  "
                f"Rating {player['rating']}  •  {format_money(player['price'])}",
            )
        )
    return lines


def paginate_rosters(summary: Sequence[dict[str, Any]], *, page_lines: int = DEFAULT_PAGE_LINES) -> List[List[DocumentLine]]:
    """Split the roster summary into pages of at most ``page_lines`` lines.

    A team block starts on a new page when fewer than its header plus two
    lines remain, and long rosters continue onto the following page.
    """

    page_lines = max(page_lines, _MIN_TEAM_LINES)
    pages: List[List[DocumentLine]] = [[DocumentLine("title", DOCUMENT_TITLE)]]
    for team in summary:
        current = pages[-1]
        if len(current) > page_lines - _MIN_TEAM_LINES:
            current = []
            pages.append(current)
        for line in _team_lines(team):
            if len(current) >= page_lines:
                current = []
                pages.append(current)
            current.append(line)
        if len(current) + _TEAM_TRAILER_LINES <= page_lines:
            current.append(DocumentLine("spacer", ""))
    return pages


def render_rosters_document(state: AuctionState, *, page_lines: int = DEFAULT_PAGE_LINES) -> str:
    """Printable HTML with one ``.page`` section per page."""

    pages = paginate_rosters(roster_summary(state), page_lines=page_lines)
    sections = []
    for number, page in enumerate(pages, start=1):
        rows = []
        for line in page:
            if line.kind == "title":
                rows.append(f"<h1>{escape(line.text)}</h1>")
            elif line.kind == "team":
                rows.append(f"<h2>{escape(line.text)}</h2>")
            elif line.kind == "player":
                rows.append(f"<p class=\"player\">{escape(line.text)}</p>")
            elif line.kind == "spacer":
                rows.append("<hr>")
            else:
                rows.append(f"<p>{escape(line.text)}</p>")
        sections.append(
            f"<section class=\"page\" data-page=\"{number}\">{''.join(rows)}"
            f"<footer>Page {number} of {len(pages)}</footer></section>"
        )
    return f"""<!DOCTYPE html>
<html lang=\"en\">
<head>
    <meta charset=\"utf-8\">
    <title>{escape(DOCUMENT_TITLE)}</title>
    <style>
        body {{ font-family: Helvetica, Arial, sans-serif; margin: 0; }}
        .page {{ padding: 40pt; page-break-after: always; }}
        .page:last-child {{ page-break-after: auto; }}
        h1 {{ font-size: 18pt; }}
        h2 {{ font-size: 14pt; margin: 0.4rem 0; }}
        p {{ font-size: 12pt; margin: 0.2rem 0; }}
        p.player {{ margin-left: 12pt; }}
        hr {{ border: none; border-top: 1px solid #c8c8c8; }}
        footer {{ color: #64748b; font-size: 9pt; margin-top: 1rem; }}
    </style>
</head>
<body>
{''.join(sections)}
</body>
</html>"""


__all__ = [
    "DocumentLine",
    "export_rosters_csv",
    "export_rosters_json",
    "format_money",
    "paginate_rosters",
    "render_rosters_document",
    "roster_summary",
]
