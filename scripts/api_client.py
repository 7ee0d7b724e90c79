"""Lightweight REST client for the auctiondesk API."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

import httpx


def _detail(resp: httpx.Response) -> str:
    try:
        detail = resp.json().get("detail")
    except json.JSONDecodeError:
        return resp.text
    if isinstance(detail, dict):
        return f"{detail.get('error')}: {detail.get('message')}"
    return str(detail)


def main() -> None:
    parser = argparse.ArgumentParser(description="Interact with the auctiondesk REST API")
    parser.add_argument("base_url", help="Base URL of the API, e.g. http://localhost:8000")
    parser.add_argument("--session", action="store_true", help="Show whether a saved auction awaits restore")
    parser.add_argument("--restore", action="store_true", help="Restore the saved auction")
    parser.add_argument("--discard", action="store_true", help="Discard the saved auction and start fresh")
    parser.add_argument("--award", nargs=2, metavar=("CAPTAIN", "AMOUNT"), help="Award current player")
    parser.add_argument("--best", metavar="AMOUNT", help="Award current player to the richest eligible team")
    parser.add_argument("--stay", action="store_true", help="Do not advance after awarding")
    parser.add_argument("--next", action="store_true", help="Move to the next unsold player")
    parser.add_argument("--summary", action="store_true", help="Print sold/remaining counts")
    parser.add_argument("--export", choices=("json", "csv", "html"), help="Download the roster export")
    parser.add_argument("--export-path", type=Path, help="Destination path for the export")
    args = parser.parse_args()

    with httpx.Client(base_url=args.base_url) as client:
        if args.session:
            resp = client.get("/session")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.restore or args.discard:
            resp = client.post("/session/restore" if args.restore else "/session/discard")
            if resp.status_code == 409:
                raise SystemExit(_detail(resp))
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.award or args.best is not None:
            if args.award:
                captain, amount = args.award
                resp = client.post(
                    "/award",
                    json={"captain_index": int(captain), "amount": amount, "advance": not args.stay},
                )
            else:
                resp = client.post("/award/best", json={"amount": args.best, "advance": not args.stay})
            if resp.status_code in {400, 404, 409}:
                raise SystemExit(_detail(resp))
            resp.raise_for_status()
            payload = resp.json()
            print(payload["message"])
            if payload.get("warning"):
                print(f"Warning: {payload['warning']}")
        if args.next:
            resp = client.post("/navigate/next-unsold")
            resp.raise_for_status()
            payload = resp.json()
            if payload["complete"]:
                print(payload["message"])
            elif payload.get("player"):
                print(f"Now on {payload['player']['name']} (#{payload['index'] + 1})")
        if args.summary:
            resp = client.get("/summary")
            resp.raise_for_status()
            print(json.dumps(resp.json(), indent=2))
        if args.export:
            resp = client.get(f"/export.{args.export}")
            resp.raise_for_status()
            if args.export_path:
                args.export_path.write_text(resp.text, encoding="utf-8")
                print(f"Export saved to {args.export_path}")
            else:
                print(resp.text)


if __name__ == "__main__":
    main()
