import csv
import json
from io import StringIO
from pathlib import Path

import pytest
from httpx import ASGITransport, AsyncClient

from auctiondesk.api import create_app
from auctiondesk.config import get_settings


def _write_feeds(directory: Path) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    players = {
        "players": [
            {"name": "Rahul Menon", "position": "Forward", "photo": "rahul.jpg", "rating": 88},
            {"name": "Samir Khan", "position": "Midfielder", "photo": "samir.jpg", "rating": 84},
            {"name": "Leo Fernandes", "position": "Defender", "photo": "leo.jpg", "rating": 81},
        ]
    }
    captains = {"captains": [{"name": "Arjun", "teamName": "Red Falcons"}, {"name": "Bilal", "teamName": "Blue Sharks"}]}
    (directory / "players.json").write_text(json.dumps(players), encoding="utf-8")
    (directory / "captains.json").write_text(json.dumps(captains), encoding="utf-8")
    (directory / "config.json").write_text(json.dumps({"teamSize": 2, "initialBudget": 10000}), encoding="utf-8")
    return directory


@pytest.fixture
def settings(tmp_path):
    return get_settings(db_path=tmp_path / "auction.sqlite", data_dir=_write_feeds(tmp_path / "data"))


@pytest.fixture
async def client(settings):
    app = create_app(settings)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://testserver") as async_client:
        async_client.app = app
        yield async_client


@pytest.mark.anyio
async def test_health(client: AsyncClient):
    resp = await client.get("/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


@pytest.mark.anyio
async def test_fresh_session_is_active(client: AsyncClient):
    resp = await client.get("/session")
    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "active"
    assert body["total_players"] == 3
    assert body["sold_players"] == 0

    resp = await client.get("/current")
    assert resp.json()["name"] == "Rahul Menon"

    resp = await client.get("/state")
    state = resp.json()
    assert state["currentIndex"] == 0
    assert state["config"] == {"teamSize": 2, "initialBudget": 10000}


@pytest.mark.anyio
async def test_award_advances_to_next_unsold(client: AsyncClient):
    resp = await client.post("/award", json={"captain_index": 0, "amount": "4500"})
    assert resp.status_code == 200
    payload = resp.json()
    assert payload["amount"] == 4500
    assert payload["message"] == "Awarded Rahul Menon to Red Falcons for 4,500."
    assert payload["player"]["sold"]
    assert payload["player"]["awarded_to"] == "Arjun"
    assert payload["captain"]["budget"] == 5500
    assert payload["captain"]["full"]
    assert payload["navigation"]["index"] == 1
    assert payload["navigation"]["player"]["name"] == "Samir Khan"

    resp = await client.get("/captains")
    captains = resp.json()
    assert captains[0]["spent"] == 4500
    assert captains[0]["roster"] == [{"name": "Rahul Menon", "position": "Forward", "rating": 88, "price": 4500}]


@pytest.mark.anyio
async def test_award_without_advance_stays(client: AsyncClient):
    resp = await client.post("/award", json={"captain_index": 1, "amount": 300, "advance": False})
    assert resp.status_code == 200
    assert resp.json()["navigation"] is None
    resp = await client.get("/current")
    assert resp.json()["index"] == 0


@pytest.mark.anyio
@pytest.mark.parametrize(
    "body, status, error",
    [
        ({"captain_index": 7, "amount": 10}, 404, "InvalidReference"),
        ({"captain_index": 0, "amount": "lots"}, 400, "InvalidBid"),
        ({"captain_index": 0, "amount": -5}, 400, "InvalidBid"),
        ({"captain_index": 0, "amount": 10001}, 409, "InsufficientBudget"),
        ({"captain_index": 0, "amount": True}, 400, "InvalidBid"),
        ({"captain_index": 0, "amount": [100]}, 400, "InvalidBid"),
    ],
)
async def test_award_rejections(client: AsyncClient, body, status, error):
    resp = await client.post("/award", json=body)
    assert resp.status_code == status
    assert resp.json()["detail"]["error"] == error

    resp = await client.get("/state")
    state = resp.json()
    assert not state["players"][0]["sold"]
    assert all(captain["budget"] == 10000 for captain in state["captains"])


@pytest.mark.anyio
async def test_double_award_and_full_team(client: AsyncClient):
    resp = await client.post("/award", json={"captain_index": 0, "amount": 100, "advance": False})
    assert resp.status_code == 200
    resp = await client.post("/award", json={"captain_index": 1, "amount": 100})
    assert resp.status_code == 409
    assert resp.json()["detail"] == {"error": "AlreadyAwarded", "message": "Player already awarded."}

    await client.post("/navigate/next")
    resp = await client.post("/award", json={"captain_index": 0, "amount": 100})
    assert resp.status_code == 409
    assert resp.json()["detail"]["error"] == "RosterFull"


@pytest.mark.anyio
async def test_best_captain_and_fast_award(client: AsyncClient):
    await client.post("/award", json={"captain_index": 0, "amount": 100})
    resp = await client.get("/captains/best")
    assert resp.json()["captain"]["index"] == 1

    resp = await client.post("/award/best", json={"amount": 250})
    assert resp.status_code == 200
    assert resp.json()["captain"]["name"] == "Bilal"

    resp = await client.get("/captains/best")
    assert resp.json() == {"captain": None}
    resp = await client.post("/award/best", json={"amount": 10})
    assert resp.status_code == 409
    assert resp.json()["detail"]["message"] == "All teams are full."


@pytest.mark.anyio
async def test_navigation(client: AsyncClient):
    resp = await client.post("/navigate/prev")
    assert resp.json()["moved"] is False

    resp = await client.post("/navigate/jump/2")
    assert resp.json()["index"] == 2
    assert resp.json()["player"]["name"] == "Leo Fernandes"

    resp = await client.post("/navigate/next-unsold")
    body = resp.json()
    assert resp.status_code == 200
    assert body["complete"]
    assert body["message"] == "Auction complete!"

    resp = await client.post("/navigate/jump/9")
    assert resp.status_code == 404

    resp = await client.post("/navigate/prev")
    assert resp.json()["index"] == 1


@pytest.mark.anyio
async def test_summary(client: AsyncClient):
    await client.post("/award", json={"captain_index": 0, "amount": 100})
    resp = await client.get("/summary")
    assert resp.json() == {
        "total_players": 3,
        "sold_players": 1,
        "remaining_players": 2,
        "current_index": 1,
        "full_teams": 1,
        "complete": False,
    }


@pytest.mark.anyio
async def test_exports(client: AsyncClient):
    await client.post("/award", json={"captain_index": 1, "amount": 1500})

    resp = await client.get("/export.json")
    teams = resp.json()
    assert teams[1]["teamName"] == "Blue Sharks"
    assert teams[1]["remainingBudget"] == 8500
    assert teams[1]["players"][0]["price"] == 1500

    resp = await client.get("/export.csv")
    assert resp.headers["content-disposition"] == "attachment; filename=teams.csv"
    rows = list(csv.DictReader(StringIO(resp.text)))
    assert rows[1]["name"] == "Rahul Menon"

    resp = await client.get("/export.html")
    assert resp.status_code == 200
    assert "Blue Sharks" in resp.text
    assert "Page 1 of 1" in resp.text


@pytest.mark.anyio
async def test_saved_auction_waits_for_restore(settings):
    first = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=first), base_url="http://testserver") as first_client:
        await first_client.post("/award", json={"captain_index": 0, "amount": 700})

    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.get("/session")
        body = resp.json()
        assert body["status"] == "pending_restore"
        assert body["sold_players"] == 1
        assert body["current_index"] == 1
        assert body["saved_at"]

        resp = await client.get("/state")
        assert resp.status_code == 409

        resp = await client.post("/session/restore")
        assert resp.status_code == 200
        assert resp.json()["status"] == "active"

        resp = await client.get("/current")
        assert resp.json()["name"] == "Samir Khan"
        resp = await client.get("/captains")
        assert resp.json()[0]["budget"] == 9300

        resp = await client.post("/session/restore")
        assert resp.status_code == 409


@pytest.mark.anyio
async def test_discard_saved_auction(settings):
    first = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=first), base_url="http://testserver") as first_client:
        await first_client.post("/award", json={"captain_index": 0, "amount": 700})

    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.post("/session/discard")
        assert resp.status_code == 200
        assert resp.json()["sold_players"] == 0
        assert app.state.store.load().current_index == 0


def test_restore_flag_skips_prompt(settings):
    create_app(settings).state.engine.award(0, 700)
    restored = create_app(settings, restore=True)
    assert restored.state.pending is None
    assert restored.state.engine.state.players[0].sold
    fresh = create_app(settings, restore=False)
    assert not fresh.state.engine.state.players[0].sold


@pytest.mark.anyio
async def test_reset_reloads_catalog(client: AsyncClient, settings):
    await client.post("/award", json={"captain_index": 0, "amount": 700})
    resp = await client.post("/reset")
    assert resp.status_code == 200
    assert resp.json()["sold_players"] == 0

    (settings.data_dir / "players.json").write_text("{broken", encoding="utf-8")
    resp = await client.post("/reset")
    assert resp.status_code == 503
    resp = await client.get("/state")
    assert resp.status_code == 409


@pytest.mark.anyio
async def test_boolean_values_are_not_numbers(client: AsyncClient):
    resp = await client.post("/award", json={"captain_index": True, "amount": 100})
    assert resp.status_code == 422

    resp = await client.post("/award/best", json={"amount": True})
    assert resp.status_code == 400
    assert resp.json()["detail"]["error"] == "InvalidBid"

    resp = await client.get("/state")
    assert not resp.json()["players"][0]["sold"]


@pytest.mark.anyio
async def test_failed_reset_drops_pending_restore(settings):
    first = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=first), base_url="http://testserver") as first_client:
        await first_client.post("/award", json={"captain_index": 0, "amount": 700})

    app = create_app(settings)
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://testserver") as client:
        resp = await client.get("/session")
        assert resp.json()["status"] == "pending_restore"

        (settings.data_dir / "config.json").unlink()
        resp = await client.post("/reset")
        assert resp.status_code == 503
        assert app.state.store.load_snapshot() is None

        resp = await client.get("/session")
        assert resp.status_code == 409
        resp = await client.post("/session/restore")
        assert resp.status_code == 409
