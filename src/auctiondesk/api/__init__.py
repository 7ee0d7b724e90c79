"""REST API for running an auction from a browser or a script."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import HTMLResponse, Response

from auctiondesk.api.schemas import (
    AwardRequest,
    AwardResponse,
    BestAwardRequest,
    CaptainResponse,
    NavigationResponse,
    PlayerResponse,
    RosterEntryResponse,
    SessionResponse,
    SummaryResponse,
)
from auctiondesk.config import Settings, get_settings
from auctiondesk.engine import AuctionEngine, AuctionFailure, AwardResult, FailureKind, NavigationResult
from auctiondesk.export import (
    export_rosters_csv,
    format_money,
    render_rosters_document,
    roster_summary,
)
from auctiondesk.ingest import LoadFailure
from auctiondesk.models import Captain, Player
from auctiondesk.persistence import SnapshotStore
from auctiondesk.session import fresh_engine, reset_session, restore_engine


logger = logging.getLogger("uvicorn.error")

FAILURE_STATUS: dict[FailureKind, int] = {
    FailureKind.INVALID_REFERENCE: 404,
    FailureKind.INVALID_BID: 400,
    FailureKind.ALREADY_AWARDED: 409,
    FailureKind.ROSTER_FULL: 409,
    FailureKind.INSUFFICIENT_BUDGET: 409,
}


def _player_to_response(player: Player, index: int) -> PlayerResponse:
    return PlayerResponse(
        index=index,
        name=player.name,
        position=player.position,
        photo=player.photo,
        rating=player.rating,
        sold=player.sold,
        sold_price=player.sold_price,
        awarded_to=player.awarded_to,
    )


def _captain_to_response(captain: Captain, index: int, team_size: int) -> CaptainResponse:
    return CaptainResponse(
        index=index,
        name=captain.name,
        team_name=captain.team_name,
        budget=captain.budget,
        initial_budget=captain.initial_budget,
        spent=captain.spent,
        team_count=captain.team_count,
        team_size=team_size,
        full=captain.is_full(team_size),
        roster=[
            RosterEntryResponse(name=entry.name, position=entry.position, rating=entry.rating, price=entry.price)
            for entry in captain.roster
        ],
    )


def _failure_detail(failure: AuctionFailure) -> dict[str, str]:
    return {"error": failure.kind.value, "message": failure.message}


def _navigation_to_response(engine: AuctionEngine, result: NavigationResult) -> NavigationResponse:
    if result.failure is not None and not result.complete:
        raise HTTPException(status_code=FAILURE_STATUS[result.failure.kind], detail=_failure_detail(result.failure))
    player = engine.current_player
    return NavigationResponse(
        index=result.index,
        moved=result.moved,
        complete=result.complete,
        message=result.failure.message if result.failure is not None else None,
        warning=result.warning,
        player=_player_to_response(player, engine.current_index) if player is not None else None,
    )


def create_app(settings: Settings | None = None, *, restore: Optional[bool] = None) -> FastAPI:
    """Build the API around a single auction engine.

    With a stored snapshot and ``restore=None`` the app starts in a pending
    state until the operator restores or discards it.
    """

    settings = settings or get_settings()
    app = FastAPI(title="auctiondesk")
    store = SnapshotStore(settings.db_path, slot=settings.slot)
    app.state.settings = settings
    app.state.store = store
    app.state.engine = None
    app.state.pending = None

    record = store.load_snapshot()
    if record is not None and restore is None:
        app.state.pending = record
        logger.info("Saved auction from %s awaits restore/discard", record.saved_at.isoformat())
    elif record is not None and restore:
        app.state.engine = restore_engine(store, record)
    else:
        if record is not None:
            store.clear()
        app.state.engine = fresh_engine(store, settings.data_dir)

    def _engine() -> AuctionEngine:
        engine = app.state.engine
        if engine is None:
            raise HTTPException(status_code=409, detail="No active auction; restore, discard or reset first")
        return engine

    def _award_response(engine: AuctionEngine, result: AwardResult, advance: bool) -> AwardResponse:
        if result.failure is not None:
            raise HTTPException(status_code=FAILURE_STATUS[result.failure.kind], detail=_failure_detail(result.failure))
        player, captain, amount = result.player, result.captain, result.amount
        if player is None or captain is None or amount is None or result.captain_index is None:
            raise HTTPException(status_code=500, detail="Award succeeded without a player, captain or amount")
        team_size = engine.state.config.team_size
        player_response = _player_to_response(player, engine.current_index)
        navigation = _navigation_to_response(engine, engine.advance_to_next()) if advance else None
        return AwardResponse(
            player=player_response,
            captain=_captain_to_response(captain, result.captain_index, team_size),
            amount=amount,
            message=f"Awarded {player.name} to {captain.team_name} for {format_money(amount)}.",
            warning=result.warning or (navigation.warning if navigation else None),
            navigation=navigation,
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        return {"status": "ok"}

    @app.get("/session", response_model=SessionResponse)
    async def session_status() -> SessionResponse:
        pending = app.state.pending
        if pending is not None:
            return SessionResponse(
                status="pending_restore",
                saved_at=pending.saved_at.isoformat(),
                current_index=pending.state.current_index,
                total_players=len(pending.state.players),
                sold_players=sum(1 for player in pending.state.players if player.sold),
            )
        summary = _engine().summary()
        return SessionResponse(
            status="active",
            current_index=summary.current_index,
            total_players=summary.total_players,
            sold_players=summary.sold_players,
        )

    @app.post("/session/restore", response_model=SessionResponse)
    async def session_restore() -> SessionResponse:
        pending = app.state.pending
        if pending is None:
            raise HTTPException(status_code=409, detail="No saved auction is waiting to be restored")
        app.state.engine = restore_engine(store, pending)
        app.state.pending = None
        return await session_status()

    @app.post("/session/discard", response_model=SessionResponse)
    async def session_discard() -> SessionResponse:
        if app.state.pending is None:
            raise HTTPException(status_code=409, detail="No saved auction is waiting to be discarded")
        store.clear()
        app.state.pending = None
        try:
            app.state.engine = fresh_engine(store, settings.data_dir)
        except LoadFailure as exc:
            raise HTTPException(status_code=503, detail=f"Failed to load auction data: {exc}") from exc
        return await session_status()

    @app.post("/reset", response_model=SessionResponse)
    async def reset() -> SessionResponse:
        # reset clears the stored snapshot, so nothing is left to restore
        app.state.pending = None
        try:
            app.state.engine = reset_session(store, settings.data_dir)
        except LoadFailure as exc:
            app.state.engine = None
            raise HTTPException(status_code=503, detail=f"Failed to load auction data: {exc}") from exc
        return await session_status()

    @app.get("/state")
    async def state() -> dict:
        return _engine().state.to_payload()

    @app.get("/summary", response_model=SummaryResponse)
    async def summary() -> SummaryResponse:
        engine = _engine()
        data = engine.summary()
        return SummaryResponse(
            total_players=data.total_players,
            sold_players=data.sold_players,
            remaining_players=data.remaining_players,
            current_index=data.current_index,
            full_teams=data.full_teams,
            complete=engine.is_complete,
        )

    @app.get("/current", response_model=PlayerResponse)
    async def current() -> PlayerResponse:
        engine = _engine()
        player = engine.current_player
        if player is None:
            raise HTTPException(status_code=404, detail="No players in this auction")
        return _player_to_response(player, engine.current_index)

    @app.get("/captains", response_model=list[CaptainResponse])
    async def captains() -> list[CaptainResponse]:
        engine = _engine()
        team_size = engine.state.config.team_size
        return [
            _captain_to_response(captain, idx, team_size)
            for idx, captain in enumerate(engine.state.captains)
        ]

    @app.get("/captains/best")
    async def best_captain() -> dict:
        engine = _engine()
        best = engine.best_eligible_captain()
        if best is None:
            return {"captain": None}
        idx, captain = best
        return {"captain": _captain_to_response(captain, idx, engine.state.config.team_size).model_dump()}

    @app.post("/award", response_model=AwardResponse)
    async def award(payload: AwardRequest) -> AwardResponse:
        engine = _engine()
        return _award_response(engine, engine.award(payload.captain_index, payload.amount), payload.advance)

    @app.post("/award/best", response_model=AwardResponse)
    async def award_best(payload: BestAwardRequest) -> AwardResponse:
        engine = _engine()
        return _award_response(engine, engine.award_best(payload.amount), payload.advance)

    @app.post("/navigate/next-unsold", response_model=NavigationResponse)
    async def navigate_next_unsold() -> NavigationResponse:
        engine = _engine()
        return _navigation_to_response(engine, engine.advance_to_next())

    @app.post("/navigate/next", response_model=NavigationResponse)
    async def navigate_next() -> NavigationResponse:
        engine = _engine()
        return _navigation_to_response(engine, engine.advance_next())

    @app.post("/navigate/prev", response_model=NavigationResponse)
    async def navigate_prev() -> NavigationResponse:
        engine = _engine()
        return _navigation_to_response(engine, engine.advance_prev())

    @app.post("/navigate/jump/{index}", response_model=NavigationResponse)
    async def navigate_jump(index: int) -> NavigationResponse:
        engine = _engine()
        return _navigation_to_response(engine, engine.jump_to(index))

    @app.get("/export.json")
    async def export_json() -> list[dict]:
        return roster_summary(_engine().state)

    @app.get("/export.csv")
    async def export_csv():
        return Response(
            content=export_rosters_csv(_engine().state),
            media_type="text/csv",
            headers={"Content-Disposition": "attachment; filename=teams.csv"},
        )

    @app.get("/export.html", response_class=HTMLResponse)
    async def export_document():
        return HTMLResponse(render_rosters_document(_engine().state, page_lines=settings.page_lines))

    return app
