"""
FastAPI REST API for the Baduk engine.

Exposes in-memory game sessions over HTTP for UI clients.

Usage:
    # Start the server
    uvicorn baduk.api:app --host 0.0.0.0 --port 8000 --reload

    # Or run directly
    python -m baduk.api
"""

import logging
import uuid
from collections import OrderedDict
from contextlib import asynccontextmanager
from typing import List, Literal, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from .board import Stone
from .config import AppConfig, configure_logging, load_config
from .session import GameSession, create_session
from .sgf_handler import session_to_sgf

logger = logging.getLogger(__name__)


# ============================================================================
# Pydantic Models (OpenAPI Schema)
# ============================================================================

class SessionState(BaseModel):
    """Observable state of a game session."""
    session_id: str = Field(..., description="Session identifier")
    board_size: int = Field(..., description="Board size (9, 13, or 19)")
    rows: List[List[int]] = Field(..., description="Cell codes by row (0 = empty, 1 = black, 2 = white), row 0 first")
    current_player: str = Field(..., description="Player to move (BLACK or WHITE)")
    black_captures: int = Field(..., ge=0, description="Stones captured by Black")
    white_captures: int = Field(..., ge=0, description="Stones captured by White")
    last_move: Optional[List[int]] = Field(None, description="[x, y] of the last placement, null after a pass")
    cursor: int = Field(..., ge=0, description="Number of moves reflected on the board")
    log_length: int = Field(..., ge=0, description="Moves in the log, including redo-able ones")
    can_undo: bool
    can_redo: bool
    encoded: str = Field(..., description="URL-safe serialized game")


class CreateSessionRequest(BaseModel):
    """Request body for creating a session."""
    board_size: Optional[int] = Field(default=None, description="Board size (9, 13, or 19); config default if omitted")

    class Config:
        json_schema_extra = {
            "example": {"board_size": 9}
        }


class MoveRequest(BaseModel):
    """A placement at (x, y), or a pass."""
    x: Optional[int] = Field(default=None, description="Column, 0-based from the left")
    y: Optional[int] = Field(default=None, description="Row, 0-based")
    pass_turn: bool = Field(default=False, alias="pass", description="Pass instead of placing a stone")

    class Config:
        json_schema_extra = {
            "example": {"x": 4, "y": 4}
        }


class MoveResponse(BaseModel):
    """Outcome of a move attempt."""
    result: str = Field(..., description="OK, OutOfBounds, Occupied, or Suicide")
    state: SessionState


class StepResponse(BaseModel):
    """Outcome of undo/redo/decode."""
    ok: bool
    error: Optional[str] = Field(None, description="Decode failure kind (Truncated, Overflow, InvalidField)")
    state: SessionState


class CellRequest(BaseModel):
    """Edit-mode write of a single cell."""
    x: int
    y: int
    stone: Literal["EMPTY", "BLACK", "WHITE"]


class DecodeRequest(BaseModel):
    """Serialized game to load into a session."""
    text: str


class EncodedResponse(BaseModel):
    text: str


class SgfResponse(BaseModel):
    sgf: str


class HealthResponse(BaseModel):
    """Health check response."""
    status: str = Field(..., description="Service status")
    sessions: int = Field(..., description="Number of live sessions")


class ErrorResponse(BaseModel):
    """Error response."""
    detail: str = Field(..., description="Error message")


# ============================================================================
# Application State
# ============================================================================

class AppState:
    """Application state container."""

    def __init__(self):
        self.config: AppConfig = AppConfig()
        self.sessions: "OrderedDict[str, GameSession]" = OrderedDict()

    def add(self, session: GameSession) -> str:
        session_id = uuid.uuid4().hex
        self.sessions[session_id] = session
        while len(self.sessions) > self.config.api.max_sessions:
            evicted, _ = self.sessions.popitem(last=False)
            logger.info(f"Evicted session {evicted} (limit {self.config.api.max_sessions})")
        return session_id

    def get(self, session_id: str) -> GameSession:
        session = self.sessions.get(session_id)
        if session is None:
            raise HTTPException(status_code=404, detail=f"Unknown session: {session_id}")
        self.sessions.move_to_end(session_id)
        return session


state = AppState()


def session_state(session_id: str, session: GameSession) -> SessionState:
    snap = session.snapshot()
    return SessionState(
        session_id=session_id,
        board_size=snap.size,
        rows=[list(row) for row in snap.rows],
        current_player=snap.current_player.name,
        black_captures=snap.black_captures,
        white_captures=snap.white_captures,
        last_move=list(snap.last_move) if snap.last_move else None,
        cursor=snap.cursor,
        log_length=snap.log_length,
        can_undo=session.can_undo(),
        can_redo=session.can_redo(),
        encoded=session.serialize(),
    )


# ============================================================================
# Lifespan Management
# ============================================================================

@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application lifecycle (startup/shutdown)."""
    state.config = load_config()
    configure_logging(state.config)
    logger.info("Starting Baduk API...")

    yield

    logger.info(f"Shutting down Baduk API ({len(state.sessions)} sessions dropped)")
    state.sessions.clear()


# ============================================================================
# FastAPI Application
# ============================================================================

app = FastAPI(
    title="Baduk Engine API",
    description="""
REST API for playing Go (Weiqi/Baduk) games.

## Features
- Stone placement with capture and suicide rules
- Undo/redo over the full move log
- Compact URL-safe game serialization
- SGF export
- Support for 9x9, 13x13, and 19x19 boards
    """,
    version="1.0.0",
    lifespan=lifespan,
    responses={
        404: {"model": ErrorResponse, "description": "Unknown session"},
    },
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ============================================================================
# Endpoints
# ============================================================================

@app.get("/health", response_model=HealthResponse, tags=["System"], summary="Health check")
async def health_check():
    """Return service health status."""
    return HealthResponse(status="ok", sessions=len(state.sessions))


@app.post(
    "/sessions",
    response_model=SessionState,
    tags=["Sessions"],
    summary="Create a game session",
    responses={
        400: {"model": ErrorResponse, "description": "Unsupported board size"},
    },
)
async def create_game(request: CreateSessionRequest):
    """Create an empty game with Black to play."""
    try:
        session = create_session(size=request.board_size, strict=True, config=state.config)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    session_id = state.add(session)
    return session_state(session_id, session)


@app.get("/sessions/{session_id}", response_model=SessionState, tags=["Sessions"])
async def get_game(session_id: str):
    return session_state(session_id, state.get(session_id))


@app.post(
    "/sessions/{session_id}/moves",
    response_model=MoveResponse,
    tags=["Play"],
    summary="Place a stone or pass",
    description="""
Play a move for the current player.

Illegal placements are not errors: the response carries the result
(OutOfBounds, Occupied, or Suicide) and the unchanged state.
    """,
    responses={
        400: {"model": ErrorResponse, "description": "Missing coordinates"},
    },
)
async def play_move(session_id: str, request: MoveRequest):
    session = state.get(session_id)
    if request.pass_turn:
        result = session.pass_turn()
    else:
        if request.x is None or request.y is None:
            raise HTTPException(status_code=400, detail="Both x and y are required unless passing")
        result = session.place_stone(request.x, request.y)
    return MoveResponse(result=result.value, state=session_state(session_id, session))


@app.post("/sessions/{session_id}/undo", response_model=StepResponse, tags=["Play"])
async def undo_move(session_id: str):
    session = state.get(session_id)
    ok = session.undo()
    return StepResponse(ok=ok, state=session_state(session_id, session))


@app.post("/sessions/{session_id}/redo", response_model=StepResponse, tags=["Play"])
async def redo_move(session_id: str):
    session = state.get(session_id)
    ok = session.redo()
    return StepResponse(ok=ok, state=session_state(session_id, session))


@app.put(
    "/sessions/{session_id}/cells",
    response_model=SessionState,
    tags=["Edit"],
    summary="Set a cell directly",
    description="Edit-mode write that bypasses the rules. Not recorded in the move log.",
    responses={
        400: {"model": ErrorResponse, "description": "Cell off the board"},
    },
)
async def set_cell(session_id: str, request: CellRequest):
    session = state.get(session_id)
    if not session.set_cell_direct(request.x, request.y, Stone[request.stone]):
        raise HTTPException(
            status_code=400,
            detail=f"({request.x}, {request.y}) is off the {session.size}x{session.size} board",
        )
    return session_state(session_id, session)


@app.get("/sessions/{session_id}/encoded", response_model=EncodedResponse, tags=["Serialization"])
async def get_encoded(session_id: str):
    return EncodedResponse(text=state.get(session_id).serialize())


@app.post(
    "/sessions/{session_id}/decode",
    response_model=StepResponse,
    tags=["Serialization"],
    summary="Load a serialized game",
    description="Replace the session's game. On malformed input ok is false and the session is unchanged.",
)
async def load_encoded(session_id: str, request: DecodeRequest):
    session = state.get(session_id)
    ok = session.deserialize(request.text)
    error = None if ok else session.last_decode_error.value
    return StepResponse(ok=ok, error=error, state=session_state(session_id, session))


@app.get("/sessions/{session_id}/sgf", response_model=SgfResponse, tags=["Serialization"])
async def get_sgf(session_id: str):
    return SgfResponse(sgf=session_to_sgf(state.get(session_id)))


@app.delete("/sessions/{session_id}", tags=["Sessions"])
async def delete_game(session_id: str):
    state.get(session_id)
    del state.sessions[session_id]
    return {"deleted": session_id}


# ============================================================================
# Main Entry Point
# ============================================================================

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "baduk.api:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
    )
