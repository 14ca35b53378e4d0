"""
Baduk Engine - Go/Baduk rules engine

Stone placement with capture and suicide rules, move history with
undo/redo, and a compact URL-safe game serialization.
"""

__version__ = "0.1.0"

from .board import Grid, Stone
from .codec import CodecError, DecodeErrorKind, DecodedGame, decode_text, encode_text
from .history import IllegalMoveError, MoveLog
from .rules import GameState, Move, MoveResult
from .session import BoardSnapshot, GameSession, create_session

__all__ = [
    "Grid",
    "Stone",
    "CodecError",
    "DecodeErrorKind",
    "DecodedGame",
    "decode_text",
    "encode_text",
    "IllegalMoveError",
    "MoveLog",
    "GameState",
    "Move",
    "MoveResult",
    "BoardSnapshot",
    "GameSession",
    "create_session",
]
