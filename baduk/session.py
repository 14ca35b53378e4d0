"""
Game session facade for the Baduk engine.

A GameSession owns the board size, the move log and the derived state,
and exposes the operations used by a UI: placing stones, passing,
undo/redo, state queries, edit-mode writes and text serialization.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Tuple

from .board import BOARD_SIZES, GTP_COLUMNS, Point, Stone
from .codec import CodecError, DecodeErrorKind, InvalidFieldError, decode_text, encode_text
from .config import AppConfig
from .history import IllegalMoveError, MoveLog
from .rules import GameState, Move, MoveResult, check_placement

FALLBACK_BOARD_SIZE = 19

_ASCII_STONES = {Stone.EMPTY: '.', Stone.BLACK: 'X', Stone.WHITE: 'O'}


@dataclass(frozen=True)
class BoardSnapshot:
    """Immutable copy of everything a caller can observe about a session."""
    size: int
    rows: Tuple[Tuple[int, ...], ...]
    current_player: Stone
    black_captures: int
    white_captures: int
    last_move: Optional[Point]
    cursor: int
    log_length: int

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            'size': self.size,
            'rows': [list(row) for row in self.rows],
            'current_player': self.current_player.name,
            'black_captures': self.black_captures,
            'white_captures': self.white_captures,
            'last_move': list(self.last_move) if self.last_move else None,
            'cursor': self.cursor,
            'log_length': self.log_length,
        }


class GameSession:
    """
    A single game, owned exclusively by one caller.

    Usage:
        session = create_session(9)
        session.place_stone(4, 4)          # MoveResult.OK
        session.place_stone(4, 4)          # MoveResult.OCCUPIED
        session.pass_turn()
        text = session.serialize()
        session.undo()
        session.deserialize(text)          # back to the saved game
    """

    def __init__(
        self,
        size: int = 19,
        logger: Optional[logging.Logger] = None,
        strict: bool = True,
    ):
        """
        Initialize an empty game.

        Args:
            size: Board size (9, 13, or 19)
            logger: Logging collaborator (defaults to this module's logger)
            strict: Reject unsupported sizes; when False they clamp to 19

        Raises:
            ValueError: If size is unsupported and strict is set
        """
        self.log = logger if logger is not None else logging.getLogger(__name__)
        if size not in BOARD_SIZES:
            if strict:
                raise ValueError(f"Board size must be 9, 13, or 19, got {size}")
            self.log.warning(f"Unsupported board size {size}, using {FALLBACK_BOARD_SIZE}")
            size = FALLBACK_BOARD_SIZE
        self._history = MoveLog(size)
        self.last_decode_error: Optional[DecodeErrorKind] = None

    @classmethod
    def from_moves(
        cls,
        size: int,
        moves: Sequence[Move],
        logger: Optional[logging.Logger] = None,
    ) -> 'GameSession':
        """
        Build a session by playing ``moves`` through the rules engine.

        Raises:
            ValueError: If size is unsupported
            IllegalMoveError: If a move is out of turn or illegal
        """
        session = cls(size=size, logger=logger)
        session._history = MoveLog.from_moves(size, moves)
        return session

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def size(self) -> int:
        return self._history.size

    @property
    def state(self) -> GameState:
        return self._history.state

    @property
    def move_log(self) -> MoveLog:
        return self._history

    @property
    def cursor(self) -> int:
        return self._history.cursor

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def place_stone(self, x: int, y: int) -> MoveResult:
        """
        Place a stone for the current player.

        Returns:
            MoveResult.OK, or the reason the move was rejected (the board
            and log are then unchanged)
        """
        player = self.state.current_player
        result = check_placement(self.state, x, y, player)
        if not result.ok:
            self.log.debug(f"Rejected {player.name} at ({x}, {y}): {result.value}")
            return result

        captured = self._history.apply_move(Move.place(x, y, player))
        self.log.debug(
            f"{player.name} plays ({x}, {y}), move {self.cursor}"
            + (f", captures {captured}" if captured else "")
        )
        return MoveResult.OK

    def pass_turn(self) -> MoveResult:
        """Pass for the current player. Always succeeds."""
        player = self.state.current_player
        self._history.apply_move(Move.pass_move(player))
        self.log.debug(f"{player.name} passes, move {self.cursor}")
        return MoveResult.OK

    def undo(self) -> bool:
        """Step back one move. False if already at the start."""
        ok = self._history.undo()
        if ok:
            self.log.debug(f"Undo to move {self.cursor}")
        return ok

    def redo(self) -> bool:
        """Step forward one move. False if there is nothing to redo."""
        ok = self._history.redo()
        if ok:
            self.log.debug(f"Redo to move {self.cursor}")
        return ok

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def query_cell(self, x: int, y: int) -> Stone:
        """Stone at (x, y); off-board positions read as Empty."""
        grid = self.state.grid
        if not grid.in_bounds(x, y):
            return Stone.EMPTY
        return grid.get(x, y)

    def cell_code(self, x: int, y: int) -> int:
        """Numeric cell state: 0 = Empty, 1 = Black, 2 = White."""
        return int(self.query_cell(x, y))

    def current_player(self) -> Stone:
        return self.state.current_player

    def current_player_code(self) -> int:
        return int(self.state.current_player)

    def capture_counts(self) -> Tuple[int, int]:
        """(stones captured by Black, stones captured by White)"""
        return self.state.black_captures, self.state.white_captures

    def last_move(self) -> Optional[Point]:
        return self.state.last_move

    def move_number(self, x: int, y: int) -> Optional[int]:
        """1-based log index of the stone at (x, y), if it came from a move."""
        return self.state.move_numbers.get((x, y))

    def can_undo(self) -> bool:
        return self._history.can_undo()

    def can_redo(self) -> bool:
        return self._history.can_redo()

    def snapshot(self) -> BoardSnapshot:
        state = self.state
        return BoardSnapshot(
            size=self.size,
            rows=tuple(tuple(row) for row in state.grid.rows()),
            current_player=state.current_player,
            black_captures=state.black_captures,
            white_captures=state.white_captures,
            last_move=state.last_move,
            cursor=self.cursor,
            log_length=len(self._history),
        )

    def to_ascii(self) -> str:
        """Text diagram of the board, highest row first, GTP labels."""
        grid = self.state.grid
        width = len(str(self.size))
        lines = []
        for y in range(self.size - 1, -1, -1):
            cells = " ".join(_ASCII_STONES[grid.get(x, y)] for x in range(self.size))
            lines.append(f"{y + 1:>{width}} {cells}")
        lines.append(" " * (width + 1) + " ".join(GTP_COLUMNS[:self.size]))
        return "\n".join(lines)

    # ------------------------------------------------------------------
    # Edit mode
    # ------------------------------------------------------------------

    def set_cell_direct(self, x: int, y: int, stone: Stone) -> bool:
        """
        Write a cell without any rule checks (setup and puzzle editing).

        The write is not recorded in the move log, so the next undo, redo
        or deserialize rebuilds the board without it.

        Returns:
            False if (x, y) is off the board
        """
        grid = self.state.grid
        if not grid.in_bounds(x, y):
            return False
        stone = Stone(stone)
        grid.set(x, y, stone)
        if stone == Stone.EMPTY:
            self.state.move_numbers.pop((x, y), None)
        self.log.debug(f"Edit ({x}, {y}) = {stone.name}")
        return True

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def serialize(self) -> str:
        """Encode size, counters and the committed moves as URL-safe text."""
        state = self.state
        return encode_text(
            self.size,
            state.current_player,
            state.black_captures,
            state.white_captures,
            self._history.committed(),
        )

    def deserialize(self, text: str) -> bool:
        """
        Replace the game with one decoded from ``text``.

        The moves are replayed the way undo and redo replay the log, after
        checking that players alternate from Black. On any failure the
        session is left exactly as it was.

        Returns:
            True on success, False for malformed or out-of-turn input (the
            reason is kept in ``last_decode_error``)
        """
        try:
            decoded = decode_text(text)
            try:
                history = MoveLog.from_moves(decoded.size, decoded.moves, check_rules=False)
            except IllegalMoveError as e:
                raise InvalidFieldError(str(e)) from e
        except CodecError as e:
            self.last_decode_error = e.kind
            self.log.info(f"Rejected serialized game ({e.kind.value}): {e}")
            return False

        self._history = history
        self.last_decode_error = None
        self.log.debug(f"Loaded {decoded.size}x{decoded.size} game with {len(history)} moves")
        return True

    def __repr__(self) -> str:
        black, white = self.capture_counts()
        return (
            f"GameSession(size={self.size}, "
            f"moves={len(self._history)}, "
            f"cursor={self.cursor}, "
            f"next={self.current_player().name}, "
            f"captures=({black}, {white}))"
        )


def create_session(
    size: Optional[int] = None,
    strict: Optional[bool] = None,
    logger: Optional[logging.Logger] = None,
    config: Optional[AppConfig] = None,
) -> GameSession:
    """
    Factory function to create a GameSession.

    Args:
        size: Board size (default: config default_board_size)
        strict: Reject unsupported sizes (default: config strict_board_size)
        logger: Logging collaborator
        config: Application config supplying the defaults

    Returns:
        Empty GameSession with Black to play
    """
    if config is None:
        config = AppConfig()
    if size is None:
        size = config.session.default_board_size
    if strict is None:
        strict = config.session.strict_board_size
    return GameSession(size=size, logger=logger, strict=strict)
