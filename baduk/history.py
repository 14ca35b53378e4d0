"""
Move log and replay for the Baduk engine.

The log is the authoritative record of a game: an ordered list of moves
plus a cursor. The derived game state is always the result of replaying
``moves[:cursor]`` from an empty board with Black to play. Undo and redo
move the cursor and rebuild the state by full replay; no per-move
snapshots are kept.
"""

from typing import Iterable, List, Optional, Sequence, Tuple

from .board import Stone
from .rules import GameState, Move, MoveResult, commit_move, play


class IllegalMoveError(ValueError):
    """Raised when a validated replay meets a move that is not legal."""

    def __init__(self, index: int, move: Move, result: Optional[MoveResult] = None):
        self.index = index
        self.move = move
        self.result = result
        reason = result.value if result is not None else "out of turn"
        super().__init__(f"Move {index + 1} ({move!r}) is illegal: {reason}")


def check_turn_order(moves: Iterable[Move]) -> None:
    """
    Check that players alternate from Black.

    Raises:
        IllegalMoveError: At the first move played out of turn
    """
    player = Stone.BLACK
    for i, move in enumerate(moves):
        if move.player != player:
            raise IllegalMoveError(i, move)
        player = player.opponent()


def replay(size: int, moves: Iterable[Move], validate: bool = False) -> GameState:
    """
    Rebuild the derived state from an empty board.

    Args:
        size: Board size
        moves: Moves to apply in order
        validate: Check each move through the rules engine (for logs from
            untrusted sources) instead of committing blindly

    Returns:
        The resulting GameState, with move numbers recorded

    Raises:
        IllegalMoveError: If ``validate`` is set and a move is illegal
    """
    state = GameState.empty(size)
    for i, move in enumerate(moves):
        if validate:
            if move.player != state.current_player:
                raise IllegalMoveError(i, move)
            result = play(state, move, move_number=i + 1)
            if not result.ok:
                raise IllegalMoveError(i, move, result)
        else:
            commit_move(state, move, move_number=i + 1)
    return state


class MoveLog:
    """
    Ordered move record with an undo/redo cursor.

    Moves past the cursor are the redo tail; appending while not at the
    tail discards them.

    Usage:
        log = MoveLog(19)
        log.apply_move(Move.place(3, 3, Stone.BLACK))
        log.undo()      # state is the empty board again
        log.redo()      # stone is back
    """

    def __init__(self, size: int, moves: Optional[Sequence[Move]] = None, cursor: Optional[int] = None):
        self.size = size
        self._moves: List[Move] = list(moves or [])
        if cursor is None:
            cursor = len(self._moves)
        if not 0 <= cursor <= len(self._moves):
            raise ValueError(f"Cursor {cursor} outside 0..{len(self._moves)}")
        self._cursor = cursor
        self.state = replay(size, self._moves[:cursor])

    @classmethod
    def from_moves(cls, size: int, moves: Sequence[Move], check_rules: bool = True) -> 'MoveLog':
        """
        Build a log from recorded moves, cursor at the end.

        Players must alternate from Black. With ``check_rules`` every move
        also goes through the rules engine (moves from outside sources such
        as SGF). Without it the moves are committed the way undo and redo
        replay them, so any log this engine recorded loads back unchanged.

        Raises:
            IllegalMoveError: If a move is out of turn, or illegal when
                ``check_rules`` is set
        """
        if check_rules:
            state = replay(size, moves, validate=True)
        else:
            check_turn_order(moves)
            state = replay(size, moves)
        log = cls(size)
        log._moves = list(moves)
        log._cursor = len(log._moves)
        log.state = state
        return log

    @property
    def cursor(self) -> int:
        return self._cursor

    @property
    def moves(self) -> Tuple[Move, ...]:
        """Every move in the log, including the redo tail."""
        return tuple(self._moves)

    def committed(self) -> Tuple[Move, ...]:
        """Moves up to the cursor (those reflected in the current state)."""
        return tuple(self._moves[:self._cursor])

    def __len__(self) -> int:
        return len(self._moves)

    def can_undo(self) -> bool:
        return self._cursor > 0

    def can_redo(self) -> bool:
        return self._cursor < len(self._moves)

    def apply_move(self, move: Move) -> int:
        """
        Append an already-validated move and commit it to the state.

        Returns:
            Number of stones captured by the move
        """
        if self._cursor < len(self._moves):
            del self._moves[self._cursor:]
        self._moves.append(move)
        self._cursor += 1
        return commit_move(self.state, move, move_number=self._cursor)

    def reconstruct(self, cursor: Optional[int] = None) -> GameState:
        """Replay the log up to ``cursor`` (default: current cursor)."""
        if cursor is None:
            cursor = self._cursor
        if not 0 <= cursor <= len(self._moves):
            raise ValueError(f"Cursor {cursor} outside 0..{len(self._moves)}")
        self._cursor = cursor
        self.state = replay(self.size, self._moves[:cursor])
        return self.state

    def undo(self) -> bool:
        """Step back one move. Returns False at the start of the log."""
        if self._cursor == 0:
            return False
        self.reconstruct(self._cursor - 1)
        return True

    def redo(self) -> bool:
        """Step forward one move. Returns False at the end of the log."""
        if self._cursor == len(self._moves):
            return False
        self.reconstruct(self._cursor + 1)
        return True

    def __repr__(self) -> str:
        return f"MoveLog(size={self.size}, moves={len(self._moves)}, cursor={self._cursor})"
