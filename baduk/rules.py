"""
Move rules for the Baduk engine.

Validates and applies single moves (placement or pass):
bounds and occupancy checks, the suicide rule (captures take precedence),
capture resolution and turn alternation. There is no ko rule.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Optional

from .board import (
    Grid, Point, Stone,
    coords_to_gtp, has_liberty, neighbors, remove_dead_group,
)


class MoveResult(str, Enum):
    """Outcome of a move attempt."""
    OK = "OK"
    OUT_OF_BOUNDS = "OutOfBounds"
    OCCUPIED = "Occupied"
    SUICIDE = "Suicide"

    @property
    def ok(self) -> bool:
        return self is MoveResult.OK


# ============================================================================
# Data Classes
# ============================================================================

@dataclass(frozen=True)
class Move:
    """A placement at ``point`` or, when ``point`` is None, a pass."""
    player: Stone
    point: Optional[Point] = None

    @classmethod
    def place(cls, x: int, y: int, player: Stone) -> 'Move':
        return cls(player=Stone(player), point=(x, y))

    @classmethod
    def pass_move(cls, player: Stone) -> 'Move':
        return cls(player=Stone(player), point=None)

    @property
    def is_pass(self) -> bool:
        return self.point is None

    def to_gtp(self) -> str:
        """Move string in GTP format, e.g. "B D4" or "W PASS"."""
        if self.point is None:
            return f"{self.player.letter} PASS"
        return f"{self.player.letter} {coords_to_gtp(*self.point)}"

    def __repr__(self) -> str:
        if self.point is None:
            return f"Move({self.player.name}, pass)"
        return f"Move({self.player.name}, {self.point[0]}, {self.point[1]})"


@dataclass
class GameState:
    """
    Derived game state: the result of replaying a move log.

    Attributes:
        grid: Current board
        current_player: Player to move next
        black_captures: Stones captured by Black
        white_captures: Stones captured by White
        last_move: Position of the last placement (None after a pass)
        move_numbers: 1-based move index of the stone on each annotated cell
    """
    grid: Grid
    current_player: Stone = Stone.BLACK
    black_captures: int = 0
    white_captures: int = 0
    last_move: Optional[Point] = None
    move_numbers: Dict[Point, int] = field(default_factory=dict)

    @classmethod
    def empty(cls, size: int) -> 'GameState':
        return cls(grid=Grid(size))

    @property
    def size(self) -> int:
        return self.grid.size

    def captures_of(self, player: Stone) -> int:
        return self.white_captures if player == Stone.WHITE else self.black_captures

    def add_captures(self, player: Stone, count: int) -> None:
        if player == Stone.WHITE:
            self.white_captures += count
        else:
            self.black_captures += count

    def copy(self) -> 'GameState':
        return GameState(
            grid=self.grid.copy(),
            current_player=self.current_player,
            black_captures=self.black_captures,
            white_captures=self.white_captures,
            last_move=self.last_move,
            move_numbers=self.move_numbers.copy(),
        )


# ============================================================================
# Validation
# ============================================================================

def check_placement(state: GameState, x: int, y: int, player: Optional[Stone] = None) -> MoveResult:
    """
    Decide whether ``player`` may place a stone at (x, y).

    The state is never mutated; the suicide check runs on a scratch copy
    of the grid with the candidate stone placed.

    Args:
        state: Current game state
        x, y: Target intersection
        player: Mover (defaults to the current player)

    Returns:
        MoveResult.OK or the reason the move is illegal
    """
    grid = state.grid
    if player is None:
        player = state.current_player

    if not grid.in_bounds(x, y):
        return MoveResult.OUT_OF_BOUNDS
    if grid.get(x, y) != Stone.EMPTY:
        return MoveResult.OCCUPIED

    scratch = grid.copy()
    scratch.set(x, y, player)
    opponent = player.opponent()

    # Capturing any adjacent group makes the move legal
    for nx, ny in neighbors(x, y, grid.size):
        if scratch.get(nx, ny) == opponent and not has_liberty(scratch, nx, ny, opponent):
            return MoveResult.OK

    if not has_liberty(scratch, x, y, player):
        return MoveResult.SUICIDE

    return MoveResult.OK


# ============================================================================
# Application
# ============================================================================

def commit_move(state: GameState, move: Move, move_number: Optional[int] = None) -> int:
    """
    Apply a move to ``state`` without validating it.

    Callers must have checked the placement (or be replaying a log of moves
    that were legal when first played).

    Args:
        state: State to mutate
        move: Placement or pass
        move_number: 1-based log index to annotate the placed stone with

    Returns:
        Number of opponent stones captured
    """
    state.current_player = move.player.opponent()

    if move.point is None:
        state.last_move = None
        return 0

    x, y = move.point
    grid = state.grid
    grid.set(x, y, move.player)
    if move_number is not None:
        state.move_numbers[(x, y)] = move_number

    opponent = move.player.opponent()
    captured = 0
    for nx, ny in neighbors(x, y, grid.size):
        if grid.get(nx, ny) != opponent:
            continue
        removed = remove_dead_group(grid, nx, ny, opponent)
        for point in removed:
            state.move_numbers.pop(point, None)
        captured += len(removed)

    state.add_captures(move.player, captured)
    state.last_move = (x, y)
    return captured


def play(state: GameState, move: Move, move_number: Optional[int] = None) -> MoveResult:
    """
    Validate and apply a move. Illegal moves leave ``state`` untouched.

    Passes always succeed.
    """
    if move.point is not None:
        result = check_placement(state, move.point[0], move.point[1], move.player)
        if not result.ok:
            return result
    commit_move(state, move, move_number)
    return MoveResult.OK
