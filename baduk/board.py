"""
Board grid and group/liberty analysis for the Baduk engine.

Provides:
- Stone: Intersection state (Empty, Black, White) with the numeric codes
  used by the host bindings and the wire format
- Grid: Square board of intersection states, sized per session
- Flood-fill group analysis (liberties, group collection, capture)
- GTP coordinate conversion helpers
"""

from enum import IntEnum
from typing import Iterator, List, Optional, Set, Tuple

# Supported board sizes
BOARD_SIZES = (9, 13, 19)

# GTP column letters (I is skipped in Go)
GTP_COLUMNS = "ABCDEFGHJKLMNOPQRST"

Point = Tuple[int, int]


# ============================================================================
# Intersection State
# ============================================================================

class Stone(IntEnum):
    """State of a single intersection."""
    EMPTY = 0
    BLACK = 1
    WHITE = 2

    def opponent(self) -> 'Stone':
        """Return the other player (Empty falls through to Black)."""
        if self == Stone.BLACK:
            return Stone.WHITE
        return Stone.BLACK

    @property
    def letter(self) -> str:
        """SGF/GTP color letter ('B' or 'W'), '.' for Empty."""
        return {Stone.EMPTY: '.', Stone.BLACK: 'B', Stone.WHITE: 'W'}[self]

    @classmethod
    def from_letter(cls, letter: str) -> 'Stone':
        """Parse 'B' or 'W' (case-insensitive)."""
        color = letter.strip().upper()
        if color == 'B':
            return cls.BLACK
        if color == 'W':
            return cls.WHITE
        raise ValueError(f"Color must be 'B' or 'W', got {letter!r}")


def validate_board_size(size: int) -> int:
    """
    Check that a board size is supported.

    Raises:
        ValueError: If size is not 9, 13, or 19
    """
    if size not in BOARD_SIZES:
        raise ValueError(f"Board size must be 9, 13, or 19, got {size}")
    return size


# ============================================================================
# Grid
# ============================================================================

class Grid:
    """
    Square grid of intersection states.

    Cells are stored row-major in a flat list indexed by ``y * size + x``,
    which is also the position numbering of the wire format. Every cell
    always holds a Stone value.
    """

    __slots__ = ("size", "_cells")

    def __init__(self, size: int, cells: Optional[List[Stone]] = None):
        self.size = validate_board_size(size)
        if cells is None:
            cells = [Stone.EMPTY] * (size * size)
        elif len(cells) != size * size:
            raise ValueError(f"Expected {size * size} cells, got {len(cells)}")
        self._cells = cells

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.size and 0 <= y < self.size

    def index(self, x: int, y: int) -> int:
        return y * self.size + x

    def get(self, x: int, y: int) -> Stone:
        return self._cells[y * self.size + x]

    def set(self, x: int, y: int, stone: Stone) -> None:
        self._cells[y * self.size + x] = Stone(stone)

    def clear(self) -> None:
        """Reset every cell to Empty."""
        self._cells = [Stone.EMPTY] * (self.size * self.size)

    def copy(self) -> 'Grid':
        """Create an independent scratch copy."""
        return Grid(self.size, list(self._cells))

    def rows(self) -> List[List[int]]:
        """Stone codes as a list of rows, row 0 first."""
        n = self.size
        return [[int(c) for c in self._cells[y * n:(y + 1) * n]] for y in range(n)]

    def stones(self) -> Iterator[Tuple[int, int, Stone]]:
        """Yield (x, y, stone) for every occupied cell."""
        n = self.size
        for i, cell in enumerate(self._cells):
            if cell != Stone.EMPTY:
                yield i % n, i // n, cell

    def count(self, stone: Stone) -> int:
        return sum(1 for c in self._cells if c == stone)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Grid):
            return NotImplemented
        return self.size == other.size and self._cells == other._cells

    def __repr__(self) -> str:
        return (
            f"Grid(size={self.size}, "
            f"black={self.count(Stone.BLACK)}, "
            f"white={self.count(Stone.WHITE)})"
        )


# ============================================================================
# Group / Liberty Analysis
# ============================================================================

def neighbors(x: int, y: int, size: int) -> Iterator[Point]:
    """Yield in-bounds orthogonal neighbors in left, right, up, down order."""
    if x > 0:
        yield x - 1, y
    if x < size - 1:
        yield x + 1, y
    if y > 0:
        yield x, y - 1
    if y < size - 1:
        yield x, y + 1


def _flood(grid: Grid, x: int, y: int, color: Stone, stop_at_liberty: bool) -> Tuple[Set[Point], bool]:
    """
    Explicit-stack flood fill over same-colored orthogonal neighbors.

    Returns the cells visited and whether an empty neighbor was seen. With
    ``stop_at_liberty`` the fill returns as soon as a liberty is found, so
    the visited set is then only partial.
    """
    size = grid.size
    if not grid.in_bounds(x, y) or grid.get(x, y) != color:
        return set(), False

    visited = [False] * (size * size)
    visited[y * size + x] = True
    group = {(x, y)}
    stack = [(x, y)]
    found_liberty = False

    while stack:
        cx, cy = stack.pop()
        for nx, ny in neighbors(cx, cy, size):
            cell = grid.get(nx, ny)
            if cell == Stone.EMPTY:
                found_liberty = True
                if stop_at_liberty:
                    return group, True
            elif cell == color:
                idx = ny * size + nx
                if not visited[idx]:
                    visited[idx] = True
                    group.add((nx, ny))
                    stack.append((nx, ny))

    return group, found_liberty


def has_liberty(grid: Grid, x: int, y: int, color: Stone) -> bool:
    """True iff the group of ``color`` containing (x, y) touches an empty cell."""
    _, found = _flood(grid, x, y, color, stop_at_liberty=True)
    return found


def collect_group(grid: Grid, x: int, y: int, color: Stone) -> Set[Point]:
    """All cells connected to (x, y) through orthogonal ``color`` stones."""
    group, _ = _flood(grid, x, y, color, stop_at_liberty=False)
    return group


def remove_dead_group(grid: Grid, x: int, y: int, color: Stone) -> Set[Point]:
    """
    Remove the group at (x, y) if it has no liberty.

    Args:
        grid: Grid to mutate
        x, y: Any member of the group
        color: Color of the group

    Returns:
        The removed positions (empty set if the group is alive)
    """
    group, found = _flood(grid, x, y, color, stop_at_liberty=False)
    if found or not group:
        return set()
    for gx, gy in group:
        grid.set(gx, gy, Stone.EMPTY)
    return group


def capture_if_dead(grid: Grid, x: int, y: int, color: Stone) -> int:
    """Remove the group at (x, y) if it is dead; return the number removed."""
    return len(remove_dead_group(grid, x, y, color))


# ============================================================================
# Coordinate Conversion
# ============================================================================

def gtp_to_coords(gtp_coord: str, board_size: int = 19) -> Tuple[int, int]:
    """
    Convert GTP coordinate (e.g., "Q16") to (x, y) tuple.

    Columns are A-T (I is skipped), rows are 1-based; row 1 maps to y = 0.

    Raises:
        ValueError: If coordinate is invalid or off the board
    """
    if not gtp_coord or len(gtp_coord) < 2:
        raise ValueError(f"Invalid GTP coordinate: {gtp_coord}")

    col = gtp_coord[0].upper()
    try:
        row = int(gtp_coord[1:])
    except ValueError:
        raise ValueError(f"Invalid GTP coordinate: {gtp_coord}")

    if col not in GTP_COLUMNS:
        raise ValueError(f"Invalid column letter: {col}")

    x = GTP_COLUMNS.index(col)
    y = row - 1

    if not (0 <= x < board_size and 0 <= y < board_size):
        raise ValueError(f"Coordinate {gtp_coord} out of bounds for {board_size}x{board_size}")

    return (x, y)


def coords_to_gtp(x: int, y: int) -> str:
    """Convert (x, y) coordinates to GTP string, e.g. (3, 3) -> "D4"."""
    return f"{GTP_COLUMNS[x]}{y + 1}"
