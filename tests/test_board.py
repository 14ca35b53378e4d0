"""
Unit tests for board.py module.

Tests:
- Stone codes and opponent mapping
- Grid creation and copying
- Flood-fill group and liberty analysis
- GTP coordinate conversion
"""

import pytest
import sys
from pathlib import Path

# Add project root to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from baduk.board import (
    Grid,
    Stone,
    capture_if_dead,
    collect_group,
    coords_to_gtp,
    gtp_to_coords,
    has_liberty,
    neighbors,
    remove_dead_group,
)


def make_grid(size, black=(), white=()):
    grid = Grid(size)
    for x, y in black:
        grid.set(x, y, Stone.BLACK)
    for x, y in white:
        grid.set(x, y, Stone.WHITE)
    return grid


class TestStone:
    """Tests for the Stone enum."""

    def test_codes(self):
        """Test numeric codes match the host/wire values."""
        assert int(Stone.EMPTY) == 0
        assert int(Stone.BLACK) == 1
        assert int(Stone.WHITE) == 2

    def test_opponent(self):
        """Test Black and White swap; Empty falls through to Black."""
        assert Stone.BLACK.opponent() == Stone.WHITE
        assert Stone.WHITE.opponent() == Stone.BLACK
        assert Stone.EMPTY.opponent() == Stone.BLACK

    def test_from_letter(self):
        assert Stone.from_letter("b") == Stone.BLACK
        assert Stone.from_letter("W") == Stone.WHITE
        with pytest.raises(ValueError):
            Stone.from_letter("X")


class TestGrid:
    """Tests for the Grid class."""

    def test_creation(self):
        """Test every cell starts Empty."""
        for size in [9, 13, 19]:
            grid = Grid(size)
            assert grid.size == size
            assert grid.count(Stone.EMPTY) == size * size

    def test_invalid_size(self):
        """Test unsupported sizes raise ValueError."""
        with pytest.raises(ValueError):
            Grid(15)

    def test_set_and_get(self):
        grid = Grid(9)
        grid.set(3, 5, Stone.WHITE)
        assert grid.get(3, 5) == Stone.WHITE
        assert grid.rows()[5][3] == 2
        assert list(grid.stones()) == [(3, 5, Stone.WHITE)]

    def test_copy_is_independent(self):
        """Test mutating a copy leaves the original alone."""
        grid = make_grid(9, black=[(0, 0)])
        scratch = grid.copy()
        scratch.set(1, 1, Stone.WHITE)

        assert grid.get(1, 1) == Stone.EMPTY
        assert scratch != grid
        assert grid.copy() == grid

    def test_in_bounds(self):
        grid = Grid(9)
        assert grid.in_bounds(0, 0)
        assert grid.in_bounds(8, 8)
        assert not grid.in_bounds(9, 0)
        assert not grid.in_bounds(0, -1)


class TestNeighbors:
    """Tests for orthogonal neighbor enumeration."""

    def test_order_left_right_up_down(self):
        """Test the fixed neighbor order."""
        assert list(neighbors(1, 1, 9)) == [(0, 1), (2, 1), (1, 0), (1, 2)]

    def test_corners_and_edges(self):
        """Test off-board positions are never neighbors."""
        assert list(neighbors(0, 0, 9)) == [(1, 0), (0, 1)]
        assert list(neighbors(8, 8, 9)) == [(7, 8), (8, 7)]
        assert list(neighbors(4, 0, 9)) == [(3, 0), (5, 0), (4, 1)]


class TestGroupAnalysis:
    """Tests for liberty checks, group collection and capture."""

    def test_lone_stone_has_liberty(self):
        grid = make_grid(9, black=[(4, 4)])
        assert has_liberty(grid, 4, 4, Stone.BLACK)

    def test_surrounded_stone_has_no_liberty(self):
        grid = make_grid(9, black=[(1, 1)], white=[(0, 1), (1, 0), (2, 1), (1, 2)])
        assert not has_liberty(grid, 1, 1, Stone.BLACK)

    def test_group_shares_liberties(self):
        """Test a chain is alive through any member's liberty."""
        # Black chain along the bottom edge, one open end at (3, 0)
        grid = make_grid(
            9,
            black=[(0, 0), (1, 0), (2, 0)],
            white=[(0, 1), (1, 1), (2, 1)],
        )
        assert has_liberty(grid, 0, 0, Stone.BLACK)

        grid.set(3, 0, Stone.WHITE)
        assert not has_liberty(grid, 0, 0, Stone.BLACK)

    def test_collect_group(self):
        grid = make_grid(9, black=[(0, 0), (1, 0), (1, 1), (3, 3)])
        assert collect_group(grid, 0, 0, Stone.BLACK) == {(0, 0), (1, 0), (1, 1)}
        assert collect_group(grid, 3, 3, Stone.BLACK) == {(3, 3)}

    def test_collect_group_wrong_color(self):
        """Test a start cell of another color yields an empty group."""
        grid = make_grid(9, black=[(0, 0)])
        assert collect_group(grid, 0, 0, Stone.WHITE) == set()
        assert not has_liberty(grid, 0, 0, Stone.WHITE)

    def test_full_board_single_color(self):
        """Test a board-filling group is handled without recursion."""
        grid = Grid(19)
        for x in range(19):
            for y in range(19):
                grid.set(x, y, Stone.BLACK)

        assert not has_liberty(grid, 9, 9, Stone.BLACK)
        assert len(collect_group(grid, 0, 0, Stone.BLACK)) == 361
        assert capture_if_dead(grid, 18, 18, Stone.BLACK) == 361
        assert grid.count(Stone.EMPTY) == 361

    def test_capture_if_dead_removes_whole_group(self):
        grid = make_grid(
            9,
            black=[(0, 0), (1, 0)],
            white=[(0, 1), (1, 1), (2, 0)],
        )
        assert capture_if_dead(grid, 1, 0, Stone.BLACK) == 2
        assert grid.get(0, 0) == Stone.EMPTY
        assert grid.get(1, 0) == Stone.EMPTY
        assert grid.count(Stone.WHITE) == 3

    def test_capture_if_dead_leaves_live_group(self):
        grid = make_grid(9, black=[(0, 0), (1, 0)], white=[(0, 1)])
        before = grid.copy()
        assert capture_if_dead(grid, 0, 0, Stone.BLACK) == 0
        assert grid == before

    def test_remove_dead_group_returns_positions(self):
        grid = make_grid(9, white=[(0, 0)], black=[(1, 0), (0, 1)])
        assert remove_dead_group(grid, 0, 0, Stone.WHITE) == {(0, 0)}


class TestCoordinateConversion:
    """Tests for GTP coordinate conversion."""

    def test_gtp_to_coords_basic(self):
        assert gtp_to_coords("A1", 19) == (0, 0)
        assert gtp_to_coords("T19", 19) == (18, 18)
        assert gtp_to_coords("D4", 19) == (3, 3)
        assert gtp_to_coords("E5", 9) == (4, 4)

    def test_gtp_to_coords_skips_i(self):
        """Test that column I is skipped (Go convention)."""
        assert gtp_to_coords("H1", 19) == (7, 0)
        assert gtp_to_coords("J1", 19) == (8, 0)

    def test_gtp_to_coords_case_insensitive(self):
        assert gtp_to_coords("d4", 19) == gtp_to_coords("D4", 19)

    def test_gtp_to_coords_invalid(self):
        """Test invalid coordinates raise ValueError."""
        with pytest.raises(ValueError):
            gtp_to_coords("", 19)
        with pytest.raises(ValueError):
            gtp_to_coords("A", 19)
        with pytest.raises(ValueError):
            gtp_to_coords("I1", 19)
        with pytest.raises(ValueError):
            gtp_to_coords("K1", 9)  # Off a 9x9 board
        with pytest.raises(ValueError):
            gtp_to_coords("A10", 9)

    def test_coords_to_gtp(self):
        assert coords_to_gtp(0, 0) == "A1"
        assert coords_to_gtp(18, 18) == "T19"
        assert coords_to_gtp(8, 0) == "J1"
