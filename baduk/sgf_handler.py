"""
SGF (Smart Game Format) handler for the Baduk engine.

Provides import/export of a session's move log using the sgfmill library.
"""

import logging
from datetime import date
from typing import List, Optional, Tuple

from sgfmill import sgf

from .board import BOARD_SIZES, Stone
from .rules import Move
from .session import GameSession

_COLOURS = {Stone.BLACK: "b", Stone.WHITE: "w"}


def _move_to_sgf_point(move: Move) -> Optional[Tuple[int, int]]:
    """
    Convert a move to an sgfmill point (row, col).

    sgfmill puts row 0 at the bottom of the board, as does y = 0 here,
    so the point is simply (y, x). Passes map to None.
    """
    if move.point is None:
        return None
    x, y = move.point
    return (y, x)


def moves_to_sgf(
    board_size: int,
    moves: List[Move],
    black_player: str = "Black",
    white_player: str = "White",
    game_name: str = "Baduk Engine Game",
) -> str:
    """
    Create an SGF string from a move list.

    Args:
        board_size: Board size (9, 13, or 19)
        moves: Moves in play order; passes are written as B[] / W[]
        black_player: Black player name
        white_player: White player name
        game_name: Name of the game

    Returns:
        SGF formatted string
    """
    if board_size not in BOARD_SIZES:
        raise ValueError(f"Board size must be 9, 13, or 19, got {board_size}")

    game = sgf.Sgf_game(size=board_size)
    root = game.get_root()

    root.set("PB", black_player)
    root.set("PW", white_player)
    root.set("DT", date.today().isoformat())
    root.set("GN", game_name)
    root.set("AP", ("BadukEngine", "0.1"))

    for move in moves:
        node = game.extend_main_sequence()
        if move.is_pass:
            # sgfmill writes passes as "tt" on small boards
            node.set_raw(_COLOURS[move.player].upper(), b"")
        else:
            node.set_move(_COLOURS[move.player], _move_to_sgf_point(move))

    return game.serialise().decode("utf-8")


def sgf_to_moves(sgf_content: str) -> Tuple[int, List[Move]]:
    """
    Parse an SGF string into (board size, main-line moves).

    Raises:
        ValueError: If the SGF is malformed, uses an unsupported board
            size, or contains setup stones
    """
    game = sgf.Sgf_game.from_string(sgf_content)
    board_size = game.get_size()
    if board_size not in BOARD_SIZES:
        raise ValueError(f"Board size must be 9, 13, or 19, got {board_size}")

    moves = []
    for node in game.get_main_sequence():
        if node.has_setup_stones():
            raise ValueError("SGF setup stones (AB/AW/AE) are not supported")

        colour, point = node.get_move()
        if colour is None:
            continue
        player = Stone.from_letter(colour)
        if point is None:
            moves.append(Move.pass_move(player))
        else:
            row, col = point
            moves.append(Move.place(col, row, player))

    return board_size, moves


def session_to_sgf(session: GameSession, **kwargs) -> str:
    """Export the moves up to the session's cursor as SGF."""
    return moves_to_sgf(session.size, list(session.move_log.committed()), **kwargs)


def session_from_sgf(sgf_content: str, logger: Optional[logging.Logger] = None) -> GameSession:
    """
    Build a session by replaying an SGF main line through the rules engine.

    Raises:
        ValueError: If the SGF is invalid or a move is illegal or out of turn
    """
    board_size, moves = sgf_to_moves(sgf_content)
    return GameSession.from_moves(board_size, moves, logger=logger)


def load_sgf_file(file_path: str, logger: Optional[logging.Logger] = None) -> GameSession:
    """
    Load an SGF file from disk into a new session.

    Args:
        file_path: Path to the SGF file

    Returns:
        GameSession at the end of the file's main line

    Raises:
        ValueError: If the file is not valid UTF-8 (UnicodeDecodeError),
            or its SGF is invalid or has an illegal move
    """
    with open(file_path, "r", encoding="utf-8") as f:
        content = f.read()
    return session_from_sgf(content, logger=logger)


def save_sgf_file(file_path: str, sgf_content: str) -> None:
    """
    Save an SGF string to a file.

    Args:
        file_path: Path to save the file
        sgf_content: SGF formatted string
    """
    with open(file_path, "w", encoding="utf-8") as f:
        f.write(sgf_content)
