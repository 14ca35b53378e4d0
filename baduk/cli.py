"""
Command-line interface for the Baduk engine.

Usage:
    # Play moves and show the board
    python -m baduk.cli play --size 9 --moves E5 C3 pass D4

    # Inspect a serialized game
    python -m baduk.cli decode AgAAAaEA

    # Export moves as SGF
    python -m baduk.cli sgf --size 19 --moves Q16 D4 > game.sgf
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .board import gtp_to_coords
from .codec import CodecError, decode_text
from .config import configure_logging, load_config
from .rules import MoveResult
from .session import GameSession, create_session
from .sgf_handler import session_to_sgf

logger = logging.getLogger(__name__)


def parse_args(args: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="baduk",
        description="Go/Baduk rules engine",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Play an opening on 9x9
  %(prog)s play --size 9 --moves E5 C3 G7

  # Passes are written as "pass"
  %(prog)s play --size 9 --moves E5 pass D4

  # Decode a saved game
  %(prog)s decode AgAAAaEA

  # SGF export
  %(prog)s sgf --size 19 --moves Q16 D4 Q3
        """
    )

    parser.add_argument(
        "--config", "-c",
        type=str,
        default=None,
        help="Path to config.yaml file"
    )

    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Verbose output (debug logging)"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, help_text in [("play", "Play moves and print the board"),
                            ("sgf", "Play moves and print them as SGF")]:
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--size", "-s",
            type=int,
            choices=[9, 13, 19],
            default=None,
            help="Board size (default: from config, 19)"
        )
        sub.add_argument(
            "--moves", "-m",
            nargs="+",
            default=[],
            help='Moves in GTP coordinates, e.g. "Q16" "D4" "pass"'
        )

    play = subparsers.choices["play"]
    play.add_argument(
        "--json",
        action="store_true",
        help="Output the final state as JSON"
    )

    decode = subparsers.add_parser("decode", help="Decode a serialized game")
    decode.add_argument("text", help="Serialized game text")

    return parser.parse_args(args)


def play_moves(session: GameSession, moves: List[str]) -> Optional[str]:
    """
    Play GTP moves for alternating players.

    Returns:
        An error message for the first rejected move, or None
    """
    for i, token in enumerate(moves, start=1):
        if token.strip().upper() == "PASS":
            session.pass_turn()
            continue
        try:
            x, y = gtp_to_coords(token, session.size)
        except ValueError as e:
            return f"Move {i} ({token}): {e}"
        result = session.place_stone(x, y)
        if result is not MoveResult.OK:
            return f"Move {i} ({token}): {result.value}"
    return None


def run_play(session: GameSession, args: argparse.Namespace) -> int:
    """Play the requested moves and display the result."""
    error = play_moves(session, args.moves)
    if error:
        print(f"Error: {error}", file=sys.stderr)
        return 1

    if args.command == "sgf":
        print(session_to_sgf(session))
        return 0

    if args.json:
        data = session.snapshot().to_dict()
        data["encoded"] = session.serialize()
        print(json.dumps(data, indent=2))
        return 0

    black, white = session.capture_counts()
    print(session.to_ascii())
    print()
    print(f"Next to play: {session.current_player().name}")
    print(f"Captures:     Black {black}, White {white}")
    print(f"Encoded:      {session.serialize()}")
    return 0


def run_decode(text: str) -> int:
    """Print the fields of a serialized game."""
    try:
        game = decode_text(text)
    except CodecError as e:
        print(f"Decode failed ({e.kind.value}): {e}", file=sys.stderr)
        return 1

    print(f"Board size:     {game.size}x{game.size}")
    print(f"Current player: {game.current_player.name}")
    print(f"Captures:       Black {game.black_captures}, White {game.white_captures}")
    print(f"Moves:          {len(game.moves)}")
    for i, move in enumerate(game.moves, start=1):
        print(f"  {i:3d}. {move.to_gtp()}")
    return 0


def main(args: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parsed = parse_args(args)

    try:
        config = load_config(parsed.config)
    except FileNotFoundError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Config error: {e}", file=sys.stderr)
        return 1

    if parsed.verbose:
        config.logging.level = "DEBUG"
    configure_logging(config)

    if parsed.command == "decode":
        return run_decode(parsed.text)

    session = create_session(size=parsed.size, config=config)
    logger.debug(f"Created {session!r}")
    return run_play(session, parsed)


if __name__ == "__main__":
    sys.exit(main())
