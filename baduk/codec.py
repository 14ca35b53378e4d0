"""
Compact binary and text encoding of a game for the Baduk engine.

Layout:
- Header byte: board size code in bits 2-3 (0 = 9, 1 = 13, 2 = 19),
  current player in bits 0-1 (0 = Empty, 1 = Black, 2 = White)
- Varint black captures, varint white captures
- Varint move count
- One little-endian u16 per move: 0xFFFF for a pass, otherwise
  ``(y * size + x) << 2 | player``

Varints are LEB128: 7 data bits per byte, least significant group first,
high bit set when another byte follows. The text form is URL-safe base64
(``A-Z a-z 0-9 - _``) without ``=`` padding.
"""

import base64
import re
import struct
from dataclasses import dataclass
from enum import Enum
from typing import Sequence, Tuple

from .board import Stone
from .rules import Move

SIZE_CODES = {9: 0, 13: 1, 19: 2}
CODE_SIZES = {code: size for size, code in SIZE_CODES.items()}

PASS_ENTRY = 0xFFFF
MAX_VARINT = 0xFFFFFFFF
VARINT_BITS = 32

_TEXT_RE = re.compile(r"^[A-Za-z0-9_-]*$")


# ============================================================================
# Errors
# ============================================================================

class DecodeErrorKind(str, Enum):
    """Category of a malformed-input failure."""
    TRUNCATED = "Truncated"
    OVERFLOW = "Overflow"
    INVALID_FIELD = "InvalidField"


class CodecError(ValueError):
    """Base class for decoding failures."""
    kind = DecodeErrorKind.INVALID_FIELD


class TruncatedError(CodecError):
    """Input ended before a declared field was complete."""
    kind = DecodeErrorKind.TRUNCATED


class VarintOverflowError(CodecError):
    """A varint did not terminate within 32 bits."""
    kind = DecodeErrorKind.OVERFLOW


class InvalidFieldError(CodecError):
    """A field holds a value outside its valid range."""
    kind = DecodeErrorKind.INVALID_FIELD


# ============================================================================
# Varint
# ============================================================================

def encode_varint(value: int) -> bytes:
    """
    Encode an unsigned 32-bit integer as a LEB128 varint.

    Raises:
        ValueError: If value is negative or does not fit in 32 bits
    """
    if not 0 <= value <= MAX_VARINT:
        raise ValueError(f"Varint value must be 0..{MAX_VARINT}, got {value}")

    out = bytearray()
    while True:
        byte = value & 0x7F
        value >>= 7
        if value:
            out.append(byte | 0x80)
        else:
            out.append(byte)
            return bytes(out)


def decode_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Decode a varint starting at ``offset``.

    Returns:
        (value, offset just past the varint)

    Raises:
        VarintOverflowError: If more than 32 bits accumulate
        TruncatedError: If the data ends mid-varint
    """
    value = 0
    shift = 0
    while True:
        if shift >= VARINT_BITS:
            raise VarintOverflowError(f"Varint at byte {offset} exceeds {VARINT_BITS} bits")
        if offset >= len(data):
            raise TruncatedError("Input ends inside a varint")
        byte = data[offset]
        offset += 1
        value |= (byte & 0x7F) << shift
        if not byte & 0x80:
            break
        shift += 7

    if value > MAX_VARINT:
        raise VarintOverflowError(f"Varint value {value} exceeds {VARINT_BITS} bits")
    return value, offset


# ============================================================================
# Header and Move Entries
# ============================================================================

def encode_header(size: int, player: Stone) -> int:
    if size not in SIZE_CODES:
        raise ValueError(f"Board size must be 9, 13, or 19, got {size}")
    return (SIZE_CODES[size] << 2) | int(player)


def decode_header(byte: int) -> Tuple[int, Stone]:
    """
    Split a header byte into (board size, current player).

    Raises:
        InvalidFieldError: For an unknown size code or player value
    """
    size_code = (byte >> 2) & 0x03
    player_bits = byte & 0x03
    if byte >> 4:
        raise InvalidFieldError(f"Header byte 0x{byte:02x} has reserved bits set")
    if size_code not in CODE_SIZES:
        raise InvalidFieldError(f"Unknown board size code {size_code}")
    if player_bits > Stone.WHITE:
        raise InvalidFieldError(f"Unknown player value {player_bits}")
    return CODE_SIZES[size_code], Stone(player_bits)


def expected_player(index: int) -> Stone:
    """Players alternate from Black: even indexes are Black."""
    return Stone.BLACK if index % 2 == 0 else Stone.WHITE


def encode_move(move: Move, size: int) -> int:
    if move.point is None:
        return PASS_ENTRY
    x, y = move.point
    if not (0 <= x < size and 0 <= y < size):
        raise ValueError(f"Move {move!r} is off the {size}x{size} board")
    if move.player not in (Stone.BLACK, Stone.WHITE):
        raise ValueError(f"Move {move!r} has no player")
    return ((y * size + x) << 2) | int(move.player)


def decode_move(entry: int, index: int, size: int) -> Move:
    """
    Decode one u16 move entry.

    Passes carry no player; it is inferred from ``index``.

    Raises:
        InvalidFieldError: For a position off the board or a player value
            other than Black or White
    """
    if entry == PASS_ENTRY:
        return Move.pass_move(expected_player(index))

    position = entry >> 2
    player_bits = entry & 0x03
    if position >= size * size:
        raise InvalidFieldError(f"Move {index + 1}: position {position} outside {size}x{size} board")
    if player_bits not in (Stone.BLACK, Stone.WHITE):
        raise InvalidFieldError(f"Move {index + 1}: invalid player value {player_bits}")
    return Move.place(position % size, position // size, Stone(player_bits))


# ============================================================================
# Game Encoding
# ============================================================================

@dataclass(frozen=True)
class DecodedGame:
    """Fields of a decoded game buffer."""
    size: int
    current_player: Stone
    black_captures: int
    white_captures: int
    moves: Tuple[Move, ...]


def encode_game(
    size: int,
    current_player: Stone,
    black_captures: int,
    white_captures: int,
    moves: Sequence[Move],
) -> bytes:
    """
    Encode a game into the binary layout.

    Args:
        size: Board size (9, 13, or 19)
        current_player: Player to move
        black_captures: Stones captured by Black
        white_captures: Stones captured by White
        moves: Committed moves (the log up to its cursor)

    Raises:
        ValueError: If any field is out of range
    """
    out = bytearray([encode_header(size, current_player)])
    out += encode_varint(black_captures)
    out += encode_varint(white_captures)
    out += encode_varint(len(moves))
    for move in moves:
        out += struct.pack("<H", encode_move(move, size))
    return bytes(out)


def decode_game(data: bytes) -> DecodedGame:
    """
    Decode a binary game buffer.

    Raises:
        CodecError: On truncated input, varint overflow, or any field out
            of range (including trailing bytes after the last move)
    """
    if not data:
        raise TruncatedError("Input is empty (no header byte)")

    size, player = decode_header(data[0])
    offset = 1
    black_captures, offset = decode_varint(data, offset)
    white_captures, offset = decode_varint(data, offset)
    move_count, offset = decode_varint(data, offset)

    if offset + 2 * move_count > len(data):
        raise TruncatedError(
            f"Declared {move_count} moves need {2 * move_count} bytes, "
            f"{len(data) - offset} available"
        )

    moves = []
    for index in range(move_count):
        (entry,) = struct.unpack_from("<H", data, offset)
        offset += 2
        moves.append(decode_move(entry, index, size))

    if offset != len(data):
        raise InvalidFieldError(f"{len(data) - offset} unexpected trailing bytes")

    return DecodedGame(
        size=size,
        current_player=player,
        black_captures=black_captures,
        white_captures=white_captures,
        moves=tuple(moves),
    )


# ============================================================================
# Text Form
# ============================================================================

def bytes_to_text(data: bytes) -> str:
    """Encode bytes as unpadded URL-safe base64."""
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def text_to_bytes(text: str) -> bytes:
    """
    Decode unpadded URL-safe base64.

    Raises:
        InvalidFieldError: For characters outside the alphabet or an
            impossible length
    """
    text = text.strip()
    if not _TEXT_RE.match(text):
        raise InvalidFieldError("Text contains characters outside the URL-safe alphabet")
    if len(text) % 4 == 1:
        raise InvalidFieldError(f"Text length {len(text)} cannot encode whole bytes")
    return base64.urlsafe_b64decode(text + "=" * (-len(text) % 4))


def encode_text(
    size: int,
    current_player: Stone,
    black_captures: int,
    white_captures: int,
    moves: Sequence[Move],
) -> str:
    return bytes_to_text(encode_game(size, current_player, black_captures, white_captures, moves))


def decode_text(text: str) -> DecodedGame:
    return decode_game(text_to_bytes(text))
