"""Shared chess definitions: colours, pieces, moves, squares and board tables."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum, IntFlag

INFINITE_TIME = 10_000_000
MAXIMUM_DEPTH = 96
MATE = 9999

GEN_STACK = 1120
MAX_PLY = 32
HIST_STACK = 400

MAX_DEPTH = 100
MAX_SCORE = 10000
MAX_TIME = 60000

START_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -"

# Squares are numbered 0 (a8) to 63 (h1), rank by rank from the top.
A8, B8, C8, D8, E8, F8, G8, H8 = range(0, 8)
A1, B1, C1, D1, E1, F1, G1, H1 = range(56, 64)

_FILES = "abcdefgh"


class Color(IntEnum):
    """The two sides."""

    LIGHT = 0
    DARK = 1

    @property
    def opponent(self) -> Color:
        return Color(self ^ 1)


class Piece(IntEnum):
    """Piece kinds, in order of value."""

    PAWN = 0
    KNIGHT = 1
    BISHOP = 2
    ROOK = 3
    QUEEN = 4
    KING = 5

    @property
    def fen_letter(self) -> str:
        """Upper-case FEN letter of the piece."""
        return "PNBRQK"[self]

    @property
    def board_letter(self) -> str:
        """Upper-case letter used when drawing the board."""
        return BOARD_CHARS[self]

    @property
    def slides(self) -> bool:
        return SLIDE[self]

    @property
    def offsets(self) -> tuple[int, ...]:
        return OFFSETS[self]


class MoveFlag(IntFlag):
    """Bits that describe a move."""

    NONE = 0
    CAPTURE = 1
    CASTLE = 2
    EN_PASSANT = 4
    PAWN_DOUBLE = 8
    PAWN_MOVE = 16
    PROMOTE = 32


_PROMOTION_LETTERS = {Piece.KNIGHT: "n", Piece.BISHOP: "b", Piece.ROOK: "r"}


@dataclass(frozen=True)
class Move:
    """A move from one square to another, with its promotion piece and flags."""

    from_sq: int
    to_sq: int
    promote: Piece | None = None
    bits: MoveFlag = MoveFlag.NONE

    def uci(self) -> str:
        """Coordinate notation, e.g. ``e2e4`` or ``e7e8q``."""
        text = _coord(self.from_sq) + _coord(self.to_sq)
        if self.bits & MoveFlag.PROMOTE:
            text += _PROMOTION_LETTERS.get(self.promote, "q")
        return text

    def __str__(self) -> str:
        return self.uci()


def row(sq: int) -> int:
    return sq >> 3


def col(sq: int) -> int:
    return sq & 7


def _coord(sq: int) -> str:
    return f"{_FILES[col(sq)]}{8 - row(sq)}"


def square_name(sq: int) -> str:
    """Name of square ``sq`` (0 is a8, 63 is h1)."""
    if not 0 <= sq < 64:
        raise ValueError(f"square out of range: {sq}")
    return _coord(sq)


def parse_square(name: str) -> int:
    """Square number of a name such as ``e4``."""
    if len(name) != 2 or name[0] not in _FILES or name[1] not in "12345678":
        raise ValueError(f"not a square: {name!r}")
    return _FILES.index(name[0]) + 8 * (8 - int(name[1]))


# A 10x12 board with a border of -1 around the real 8x8 board, so that
# stepping off the edge lands on -1.
MAILBOX: tuple[int, ...] = tuple(
    (r - 2) * 8 + (c - 1) if 2 <= r <= 9 and 1 <= c <= 8 else -1
    for r in range(12)
    for c in range(10)
)

MAILBOX64: tuple[int, ...] = tuple(21 + 10 * r + c for r in range(8) for c in range(8))

SLIDE: tuple[bool, ...] = (False, False, True, True, True, False)

OFFSETS: tuple[tuple[int, ...], ...] = (
    (),
    (-21, -19, -12, -8, 8, 12, 19, 21),
    (-11, -9, 9, 11),
    (-10, -1, 1, 10),
    (-11, -10, -9, -1, 1, 9, 10, 11),
    (-11, -10, -9, -1, 1, 9, 10, 11),
)


def step(sq: int, offset: int) -> int | None:
    """Square reached from ``sq`` by a mailbox offset, or None off the board."""
    target = MAILBOX[MAILBOX64[sq] + offset]
    return None if target == -1 else target


# ANDed with the castle rights for both squares of every move.
CASTLE_MASK: tuple[int, ...] = (
    7, 15, 15, 15, 3, 15, 15, 11,
    *([15] * 48),
    13, 15, 15, 15, 12, 15, 15, 14,
)

BOARD_CHARS = "ANBRQK"