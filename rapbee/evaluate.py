"""Static evaluation of a position from the side to move's point of view."""

from __future__ import annotations

from typing import TYPE_CHECKING

from .core import Color, Piece, col, row

if TYPE_CHECKING:
    from .board import Board

DOUBLED_PAWN_PENALTY = 10
ISOLATED_PAWN_PENALTY = 20
BACKWARDS_PAWN_PENALTY = 8
PASSED_PAWN_BONUS = 20
ROOK_SEMI_OPEN_FILE_BONUS = 10
ROOK_OPEN_FILE_BONUS = 15
ROOK_ON_SEVENTH_BONUS = 20

PIECE_VALUE: tuple[int, ...] = (90, 300, 300, 500, 900, 0)

PAWN_PCSQ: tuple[int, ...] = (
    0, 0, 0, 0, 0, 0, 0, 0,
    5, 10, 15, 20, 20, 15, 10, 5,
    4, 8, 12, 16, 16, 12, 8, 4,
    3, 6, 9, 12, 12, 9, 6, 3,
    2, 4, 6, 8, 8, 6, 4, 2,
    1, 2, 3, -10, -10, 3, 2, 1,
    0, 0, 0, -40, -40, 0, 0, 0,
    0, 0, 0, 0, 0, 0, 0, 0,
)

KNIGHT_PCSQ: tuple[int, ...] = (
    -10, -10, -10, -10, -10, -10, -10, -10,
    -10, 0, 0, 0, 0, 0, 0, -10,
    -10, 0, 5, 5, 5, 5, 0, -10,
    -10, 0, 5, 10, 10, 5, 0, -10,
    -10, 0, 5, 10, 10, 5, 0, -10,
    -10, 0, 5, 5, 5, 5, 0, -10,
    -10, 0, 0, 0, 0, 0, 0, -10,
    -10, -30, -10, -10, -10, -10, -30, -10,
)

BISHOP_PCSQ: tuple[int, ...] = (
    -10, -10, -10, -10, -10, -10, -10, -10,
    -10, 0, 0, 0, 0, 0, 0, -10,
    -10, 0, 5, 5, 5, 5, 0, -10,
    -10, 0, 5, 10, 10, 5, 0, -10,
    -10, 0, 5, 10, 10, 5, 0, -10,
    -10, 0, 5, 5, 5, 5, 0, -10,
    -10, 0, 0, 0, 0, 0, 0, -10,
    -10, -10, -20, -10, -10, -20, -10, -10,
)

KING_PCSQ: tuple[int, ...] = (
    *([-40] * 48),
    *([-20] * 8),
    0, 20, 40, -20, 0, -20, 40, 20,
)

KING_ENDGAME_PCSQ: tuple[int, ...] = (
    0, 10, 20, 30, 30, 20, 10, 0,
    10, 20, 30, 40, 40, 30, 20, 10,
    20, 30, 40, 50, 50, 40, 30, 20,
    30, 40, 50, 60, 60, 50, 40, 30,
    30, 40, 50, 60, 60, 50, 40, 30,
    20, 30, 40, 50, 50, 40, 30, 20,
    10, 20, 30, 40, 40, 30, 20, 10,
    0, 10, 20, 30, 30, 20, 10, 0,
)

LIGHT, DARK = Color.LIGHT, Color.DARK


def _flip(sq: int) -> int:
    """The square seen from the other side of the board."""
    return sq ^ 56


def _tdiv(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


# pawn_rank[c][f] is the rank of colour c's least advanced pawn on file f - 1,
# with a buffer file on each side; 0 (LIGHT) or 7 (DARK) where there is none.
_PawnRanks = tuple[list[int], list[int]]


def _light_pawn(sq: int, ranks: _PawnRanks) -> int:
    f = col(sq) + 1
    r = row(sq)
    light, dark = ranks
    score = PAWN_PCSQ[sq]
    if light[f] > r:
        score -= DOUBLED_PAWN_PENALTY
    if light[f - 1] == 0 and light[f + 1] == 0:
        score -= ISOLATED_PAWN_PENALTY
    elif light[f - 1] < r and light[f + 1] < r:
        score -= BACKWARDS_PAWN_PENALTY
    if dark[f - 1] >= r and dark[f] >= r and dark[f + 1] >= r:
        score += (7 - r) * PASSED_PAWN_BONUS
    return score


def _dark_pawn(sq: int, ranks: _PawnRanks) -> int:
    f = col(sq) + 1
    r = row(sq)
    light, dark = ranks
    score = PAWN_PCSQ[_flip(sq)]
    if dark[f] < r:
        score -= DOUBLED_PAWN_PENALTY
    if dark[f - 1] == 7 and dark[f + 1] == 7:
        score -= ISOLATED_PAWN_PENALTY
    elif dark[f - 1] > r and dark[f + 1] > r:
        score -= BACKWARDS_PAWN_PENALTY
    if light[f - 1] <= r and light[f] <= r and light[f + 1] <= r:
        score += r * PASSED_PAWN_BONUS
    return score


def _light_king_pawn(f: int, ranks: _PawnRanks) -> int:
    light, dark = ranks
    score = 0
    if light[f] == 6:
        pass
    elif light[f] == 5:
        score -= 10
    elif light[f] != 0:
        score -= 20
    else:
        score -= 25
    if dark[f] == 7:
        score -= 15
    elif dark[f] == 5:
        score -= 10
    elif dark[f] == 4:
        score -= 5
    return score


def _dark_king_pawn(f: int, ranks: _PawnRanks) -> int:
    light, dark = ranks
    score = 0
    if dark[f] == 1:
        pass
    elif dark[f] == 2:
        score -= 10
    elif dark[f] != 7:
        score -= 20
    else:
        score -= 25
    if light[f] == 0:
        score -= 15
    elif light[f] == 2:
        score -= 10
    elif light[f] == 3:
        score -= 5
    return score


def _king_safety(sq: int, table_sq: int, ranks: _PawnRanks, shelter, enemy_material: int) -> int:
    light, dark = ranks
    score = KING_PCSQ[table_sq]
    c = col(sq)
    if c < 3:
        score += shelter(1, ranks) + shelter(2, ranks) + _tdiv(shelter(3, ranks), 2)
    elif c > 4:
        score += shelter(8, ranks) + shelter(7, ranks) + _tdiv(shelter(6, ranks), 2)
    else:
        score -= 10 * sum(1 for f in range(c, c + 3) if light[f] == 0 and dark[f] == 7)
    return _tdiv(score * enemy_material, 3100)


def _rook_bonus(own: list[int], other: list[int], own_empty: int, other_empty: int, f: int) -> int:
    if own[f] != own_empty:
        return 0
    return ROOK_OPEN_FILE_BONUS if other[f] == other_empty else ROOK_SEMI_OPEN_FILE_BONUS


def evaluate(board: Board) -> int:
    """Score of the position, positive when the side to move stands better."""
    ranks: _PawnRanks = ([0] * 10, [7] * 10)
    piece_mat = [0, 0]
    pawn_mat = [0, 0]
    occupied = [
        (sq, c, p)
        for sq, (c, p) in enumerate(zip(board.color, board.piece))
        if c is not None and p is not None
    ]

    for sq, c, p in occupied:
        if p == Piece.PAWN:
            pawn_mat[c] += PIECE_VALUE[Piece.PAWN]
            f = col(sq) + 1
            if c == LIGHT:
                ranks[LIGHT][f] = max(ranks[LIGHT][f], row(sq))
            else:
                ranks[DARK][f] = min(ranks[DARK][f], row(sq))
        else:
            piece_mat[c] += PIECE_VALUE[p]

    score = [piece_mat[LIGHT] + pawn_mat[LIGHT], piece_mat[DARK] + pawn_mat[DARK]]
    light, dark = ranks
    for sq, c, p in occupied:
        f = col(sq) + 1
        if c == LIGHT:
            if p == Piece.PAWN:
                score[LIGHT] += _light_pawn(sq, ranks)
            elif p == Piece.KNIGHT:
                score[LIGHT] += KNIGHT_PCSQ[sq]
            elif p == Piece.BISHOP:
                score[LIGHT] += BISHOP_PCSQ[sq]
            elif p == Piece.ROOK:
                score[LIGHT] += _rook_bonus(light, dark, 0, 7, f)
                if row(sq) == 1:
                    score[LIGHT] += ROOK_ON_SEVENTH_BONUS
            elif p == Piece.KING:
                if piece_mat[DARK] <= 1200:
                    score[LIGHT] += KING_ENDGAME_PCSQ[sq]
                else:
                    score[LIGHT] += _king_safety(
                        sq, sq, ranks, _light_king_pawn, piece_mat[DARK]
                    )
        else:
            if p == Piece.PAWN:
                score[DARK] += _dark_pawn(sq, ranks)
            elif p == Piece.KNIGHT:
                score[DARK] += KNIGHT_PCSQ[_flip(sq)]
            elif p == Piece.BISHOP:
                score[DARK] += BISHOP_PCSQ[_flip(sq)]
            elif p == Piece.ROOK:
                score[DARK] += _rook_bonus(dark, light, 7, 0, f)
                if row(sq) == 6:
                    score[DARK] += ROOK_ON_SEVENTH_BONUS
            elif p == Piece.KING:
                if piece_mat[LIGHT] <= 1200:
                    score[DARK] += KING_ENDGAME_PCSQ[_flip(sq)]
                else:
                    score[DARK] += _king_safety(
                        sq, _flip(sq), ranks, _dark_king_pawn, piece_mat[LIGHT]
                    )

    if board.side == LIGHT:
        return score[LIGHT] - score[DARK]
    return score[DARK] - score[LIGHT]