import pytest

from rapbee.core import (
    A1,
    CASTLE_MASK,
    E1,
    H8,
    MAILBOX,
    MAILBOX64,
    OFFSETS,
    Color,
    Move,
    MoveFlag,
    Piece,
    parse_square,
    square_name,
    step,
)


def test_square_name_corners():
    assert square_name(0) == "a8"
    assert square_name(63) == "h1"
    assert square_name(E1) == "e1"


@pytest.mark.parametrize("sq", [-1, 64, 100])
def test_square_name_out_of_range(sq):
    with pytest.raises(ValueError):
        square_name(sq)


def test_parse_square_round_trip():
    for sq in range(64):
        assert parse_square(square_name(sq)) == sq


@pytest.mark.parametrize("name", ["", "e", "i1", "a9", "a0", "e44", "E2"])
def test_parse_square_rejects(name):
    with pytest.raises(ValueError):
        parse_square(name)


def test_color_opponent():
    light = Color(0)
    dark = Color(1)
    assert light is Color.LIGHT
    assert dark is Color.DARK
    assert light.opponent is dark
    assert dark.opponent is light


def test_piece_letters():
    pieces = [Piece(value) for value in range(6)]
    assert "".join(p.fen_letter for p in pieces) == "PNBRQK"
    assert "".join(p.board_letter for p in pieces) == "ANBRQK"


def test_move_uci_plain():
    move = Move(parse_square("e2"), parse_square("e4"), bits=MoveFlag.PAWN_MOVE | MoveFlag.PAWN_DOUBLE)
    assert move.uci() == "e2e4"
    assert str(move) == "e2e4"


@pytest.mark.parametrize("piece", [Piece.KNIGHT, Piece.BISHOP, Piece.ROOK, Piece.QUEEN])
def test_move_uci_promotion_suffix(piece):
    move = Move(parse_square("e7"), parse_square("e8"), piece, MoveFlag.PAWN_MOVE | MoveFlag.PROMOTE)
    text = move.uci()
    assert text[:4] == "e7e8"
    assert text[4] == piece.fen_letter.lower()


def test_move_uci_promote_ignored_without_flag():
    move = Move(parse_square("e7"), parse_square("e8"), Piece.KNIGHT, MoveFlag.PAWN_MOVE)
    assert move.uci() == "e7e8"


def test_move_equality_and_hashing():
    a = Move(52, 36, None, MoveFlag.PAWN_MOVE)
    b = Move(52, 36, None, MoveFlag.PAWN_MOVE)
    c = Move(52, 36, None, MoveFlag.CAPTURE)
    assert a == b
    assert a != c
    assert len({a, b, c}) == 2


def test_mailbox_round_trip():
    for sq in range(64):
        assert MAILBOX[MAILBOX64[sq]] == sq
    assert MAILBOX.count(-1) == 120 - 64


def test_step_off_board():
    assert step(H8, 1) is None
    assert step(H8, -10) is None
    assert step(A1, 10) is None
    assert step(A1, -1) is None


def test_step_inside_board():
    assert step(parse_square("e4"), -10) == parse_square("e5")
    assert step(parse_square("e4"), 1) == parse_square("f4")
    assert step(parse_square("g1"), -21) == parse_square("f3")


def test_knight_from_corner_has_two_targets():
    targets = [t for t in (step(A1, o) for o in OFFSETS[Piece.KNIGHT]) if t is not None]
    assert sorted(square_name(t) for t in targets) == ["b3", "c2"]


def test_castle_mask_clears_rights():
    assert CASTLE_MASK[parse_square("h1")] & 1 == 0
    assert CASTLE_MASK[parse_square("a1")] & 2 == 0
    assert CASTLE_MASK[E1] & 3 == 0
    assert CASTLE_MASK[parse_square("e8")] & 12 == 0
    assert CASTLE_MASK[parse_square("e4")] == 15
    assert len(CASTLE_MASK) == 64