"""Board state, move generation, FEN handling and move making."""

from __future__ import annotations

import random
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .core import (
    A1,
    A8,
    B1,
    B8,
    C1,
    C8,
    CASTLE_MASK,
    D1,
    D8,
    E1,
    E8,
    F1,
    F8,
    G1,
    G8,
    H1,
    H8,
    START_FEN,
    Color,
    Move,
    MoveFlag,
    Piece,
    col,
    row,
    square_name,
    step,
)

_FILES = "abcdefgh"
_DIGITS = "0123456789"

_FEN_PIECES: dict[str, tuple[Color, Piece]] = {}
for _piece in Piece:
    _FEN_PIECES[_piece.fen_letter] = (Color.LIGHT, _piece)
    _FEN_PIECES[_piece.fen_letter.lower()] = (Color.DARK, _piece)

_CASTLE_LETTERS = (("K", 1), ("Q", 2), ("k", 4), ("q", 8))

_PROMOTION_CHOICES = {"n": Piece.KNIGHT, "b": Piece.BISHOP, "r": Piece.ROOK}


@dataclass(frozen=True)
class _CastlePath:
    rook_from: int
    rook_to: int
    must_be_empty: tuple[int, ...]
    must_be_safe: tuple[int, ...]


# Keyed by the king's destination square.
_CASTLE_PATHS = {
    G1: _CastlePath(H1, F1, (F1, G1), (F1, G1)),
    C1: _CastlePath(A1, D1, (B1, C1, D1), (C1, D1)),
    G8: _CastlePath(H8, F8, (F8, G8), (F8, G8)),
    C8: _CastlePath(A8, D8, (B8, C8, D8), (C8, D8)),
}


def _hash_tables() -> tuple[tuple[tuple[tuple[int, ...], ...], ...], int, tuple[int, ...]]:
    rng = random.Random(0)
    pieces = tuple(
        tuple(tuple(rng.getrandbits(32) for _ in range(64)) for _ in Piece)
        for _ in Color
    )
    side = rng.getrandbits(32)
    ep = tuple(rng.getrandbits(32) for _ in range(64))
    return pieces, side, ep


_HASH_PIECE, _HASH_SIDE, _HASH_EP = _hash_tables()


@dataclass
class ScoredMove:
    """A generated move with its ordering score."""

    move: Move
    score: int


@dataclass(frozen=True)
class _Undo:
    move: Move
    capture: Piece | None
    castle: int
    ep: int | None
    fifty: int
    hash: int


class Board:
    """A chess position with the history needed to take moves back."""

    def __init__(self, fen: str = START_FEN) -> None:
        self.color: list[Color | None] = [None] * 64
        self.piece: list[Piece | None] = [None] * 64
        self.side = Color.LIGHT
        self.castle = 0
        self.ep: int | None = None
        self.fifty = 0
        self.hash = 0
        self.ply = 0
        self.undo_stack: list[_Undo] = []
        self.set_fen(fen)

    @property
    def xside(self) -> Color:
        """The side not to move."""
        return self.side.opponent

    @property
    def hply(self) -> int:
        """Number of half-moves made since the position was set."""
        return len(self.undo_stack)

    def set_fen(self, fen: str) -> None:
        """Set up the position described by ``fen`` and clear the history."""
        fields = fen.split()
        if len(fields) < 2:
            raise ValueError(f"incomplete FEN: {fen!r}")
        placement, side_field, *rest = fields

        color: list[Color | None] = [None] * 64
        piece: list[Piece | None] = [None] * 64
        sq = 0
        for ch in placement:
            if ch in "12345678":
                sq += int(ch)
            elif ch in _FEN_PIECES:
                if sq >= 64:
                    raise ValueError(f"too many squares in FEN: {fen!r}")
                color[sq], piece[sq] = _FEN_PIECES[ch]
                sq += 1
            elif ch != "/":
                raise ValueError(f"bad character {ch!r} in FEN: {fen!r}")

        if side_field == "w":
            side = Color.LIGHT
        elif side_field == "b":
            side = Color.DARK
        else:
            raise ValueError(f"bad side to move in FEN: {fen!r}")

        castle = 0
        if rest:
            letters = dict(_CASTLE_LETTERS)
            for ch in rest[0]:
                if ch in letters:
                    castle |= letters[ch]
                elif ch != "-":
                    break

        ep = -1
        if len(rest) > 1:
            for ch in rest[1]:
                if ch == "-":
                    continue
                if ch in _FILES:
                    ep = _FILES.index(ch)
                elif ch in "12345678":
                    ep += 8 * (8 - int(ch))
                else:
                    break

        self.color = color
        self.piece = piece
        self.side = side
        self.castle = castle
        self.ep = None if ep == -1 else ep
        self.fifty = 0
        self.ply = 0
        self.undo_stack = []
        self.set_hash()

    def fen(self) -> str:
        """The position in FEN, with half-move clock and move number."""
        ranks = []
        for r in range(8):
            text = ""
            empty = 0
            for sq in range(r * 8, r * 8 + 8):
                kind = self.piece[sq]
                if kind is None:
                    empty += 1
                    continue
                if empty:
                    text += str(empty)
                    empty = 0
                letter = kind.fen_letter
                text += letter if self.color[sq] == Color.LIGHT else letter.lower()
            if empty:
                text += str(empty)
            ranks.append(text)
        rights = "".join(letter for letter, bit in _CASTLE_LETTERS if self.castle & bit)
        ep = "-" if self.ep is None else square_name(self.ep)
        side = "w" if self.side == Color.LIGHT else "b"
        return (
            f"{'/'.join(ranks)} {side} {rights or '-'} {ep} "
            f"{self.fifty} {self.hply // 2 + 1}"
        )

    def set_hash(self) -> None:
        """Recompute the Zobrist hash of the position."""
        value = 0
        for sq, (c, p) in enumerate(zip(self.color, self.piece)):
            if c is not None and p is not None:
                value ^= _HASH_PIECE[c][p][sq]
        if self.side == Color.DARK:
            value ^= _HASH_SIDE
        if self.ep is not None:
            value ^= _HASH_EP[self.ep]
        self.hash = value

    def in_check(self, side: int) -> bool:
        """Whether ``side``'s king is attacked; True if it has no king."""
        for sq, (c, p) in enumerate(zip(self.color, self.piece)):
            if p == Piece.KING and c == side:
                return self.attack(sq, Color(side).opponent)
        return True

    def _targets(self, sq: int, kind: Piece) -> Iterator[int]:
        """Squares a non-pawn piece on ``sq`` reaches, up to the first occupied one."""
        for offset in kind.offsets:
            n: int | None = sq
            while (n := step(n, offset)) is not None:
                yield n
                if self.color[n] is not None or not kind.slides:
                    break

    def attack(self, sq: int, side: int) -> bool:
        """Whether square ``sq`` is attacked by ``side``."""
        forward = -8 if side == Color.LIGHT else 8
        for i, (c, p) in enumerate(zip(self.color, self.piece)):
            if c != side or p is None:
                continue
            if p == Piece.PAWN:
                if col(i) != 0 and i + forward - 1 == sq:
                    return True
                if col(i) != 7 and i + forward + 1 == sq:
                    return True
            elif any(n == sq for n in self._targets(i, p)):
                return True
        return False

    def _push(
        self,
        moves: list[ScoredMove],
        from_sq: int,
        to_sq: int,
        bits: MoveFlag,
        history: Sequence[Sequence[int]] | None,
    ) -> None:
        if bits & MoveFlag.PAWN_MOVE:
            last_rank = to_sq <= H8 if self.side == Color.LIGHT else to_sq >= A1
            if last_rank:
                for promote in (Piece.KNIGHT, Piece.BISHOP, Piece.ROOK, Piece.QUEEN):
                    moves.append(
                        ScoredMove(
                            Move(from_sq, to_sq, promote, bits | MoveFlag.PROMOTE),
                            1_000_000 + promote * 10,
                        )
                    )
                return
        victim = self.piece[to_sq]
        if self.color[to_sq] is not None and victim is not None:
            attacker = self.piece[from_sq] or 0
            score = 1_000_000 + victim * 10 - attacker
        else:
            score = history[from_sq][to_sq] if history is not None else 0
        moves.append(ScoredMove(Move(from_sq, to_sq, None, bits), score))

    def _generate(
        self, history: Sequence[Sequence[int]] | None, captures_only: bool
    ) -> list[ScoredMove]:
        moves: list[ScoredMove] = []
        side, xside = self.side, self.xside
        light = side == Color.LIGHT
        forward = -8 if light else 8
        capture = MoveFlag.CAPTURE
        pawn_capture = MoveFlag.CAPTURE | MoveFlag.PAWN_MOVE

        for i, (c, p) in enumerate(zip(self.color, self.piece)):
            if c != side or p is None:
                continue
            if p == Piece.PAWN:
                for edge, delta in ((0, forward - 1), (7, forward + 1)):
                    target = i + delta
                    if col(i) != edge and 0 <= target < 64 and self.color[target] == xside:
                        self._push(moves, i, target, pawn_capture, history)
                ahead = i + forward
                if not 0 <= ahead < 64 or self.color[ahead] is not None:
                    continue
                if captures_only:
                    if row(ahead) == (0 if light else 7):
                        self._push(moves, i, ahead, MoveFlag.PAWN_MOVE, history)
                    continue
                self._push(moves, i, ahead, MoveFlag.PAWN_MOVE, history)
                double = i + 2 * forward
                can_double = i >= 48 if light else i <= 15
                if can_double and 0 <= double < 64 and self.color[double] is None:
                    self._push(
                        moves, i, double, MoveFlag.PAWN_MOVE | MoveFlag.PAWN_DOUBLE, history
                    )
                continue
            for n in self._targets(i, p):
                if self.color[n] is not None:
                    if self.color[n] == xside:
                        self._push(moves, i, n, capture, history)
                elif not captures_only:
                    self._push(moves, i, n, MoveFlag.NONE, history)

        if not captures_only:
            if light:
                if self.castle & 1:
                    self._push(moves, E1, G1, MoveFlag.CASTLE, history)
                if self.castle & 2:
                    self._push(moves, E1, C1, MoveFlag.CASTLE, history)
            else:
                if self.castle & 4:
                    self._push(moves, E8, G8, MoveFlag.CASTLE, history)
                if self.castle & 8:
                    self._push(moves, E8, C8, MoveFlag.CASTLE, history)

        if self.ep is not None:
            ep = self.ep
            en_passant = MoveFlag.CAPTURE | MoveFlag.EN_PASSANT | MoveFlag.PAWN_MOVE
            for edge, source in ((0, ep - forward - 1), (7, ep - forward + 1)):
                if (
                    col(ep) != edge
                    and 0 <= source < 64
                    and self.color[source] == side
                    and self.piece[source] == Piece.PAWN
                ):
                    self._push(moves, source, ep, en_passant, history)
        return moves

    def gen(self, history: Sequence[Sequence[int]] | None = None) -> list[ScoredMove]:
        """Pseudo-legal moves, scored with MVV/LVA or the history table."""
        return self._generate(history, captures_only=False)

    def gen_caps(self, history: Sequence[Sequence[int]] | None = None) -> list[ScoredMove]:
        """Pseudo-legal captures and promotions only."""
        return self._generate(history, captures_only=True)

    def makemove(self, move: Move) -> bool:
        """Make ``move``; if it leaves the mover in check, undo it and return False."""
        side, xside = self.side, self.xside
        if move.bits & MoveFlag.CASTLE:
            if self.in_check(side):
                return False
            path = _CASTLE_PATHS.get(move.to_sq)
            if path is None:
                raise ValueError(f"not a castling move: {move}")
            if any(self.color[sq] is not None for sq in path.must_be_empty):
                return False
            if any(self.attack(sq, xside) for sq in path.must_be_safe):
                return False
            self.color[path.rook_to] = self.color[path.rook_from]
            self.piece[path.rook_to] = self.piece[path.rook_from]
            self.color[path.rook_from] = None
            self.piece[path.rook_from] = None

        self.undo_stack.append(
            _Undo(move, self.piece[move.to_sq], self.castle, self.ep, self.fifty, self.hash)
        )
        self.ply += 1

        self.castle &= CASTLE_MASK[move.from_sq] & CASTLE_MASK[move.to_sq]
        if move.bits & MoveFlag.PAWN_DOUBLE:
            self.ep = move.to_sq + 8 if side == Color.LIGHT else move.to_sq - 8
        else:
            self.ep = None
        if move.bits & (MoveFlag.CAPTURE | MoveFlag.PAWN_MOVE):
            self.fifty = 0
        else:
            self.fifty += 1

        self.color[move.to_sq] = side
        if move.bits & MoveFlag.PROMOTE:
            self.piece[move.to_sq] = move.promote
        else:
            self.piece[move.to_sq] = self.piece[move.from_sq]
        self.color[move.from_sq] = None
        self.piece[move.from_sq] = None

        if move.bits & MoveFlag.EN_PASSANT:
            victim = move.to_sq + 8 if side == Color.LIGHT else move.to_sq - 8
            self.color[victim] = None
            self.piece[victim] = None

        self.side = xside
        if self.in_check(side):
            self.takeback()
            return False
        self.set_hash()
        return True

    def takeback(self) -> None:
        """Take back the last move made."""
        if not self.undo_stack:
            raise IndexError("no move to take back")
        undo = self.undo_stack.pop()
        self.side = self.xside
        self.ply -= 1
        side, xside = self.side, self.xside
        move = undo.move
        self.castle = undo.castle
        self.ep = undo.ep
        self.fifty = undo.fifty
        self.hash = undo.hash

        self.color[move.from_sq] = side
        if move.bits & MoveFlag.PROMOTE:
            self.piece[move.from_sq] = Piece.PAWN
        else:
            self.piece[move.from_sq] = self.piece[move.to_sq]
        if undo.capture is None:
            self.color[move.to_sq] = None
            self.piece[move.to_sq] = None
        else:
            self.color[move.to_sq] = xside
            self.piece[move.to_sq] = undo.capture

        if move.bits & MoveFlag.CASTLE:
            path = _CASTLE_PATHS.get(move.to_sq)
            if path is None:
                raise ValueError(f"not a castling move: {move}")
            self.color[path.rook_from] = side
            self.piece[path.rook_from] = Piece.ROOK
            self.color[path.rook_to] = None
            self.piece[path.rook_to] = None

        if move.bits & MoveFlag.EN_PASSANT:
            victim = move.to_sq + 8 if side == Color.LIGHT else move.to_sq - 8
            self.color[victim] = xside
            self.piece[victim] = Piece.PAWN

    def legal_moves(self) -> list[Move]:
        """All legal moves in the position, in generation order."""
        legal = []
        for scored in self.gen():
            if self.makemove(scored.move):
                self.takeback()
                legal.append(scored.move)
        return legal

    def parse_move(self, text: str) -> Move:
        """Find the pseudo-legal move written in coordinate notation, e.g. ``e7e8q``."""
        if (
            len(text) < 4
            or text[0] not in _FILES
            or text[1] not in _DIGITS
            or text[2] not in _FILES
            or text[3] not in _DIGITS
        ):
            raise ValueError(f"not a move: {text!r}")
        from_sq = _FILES.index(text[0]) + 8 * (8 - int(text[1]))
        to_sq = _FILES.index(text[2]) + 8 * (8 - int(text[3]))

        candidates = [
            scored.move
            for scored in self.gen()
            if scored.move.from_sq == from_sq and scored.move.to_sq == to_sq
        ]
        if not candidates:
            raise ValueError(f"illegal move: {text!r}")
        first = candidates[0]
        if not first.bits & MoveFlag.PROMOTE:
            return first
        wanted = _PROMOTION_CHOICES.get(text[4:5].lower(), Piece.QUEEN)
        for move in candidates:
            if move.promote == wanted:
                return move
        raise ValueError(f"illegal move: {text!r}")

    def render(self) -> str:
        """A text drawing of the board, rank 8 at the top."""
        lines = ["   a b c d e f g h", "  ----------------"]
        for r in range(8):
            cells = []
            for sq in range(r * 8, r * 8 + 8):
                c = self.color[sq]
                kind = self.piece[sq]
                if c is None or kind is None:
                    cells.append(" .")
                else:
                    letter = kind.board_letter
                    cells.append(" " + (letter if c == Color.LIGHT else letter.lower()))
            lines.append(f"{8 - r}|" + "".join(cells))
        return "\n".join(lines) + "\n"