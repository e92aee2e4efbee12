"""Iterative-deepening alpha-beta search with quiescence and null-move pruning."""

from __future__ import annotations

import sys
import time
from collections.abc import Callable, Iterator
from dataclasses import dataclass

from .board import Board, ScoredMove
from .core import HIST_STACK, MAX_DEPTH, MAX_PLY, MAX_SCORE, MAX_TIME, Move, Piece
from .evaluate import PIECE_VALUE, evaluate

_NO_MOVE = Move(0, 0)


def _now_ms() -> int:
    return int(time.monotonic() * 1000)


def _print_line(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def repetitions(board: Board) -> int:
    """How many times the current position occurred since the last irreversible move."""
    start = max(0, board.hply - board.fifty)
    return sum(1 for undo in board.undo_stack[start:] if undo.hash == board.hash)


@dataclass(frozen=True)
class SearchInfo:
    """Result of one completed search iteration."""

    depth: int
    score: int
    nodes: int
    time_ms: int
    pv: tuple[Move, ...]

    def __str__(self) -> str:
        if abs(self.score) < MAX_SCORE - MAX_DEPTH:
            value = f"cp {self.score}"
        elif self.score >= MAX_SCORE - MAX_DEPTH:
            value = f"mate {(MAX_SCORE - self.score + 1) >> 1}"
        else:
            value = f"mate {(-MAX_SCORE - self.score) >> 1}"
        line = f"info depth {self.depth} score {value} nodes {self.nodes} time {self.time_ms} pv"
        return line + "".join(f" {move.uci()}" for move in self.pv)


def _best_first(moves: list[ScoredMove]) -> Iterator[ScoredMove]:
    """Yield moves highest score first, swapping each pick into place."""
    for start in range(len(moves)):
        best = max(range(start, len(moves)), key=lambda i: moves[i].score)
        if moves[best].score > -1:
            moves[start], moves[best] = moves[best], moves[start]
        yield moves[start]


class Searcher:
    """Searches a board for the best move within a depth and time limit."""

    def __init__(
        self,
        board: Board,
        max_depth: int = MAX_DEPTH,
        max_time: int = MAX_TIME,
        output: Callable[[str], None] | None = None,
    ) -> None:
        self.board = board
        self.max_depth = max_depth
        self.max_time = max_time
        self.output = output or _print_line
        self.nodes = 0
        self.stop_search = False
        self.start_time = 0
        self.stop_time = 0
        self.follow_pv = False
        self.history = [[0] * 64 for _ in range(64)]
        self.pv: list[list[Move | None]] = [[None] * MAX_PLY for _ in range(MAX_PLY)]
        self.pv_length = [0] * MAX_PLY
        self.infos: list[SearchInfo] = []

    def iterate(self) -> Move | None:
        """Search deeper and deeper, reporting each depth, and return the best move."""
        self.stop_search = False
        self.start_time = _now_ms()
        self.stop_time = self.start_time + self.max_time
        self.board.ply = 0
        self.nodes = 0
        self.pv = [[None] * MAX_PLY for _ in range(MAX_PLY)]
        self.history = [[0] * 64 for _ in range(64)]
        self.infos = []

        for depth in range(1, self.max_depth + 1):
            self.follow_pv = True
            score = self.search(-10000, 10000, depth, True)
            if self.stop_search:
                break
            line = tuple(move or _NO_MOVE for move in self.pv[0][: self.pv_length[0]])
            info = SearchInfo(depth, score, self.nodes, _now_ms() - self.start_time, line)
            self.infos.append(info)
            self.output(str(info))
            if score > 9000 or score < -9000:
                break

        best = self.pv[0][0]
        self.output(f"bestmove {(best or _NO_MOVE).uci()}")
        return best

    def _checkup(self) -> None:
        if _now_ms() >= self.stop_time:
            self.stop_search = True

    def _count_node(self) -> None:
        self.nodes += 1
        if self.nodes & 1023 == 0:
            self._checkup()

    def _sort_pv(self, moves: list[ScoredMove], ply: int) -> None:
        self.follow_pv = False
        wanted = self.pv[0][ply]
        for scored in moves:
            if scored.move == wanted:
                self.follow_pv = True
                scored.score += 10_000_000
                return

    def _update_pv(self, ply: int, move: Move) -> None:
        self.pv[ply][ply] = move
        end = self.pv_length[ply + 1]
        self.pv[ply][ply + 1 : end] = self.pv[ply + 1][ply + 1 : end]
        self.pv_length[ply] = end

    def _null_move_material(self) -> int:
        board = self.board
        return sum(
            PIECE_VALUE[p]
            for c, p in zip(board.color, board.piece)
            if c == board.side and p is not None and p != Piece.PAWN
        )

    def search(self, alpha: int, beta: int, depth: int, null_move: bool = True) -> int:
        """Negamax alpha-beta search of the current position to ``depth`` ply."""
        board = self.board
        if depth <= 0:
            return self.quiescence(alpha, beta)
        self._count_node()
        ply = board.ply
        self.pv_length[ply] = ply

        if ply and repetitions(board):
            return 0
        if ply >= MAX_PLY - 1 or board.hply >= HIST_STACK - 1:
            return evaluate(board)

        checked = board.in_check(board.side)
        if checked:
            depth += 1

        if not checked and null_move and ply:
            reduction = 3 if self._null_move_material() > 1500 else 2
            if depth > reduction:
                saved = (board.side, board.ep, board.fifty, board.hash, board.castle)
                board.ep = None
                board.fifty = 0
                board.side = board.xside
                score = -self.search(-beta, -beta + 1, depth - 1 - reduction, False)
                board.side, board.ep, board.fifty, board.hash, board.castle = saved
                if self.stop_search:
                    return 0
                if score >= beta:
                    return beta

        moves = board.gen(self.history)
        if self.follow_pv:
            self._sort_pv(moves, ply)

        found = False
        for scored in _best_first(moves):
            move = scored.move
            if not board.makemove(move):
                continue
            found = True
            score = -self.search(-beta, -alpha, depth - 1, True)
            board.takeback()
            if self.stop_search:
                return 0
            if score > alpha:
                self.history[move.from_sq][move.to_sq] += depth
                if score >= beta:
                    return beta
                alpha = score
                self._update_pv(ply, move)

        if not found:
            return -MAX_SCORE + ply if checked else 0
        if board.fifty >= 100:
            return 0
        return alpha

    def quiescence(self, alpha: int, beta: int) -> int:
        """Search captures and promotions only until the position is quiet."""
        board = self.board
        self._count_node()
        ply = board.ply
        self.pv_length[ply] = ply

        if ply >= MAX_PLY - 1 or board.hply >= HIST_STACK - 1:
            return evaluate(board)

        score = evaluate(board)
        if score >= beta:
            return beta
        alpha = max(alpha, score)

        moves = board.gen_caps(self.history)
        if self.follow_pv:
            self._sort_pv(moves, ply)

        for scored in _best_first(moves):
            move = scored.move
            if not board.makemove(move):
                continue
            score = -self.quiescence(-beta, -alpha)
            board.takeback()
            if self.stop_search:
                return 0
            if score > alpha:
                if score >= beta:
                    return beta
                alpha = score
                self._update_pv(ply, move)
        return alpha