"""UCI front end: reads commands, keeps the game position and runs searches."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Callable, Iterable, Sequence

from .board import Board
from .core import MAX_DEPTH, MAX_TIME, START_FEN, Color, Move
from .search import Searcher

ENGINE_NAME = "Rapbee"
DEFAULT_MOVES_TO_GO = 40


def _print_line(line: str) -> None:
    sys.stdout.write(line + "\n")
    sys.stdout.flush()


def _atoi(text: str) -> int:
    """Leading integer of ``text``, or 0 when there is none."""
    text = text.lstrip()
    sign = 1
    if text[:1] in "+-" and text:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    digits = ""
    for ch in text:
        if not ch.isdigit():
            break
        digits += ch
    return sign * int(digits) if digits else 0


def _tdiv(a: int, b: int) -> int:
    """Integer division rounding toward zero."""
    q = abs(a) // abs(b)
    return q if (a >= 0) == (b > 0) else -q


def time_budget(remaining: int, increment: int, moves_to_go: int) -> int:
    """Milliseconds to spend on this move given the clock state."""
    if moves_to_go <= 0:
        raise ValueError(f"moves to go must be positive: {moves_to_go}")
    if moves_to_go == 1:
        remaining -= min(1000, _tdiv(remaining, 10))
    budget = _tdiv(remaining + increment * (moves_to_go - 1), moves_to_go)
    budget = min(budget, remaining) - 10
    return max(budget, 0)


class UciEngine:
    """Holds the current game and answers UCI commands."""

    def __init__(self, output: Callable[[str], None] | None = None) -> None:
        self.output = output or _print_line
        self.board = Board(START_FEN)
        self.max_depth = MAX_DEPTH
        self.max_time = MAX_TIME

    def handle(self, line: str) -> bool:
        """Carry out one command line; False once the engine should quit."""
        tokens = line.split()
        if not tokens:
            return True
        command, args = tokens[0], tokens[1:]
        if command == "uci":
            self.output(f"id name {ENGINE_NAME}")
            self.output("uciok")
        elif command == "isready":
            self.output("readyok")
        elif command == "position":
            self.position(args)
        elif command == "go":
            self.go(args)
        elif command == "quit":
            return False
        elif command == "print":
            self.output(self.board.render().rstrip("\n"))
        return True

    def position(self, args: Sequence[str]) -> None:
        """Set up ``startpos`` or ``fen ...`` and play the listed moves."""
        tokens = iter(args)
        token = next(tokens, "")
        if token == "fen":
            fields = []
            for token in tokens:
                if token == "moves":
                    break
                fields.append(token)
            else:
                token = ""
            fen = " ".join(fields)
            try:
                board = Board(fen)
            except ValueError:
                self.output(f"Illegal position ({fen}).")
                return
        else:
            token = next(tokens, "")
            board = Board(START_FEN)
        self.board = board

        if token != "moves":
            return
        for text in tokens:
            try:
                move = board.parse_move(text)
            except ValueError:
                self.output(f"Illegal move ({text}).")
                continue
            if not board.makemove(move):
                self.output(f"Illegal move ({text}).")
            board.ply = 0

    def go(self, args: Sequence[str]) -> Move | None:
        """Work out the time and depth limits, search, and return the best move."""
        values = {
            "wtime": -1,
            "btime": -1,
            "winc": 0,
            "binc": 0,
            "movestogo": DEFAULT_MOVES_TO_GO,
            "movetime": 0,
            "depth": 0,
        }
        tokens = iter(args)
        for token in tokens:
            if token in values:
                values[token] = _atoi(next(tokens, ""))

        self.max_depth = values["depth"] if values["depth"] > 0 else MAX_DEPTH
        self.max_time = MAX_TIME
        if values["movetime"] > 0:
            self.max_time = values["movetime"]
        else:
            light = self.board.side == Color.LIGHT
            remaining = values["wtime"] if light else values["btime"]
            increment = values["winc"] if light else values["binc"]
            if remaining >= 0:
                self.max_time = time_budget(remaining, increment, values["movestogo"])

        searcher = Searcher(self.board, self.max_depth, self.max_time, self.output)
        return searcher.iterate()

    def run(self, lines: Iterable[str]) -> None:
        """Handle lines until ``quit`` or the end of input."""
        for line in lines:
            if not self.handle(line):
                return


def main(argv: Sequence[str] | None = None) -> int:
    """Run the engine on standard input and output."""
    parser = argparse.ArgumentParser(prog="rapbee", description="UCI chess engine.")
    parser.parse_args(argv)
    _print_line(ENGINE_NAME)
    UciEngine().run(sys.stdin)
    return 0