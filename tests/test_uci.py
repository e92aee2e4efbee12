import io
import sys

import pytest

from rapbee.board import Board
from rapbee.uci import UciEngine, main, time_budget


@pytest.fixture
def engine_and_lines():
    lines = []
    return UciEngine(lines.append), lines


def test_uci_identifies_engine(engine_and_lines):
    engine, lines = engine_and_lines
    assert engine.handle("uci") is True
    assert lines == ["id name Rapbee", "uciok"]


def test_isready(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("isready")
    assert lines == ["readyok"]


def test_quit_returns_false(engine_and_lines):
    engine, _ = engine_and_lines
    assert engine.handle("quit") is False


def test_unknown_and_empty_commands_are_ignored(engine_and_lines):
    engine, lines = engine_and_lines
    assert engine.handle("frobnicate now") is True
    assert engine.handle("") is True
    assert lines == []


def test_position_startpos_with_move(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("position startpos moves e2e4")
    assert engine.board.fen() == (
        "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
    )
    assert lines == []


def test_illegal_move_reported_and_ignored(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("position startpos moves e2e5 zz")
    assert lines == ["Illegal move (e2e5).", "Illegal move (zz)."]
    assert engine.board.fen() == Board().fen()


def test_moves_after_illegal_one_still_played(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("position startpos moves e2e5 e2e4 e7e5")
    expected = Board()
    for text in ("e2e4", "e7e5"):
        assert expected.makemove(expected.parse_move(text))
    assert engine.board.fen() == expected.fen()
    assert lines == ["Illegal move (e2e5)."]


def test_position_fen_round_trip(engine_and_lines):
    engine, _ = engine_and_lines
    fen = "8/8/8/8/8/8/8/K6k w - - 0 1"
    engine.handle(f"position fen {fen}")
    assert engine.board.fen() == fen


def test_position_fen_with_promotion(engine_and_lines):
    engine, _ = engine_and_lines
    engine.handle("position fen 8/P6k/8/8/8/8/8/K7 w - - moves a7a8n")
    assert engine.board.fen().split()[0] == "N7/7k/8/8/8/8/8/K7"


def test_bad_fen_keeps_previous_position(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("position startpos moves d2d4")
    before = engine.board.fen()
    engine.handle("position fen xyz")
    assert engine.board.fen() == before
    assert len(lines) == 1


def test_go_depth_returns_legal_bestmove(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("position startpos")
    best = engine.go(["depth", "1"])
    assert best in Board().legal_moves()
    assert lines[-1] == f"bestmove {best.uci()}"
    assert lines[0].startswith("info depth 1 ")


def test_go_finds_mate_in_one(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("position fen 6k1/5ppp/8/8/8/8/8/R5K1 w - -")
    engine.handle("go depth 3")
    assert lines[-1] == "bestmove a1a8"
    assert "score mate 1" in lines[-2]


def test_go_movetime_and_depth_limits(engine_and_lines):
    engine, _ = engine_and_lines
    engine.go(["movetime", "50", "depth", "1"])
    assert engine.max_time == 50
    assert engine.max_depth == 1


def test_go_uses_clock_of_side_to_move(engine_and_lines):
    engine, _ = engine_and_lines
    engine.handle("position startpos moves e2e4")
    engine.go(["wtime", "100000", "btime", "2000", "binc", "100", "depth", "1"])
    assert engine.max_time == time_budget(2000, 100, 40)


def test_time_budget_never_exceeds_remaining():
    for remaining in (0, 5, 100, 1000, 60000):
        for moves in (1, 2, 40):
            budget = time_budget(remaining, 0, moves)
            assert 0 <= budget <= remaining


def test_time_budget_zero_clock_is_zero():
    assert time_budget(0, 0, 40) == 0


def test_time_budget_rejects_zero_moves_to_go():
    with pytest.raises(ValueError):
        time_budget(1000, 0, 0)


def test_print_renders_board(engine_and_lines):
    engine, lines = engine_and_lines
    engine.handle("print")
    assert lines == [Board().render().rstrip("\n")]


def test_run_stops_at_quit(engine_and_lines):
    engine, lines = engine_and_lines
    engine.run(["isready", "quit", "isready"])
    assert lines == ["readyok"]


def test_main_reads_stdin(monkeypatch, capsys):
    monkeypatch.setattr(sys, "stdin", io.StringIO("uci\nisready\nquit\n"))
    assert main([]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["Rapbee", "id name Rapbee", "uciok", "readyok"]