from rapbee.board import Board
from rapbee.core import MAX_SCORE, START_FEN, Move, parse_square
from rapbee.search import SearchInfo, Searcher, repetitions

MATE_IN_ONE = "6k1/5ppp/8/8/8/8/8/R5K1 w - -"
MATED = "R5k1/5ppp/8/8/8/8/8/6K1 b - -"
STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - -"
FREE_QUEEN = "4k3/8/8/3q4/8/8/8/3RK3 w - -"


def run(fen, depth):
    lines = []
    board = Board(fen)
    searcher = Searcher(board, max_depth=depth, max_time=10_000_000, output=lines.append)
    best = searcher.iterate()
    return board, searcher, best, lines


def test_finds_mate_in_one():
    _, searcher, best, lines = run(MATE_IN_ONE, 3)
    assert best.uci() == "a1a8"
    assert lines[-1] == "bestmove a1a8"
    assert searcher.infos[-1].score == MAX_SCORE - 1
    assert lines[-2].startswith("info depth 2 score mate 1 ")
    assert lines[-2].endswith(" pv a1a8")


def test_mate_stops_deepening():
    _, searcher, _, _ = run(MATE_IN_ONE, 5)
    assert [info.depth for info in searcher.infos] == [1, 2]


def test_captures_hanging_queen():
    _, _, best, lines = run(FREE_QUEEN, 2)
    assert best.uci() == "d1d5"
    assert lines[-1] == "bestmove d1d5"


def test_search_leaves_board_unchanged():
    board = Board(START_FEN)
    before = board.fen()
    lines = []
    best = Searcher(board, max_depth=2, max_time=10_000_000, output=lines.append).iterate()
    assert board.fen() == before
    assert board.ply == 0
    assert best in board.legal_moves()
    assert len(lines) == 3


def test_checkmated_side_scores_mate():
    searcher = Searcher(Board(MATED), output=lambda line: None)
    assert searcher.search(-10000, 10000, 1, True) == -MAX_SCORE


def test_stalemate_scores_zero():
    searcher = Searcher(Board(STALEMATE), output=lambda line: None)
    assert searcher.search(-10000, 10000, 1, True) == 0


def test_quiescence_never_below_alpha():
    searcher = Searcher(Board(FREE_QUEEN), output=lambda line: None)
    assert searcher.quiescence(50, 10000) >= 50


def test_node_count_grows_with_depth():
    _, shallow, _, _ = run(START_FEN, 1)
    _, deeper, _, _ = run(START_FEN, 2)
    assert deeper.infos[-1].nodes > shallow.infos[-1].nodes


def test_info_line_formats_centipawns():
    info = SearchInfo(depth=1, score=25, nodes=7, time_ms=3, pv=(Move(52, 36),))
    assert str(info) == "info depth 1 score cp 25 nodes 7 time 3 pv e2e4"


def test_info_line_formats_being_mated():
    info = SearchInfo(depth=3, score=-(MAX_SCORE - 2), nodes=10, time_ms=5, pv=())
    assert str(info) == "info depth 3 score mate -1 nodes 10 time 5 pv"


def test_repetitions_counts_returned_position():
    board = Board(START_FEN)
    assert repetitions(board) == 0
    for text in ("g1f3", "g8f6", "f3g1", "f6g8"):
        assert board.makemove(board.parse_move(text))
    assert repetitions(board) == 1
    assert board.piece[parse_square("g1")] == Board(START_FEN).piece[parse_square("g1")]


def test_repetitions_ignores_positions_before_pawn_move():
    board = Board(START_FEN)
    for text in ("g1f3", "g8f6", "f3g1", "f6g8", "e2e4"):
        assert board.makemove(board.parse_move(text))
    assert repetitions(board) == 0