# rapbee

rapbee is a small chess engine that speaks the UCI protocol.

- The board has 64 squares. Move generation uses a 10x12 mailbox.
- Positions are evaluated with piece/square tables, pawn-structure terms, rook file bonuses and king safety.
- The search uses iterative deepening, alpha-beta, null-move pruning, a quiescence search over captures and promotions, and history move ordering.
- The search scores repeated positions and positions under the fifty-move rule as draws.

It has no dependencies outside the standard library.

## Installing

```
pip install .
```

## Running the engine

```
rapbee
```

The engine prints `Rapbee` and then reads commands from standard input, one per line.

- `uci` replies with `id name Rapbee` and `uciok`.
- `isready` replies with `readyok`.
- `position startpos [moves ...]` or `position fen <fen> [moves ...]` sets up the game. Moves are in coordinate notation, for example `e2e4` or `e7e8q`. A promotion without a letter becomes a queen. A move that cannot be played is reported as `Illegal move (<move>).` and skipped. A FEN that cannot be read is reported as `Illegal position (<fen>).`
- `go [wtime N] [btime N] [winc N] [binc N] [movestogo N] [movetime N] [depth N]` searches the current position:
  - After each completed depth it prints an `info depth ... score ... nodes ... time ... pv ...` line.
  - At the end it prints `bestmove <move>`.
  - `movetime` sets the time directly.
  - Otherwise the side to move's clock and increment are shared over `movestogo` moves, which defaults to 40.
  - Without any of these, the search runs for up to 60 seconds or 100 ply.
- `print` draws the current board.
- `quit` stops the engine.

Other commands are ignored.

A session:

```
position startpos moves e2e4 e7e5
go depth 4
```

Any chess GUI that supports UCI engines can use `rapbee` as its engine command.

## Using it from Python

```python
from rapbee.board import Board
from rapbee.search import Searcher
from rapbee.evaluate import evaluate

board = Board("rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq -")
print(board.render())
print(board.fen())          # adds the half-move clock and move number
print(evaluate(board))      # centipawns, from the side to move's view

move = board.parse_move("e2e4")
board.makemove(move)        # False (and nothing changes) if the move leaves the king in check
board.takeback()

searcher = Searcher(board, max_depth=3, max_time=5000, output=print)
best = searcher.iterate()   # returns the best Move; searcher.infos holds one SearchInfo per depth
print(best.uci())
```

### `rapbee.board`

- `Board.legal_moves()` lists the legal moves.
- `Board.gen()` and `Board.gen_caps()` return pseudo-legal moves as `ScoredMove` objects.
- `Board.in_check(side)` and `Board.attack(sq, side)` answer attack questions.

### `rapbee.core`

- `rapbee.core` holds `Color`, `Piece`, `Move` and the square helpers `square_name` and `parse_square`.
- Squares run from 0 (a8) to 63 (h1).

### `rapbee.uci`

- `UciEngine` handles commands given as strings, with `UciEngine.handle(line)` or `UciEngine.run(lines)`.
- It sends its replies to any callable you pass as `output`.
- `time_budget(remaining, increment, moves_to_go)` gives the milliseconds the engine allots to a move.

## What it does not do

- The search runs to completion inside `go`. There is no `stop` or `ponderhit`, and the engine does not read commands while it thinks.
- The engine has no UCI options, opening book, transposition table or endgame tablebases.
- Only the placement, side to move, castling and en passant fields of a FEN are read. The half-move clock always starts at 0.

## Tests

```
pip install .[test]
pytest
```