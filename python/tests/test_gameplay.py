"""Move engine tests: legality, execution, undo/redo and termination."""

from __future__ import annotations

import pytest

from ballsort.engine.gameplay import (
    EndReason,
    GamePlay,
    IllegalMove,
    can_move,
    is_stuck,
    is_won,
)
from ballsort.engine.gamestate import GameState, GameStatus
from ballsort.models.board import Board
from ballsort.models.codec import deserialize, serialize
from ballsort.models.move import Move

# -- helpers ------------------------------------------------------------------


def _game(capacity: int, tubes: list[list[int]], **kwargs) -> GamePlay:
    return GamePlay.from_board(Board.from_lists(capacity, tubes), **kwargs)


def _two_color_game() -> GamePlay:
    """Capacity 2: ``[0,1] [1,0] []``, solvable in three moves."""
    return _game(2, [[0, 1], [1, 0], []])


def _roomy_game() -> GamePlay:
    """Capacity 3: ``[0,1,0] [0] [1,1] []``."""
    return _game(3, [[0, 1, 0], [0], [1, 1], []])


def _play(game: GamePlay, *moves: tuple[int, int]) -> None:
    for f, t in moves:
        result = game.execute_move(f, t)
        assert isinstance(result, Move), f"{f}->{t} rejected: {result}"


class RecordingCache:
    def __init__(self) -> None:
        self.invalidated: list[str] = []

    def get(self, game_id):
        return None

    def put(self, snapshot) -> None:
        pass

    def invalidate(self, game_id: str) -> None:
        self.invalidated.append(game_id)


# -- rules ----------------------------------------------------------------------


def test_sorted_board_is_won_and_rejects_mismatched_move() -> None:
    board = deserialize("T1=0,0;T2=1,1;T3=;T4=")
    assert is_won(board)
    assert not can_move(board, 1, 2)
    assert not is_stuck(board)


def test_full_mismatched_board_is_stuck_not_won() -> None:
    board = deserialize("T1=0,1;T2=1,0")
    assert is_stuck(board)
    assert not is_won(board)


def test_sorted_board_without_space_is_won_not_stuck() -> None:
    board = deserialize("T1=0,0;T2=1,1")
    assert not board.has_legal_move()
    assert is_won(board)
    assert not is_stuck(board)


@pytest.mark.parametrize(
    ("move", "expected"),
    [
        ((1, 1), False),
        ((4, 1), False),
        ((1, 2), True),
        ((1, 4), True),
        ((3, 1), False),
        ((2, 3), False),
        ((1, 9), False),
    ],
    ids=["same-tube", "empty-source", "matching-top", "into-empty", "onto-full", "mismatch", "unknown"],
)
def test_can_move(move: tuple[int, int], expected: bool) -> None:
    board = Board.from_lists(3, [[0, 1, 0], [0], [1, 1], []])
    assert can_move(board, *move) is expected


# -- execute ------------------------------------------------------------------


def test_execute_move_appends_log_entry() -> None:
    game = _two_color_game()
    move = game.execute_move(1, 3)

    assert isinstance(move, Move)
    assert (move.from_tube_id, move.to_tube_id, move.ball_color) == (1, 3, 1)
    assert move.move_number == 1 and not move.is_undone
    assert serialize(game.board) == "T1=0;T2=1,0;T3=1"
    assert game.state.moves_count == 1


@pytest.mark.parametrize(
    ("move", "reason"),
    [
        ((1, 1), "same tube"),
        ((3, 1), "empty"),
        ((1, 2), "full"),
        ((7, 1), "unknown"),
    ],
    ids=["same", "empty-source", "full-destination", "unknown-tube"],
)
def test_illegal_moves_are_values(move: tuple[int, int], reason: str) -> None:
    game = _two_color_game()
    result = game.execute_move(*move)
    assert isinstance(result, IllegalMove)
    assert reason in result.reason
    assert game.state.moves == []
    assert serialize(game.board) == "T1=0,1;T2=1,0;T3="


def test_color_mismatch_is_rejected() -> None:
    game = _two_color_game()
    _play(game, (1, 3))
    result = game.execute_move(3, 1)
    assert isinstance(result, IllegalMove)
    assert "colors differ" in result.reason


def test_winning_move_completes_game() -> None:
    game = _two_color_game()
    _play(game, (1, 3), (2, 1), (2, 3))

    assert game.is_won
    assert game.state.status is GameStatus.COMPLETED
    assert game.state.end_time is not None
    rejected = game.execute_move(1, 2)
    assert isinstance(rejected, IllegalMove)
    assert rejected.reason == "game is over"


def test_move_into_dead_end_fails_game() -> None:
    game = _game(3, [[0, 1, 2], [1, 2], [2, 0]])
    assert game.state.status is GameStatus.IN_PROGRESS
    assert game.is_dead_end_move(1, 2)
    assert game.is_dead_end_move(2, 1)

    _play(game, (1, 2))
    assert game.is_stuck
    assert game.state.status is GameStatus.FAILED
    check = game.check_state()
    assert check.is_game_over and not check.is_won
    assert check.end_reason is EndReason.NO_MOVES_LEFT
    assert check.details["empty_tubes"] == 0
    assert not game.undo()


def test_loaded_terminal_boards_start_terminal() -> None:
    assert _game(2, [[0, 0], [1, 1], []]).state.status is GameStatus.COMPLETED
    assert _game(2, [[0, 1], [1, 0]]).state.status is GameStatus.FAILED


# -- undo ---------------------------------------------------------------------


def test_undo_restores_board_and_flags_move() -> None:
    game = _roomy_game()
    before = game.board.signature()
    move = game.execute_move(1, 2)
    assert isinstance(move, Move)

    assert game.undo()
    assert game.board.signature() == before
    assert move.is_undone
    assert game.state.moves_count == 0
    assert len(game.state.moves) == 1


@pytest.mark.parametrize(
    "move",
    [(1, 2), (1, 4), (2, 4), (3, 4)],
    ids=lambda m: f"{m[0]}-{m[1]}",
)
def test_every_legal_move_is_undoable(move: tuple[int, int]) -> None:
    game = _roomy_game()
    before = serialize(game.board)
    _play(game, move)
    assert game.undo()
    assert serialize(game.board) == before


def test_undo_without_moves_is_noop() -> None:
    game = _roomy_game()
    assert not game.undo()
    assert not game.state.can_undo


def test_undo_after_win_reopens_game() -> None:
    game = _two_color_game()
    _play(game, (1, 3), (2, 1), (2, 3))
    assert game.undo()
    assert game.state.status is GameStatus.IN_PROGRESS
    assert game.state.end_time is None
    assert serialize(game.board) == "T1=0,0;T2=1;T3=1"


def test_undo_many_is_capped_per_call() -> None:
    game = _roomy_game()
    _play(game, (1, 4), (2, 4), (1, 2), (1, 4))
    assert game.state.status is GameStatus.IN_PROGRESS

    assert game.undo_many(5) == 3
    assert game.state.moves_count == 1
    assert game.undo_many(5) == 1
    assert game.undo_many(5) == 0
    assert serialize(game.board) == "T1=0,1,0;T2=0;T3=1,1;T4="


# -- redo ---------------------------------------------------------------------


def test_redo_replays_oldest_undone_first() -> None:
    game = _roomy_game()
    _play(game, (1, 4), (2, 4))
    after = serialize(game.board)
    game.undo_many(2)

    assert game.redo(2) == 2
    assert serialize(game.board) == after
    assert all(not m.is_undone for m in game.state.moves)


def test_redo_respects_count() -> None:
    game = _roomy_game()
    _play(game, (1, 4), (2, 4))
    game.undo_many(2)
    assert game.redo(1) == 1
    assert [m.is_undone for m in game.state.moves] == [False, True]


def test_redo_skips_moves_that_became_illegal() -> None:
    game = _roomy_game()
    _play(game, (1, 4))
    assert game.undo()
    _play(game, (3, 4))
    assert game.state.moves[-1].move_number == 2

    assert game.redo(1) == 0
    assert game.state.moves[0].is_undone
    assert serialize(game.board) == "T1=0,1,0;T2=0;T3=1;T4=1"


def test_redo_can_win_again() -> None:
    game = _two_color_game()
    _play(game, (1, 3), (2, 1), (2, 3))
    game.undo()
    assert game.redo() == 1
    assert game.state.status is GameStatus.COMPLETED
    assert game.redo() == 0


def test_redo_with_nothing_undone() -> None:
    game = _roomy_game()
    assert game.redo(3) == 0


# -- hints, progress, cache -----------------------------------------------------


def test_hint_counts_only_non_empty_results() -> None:
    game = _roomy_game()
    before = game.board.signature()
    assert game.hint() is not None
    assert game.state.hints_used == 1
    assert game.board.signature() == before

    done = _game(2, [[0, 0], [1, 1], []])
    assert done.hint() is None
    assert done.state.hints_used == 0


def test_progress_summary() -> None:
    progress = _roomy_game().progress()
    assert progress.completed_tubes == 0
    assert progress.mixed_tubes == 1
    assert progress.empty_tubes == 1
    assert progress.total_colors == 2
    assert progress.legal_moves == 4
    assert progress.percentage == 0
    assert progress.status is GameStatus.IN_PROGRESS


def test_victory_check_details() -> None:
    game = _two_color_game()
    _play(game, (1, 3), (2, 1), (2, 3))
    check = game.check_state()
    assert check.end_reason is EndReason.VICTORY
    assert check.details["completed_tubes"] == 2
    assert check.details["moves"] == 3


def test_every_mutation_invalidates_cache() -> None:
    cache = RecordingCache()
    game = GamePlay(
        GameState(Board.from_lists(3, [[0, 1, 0], [0], [1, 1], []]), game_id="g1"),
        cache=cache,
    )
    _play(game, (1, 4))
    game.undo()
    game.redo()
    game.undo_many(1)
    game.hint()
    assert cache.invalidated == ["g1"] * 5

    game.execute_move(1, 1)
    game.redo(0)
    assert len(cache.invalidated) == 5
