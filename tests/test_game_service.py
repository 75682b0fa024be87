import pytest

from wordladder.exceptions import InvalidMoveError
from wordladder.models.game import Puzzle, PuzzleGameState, PuzzleStatus
from wordladder.services.dictionary import WordDictionary
from wordladder.services.game_service import (
    GameService, calculate_progress, compute_hint, initialize_daily_state, initialize_puzzle_state
)


class FakeClock:
    def __init__(self, now=1_000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def game(ladder_dictionary):
    return GameService(ladder_dictionary)


@pytest.fixture
def state():
    return initialize_puzzle_state(Puzzle(length=3, start_word="cat", end_word="dog", optimal_steps=3))


def test_initial_state(state):
    assert state.current_word == "cat"
    assert state.word_chain == ["cat"]
    assert state.moves == 0
    assert state.status == PuzzleStatus.NOT_STARTED.value
    assert state.max_moves == 10


def test_word_not_in_dictionary(game, state):
    new_state = game.submit_word(state, "cog")

    assert new_state.errors == ["Not a valid word. Try again."]
    assert new_state.moves == 0
    assert new_state.word_chain == ["cat"]
    assert new_state.current_word == "cat"
    assert state.errors == []


@pytest.mark.parametrize("word, message", [
    ("", "Not a valid word. Try again."),
    ("cold", "Not a valid word. Try again."),
    ("dot", "Must change exactly one letter."),
])
def test_rejected_moves(game, state, word, message):
    with pytest.raises(InvalidMoveError, match=message):
        game.check_move(state, word)


def test_length_checked_after_membership():
    game = GameService(WordDictionary(["cat", "cats", "cot"]))
    state = initialize_puzzle_state(Puzzle(3, "cat", "cot", 1))

    with pytest.raises(InvalidMoveError, match="Word must be the same length."):
        game.check_move(state, "cats")


def test_cycle_is_rejected(game, state):
    state = game.submit_word(state, "cot")
    new_state = game.submit_word(state, "cat")

    assert new_state.errors == ["Word already used in this chain."]
    assert new_state.word_chain == ["cat", "cot"]


def test_valid_moves_then_win(game, state):
    for word in ["cot", "dot"]:
        state = game.submit_word(state, word)
        assert state.status == PuzzleStatus.PLAYING.value

    state = game.submit_word(state, "DOG")

    assert state.status == PuzzleStatus.WON.value
    assert state.word_chain == ["cat", "cot", "dot", "dog"]
    assert state.moves == 3
    assert state.current_word == "dog"


def test_valid_move_clears_errors(game, state):
    state = game.submit_word(state, "cog")
    state = game.submit_word(state, "cot")

    assert state.errors == []


def test_move_budget_loss(game):
    state = initialize_puzzle_state(Puzzle(3, "cat", "dog", 3, max_moves=1))

    state = game.submit_word(state, "cot")

    assert state.status == PuzzleStatus.LOST.value
    assert state.moves == 1


def test_win_on_last_move_beats_loss(game):
    state = initialize_puzzle_state(Puzzle(3, "cot", "dot", 1, max_moves=1))

    assert game.submit_word(state, "dot").status == PuzzleStatus.WON.value


def test_finished_state_is_returned_unchanged(game, state):
    for word in ["cot", "dot", "dog"]:
        state = game.submit_word(state, word)
    snapshot = PuzzleGameState(**{**state.__dict__, "word_chain": list(state.word_chain)})

    again = game.submit_word(state, "dot")

    assert again is state
    assert again == snapshot


def test_lost_state_is_returned_unchanged(game):
    state = initialize_puzzle_state(Puzzle(3, "cat", "dog", 3, max_moves=1))
    state = game.submit_word(state, "cot")
    assert state.status == PuzzleStatus.LOST.value
    snapshot = PuzzleGameState(**{**state.__dict__, "word_chain": list(state.word_chain)})

    for word in ["dot", "cat", "zzz"]:
        again = game.submit_word(state, word)
        assert again is state
        assert again == snapshot


def test_moves_always_match_chain(game, state):
    for word in ["cog", "cot", "cot", "dot", "cat"]:
        state = game.submit_word(state, word)
        assert state.moves == len(state.word_chain) - 1
        assert state.current_word == state.word_chain[-1]


def test_timer_runs_from_first_attempt_to_win(ladder_dictionary, state):
    clock = FakeClock(5_000)
    game = GameService(ladder_dictionary, clock=clock)

    state = game.submit_word(state, "cog")
    assert state.timer_start_time == 5_000
    assert state.status == PuzzleStatus.PLAYING.value

    clock.now = 6_000
    state = game.submit_word(state, "cot")
    clock.now = 9_500
    state = game.submit_word(state, "dot")
    state = game.submit_word(state, "dog")

    assert state.completion_time_ms == 4_500


def test_reset(game, state):
    state = game.submit_word(state, "cot")
    state = game.reset_puzzle(state)

    assert state.word_chain == ["cat"]
    assert state.moves == 0
    assert state.status == PuzzleStatus.NOT_STARTED.value
    assert state.timer_start_time is None


def test_daily_state_progress(game):
    daily = initialize_daily_state("2024-01-01", [Puzzle(3, "cat", "dog", 3)])
    assert daily.overall_progress == 0.0

    daily = game.submit_word_to_puzzle(daily, 3, "cot")
    daily = game.submit_word_to_puzzle(daily, 3, "dot")
    daily = game.submit_word_to_puzzle(daily, 3, "dog")

    assert daily.puzzles[0].status == PuzzleStatus.WON.value
    assert daily.overall_progress == 1.0

    daily = game.reset_daily_puzzle(daily, 3)
    assert daily.overall_progress == 0.0


def test_unknown_length_leaves_daily_state(game):
    daily = initialize_daily_state("2024-01-01", [Puzzle(3, "cat", "dog", 3)])

    assert game.submit_word_to_puzzle(daily, 5, "cot") is daily


def test_calculate_progress(state):
    won = PuzzleGameState(**{**state.__dict__, "status": PuzzleStatus.WON.value})

    assert calculate_progress([]) == 0.0
    assert calculate_progress([won, state]) == 0.5


def test_compute_hint(ladder_dictionary):
    assert compute_hint(0, "cat", "dog", ladder_dictionary) == "cot"
    assert compute_hint(2, "cat", "dog", ladder_dictionary) == "dog"
    assert compute_hint(3, "cat", "dog", ladder_dictionary) is None
    assert compute_hint(0, "cat", "cog", WordDictionary(["cat", "dog"])) is None


def test_hint_policy(game, state):
    waiting = game.request_hint(state, optimal_steps=3)
    assert waiting.next_word is None
    assert waiting.message == "Start the puzzle to use hints."
    assert waiting.hints_remaining == 2

    state = game.submit_word(state, "cog")
    assert state.status == PuzzleStatus.PLAYING.value

    hint = game.request_hint(state, optimal_steps=3)
    assert hint.next_word == "cot"
    assert hint.message == "Next word: COT"
    assert hint.hints_remaining == 1

    assert game.request_hint(state, 3, hints_used=2).message == "No hints remaining for this puzzle!"

    state = game.submit_word(state, "cot")
    locked = game.request_hint(state, optimal_steps=3)
    assert locked.next_word is None
    assert locked.message == "Hints locked for final 2 moves"


def test_no_hints_after_finish(game):
    state = initialize_puzzle_state(Puzzle(3, "cot", "dot", 1))
    state = game.submit_word(state, "dot")

    assert game.request_hint(state, 1).message == "Puzzle is already finished."
