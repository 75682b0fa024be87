"""
Game Service

Puzzle state machine for the daily word ladder. Every transition takes a
state and returns a new one; the input state is never modified and no state
is kept here, so callers decide where (and whether) results are persisted.
"""

import time
from dataclasses import replace
from typing import Callable, List, Optional

from ..config.game_settings import HINTS_PER_PUZZLE, HINT_LOCK_MOVES
from ..exceptions import InvalidMoveError
from ..models.game import (
    DailyGameState, HintResult, Puzzle, PuzzleGameState, PuzzleStatus
)
from .dictionary import WordDictionary
from .ladder import differs_by_one_letter, shortest_path


def epoch_ms() -> int:
    return int(time.time() * 1000)


def initialize_puzzle_state(puzzle: Puzzle) -> PuzzleGameState:
    """Fresh, not yet started state for a scheduled puzzle."""
    start_word = puzzle.start_word.lower()
    return PuzzleGameState(
        length=puzzle.length,
        start_word=start_word,
        end_word=puzzle.end_word.lower(),
        current_word=start_word,
        word_chain=[start_word],
        moves=0,
        max_moves=puzzle.max_moves,
    )


def initialize_daily_state(date: str, puzzles: List[Puzzle]) -> DailyGameState:
    return DailyGameState(
        date=date,
        puzzles=[initialize_puzzle_state(puzzle) for puzzle in puzzles],
        overall_progress=0.0,
    )


def calculate_progress(puzzles: List[PuzzleGameState]) -> float:
    """Fraction of puzzles won."""
    if not puzzles:
        return 0.0
    won = sum(1 for p in puzzles if p.status == PuzzleStatus.WON.value)
    return won / len(puzzles)


def compute_hint(position: int, start: str, end: str, dictionary) -> Optional[str]:
    """
    Next word of the optimal ladder from start to end.

    Args:
        position: Index of the player's current word in their chain
            (chain length - 1)
        start: Puzzle start word
        end: Puzzle end word
        dictionary: WordDictionary to search

    Returns:
        The word at position + 1 on the optimal path, or None if the path is
        exhausted or does not exist.
    """
    if position < 0:
        return None
    path = shortest_path(start, end, dictionary)
    if position < len(path) - 1:
        return path[position + 1]
    return None


class GameService:
    """
    Word submission and reset rules for puzzle states.

    This class handles:
    - Move validation (dictionary, length, one-letter change, no repeats)
    - Win and loss detection against the move budget
    - Daily aggregation of the per-length puzzles
    - Hints along the optimal ladder
    """

    def __init__(self, dictionary: WordDictionary, clock: Optional[Callable[[], int]] = None):
        self.dictionary = dictionary
        self.clock = clock  # epoch milliseconds; timers are skipped without one

    def check_move(self, state: PuzzleGameState, word: str) -> str:
        """
        Validates a submitted word against the current position.

        Returns:
            str: The normalized word

        Raises:
            InvalidMoveError: With the player-facing reason for the first failed rule
        """
        if not word or not isinstance(word, str):
            raise InvalidMoveError('Not a valid word. Try again.')

        normalized = word.strip().lower()

        if not self.dictionary.contains(normalized):
            raise InvalidMoveError('Not a valid word. Try again.')

        if len(normalized) != len(state.current_word):
            raise InvalidMoveError('Word must be the same length.')

        if not differs_by_one_letter(state.current_word, normalized):
            raise InvalidMoveError('Must change exactly one letter.')

        if normalized in (w.lower() for w in state.word_chain):
            raise InvalidMoveError('Word already used in this chain.')

        return normalized

    def submit_word(self, state: PuzzleGameState, word: str) -> PuzzleGameState:
        """
        Processes one word submission.

        Returns:
            PuzzleGameState: The input itself when the puzzle is already won
            or lost, otherwise a new state
        """
        if state.is_finished:
            return state

        timer_start = state.timer_start_time
        if timer_start is None and self.clock is not None:
            timer_start = self.clock()

        try:
            normalized = self.check_move(state, word)
        except InvalidMoveError as e:
            status = state.status
            if status == PuzzleStatus.NOT_STARTED.value:
                status = PuzzleStatus.PLAYING.value
            return replace(
                state,
                word_chain=list(state.word_chain),
                errors=state.errors + [str(e)],
                status=status,
                timer_start_time=timer_start,
            )

        moves = state.moves + 1
        completion_time_ms = state.completion_time_ms

        if normalized == state.end_word.lower():
            status = PuzzleStatus.WON.value
            if self.clock is not None and timer_start is not None:
                completion_time_ms = self.clock() - timer_start
        elif moves >= state.max_moves:
            status = PuzzleStatus.LOST.value
        else:
            status = PuzzleStatus.PLAYING.value

        return replace(
            state,
            current_word=normalized,
            word_chain=state.word_chain + [normalized],
            moves=moves,
            status=status,
            errors=[],
            timer_start_time=timer_start,
            completion_time_ms=completion_time_ms,
        )

    def reset_puzzle(self, state: PuzzleGameState) -> PuzzleGameState:
        """Back to the start word with no moves; history is discarded."""
        return replace(
            state,
            current_word=state.start_word,
            word_chain=[state.start_word],
            moves=0,
            status=PuzzleStatus.NOT_STARTED.value,
            errors=[],
            timer_start_time=None,
            completion_time_ms=None,
        )

    def _apply_to_puzzle(self, daily: DailyGameState, length: int, transition) -> DailyGameState:
        index = next((i for i, p in enumerate(daily.puzzles) if p.length == length), None)
        if index is None:
            return daily

        current = daily.puzzles[index]
        updated = transition(current)
        if updated is current:
            return daily

        puzzles = list(daily.puzzles)
        puzzles[index] = updated
        return replace(daily, puzzles=puzzles, overall_progress=calculate_progress(puzzles))

    def submit_word_to_puzzle(self, daily: DailyGameState, length: int, word: str) -> DailyGameState:
        """Submit a word to the puzzle of the given length and refresh progress."""
        return self._apply_to_puzzle(daily, length, lambda state: self.submit_word(state, word))

    def reset_daily_puzzle(self, daily: DailyGameState, length: int) -> DailyGameState:
        return self._apply_to_puzzle(daily, length, self.reset_puzzle)

    def compute_hint(self, position: int, start: str, end: str) -> Optional[str]:
        return compute_hint(position, start, end, self.dictionary)

    def request_hint(self,
                     state: PuzzleGameState,
                     optimal_steps: int,
                     hints_used: int = 0) -> HintResult:
        """
        Applies the hint policy before revealing the next optimal word.

        Hints are only given while the puzzle is being played, are limited per
        puzzle, and are withheld once the player is within the last
        HINT_LOCK_MOVES moves of the optimal solution.
        """
        remaining = max(HINTS_PER_PUZZLE - hints_used, 0)

        if state.is_finished:
            return HintResult('Puzzle is already finished.', hints_remaining=remaining)

        if state.status != PuzzleStatus.PLAYING.value:
            return HintResult('Start the puzzle to use hints.', hints_remaining=remaining)

        if remaining <= 0:
            return HintResult('No hints remaining for this puzzle!', hints_remaining=0)

        progress = len(state.word_chain) - 1
        if progress >= optimal_steps - HINT_LOCK_MOVES:
            return HintResult(f'Hints locked for final {HINT_LOCK_MOVES} moves', hints_remaining=remaining)

        next_word = self.compute_hint(progress, state.start_word, state.end_word)
        if next_word is None:
            return HintResult('Unable to provide hint.', hints_remaining=remaining)

        return HintResult(f'Next word: {next_word.upper()}', next_word=next_word, hints_remaining=remaining - 1)
