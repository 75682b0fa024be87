"""
Leaderboard Service

Records solved puzzles and completed days, and ranks them. Records are
write-once; multiple submissions per player and date are allowed.
"""

from typing import Any, Dict, List, Optional

from ..config.game_settings import (
    DAILY_LEADERBOARD_LIMIT, GLOBAL_LEADERBOARD_LIMIT, PUZZLE_LEADERBOARD_LIMIT, STEPS_LEADERBOARD_LIMIT,
    WORD_LENGTHS
)
from ..models.records import DailyCompletion, UserSolution
from .repository import PuzzleRepository


class LeaderboardService:
    """Validates and stores leaderboard records, then serves rankings."""

    def __init__(self, repository: PuzzleRepository):
        self.repository = repository

    def record_solution(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a solved puzzle.

        Raises:
            ValueError: If the date, path or step count is missing or malformed
        """
        if not data.get('challenge_date') or not data.get('solution_path') or data.get('steps') is None:
            raise ValueError('Missing required fields')

        solution_path = data['solution_path']
        if not isinstance(solution_path, list) or not all(isinstance(w, str) for w in solution_path):
            raise ValueError('solution_path must be a list of words')

        solution = UserSolution(
            challenge_date=str(data['challenge_date']),
            word_length=int(data.get('word_length') or 3),
            solution_path=[w.lower() for w in solution_path],
            steps=int(data['steps']),
            completion_time_ms=data.get('completion_time_ms'),
            user_id=data.get('user_id'),
            username=data.get('username') or 'Anonymous',
        )
        return self.repository.insert_solution(solution)

    def puzzle_leaderboard(self, challenge_date: str, word_length: int,
                           limit: int = PUZZLE_LEADERBOARD_LIMIT) -> List[Dict[str, Any]]:
        """Fastest timed solutions for one puzzle, ties broken by fewer steps."""
        if word_length not in WORD_LENGTHS:
            raise ValueError(f'wordLength must be between {WORD_LENGTHS[0]} and {WORD_LENGTHS[-1]}')
        return self.repository.top_solutions(challenge_date, word_length, limit)

    def steps_leaderboard(self, challenge_date: str, word_length: Optional[int] = None,
                          limit: int = STEPS_LEADERBOARD_LIMIT) -> List[Dict[str, Any]]:
        """
        Shortest solutions for a date, optionally for one word length only.
        Untimed solutions are included.
        """
        if word_length is not None and word_length not in WORD_LENGTHS:
            raise ValueError(f'wordLength must be between {WORD_LENGTHS[0]} and {WORD_LENGTHS[-1]}')
        return self.repository.fewest_steps_solutions(challenge_date, word_length, limit)

    def record_completion(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Store a completed day.

        Raises:
            ValueError: If required fields are missing or a length has no positive time
        """
        if not data.get('challenge_date') or not data.get('total_time_ms') or not data.get('completion_times'):
            raise ValueError('Missing required fields: challenge_date, total_time_ms, completion_times')

        completion_times = self._by_length(data['completion_times'])
        if not all(completion_times.get(length, 0) > 0 for length in WORD_LENGTHS):
            raise ValueError(f'completion_times must include all {len(WORD_LENGTHS)} puzzles '
                             f'({WORD_LENGTHS[0]}-{WORD_LENGTHS[-1]} letters)')

        solution_paths = data.get('solution_paths')
        completion = DailyCompletion(
            challenge_date=str(data['challenge_date']),
            total_time_ms=int(data['total_time_ms']),
            completion_times=completion_times,
            user_id=data.get('user_id'),
            solution_paths=self._by_length(solution_paths) if solution_paths else None,
            total_steps=data.get('total_steps'),
        )
        return self.repository.insert_completion(completion)

    def daily_leaderboard(self, challenge_date: str,
                          limit: int = DAILY_LEADERBOARD_LIMIT) -> List[Dict[str, Any]]:
        return self.repository.top_completions(challenge_date, limit)

    def global_leaderboard(self, limit: int = GLOBAL_LEADERBOARD_LIMIT) -> List[Dict[str, Any]]:
        """All-time fastest completed days."""
        return self.repository.top_completions(None, limit)

    @staticmethod
    def _by_length(mapping: Optional[Dict[Any, Any]]) -> Dict[int, Any]:
        if not isinstance(mapping, dict):
            raise ValueError('Expected an object keyed by word length')
        try:
            return {int(length): value for length, value in mapping.items()}
        except (TypeError, ValueError):
            raise ValueError('Word length keys must be numeric')
