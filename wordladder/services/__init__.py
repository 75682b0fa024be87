"""
Services Package

Contains the word ladder engine and the business logic built on it.
"""

from .dictionary import WordDictionary
from .ladder import differs_by_one_letter, shortest_path, classify_difficulty
from .verifier import PairVerifier
from .game_service import GameService, compute_hint
from .repository import PuzzleRepository
from .schedule_service import ScheduleService, calculate_pair_index
from .leaderboard_service import LeaderboardService
from .challenge_service import ChallengeService

__all__ = [
    'WordDictionary', 'differs_by_one_letter', 'shortest_path', 'classify_difficulty',
    'PairVerifier', 'GameService', 'compute_hint', 'PuzzleRepository',
    'ScheduleService', 'calculate_pair_index', 'LeaderboardService', 'ChallengeService'
]
