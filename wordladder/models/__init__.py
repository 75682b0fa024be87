"""
Data Models Package

Contains all data models and schemas used throughout the application.
"""

from .game import (
    PuzzleStatus, Difficulty, ValidationResult, Puzzle,
    PuzzleGameState, DailyGameState, HintResult
)
from .schedule import VerificationResult, WordPair, ScheduleEntry, DailyPuzzles, LengthStats
from .records import (
    ChallengeStatus, UserSolution, DailyCompletion, ChallengeParticipant, Challenge
)

__all__ = [
    'PuzzleStatus', 'Difficulty', 'ValidationResult', 'Puzzle',
    'PuzzleGameState', 'DailyGameState', 'HintResult',
    'VerificationResult', 'WordPair', 'ScheduleEntry', 'DailyPuzzles', 'LengthStats',
    'ChallengeStatus', 'UserSolution', 'DailyCompletion', 'ChallengeParticipant', 'Challenge'
]
