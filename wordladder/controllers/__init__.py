"""
Controllers Package

Flask blueprints exposing the puzzle, leaderboard and challenge endpoints.
"""

from .puzzle_controller import puzzle_bp
from .leaderboard_controller import leaderboard_bp
from .challenge_controller import challenge_bp

__all__ = ['puzzle_bp', 'leaderboard_bp', 'challenge_bp']
