"""
Leaderboard and Challenge Data Models

Write-once records submitted by players and shared challenges.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional


class ChallengeStatus(Enum):
    """Lifecycle of a shared challenge."""
    PENDING = "pending"
    ACCEPTED = "accepted"
    COMPLETED = "completed"
    EXPIRED = "expired"


@dataclass
class UserSolution:
    """A solved puzzle submitted for the puzzle leaderboard."""
    challenge_date: str
    word_length: int
    solution_path: List[str]
    steps: int
    completion_time_ms: Optional[int] = None
    user_id: Optional[str] = None
    username: str = "Anonymous"
    created_at: Optional[datetime] = None


@dataclass
class DailyCompletion:
    """All puzzles of a date solved, submitted for the daily leaderboard."""
    challenge_date: str
    total_time_ms: int
    completion_times: Dict[int, int]
    user_id: Optional[str] = None
    solution_paths: Optional[Dict[int, List[str]]] = None
    total_steps: Optional[int] = None
    completed_at: Optional[datetime] = None


@dataclass
class ChallengeParticipant:
    """One player taking part in a shared challenge."""
    user_id: Optional[str] = None
    session_id: Optional[str] = None
    completion_time_ms: Optional[int] = None
    total_steps: Optional[int] = None
    solution_paths: Optional[Dict[str, List[str]]] = None
    joined_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None


@dataclass
class Challenge:
    """A date's puzzles shared between players through a short code."""
    challenge_code: str
    challenge_date: str
    status: str = ChallengeStatus.PENDING.value
    challenger_id: Optional[str] = None
    participants: Dict[str, ChallengeParticipant] = field(default_factory=dict)
    created_at: Optional[datetime] = None
    expires_at: Optional[datetime] = None
