"""
Schedule Data Models

Word pairs in the pair bank, schedule entries and the per-date puzzle set.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .game import Puzzle


@dataclass
class VerificationResult:
    """Result of checking a candidate word pair."""
    is_valid: bool
    optimal_steps: int
    reason: Optional[str] = None  # why the pair was rejected, for logs only


@dataclass
class WordPair:
    """A verified, solvable pair stored in the pair bank."""
    id: Any
    word_length: int
    start_word: str
    end_word: str
    optimal_steps: int

    @classmethod
    def from_document(cls, doc: Dict[str, Any]) -> "WordPair":
        return cls(
            id=doc["_id"],
            word_length=doc["word_length"],
            start_word=doc["start_word"],
            end_word=doc["end_word"],
            optimal_steps=doc["optimal_steps"],
        )


@dataclass
class ScheduleEntry:
    """Assignment of a pair (or nothing yet) to a date and word length."""
    schedule_date: str
    word_length: int
    word_pair_id: Optional[Any] = None

    @property
    def is_assigned(self) -> bool:
        return self.word_pair_id is not None


@dataclass
class DailyPuzzles:
    """Puzzles available for one date; may be partial."""
    date: str
    puzzles: List[Puzzle] = field(default_factory=list)
    missing_lengths: List[int] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        return not self.missing_lengths and bool(self.puzzles)


@dataclass
class LengthStats:
    """Schedule and bank counters for one word length."""
    length: int
    total_scheduled: int
    assigned: int
    missing: int
    existing_pairs: int
    needed: int = 0
