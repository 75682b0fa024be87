"""
Game Data Models

Contains the puzzle, per-player puzzle state and daily state structures.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class PuzzleStatus(Enum):
    """Lifecycle of one puzzle for one player."""
    NOT_STARTED = "not_started"
    PLAYING = "playing"
    WON = "won"
    LOST = "lost"


TERMINAL_STATUSES = (PuzzleStatus.WON.value, PuzzleStatus.LOST.value)


class Difficulty(Enum):
    """Difficulty band derived from the optimal number of steps."""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


@dataclass
class ValidationResult:
    """Outcome of validating one step of a word chain."""
    is_valid: bool
    error: Optional[str] = None


@dataclass
class Puzzle:
    """Read projection of a scheduled word pair plus its move budget."""
    length: int
    start_word: str
    end_word: str
    optimal_steps: int
    max_moves: int = 10


@dataclass
class PuzzleGameState:
    """
    Per-player state for one puzzle.

    Status values are PuzzleStatus values stored as strings so the state can
    be serialized with asdict() and round-tripped through JSON.
    """
    length: int
    start_word: str
    end_word: str
    current_word: str
    word_chain: List[str]
    moves: int
    max_moves: int
    status: str = PuzzleStatus.NOT_STARTED.value
    errors: List[str] = field(default_factory=list)
    timer_start_time: Optional[int] = None  # epoch ms of the first attempt
    completion_time_ms: Optional[int] = None

    @property
    def is_finished(self) -> bool:
        return self.status in TERMINAL_STATUSES

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "PuzzleGameState":
        """
        Rebuild a state sent back by a client.

        Raises:
            KeyError: If start_word or end_word is missing
            ValueError: If the state contradicts itself (chain not starting at
                the start word, a win that does not end at the target, a loss
                with moves left, ...)
        """
        start_word = str(data["start_word"]).lower()
        word_chain = [str(w).lower() for w in data.get("word_chain") or [start_word]]
        status = data.get("status", PuzzleStatus.NOT_STARTED.value)
        PuzzleStatus(status)  # rejects unknown values

        state = cls(
            length=int(data.get("length", len(start_word))),
            start_word=start_word,
            end_word=str(data["end_word"]).lower(),
            current_word=word_chain[-1],
            word_chain=word_chain,
            moves=len(word_chain) - 1,
            max_moves=int(data.get("max_moves", 10)),
            status=status,
            errors=list(data.get("errors") or []),
            timer_start_time=data.get("timer_start_time"),
            completion_time_ms=data.get("completion_time_ms"),
        )
        state.check_consistency()
        return state

    def check_consistency(self) -> None:
        """Raise ValueError if the fields break the puzzle state invariants."""
        if self.length != len(self.start_word) or len(self.end_word) != self.length:
            raise ValueError("length does not match the puzzle words")
        if self.word_chain[0] != self.start_word:
            raise ValueError("word_chain must begin with start_word")
        if any(len(word) != self.length for word in self.word_chain):
            raise ValueError("word_chain holds words of the wrong length")
        if len(set(self.word_chain)) != len(self.word_chain):
            raise ValueError("word_chain repeats a word")
        if self.moves > self.max_moves:
            raise ValueError("moves exceed max_moves")

        reached_end = self.current_word == self.end_word
        if self.status == PuzzleStatus.WON.value and not reached_end:
            raise ValueError("won state must end at end_word")
        if self.status != PuzzleStatus.WON.value and reached_end:
            raise ValueError("state ending at end_word must be won")
        if self.status == PuzzleStatus.LOST.value and self.moves < self.max_moves:
            raise ValueError("lost state must have used every move")
        if self.status == PuzzleStatus.NOT_STARTED.value and self.moves > 0:
            raise ValueError("not_started state cannot have moves")


@dataclass
class DailyGameState:
    """All puzzles a player has for one date."""
    date: str
    puzzles: List[PuzzleGameState]
    overall_progress: float = 0.0


@dataclass
class HintResult:
    """Answer to a hint request."""
    message: str
    next_word: Optional[str] = None
    hints_remaining: int = 0
