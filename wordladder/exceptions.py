"""
Word Ladder Exceptions

Error taxonomy shared by the dictionary, search, verification, game and
scheduling services.
"""


class WordLadderError(Exception):
    """Base class for all word ladder errors."""


class NotLoadedError(WordLadderError, RuntimeError):
    """The word dictionary was queried before a successful load."""

    def __init__(self, message: str = "Words not loaded. Call load() first."):
        super().__init__(message)


class InvalidPairInputError(WordLadderError, ValueError):
    """A candidate word pair is malformed (length, identity or membership)."""


class NoPathFoundError(WordLadderError):
    """Breadth-first search exhausted without reaching the target word."""


class InvalidMoveError(WordLadderError, ValueError):
    """A submitted word breaks one of the move rules."""


class ScheduleGapError(WordLadderError):
    """No scheduled date has a complete set of puzzles."""


class ChallengeError(WordLadderError):
    """A shared challenge cannot be read, accepted or completed."""

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message)
        self.status_code = status_code
