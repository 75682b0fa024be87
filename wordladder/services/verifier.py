"""
Word Pair Verifier

Admission gate for the pair bank: a pair is stored only if both words are
real, distinct, of equal length and joined by a ladder within the move budget.
"""

from typing import List, Optional

from ..config.game_settings import DEFAULT_MAX_MOVES, DEPTH_GUARD_MIN_LENGTH, DEPTH_GUARD_SLACK
from ..exceptions import InvalidPairInputError, NoPathFoundError
from ..models.schedule import VerificationResult
from .dictionary import WordDictionary
from .ladder import shortest_path


class PairVerifier:
    """
    Verifies candidate (start, end) pairs against one dictionary.

    Checks run in a fixed order and stop at the first failure. Long words are
    searched with a bounded depth, so a pair whose only ladders are longer than
    max_moves + 2 is rejected the same way as an unsolvable one.
    """

    def __init__(self, dictionary: WordDictionary):
        self.dictionary = dictionary

    def verify(self, start: str, end: str, max_moves: int = DEFAULT_MAX_MOVES) -> VerificationResult:
        """
        Args:
            start: Starting word
            end: Target word
            max_moves: Move budget the optimal ladder must fit in

        Returns:
            VerificationResult: is_valid and optimal_steps (-1 when the pair is
            malformed or no ladder was found)
        """
        try:
            start_lower, end_lower = self._check_input(start, end)
            path = self._find_path(start_lower, end_lower, max_moves)
        except (InvalidPairInputError, NoPathFoundError) as e:
            return VerificationResult(is_valid=False, optimal_steps=-1, reason=str(e))

        optimal_steps = len(path) - 1
        if optimal_steps > max_moves:
            return VerificationResult(
                is_valid=False,
                optimal_steps=optimal_steps,
                reason=f"Optimal ladder needs {optimal_steps} moves, budget is {max_moves}"
            )
        return VerificationResult(is_valid=True, optimal_steps=optimal_steps)

    def _check_input(self, start: Optional[str], end: Optional[str]):
        if not start or not end:
            raise InvalidPairInputError("Both words are required")

        start_lower = start.strip().lower()
        end_lower = end.strip().lower()

        if len(start_lower) != len(end_lower):
            raise InvalidPairInputError("Words must be the same length")
        if start_lower == end_lower:
            raise InvalidPairInputError("Words must be different")
        if not self.dictionary.contains(start_lower) or not self.dictionary.contains(end_lower):
            raise InvalidPairInputError("Both words must be in the dictionary")
        if not self.dictionary.words_of_length(len(start_lower)):
            raise InvalidPairInputError(f"No {len(start_lower)}-letter words loaded")

        return start_lower, end_lower

    def _find_path(self, start: str, end: str, max_moves: int) -> List[str]:
        max_depth = max_moves + DEPTH_GUARD_SLACK if len(start) >= DEPTH_GUARD_MIN_LENGTH else None
        path = shortest_path(start, end, self.dictionary, max_depth)
        if not path:
            raise NoPathFoundError(f"No ladder from '{start}' to '{end}'")
        return path
