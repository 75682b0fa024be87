"""
Ladder Search

Adjacency test and shortest-path search over the implicit word graph: nodes
are same-length words, edges join words that differ in exactly one position.
Edges are computed on demand during expansion; the graph is never built.
"""

from collections import deque
from typing import Dict, Iterable, List, Optional, Sequence

from ..config.game_settings import EASY_MAX_STEPS, MEDIUM_MAX_STEPS
from ..models.game import Difficulty, ValidationResult


def differs_by_one_letter(word1: str, word2: str) -> bool:
    """True iff the words have equal length and exactly one mismatched position."""
    if len(word1) != len(word2):
        return False

    differences = 0
    for a, b in zip(word1.lower(), word2.lower()):
        if a != b:
            differences += 1
            if differences > 1:
                return False

    return differences == 1


def _candidate_words(dictionary, length: int) -> List[str]:
    """Words of one length from a WordDictionary or any iterable of words."""
    if hasattr(dictionary, 'words_of_length'):
        return list(dictionary.words_of_length(length))

    seen = set()
    words = []
    for word in dictionary:
        lowered = word.lower()
        if len(lowered) == length and lowered not in seen:
            seen.add(lowered)
            words.append(lowered)
    return words


def shortest_path(start: str,
                  end: str,
                  dictionary,
                  max_depth: Optional[int] = None) -> List[str]:
    """
    Breadth-first search for a shortest ladder from start to end.

    Args:
        start: Starting word
        end: Target word
        dictionary: WordDictionary, or an iterable of words
        max_depth: When set, partial paths already longer than this many
            words are not expanded. Deeper solutions are reported as missing.

    Returns:
        List[str]: The path including both ends, [start] when the words are
        equal, or an empty list when the target is unreachable.
    """
    if start.lower() == end.lower():
        return [start]

    start_lower = start.lower()
    end_lower = end.lower()
    if len(start_lower) != len(end_lower):
        return []

    candidates = _candidate_words(dictionary, len(start_lower))
    if end_lower not in candidates:
        candidates.append(end_lower)

    parents: Dict[str, Optional[str]] = {start_lower: None}
    queue = deque([(start_lower, 1)])

    while queue:
        word, path_length = queue.popleft()

        if max_depth is not None and path_length > max_depth:
            continue

        for next_word in candidates:
            if next_word in parents or not differs_by_one_letter(word, next_word):
                continue

            parents[next_word] = word
            if next_word == end_lower:
                return _rebuild_path(parents, end_lower)

            queue.append((next_word, path_length + 1))

    return []


def _rebuild_path(parents: Dict[str, Optional[str]], end: str) -> List[str]:
    path = []
    node: Optional[str] = end
    while node is not None:
        path.append(node)
        node = parents[node]
    path.reverse()
    return path


def optimal_path_length(start: str,
                        end: str,
                        dictionary,
                        max_depth: Optional[int] = None) -> int:
    """Number of moves in a shortest ladder, -1 when none exists."""
    path = shortest_path(start, end, dictionary, max_depth)
    return len(path) - 1 if path else -1


def difficulty_for_steps(steps: int) -> Difficulty:
    """Difficulty band for an optimal move count; -1 (unreachable) is hard."""
    if steps < 0:
        return Difficulty.HARD
    if steps <= EASY_MAX_STEPS:
        return Difficulty.EASY
    if steps <= MEDIUM_MAX_STEPS:
        return Difficulty.MEDIUM
    return Difficulty.HARD


def classify_difficulty(start: str, end: str, dictionary) -> Difficulty:
    return difficulty_for_steps(optimal_path_length(start, end, dictionary))


def letter_similarity(word1: str, word2: str) -> float:
    """Share of positions holding the same letter (0 for unequal lengths)."""
    if len(word1) != len(word2) or not word1:
        return 0.0

    matches = sum(1 for a, b in zip(word1.lower(), word2.lower()) if a == b)
    return matches / len(word1)


def suggest_next_words(current_word: str,
                       target_word: str,
                       dictionary,
                       limit: int = 3) -> List[str]:
    """
    Adjacent words that share more positions with the target than the current
    word does, most similar first.
    """
    current_lower = current_word.lower()
    target_lower = target_word.lower()
    current_similarity = letter_similarity(current_lower, target_lower)

    suggestions = []
    for word in _candidate_words(dictionary, len(current_lower)):
        if not differs_by_one_letter(current_lower, word):
            continue
        similarity = letter_similarity(word, target_lower)
        if similarity > current_similarity:
            suggestions.append((similarity, word))

    # sort is stable, so equal scores keep dictionary order
    suggestions.sort(key=lambda item: item[0], reverse=True)
    return [word for _, word in suggestions[:limit]]


def validate_word_chain(chain: Sequence[str], dictionary) -> List[ValidationResult]:
    """
    Check every step of a complete chain, one result per step after the first word.
    """
    if len(chain) < 2:
        return [ValidationResult(False, 'Chain must have at least 2 words.')]

    results = []
    for previous, current in zip(chain, chain[1:]):
        if not dictionary.contains(current):
            results.append(ValidationResult(False, f'"{current}" is not a valid word.'))
        elif not differs_by_one_letter(previous, current):
            results.append(ValidationResult(False, f'"{previous}" and "{current}" differ by more than one letter.'))
        else:
            results.append(ValidationResult(True))

    return results


def is_valid_chain(chain: Iterable[str], start: str, end: str, dictionary) -> bool:
    """True if chain runs from start to end and every step is a legal move."""
    chain = [word.lower() for word in chain]
    if not chain or chain[0] != start.lower() or chain[-1] != end.lower():
        return False
    if len(set(chain)) != len(chain):
        return False
    return all(result.is_valid for result in validate_word_chain(chain, dictionary))
