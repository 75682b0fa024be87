"""
Game Configuration Constants Module

This module defines all word ladder configuration constants. Puzzle rules,
search guards, batch generation budgets and challenge settings are centralized
here so the services never hard-code them.
"""

import json
import os
from typing import Dict, Final, List, Tuple, Union

# Dictionary bounds
MIN_WORD_LENGTH: Final[int] = 2
MAX_WORD_LENGTH: Final[int] = 8

WORD_LENGTHS: Final[Tuple[int, ...]] = (3, 4, 5, 6, 7, 8)
"""
Word lengths played every day, one puzzle per length.
"""

# Puzzle rules
DEFAULT_MAX_MOVES: Final[int] = 10
"""
Move budget for a scheduled puzzle and the verification ceiling for new pairs.
"""

DEPTH_GUARD_MIN_LENGTH: Final[int] = 6
DEPTH_GUARD_SLACK: Final[int] = 2
"""
Words of DEPTH_GUARD_MIN_LENGTH letters or more are searched with
max_depth = max_moves + DEPTH_GUARD_SLACK.
"""

# Difficulty bands (optimal steps)
EASY_MAX_STEPS: Final[int] = 4
MEDIUM_MAX_STEPS: Final[int] = 6

# Hint policy
HINTS_PER_PUZZLE: Final[int] = 2
HINT_LOCK_MOVES: Final[int] = 2

# Pair generation
MIN_STEPS: Final[int] = 2
MAX_START_WORD_USES: Final[int] = 3
TARGET_PAIRS_PER_LENGTH: Final[int] = 365
MAX_PAIRS_PER_RUN: Final[int] = 10
DAYS_TO_SCHEDULE: Final[int] = 365

_MAX_ATTEMPTS_BY_LENGTH: Final[Dict[int, int]] = {6: 50000, 7: 75000, 8: 100000}
_DEFAULT_MAX_ATTEMPTS: Final[int] = 20000

# Challenges
CHALLENGE_CODE_LENGTH: Final[int] = 6
CHALLENGE_CODE_ALPHABET: Final[str] = "ABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789"
CHALLENGE_CODE_RETRIES: Final[int] = 10
CHALLENGE_EXPIRATION_HOURS: Final[int] = 24

# Leaderboards
PUZZLE_LEADERBOARD_LIMIT: Final[int] = 50
DAILY_LEADERBOARD_LIMIT: Final[int] = 50
GLOBAL_LEADERBOARD_LIMIT: Final[int] = 100
STEPS_LEADERBOARD_LIMIT: Final[int] = 10

WordSource = Union[List[str], Dict[str, List[str]], Dict[int, List[str]]]


def get_max_attempts_for_length(length: int) -> int:
    """Sampling attempt ceiling for one generation run; longer words get more."""
    return _MAX_ATTEMPTS_BY_LENGTH.get(length, _DEFAULT_MAX_ATTEMPTS)


def load_word_source(path: str) -> WordSource:
    """
    Load a raw word list from a JSON file.

    The file holds either a flat array of words or an object keyed by word
    length, e.g. {"3": ["cat", ...], "4": ["cold", ...]}.

    Raises:
        FileNotFoundError: If the file does not exist
        ValueError: If the JSON is malformed or has the wrong shape
    """
    if not os.path.isabs(path):
        config_dir = os.path.dirname(os.path.abspath(__file__))
        candidate = os.path.join(config_dir, path)
        if os.path.exists(candidate):
            path = candidate

    try:
        with open(path, 'r', encoding='utf-8') as f:
            source = json.load(f)
    except FileNotFoundError:
        raise FileNotFoundError(f"Word list file not found: {path}")
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in word list {path}: {e}")

    if not isinstance(source, (list, dict)):
        raise ValueError("Word list must be a JSON array or an object keyed by length")

    return source


def validate_word_source_integrity(source: WordSource) -> bool:
    """
    Validates a raw word source before it is loaded into a dictionary.

    Checks that the source is non-empty, that every entry is a string made of
    letters only, and that length keys (when present) are numeric and match
    the words filed under them.

    Returns:
        bool: True if the source passes all checks

    Raises:
        ValueError: If any check fails with a detailed message
    """
    if not source:
        raise ValueError("Word list cannot be empty")

    if isinstance(source, dict):
        groups = []
        for key, words in source.items():
            try:
                length = int(key)
            except (TypeError, ValueError):
                raise ValueError(f"Length key '{key}' is not numeric")
            if not isinstance(words, list):
                raise ValueError(f"Words for length {key} must be an array")
            groups.append((length, words))
    else:
        groups = [(None, source)]

    for length, words in groups:
        for index, word in enumerate(words):
            if not isinstance(word, str) or not word.strip().isalpha():
                raise ValueError(f"Word at index {index} '{word}' contains non-alphabetic characters")
            if length is not None and len(word.strip()) != length:
                raise ValueError(f"Word '{word}' is filed under length {length}")

    return True


def get_word_statistics(dictionary) -> dict:
    """
    Summarizes a loaded WordDictionary for the health endpoint and job reports.

    Returns:
        dict: total word count and the count of words per length
    """
    return {
        "total_words": dictionary.total_word_count(),
        "words_by_length": {
            length: len(dictionary.words_of_length(length))
            for length in dictionary.available_lengths()
        },
    }
