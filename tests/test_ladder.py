from itertools import permutations

import pytest

from wordladder.models.game import Difficulty
from wordladder.services.dictionary import WordDictionary
from wordladder.services.ladder import (
    classify_difficulty, difficulty_for_steps, differs_by_one_letter, is_valid_chain,
    optimal_path_length, shortest_path, suggest_next_words, validate_word_chain
)


@pytest.mark.parametrize("a, b, expected", [
    ("cat", "cot", True),
    ("cat", "cat", False),
    ("cat", "dog", False),
    ("cat", "cats", False),
    ("CAT", "cot", True),
])
def test_differs_by_one_letter(a, b, expected):
    assert differs_by_one_letter(a, b) is expected
    assert differs_by_one_letter(b, a) is expected


def test_shortest_path_simple_ladder(ladder_dictionary):
    assert shortest_path("cat", "dog", ladder_dictionary) == ["cat", "cot", "dot", "dog"]


def test_shortest_path_same_word():
    assert shortest_path("cat", "cat", WordDictionary(["cat"])) == ["cat"]


def test_shortest_path_length_mismatch(ladder_dictionary):
    assert shortest_path("cat", "cold", ladder_dictionary) == []


def test_shortest_path_unreachable():
    dictionary = WordDictionary(["cat", "cot", "dog"])

    assert shortest_path("cat", "dog", dictionary) == []
    assert optimal_path_length("cat", "dog", dictionary) == -1


def test_end_word_outside_dictionary_is_still_reachable():
    dictionary = WordDictionary(["cat", "cot", "dot"])

    assert shortest_path("cat", "dog", dictionary) == ["cat", "cot", "dot", "dog"]


def test_accepts_plain_word_lists():
    assert shortest_path("cat", "dog", ["dog", "dot", "cot", "cat"]) == ["cat", "cot", "dot", "dog"]


def _brute_force_length(start, end, words):
    """Shortest valid chain found by trying every ordering of intermediate words."""
    middle = [w for w in words if w not in (start, end)]
    best = -1
    for size in range(len(middle) + 1):
        for combo in permutations(middle, size):
            chain = [start, *combo, end]
            if all(differs_by_one_letter(a, b) for a, b in zip(chain, chain[1:])):
                return len(chain) - 1
    return best


def test_bfs_is_optimal_against_brute_force():
    words = ["cat", "cot", "cog", "dog", "dot", "hat", "hot", "hog"]
    dictionary = WordDictionary(words)

    for start in words:
        for end in words:
            if start == end:
                continue
            path = shortest_path(start, end, dictionary)
            assert len(path) - 1 == _brute_force_length(start, end, words)
            assert is_valid_chain(path, start, end, dictionary)


def test_max_depth_truncates_long_ladders(ladder_dictionary):
    assert shortest_path("cat", "dog", ladder_dictionary, max_depth=3) == ["cat", "cot", "dot", "dog"]
    assert shortest_path("cat", "dog", ladder_dictionary, max_depth=2) == []


def test_hint_order_is_deterministic():
    # two shortest ladders: cat-cot-dot-dog and cat-cot-cog-dog
    dictionary = WordDictionary(["dot", "dog", "cog", "cot", "cat"])

    assert shortest_path("cat", "dog", dictionary) == ["cat", "cot", "cog", "dog"]


@pytest.mark.parametrize("steps, expected", [
    (-1, Difficulty.HARD),
    (2, Difficulty.EASY),
    (4, Difficulty.EASY),
    (5, Difficulty.MEDIUM),
    (6, Difficulty.MEDIUM),
    (7, Difficulty.HARD),
])
def test_difficulty_for_steps(steps, expected):
    assert difficulty_for_steps(steps) is expected


def test_classify_difficulty(ladder_dictionary):
    assert classify_difficulty("cat", "dog", ladder_dictionary) is Difficulty.EASY


def test_suggest_next_words_moves_toward_target(dictionary):
    suggestions = suggest_next_words("cat", "dog", dictionary)

    assert suggestions == ["cot"]


def test_validate_word_chain_reports_each_step(ladder_dictionary):
    results = validate_word_chain(["cat", "cot", "dog"], ladder_dictionary)

    assert [r.is_valid for r in results] == [True, False]
    assert "differ by more than one letter" in results[1].error

    results = validate_word_chain(["cat", "cog"], ladder_dictionary)
    assert "not a valid word" in results[0].error


def test_is_valid_chain_rejects_repeats_and_wrong_ends(ladder_dictionary):
    assert not is_valid_chain(["cat", "cot", "cat", "cot", "dot", "dog"], "cat", "dog", ladder_dictionary)
    assert not is_valid_chain(["cat", "cot", "dot"], "cat", "dog", ladder_dictionary)
    assert is_valid_chain(["CAT", "cot", "dot", "dog"], "cat", "dog", ladder_dictionary)
