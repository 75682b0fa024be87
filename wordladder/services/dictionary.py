"""
Word Dictionary Service

In-memory index of valid words grouped by length. One instance is built at
startup and handed to every component that needs membership or per-length
word lists; nothing reads words from module state.
"""

from typing import Dict, FrozenSet, Iterable, List, Mapping, Tuple

from ..config.game_settings import MIN_WORD_LENGTH, MAX_WORD_LENGTH, WordSource, load_word_source
from ..exceptions import NotLoadedError


class WordDictionary:
    """
    Length-indexed word dictionary.

    Words of each length are kept twice: as a lexicographically sorted tuple
    (iteration order for search, which fixes hint content across runs) and as
    a frozenset for membership tests.
    """

    def __init__(self, source: WordSource = None):
        self._words_by_length: Dict[int, Tuple[str, ...]] = {}
        self._lookup: Dict[int, FrozenSet[str]] = {}
        self._loaded = False
        if source is not None:
            self.load(source)

    @property
    def is_loaded(self) -> bool:
        return self._loaded

    def load(self, source: WordSource) -> None:
        """
        Replace the whole index from a flat word list or a length-keyed mapping.

        Entries are stripped and lowercased; words outside the 2-8 letter
        range are discarded. The new index is swapped in only once it is fully
        built.
        """
        if isinstance(source, Mapping):
            words: List[str] = []
            for key, group in source.items():
                if not isinstance(group, (list, tuple, set, frozenset)):
                    continue
                try:
                    length = int(key)
                except (TypeError, ValueError):
                    continue
                if MIN_WORD_LENGTH <= length <= MAX_WORD_LENGTH:
                    words.extend(group)
        elif isinstance(source, Iterable) and not isinstance(source, str):
            words = list(source)
        else:
            raise TypeError("Word source must be a list of words or a mapping keyed by length")

        grouped: Dict[int, set] = {}
        for word in words:
            if not isinstance(word, str):
                continue
            normalized = word.strip().lower()
            if MIN_WORD_LENGTH <= len(normalized) <= MAX_WORD_LENGTH:
                grouped.setdefault(len(normalized), set()).add(normalized)

        words_by_length = {length: tuple(sorted(group)) for length, group in grouped.items()}
        lookup = {length: frozenset(group) for length, group in grouped.items()}

        self._words_by_length, self._lookup = words_by_length, lookup
        self._loaded = True

    def load_file(self, path: str) -> None:
        """Load the index from a JSON word list file."""
        self.load(load_word_source(path))

    def _ensure_loaded(self) -> None:
        if not self._loaded:
            raise NotLoadedError()

    def words_of_length(self, length: int) -> Tuple[str, ...]:
        """All words with the given length, empty if there are none."""
        self._ensure_loaded()
        return self._words_by_length.get(length, ())

    def contains(self, word: str) -> bool:
        """Case-insensitive membership; False for lengths outside 2-8."""
        self._ensure_loaded()
        if not isinstance(word, str):
            return False
        length = len(word)
        if length < MIN_WORD_LENGTH or length > MAX_WORD_LENGTH:
            return False
        return word.lower() in self._lookup.get(length, frozenset())

    def __contains__(self, word) -> bool:
        return self.contains(word)

    def available_lengths(self) -> List[int]:
        self._ensure_loaded()
        return sorted(self._words_by_length)

    def total_word_count(self) -> int:
        self._ensure_loaded()
        return sum(len(words) for words in self._words_by_length.values())
