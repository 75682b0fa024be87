"""
Schedule Service

Pre-generates verified word pairs and maps calendar dates to them so that
serving a day's puzzles needs no search at request time.
"""

import datetime
import random
from typing import Dict, List, Optional, Sequence, Union

from ..config.game_settings import (
    DAYS_TO_SCHEDULE, DEFAULT_MAX_MOVES, MAX_PAIRS_PER_RUN, MAX_START_WORD_USES,
    MIN_STEPS, TARGET_PAIRS_PER_LENGTH, WORD_LENGTHS, get_max_attempts_for_length
)
from ..exceptions import ScheduleGapError
from ..models.game import Puzzle
from ..models.schedule import DailyPuzzles, LengthStats, ScheduleEntry, WordPair
from ..utils.game_logger import game_logger
from .dictionary import WordDictionary
from .repository import PuzzleRepository
from .verifier import PairVerifier

DateLike = Union[datetime.date, str]


def normalize_date(value: DateLike) -> str:
    """YYYY-MM-DD string for a date, datetime or ISO date string."""
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return datetime.date.fromisoformat(str(value)[:10]).isoformat()


def calculate_pair_index(date: DateLike, total_pairs: int) -> int:
    """
    Deterministic bank index for a date.

    (day of year + YYYYMMDD as an integer) modulo the bank size. The same
    date maps to the same pair as long as the bank for that length keeps its
    size.
    """
    if total_pairs <= 0:
        raise ValueError("total_pairs must be positive")

    day = datetime.date.fromisoformat(normalize_date(date))
    numeric_seed = int(day.strftime('%Y%m%d'))
    day_of_year = day.timetuple().tm_yday
    return (day_of_year + numeric_seed) % total_pairs


class ScheduleService:
    """
    Builds and reads the daily puzzle schedule.

    This class handles:
    - Populating a year of (date, length) schedule entries from the pair bank
    - Generating new verified pairs by bounded random sampling
    - Filling unassigned schedule entries with new pairs, oldest first
    - Reading a date's puzzles and finding a playable fallback date
    """

    def __init__(self,
                 repository: PuzzleRepository,
                 dictionary: WordDictionary,
                 verifier: Optional[PairVerifier] = None,
                 word_lengths: Sequence[int] = WORD_LENGTHS,
                 max_moves: int = DEFAULT_MAX_MOVES):
        self.repository = repository
        self.dictionary = dictionary
        self.verifier = verifier or PairVerifier(dictionary)
        self.word_lengths = tuple(word_lengths)
        self.max_moves = max_moves

    def populate_schedule(self,
                          start_date: Optional[DateLike] = None,
                          days: int = DAYS_TO_SCHEDULE) -> Dict[str, int]:
        """
        Create schedule entries for `days` days starting at start_date.

        Existing entries are left alone. Lengths with an empty bank get an
        unassigned entry for the gap-filling job to complete later.

        Returns:
            dict: created, skipped, assigned and missing counters
        """
        start = datetime.date.fromisoformat(normalize_date(start_date or datetime.date.today()))
        pairs_by_length = {length: self.repository.pairs_for_length(length) for length in self.word_lengths}

        summary = {"created": 0, "skipped": 0, "assigned": 0, "missing": 0}

        for offset in range(days):
            day = start + datetime.timedelta(days=offset)
            schedule_date = day.isoformat()
            existing_lengths = self.repository.schedule_lengths_for_date(schedule_date)

            for length in self.word_lengths:
                if length in existing_lengths:
                    summary["skipped"] += 1
                    continue

                pair = self.pair_for_date(day, pairs_by_length[length])
                created = self.repository.insert_schedule_entry(
                    ScheduleEntry(schedule_date, length, pair.id if pair else None)
                )
                if not created:
                    summary["skipped"] += 1
                    continue

                summary["created"] += 1
                if pair:
                    summary["assigned"] += 1
                else:
                    summary["missing"] += 1

        game_logger.log_job_event(
            'populate_schedule', start_date=start.isoformat(), days=days, **summary
        )
        return summary

    @staticmethod
    def pair_for_date(date: DateLike, pairs: Sequence[WordPair]) -> Optional[WordPair]:
        """Deterministic choice from an ordered bank, None for an empty bank."""
        if not pairs:
            return None
        return pairs[calculate_pair_index(date, len(pairs))]

    def generate_pairs_for_length(self,
                                  word_length: int,
                                  target_count: int,
                                  rng: Optional[random.Random] = None,
                                  max_attempts: Optional[int] = None) -> List[WordPair]:
        """
        Sample random word combinations until target_count new pairs are stored
        or the attempt budget runs out.

        Skips identical words, pairs already known in either direction, start
        words used MAX_START_WORD_USES times in this run, and ladders shorter
        than MIN_STEPS.

        Returns:
            List[WordPair]: Pairs actually inserted during this run
        """
        rng = rng or random.Random()
        words = list(self.dictionary.words_of_length(word_length))
        if len(words) < 2 or target_count <= 0:
            return []

        seen_pairs = self.repository.pair_keys_for_length(word_length)
        start_word_usage: Dict[str, int] = {}
        generated: List[WordPair] = []
        attempts = 0
        attempt_budget = max_attempts if max_attempts is not None else get_max_attempts_for_length(word_length)

        while len(generated) < target_count and attempts < attempt_budget:
            attempts += 1

            start_word = rng.choice(words)
            end_word = rng.choice(words)
            if start_word == end_word:
                continue

            if start_word_usage.get(start_word, 0) >= MAX_START_WORD_USES:
                continue

            if (start_word, end_word) in seen_pairs or (end_word, start_word) in seen_pairs:
                continue

            verification = self.verifier.verify(start_word, end_word, self.max_moves)
            if not verification.is_valid or verification.optimal_steps < MIN_STEPS:
                continue

            seen_pairs.add((start_word, end_word))
            pair = self.repository.insert_pair(word_length, start_word, end_word, verification.optimal_steps)
            if pair is None:
                continue

            start_word_usage[start_word] = start_word_usage.get(start_word, 0) + 1
            generated.append(pair)

        game_logger.log_job_event(
            'generate_pairs', word_length=word_length, target=target_count,
            generated=len(generated), attempts=attempts
        )
        return generated

    def length_stats(self, word_length: int) -> LengthStats:
        total, assigned = self.repository.schedule_counts(word_length)
        existing_pairs = self.repository.count_pairs(word_length)
        needed = max(0, min(TARGET_PAIRS_PER_LENGTH - existing_pairs, MAX_PAIRS_PER_RUN))
        return LengthStats(
            length=word_length,
            total_scheduled=total,
            assigned=assigned,
            missing=total - assigned,
            existing_pairs=existing_pairs,
            needed=needed,
        )

    def fill_schedule_gaps(self, rng: Optional[random.Random] = None) -> Dict[str, List[LengthStats]]:
        """
        Generate missing pairs and give each one to the oldest unassigned date.

        Only lengths whose bank is below TARGET_PAIRS_PER_LENGTH generate, at
        most MAX_PAIRS_PER_RUN pairs per length per run. Assigned entries are
        never touched.

        Returns:
            dict: 'before' and 'after' per-length statistics
        """
        rng = rng or random.Random()
        before = [self.length_stats(length) for length in self.word_lengths]

        for stats in before:
            if stats.existing_pairs >= TARGET_PAIRS_PER_LENGTH or stats.needed <= 0:
                continue

            pairs = self.generate_pairs_for_length(stats.length, stats.needed, rng)
            assigned = 0
            for pair in pairs:
                if self.repository.assign_oldest_gap(stats.length, pair.id) is not None:
                    assigned += 1

            game_logger.log_job_event(
                'fill_schedule_gaps', word_length=stats.length,
                generated=len(pairs), assigned=assigned
            )

        after = [self.length_stats(length) for length in self.word_lengths]
        return {"before": before, "after": after}

    def get_puzzles_for_date(self, date: DateLike) -> DailyPuzzles:
        """
        The scheduled puzzles for a date, one per length, ascending.

        Lengths without an assigned pair are listed in missing_lengths
        instead of failing the whole day.
        """
        schedule_date = normalize_date(date)
        result = DailyPuzzles(date=schedule_date)

        for length in self.word_lengths:
            pair = self.repository.scheduled_pair(schedule_date, length)
            if pair is None:
                result.missing_lengths.append(length)
                continue
            result.puzzles.append(Puzzle(
                length=length,
                start_word=pair.start_word,
                end_word=pair.end_word,
                optimal_steps=pair.optimal_steps,
                max_moves=self.max_moves,
            ))

        return result

    def earliest_available_date(self) -> Optional[str]:
        """Earliest date with at least one assigned puzzle."""
        return self.repository.earliest_assigned_date()

    def earliest_complete_date(self) -> Optional[str]:
        """Earliest date with an assigned puzzle for every length."""
        required = set(self.word_lengths)
        for schedule_date, lengths in self.repository.assigned_lengths_by_date():
            if required <= lengths:
                return schedule_date
        return None

    def resolve_playable_date(self, date: DateLike) -> DailyPuzzles:
        """
        The requested date's puzzles if complete, otherwise the earliest
        complete date's.

        Raises:
            ScheduleGapError: If no date has a full set of puzzles
        """
        puzzles = self.get_puzzles_for_date(date)
        if puzzles.is_complete:
            return puzzles

        fallback = self.earliest_complete_date()
        if fallback is None:
            raise ScheduleGapError(
                "No puzzles available. Run populate-schedule and fill-gaps to build the schedule."
            )

        game_logger.logger.warning(
            f"Schedule gap on {puzzles.date} (missing lengths {puzzles.missing_lengths}), serving {fallback}"
        )
        return self.get_puzzles_for_date(fallback)
