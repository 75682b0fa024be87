import datetime
import random

import mongomock
import pytest

from wordladder.config.game_settings import MAX_START_WORD_USES, MIN_STEPS
from wordladder.exceptions import ScheduleGapError
from wordladder.models.schedule import ScheduleEntry
from wordladder.services.repository import PuzzleRepository
from wordladder.services.schedule_service import ScheduleService, calculate_pair_index, normalize_date


@pytest.fixture
def schedule(repository, dictionary):
    return ScheduleService(repository, dictionary, word_lengths=(3, 4))


def _add_pair(repository, start, end, steps=3):
    return repository.insert_pair(len(start), start, end, steps)


def _assignments(repository, word_length):
    return {
        doc["schedule_date"]: doc["word_pair_id"]
        for doc in repository.daily_schedule.find({"word_length": word_length})
    }


def test_normalize_date():
    assert normalize_date(datetime.date(2024, 3, 9)) == "2024-03-09"
    assert normalize_date(datetime.datetime(2024, 3, 9, 23, 59)) == "2024-03-09"
    assert normalize_date("2024-03-09T10:00:00") == "2024-03-09"


def test_pair_index_is_deterministic():
    # day 1 of the year + 20240101
    assert calculate_pair_index("2024-01-01", 7) == 20240102 % 7
    assert calculate_pair_index(datetime.date(2024, 1, 1), 7) == calculate_pair_index("2024-01-01", 7)
    assert calculate_pair_index("2024-12-31", 1) == 0


def test_pair_index_requires_non_empty_bank():
    with pytest.raises(ValueError):
        calculate_pair_index("2024-01-01", 0)


def test_populate_schedule_is_idempotent(schedule, repository):
    _add_pair(repository, "cat", "dog")
    _add_pair(repository, "hat", "cog")

    summary = schedule.populate_schedule("2024-01-01", days=5)
    assert summary == {"created": 10, "skipped": 0, "assigned": 5, "missing": 5}

    before = _assignments(repository, 3)
    again = schedule.populate_schedule("2024-01-01", days=5)

    assert again == {"created": 0, "skipped": 10, "assigned": 0, "missing": 0}
    assert _assignments(repository, 3) == before


def test_populate_uses_date_index(schedule, repository):
    pairs = [_add_pair(repository, s, e) for s, e in [("cat", "dog"), ("hat", "cog"), ("bat", "hot")]]

    schedule.populate_schedule("2024-02-10", days=1)

    expected = pairs[calculate_pair_index("2024-02-10", len(pairs))]
    assert repository.get_schedule_entry("2024-02-10", 3).word_pair_id == expected.id


def test_generate_pairs_obeys_rules(repository, dictionary):
    schedule = ScheduleService(repository, dictionary, word_lengths=(3,))

    pairs = schedule.generate_pairs_for_length(3, 8, rng=random.Random(7))

    assert 0 < len(pairs) <= 8
    assert repository.count_pairs(3) == len(pairs)

    keys = set()
    usage = {}
    for pair in pairs:
        assert pair.optimal_steps >= MIN_STEPS
        assert schedule.verifier.verify(pair.start_word, pair.end_word).is_valid
        assert (pair.end_word, pair.start_word) not in keys
        keys.add((pair.start_word, pair.end_word))
        usage[pair.start_word] = usage.get(pair.start_word, 0) + 1

    assert len(keys) == len(pairs)
    assert max(usage.values()) <= MAX_START_WORD_USES


def test_generate_pairs_is_reproducible(dictionary):
    def run():
        repository = PuzzleRepository(mongomock.MongoClient().db)
        service = ScheduleService(repository, dictionary, word_lengths=(3,))
        return [(p.start_word, p.end_word) for p in service.generate_pairs_for_length(3, 5, rng=random.Random(11))]

    assert run() == run()


def test_generate_pairs_respects_attempt_budget(schedule):
    assert schedule.generate_pairs_for_length(3, 5, rng=random.Random(1), max_attempts=0) == []


def test_fill_gaps_assigns_oldest_first_and_never_reassigns(repository, dictionary):
    schedule = ScheduleService(repository, dictionary, word_lengths=(3,))
    schedule.populate_schedule("2024-01-01", days=3)
    assert schedule.length_stats(3).missing == 3

    result = schedule.fill_schedule_gaps(rng=random.Random(3))

    assert result["before"][0].missing == 3
    assert result["after"][0].missing == 0
    first = _assignments(repository, 3)
    assert all(pair_id is not None for pair_id in first.values())

    schedule.populate_schedule("2024-01-04", days=1)
    schedule.fill_schedule_gaps(rng=random.Random(4))
    second = _assignments(repository, 3)

    for schedule_date, pair_id in first.items():
        assert second[schedule_date] == pair_id
    assert second["2024-01-04"] is not None


def test_partial_day_reports_missing_lengths(schedule, repository):
    _add_pair(repository, "cat", "dog")
    schedule.populate_schedule("2024-01-01", days=1)

    daily = schedule.get_puzzles_for_date("2024-01-01")

    assert [p.length for p in daily.puzzles] == [3]
    assert daily.missing_lengths == [4]
    assert not daily.is_complete
    assert daily.puzzles[0].start_word == "cat"
    assert daily.puzzles[0].max_moves == 10


def test_resolve_falls_back_to_earliest_complete_date(schedule, repository):
    three = _add_pair(repository, "cat", "dog")
    four = _add_pair(repository, "cold", "warm", 4)
    for entry in [
        ScheduleEntry("2024-01-03", 3, three.id),
        ScheduleEntry("2024-01-05", 3, three.id),
        ScheduleEntry("2024-01-05", 4, four.id),
        ScheduleEntry("2024-01-10", 3, three.id),
    ]:
        repository.insert_schedule_entry(entry)

    assert schedule.earliest_available_date() == "2024-01-03"
    assert schedule.earliest_complete_date() == "2024-01-05"
    assert schedule.resolve_playable_date("2024-01-10").date == "2024-01-05"
    assert schedule.resolve_playable_date("2024-01-05").is_complete


def test_resolve_without_complete_dates_raises(schedule, repository):
    _add_pair(repository, "cat", "dog")
    schedule.populate_schedule("2024-01-01", days=2)

    with pytest.raises(ScheduleGapError):
        schedule.resolve_playable_date("2024-01-01")


def test_length_stats(schedule, repository):
    _add_pair(repository, "cat", "dog")
    schedule.populate_schedule("2024-01-01", days=4)

    stats = schedule.length_stats(4)

    assert stats.total_scheduled == 4
    assert stats.assigned == 0
    assert stats.missing == 4
    assert stats.existing_pairs == 0
    assert stats.needed == 10
