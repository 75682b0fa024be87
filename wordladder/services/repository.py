"""
Puzzle Repository

MongoDB storage for the pair bank, the daily schedule, leaderboard records
and shared challenges. Every query the services need lives here; the services
never touch collections directly.
"""

import datetime
from dataclasses import asdict
from itertools import groupby
from typing import Any, Dict, List, Optional, Set, Tuple

from pymongo import ASCENDING, ReturnDocument
from pymongo.mongo_client import MongoClient
from pymongo.server_api import ServerApi

from ..models.records import DailyCompletion, UserSolution
from ..models.schedule import ScheduleEntry, WordPair


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class PuzzleRepository:
    """
    Storage for everything the server persists.

    Args:
        db: A pymongo Database (or a compatible test double)
    """

    def __init__(self, db):
        self.db = db
        self.word_pairs = db.word_pairs
        self.daily_schedule = db.daily_schedule
        self.user_solutions = db.user_solutions
        self.daily_completions = db.daily_completions
        self.challenges = db.challenges
        self.ensure_indexes()

    @classmethod
    def from_uri(cls, mongo_uri: str, db_name: str) -> "PuzzleRepository":
        """Connect to MongoDB and verify the connection with a ping."""
        client = MongoClient(mongo_uri, server_api=ServerApi('1'))
        client.admin.command('ping')
        return cls(client[db_name])

    def ensure_indexes(self) -> None:
        # One pair per (length, start, end) and one schedule slot per (date, length)
        self.word_pairs.create_index(
            [("word_length", ASCENDING), ("start_word", ASCENDING), ("end_word", ASCENDING)],
            unique=True
        )
        self.daily_schedule.create_index(
            [("schedule_date", ASCENDING), ("word_length", ASCENDING)],
            unique=True
        )
        self.daily_schedule.create_index([("word_length", ASCENDING), ("word_pair_id", ASCENDING)])
        self.user_solutions.create_index([("challenge_date", ASCENDING), ("word_length", ASCENDING)])
        self.daily_completions.create_index("challenge_date")
        self.challenges.create_index("challenge_code", unique=True)
        self.challenges.create_index("challenge_date")

    # ------------------------------------------------------------------
    # Pair bank
    # ------------------------------------------------------------------

    def insert_pair(self, word_length: int, start_word: str, end_word: str,
                    optimal_steps: int) -> Optional[WordPair]:
        """
        Insert a verified pair unless it already exists.

        Returns:
            The stored WordPair, or None when the pair was already in the bank
        """
        key = {
            "word_length": word_length,
            "start_word": start_word.lower(),
            "end_word": end_word.lower(),
        }
        result = self.word_pairs.update_one(
            key,
            {"$setOnInsert": {**key, "optimal_steps": optimal_steps, "created_at": _utcnow()}},
            upsert=True
        )
        if result.upserted_id is None:
            return None
        return WordPair(id=result.upserted_id, optimal_steps=optimal_steps, **key)

    def pairs_for_length(self, word_length: int) -> List[WordPair]:
        """All pairs of one length in insertion order."""
        cursor = self.word_pairs.find({"word_length": word_length}).sort("_id", ASCENDING)
        return [WordPair.from_document(doc) for doc in cursor]

    def pair_keys_for_length(self, word_length: int) -> Set[Tuple[str, str]]:
        cursor = self.word_pairs.find({"word_length": word_length}, {"start_word": 1, "end_word": 1})
        return {(doc["start_word"], doc["end_word"]) for doc in cursor}

    def count_pairs(self, word_length: int) -> int:
        return self.word_pairs.count_documents({"word_length": word_length})

    def get_pair(self, pair_id: Any) -> Optional[WordPair]:
        doc = self.word_pairs.find_one({"_id": pair_id})
        return WordPair.from_document(doc) if doc else None

    # ------------------------------------------------------------------
    # Schedule
    # ------------------------------------------------------------------

    def schedule_lengths_for_date(self, schedule_date: str) -> Set[int]:
        cursor = self.daily_schedule.find({"schedule_date": schedule_date}, {"word_length": 1})
        return {doc["word_length"] for doc in cursor}

    def insert_schedule_entry(self, entry: ScheduleEntry) -> bool:
        """
        Insert a schedule entry, doing nothing if (date, length) already exists.

        Returns:
            bool: True if a new entry was created
        """
        key = {"schedule_date": entry.schedule_date, "word_length": entry.word_length}
        result = self.daily_schedule.update_one(
            key,
            {"$setOnInsert": {**key, "word_pair_id": entry.word_pair_id, "updated_at": _utcnow()}},
            upsert=True
        )
        return result.upserted_id is not None

    def get_schedule_entry(self, schedule_date: str, word_length: int) -> Optional[ScheduleEntry]:
        doc = self.daily_schedule.find_one({"schedule_date": schedule_date, "word_length": word_length})
        if not doc:
            return None
        return ScheduleEntry(doc["schedule_date"], doc["word_length"], doc.get("word_pair_id"))

    def scheduled_pair(self, schedule_date: str, word_length: int) -> Optional[WordPair]:
        """The pair assigned to a date and length, None if unscheduled or unassigned."""
        entry = self.get_schedule_entry(schedule_date, word_length)
        if entry is None or not entry.is_assigned:
            return None
        return self.get_pair(entry.word_pair_id)

    def assign_oldest_gap(self, word_length: int, pair_id: Any) -> Optional[str]:
        """
        Assign a pair to the earliest unassigned entry of a length.

        The filter only matches entries whose pair is still null, so an
        assigned entry is never overwritten even by concurrent runs.

        Returns:
            The schedule date that received the pair, or None if there was no gap
        """
        doc = self.daily_schedule.find_one_and_update(
            {"word_length": word_length, "word_pair_id": None},
            {"$set": {"word_pair_id": pair_id, "updated_at": _utcnow()}},
            sort=[("schedule_date", ASCENDING)],
            return_document=ReturnDocument.AFTER
        )
        return doc["schedule_date"] if doc else None

    def schedule_counts(self, word_length: int) -> Tuple[int, int]:
        """(total entries, assigned entries) for a length."""
        total = self.daily_schedule.count_documents({"word_length": word_length})
        assigned = self.daily_schedule.count_documents(
            {"word_length": word_length, "word_pair_id": {"$ne": None}}
        )
        return total, assigned

    def earliest_assigned_date(self) -> Optional[str]:
        doc = self.daily_schedule.find_one(
            {"word_pair_id": {"$ne": None}},
            sort=[("schedule_date", ASCENDING)]
        )
        return doc["schedule_date"] if doc else None

    def assigned_lengths_by_date(self) -> List[Tuple[str, Set[int]]]:
        """Dates with at least one assigned entry, ascending, with their assigned lengths."""
        cursor = self.daily_schedule.find(
            {"word_pair_id": {"$ne": None}},
            {"schedule_date": 1, "word_length": 1}
        ).sort([("schedule_date", ASCENDING), ("word_length", ASCENDING)])
        return [
            (schedule_date, {doc["word_length"] for doc in docs})
            for schedule_date, docs in groupby(cursor, key=lambda doc: doc["schedule_date"])
        ]

    # ------------------------------------------------------------------
    # Leaderboards
    # ------------------------------------------------------------------

    def insert_solution(self, solution: UserSolution) -> Dict[str, Any]:
        doc = asdict(solution)
        doc["created_at"] = doc["created_at"] or _utcnow()
        self.user_solutions.insert_one(doc)
        return doc

    def top_solutions(self, challenge_date: str, word_length: int, limit: int) -> List[Dict[str, Any]]:
        cursor = self.user_solutions.find(
            {"challenge_date": challenge_date, "word_length": word_length,
             "completion_time_ms": {"$ne": None}}
        ).sort([("completion_time_ms", ASCENDING), ("steps", ASCENDING)]).limit(limit)
        return list(cursor)

    def fewest_steps_solutions(self, challenge_date: str, word_length: Optional[int],
                               limit: int) -> List[Dict[str, Any]]:
        query: Dict[str, Any] = {"challenge_date": challenge_date}
        if word_length is not None:
            query["word_length"] = word_length
        cursor = self.user_solutions.find(query).sort(
            [("steps", ASCENDING), ("created_at", ASCENDING)]
        ).limit(limit)
        return list(cursor)

    def insert_completion(self, completion: DailyCompletion) -> Dict[str, Any]:
        doc = asdict(completion)
        # BSON keys must be strings
        doc["completion_times"] = {str(k): v for k, v in completion.completion_times.items()}
        if completion.solution_paths is not None:
            doc["solution_paths"] = {str(k): v for k, v in completion.solution_paths.items()}
        doc["completed_at"] = doc["completed_at"] or _utcnow()
        self.daily_completions.insert_one(doc)
        return doc

    def top_completions(self, challenge_date: Optional[str], limit: int) -> List[Dict[str, Any]]:
        query = {"challenge_date": challenge_date} if challenge_date else {}
        cursor = self.daily_completions.find(query).sort("total_time_ms", ASCENDING).limit(limit)
        return list(cursor)

    # ------------------------------------------------------------------
    # Challenges
    # ------------------------------------------------------------------

    def challenge_code_exists(self, code: str) -> bool:
        return self.challenges.count_documents({"challenge_code": code}, limit=1) > 0

    def insert_challenge(self, doc: Dict[str, Any]) -> Dict[str, Any]:
        self.challenges.insert_one(doc)
        return doc

    def find_challenge(self, code: str) -> Optional[Dict[str, Any]]:
        return self.challenges.find_one({"challenge_code": code})

    def find_challenges_for_date(self, challenge_date: str) -> List[Dict[str, Any]]:
        return list(self.challenges.find({"challenge_date": challenge_date}).sort("created_at", ASCENDING))

    def set_challenge_status(self, code: str, status: str) -> None:
        self.challenges.update_one({"challenge_code": code}, {"$set": {"status": status}})

    def add_participant(self, code: str, participant_id: str, participant: Dict[str, Any]) -> bool:
        """Add a participant unless already present; True if added."""
        field = f"participants.{participant_id}"
        result = self.challenges.update_one(
            {"challenge_code": code, field: {"$exists": False}},
            {"$set": {field: participant}}
        )
        return result.modified_count > 0

    def update_participant(self, code: str, participant_id: str, fields: Dict[str, Any]) -> None:
        self.challenges.update_one(
            {"challenge_code": code},
            {"$set": {f"participants.{participant_id}.{k}": v for k, v in fields.items()}}
        )
