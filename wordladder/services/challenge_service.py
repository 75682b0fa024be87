"""
Challenge Service

Asynchronous challenges: a player shares a short code for a date's puzzles,
others accept it, and each participant's result is recorded when they finish.
"""

import datetime
import random
import re
from dataclasses import asdict
from typing import Any, Callable, Dict, List, Optional

from ..config.game_settings import (
    CHALLENGE_CODE_ALPHABET, CHALLENGE_CODE_LENGTH, CHALLENGE_CODE_RETRIES, CHALLENGE_EXPIRATION_HOURS
)
from ..exceptions import ChallengeError
from ..models.records import Challenge, ChallengeParticipant, ChallengeStatus
from .repository import PuzzleRepository

CHALLENGE_CODE_PATTERN = re.compile(rf'^[A-Z0-9]{{{CHALLENGE_CODE_LENGTH}}}$')
CHALLENGE_URL_PATTERN = re.compile(rf'/challenge/([A-Z0-9]{{{CHALLENGE_CODE_LENGTH}}})')
PARTICIPANT_ID_PATTERN = re.compile(r'^[A-Za-z0-9_-]{1,64}$')


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


def generate_challenge_code(rng: Optional[random.Random] = None) -> str:
    """Six random uppercase letters and digits, e.g. 'ABC123'."""
    rng = rng or random.SystemRandom()
    return ''.join(rng.choice(CHALLENGE_CODE_ALPHABET) for _ in range(CHALLENGE_CODE_LENGTH))


def is_valid_challenge_code(code: str) -> bool:
    return isinstance(code, str) and bool(CHALLENGE_CODE_PATTERN.match(code))


def challenge_url(code: str, base_url: str = '') -> str:
    return f"{base_url.rstrip('/')}/challenge/{code}"


def extract_code_from_url(url: str) -> Optional[str]:
    match = CHALLENGE_URL_PATTERN.search(url or '')
    return match.group(1) if match else None


def is_challenge_expired(expires_at: Optional[datetime.datetime],
                         now: Optional[datetime.datetime] = None) -> bool:
    """No expiry means never expired. Naive datetimes are read as UTC."""
    if expires_at is None:
        return False
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=datetime.timezone.utc)
    return expires_at < (now or _utcnow())


class ChallengeService:
    """
    Challenge lifecycle: pending -> accepted -> completed, or expired once
    the expiry time passes.
    """

    def __init__(self,
                 repository: PuzzleRepository,
                 rng: Optional[random.Random] = None,
                 clock: Callable[[], datetime.datetime] = _utcnow):
        self.repository = repository
        self.rng = rng
        self.clock = clock

    def create_challenge(self, challenge_date: str, challenger_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Create a pending challenge with a unique code.

        Raises:
            ChallengeError: If no unused code was found within the retry budget
        """
        if not challenge_date:
            raise ChallengeError('challenge_date is required')

        code = None
        for _ in range(CHALLENGE_CODE_RETRIES):
            candidate = generate_challenge_code(self.rng)
            if not self.repository.challenge_code_exists(candidate):
                code = candidate
                break

        if code is None:
            raise ChallengeError('Failed to generate unique challenge code', status_code=500)

        now = self.clock()
        challenge = Challenge(
            challenge_code=code,
            challenge_date=str(challenge_date),
            challenger_id=challenger_id,
            created_at=now,
            expires_at=now + datetime.timedelta(hours=CHALLENGE_EXPIRATION_HOURS),
        )
        return self.repository.insert_challenge(asdict(challenge))

    def _load(self, code: str) -> Dict[str, Any]:
        if not is_valid_challenge_code(code):
            raise ChallengeError('Invalid challenge code format')

        challenge = self.repository.find_challenge(code)
        if challenge is None:
            raise ChallengeError('Challenge not found', status_code=404)

        if (challenge['status'] != ChallengeStatus.EXPIRED.value
                and is_challenge_expired(challenge.get('expires_at'), self.clock())):
            self.repository.set_challenge_status(code, ChallengeStatus.EXPIRED.value)
            challenge['status'] = ChallengeStatus.EXPIRED.value

        return challenge

    def get_challenge(self, code: str) -> Dict[str, Any]:
        """Challenge with participants, fastest finishers first."""
        challenge = self._load(code)
        participants = challenge.get('participants') or {}
        challenge['participants'] = dict(sorted(
            participants.items(),
            key=lambda item: (
                item[1].get('completion_time_ms') is None,
                item[1].get('completion_time_ms') or 0,
                str(item[1].get('joined_at') or ''),
            )
        ))
        return challenge

    def accept_challenge(self, code: str, user_id: Optional[str] = None,
                         session_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Join a challenge. Joining twice returns the challenge unchanged.

        Raises:
            ChallengeError: If the challenge is unknown, expired or completed
        """
        participant_id = self._participant_id(user_id, session_id)
        challenge = self._load(code)

        if challenge['status'] == ChallengeStatus.EXPIRED.value:
            raise ChallengeError('Challenge has expired')
        if challenge['status'] == ChallengeStatus.COMPLETED.value:
            raise ChallengeError('Challenge already completed')

        if participant_id in (challenge.get('participants') or {}):
            return challenge

        participant = ChallengeParticipant(user_id=user_id, session_id=session_id, joined_at=self.clock())
        self.repository.add_participant(code, participant_id, asdict(participant))

        if challenge['status'] == ChallengeStatus.PENDING.value:
            self.repository.set_challenge_status(code, ChallengeStatus.ACCEPTED.value)

        return self.repository.find_challenge(code)

    def submit_challenge_result(self, code: str, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Record a participant's finishing time; the challenge completes once
        every participant has one.

        Raises:
            ChallengeError: On missing fields, unknown challenge or non-participants
        """
        if not data.get('total_time_ms') or not data.get('completion_times'):
            raise ChallengeError('Missing required fields: challenge_code, total_time_ms, completion_times')

        participant_id = self._participant_id(data.get('user_id'), data.get('session_id'))
        challenge = self._load(code)

        if participant_id not in (challenge.get('participants') or {}):
            raise ChallengeError('Not a participant in this challenge', status_code=403)

        solution_paths = data.get('solution_paths')
        self.repository.update_participant(code, participant_id, {
            'completion_time_ms': int(data['total_time_ms']),
            'total_steps': data.get('total_steps'),
            'solution_paths': {str(k): v for k, v in solution_paths.items()} if solution_paths else None,
            'completed_at': self.clock(),
        })

        updated = self.repository.find_challenge(code)
        participants = updated.get('participants') or {}
        all_completed = all(p.get('completion_time_ms') is not None for p in participants.values())
        if all_completed and updated['status'] != ChallengeStatus.COMPLETED.value:
            self.repository.set_challenge_status(code, ChallengeStatus.COMPLETED.value)
            updated['status'] = ChallengeStatus.COMPLETED.value

        return updated

    def list_challenges_for_date(self, challenge_date: str) -> List[Dict[str, Any]]:
        return self.repository.find_challenges_for_date(challenge_date)

    @staticmethod
    def _participant_id(user_id: Optional[str], session_id: Optional[str]) -> str:
        participant_id = user_id or session_id
        if not participant_id:
            raise ChallengeError('user_id or session_id is required')
        if not PARTICIPANT_ID_PATTERN.match(str(participant_id)):
            raise ChallengeError('Invalid participant id')
        return str(participant_id)
