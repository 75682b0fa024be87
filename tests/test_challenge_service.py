import datetime
import random

import pytest

from wordladder.exceptions import ChallengeError
from wordladder.models.records import ChallengeStatus
from wordladder.services.challenge_service import (
    ChallengeService, challenge_url, extract_code_from_url, generate_challenge_code,
    is_challenge_expired, is_valid_challenge_code
)

START = datetime.datetime(2024, 1, 1, 12, 0, tzinfo=datetime.timezone.utc)


class FakeClock:
    def __init__(self):
        self.now = START

    def __call__(self):
        return self.now


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def challenges(repository, clock):
    return ChallengeService(repository, rng=random.Random(5), clock=clock)


def _result(participant, total=30000):
    return {
        "user_id": participant,
        "total_time_ms": total,
        "completion_times": {"3": 5000, "4": 25000},
        "solution_paths": {3: ["cat", "cot"]},
    }


def test_code_helpers():
    code = generate_challenge_code(random.Random(1))

    assert is_valid_challenge_code(code)
    assert not is_valid_challenge_code("abc123")
    assert not is_valid_challenge_code("ABC12")
    assert challenge_url("ABC123", "https://example.com/") == "https://example.com/challenge/ABC123"
    assert extract_code_from_url("https://example.com/challenge/ABC123") == "ABC123"
    assert extract_code_from_url("https://example.com/") is None


def test_expiry_check():
    assert not is_challenge_expired(None)
    assert is_challenge_expired(datetime.datetime(2000, 1, 1))
    assert not is_challenge_expired(START + datetime.timedelta(hours=1), START)


def test_create_challenge(challenges):
    challenge = challenges.create_challenge("2024-01-01", "alice")

    assert is_valid_challenge_code(challenge["challenge_code"])
    assert challenge["status"] == ChallengeStatus.PENDING.value
    assert challenge["expires_at"] == START + datetime.timedelta(hours=24)
    assert challenges.get_challenge(challenge["challenge_code"])["challenger_id"] == "alice"


def test_create_requires_date(challenges):
    with pytest.raises(ChallengeError):
        challenges.create_challenge(None)


def test_code_collisions_exhaust_retries(repository, clock):
    class FixedRng:
        def choice(self, seq):
            return seq[0]

    service = ChallengeService(repository, rng=FixedRng(), clock=clock)
    service.create_challenge("2024-01-01")

    with pytest.raises(ChallengeError) as excinfo:
        service.create_challenge("2024-01-01")
    assert excinfo.value.status_code == 500


def test_lookup_errors(challenges):
    with pytest.raises(ChallengeError) as bad_format:
        challenges.get_challenge("nope")
    assert bad_format.value.status_code == 400

    with pytest.raises(ChallengeError) as missing:
        challenges.get_challenge("ZZZ999")
    assert missing.value.status_code == 404


def test_accept_is_idempotent(challenges):
    code = challenges.create_challenge("2024-01-01", "alice")["challenge_code"]

    first = challenges.accept_challenge(code, user_id="bob")
    second = challenges.accept_challenge(code, user_id="bob")

    assert first["status"] == ChallengeStatus.ACCEPTED.value
    assert list(second["participants"]) == ["bob"]


def test_accept_requires_identity(challenges):
    code = challenges.create_challenge("2024-01-01")["challenge_code"]

    with pytest.raises(ChallengeError):
        challenges.accept_challenge(code)
    with pytest.raises(ChallengeError):
        challenges.accept_challenge(code, user_id="bad.id")


def test_expired_challenge_cannot_be_accepted(challenges, clock):
    code = challenges.create_challenge("2024-01-01")["challenge_code"]
    clock.now = START + datetime.timedelta(hours=25)

    with pytest.raises(ChallengeError, match="expired"):
        challenges.accept_challenge(code, session_id="s1")
    assert challenges.get_challenge(code)["status"] == ChallengeStatus.EXPIRED.value


def test_submit_completes_when_everyone_finished(challenges):
    code = challenges.create_challenge("2024-01-01")["challenge_code"]
    challenges.accept_challenge(code, user_id="bob")
    challenges.accept_challenge(code, session_id="guest-1")

    partial = challenges.submit_challenge_result(code, _result("bob", 40000))
    assert partial["status"] == ChallengeStatus.ACCEPTED.value
    assert partial["participants"]["bob"]["solution_paths"] == {"3": ["cat", "cot"]}

    done = challenges.submit_challenge_result(code, {**_result(None, 20000), "session_id": "guest-1"})
    assert done["status"] == ChallengeStatus.COMPLETED.value

    ranked = challenges.get_challenge(code)["participants"]
    assert list(ranked) == ["guest-1", "bob"]

    with pytest.raises(ChallengeError, match="already completed"):
        challenges.accept_challenge(code, user_id="carol")


def test_submit_rejects_outsiders(challenges):
    code = challenges.create_challenge("2024-01-01")["challenge_code"]

    with pytest.raises(ChallengeError) as excinfo:
        challenges.submit_challenge_result(code, _result("mallory"))
    assert excinfo.value.status_code == 403


def test_submit_requires_times(challenges):
    code = challenges.create_challenge("2024-01-01")["challenge_code"]
    challenges.accept_challenge(code, user_id="bob")

    with pytest.raises(ChallengeError):
        challenges.submit_challenge_result(code, {"user_id": "bob"})


def test_list_challenges_for_date(challenges):
    challenges.create_challenge("2024-01-01")
    challenges.create_challenge("2024-01-01")
    challenges.create_challenge("2024-01-02")

    assert len(challenges.list_challenges_for_date("2024-01-01")) == 2
