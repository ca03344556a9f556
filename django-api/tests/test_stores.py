"""Integration tests for DjangoVotingStore.

Run with: pytest tests/test_stores.py -v
"""

import uuid

import pytest
from django.db import IntegrityError
from django.utils import timezone

from tests.fakes import make_talks
from voting import models
from voting.domain import (
    Choice,
    Coordinate,
    InputFingerprint,
    VoteOutcome,
    VoteRecord,
    VotingSession,
    VotingSessionId,
)
from voting.stores.django_store import DjangoVotingStore


@pytest.fixture
def store() -> DjangoVotingStore:
    return DjangoVotingStore()


@pytest.fixture
def session(store) -> VotingSession:
    session = VotingSession(
        id=VotingSessionId(uuid.uuid4()),
        seed=4_000_000_000,
        version=4,
        fingerprint=InputFingerprint(tuple(talk.id for talk in make_talks(6))),
        created_at=timezone.now(),
    )
    store.create_session(session)
    return session


def vote(session, round_number, index, choice=Choice.A) -> VoteRecord:
    return VoteRecord(
        session_id=session.id,
        coordinate=Coordinate(round_number, index),
        choice=choice,
        version=2,
        created_at=timezone.now(),
    )


@pytest.mark.django_db
class TestSessions:
    """Tests for session persistence."""

    def test_session_round_trip(self, store, session):
        """A stored session reads back with the same fingerprint and seed."""
        loaded = store.get_session(session.id)
        assert loaded.fingerprint == session.fingerprint
        assert loaded.fingerprint.talk_ids == session.fingerprint.talk_ids
        assert loaded.seed == session.seed
        assert loaded.version == 4

    def test_unknown_session_is_none(self, store):
        """Missing sessions return None."""
        assert store.get_session(VotingSessionId(uuid.uuid4())) is None

    def test_list_and_count_sessions(self, store, session):
        """Sessions are listed and counted."""
        assert [listed.id for listed in store.list_sessions()] == [session.id]
        assert store.count_sessions() == 1


@pytest.mark.django_db
class TestVotes:
    """Tests for vote persistence and idempotence."""

    def test_first_vote_recorded(self, store, session):
        """A new coordinate is recorded."""
        assert store.record_vote(vote(session, 0, 0)) is VoteOutcome.RECORDED

    def test_second_vote_at_coordinate_is_duplicate(self, store, session):
        """The unique constraint rejects a second vote without overwriting."""
        store.record_vote(vote(session, 0, 0, Choice.A))
        assert store.record_vote(vote(session, 0, 0, Choice.B)) is VoteOutcome.DUPLICATE
        rows = models.VoteRecord.objects.filter(session_id=session.id.value)
        assert rows.count() == 1
        assert rows.get().choice == "A"

    def test_store_usable_after_duplicate(self, store, session):
        """A duplicate does not break the surrounding transaction."""
        store.record_vote(vote(session, 0, 0))
        store.record_vote(vote(session, 0, 0))
        assert store.record_vote(vote(session, 0, 1)) is VoteOutcome.RECORDED

    def test_list_votes_ordered_by_coordinate(self, store, session):
        """Votes come back in schedule order regardless of insert order."""
        store.record_vote(vote(session, 1, 0, Choice.SKIP))
        store.record_vote(vote(session, 0, 2, Choice.B))
        store.record_vote(vote(session, 0, 1))
        votes = store.list_votes(session.id)
        assert [record.coordinate for record in votes] == [
            Coordinate(0, 1),
            Coordinate(0, 2),
            Coordinate(1, 0),
        ]
        assert votes[-1].choice is Choice.SKIP

    def test_latest_vote_coordinate(self, store, session):
        """The highest coordinate is reported, not the latest insert."""
        assert store.latest_vote_coordinate(session.id) is None
        store.record_vote(vote(session, 1, 2))
        store.record_vote(vote(session, 0, 2))
        assert store.latest_vote_coordinate(session.id) == Coordinate(1, 2)

    def test_other_integrity_errors_propagate(self, store, session, monkeypatch):
        """Only a vote already stored at the coordinate counts as a duplicate."""

        def reject(**kwargs):
            raise IntegrityError("FOREIGN KEY constraint failed")

        monkeypatch.setattr(models.VoteRecord.objects, "create", reject)

        with pytest.raises(IntegrityError):
            store.record_vote(vote(session, 0, 0))
