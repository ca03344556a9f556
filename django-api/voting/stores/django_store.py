"""Django ORM implementation of the VotingStore."""

import logging

from django.db import IntegrityError, transaction

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
from voting.stores.interfaces import VotingStore

logger = logging.getLogger(__name__)


def _to_session(row: models.VotingSession) -> VotingSession:
    return VotingSession(
        id=VotingSessionId(row.id),
        seed=row.seed,
        version=row.version,
        fingerprint=InputFingerprint.from_strings(row.talk_ids),
        created_at=row.created_at,
    )


def _to_vote(row: models.VoteRecord) -> VoteRecord:
    return VoteRecord(
        session_id=VotingSessionId(row.session_id),
        coordinate=Coordinate(row.round_number, row.index_in_round),
        choice=Choice.from_string(row.choice),
        version=row.version,
        created_at=row.created_at,
    )


class DjangoVotingStore(VotingStore):
    """Relational voting store using Django ORM.

    Vote idempotence relies on the unique_vote_per_coordinate constraint.
    """

    def get_session(self, session_id: VotingSessionId) -> VotingSession | None:
        row = models.VotingSession.objects.filter(pk=session_id.value).first()
        return _to_session(row) if row else None

    def create_session(self, session: VotingSession) -> None:
        models.VotingSession.objects.create(
            id=session.id.value,
            seed=session.seed,
            version=session.version,
            talk_ids=[talk_id.value for talk_id in session.fingerprint.talk_ids],
            fingerprint=session.fingerprint.digest,
        )

    def list_sessions(self) -> list[VotingSession]:
        return [_to_session(row) for row in models.VotingSession.objects.all()]

    def count_sessions(self) -> int:
        return models.VotingSession.objects.count()

    def record_vote(self, vote: VoteRecord) -> VoteOutcome:
        try:
            with transaction.atomic():
                models.VoteRecord.objects.create(
                    session_id=vote.session_id.value,
                    round_number=vote.coordinate.round_number,
                    index_in_round=vote.coordinate.index_in_round,
                    choice=vote.choice.value,
                    version=vote.version,
                )
        except IntegrityError:
            existing = models.VoteRecord.objects.filter(
                session_id=vote.session_id.value,
                round_number=vote.coordinate.round_number,
                index_in_round=vote.coordinate.index_in_round,
            )
            if not existing.exists():
                raise
            logger.debug(
                "Duplicate vote for session %s at %s",
                vote.session_id,
                vote.coordinate,
            )
            return VoteOutcome.DUPLICATE
        return VoteOutcome.RECORDED

    def list_votes(self, session_id: VotingSessionId) -> list[VoteRecord]:
        rows = models.VoteRecord.objects.filter(session_id=session_id.value)
        return [_to_vote(row) for row in rows]

    def latest_vote_coordinate(self, session_id: VotingSessionId) -> Coordinate | None:
        row = (
            models.VoteRecord.objects.filter(session_id=session_id.value)
            .order_by("-round_number", "-index_in_round")
            .first()
        )
        return Coordinate(row.round_number, row.index_in_round) if row else None
