"""Voting service - all business logic lives here.

Services:
- Depend only on interfaces (stores, talk sources)
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

Every operation takes the voter's session token explicitly; nothing is read
from ambient request state.
"""

import logging
import secrets
import uuid
from collections.abc import Callable

from django.utils import timezone

from voting.domain import (
    Choice,
    Coordinate,
    InputFingerprint,
    SessionProgress,
    Talk,
    TalkStatistics,
    VoteOutcome,
    VoteRecord,
    VotingBatch,
    VotingResults,
    VotingSession,
    VotingSessionId,
    VotingState,
)
from voting.domain.errors import (
    ClientVersionMismatchError,
    DuplicateVoteError,
    InvalidCoordinateError,
    NoTalksAvailableError,
    NoVotingSessionError,
    SessionExpiredError,
    VotingNotOpenError,
)
from voting.domain.pairing import PairingSchedule
from voting.domain.ranking import collect_talk_statistics, tally_session
from voting.domain.versions import (
    CURRENT_CLIENT_VERSION,
    CURRENT_SESSION_VERSION,
    CURRENT_VOTE_VERSION,
    parse_client_version,
)
from voting.services.voting_window import VotingWindow
from voting.sources.interfaces import TalkSource
from voting.stores.interfaces import VotingStore

logger = logging.getLogger(__name__)


def _parse_token(token: str | None) -> VotingSessionId | None:
    if not token:
        return None
    try:
        return VotingSessionId.from_string(token)
    except ValueError:
        return None


def fingerprint_of(talks: list[Talk]) -> InputFingerprint:
    return InputFingerprint(tuple(talk.id for talk in talks))


class VotingService:
    """Service for pairwise talk voting."""

    def __init__(
        self,
        store: VotingStore,
        talk_source: TalkSource,
        window: VotingWindow,
        seed_factory: Callable[[], int] = lambda: secrets.randbits(32),
    ) -> None:
        self._store = store
        self._talk_source = talk_source
        self._window = window
        self._seed_factory = seed_factory

    def voting_state(self) -> VotingState:
        return self._window.state()

    def ensure_voting_open(self) -> VotingState:
        """Return the open state.

        Raises:
            VotingNotOpenError: If voting has not opened yet or has closed.
        """
        state = self._window.state()
        if state is not VotingState.OPEN:
            raise VotingNotOpenError(state.value)
        return state

    def check_client_version(self, value: str | None) -> None:
        """Compare the client's declared protocol version with ours.

        Raises:
            ClientVersionMismatchError: If the version is missing or not current.
        """
        if parse_client_version(value) is not CURRENT_CLIENT_VERSION:
            raise ClientVersionMismatchError(value)

    def get_session(self, session_id: VotingSessionId) -> VotingSession | None:
        return self._store.get_session(session_id)

    def get_or_create_session(self, token: str | None) -> SessionProgress:
        """Return the voter's session, replacing it when missing or stale.

        A replaced session means the caller must issue a new cookie and the
        client must discard any progress it holds.

        Raises:
            NoTalksAvailableError: If there is nothing to vote on.
            TalkSourceError: If the talk source cannot be read.
        """
        talks = self._talk_source.list_talks()
        fingerprint = fingerprint_of(talks)

        session = self._current_session_or_none(_parse_token(token), fingerprint)
        created = session is None
        if session is None:
            if not talks:
                raise NoTalksAvailableError()
            session = VotingSession(
                id=VotingSessionId(uuid.uuid4()),
                seed=self._seed_factory(),
                version=CURRENT_SESSION_VERSION,
                fingerprint=fingerprint,
                created_at=timezone.now(),
            )
            self._store.create_session(session)
            logger.info(
                "Created voting session %s over %d talks", session.id, len(talks)
            )

        schedule = PairingSchedule.for_fingerprint(
            session.fingerprint, session.seed, session.version
        )
        return SessionProgress(
            session=session,
            created=created,
            next_coordinate=self._next_coordinate(session, schedule),
            round_count=schedule.round_count,
            pairs_per_round=schedule.pairs_per_round,
            total_pairs=schedule.total_pairs,
            votes_recorded=len(self._store.list_votes(session.id)),
        )

    def get_batch(self, token: str | None, start: Coordinate, size: int) -> VotingBatch:
        """Return up to ``size`` pairs starting at ``start``.

        A start past the final pair yields an empty batch.

        Raises:
            NoVotingSessionError: If no session token was supplied.
            SessionExpiredError: If the session is unknown or stale.
            InvalidCoordinateError: If ``start`` points past the end of a round
                that is not the last one.
            TalkSourceError: If the talk source cannot be read.
        """
        session_id = self._require_token(token)
        talks = self._talk_source.list_talks()
        fingerprint = fingerprint_of(talks)
        session = self._require_current_session(session_id, token, fingerprint)

        schedule = PairingSchedule.for_fingerprint(
            session.fingerprint, session.seed, session.version
        )
        if not schedule.contains(start) and not schedule.is_past_end(start):
            raise InvalidCoordinateError(start.round_number, start.index_in_round)

        pairs, next_coordinate = schedule.pairs_from(start, size)
        return VotingBatch(
            session_id=session.id,
            pairs=tuple(pairs),
            next_coordinate=next_coordinate,
            talks={talk.id: talk for talk in talks},
        )

    def record_vote(
        self, token: str | None, coordinate: Coordinate, choice: Choice
    ) -> Coordinate | None:
        """Record one vote and return the coordinate the voter should go to next.

        Raises:
            NoVotingSessionError: If no session token was supplied.
            SessionExpiredError: If the session is unknown or from an old version.
            InvalidCoordinateError: If the coordinate is not in the session's schedule.
            DuplicateVoteError: If a vote already exists at the coordinate.
        """
        session_id = self._require_token(token)
        session = self._store.get_session(session_id)
        if session is None:
            raise SessionExpiredError(str(session_id), "unknown")
        if session.version != CURRENT_SESSION_VERSION:
            raise SessionExpiredError(str(session_id), "version")

        schedule = PairingSchedule.for_fingerprint(
            session.fingerprint, session.seed, session.version
        )
        if not schedule.contains(coordinate):
            raise InvalidCoordinateError(coordinate.round_number, coordinate.index_in_round)

        outcome = self._store.record_vote(
            VoteRecord(
                session_id=session.id,
                coordinate=coordinate,
                choice=choice,
                version=CURRENT_VOTE_VERSION,
                created_at=timezone.now(),
            )
        )
        if outcome is VoteOutcome.DUPLICATE:
            raise DuplicateVoteError()
        return self._next_coordinate(session, schedule)

    def get_results(self, token: str | None) -> VotingResults:
        """Rank the talks by the votes recorded in one session.

        Raises:
            NoVotingSessionError: If the token is missing or unknown.
            TalkSourceError: If the talk source cannot be read.
        """
        session_id = self._require_token(token)
        session = self._store.get_session(session_id)
        if session is None:
            raise NoVotingSessionError()
        return tally_session(
            session,
            self._talk_source.list_talks(),
            self._store.list_votes(session.id),
        )

    def collect_statistics(self) -> list[TalkStatistics]:
        """Seen/for/against/skipped counters per talk across every session."""
        sessions = self._store.list_sessions()
        return collect_talk_statistics(
            ((session, self._store.list_votes(session.id)) for session in sessions),
            self._talk_source.list_talks(),
        )

    def count_sessions(self) -> int:
        return self._store.count_sessions()

    def count_outdated_sessions(self) -> int:
        """Sessions from other algorithm versions, left out of the statistics."""
        return sum(
            1
            for session in self._store.list_sessions()
            if session.version != CURRENT_SESSION_VERSION
        )

    def _require_token(self, token: str | None) -> VotingSessionId:
        if not token:
            raise NoVotingSessionError()
        session_id = _parse_token(token)
        if session_id is None:
            raise SessionExpiredError(token, "malformed")
        return session_id

    def _require_current_session(
        self, session_id: VotingSessionId, token: str, fingerprint: InputFingerprint
    ) -> VotingSession:
        session = self._store.get_session(session_id)
        if session is None:
            raise SessionExpiredError(token, "unknown")
        if session.version != CURRENT_SESSION_VERSION:
            logger.warning(
                "Session %s uses version %s, resetting", session.id, session.version
            )
            raise SessionExpiredError(token, "version")
        if session.fingerprint != fingerprint:
            logger.warning(
                "Talks changed since session %s started, resetting", session.id
            )
            raise SessionExpiredError(token, "fingerprint")
        return session

    def _current_session_or_none(
        self, session_id: VotingSessionId | None, fingerprint: InputFingerprint
    ) -> VotingSession | None:
        if session_id is None:
            return None
        try:
            return self._require_current_session(session_id, str(session_id), fingerprint)
        except SessionExpiredError as exc:
            logger.info("Replacing voting session %s (%s)", exc.session_id, exc.reason)
            return None

    def _next_coordinate(
        self, session: VotingSession, schedule: PairingSchedule
    ) -> Coordinate | None:
        latest = self._store.latest_vote_coordinate(session.id)
        if latest is None:
            return Coordinate(0, 0) if schedule.total_pairs else None
        return schedule.next_coordinate(latest)
