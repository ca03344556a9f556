"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod

from voting.domain import (
    Coordinate,
    VoteOutcome,
    VoteRecord,
    VotingSession,
    VotingSessionId,
)


class VotingStore(ABC):
    """Interface for voting session and vote record persistence."""

    @abstractmethod
    def get_session(self, session_id: VotingSessionId) -> VotingSession | None:
        """Return a session by ID, or None if not found."""
        ...

    @abstractmethod
    def create_session(self, session: VotingSession) -> None:
        """Persist a new session."""
        ...

    @abstractmethod
    def list_sessions(self) -> list[VotingSession]:
        """Return all sessions ordered by created_at ascending."""
        ...

    @abstractmethod
    def count_sessions(self) -> int:
        """Return the number of sessions ever created."""
        ...

    @abstractmethod
    def record_vote(self, vote: VoteRecord) -> VoteOutcome:
        """Insert a vote unless one exists at the same (session, coordinate).

        The existence check and insert must be a single atomic operation.
        """
        ...

    @abstractmethod
    def list_votes(self, session_id: VotingSessionId) -> list[VoteRecord]:
        """Return a session's votes ordered by coordinate."""
        ...

    @abstractmethod
    def latest_vote_coordinate(self, session_id: VotingSessionId) -> Coordinate | None:
        """Return the highest coordinate voted on in a session, if any."""
        ...
