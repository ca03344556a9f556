"""Domain models representing persisted state.

These are pure domain objects with no API input rules.
Django ORM models are in voting/models.py (persistence layer).
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from voting.domain.value_objects import (
    Choice,
    Coordinate,
    InputFingerprint,
    TalkId,
    VotingSessionId,
)


@dataclass(frozen=True)
class Talk:
    """A talk submission as published by the talk source."""

    id: TalkId
    title: str
    description: str | None = None
    speakers: tuple[str, ...] = ()
    tags: tuple[str, ...] = ()

    @classmethod
    def placeholder(cls, talk_id: TalkId) -> "Talk":
        """Stand-in for a talk that is no longer published upstream."""
        return cls(id=talk_id, title=f"Withdrawn talk {talk_id}")


@dataclass(frozen=True)
class TalkPair:
    """Two talks to compare, addressed by their schedule coordinate."""

    coordinate: Coordinate
    left: TalkId
    right: TalkId

    def __post_init__(self) -> None:
        if self.left == self.right:
            raise ValueError("A talk cannot be paired with itself")

    def winner(self, choice: Choice) -> TalkId | None:
        if choice is Choice.A:
            return self.left
        if choice is Choice.B:
            return self.right
        return None

    def loser(self, choice: Choice) -> TalkId | None:
        if choice is Choice.A:
            return self.right
        if choice is Choice.B:
            return self.left
        return None


@dataclass(frozen=True)
class VotingSession:
    """Domain representation of an anonymous voter's session."""

    id: VotingSessionId
    seed: int
    version: int
    fingerprint: InputFingerprint
    created_at: datetime


@dataclass(frozen=True)
class VoteRecord:
    """A single recorded vote on one coordinate of a session's schedule."""

    session_id: VotingSessionId
    coordinate: Coordinate
    choice: Choice
    version: int
    created_at: datetime


class VoteOutcome(Enum):
    """Result of attempting to record a vote."""

    RECORDED = "recorded"
    DUPLICATE = "duplicate"


class VotingState(Enum):
    """Whether the voting window is open."""

    NOT_OPEN_YET = "not-open-yet"
    OPEN = "open"
    CLOSED = "closed"


@dataclass(frozen=True)
class VotingBatch:
    """A slice of a session's schedule starting at a requested coordinate."""

    session_id: VotingSessionId
    pairs: tuple[TalkPair, ...]
    next_coordinate: Coordinate | None
    talks: dict[TalkId, Talk]

    @property
    def has_more(self) -> bool:
        return self.next_coordinate is not None


@dataclass(frozen=True)
class SessionProgress:
    """Where a voter should resume, derived from their recorded votes."""

    session: VotingSession
    created: bool
    next_coordinate: Coordinate | None
    round_count: int
    pairs_per_round: int
    total_pairs: int
    votes_recorded: int


@dataclass(frozen=True)
class RankedTalk:
    """A talk with its vote total in a results listing."""

    rank: int
    talk: Talk
    votes: int


@dataclass(frozen=True)
class VotingResults:
    """Per-talk totals for a session, highest first."""

    ranking: tuple[RankedTalk, ...]
    total_votes: int


@dataclass
class TalkStatistics:
    """Running per-talk counters across every voting session."""

    talk: Talk
    times_seen: int = 0
    times_voted_for: int = 0
    times_voted_against: int = 0
    times_skipped: int = 0


@dataclass(frozen=True)
class FairnessMetrics:
    """How evenly talks were shown to voters.

    ``appearances`` is the times-seen count of every talk. A Gini coefficient
    of 0 means every talk appeared equally often.
    """

    total_talks: int
    mean_appearances: float
    standard_deviation: float
    coefficient_of_variation: float
    gini_coefficient: float
    min_appearances: int
    max_appearances: int
    range: int
    chi_square_statistic: float
    is_distribution_uniform: bool
