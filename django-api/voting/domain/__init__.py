from voting.domain.models import (
    FairnessMetrics,
    RankedTalk,
    SessionProgress,
    Talk,
    TalkPair,
    TalkStatistics,
    VoteOutcome,
    VoteRecord,
    VotingBatch,
    VotingResults,
    VotingSession,
    VotingState,
)
from voting.domain.value_objects import (
    Choice,
    Coordinate,
    InputFingerprint,
    TalkId,
    VotingSessionId,
)

__all__ = [
    "FairnessMetrics",
    "RankedTalk",
    "SessionProgress",
    "Talk",
    "TalkPair",
    "TalkStatistics",
    "VoteOutcome",
    "VoteRecord",
    "VotingBatch",
    "VotingResults",
    "VotingSession",
    "VotingState",
    "Choice",
    "Coordinate",
    "InputFingerprint",
    "TalkId",
    "VotingSessionId",
]
