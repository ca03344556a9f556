from voting.handlers.views import (
    VoteView,
    VotingBatchView,
    VotingResultsView,
    VotingSessionView,
)

__all__ = [
    "VoteView",
    "VotingBatchView",
    "VotingResultsView",
    "VotingSessionView",
]
