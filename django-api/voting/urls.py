from django.urls import path

from voting.handlers import VoteView, VotingBatchView, VotingResultsView, VotingSessionView

urlpatterns = [
    path("voting", VotingSessionView.as_view(), name="voting-session"),
    path("api/voting/batch", VotingBatchView.as_view(), name="voting-batch"),
    path("api/voting/vote", VoteView.as_view(), name="voting-vote"),
    path("api/voting/results", VotingResultsView.as_view(), name="voting-results"),
]
