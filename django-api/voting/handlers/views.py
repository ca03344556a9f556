"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details

Protocol drift (stale client version, stale or unknown session) is answered
with a redirect to the voting page, never with an error body.
"""

import logging
from collections.abc import Mapping

from django.http import HttpResponseRedirect
from django.urls import reverse
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.permissions import AllowAny
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from voting.domain import Choice, Coordinate
from voting.domain.errors import (
    DomainError,
    ErrorCode,
    InvalidVoteError,
    RestartRequiredError,
    SessionExpiredError,
    VotingNotOpenError,
)
from voting.domain.versions import CURRENT_CLIENT_VERSION
from voting.handlers.cookies import (
    clear_session_cookie,
    read_session_token,
    set_session_cookie,
)
from voting.handlers.serializers import (
    BatchQuerySerializer,
    RankedTalkSerializer,
    TalkPairSerializer,
    VoteFormSerializer,
    VoteRangeSerializer,
    coordinate_data,
)
from voting.services import factory

logger = logging.getLogger(__name__)

ERROR_STATUS = {
    ErrorCode.VOTING_NOT_OPEN: status.HTTP_403_FORBIDDEN,
    ErrorCode.NO_VOTING_SESSION: status.HTTP_401_UNAUTHORIZED,
    ErrorCode.INVALID_VOTE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.INVALID_COORDINATE: status.HTTP_400_BAD_REQUEST,
    ErrorCode.DUPLICATE_VOTE: status.HTTP_409_CONFLICT,
    ErrorCode.NO_TALKS_AVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorCode.TALK_SOURCE_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
}


def error_body(exc: DomainError) -> dict:
    body: dict = {"error": exc.message}
    if isinstance(exc, VotingNotOpenError):
        body["state"] = exc.state
    elif exc.code is ErrorCode.NO_VOTING_SESSION:
        body["needsSession"] = True
    elif exc.code is ErrorCode.DUPLICATE_VOTE:
        body["duplicate"] = True
    return body


class VotingAPIView(APIView):
    """Base view: anonymous access and domain error mapping."""

    authentication_classes = []
    permission_classes = [AllowAny]
    failure_message = "Request failed"

    def handle_exception(self, exc: Exception):
        if isinstance(exc, RestartRequiredError):
            logger.info("Restarting voting client: %s", exc)
            response = HttpResponseRedirect(reverse("voting-session"))
            if isinstance(exc, SessionExpiredError):
                clear_session_cookie(response)
            return response
        if isinstance(exc, DomainError):
            return Response(error_body(exc), status=ERROR_STATUS[exc.code])
        if isinstance(exc, APIException):
            return super().handle_exception(exc)
        logger.exception("Unhandled error in %s", type(self).__name__)
        return Response(
            {"error": self.failure_message},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )


class VotingSessionView(VotingAPIView):
    """Handler for GET /voting

    Bootstraps the voter: reuses a current session or starts a new one and
    sets its cookie.
    """

    failure_message = "Failed to start voting session"

    def get(self, request: Request) -> Response:
        service = factory.build_voting_service()
        state = service.ensure_voting_open()
        progress = service.get_or_create_session(read_session_token(request))

        response = Response(
            {
                "sessionId": str(progress.session.id),
                "created": progress.created,
                "progress": coordinate_data(progress.next_coordinate),
                "votesRecorded": progress.votes_recorded,
                "totalPairs": progress.total_pairs,
                "roundCount": progress.round_count,
                "pairsPerRound": progress.pairs_per_round,
                "votingState": state.value,
                "clientVersion": CURRENT_CLIENT_VERSION.value,
            }
        )
        if progress.created:
            set_session_cookie(response, progress.session.id)
        return response


class VotingBatchView(VotingAPIView):
    """Handler for GET /api/voting/batch"""

    failure_message = "Failed to fetch voting batch"

    def get(self, request: Request) -> Response:
        service = factory.build_voting_service()
        state = service.ensure_voting_open()
        service.check_client_version(request.query_params.get("clientVersion"))

        query = BatchQuerySerializer(data=request.query_params)
        if not query.is_valid():
            raise InvalidVoteError("Invalid batch parameters")

        batch = service.get_batch(read_session_token(request), query.start, query.batch_size)
        pairs = TalkPairSerializer(batch.pairs, many=True, context={"talks": batch.talks})
        return Response(
            {
                "batch": pairs.data,
                "next": coordinate_data(batch.next_coordinate),
                "hasMore": batch.has_more,
                "sessionId": str(batch.session_id),
                "votingState": state.value,
            }
        )


class VoteView(VotingAPIView):
    """Handler for POST /api/voting/vote"""

    failure_message = "Failed to record vote"

    def post(self, request: Request) -> Response:
        service = factory.build_voting_service()
        service.ensure_voting_open()
        if not isinstance(request.data, Mapping):
            raise InvalidVoteError()
        service.check_client_version(request.data.get("clientVersion"))

        form = VoteFormSerializer(data=request.data)
        if not form.is_valid():
            raise InvalidVoteError()
        ranges = VoteRangeSerializer(data=form.validated_data)
        if not ranges.is_valid():
            raise InvalidVoteError("Vote position out of range")

        coordinate = Coordinate(
            ranges.validated_data["roundNumber"], ranges.validated_data["indexInRound"]
        )
        next_coordinate = service.record_vote(
            read_session_token(request),
            coordinate,
            Choice.from_string(form.validated_data["vote"]),
        )
        return Response(
            {
                "success": True,
                "roundNumber": coordinate.round_number,
                "indexInRound": coordinate.index_in_round,
                "progress": coordinate_data(next_coordinate),
            }
        )


class VotingResultsView(VotingAPIView):
    """Handler for GET /api/voting/results"""

    failure_message = "Failed to calculate results"

    def get(self, request: Request) -> Response:
        service = factory.build_voting_service()
        results = service.get_results(read_session_token(request))
        return Response(
            {
                "results": RankedTalkSerializer(results.ranking, many=True).data,
                "totalVotes": results.total_votes,
            }
        )
