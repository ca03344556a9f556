"""Domain error codes for the voting module."""

from dataclasses import dataclass
from enum import Enum


class ErrorCode(Enum):
    """Domain error codes."""

    VOTING_NOT_OPEN = "VOTING_NOT_OPEN"
    CLIENT_VERSION_MISMATCH = "CLIENT_VERSION_MISMATCH"
    SESSION_EXPIRED = "SESSION_EXPIRED"
    NO_VOTING_SESSION = "NO_VOTING_SESSION"
    INVALID_VOTE = "INVALID_VOTE"
    INVALID_COORDINATE = "INVALID_COORDINATE"
    DUPLICATE_VOTE = "DUPLICATE_VOTE"
    NO_TALKS_AVAILABLE = "NO_TALKS_AVAILABLE"
    TALK_SOURCE_UNAVAILABLE = "TALK_SOURCE_UNAVAILABLE"


@dataclass(frozen=True)
class DomainError(Exception):
    """Base domain error with code and user-safe message."""

    code: ErrorCode
    message: str

    def __str__(self) -> str:
        return f"{self.code.value}: {self.message}"


class RestartRequiredError(DomainError):
    """Protocol drift: the client must drop its state and reload the voting page."""


class VotingNotOpenError(DomainError):
    """Raised when the voting window is not open."""

    def __init__(self, state: str) -> None:
        message = "Voting not open yet" if state == "not-open-yet" else "Voting has closed"
        super().__init__(code=ErrorCode.VOTING_NOT_OPEN, message=message)
        self.state = state


class ClientVersionMismatchError(RestartRequiredError):
    """Raised when the client sends a missing or outdated protocol version."""

    def __init__(self, received: str | None) -> None:
        super().__init__(
            code=ErrorCode.CLIENT_VERSION_MISMATCH,
            message="Client version is out of date",
        )
        self.received = received


class SessionExpiredError(RestartRequiredError):
    """Raised when a session is unknown or was built against stale input."""

    def __init__(self, session_id: str, reason: str) -> None:
        super().__init__(
            code=ErrorCode.SESSION_EXPIRED,
            message="Voting session has expired",
        )
        self.session_id = session_id
        self.reason = reason


class NoVotingSessionError(DomainError):
    """Raised when a request carries no voting session."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_VOTING_SESSION,
            message="No voting session",
        )


class InvalidVoteError(DomainError):
    """Raised when vote or batch parameters are malformed."""

    def __init__(self, detail: str = "Invalid vote data") -> None:
        super().__init__(code=ErrorCode.INVALID_VOTE, message=detail)


class InvalidCoordinateError(DomainError):
    """Raised when a coordinate does not address a pair in the schedule."""

    def __init__(self, round_number: int, index_in_round: int) -> None:
        super().__init__(
            code=ErrorCode.INVALID_COORDINATE,
            message="No pair at the requested position",
        )
        self.round_number = round_number
        self.index_in_round = index_in_round


class DuplicateVoteError(DomainError):
    """Raised when a vote already exists at a coordinate."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.DUPLICATE_VOTE,
            message="Already voted on this pair",
        )


class NoTalksAvailableError(DomainError):
    """Raised when the talk source returns nothing to vote on."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.NO_TALKS_AVAILABLE,
            message="No talks available for voting",
        )


class TalkSourceError(DomainError):
    """Raised when the upstream talk source cannot be read."""

    def __init__(self) -> None:
        super().__init__(
            code=ErrorCode.TALK_SOURCE_UNAVAILABLE,
            message="Talk submissions are temporarily unavailable",
        )
