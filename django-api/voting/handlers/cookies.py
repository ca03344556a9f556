"""Voting session cookie: an httpOnly, signed cookie holding the session id."""

from django.conf import settings
from django.http import HttpRequest, HttpResponseBase

from voting.domain import VotingSessionId

COOKIE_SALT = "voting.session"
COOKIE_MAX_AGE = 60 * 60 * 24 * 30


def read_session_token(request: HttpRequest) -> str | None:
    """Return the session id from a valid cookie, or None.

    A tampered or unsigned cookie reads as absent.
    """
    return request.get_signed_cookie(
        settings.VOTING_COOKIE_NAME, default=None, salt=COOKIE_SALT
    )


def set_session_cookie(response: HttpResponseBase, session_id: VotingSessionId) -> None:
    response.set_signed_cookie(
        settings.VOTING_COOKIE_NAME,
        str(session_id),
        salt=COOKIE_SALT,
        max_age=COOKIE_MAX_AGE,
        httponly=True,
        samesite="Lax",
        secure=settings.VOTING_COOKIE_SECURE,
    )


def clear_session_cookie(response: HttpResponseBase) -> None:
    response.delete_cookie(settings.VOTING_COOKIE_NAME, samesite="Lax")
