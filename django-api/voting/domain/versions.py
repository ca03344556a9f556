"""Protocol and structure versions shared by the API contract and validation.

Bump these together with the code that depends on them; a bump invalidates
every session or client built against the previous value.
"""

from enum import Enum


class ClientVersion(Enum):
    """Client/server API contract versions."""

    V4 = "v4"


# Version the front end must send with every batch and vote request.
CURRENT_CLIENT_VERSION = ClientVersion.V4

# Session structure version. Doubles as the pairing algorithm version.
CURRENT_SESSION_VERSION = 4

# Vote record structure version.
CURRENT_VOTE_VERSION = 2


def parse_client_version(value: str | None) -> ClientVersion | None:
    """Return the matching ClientVersion, or None for missing/unknown values."""
    if not value:
        return None
    try:
        return ClientVersion(value)
    except ValueError:
        return None
