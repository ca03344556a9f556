"""Talk source interface.

The talk source is the canonical, read-only list of submissions to vote on.
"""

from abc import ABC, abstractmethod

from voting.domain import Talk


class TalkSource(ABC):
    """Interface for fetching talk submissions."""

    @abstractmethod
    def list_talks(self) -> list[Talk]:
        """Return the votable talks sorted by id.

        Raises:
            TalkSourceError: If the upstream source cannot be read.
        """
        ...
