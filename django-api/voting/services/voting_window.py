"""Time-gated voting window."""

from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime

from django.conf import settings
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from voting.domain import VotingState


def _parse(value: datetime | str | None) -> datetime | None:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        parsed = parse_datetime(value)
        if parsed is None:
            raise ValueError(f"Invalid voting window datetime: {value!r}")
    if timezone.is_naive(parsed):
        parsed = timezone.make_aware(parsed)
    return parsed


@dataclass(frozen=True)
class VotingWindow:
    """Reports whether voting is open at the current time.

    Without an opening time voting is never open.
    """

    opens: datetime | None
    closes: datetime | None
    clock: Callable[[], datetime] = timezone.now

    @classmethod
    def from_settings(cls) -> "VotingWindow":
        return cls(
            opens=_parse(settings.VOTING_OPENS),
            closes=_parse(settings.VOTING_CLOSES),
        )

    def state(self) -> VotingState:
        now = self.clock()
        if self.opens is None or now < self.opens:
            return VotingState.NOT_OPEN_YET
        if self.closes is None or now < self.closes:
            return VotingState.OPEN
        return VotingState.CLOSED
