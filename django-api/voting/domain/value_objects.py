"""Domain primitives that enforce validity at creation time."""

import hashlib
from dataclasses import dataclass, field
from enum import Enum
from functools import total_ordering
from typing import Self
from uuid import UUID


@dataclass(frozen=True)
class VotingSessionId:
    """Opaque identifier for an anonymous voting session."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class TalkId:
    """Identifier of a talk submission in the upstream source."""

    value: str

    def __post_init__(self) -> None:
        if not self.value:
            raise ValueError("TalkId cannot be empty")

    def __str__(self) -> str:
        return self.value


class Choice(Enum):
    """A voter's decision on a pair."""

    A = "A"
    B = "B"
    SKIP = "skip"

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value)


@total_ordering
@dataclass(frozen=True)
class Coordinate:
    """Position of a pair in a schedule: (round, index in round)."""

    round_number: int
    index_in_round: int

    def __post_init__(self) -> None:
        if self.round_number < 0:
            raise ValueError("Round number cannot be negative")
        if self.index_in_round < 0:
            raise ValueError("Index in round cannot be negative")

    def __lt__(self, other: "Coordinate") -> bool:
        return (self.round_number, self.index_in_round) < (
            other.round_number,
            other.index_in_round,
        )


@dataclass(frozen=True)
class InputFingerprint:
    """Snapshot of the talk set a session was built against.

    Holds the ordered talk ids; equality is decided by the digest alone.
    """

    talk_ids: tuple[TalkId, ...]
    digest: str = field(init=False, repr=False)

    def __post_init__(self) -> None:
        joined = "\n".join(talk_id.value for talk_id in self.talk_ids)
        object.__setattr__(
            self, "digest", hashlib.sha256(joined.encode("utf-8")).hexdigest()
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, InputFingerprint):
            return NotImplemented
        return self.digest == other.digest

    def __hash__(self) -> int:
        return hash(self.digest)

    def __len__(self) -> int:
        return len(self.talk_ids)

    @classmethod
    def from_strings(cls, values: list[str]) -> Self:
        return cls(talk_ids=tuple(TalkId(value) for value in values))
