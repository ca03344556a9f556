"""Round-robin pairing schedule for pairwise talk voting.

The schedule is a circle-method round robin (Berger tables) over a
deterministically shuffled talk order:

- The talk ids are shuffled with a PRNG seeded from the algorithm version,
  the session seed and the input fingerprint, so the same session always
  rebuilds the same schedule and nothing but the seed needs persisting.
- With an odd number of talks a bye slot is added. Whoever faces the bye
  sits out that round; the bye rotates with the circle, so every talk sits
  out exactly once over the whole schedule.
- Slot 0 stays fixed and the remaining slots rotate by one per round. Pair k
  of a round matches slot k with slot (m - 1 - k), m being the slot count.
- Left/right placement flips on odd rounds, so the fixed talk alternates
  sides and the others switch sides as they rotate through the circle.

Every unordered pair of talks appears exactly once, no talk appears twice in
a round, and every round holds talk_count // 2 pairs.
"""

import hashlib
import random
from collections.abc import Sequence
from functools import cached_property

from voting.domain.models import TalkPair
from voting.domain.value_objects import Coordinate, InputFingerprint, TalkId
from voting.domain.versions import CURRENT_SESSION_VERSION


class PairingSchedule:
    """Deterministic sequence of rounds of talk pairs."""

    def __init__(
        self,
        talk_ids: Sequence[TalkId],
        seed: int,
        version: int = CURRENT_SESSION_VERSION,
    ) -> None:
        if len(set(talk_ids)) != len(talk_ids):
            raise ValueError("Talk ids must be unique")
        self._talk_ids = tuple(talk_ids)
        self._seed = seed
        self._version = version

    @classmethod
    def for_fingerprint(
        cls, fingerprint: InputFingerprint, seed: int, version: int = CURRENT_SESSION_VERSION
    ) -> "PairingSchedule":
        return cls(fingerprint.talk_ids, seed, version)

    @property
    def talk_count(self) -> int:
        return len(self._talk_ids)

    @property
    def pairs_per_round(self) -> int:
        return self.talk_count // 2

    @property
    def round_count(self) -> int:
        if self.talk_count < 2:
            return 0
        slots = self.talk_count + self.talk_count % 2
        return slots - 1

    @property
    def total_pairs(self) -> int:
        return self.round_count * self.pairs_per_round

    def contains(self, coordinate: Coordinate) -> bool:
        return (
            coordinate.round_number < self.round_count
            and coordinate.index_in_round < self.pairs_per_round
        )

    def pair_at(self, coordinate: Coordinate) -> TalkPair | None:
        """Return the pair at a coordinate, or None if it is outside the schedule."""
        if not self.contains(coordinate):
            return None
        return self.rounds()[coordinate.round_number][coordinate.index_in_round]

    def is_past_end(self, coordinate: Coordinate) -> bool:
        """True when the coordinate sorts after the final pair."""
        last_round = self.round_count - 1
        return coordinate.round_number > last_round or (
            coordinate.round_number == last_round
            and coordinate.index_in_round >= self.pairs_per_round
        )

    def next_coordinate(self, coordinate: Coordinate) -> Coordinate | None:
        """Return the coordinate after this one, crossing round boundaries."""
        if coordinate.index_in_round + 1 < self.pairs_per_round:
            following = Coordinate(coordinate.round_number, coordinate.index_in_round + 1)
        else:
            following = Coordinate(coordinate.round_number + 1, 0)
        return following if self.contains(following) else None

    def pairs_from(self, start: Coordinate, size: int) -> tuple[list[TalkPair], Coordinate | None]:
        """Return up to ``size`` pairs from ``start`` and the coordinate to resume at.

        A start past the final pair yields no pairs. Any other start must lie
        inside a round; callers validate that before asking.
        """
        pairs: list[TalkPair] = []
        cursor: Coordinate | None = start if self.contains(start) else None
        while cursor is not None and len(pairs) < size:
            pairs.append(self.rounds()[cursor.round_number][cursor.index_in_round])
            cursor = self.next_coordinate(cursor)
        return pairs, cursor

    def rounds(self) -> list[list[TalkPair]]:
        return self._rounds

    @cached_property
    def _rounds(self) -> list[list[TalkPair]]:
        if self.round_count == 0:
            return []
        slots: list[TalkId | None] = list(self._shuffled_talk_ids())
        if len(slots) % 2:
            slots.append(None)

        fixed, rotating = slots[0], slots[1:]
        rounds: list[list[TalkPair]] = []
        for round_number in range(self.round_count):
            shift = round_number % len(rotating)
            arrangement = [fixed] + rotating[shift:] + rotating[:shift]
            pairs: list[TalkPair] = []
            for k in range(len(arrangement) // 2):
                first, second = arrangement[k], arrangement[-1 - k]
                if first is None or second is None:
                    continue
                if round_number % 2:
                    first, second = second, first
                pairs.append(
                    TalkPair(
                        coordinate=Coordinate(round_number, len(pairs)),
                        left=first,
                        right=second,
                    )
                )
            rounds.append(pairs)
        return rounds

    def _shuffled_talk_ids(self) -> list[TalkId]:
        fingerprint = InputFingerprint(self._talk_ids)
        material = f"{self._version}:{self._seed}:{fingerprint.digest}".encode("utf-8")
        derived_seed = int.from_bytes(hashlib.sha256(material).digest()[:8], "big")
        talk_ids = list(self._talk_ids)
        random.Random(derived_seed).shuffle(talk_ids)
        return talk_ids
