"""Unit tests for vote aggregation.

Run with: pytest tests/test_ranking.py -v
"""

import uuid

import pytest
from django.utils import timezone

from tests.fakes import make_talks
from voting.domain import (
    Choice,
    Coordinate,
    InputFingerprint,
    VoteRecord,
    VotingSession,
    VotingSessionId,
)
from voting.domain.pairing import PairingSchedule
from voting.domain.ranking import (
    calculate_fairness_metrics,
    collect_talk_statistics,
    tally_session,
)
from voting.domain.versions import CURRENT_SESSION_VERSION


def make_session(talks, seed=99, version=CURRENT_SESSION_VERSION) -> VotingSession:
    return VotingSession(
        id=VotingSessionId(uuid.uuid4()),
        seed=seed,
        version=version,
        fingerprint=InputFingerprint(tuple(talk.id for talk in talks)),
        created_at=timezone.now(),
    )


def vote(session, round_number, index, choice) -> VoteRecord:
    return VoteRecord(
        session_id=session.id,
        coordinate=Coordinate(round_number, index),
        choice=choice,
        version=2,
        created_at=timezone.now(),
    )


def schedule_for(session) -> PairingSchedule:
    return PairingSchedule.for_fingerprint(session.fingerprint, session.seed, session.version)


class TestTallySession:
    """Tests for per-session results."""

    def test_no_votes_keeps_canonical_order(self):
        """Without votes every talk has zero and ties keep id order."""
        talks = make_talks(4)
        session = make_session(talks)
        results = tally_session(session, talks, [])
        assert [entry.talk for entry in results.ranking] == talks
        assert [entry.rank for entry in results.ranking] == [1, 2, 3, 4]
        assert results.total_votes == 0

    def test_choice_credits_the_chosen_side(self):
        """A credits the left talk and B the right talk."""
        talks = make_talks(4)
        session = make_session(talks)
        schedule = schedule_for(session)
        first = schedule.pair_at(Coordinate(0, 0))
        second = schedule.pair_at(Coordinate(0, 1))

        results = tally_session(
            session,
            talks,
            [vote(session, 0, 0, Choice.A), vote(session, 0, 1, Choice.B)],
        )

        votes = {entry.talk.id: entry.votes for entry in results.ranking}
        assert votes[first.left] == 1
        assert votes[first.right] == 0
        assert votes[second.right] == 1
        assert votes[second.left] == 0

    def test_totals_count_each_non_skip_vote_once(self):
        """Totals equal the number of non-skip votes."""
        talks = make_talks(6)
        session = make_session(talks)
        schedule = schedule_for(session)
        choices = [Choice.A, Choice.B, Choice.SKIP]
        votes = [
            vote(session, pair.coordinate.round_number, pair.coordinate.index_in_round, choices[n % 3])
            for n, pair in enumerate(pair for round_pairs in schedule.rounds() for pair in round_pairs)
        ]
        results = tally_session(session, talks, votes)
        non_skip = sum(1 for record in votes if record.choice is not Choice.SKIP)
        assert results.total_votes == non_skip
        assert sum(entry.votes for entry in results.ranking) == non_skip

    def test_ranking_sorted_descending(self):
        """The most chosen talk ranks first."""
        talks = make_talks(4)
        session = make_session(talks)
        schedule = schedule_for(session)
        favourite = schedule.pair_at(Coordinate(0, 0)).left
        votes = []
        for round_pairs in schedule.rounds():
            for pair in round_pairs:
                if favourite in (pair.left, pair.right):
                    choice = Choice.A if pair.left == favourite else Choice.B
                    votes.append(vote(session, pair.coordinate.round_number, pair.coordinate.index_in_round, choice))
        results = tally_session(session, talks, votes)
        assert results.ranking[0].talk.id == favourite
        assert results.ranking[0].votes == 3

    def test_withdrawn_talk_uses_placeholder(self):
        """A talk missing upstream keeps its votes under a placeholder."""
        talks = make_talks(4)
        session = make_session(talks)
        results = tally_session(session, talks[:3], [])
        withdrawn = [entry.talk for entry in results.ranking if entry.talk.id == talks[3].id]
        assert withdrawn[0].title.startswith("Withdrawn talk")

    def test_votes_outside_schedule_ignored(self):
        """Coordinates that address no pair do not count."""
        talks = make_talks(4)
        session = make_session(talks)
        results = tally_session(session, talks, [vote(session, 10, 0, Choice.A)])
        assert results.total_votes == 0


class TestCollectTalkStatistics:
    """Tests for cross-session statistics."""

    def test_counts_seen_for_against_and_skipped(self):
        """Each vote updates both talks of its pair."""
        talks = make_talks(4)
        session = make_session(talks)
        schedule = schedule_for(session)
        pair_a = schedule.pair_at(Coordinate(0, 0))
        pair_skip = schedule.pair_at(Coordinate(0, 1))

        stats = collect_talk_statistics(
            [(session, [vote(session, 0, 0, Choice.A), vote(session, 0, 1, Choice.SKIP)])],
            talks,
        )
        by_id = {entry.talk.id: entry for entry in stats}

        assert by_id[pair_a.left].times_voted_for == 1
        assert by_id[pair_a.right].times_voted_against == 1
        assert by_id[pair_skip.left].times_skipped == 1
        assert by_id[pair_skip.right].times_skipped == 1
        assert sum(entry.times_seen for entry in stats) == 4

    def test_sessions_accumulate(self):
        """Votes from several sessions add up."""
        talks = make_talks(2)
        sessions = [make_session(talks, seed=seed) for seed in (1, 2, 3)]
        stats = collect_talk_statistics(
            [(session, [vote(session, 0, 0, Choice.SKIP)]) for session in sessions],
            talks,
        )
        assert [entry.times_seen for entry in stats] == [3, 3]
        assert [entry.times_skipped for entry in stats] == [3, 3]

    def test_other_versions_ignored(self):
        """Sessions from another algorithm version are skipped."""
        talks = make_talks(2)
        session = make_session(talks, version=CURRENT_SESSION_VERSION - 1)
        stats = collect_talk_statistics([(session, [vote(session, 0, 0, Choice.A)])], talks)
        assert all(entry.times_seen == 0 for entry in stats)


class TestFairnessMetrics:
    """Tests for the appearance distribution summary."""

    def test_uniform_distribution(self):
        """Equal appearances have no spread."""
        metrics = calculate_fairness_metrics([9, 9, 9, 9])
        assert metrics.gini_coefficient == 0
        assert metrics.coefficient_of_variation == 0
        assert metrics.range == 0
        assert metrics.chi_square_statistic == 0
        assert metrics.is_distribution_uniform is True

    def test_skewed_distribution(self):
        """One talk taking every appearance is maximally unequal."""
        metrics = calculate_fairness_metrics([0, 0, 0, 4])
        assert metrics.mean_appearances == 1
        assert metrics.standard_deviation == pytest.approx(3**0.5)
        assert metrics.coefficient_of_variation == pytest.approx(3**0.5)
        assert metrics.gini_coefficient == pytest.approx(0.75)
        assert metrics.chi_square_statistic == pytest.approx(12)
        assert (metrics.min_appearances, metrics.max_appearances) == (0, 4)
        assert metrics.is_distribution_uniform is False

    def test_round_robin_is_uniform(self):
        """A full schedule shows every talk equally often."""
        talks = make_talks(7)
        session = make_session(talks)
        votes = [
            vote(session, pair.coordinate.round_number, pair.coordinate.index_in_round, Choice.A)
            for round_pairs in schedule_for(session).rounds()
            for pair in round_pairs
        ]
        stats = collect_talk_statistics([(session, votes)], talks)
        metrics = calculate_fairness_metrics([entry.times_seen for entry in stats])
        assert metrics.gini_coefficient == 0
        assert metrics.mean_appearances == 6

    def test_no_appearances(self):
        """Nothing seen yet is reported as even, not as a division error."""
        metrics = calculate_fairness_metrics([0, 0])
        assert metrics.coefficient_of_variation == 0
        assert metrics.gini_coefficient == 0

    def test_empty_rejected(self):
        """At least one talk is required."""
        with pytest.raises(ValueError):
            calculate_fairness_metrics([])
