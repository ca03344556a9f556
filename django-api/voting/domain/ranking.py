"""Vote aggregation: session rankings, talk statistics and fairness metrics."""

import statistics
from collections.abc import Iterable, Sequence

from voting.domain.models import (
    FairnessMetrics,
    RankedTalk,
    Talk,
    TalkStatistics,
    VoteRecord,
    VotingResults,
    VotingSession,
)
from voting.domain.pairing import PairingSchedule
from voting.domain.value_objects import Choice, TalkId
from voting.domain.versions import CURRENT_SESSION_VERSION


def _talks_by_id(talk_ids: Iterable[TalkId], talks: Sequence[Talk]) -> dict[TalkId, Talk]:
    known = {talk.id: talk for talk in talks}
    return {talk_id: known.get(talk_id) or Talk.placeholder(talk_id) for talk_id in talk_ids}


def tally_session(
    session: VotingSession,
    talks: Sequence[Talk],
    votes: Iterable[VoteRecord],
) -> VotingResults:
    """Count how often each talk was chosen in one session.

    Talks come from the session's fingerprint so a session keeps its results
    after the upstream list changes; current talk details are used for display
    where available. Ties keep the fingerprint (id-sorted) order.
    """
    schedule = PairingSchedule.for_fingerprint(
        session.fingerprint, session.seed, session.version
    )
    display = _talks_by_id(session.fingerprint.talk_ids, talks)
    counts = {talk_id: 0 for talk_id in session.fingerprint.talk_ids}

    for vote in votes:
        pair = schedule.pair_at(vote.coordinate)
        if pair is None:
            continue
        winner = pair.winner(vote.choice)
        if winner is not None:
            counts[winner] += 1

    order = {talk_id: position for position, talk_id in enumerate(counts)}
    ranked = sorted(counts.items(), key=lambda item: (-item[1], order[item[0]]))
    ranking = tuple(
        RankedTalk(rank=position, talk=display[talk_id], votes=count)
        for position, (talk_id, count) in enumerate(ranked, start=1)
    )
    return VotingResults(ranking=ranking, total_votes=sum(counts.values()))


def collect_talk_statistics(
    sessions: Iterable[tuple[VotingSession, Sequence[VoteRecord]]],
    talks: Sequence[Talk],
) -> list[TalkStatistics]:
    """Accumulate seen/for/against/skipped counters per talk across sessions.

    Sessions built with another algorithm version are ignored; their
    coordinates cannot be mapped back to pairs.
    """
    stats: dict[TalkId, TalkStatistics] = {
        talk.id: TalkStatistics(talk=talk) for talk in talks
    }

    for session, votes in sessions:
        if session.version != CURRENT_SESSION_VERSION:
            continue
        schedule = PairingSchedule.for_fingerprint(
            session.fingerprint, session.seed, session.version
        )
        for vote in votes:
            pair = schedule.pair_at(vote.coordinate)
            if pair is None:
                continue
            for talk_id in (pair.left, pair.right):
                if talk_id not in stats:
                    stats[talk_id] = TalkStatistics(talk=Talk.placeholder(talk_id))
                stats[talk_id].times_seen += 1
            if vote.choice is Choice.SKIP:
                stats[pair.left].times_skipped += 1
                stats[pair.right].times_skipped += 1
                continue
            stats[pair.winner(vote.choice)].times_voted_for += 1
            stats[pair.loser(vote.choice)].times_voted_against += 1

    return sorted(
        stats.values(),
        key=lambda entry: (-entry.times_voted_for, entry.talk.id.value),
    )


def calculate_fairness_metrics(appearances: Sequence[int]) -> FairnessMetrics:
    """Summarise how evenly ``appearances`` (times seen per talk) are spread.

    The chi-square check compares each count against the mean and calls the
    distribution uniform when the statistic stays below the degrees of
    freedom. It is a rough check, not a significance test.

    Raises:
        ValueError: If ``appearances`` is empty.
    """
    if not appearances:
        raise ValueError("No talks to measure")

    count = len(appearances)
    total = sum(appearances)
    mean = statistics.fmean(appearances)
    std_dev = statistics.pstdev(appearances)

    if total == 0:
        cv = gini = chi_square = 0.0
    else:
        cv = std_dev / mean
        ordered = sorted(appearances)
        gini = abs(
            sum((2 * position - count - 1) * value for position, value in enumerate(ordered, start=1))
            / (count * total)
        )
        chi_square = sum((observed - mean) ** 2 / mean for observed in appearances)

    return FairnessMetrics(
        total_talks=count,
        mean_appearances=mean,
        standard_deviation=std_dev,
        coefficient_of_variation=cv,
        gini_coefficient=gini,
        min_appearances=min(appearances),
        max_appearances=max(appearances),
        range=max(appearances) - min(appearances),
        chi_square_statistic=chi_square,
        is_distribution_uniform=chi_square < max(count - 1, 1),
    )
