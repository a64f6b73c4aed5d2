"""Margin ranker: decisive contests ordered by strength."""

import logging

from selection.models import Contest
from selection.tally import PairwiseTally

logger = logging.getLogger(__name__)


def contest_order(contest: Contest) -> tuple[int, int, int]:
    """Sort key: largest margin first, then lowest winner id, then lowest loser id."""
    return (-contest.margin, contest.winner, contest.loser)


def build_contests(tally: PairwiseTally, candidate_ids: list[int]) -> list[Contest]:
    """Build one contest per decisive candidate pair, strongest first.

    A pair whose two tally directions are equal (including 0-0) is not
    decisive and produces no contest.
    """
    ids = sorted(set(candidate_ids))
    contests = []
    for i, a in enumerate(ids):
        for b in ids[i + 1:]:
            a_over_b = tally.get(a, b)
            b_over_a = tally.get(b, a)
            if a_over_b == b_over_a:
                continue
            if a_over_b > b_over_a:
                winner, loser = a, b
            else:
                winner, loser = b, a
            contests.append(Contest(
                winner=winner,
                loser=loser,
                margin=abs(a_over_b - b_over_a),
                winner_votes=max(a_over_b, b_over_a),
                loser_votes=min(a_over_b, b_over_a),
            ))

    contests.sort(key=contest_order)
    logger.info("Found %d decisive pairs", len(contests))
    return contests


def contest_candidates(contests: list[Contest]) -> list[int]:
    """Candidates appearing in at least one contest, in id order."""
    return sorted({c.winner for c in contests} | {c.loser for c in contests})
