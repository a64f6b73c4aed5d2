"""Elimination resolution strategy."""

import logging

from selection.margins import contest_candidates
from selection.models import Contest, Elimination, RankedCandidate, Resolution
from selection.strategies import register_strategy
from selection.strategies.base import ResolutionStrategy

logger = logging.getLogger(__name__)

SKIP_WINNER_ELIMINATED = "winner already eliminated"
SKIP_LOSER_ELIMINATED = "loser already eliminated"


@register_strategy
class EliminationStrategy(ResolutionStrategy):
    """Ranked pairs approximated by eliminating contest losers.

    Algorithm:
    1. Start with every candidate that appears in a contest active
    2. Walk contests strongest first. If both sides are active, eliminate
       the loser; otherwise skip the contest
    3. Stop when one candidate is left or the contests run out
    4. Rank the survivor first, then the eliminated candidates in reverse
       elimination order (last eliminated is 2nd)

    If the contests run out with several candidates still active, the
    outcome is ambiguous: the resolution carries all survivors and an empty
    ranking, and no winner.

    Complexity: O(c) for c contests.
    """

    key = "elimination"

    @property
    def name(self) -> str:
        return "Ranked Pairs (elimination)"

    @property
    def description(self) -> str:
        return "Eliminate the loser of each strongest contest between two active candidates"

    def resolve(self, contests: list[Contest]) -> Resolution:
        active = set(contest_candidates(contests))
        log: list[Elimination] = []
        skipped: list[tuple[Contest, str]] = []

        for contest in contests:
            if len(active) <= 1:
                break

            if contest.winner not in active:
                skipped.append((contest, SKIP_WINNER_ELIMINATED))
                logger.debug(
                    "Skipped: %d beats %d (%s)",
                    contest.winner, contest.loser, SKIP_WINNER_ELIMINATED,
                )
                continue
            if contest.loser not in active:
                skipped.append((contest, SKIP_LOSER_ELIMINATED))
                logger.debug(
                    "Skipped: %d beats %d (%s)",
                    contest.winner, contest.loser, SKIP_LOSER_ELIMINATED,
                )
                continue

            active.discard(contest.loser)
            log.append(Elimination(
                eliminated=contest.loser,
                eliminated_by=contest.winner,
                margin=contest.margin,
                winner_votes=contest.winner_votes,
                loser_votes=contest.loser_votes,
                remaining=len(active),
            ))
            logger.debug(
                "Eliminated: %d (beaten by %d, margin: %d), %d remaining",
                contest.loser, contest.winner, contest.margin, len(active),
            )

        survivors = tuple(sorted(active))
        if len(survivors) > 1:
            logger.warning(
                "Contests exhausted with %d candidates still active: %s",
                len(survivors), survivors,
            )
            ranking: tuple[RankedCandidate, ...] = ()
        else:
            order = list(survivors) + [e.eliminated for e in reversed(log)]
            ranking = RankedCandidate.build_ranking(order)

        return Resolution(
            strategy=self.key,
            ranking=ranking,
            survivors=survivors,
            elimination_log=tuple(log),
            skipped=tuple(skipped),
        )
