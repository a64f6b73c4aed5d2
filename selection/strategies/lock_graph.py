"""Lock-graph (ranked pairs) resolution strategy."""

import logging

from selection.graph import PreferenceGraph
from selection.margins import contest_candidates
from selection.models import Contest, RankedCandidate, Resolution
from selection.strategies import register_strategy
from selection.strategies.base import ResolutionStrategy

logger = logging.getLogger(__name__)

SKIP_CYCLE = "would create cycle"


@register_strategy
class LockGraphStrategy(ResolutionStrategy):
    """Tideman's ranked pairs.

    Algorithm:
    1. Walk contests strongest first
    2. Lock winner → loser unless the loser can already reach the winner
       over locked edges (locking it would close a cycle); skipped contests
       are never revisited
    3. Rank candidates by topological order of the locked graph, taking the
       lowest id first whenever several candidates are unbeaten

    A Condorcet winner never receives an incoming locked edge, so it is
    always ranked first.

    Complexity: O(c · n²) for c contests and n candidates.
    """

    key = "lock_graph"

    @property
    def name(self) -> str:
        return "Ranked Pairs (lock graph)"

    @property
    def description(self) -> str:
        return "Lock the strongest pairwise defeats that do not create a cycle, then sort"

    def resolve(self, contests: list[Contest]) -> Resolution:
        graph = PreferenceGraph(contest_candidates(contests))
        locked: list[tuple[int, int]] = []
        skipped: list[tuple[Contest, str]] = []

        for contest in contests:
            if graph.would_create_cycle(contest.winner, contest.loser):
                skipped.append((contest, SKIP_CYCLE))
                logger.debug(
                    "Skipped: %d beats %d (%s)", contest.winner, contest.loser, SKIP_CYCLE
                )
                continue
            graph.add_edge(contest.winner, contest.loser)
            locked.append((contest.winner, contest.loser))
            logger.debug(
                "Locked: %d beats %d (margin: %d)",
                contest.winner, contest.loser, contest.margin,
            )

        order = graph.topological_order()
        logger.info("Locked %d pairs, skipped %d", len(locked), len(skipped))

        return Resolution(
            strategy=self.key,
            ranking=RankedCandidate.build_ranking(order),
            locked_edges=tuple(locked),
            skipped=tuple(skipped),
        )
