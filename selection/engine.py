"""Orchestrator: tally a ballot snapshot, resolve it, and publish the result."""

import logging
import time
from typing import Callable

# Import strategies and stores to register them
from selection.strategies import elimination  # noqa: F401
from selection.strategies import lock_graph  # noqa: F401
from selection.stores import json_file  # noqa: F401
from selection.stores import http_store  # noqa: F401

from selection.assemble import assemble_result
from selection.config import SelectionConfig
from selection.crosscheck import compare_resolutions
from selection.errors import (
    AmbiguousOutcomeError,
    NoBallotsError,
    NoDecisiveContestsError,
    StrategyDivergenceError,
)
from selection.margins import build_contests
from selection.models import BallotSnapshot, Publication, SelectionResult
from selection.stores.base import BallotStore
from selection.strategies import get_strategy
from selection.tally import build_pairwise_tally

logger = logging.getLogger(__name__)


def run_selection(
    snapshot: BallotSnapshot, config: SelectionConfig | None = None
) -> SelectionResult:
    """Compute the winner and full ranking for one ballot snapshot.

    Args:
        snapshot: Candidates and ballots read at one reference point
        config: Engine settings; defaults to SelectionConfig()

    Returns:
        SelectionResult with the tally, contests, resolution and, when the
        cross-check disagreed in "record" mode, the recorded divergence

    Raises:
        NoBallotsError: If the snapshot holds no ballots
        BallotValidationError, DataIntegrityError: If any ballot is invalid
        NoDecisiveContestsError: If every candidate pair is tied
        AmbiguousOutcomeError: If the canonical strategy finds no single winner
        StrategyDivergenceError: If the cross-check finds a different (or no)
            winner in "strict" mode
    """
    config = config or SelectionConfig()
    logger.info(
        "Selection run at reference point %s: %d ballots, %d candidates, strategy %s",
        snapshot.reference_point, snapshot.num_ballots,
        len(snapshot.candidates), config.strategy,
    )

    if not snapshot.ballots:
        raise NoBallotsError(snapshot.reference_point)

    tally = build_pairwise_tally(snapshot.candidates, snapshot.ballots, config.workers)
    contests = build_contests(tally, [c.id for c in snapshot.candidates])
    if not contests:
        raise NoDecisiveContestsError(
            f"No decisive pairwise contest among {snapshot.num_ballots} ballots; "
            f"no winner can be determined"
        )

    resolution = get_strategy(config.strategy).resolve(contests)
    if resolution.is_ambiguous:
        raise AmbiguousOutcomeError(resolution.survivors)

    alternate = None
    divergence = None
    if config.alternate_strategy is not None:
        alternate = get_strategy(config.alternate_strategy).resolve(contests)
        divergence = compare_resolutions(resolution, alternate)
        if divergence is not None:
            logger.warning("Strategy divergence: %s", divergence.reason)
            # Ranking-only differences are recorded; a different winner fails.
            if config.cross_check == "strict" and divergence.winners_differ:
                raise StrategyDivergenceError(divergence)

    result = assemble_result(
        reference_point=snapshot.reference_point,
        tally=tally,
        contests=contests,
        resolution=resolution,
        divergence=divergence,
        alternate=alternate,
        candidate_names={c.id: c.name for c in snapshot.candidates},
    )
    logger.info(
        "Winner: %s (%s)", result.winner, result.candidate_names.get(result.winner, "?")
    )
    return result


def select_and_publish(
    store: BallotStore,
    reference_point: str,
    config: SelectionConfig | None = None,
    clock: Callable[[], float] = time.time,
) -> tuple[SelectionResult, Publication]:
    """Run a complete selection cycle against a ballot store.

    Reads the snapshot at reference_point, computes the selection and only
    then performs the single write recording it. Any failure before the
    write leaves the store untouched.

    Returns:
        The selection result and the publication that was recorded
    """
    config = config or SelectionConfig()
    snapshot = store.read_snapshot(reference_point)
    result = run_selection(snapshot, config)

    publication = result.publication(
        timestamp=int(clock()), full_ranking=config.publish_full_ranking
    )
    if store.record_selection(publication):
        logger.info(
            "Recorded selection %s for reference point %s",
            list(publication.selected_candidates), reference_point,
        )
    else:
        logger.info("Selection for reference point %s was already recorded", reference_point)
        publication = store.get_selection(reference_point) or publication
    return result, publication
