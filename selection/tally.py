"""Pairwise tally builder.

Turns ranked-with-ties ballots into counts of how many ballots strictly
prefer one candidate to another. Candidates sharing a rank group count for
neither side, and candidates a ballot leaves unranked are not compared by
that ballot at all.
"""

import logging
from concurrent.futures import ProcessPoolExecutor
from functools import reduce
from typing import Iterable, Self

from selection.errors import (
    BallotValidationError,
    CandidateListError,
    DataIntegrityError,
    NoBallotsError,
)
from selection.models import Ballot, Candidate, RankingEntry

logger = logging.getLogger(__name__)


class PairwiseTally:
    """Immutable pairwise preference counts.

    counts[(a, b)] is the number of ballots ranking a strictly above b.
    compared[(min, max)] is the number of ballots ranking both candidates,
    including those that tie them.
    """

    __slots__ = ("_counts", "_compared", "_num_ballots")

    def __init__(
        self,
        counts: dict[tuple[int, int], int] | None = None,
        compared: dict[tuple[int, int], int] | None = None,
        num_ballots: int = 0,
    ):
        self._counts = dict(counts or {})
        self._compared = dict(compared or {})
        self._num_ballots = num_ballots

    @property
    def num_ballots(self) -> int:
        return self._num_ballots

    def get(self, a: int, b: int) -> int:
        """Number of ballots preferring a over b."""
        return self._counts.get((a, b), 0)

    def ballots_ranking_both(self, a: int, b: int) -> int:
        return self._compared.get((min(a, b), max(a, b)), 0)

    def items(self) -> list[tuple[tuple[int, int], int]]:
        return sorted(self._counts.items())

    def as_dict(self) -> dict[tuple[int, int], int]:
        return dict(self._counts)

    def to_matrix(self, candidate_ids: list[int]) -> dict[int, dict[int, int]]:
        """Readable matrix: matrix[a][b] = ballots preferring a over b."""
        return {
            a: {b: self.get(a, b) for b in candidate_ids if b != a}
            for a in candidate_ids
        }

    def merge(self, other: Self) -> Self:
        """Combine two partial tallies built from disjoint sets of ballots."""
        counts = dict(self._counts)
        for key, value in other._counts.items():
            counts[key] = counts.get(key, 0) + value
        compared = dict(self._compared)
        for key, value in other._compared.items():
            compared[key] = compared.get(key, 0) + value
        return type(self)(counts, compared, self._num_ballots + other._num_ballots)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PairwiseTally):
            return NotImplemented
        return (
            self._counts == other._counts
            and self._compared == other._compared
            and self._num_ballots == other._num_ballots
        )

    def __repr__(self) -> str:
        return f"PairwiseTally(ballots={self._num_ballots}, pairs={len(self._counts)})"


def rank_groups(ranking: Iterable[RankingEntry]) -> list[list[int]]:
    """Partition a ballot's entries into rank groups, best first.

    A new group starts at the first entry and at every entry that is not
    tied with the one before it.
    """
    groups: list[list[int]] = []
    for i, entry in enumerate(ranking):
        if i == 0 or not entry.tied_with_previous:
            groups.append([entry.candidate_id])
        else:
            groups[-1].append(entry.candidate_id)
    return groups


def index_candidates(candidates: Iterable[Candidate]) -> dict[int, Candidate]:
    """Map candidate id to candidate, rejecting ids below 1 and repeated ids.

    Raises:
        CandidateListError: If an id is 0 or negative, or appears twice
    """
    by_id: dict[int, Candidate] = {}
    for candidate in candidates:
        if candidate.id < 1:
            raise CandidateListError(candidate.id, "invalid")
        if candidate.id in by_id:
            raise CandidateListError(candidate.id, "duplicate")
        by_id[candidate.id] = candidate
    return by_id


def validate_ballot(ballot: Ballot, candidates_by_id: dict[int, Candidate]) -> None:
    """Check a ballot's structure and candidate references.

    Raises:
        BallotValidationError: Empty ranking, first entry tied with a
            non-existent previous entry, or a candidate ranked twice
        DataIntegrityError: A candidate id that is unknown or inactive
    """
    if not ballot.ranking:
        raise BallotValidationError(ballot.voter_id, "ranking is empty")
    if ballot.ranking[0].tied_with_previous:
        raise BallotValidationError(
            ballot.voter_id, "first entry cannot be tied with a previous entry"
        )

    seen: set[int] = set()
    for entry in ballot.ranking:
        candidate = candidates_by_id.get(entry.candidate_id)
        if candidate is None:
            raise DataIntegrityError(ballot.voter_id, entry.candidate_id, "unknown")
        if not candidate.active:
            raise DataIntegrityError(ballot.voter_id, entry.candidate_id, "inactive")
        if entry.candidate_id in seen:
            raise BallotValidationError(
                ballot.voter_id, f"candidate {entry.candidate_id} is ranked twice"
            )
        seen.add(entry.candidate_id)


def tally_ballot(ballot: Ballot) -> PairwiseTally:
    """Pairwise contribution of a single (already validated) ballot."""
    groups = rank_groups(ballot.ranking)
    counts: dict[tuple[int, int], int] = {}
    for i, higher in enumerate(groups):
        for lower in groups[i + 1:]:
            for a in higher:
                for b in lower:
                    counts[(a, b)] = 1

    ranked = [c for group in groups for c in group]
    compared = {}
    for i, a in enumerate(ranked):
        for b in ranked[i + 1:]:
            compared[(min(a, b), max(a, b))] = 1

    return PairwiseTally(counts, compared, num_ballots=1)


def _tally_chunk(ballots: list[Ballot]) -> PairwiseTally:
    # Accumulate locally; merging per ballot would copy the maps each time.
    counts: dict[tuple[int, int], int] = {}
    compared: dict[tuple[int, int], int] = {}
    for ballot in ballots:
        single = tally_ballot(ballot)
        for key in single._counts:
            counts[key] = counts.get(key, 0) + 1
        for key in single._compared:
            compared[key] = compared.get(key, 0) + 1
    return PairwiseTally(counts, compared, num_ballots=len(ballots))


def _chunks(items: list[Ballot], n: int) -> list[list[Ballot]]:
    size = -(-len(items) // n)
    return [items[i:i + size] for i in range(0, len(items), size)]


def build_pairwise_tally(
    candidates: Iterable[Candidate],
    ballots: Iterable[Ballot],
    workers: int = 1,
) -> PairwiseTally:
    """Validate every ballot, then fold them into one pairwise tally.

    Args:
        candidates: All registered candidates
        ballots: The current ballot of every voter
        workers: Process count. Above 1, ballots are split into chunks that
            are tallied in parallel and merged; the result is identical.

    Raises:
        NoBallotsError: If there are no ballots
        CandidateListError: If the candidate list has an id below 1 or a
            repeated id
        BallotValidationError, DataIntegrityError: If any ballot is invalid.
            The whole run is rejected; no ballot is skipped.
    """
    ballots = list(ballots)
    if not ballots:
        raise NoBallotsError()

    candidates_by_id = index_candidates(candidates)
    for ballot in ballots:
        validate_ballot(ballot, candidates_by_id)

    if workers > 1 and len(ballots) > 1:
        chunks = _chunks(ballots, workers)
        logger.debug("Tallying %d ballots in %d chunks", len(ballots), len(chunks))
        with ProcessPoolExecutor(max_workers=workers) as executor:
            partials = list(executor.map(_tally_chunk, chunks))
        tally = reduce(PairwiseTally.merge, partials, PairwiseTally())
    else:
        tally = _tally_chunk(ballots)

    logger.info(
        "Tallied %d ballots into %d pairwise preferences",
        tally.num_ballots, len(tally.items()),
    )
    return tally
