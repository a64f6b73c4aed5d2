"""Shared test helpers."""

from selection.margins import build_contests
from selection.models import Ballot, BallotSnapshot, Candidate, Contest
from selection.tally import build_pairwise_tally

NAMES = ["Alice", "Bob", "Carol", "Dave", "Eve"]
ALICE, BOB, CAROL, DAVE, EVE = 1, 2, 3, 4, 5


def make_candidates(count: int, inactive: tuple[int, ...] = ()) -> tuple[Candidate, ...]:
    """Candidates 1..count named Alice, Bob, Carol, ..."""
    return tuple(
        Candidate(id=i, name=NAMES[i - 1], description=f"Candidate {i}",
                  active=i not in inactive)
        for i in range(1, count + 1)
    )


def make_snapshot(
    num_candidates: int,
    rankings: list[list[int | list[int]]],
    reference_point: str = "100",
    inactive: tuple[int, ...] = (),
) -> BallotSnapshot:
    """Build a BallotSnapshot from compact rank-group lists.

    Args:
        num_candidates: Candidates 1..num_candidates are registered
        rankings: One entry per ballot, each a list of rank groups from most
            to least preferred; a group is a candidate id or a list of tied ids
        reference_point: Snapshot reference point

    Returns:
        BallotSnapshot with voters "7001", "7002", ... in order.
    """
    return BallotSnapshot(
        reference_point=reference_point,
        candidates=make_candidates(num_candidates, inactive),
        ballots=tuple(
            Ballot.from_groups(str(7001 + i), groups)
            for i, groups in enumerate(rankings)
        ),
    )


def contests_for(snapshot: BallotSnapshot) -> list[Contest]:
    """Tally a snapshot and return its decisive contests in resolution order."""
    tally = build_pairwise_tally(snapshot.candidates, snapshot.ballots)
    return build_contests(tally, [c.id for c in snapshot.candidates])
