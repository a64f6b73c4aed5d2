"""Result assembler: one immutable record per selection run."""

from selection.errors import AmbiguousOutcomeError
from selection.models import Contest, Divergence, Resolution, SelectionResult
from selection.tally import PairwiseTally


def assemble_result(
    reference_point: str,
    tally: PairwiseTally,
    contests: list[Contest],
    resolution: Resolution,
    divergence: Divergence | None = None,
    alternate: Resolution | None = None,
    candidate_names: dict[int, str] | None = None,
) -> SelectionResult:
    """Combine the tally, contests and resolution into a SelectionResult.

    Raises:
        AmbiguousOutcomeError: If the resolution has no single winner
    """
    if resolution.is_ambiguous or resolution.winner is None:
        raise AmbiguousOutcomeError(resolution.survivors)

    ranked = resolution.ordered_ids
    assert len(ranked) == len(set(ranked)), "ranking contains duplicates"

    return SelectionResult(
        reference_point=reference_point,
        num_ballots=tally.num_ballots,
        tally=tally.as_dict(),
        contests=tuple(contests),
        resolution=resolution,
        divergence=divergence,
        alternate=alternate,
        candidate_names=dict(candidate_names or {}),
    )
