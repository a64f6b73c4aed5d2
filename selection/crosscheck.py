"""Cross-check of one resolution strategy against another.

The lock-graph and elimination strategies do not always agree. A weighted
three-way cycle gives them different winners, and with four or more
candidates the elimination strategy can stall with several survivors.
"""

from selection.models import Divergence, Resolution


def compare_resolutions(canonical: Resolution, alternate: Resolution) -> Divergence | None:
    """Return a Divergence if the two resolutions disagree, else None.

    Checked in order: the alternate outcome is ambiguous, the winners
    differ, the full rankings differ.
    """
    if alternate.is_ambiguous:
        survivors = ", ".join(str(c) for c in alternate.survivors)
        reason = f"{alternate.strategy} left several candidates active ({survivors})"
    elif canonical.winner != alternate.winner:
        reason = (
            f"winner {canonical.winner} from {canonical.strategy} but "
            f"{alternate.winner} from {alternate.strategy}"
        )
    elif canonical.ordered_ids != alternate.ordered_ids:
        reason = "same winner but the rankings differ"
    else:
        return None

    return Divergence(
        canonical_strategy=canonical.strategy,
        alternate_strategy=alternate.strategy,
        canonical_winner=canonical.winner,
        alternate_winner=alternate.winner,
        canonical_ranking=tuple(canonical.ordered_ids),
        alternate_ranking=tuple(alternate.ordered_ids),
        reason=reason,
    )
