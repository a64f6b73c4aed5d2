"""Errors raised by a selection run.

Every fault is local to one run: it stops that run from producing a
publishable result and never touches the ballot store.
"""

from selection.models import Divergence


class SelectionError(Exception):
    """Base class for all selection run failures."""
    pass


class ConfigurationError(SelectionError):
    """Invalid engine configuration."""
    pass


class NoBallotsError(SelectionError):
    """The snapshot holds no ballots, so there is nothing to compute."""

    def __init__(self, reference_point: str | None = None):
        self.reference_point = reference_point
        where = f" at reference point {reference_point}" if reference_point else ""
        super().__init__(f"No votes to process{where}")


class BallotValidationError(SelectionError):
    """A ballot is structurally malformed (empty, first entry tied, duplicates)."""

    def __init__(self, voter_id: str, message: str):
        self.voter_id = voter_id
        super().__init__(f"Ballot from voter {voter_id}: {message}")


class DataIntegrityError(SelectionError):
    """A ballot references a candidate that is unknown or inactive.

    Ballots are validated before they reach the store, so this indicates
    upstream corruption. The whole run is rejected.
    """

    def __init__(self, voter_id: str, candidate_id: int, reason: str):
        self.voter_id = voter_id
        self.candidate_id = candidate_id
        super().__init__(
            f"Ballot from voter {voter_id} references {reason} candidate {candidate_id}"
        )


class CandidateListError(DataIntegrityError):
    """The registered candidate list has an id below 1 or the same id twice."""

    def __init__(self, candidate_id: int, reason: str):
        self.voter_id = None
        self.candidate_id = candidate_id
        SelectionError.__init__(self, f"Candidate list has {reason} candidate id {candidate_id}")


class NoDecisiveContestsError(SelectionError):
    """Every candidate pair is tied, so no candidate can be ranked."""
    pass


class AmbiguousOutcomeError(SelectionError):
    """The elimination strategy ran out of contests with several candidates left."""

    def __init__(self, survivors: tuple[int, ...]):
        self.survivors = survivors
        listed = ", ".join(str(c) for c in survivors)
        super().__init__(
            f"Ambiguous outcome: contests exhausted with {len(survivors)} "
            f"candidates still active ({listed})"
        )


class StrategyDivergenceError(SelectionError):
    """The canonical and cross-check strategies disagree."""

    def __init__(self, divergence: Divergence):
        self.divergence = divergence
        super().__init__(
            f"Strategies {divergence.canonical_strategy} and "
            f"{divergence.alternate_strategy} diverge: {divergence.reason}"
        )


class StoreError(SelectionError):
    """Reading from or writing to the ballot store failed."""
    pass
