"""Core data models for ballot snapshots and selection results."""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Mapping, Self


def _json_bool(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key, default)
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be a JSON boolean, got {value!r}")
    return value


@dataclass(frozen=True)
class Candidate:
    """A candidate registered for an election.

    Attributes:
        id: Positive integer identifier (ids are dense and start at 1)
        name: Display name
        description: Free-text description
        active: Whether ballots may rank this candidate
    """
    id: int
    name: str
    description: str = ""
    active: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=int(data["id"]),
            name=str(data.get("name", "")),
            description=str(data.get("description", "")),
            active=_json_bool(data, "active", True),
        )


@dataclass(frozen=True)
class RankingEntry:
    """One position on a ballot.

    Attributes:
        candidate_id: The ranked candidate
        tied_with_previous: True if this candidate shares a rank with the
            entry before it. Must be False for the first entry of a ballot.
    """
    candidate_id: int
    tied_with_previous: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "candidateId": self.candidate_id,
            "tiedWithPrevious": self.tied_with_previous,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            candidate_id=int(data["candidateId"]),
            tied_with_previous=_json_bool(data, "tiedWithPrevious", False),
        )


@dataclass(frozen=True)
class Ballot:
    """One voter's ranked (possibly partial, possibly tied) preference list.

    Example:
        >>> Ballot(voter_id="7001", ranking=(
        ...     RankingEntry(1),
        ...     RankingEntry(2, tied_with_previous=True),
        ...     RankingEntry(3),
        ... ))

    means candidates 1 and 2 share first place and candidate 3 comes second.
    """
    voter_id: str
    ranking: tuple[RankingEntry, ...]

    @property
    def candidate_ids(self) -> list[int]:
        return [entry.candidate_id for entry in self.ranking]

    def to_dict(self) -> dict[str, Any]:
        return {
            "voterId": self.voter_id,
            "ranking": [entry.to_dict() for entry in self.ranking],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            voter_id=str(data["voterId"]),
            ranking=tuple(RankingEntry.from_dict(e) for e in data.get("ranking", [])),
        )

    @classmethod
    def from_groups(cls, voter_id: str, groups: list[int | list[int]]) -> Self:
        """Build a ballot from rank groups in order from most to least preferred.

        Each element is either a single candidate id or a list of ids that
        are tied with each other.
        """
        entries = []
        for group in groups:
            ids = group if isinstance(group, list) else [group]
            for i, candidate_id in enumerate(ids):
                entries.append(RankingEntry(candidate_id, tied_with_previous=i > 0))
        return cls(voter_id=voter_id, ranking=tuple(entries))


@dataclass(frozen=True)
class BallotSnapshot:
    """Candidates and current ballots read at one fixed reference point.

    Attributes:
        reference_point: Ledger block or snapshot identifier the data was
            read at. Re-reading the same reference point yields the same data.
        candidates: All registered candidates, active or not
        ballots: The current ballot of every voter
    """
    reference_point: str
    candidates: tuple[Candidate, ...]
    ballots: tuple[Ballot, ...]

    @property
    def num_ballots(self) -> int:
        return len(self.ballots)

    def to_dict(self) -> dict[str, Any]:
        return {
            "referencePoint": self.reference_point,
            "candidates": [c.to_dict() for c in self.candidates],
            "ballots": [b.to_dict() for b in self.ballots],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Build a snapshot from its JSON form.

        A voter listed more than once keeps only their last ballot, matching
        the store's overwrite-on-resubmit behaviour.
        """
        latest: dict[str, Ballot] = {}
        for raw in data.get("ballots", []):
            ballot = Ballot.from_dict(raw)
            latest.pop(ballot.voter_id, None)
            latest[ballot.voter_id] = ballot
        return cls(
            reference_point=str(data["referencePoint"]),
            candidates=tuple(Candidate.from_dict(c) for c in data.get("candidates", [])),
            ballots=tuple(latest.values()),
        )


@dataclass(frozen=True)
class Contest:
    """A decisive pairwise comparison between two candidates.

    Attributes:
        winner: Candidate preferred by more ballots
        loser: The other candidate
        margin: winner_votes - loser_votes, always strictly positive
        winner_votes: Ballots preferring winner over loser
        loser_votes: Ballots preferring loser over winner
    """
    winner: int
    loser: int
    margin: int
    winner_votes: int
    loser_votes: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "winner": self.winner,
            "loser": self.loser,
            "margin": self.margin,
            "winnerVotes": self.winner_votes,
            "loserVotes": self.loser_votes,
        }


@dataclass(frozen=True)
class RankedCandidate:
    """A candidate's position in a final ranking (1 = winner)."""
    rank: int
    candidate_id: int

    def to_dict(self) -> dict[str, Any]:
        return {"rank": self.rank, "candidateId": self.candidate_id}

    @classmethod
    def build_ranking(cls, ordered: list[int]) -> tuple[Self, ...]:
        """Build a ranking from candidate ids in order from 1st to last."""
        return tuple(cls(rank=i + 1, candidate_id=c) for i, c in enumerate(ordered))


@dataclass(frozen=True)
class Elimination:
    """One step of the elimination strategy's log."""
    eliminated: int
    eliminated_by: int
    margin: int
    winner_votes: int
    loser_votes: int
    remaining: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "eliminated": self.eliminated,
            "eliminatedBy": self.eliminated_by,
            "margin": self.margin,
            "winnerVotes": self.winner_votes,
            "loserVotes": self.loser_votes,
            "remainingCandidates": self.remaining,
        }


@dataclass(frozen=True)
class Resolution:
    """Output of a resolution strategy.

    Exactly one of locked_edges / elimination_log is meaningful, depending on
    the strategy that produced it.

    Attributes:
        strategy: Registry key of the producing strategy
        ranking: Final ranking, empty when the outcome is ambiguous
        survivors: Candidates still standing at the end (elimination only);
            more than one survivor means the outcome is ambiguous
        locked_edges: (winner, loser) edges locked by the lock-graph strategy
        elimination_log: Eliminations in the order they happened
        skipped: Contests that were not applied, with the reason
    """
    strategy: str
    ranking: tuple[RankedCandidate, ...]
    survivors: tuple[int, ...] = ()
    locked_edges: tuple[tuple[int, int], ...] = ()
    elimination_log: tuple[Elimination, ...] = ()
    skipped: tuple[tuple[Contest, str], ...] = ()

    @property
    def is_ambiguous(self) -> bool:
        return len(self.survivors) > 1

    @property
    def winner(self) -> int | None:
        if self.is_ambiguous or not self.ranking:
            return None
        return self.ranking[0].candidate_id

    @property
    def ordered_ids(self) -> list[int]:
        return [r.candidate_id for r in self.ranking]

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "strategy": self.strategy,
            "winner": self.winner,
            "finalRanking": [r.to_dict() for r in self.ranking],
            "skipped": [
                {"contest": contest.to_dict(), "reason": reason}
                for contest, reason in self.skipped
            ],
        }
        if self.locked_edges:
            data["lockedPairs"] = [list(edge) for edge in self.locked_edges]
        if self.elimination_log:
            data["eliminationOrder"] = [e.to_dict() for e in self.elimination_log]
        if self.survivors:
            data["survivors"] = list(self.survivors)
        return data


@dataclass(frozen=True)
class Divergence:
    """Recorded disagreement between the canonical and alternate strategies."""
    canonical_strategy: str
    alternate_strategy: str
    canonical_winner: int | None
    alternate_winner: int | None
    canonical_ranking: tuple[int, ...]
    alternate_ranking: tuple[int, ...]
    reason: str

    @property
    def winners_differ(self) -> bool:
        return self.canonical_winner != self.alternate_winner

    def to_dict(self) -> dict[str, Any]:
        return {
            "canonicalStrategy": self.canonical_strategy,
            "alternateStrategy": self.alternate_strategy,
            "canonicalWinner": self.canonical_winner,
            "alternateWinner": self.alternate_winner,
            "canonicalRanking": list(self.canonical_ranking),
            "alternateRanking": list(self.alternate_ranking),
            "reason": self.reason,
        }


@dataclass(frozen=True)
class Publication:
    """The record written back to the ballot store after a successful run."""
    selected_candidates: tuple[int, ...]
    reference_point: str
    timestamp: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "selectedCandidates": list(self.selected_candidates),
            "selectionReferencePoint": self.reference_point,
            "selectionTimestamp": self.timestamp,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            selected_candidates=tuple(int(c) for c in data["selectedCandidates"]),
            reference_point=str(data["selectionReferencePoint"]),
            timestamp=int(data["selectionTimestamp"]),
        )


@dataclass(frozen=True)
class SelectionResult:
    """The sole output of a selection run.

    Attributes:
        reference_point: Snapshot the run was computed from
        num_ballots: Number of ballots tallied
        tally: Pairwise counts keyed by (preferred, other)
        contests: Decisive contests in resolution order
        resolution: Output of the canonical strategy
        divergence: Set when the cross-check strategy disagreed
        alternate: Output of the cross-check strategy, if it ran
    """
    reference_point: str
    num_ballots: int
    tally: Mapping[tuple[int, int], int]
    contests: tuple[Contest, ...]
    resolution: Resolution
    divergence: Divergence | None = None
    alternate: Resolution | None = None
    candidate_names: Mapping[int, str] = field(default_factory=dict)

    def __post_init__(self):
        # Read-only views over private copies so the record cannot change.
        object.__setattr__(self, "tally", MappingProxyType(dict(self.tally)))
        object.__setattr__(
            self, "candidate_names", MappingProxyType(dict(self.candidate_names))
        )

    @property
    def winner(self) -> int:
        winner = self.resolution.winner
        assert winner is not None
        return winner

    @property
    def final_ranking(self) -> tuple[RankedCandidate, ...]:
        return self.resolution.ranking

    def get_rank(self, candidate_id: int) -> int | None:
        """Get the 1-indexed rank of a candidate, or None if not ranked."""
        for entry in self.final_ranking:
            if entry.candidate_id == candidate_id:
                return entry.rank
        return None

    def publication(self, timestamp: int, full_ranking: bool = False) -> Publication:
        """Build the record to publish: the winner, or the whole ranking."""
        if full_ranking:
            selected = tuple(self.resolution.ordered_ids)
        else:
            selected = (self.winner,)
        return Publication(
            selected_candidates=selected,
            reference_point=self.reference_point,
            timestamp=timestamp,
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to a JSON-serializable audit record."""
        return {
            "referencePoint": self.reference_point,
            "numBallots": self.num_ballots,
            "winner": self.winner,
            "winnerName": self.candidate_names.get(self.winner),
            "pairwiseTallies": {
                f"{a}-{b}": count for (a, b), count in sorted(self.tally.items())
            },
            "rankedPairs": [c.to_dict() for c in self.contests],
            "resolution": self.resolution.to_dict(),
            "alternate": self.alternate.to_dict() if self.alternate else None,
            "divergence": self.divergence.to_dict() if self.divergence else None,
        }
