"""Generate a reproducible sample ballot snapshot.

Candidate names and descriptions come from faker with a fixed seed, and
ballots are random partial rankings with occasional ties, so the output is
identical for the same arguments.

Usage:
    python scripts/generate_snapshot.py
    python scripts/generate_snapshot.py --candidates 6 --ballots 500 -o store/
"""

import argparse
import random
from pathlib import Path

from faker import Faker

from selection.models import Ballot, BallotSnapshot, Candidate
from selection.stores.json_file import JsonFileBallotStore

DEFAULT_OUTPUT = Path(__file__).parent.parent / "sample_store"

SEED = 20260201


def generate_candidates(count: int, fake: Faker) -> list[Candidate]:
    names: set[str] = set()
    candidates = []
    for candidate_id in range(1, count + 1):
        name = fake.first_name()
        while name in names:
            name = fake.first_name()
        names.add(name)
        candidates.append(Candidate(
            id=candidate_id,
            name=name,
            description=fake.catch_phrase(),
        ))
    return candidates


def generate_ballot(voter_id: str, candidate_ids: list[int], rng: random.Random,
                    tie_probability: float) -> Ballot:
    """A random ranking of a random non-empty subset, with occasional ties."""
    ranked = rng.sample(candidate_ids, rng.randint(1, len(candidate_ids)))
    groups: list[int | list[int]] = []
    for candidate_id in ranked:
        if groups and rng.random() < tie_probability:
            last = groups[-1]
            groups[-1] = (last if isinstance(last, list) else [last]) + [candidate_id]
        else:
            groups.append(candidate_id)
    return Ballot.from_groups(voter_id, groups)


def generate_snapshot(reference_point: str, num_candidates: int, num_ballots: int,
                      tie_probability: float, seed: int) -> BallotSnapshot:
    fake = Faker()
    Faker.seed(seed)
    rng = random.Random(seed)

    candidates = generate_candidates(num_candidates, fake)
    candidate_ids = [c.id for c in candidates]
    ballots = [
        generate_ballot(str(7001 + i), candidate_ids, rng, tie_probability)
        for i in range(num_ballots)
    ]
    return BallotSnapshot(
        reference_point=reference_point,
        candidates=tuple(candidates),
        ballots=tuple(ballots),
    )


def main():
    parser = argparse.ArgumentParser(
        description="Generate a sample ballot snapshot for a JSON file store")
    parser.add_argument("-o", "--output", default=str(DEFAULT_OUTPUT),
                        help=f"Store directory (default: {DEFAULT_OUTPUT})")
    parser.add_argument("--reference-point", default="1",
                        help="Reference point to write the snapshot under (default: 1)")
    parser.add_argument("--candidates", type=int, default=5,
                        help="Number of candidates (default: 5)")
    parser.add_argument("--ballots", type=int, default=100,
                        help="Number of ballots (default: 100)")
    parser.add_argument("--tie-probability", type=float, default=0.1,
                        help="Chance that an entry ties with the previous one (default: 0.1)")
    parser.add_argument("--seed", type=int, default=SEED,
                        help=f"Random seed (default: {SEED})")
    args = parser.parse_args()

    snapshot = generate_snapshot(args.reference_point, args.candidates, args.ballots,
                                 args.tie_probability, args.seed)
    path = JsonFileBallotStore(args.output).write_snapshot(snapshot)

    print("Candidates:")
    for candidate in snapshot.candidates:
        print(f"  {candidate.id}. {candidate.name}")
    print(f"Written {snapshot.num_ballots} ballots to {path}")


if __name__ == "__main__":
    main()
