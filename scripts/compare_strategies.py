"""Compare the lock-graph and elimination strategies on one snapshot.

Prints both winners and rankings, how long each strategy took and whether
they diverge.

Usage:
    python scripts/compare_strategies.py sample_store/snapshots/1.json
"""

import argparse
import json
import sys
import time
from pathlib import Path

# Import strategies to register them
from selection.strategies import elimination  # noqa: F401
from selection.strategies import lock_graph  # noqa: F401

from selection.crosscheck import compare_resolutions
from selection.errors import SelectionError
from selection.margins import build_contests
from selection.stores.base import parse_snapshot
from selection.strategies import get_strategy
from selection.tally import build_pairwise_tally


def main():
    parser = argparse.ArgumentParser(
        description="Compare lock-graph and elimination resolution on a snapshot")
    parser.add_argument("snapshot", help="Path to a snapshot JSON file")
    args = parser.parse_args()

    try:
        data = json.loads(Path(args.snapshot).read_text())
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read snapshot {args.snapshot}: {e}", file=sys.stderr)
        sys.exit(1)

    try:
        snapshot = parse_snapshot(data, args.snapshot)
        tally = build_pairwise_tally(snapshot.candidates, snapshot.ballots)
    except SelectionError as e:
        print(f"Cannot tally snapshot: {e}", file=sys.stderr)
        sys.exit(1)
    names = {c.id: c.name for c in snapshot.candidates}
    contests = build_contests(tally, list(names))
    print(f"{snapshot.num_ballots} ballots, {len(contests)} decisive pairs")

    resolutions = {}
    for key in ("lock_graph", "elimination"):
        strategy = get_strategy(key)
        start = time.perf_counter()
        resolution = strategy.resolve(contests)
        elapsed = (time.perf_counter() - start) * 1000
        resolutions[key] = resolution

        print(f"\n{strategy.name} ({elapsed:.2f} ms)")
        if resolution.is_ambiguous:
            survivors = ", ".join(names.get(c, str(c)) for c in resolution.survivors)
            print(f"  No single winner; still active: {survivors}")
        for entry in resolution.ranking:
            print(f"  {entry.rank}. {names.get(entry.candidate_id, entry.candidate_id)}")
        print(f"  Locked pairs: {len(resolution.locked_edges)}, "
              f"eliminations: {len(resolution.elimination_log)}, "
              f"skipped: {len(resolution.skipped)}")

    divergence = compare_resolutions(resolutions["lock_graph"], resolutions["elimination"])
    if divergence is None:
        print("\nBoth strategies agree.")
    else:
        print(f"\nStrategies diverge: {divergence.reason}")
        sys.exit(3)


if __name__ == "__main__":
    main()
