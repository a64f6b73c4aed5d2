"""Run a selection against a ballot store and optionally record the result.

Usage:
    python scripts/run_selection.py sample_store 1
    python scripts/run_selection.py https://store.example.org/api 18250000 --publish
    python scripts/run_selection.py sample_store 1 --strategy elimination --json
"""

import argparse
import json
import logging
import sys

from selection.config import CROSS_CHECK_MODES, STRATEGY_KEYS, SelectionConfig
from selection.engine import run_selection, select_and_publish
from selection.errors import SelectionError
from selection.stores import detect_store


def print_result(result, publication=None):
    names = result.candidate_names
    print(f"Reference point: {result.reference_point}")
    print(f"Ballots: {result.num_ballots}")
    print(f"Decisive pairs: {len(result.contests)}")
    print(f"Winner: {names.get(result.winner, result.winner)}")
    print("Final ranking:")
    for entry in result.final_ranking:
        print(f"  {entry.rank}. {names.get(entry.candidate_id, entry.candidate_id)}")
    if result.divergence is not None:
        print(f"WARNING: strategies diverge: {result.divergence.reason}")
    if publication is not None:
        print(f"Recorded selection: {list(publication.selected_candidates)} "
              f"at {publication.timestamp}")


def main():
    parser = argparse.ArgumentParser(description="Run a ranked-pairs selection")
    parser.add_argument("source", help="Ballot store directory or http(s) URL")
    parser.add_argument("reference_point", help="Snapshot reference point (e.g. block number)")
    parser.add_argument("--config", help="YAML configuration file")
    parser.add_argument("--strategy", choices=STRATEGY_KEYS,
                        help="Canonical resolution strategy")
    parser.add_argument("--cross-check", choices=CROSS_CHECK_MODES,
                        help="Cross-check mode")
    parser.add_argument("--workers", type=int, help="Processes for tallying")
    parser.add_argument("--publish", action="store_true",
                        help="Record the result in the store")
    parser.add_argument("--full-ranking", action="store_true", default=None,
                        help="Publish the full ranking instead of only the winner")
    parser.add_argument("--json", action="store_true",
                        help="Print the full audit record as JSON")
    parser.add_argument("-v", "--verbose", action="store_true",
                        help="Log every lock/skip/elimination decision")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = SelectionConfig.from_file(args.config) if args.config else SelectionConfig.from_env()
        config = config.replace(
            strategy=args.strategy,
            cross_check=args.cross_check,
            workers=args.workers,
            publish_full_ranking=args.full_ranking,
        )

        store = detect_store(args.source)
        if store is None:
            print(f"Unsupported store source: {args.source}", file=sys.stderr)
            sys.exit(2)

        publication = None
        if args.publish:
            result, publication = select_and_publish(store, args.reference_point, config)
        else:
            result = run_selection(store.read_snapshot(args.reference_point), config)
    except SelectionError as e:
        print(f"Selection failed: {e}", file=sys.stderr)
        sys.exit(1)

    if args.json:
        print(json.dumps(result.to_dict(), indent=2))
    else:
        print_result(result, publication)


if __name__ == "__main__":
    main()
