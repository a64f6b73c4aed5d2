"""Ballot store backed by a directory of JSON files."""

import json
import re
from pathlib import Path
from urllib.parse import urlparse

from selection.errors import StoreError
from selection.models import BallotSnapshot, Publication
from selection.stores import register_store
from selection.stores.base import BallotStore, parse_publication, parse_snapshot

REFERENCE_POINT_PATTERN = re.compile(r"^[A-Za-z0-9_-][A-Za-z0-9_.-]*$")


@register_store
class JsonFileBallotStore(BallotStore):
    """Directory store with one JSON file per reference point.

    Layout:
        <root>/snapshots/<reference_point>.json   candidates and ballots
        <root>/selections/<reference_point>.json  recorded selection

    Snapshot files use the store's wire format:
        {"referencePoint": "1234",
         "candidates": [{"id": 1, "name": "Alice", "description": "", "active": true}],
         "ballots": [{"voterId": "7001",
                      "ranking": [{"candidateId": 1, "tiedWithPrevious": false}]}]}
    """

    def __init__(self, root: str | Path):
        self.root = Path(root)

    @classmethod
    def can_open(cls, source: str) -> bool:
        """Anything that is not an http(s) URL is treated as a directory path."""
        return urlparse(str(source)).scheme not in ("http", "https")

    def _path(self, kind: str, reference_point: str) -> Path:
        if not REFERENCE_POINT_PATTERN.match(reference_point):
            raise StoreError(f"Invalid reference point: {reference_point!r}")
        return self.root / kind / f"{reference_point}.json"

    def read_snapshot(self, reference_point: str) -> BallotSnapshot:
        path = self._path("snapshots", reference_point)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError as e:
            raise StoreError(f"No snapshot for reference point {reference_point} in {self.root}") from e
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read snapshot {path}: {e}") from e

        snapshot = parse_snapshot(data, str(path))
        if snapshot.reference_point != reference_point:
            raise StoreError(
                f"Snapshot {path} is for reference point {snapshot.reference_point}, "
                f"not {reference_point}"
            )
        return snapshot

    def get_selection(self, reference_point: str) -> Publication | None:
        path = self._path("selections", reference_point)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            raise StoreError(f"Cannot read selection {path}: {e}") from e
        return parse_publication(data, str(path))

    def _write_selection(self, publication: Publication) -> None:
        path = self._path("selections", publication.reference_point)
        tmp = path.with_suffix(".json.tmp")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            tmp.write_text(json.dumps(publication.to_dict(), indent=2), encoding="utf-8")
            tmp.replace(path)
        except OSError as e:
            raise StoreError(f"Cannot write selection {path}: {e}") from e

    def write_snapshot(self, snapshot: BallotSnapshot) -> Path:
        """Save a snapshot file (used by fixtures and the sample generator)."""
        path = self._path("snapshots", snapshot.reference_point)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(snapshot.to_dict(), indent=2), encoding="utf-8")
        return path
