"""Abstract base class for ballot stores."""

from abc import ABC, abstractmethod
from typing import Any

from selection.errors import StoreError
from selection.models import BallotSnapshot, Publication


class BallotStore(ABC):
    """Abstract base class for the external ballot store.

    A store hands out immutable snapshots of candidates and ballots as of a
    reference point, and durably records the selection computed from one.
    The engine only ever reads from a store during a run; the single write
    happens after the run has succeeded. Stores are registered via the
    @register_store decorator in selection/stores/__init__.py.
    """

    @classmethod
    @abstractmethod
    def can_open(cls, source: str) -> bool:
        """Check if this store type can handle the given source.

        Args:
            source: URL or filesystem path

        Returns:
            True if this store can handle the source, False otherwise
        """
        pass

    @abstractmethod
    def read_snapshot(self, reference_point: str) -> BallotSnapshot:
        """Read candidates and current ballots as of reference_point.

        Raises:
            StoreError: If the snapshot cannot be read or is malformed
        """
        pass

    @abstractmethod
    def get_selection(self, reference_point: str) -> Publication | None:
        """Return the selection already recorded for reference_point, if any."""
        pass

    @abstractmethod
    def _write_selection(self, publication: Publication) -> None:
        pass

    def record_selection(self, publication: Publication) -> bool:
        """Record a selection result; idempotent per reference point.

        Returns:
            True if the selection was written, False if the identical
            selection was already recorded

        Raises:
            StoreError: If a different selection is already recorded for
                the same reference point
        """
        existing = self.get_selection(publication.reference_point)
        if existing is not None:
            if existing.selected_candidates == publication.selected_candidates:
                return False
            raise StoreError(
                f"A different selection {list(existing.selected_candidates)} is already "
                f"recorded for reference point {publication.reference_point}"
            )
        self._write_selection(publication)
        return True


def parse_snapshot(data: Any, source: str) -> BallotSnapshot:
    """Build a BallotSnapshot from decoded JSON, wrapping format errors."""
    if not isinstance(data, dict):
        raise StoreError(f"Snapshot from {source} is not a JSON object")
    try:
        return BallotSnapshot.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Malformed snapshot from {source}: {e!r}") from e


def parse_publication(data: Any, source: str) -> Publication:
    """Build a Publication from decoded JSON, wrapping format errors."""
    try:
        return Publication.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise StoreError(f"Malformed selection record from {source}: {e!r}") from e
