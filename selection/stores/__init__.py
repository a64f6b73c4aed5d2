"""Ballot store adapters: snapshot reader and result publisher."""

from .base import BallotStore

# Store registry - import stores here to register them
_stores: list[type[BallotStore]] = []


def register_store(store_class: type[BallotStore]) -> type[BallotStore]:
    """Decorator to register a ballot store class."""
    _stores.append(store_class)
    return store_class


def get_all_stores() -> list[type[BallotStore]]:
    """Return all registered store classes."""
    return _stores.copy()


def detect_store(source: str) -> BallotStore | None:
    """Return a store instance for the given source (URL or path), if any."""
    for store_class in _stores:
        if store_class.can_open(source):
            return store_class(source)
    return None
