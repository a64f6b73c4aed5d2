"""Resolution strategies for turning ordered contests into a ranking."""

from .base import ResolutionStrategy

# Strategy registry - import strategies here to register them
_strategies: dict[str, type[ResolutionStrategy]] = {}


def register_strategy(strategy_class: type[ResolutionStrategy]) -> type[ResolutionStrategy]:
    """Decorator to register a resolution strategy class under its key."""
    _strategies[strategy_class.key] = strategy_class
    return strategy_class


def get_strategy(key: str) -> ResolutionStrategy:
    """Return an instance of the strategy registered under key.

    Raises:
        KeyError: If no strategy is registered under key
    """
    return _strategies[key]()


def get_strategy_keys() -> list[str]:
    return sorted(_strategies)


def get_all_strategies() -> list[ResolutionStrategy]:
    """Return instances of all registered strategies."""
    return [strategy_class() for strategy_class in _strategies.values()]

