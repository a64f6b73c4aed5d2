"""Abstract base class for resolution strategies."""

from abc import ABC, abstractmethod

from selection.models import Contest, Resolution


class ResolutionStrategy(ABC):
    """Abstract base class for resolution strategies.

    Each strategy consumes decisive contests in resolution order (strongest
    margin first) and produces a cycle-free final ranking. Strategies are
    registered via the @register_strategy decorator in
    selection/strategies/__init__.py and selected by their key.
    """

    key: str = ""

    @property
    @abstractmethod
    def name(self) -> str:
        """Human-readable name of this strategy."""
        pass

    @property
    def description(self) -> str:
        """Optional description of how this strategy works."""
        return ""

    @abstractmethod
    def resolve(self, contests: list[Contest]) -> Resolution:
        """Resolve ordered contests into a final ranking.

        Args:
            contests: Decisive contests, already sorted strongest first

        Returns:
            Resolution with the ranking and the strategy's audit artifact
        """
        pass
