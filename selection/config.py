"""Selection engine configuration.

Settings come from keyword arguments, environment variables
(SELECTION_STRATEGY, SELECTION_CROSS_CHECK, SELECTION_WORKERS,
SELECTION_PUBLISH_FULL_RANKING) or a YAML file.
"""

import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Self

import yaml

from selection.errors import ConfigurationError

CROSS_CHECK_MODES = ("off", "record", "strict")
STRATEGY_KEYS = ("lock_graph", "elimination")

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off", ""}


@dataclass(frozen=True)
class SelectionConfig:
    """Settings for one selection run.

    Attributes:
        strategy: Canonical resolution strategy key
        cross_check: "off", "record" (run the other strategy and record any
            divergence in the result) or "strict" (also fail the run when the
            other strategy picks a different winner or none)
        workers: Processes used for pairwise tally accumulation
        publish_full_ranking: Publish the whole ranking instead of the winner
    """
    strategy: str = "lock_graph"
    cross_check: str = "record"
    workers: int = 1
    publish_full_ranking: bool = False

    def __post_init__(self):
        if self.strategy not in STRATEGY_KEYS:
            raise ConfigurationError(
                f"Unknown strategy {self.strategy!r}; expected one of {', '.join(STRATEGY_KEYS)}"
            )
        if self.cross_check not in CROSS_CHECK_MODES:
            raise ConfigurationError(
                f"Unknown cross-check mode {self.cross_check!r}; "
                f"expected one of {', '.join(CROSS_CHECK_MODES)}"
            )
        if not isinstance(self.workers, int) or self.workers < 1:
            raise ConfigurationError(f"workers must be a positive integer, got {self.workers!r}")

    @property
    def alternate_strategy(self) -> str | None:
        """The strategy used for the cross-check, or None if it is off."""
        if self.cross_check == "off":
            return None
        return next(key for key in STRATEGY_KEYS if key != self.strategy)

    def replace(self, **changes: Any) -> Self:
        """Return a copy with the given (non-None) settings changed."""
        values = {f.name: getattr(self, f.name) for f in fields(self)}
        values.update({k: v for k, v in changes.items() if v is not None})
        return type(self)(**values)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> Self:
        environ = os.environ if environ is None else environ
        values: dict[str, Any] = {}
        if "SELECTION_STRATEGY" in environ:
            values["strategy"] = environ["SELECTION_STRATEGY"].strip()
        if "SELECTION_CROSS_CHECK" in environ:
            values["cross_check"] = environ["SELECTION_CROSS_CHECK"].strip().lower()
        if "SELECTION_WORKERS" in environ:
            values["workers"] = _parse_int("SELECTION_WORKERS", environ["SELECTION_WORKERS"])
        if "SELECTION_PUBLISH_FULL_RANKING" in environ:
            values["publish_full_ranking"] = _parse_bool(
                "SELECTION_PUBLISH_FULL_RANKING", environ["SELECTION_PUBLISH_FULL_RANKING"]
            )
        return cls(**values)

    @classmethod
    def from_file(cls, path: str | Path) -> Self:
        """Load settings from a YAML mapping, e.g.

            strategy: lock_graph
            cross_check: strict
            workers: 4
        """
        try:
            data = yaml.safe_load(Path(path).read_text()) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Cannot read configuration file {path}: {e}") from e
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise ConfigurationError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        # YAML 1.1 reads a bare `off` as false
        if data.get("cross_check") is False:
            data["cross_check"] = "off"
        return cls(**data)


def _parse_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}")


def _parse_bool(name: str, value: str) -> bool:
    lowered = value.strip().lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise ConfigurationError(f"{name} must be a boolean, got {value!r}")
