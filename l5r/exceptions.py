"""Exceptions raised by the probability table generator."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from l5r.config import RollConfig


class ConfigurationError(ValueError):
    """An impossible roll/keep combination or unknown explosion mode."""


class DistributionInvariantError(ValueError):
    """A histogram or cumulative table failed validation.

    ``reason`` says which check failed. ``config`` is filled in by the
    batch pipeline so the caller knows which table was bad.
    """

    def __init__(self, reason: str, config: RollConfig | None = None) -> None:
        self.reason = reason
        self.config = config
        if config is None:
            super().__init__(reason)
        else:
            super().__init__(f"{config.label}: {reason}")


class SimulationError(RuntimeError):
    """A die kept exploding past MAX_EXPLOSIONS rerolls.

    This only happens with a broken random source.
    """


class TableLookupError(LookupError):
    """No table matches a query, or the table document is malformed."""


class RollExpressionError(ValueError):
    """A roll expression like "5k3+2 tn:20" could not be parsed."""
