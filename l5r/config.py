"""
Roll configurations: every XkY pool we precompute a table for.

A configuration is a pool size (X, dice rolled), a keep count (Y, dice
kept), an explosion mode and whether emphasis is active. Pools run from 1k1
to 10k10, which gives 55 pools; with three modes and emphasis on or off that
is 330 configurations. Larger pools are folded back into this range by the
ten dice rule at lookup time, so they never need their own table.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from l5r.exceptions import ConfigurationError

DIE_SIDES = 10
MAX_POOL = 10
RAISE_SIZE = 5

# 55 pools from 1k1 to 10k10, three explosion modes, emphasis on or off.
CONFIG_COUNT = 330


class ExplosionMode(Enum):
    """Which faces make a die reroll and add.

    Unskilled rolls never explode, skilled rolls explode on a 10, and
    mastery explodes on a 9 or a 10.
    """

    UNSKILLED = "unskilled"
    SKILLED = "skilled"
    MASTERY = "mastery"

    @property
    def simulation_rounds(self) -> int:
        """Number of trials to run for a table in this mode.

        Exploding modes have long thin tails, so they need more samples
        before the rare high totals show up often enough to be useful.
        """
        return SIMULATION_ROUNDS[self]

    @property
    def short_name(self) -> str:
        return self.value[0]

    @classmethod
    def from_name(cls, name: str) -> ExplosionMode:
        try:
            return cls(name.lower())
        except ValueError:
            raise ConfigurationError(f"unknown explosion mode: {name!r}") from None


SIMULATION_ROUNDS: dict[ExplosionMode, int] = {
    ExplosionMode.UNSKILLED: 200_000,
    ExplosionMode.SKILLED: 300_000,
    ExplosionMode.MASTERY: 500_000,
}


@dataclass(frozen=True)
class RollConfig:
    """One XkY pool with its explosion mode and emphasis flag."""

    roll: int
    """X in XkY: how many dice are rolled (1-10)."""

    keep: int
    """Y in XkY: how many of the highest dice are summed (1-roll)."""

    explosion_mode: ExplosionMode = ExplosionMode.SKILLED

    emphasis: bool = False
    """Whether unexploded 1s are rerolled before keeping."""

    def __post_init__(self) -> None:
        if not 1 <= self.roll <= MAX_POOL:
            raise ConfigurationError(f"roll must be 1-{MAX_POOL}, got {self.roll}")
        if not 1 <= self.keep <= self.roll:
            raise ConfigurationError(
                f"keep must be 1-{self.roll} for {self.roll} rolled dice, got {self.keep}"
            )
        if not isinstance(self.explosion_mode, ExplosionMode):
            raise ConfigurationError(f"not an explosion mode: {self.explosion_mode!r}")

    @property
    def simulation_rounds(self) -> int:
        return self.explosion_mode.simulation_rounds

    @property
    def label(self) -> str:
        """Compact label like "5k3 s" or "10k10 m+e"."""
        suffix = "+e" if self.emphasis else ""
        return f"{self.roll}k{self.keep} {self.explosion_mode.short_name}{suffix}"


def generate_all_configs() -> list[RollConfig]:
    """Every configuration we build a table for, in output order.

    Pools vary slowest (1k1, 2k1, 2k2, ...), then explosion mode, then
    emphasis.
    """
    configs = [
        RollConfig(roll, keep, mode, emphasis)
        for roll in range(1, MAX_POOL + 1)
        for keep in range(1, roll + 1)
        for mode in ExplosionMode
        for emphasis in (False, True)
    ]
    if len(configs) != CONFIG_COUNT:
        raise ConfigurationError(
            f"expected {CONFIG_COUNT} configurations, got {len(configs)}"
        )
    return configs
