"""Records produced while building probability tables.

These dataclasses carry results from one stage of the pipeline to the
next: individual dice from the roller, summary statistics from the
reducer, and finished table entries bound for the JSON document. Live
rolls keep every face so they can be shown die by die.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any

from l5r.config import RAISE_SIZE, ExplosionMode, RollConfig
from l5r.types import CumulativeTable, SerializedCumulative


@dataclass
class DieResult:
    """A single die rolled as part of a dice pool."""

    total: int
    """Final value after explosion (e.g. 10+6=16)."""

    exploded: bool
    """Whether the first face triggered at least one extra roll.  A 10 on
    an unskilled roll has exploded=False."""


@dataclass
class RolledDie:
    """A die from a live roll, with every face that went into it."""

    faces: list[int]
    """Each face rolled, first to last (e.g. [10, 10, 3] for 23)."""

    kept: bool = False

    replaced: RolledDie | None = None
    """The unexploded 1 that emphasis rerolled into this die, if any."""

    @property
    def total(self) -> int:
        return sum(self.faces)

    @property
    def exploded(self) -> bool:
        return len(self.faces) > 1


@dataclass
class DiceRoll:
    """Full result of a live XkY roll."""

    original_roll: int
    original_keep: int
    """The pool as asked for, before the ten dice rule."""

    roll: int
    keep: int
    """X and Y in XkY after the ten dice rule."""

    explosion_mode: ExplosionMode
    emphasis: bool

    dice: list[RolledDie]
    """Every die rolled, including unkept dice, in rolling order."""

    overflow_bonus: int
    """Flat bonus from the ten dice rule."""

    modifier: int = 0
    tn: int | None = None
    raises: int = 0
    """Called raises, each adding RAISE_SIZE to the TN."""

    @property
    def ten_dice_rule_applied(self) -> bool:
        return (self.roll, self.keep) != (self.original_roll, self.original_keep)

    @property
    def kept_dice(self) -> list[RolledDie]:
        return [d for d in self.dice if d.kept]

    @property
    def subtotal(self) -> int:
        return sum(d.total for d in self.kept_dice)

    @property
    def total(self) -> int:
        return self.subtotal + self.overflow_bonus + self.modifier

    @property
    def emphasis_rerolls(self) -> list[tuple[int, RolledDie]]:
        """(position, new die) for every die emphasis replaced."""
        return [(i, d) for i, d in enumerate(self.dice) if d.replaced is not None]

    @property
    def effective_tn(self) -> int | None:
        if self.tn is None:
            return None
        return self.tn + self.raises * RAISE_SIZE

    @property
    def success(self) -> bool | None:
        if self.effective_tn is None:
            return None
        return self.total >= self.effective_tn

    @property
    def margin(self) -> int | None:
        if self.effective_tn is None:
            return None
        return self.total - self.effective_tn

    @property
    def achieved_raises(self) -> int | None:
        """Called raises plus one for every full RAISE_SIZE of margin on a
        success; 0 on a failure."""
        if self.margin is None:
            return None
        if self.margin < 0:
            return 0
        return self.raises + self.margin // RAISE_SIZE


@dataclass(frozen=True)
class Statistics:
    """Summary of one configuration's distribution of totals."""

    mean: float
    stddev: float
    """Population standard deviation."""

    median: int
    percentile_25: int
    percentile_75: int
    min: int
    max: int
    """Highest total observed; exploding pools have no true maximum."""

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Statistics:
        return cls(**data)


@dataclass
class ProbabilityTable:
    """One entry of the output document: a configuration and its odds."""

    roll: int
    keep: int
    explosion_mode: ExplosionMode
    emphasis: bool
    statistics: Statistics
    cumulative_probability: SerializedCumulative = field(default_factory=dict)
    """P(total >= TN) keyed by the TN as a decimal string.  TNs whose
    probability fell below the cutoff are absent."""

    @classmethod
    def from_results(
        cls,
        config: RollConfig,
        statistics: Statistics,
        cumulative: CumulativeTable,
    ) -> ProbabilityTable:
        return cls(
            roll=config.roll,
            keep=config.keep,
            explosion_mode=config.explosion_mode,
            emphasis=config.emphasis,
            statistics=statistics,
            cumulative_probability={str(tn): p for tn, p in sorted(cumulative.items())},
        )

    @property
    def config(self) -> RollConfig:
        return RollConfig(self.roll, self.keep, self.explosion_mode, self.emphasis)

    def to_dict(self) -> dict[str, Any]:
        return {
            "roll": self.roll,
            "keep": self.keep,
            "explosion_mode": self.explosion_mode.value,
            "emphasis": self.emphasis,
            "statistics": self.statistics.to_dict(),
            "cumulative_probability": dict(self.cumulative_probability),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ProbabilityTable:
        return cls(
            roll=data["roll"],
            keep=data["keep"],
            explosion_mode=ExplosionMode.from_name(data["explosion_mode"]),
            emphasis=data["emphasis"],
            statistics=Statistics.from_dict(data["statistics"]),
            cumulative_probability=dict(data["cumulative_probability"]),
        )
