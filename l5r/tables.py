"""
Look up odds in a generated probability tables document.

A document holds one table per configuration, each mapping TNs (as
strings) to P(total >= TN). To ask "what is the chance of 7k4 mastery
making at least 30?" you load the document once and query it:

    document = load_tables("data/probability-tables.json")
    result = query_probability(document, 7, 4, ExplosionMode.MASTERY, False, 30)
    result.success_rate  # a float between 0 and 1

Pools above 10k10 are folded back into range with the overflow rules from
l5r.dice.actual_xky, and the overflow bonus lowers the TN the dice must
reach.
"""

from __future__ import annotations

import json
import logging
from bisect import bisect_left
from dataclasses import dataclass
from typing import Any

from l5r.config import RAISE_SIZE, ExplosionMode, RollConfig
from l5r.dice import actual_xky
from l5r.exceptions import TableLookupError
from l5r.records import ProbabilityTable

log = logging.getLogger(__name__)

_cache: dict[str, dict[str, Any]] = {}


def load_tables(path: str) -> dict[str, Any]:
    """Read a tables document, caching it by path."""
    if path in _cache:
        return _cache[path]

    with open(path) as f:
        document = json.load(f)

    if not isinstance(document, dict) or not isinstance(document.get("tables"), list):
        raise TableLookupError(f"{path} is not a probability tables document")

    log.debug("loaded %d tables from %s", len(document["tables"]), path)
    _cache[path] = document
    return document


def clear_cache() -> None:
    _cache.clear()


def find_table(document: dict[str, Any], config: RollConfig) -> ProbabilityTable:
    for data in document["tables"]:
        if (
            data["roll"] == config.roll
            and data["keep"] == config.keep
            and data["explosion_mode"] == config.explosion_mode.value
            and data["emphasis"] == config.emphasis
        ):
            return ProbabilityTable.from_dict(data)

    raise TableLookupError(f"no probability data for {config.label}")


def cumulative_probability(table: ProbabilityTable, tn: int) -> float:
    """P(total >= tn) from a table.

    Totals only take the values we observed, so for a TN that falls
    between two stored TNs the answer is the one stored for the next TN
    up. Above the highest stored TN the probability is below the cutoff
    and we call it 0.
    """
    probs = table.cumulative_probability
    if str(tn) in probs:
        return probs[str(tn)]

    tns = sorted(int(key) for key in probs)
    if tn <= tns[0]:
        return 1.0
    if tn > tns[-1]:
        return 0.0
    return probs[str(tns[bisect_left(tns, tn)])]


@dataclass
class ProbabilityResult:
    """Answer to a probability query."""

    table: ProbabilityTable
    """The table that was consulted (after overflow conversion)."""

    success_rate: float

    effective_tn: int
    """What the kept dice alone must reach: TN plus raises, less the
    modifier and overflow bonus."""

    overflow_bonus: int = 0


def query_probability(
    document: dict[str, Any],
    roll: int,
    keep: int,
    explosion_mode: ExplosionMode,
    emphasis: bool,
    tn: int,
    modifier: int = 0,
    raises: int = 0,
) -> ProbabilityResult:
    """Chance that XkY+modifier reaches tn with the given called raises."""
    roll, keep, bonus = actual_xky(roll, keep)
    config = RollConfig(roll, keep, explosion_mode, emphasis)
    table = find_table(document, config)

    effective_tn = tn + raises * RAISE_SIZE - modifier - bonus
    return ProbabilityResult(
        table=table,
        success_rate=cumulative_probability(table, effective_tn),
        effective_tn=effective_tn,
        overflow_bonus=bonus,
    )
