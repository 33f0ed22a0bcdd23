"""
Dice rolling primitives for the XkY system.

All rolls use the "roll X, keep Y" (XkY) notation: roll X ten-sided dice,
keep the Y highest, and sum them. Depending on the explosion mode, dice
showing a 10 (skilled) or a 9 or 10 (mastery) "explode": they are rerolled
and the new result is added, which can chain indefinitely. Unskilled rolls
never explode.

Emphasis rerolls any die that shows a 1 and did not explode, before the
highest dice are kept.

When a dice pool exceeds 10 rolled or 10 kept, overflow is converted:
every two rolled dice above 10 become an extra kept die, and kept dice
above 10 become a flat +2 bonus per extra die.

Every function that rolls takes an explicit random.Random, so tests can
seed it or substitute a scripted one.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from random import Random

from l5r.config import DIE_SIDES, MAX_POOL, ExplosionMode, RollConfig
from l5r.exceptions import SimulationError
from l5r.parser import RollExpression
from l5r.records import DiceRoll, DieResult, RolledDie
from l5r.types import Histogram

log = logging.getLogger(__name__)

# A correct uniform source essentially never produces this many explosions
# in a row (0.2 ** 10000 for mastery), so hitting it means the RNG is broken.
MAX_EXPLOSIONS = 10_000

EXPLODING_FACES: dict[ExplosionMode, frozenset[int]] = {
    ExplosionMode.UNSKILLED: frozenset(),
    ExplosionMode.SKILLED: frozenset({10}),
    ExplosionMode.MASTERY: frozenset({9, 10}),
}


def should_explode(face: int, mode: ExplosionMode) -> bool:
    """Whether a die showing this face rerolls and adds under this mode."""
    return face in EXPLODING_FACES[mode]


def d10(mode: ExplosionMode, rng: Random) -> DieResult:
    """Roll a single d10, exploding according to the mode.

    While the most recent face explodes, we keep rolling and adding. This
    means a single die can produce arbitrarily high values, making even
    small dice pools capable of extreme results.
    """
    total = face = rng.randrange(1, DIE_SIDES + 1)
    exploded = False
    rerolls = 0
    while should_explode(face, mode):
        rerolls += 1
        if rerolls > MAX_EXPLOSIONS:
            raise SimulationError(
                f"die exploded more than {MAX_EXPLOSIONS} times in {mode.value} mode"
            )
        exploded = True
        face = rng.randrange(1, DIE_SIDES + 1)
        total += face
    return DieResult(total=total, exploded=exploded)


def apply_emphasis(dice: list[DieResult], mode: ExplosionMode, rng: Random) -> None:
    """Reroll, in place, every die that shows a 1 and did not explode.

    Each die is judged on its own and keeps its position in the list. The
    replacement is a fresh roll that may itself explode, and is never
    rerolled again even if it is another 1.
    """
    for i, die in enumerate(dice):
        if not die.exploded and die.total == 1:
            dice[i] = d10(mode, rng)


def actual_xky(roll: int, keep: int) -> tuple[int, int, int]:
    """Cap a dice pool at 10k10 per the overflow rules.

    Every two rolled dice above 10 become one extra kept die (e.g. 12k4
    becomes 10k5; an odd leftover die is lost). If the pool already keeps
    10 or more, each rolled die above 10 is a flat +2 instead. Kept dice
    above 10 are converted to a flat +2 bonus per extra die (e.g. 10k12
    becomes 10k10+4, and 14k12 becomes 10k10+12). This is needed because
    our probability tables only go up to 10k10.
    """
    bonus = 0
    if roll > MAX_POOL:
        extra = roll - MAX_POOL
        if keep >= MAX_POOL:
            bonus += 2 * extra
        else:
            keep += extra // 2
        roll = MAX_POOL
    if keep > MAX_POOL:
        bonus += 2 * (keep - MAX_POOL)
        keep = MAX_POOL

    return roll, keep, bonus


def xky(config: RollConfig, rng: Random) -> int:
    """Roll X dice, keep the Y highest, sum them. One simulated trial.

    Emphasis is applied to the whole pool before the highest dice are
    chosen. Ties between equal dice don't matter since only the sum is
    returned.
    """
    dice = [d10(config.explosion_mode, rng) for _ in range(config.roll)]
    if config.emphasis:
        apply_emphasis(dice, config.explosion_mode, rng)
    return sum(sorted(d.total for d in dice)[-config.keep:])


def simulate(config: RollConfig, rng: Random | None = None) -> Histogram:
    """Run the Monte Carlo simulation for one configuration.

    Rolls config.simulation_rounds independent trials and returns a
    histogram mapping each total to how often it came up.
    """
    rng = rng or Random()
    rounds = config.simulation_rounds
    histogram: Histogram = defaultdict(int)
    for _ in range(rounds):
        histogram[xky(config, rng)] += 1

    log.debug("%s: %d trials, %d distinct totals", config.label, rounds, len(histogram))
    return dict(histogram)


def d10_detailed(mode: ExplosionMode, rng: Random) -> RolledDie:
    """Roll a single d10 like d10(), but keep every face rolled."""
    face = rng.randrange(1, DIE_SIDES + 1)
    faces = [face]
    while should_explode(face, mode):
        if len(faces) > MAX_EXPLOSIONS:
            raise SimulationError(
                f"die exploded more than {MAX_EXPLOSIONS} times in {mode.value} mode"
            )
        face = rng.randrange(1, DIE_SIDES + 1)
        faces.append(face)
    return RolledDie(faces=faces)


def xky_detailed(expr: RollExpression, rng: Random) -> DiceRoll:
    """Make a live roll of a parsed expression, returning every die.

    Same logic as xky() with the overflow rules from actual_xky applied
    first. Dice stay in the order they were rolled; the highest Y are
    marked as kept.
    """
    roll, keep, bonus = actual_xky(expr.roll, expr.keep)
    mode = expr.explosion_mode

    dice = [d10_detailed(mode, rng) for _ in range(roll)]
    if expr.emphasis:
        for i, die in enumerate(dice):
            if not die.exploded and die.total == 1:
                dice[i] = d10_detailed(mode, rng)
                dice[i].replaced = die

    by_total = sorted(range(roll), key=lambda i: dice[i].total)
    for i in by_total[-keep:]:
        dice[i].kept = True

    return DiceRoll(
        original_roll=expr.roll,
        original_keep=expr.keep,
        roll=roll,
        keep=keep,
        explosion_mode=mode,
        emphasis=expr.emphasis,
        dice=dice,
        overflow_bonus=bonus,
        modifier=expr.modifier,
        tn=expr.tn,
        raises=expr.raises,
    )
