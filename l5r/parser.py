"""
Parse roll expressions such as "7k4+5 m e tn:30 r:1".

The first word is the pool, XkY with an optional attached modifier. Any
following words may be, in any order:

    +Z / -Z            extra modifier, added to any attached one
    u, unskilled       no explosions
    m, mastery         9s and 10s explode
    e, emph, emphasis  reroll unexploded 1s (also e:1, emph:1, emphasis:1)
    tn:N, t:N, vs:N    target number
    r:N, raises:N      called raises

Rolls default to skilled (10s explode). Unknown words are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from l5r.config import ExplosionMode
from l5r.exceptions import RollExpressionError

MAX_ROLLED = 100
EMPHASIS_THRESHOLD = 1

POOL_RE = re.compile(r"^(\d+)k(\d+)([+-]\d+)?$")
MODIFIER_RE = re.compile(r"^[+-]\d+$")


@dataclass
class RollExpression:
    roll: int
    keep: int
    modifier: int = 0
    explosion_mode: ExplosionMode = ExplosionMode.SKILLED
    emphasis: bool = False
    tn: int | None = None
    raises: int = 0

    def __str__(self) -> str:
        pool = f"{self.roll}k{self.keep}"
        if self.modifier:
            pool += f"{self.modifier:+d}"
        return pool


def _int_option(key: str, value: str) -> int:
    try:
        return int(value)
    except ValueError:
        raise RollExpressionError(f"{key} needs a number, got {value!r}") from None


def parse_roll_expression(text: str) -> RollExpression:
    parts = text.strip().lower().split()
    if not parts:
        raise RollExpressionError("no roll expression provided")

    match = POOL_RE.match(parts[0])
    if not match:
        raise RollExpressionError(
            "invalid roll expression, use XkY (e.g. 5k3, 7k4+10, 10k5-5)"
        )

    roll, keep = int(match[1]), int(match[2])
    if not 1 <= roll <= MAX_ROLLED:
        raise RollExpressionError(f"number of dice to roll must be 1-{MAX_ROLLED}")
    if keep < 1:
        raise RollExpressionError("number of dice to keep must be at least 1")
    if keep > roll:
        raise RollExpressionError(f"cannot keep {keep} dice when only rolling {roll}")

    expr = RollExpression(roll=roll, keep=keep, modifier=int(match[3] or 0))

    for part in parts[1:]:
        if MODIFIER_RE.match(part):
            expr.modifier += int(part)
        elif part in ("u", "unskilled"):
            expr.explosion_mode = ExplosionMode.UNSKILLED
        elif part in ("m", "mastery"):
            expr.explosion_mode = ExplosionMode.MASTERY
        elif part in ("e", "emph", "emphasis"):
            expr.emphasis = True
        elif ":" in part:
            key, _, value = part.partition(":")
            if key in ("tn", "t", "vs"):
                expr.tn = _int_option(key, value)
                if expr.tn < 1:
                    raise RollExpressionError("target number must be positive")
            elif key in ("r", "raises"):
                expr.raises = _int_option(key, value)
                if expr.raises < 0:
                    raise RollExpressionError("raises must not be negative")
            elif key in ("e", "emph", "emphasis"):
                threshold = _int_option(key, value)
                if not 1 <= threshold <= 10:
                    raise RollExpressionError("emphasis threshold must be 1-10")
                # Tables and rolls only reroll 1s.
                if threshold != EMPHASIS_THRESHOLD:
                    raise RollExpressionError(
                        f"only emphasis on {EMPHASIS_THRESHOLD}s is supported, got e:{threshold}"
                    )
                expr.emphasis = True

    return expr
