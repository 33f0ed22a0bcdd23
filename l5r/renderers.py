"""Renderers that convert tables and query results into text output.

The TextRenderer produces terminal-friendly lines for the generator's
progress log and summary, for probability queries, and for live rolls. The Streamlit UI
reuses the same labels.
"""

from __future__ import annotations

from l5r.config import RAISE_SIZE, ExplosionMode, RollConfig
from l5r.parser import RollExpression
from l5r.records import DiceRoll, ProbabilityTable, RolledDie
from l5r.tables import ProbabilityResult

# Pools shown in the summary after a generator run.
SAMPLE_CONFIGS = (
    (RollConfig(5, 3, ExplosionMode.SKILLED), "5k3 skilled"),
    (RollConfig(7, 4, ExplosionMode.MASTERY), "7k4 mastery"),
    (RollConfig(10, 10, ExplosionMode.MASTERY, emphasis=True), "10k10 mastery+emphasis"),
)

SAMPLE_TN = 25

DIFFICULTY_LABELS = (
    (0.95, "Trivial"),
    (0.75, "Easy"),
    (0.5, "Moderate"),
    (0.25, "Hard"),
    (0.1, "Very Hard"),
)


def difficulty_label(success_rate: float) -> str:
    for threshold, label in DIFFICULTY_LABELS:
        if success_rate >= threshold:
            return label
    return "Nearly Impossible"


def format_die(die: RolledDie) -> str:
    """A die as text: 7, or 18 (10+8) for a die that exploded."""
    if not die.exploded:
        return str(die.total)
    return f"{die.total} (" + "+".join(str(face) for face in die.faces) + ")"


class TextRenderer:
    """Renders generator progress, summaries and query results as text.

    Each render_* method returns either a single line or a list of lines.
    """

    def render_progress(self, index: int, total: int, config: RollConfig, elapsed: float) -> str:
        percent = index / total * 100
        return f"[{index:3}/{total:3}] ({percent:5.1f}%) {config.label} [{elapsed:.2f}s]"

    def render_statistics(self, table: ProbabilityTable) -> list[str]:
        stats = table.statistics
        return [
            f"Mean:   {stats.mean:.2f}",
            f"StdDev: {stats.stddev:.2f}",
            f"Median: {stats.median}",
            f"Range:  {stats.min} - {stats.max}",
        ]

    def render_summary(self, tables: list[ProbabilityTable]) -> list[str]:
        """Statistics for a few representative pools, if they were built."""
        by_config = {table.config: table for table in tables}
        lines: list[str] = []
        for config, label in SAMPLE_CONFIGS:
            table = by_config.get(config)
            if table is None:
                continue
            lines.append(f"{label} ->")
            lines.extend(f"  {line}" for line in self.render_statistics(table))
            prob = table.cumulative_probability.get(str(SAMPLE_TN))
            if prob is not None:
                lines.append(f"  P(>={SAMPLE_TN}): {prob * 100:.1f}%")
            lines.append("")
        return lines

    def render_query(self, expr: RollExpression, result: ProbabilityResult) -> list[str]:
        rate = result.success_rate
        tn = (expr.tn or 0) + expr.raises * RAISE_SIZE
        stats = result.table.statistics
        lines = [
            f"{expr} vs TN {tn}",
            f"Success rate: {rate * 100:.1f}% ({difficulty_label(rate)})",
            f"Average: {stats.mean:.1f} (stddev {stats.stddev:.1f})",
            f"Typical roll: {stats.median}",
            f"Common range: {stats.percentile_25}-{stats.percentile_75}",
            f"Possible range: {stats.min}-{stats.max}",
        ]
        modes = [expr.explosion_mode.value.capitalize()]
        if expr.emphasis:
            modes.append("Emphasis")
        if expr.raises:
            modes.append(f"{expr.raises} raise{'s' if expr.raises != 1 else ''}")
        if result.overflow_bonus:
            modes.append(f"Ten dice rule +{result.overflow_bonus}")
        lines.append(" | ".join(modes))
        return lines

    def render_roll(self, roll: DiceRoll) -> list[str]:
        """Every die in rolling order with kept dice in brackets, then the
        sum and, when there is a TN, whether it was made."""
        pool = f"{roll.original_roll}k{roll.original_keep}"
        if roll.modifier:
            pool += f"{roll.modifier:+d}"
        lines = [f"Rolled {pool} ({roll.explosion_mode.value})"]

        if roll.ten_dice_rule_applied:
            converted = f"{roll.roll}k{roll.keep}"
            if roll.overflow_bonus:
                converted += f"+{roll.overflow_bonus}"
            lines.append(f"Ten dice rule: {roll.original_roll}k{roll.original_keep} -> {converted}")

        for i, die in roll.emphasis_rerolls:
            lines.append(f"Emphasis: die {i + 1}: 1 -> {format_die(die)}")

        dice = [
            f"[{format_die(die)}]" if die.kept else format_die(die)
            for die in roll.dice
        ]
        lines.append("Dice: " + ", ".join(dice))

        exploded = sum(1 for die in roll.dice if die.exploded)
        if exploded:
            lines.append(f"{exploded} {'die' if exploded == 1 else 'dice'} exploded")

        extras = [n for n in (roll.overflow_bonus, roll.modifier) if n]
        if extras:
            steps = " ".join(f"{n:+d}" for n in extras)
            lines.append(f"Total: {roll.subtotal} {steps} = {roll.total}")
        else:
            lines.append(f"Total: {roll.total}")

        if roll.effective_tn is not None:
            if roll.success:
                raises = roll.achieved_raises
                lines.append(
                    f"TN {roll.effective_tn}: SUCCESS by {roll.margin}"
                    f" ({raises} raise{'s' if raises != 1 else ''})"
                )
            else:
                lines.append(f"TN {roll.effective_tn}: FAILED by {-roll.margin}")
        return lines
