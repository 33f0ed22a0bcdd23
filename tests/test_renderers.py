"""Tests for the text renderer."""

from random import Random
from unittest.mock import Mock

from l5r.config import ExplosionMode, RollConfig
from l5r.dice import xky_detailed
from l5r.parser import parse_roll_expression
from l5r.records import DiceRoll, ProbabilityTable, RolledDie, Statistics
from l5r.renderers import TextRenderer, difficulty_label, format_die
from l5r.tables import ProbabilityResult

STATS = Statistics(mean=24.123, stddev=7.456, median=23, percentile_25=18, percentile_75=29, min=3, max=88)


def table_for(config: RollConfig, cumulative: dict[int, float] | None = None) -> ProbabilityTable:
    return ProbabilityTable.from_results(config, STATS, cumulative or {0: 1.0, 25: 0.4321})


class TestDifficultyLabel:
    def test_thresholds(self) -> None:
        assert difficulty_label(1.0) == "Trivial"
        assert difficulty_label(0.95) == "Trivial"
        assert difficulty_label(0.8) == "Easy"
        assert difficulty_label(0.5) == "Moderate"
        assert difficulty_label(0.3) == "Hard"
        assert difficulty_label(0.1) == "Very Hard"
        assert difficulty_label(0.09) == "Nearly Impossible"
        assert difficulty_label(0.0) == "Nearly Impossible"


class TestRenderProgress:
    def test_format(self) -> None:
        line = TextRenderer().render_progress(12, 330, RollConfig(2, 2, emphasis=True), 0.4123)
        assert line == "[ 12/330] (  3.6%) 2k2 s+e [0.41s]"

    def test_last(self) -> None:
        line = TextRenderer().render_progress(330, 330, RollConfig(10, 10, ExplosionMode.MASTERY, True), 12.0)
        assert line == "[330/330] (100.0%) 10k10 m+e [12.00s]"


class TestRenderSummary:
    def test_samples_present(self) -> None:
        tables = [
            table_for(RollConfig(5, 3, ExplosionMode.SKILLED)),
            table_for(RollConfig(7, 4, ExplosionMode.MASTERY), {0: 1.0}),
            table_for(RollConfig(1, 1)),
        ]
        lines = TextRenderer().render_summary(tables)
        assert lines[:6] == [
            "5k3 skilled ->",
            "  Mean:   24.12",
            "  StdDev: 7.46",
            "  Median: 23",
            "  Range:  3 - 88",
            "  P(>=25): 43.2%",
        ]
        assert "7k4 mastery ->" in lines
        assert sum(1 for line in lines if line.startswith("  P(>=25)")) == 1
        assert not any("10k10" in line for line in lines)

    def test_nothing_to_show(self) -> None:
        assert TextRenderer().render_summary([table_for(RollConfig(1, 1))]) == []


class TestRenderQuery:
    def test_lines(self) -> None:
        expr = parse_roll_expression("7k4+5 m e tn:30 r:1")
        table = table_for(RollConfig(7, 4, ExplosionMode.MASTERY, True))
        result = ProbabilityResult(table=table, success_rate=0.62, effective_tn=30)
        lines = TextRenderer().render_query(expr, result)
        assert lines[0] == "7k4+5 vs TN 35"
        assert lines[1] == "Success rate: 62.0% (Moderate)"
        assert lines[-1] == "Mastery | Emphasis | 1 raise"

    def test_overflow_note(self) -> None:
        expr = parse_roll_expression("12k11 tn:30")
        result = ProbabilityResult(
            table=table_for(RollConfig(10, 10)), success_rate=0.99, effective_tn=24, overflow_bonus=6,
        )
        assert TextRenderer().render_query(expr, result)[-1] == "Skilled | Ten dice rule +6"


def roll_with(text: str, *faces: int) -> DiceRoll:
    rng = Mock(spec=Random)
    rng.randrange.side_effect = list(faces)
    return xky_detailed(parse_roll_expression(text), rng)


class TestFormatDie:
    def test_plain(self) -> None:
        assert format_die(RolledDie(faces=[7])) == "7"

    def test_exploded(self) -> None:
        assert format_die(RolledDie(faces=[10, 10, 3])) == "23 (10+10+3)"


class TestRenderRoll:
    def test_success(self) -> None:
        """3k2+5 rolling [2, 10+4, 5] keeps 14 and 5 for 24 vs TN 20."""
        lines = TextRenderer().render_roll(roll_with("3k2+5 tn:20", 2, 10, 4, 5))
        assert lines == [
            "Rolled 3k2+5 (skilled)",
            "Dice: 2, [14 (10+4)], [5]",
            "1 die exploded",
            "Total: 19 +5 = 24",
            "TN 20: SUCCESS by 4 (0 raises)",
        ]

    def test_failure(self) -> None:
        lines = TextRenderer().render_roll(roll_with("2k1 tn:15", 3, 7))
        assert lines == [
            "Rolled 2k1 (skilled)",
            "Dice: 3, [7]",
            "Total: 7",
            "TN 15: FAILED by 8",
        ]

    def test_raises_achieved(self) -> None:
        lines = TextRenderer().render_roll(roll_with("1k1 tn:5", 10, 2))
        assert lines[-1] == "TN 5: SUCCESS by 7 (1 raise)"
        lines = TextRenderer().render_roll(roll_with("1k1 tn:5 r:1", 10, 9))
        assert lines[-1] == "TN 10: SUCCESS by 9 (2 raises)"

    def test_no_tn(self) -> None:
        lines = TextRenderer().render_roll(roll_with("2k2 m", 9, 3, 4))
        assert lines == [
            "Rolled 2k2 (mastery)",
            "Dice: [12 (9+3)], [4]",
            "1 die exploded",
            "Total: 16",
        ]

    def test_emphasis_reroll(self) -> None:
        lines = TextRenderer().render_roll(roll_with("2k1 u e", 1, 3, 6))
        assert "Emphasis: die 1: 1 -> 6" in lines
        assert "Dice: [6], 3" in lines

    def test_ten_dice_rule(self) -> None:
        roll = xky_detailed(parse_roll_expression("12k4"), Random(4))
        lines = TextRenderer().render_roll(roll)
        assert lines[0] == "Rolled 12k4 (skilled)"
        assert lines[1] == "Ten dice rule: 12k4 -> 10k5"
        assert lines[-1] == f"Total: {roll.total}"

    def test_ten_dice_rule_bonus(self) -> None:
        roll = xky_detailed(parse_roll_expression("12k11-1"), Random(4))
        lines = TextRenderer().render_roll(roll)
        assert lines[0] == "Rolled 12k11-1 (skilled)"
        assert lines[1] == "Ten dice rule: 12k11 -> 10k10+6"
        assert lines[-1] == f"Total: {roll.subtotal} +6 -1 = {roll.total}"
