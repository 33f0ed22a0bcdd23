"""Tests for loading table documents and querying probabilities."""

import json

import pytest

from l5r.config import ExplosionMode, RollConfig
from l5r.exceptions import ConfigurationError, TableLookupError
from l5r.output import create_probability_tables, write_json_file
from l5r.records import ProbabilityTable, Statistics
from l5r.tables import clear_cache, cumulative_probability, find_table, load_tables, query_probability

SKILLED = ExplosionMode.SKILLED
STATS = Statistics(mean=20.0, stddev=5.0, median=20, percentile_25=15, percentile_75=25, min=5, max=40)
CUMULATIVE = {0: 1.0, 5: 1.0, 10: 0.8, 20: 0.5, 22: 0.4, 30: 0.1}


def make_document(*configs: RollConfig) -> dict:
    tables = [ProbabilityTable.from_results(c, STATS, CUMULATIVE) for c in configs]
    return create_probability_tables(tables)


@pytest.fixture(autouse=True)
def fresh_cache():
    clear_cache()
    yield
    clear_cache()


class TestLoadTables:
    def test_loads_written_document(self, tmp_path) -> None:
        path = str(tmp_path / "tables.json")
        write_json_file(path, make_document(RollConfig(5, 3)))
        document = load_tables(path)
        assert len(document["tables"]) == 1

    def test_cached_by_path(self, tmp_path) -> None:
        path = str(tmp_path / "tables.json")
        write_json_file(path, make_document(RollConfig(5, 3)))
        first = load_tables(path)
        write_json_file(path, make_document(RollConfig(5, 3), RollConfig(6, 3)))
        assert load_tables(path) is first
        clear_cache()
        assert len(load_tables(path)["tables"]) == 2

    def test_not_a_tables_document(self, tmp_path) -> None:
        path = tmp_path / "tables.json"
        path.write_text(json.dumps({"version": "1.0.0"}))
        with pytest.raises(TableLookupError):
            load_tables(str(path))

    def test_missing_file(self, tmp_path) -> None:
        with pytest.raises(OSError):
            load_tables(str(tmp_path / "nope.json"))


class TestFindTable:
    def test_matches_every_field(self) -> None:
        wanted = RollConfig(5, 3, SKILLED, emphasis=True)
        document = make_document(
            RollConfig(5, 3, SKILLED), wanted, RollConfig(5, 3, ExplosionMode.MASTERY, True),
        )
        assert find_table(document, wanted).config == wanted

    def test_missing(self) -> None:
        with pytest.raises(TableLookupError, match="7k4 m"):
            find_table(make_document(RollConfig(5, 3)), RollConfig(7, 4, ExplosionMode.MASTERY))


class TestCumulativeProbability:
    table = ProbabilityTable.from_results(RollConfig(5, 3), STATS, CUMULATIVE)

    def test_exact(self) -> None:
        assert cumulative_probability(self.table, 20) == 0.5

    def test_below_everything(self) -> None:
        assert cumulative_probability(self.table, -5) == 1.0

    def test_between_stored_tns_uses_next_one_up(self) -> None:
        """Nobody rolled a 21, so P(>=21) is the same as P(>=22)."""
        assert cumulative_probability(self.table, 21) == 0.4
        assert cumulative_probability(self.table, 3) == 1.0

    def test_above_everything(self) -> None:
        assert cumulative_probability(self.table, 31) == 0.0


class TestQueryProbability:
    def test_plain(self) -> None:
        document = make_document(RollConfig(5, 3))
        result = query_probability(document, 5, 3, SKILLED, False, 20)
        assert result.success_rate == 0.5
        assert result.effective_tn == 20
        assert result.overflow_bonus == 0

    def test_modifier_lowers_tn(self) -> None:
        """5k3+10 vs TN 30 needs 20 on the dice."""
        document = make_document(RollConfig(5, 3))
        result = query_probability(document, 5, 3, SKILLED, False, 30, modifier=10)
        assert result.effective_tn == 20
        assert result.success_rate == 0.5

    def test_raises_add_five_each(self) -> None:
        document = make_document(RollConfig(5, 3))
        result = query_probability(document, 5, 3, SKILLED, False, 20, raises=2)
        assert result.effective_tn == 30
        assert result.success_rate == 0.1

    def test_ten_dice_rule(self) -> None:
        """12k4 is looked up as 10k5."""
        document = make_document(RollConfig(10, 5))
        result = query_probability(document, 12, 4, SKILLED, False, 20)
        assert result.table.config == RollConfig(10, 5)
        assert result.overflow_bonus == 0

    def test_overflow_bonus_lowers_tn(self) -> None:
        """10k12 becomes 10k10+4."""
        document = make_document(RollConfig(10, 10))
        result = query_probability(document, 10, 12, SKILLED, False, 24)
        assert result.overflow_bonus == 4
        assert result.effective_tn == 20

    def test_extra_rolled_dice_past_keep_10(self) -> None:
        """14k12 becomes 10k10+12."""
        document = make_document(RollConfig(10, 10))
        result = query_probability(document, 14, 12, SKILLED, False, 30)
        assert result.overflow_bonus == 12
        assert result.effective_tn == 18

    def test_invalid_pool(self) -> None:
        with pytest.raises(ConfigurationError):
            query_probability(make_document(RollConfig(5, 3)), 3, 5, SKILLED, False, 20)
