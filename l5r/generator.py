"""
Batch pipeline: turn roll configurations into validated probability tables.

For each configuration we simulate a histogram, check it, reduce it to
statistics and a cumulative table, check the cumulative table, and package
the result. The first failure stops the whole batch: the output is a
trusted lookup table, so a partial or unchecked document is worse than
none at all.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterable
from random import Random

from l5r.config import RollConfig
from l5r.dice import simulate
from l5r.exceptions import DistributionInvariantError
from l5r.records import ProbabilityTable
from l5r.stats import calculate_cumulative, calculate_statistics, validate_cumulative, validate_distribution

log = logging.getLogger(__name__)

# Called after each table with (1-based index, total configs, config, seconds).
ProgressCallback = Callable[[int, int, RollConfig, float], None]


def build_table(config: RollConfig, rng: Random) -> ProbabilityTable:
    """Simulate, validate and reduce one configuration."""
    total_count = config.simulation_rounds
    histogram = simulate(config, rng)

    try:
        validate_distribution(histogram, total_count)
        statistics = calculate_statistics(histogram, total_count)
        cumulative = calculate_cumulative(histogram, total_count)
        validate_cumulative(cumulative)
    except DistributionInvariantError as e:
        raise DistributionInvariantError(e.reason, config=config) from e

    return ProbabilityTable.from_results(config, statistics, cumulative)


def generate_tables(
    configs: Iterable[RollConfig],
    rng: Random,
    progress: ProgressCallback | None = None,
) -> list[ProbabilityTable]:
    """Build a table for every configuration, in order."""
    configs = list(configs)
    tables: list[ProbabilityTable] = []
    for index, config in enumerate(configs, start=1):
        start = time.perf_counter()
        tables.append(build_table(config, rng))
        elapsed = time.perf_counter() - start
        if progress:
            progress(index, len(configs), config, elapsed)

    log.info("built %d probability tables", len(tables))
    return tables
