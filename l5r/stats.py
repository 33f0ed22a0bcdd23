"""
Reduce a simulation histogram to the numbers we publish.

Two reductions run on the same histogram: summary statistics (mean,
standard deviation, quartiles, observed range) and the cumulative
"at least" distribution, P(total >= TN) for every observed TN. Both sort
the histogram's keys themselves, since the simulation builds it in no
particular order.

The validators are the gate before anything is written out. Nothing
downstream re-checks these tables, so a failure raises rather than
letting a bad table through.
"""

from __future__ import annotations

import math

from l5r.exceptions import DistributionInvariantError
from l5r.records import Statistics
from l5r.types import CumulativeTable, Histogram

# Only keep TNs where P(total >= TN) is strictly above this.
PROBABILITY_CUTOFF = 1e-6

TOLERANCE = 1e-9


def calculate_statistics(histogram: Histogram, total_count: int) -> Statistics:
    """Mean, population stddev, nearest-rank quartiles and observed range."""
    if not histogram:
        raise ValueError("cannot summarize an empty histogram")

    values_with_counts = sorted(histogram.items())

    # Integer numerator so large trial counts don't lose precision.
    mean = sum(value * count for value, count in values_with_counts) / total_count
    variance = sum(
        count * (value - mean) ** 2 for value, count in values_with_counts
    ) / total_count

    return Statistics(
        mean=mean,
        stddev=math.sqrt(variance),
        median=percentile(values_with_counts, total_count, 0.50),
        percentile_25=percentile(values_with_counts, total_count, 0.25),
        percentile_75=percentile(values_with_counts, total_count, 0.75),
        min=values_with_counts[0][0],
        max=values_with_counts[-1][0],
    )


def percentile(values_with_counts: list[tuple[int, int]], total_count: int, p: float) -> int:
    """Nearest-rank percentile: the first value whose running count
    reaches floor(total_count * p).  No interpolation between values."""
    target = math.floor(total_count * p)
    running = 0
    for value, count in values_with_counts:
        running += count
        if running >= target:
            return value
    return values_with_counts[-1][0]


def calculate_cumulative(histogram: Histogram, total_count: int) -> CumulativeTable:
    """P(total >= TN) for every observed total, plus TN 0.

    We walk the totals from highest to lowest keeping a running count, so
    each entry is the share of trials at or above that total. Working in
    counts rather than summed probabilities means the lowest observed
    total comes out at exactly 1.0.

    TN 0 is always 1.0 since every total is positive. Entries at or below
    PROBABILITY_CUTOFF are dropped: an absent TN means "negligible", not
    "impossible".
    """
    cumulative: CumulativeTable = {}
    running = 0
    for value in sorted(histogram, reverse=True):
        running += histogram[value]
        cumulative[value] = running / total_count

    cumulative[0] = 1.0

    return {
        tn: p for tn, p in sorted(cumulative.items())
        if p > PROBABILITY_CUTOFF
    }


def validate_distribution(histogram: Histogram, total_count: int) -> None:
    """Raise DistributionInvariantError unless the counts add up to
    total_count and the implied probabilities sum to 1."""
    sum_counts = sum(histogram.values())
    if sum_counts != total_count:
        raise DistributionInvariantError(
            f"count sum mismatch: {sum_counts} != {total_count}"
        )

    total_probability = sum(count / total_count for count in histogram.values())
    if abs(total_probability - 1.0) > TOLERANCE:
        raise DistributionInvariantError(
            f"probability sum not 1.0: {total_probability}"
        )


def validate_cumulative(cumulative: CumulativeTable) -> None:
    """Raise DistributionInvariantError unless probabilities never rise
    as the TN goes up and all of them lie in [0, 1]."""
    prev = 1.0
    for tn, p in sorted(cumulative.items()):
        if p < -TOLERANCE or p > 1.0 + TOLERANCE:
            raise DistributionInvariantError(f"invalid probability at TN {tn}: {p}")
        if p > prev + TOLERANCE:
            raise DistributionInvariantError(
                f"non-monotonic cumulative at TN {tn}: {p} > {prev}"
            )
        prev = p
