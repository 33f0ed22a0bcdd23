"""
Domain-specific type aliases for the probability table generator.

These aren't used for runtime type checking. They exist to make function
signatures self-documenting: when a parameter is typed as Histogram rather
than dict[int, int], you immediately know it maps trial totals to how many
times that total came up.
"""

from typing import TypeAlias

# Trial total -> number of trials that produced it. Key order is
# irrelevant while accumulating; reducers sort the keys themselves.
Histogram: TypeAlias = dict[int, int]

# Target number -> P(total >= target number), ascending by target number.
CumulativeTable: TypeAlias = dict[int, float]

# The same table with string keys, ready for JSON.
SerializedCumulative: TypeAlias = dict[str, float]
