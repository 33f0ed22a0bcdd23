#!/usr/bin/env python3
"""Generate the probability lookup tables for every XkY pool.

Runs Monte Carlo simulations for all 330 roll configurations (1k1 through
10k10, three explosion modes, with and without emphasis) and writes a JSON
document of statistics and cumulative "at least" probabilities.

Usage:
    python tools/generate_probabilities.py [output_file] [seed]

If no output file is given, writes to data/probability-tables.json. Pass a
seed to make the run reproducible.
"""

import logging
import os
import sys
import time
from random import Random

from rich.console import Console
from rich.logging import RichHandler

from l5r.config import generate_all_configs
from l5r.exceptions import ConfigurationError, DistributionInvariantError, SimulationError
from l5r.generator import generate_tables
from l5r.output import DEFAULT_OUTPUT, create_probability_tables, format_file_size, write_json_file
from l5r.renderers import TextRenderer

log = logging.getLogger("generate_probabilities")


def main() -> int:
    [fname] = sys.argv[1:2] or [DEFAULT_OUTPUT]
    [seed] = sys.argv[2:3] or [None]

    console = Console()
    logging.basicConfig(
        level=logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_time=False, console=console)],
    )
    renderer = TextRenderer()
    rng = Random(int(seed) if seed is not None else None)

    console.rule("L5R Probability Calculator")
    start = time.perf_counter()

    try:
        configs = generate_all_configs()
        console.print(f"Generating {len(configs)} probability tables...")
        tables = generate_tables(
            configs, rng,
            progress=lambda *args: console.print(renderer.render_progress(*args), highlight=False),
        )
        write_json_file(fname, create_probability_tables(tables))
    except (ConfigurationError, DistributionInvariantError, SimulationError) as e:
        log.error("aborting, no tables written: %s", e)
        return 1
    except OSError as e:
        log.error("failed to write %s: %s", fname, e)
        return 1

    console.print(f"File size: {format_file_size(os.path.getsize(fname))}")
    console.rule("Complete")
    console.print(f"Total time: {time.perf_counter() - start:.2f}s")
    console.print(f"Tables generated: {len(tables)}")
    console.print()
    for line in renderer.render_summary(tables):
        console.print(line, highlight=False)
    return 0


if __name__ == "__main__":
    sys.exit(main())
