"""Assemble the probability tables into one JSON document and write it."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from datetime import datetime, timezone
from typing import Any

from l5r.config import ExplosionMode
from l5r.records import ProbabilityTable
from l5r.stats import PROBABILITY_CUTOFF

log = logging.getLogger(__name__)

TABLE_VERSION = "1.0.0"
DEFAULT_OUTPUT = "data/probability-tables.json"


def create_probability_tables(tables: list[ProbabilityTable]) -> dict[str, Any]:
    """The root document: metadata about the run followed by every table."""
    return {
        "version": TABLE_VERSION,
        "generated_at": datetime.now(timezone.utc).isoformat(),
        "simulation_rounds": {mode.value: mode.simulation_rounds for mode in ExplosionMode},
        "probability_cutoff": PROBABILITY_CUTOFF,
        "tables": [table.to_dict() for table in tables],
    }


def write_json_file(path: str, document: dict[str, Any]) -> None:
    """Write the document as pretty-printed JSON.

    The JSON goes to a temporary file beside the target and is moved into
    place only once fully written, so a failed run never leaves a partial
    document behind. OSError propagates to the caller.
    """
    parent = os.path.dirname(os.path.abspath(path))
    os.makedirs(parent, exist_ok=True)

    fd, tmp_path = tempfile.mkstemp(dir=parent, prefix=".probability-tables-", suffix=".tmp")
    try:
        with os.fdopen(fd, "w") as f:
            json.dump(document, f, indent=2)
            f.write("\n")
        os.replace(tmp_path, path)
    except BaseException:
        os.unlink(tmp_path)
        raise

    log.info("wrote %d tables to %s", len(document["tables"]), path)


def format_file_size(size: int) -> str:
    """Human-readable size: bytes, then KB with one decimal, then MB with two."""
    kb = 1024
    mb = kb * 1024
    if size < kb:
        return f"{size} bytes"
    if size < mb:
        return f"{size / kb:.1f} KB"
    return f"{size / mb:.2f} MB"
