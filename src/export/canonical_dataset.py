"""Canonical CSV dataset writer for downstream CGE calibration.

Writes `sam.csv` and `sets.csv` always, plus `subsets.csv`, `labels.csv`,
`mappings.csv` and `params.csv` when those tables are supplied.

Writes are per file and not transactional: a failure part-way leaves the
files already written in place.
"""

from __future__ import annotations

import logging
from pathlib import Path

import pandas as pd

from src.data.io_bundle import IOBundle
from src.engine.sam import sam_from_io, sets_from_bundle

logger = logging.getLogger(__name__)

SAM_FILE = "sam.csv"
SETS_FILE = "sets.csv"


def write_canonical_dataset(
    directory: str | Path,
    bundle: IOBundle,
    *,
    sam: pd.DataFrame | None = None,
    sets: pd.DataFrame | None = None,
    subsets: pd.DataFrame | None = None,
    labels: pd.DataFrame | None = None,
    mappings: pd.DataFrame | None = None,
    params: pd.DataFrame | None = None,
) -> list[Path]:
    """Write the canonical CSV dataset to `directory`.

    The directory (and parents) is created if absent. `sam` and `sets`
    are derived from the bundle when not given.

    Returns:
        Paths of the files written, in write order.
    """
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)

    if sam is None:
        sam = sam_from_io(bundle)
    if sets is None:
        sets = sets_from_bundle(bundle)

    tables: list[tuple[str, pd.DataFrame | None]] = [
        (SAM_FILE, sam),
        (SETS_FILE, sets),
        ("subsets.csv", subsets),
        ("labels.csv", labels),
        ("mappings.csv", mappings),
        ("params.csv", params),
    ]

    written: list[Path] = []
    for filename, table in tables:
        if table is None:
            continue
        path = directory / filename
        table.to_csv(path, index=False)
        written.append(path)

    logger.info(
        "Wrote canonical dataset to %s: %s",
        directory, ", ".join(p.name for p in written),
    )
    return written
