"""
CSV export of readiness series for external plotting.

Two columns (time in days, readiness), comma separated, no header — the
layout PGFPlots reads with ``table[x index=0, y index=1, col sep=comma]``.
"""
import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from readiness_engine.config import FIGDATA_DIR
from readiness_engine.errors import DegenerateInputFailure
from readiness_engine.simulation.simulator import Readout

logger = logging.getLogger(__name__)


def readiness_table(readout: Readout) -> pd.DataFrame:
    return pd.DataFrame({"t": readout.ts, "P": readout.readiness})


def save_readiness_csv(readout: Readout, path=None, name: Optional[str] = None) -> Path:
    """
    Write (t, P) rows for a readout.

    Args:
        readout: Simulation result
        path: Target file; defaults to FIGDATA_DIR / name
        name: File name used when path is not given
    """
    if readout.readiness.size == 0:
        raise DegenerateInputFailure("Readout has no samples to export")
    if path is None:
        if not name:
            raise ValueError("Either path or name is required")
        path = FIGDATA_DIR / name
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)

    readiness_table(readout).to_csv(path, header=False, index=False, float_format="%.10g")
    logger.info("Saved %s (rows=%d)", path, readout.ts.size)
    return path
