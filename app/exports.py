"""
Tabular export of a projection: CSV (one file per frequency) or a single
XLSX workbook with Monthly / Yearly / Metrics sheets.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd

from core.logging import get_logger
from engine.result import ProjectionResult

logger = get_logger(__name__)


def metrics_frame(result: ProjectionResult, metadata: Optional[Dict[str, Any]] = None) -> pd.DataFrame:
    rows = dict(result.metrics())
    for k, v in (metadata or {}).items():
        if not isinstance(v, (dict, list, tuple)):
            rows[k] = v
    return pd.DataFrame({"metric": list(rows.keys()), "value": list(rows.values())})


def export_projection(
    result: ProjectionResult,
    path: Union[str, Path],
    *,
    start_year: int = 2025,
    metadata: Optional[Dict[str, Any]] = None,
) -> List[Path]:
    """
    Write a projection to disk.

    Parameters
    ----------
    path : str or Path
        `.xlsx` writes one workbook. Anything else is treated as a CSV stem:
        `<stem>_monthly.csv`, `<stem>_yearly.csv` and `<stem>_metrics.csv`.

    Returns
    -------
    List of files written.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    monthly = result.monthly_frame(start_year)
    yearly = result.yearly_frame(start_year)
    metrics = metrics_frame(result, metadata)

    if path.suffix.lower() == ".xlsx":
        with pd.ExcelWriter(path, engine="openpyxl") as writer:
            monthly.to_excel(writer, sheet_name="Monthly", index=False)
            yearly.to_excel(writer, sheet_name="Yearly", index=False)
            metrics.to_excel(writer, sheet_name="Metrics", index=False)
        written = [path]
    else:
        stem = path.with_suffix("")
        written = []
        for name, df in (("monthly", monthly), ("yearly", yearly), ("metrics", metrics)):
            out = stem.parent / f"{stem.name}_{name}.csv"
            df.to_csv(out, index=False)
            written.append(out)

    logger.info("Exported projection to %s", ", ".join(str(p) for p in written))
    return written
