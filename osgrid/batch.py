"""Bulk grid reference conversion over pandas DataFrames and CSV/parquet files."""

import logging
from pathlib import Path
from typing import Optional

import pandas as pd

from .grid.convert import from_grid_reference, to_grid_reference

logger = logging.getLogger(__name__)


def add_grid_references(
    df: pd.DataFrame,
    lat_col: str = "latitude",
    lon_col: str = "longitude",
    out_col: str = "grid_reference",
    digits: Optional[int] = None,
    datum_shift: Optional[bool] = None,
) -> pd.DataFrame:
    """Return a copy of ``df`` with a grid reference column built from lat/lon.

    Rows that are missing coordinates or fall off the grid get None.
    """
    for col in (lat_col, lon_col):
        if col not in df.columns:
            raise KeyError(f"Column {col!r} not found (have: {', '.join(map(str, df.columns))})")

    refs = [
        to_grid_reference(lat, lon, digits=digits, datum_shift=datum_shift)
        for lat, lon in zip(df[lat_col], df[lon_col])
    ]

    out = df.copy()
    out[out_col] = pd.Series(refs, index=df.index, dtype=object)
    failed = sum(1 for r in refs if r is None)
    logger.info("Grid references: %d/%d rows converted, %d failed",
                len(refs) - failed, len(refs), failed)
    return out


def add_coordinates(
    df: pd.DataFrame,
    ref_col: str = "grid_reference",
    lat_col: str = "latitude",
    lon_col: str = "longitude",
    datum_shift: Optional[bool] = None,
) -> pd.DataFrame:
    """Return a copy of ``df`` with lat/lon columns decoded from a grid reference column.

    Malformed references get None in both columns.
    """
    if ref_col not in df.columns:
        raise KeyError(f"Column {ref_col!r} not found (have: {', '.join(map(str, df.columns))})")

    lats, lons = [], []
    for ref in df[ref_col]:
        coord = from_grid_reference(ref, datum_shift=datum_shift) if isinstance(ref, str) else None
        lats.append(coord.latitude if coord else None)
        lons.append(coord.longitude if coord else None)

    out = df.copy()
    out[lat_col] = pd.Series(lats, index=df.index, dtype=object)
    out[lon_col] = pd.Series(lons, index=df.index, dtype=object)
    failed = sum(1 for lat in lats if lat is None)
    logger.info("Coordinates: %d/%d rows converted, %d failed",
                len(lats) - failed, len(lats), failed)
    return out


def read_table(path: Path) -> pd.DataFrame:
    """Read a CSV or parquet file, chosen by extension."""
    path = Path(path)
    if path.suffix.lower() == ".parquet":
        return pd.read_parquet(path)
    return pd.read_csv(path)


def write_table(df: pd.DataFrame, path: Path) -> None:
    """Write a CSV or parquet file, chosen by extension."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if path.suffix.lower() == ".parquet":
        df.to_parquet(path, compression="snappy", index=False)
    else:
        df.to_csv(path, index=False)
