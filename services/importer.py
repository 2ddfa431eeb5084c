"""
Accident dataset importer.
Loads a city accident CSV (City, Location, Date, Time, Latitude, Longitude,
Severity) into the accidents table, skipping records that already exist.
"""

import logging
import os
from datetime import timezone
from typing import Dict, List, Set, Tuple

import pandas as pd
from pandas.errors import EmptyDataError
from sqlalchemy.orm import Session

from errors import DatasetNotFoundError
from models import Accident
from schemas import ImportSummary

logger = logging.getLogger(__name__)

# Severity label to the 1-5 scale used by the heatmap
SEVERITY_MAP: Dict[str, int] = {
    "low": 1,
    "medium": 3,
    "high": 5,
}
DEFAULT_SEVERITY = 3

CSV_COLUMNS = ["city", "location", "date", "time", "latitude", "longitude", "severity"]
BATCH_SIZE = 100


def severity_to_numeric(severity: str) -> int:
    """
    Convert a severity label to its numeric weight.

    Args:
        severity: Severity label (low, medium, high)

    Returns:
        1, 3 or 5; unknown labels map to 3
    """
    if not isinstance(severity, str):
        return DEFAULT_SEVERITY
    return SEVERITY_MAP.get(severity.strip().lower(), DEFAULT_SEVERITY)


def load_accident_frame(csv_path: str) -> Tuple[pd.DataFrame, int]:
    """
    Read and clean an accident CSV.

    Only the first seven fields of each row are read. Rows with missing
    fields, non-numeric or out-of-range coordinates, or an unparseable
    date/time are dropped. An empty file yields an empty frame.

    Returns:
        (clean frame with latitude/longitude/severity/timestamp, raw row count)

    Raises:
        DatasetNotFoundError: If the file does not exist
    """
    if not os.path.exists(csv_path):
        raise DatasetNotFoundError(f"Dataset file not found: {csv_path}")

    try:
        # Header line is skipped; extra trailing fields are cut to the first seven
        raw = pd.read_csv(
            csv_path,
            header=None,
            skiprows=1,
            names=CSV_COLUMNS,
            index_col=False,
            dtype=str,
            keep_default_na=False,
            skipinitialspace=True,
            engine="python",
            on_bad_lines=lambda fields: fields[:len(CSV_COLUMNS)],
        )
    except EmptyDataError:
        raw = pd.DataFrame(columns=CSV_COLUMNS)

    if raw.empty:
        logger.warning("Dataset %s has no accident rows", csv_path)
        return pd.DataFrame(columns=["latitude", "longitude", "severity", "timestamp"]), 0
    total_rows = len(raw)

    complete = raw.notna().all(axis=1)
    raw = raw.fillna("").apply(lambda col: col.str.strip())

    frame = pd.DataFrame({
        "latitude": pd.to_numeric(raw["latitude"], errors="coerce"),
        "longitude": pd.to_numeric(raw["longitude"], errors="coerce"),
        "severity": raw["severity"].map(severity_to_numeric),
        "timestamp": pd.to_datetime(
            raw["date"] + "T" + raw["time"] + ":00Z",
            format="%Y-%m-%dT%H:%M:%SZ",
            errors="coerce",
            utc=True,
        ),
    })

    in_range = frame["latitude"].between(-90, 90) & frame["longitude"].between(-180, 180)
    frame = frame[complete & in_range & frame["timestamp"].notna()]
    return frame.reset_index(drop=True), total_rows


def _existing_keys(db: Session, batch: List[dict]) -> Set[Tuple[float, float, object]]:
    timestamps = list({r["timestamp"] for r in batch})
    rows = (
        db.query(Accident.latitude, Accident.longitude, Accident.timestamp)
        .filter(Accident.timestamp.in_(timestamps))
        .all()
    )
    return {(r.latitude, r.longitude, _naive_utc(r.timestamp)) for r in rows}


def _naive_utc(ts):
    # SQLite returns naive datetimes; compare everything as naive UTC
    if ts is not None and ts.tzinfo is not None:
        return ts.astimezone(timezone.utc).replace(tzinfo=None)
    return ts


def import_accidents_csv(db: Session, csv_path: str, batch_size: int = BATCH_SIZE) -> ImportSummary:
    """
    Import an accident CSV in batches.

    Records matching an existing (latitude, longitude, timestamp) are skipped,
    so re-running the import on the same dataset is a no-op.

    Args:
        db: SQLAlchemy database session
        csv_path: Path to the CSV dataset
        batch_size: Records committed per batch

    Returns:
        ImportSummary with imported, duplicate and skipped counts
    """
    logger.info("Reading accident dataset from %s", csv_path)
    frame, total_rows = load_accident_frame(csv_path)
    records = [
        {
            "latitude": float(row.latitude),
            "longitude": float(row.longitude),
            "severity": int(row.severity),
            "timestamp": row.timestamp.to_pydatetime(),
        }
        for row in frame.itertuples(index=False)
    ]
    logger.info("Prepared %d records, beginning upload", len(records))

    imported = 0
    duplicates = 0
    seen: Set[Tuple[float, float, object]] = set()

    for start in range(0, len(records), batch_size):
        batch = records[start:start + batch_size]
        existing = _existing_keys(db, batch)

        new_rows = []
        for record in batch:
            key = (record["latitude"], record["longitude"], _naive_utc(record["timestamp"]))
            if key in existing or key in seen:
                duplicates += 1
                continue
            seen.add(key)
            new_rows.append(Accident(**record))

        db.add_all(new_rows)
        db.commit()
        imported += len(new_rows)
        logger.info("Uploaded %d/%d records", start + len(batch), len(records))

    return ImportSummary(
        total_rows=total_rows,
        imported=imported,
        duplicates=duplicates,
        skipped=total_rows - len(records),
    )
