"""Bulk-add bookmarks from a CSV export."""

import logging
import os
from dataclasses import dataclass, field
from typing import List, Optional

import pandas as pd

from .client import Client
from .errors import ApiError

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ["url", "time_added"]


@dataclass
class ImportStats:
    """Statistics for an import run."""
    total_rows: int = 0
    added: int = 0
    failed: int = 0
    errors: List[str] = field(default_factory=list)


def _cell(row, column: str) -> str:
    value = row.get(column)
    if value is None or pd.isna(value):
        return ""
    return str(value)


def read_bookmarks_csv(csv_path: str, status: Optional[str] = None) -> pd.DataFrame:
    """
    Read and filter a bookmarks CSV, oldest first.

    Args:
        csv_path: Path to the CSV file
        status: Only keep rows whose ``status`` column equals this value

    Returns:
        DataFrame sorted by time_added

    Raises:
        ValueError: If the file is missing or lacks required columns
    """
    if not os.path.exists(csv_path):
        raise ValueError(f"CSV file not found at {csv_path}")

    bookmarks_csv = pd.read_csv(csv_path)

    if not all(col in bookmarks_csv.columns for col in REQUIRED_COLUMNS):
        raise ValueError(f"CSV must contain the following columns: {REQUIRED_COLUMNS}")

    bookmarks_csv = bookmarks_csv.sort_values("time_added", kind="stable")

    if status:
        if "status" not in bookmarks_csv.columns:
            logger.warning("status column not found in CSV, skipping filter")
        else:
            bookmarks_csv = bookmarks_csv[bookmarks_csv["status"] == status]

    return bookmarks_csv


def import_csv(client: Client, csv_path: str,
               status: Optional[str] = None) -> ImportStats:
    """
    Add every bookmark of a CSV file to Instapaper.

    A failed row is recorded and the import moves on. Authentication
    errors stop the import.

    Args:
        client: Authenticated client
        csv_path: Path to the CSV file
        status: Only import rows whose ``status`` column equals this value

    Returns:
        ImportStats for the run
    """
    bookmarks_csv = read_bookmarks_csv(csv_path, status)
    stats = ImportStats(total_rows=len(bookmarks_csv))

    for _, row in bookmarks_csv.iterrows():
        url = _cell(row, "url")
        try:
            logger.info("Adding article: %s", url)
            client.add(url, _cell(row, "title"), _cell(row, "description"))
            stats.added += 1
        except ApiError as e:
            stats.failed += 1
            stats.errors.append(f"{url}: {e}")
            logger.warning("Error adding bookmark %s: %s", url, e)

    return stats
