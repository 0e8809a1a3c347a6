"""
CSV writer for analytics exports.

Takes rows already shaped by ``to_export_rows`` and serializes them.
Fields containing the delimiter, quotes or line breaks are quoted by the
csv module.
"""

import csv
import io
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Optional

from skillsync.core.exceptions import ExportError
from skillsync.utils.config import get_settings
from skillsync.utils.constants import AuditAction
from skillsync.utils.logger import audit_log, get_logger

logger = get_logger(__name__)


def _write(handle, rows: Sequence[Mapping[str, str]], column_order: Sequence[str]) -> None:
    writer = csv.DictWriter(
        handle,
        fieldnames=list(column_order),
        extrasaction="ignore",
        quoting=csv.QUOTE_MINIMAL,
    )
    writer.writeheader()
    writer.writerows(rows)


def render_csv(rows: Sequence[Mapping[str, str]], column_order: Sequence[str]) -> str:
    """
    Serialize export rows to CSV text with a header line.

    Raises:
        ExportError: There are no rows or no columns
    """
    if not rows:
        raise ExportError("No data to export")
    if not column_order:
        raise ExportError("No columns selected for export")

    buffer = io.StringIO(newline="")
    _write(buffer, rows, column_order)
    return buffer.getvalue()


def write_csv(
    rows: Sequence[Mapping[str, str]],
    column_order: Sequence[str],
    filename: str,
    directory: Optional[Path] = None,
) -> Path:
    """
    Write export rows to a CSV file.

    Args:
        rows: Rows shaped by to_export_rows
        column_order: Header and column order
        filename: Target file name; ".csv" is appended when missing
        directory: Output directory (default: configured export directory)

    Returns:
        Path of the written file

    Raises:
        ExportError: There are no rows or no columns
    """
    if not rows:
        raise ExportError(f"No data to export for {filename}")
    if not column_order:
        raise ExportError(f"No columns selected for {filename}")

    settings = get_settings().export
    directory = directory or settings.output_directory
    directory.mkdir(parents=True, exist_ok=True)

    path = directory / (filename if filename.endswith(".csv") else f"{filename}.csv")
    with path.open("w", encoding=settings.encoding, newline="") as handle:
        _write(handle, rows, column_order)

    logger.info(f"Exported {len(rows)} rows to {path}")
    audit_log(
        AuditAction.REPORT_EXPORTED.value,
        {"file": str(path), "rows": len(rows), "columns": list(column_order)},
        audit_type="EXPORT",
    )
    return path
