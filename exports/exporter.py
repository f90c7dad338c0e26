"""
Local file save for formatted grade exports.
"""

from datetime import date, datetime, timezone
from pathlib import Path
from typing import Optional, Union
import logging

from .errors import SaveError
from .options import FORMAT_CSV, FORMAT_JSON

logger = logging.getLogger(__name__)

MIME_TYPES = {
    FORMAT_CSV: 'text/csv',
    FORMAT_JSON: 'application/json',
}


def export_filename(kind: str, on_date: Optional[date] = None) -> str:
    """Build ``grades-export-<YYYY-MM-DD>.<ext>`` for today's UTC date."""
    if kind not in MIME_TYPES:
        raise ValueError(f"Unsupported export format '{kind}'")
    on_date = on_date or datetime.now(timezone.utc).date()
    return f"grades-export-{on_date.isoformat()}.{kind}"


def save_export(content: str, kind: str, directory: Union[str, Path],
                filename: Optional[str] = None, on_date: Optional[date] = None) -> Path:
    """
    Write a formatted export document to ``directory``.

    Args:
        content: Formatted CSV or JSON text
        kind: 'csv' or 'json'
        directory: Target directory (created if missing)
        filename: Override for the conventional file name
        on_date: Date used in the conventional file name

    Returns:
        Path of the written file

    Raises:
        SaveError: if the directory or file cannot be written
        ValueError: if ``kind`` is not a supported format
    """
    if kind not in MIME_TYPES:
        raise ValueError(f"Unsupported export format '{kind}'")
    path =Path(directory) / (filename or export_filename(kind, on_date))
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding='utf-8')
    except OSError as e:
        logger.error(f"Saving export to {path} failed: {e}")
        raise SaveError(path, e.strerror or str(e)) from e

    logger.info(f"Saved {MIME_TYPES[kind]} export to {path}")
    return path
