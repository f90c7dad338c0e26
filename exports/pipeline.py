"""
The grade export pipeline: validate -> fetch -> aggregate -> format -> save.

Each run is independent. A failed validation or fetch aborts the run with
nothing written; a failed save leaves the formatted document on the result so
the user can try saving again.
"""

from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Optional, Union
import logging

from sqlalchemy.orm import Session

import config
from queries.formatting import GradeFormatter
from .aggregation import aggregate
from .errors import SaveError, ValidationError
from .exporter import MIME_TYPES, export_filename, save_export
from .fetcher import ExportFetcher
from .options import ExportOptions, ExportRequest, FORMATS

logger = logging.getLogger(__name__)


@dataclass
class ExportResult:
    """Outcome of one export run."""
    content: str
    filename: str
    mime_type: str
    export_format: str
    row_count: int
    directory: Path
    path: Optional[Path] = None
    save_error: Optional[SaveError] = None

    @property
    def saved(self) -> bool:
        return self.path is not None

    def save(self, directory: Optional[Union[str, Path]] = None) -> Path:
        """Write the in-memory document; safe to call again after a failure."""
        if directory is not None:
            self.directory = Path(directory)
        try:
            self.path = save_export(self.content, self.export_format, self.directory,
                                    filename=self.filename)
        except SaveError as e:
            self.save_error = e
            raise
        self.save_error = None
        return self.path


class GradeExport:
    """
    Runs grade exports for one instructor.

    Only one export may run at a time per instance; ``exporting`` is True
    while a run is in progress.
    """

    def __init__(self, instructor_id: str, export_dir: Optional[Union[str, Path]] = None,
                 db: Optional[Session] = None):
        self.instructor_id = instructor_id
        self.export_dir = Path(export_dir) if export_dir else config.EXPORT_DIR
        self.db = db
        self.exporting = False

    def export(self, request: ExportRequest, options: Optional[ExportOptions] = None,
               on_date: Optional[date] = None) -> ExportResult:
        """
        Run one export end to end.

        Args:
            request: Scope and course/assignment selection
            options: Format and column inclusion flags
            on_date: Date used in the file name (defaults to today, UTC)

        Returns:
            ExportResult; check ``saved`` / ``save_error`` for the file outcome

        Raises:
            ValidationError: missing selector, unknown format, or an export
                already in progress
            FetchError: a source table could not be read
        """
        options = options or ExportOptions()

        if self.exporting:
            raise ValidationError("An export is already in progress")
        if options.export_format not in FORMATS:
            raise ValidationError(f"Unknown export format '{options.export_format}'")
        request.validate()

        self.exporting = True
        try:
            records = ExportFetcher.fetch_records(self.instructor_id, request, db=self.db)
            rows = aggregate(request.scope, records.courses, records.assignments,
                             records.enrollments, records.submissions, options)
            content = GradeFormatter.format_export(rows, options.export_format,
                                                   options.include_headers)

            result = ExportResult(
                content=content,
                filename=export_filename(options.export_format, on_date),
                mime_type=MIME_TYPES[options.export_format],
                export_format=options.export_format,
                row_count=len(rows),
                directory=self.export_dir,
            )

            try:
                result.save()
            except SaveError:
                logger.warning(f"Export of {len(rows)} row(s) kept in memory; save can be retried")

            logger.info(f"Exported {len(rows)} row(s) for scope '{request.scope}'")
            return result
        finally:
            self.exporting = False
