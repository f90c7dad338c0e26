"""
Grade export pipeline.

Fetches an instructor's course records, aggregates them into rows for the
chosen scope, formats them as CSV or JSON, and saves the document locally.
"""

from .errors import ExportError, ValidationError, FetchError, SaveError
from .options import ExportOptions, ExportRequest
from .rows import AllScopeRow, CourseScopeRow, AssignmentScopeRow
from .aggregation import aggregate, percentage
from .fetcher import ExportFetcher, ExportRecords
from .exporter import export_filename, save_export
from .pipeline import GradeExport, ExportResult

__all__ = [
    'ExportError',
    'ValidationError',
    'FetchError',
    'SaveError',
    'ExportOptions',
    'ExportRequest',
    'AllScopeRow',
    'CourseScopeRow',
    'AssignmentScopeRow',
    'aggregate',
    'percentage',
    'ExportFetcher',
    'ExportRecords',
    'export_filename',
    'save_export',
    'GradeExport',
    'ExportResult',
]
