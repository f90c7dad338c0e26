"""
Export request options: scope, output format and column inclusion flags.
"""

from dataclasses import dataclass
from typing import Optional

from .errors import ValidationError

SCOPE_ALL = 'all'
SCOPE_COURSE = 'course'
SCOPE_ASSIGNMENT = 'assignment'
SCOPES = (SCOPE_ALL, SCOPE_COURSE, SCOPE_ASSIGNMENT)

FORMAT_CSV = 'csv'
FORMAT_JSON = 'json'
FORMATS = (FORMAT_CSV, FORMAT_JSON)


@dataclass
class ExportOptions:
    """Column inclusion flags and output settings for one export."""
    export_format: str = FORMAT_CSV
    include_headers: bool = True
    include_student_details: bool = True
    include_assignment_details: bool = True
    include_feedback: bool = False


@dataclass
class ExportRequest:
    """What to export: the scope plus the selector that scope requires."""
    scope: str = SCOPE_ALL
    course_id: Optional[str] = None
    assignment_id: Optional[str] = None

    def validate(self):
        """
        Check that the scope is known and its selector is present.

        Raises:
            ValidationError: if the scope is unknown or a required
                course/assignment selection is missing
        """
        if self.scope not in SCOPES:
            raise ValidationError(f"Unknown export scope '{self.scope}'")
        if self.scope == SCOPE_COURSE and not self.course_id:
            raise ValidationError("Select a course to export")
        if self.scope == SCOPE_ASSIGNMENT and not self.assignment_id:
            raise ValidationError("Select an assignment to export")
