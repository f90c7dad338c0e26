"""
Row types produced by the aggregator.

Each export scope has its own row type. A row keeps the record it was built
for (a submission or an enrolled student) and an ordered mapping of column
label to value; the formatter only ever sees ``as_dict()``.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Dict, Union


@dataclass
class _ExportRow:
    values: Dict[str, Any] = field(default_factory=dict)

    scope: ClassVar[str] = ''

    def __setitem__(self, label: str, value: Any):
        self.values[label] = value

    def __getitem__(self, label: str) -> Any:
        return self.values[label]

    def __contains__(self, label: str) -> bool:
        return label in self.values

    def keys(self):
        return self.values.keys()

    def as_dict(self) -> Dict[str, Any]:
        return dict(self.values)


@dataclass
class AllScopeRow(_ExportRow):
    """One graded submission across all of an instructor's courses."""
    submission_id: str = ''

    scope: ClassVar[str] = 'all'


@dataclass
class CourseScopeRow(_ExportRow):
    """One enrolled student with a column per course assignment."""
    student_id: str = ''

    scope: ClassVar[str] = 'course'


@dataclass
class AssignmentScopeRow(_ExportRow):
    """One enrolled student's status on a single assignment."""
    student_id: str = ''

    scope: ClassVar[str] = 'assignment'


ExportRow = Union[AllScopeRow, CourseScopeRow, AssignmentScopeRow]
