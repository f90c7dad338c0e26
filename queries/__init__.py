"""
Query modules for courses, the grading queue, and output formatting.

This package provides a clean interface for querying the course database
without coupling to any specific UI.
"""

from .course_queries import CourseQueries
from .grading_queries import GradingQueries
from .formatting import GradeFormatter

__all__ = [
    'CourseQueries',
    'GradingQueries',
    'GradeFormatter',
]
