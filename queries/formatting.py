"""
Formatting utilities for query results and grade exports.

This module turns query results into readable text for console output, and
export rows into the CSV or JSON documents written by the export pipeline.
"""

from typing import Any, Dict, Iterable, List, Mapping
import csv
import io
import json


def _as_mapping(row: Any) -> Mapping:
    """Accept export rows (with as_dict) as well as plain mappings."""
    if hasattr(row, 'as_dict'):
        return row.as_dict()
    return row


def _stringify(value: Any) -> str:
    if value is None:
        return ''
    return str(value)


class GradeFormatter:
    """Utilities for formatting grade data into readable text."""

    # =========================================================================
    # EXPORT DOCUMENTS
    # =========================================================================

    @staticmethod
    def format_export(rows: Iterable, kind: str, include_headers: bool = True) -> str:
        """
        Serialize export rows as a CSV or JSON document.

        Args:
            rows: Export rows or plain dictionaries
            kind: 'csv' or 'json'
            include_headers: Emit the CSV header row (ignored for JSON)

        Returns:
            The document text; "" for CSV and "[]" for JSON when there are no rows
        """
        records = [_as_mapping(row) for row in rows]
        if kind == 'csv':
            return GradeFormatter.to_csv(records, include_headers)
        if kind == 'json':
            return GradeFormatter.to_json(records)
        raise ValueError(f"Unsupported export format '{kind}'")

    @staticmethod
    def collect_headers(records: List[Mapping]) -> List[str]:
        """
        Union of keys across all records, in first-seen order.

        The first record's keys come first in their own order; keys that only
        appear in later records are appended in the order they show up.
        """
        headers: Dict[str, None] = {}
        for record in records:
            for key in record.keys():
                headers.setdefault(key, None)
        return list(headers)

    @staticmethod
    def to_csv(records: List[Mapping], include_headers: bool = True) -> str:
        """Every field quoted, embedded quotes doubled, missing keys empty."""
        if not records:
            return ""

        headers = GradeFormatter.collect_headers(records)
        buffer = io.StringIO()
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator='\n')

        if include_headers:
            writer.writerow(headers)
        for record in records:
            writer.writerow([_stringify(record.get(header, '')) for header in headers])

        return buffer.getvalue()

    @staticmethod
    def to_json(records: List[Mapping]) -> str:
        return json.dumps([dict(record) for record in records], indent=2, ensure_ascii=False)

    # =========================================================================
    # CONSOLE OUTPUT
    # =========================================================================

    @staticmethod
    def format_course_list(courses: List[Dict]) -> str:
        """
        Format an instructor's courses as a numbered table.

        Args:
            courses: List of course dictionaries (id, code, title)

        Returns:
            Formatted multi-line string suitable for display
        """
        if not courses:
            return "No courses found."

        lines = []
        lines.append("=" * 80)
        lines.append(f"{'#':<4} {'Code':<15} {'Title':<45} {'Students':>8}")
        lines.append("=" * 80)
        for idx, course in enumerate(courses, 1):
            title = course['title'][:44]
            students = course.get('student_count', '')
            lines.append(f"{idx:<4} {course['code'][:14]:<15} {title:<45} {students:>8}")
        lines.append("=" * 80)

        return "\n".join(lines)

    @staticmethod
    def format_grading_statistics(stats: Dict, course_label: str = "All Courses") -> str:
        """
        Format grading progress for display.

        Args:
            stats: Dictionary from GradingQueries.get_grading_statistics
            course_label: Name of the course filter in effect

        Returns:
            Formatted multi-line string suitable for display
        """
        completion = stats['completion_percentage']
        filled = completion // 5
        bar = "#" * filled + "-" * (20 - filled)

        lines = []
        lines.append("=" * 80)
        lines.append(f"GRADING PROGRESS - {course_label}")
        lines.append("=" * 80)
        lines.append(f"Completion:          [{bar}] {completion}%")
        lines.append("")
        lines.append(f"Pending:             {stats['pending_count']}")
        lines.append(f"Graded:              {stats['graded_count']}")
        lines.append(f"Total Submissions:   {stats['total_submissions']}")
        lines.append("=" * 80)

        return "\n".join(lines)

    @staticmethod
    def format_submission_list(submissions: List[Dict], show_grades: bool = False) -> str:
        """
        Format pending or graded submissions in a table.

        Args:
            submissions: List of submission dictionaries from GradingQueries
            show_grades: If True, include grade and graded date columns

        Returns:
            Formatted multi-line string suitable for display
        """
        if not submissions:
            return "No submissions found."

        width = 120 if show_grades else 100
        lines = []
        lines.append(f"Found {len(submissions)} submission(s)")
        lines.append("")
        lines.append("=" * width)
        header = f"{'#':<4} {'Student':<25} {'Assignment':<30} {'Course':<12} {'Submitted':<12}"
        if show_grades:
            header += f" {'Grade':<10} {'Graded':<12}"
        lines.append(header)
        lines.append("=" * width)

        for idx, submission in enumerate(submissions, 1):
            submitted = submission['submitted_at'].strftime('%Y-%m-%d') if submission['submitted_at'] else 'N/A'
            line = (
                f"{idx:<4} {submission['student_name'][:24]:<25} "
                f"{submission['assignment_title'][:29]:<30} "
                f"{submission['course_code'][:11]:<12} {submitted:<12}"
            )
            if show_grades:
                grade = f"{submission['grade']:g}/{submission['max_points']:g}"
                graded = submission['graded_at'].strftime('%Y-%m-%d') if submission['graded_at'] else 'N/A'
                line += f" {grade:<10} {graded:<12}"
            lines.append(line)

        lines.append("=" * width)

        return "\n".join(lines)
