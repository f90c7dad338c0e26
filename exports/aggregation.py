"""
Aggregation of fetched records into export rows.

Joins courses, assignments, enrollments and submissions in memory by their
foreign keys and computes the derived columns (percentage, per-student
totals, average). Nothing here touches the database; the inputs are the
plain dictionaries produced by ``ExportFetcher``.
"""

from typing import Any, Dict, List, Optional, Tuple
import logging

from .options import ExportOptions, SCOPE_ALL, SCOPE_COURSE, SCOPE_ASSIGNMENT
from .rows import AllScopeRow, CourseScopeRow, AssignmentScopeRow, ExportRow

logger = logging.getLogger(__name__)

NOT_AVAILABLE = 'N/A'
NOT_SUBMITTED = 'Not Submitted'
SUBMITTED = 'Submitted'
GRADED = 'Graded'

# Columns every course-scope row may carry besides the per-assignment ones
COURSE_FIXED_COLUMNS = (
    'Student Name', 'Student ID', 'Student Email', 'Total Points', 'Max Points', 'Average',
)


def display_number(value: Any) -> Any:
    """Render whole floats as ints (85.0 -> 85); leave everything else alone."""
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


def percentage(grade: Optional[float], max_points: Optional[float]) -> str:
    """
    Format ``grade / max_points`` as a one-decimal percentage.

    Returns "N/A" when the grade is absent or max_points is zero/absent.

    Example:
        >>> percentage(85, 100)
        '85.0%'
        >>> percentage(40, 0)
        'N/A'
    """
    if grade is None or not max_points:
        return NOT_AVAILABLE
    return f"{grade / max_points * 100:.1f}%"


def _student_name(profile: Dict) -> str:
    return f"{profile['first_name']} {profile['last_name']}"


def _date_label(value: Any) -> str:
    if value is None:
        return NOT_AVAILABLE
    if hasattr(value, 'date'):
        return value.date().isoformat()
    return str(value)[:10]


def aggregate(scope: str, courses: List[Dict], assignments: List[Dict],
              enrollments: List[Dict], submissions: List[Dict],
              options: Optional[ExportOptions] = None) -> List[ExportRow]:
    """
    Build export rows for one scope.

    Args:
        scope: 'all', 'course' or 'assignment'
        courses: Course records
        assignments: Assignment records
        enrollments: Active enrollment records, each with a 'student' profile
        submissions: Submission records, each with a 'student' profile
        options: Column inclusion flags (defaults to ExportOptions())

    Returns:
        List of rows of the scope's row type, in input order
    """
    options = options or ExportOptions()

    if scope == SCOPE_ALL:
        rows = _aggregate_all(courses, assignments, submissions, options)
    elif scope == SCOPE_COURSE:
        rows = _aggregate_course(assignments, enrollments, submissions, options)
    elif scope == SCOPE_ASSIGNMENT:
        rows = _aggregate_assignment(courses, assignments, enrollments, submissions, options)
    else:
        raise ValueError(f"Unknown export scope '{scope}'")

    logger.debug(f"Aggregated {len(rows)} row(s) for scope '{scope}'")
    return rows


def _add_student_details(row: ExportRow, profile: Dict, options: ExportOptions):
    if options.include_student_details:
        row['Student ID'] = profile.get('student_code')
        row['Student Email'] = profile.get('email')


def _aggregate_all(courses, assignments, submissions, options) -> List[AllScopeRow]:
    courses_by_id = {c['id']: c for c in courses}
    assignments_by_id = {a['id']: a for a in assignments}

    rows = []
    for submission in submissions:
        if submission['grade'] is None:
            continue
        assignment = assignments_by_id.get(submission['assignment_id'])
        if assignment is None:
            continue
        course = courses_by_id.get(assignment['course_id'], {})

        row = AllScopeRow(submission_id=submission['id'])
        row['Student Name'] = _student_name(submission['student'])
        row['Grade'] = display_number(submission['grade'])
        row['Percentage'] = percentage(submission['grade'], assignment['max_points'])

        _add_student_details(row, submission['student'], options)

        if options.include_assignment_details:
            row['Assignment'] = assignment['title']
            row['Course'] = course.get('code')
            row['Course Title'] = course.get('title')
            row['Max Points'] = display_number(assignment['max_points'])

        if options.include_feedback:
            row['Feedback'] = submission.get('feedback') or ''

        rows.append(row)

    return rows


def _claim_label(label: str, taken: set) -> str:
    """Return ``label``, or ``label #2``, ``label #3``... if already taken."""
    candidate = label
    counter = 2
    while candidate in taken:
        candidate = f"{label} #{counter}"
        counter += 1
    taken.add(candidate)
    return candidate


def _course_columns(assignments, options) -> Dict[str, Tuple[str, Optional[str]]]:
    """
    Map assignment id -> (grade column, feedback column).

    Labels are unique within the row: repeated titles, or titles that match
    one of the fixed columns, get a numeric suffix.
    """
    taken = set(COURSE_FIXED_COLUMNS)
    columns = {}
    for assignment in assignments:
        if options.include_assignment_details:
            label = f"{assignment['title']} ({display_number(assignment['max_points'])}pts)"
        else:
            label = assignment['title']
        grade_label = _claim_label(label, taken)
        feedback_label = None
        if options.include_feedback:
            feedback_label = _claim_label(f"{assignment['title']} Feedback", taken)
        columns[assignment['id']] = (grade_label, feedback_label)
    return columns


def _aggregate_course(assignments, enrollments, submissions, options) -> List[CourseScopeRow]:
    assignments_by_id = {a['id']: a for a in assignments}
    columns = _course_columns(assignments, options)

    # (student_id, assignment_id) -> graded submission
    graded = {
        (s['student_id'], s['assignment_id']): s
        for s in submissions
        if s['grade'] is not None and s['assignment_id'] in assignments_by_id
    }

    rows = []
    for enrollment in enrollments:
        student = enrollment['student']
        row = CourseScopeRow(student_id=student['id'])
        row['Student Name'] = _student_name(student)
        _add_student_details(row, student, options)

        total_points = 0.0
        max_points = 0.0
        graded_count = 0

        for assignment in assignments:
            submission = graded.get((student['id'], assignment['id']))
            grade_label, feedback_label = columns[assignment['id']]

            row[grade_label] = display_number(submission['grade']) if submission else NOT_SUBMITTED

            if feedback_label and submission:
                row[feedback_label] = submission.get('feedback') or ''

            if submission:
                total_points += submission['grade']
                max_points += assignment['max_points'] or 0
                graded_count += 1

        total_points = round(total_points, 2)
        max_points = round(max_points, 2)

        if graded_count:
            row['Total Points'] = display_number(total_points)
            row['Max Points'] = display_number(max_points)
            row['Average'] = percentage(total_points, max_points)
        else:
            row['Total Points'] = '0'
            row['Max Points'] = '0'
            row['Average'] = NOT_AVAILABLE

        rows.append(row)

    return rows


def _aggregate_assignment(courses, assignments, enrollments, submissions,
                          options) -> List[AssignmentScopeRow]:
    if not assignments:
        return []
    assignment = assignments[0]
    course = next((c for c in courses if c['id'] == assignment['course_id']), {})
    submissions_by_student = {s['student_id']: s for s in submissions
                              if s['assignment_id'] == assignment['id']}

    rows = []
    for enrollment in enrollments:
        student = enrollment['student']
        submission = submissions_by_student.get(student['id'])
        grade = submission['grade'] if submission else None

        row = AssignmentScopeRow(student_id=student['id'])
        row['Student Name'] = _student_name(student)
        if submission is None:
            row['Status'] = NOT_SUBMITTED
        elif grade is None:
            row['Status'] = SUBMITTED
        else:
            row['Status'] = GRADED
        row['Grade'] = display_number(grade) if grade is not None else NOT_AVAILABLE
        row['Percentage'] = percentage(grade, assignment['max_points'])

        _add_student_details(row, student, options)

        if options.include_assignment_details:
            row['Assignment'] = assignment['title']
            row['Course'] = course.get('code')
            row['Max Points'] = display_number(assignment['max_points'])

        if options.include_feedback:
            row['Feedback'] = (submission.get('feedback') if submission else None) or ''

        if submission:
            row['Submission Date'] = _date_label(submission.get('submitted_at'))
        else:
            row['Submission Date'] = NOT_SUBMITTED

        rows.append(row)

    return rows
