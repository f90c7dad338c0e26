"""Test cases for export row aggregation."""

from datetime import datetime

import pytest

from exports import aggregate, percentage, ExportOptions
from exports.rows import AllScopeRow, CourseScopeRow, AssignmentScopeRow


def profile(student_id, first, last, code=None):
    return {
        'id': student_id,
        'first_name': first,
        'last_name': last,
        'email': f"{first.lower()}@example.com",
        'student_code': code,
    }


def submission(sub_id, assignment_id, student, grade=None, feedback=None, submitted_at=None):
    return {
        'id': sub_id,
        'assignment_id': assignment_id,
        'student_id': student['id'],
        'grade': grade,
        'feedback': feedback,
        'submitted_at': submitted_at,
        'graded_at': None,
        'student': student,
    }


def enrollment(student, course_id='c1'):
    return {'student_id': student['id'], 'course_id': course_id, 'status': 'active', 'student': student}


ALICE = profile('s1', 'Alice', 'Anderson', 'S1')
BOB = profile('s2', 'Bob', 'Brown', 'S2')
COURSE = {'id': 'c1', 'title': 'Intro to Programming', 'code': 'CS101', 'instructor_id': 't1'}
HW1 = {'id': 'a1', 'title': 'Homework 1', 'due_date': None, 'max_points': 100.0, 'course_id': 'c1'}
HW2 = {'id': 'a2', 'title': 'Homework 2', 'due_date': None, 'max_points': 50.0, 'course_id': 'c1'}
BONUS = {'id': 'a3', 'title': 'Bonus', 'due_date': None, 'max_points': 0.0, 'course_id': 'c1'}


class TestPercentage:
    """Test cases for percentage formatting."""

    def test_whole_percentage(self):
        assert percentage(85, 100) == "85.0%"

    def test_fractional_percentage(self):
        assert percentage(2, 3) == "66.7%"

    def test_zero_max_points(self):
        assert percentage(10, 0) == "N/A"

    def test_missing_grade(self):
        assert percentage(None, 100) == "N/A"


class TestAllScope:
    """Test cases for the all-courses export."""

    def test_two_graded_submissions(self):
        submissions = [
            submission('x1', 'a1', ALICE, grade=90),
            submission('x2', 'a2', BOB, grade=40),
        ]
        rows = aggregate('all', [COURSE], [HW1, HW2], [], submissions)

        assert [row['Percentage'] for row in rows] == ["90.0%", "80.0%"]
        assert all(isinstance(row, AllScopeRow) for row in rows)
        assert [row.submission_id for row in rows] == ['x1', 'x2']

    def test_default_columns(self):
        rows = aggregate('all', [COURSE], [HW1], [], [submission('x1', 'a1', ALICE, grade=90.0)])

        assert rows[0].as_dict() == {
            'Student Name': 'Alice Anderson',
            'Grade': 90,
            'Percentage': '90.0%',
            'Student ID': 'S1',
            'Student Email': 'alice@example.com',
            'Assignment': 'Homework 1',
            'Course': 'CS101',
            'Course Title': 'Intro to Programming',
            'Max Points': 100,
        }

    def test_ungraded_submissions_are_skipped(self):
        submissions = [
            submission('x1', 'a1', ALICE, grade=None),
            submission('x2', 'a1', BOB, grade=70),
        ]
        rows = aggregate('all', [COURSE], [HW1], [], submissions)

        assert len(rows) == 1
        assert rows[0]['Student Name'] == 'Bob Brown'

    def test_feedback_column(self):
        options = ExportOptions(include_feedback=True)
        rows = aggregate('all', [COURSE], [HW1],
                         [], [submission('x1', 'a1', ALICE, grade=90, feedback=None)], options)

        assert rows[0]['Feedback'] == ''

    def test_zero_point_assignment(self):
        rows = aggregate('all', [COURSE], [BONUS], [], [submission('x1', 'a3', ALICE, grade=5)])

        assert rows[0]['Percentage'] == "N/A"


class TestCourseScope:
    """Test cases for the single-course grade report."""

    def test_one_row_per_enrollment(self):
        rows = aggregate('course', [COURSE], [HW1, HW2],
                         [enrollment(ALICE), enrollment(BOB)], [])

        assert len(rows) == 2
        assert all(isinstance(row, CourseScopeRow) for row in rows)
        assert [row.student_id for row in rows] == ['s1', 's2']

    def test_student_without_submissions(self):
        rows = aggregate('course', [COURSE], [HW1, HW2], [enrollment(ALICE)], [])
        row = rows[0]

        assert row['Homework 1 (100pts)'] == "Not Submitted"
        assert row['Homework 2 (50pts)'] == "Not Submitted"
        assert row['Total Points'] == "0"
        assert row['Max Points'] == "0"
        assert row['Average'] == "N/A"

    def test_totals_and_average(self):
        submissions = [
            submission('x1', 'a1', ALICE, grade=90),
            submission('x2', 'a2', ALICE, grade=40),
        ]
        rows = aggregate('course', [COURSE], [HW1, HW2], [enrollment(ALICE)], submissions)
        row = rows[0]

        assert row['Homework 1 (100pts)'] == 90
        assert row['Homework 2 (50pts)'] == 40
        assert row['Total Points'] == 130
        assert row['Max Points'] == 150
        assert row['Average'] == "86.7%"

    def test_zero_grade_is_not_treated_as_missing(self):
        rows = aggregate('course', [COURSE], [HW1], [enrollment(ALICE)],
                         [submission('x1', 'a1', ALICE, grade=0)])

        assert rows[0]['Homework 1 (100pts)'] == 0
        assert rows[0]['Average'] == "0.0%"

    def test_only_zero_point_assignments_graded(self):
        rows = aggregate('course', [COURSE], [BONUS], [enrollment(ALICE)],
                         [submission('x1', 'a3', ALICE, grade=0)])

        assert rows[0]['Max Points'] == 0
        assert rows[0]['Average'] == "N/A"

    def test_plain_assignment_titles_without_details(self):
        options = ExportOptions(include_assignment_details=False, include_student_details=False)
        rows = aggregate('course', [COURSE], [HW1], [enrollment(ALICE)], [], options)

        assert list(rows[0].keys()) == [
            'Student Name', 'Homework 1', 'Total Points', 'Max Points', 'Average',
        ]

    def test_feedback_only_for_graded_assignments(self):
        options = ExportOptions(include_feedback=True)
        rows = aggregate('course', [COURSE], [HW1, HW2], [enrollment(ALICE)],
                         [submission('x1', 'a1', ALICE, grade=90, feedback='Nice')], options)

        assert rows[0]['Homework 1 Feedback'] == 'Nice'
        assert 'Homework 2 Feedback' not in rows[0]

    def test_same_titled_assignments_get_separate_columns(self):
        quiz1 = {'id': 'q1', 'title': 'Quiz', 'due_date': None, 'max_points': 10.0, 'course_id': 'c1'}
        quiz2 = {'id': 'q2', 'title': 'Quiz', 'due_date': None, 'max_points': 10.0, 'course_id': 'c1'}
        rows = aggregate('course', [COURSE], [quiz1, quiz2], [enrollment(ALICE)],
                         [submission('x1', 'q1', ALICE, grade=3)])
        row = rows[0]

        assert row['Quiz (10pts)'] == 3
        assert row['Quiz (10pts) #2'] == "Not Submitted"
        assert row['Total Points'] == 3
        assert row['Average'] == "30.0%"

    def test_title_matching_fixed_column(self):
        average = {'id': 'a9', 'title': 'Average', 'due_date': None, 'max_points': 10.0, 'course_id': 'c1'}
        options = ExportOptions(include_assignment_details=False)
        rows = aggregate('course', [COURSE], [average], [enrollment(ALICE)],
                         [submission('x1', 'a9', ALICE, grade=7)], options)
        row = rows[0]

        assert row['Average #2'] == 7
        assert row['Average'] == "70.0%"

    def test_fractional_totals_are_rounded(self):
        small = {'id': 'a4', 'title': 'Check-in', 'due_date': None, 'max_points': 1.0, 'course_id': 'c1'}
        submissions = [
            submission('x1', 'a1', ALICE, grade=0.1),
            submission('x2', 'a4', ALICE, grade=0.2),
        ]
        rows = aggregate('course', [COURSE], [HW1, small], [enrollment(ALICE)], submissions)

        assert rows[0]['Total Points'] == 0.3
        assert rows[0]['Max Points'] == 101

    def test_flags_do_not_change_row_order(self):
        enrollments = [enrollment(BOB), enrollment(ALICE)]
        plain = aggregate('course', [COURSE], [HW1], enrollments, [],
                          ExportOptions(include_student_details=False))
        detailed = aggregate('course', [COURSE], [HW1], enrollments, [],
                             ExportOptions(include_feedback=True))

        assert [r.student_id for r in plain] == [r.student_id for r in detailed] == ['s2', 's1']


class TestAssignmentScope:
    """Test cases for the single-assignment report."""

    def test_not_submitted(self):
        rows = aggregate('assignment', [COURSE], [HW1], [enrollment(ALICE)], [])
        row = rows[0]

        assert isinstance(row, AssignmentScopeRow)
        assert row['Status'] == "Not Submitted"
        assert row['Grade'] == "N/A"
        assert row['Percentage'] == "N/A"
        assert row['Submission Date'] == "Not Submitted"

    def test_submitted_but_ungraded(self):
        submissions = [submission('x1', 'a1', ALICE, submitted_at=datetime(2026, 9, 1, 14, 30))]
        rows = aggregate('assignment', [COURSE], [HW1], [enrollment(ALICE)], submissions)

        assert rows[0]['Status'] == "Submitted"
        assert rows[0]['Grade'] == "N/A"
        assert rows[0]['Submission Date'] == "2026-09-01"

    def test_graded(self):
        submissions = [submission('x1', 'a1', ALICE, grade=85.5, submitted_at=None)]
        rows = aggregate('assignment', [COURSE], [HW1], [enrollment(ALICE)], submissions)
        row = rows[0]

        assert row['Status'] == "Graded"
        assert row['Grade'] == 85.5
        assert row['Percentage'] == "85.5%"
        assert row['Assignment'] == 'Homework 1'
        assert row['Course'] == 'CS101'
        assert row['Submission Date'] == "N/A"

    def test_submission_date_is_last_column(self):
        options = ExportOptions(include_feedback=True)
        rows = aggregate('assignment', [COURSE], [HW1], [enrollment(ALICE)], [], options)

        assert list(rows[0].keys())[-1] == 'Submission Date'


def test_unknown_scope():
    with pytest.raises(ValueError):
        aggregate('semester', [], [], [], [])
