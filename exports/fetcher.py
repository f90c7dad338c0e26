"""
Record fetching for grade exports.

Loads the minimal set of courses, assignments, enrollments and submissions
needed for one export scope. Queries run one after another; a query that
depends on earlier results is only issued once those results are in.

Records are returned as plain dictionaries so the aggregation step never
touches a live session.
"""

from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, joinedload

from database import get_db, Profile, Course, Assignment, Enrollment, Submission
from .errors import FetchError
from .options import ExportRequest, SCOPE_ALL, SCOPE_COURSE

logger = logging.getLogger(__name__)


@dataclass
class ExportRecords:
    """Read-only snapshot of everything one export needs."""
    courses: List[Dict] = field(default_factory=list)
    assignments: List[Dict] = field(default_factory=list)
    enrollments: List[Dict] = field(default_factory=list)
    submissions: List[Dict] = field(default_factory=list)


@contextmanager
def _fetching(resource: str):
    """Translate database failures while reading ``resource`` into FetchError."""
    try:
        yield
    except SQLAlchemyError as e:
        logger.error(f"Error fetching {resource}: {e}")
        raise FetchError(resource, str(e)) from e


class ExportFetcher:
    """Queries backing the three export scopes."""

    @staticmethod
    def fetch_records(instructor_id: str, request: ExportRequest,
                      db: Optional[Session] = None) -> ExportRecords:
        """
        Fetch the records needed to export ``request`` for an instructor.

        Args:
            instructor_id: Profile id of the instructor running the export
            request: Export scope and selected course/assignment
            db: Optional session; a new one is opened and closed if omitted

        Returns:
            ExportRecords with course, assignment, enrollment and submission dicts

        Raises:
            ValidationError: if the request is missing its selector
            FetchError: if a read fails or the selection is not the instructor's
        """
        request.validate()

        owns_session = db is None
        if owns_session:
            db = get_db()
        try:
            if request.scope == SCOPE_ALL:
                records = ExportFetcher._fetch_all(db, instructor_id)
            elif request.scope == SCOPE_COURSE:
                records = ExportFetcher._fetch_course(db, instructor_id, request.course_id)
            else:
                records = ExportFetcher._fetch_assignment(db, instructor_id, request.assignment_id)
        finally:
            if owns_session:
                db.close()

        logger.info(
            f"Fetched {len(records.courses)} course(s), {len(records.assignments)} assignment(s), "
            f"{len(records.enrollments)} enrollment(s), {len(records.submissions)} submission(s) "
            f"for scope '{request.scope}'"
        )
        return records

    # =========================================================================
    # SCOPES
    # =========================================================================

    @staticmethod
    def _fetch_all(db: Session, instructor_id: str) -> ExportRecords:
        with _fetching('courses'):
            courses = db.query(Course)\
                .filter(Course.instructor_id == instructor_id)\
                .order_by(Course.code)\
                .all()

        if not courses:
            raise FetchError('courses', 'no courses found for this instructor')

        course_ids = [course.id for course in courses]

        with _fetching('assignments'):
            assignments = db.query(Assignment)\
                .filter(Assignment.course_id.in_(course_ids))\
                .order_by(Assignment.due_date, Assignment.title)\
                .all()

        assignment_ids = [assignment.id for assignment in assignments]

        with _fetching('submissions'):
            submissions = ExportFetcher._graded_submissions(db, assignment_ids)

        return ExportRecords(
            courses=[ExportFetcher._course_record(c) for c in courses],
            assignments=[ExportFetcher._assignment_record(a) for a in assignments],
            submissions=[ExportFetcher._submission_record(s) for s in submissions],
        )

    @staticmethod
    def _fetch_course(db: Session, instructor_id: str, course_id: str) -> ExportRecords:
        with _fetching('courses'):
            course = db.query(Course)\
                .filter_by(id=course_id, instructor_id=instructor_id)\
                .first()

        if not course:
            raise FetchError('courses', f"course '{course_id}' not found")

        with _fetching('assignments'):
            assignments = db.query(Assignment)\
                .filter(Assignment.course_id == course.id)\
                .order_by(Assignment.due_date, Assignment.title)\
                .all()

        with _fetching('enrollments'):
            enrollments = ExportFetcher._active_enrollments(db, course.id)

        with _fetching('submissions'):
            submissions = ExportFetcher._graded_submissions(db, [a.id for a in assignments])

        return ExportRecords(
            courses=[ExportFetcher._course_record(course)],
            assignments=[ExportFetcher._assignment_record(a) for a in assignments],
            enrollments=[ExportFetcher._enrollment_record(e) for e in enrollments],
            submissions=[ExportFetcher._submission_record(s) for s in submissions],
        )

    @staticmethod
    def _fetch_assignment(db: Session, instructor_id: str, assignment_id: str) -> ExportRecords:
        with _fetching('assignments'):
            assignment = db.query(Assignment)\
                .join(Course, Assignment.course_id == Course.id)\
                .options(joinedload(Assignment.course))\
                .filter(Assignment.id == assignment_id)\
                .filter(Course.instructor_id == instructor_id)\
                .first()

        if not assignment:
            raise FetchError('assignments', f"assignment '{assignment_id}' not found")

        with _fetching('enrollments'):
            enrollments = ExportFetcher._active_enrollments(db, assignment.course_id)

        # Every submission, graded or not, so status can be reported
        with _fetching('submissions'):
            submissions = db.query(Submission)\
                .options(joinedload(Submission.student))\
                .filter(Submission.assignment_id == assignment.id)\
                .order_by(Submission.submitted_at, Submission.id)\
                .all()

        return ExportRecords(
            courses=[ExportFetcher._course_record(assignment.course)],
            assignments=[ExportFetcher._assignment_record(assignment)],
            enrollments=[ExportFetcher._enrollment_record(e) for e in enrollments],
            submissions=[ExportFetcher._submission_record(s) for s in submissions],
        )

    # =========================================================================
    # SHARED QUERIES
    # =========================================================================

    @staticmethod
    def _graded_submissions(db: Session, assignment_ids: List[str]) -> List[Submission]:
        if not assignment_ids:
            return []
        return db.query(Submission)\
            .options(joinedload(Submission.student))\
            .filter(Submission.assignment_id.in_(assignment_ids))\
            .filter(Submission.grade.isnot(None))\
            .order_by(Submission.submitted_at, Submission.id)\
            .all()

    @staticmethod
    def _active_enrollments(db: Session, course_id: str) -> List[Enrollment]:
        return db.query(Enrollment)\
            .join(Profile, Enrollment.student_id == Profile.id)\
            .options(joinedload(Enrollment.student))\
            .filter(Enrollment.course_id == course_id)\
            .filter(Enrollment.status == 'active')\
            .order_by(Profile.last_name, Profile.first_name)\
            .all()

    # =========================================================================
    # RECORD CONVERSION
    # =========================================================================

    @staticmethod
    def _course_record(course: Course) -> Dict:
        return {
            'id': course.id,
            'title': course.title,
            'code': course.code,
            'instructor_id': course.instructor_id,
        }

    @staticmethod
    def _assignment_record(assignment: Assignment) -> Dict:
        return {
            'id': assignment.id,
            'title': assignment.title,
            'due_date': assignment.due_date,
            'max_points': assignment.max_points,
            'course_id': assignment.course_id,
        }

    @staticmethod
    def _profile_record(profile: Profile) -> Dict:
        return {
            'id': profile.id,
            'first_name': profile.first_name,
            'last_name': profile.last_name,
            'email': profile.email,
            'student_code': profile.student_code,
        }

    @staticmethod
    def _enrollment_record(enrollment: Enrollment) -> Dict:
        return {
            'student_id': enrollment.student_id,
            'course_id': enrollment.course_id,
            'status': enrollment.status,
            'student': ExportFetcher._profile_record(enrollment.student),
        }

    @staticmethod
    def _submission_record(submission: Submission) -> Dict:
        return {
            'id': submission.id,
            'assignment_id': submission.assignment_id,
            'student_id': submission.student_id,
            'grade': submission.grade,
            'feedback': submission.feedback,
            'submitted_at': submission.submitted_at,
            'graded_at': submission.graded_at,
            'student': ExportFetcher._profile_record(submission.student),
        }
