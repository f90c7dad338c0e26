"""
Grading queue queries for an instructor.

This module provides functionality to:
- List ungraded (pending) submissions
- List recently graded submissions
- Summarize grading progress
- Apply one grade and feedback to a batch of submissions

All lookups are limited to courses the instructor teaches, optionally narrowed
to a single course.
"""

from datetime import datetime
from typing import List, Dict, Optional
import logging
import math

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, Query
from database import get_db, Profile, Course, Assignment, Submission

logger = logging.getLogger(__name__)


class GradingQueries:
    """Queries for the grading queue and batch grading."""

    @staticmethod
    def _instructor_submissions(db: Session, instructor_id: str,
                                course_id: Optional[str] = None) -> Query:
        query = db.query(Submission, Assignment, Course, Profile)\
            .join(Assignment, Submission.assignment_id == Assignment.id)\
            .join(Course, Assignment.course_id == Course.id)\
            .join(Profile, Submission.student_id == Profile.id)\
            .filter(Course.instructor_id == instructor_id)
        if course_id:
            query = query.filter(Course.id == course_id)
        return query

    @staticmethod
    def get_pending_submissions(instructor_id: str, course_id: Optional[str] = None,
                                db: Optional[Session] = None) -> List[Dict]:
        """
        Get ungraded submissions, oldest first.

        Args:
            instructor_id: Profile id of the instructor
            course_id: Optional course filter
            db: Optional session; a new one is opened and closed if omitted

        Returns:
            List of submission dictionaries

        Example:
            >>> pending = GradingQueries.get_pending_submissions(teacher_id)
            >>> print(f"{len(pending)} submissions waiting")
        """
        owns_session = db is None
        db = db or get_db()
        try:
            results = GradingQueries._instructor_submissions(db, instructor_id, course_id)\
                .filter(Submission.grade.is_(None))\
                .order_by(Submission.submitted_at, Submission.id)\
                .all()

            return [GradingQueries._format_submission(*result) for result in results]

        finally:
            if owns_session:
                db.close()

    @staticmethod
    def get_recently_graded(instructor_id: str, course_id: Optional[str] = None,
                            limit: int = 10, db: Optional[Session] = None) -> List[Dict]:
        """
        Get the most recently graded submissions, newest first.

        Args:
            instructor_id: Profile id of the instructor
            course_id: Optional course filter
            limit: Maximum number of results
            db: Optional session; a new one is opened and closed if omitted

        Returns:
            List of submission dictionaries
        """
        owns_session = db is None
        db = db or get_db()
        try:
            results = GradingQueries._instructor_submissions(db, instructor_id, course_id)\
                .filter(Submission.grade.isnot(None))\
                .order_by(Submission.graded_at.desc(), Submission.id)\
                .limit(limit)\
                .all()

            return [GradingQueries._format_submission(*result) for result in results]

        finally:
            if owns_session:
                db.close()

    @staticmethod
    def get_grading_statistics(instructor_id: str, course_id: Optional[str] = None,
                               db: Optional[Session] = None) -> Dict:
        """
        Summarize grading progress.

        Returns:
            Dictionary with:
            - pending_count: Ungraded submissions
            - graded_count: Graded submissions
            - total_submissions: Sum of the two
            - completion_percentage: Graded share, rounded to a whole percent
        """
        owns_session = db is None
        db = db or get_db()
        try:
            base = GradingQueries._instructor_submissions(db, instructor_id, course_id)
            pending_count = base.filter(Submission.grade.is_(None)).count()
            graded_count = base.filter(Submission.grade.isnot(None)).count()
        finally:
            if owns_session:
                db.close()

        total = pending_count + graded_count
        completion = int(graded_count * 100 / total + 0.5) if total > 0 else 0

        return {
            'pending_count': pending_count,
            'graded_count': graded_count,
            'total_submissions': total,
            'completion_percentage': completion,
        }

    @staticmethod
    def batch_grade(instructor_id: str, submission_ids: List[str], grade: float,
                    feedback: Optional[str] = None, db: Optional[Session] = None) -> int:
        """
        Apply the same grade and feedback to several submissions.

        Args:
            instructor_id: Profile id of the instructor doing the grading
            submission_ids: Ids of the submissions to grade
            grade: Points to award; must lie within every assignment's max points
            feedback: Optional feedback text stored on each submission
            db: Optional session; a new one is opened and closed if omitted

        Returns:
            Number of submissions graded

        Raises:
            ValueError: if no ids are given, a submission is unknown or not the
                instructor's, or the grade is not a finite number within [0, max_points]
        """
        if not submission_ids:
            raise ValueError("No submissions selected")
        if grade is None or not math.isfinite(grade) or grade < 0:
            raise ValueError(f"Invalid grade: {grade}")

        owns_session = db is None
        db = db or get_db()
        try:
            results = GradingQueries._instructor_submissions(db, instructor_id)\
                .filter(Submission.id.in_(submission_ids))\
                .all()

            found = {submission.id for submission, _, _, _ in results}
            missing = set(submission_ids) - found
            if missing:
                raise ValueError(f"Unknown submission(s): {', '.join(sorted(missing))}")

            for submission, assignment, _, _ in results:
                if grade > assignment.max_points:
                    raise ValueError(
                        f"Grade {grade:g} exceeds the {assignment.max_points:g} points "
                        f"available for '{assignment.title}'"
                    )

            graded_at = datetime.now()
            for submission, _, _, _ in results:
                submission.grade = grade
                submission.feedback = feedback
                submission.graded_at = graded_at

            db.commit()
            logger.info(f"Batch graded {len(results)} submission(s) with {grade:g} points")
            return len(results)

        except SQLAlchemyError as e:
            logger.error(f"Batch grading failed: {e}")
            db.rollback()
            raise
        finally:
            if owns_session:
                db.close()

    @staticmethod
    def _format_submission(submission: Submission, assignment: Assignment,
                           course: Course, student: Profile) -> Dict:
        return {
            'id': submission.id,
            'student_id': student.id,
            'student_name': student.full_name,
            'assignment_id': assignment.id,
            'assignment_title': assignment.title,
            'max_points': assignment.max_points,
            'course_id': course.id,
            'course_code': course.code,
            'grade': submission.grade,
            'feedback': submission.feedback,
            'submitted_at': submission.submitted_at,
            'graded_at': submission.graded_at,
        }
