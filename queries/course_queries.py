"""
Course and assignment lookups for an instructor.

Used to populate the course/assignment choices before an export or a
grading pass.
"""

from typing import List, Dict, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session
from database import get_db, Course, Assignment, Enrollment


class CourseQueries:
    """Queries for listing an instructor's courses and their assignments."""

    @staticmethod
    def get_instructor_courses(instructor_id: str, db: Optional[Session] = None) -> List[Dict]:
        """
        Get all courses taught by an instructor, ordered by title.

        Args:
            instructor_id: Profile id of the instructor
            db: Optional session; a new one is opened and closed if omitted

        Returns:
            List of dictionaries with id, code, title and active student_count

        Example:
            >>> for course in CourseQueries.get_instructor_courses(teacher_id):
            ...     print(f"{course['code']}: {course['title']}")
        """
        owns_session = db is None
        db = db or get_db()
        try:
            active_counts = db.query(Enrollment.course_id, func.count(Enrollment.id).label('student_count'))\
                .filter(Enrollment.status == 'active')\
                .group_by(Enrollment.course_id)\
                .subquery()

            results = db.query(Course, active_counts.c.student_count)\
                .outerjoin(active_counts, Course.id == active_counts.c.course_id)\
                .filter(Course.instructor_id == instructor_id)\
                .order_by(Course.title)\
                .all()

            return [
                {
                    'id': course.id,
                    'code': course.code,
                    'title': course.title,
                    'student_count': student_count or 0,
                }
                for course, student_count in results
            ]

        finally:
            if owns_session:
                db.close()

    @staticmethod
    def get_course_assignments(course_id: str, db: Optional[Session] = None) -> List[Dict]:
        """
        Get a course's assignments, newest due date first.

        Args:
            course_id: Course id
            db: Optional session; a new one is opened and closed if omitted

        Returns:
            List of dictionaries with id, title, due_date and max_points
        """
        owns_session = db is None
        db = db or get_db()
        try:
            assignments = db.query(Assignment)\
                .filter(Assignment.course_id == course_id)\
                .order_by(Assignment.due_date.desc(), Assignment.title)\
                .all()

            return [
                {
                    'id': assignment.id,
                    'title': assignment.title,
                    'due_date': assignment.due_date,
                    'max_points': assignment.max_points,
                }
                for assignment in assignments
            ]

        finally:
            if owns_session:
                db.close()
