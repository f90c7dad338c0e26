from sqlalchemy import (
    Column, String, Float, Text, DateTime, ForeignKey,
    CheckConstraint, Index, UniqueConstraint
)
from sqlalchemy.orm import relationship
from datetime import datetime
from .connection import Base
import uuid


def _new_id():
    return str(uuid.uuid4())


class Profile(Base):
    __tablename__ = 'profiles'

    id = Column(String(36), primary_key=True, default=_new_id)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    role = Column(String(10), nullable=False, default='student')
    student_code = Column(String(20), index=True)  # Institutional ID, students only

    # Relationships
    courses_taught = relationship('Course', back_populates='instructor')
    enrollments = relationship('Enrollment', back_populates='student', cascade='all, delete-orphan')
    submissions = relationship('Submission', back_populates='student', cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint("role IN ('student', 'teacher', 'admin')", name='check_profile_role'),
    )

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    def __repr__(self):
        return f"<Profile {self.first_name} {self.last_name} ({self.role})>"


class Course(Base):
    __tablename__ = 'courses'

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(200), nullable=False)
    code = Column(String(50), nullable=False, index=True)
    instructor_id = Column(String(36), ForeignKey('profiles.id'), nullable=False, index=True)

    # Relationships
    instructor = relationship('Profile', back_populates='courses_taught')
    assignments = relationship('Assignment', back_populates='course', cascade='all, delete-orphan')
    enrollments = relationship('Enrollment', back_populates='course', cascade='all, delete-orphan')

    def __repr__(self):
        return f"<Course {self.code}: {self.title}>"


class Assignment(Base):
    __tablename__ = 'assignments'

    id = Column(String(36), primary_key=True, default=_new_id)
    title = Column(String(255), nullable=False)
    due_date = Column(DateTime, index=True)
    max_points = Column(Float, nullable=False, default=100)
    course_id = Column(String(36), ForeignKey('courses.id'), nullable=False)

    # Relationships
    course = relationship('Course', back_populates='assignments')
    submissions = relationship('Submission', back_populates='assignment', cascade='all, delete-orphan')

    __table_args__ = (
        CheckConstraint('max_points >= 0', name='check_max_points_positive'),
        Index('idx_assignment_course_due', 'course_id', 'due_date'),
    )

    def __repr__(self):
        return f"<Assignment {self.title} ({self.max_points}pts)>"


class Enrollment(Base):
    __tablename__ = 'enrollments'

    id = Column(String(36), primary_key=True, default=_new_id)
    student_id = Column(String(36), ForeignKey('profiles.id'), nullable=False)
    course_id = Column(String(36), ForeignKey('courses.id'), nullable=False)
    status = Column(String(10), nullable=False, default='active')
    enrolled_at = Column(DateTime, default=datetime.now)

    # Relationships
    student = relationship('Profile', back_populates='enrollments')
    course = relationship('Course', back_populates='enrollments')

    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name='check_enrollment_status'),
        UniqueConstraint('student_id', 'course_id', name='uq_student_course'),
        Index('idx_enrollment_course_status', 'course_id', 'status'),
    )

    @property
    def is_active(self):
        return self.status == 'active'

    def __repr__(self):
        return f"<Enrollment {self.student_id} -> {self.course_id} ({self.status})>"


class Submission(Base):
    __tablename__ = 'submissions'

    id = Column(String(36), primary_key=True, default=_new_id)
    assignment_id = Column(String(36), ForeignKey('assignments.id'), nullable=False)
    student_id = Column(String(36), ForeignKey('profiles.id'), nullable=False)
    grade = Column(Float)  # NULL until graded
    feedback = Column(Text)
    submitted_at = Column(DateTime, default=datetime.now, index=True)
    graded_at = Column(DateTime)

    # Relationships
    assignment = relationship('Assignment', back_populates='submissions')
    student = relationship('Profile', back_populates='submissions')

    __table_args__ = (
        CheckConstraint('grade IS NULL OR grade >= 0', name='check_grade_positive'),
        UniqueConstraint('assignment_id', 'student_id', name='uq_assignment_student'),
        Index('idx_submission_assignment_grade', 'assignment_id', 'grade'),
    )

    @property
    def is_graded(self):
        """A submission counts as graded once it carries a grade."""
        return self.grade is not None

    def __repr__(self):
        grade_str = f"{self.grade:g}" if self.grade is not None else "ungraded"
        return f"<Submission {self.student_id} - {self.assignment_id} - {grade_str}>"
