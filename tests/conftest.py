"""Test configuration and fixtures."""

from datetime import datetime

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from database import Base, Profile, Course, Assignment, Enrollment, Submission


# Use in-memory SQLite for testing
TEST_DATABASE_URL = "sqlite:///:memory:"


@pytest.fixture(scope="session")
def engine():
    """Create test database engine."""
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture(scope="function")
def db_session(engine):
    """Create a test session whose work is rolled back afterwards."""
    connection = engine.connect()
    transaction = connection.begin()
    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=connection)
    session = TestingSessionLocal()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def instructor(db_session):
    """Create the instructor who owns the sample course."""
    teacher = Profile(
        id="teacher-1",
        first_name="John",
        last_name="Smith",
        email="teacher@example.com",
        role="teacher",
    )
    db_session.add(teacher)
    db_session.commit()
    return teacher


@pytest.fixture
def other_instructor(db_session):
    """Create an instructor who owns nothing in the sample data."""
    teacher = Profile(
        id="teacher-2",
        first_name="Maria",
        last_name="Garcia",
        email="maria.garcia@example.com",
        role="teacher",
    )
    db_session.add(teacher)
    db_session.commit()
    return teacher


@pytest.fixture
def course_data(db_session, instructor):
    """
    One course with two assignments and four students:

    - Alice Anderson: graded on both assignments (90/100, 40/50)
    - Bob Brown: submitted homework 1 (ungraded), graded 25/50 on homework 2
    - Carol Clark: enrolled, no submissions
    - Dan Dunn: inactive enrollment, graded 10/100 on homework 1
    """
    students = {
        'alice': Profile(id="s-alice", first_name="Alice", last_name="Anderson",
                         email="alice@example.com", role="student", student_code="S10001"),
        'bob': Profile(id="s-bob", first_name="Bob", last_name="Brown",
                       email="bob@example.com", role="student", student_code="S10002"),
        'carol': Profile(id="s-carol", first_name="Carol", last_name="Clark",
                         email="carol@example.com", role="student", student_code=None),
        'dan': Profile(id="s-dan", first_name="Dan", last_name="Dunn",
                       email="dan@example.com", role="student", student_code="S10004"),
    }
    db_session.add_all(students.values())

    course = Course(id="course-1", title="Intro to Programming", code="CS101",
                    instructor_id=instructor.id)
    db_session.add(course)

    hw1 = Assignment(id="hw-1", title="Homework 1", max_points=100,
                     due_date=datetime(2026, 9, 1), course_id=course.id)
    hw2 = Assignment(id="hw-2", title="Homework 2", max_points=50,
                     due_date=datetime(2026, 9, 15), course_id=course.id)
    db_session.add_all([hw1, hw2])

    for key, status in (('alice', 'active'), ('bob', 'active'),
                        ('carol', 'active'), ('dan', 'inactive')):
        db_session.add(Enrollment(student_id=students[key].id, course_id=course.id, status=status))

    submissions = [
        Submission(id="sub-1", assignment_id=hw1.id, student_id="s-alice", grade=90,
                   feedback="Great work", submitted_at=datetime(2026, 8, 30, 10, 0),
                   graded_at=datetime(2026, 9, 2, 9, 0)),
        Submission(id="sub-2", assignment_id=hw1.id, student_id="s-bob", grade=None,
                   submitted_at=datetime(2026, 8, 31, 11, 0)),
        Submission(id="sub-3", assignment_id=hw2.id, student_id="s-alice", grade=40,
                   submitted_at=datetime(2026, 9, 14, 8, 0),
                   graded_at=datetime(2026, 9, 16, 9, 0)),
        Submission(id="sub-4", assignment_id=hw2.id, student_id="s-bob", grade=25,
                   feedback='Needs "more" detail', submitted_at=datetime(2026, 9, 15, 8, 0),
                   graded_at=datetime(2026, 9, 17, 9, 0)),
        Submission(id="sub-5", assignment_id=hw1.id, student_id="s-dan", grade=10,
                   submitted_at=datetime(2026, 9, 1, 23, 0),
                   graded_at=datetime(2026, 9, 3, 9, 0)),
    ]
    db_session.add_all(submissions)
    db_session.commit()

    return {
        'course': course,
        'assignments': {'hw1': hw1, 'hw2': hw2},
        'students': students,
        'submissions': {s.id: s for s in submissions},
    }
