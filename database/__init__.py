from .connection import Base, engine, get_db_session, get_db
from .models import Profile, Course, Assignment, Enrollment, Submission

__all__ = [
    'Base',
    'engine',
    'get_db_session',
    'get_db',
    'Profile',
    'Course',
    'Assignment',
    'Enrollment',
    'Submission',
]
