"""
Database diagnostic script - check what's actually stored.

This script helps debug exports that come out empty or incomplete.
"""

from database import get_db, Profile, Course, Assignment, Enrollment, Submission


def check_database_contents():
    """Check what's actually in the database."""
    db = get_db()

    try:
        print("\n" + "="*80)
        print("DATABASE DIAGNOSTIC REPORT")
        print("="*80)

        # Profiles
        profiles = db.query(Profile).all()
        teachers = [p for p in profiles if p.role == 'teacher']
        students = [p for p in profiles if p.role == 'student']
        print(f"\n👤 Profiles: {len(profiles)} total")
        print(f"  - Teachers: {len(teachers)}")
        print(f"  - Students: {len(students)}")
        missing_codes = sum(1 for s in students if not s.student_code)
        if missing_codes:
            print(f"  ⚠️  {missing_codes} student(s) without a student code")

        # Courses
        courses = db.query(Course).all()
        print(f"\n📚 Courses: {len(courses)} total")
        for c in courses[:5]:
            print(f"  - {c.code}: {c.title} ({len(c.assignments)} assignments, "
                  f"{sum(1 for e in c.enrollments if e.is_active)} active students)")

        # Assignments
        assignments = db.query(Assignment).all()
        print(f"\n📝 Assignments: {len(assignments)} total")
        zero_point = [a for a in assignments if not a.max_points]
        if zero_point:
            print(f"  ⚠️  {len(zero_point)} assignment(s) worth 0 points (percentages show N/A)")

        # Enrollments
        enrollments = db.query(Enrollment).all()
        active = sum(1 for e in enrollments if e.is_active)
        print(f"\n🎓 Enrollments: {len(enrollments)} total ({active} active)")

        # Submissions
        submissions = db.query(Submission).all()
        graded = [s for s in submissions if s.is_graded]
        print(f"\n📥 Submissions: {len(submissions)} total")
        print(f"  - Graded: {len(graded)}")
        print(f"  - Pending: {len(submissions) - len(graded)}")

        over_max = [s for s in graded if s.grade > s.assignment.max_points]
        if over_max:
            print(f"\n⚠️  {len(over_max)} grade(s) above the assignment's max points:")
            for s in over_max[:5]:
                print(f"  - {s.student.full_name}: {s.grade:g}/{s.assignment.max_points:g} "
                      f"on '{s.assignment.title}'")

        print("\n🔍 Sample submissions:")
        for s in submissions[:3]:
            grade = f"{s.grade:g}/{s.assignment.max_points:g}" if s.is_graded else "ungraded"
            print(f"  - {s.student.full_name} / {s.assignment.title}: {grade}")

        print("\n" + "="*80)

    finally:
        db.close()


if __name__ == '__main__':
    check_database_contents()
