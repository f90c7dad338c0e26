#!/usr/bin/env python3
"""
Course Grading Toolkit - Command Line Interface

A menu-driven CLI for instructors: review courses and grading progress,
batch grade pending submissions, and export grades to CSV or JSON.

Usage:
    python cli.py <instructor email or profile id>
"""

import logging
import sys
from typing import Callable, Dict, List, Optional

import config
from database import get_db, Profile
from exports import ExportError, ExportOptions, ExportRequest, GradeExport, SaveError
from exports.options import SCOPE_ALL, SCOPE_COURSE, SCOPE_ASSIGNMENT, FORMAT_CSV, FORMAT_JSON
from queries import CourseQueries, GradingQueries, GradeFormatter

logger = logging.getLogger(__name__)


class MenuItem:
    """Represents a single menu item."""

    def __init__(self, key: str, label: str, action: Callable, description: str = ""):
        self.key = key
        self.label = label
        self.action = action
        self.description = description

    def display(self) -> str:
        """Return formatted menu item for display."""
        return f"  {self.key}. {self.label}"


class MenuSystem:
    """Handles menu display and navigation."""

    def __init__(self, title: str, instructor_name: str):
        self.title = title
        self.instructor_name = instructor_name
        self.items: List[MenuItem] = []
        self.running = True

    def add_item(self, key: str, label: str, action: Callable, description: str = ""):
        """Add a menu item."""
        self.items.append(MenuItem(key, label, action, description))

    def add_separator(self):
        """Add a visual separator."""
        self.items.append(MenuItem("", "", lambda: None))

    def display(self):
        """Display the menu."""
        print("\n" + "="*80)
        print(self.title)
        print(f"Instructor: {self.instructor_name}")
        print("="*80)
        print()

        for item in self.items:
            if item.key:  # Skip separators in display
                print(item.display())
            else:
                print()  # Empty line for separator

        print("\n  0. Exit")
        print("="*80)

    def get_choice(self) -> str:
        """Get user's menu choice."""
        while True:
            choice = input("\nEnter your choice: ").strip()
            if choice == "0":
                return "0"

            if any(item.key == choice for item in self.items if item.key):
                return choice

            print("✗ Invalid choice. Please try again.")

    def run(self):
        """Run the menu loop."""
        while self.running:
            self.display()
            choice = self.get_choice()

            if choice == "0":
                self.running = False
                print("\nGoodbye!")
                break

            for item in self.items:
                if item.key == choice:
                    print("\n" + "="*80)
                    try:
                        item.action()
                    except KeyboardInterrupt:
                        print("\n\n⚠️  Action cancelled by user.")
                    except Exception as e:
                        logger.exception("Menu action failed")
                        print(f"\n✗ Error: {str(e)}")
                    print("="*80)
                    input("\n[Press Enter to continue]")
                    break


class CLIActions:
    """All CLI actions organized by category."""

    def __init__(self, instructor_id: str):
        self.instructor_id = instructor_id
        self.exporter = GradeExport(instructor_id)

    # =========================================================================
    # COURSES & GRADING QUEUE
    # =========================================================================

    def list_courses(self):
        """Show the instructor's courses."""
        print("MY COURSES")
        print("-" * 80)
        courses = CourseQueries.get_instructor_courses(self.instructor_id)
        print(GradeFormatter.format_course_list(courses))

    def grading_progress(self):
        """Show grading completion, optionally for one course."""
        print("GRADING PROGRESS")
        print("-" * 80)
        course = self._choose_course(allow_all=True)
        course_id = course['id'] if course else None
        label = f"{course['code']}: {course['title']}" if course else "All Courses"

        stats = GradingQueries.get_grading_statistics(self.instructor_id, course_id)
        print(GradeFormatter.format_grading_statistics(stats, label))

    def view_pending(self):
        """List submissions still waiting for a grade."""
        print("PENDING SUBMISSIONS")
        print("-" * 80)
        course = self._choose_course(allow_all=True)
        pending = GradingQueries.get_pending_submissions(
            self.instructor_id, course['id'] if course else None
        )
        print(GradeFormatter.format_submission_list(pending))

    def view_recently_graded(self):
        """List the most recently graded submissions."""
        print("RECENTLY GRADED")
        print("-" * 80)
        graded = GradingQueries.get_recently_graded(self.instructor_id, limit=20)
        print(GradeFormatter.format_submission_list(graded, show_grades=True))

    def batch_grade(self):
        """Apply one grade and feedback to several pending submissions."""
        print("BATCH GRADING")
        print("-" * 80)
        course = self._choose_course(allow_all=True)
        pending = GradingQueries.get_pending_submissions(
            self.instructor_id, course['id'] if course else None
        )
        if not pending:
            print("\n✓ Nothing left to grade")
            return

        print(GradeFormatter.format_submission_list(pending))
        selection = input("\nSubmission numbers to grade (e.g. 1,3,4 or 'all'): ").strip().lower()
        if selection == 'all':
            chosen = pending
        else:
            try:
                indexes = [int(part) for part in selection.split(',') if part.strip()]
            except ValueError:
                print("✗ Invalid selection")
                return
            if not indexes or any(i < 1 or i > len(pending) for i in indexes):
                print("✗ Invalid selection")
                return
            chosen = [pending[i - 1] for i in indexes]

        try:
            grade = float(input("Grade to apply: ").strip())
        except ValueError:
            print("✗ Grade must be a number")
            return
        feedback = input("Feedback (optional): ").strip() or None

        try:
            count = GradingQueries.batch_grade(
                self.instructor_id, [s['id'] for s in chosen], grade, feedback
            )
        except ValueError as e:
            print(f"\n✗ Batch grading failed: {e}")
            return

        print(f"\n✓ Graded {count} submission(s)")

    # =========================================================================
    # EXPORT
    # =========================================================================

    def export_grades(self):
        """Export grades for all courses, one course, or one assignment."""
        print("EXPORT GRADES")
        print("-" * 80)
        print("\nExport scope:")
        print("  1. All my courses")
        print("  2. Single course")
        print("  3. Single assignment")
        print("  0. Cancel")

        choice = input("\nEnter choice (1-3): ").strip()
        if choice == "0":
            return

        request = ExportRequest()
        if choice == "1":
            request.scope = SCOPE_ALL
        elif choice in ("2", "3"):
            request.scope = SCOPE_COURSE if choice == "2" else SCOPE_ASSIGNMENT
            course = self._choose_course()
            if course:
                request.course_id = course['id']
                if request.scope == SCOPE_ASSIGNMENT:
                    assignment = self._choose_assignment(course['id'])
                    request.assignment_id = assignment['id'] if assignment else None
        else:
            print("✗ Invalid choice")
            return

        options = ExportOptions(
            export_format=FORMAT_JSON if self._ask("Export as JSON instead of CSV?") else FORMAT_CSV,
            include_student_details=self._ask("Include student details (ID, email)?", True),
            include_assignment_details=self._ask("Include assignment details?", True),
            include_feedback=self._ask("Include feedback?"),
        )
        if options.export_format == FORMAT_CSV:
            options.include_headers = self._ask("Include column headers?", True)

        try:
            result = self.exporter.export(request, options)
        except ExportError as e:
            print(f"\n✗ Export failed: {e}")
            return

        while not result.saved:
            print(f"\n⚠️  {result.save_error}")
            retry_dir = input("Directory to retry in (blank to give up): ").strip()
            if not retry_dir:
                print("✗ Export not saved")
                return
            try:
                result.save(retry_dir)
            except SaveError:
                continue

        print(f"\n✓ Exported {result.row_count} row(s) to {result.path}")

    # =========================================================================
    # HELPER METHODS
    # =========================================================================

    def _choose_course(self, allow_all: bool = False) -> Optional[Dict]:
        """Prompt for one of the instructor's courses; None means all/cancel."""
        courses = CourseQueries.get_instructor_courses(self.instructor_id)
        if not courses:
            print("\n✗ No courses found")
            return None

        print(GradeFormatter.format_course_list(courses))
        prompt = "\nCourse number (0 for all courses): " if allow_all else "\nCourse number: "
        try:
            choice = int(input(prompt).strip() or 0)
        except ValueError:
            print("✗ Invalid input")
            return None
        if 1 <= choice <= len(courses):
            return courses[choice - 1]
        return None

    def _choose_assignment(self, course_id: str) -> Optional[Dict]:
        assignments = CourseQueries.get_course_assignments(course_id)
        if not assignments:
            print("\n✗ No assignments available")
            return None

        for idx, assignment in enumerate(assignments, 1):
            due = assignment['due_date'].strftime('%Y-%m-%d') if assignment['due_date'] else 'no due date'
            print(f"  {idx}. {assignment['title']} ({due})")
        try:
            choice = int(input("\nAssignment number: ").strip())
        except ValueError:
            print("✗ Invalid input")
            return None
        if 1 <= choice <= len(assignments):
            return assignments[choice - 1]
        return None

    @staticmethod
    def _ask(question: str, default: bool = False) -> bool:
        suffix = "(Y/n)" if default else "(y/N)"
        answer = input(f"{question} {suffix}: ").strip().lower()
        if not answer:
            return default
        return answer == 'y'


def find_instructor(identifier: str) -> Optional[Profile]:
    """Look up a teacher profile by email or id."""
    db = get_db()
    try:
        return db.query(Profile)\
            .filter((Profile.email == identifier) | (Profile.id == identifier))\
            .filter(Profile.role.in_(('teacher', 'admin')))\
            .first()
    finally:
        db.close()


def main():
    """Main CLI entry point."""
    logging.basicConfig(
        level=config.LOG_LEVEL,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    if len(sys.argv) < 2:
        print("Usage: python cli.py <instructor email or profile id>")
        sys.exit(1)

    instructor = find_instructor(sys.argv[1])
    if not instructor:
        print(f"✗ No instructor found for '{sys.argv[1]}'")
        sys.exit(1)

    menu = MenuSystem("Course Grading Toolkit", instructor.full_name)
    actions = CLIActions(instructor.id)

    menu.add_item("1", "§ List my courses", actions.list_courses)
    menu.add_item("2", "- Grading progress", actions.grading_progress)
    menu.add_item("3", "⚐ Pending submissions", actions.view_pending)
    menu.add_item("4", "✓ Recently graded", actions.view_recently_graded)
    menu.add_item("5", "⚑ Batch grade submissions", actions.batch_grade)

    menu.add_separator()

    menu.add_item("6", "↥ Export grades (CSV / JSON)", actions.export_grades)

    menu.run()


if __name__ == '__main__':
    main()
