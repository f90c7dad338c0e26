#!/usr/bin/env python3
"""
Load course data from CSV files into the database.

Expects a directory with any of these files (loaded in this order so foreign
keys resolve):

    profiles.csv     id, first_name, last_name, email, role, student_code
    courses.csv      id, title, code, instructor_id
    assignments.csv  id, title, due_date, max_points, course_id
    enrollments.csv  student_id, course_id, status
    submissions.csv  assignment_id, student_id, grade, feedback, submitted_at, graded_at

Usage:
    python seed.py <directory>
"""

from pathlib import Path
from typing import Dict, List, Optional
import logging
import sys

import pandas as pd
from sqlalchemy.orm import Session

import config
from database import get_db_session, Profile, Course, Assignment, Enrollment, Submission
from database.init_db import init_database

logger = logging.getLogger(__name__)

# file name -> (model, datetime columns, numeric columns)
TABLES = [
    ('profiles.csv', Profile, (), ()),
    ('courses.csv', Course, (), ()),
    ('assignments.csv', Assignment, ('due_date',), ('max_points',)),
    ('enrollments.csv', Enrollment, (), ()),
    ('submissions.csv', Submission, ('submitted_at', 'graded_at'), ('grade',)),
]


def read_records(csv_path: Path, date_columns=(), numeric_columns=()) -> List[Dict]:
    """
    Read a CSV file into a list of dictionaries ready for a model constructor.

    Empty cells become None; date and numeric columns are converted.
    """
    df = pd.read_csv(csv_path, dtype=str, keep_default_na=True)

    for column in date_columns:
        if column in df.columns:
            df[column] = pd.to_datetime(df[column], errors='coerce')
    for column in numeric_columns:
        if column in df.columns:
            df[column] = pd.to_numeric(df[column], errors='coerce')

    records = []
    for record in df.to_dict(orient='records'):
        clean = {}
        for key, value in record.items():
            if pd.isna(value):
                clean[key] = None
            elif isinstance(value, pd.Timestamp):
                clean[key] = value.to_pydatetime()
            elif key in numeric_columns:
                clean[key] = float(value)
            else:
                clean[key] = value
        records.append(clean)
    return records


def load_table(db: Session, csv_path: Path, model, date_columns=(), numeric_columns=()) -> int:
    """Insert every row of ``csv_path`` as a ``model`` instance."""
    records = read_records(csv_path, date_columns, numeric_columns)
    columns = set(model.__table__.columns.keys())

    for record in records:
        db.add(model(**{k: v for k, v in record.items() if k in columns and v is not None}))
    db.flush()

    logger.info(f"Loaded {len(records)} {model.__tablename__} from {csv_path.name}")
    return len(records)


def seed_directory(directory: Path, db: Optional[Session] = None) -> Dict[str, int]:
    """
    Load all known CSV files found in ``directory``.

    Args:
        directory: Folder holding the CSV files
        db: Optional session; when omitted a committing session is used

    Returns:
        Mapping of table name to number of rows loaded
    """
    directory = Path(directory)
    if not directory.is_dir():
        raise FileNotFoundError(f"Seed directory not found: {directory}")

    def _load(session: Session) -> Dict[str, int]:
        counts = {}
        for filename, model, date_columns, numeric_columns in TABLES:
            csv_path = directory / filename
            if not csv_path.exists():
                logger.warning(f"Skipping {filename}: not found in {directory}")
                continue
            counts[model.__tablename__] = load_table(
                session, csv_path, model, date_columns, numeric_columns
            )
        return counts

    if db is not None:
        return _load(db)
    with get_db_session() as session:
        return _load(session)


if __name__ == '__main__':
    logging.basicConfig(level=config.LOG_LEVEL)

    if len(sys.argv) < 2:
        print("Usage: python seed.py <directory>")
        sys.exit(1)

    init_database()
    counts = seed_directory(Path(sys.argv[1]))
    for table, count in counts.items():
        print(f"✓ {table}: {count} row(s)")
