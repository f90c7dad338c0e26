"""
Runtime configuration loaded from the environment.

Values are read once at import time from the process environment, after
loading an optional ``.env`` file that sits next to this module.
"""

import os
from pathlib import Path
from dotenv import load_dotenv

CURRENT_DIR = Path(os.path.dirname(os.path.abspath(__file__)))
load_dotenv((CURRENT_DIR / '.env').as_posix())

# Database
DB_TYPE = os.getenv('DB_TYPE', 'sqlite')  # 'sqlite' or 'postgresql'
DB_USER = os.getenv('DB_USER', 'postgres')
DB_PASSWORD = os.getenv('DB_PASSWORD', '')
DB_HOST = os.getenv('DB_HOST', 'localhost')
DB_PORT = os.getenv('DB_PORT', '5432')
DB_NAME = os.getenv('DB_NAME', 'lms_db')
DB_ECHO = os.getenv('DB_ECHO', 'False') == 'True'
SQLITE_PATH = Path(os.getenv('SQLITE_PATH', (CURRENT_DIR / 'lms.db').as_posix()))

# Exports
EXPORT_DIR = Path(os.getenv('EXPORT_DIR', (CURRENT_DIR / 'exports_out').as_posix()))

# Logging
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO').upper()
