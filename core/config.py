# core/config.py

"""
Program-wide settings read from the environment.
"""

import os

from core.logging_config import LogLevel

DEFAULT_DATA_FILE = "students.csv"


def get_log_level() -> LogLevel:
    return LogLevel.from_name(os.getenv("LOG_LEVEL", "INFO"), default=LogLevel.INFO)


def get_data_file() -> str:
    return os.getenv("STUDENT_DATA_FILE", DEFAULT_DATA_FILE)
