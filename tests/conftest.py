# tests/conftest.py

import pytest

from core.logging_config import LogLevel, LogSettings
from models.codec import RosterCodec
from models.roster import Roster
from models.student import Student


@pytest.fixture
def log_settings():
    return LogSettings(LogLevel.DEBUG)


@pytest.fixture
def sample_roster(log_settings):
    return Roster(log_settings, LogLevel.DEBUG)


@pytest.fixture
def sample_codec(log_settings):
    return RosterCodec(log_settings, LogLevel.DEBUG)


@pytest.fixture
def sample_student():
    return Student("2023010001", "王芳", "女", "101")


@pytest.fixture
def second_student():
    return Student(
        id="2023010002",
        name="李雷",
        gender="男",
        class_id="101",
        phone="13912345678",
        email="lilei@example.com",
    )


@pytest.fixture
def scored_student():
    student = Student("2023010003", "韩梅梅", "女", "102", "", "hmm@school.edu.cn")
    student.set_score("数学", 80)
    student.set_score("英语", 90)
    return student


@pytest.fixture
def populated_roster(sample_roster, sample_student, second_student, scored_student):
    sample_roster.add(sample_student)
    sample_roster.add(second_student)
    sample_roster.add(scored_student)
    return sample_roster
