import os

# Keep test runs off the filesystem log sink and pin the default schedule month
os.environ.setdefault("LOG_FILE", "")
os.environ.setdefault("SCHEDULE_YEAR", "2026")
os.environ.setdefault("SCHEDULE_MONTH", "1")
os.environ.setdefault("OCR_STOP_ON_FIRST_SUCCESS", "1")

import pytest

from crew_schedule import ExtractionRules, ScheduleConfig


@pytest.fixture
def config():
    return ScheduleConfig(year=2026, month=1)


@pytest.fixture
def rules():
    return ExtractionRules()
