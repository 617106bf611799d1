# config.py
import os
from dotenv import load_dotenv
load_dotenv()

from concurrent.futures import ThreadPoolExecutor

import logging
from logging_utils import configure_logging

from crew_schedule import DEFAULT_RULES, ExtractionRules, ScheduleConfig

configure_logging()
logger = logging.getLogger("crewsched.config")

SCHEDULE_YEAR = int(os.getenv("SCHEDULE_YEAR", "2026"))
SCHEDULE_MONTH = int(os.getenv("SCHEDULE_MONTH", "1"))
DEFAULT_SCHEDULE = ScheduleConfig(year=SCHEDULE_YEAR, month=SCHEDULE_MONTH)

EXTRACTION_RULES_FILE = os.getenv("EXTRACTION_RULES_FILE", "")
if EXTRACTION_RULES_FILE:
    RULES = ExtractionRules.from_json_file(EXTRACTION_RULES_FILE)
    logger.info(f"Loaded extraction rules from {EXTRACTION_RULES_FILE}")
else:
    RULES = DEFAULT_RULES

TESSERACT_CMD = os.getenv("TESSERACT_CMD", "")
TESSERACT_LANG = os.getenv("TESSERACT_LANG", "eng")
TESSERACT_CONFIG = os.getenv("TESSERACT_CONFIG", "--oem 3 --psm 6")
OCR_TIMEOUT = int(os.getenv("OCR_TIMEOUT", "30"))
OCR_STOP_ON_FIRST_SUCCESS = os.getenv("OCR_STOP_ON_FIRST_SUCCESS", "1") == "1"

MAX_UPLOAD_BYTES = int(os.getenv("MAX_UPLOAD_BYTES", str(15 * 1024 * 1024)))

MAX_WORKERS = min(32, (os.cpu_count() or 4) * 2)
thread_pool = ThreadPoolExecutor(max_workers=MAX_WORKERS)

logger.info(
    f"Config: schedule={SCHEDULE_YEAR}-{SCHEDULE_MONTH:02d}, ocr_lang={TESSERACT_LANG}, "
    f"ocr_timeout={OCR_TIMEOUT}s, workers={MAX_WORKERS}"
)
