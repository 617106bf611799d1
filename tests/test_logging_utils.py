"""
JSON log lines, structured events and the pipeline stage timers.
"""
import json
import logging

import pytest

from logging_utils import LokiJSONFormatter, ScheduleLogger, get_logger, log_event, new_request_id


class TestStructuredEvents:
    def test_reserved_field_is_prefixed(self, caplog):
        logger = logging.getLogger("crewsched.test")
        with caplog.at_level(logging.INFO, logger="crewsched.test"):
            log_event(logger, "file_processing_started", filename="roster.png", size=10)

        (record,) = caplog.records
        assert record.event == "file_processing_started"
        assert record.field_filename == "roster.png"
        assert record.size == 10

    def test_formatter_emits_one_json_object(self, caplog):
        logger = logging.getLogger("crewsched.test")
        rid = new_request_id()
        with caplog.at_level(logging.INFO, logger="crewsched.test"):
            log_event(logger, "schedule_extracted", events=3)

        line = LokiJSONFormatter().format(caplog.records[0])
        payload = json.loads(line)
        assert "\n" not in line
        assert payload["message"] == "schedule_extracted"
        assert payload["events"] == 3
        assert payload["request_id"] == rid
        assert payload["logger"] == "crewsched.test"
        assert "msg" not in payload


class TestStageTimers:
    def test_timed_records_elapsed(self):
        logger = ScheduleLogger("crewsched.test")
        timing = {}

        with logger.timed("extract", timing):
            pass

        assert timing["extract"] >= 0.0
        assert logger.timers == {}

    def test_timed_clears_on_error(self):
        logger = ScheduleLogger("crewsched.test")
        timing = {}

        with pytest.raises(RuntimeError):
            with logger.timed("page_1_total", timing):
                raise RuntimeError("ocr failed")

        assert logger.timers == {}
        assert "page_1_total" in timing

    def test_end_without_start(self):
        assert ScheduleLogger("crewsched.test").end_timer("missing") == 0.0

    def test_logger_name_is_namespaced(self):
        assert get_logger("pipeline").logger.name == "crewsched.pipeline"
