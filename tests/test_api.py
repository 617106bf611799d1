"""
HTTP surface: text extraction, merge into an existing schedule, and the
image upload path with the OCR backend stubbed out.
"""
import json

import cv2
import numpy as np
import pytest
from fastapi.testclient import TestClient

import api
from ocr_reader import OcrTimeoutError, OcrUnavailableError
from pipeline import logger as pipeline_logger


class FakeReader:
    def __init__(self, text="", error=None):
        self.text = text
        self.error = error
        self.calls = 0

    async def read_text(self, img):
        self.calls += 1
        if self.error:
            raise self.error
        return self.text


@pytest.fixture(name="client")
def client_fixture():
    return TestClient(api.app)


@pytest.fixture
def png_bytes():
    img = np.full((200, 300, 3), 255, dtype=np.uint8)
    cv2.putText(img, "1 KE085", (10, 100), cv2.FONT_HERSHEY_SIMPLEX, 1, (0, 0, 0), 2)
    ok, buffer = cv2.imencode(".png", img)
    assert ok
    return buffer.tobytes()


@pytest.fixture
def fake_reader(monkeypatch):
    def install(text="", error=None):
        reader = FakeReader(text, error)
        monkeypatch.setattr(api.pipeline, "reader", reader)
        return reader

    return install


class TestTextExtraction:
    def test_heuristic_text(self, client):
        response = client.post(
            "/extract/text",
            json={"raw_text": "1 KE085 ICN-JFK 19:30\n4 ATDO", "year": 2026, "month": 1},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["schedule"] == {
            "2026-01-01": {"type": "Flight", "flightNumber": "KE085", "route": ["ICN", "JFK"], "time": "19:30"},
            "2026-01-04": {"type": "RestDay"},
        }
        assert data["total_events"] == 2
        assert data["flight_days"] == 1
        assert data["rest_days"] == 1
        assert data["extraction_method"] == "heuristic"
        assert "raw_text" not in data

    def test_default_year_month(self, client):
        response = client.post("/extract/text", json={"raw_text": "9 OFF"})
        assert list(response.json()["schedule"]) == ["2026-01-09"]

    def test_empty_text_is_not_an_error(self, client):
        response = client.post("/extract/text", json={"raw_text": ""})

        assert response.status_code == 200
        data = response.json()
        assert data["schedule"] == {}
        assert data["total_events"] == 0
        assert data["pairings"] == []

    def test_invalid_month(self, client):
        response = client.post("/extract/text", json={"raw_text": "1 ATDO", "month": 13})
        assert response.status_code == 422

    def test_merge_into_existing(self, client):
        response = client.post(
            "/extract/text",
            json={
                "raw_text": "1 KE085",
                "existing": {
                    "2026-01-01": {"type": "RestDay"},
                    "2026-01-02": {"type": "RestDay"},
                },
            },
        )

        data = response.json()
        assert data["schedule"]["2026-01-01"] == {"type": "Flight", "flightNumber": "KE085"}
        assert data["schedule"]["2026-01-02"] == {"type": "RestDay"}
        assert data["metadata"]["parsed_days"] == 1
        assert data["metadata"]["merged"] is True

    def test_structured_payload(self, client):
        payload = {"2026-01-08": {"type": "Flight", "flightNumber": "KE082", "route": "JFK-ICN"}}
        response = client.post("/extract/text", json={"raw_text": json.dumps(payload)})

        data = response.json()
        assert data["extraction_method"] == "structured"
        assert data["schedule"]["2026-01-08"]["route"] == ["JFK", "ICN"]

    def test_pairings_in_response(self, client):
        response = client.post(
            "/extract/text",
            json={"raw_text": "1 KE085 ICN-JFK\n3 KE086 JFK-ICN"},
        )

        (pairing,) = response.json()["pairings"]
        assert pairing["closed"] is True
        assert pairing["flight_numbers"] == ["KE085", "KE086"]


class TestFileExtraction:
    def test_image_upload(self, client, png_bytes, fake_reader):
        reader = fake_reader("1 KE085 ICN-JFK 19:30")

        response = client.post(
            "/extract",
            files={"file": ("roster.png", png_bytes, "image/png")},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["extraction_method"] == "ocr"
        assert data["raw_text"] == "1 KE085 ICN-JFK 19:30"
        assert data["schedule"]["2026-01-01"]["flightNumber"] == "KE085"
        assert data["metadata"]["file"]["pages"] == 1
        assert data["metadata"]["ocr_variant"] == "original"
        assert reader.calls == 1

    def test_year_month_query(self, client, png_bytes, fake_reader):
        fake_reader("5 ATDO")

        response = client.post(
            "/extract?year=2025&month=12",
            files={"file": ("roster.png", png_bytes, "image/png")},
        )

        assert list(response.json()["schedule"]) == ["2025-12-05"]

    def test_nothing_recognized_tries_every_variant(self, client, png_bytes, fake_reader):
        reader = fake_reader("")

        response = client.post("/extract", files={"file": ("roster.png", png_bytes, "image/png")})

        assert response.status_code == 200
        assert response.json()["total_events"] == 0
        assert reader.calls >= 1

    def test_empty_file(self, client):
        response = client.post("/extract", files={"file": ("roster.png", b"", "image/png")})
        assert response.status_code == 400

    def test_unreadable_image(self, client):
        response = client.post("/extract", files={"file": ("roster.png", b"not an image", "image/png")})
        assert response.status_code == 400

    def test_ocr_unavailable(self, client, png_bytes, fake_reader):
        fake_reader(error=OcrUnavailableError("tesseract is not installed"))

        response = client.post("/extract", files={"file": ("roster.png", png_bytes, "image/png")})

        assert response.status_code == 503
        assert response.json()["error"] is True

    def test_ocr_timeout(self, client, png_bytes, fake_reader):
        fake_reader(error=OcrTimeoutError("OCR exceeded 30s"))

        response = client.post("/extract", files={"file": ("roster.png", png_bytes, "image/png")})

        assert response.status_code == 504

    @pytest.mark.parametrize(
        "error", [OcrTimeoutError("OCR exceeded 30s"), OcrUnavailableError("tesseract is not installed")]
    )
    def test_failed_ocr_leaves_no_stage_timers(self, client, png_bytes, fake_reader, monkeypatch, error):
        monkeypatch.setattr(pipeline_logger, "timers", {})
        fake_reader(error=error)

        response = client.post("/extract", files={"file": ("roster.png", png_bytes, "image/png")})

        assert response.status_code in (503, 504)
        assert pipeline_logger.timers == {}


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert "ocr_available" in data
        assert data["default_schedule"] == {"year": 2026, "month": 1}
