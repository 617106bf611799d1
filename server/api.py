from __future__ import annotations

import logging
import time
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import numpy as np
from fastapi import FastAPI, File, HTTPException, Query, Request, UploadFile
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from config import DEFAULT_SCHEDULE, MAX_UPLOAD_BYTES, OCR_STOP_ON_FIRST_SUCCESS, RULES
from crew_schedule import PairingDetector, ScheduleConfig, ScheduleMap, extract_from_source
from image_processing import ScheduleImageProcessor
from logging_utils import configure_logging, log_event, new_request_id
from models import ExtractionError, ExtractionResponse, TextExtractionRequest
from ocr_reader import OcrTimeoutError, OcrUnavailableError, tesseract_available
from pdf_processor import PDFProcessor, is_pdf
from pipeline import SchedulePipeline

# ------------------------------------------------------------------------------
# APP + LOGGING SETUP
# ------------------------------------------------------------------------------

configure_logging()
logger = logging.getLogger("crewsched.api")

app = FastAPI(title="Crew Schedule Extractor", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://127.0.0.1:5173"],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

pipeline = SchedulePipeline(rules=RULES, stop_on_first_success=OCR_STOP_ON_FIRST_SUCCESS)

logger.info(
    "Config: schedule=%s-%02d, stop_on_first_success=%s",
    DEFAULT_SCHEDULE.year,
    DEFAULT_SCHEDULE.month,
    OCR_STOP_ON_FIRST_SUCCESS,
)


# ------------------------------------------------------------------------------
# REQUEST LOGGING MIDDLEWARE
# ------------------------------------------------------------------------------

@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    rid = new_request_id()
    start = time.time()

    log_event(
        logger,
        "http_request_started",
        method=request.method,
        path=request.url.path,
        client_ip=request.client.host if request.client else None,
        request_id=rid,
    )

    status_code = 500
    try:
        response = await call_next(request)
        status_code = response.status_code
        return response
    finally:
        log_event(
            logger,
            "http_request_finished",
            method=request.method,
            path=request.url.path,
            status_code=status_code,
            duration_ms=int((time.time() - start) * 1000),
            request_id=rid,
        )


# ------------------------------------------------------------------------------
# OCR FAILURES
# ------------------------------------------------------------------------------

@app.exception_handler(OcrUnavailableError)
async def ocr_unavailable_handler(request: Request, exc: OcrUnavailableError):
    log_event(logger, "ocr_unavailable", level=logging.ERROR, error=str(exc))
    body = ExtractionError(
        user_message="Text recognition is not available on this server.",
        technical_reason=str(exc),
        suggestions=["Send the recognized text to /extract/text instead."],
    )
    return JSONResponse(status_code=503, content=body.model_dump())


@app.exception_handler(OcrTimeoutError)
async def ocr_timeout_handler(request: Request, exc: OcrTimeoutError):
    log_event(logger, "ocr_timeout", level=logging.ERROR, error=str(exc))
    body = ExtractionError(
        user_message="Reading the schedule image took too long.",
        technical_reason=str(exc),
        suggestions=["Crop the image to the calendar grid.", "Upload a smaller image."],
    )
    return JSONResponse(status_code=504, content=body.model_dump())


# ------------------------------------------------------------------------------
# HELPERS
# ------------------------------------------------------------------------------

def _schedule_config(year: Optional[int], month: Optional[int]) -> ScheduleConfig:
    return ScheduleConfig(
        year=year if year is not None else DEFAULT_SCHEDULE.year,
        month=month if month is not None else DEFAULT_SCHEDULE.month,
    )


def _build_response(
    schedule: ScheduleMap,
    method: str,
    processing_time: Dict[str, float],
    metadata: Dict[str, Any],
    raw_text: Optional[str] = None,
) -> ExtractionResponse:
    pairings = PairingDetector.find_pairings(schedule)
    return ExtractionResponse(
        schedule=schedule.to_json_dict(),
        pairings=pairings,
        total_events=len(schedule),
        flight_days=len(schedule.flight_days()),
        rest_days=len(schedule.rest_days()),
        processing_time=processing_time,
        extraction_method=method,
        raw_text=raw_text,
        metadata=metadata,
    )


# ------------------------------------------------------------------------------
# ROUTES
# ------------------------------------------------------------------------------

@app.get("/health")
async def health() -> Dict[str, Any]:
    return {
        "status": "ok",
        "version": app.version,
        "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
        "ocr_available": tesseract_available(),
        "default_schedule": {"year": DEFAULT_SCHEDULE.year, "month": DEFAULT_SCHEDULE.month},
    }


@app.get("/")
async def root() -> Dict[str, Any]:
    return {
        "name": "Crew Schedule Extractor",
        "endpoints": {
            "/extract": "POST - Extract a schedule from a roster image/PDF",
            "/extract/text": "POST - Extract a schedule from OCR or vision-model text",
            "/health": "GET - Service health",
            "/docs": "GET - Interactive API documentation",
        },
        "version": app.version,
    }


@app.post("/extract/text", response_model=ExtractionResponse, response_model_exclude_none=True)
async def extract_text(body: TextExtractionRequest) -> ExtractionResponse:
    t0 = time.time()
    config = _schedule_config(body.year, body.month)

    schedule, method = extract_from_source(body.raw_text, config, RULES)
    parsed_days = len(schedule)
    if body.existing is not None:
        schedule = body.existing.merged(schedule)

    log_event(
        logger,
        "text_extraction_finished",
        method=method,
        parsed_days=parsed_days,
        total_days=len(schedule),
        chars=len(body.raw_text),
        year=config.year,
        month=config.month,
    )

    return _build_response(
        schedule,
        method,
        {"total_request": time.time() - t0},
        {
            "schedule": {"year": config.year, "month": config.month},
            "parsed_days": parsed_days,
            "merged": body.existing is not None,
        },
    )


@app.post("/extract", response_model=ExtractionResponse, response_model_exclude_none=True)
async def extract_file(
    file: UploadFile = File(...),
    year: Optional[int] = Query(None, ge=1, le=9999, description="Assumed schedule year"),
    month: Optional[int] = Query(None, ge=1, le=12, description="Assumed schedule month"),
) -> ExtractionResponse:
    """OCR a roster screenshot or PDF and return the extracted schedule."""
    overall_start = time.time()
    config = _schedule_config(year, month)

    file_bytes = await file.read()
    if not file_bytes:
        raise HTTPException(400, "Empty file")
    if len(file_bytes) > MAX_UPLOAD_BYTES:
        raise HTTPException(413, f"File exceeds {MAX_UPLOAD_BYTES} bytes")

    log_event(
        logger,
        "file_processing_started",
        filename=file.filename,
        content_type=file.content_type,
        size=len(file_bytes),
    )

    pdf_file = is_pdf(file_bytes, file.content_type)
    if pdf_file:
        images: List[np.ndarray] = await PDFProcessor.convert(file_bytes)
        log_event(logger, "pdf_converted", pages=len(images))
    else:
        try:
            images = [ScheduleImageProcessor.decode(file_bytes)]
        except ValueError as e:
            raise HTTPException(400, f"Unreadable image: {e}")

    result = await pipeline.process(images, config)
    result.processing_time["total_request"] = time.time() - overall_start

    log_event(
        logger,
        "http_request_pipeline_completed",
        filename=file.filename,
        is_pdf=pdf_file,
        pages=len(images),
        days_found=len(result.schedule),
        variant=result.variant,
        duration_ms=int((time.time() - overall_start) * 1000),
    )

    return _build_response(
        result.schedule,
        result.extraction_method,
        result.processing_time,
        {
            "schedule": {"year": config.year, "month": config.month},
            "file": {
                "name": file.filename,
                "type": file.content_type,
                "size": len(file_bytes),
                "pages": len(images),
            },
            "ocr_variant": result.variant,
        },
        raw_text=result.raw_text,
    )


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8001, log_level="info")
