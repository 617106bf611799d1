# models.py
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field

from crew_schedule import ScheduleMap


class TextExtractionRequest(BaseModel):
    raw_text: str = Field("", description="OCR or vision-model output")
    year: Optional[int] = Field(None, ge=1, le=9999)
    month: Optional[int] = Field(None, ge=1, le=12)
    existing: Optional[ScheduleMap] = Field(
        None, description="Previously extracted schedule; parsed dates overwrite it"
    )


class PipelineResult(BaseModel):
    schedule: ScheduleMap
    raw_text: str = ""
    variant: Optional[str] = None
    extraction_method: str = ""
    processing_time: Dict[str, float] = {}


class ExtractionResponse(BaseModel):
    schedule: Dict[str, Dict[str, Any]]
    pairings: List[Dict[str, Any]] = []
    total_events: int = 0
    flight_days: int = 0
    rest_days: int = 0
    processing_time: Dict[str, float] = {}
    extraction_method: str = ""
    raw_text: Optional[str] = None
    metadata: Dict[str, Any] = {}


class ExtractionError(BaseModel):
    error: bool = True
    user_message: str
    technical_reason: str
    suggestions: List[str] = Field(default_factory=list)
