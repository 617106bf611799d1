from __future__ import annotations

"""
crew_schedule package

Public API:
    - extract(raw_text, config=None, rules=None) -> ScheduleMap
    - extract_from_source(text, config=None, rules=None) -> (ScheduleMap, method)
    - normalize(raw_text, rules=None) -> List[Token]
    - ScheduleConfig, ScheduleMap, FlightEvent, RestDayEvent, Token
    - ExtractionRules
    - PairingDetector
"""

from .extractor import StreamExtractor, extract, extract_tokens
from .models import (
    FlightEvent,
    RestDayEvent,
    ScheduleConfig,
    ScheduleEvent,
    ScheduleMap,
    Token,
)
from .normalizer import normalize
from .pairings import PairingDetector
from .rules import DEFAULT_RULES, ExtractionRules
from .structured import (
    METHOD_HEURISTIC,
    METHOD_STRUCTURED,
    extract_from_source,
    parse_structured_schedule,
)

__all__ = [
    "extract",
    "extract_tokens",
    "extract_from_source",
    "parse_structured_schedule",
    "normalize",
    "StreamExtractor",
    "ScheduleConfig",
    "ScheduleMap",
    "ScheduleEvent",
    "FlightEvent",
    "RestDayEvent",
    "Token",
    "ExtractionRules",
    "DEFAULT_RULES",
    "PairingDetector",
    "METHOD_HEURISTIC",
    "METHOD_STRUCTURED",
]
