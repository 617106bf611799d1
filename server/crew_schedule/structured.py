"""
Entry point that accepts text from either upstream source.

An OCR pass yields unstructured text that goes through the heuristic engine.
A vision-model backend may instead hand back a ScheduleMap-shaped JSON
document (often wrapped in markdown fences); that is validated and returned
directly, bypassing the extractor.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional, Tuple

from pydantic import ValidationError

from logging_utils import log_event

from .extractor import extract
from .models import ScheduleConfig, ScheduleMap
from .rules import ExtractionRules

logger = logging.getLogger("crewsched.structured")

METHOD_HEURISTIC = "heuristic"
METHOD_STRUCTURED = "structured"

_JSON_PATTERNS = [
    re.compile(r"```json([\s\S]*?)```"),
    re.compile(r"```([\s\S]*?)```"),
]
_DATE_KEY = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# Type tags used by older exports of the roster app
_TYPE_ALIASES = {
    "FLIGHT": "Flight",
    "FLT": "Flight",
    "RESTDAY": "RestDay",
    "REST": "RestDay",
    "ATDO": "RestDay",
    "OFF": "RestDay",
}


def _candidate_payloads(text: str):
    stripped = text.strip()
    if stripped.startswith("{"):
        yield stripped
    for pat in _JSON_PATTERNS:
        for match in pat.findall(text):
            cleaned = match.strip()
            if cleaned.lower().startswith("json"):
                cleaned = cleaned[4:].strip()
            if cleaned.startswith("{"):
                yield cleaned


def _normalize_event(raw: Any) -> Optional[Dict[str, Any]]:
    if not isinstance(raw, dict):
        return None
    event = dict(raw)
    tag = str(event.get("type") or "").strip()
    norm = tag.upper().replace("_", "")
    event["type"] = _TYPE_ALIASES.get(norm, tag)
    if event["type"] == "RestDay":
        # Status-only payloads keep their code as the note
        if norm not in ("RESTDAY", "REST") and not event.get("note"):
            event["note"] = norm
        event = {k: v for k, v in event.items() if k in ("type", "note")}
    return event


def parse_structured_schedule(text: str) -> Optional[ScheduleMap]:
    """
    Return the ScheduleMap encoded in ``text`` or None when it holds no such
    document. A payload may be the map itself or wrap it as {"schedule": {...}}.
    """
    if not text:
        return None
    for payload in _candidate_payloads(text):
        try:
            data = json.loads(payload)
        except (ValueError, RecursionError):
            # Over-deep nesting and oversized integers land here as well
            continue
        if isinstance(data, dict) and isinstance(data.get("schedule"), dict):
            data = data["schedule"]
        if not isinstance(data, dict) or not data:
            continue
        if not all(isinstance(k, str) and _DATE_KEY.match(k) for k in data):
            continue
        events = {k: _normalize_event(v) for k, v in data.items()}
        if any(v is None for v in events.values()):
            continue
        try:
            return ScheduleMap.model_validate(events)
        except ValidationError as e:
            log_event(
                logger,
                "structured_payload_invalid",
                level=logging.WARNING,
                errors=e.error_count(),
            )
            continue
    return None


def extract_from_source(
    text: Optional[str],
    config: Optional[ScheduleConfig] = None,
    rules: Optional[ExtractionRules] = None,
) -> Tuple[ScheduleMap, str]:
    """
    Structured payloads bypass the engine; anything else is heuristically parsed.
    Returns (schedule, method). Never raises.
    """
    structured = parse_structured_schedule(text or "")
    if structured is not None:
        log_event(logger, "structured_schedule_accepted", level=logging.DEBUG, events=len(structured))
        return structured, METHOD_STRUCTURED
    return extract(text, config, rules), METHOD_HEURISTIC
