"""
Token matchers for the stream extractor.

Each matcher is an independent (match, apply) pair. ``match`` looks at one
uppercase token and returns the extracted value or None; ``apply`` folds that
value into the extraction state for the current day. The extractor walks
``DAY_MATCHER`` first and then ``EVENT_MATCHERS`` in order, stopping at the
first event matcher that fires.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from .models import FlightEvent, RestDayEvent, ScheduleConfig
from .patterns import patterns
from .rules import ExtractionRules

Event = Union[FlightEvent, RestDayEvent]


@dataclass
class ExtractionState:
    """Accumulator threaded through the fold: the active day plus events so far."""

    current_day: Optional[int] = None
    events: Dict[str, Event] = field(default_factory=dict)

    def ensure_flight(self, date_key: str) -> FlightEvent:
        # Flight evidence always upgrades the day to a flight day
        event = self.events.get(date_key)
        if not isinstance(event, FlightEvent):
            event = FlightEvent()
            self.events[date_key] = event
        return event


@dataclass(frozen=True)
class Matcher:
    kind: str
    match: Callable[[str, ExtractionRules], Any]
    apply: Callable[[ExtractionState, Any, ScheduleConfig], None]


# ---------------- day ----------------

def match_day(token: str, rules: ExtractionRules) -> Optional[int]:
    if ":" in token:
        return None
    m = patterns.DAY.match(token)
    if not m:
        return None
    # "12", "08", "31ST" are days; "7C1234" is a flight number
    if any(ch.isdigit() for ch in token[m.end():]):
        return None
    day = int(m.group(1))
    return day if 1 <= day <= 31 else None


def apply_day(state: ExtractionState, day: int, config: ScheduleConfig) -> None:
    state.current_day = day


# ---------------- flight ----------------

def _repair_prefix(prefix: str, rules: ExtractionRules) -> str:
    """Replace a stray symbol in an airline prefix when exactly one known airline fits."""
    if prefix.isalnum():
        return prefix
    candidates = [
        code
        for code in sorted(rules.airline_prefixes)
        if len(code) == 2
        and all(p == c or not p.isalnum() for p, c in zip(prefix, code))
    ]
    if len(candidates) == 1:
        return candidates[0]
    if rules.preferred_airline in candidates:
        return rules.preferred_airline
    return prefix


def match_flight(token: str, rules: ExtractionRules) -> Optional[str]:
    m = patterns.FLIGHT_NO.match(token)
    if not m:
        return None
    return f"{_repair_prefix(m.group('prefix'), rules)}{m.group('number')}"


def apply_flight(state: ExtractionState, flight_no: str, config: ScheduleConfig) -> None:
    event = state.ensure_flight(config.date_key(state.current_day))
    event.flight_number = flight_no


# ---------------- route ----------------

def _correct_airport(code: str, rules: ExtractionRules) -> Optional[str]:
    code = rules.airport_corrections.get(code, code)
    return code if patterns.AIRPORT.match(code) else None


def match_route(token: str, rules: ExtractionRules) -> Optional[Tuple[str, str]]:
    m = patterns.ROUTE.match(token)
    if m:
        origin = _correct_airport(m.group(1), rules)
        dest = _correct_airport(m.group(2), rules)
    else:
        m = patterns.ROUTE_CONCAT.match(token)
        if not m or token in rules.status_codes:
            return None
        origin = _correct_airport(m.group(1), rules)
        dest = _correct_airport(m.group(2), rules)
        # A bare 6-letter word is only a route when one half is a known airport
        if origin not in rules.known_airports and dest not in rules.known_airports:
            return None
    if not origin or not dest or origin == dest:
        return None
    return origin, dest


def apply_route(state: ExtractionState, route: Tuple[str, str], config: ScheduleConfig) -> None:
    event = state.ensure_flight(config.date_key(state.current_day))
    event.route = route


# ---------------- time ----------------

def match_time(token: str, rules: ExtractionRules) -> Optional[List[str]]:
    m = patterns.TIME_24H.match(token)
    if m:
        return [f"{int(m.group(1)):02d}:{m.group(2)}"]
    m = patterns.TIME_RANGE.match(token)
    if m:
        return [
            f"{int(m.group(1)):02d}:{m.group(2)}",
            f"{int(m.group(3)):02d}:{m.group(4)}",
        ]
    return None


def apply_time(state: ExtractionState, times: List[str], config: ScheduleConfig) -> None:
    # Times never create an event; rest days carry no time
    event = state.events.get(config.date_key(state.current_day))
    if isinstance(event, FlightEvent):
        for value in times:
            event.add_time(value)


# ---------------- status ----------------

def match_status(token: str, rules: ExtractionRules) -> Optional[str]:
    return token if token in rules.status_codes else None


def apply_status(state: ExtractionState, code: str, config: ScheduleConfig) -> None:
    date_key = config.date_key(state.current_day)
    if not isinstance(state.events.get(date_key), FlightEvent):
        state.events[date_key] = RestDayEvent()


DAY_MATCHER = Matcher("day", match_day, apply_day)

EVENT_MATCHERS: Tuple[Matcher, ...] = (
    Matcher("flight", match_flight, apply_flight),
    Matcher("route", match_route, apply_route),
    Matcher("time", match_time, apply_time),
    Matcher("status", match_status, apply_status),
)
