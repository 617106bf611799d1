"""
Pairing detection for an extracted schedule.

Given a ScheduleMap, chains routed flight days into crew pairings: trips that
leave an airport and (ideally) come back to it after one or more layovers.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from .models import FlightEvent, ScheduleMap

logger = logging.getLogger("crewsched.pairings")

DEFAULT_MAX_GAP_DAYS = 7


def _parse_date(key: str) -> Optional[date]:
    try:
        return date.fromisoformat(key)
    except ValueError:
        # Keys past the month's real length (e.g. 2026-02-30) are kept verbatim upstream
        return None


class PairingDetector:
    @staticmethod
    def find_pairings(
        schedule: ScheduleMap,
        max_gap_days: int = DEFAULT_MAX_GAP_DAYS,
    ) -> List[Dict[str, Any]]:
        """
        Chain flight legs into pairings.

        Rules:
        - Only Flight events with a route take part; sorted by date.
        - A leg extends the open pairing when its origin equals the previous
          leg's destination and it departs at most ``max_gap_days`` later.
        - Otherwise the open pairing is closed off and a new one starts.
        - ``closed`` is True when the last destination equals the first origin.
        """
        legs: List[Tuple[date, str, FlightEvent]] = []
        for key, event in schedule.items():
            if not isinstance(event, FlightEvent) or not event.route:
                continue
            day = _parse_date(key)
            if day is None:
                continue
            legs.append((day, key, event))
        legs.sort(key=lambda leg: leg[0])

        pairings: List[Dict[str, Any]] = []
        current: List[Tuple[date, str, FlightEvent]] = []

        for leg in legs:
            if current:
                prev_day, _, prev = current[-1]
                gap = (leg[0] - prev_day).days
                returned_to_base = prev.route[1] == current[0][2].route[0]
                if leg[2].route[0] == prev.route[1] and gap <= max_gap_days and not returned_to_base:
                    current.append(leg)
                    continue
                pairings.append(PairingDetector._summarize(current))
            current = [leg]

        if current:
            pairings.append(PairingDetector._summarize(current))

        logger.info(f"Detected {len(pairings)} pairings in schedule")
        return pairings

    @staticmethod
    def _summarize(legs: List[Tuple[date, str, FlightEvent]]) -> Dict[str, Any]:
        first_day, first_key, first = legs[0]
        last_day, last_key, last = legs[-1]
        layovers = [
            {
                "airport": prev.route[1],
                "days": (nxt_day - prev_day).days,
            }
            for (prev_day, _, prev), (nxt_day, _, _) in zip(legs, legs[1:])
        ]
        return {
            "start_date": first_key,
            "end_date": last_key,
            "legs": [key for _, key, _ in legs],
            "flight_numbers": [e.flight_number for _, _, e in legs if e.flight_number],
            "base": first.route[0],
            "closed": last.route[1] == first.route[0],
            "layovers": layovers,
            "duration_days": (last_day - first_day).days + 1,
        }
