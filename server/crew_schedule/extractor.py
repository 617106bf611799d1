"""
Stream extractor: token stream -> date-indexed schedule.

The extraction is a left fold over the tokens carrying an
``ExtractionState`` (active day + events so far). For every token the day
matcher runs first; the token is then offered to the event matchers in
priority order (flight, route, time, status) and the first one that fires
wins. Tokens seen before any day number are dropped.
"""

from __future__ import annotations

import logging
from collections import Counter
from functools import reduce
from typing import Iterable, List, Optional, Sequence, Union

from logging_utils import log_event

from .matchers import DAY_MATCHER, EVENT_MATCHERS, ExtractionState, Matcher
from .models import FlightEvent, RestDayEvent, ScheduleConfig, ScheduleMap, Token
from .normalizer import normalize
from .rules import DEFAULT_RULES, ExtractionRules

logger = logging.getLogger("crewsched.extractor")


class StreamExtractor:
    def __init__(
        self,
        rules: Optional[ExtractionRules] = None,
        matchers: Optional[Sequence[Matcher]] = None,
    ) -> None:
        self.rules = rules or DEFAULT_RULES
        self.matchers: Sequence[Matcher] = tuple(matchers) if matchers is not None else EVENT_MATCHERS

    def _step(
        self,
        state: ExtractionState,
        token: str,
        config: ScheduleConfig,
        hits: Counter,
    ) -> ExtractionState:
        day = DAY_MATCHER.match(token, self.rules)
        if day is not None:
            DAY_MATCHER.apply(state, day, config)
            hits[DAY_MATCHER.kind] += 1

        if state.current_day is None:
            hits["unattributed"] += 1
            return state

        for matcher in self.matchers:
            value = matcher.match(token, self.rules)
            if value is None:
                continue
            matcher.apply(state, value, config)
            hits[matcher.kind] += 1
            break
        return state

    def run(self, tokens: Iterable[Union[Token, str]], config: ScheduleConfig) -> ScheduleMap:
        hits: Counter = Counter()
        texts = [t.text if isinstance(t, Token) else str(t).upper() for t in tokens]
        state = reduce(
            lambda acc, text: self._step(acc, text, config, hits),
            texts,
            ExtractionState(),
        )
        schedule = ScheduleMap(state.events)

        log_event(
            logger,
            "schedule_extracted",
            level=logging.DEBUG,
            tokens=len(texts),
            events=len(schedule),
            flight_days=sum(isinstance(e, FlightEvent) for e in state.events.values()),
            rest_days=sum(isinstance(e, RestDayEvent) for e in state.events.values()),
            matches=dict(hits),
            year=config.year,
            month=config.month,
        )
        return schedule


def extract(
    raw_text: Optional[str],
    config: Optional[ScheduleConfig] = None,
    rules: Optional[ExtractionRules] = None,
) -> ScheduleMap:
    """Heuristic extraction of a ScheduleMap from raw OCR text. Never raises."""
    rules = rules or DEFAULT_RULES
    return StreamExtractor(rules).run(normalize(raw_text, rules), config or ScheduleConfig())


def extract_tokens(
    tokens: List[Union[Token, str]],
    config: Optional[ScheduleConfig] = None,
    rules: Optional[ExtractionRules] = None,
) -> ScheduleMap:
    """Run the stream extractor over an already tokenized sequence."""
    return StreamExtractor(rules).run(tokens, config or ScheduleConfig())
