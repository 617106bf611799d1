# models.py
from __future__ import annotations

import re
from typing import Annotated, Any, Dict, Iterator, List, Literal, Optional, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator

DEFAULT_YEAR = 2026
DEFAULT_MONTH = 1

TIME_SEPARATOR = "-"


class ScheduleConfig(BaseModel):
    """Assumed year/month for day numbers read off the roster."""

    model_config = ConfigDict(frozen=True)

    year: int = Field(default=DEFAULT_YEAR, ge=1, le=9999)
    month: int = Field(default=DEFAULT_MONTH, ge=1, le=12)

    def date_key(self, day: int) -> str:
        # No rollover: day 31 in a 30-day month stays in this month
        return f"{self.year:04d}-{self.month:02d}-{day:02d}"


class Token(BaseModel):
    model_config = ConfigDict(frozen=True)

    text: str
    position: int


class FlightEvent(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    type: Literal["Flight"] = "Flight"
    flight_number: Optional[str] = Field(default=None, alias="flightNumber")
    route: Optional[Tuple[str, str]] = None
    time: Optional[str] = None
    note: Optional[str] = None

    @field_validator("flight_number")
    @classmethod
    def _clean_flight_number(cls, v: Optional[str]) -> Optional[str]:
        if not v:
            return v
        return re.sub(r"\s+", "", v.upper())

    @field_validator("route", mode="before")
    @classmethod
    def _split_route(cls, v: Any) -> Any:
        # Accept the "ICN-JFK" display form as well as a pair
        if isinstance(v, str):
            parts = [p.strip().upper() for p in re.split(r"[-/>~]", v) if p.strip()]
            return tuple(parts) if len(parts) == 2 else None
        if isinstance(v, (list, tuple)):
            return tuple(str(p).strip().upper() for p in v)
        return v

    @property
    def route_label(self) -> Optional[str]:
        if not self.route:
            return None
        return f"{self.route[0]}-{self.route[1]}"

    @property
    def times(self) -> List[str]:
        if not self.time:
            return []
        return [t for t in self.time.split(TIME_SEPARATOR) if t]

    def add_time(self, value: str) -> bool:
        """Append a time string unless it is already recorded. Returns True when appended."""
        current = self.times
        if value in current:
            return False
        current.append(value)
        self.time = TIME_SEPARATOR.join(current)
        return True


class RestDayEvent(BaseModel):
    type: Literal["RestDay"] = "RestDay"
    note: Optional[str] = None


ScheduleEvent = Annotated[Union[FlightEvent, RestDayEvent], Field(discriminator="type")]


class ScheduleMap(RootModel[Dict[str, ScheduleEvent]]):
    """Date key (YYYY-MM-DD) -> exactly one event."""

    root: Dict[str, ScheduleEvent] = Field(default_factory=dict)

    def __getitem__(self, date_key: str) -> Union[FlightEvent, RestDayEvent]:
        return self.root[date_key]

    def __setitem__(self, date_key: str, event: Union[FlightEvent, RestDayEvent]) -> None:
        self.root[date_key] = event

    def __contains__(self, date_key: object) -> bool:
        return date_key in self.root

    def __iter__(self) -> Iterator[str]:  # type: ignore[override]
        return iter(self.root)

    def __len__(self) -> int:
        return len(self.root)

    def get(self, date_key: str) -> Optional[Union[FlightEvent, RestDayEvent]]:
        return self.root.get(date_key)

    def items(self):
        return self.root.items()

    def flight_days(self) -> List[str]:
        return sorted(k for k, v in self.root.items() if isinstance(v, FlightEvent))

    def rest_days(self) -> List[str]:
        return sorted(k for k, v in self.root.items() if isinstance(v, RestDayEvent))

    def merged(self, other: "ScheduleMap") -> "ScheduleMap":
        """Copy of this map with every date of ``other`` overwriting ours."""
        combined: Dict[str, Union[FlightEvent, RestDayEvent]] = {
            k: v.model_copy(deep=True) for k, v in self.root.items()
        }
        for k, v in other.root.items():
            combined[k] = v.model_copy(deep=True)
        return ScheduleMap(combined)

    def to_json_dict(self) -> Dict[str, Dict[str, Any]]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
