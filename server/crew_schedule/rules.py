from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, FrozenSet, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .corrections import (
    AIRLINE_PREFIXES,
    AIRPORT_CORRECTIONS,
    KNOWN_AIRPORTS,
    OCR_CONFUSIONS,
    STATUS_CODES,
)


class ExtractionRules(BaseModel):
    """
    Data tables the normalizer and matchers consult.

    Defaults come from corrections.py. Use ``extended`` or ``from_json_file``
    to layer site-specific entries on top without editing code.
    """

    model_config = ConfigDict(frozen=True)

    ocr_confusions: Dict[str, str] = Field(default_factory=lambda: dict(OCR_CONFUSIONS))
    airport_corrections: Dict[str, str] = Field(default_factory=lambda: dict(AIRPORT_CORRECTIONS))
    known_airports: FrozenSet[str] = Field(default_factory=lambda: frozenset(KNOWN_AIRPORTS))
    airline_prefixes: FrozenSet[str] = Field(default_factory=lambda: frozenset(AIRLINE_PREFIXES))
    status_codes: FrozenSet[str] = Field(default_factory=lambda: frozenset(STATUS_CODES))
    # Wins when a symbol-corrupted prefix fits several airlines
    preferred_airline: Optional[str] = "KE"

    @field_validator("airport_corrections")
    @classmethod
    def _upper_corrections(cls, v: Dict[str, str]) -> Dict[str, str]:
        return {k.upper(): val.upper() for k, val in v.items()}

    @field_validator("known_airports", "airline_prefixes", "status_codes", mode="before")
    @classmethod
    def _upper_codes(cls, v: Any) -> Any:
        if isinstance(v, (list, set, frozenset, tuple)):
            return frozenset(str(c).strip().upper() for c in v if str(c).strip())
        return v

    def extended(
        self,
        *,
        ocr_confusions: Optional[Mapping[str, str]] = None,
        airport_corrections: Optional[Mapping[str, str]] = None,
        known_airports: Optional[Any] = None,
        airline_prefixes: Optional[Any] = None,
        status_codes: Optional[Any] = None,
        preferred_airline: Optional[str] = None,
    ) -> "ExtractionRules":
        """Return a copy with the given entries added to (or overriding) each table."""
        return ExtractionRules(
            ocr_confusions={**self.ocr_confusions, **(ocr_confusions or {})},
            airport_corrections={**self.airport_corrections, **(airport_corrections or {})},
            known_airports=set(self.known_airports) | set(known_airports or ()),
            airline_prefixes=set(self.airline_prefixes) | set(airline_prefixes or ()),
            status_codes=set(self.status_codes) | set(status_codes or ()),
            preferred_airline=(preferred_airline or self.preferred_airline),
        )

    @classmethod
    def from_json_file(cls, path: Union[str, Path]) -> "ExtractionRules":
        """
        Load extra table entries from a JSON object such as:
            {"airport_corrections": {"KX": "KIX"}, "status_codes": ["VAC"]}
        Unknown keys are ignored.
        """
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if not isinstance(data, dict):
            raise ValueError(f"Extraction rules file {path} must contain a JSON object")
        return cls().extended(
            ocr_confusions=data.get("ocr_confusions"),
            airport_corrections=data.get("airport_corrections"),
            known_airports=data.get("known_airports"),
            airline_prefixes=data.get("airline_prefixes"),
            status_codes=data.get("status_codes"),
            preferred_airline=data.get("preferred_airline"),
        )


DEFAULT_RULES = ExtractionRules()
