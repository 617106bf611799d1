"""
Normalizer: raw OCR text -> ordered token stream.

The whole document is treated as one linear stream in the scan order the
OCR pass emitted; no attempt is made to rebuild the calendar grid.
"""

from __future__ import annotations

from typing import List, Optional

from .models import Token
from .patterns import patterns
from .rules import DEFAULT_RULES, ExtractionRules


def apply_confusions(text: str, rules: ExtractionRules = DEFAULT_RULES) -> str:
    for wrong, right in rules.ocr_confusions.items():
        if wrong:
            text = text.replace(wrong, right)
    return text


def _keep(token: str) -> bool:
    # Noise floor: single characters are dropped, except day digits 1-9
    if len(token) >= 2:
        return True
    return token.isdigit() and token != "0"


def _split_merged(token: str, rules: ExtractionRules) -> List[str]:
    """'4ATDO' -> ['4', 'ATDO'] when OCR merged a day cell with its status code."""
    m = patterns.MERGED_DAY_STATUS.match(token)
    if m and m.group(2) in rules.status_codes:
        return [m.group(1), m.group(2)]
    return [token]


def normalize(raw_text: Optional[str], rules: Optional[ExtractionRules] = None) -> List[Token]:
    """Clean ``raw_text`` and split it into uppercase tokens. Never raises."""
    if not raw_text:
        return []
    rules = rules or DEFAULT_RULES

    text = apply_confusions(str(raw_text), rules)
    # "19 : 30" -> "19:30" so time halves never read as day numbers
    text = patterns.SPLIT_TIME.sub(r"\1:\2", text)
    text = patterns.SEPARATORS.sub(" ", text)

    tokens: List[Token] = []
    for chunk in text.split():
        cleaned = chunk.strip(patterns.EDGE_PUNCT).upper()
        if not cleaned:
            continue
        for part in _split_merged(cleaned, rules):
            if _keep(part):
                tokens.append(Token(text=part, position=len(tokens)))
    return tokens
