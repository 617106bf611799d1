# corrections.py
# ---------------------------------------------------------------------
# Plain lookup tables for the schedule engine. Extend freely; the
# matching code in matchers.py never needs to change.

# Raw-text substitutions applied before tokenizing, in insertion order.
# Keys are exact OCR outputs, values the intended text.
OCR_CONFUSIONS: dict[str, str] = {
    # ==== currency-like glyphs read in place of letters ====
    "€": "E",
    "£": "E",
    "$": "S",
    "¢": "C",
    # ==== airport codes the OCR pass misreads systematically ====
    "1CN": "ICN",
    "lCN": "ICN",
    "!CN": "ICN",
    "JFX": "JFK",
    "JEK": "JFK",
    "G1MP": "GMP",
    # ==== status codes ====
    "ATD0": "ATDO",
    "AT DO": "ATDO",
    # ==== dash / colon variants ====
    "—": "-",
    "–": "-",
    "→": "-",
    "：": ":",
    # ==== duplicated or merged row separators ====
    "||": "|",
    "¦": "|",
    "│": "|",
}

# Truncated / garbled airport fragments, applied to each half of a route.
AIRPORT_CORRECTIONS: dict[str, str] = {
    "CN": "ICN",
    "IC": "ICN",
    "FK": "JFK",
    "JF": "JFK",
    "MP": "GMP",
    "AX": "LAX",
    "LA": "LAX",
    "RT": "NRT",
    "NR": "NRT",
    "KG": "HKG",
    "CJ": "CJU",
    "1CN": "ICN",
    "0SA": "OSA",
}

# Airports that commonly appear on the crew rosters this engine reads.
# Used to accept a bare 6-letter token as an ORG+DST route.
KNOWN_AIRPORTS: set[str] = {
    # === KOREA ===
    "ICN", "GMP", "PUS", "CJU", "TAE", "KWJ", "CJJ", "USN", "RSU", "MWX",
    # === JAPAN / CHINA / ASIA ===
    "NRT", "HND", "KIX", "NGO", "FUK", "CTS", "OKA", "PEK", "PKX", "PVG",
    "SHA", "CAN", "SZX", "HKG", "TPE", "MNL", "SGN", "HAN", "DAD", "BKK",
    "SIN", "KUL", "CGK", "DPS", "DEL", "BOM", "ULN", "TAS", "CEB",
    # === AMERICAS ===
    "JFK", "EWR", "IAD", "BOS", "ATL", "ORD", "DFW", "IAH", "LAX", "SFO",
    "SEA", "LAS", "HNL", "ANC", "YVR", "YYZ", "MEX", "GRU", "MSP", "DTW",
    # === EUROPE / MIDDLE EAST / OCEANIA ===
    "LHR", "CDG", "FRA", "AMS", "FCO", "MAD", "BCN", "ZRH", "VIE", "PRG",
    "IST", "DXB", "DOH", "TLV", "SYD", "MEL", "AKL", "BNE", "GUM", "SPN",
}

# IATA airline designators seen on rosters, with the ICAO code for reference.
AIRLINE_PREFIXES: dict[str, dict[str, str]] = {
    "KE": {"icao": "KAL", "name": "Korean Air"},
    "OZ": {"icao": "AAR", "name": "Asiana Airlines"},
    "LJ": {"icao": "JNA", "name": "Jin Air"},
    "7C": {"icao": "JJA", "name": "Jeju Air"},
    "TW": {"icao": "TWB", "name": "T'way Air"},
    "BX": {"icao": "ABL", "name": "Air Busan"},
    "RS": {"icao": "ASV", "name": "Air Seoul"},
    "ZE": {"icao": "ESR", "name": "Eastar Jet"},
    "JL": {"icao": "JAL", "name": "Japan Airlines"},
    "NH": {"icao": "ANA", "name": "All Nippon Airways"},
    "DL": {"icao": "DAL", "name": "Delta Air Lines"},
    "AF": {"icao": "AFR", "name": "Air France"},
    "KL": {"icao": "KLM", "name": "KLM Royal Dutch Airlines"},
    "CI": {"icao": "CAL", "name": "China Airlines"},
    "VN": {"icao": "HVN", "name": "Vietnam Airlines"},
}

# Closed vocabulary of non-flight duty codes (rest, standby, off, leave).
STATUS_CODES: set[str] = {
    "ATDO",  # assigned day off
    "DO",    # day off
    "AL",    # annual leave
    "OFF",
    "RDO",   # regular day off
    "REST",
    "SBY",   # standby
    "STBY",
    "RSV",   # reserve
}
