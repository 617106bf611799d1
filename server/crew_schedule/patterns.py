# patterns.py
import re


class Patterns:
    # Leading 1-2 digit day number ("4", "08", "31ST"); range checked by the matcher
    DAY = re.compile(r"^(\d{1,2})(?!\d)")
    # Airline prefix (letters, letter+digit, or one letter next to a stray symbol) + 3-4 digits
    FLIGHT_NO = re.compile(
        r"^(?P<prefix>[A-Z]{2}|[A-Z]\d|\d[A-Z]|[A-Z][^\w\s:\-]|[^\w\s:\-][A-Z])(?P<number>\d{3,4})$"
    )
    ROUTE = re.compile(r"^([A-Z0-9]{2,3})[-/>~]+([A-Z0-9]{2,3})$")
    ROUTE_CONCAT = re.compile(r"^([A-Z]{3})([A-Z]{3})$")
    TIME_24H = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")
    TIME_RANGE = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)[-~]([01]?\d|2[0-3]):([0-5]\d)$")
    AIRPORT = re.compile(r"^[A-Z]{3}$")

    # Normalizer helpers
    SPLIT_TIME = re.compile(r"(?<!\d)(\d{1,2})\s*:\s*(\d{2})(?!\d)")
    SEPARATORS = re.compile(r"[\r\n\t|]+")
    MERGED_DAY_STATUS = re.compile(r"^(\d{1,2})([A-Z]{2,5})$")
    EDGE_PUNCT = ".,;()[]{}\"'`-~"


patterns = Patterns()
