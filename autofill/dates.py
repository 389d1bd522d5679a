"""
Date format detection from input hints and date re-serialization
"""
import logging
import re
from enum import Enum

logger = logging.getLogger(__name__)


class DateFormat(Enum):
    MDY = "mdy"
    DMY = "dmy"
    YMD = "ymd"
    DMY_DOT = "dmy_dot"
    DMY_DASH = "dmy_dash"
    ISO = "iso"


# (token order, separator) per format
LAYOUTS = {
    DateFormat.MDY: ("mdy", "/"),
    DateFormat.DMY: ("dmy", "/"),
    DateFormat.YMD: ("ymd", "/"),
    DateFormat.DMY_DOT: ("dmy", "."),
    DateFormat.DMY_DASH: ("dmy", "-"),
    DateFormat.ISO: ("ymd", "-"),
}

HINT_PATTERNS = [
    (re.compile(r"y{2,4}-m{1,2}-d{1,2}"), DateFormat.ISO),
    (re.compile(r"y{1,4}/m{1,2}/d{1,2}"), DateFormat.YMD),
    (re.compile(r"m{1,2}/d{1,2}/y"), DateFormat.MDY),
    (re.compile(r"d{1,2}/m{1,2}/y"), DateFormat.DMY),
    (re.compile(r"d{1,2}\.m{1,2}\.y"), DateFormat.DMY_DOT),
    (re.compile(r"d{1,2}-m{1,2}-y"), DateFormat.DMY_DASH),
]

SEPARATORS = re.compile(r"[./-]")
DIGITS = re.compile(r"[0-9]+")

# Localized placeholder letters (Polish rrrr, Russian дд.мм.гггг).
HINT_LETTERS = str.maketrans({"r": "y", "д": "d", "м": "m", "г": "y"})


def detect_format(hint):
    """Token order announced by a placeholder such as "(dd/mm/yyyy)"; MDY when unknown."""
    text = (hint or "").lower().translate(HINT_LETTERS)
    for pattern, fmt in HINT_PATTERNS:
        if pattern.search(text):
            return fmt
    return DateFormat.MDY


def _split(raw, target):
    """Return (day, month, year) strings or None."""
    separators = set(SEPARATORS.findall(raw))
    if separators:
        parts = [p for p in SEPARATORS.split(raw) if p]
        if len(parts) != 3 or not all(DIGITS.fullmatch(p) for p in parts):
            return None
        first, second, third = parts

        if len(first) == 4:
            return third, second, first

        a, b = int(first), int(second)
        if a > 12:
            return first, second, third
        if b > 12:
            return second, first, third

        order, target_sep = LAYOUTS[target]
        if separators == {target_sep} and order != "ymd":
            day_first = order == "dmy"
        else:
            day_first = "." in separators
        if day_first:
            return first, second, third
        return second, first, third

    digits = raw.strip()
    if not DIGITS.fullmatch(digits):
        return None
    if len(digits) == 8:
        return digits[0:2], digits[2:4], digits[4:8]
    if len(digits) == 6:
        return digits[0:2], digits[2:4], "20" + digits[4:6]
    return None


def convert(raw, target=DateFormat.MDY):
    """
    Re-serialize a user supplied date for the target format.

    Returns "" when the value cannot be parsed; callers then type the raw string.
    """
    raw = str(raw or "").strip()
    if not raw:
        return ""

    parsed = _split(raw, target)
    if parsed is None:
        logger.debug(f"Unable to parse date '{raw}'")
        return ""

    day, month, year = parsed
    if len(year) == 2:
        year = "20" + year
    if len(year) != 4 or not (1 <= int(month) <= 12) or not (1 <= int(day) <= 31):
        logger.debug(f"Date '{raw}' out of range")
        return ""

    tokens = {"d": day.zfill(2), "m": month.zfill(2), "y": year}
    order, sep = LAYOUTS[target]
    return sep.join(tokens[t] for t in order)
