"""Alphanumeric OS grid references <-> numeric easting/northing.

Grid squares are 100 km and lettered with a 25-letter alphabet (no 'I'):
the first letter picks a 500 km square, the second a 100 km square within
it, both counted from the false origin at square SV.
"""

from __future__ import annotations

import math
import re

from osgrid.angles import zero_pad
from osgrid.core.errors import ParseError, RangeError
from osgrid.domain.schemas import GridRef

SQUARE_M = 100000
MAX_E100K = 6
MAX_N100K = 12

# pad each half of the numeric body to 5 digits, centring on the covered square
_CENTRE_PADDING = {0: "50000", 2: "5000", 4: "500", 6: "50", 8: "5", 10: ""}

_WHITESPACE = re.compile(r"\s+")
_DIGITS = re.compile(r"[0-9]*")


def _letter_index(ch: str) -> int:
    if not ("A" <= ch <= "Z") or ch == "I":
        raise ParseError(f"Invalid grid letter {ch!r}")
    idx = ord(ch) - ord("A")
    # 'I' is not used in the grid
    if idx > 7:
        idx -= 1
    return idx


def _index_letter(idx: int) -> str:
    if idx > 7:
        idx += 1
    return chr(idx + ord("A"))


def parse_gridref(text: str) -> GridRef:
    """
    Convert a standard grid reference (e.g. 'SU387148', 'tg 51409 13177')
    to a numeric GridRef in metres from the false origin.

    References below 10 digits are centred on the square they cover,
    e.g. 'SU387148' -> (438750, 114850).
    """
    ref = text.strip().upper()
    if len(ref) < 2:
        raise ParseError(f"Grid reference too short: {text!r}")

    l1 = _letter_index(ref[0])
    l2 = _letter_index(ref[1])

    # 100km-square indexes from false origin
    e100k = ((l1 - 2) % 5) * 5 + (l2 % 5)
    n100k = (19 - (l1 // 5) * 5) - (l2 // 5)
    if not (0 <= e100k <= MAX_E100K and 0 <= n100k <= MAX_N100K):
        raise ParseError(f"Grid square {ref[:2]!r} is outside the National Grid")

    body = _WHITESPACE.sub("", ref[2:])
    if not _DIGITS.fullmatch(body):
        raise ParseError(f"Numeric part of {text!r} must contain only digits")
    if len(body) not in _CENTRE_PADDING:
        raise ParseError(f"Grid reference {text!r} has {len(body)} digits; expected 0, 2, 4, 6, 8 or 10")

    half = len(body) // 2
    pad = _CENTRE_PADDING[len(body)]
    easting = e100k * SQUARE_M + int(body[:half] + pad)
    northing = n100k * SQUARE_M + int(body[half:] + pad)

    return GridRef(easting=easting, northing=northing)


def format_gridref(gridref: GridRef, digits: int = 10) -> str:
    """
    Format a numeric GridRef as a standard grid reference,
    e.g. (651409, 313177), 10 -> 'TG 51409 13177'.

    digits is the total count of numeric digits (half each for easting and
    northing); lower precisions truncate towards the south-west corner.
    With digits=0 only the square letters are returned.
    """
    if isinstance(digits, bool) or not isinstance(digits, int) or digits % 2 or not (0 <= digits <= 10):
        raise RangeError(f"digits must be an even integer between 0 and 10, got {digits!r}")

    e = gridref.easting
    n = gridref.northing
    if not (math.isfinite(e) and math.isfinite(n)):
        raise RangeError(f"Cannot format non-finite grid reference ({e}, {n})")

    e100k = math.floor(e / SQUARE_M)
    n100k = math.floor(n / SQUARE_M)
    if not (0 <= e100k <= MAX_E100K and 0 <= n100k <= MAX_N100K):
        raise RangeError(f"Grid reference ({e}, {n}) is outside the lettered National Grid squares")

    # numeric equivalents of the grid letters
    l1 = (19 - n100k) - (19 - n100k) % 5 + (e100k + 10) // 5
    l2 = (19 - n100k) * 5 % 25 + e100k % 5
    letters = _index_letter(l1) + _index_letter(l2)

    if digits == 0:
        return letters

    width = digits // 2
    divisor = 10 ** (5 - width)
    e_digits = (e % SQUARE_M) // divisor
    n_digits = (n % SQUARE_M) // divisor

    return f"{letters} {zero_pad(e_digits, width)} {zero_pad(n_digits, width)}"
