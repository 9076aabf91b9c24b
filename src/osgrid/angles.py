from __future__ import annotations

import math
import re


_DMS_RE = re.compile(
    r"""^\s*
    (?P<pre>[NSEW])?\s*
    (?P<deg>\d{1,3}(?:\.\d+)?)\s*°\s*
    (?:(?P<min>\d{1,2}(?:\.\d+)?)\s*['′]\s*)?
    (?:(?P<sec>\d+(?:\.\d+)?)\s*["″]\s*)?
    (?P<post>[NSEW])?\s*
    $""",
    re.VERBOSE | re.IGNORECASE,
)


def to_radians(deg: float) -> float:
    return deg * math.pi / 180


def to_degrees(rad: float) -> float:
    return rad * 180 / math.pi


def zero_pad(n: int, width: int) -> str:
    """Left-pad the decimal representation of n with zeros to width chars."""
    return str(n).rjust(width, "0")


def dms_to_decimal(dms: str) -> float:
    """
    Convert strings like:
      N52°39'27.2531"   -> 52.65756...
      1°43'4.5177"E     -> 1.71792...
      W2°00'00"         -> -2.0
    The hemisphere letter may lead or trail; S and W are negative.
    """
    m = _DMS_RE.match(dms)
    if not m or (m.group("pre") and m.group("post")):
        raise ValueError(f"Bad DMS format: {dms!r}")

    hem = (m.group("pre") or m.group("post") or "").upper()
    deg = float(m.group("deg"))
    minute = float(m.group("min") or 0.0)
    sec = float(m.group("sec") or 0.0)
    if minute >= 60 or sec >= 60:
        raise ValueError(f"Bad DMS format: {dms!r} (minutes and seconds must be below 60)")

    dec = deg + minute / 60.0 + sec / 3600.0
    if hem in ("S", "W"):
        dec = -dec
    return dec


def decimal_to_dms(value: float, axis: str = "lat", dp: int = 2) -> str:
    """
    Format signed decimal degrees as degrees/minutes/seconds with a
    hemisphere suffix, e.g. 52.657568 -> 52°39′27.25″N.
    """
    if axis not in ("lat", "lon"):
        raise ValueError(f"axis must be 'lat' or 'lon', got {axis!r}")
    if not math.isfinite(value):
        raise ValueError(f"Cannot format non-finite angle: {value}")

    if axis == "lat":
        hem = "N" if value >= 0 else "S"
    else:
        hem = "E" if value >= 0 else "W"

    # round once in seconds so 59.999" carries into the minutes
    total_sec = round(abs(value) * 3600, dp)
    deg = int(total_sec // 3600)
    minute = int((total_sec - deg * 3600) // 60)
    sec = total_sec - deg * 3600 - minute * 60

    width = dp + 3 if dp > 0 else 2
    deg_width = 2 if axis == "lat" else 3
    return f"{zero_pad(deg, deg_width)}°{zero_pad(minute, 2)}′{sec:0{width}.{dp}f}″{hem}"
