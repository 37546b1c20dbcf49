"""Attribute interpolation and easing for transitions.

Numbers interpolate linearly. Strings interpolate the numbers embedded in
them (path data, ``0.35em``) using the target string as the template, and
``#rrggbb`` colors interpolate per channel. Anything else snaps to the
target value when the transition ends.
"""

from __future__ import annotations

import re
from typing import Any, Callable

Interpolator = Callable[[float], Any]

_NUMBER_RE = re.compile(r"[-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?")
_HEX_RE = re.compile(r"^#([0-9a-fA-F]{6})$")


def ease_cubic_in_out(t: float) -> float:
    """Symmetric cubic easing.

    Examples:
        >>> ease_cubic_in_out(0.0), ease_cubic_in_out(0.5), ease_cubic_in_out(1.0)
        (0.0, 0.5, 1.0)
    """
    t *= 2
    if t <= 1:
        return t * t * t / 2
    t -= 2
    return (t * t * t + 2) / 2


def interpolate(a: Any, b: Any) -> Interpolator:
    """Pick an interpolator for a pair of attribute values."""
    if _is_number(a) and _is_number(b):
        return _interpolate_number(float(a), float(b))
    if isinstance(a, str) and isinstance(b, str):
        ca, cb = _HEX_RE.match(a), _HEX_RE.match(b)
        if ca and cb:
            return _interpolate_rgb(ca.group(1), cb.group(1))
        return _interpolate_string(a, b)
    return lambda t: b if t >= 1 else a


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _interpolate_number(a: float, b: float) -> Interpolator:
    return lambda t: b if t >= 1 else a + (b - a) * t


def _interpolate_rgb(a: str, b: str) -> Interpolator:
    ra, rb = _channels(a), _channels(b)

    def at(t: float) -> str:
        if t >= 1:
            return f"#{b.lower()}"
        mixed = (round(x + (y - x) * t) for x, y in zip(ra, rb))
        return "#" + "".join(f"{c:02x}" for c in mixed)

    return at


def _channels(hex6: str) -> tuple[int, int, int]:
    return int(hex6[0:2], 16), int(hex6[2:4], 16), int(hex6[4:6], 16)


def _interpolate_string(a: str, b: str) -> Interpolator:
    """Interpolate numbers embedded in ``b`` from their counterparts in ``a``."""
    a_numbers = [float(m.group(0)) for m in _NUMBER_RE.finditer(a)]
    b_matches = list(_NUMBER_RE.finditer(b))
    if not b_matches or not a_numbers:
        return lambda t: b if t >= 1 else a

    pieces: list[str | tuple[float, float]] = []
    cursor = 0
    for k, match in enumerate(b_matches):
        pieces.append(b[cursor : match.start()])
        end = float(match.group(0))
        start = a_numbers[k] if k < len(a_numbers) else end
        pieces.append((start, end))
        cursor = match.end()
    pieces.append(b[cursor:])

    def at(t: float) -> str:
        if t >= 1:
            return b
        out = []
        for piece in pieces:
            if isinstance(piece, tuple):
                start, end = piece
                out.append(_fmt(start + (end - start) * t))
            else:
                out.append(piece)
        return "".join(out)

    return at


def _fmt(value: float) -> str:
    text = f"{value:.3f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text
