"""Parsing utilities for component pin specifications."""
from __future__ import annotations

from dataclasses import dataclass
import re
from typing import Iterable, List

from ..domain.models import Component, Pin

INT_PREFIX_RE = re.compile(r"^[+-]?\d+")


@dataclass(slots=True)
class PinCounts:
    digital: int
    analog: int


# ---------------------------------------------------------------------------
def parse_pin(token: str) -> Pin:
    """Parse a single pin value.

    Values starting with ``A`` are named analog pins and are kept verbatim.
    Anything else is read as an integer from its leading digits; a value
    without leading digits is returned unchanged for the validator to reject.
    """

    if token.startswith("A"):
        return token
    match = INT_PREFIX_RE.match(token)
    if match is None:
        return token
    return int(match.group(0))


def parse_pins(text: str | None) -> List[Pin]:
    """Parse a pin specification such as ``"7,8"``, ``"trig:7,echo:8"`` or ``"A0"``.

    Parameters
    ----------
    text:
        Raw pin string supplied with a component declaration.

    Returns
    -------
    list
        Pins in declaration order.  ``int`` for digital pins, ``str`` for
        named analog pins and for anything that failed to parse.  Duplicates
        are kept.
    """

    if text is None or not text.strip():
        return []

    pins: List[Pin] = []
    for part in text.split(","):
        if ":" in part:
            _, _, part = part.partition(":")
        pins.append(parse_pin(part.strip()))
    return pins


def used_pin_counts(components: Iterable[Component]) -> PinCounts:
    """Count distinct numeric and distinct named pins across ``components``."""

    digital: set[int] = set()
    analog: set[str] = set()
    for component in components:
        for pin in parse_pins(component.pins):
            if isinstance(pin, int):
                digital.add(pin)
            else:
                analog.add(pin)
    return PinCounts(digital=len(digital), analog=len(analog))


__all__ = ["PinCounts", "parse_pin", "parse_pins", "used_pin_counts"]
