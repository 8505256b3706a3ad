"""Pure translation core: pin parsing, validation, prompt parsing and emitters."""

from .parser import parse_prompt
from .pins import parse_pins, used_pin_counts
from .pseudocode import generate_pseudocode
from .sketch import generate_sketch
from .validation import build_debug_report, validate_components

__all__ = [
    "parse_prompt",
    "parse_pins",
    "used_pin_counts",
    "generate_pseudocode",
    "generate_sketch",
    "build_debug_report",
    "validate_components",
]
