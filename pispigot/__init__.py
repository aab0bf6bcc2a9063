__all__ = [
    "generate",
    "iter_digits",
    "spigot_digits",
    "state_length",
    "PendingDigits",
    "advance",
    "render_pi",
    "timed_render",
    "serialize_payload",
    "apply_compression",
    "reference_digits",
    "verify_digits",
]

from .engine import generate, iter_digits, spigot_digits, state_length
from .formats import apply_compression, serialize_payload
from .nines import PendingDigits, advance
from .render import render_pi, timed_render
from .verify import reference_digits, verify_digits
