import gzip
import logging
import re
from typing import Optional, Sequence, Tuple

from mpmath import mp

from .engine import generate, spigot_digits


logger = logging.getLogger(__name__)

_GUARD_DPS = 30


def reference_digits(n: int) -> str:
    """The first ``n`` fractional digits of pi, truncated, computed with mpmath."""
    n = int(n)
    if n < 0:
        raise ValueError("n must be >= 0")
    if n == 0:
        return ""
    with mp.workdps(n + _GUARD_DPS):
        scaled = int(mp.floor(mp.pi * mp.mpf(10) ** n))
    return str(scaled)[1:]


def first_mismatch(actual: str, expected: str) -> Optional[int]:
    for i, (a, e) in enumerate(zip(actual, expected)):
        if a != e:
            return i
    if len(actual) != len(expected):
        return min(len(actual), len(expected))
    return None


def verify_digits(digits: Sequence[int]) -> Tuple[bool, Optional[int]]:
    actual = "".join(str(d) for d in digits)
    index = first_mismatch(actual, reference_digits(len(actual)))
    if index is not None:
        logger.error("digit %d differs from the mpmath reference", index)
    return index is None, index


def margin_shortfall(n: int) -> int:
    """How many digits a single run sized for ``n`` leaves unconfirmed."""
    return int(n) - len(spigot_digits(n))


def check_margin(n: int) -> bool:
    digits = generate(n)
    if len(digits) != int(n):
        return False
    ok, _ = verify_digits(digits)
    return ok


def read_fractional_digits_from_text(path: str, samples: int) -> str:
    samples = int(samples)
    if samples <= 0:
        return ""
    opener = gzip.open if path.endswith(".gz") else open
    seen_dot = False
    done = False
    out = []
    with opener(path, "rb") as f:
        while not done and len(out) < samples:
            chunk = f.read(8192)
            if not chunk:
                break
            text = chunk.decode("utf-8", errors="ignore")
            for ch in text:
                if not seen_dot:
                    if ch == ".":
                        seen_dot = True
                    continue
                # digits end at the first non-digit, e.g. a trailing newline
                if not re.match(r"[0-9]", ch):
                    done = True
                    break
                out.append(ch)
                if len(out) >= samples:
                    break
    return "".join(out)
