import logging
from typing import Iterator, List, Optional

from .nines import PendingDigits, advance


logger = logging.getLogger(__name__)

# digits computed past the requested count before any digit is trusted
_GUARD_DIGITS = 8


def _check_count(n: int) -> int:
    if isinstance(n, bool) or int(n) != n:
        raise ValueError("n must be an integer")
    n = int(n)
    if n < 0:
        raise ValueError("n must be >= 0")
    return n


def state_length(n: int) -> int:
    return (10 * _check_count(n)) // 3 + 3


def initial_state(length: int) -> List[int]:
    return [2] * int(length)


def normalize(a: List[int]) -> int:
    """Multiply the mixed-radix number held in ``a`` by ten, in place.

    Position ``i`` has radix ``2*i + 1`` and its overflow is scaled by ``i``
    on the way left. Position 0 is kept in base ten and the part that spills
    out of it is returned as the raw candidate digit. The candidate never
    exceeds 10: the positions right of 0 hold a value below 2, so the carry
    into position 0 is below 20 while ``a[0]`` is at most 9.
    """
    carry = 0
    for i in range(len(a) - 1, 0, -1):
        radix = 2 * i + 1
        value = a[i] * 10 + carry
        a[i] = value % radix
        carry = (value // radix) * i
    value = a[0] * 10 + carry
    a[0] = value % 10
    return value // 10


def iter_confirmed(n: int, length: Optional[int] = None, steps: Optional[int] = None) -> Iterator[int]:
    """Yield confirmed digits of pi, the integer digit 3 first.

    Stops after ``n + 1`` digits or after ``steps`` normalization passes,
    whichever comes first. Digits still pending when the passes run out are
    never yielded.
    """
    n = _check_count(n)
    if length is None:
        length = state_length(n)
    if steps is None:
        steps = n + 3
    a = initial_state(length)
    state = PendingDigits()
    emitted = 0
    used = 0
    for _ in range(int(steps)):
        used += 1
        q = min(normalize(a), 10)
        state, confirmed = advance(state, q)
        for d in confirmed:
            yield d
            emitted += 1
            if emitted >= n + 1:
                logger.debug("spigot n=%d length=%d finished after %d steps", n, length, used)
                return
    logger.debug("spigot n=%d length=%d ran out of steps with %d confirmed, %d nines pending", n, length, emitted, state.nines)


def spigot_digits(n: int, length: Optional[int] = None, steps: Optional[int] = None) -> List[int]:
    """Fractional digits confirmed by one spigot run of the given sizing.

    May hold fewer than ``n`` digits when the run ends with unresolved
    nines or is sized too small; only confirmed digits are returned.
    """
    n = _check_count(n)
    if n == 0:
        return []
    confirmed = list(iter_confirmed(n, length=length, steps=steps))
    return confirmed[1 : n + 1]


def iter_digits(n: int) -> Iterator[int]:
    """Yield the first ``n`` fractional digits of pi as soon as they are confirmed.

    A run sized for exactly ``n`` digits can confirm a wrong last digit, so
    every run here is sized for ``_GUARD_DIGITS`` more digits than it yields.
    A run still falls short when pi has a run of nines just past the digits
    it can resolve; it is then repeated with more room, and the repeat must
    agree with every digit already yielded.
    """
    n = _check_count(n)
    yielded = []
    target = n + _GUARD_DIGITS
    while len(yielded) < n:
        confirmed = iter_confirmed(target)
        next(confirmed, None)
        for index, d in enumerate(confirmed):
            if index >= n:
                break
            if index < len(yielded):
                if yielded[index] != d:
                    raise RuntimeError(f"digit {index} changed when the run was widened to {target} digits")
                continue
            yielded.append(d)
            yield d
        confirmed.close()
        if len(yielded) < n:
            widened = target + max(_GUARD_DIGITS, target - n)
            logger.warning(
                "state sized for %d digits confirmed only %d of %d; retrying with room for %d",
                target,
                len(yielded),
                n,
                widened,
            )
            target = widened


def generate(n: int) -> List[int]:
    """Return the first ``n`` fractional digits of pi, truncated.

    ``generate(0)`` is empty; a negative or non-integral ``n`` raises ValueError.
    """
    n = _check_count(n)
    logger.debug("generating %d digits, state length %d", n, state_length(n + _GUARD_DIGITS))
    return list(iter_digits(n))
