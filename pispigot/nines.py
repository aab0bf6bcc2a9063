from dataclasses import dataclass
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class PendingDigits:
    """Digits held back until a later candidate proves them final.

    ``predigit`` is None until the first candidate arrives. After that it is
    the last digit that a carry could still bump, followed by ``nines``
    deferred 9 candidates.
    """

    predigit: Optional[int] = None
    nines: int = 0

    @property
    def empty(self) -> bool:
        return self.predigit is None


def advance(state: PendingDigits, q: int) -> Tuple[PendingDigits, List[int]]:
    """Feed one candidate digit (0..10) and return the new state plus the digits it confirms."""
    q = int(q)
    if q < 0 or q > 10:
        raise ValueError("candidate digit must be in [0, 10]")
    if state.empty:
        # the first candidate has nothing to flush, so even a 9 is held directly
        return PendingDigits(0 if q == 10 else q), []
    if q == 9:
        return PendingDigits(state.predigit, state.nines + 1), []
    if q == 10:
        return PendingDigits(0), [state.predigit + 1] + [0] * state.nines
    return PendingDigits(q), [state.predigit] + [9] * state.nines
