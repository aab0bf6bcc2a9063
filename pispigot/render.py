import time
from typing import Iterable, Iterator, Tuple

from .engine import generate, iter_digits


INTEGER_PREFIX = "3."


def digits_to_string(digits: Iterable[int]) -> str:
    return "".join(str(d) for d in digits)


def render_pi(n: int) -> str:
    return INTEGER_PREFIX + digits_to_string(generate(n))


def iter_fractional_chunks(n: int, chunk_size: int) -> Iterator[str]:
    chunk_size = int(chunk_size)
    if chunk_size < 1:
        raise ValueError("chunk_size must be >= 1")
    buf = []
    for d in iter_digits(n):
        buf.append(str(d))
        if len(buf) >= chunk_size:
            yield "".join(buf)
            buf = []
    if buf:
        yield "".join(buf)


def iter_display_chunks(n: int, chunk_size: int, label_prefix: str = "") -> Iterator[str]:
    chunks = iter_fractional_chunks(n, chunk_size)
    yield label_prefix + INTEGER_PREFIX
    for chunk in chunks:
        yield chunk


def timed_render(n: int) -> Tuple[str, float]:
    """Render ``n`` digits and return the text with the wall-clock time in milliseconds."""
    t0 = time.perf_counter()
    s = render_pi(n)
    t1 = time.perf_counter()
    return s, (t1 - t0) * 1000.0
