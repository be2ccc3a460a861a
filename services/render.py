# services/render.py
from typing import Iterable, Iterator, List

from rng.bigint import to_base


def render_value(value: int, base: int = 10) -> str:
    return to_base(value, base)


def render_batch(values: Iterable[int], base: int = 10) -> List[str]:
    return [render_value(v, base) for v in values]


def render_lines(values: Iterable[int], base: int = 10) -> Iterator[str]:
    """One sample per line, as the CLI prints them."""
    for v in values:
        yield render_value(v, base) + "\n"
