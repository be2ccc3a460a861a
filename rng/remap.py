# rng/remap.py
"""
Unbiased folding of a uniform source range [0, abs_max] onto [minimum, maximum].

[0, abs_max] is cut into runs of exactly n = maximum - minimum + 1 values:
the target range itself, [0, q] below it and [maximum+1, p] above it. Each
run maps onto the target by offset mod n. The two leftovers, (q, minimum) and
(p, abs_max], hold r values together; when r >= n they are glued into one
more full run, otherwise they are dropped. Every surviving value is therefore
uniform over the target if the source is uniform over [0, abs_max].
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple

from rng.bigint import display_int
from rng.errors import InvalidRangeError


@dataclass(frozen=True)
class MappingParameters:
    minimum: int
    maximum: int
    abs_max: int
    n: int
    q: int      # -1 when no full run fits below minimum
    p: int
    r: int

    def as_dict(self) -> dict:
        return {k: str(v) for k, v in self.__dict__.items()}


def mapping_parameters(minimum: int, maximum: int, abs_max: int) -> MappingParameters:
    if not 0 <= minimum < maximum <= abs_max:
        raise InvalidRangeError(
            f"need 0 <= minimum < maximum <= {display_int(abs_max)}, "
            f"got [{display_int(minimum)}, {display_int(maximum)}]"
        )
    n = maximum - minimum + 1
    q = (minimum // n) * n - 1
    p = ((abs_max - maximum) // n) * n + maximum
    r = (minimum - 1 - q) + (abs_max - p)
    return MappingParameters(minimum, maximum, abs_max, n, q, p, r)


def remap(x: int, m: MappingParameters) -> Optional[int]:
    """Map one raw sample; None means the sample is dropped."""
    if m.minimum <= x <= m.maximum:
        return x
    if x <= m.q:
        return m.minimum + x % m.n
    if m.maximum < x <= m.p:
        return m.minimum + (x - m.maximum - 1) % m.n
    if m.r >= m.n:
        low_left = m.minimum - 1 - m.q
        if m.q < x < m.minimum:
            return m.minimum + (x - m.q - 1) % m.n
        if m.p < x <= m.p + m.n - low_left:
            return m.minimum + (x - m.q - 1 - (m.p - m.minimum + 1)) % m.n
    return None


def remap_batch(raw: Iterable[int], m: MappingParameters) -> Tuple[List[int], int]:
    """Accepted values in input order, plus how many were dropped."""
    out: List[int] = []
    rejected = 0
    for x in raw:
        y = remap(x, m)
        if y is None:
            rejected += 1
        else:
            out.append(y)
    return out, rejected


def rejection_bound(m: MappingParameters) -> int:
    """How many distinct raw values in [0, abs_max] remap() drops."""
    return m.r - m.n if m.r >= m.n else m.r
