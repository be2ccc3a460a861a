# rng/profile.py
from dataclasses import dataclass
from typing import Literal, Optional

from rng.bigint import hex_digit_count
from rng.errors import InvalidRangeError, RangeTooLargeError
from settings import settings

SourceKind = Literal["uint8", "uint16", "hex16"]

U8_MAX = 255
U16_MAX = 65535


@dataclass(frozen=True)
class SourceProfile:
    """Which fixed range the source is asked for, and its upper bound."""
    kind: SourceKind
    abs_max: int
    block_size: Optional[int] = None      # bytes per hex16 block
    per_call_limit: int = 1024

    def query_params(self, length: int) -> dict:
        params = {"length": length, "type": self.kind}
        if self.kind == "hex16":
            params["size"] = self.block_size
        return params

    def as_dict(self) -> dict:
        return {
            "type": self.kind,
            "size": self.block_size,
            "absMax": str(self.abs_max),
            "perCallLimit": self.per_call_limit,
        }


def select_profile(maximum: int) -> SourceProfile:
    """Smallest fixed source range that still covers `maximum`."""
    if maximum < 0:
        raise InvalidRangeError("maximum must be non-negative")
    limit = settings.QRNG_PER_CALL_LIMIT
    if maximum <= U8_MAX:
        return SourceProfile("uint8", U8_MAX, per_call_limit=limit)
    if maximum <= U16_MAX:
        return SourceProfile("uint16", U16_MAX, per_call_limit=limit)

    block_size = (hex_digit_count(maximum) + 1) // 2
    if block_size > settings.QRNG_MAX_BLOCK_SIZE:
        raise RangeTooLargeError(
            f"maximum needs {block_size}-byte blocks, source allows {settings.QRNG_MAX_BLOCK_SIZE}"
        )
    return SourceProfile("hex16", 16 ** (2 * block_size) - 1, block_size, per_call_limit=limit)
