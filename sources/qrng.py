# sources/qrng.py
import logging
from typing import Any, List, Optional

import httpx

from rng.bigint import from_base
from rng.errors import ConversionError, SourceFailureError
from rng.profile import SourceProfile
from settings import settings

logger = logging.getLogger(__name__)


def _to_int(value: Any, profile: SourceProfile) -> int:
    if profile.kind == "hex16":
        if not isinstance(value, str):
            raise ConversionError(f"hex16 block must be a string, got {value!r}")
        if len(value) != 2 * profile.block_size:
            raise ConversionError(
                f"hex16 block must be {2 * profile.block_size} hex digits, got {len(value)}"
            )
        return from_base(value, 16)
    if isinstance(value, bool):
        raise ConversionError(f"not an integer: {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        return from_base(value, 10)
    raise ConversionError(f"not an integer: {value!r}")


def parse_response(payload: Any, length: int, profile: SourceProfile) -> List[int]:
    """
    Checks the JSON envelope {"success": bool, "data": [...]} and returns the
    raw samples as ints, each guaranteed to lie in [0, profile.abs_max].
    """
    if not isinstance(payload, dict):
        raise SourceFailureError("source reply is not a JSON object")
    if payload.get("success") is not True:
        raise SourceFailureError("source reported success=false")

    data = payload.get("data")
    if not isinstance(data, list) or len(data) != length:
        got = len(data) if isinstance(data, list) else type(data).__name__
        raise SourceFailureError(f"source returned {got} values, expected {length}")

    out: List[int] = []
    for item in data:
        try:
            x = _to_int(item, profile)
        except ConversionError as e:
            raise SourceFailureError(f"malformed sample from source: {e}") from e
        if not 0 <= x <= profile.abs_max:
            raise SourceFailureError(f"sample {x} outside [0, {profile.abs_max}]")
        out.append(x)
    return out


async def _get(cli: httpx.AsyncClient, params: dict) -> Any:
    r = await cli.get(settings.QRNG_API_URL, params=params)
    r.raise_for_status()
    return r.json()


async def fetch_raw(length: int, profile: SourceProfile,
                    client: Optional[httpx.AsyncClient] = None) -> List[int]:
    """One source call for `length` raw samples of `profile`'s fixed range."""
    if not 1 <= length <= profile.per_call_limit:
        raise ValueError(f"length must be in 1..{profile.per_call_limit}, got {length}")
    params = profile.query_params(length)
    logger.debug("qrng GET %s", params)
    try:
        if client is not None:
            payload = await _get(client, params)
        else:
            async with httpx.AsyncClient(timeout=settings.QRNG_TIMEOUT) as cli:
                payload = await _get(cli, params)
    except httpx.HTTPError as e:
        raise SourceFailureError(f"qrng request failed: {e}") from e
    except ValueError as e:
        # r.json() on a non-JSON body
        raise SourceFailureError(f"qrng reply is not JSON: {e}") from e
    return parse_response(payload, length, profile)
