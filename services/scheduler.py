# services/scheduler.py
import logging
from dataclasses import dataclass, field
from typing import Any, AsyncIterator, Awaitable, Callable, Iterator, List, Literal, Optional

from blake3 import blake3

from rng.bigint import display_int
from rng.errors import InvalidRangeError, SourceFailureError
from rng.profile import SourceProfile, select_profile
from rng.remap import MappingParameters, mapping_parameters, remap_batch
from settings import settings
from streams import hub

logger = logging.getLogger(__name__)

Fetch = Callable[[int, SourceProfile], Awaitable[List[int]]]
Phase = Literal["ready", "fetching", "mapping", "emitting", "done", "failed"]


@dataclass(frozen=True)
class RangePlan:
    """Everything derived from (minimum, maximum); built once, shared read-only."""
    minimum: int
    maximum: int
    profile: SourceProfile
    params: MappingParameters


def plan_range(minimum: int, maximum: int) -> RangePlan:
    if minimum < 0 or maximum < 1 or minimum >= maximum:
        raise InvalidRangeError(
            f"need 0 <= minimum < maximum, got [{display_int(minimum)}, {display_int(maximum)}]"
        )
    profile = select_profile(maximum)
    params = mapping_parameters(minimum, maximum, profile.abs_max)
    return RangePlan(minimum, maximum, profile, params)


@dataclass
class RequestState:
    remaining: int
    delivered: int = 0
    rejected: int = 0
    calls: int = 0
    state: Phase = "ready"
    transcript: Any = field(default_factory=blake3, repr=False)

    def record(self, values: List[int]):
        for v in values:
            self.transcript.update(b"%d\n" % v)

    @property
    def transcript_hex(self) -> str:
        return self.transcript.hexdigest()


async def stream_range(plan: RangePlan, amount: int, fetch: Fetch,
                       state: Optional[RequestState] = None,
                       request_id: Optional[str] = None) -> AsyncIterator[List[int]]:
    """
    Yields each source call's accepted samples, in fetch order, until `amount`
    have been delivered. A failed call ends the stream with SourceFailureError
    carrying the undelivered count; what was yielded before stays delivered.
    Rejected samples are not re-requested within the call, the loop simply
    asks again for the shortfall.
    """
    if amount < 0:
        raise InvalidRangeError("amount must be non-negative")
    if state is None:
        state = RequestState(remaining=amount)
    else:
        state.remaining = amount
    limit = plan.profile.per_call_limit

    while state.remaining > 0:
        size = min(state.remaining, limit)
        state.state = "fetching"
        try:
            raw = await fetch(size, plan.profile)
        except SourceFailureError as e:
            state.state = "failed"
            e.remaining = state.remaining
            logger.warning("source failed after %d calls: %s",
                           state.calls, e)
            if request_id:
                await hub.emit(request_id, {"type": "range.error", "requestId": request_id,
                                            "message": str(e), "remaining": str(state.remaining)})
            raise
        state.calls += 1

        state.state = "mapping"
        accepted, rejected = remap_batch(raw, plan.params)
        # never overshoot, whatever the fetch handed back
        accepted = accepted[:state.remaining]
        state.rejected += rejected
        logger.debug("call %d: asked %d, accepted %d, rejected %d",
                     state.calls, size, len(accepted), rejected)

        state.state = "emitting"
        if accepted:
            state.record(accepted)
            yield accepted
        state.delivered += len(accepted)
        state.remaining -= len(accepted)
        if request_id:
            await hub.emit(request_id, {"type": "range.batch", "requestId": request_id,
                                        "accepted": len(accepted), "rejected": rejected,
                                        "remaining": str(state.remaining)})
        state.state = "ready"

    state.state = "done"


def split_amount(amount: int, width: int) -> Iterator[int]:
    """Sub-request sizes, each at most `width`, summing to `amount`."""
    if width < 1:
        raise ValueError("width must be positive")
    while amount > 0:
        part = min(amount, width)
        yield part
        amount -= part


async def deliver(plan: RangePlan, amount: int, fetch: Fetch,
                  width: Optional[int] = None,
                  state: Optional[RequestState] = None,
                  request_id: Optional[str] = None) -> AsyncIterator[List[int]]:
    """
    Full request: chops `amount` into counter-width sub-requests and streams
    each through the same plan. On failure the reported remaining count
    includes every sub-request not yet started.
    """
    if amount < 0:
        raise InvalidRangeError("amount must be non-negative")
    width = width or settings.COUNTER_WIDTH
    if state is None:
        state = RequestState(remaining=amount)
    logger.info("range [%s, %s] x %s via %s (n=%s, r=%s)", display_int(plan.minimum),
                display_int(plan.maximum), display_int(amount), plan.profile.kind,
                display_int(plan.params.n), display_int(plan.params.r))
    if request_id:
        await hub.emit(request_id, {"type": "range.start", "requestId": request_id,
                                    "minimum": str(plan.minimum), "maximum": str(plan.maximum),
                                    "amount": str(amount), "source": plan.profile.as_dict()})

    left = amount
    for part in split_amount(amount, width):
        left -= part
        try:
            async for batch in stream_range(plan, part, fetch, state, request_id):
                yield batch
        except SourceFailureError as e:
            e.remaining = (e.remaining or 0) + left
            state.remaining = e.remaining
            raise
    state.remaining = 0
    state.state = "done"

    logger.info("delivered %s samples in %d calls, %d rejected",
                display_int(state.delivered), state.calls, state.rejected)
    if request_id:
        await hub.emit(request_id, {"type": "range.done", "requestId": request_id,
                                    "delivered": str(state.delivered), "calls": state.calls,
                                    "rejected": state.rejected,
                                    "transcriptHex": state.transcript_hex})
