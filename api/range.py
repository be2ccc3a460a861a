# api/range.py
from time import time

from fastapi import APIRouter, Body
from fastapi.responses import JSONResponse
from rng.bigint import parse_literal
from rng.errors import ConversionError, InvalidRangeError, RangeTooLargeError, SourceFailureError
from models import RangeIn, RangeOut, SourceOut
from settings import settings
from services.render import render_batch
from services.scheduler import RequestState, deliver, plan_range
from services.store import save_request
from sources.qrng import fetch_raw

router = APIRouter()


def _plan(minimum: str, maximum: str):
    return plan_range(parse_literal(minimum), parse_literal(maximum))


@router.get("/range/params")
async def range_params(maximum: str, minimum: str = "0"):
    try:
        plan = _plan(minimum, maximum)
    except (ConversionError, InvalidRangeError, RangeTooLargeError) as e:
        return JSONResponse(status_code=400, content={"error": str(e)})
    return {"source": plan.profile.as_dict(), "params": plan.params.as_dict()}


@router.post("/range/quantum", response_model=RangeOut)
async def range_quantum(body: RangeIn = Body(...)):
    if body.amount > settings.API_MAX_AMOUNT:
        return JSONResponse(status_code=400,
                            content={"error": f"amount must be <= {settings.API_MAX_AMOUNT}"})
    try:
        plan = _plan(body.minimum, body.maximum)
    except (ConversionError, InvalidRangeError, RangeTooLargeError) as e:
        return JSONResponse(status_code=400, content={"error": str(e)})

    request_id = body.request_id or f"req-{int(time()*1000)}"
    state = RequestState(remaining=body.amount)
    values: list[str] = []
    record = {
        "requestId": request_id,
        "minimum": str(plan.minimum),
        "maximum": str(plan.maximum),
        "amount": str(body.amount),
        "base": body.base,
        "source": plan.profile.as_dict(),
        "params": plan.params.as_dict(),
    }

    try:
        async for batch in deliver(plan, body.amount, fetch_raw, state=state, request_id=request_id):
            values.extend(render_batch(batch, body.base))
    except SourceFailureError as e:
        record.update(status="failed", delivered=str(state.delivered), remaining=str(e.remaining),
                      calls=state.calls, rejected=state.rejected, error=str(e),
                      transcriptHex=state.transcript_hex)
        save_request(record)
        return JSONResponse(status_code=502, content={
            "error": str(e),
            "requestId": request_id,
            "remaining": str(e.remaining),
            "values": values,
        })

    record.update(status="done", delivered=str(state.delivered), remaining="0",
                  calls=state.calls, rejected=state.rejected,
                  transcriptHex=state.transcript_hex)
    save_request(record)

    return RangeOut(
        request_id=request_id,
        base=body.base,
        values=values,
        delivered=str(state.delivered),
        rejected=state.rejected,
        calls=state.calls,
        source=SourceOut(**plan.profile.as_dict()),
        transcript_hex=state.transcript_hex,
    )
