# api/stream.py
from fastapi import APIRouter
from fastapi.responses import StreamingResponse
from streams import hub

router = APIRouter()

@router.get("/range/{request_id}/stream")
async def stream(request_id: str):
    async def gen():
        async for chunk in hub.subscribe(request_id):
            yield chunk
    headers = {
        "Cache-Control": "no-cache",
        "Connection": "keep-alive",
        "X-Accel-Buffering": "no",
    }
    return StreamingResponse(gen(), media_type="text/event-stream", headers=headers)
