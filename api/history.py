# api/history.py
from fastapi import APIRouter
from fastapi.responses import JSONResponse
from services.store import list_requests, load_request

router = APIRouter()

@router.get("/history")
async def history_list(limit: int = 50, offset: int = 0):
    return {"items": list_requests(limit, offset)}

@router.get("/history/{request_id}")
async def history_item(request_id: str):
    rec = load_request(request_id)
    if not rec:
        return JSONResponse(status_code=404, content={"error": "not found"})
    return rec
