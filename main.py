# main.py
"""
HTTP service for quantum-sourced integers in any range.

Start:
    uvicorn main:app --port 8000
    qrng-range-server            # same, host/port from QRNG_HOST / QRNG_PORT
"""
import logging
import os

import uvicorn
from fastapi import FastAPI
from settings import settings

from api.range import router as range_router
from api.stream import router as stream_router
from api.history import router as history_router

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    datefmt="%H:%M:%S",
)

app = FastAPI(title="QRNG Range (quantum entropy, any range)")

@app.get("/health")
def health():
    return {"ok": True}


app.include_router(range_router)    # /range/quantum, /range/params
app.include_router(stream_router)   # /range/{request_id}/stream
app.include_router(history_router)  # /history


def run():
    uvicorn.run(app, host=os.getenv("QRNG_HOST", "127.0.0.1"), port=int(os.getenv("QRNG_PORT", "8000")))


if __name__ == "__main__":
    run()
