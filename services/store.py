# services/store.py
import os, json, tempfile, time
from typing import Any, Dict, List, Optional

from settings import settings


def _store_dir() -> str:
    return os.environ.get("STORE_DIR", settings.STORE_DIR)

def _ensure_dir():
    os.makedirs(_store_dir(), exist_ok=True)

def _path(request_id: str) -> str:
    return os.path.join(_store_dir(), f"{request_id}.json")

def save_request(record: Dict[str, Any]) -> None:
    """Atomic JSON snapshot of a finished (or failed) range request."""
    _ensure_dir()
    request_id = record["requestId"]
    record.setdefault("createdAt", int(time.time() * 1000))
    tmp_fd, tmp_path = tempfile.mkstemp(dir=_store_dir(), prefix=f".{request_id}.", suffix=".tmp")
    with os.fdopen(tmp_fd, "w", encoding="utf-8") as f:
        json.dump(record, f, ensure_ascii=False, indent=2)
        f.flush()
        os.fsync(f.fileno())
    os.replace(tmp_path, _path(request_id))

def load_request(request_id: str) -> Optional[Dict[str, Any]]:
    p = _path(request_id)
    if not os.path.exists(p):
        return None
    with open(p, "r", encoding="utf-8") as f:
        return json.load(f)

def list_requests(limit: int = 50, offset: int = 0) -> List[Dict[str, Any]]:
    _ensure_dir()
    items: List[Dict[str, Any]] = []
    for name in os.listdir(_store_dir()):
        if not name.endswith(".json") or name.startswith("."):
            continue
        try:
            with open(os.path.join(_store_dir(), name), "r", encoding="utf-8") as f:
                j = json.load(f)
            items.append({
                "requestId": j["requestId"],
                "createdAt": j.get("createdAt"),
                "status": j.get("status"),
                "delivered": j.get("delivered"),
                "source": (j.get("source") or {}).get("type"),
            })
        except Exception:
            continue  # not one of ours, or half-written
    items.sort(key=lambda x: x.get("createdAt") or 0, reverse=True)
    return items[offset:offset+limit]
