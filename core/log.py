# core/log.py
import json
from datetime import datetime, timezone
from typing import Any


def now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def json_log(level: str, **fields: Any) -> None:
    print(json.dumps({"ts": now_iso(), "level": level, **fields}, default=str), flush=True)


def summarize_exc(e: Exception) -> str:
    cls = e.__class__.__name__
    code = getattr(e, "code", None) or getattr(e, "status_code", None)
    status = getattr(e, "status", None)
    return f"{cls} code={code} status={status} msg={str(e)}".strip()
