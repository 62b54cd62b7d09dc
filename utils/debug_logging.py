"""
Lightweight structured trace of generation runs.

Enabled when DEBUG_LOG_PATH env var is set. Intended for diagnosing slow or
failing generations without raising the log level of the whole application.
"""

from __future__ import annotations

import json
import os
import time
from typing import Any


def debug_log(
    event: str,
    location: str,
    data: dict[str, Any] | None = None,
    *,
    run_id: str = "run1",
) -> None:
    """
    Append a JSONL trace entry to DEBUG_LOG_PATH if configured.
    """
    path = os.getenv("DEBUG_LOG_PATH")
    if not path:
        return

    payload = {
        "runId": run_id,
        "event": event,
        "timestamp": int(time.time() * 1000),
        "location": location,
        "data": data or {},
    }

    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(json.dumps(payload, default=str) + "\n")
    except OSError:
        # Tracing must never affect generation
        return
