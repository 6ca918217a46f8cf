"""Server-Sent Events helpers."""

import json
from typing import Any


SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def create_sse_event(event_type: str, data: Any) -> str:
    """
    Format one SSE event.

    Args:
        event_type: Event name
        data: JSON-serializable payload

    Returns:
        Event text terminated by a blank line
    """
    return f"event: {event_type}\ndata: {json.dumps(data, ensure_ascii=False)}\n\n"
