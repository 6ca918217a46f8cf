"""Streaming chat API routes - V1."""

from typing import AsyncIterator, List

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse

from .chats import get_chat_service
from ..sse import SSE_HEADERS, create_sse_event
from ...errors import RagChatError
from ...services import ChatService, TokenChannel
from ...utils.logger import get_app_logger

router = APIRouter(prefix="/api/v1/chat-stream", tags=["Streaming"])

logger = get_app_logger()


async def _event_stream(chat_id: int, channel: TokenChannel) -> AsyncIterator[str]:
    """Relay channel tokens as SSE events, ending with one complete or error event."""
    parts: List[str] = []
    try:
        async for token in channel:
            parts.append(token)
            yield create_sse_event("token", {"content": token})
        yield create_sse_event("complete", {"content": "".join(parts)})
    except RagChatError as e:
        yield create_sse_event("error", {"error": e.message})
    finally:
        if not channel.done:
            # Client went away mid-stream
            logger.info(f"Stream consumer for chat {chat_id} disconnected")
            await channel.cancel()


@router.get("/{chat_id}")
async def stream_chat(
    chat_id: int,
    user_prompt: str = Query(..., min_length=1, description="User prompt"),
    service: ChatService = Depends(get_chat_service)
):
    """Send a prompt and stream the reply as Server-Sent Events."""
    channel = await service.interact_streaming(chat_id, user_prompt)

    return StreamingResponse(
        _event_stream(chat_id, channel),
        media_type="text/event-stream",
        headers=SSE_HEADERS
    )
