"""Chat REST API routes - V1."""

from fastapi import APIRouter, HTTPException, Depends

from ...models.chat import (
    ChatResponse,
    ChatDetailResponse,
    ChatListResponse,
    ChatEntryResponse,
    CreateChatRequest,
    CreateEntryRequest,
    InteractionResponse,
)
from ...db.database_models import ChatDO, ChatEntryDO
from ...services import ChatService

router = APIRouter(prefix="/api/v1/chats", tags=["Chats"])

# Chat service (set by main.py)
chat_service: ChatService = None


def get_chat_service() -> ChatService:
    """Dependency to get the chat service."""
    if chat_service is None:
        raise HTTPException(status_code=500, detail="Chat service not initialized")
    return chat_service


def _to_entry_response(entry: ChatEntryDO) -> ChatEntryResponse:
    return ChatEntryResponse(
        id=entry.id,
        chat_id=entry.chat_id,
        role=entry.role,
        content=entry.content,
        created_at=entry.created_at
    )


def _to_response(chat: ChatDO) -> ChatResponse:
    """Convert ChatDO to ChatResponse."""
    return ChatResponse(id=chat.id, title=chat.title, created_at=chat.created_at)


@router.get("", response_model=ChatListResponse)
async def list_chats(service: ChatService = Depends(get_chat_service)):
    """List all chats, newest first."""
    chats = service.get_all_chats()

    return ChatListResponse(
        chats=[_to_response(c) for c in chats],
        total=len(chats)
    )


@router.post("", response_model=ChatResponse, status_code=201)
async def create_chat(
    request: CreateChatRequest,
    service: ChatService = Depends(get_chat_service)
):
    """Create a new chat."""
    return _to_response(service.create_new_chat(request.title))


@router.get("/{chat_id}", response_model=ChatDetailResponse)
async def get_chat(chat_id: int, service: ChatService = Depends(get_chat_service)):
    """Get a chat with its history."""
    chat = service.get_chat(chat_id)

    return ChatDetailResponse(
        id=chat.id,
        title=chat.title,
        created_at=chat.created_at,
        history=[_to_entry_response(e) for e in chat.history]
    )


@router.delete("/{chat_id}", response_model=dict)
async def delete_chat(chat_id: int, service: ChatService = Depends(get_chat_service)):
    """Delete a chat and its entries."""
    await service.delete_chat(chat_id)

    return {
        "status": "deleted",
        "message": f"Chat {chat_id} deleted successfully"
    }


@router.post("/{chat_id}/entries", response_model=InteractionResponse, status_code=201)
async def create_entry(
    chat_id: int,
    request: CreateEntryRequest,
    service: ChatService = Depends(get_chat_service)
):
    """Send a prompt and wait for the model's reply."""
    user_entry, assistant_entry = await service.interact(chat_id, request.prompt)

    return InteractionResponse(
        chat_id=chat_id,
        user_entry=_to_entry_response(user_entry),
        assistant_entry=_to_entry_response(assistant_entry)
    )
