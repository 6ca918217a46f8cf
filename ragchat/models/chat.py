"""Chat API models."""

from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field

from .role import Role


class CreateChatRequest(BaseModel):
    """Request model for creating a chat."""

    title: str = Field(description="Chat title", min_length=1, max_length=200)


class CreateEntryRequest(BaseModel):
    """Request model for sending a user prompt."""

    prompt: str = Field(description="User prompt", min_length=1)


class ChatEntryResponse(BaseModel):
    """Response model for a single chat entry."""

    id: int = Field(description="Entry ID")
    chat_id: int = Field(description="Owning chat ID")
    role: Role = Field(description="Entry role (user/assistant/system)")
    content: str = Field(description="Entry text")
    created_at: datetime = Field(description="Creation timestamp")


class ChatResponse(BaseModel):
    """Response model for chat information."""

    id: int = Field(description="Chat ID")
    title: Optional[str] = Field(None, description="Chat title")
    created_at: datetime = Field(description="Creation timestamp")


class ChatDetailResponse(ChatResponse):
    """Chat with its full history, oldest first."""

    history: List[ChatEntryResponse] = Field(default_factory=list, description="Chat entries")


class ChatListResponse(BaseModel):
    """Response model for listing chats."""

    chats: List[ChatResponse] = Field(description="Chats, newest first")
    total: int = Field(description="Total number of chats")


class InteractionResponse(BaseModel):
    """Both turns produced by one synchronous interaction."""

    chat_id: int = Field(description="Chat ID")
    user_entry: ChatEntryResponse = Field(description="Persisted user turn")
    assistant_entry: ChatEntryResponse = Field(description="Persisted model reply")
