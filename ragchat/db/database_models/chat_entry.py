"""Chat entry database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from ...models.role import Role, ChatMessage


@dataclass
class ChatEntryDO:
    """Chat entry data object - maps to chat_entries table."""

    id: Optional[int]
    chat_id: int
    content: str
    role: Role
    created_at: datetime = field(default_factory=datetime.utcnow)

    @classmethod
    def from_message(cls, chat_id: int, message: ChatMessage) -> "ChatEntryDO":
        """
        Build an unsaved entry from a model-client message.

        Raises:
            InvalidRoleError: If the message role is not user/assistant/system
        """
        return cls(
            id=None,
            chat_id=chat_id,
            content=message.content,
            role=Role.from_value(message.role)
        )

    def to_message(self) -> ChatMessage:
        return ChatMessage(role=self.role.value, content=self.content)
