"""Chat database model."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from .chat_entry import ChatEntryDO


@dataclass
class ChatDO:
    """Chat data object - maps to chats table."""

    id: Optional[int]
    title: Optional[str]
    created_at: datetime = field(default_factory=datetime.utcnow)
    history: List[ChatEntryDO] = field(default_factory=list)
