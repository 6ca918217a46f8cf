"""Chat roles and the message shape exchanged with model clients."""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from ..errors import InvalidRoleError


class Role(str, Enum):
    """Participant of a chat turn; the value is what the store and model see."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"

    @classmethod
    def from_value(cls, value: Union[str, "Role"]) -> "Role":
        """
        Map a role name to a Role.

        Args:
            value: Role name such as ``"user"`` (or a Role)

        Returns:
            Matching Role

        Raises:
            InvalidRoleError: If the name is not user, assistant or system
        """
        if isinstance(value, Role):
            return value
        for role in cls:
            if role.value == value:
                return role
        raise InvalidRoleError(f"Unknown message role: {value!r}")


@dataclass
class ChatMessage:
    """One message as a model client expects it."""

    role: str
    content: str

    def to_dict(self) -> Dict[str, str]:
        role = self.role.value if isinstance(self.role, Role) else self.role
        return {"role": role, "content": self.content}
