"""Chat entry repository for database operations."""

from typing import Optional, List
from .base import BaseRepository
from ..database_models.chat_entry import ChatEntryDO
from ...models.role import Role


class ChatEntryRepository(BaseRepository):
    """Repository for ChatEntry operations. Entries are append-only."""

    def add(self, entry: ChatEntryDO) -> ChatEntryDO:
        """
        Append an entry to its chat.

        Args:
            entry: Unsaved ChatEntryDO

        Returns:
            The same entry with its id assigned
        """
        row = self._execute(
            f"add entry to chat {entry.chat_id}",
            """
            INSERT INTO chat_entries (id, chat_id, content, role, created_at)
            VALUES (nextval('chat_entries_id_seq'), ?, ?, ?, ?)
            RETURNING id
            """,
            [entry.chat_id, entry.content, entry.role.value, entry.created_at]
        ).fetchone()

        entry.id = row[0]
        self.logger.debug(f"Added {entry.role.value} entry {entry.id} to chat {entry.chat_id}")
        return entry

    def list_by_chat(self, chat_id: int, limit: Optional[int] = None) -> List[ChatEntryDO]:
        """
        Get entries for a chat.

        Args:
            chat_id: Chat ID
            limit: Keep only the first ``limit`` entries of the ordered history

        Returns:
            List of ChatEntryDO instances, oldest first (id breaks timestamp ties)
        """
        sql = """
            SELECT id, chat_id, content, role, created_at
            FROM chat_entries
            WHERE chat_id = ?
            ORDER BY created_at ASC, id ASC
        """
        params = [chat_id]
        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        rows = self._execute(f"list entries of chat {chat_id}", sql, params).fetchall()

        return [
            ChatEntryDO(
                id=row[0],
                chat_id=row[1],
                content=row[2],
                role=Role.from_value(row[3]),
                created_at=row[4]
            )
            for row in rows
        ]

    def count_by_chat(self, chat_id: int) -> int:
        row = self._execute(
            f"count entries of chat {chat_id}",
            "SELECT COUNT(*) FROM chat_entries WHERE chat_id = ?",
            [chat_id]
        ).fetchone()
        return row[0]

    def delete_by_chat(self, chat_id: int) -> int:
        """
        Delete all entries for a chat.

        Args:
            chat_id: Chat ID

        Returns:
            Number of entries removed
        """
        count = self.count_by_chat(chat_id)
        self._execute(
            f"delete entries of chat {chat_id}",
            "DELETE FROM chat_entries WHERE chat_id = ?",
            [chat_id]
        )
        return count
