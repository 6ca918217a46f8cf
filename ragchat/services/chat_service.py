"""Chat service - conversation CRUD and model interactions."""

import asyncio
from typing import Dict, List, Optional, Tuple

import duckdb

from .chat_memory import ChatMemory
from .streaming import TokenChannel
from .vector_store import DuckDBVectorStore
from ..config import DEFAULT_RAG_PROMPT_TEMPLATE
from ..db.connection import DatabaseConnection
from ..db.database_models.chat import ChatDO
from ..db.database_models.chat_entry import ChatEntryDO
from ..db.repositories.chat import ChatRepository
from ..db.repositories.chat_entry import ChatEntryRepository
from ..errors import ModelUnavailableError, NotFoundError, RagChatError
from ..llm.base import BaseChatModel
from ..models.role import ChatMessage, Role
from ..utils.logger import get_app_logger


class ChatService:
    """Owns chats and drives each user turn through the model."""

    def __init__(
        self,
        db: DatabaseConnection,
        chat_model: BaseChatModel,
        memory: ChatMemory,
        vector_store: Optional[DuckDBVectorStore] = None,
        system_prompt: Optional[str] = None,
        rag_enabled: bool = False,
        rag_top_k: int = 4,
        rag_prompt_template: str = DEFAULT_RAG_PROMPT_TEMPLATE
    ):
        """
        Args:
            db: Database connection
            chat_model: Model client
            memory: Replay window over chat history
            vector_store: Source of retrieved context
            system_prompt: Instruction sent ahead of every prompt
            rag_enabled: Augment the user turn with retrieved context
            rag_top_k: Retrieved chunks per prompt
            rag_prompt_template: Template with ``{query}`` and ``{question_answer_context}``
        """
        self.db = db
        self.chat_model = chat_model
        self.memory = memory
        self.vector_store = vector_store
        self.system_prompt = system_prompt
        self.rag_enabled = rag_enabled and vector_store is not None
        self.rag_top_k = rag_top_k
        self.rag_prompt_template = rag_prompt_template
        # One interaction at a time per chat
        self._locks: Dict[int, asyncio.Lock] = {}
        self.logger = get_app_logger()

    # === Chat CRUD ===

    def get_all_chats(self) -> List[ChatDO]:
        """All chats, newest first."""
        return ChatRepository(self.db.conn).list_all()

    def create_new_chat(self, title: Optional[str]) -> ChatDO:
        with self.db.transaction() as cur:
            return ChatRepository(cur).create(title)

    def get_chat(self, chat_id: int) -> ChatDO:
        """
        Get a chat with its full history, oldest entry first.

        Raises:
            NotFoundError: If the chat does not exist
        """
        chat = ChatRepository(self.db.conn).get(chat_id)
        if chat is None:
            raise NotFoundError(f"Chat not found: {chat_id}")
        chat.history = ChatEntryRepository(self.db.conn).list_by_chat(chat_id)
        return chat

    async def delete_chat(self, chat_id: int) -> None:
        """
        Delete a chat and every entry it owns.

        Waits for a turn already running on the chat, so its entries are
        deleted with the chat instead of committed after it.

        Raises:
            NotFoundError: If the chat does not exist
        """
        lock = self._lock_for(chat_id)
        try:
            async with lock:
                with self.db.transaction() as cur:
                    if not ChatRepository(cur).delete(chat_id):
                        raise NotFoundError(f"Chat not found: {chat_id}")
        finally:
            self._discard_lock(chat_id)

    def add_chat_entry(
        self,
        chat_id: int,
        content: str,
        role: Role,
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> ChatEntryDO:
        """
        Append one entry to a chat.

        Raises:
            NotFoundError: If the chat does not exist
        """
        saved = self.memory.add(chat_id, [ChatMessage(role=Role.from_value(role).value, content=content)], conn=conn)
        return saved[0]

    # === Interactions ===

    def _lock_for(self, chat_id: int) -> asyncio.Lock:
        """
        Get the lock serializing turns on a chat.

        Raises:
            NotFoundError: If the chat does not exist (no lock is created)
        """
        if not ChatRepository(self.db.conn).exists(chat_id):
            raise NotFoundError(f"Chat not found: {chat_id}")
        return self._locks.setdefault(chat_id, asyncio.Lock())

    def _discard_lock(self, chat_id: int) -> None:
        """Forget the lock of a chat that is gone, unless a turn still holds it."""
        lock = self._locks.get(chat_id)
        if lock is not None and not lock.locked():
            del self._locks[chat_id]

    async def _augment(self, user_text: str) -> str:
        if not self.rag_enabled:
            return user_text
        documents = await self.vector_store.similarity_search(user_text, top_k=self.rag_top_k)
        context = "\n".join(d.content for d in documents)
        self.logger.debug(f"Retrieved {len(documents)} chunks for prompt augmentation")
        return self.rag_prompt_template.format(query=user_text, question_answer_context=context)

    async def _build_prompt(
        self,
        chat_id: int,
        user_text: str,
        conn: Optional[duckdb.DuckDBPyConnection] = None
    ) -> List[ChatMessage]:
        """System prompt, then the replay window of prior turns, then the user turn."""
        messages: List[ChatMessage] = []
        if self.system_prompt:
            messages.append(ChatMessage(role=Role.SYSTEM.value, content=self.system_prompt))
        messages.extend(self.memory.get(chat_id, conn=conn))
        messages.append(ChatMessage(role=Role.USER.value, content=await self._augment(user_text)))
        return messages

    async def interact(self, chat_id: int, user_text: str) -> Tuple[ChatEntryDO, ChatEntryDO]:
        """
        Run one synchronous turn.

        The user entry, the model call and the assistant entry form one unit of
        work: if the model fails, nothing from this turn is persisted.

        Args:
            chat_id: Chat ID
            user_text: User prompt

        Returns:
            The persisted (user entry, assistant entry)

        Raises:
            NotFoundError: If the chat does not exist
            ModelUnavailableError: If the model call fails
        """
        lock = self._lock_for(chat_id)
        try:
            async with lock:
                with self.db.transaction() as cur:
                    messages = await self._build_prompt(chat_id, user_text, conn=cur)
                    user_entry = self.add_chat_entry(chat_id, user_text, Role.USER, conn=cur)

                    try:
                        answer = await self.chat_model.complete(messages)
                    except RagChatError:
                        raise
                    except Exception as e:
                        self.logger.error(f"Model call failed for chat {chat_id}: {e}")
                        raise ModelUnavailableError(f"Model call failed: {e}") from e

                    assistant_entry = self.add_chat_entry(chat_id, answer, Role.ASSISTANT, conn=cur)
        except NotFoundError:
            # Deleted while this turn waited for the lock
            self._discard_lock(chat_id)
            raise

        self.logger.info(f"Chat {chat_id}: answered prompt with {len(answer)} characters")
        return user_entry, assistant_entry

    async def interact_streaming(self, chat_id: int, user_text: str) -> TokenChannel:
        """
        Start a streamed turn.

        The user entry is committed before streaming begins. The returned
        channel yields reply tokens; the assistant entry is persisted only if
        the stream completes. Cancelling the channel aborts the producer and
        discards the partial reply.

        Args:
            chat_id: Chat ID
            user_text: User prompt

        Returns:
            TokenChannel fed by a producer task

        Raises:
            NotFoundError: If the chat does not exist (no channel is created)
        """
        lock = self._lock_for(chat_id)
        await lock.acquire()
        try:
            messages = await self._build_prompt(chat_id, user_text)
            self.add_chat_entry(chat_id, user_text, Role.USER)
        except NotFoundError:
            lock.release()
            self._discard_lock(chat_id)
            raise
        except BaseException:
            lock.release()
            raise

        channel = TokenChannel()
        task = asyncio.create_task(self._produce(chat_id, messages, channel))
        # Released even if the task is cancelled before it first runs
        task.add_done_callback(lambda _: lock.release())
        channel.bind_producer(task)
        return channel

    async def _produce(
        self,
        chat_id: int,
        messages: List[ChatMessage],
        channel: TokenChannel
    ) -> None:
        answer: List[str] = []
        try:
            async for token in self.chat_model.stream(messages):
                channel.on_token(token)
                answer.append(token)

            self.add_chat_entry(chat_id, "".join(answer), Role.ASSISTANT)
            channel.on_complete()
            self.logger.info(f"Chat {chat_id}: streamed reply of {len(answer)} tokens")
        except asyncio.CancelledError:
            self.logger.warning(f"Chat {chat_id}: stream cancelled, discarding {len(answer)} tokens")
            raise
        except RagChatError as e:
            self.logger.error(f"Chat {chat_id}: stream failed: {e}")
            channel.on_error(e)
        except Exception as e:
            self.logger.error(f"Chat {chat_id}: stream failed: {e}")
            channel.on_error(ModelUnavailableError(f"Model stream failed: {e}"))
