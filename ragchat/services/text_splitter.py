"""Fixed-size token text splitter."""

from typing import List, Optional, Protocol, Sequence

import tiktoken

from .vector_store import Document
from ..utils.logger import get_app_logger


class Encoding(Protocol):
    """Anything that maps text to token ids and back (tiktoken encodings do)."""

    def encode(self, text: str) -> List[int]: ...

    def decode(self, tokens: Sequence[int]) -> str: ...


class TokenTextSplitter:
    """Splits text into chunks of at most ``chunk_size`` tokens; the last may be shorter."""

    def __init__(
        self,
        chunk_size: int = 500,
        encoding: Optional[Encoding] = None,
        encoding_name: str = "cl100k_base"
    ):
        if chunk_size < 1:
            raise ValueError("chunk_size must be at least 1")
        self.chunk_size = chunk_size
        self._encoding = encoding
        self.encoding_name = encoding_name
        self.logger = get_app_logger()

    @property
    def encoding(self) -> Encoding:
        # Loaded on first use; tiktoken may download its BPE file
        if self._encoding is None:
            self._encoding = tiktoken.get_encoding(self.encoding_name)
            self.logger.info(f"Loaded tokenizer encoding {self.encoding_name}")
        return self._encoding

    def split_text(self, text: str) -> List[str]:
        """
        Split text into token windows.

        Args:
            text: Source text

        Returns:
            Decoded chunks in order; whitespace-only chunks are dropped
        """
        tokens = self.encoding.encode(text)
        chunks = []
        for start in range(0, len(tokens), self.chunk_size):
            chunk = self.encoding.decode(tokens[start:start + self.chunk_size])
            if chunk.strip():
                chunks.append(chunk)
        return chunks

    def split_documents(self, documents: List[Document]) -> List[Document]:
        """
        Split each document, copying its metadata onto every chunk.

        Args:
            documents: Source documents

        Returns:
            Chunk documents with an added ``chunk_index``
        """
        chunks = []
        for document in documents:
            for index, text in enumerate(self.split_text(document.content)):
                metadata = dict(document.metadata)
                metadata["chunk_index"] = index
                chunks.append(Document(content=text, metadata=metadata))
        return chunks
