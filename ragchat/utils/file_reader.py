"""File reading utilities for the knowledge base."""

from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

import aiofiles


@dataclass
class SourceDocument:
    """A raw document as found on disk."""

    filename: str
    raw_bytes: bytes

    @property
    def document_type(self) -> str:
        """File extension without the leading dot (e.g. ``txt``)."""
        return Path(self.filename).suffix.lstrip(".").lower()


def find_source_files(directory: Union[str, Path], pattern: str = "**/*.txt") -> List[Path]:
    """
    List files under a directory matching a glob pattern.

    Args:
        directory: Knowledge base root
        pattern: Glob relative to the root (recursive with ``**``)

    Returns:
        Matching regular files sorted by path, empty if the root is missing
    """
    root = Path(directory)

    if not root.is_dir():
        return []

    return sorted(p for p in root.glob(pattern) if p.is_file())


async def read_source_document(path: Union[str, Path]) -> SourceDocument:
    """
    Read one file's bytes.

    Args:
        path: File path

    Returns:
        SourceDocument named after the file's base name, as the ledger stores it

    Raises:
        OSError: If the file cannot be read
    """
    path = Path(path)
    async with aiofiles.open(path, mode='rb') as f:
        raw = await f.read()
    return SourceDocument(filename=path.name, raw_bytes=raw)


async def read_source_documents(
    directory: Union[str, Path],
    pattern: str = "**/*.txt"
) -> List[SourceDocument]:
    """
    Read every matching file's bytes.

    Args:
        directory: Knowledge base root
        pattern: Glob relative to the root

    Returns:
        SourceDocument per file
    """
    return [await read_source_document(path) for path in find_source_files(directory, pattern)]
