"""Utilities package."""

from .logger import get_app_logger, setup_logger, init_app_logger
from .file_reader import SourceDocument, find_source_files, read_source_document, read_source_documents

__all__ = [
    "get_app_logger",
    "setup_logger",
    "init_app_logger",
    "SourceDocument",
    "find_source_files",
    "read_source_document",
    "read_source_documents",
]
