"""Tests for LoadedDocumentRepository."""

import pytest

from ragchat.db.repositories.loaded_document import LoadedDocumentRepository
from ragchat.db.database_models.loaded_document import LoadedDocumentDO
from ragchat.errors import StorageFailureError


@pytest.fixture
def repo(db_conn):
    """Provide a LoadedDocumentRepository."""
    return LoadedDocumentRepository(db_conn.conn)


def _make_doc(**overrides):
    """Factory for LoadedDocumentDO with sensible defaults."""
    defaults = dict(id=None, filename="faq.txt", content_hash="abc123", document_type="txt", chunk_count=3)
    defaults.update(overrides)
    return LoadedDocumentDO(**defaults)


class TestLoadedDocumentRepository:
    """Tests for LoadedDocumentRepository."""

    class TestCreate:
        """SUT: LoadedDocumentRepository.create"""

        def test_assigns_id(self, repo):
            doc = repo.create(_make_doc())
            assert doc.id is not None
            assert repo.count() == 1

        def test_duplicate_version_rejected(self, repo):
            """The same (filename, content_hash) pair may only be recorded once."""
            repo.create(_make_doc())
            with pytest.raises(StorageFailureError):
                repo.create(_make_doc())

        def test_new_version_allowed(self, repo):
            """A changed hash for the same file is a new ledger entry."""
            repo.create(_make_doc())
            repo.create(_make_doc(content_hash="def456"))
            assert repo.count() == 2

    class TestExists:
        """SUT: LoadedDocumentRepository.exists_by_filename_and_content_hash"""

        def test_match(self, repo):
            repo.create(_make_doc())
            assert repo.exists_by_filename_and_content_hash("faq.txt", "abc123") is True

        def test_no_match(self, repo):
            repo.create(_make_doc())
            assert repo.exists_by_filename_and_content_hash("faq.txt", "other") is False
            assert repo.exists_by_filename_and_content_hash("other.txt", "abc123") is False

    class TestListAll:
        """SUT: LoadedDocumentRepository.list_all"""

        def test_fields(self, repo):
            repo.create(_make_doc(chunk_count=7))
            [doc] = repo.list_all()
            assert doc.filename == "faq.txt"
            assert doc.document_type == "txt"
            assert doc.chunk_count == 7
            assert doc.loaded_at is not None
