# src/storage/repository_factory.py — v1
"""Factory: instantiate the submission repository from configuration."""

from __future__ import annotations

from reqintake.config.settings import Settings
from reqintake.storage.base_repository import SubmissionRepository


def create_repository(settings: Settings) -> SubmissionRepository:
    """Create the repository for ``settings.database_path``.

    ``:memory:`` selects the in-process dict store.
    """
    if str(settings.database_path) == ":memory:":
        from reqintake.storage.memory_repository import InMemorySubmissionRepository
        return InMemorySubmissionRepository()

    from reqintake.storage.sqlite_repository import SqliteSubmissionRepository
    return SqliteSubmissionRepository(settings.database_path)
