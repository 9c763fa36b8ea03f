"""Repositories: generic CRUD with lifecycle hooks and the searchable variant."""

from searchsync.infrastructure.persistence.repositories.base import (
    BaseRepository,
    RepositoryHooks,
)
from searchsync.infrastructure.persistence.repositories.searchable_repo import (
    SearchableRepository,
)

__all__ = ["BaseRepository", "RepositoryHooks", "SearchableRepository"]
