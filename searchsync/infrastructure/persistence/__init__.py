"""Persistence: async engine/session, declarative Base, mixins, repositories."""

from searchsync.infrastructure.persistence.database import (
    Base,
    get_db,
    get_db_transactional,
)

__all__ = ["Base", "get_db", "get_db_transactional"]
