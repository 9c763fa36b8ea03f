"""Application interfaces (ports): search client and document mapper protocols.

Define contracts for infrastructure implementations.
No runtime imports from searchsync.infrastructure.
"""

from searchsync.application.interfaces.document_mapper import IDocumentMapper
from searchsync.application.interfaces.search_client import ISearchClient

__all__ = ["IDocumentMapper", "ISearchClient"]
