"""Application layer: search DTOs, client interface, sync and search services.

Depends only on domain and protocol definitions. Infrastructure implements
the interfaces (Elasticsearch adapter, SQLAlchemy repositories).
"""
