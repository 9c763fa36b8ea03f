"""searchsync: keeps an Elasticsearch index in step with SQLAlchemy records.

Layers: core (settings), domain (errors), application (mapper, sync, bulk,
query builders, result sets), infrastructure (Elasticsearch adapter, ORM
persistence with lifecycle hooks), shared (telemetry, naming helpers).
"""

__version__ = "0.1.0"
