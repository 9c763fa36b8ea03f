"""Infrastructure: Elasticsearch adapter and SQLAlchemy persistence."""
