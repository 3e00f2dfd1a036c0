"""
Business services for the tracking log.

- ingest.py: duplicate guard, sequence allocation and append
- enrichment.py: batched registry lookups that decorate events
- query.py: filtered feed and per-trackable history
- stats.py: dashboard counters and stalled trackables
- search.py: type-ahead over trip codes and tracking numbers
- export.py: CSV serialization
- migration.py: programmatic Alembic upgrade
"""

__all__: list[str] = []
