"""
Core package for the transport tracking log.

Event ingestion, enrichment, queries, storage and registry clients live here.
Lambda handlers in src/handlers/ are thin wrappers that call into tracklog/.
"""

__all__: list[str] = []
