"""
Leaflet Notes.

- core/: Configuration, logging, exceptions, database and dependency wiring
- models/: SQLAlchemy tables backing the record store
- schemas/: Pydantic domain models (Note)
- stores/: Record store (durable note storage and queries)
- caching/: In-memory note cache
- remote/: Remote data source boundary (inert in this version)
- repositories/: Notes repository (read-through cache and fallback policy)
- services/: List filtering helpers used by callers
"""

__version__ = "0.1.0"
