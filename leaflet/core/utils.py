"""
Core Utilities.

Shared utility functions used across the package.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-naive datetime.

    All datetime values in the package are timezone-naive and assumed
    to be UTC. This keeps comparisons between domain objects and values
    read back from SQLite consistent.

    Returns:
        Current UTC time with tzinfo stripped
    """
    return datetime.now(timezone.utc).replace(tzinfo=None)
