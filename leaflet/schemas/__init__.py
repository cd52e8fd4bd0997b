# Pydantic schemas package
from leaflet.schemas.note import Note

__all__ = [
    "Note",
]
