"""Data models for documents, responses and gate snapshots."""

from docgate.schemas.documents import (
    Description,
    Document,
    DocumentCreationResponse,
    Product,
)
from docgate.schemas.gate import GateSnapshot

__all__ = [
    "Description",
    "Document",
    "DocumentCreationResponse",
    "Product",
    "GateSnapshot",
]
