"""docgate - Rate-gated client for a document-creation HTTP endpoint.

This package provides a thread-safe rate gate that admits at most N tasks
per time window, and document submitters that serialize, POST and decode
document creation requests through that gate.
"""

__version__ = "0.1.0"

from docgate.exceptions import (
    ConfigError,
    DecodingError,
    DocGateError,
    EncodingError,
    GateCancelledError,
    PreconditionError,
    SubmissionError,
    TransportError,
    UrlError,
)
from docgate.gate import CancelToken, RateGate
from docgate.schemas import Document, DocumentCreationResponse
from docgate.submit import DocumentSubmitter, FakeDocumentSubmitter, JSONCodec

__all__ = [
    "__version__",
    "DocGateError",
    "ConfigError",
    "PreconditionError",
    "GateCancelledError",
    "SubmissionError",
    "EncodingError",
    "UrlError",
    "TransportError",
    "DecodingError",
    "RateGate",
    "CancelToken",
    "Document",
    "DocumentCreationResponse",
    "DocumentSubmitter",
    "FakeDocumentSubmitter",
    "JSONCodec",
]
