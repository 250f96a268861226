"""Document submission through a shared rate gate.

This package provides the submitter interface, the HTTP-backed and
simulated submitters, and the payload codecs they use.
"""

from docgate.submit.base import BaseSubmitter
from docgate.submit.codec import BaseCodec, JSONCodec
from docgate.submit.submitter import DocumentSubmitter, FakeDocumentSubmitter

__all__ = [
    "BaseSubmitter",
    "BaseCodec",
    "JSONCodec",
    "DocumentSubmitter",
    "FakeDocumentSubmitter",
]
