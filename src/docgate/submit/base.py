"""Abstract base class for document submitters."""

from abc import ABC, abstractmethod
from typing import Any

from docgate.exceptions import PreconditionError
from docgate.gate.rate_gate import RateGate
from docgate.gate.semaphore import CancelToken
from docgate.schemas.documents import Document, DocumentCreationResponse


class BaseSubmitter(ABC):
    """Abstract base class for creating documents through a shared rate gate.

    Every submitter runs its unit of work through the injected RateGate,
    so all submitters sharing a gate share a single rate ceiling.

    Attributes:
        gate: Rate gate every submission passes through.
    """

    def __init__(self, gate: RateGate):
        if gate is None:
            raise PreconditionError("gate is required")
        self.gate = gate

    @abstractmethod
    def create(
        self,
        document: Document,
        signature: str,
        cancel: CancelToken | None = None,
    ) -> DocumentCreationResponse:
        """Create a document, blocking until the gate admits the request.

        Args:
            document: Payload to submit.
            signature: Detached signature of the payload.
            cancel: Optional token to abandon the wait for a permit.

        Returns:
            Decoded endpoint response.

        Raises:
            PreconditionError: If document or signature is missing.
            SubmissionError: If any stage of the submission fails.
            GateCancelledError: If the wait for a permit was cancelled.
        """
        pass

    @staticmethod
    def _check_arguments(document: Document, signature: str) -> None:
        if document is None:
            raise PreconditionError("document is required")
        if signature is None:
            raise PreconditionError("signature is required")

    def close(self) -> None:
        """Release resources owned by the submitter."""
        pass

    def __enter__(self) -> "BaseSubmitter":
        return self

    def __exit__(self, *_: Any) -> None:
        self.close()
