"""Document submitters: HTTP-backed and simulated."""

from __future__ import annotations

import re
import time

import requests

from docgate.config.profile import SubmitterConfig
from docgate.exceptions import PreconditionError, TransportError, UrlError
from docgate.gate.rate_gate import RateGate
from docgate.gate.semaphore import CancelToken
from docgate.logger import get_logger, mask_sensitive
from docgate.schemas.documents import Document, DocumentCreationResponse
from docgate.submit.base import BaseSubmitter
from docgate.submit.codec import BaseCodec, JSONCodec

logger = get_logger(__name__)

# Characters that must be percent-encoded before they can appear in a query
_ILLEGAL_QUERY_CHARS = re.compile(r'[\s"#<>\\^`{|}]')


class DocumentSubmitter(BaseSubmitter):
    """Create documents by POSTing them to the creation endpoint.

    The payload is serialized and the request is prepared on the caller's
    thread before the gate is entered, so malformed input never consumes
    a permit. Only the network round trip and response decoding run under
    the permit.

    The signature is appended verbatim as the `sign` query parameter;
    callers are responsible for URL-encoding it.

    Attributes:
        gate: Rate gate every request passes through.
        session: HTTP session used to send requests.
        codec: Serializer for payloads and responses.
        endpoint_url: Document-creation endpoint.
        timeout: Per-request timeout in seconds (None waits forever).

    Example:
        ```python
        gate = RateGate(limit=40, window=1.0)
        with DocumentSubmitter(gate, requests.Session(), JSONCodec(), url) as submitter:
            response = submitter.create(document, signature)
        ```
    """

    def __init__(
        self,
        gate: RateGate,
        session: requests.Session,
        codec: BaseCodec,
        endpoint_url: str,
        timeout: float | None = None,
    ):
        super().__init__(gate)
        if session is None:
            raise PreconditionError("session is required")
        if codec is None:
            raise PreconditionError("codec is required")
        if not endpoint_url:
            raise PreconditionError("endpoint_url is required")

        self.session = session
        self.codec = codec
        self.endpoint_url = endpoint_url
        self.timeout = timeout
        self._owns_session = False

        logger.debug(
            "DocumentSubmitter configured: endpoint=%s, timeout=%s, gate=%r",
            endpoint_url,
            timeout,
            gate,
        )

    @classmethod
    def from_config(
        cls,
        config: SubmitterConfig,
        gate: RateGate,
        session: requests.Session | None = None,
        codec: BaseCodec | None = None,
    ) -> DocumentSubmitter:
        """Build a submitter from configuration.

        A session created here is owned by the submitter and closed by
        close(); an injected session is left to its owner.

        Args:
            config: Submitter configuration.
            gate: Shared rate gate.
            session: Optional HTTP session to use.
            codec: Optional codec; defaults to JSONCodec.

        Returns:
            Configured DocumentSubmitter.
        """
        owns_session = session is None
        submitter = cls(
            gate=gate,
            session=session if session is not None else requests.Session(),
            codec=codec if codec is not None else JSONCodec(),
            endpoint_url=config.endpoint_url,
            timeout=config.timeout,
        )
        submitter._owns_session = owns_session
        return submitter

    def create(
        self,
        document: Document,
        signature: str,
        cancel: CancelToken | None = None,
    ) -> DocumentCreationResponse:
        self._check_arguments(document, signature)

        body = self.codec.encode(document)
        request = self._prepare_request(body, signature)

        logger.debug(
            "Document queued: doc_id=%s, sign=%s", document.doc_id, mask_sensitive(signature)
        )
        response = self.gate.submit(lambda: self._send(request), cancel=cancel)
        logger.info("Document created: doc_id=%s", document.doc_id)
        return response

    def _prepare_request(self, body: str, signature: str) -> requests.PreparedRequest:
        url = f"{self.endpoint_url}?sign={signature}"
        masked_url = f"{self.endpoint_url}?sign={mask_sensitive(signature)}"

        if _ILLEGAL_QUERY_CHARS.search(signature):
            raise UrlError(
                "Signature contains characters that are not allowed in a URL",
                url=masked_url,
            )

        request = requests.Request(
            "POST",
            url,
            data=body.encode("utf-8"),
            headers={"Content-Type": self.codec.content_type},
        )
        try:
            return self.session.prepare_request(request)
        except (
            requests.exceptions.InvalidURL,
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
        ) as e:
            raise UrlError("Invalid request URL", url=masked_url, cause=e) from e

    def _send(self, request: requests.PreparedRequest) -> DocumentCreationResponse:
        try:
            response = self.session.send(request, timeout=self.timeout)
        except requests.RequestException as e:
            raise TransportError("HTTP request failed", cause=e) from e

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            raise TransportError(
                f"Endpoint rejected the document: HTTP {response.status_code}",
                status_code=response.status_code,
                cause=e,
            ) from e

        return self.codec.decode(response.content, DocumentCreationResponse)

    def close(self) -> None:
        if self._owns_session:
            self.session.close()

    def __repr__(self) -> str:
        return f"DocumentSubmitter(endpoint_url={self.endpoint_url!r}, gate={self.gate!r})"


class FakeDocumentSubmitter(BaseSubmitter):
    """Submitter that simulates the endpoint without any network traffic.

    Each call holds its permit for `delay` seconds and returns an empty
    response. Used to exercise a gate under load.

    Args:
        gate: Rate gate every call passes through.
        delay: Seconds each simulated request takes.
    """

    def __init__(self, gate: RateGate, delay: float = 2.0):
        super().__init__(gate)
        if delay < 0:
            raise PreconditionError("delay must be >= 0")
        self.delay = delay

    def create(
        self,
        document: Document,
        signature: str,
        cancel: CancelToken | None = None,
    ) -> DocumentCreationResponse:
        self._check_arguments(document, signature)
        return self.gate.submit(self._simulate, cancel=cancel)

    def _simulate(self) -> DocumentCreationResponse:
        if self.delay > 0:
            time.sleep(self.delay)
        return DocumentCreationResponse()

    def __repr__(self) -> str:
        return f"FakeDocumentSubmitter(delay={self.delay}, gate={self.gate!r})"
