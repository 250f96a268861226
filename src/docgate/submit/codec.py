"""Payload encoding and response decoding for document submission."""

from abc import ABC, abstractmethod
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from docgate.exceptions import DecodingError, EncodingError

ResponseT = TypeVar("ResponseT", bound=BaseModel)


class BaseCodec(ABC):
    """Abstract serializer between documents and the endpoint's wire format.

    Implementations must be thread-safe: a single codec instance is shared
    by every caller of a submitter.
    """

    content_type: str = "application/json"

    @abstractmethod
    def encode(self, document: BaseModel) -> str:
        """Serialize a document into a request body.

        Args:
            document: Payload to serialize.

        Returns:
            Request body text.

        Raises:
            EncodingError: If the document cannot be serialized.
        """
        pass

    @abstractmethod
    def decode(self, body: str | bytes, response_type: type[ResponseT]) -> ResponseT:
        """Parse a response body into a response record.

        Args:
            body: Raw response body.
            response_type: Model class to decode into.

        Returns:
            Decoded response record.

        Raises:
            DecodingError: If the body is not a valid encoding of response_type.
        """
        pass


class JSONCodec(BaseCodec):
    """JSON codec backed by Pydantic serialization.

    Documents are written with their wire aliases (camelCase) and unset
    fields as null, mirroring the endpoint's schema.

    Args:
        exclude_none: Drop null fields from the payload instead of sending them.
    """

    def __init__(self, exclude_none: bool = False):
        self.exclude_none = exclude_none

    def encode(self, document: BaseModel) -> str:
        try:
            return document.model_dump_json(by_alias=True, exclude_none=self.exclude_none)
        except Exception as e:
            raise EncodingError(
                f"Failed to serialize {type(document).__name__}", cause=e
            ) from e

    def decode(self, body: str | bytes, response_type: type[ResponseT]) -> ResponseT:
        try:
            return response_type.model_validate_json(body)
        except ValidationError as e:
            raise DecodingError(
                f"Failed to decode response into {response_type.__name__}", cause=e
            ) from e

    def __repr__(self) -> str:
        return f"JSONCodec(exclude_none={self.exclude_none})"
