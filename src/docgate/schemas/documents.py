"""Document creation request and response models.

This module defines the payload posted to the document-creation endpoint
and the record its response body is decoded into. Field names are
snake_case in Python and camelCase on the wire; dates travel as ISO-8601
calendar dates.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_WIRE_CONFIG = ConfigDict(
    strict=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


class Description(BaseModel):
    """Free-form description block of a document.

    Attributes:
        participant_inn: Taxpayer number of the participant filing the document.
    """

    model_config = _WIRE_CONFIG

    participant_inn: str | None = Field(None, description="Participant taxpayer number")


class Product(BaseModel):
    """A single product line of a production-introduction document.

    Attributes:
        certificate_document: Kind of conformity certificate.
        certificate_document_date: Issue date of the certificate.
        certificate_document_number: Certificate number.
        owner_inn: Taxpayer number of the goods owner.
        producer_inn: Taxpayer number of the producer.
        production_date: Production date of the item.
        tnved_code: Customs commodity code.
        uit_code: Unique identification code of the item.
        uitu_code: Unique identification code of the transport package.
    """

    model_config = _WIRE_CONFIG

    certificate_document: str | None = Field(None, description="Certificate kind")
    certificate_document_date: date | None = Field(None, description="Certificate date")
    certificate_document_number: str | None = Field(None, description="Certificate number")
    owner_inn: str | None = Field(None, description="Owner taxpayer number")
    producer_inn: str | None = Field(None, description="Producer taxpayer number")
    production_date: date | None = Field(None, description="Production date")
    tnved_code: str | None = Field(None, description="Customs commodity code")
    uit_code: str | None = Field(None, description="Item identification code")
    uitu_code: str | None = Field(None, description="Package identification code")


class Document(BaseModel):
    """Document submitted to the creation endpoint.

    The model is a plain data carrier; the endpoint performs business
    validation. Unset fields are sent as JSON null.

    Attributes:
        description: Optional description block.
        doc_id: Client-side document identifier.
        doc_status: Document status.
        doc_type: Document type (e.g., "LP_INTRODUCE_GOODS").
        import_request: Whether the goods are imported.
        owner_inn: Taxpayer number of the goods owner.
        participant_inn: Taxpayer number of the participant.
        producer_inn: Taxpayer number of the producer.
        production_date: Production date.
        production_type: Production type.
        products: Product lines.
        reg_date: Registration date.
        reg_number: Registration number.
    """

    model_config = _WIRE_CONFIG

    description: Description | None = Field(None, description="Description block")
    doc_id: str | None = Field(None, description="Document identifier")
    doc_status: str | None = Field(None, description="Document status")
    doc_type: str | None = Field(None, description="Document type")
    import_request: bool = Field(default=False, description="Imported goods flag")
    owner_inn: str | None = Field(None, description="Owner taxpayer number")
    participant_inn: str | None = Field(None, description="Participant taxpayer number")
    producer_inn: str | None = Field(None, description="Producer taxpayer number")
    production_date: date | None = Field(None, description="Production date")
    production_type: str | None = Field(None, description="Production type")
    products: list[Product] = Field(default_factory=list, description="Product lines")
    reg_date: date | None = Field(None, description="Registration date")
    reg_number: str | None = Field(None, description="Registration number")


class DocumentCreationResponse(BaseModel):
    """Decoded response of the creation endpoint.

    The endpoint's response carries nothing the client relies on, so the
    record is empty and unknown fields are ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")
