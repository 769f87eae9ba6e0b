"""Pydantic schemas for CRPT product-registration documents.

Python attribute names are snake_case; the wire names used by the CRPT API
are declared as aliases. Models are frozen so a document cannot change
between admission and submission.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


_MODEL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    extra="ignore",
)


class Description(BaseModel):
    """Document description block carrying the participant tax ID."""

    model_config = _MODEL_CONFIG

    participant_inn: str | None = Field(
        default=None,
        alias="participantInn",
        description="Participant tax ID (INN).",
    )


class Product(BaseModel):
    """One line item of a registration document."""

    model_config = _MODEL_CONFIG

    certificate_document: str | None = Field(
        default=None, description="Conformity certificate document reference."
    )
    certificate_document_date: str | None = Field(
        default=None, description="Date of the certificate document."
    )
    certificate_document_number: str | None = Field(
        default=None, description="Number of the certificate document."
    )
    owner_inn: str | None = Field(default=None, description="Owner tax ID (INN).")
    producer_inn: str | None = Field(default=None, description="Producer tax ID (INN).")
    production_date: str | None = Field(default=None, description="Production date.")
    tnved_code: str | None = Field(default=None, description="TN VED tariff code.")
    uit_code: str | None = Field(default=None, description="Unit identifier (UIT).")
    uitu_code: str | None = Field(default=None, description="Transport unit identifier (UITU).")


class Document(BaseModel):
    """A regulatory filing submitted to the document creation endpoint."""

    model_config = _MODEL_CONFIG

    description: Description | None = Field(
        default=None,
        description="Description block with the participant tax ID.",
    )
    doc_id: str | None = Field(default=None, description="Document identifier.")
    doc_status: str | None = Field(default=None, description="Document status.")
    doc_type: str | None = Field(default=None, description="Document type, e.g. LP_INTRODUCE_GOODS.")
    import_request: bool | None = Field(
        default=None,
        alias="importRequest",
        description="Whether the document is an import request.",
    )
    owner_inn: str | None = Field(default=None, description="Owner tax ID (INN).")
    participant_inn: str | None = Field(default=None, description="Participant tax ID (INN).")
    producer_inn: str | None = Field(default=None, description="Producer tax ID (INN).")
    production_date: str | None = Field(default=None, description="Production date.")
    production_type: str | None = Field(default=None, description="Production type.")
    products: tuple[Product, ...] = Field(
        default=(),
        description="Ordered line items; serialized as a JSON array.",
    )
    reg_date: str | None = Field(default=None, description="Registration date.")
    reg_number: str | None = Field(default=None, description="Registration number.")

    @field_validator("products", mode="before")
    @classmethod
    def _null_products_as_empty(cls, value: object) -> object:
        return () if value is None else value
