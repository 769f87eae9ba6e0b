"""JSON serialization of CRPT documents.

Output uses the wire field names and omits unset (None) fields, so
``Document(doc_id="123")`` serializes to ``{"doc_id":"123","products":[]}``.
"""

from __future__ import annotations

import logging
from pathlib import Path

from pydantic import ValidationError

from crpt_api.core.errors import SerializationAppError
from crpt_api.schemas.document import Document

logger = logging.getLogger(__name__)


class DocumentSerializer:
    """Convert documents to and from their JSON wire representation."""

    def serialize(self, document: Document | None) -> str:
        """Serialize a document to compact JSON.

        Args:
            document: Document to encode.

        Returns:
            JSON text using wire field names.

        Raises:
            SerializationAppError: If document is None.
        """
        if document is None:
            raise SerializationAppError(
                code="nothing_to_serialize",
                message="Document is None and cannot be converted to JSON",
            )
        return document.model_dump_json(by_alias=True, exclude_none=True)

    def deserialize(self, text: str | bytes) -> Document:
        """Parse JSON text into a Document.

        Missing fields take their defaults; unknown fields are ignored.

        Raises:
            SerializationAppError: If the text is not a valid document.
        """
        try:
            return Document.model_validate_json(text)
        except ValidationError as exc:
            raise SerializationAppError(
                code="invalid_document",
                message=f"Invalid document JSON: {exc.error_count()} error(s)",
                details={
                    "exception_type": type(exc).__name__,
                    "context": {"errors": exc.errors(include_url=False, include_input=False)},
                },
            ) from exc

    def load_file(self, path: str | Path) -> Document:
        """Read a JSON document from disk.

        Raises:
            SerializationAppError: If the file cannot be read or parsed.
        """
        file_path = Path(path)
        try:
            text = file_path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.error(
                "document.file_unreadable",
                extra={"path": str(file_path), "error": str(exc)},
            )
            raise SerializationAppError(
                code="document_file_unreadable",
                message=f"Cannot read document file: {file_path}",
                details={"path": str(file_path), "exception_type": type(exc).__name__},
            ) from exc

        document = self.deserialize(text)
        logger.info(
            "document.loaded",
            extra={"path": str(file_path), "product_count": len(document.products)},
        )
        return document
