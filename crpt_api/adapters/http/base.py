from abc import ABC, abstractmethod

from crpt_api.core.errors import ValidationAppError


def validate_signature(signature: str) -> None:
    """Check that the signature can be sent as an HTTP header value.

    Raises:
        ValidationAppError: If the signature is empty or not ASCII.
    """
    if not signature:
        raise ValidationAppError(
            code="missing_signature",
            message="Signature header value must be a non-empty string",
        )
    if not signature.isascii():
        raise ValidationAppError(
            code="invalid_signature",
            message="Signature header value must contain only ASCII characters",
            details={"hint": "Send the detached signature base64-encoded"},
        )


class AbstractDocumentSubmitter(ABC):
    """Interface for transports that deliver a serialized document."""

    @abstractmethod
    def submit(self, payload: str, signature: str) -> str:
        """Send a serialized document and return the raw response body.

        Args:
            payload: Serialized document JSON.
            signature: Value for the ``Signature`` request header.

        Returns:
            str: Response body text, possibly empty.

        Raises:
            ValidationAppError: If the signature cannot be sent as a header.
            TransportAppError: If the request could not be completed.
        """
        ...

    def close(self) -> None:
        """Release transport resources."""
