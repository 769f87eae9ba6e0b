"""httpx-based submitter for the CRPT document creation endpoint."""

from __future__ import annotations

import logging
import time

import httpx

from crpt_api.adapters.http.base import AbstractDocumentSubmitter, validate_signature
from crpt_api.core.errors import TransportAppError

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"


class HttpxDocumentSubmitter(AbstractDocumentSubmitter):
    """POST serialized documents with a synchronous httpx client.

    The client is safe to share across threads; its connection pool is the
    only shared state.
    """

    def __init__(
        self,
        url: str = DEFAULT_DOCUMENT_URL,
        timeout_seconds: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the submitter.

        Args:
            url: Document creation endpoint.
            timeout_seconds: Request timeout, used only when no client is given.
            client: Optional preconfigured client (not closed by ``close()``).
        """
        self.url = url
        self._owns_client = client is None
        self.client = client or httpx.Client(timeout=timeout_seconds)

    def _build_request(self, payload: str, signature: str) -> httpx.Request:
        return self.client.build_request(
            "POST",
            self.url,
            content=payload.encode("utf-8"),
            headers={
                "Content-Type": "application/json",
                "Signature": signature,
            },
        )

    def submit(self, payload: str, signature: str) -> str:
        """POST the payload and return the response body.

        Non-2xx responses are returned as-is for the caller to interpret.

        Raises:
            ValidationAppError: If the signature is empty or not ASCII.
            TransportAppError: On connection, timeout or protocol failure.
        """
        validate_signature(signature)

        request = self._build_request(payload, signature)
        start = time.perf_counter()
        try:
            response = self.client.send(request)
        except httpx.HTTPError as exc:
            logger.error(
                "http.submit_failed",
                extra={
                    "url": self.url,
                    "exception_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            raise TransportAppError(
                code="transport_failed",
                message=f"Document submission failed: {exc}",
                details={
                    "http_method": "POST",
                    "url": self.url,
                    "exception_type": type(exc).__name__,
                },
            ) from exc

        duration_ms = (time.perf_counter() - start) * 1000
        log = logger.info if response.is_success else logger.warning
        log(
            "http.submitted",
            extra={
                "url": self.url,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
                "response_bytes": len(response.content),
            },
        )
        return response.text

    def close(self) -> None:
        if self._owns_client:
            self.client.close()

    def __enter__(self) -> "HttpxDocumentSubmitter":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
