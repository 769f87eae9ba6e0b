"""CRPT document client pairing rate-limit admission with submission.

Each ``create_document`` call runs {acquire permit, serialize, submit} inside
a single critical section, so a permit is never taken without being spent on
a submission attempt and concurrent callers cannot exceed the limit.
"""

from __future__ import annotations

import logging
import threading

from crpt_api.adapters.http.base import AbstractDocumentSubmitter, validate_signature
from crpt_api.adapters.http.httpx_submitter import HttpxDocumentSubmitter
from crpt_api.adapters.rate_limit.base import AbstractRateLimiter, CancellationToken
from crpt_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from crpt_api.core.config import Settings, settings as default_settings
from crpt_api.core.errors import AppError, ClosedAppError
from crpt_api.core.logging import submission_context
from crpt_api.schemas.document import Document
from crpt_api.services.serializer import DocumentSerializer

logger = logging.getLogger(__name__)


class CrptApiClient:
    """Thread-safe client for the CRPT document creation endpoint."""

    def __init__(
        self,
        *,
        rate_limiter: AbstractRateLimiter,
        submitter: AbstractDocumentSubmitter,
        serializer: DocumentSerializer | None = None,
    ) -> None:
        self.rate_limiter = rate_limiter
        self.submitter = submitter
        self.serializer = serializer or DocumentSerializer()
        self._lock = threading.Lock()
        self._state_lock = threading.Lock()
        self._closed = False

    def create_document(
        self,
        document: Document | None,
        signature: str,
        *,
        cancel: CancellationToken | None = None,
    ) -> str:
        """Submit a document once the rate limiter admits it.

        Args:
            document: Document to register.
            signature: Value sent in the ``Signature`` header.
            cancel: Optional token that aborts the wait for a permit.

        Returns:
            Raw response body from the API.

        Raises:
            ValidationAppError: If the signature cannot be sent; no permit is used.
            ClosedAppError: If the client or limiter has been shut down.
            CancellationAppError: If cancelled while waiting for a permit.
            SerializationAppError: If the document cannot be serialized.
            TransportAppError: If the HTTP request fails.
        """
        with submission_context():
            try:
                with self._lock:
                    if self._closed:
                        raise ClosedAppError(
                            code="client_closed",
                            message="CRPT client has been shut down",
                        )

                    validate_signature(signature)
                    permit = self.rate_limiter.acquire(cancel=cancel)
                    logger.debug(
                        "rate_limit.admitted",
                        extra={
                            "limit": permit.limit,
                            "remaining": permit.remaining,
                            "waited_s": round(permit.waited_seconds, 3),
                        },
                    )

                    payload = self.serializer.serialize(document)
                    body = self.submitter.submit(payload, signature)

                logger.info(
                    "document.submitted",
                    extra={
                        "doc_id": document.doc_id if document is not None else None,
                        "response": body,
                    },
                )
                return body
            except AppError as exc:
                logger.error(
                    "document.submit_failed",
                    extra={"error_code": exc.code, "error_message": exc.message},
                )
                raise

    def shutdown(self) -> None:
        """Stop admitting documents and release the limiter and transport."""
        with self._state_lock:
            if self._closed:
                return
            self._closed = True
        # Wakes a caller blocked on the limiter so it releases the client lock
        self.rate_limiter.shutdown()
        with self._lock:
            self.submitter.close()

    def __enter__(self) -> "CrptApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()


def create_crpt_client(app_settings: Settings | None = None) -> CrptApiClient:
    """Build a client from configuration.

    Args:
        app_settings: Settings to use; defaults to the global settings.

    Returns:
        CrptApiClient with an in-memory limiter and an httpx submitter.

    Raises:
        ConfigurationAppError: If the rate limit configuration is invalid.
    """
    cfg = (app_settings or default_settings).crpt
    rate_limiter = InMemoryFixedWindowRateLimiter.for_time_unit(
        cfg.time_unit, cfg.request_limit
    )
    submitter = HttpxDocumentSubmitter(
        url=cfg.document_url,
        timeout_seconds=cfg.timeout_seconds,
    )
    logger.info(
        "crpt_client.created",
        extra={
            "url": cfg.document_url,
            "request_limit": cfg.request_limit,
            "time_unit": cfg.time_unit.value,
        },
    )
    return CrptApiClient(rate_limiter=rate_limiter, submitter=submitter)
