"""Example workloads that exercise the client from one or many threads."""

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor, wait
from pathlib import Path

from crpt_api.adapters.http.base import AbstractDocumentSubmitter
from crpt_api.adapters.http.httpx_submitter import HttpxDocumentSubmitter
from crpt_api.adapters.rate_limit.base import TimeUnit
from crpt_api.adapters.rate_limit.in_memory import InMemoryFixedWindowRateLimiter
from crpt_api.core.config import settings
from crpt_api.core.errors import AppError
from crpt_api.services.crpt_client import CrptApiClient

logger = logging.getLogger(__name__)

DEFAULT_ITERATIONS = 20
DEFAULT_SIGNATURE = "Signature"


def _build_client(
    time_unit: TimeUnit,
    request_limit: int,
    submitter: AbstractDocumentSubmitter | None,
) -> CrptApiClient:
    rate_limiter = InMemoryFixedWindowRateLimiter.for_time_unit(time_unit, request_limit)
    if submitter is None:
        submitter = HttpxDocumentSubmitter(
            url=settings.crpt.document_url,
            timeout_seconds=settings.crpt.timeout_seconds,
        )
    return CrptApiClient(rate_limiter=rate_limiter, submitter=submitter)


def run_single_thread_example(
    document_path: str | Path,
    time_unit: TimeUnit,
    request_limit: int,
    *,
    iterations: int = DEFAULT_ITERATIONS,
    signature: str = DEFAULT_SIGNATURE,
    submitter: AbstractDocumentSubmitter | None = None,
) -> list[str]:
    """Submit the same document ``iterations`` times from the calling thread.

    Returns:
        Response bodies in submission order.
    """
    client = _build_client(time_unit, request_limit, submitter)
    try:
        document = client.serializer.load_file(document_path)
        return [client.create_document(document, signature) for _ in range(iterations)]
    finally:
        client.shutdown()


def run_many_threads_example(
    document_path: str | Path,
    time_unit: TimeUnit,
    request_limit: int,
    thread_count: int,
    *,
    iterations: int = DEFAULT_ITERATIONS,
    signature: str = DEFAULT_SIGNATURE,
    await_seconds: float = 60.0,
    submitter: AbstractDocumentSubmitter | None = None,
) -> int:
    """Submit from ``thread_count`` workers, each sending ``iterations`` documents.

    Workers still running after ``await_seconds`` are abandoned: the client is
    shut down, which fails their pending submissions with ClosedAppError.

    Returns:
        Number of successful submissions.
    """
    client = _build_client(time_unit, request_limit, submitter)
    try:
        document = client.serializer.load_file(document_path)
    except AppError:
        client.shutdown()
        raise

    counter_lock = threading.Lock()
    completed = 0

    def worker() -> None:
        nonlocal completed
        thread_id = threading.get_ident()
        logger.info("worker.started", extra={"thread_id": thread_id})
        for _ in range(iterations):
            try:
                client.create_document(document, signature)
            except AppError as exc:
                logger.warning(
                    "worker.stopped",
                    extra={"thread_id": thread_id, "error_code": exc.code},
                )
                return
            with counter_lock:
                completed += 1
        logger.info("worker.finished", extra={"thread_id": thread_id})

    executor = ThreadPoolExecutor(max_workers=thread_count, thread_name_prefix="crpt-worker")
    try:
        futures = [executor.submit(worker) for _ in range(thread_count)]
        _, not_done = wait(futures, timeout=await_seconds)
        if not_done:
            logger.warning("runner.timeout", extra={"pending_workers": len(not_done)})
    finally:
        client.shutdown()
        executor.shutdown(wait=True)

    return completed
