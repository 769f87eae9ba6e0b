"""Pytest configuration and fixtures shared across all test modules.

This file is automatically loaded by pytest before running any tests.
It pins APP_ENV so settings never pick up a developer's .env file.
"""

import os

# CRITICAL: Set this before any imports that might load settings
os.environ["APP_ENV"] = "testing"

from pathlib import Path
from typing import Any, Callable, Iterator

import httpx
import pytest

from crpt_api.schemas.document import Description, Document, Product

SAMPLE_DOCUMENT_PATH = Path(__file__).resolve().parents[1] / "samples" / "document.json"


def _sample_product(**overrides: Any) -> Product:
    base: dict[str, Any] = {
        "certificate_document": "CONFORMITY_CERTIFICATE",
        "certificate_document_date": "2020-01-23",
        "certificate_document_number": "RU-001",
        "owner_inn": "7700000001",
        "producer_inn": "7700000002",
        "production_date": "2020-01-23",
        "tnved_code": "6401100000",
        "uit_code": "010460043993125621JgXJ5.T",
        "uitu_code": "00046004399312562100",
    }
    base.update(overrides)
    return Product(**base)


@pytest.fixture
def sample_document() -> Document:
    """Fully populated document with one product."""
    return Document(
        description=Description(participant_inn="7700000000"),
        doc_id="doc-0001",
        doc_status="DRAFT",
        doc_type="LP_INTRODUCE_GOODS",
        import_request=True,
        owner_inn="7700000001",
        participant_inn="7700000000",
        producer_inn="7700000002",
        production_date="2020-01-23",
        production_type="OWN_PRODUCTION",
        products=(_sample_product(),),
        reg_date="2020-01-23",
        reg_number="REG-0001",
    )


@pytest.fixture
def sample_document_path() -> Path:
    return SAMPLE_DOCUMENT_PATH


@pytest.fixture
def mock_http_client() -> Iterator[Callable[[Callable[[httpx.Request], httpx.Response]], httpx.Client]]:
    """Factory building an httpx.Client backed by a MockTransport handler."""

    clients: list[httpx.Client] = []

    def _factory(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.Client:
        client = httpx.Client(transport=httpx.MockTransport(handler))
        clients.append(client)
        return client

    yield _factory

    for client in clients:
        client.close()
