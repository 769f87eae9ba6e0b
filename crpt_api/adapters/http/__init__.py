"""HTTP submission adapters."""

from crpt_api.adapters.http.base import AbstractDocumentSubmitter, validate_signature
from crpt_api.adapters.http.httpx_submitter import HttpxDocumentSubmitter

__all__ = [
    "AbstractDocumentSubmitter",
    "HttpxDocumentSubmitter",
    "validate_signature",
]
