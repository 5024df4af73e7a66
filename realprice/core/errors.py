"""Error taxonomy for the ingestion pipeline.

Fetch, decode, parse and batch-insert failures are region-level: the crawler
catches them at the region boundary and moves on. ``ValidationRejected`` is
row-level and never leaves the normalizer loop. Only schema initialization
failure aborts a run.
"""
from __future__ import annotations

from typing import Optional


class RealPriceError(RuntimeError):
    """Base class for every failure raised by this package."""


class RealPriceConfigError(RealPriceError):
    """Invalid runtime configuration (unknown city code, etc.)."""


class FetchError(RealPriceError):
    """Retriever failure (base for network/timeout/status errors)."""


class NetworkError(FetchError):
    """Transport level failure: DNS, refused connection, redirect loop."""


class FetchTimeout(FetchError):
    """The upstream did not answer within the configured timeout."""


class HttpStatusError(FetchError):
    """Final response status was not 2xx."""

    def __init__(self, status_code: int, url: Optional[str] = None) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(f"HTTP {status_code}" + (f" ({url})" if url else ""))


class DecodeError(RealPriceError):
    """Payload could not be decoded (unknown legacy codec)."""


class ParseError(RealPriceError):
    """Tabular structure could not be parsed."""


class ValidationRejected(RealPriceError):
    """A raw row failed the validity gate (bad date / non-positive price)."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)


class RealPriceStoreError(RealPriceError):
    """Persistence failure (schema init or batch insert)."""


__all__ = [
    "RealPriceError",
    "RealPriceConfigError",
    "FetchError",
    "NetworkError",
    "FetchTimeout",
    "HttpStatusError",
    "DecodeError",
    "ParseError",
    "ValidationRejected",
    "RealPriceStoreError",
]
