"""
HTTP transport used by MwsClient.

The client only needs `post(url, headers=..., body=...)` returning a
TransportResponse, so tests can pass any object with that method.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol

import requests

logger = logging.getLogger(__name__)


def declared_charset(headers: Mapping[str, str]) -> Optional[str]:
    """
    Charset named in the Content-Type header, or None.

    Unlike requests, a text/* type without a charset does not mean ISO-8859-1.
    """
    content_type = headers.get("Content-Type") or headers.get("content-type") or ""
    if "charset" not in content_type.lower():
        return None
    return requests.utils.get_encoding_from_headers({"content-type": content_type})


@dataclass(frozen=True)
class TransportResponse:
    status_code: int
    content: bytes
    headers: Mapping[str, str] = field(default_factory=dict)
    encoding: Optional[str] = None  # charset from Content-Type, only if the server sent one

    @property
    def text(self) -> str:
        return self.content.decode(self.encoding or "utf-8", errors="replace")


class Transport(Protocol):
    def post(self, url: str, *, headers: Mapping[str, str], body: str) -> TransportResponse:
        ...


class RequestsTransport:
    """
    requests-backed transport.

    Non-2xx responses raise requests.HTTPError via raise_for_status();
    network failures raise the usual requests exceptions. Nothing is retried.
    """

    def __init__(self, session: Optional[requests.Session] = None, timeout_s: int = 60) -> None:
        self.timeout_s = timeout_s
        self._session = session or requests.Session()

    def post(self, url: str, *, headers: Mapping[str, str], body: str) -> TransportResponse:
        resp = self._session.post(
            url,
            data=body.encode("utf-8"),
            headers=dict(headers),
            timeout=self.timeout_s,
        )
        logger.debug(f"POST {url} -> {resp.status_code}")
        resp.raise_for_status()

        return TransportResponse(
            status_code=resp.status_code,
            content=resp.content,
            headers=dict(resp.headers),
            encoding=declared_charset(resp.headers),
        )

    def close(self) -> None:
        self._session.close()
