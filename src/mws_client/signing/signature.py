from __future__ import annotations

import base64
import hashlib
import hmac
from typing import Any, Mapping
from urllib.parse import urlsplit

from mws_client.errors import SigningError
from mws_client.signing.canonical import canonicalize, percent_encode

METHOD_POST = "POST"
SIGNATURE_METHOD = "HmacSHA256"
SIGNATURE_VERSION = "2"


def extract_host(base_url: str) -> str:
    try:
        host = urlsplit(base_url).hostname
    except ValueError as e:
        raise SigningError(f"Cannot parse base URL {base_url!r}: {e}") from e
    if not host:
        raise SigningError(f"Cannot extract host from base URL {base_url!r}")
    return host


def encode_path(path: str) -> str:
    """
    Percent-encode each "/"-separated segment of path.

    Empty path -> "/". A path without a leading slash gets one, so the
    signed path always matches the path the request is posted to.
    """
    if not path:
        return "/"
    if not path.startswith("/"):
        path = "/" + path
    return "/".join(percent_encode(segment) for segment in path.split("/"))


def build_string_to_sign(method: str, base_url: str, path: str, params: Mapping[str, Any]) -> str:
    """
    METHOD, host, encoded path and canonical params joined by single "\\n".

    Only POST is signed. The host comes from base_url; any path embedded in
    base_url is ignored in favour of the path argument.
    """
    if method != METHOD_POST:
        raise SigningError(f"Unsupported HTTP method for signing: {method!r}")

    return "\n".join(
        [
            method,
            extract_host(base_url),
            encode_path(path),
            canonicalize(params),
        ]
    )


def sign(string_to_sign: str, secret_key: str) -> str:
    """Base64 of the raw HMAC-SHA256 digest of string_to_sign."""
    digest = hmac.new(
        secret_key.encode("utf-8"),
        string_to_sign.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")
