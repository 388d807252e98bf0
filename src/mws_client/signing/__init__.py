"""MWS signature version 2 request signing."""

from .canonical import canonicalize, percent_encode
from .request_builder import RequestAssembler, RequestParams, SignedRequest, gen_time
from .signature import build_string_to_sign, sign

__all__ = [
    "canonicalize",
    "percent_encode",
    "build_string_to_sign",
    "sign",
    "gen_time",
    "RequestAssembler",
    "RequestParams",
    "SignedRequest",
]
