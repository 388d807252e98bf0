from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Mapping, Optional, Sequence, Tuple

import pandas as pd

from mws_client.signing.canonical import canonicalize, to_param_value
from mws_client.signing.signature import (
    METHOD_POST,
    SIGNATURE_METHOD,
    SIGNATURE_VERSION,
    build_string_to_sign,
    sign,
)

logger = logging.getLogger(__name__)

CLOCK_SKEW = timedelta(seconds=120)

_WEEKDAYS = ("monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday")

_ANCHOR_RE = re.compile(
    r"^(now|today|midnight|yesterday|tomorrow|(?:(last|next|this)\s+)?(" + "|".join(_WEEKDAYS) + r"))\b\s*"
)
_TERM_RE = re.compile(
    r"\s*([+-]?)\s*(\d+)\s*(second|sec|minute|min|hour|day|fortnight|week|month|year)s?\b\s*"
)

# unit -> (DateOffset keyword, multiplier)
_UNITS = {
    "second": ("seconds", 1),
    "sec": ("seconds", 1),
    "minute": ("minutes", 1),
    "min": ("minutes", 1),
    "hour": ("hours", 1),
    "day": ("days", 1),
    "week": ("weeks", 1),
    "fortnight": ("weeks", 2),
    "month": ("months", 1),
    "year": ("years", 1),
}


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _anchor(m: re.Match, now: datetime) -> datetime:
    word = m.group(1)
    if word == "now":
        return now

    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if word in ("today", "midnight"):
        return midnight
    if word == "yesterday":
        return midnight - timedelta(days=1)
    if word == "tomorrow":
        return midnight + timedelta(days=1)

    # weekday: "monday" / "this monday" is today or the next one,
    # "next monday" is strictly after today, "last monday" strictly before
    target = _WEEKDAYS.index(m.group(3))
    ahead = (target - now.weekday()) % 7
    if m.group(2) == "next":
        ahead = ahead or 7
    elif m.group(2) == "last":
        ahead = -((now.weekday() - target) % 7 or 7)
    return midnight + timedelta(days=ahead)


def _resolve_relative(text: str, now: datetime) -> Optional[datetime]:
    """
    strtotime-style relative expressions, or None if text is not one.

    An optional anchor (now, today, midnight, yesterday, tomorrow,
    [last|next|this] <weekday>) followed by any number of "[+-]N unit"
    terms, optionally ending in "ago" which negates all the terms:
    "yesterday", "1 month ago", "-1 month -2 days", "last monday +9 hours".
    """
    rest = text.lower()
    base = now

    anchor = _ANCHOR_RE.match(rest)
    if anchor:
        base = _anchor(anchor, now)
        rest = rest[anchor.end():]

    ago = rest == "ago" or rest.endswith(" ago")
    if ago:
        rest = rest[:-3].rstrip()

    offsets: Dict[str, int] = {}
    pos = 0
    while pos < len(rest):
        term = _TERM_RE.match(rest, pos)
        if not term:
            return None
        keyword, mult = _UNITS[term.group(3)]
        amount = int(term.group(2)) * mult
        if term.group(1) == "-":
            amount = -amount
        offsets[keyword] = offsets.get(keyword, 0) + amount
        pos = term.end()

    if not anchor and not offsets:
        return None
    if ago:
        offsets = {k: -v for k, v in offsets.items()}
    if not offsets:
        # pd.DateOffset() with no arguments means one day
        return base
    return (pd.Timestamp(base) + pd.DateOffset(**offsets)).to_pydatetime()


def resolve_time_expression(expression: str, now: datetime) -> datetime:
    """
    Resolve a time expression against now.

    Relative expressions follow strtotime ("yesterday", "1 month ago",
    "-1 month -2 days", "last monday"); anything else must be a timestamp
    pandas can parse ("10 September 2000", "2020-01-01T00:00:00+00:00").
    Naive absolute values are taken as UTC.
    """
    now = _as_utc(now)
    text = expression.strip()

    relative = _resolve_relative(text, now)
    if relative is not None:
        return _as_utc(relative)

    try:
        ts = pd.Timestamp(text)
    except (ValueError, TypeError) as e:
        raise ValueError(f"Unrecognised time expression: {expression!r}") from e
    if pd.isna(ts):
        raise ValueError(f"Unrecognised time expression: {expression!r}")

    if ts.tzinfo is None:
        ts = ts.tz_localize("UTC")
    return _as_utc(ts.to_pydatetime())


def gen_time(time_expression: Optional[str] = None, now: Optional[datetime] = None) -> str:
    """
    ISO-8601 timestamp (with offset) two minutes before the requested time.

    With no expression the current time is used; otherwise the expression
    is resolved first and the skew subtracted afterwards.
    """
    base = _as_utc(now) if now is not None else _utc_now()
    if time_expression:
        base = resolve_time_expression(time_expression, base)
    return (base - CLOCK_SKEW).replace(microsecond=0).isoformat()


@dataclass(frozen=True)
class RequestParams:
    """
    Caller-supplied optional params layered under the required ones.

    Required keys always win on collision; merged() keeps the optional
    params' order followed by any required keys not already present.
    """
    required: Mapping[str, Any]
    optional: Mapping[str, Any] = field(default_factory=dict)

    def merged(self) -> Dict[str, str]:
        out = {str(k): to_param_value(v) for k, v in self.optional.items()}
        for k, v in self.required.items():
            out[str(k)] = to_param_value(v)
        return out

    def overridden_keys(self) -> Tuple[str, ...]:
        return tuple(k for k in self.optional if k in self.required)


def version_from_path(path: str) -> str:
    # "/Orders/2013-09-01" -> "2013-09-01"; a path with no "/" is the version itself
    return path.split("/")[-1]


def build_required_params(
    *,
    access_key: str,
    seller_id: str,
    auth_token: str,
    marketplace_ids: Sequence[str],
    action: str,
    path: str,
) -> Dict[str, str]:
    required = {
        "AWSAccessKeyId": access_key,
        "Action": action,
        "SellerId": seller_id,
        "MWSAuthToken": auth_token,
        "SignatureVersion": SIGNATURE_VERSION,
        "Version": version_from_path(path),
        "SignatureMethod": SIGNATURE_METHOD,
    }
    for idx, marketplace_id in enumerate(marketplace_ids, start=1):
        required[f"MarketplaceId.Id.{idx}"] = marketplace_id
    return required


@dataclass(frozen=True)
class SignedRequest:
    action: str
    path: str
    params: Dict[str, str]  # includes Timestamp and Signature
    string_to_sign: str
    signature: str
    body: str


@dataclass(frozen=True)
class RequestAssembler:
    """Builds signed MWS request bodies for one set of credentials."""
    access_key: str
    secret_key: str = field(repr=False)
    seller_id: str
    auth_token: str = field(repr=False)
    marketplace_ids: Tuple[str, ...]
    base_url: str

    def required_params(self, action: str, path: str) -> Dict[str, str]:
        return build_required_params(
            access_key=self.access_key,
            seller_id=self.seller_id,
            auth_token=self.auth_token,
            marketplace_ids=self.marketplace_ids,
            action=action,
            path=path,
        )

    def assemble(
        self,
        action: str,
        path: str,
        optional_params: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
        time_expression: Optional[str] = None,
    ) -> SignedRequest:
        request_params = RequestParams(
            required=self.required_params(action, path),
            optional=optional_params or {},
        )
        overridden = request_params.overridden_keys()
        if overridden:
            logger.debug(f"{action}: required params override caller keys {list(overridden)}")
        params = request_params.merged()

        params["Timestamp"] = gen_time(time_expression, now=now)
        params.pop("Signature", None)

        string_to_sign = build_string_to_sign(METHOD_POST, self.base_url, path, params)
        signature = sign(string_to_sign, self.secret_key)
        params["Signature"] = signature

        return SignedRequest(
            action=action,
            path=path,
            params=params,
            string_to_sign=string_to_sign,
            signature=signature,
            body=canonicalize(params),
        )
