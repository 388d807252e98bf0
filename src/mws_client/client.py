from __future__ import annotations

import logging
import platform
from datetime import datetime
from typing import Any, Mapping, Optional

from mws_client.config import MwsConfig, load_mws_config
from mws_client.response import MwsResponse, parse_response
from mws_client.signing.request_builder import RequestAssembler, SignedRequest
from mws_client.transport import RequestsTransport, Transport, TransportResponse

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/x-www-form-urlencoded; charset=UTF-8"


def generate_user_agent(application_name: str, application_version: str) -> str:
    return (
        f"{application_name}/{application_version}"
        f"(Language=Python/{platform.python_version()}; "
        f"Platform={platform.system()}/{platform.machine()}/{platform.release()})"
    )


class MwsClient:
    """
    Signs and sends MWS query-API requests.

    Check the MWS docs / scratchpad for the available actions and params:
    https://mws.amazonservices.co.uk/scratchpad/index.html

    last_request / last_response keep the most recent exchange for
    debugging. They are overwritten on every send and are not safe to rely
    on when one client is shared between threads. Apart from those, the
    only per-client state touched during send is the transport (for the
    default RequestsTransport, its requests.Session).

    A transport created by the client is closed by close() or on leaving
    a `with` block; an injected transport is left to its owner.
    """

    def __init__(self, config: MwsConfig, transport: Optional[Transport] = None) -> None:
        self.config = config
        self._owns_transport = transport is None
        self.transport: Transport = transport or RequestsTransport(timeout_s=config.timeout_s)
        self.user_agent = generate_user_agent(config.application_name, config.application_version)

        creds = config.credentials
        self._assembler = RequestAssembler(
            access_key=creds.access_key,
            secret_key=creds.secret_key,
            seller_id=creds.seller_id,
            auth_token=creds.auth_token,
            marketplace_ids=config.marketplace_ids,
            base_url=config.base_url,
        )

        self.last_request: Optional[SignedRequest] = None
        self.last_response: Optional[TransportResponse] = None

        logger.info(
            f"Initialized MwsClient for {config.base_url} "
            f"({len(config.marketplace_ids)} marketplace(s))"
        )

    def close(self) -> None:
        if self._owns_transport:
            self.transport.close()

    def __enter__(self) -> "MwsClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    @classmethod
    def from_env(cls, transport: Optional[Transport] = None) -> "MwsClient":
        return cls(load_mws_config(), transport=transport)

    def url_for(self, path: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{path.lstrip('/')}"

    def headers(self) -> dict[str, str]:
        return {
            "User-Agent": self.user_agent,
            "Content-Type": CONTENT_TYPE,
        }

    def build_request(
        self,
        action: str,
        path: str,
        optional_params: Optional[Mapping[str, Any]] = None,
        *,
        now: Optional[datetime] = None,
        time_expression: Optional[str] = None,
    ) -> SignedRequest:
        return self._assembler.assemble(
            action,
            path,
            optional_params,
            now=now,
            time_expression=time_expression,
        )

    def send(
        self,
        action: str,
        path: str,
        optional_params: Optional[Mapping[str, Any]] = None,
        *,
        time_expression: Optional[str] = None,
    ) -> MwsResponse:
        """
        Sign and POST an MWS action, e.g. send("ListOrders", "/Orders/2013-09-01", {...}).

        Returns an MwsResponse holding the parsed XML document when the body
        starts with "<", or the raw text otherwise. Transport errors
        (network failures, non-2xx) propagate unchanged.
        """
        signed = self.build_request(action, path, optional_params, time_expression=time_expression)
        self.last_request = signed

        logger.info(f"MWS {action} {path}")
        resp = self.transport.post(self.url_for(path), headers=self.headers(), body=signed.body)
        self.last_response = resp
        logger.debug(f"MWS {action} -> {resp.status_code} ({len(resp.content)} bytes)")

        return parse_response(resp.content, status_code=resp.status_code, encoding=resp.encoding)
