from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Sequence, Tuple

from mws_client.endpoints import DEFAULT_BASE_URL, validate_base_url
from mws_client.errors import ConfigurationError

DEFAULT_APPLICATION_NAME = "MwsClient"
DEFAULT_APPLICATION_VERSION = "1.0"


def mask(s: str, showz: int = 4) -> str:
    if not s:
        return "<EMPTY>"
    if len(s) <= showz:
        return "*" * len(s)
    return ("*" * (len(s) - showz)) + s[-showz:]


@dataclass(frozen=True)
class MwsCredentials:
    access_key: str  # a.k.a. "AWS Access Key ID"
    secret_key: str = field(repr=False)
    seller_id: str
    auth_token: str = field(repr=False)

    def __repr__(self) -> str:
        return (
            f"MwsCredentials(access_key={mask(self.access_key)!r}, secret_key='***', "
            f"seller_id={self.seller_id!r}, auth_token='***')"
        )


@dataclass(frozen=True)
class MwsConfig:
    """
    Immutable client configuration. Validated on construction:

      - base_url must be an allow-listed regional MWS endpoint
      - application_name / application_version must be non-empty
      - at least one marketplace id
    """
    credentials: MwsCredentials
    marketplace_ids: Tuple[str, ...]
    base_url: str = DEFAULT_BASE_URL
    application_name: str = DEFAULT_APPLICATION_NAME
    application_version: str = DEFAULT_APPLICATION_VERSION
    timeout_s: int = 60

    def __post_init__(self) -> None:
        validate_base_url(self.base_url)

        if self.application_name is None or self.application_name.strip() == "":
            raise ConfigurationError("Application name cannot be empty")
        if self.application_version is None or self.application_version.strip() == "":
            raise ConfigurationError("Application version cannot be empty")

        if isinstance(self.marketplace_ids, str):
            raise ConfigurationError("marketplace_ids must be a sequence of ids, not a single string")
        ids = tuple(self.marketplace_ids)
        if not ids:
            raise ConfigurationError("At least one marketplace id is required")
        object.__setattr__(self, "marketplace_ids", ids)

    @classmethod
    def create(
        cls,
        access_key: str,
        secret_key: str,
        seller_id: str,
        marketplace_ids: Sequence[str],
        auth_token: str,
        base_url: str = DEFAULT_BASE_URL,
        application_name: str = DEFAULT_APPLICATION_NAME,
        application_version: str = DEFAULT_APPLICATION_VERSION,
        timeout_s: int = 60,
    ) -> "MwsConfig":
        return cls(
            credentials=MwsCredentials(
                access_key=access_key,
                secret_key=secret_key,
                seller_id=seller_id,
                auth_token=auth_token,
            ),
            marketplace_ids=marketplace_ids,
            base_url=base_url,
            application_name=application_name,
            application_version=application_version,
            timeout_s=timeout_s,
        )


def _require_env(key: str) -> str:
    value = os.getenv(key)
    if value is None or value.strip() == "":
        raise ConfigurationError(f"Missing required environment variable: {key}")
    return value.strip()


def _split_ids(raw: str) -> Tuple[str, ...]:
    return tuple(part.strip() for part in raw.split(",") if part.strip())


def load_mws_config() -> MwsConfig:
    """
    Load MWS config from environment variables.

    This function performs only validation + object construction.
    It does NOT make any network calls.
    """
    timeout_raw = os.getenv("MWS_TIMEOUT_S", "60")
    try:
        timeout_s = int(timeout_raw)
    except ValueError:
        raise ConfigurationError(f"MWS_TIMEOUT_S must be an integer, received {timeout_raw!r}") from None

    return MwsConfig.create(
        access_key=_require_env("MWS_ACCESS_KEY_ID"),
        secret_key=_require_env("MWS_SECRET_ACCESS_KEY"),
        seller_id=_require_env("MWS_SELLER_ID"),
        marketplace_ids=_split_ids(_require_env("MWS_MARKETPLACE_IDS")),
        auth_token=_require_env("MWS_AUTH_TOKEN"),
        base_url=os.getenv("MWS_BASE_URL", DEFAULT_BASE_URL),
        application_name=os.getenv("MWS_APPLICATION_NAME", DEFAULT_APPLICATION_NAME),
        application_version=os.getenv("MWS_APPLICATION_VERSION", DEFAULT_APPLICATION_VERSION),
        timeout_s=timeout_s,
    )
