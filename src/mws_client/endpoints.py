from __future__ import annotations

import re

from mws_client.errors import ConfigurationError

DEFAULT_BASE_URL = "https://mws.amazonservices.com"

# Regional MWS hosts. Anything else is rejected at construction time.
_BASE_URL_RE = re.compile(
    r"^https://mws(-eu|-fe)?\.amazonservices\.(com|ca|in|jp|com\.cn|com\.mx|com\.au|co\.uk)/?$"
)

# Country code -> base URL (marketplace id in the comment)
REGIONAL_ENDPOINTS = {
    "US": "https://mws.amazonservices.com",     # ATVPDKIKX0DER
    "CA": "https://mws.amazonservices.ca",      # A2EUQ1WTGCTBG2
    "MX": "https://mws.amazonservices.com.mx",  # A1AM78C64UM0Y8
    "UK": "https://mws-eu.amazonservices.com",  # A1F83G8C2ARO7P
    "DE": "https://mws-eu.amazonservices.com",  # A1PA6795UKMFR9
    "FR": "https://mws-eu.amazonservices.com",  # A13V1IB3VIYZZH
    "IT": "https://mws-eu.amazonservices.com",  # APJ6JRA9NG5V4
    "ES": "https://mws-eu.amazonservices.com",  # A1RKKUPIHCS9HS
    "IN": "https://mws.amazonservices.in",      # A21TJRUUN4KGV
    "JP": "https://mws.amazonservices.jp",      # A1VC38T7YXB528
    "AU": "https://mws.amazonservices.com.au",  # A39IBJ37TRP1C6
    "CN": "https://mws.amazonservices.com.cn",  # AAHKV2X7AFYLW
}


def is_valid_base_url(base_url: str) -> bool:
    return bool(base_url) and _BASE_URL_RE.match(base_url) is not None


def validate_base_url(base_url: str) -> str:
    """
    Return base_url unchanged if it is an allow-listed MWS endpoint.

    Raises ConfigurationError otherwise.
    """
    if not is_valid_base_url(base_url):
        raise ConfigurationError(f'Base URL must be a valid MWS endpoint, received "{base_url}"')
    return base_url


def endpoint_for(country_code: str) -> str:
    key = (country_code or "").strip().upper()
    try:
        return REGIONAL_ENDPOINTS[key]
    except KeyError:
        raise ConfigurationError(f"Unknown MWS country code: {country_code!r}") from None
