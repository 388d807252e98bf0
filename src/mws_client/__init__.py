"""Amazon MWS query-API client with signature version 2 request signing."""

from .client import MwsClient, generate_user_agent
from .config import MwsConfig, MwsCredentials, load_mws_config
from .errors import ConfigurationError, SigningError
from .response import MwsResponse, parse_response
from .transport import RequestsTransport, Transport, TransportResponse

__all__ = [
    "MwsClient",
    "generate_user_agent",
    "MwsConfig",
    "MwsCredentials",
    "load_mws_config",
    "ConfigurationError",
    "SigningError",
    "MwsResponse",
    "parse_response",
    "RequestsTransport",
    "Transport",
    "TransportResponse",
]
