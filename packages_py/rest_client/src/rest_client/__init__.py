"""
REST Client - fluent single-request HTTP builder
"""

__version__ = "0.1.0"

from .config import RESTClientConfig, TimeoutConfig, ResolvedConfig, resolve_config
from .types import ClientResponse, HttpMethod, QueryFormat
from .client import RESTClient
from .query import build_query_string
from .errors import (
    RESTClientError,
    InvalidMethodError,
    MissingMethodError,
    MissingUrlError,
    RequestAlreadyExecutedError,
)

__all__ = [
    "RESTClient",
    "ClientResponse", "HttpMethod", "QueryFormat",
    "RESTClientConfig", "TimeoutConfig", "ResolvedConfig", "resolve_config",
    "build_query_string",
    "RESTClientError", "InvalidMethodError", "MissingMethodError",
    "MissingUrlError", "RequestAlreadyExecutedError",
]
