"""
Configuration models and environment resolution for rest-client.
"""
import logging
import os
from dataclasses import dataclass
from typing import Any, Optional, Union

from pydantic import BaseModel, field_validator

from .types import QueryFormat

logger = logging.getLogger(__name__)

# Constants
DEFAULT_TIMEOUT_CONNECT = 5.0
DEFAULT_TIMEOUT_READ = 30.0
DEFAULT_TIMEOUT_WRITE = 10.0
DEFAULT_QUERY_FORMAT: QueryFormat = "joined"

QUERY_FORMAT_ENV = "REST_CLIENT_QUERY_FORMAT"

class TimeoutConfig(BaseModel):
    """Timeout configuration."""
    connect: float = DEFAULT_TIMEOUT_CONNECT
    read: float = DEFAULT_TIMEOUT_READ
    write: float = DEFAULT_TIMEOUT_WRITE
    pool: Optional[float] = None

class RESTClientConfig(BaseModel):
    """Transport configuration shared by RESTClient instances."""
    model_config = {"arbitrary_types_allowed": True}

    timeout: Optional[Union[float, TimeoutConfig]] = None
    query_format: Optional[QueryFormat] = None
    verify_ssl: Optional[bool] = None
    follow_redirects: bool = True

    # Optional pre-configured client (httpx.AsyncClient), never closed by us
    httpx_client: Any = None

    @field_validator("timeout")
    @classmethod
    def validate_timeout(cls, v):
        if isinstance(v, (int, float)) and v <= 0:
            raise ValueError("timeout must be positive")
        return v

def normalize_timeout(timeout: Optional[Union[float, TimeoutConfig]]) -> TimeoutConfig:
    """Normalize timeout to TimeoutConfig object."""
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=float(timeout), read=float(timeout), write=float(timeout))
    return timeout

def get_query_format_from_env(default: QueryFormat = DEFAULT_QUERY_FORMAT) -> QueryFormat:
    """Read the query serialization mode from the environment."""
    value = os.getenv(QUERY_FORMAT_ENV, "").strip().lower()
    if value in ("joined", "repeated"):
        return value  # type: ignore
    if value:
        logger.warning(f"Ignoring invalid {QUERY_FORMAT_ENV}={value!r}, using '{default}'")
    return default

def is_ssl_verify_disabled_by_env() -> bool:
    """Check if SSL verification is disabled by environment variables."""
    # Node.js compatibility
    if os.getenv("NODE_TLS_REJECT_UNAUTHORIZED") == "0":
        return True

    # Python convention
    if os.getenv("SSL_CERT_VERIFY") == "0":
        return True

    return False

@dataclass(frozen=True)
class ResolvedConfig:
    """Fully resolved configuration ready for usage."""
    timeout: TimeoutConfig
    query_format: QueryFormat
    verify_ssl: bool
    follow_redirects: bool
    httpx_client: Any = None

def resolve_config(config: Optional[RESTClientConfig] = None) -> ResolvedConfig:
    """Apply defaults and environment overrides, explicit values win."""
    config = config or RESTClientConfig()

    query_format = config.query_format or get_query_format_from_env()

    verify_ssl = config.verify_ssl
    if verify_ssl is None:
        verify_ssl = not is_ssl_verify_disabled_by_env()

    return ResolvedConfig(
        timeout=normalize_timeout(config.timeout),
        query_format=query_format,
        verify_ssl=verify_ssl,
        follow_redirects=config.follow_redirects,
        httpx_client=config.httpx_client,
    )
