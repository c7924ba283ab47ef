"""
Core type definitions for rest-client.
"""
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Literal, Optional, Union

# HTTP Methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE"]

HTTP_METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")

# How multi-valued query parameters are written to the query string
QueryFormat = Literal["joined", "repeated"]

FORM_CONTENT_TYPE = "application/x-www-form-urlencoded"
JSON_CONTENT_TYPE = "application/json"


@dataclass
class ClientResponse:
    """
    Normalized result of a single round trip.

    For a received response exactly one of success_response / error_response
    is populated. When no response was received at all, status_code is 0,
    neither body field is set and exception holds the transport failure.
    """
    status_code: int
    success_response: Any = None
    error_response: Any = None
    headers: Dict[str, str] = field(default_factory=dict)
    exception: Optional[BaseException] = None

    @property
    def was_successful(self) -> bool:
        """Check if status code is 2xx."""
        return 200 <= self.status_code <= 299

    @property
    def is_transport_failure(self) -> bool:
        return self.exception is not None


Callback = Callable[[ClientResponse], Union[None, Awaitable[None]]]
