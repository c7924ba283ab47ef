"""
RESTful web service call builder based on httpx.

A RESTClient collects everything needed for one request through chained
calls, performs a single round trip and hands back a ClientResponse:

    task = (
        RESTClient()
        .set_base_url("https://api.example.com")
        .append_path_segment("users")
        .add_query_parameter("active", True)
        .get()
        .execute(on_response)
    )
"""
import asyncio
import base64
import inspect
import json
import logging
from typing import Any, Dict, List, Mapping, Optional, Set, Union

import httpx

from .config import RESTClientConfig, ResolvedConfig, resolve_config
from .errors import (
    InvalidMethodError,
    MissingMethodError,
    MissingUrlError,
    RequestAlreadyExecutedError,
)
from .query import build_query_string, flatten_value, to_js_string
from .types import (
    FORM_CONTENT_TYPE,
    HTTP_METHODS,
    JSON_CONTENT_TYPE,
    Callback,
    ClientResponse,
    HttpMethod,
)

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[RESTClient]"
REDACTED_HEADERS = ("authorization",)

# Strong references to in-flight execute() tasks
_pending_tasks: Set["asyncio.Task[ClientResponse]"] = set()

def _format_body(body: Any) -> str:
    """
    Format body for logging safeguards against binary data.
    """
    if body is None:
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        return f"<binary data: {len(body)} bytes>"
    if isinstance(body, str):
        if len(body) > 5000:
            return body[:5000] + "... (truncated)"
        return body
    if isinstance(body, Mapping):
        return f"<form data: {len(body)} fields>"
    return str(body)

def _redact_headers(headers: Dict[str, str]) -> Dict[str, str]:
    return {
        k: ("<redacted>" if k.lower() in REDACTED_HEADERS else v)
        for k, v in headers.items()
    }

def _parse_body(response: httpx.Response) -> Any:
    """JSON-decode the response body, falling back to the raw text."""
    try:
        return response.json()
    except ValueError:
        return response.text

class RESTClient:
    """
    Fluent builder for a single HTTP request.

    Every configuration method returns the builder itself. A builder is
    executed exactly once, through either ``execute`` (callback style) or
    ``send`` (awaitable style).
    """

    def __init__(
        self,
        url: Optional[str] = None,
        config: Optional[RESTClientConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._config: ResolvedConfig = resolve_config(config)
        self._client: Optional[httpx.AsyncClient] = client or self._config.httpx_client
        self._executed = False

        self.headers: Dict[str, Any] = {}
        self.parameters: Optional[Dict[str, List[Any]]] = None
        self.url: Optional[str] = url
        self.body: Any = None
        self.method: Optional[HttpMethod] = None
        self.key: Optional[Union[str, tuple]] = None

    # --- Method ---

    def set_method(self, method: str) -> "RESTClient":
        verb = method.upper() if isinstance(method, str) else method
        if verb not in HTTP_METHODS:
            raise InvalidMethodError(method)
        self.method = verb
        return self

    def get(self) -> "RESTClient":
        return self.set_method("GET")

    def post(self) -> "RESTClient":
        return self.set_method("POST")

    def put(self) -> "RESTClient":
        return self.set_method("PUT")

    def patch(self) -> "RESTClient":
        return self.set_method("PATCH")

    def delete(self) -> "RESTClient":
        return self.set_method("DELETE")

    # --- Headers ---

    def set_header(self, name: str, value: Any) -> "RESTClient":
        """Set a single header. A None value is ignored."""
        if value is None:
            return self
        self.headers[name] = value
        return self

    def set_all_headers(self, headers: Mapping[str, Any]) -> "RESTClient":
        """Replace every header with the given mapping."""
        self.headers = dict(headers)
        return self

    def set_authorization_header(self, token: Optional[str]) -> "RESTClient":
        """Send the token as-is in the Authorization header."""
        if token is None:
            return self
        return self.set_header("Authorization", token)

    def set_basic_authorization(
        self, username: Optional[str], password: Optional[str]
    ) -> "RESTClient":
        """Set HTTP Basic credentials, only when both parts are non-empty."""
        if username and password:
            credentials = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("utf-8")
            self.set_header("Authorization", f"Basic {credentials}")
        return self

    # --- Body ---

    def set_form_body(self, body: Any) -> "RESTClient":
        """Send the object form-urlencoded; encoding is left to httpx."""
        self.body = body
        self.set_header("Content-Type", FORM_CONTENT_TYPE)
        return self

    def set_json_body(self, body: Any) -> "RESTClient":
        self.body = json.dumps(body, separators=(",", ":"), ensure_ascii=False)
        self.set_header("Content-Type", JSON_CONTENT_TYPE)
        # Content-Length is computed by the transport.
        return self

    # --- TLS ---

    def set_key(self, key: Optional[Union[str, tuple]]) -> "RESTClient":
        """Client certificate (path, or (cert, key) tuple) for https endpoints."""
        self.key = key
        return self

    # --- URL ---

    def set_base_url(self, url: Optional[str]) -> "RESTClient":
        self.url = url
        return self

    def append_path_segment(self, segment: Any) -> "RESTClient":
        """Append a path segment verbatim, separated by exactly one slash."""
        if segment is None:
            return self

        url = self.url or ""
        if not url.endswith("/"):
            url = url + "/"
        self.url = url + str(segment)
        return self

    def append_uri(self, uri: Optional[str]) -> "RESTClient":
        """Join a relative uri onto the url with exactly one slash between them."""
        if uri is None or self.url is None:
            return self

        url_has_slash = self.url.endswith("/")
        uri_has_slash = uri.startswith("/")

        if url_has_slash and uri_has_slash:
            self.url = self.url + uri[1:]
        elif not url_has_slash and not uri_has_slash:
            self.url = self.url + "/" + uri
        else:
            self.url = self.url + uri
        return self

    def add_query_parameter(self, name: str, value: Any) -> "RESTClient":
        """
        Append one or more values to a query parameter.

        Mappings, lists, tuples, dataclass and pydantic instances and other
        plain objects contribute one value per member. A None value is ignored.
        """
        if value is None:
            return self

        if self.parameters is None:
            self.parameters = {}
        self.parameters.setdefault(name, []).extend(flatten_value(value))
        return self

    def build_url(self) -> str:
        """The url the request would be sent to, query string included."""
        query = build_query_string(self.parameters, self._config.query_format)
        return (self.url or "") + query

    # --- Execution ---

    def execute(self, callback: Optional[Callback] = None) -> "asyncio.Task[ClientResponse]":
        """
        Dispatch the request without waiting for it.

        Returns the running task immediately; ``callback`` is invoked exactly
        once with the ClientResponse after the request settles (it may be a
        coroutine function). Must be called from within a running event loop.
        """
        loop = asyncio.get_running_loop()
        self._begin()
        task = loop.create_task(self._execute(callback))
        _pending_tasks.add(task)
        task.add_done_callback(_pending_tasks.discard)
        return task

    async def send(self) -> ClientResponse:
        """Perform the round trip and return the ClientResponse."""
        self._begin()
        return await self._round_trip()

    def _begin(self) -> None:
        if self._executed:
            raise RequestAlreadyExecutedError(self.method or "", self.url or "")
        if not self.url:
            raise MissingUrlError("No URL set; call set_base_url() before executing")
        if self.method is None:
            raise MissingMethodError(self.url)

        self._executed = True
        if self.parameters:
            self.url = self.url + build_query_string(self.parameters, self._config.query_format)

    async def _execute(self, callback: Optional[Callback]) -> ClientResponse:
        response = await self._round_trip()
        if callback is None:
            return response
        try:
            result = callback(response)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception(f"{LOG_PREFIX} Callback failed for {self.method} {self.url}")
        return response

    def _body_kwargs(self) -> Dict[str, Any]:
        if self.body is None:
            return {}
        if isinstance(self.body, (str, bytes, bytearray)):
            return {"content": self.body}
        return {"data": self.body}

    def _create_client(self) -> httpx.AsyncClient:
        timeout = self._config.timeout
        kwargs: Dict[str, Any] = {
            "timeout": httpx.Timeout(
                connect=timeout.connect,
                read=timeout.read,
                write=timeout.write,
                pool=timeout.pool,
            ),
            "verify": self._config.verify_ssl,
            "follow_redirects": self._config.follow_redirects,
        }
        if self.key:
            kwargs["cert"] = self.key
        return httpx.AsyncClient(**kwargs)

    async def _round_trip(self) -> ClientResponse:
        headers = {name: to_js_string(value) for name, value in self.headers.items()}
        own_client = self._client is None
        client = self._create_client() if own_client else self._client

        logger.debug(f"{LOG_PREFIX} Request: {self.method} {self.url}")
        logger.debug(f"{LOG_PREFIX} Headers: {_redact_headers(headers)}")
        logger.debug(f"{LOG_PREFIX} Body: {_format_body(self.body)}")

        try:
            response = await client.request(
                method=self.method,
                url=self.url,
                headers=headers,
                **self._body_kwargs(),
            )
        except httpx.RequestError as e:
            logger.error(f"{LOG_PREFIX} Request failed: {self.method} {self.url}: {e!r}")
            return ClientResponse(status_code=0, exception=e)
        finally:
            if own_client:
                await client.aclose()

        logger.debug(f"{LOG_PREFIX} Response: {response.status_code} {self.method} {self.url}")

        data = _parse_body(response)
        if response.is_success:
            return ClientResponse(
                status_code=response.status_code,
                success_response=data,
                headers=dict(response.headers),
            )
        return ClientResponse(
            status_code=response.status_code,
            error_response=data,
            headers=dict(response.headers),
        )
