"""GitHub REST API request client using httpx."""

import json
import logging
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl, urlencode

import httpx

from ghsteps import __version__
from ghsteps.env import get_settings

logger = logging.getLogger(__name__)

API_BASE = "https://api.github.com"
"""Base URL for GitHub REST API v3."""

ACCEPT_HEADER = "application/vnd.github+json"
API_VERSION = "2022-11-28"
USER_AGENT = f"ghsteps/{__version__}"

METHODS = ("GET", "POST", "PUT", "PATCH", "DELETE")
QUERY_METHODS = ("GET", "DELETE")
BODY_METHODS = ("POST", "PUT", "PATCH", "DELETE")

DEFAULT_TIMEOUT = 30.0


class GitHubClientError(Exception):
    """Base class for errors raised by the request client."""


class TransportError(GitHubClientError):
    """No HTTP response could be obtained.

    Raised for DNS failures, refused connections, timeouts, redirect loops
    and other request-level problems. HTTP error statuses are never raised; they
    come back as an Envelope.
    """

    def __init__(self, message: str, method: str = "", url: str = ""):
        super().__init__(message)
        self.method = method
        self.url = url


@dataclass
class RequestDescriptor:
    """Everything needed to issue one GitHub API request.

    Attributes:
        method: HTTP method (GET, POST, PUT, PATCH, DELETE)
        path: Endpoint path starting with "/", e.g. "/repos/o/r/issues/1"
        token: Bearer credential, never empty
        base_url: API server, e.g. "https://api.github.com"
        params: Query parameters (GET/DELETE) or JSON body (POST/PUT/PATCH)
        headers: Extra headers; these override the defaults by name
        json_body: Explicit JSON body, allowed on any non-GET method
        user_agent: User-Agent header value
    """

    method: str
    path: str
    token: str
    base_url: str = API_BASE
    params: dict[str, Any] | None = None
    headers: dict[str, str] | None = None
    json_body: Any = None
    user_agent: str = USER_AGENT

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        self.validate()

    def validate(self) -> None:
        """Check the descriptor invariants.

        Raises:
            ValueError: If the token, path or base URL are missing, the path is
                relative, the method is unknown, or a GET request carries a body
        """
        if not self.token:
            raise ValueError("No GitHub API token given")
        if not self.path:
            raise ValueError("GitHub API path cannot be empty")
        if not self.path.startswith("/"):
            raise ValueError(f"GitHub API path must start with '/': {self.path!r}")
        if not self.base_url:
            raise ValueError("GitHub API server URL cannot be empty")
        if self.method not in METHODS:
            raise ValueError(f"Unsupported HTTP method: {self.method}")
        if self.json_body is not None and self.method not in BODY_METHODS:
            raise ValueError(f"{self.method} requests cannot carry a JSON body")

    @property
    def url(self) -> str:
        """Full request URL including the query string, if any."""
        url = f"{self.base_url.rstrip('/')}{self.path}"
        if self.method in QUERY_METHODS and self.params:
            query = encode_query(self.params)
            if query:
                url = f"{url}?{query}"
        return url

    def body(self) -> Any:
        """The JSON body to send, or None."""
        if self.json_body is not None:
            return self.json_body
        if self.method not in QUERY_METHODS and self.params:
            return self.params
        return None

    def build_headers(self) -> httpx.Headers:
        """Default GitHub headers merged with caller overrides."""
        headers = httpx.Headers(
            {
                "Authorization": f"Bearer {self.token}",
                "Accept": ACCEPT_HEADER,
                "X-GitHub-Api-Version": API_VERSION,
                "User-Agent": self.user_agent or USER_AGENT,
            }
        )
        if self.body() is not None:
            headers["Content-Type"] = "application/json"
        if self.headers:
            # httpx.Headers is case-insensitive, so "accept" replaces "Accept"
            headers.update(self.headers)
        return headers


@dataclass
class Envelope:
    """Normalized result of one GitHub API call.

    Attributes:
        status: HTTP status code
        body: Raw response text exactly as returned
        json: Parsed JSON if the body is valid JSON, otherwise None
        headers: Response headers
    """

    status: int
    body: str
    json: Any = None
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_response(cls, response: httpx.Response) -> "Envelope":
        """Build an envelope from an httpx response."""
        text = response.text
        return cls(
            status=response.status_code,
            body=text,
            json=parse_json(text),
            headers=dict(response.headers),
        )

    @property
    def ok(self) -> bool:
        """True for 2xx statuses."""
        return 200 <= self.status < 300

    @property
    def message(self) -> str | None:
        """GitHub's error "message" field, when present."""
        if isinstance(self.json, dict):
            message = self.json.get("message")
            if message is not None:
                return str(message)
        return None

    def to_dict(self) -> dict[str, Any]:
        return {"status": self.status, "body": self.body, "json": self.json}


def parse_json(text: str) -> Any:
    """Parse text as JSON, returning None for empty or invalid input."""
    if not text or not text.strip():
        return None
    try:
        return json.loads(text)
    except ValueError:
        return None


def _flatten(key: str, value: Any) -> list[tuple[str, str]]:
    """Flatten one parameter into (key, value) string pairs."""
    if value is None:
        return []
    if isinstance(value, bool):
        return [(key, "true" if value else "false")]
    if isinstance(value, dict):
        pairs = []
        for sub_key, sub_value in value.items():
            pairs.extend(_flatten(f"{key}[{sub_key}]", sub_value))
        return pairs
    if isinstance(value, (list, tuple)):
        pairs = []
        for item in value:
            pairs.extend(_flatten(key, item))
        return pairs
    return [(key, str(value))]


def encode_query(params: dict[str, Any]) -> str:
    """Encode a parameter mapping as a URL query string.

    None values are dropped, booleans become "true"/"false", lists repeat
    their key and nested mappings use "key[sub]" notation.

    Example:
        encode_query({"state": "open", "labels": ["a", "b"]})
        -> "state=open&labels=a&labels=b"
    """
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        pairs.extend(_flatten(str(key), value))
    return urlencode(pairs)


def decode_query(query: str) -> dict[str, Any]:
    """Decode a query string produced by encode_query.

    Values come back as strings. Repeated keys become lists and "key[sub]"
    keys become nested dicts.
    """
    result: dict[str, Any] = {}
    for raw_key, value in parse_qsl(query.lstrip("?"), keep_blank_values=True):
        parts = raw_key.replace("]", "").split("[")
        target = result
        for part in parts[:-1]:
            target = target.setdefault(part, {})
        leaf = parts[-1]
        if leaf not in target:
            target[leaf] = value
        elif isinstance(target[leaf], list):
            target[leaf].append(value)
        else:
            target[leaf] = [target[leaf], value]
    return result


async def send_request(
    client: httpx.AsyncClient, descriptor: RequestDescriptor
) -> Envelope:
    """Issue one request and normalize the response.

    Args:
        client: httpx client to send the request with
        descriptor: What to send

    Returns:
        Envelope for any HTTP response, whatever its status

    Raises:
        TransportError: If no response could be obtained
    """
    url = descriptor.url
    body = descriptor.body()
    logger.debug(f"{descriptor.method} : {url}")

    try:
        response = await client.request(
            descriptor.method,
            url,
            headers=descriptor.build_headers(),
            content=json.dumps(body) if body is not None else None,
        )
    except httpx.RequestError as e:
        logger.debug(f"{descriptor.method} {url} failed: {e!r}")
        raise TransportError(
            f"Network error: {e}" if str(e) else f"Network error: {type(e).__name__}",
            method=descriptor.method,
            url=url,
        ) from e

    logger.debug(f"{descriptor.method} {url} -> {response.status_code}")
    return Envelope.from_response(response)


class GitHubClient:
    """GitHub REST API client returning normalized envelopes.

    Must be used as an async context manager so the underlying httpx client
    is opened and closed properly. Non-2xx responses are returned, not
    raised; only transport failures raise TransportError.

    Example:
        async with GitHubClient() as client:
            envelope = await client.get("/repos/octocat/Hello-World/issues/1")
            print(envelope.json["title"])
    """

    def __init__(
        self,
        token: str | None = None,
        server_url: str | None = None,
        timeout: float | None = None,
    ):
        """Initialize the GitHub client.

        Args:
            token: GitHub token. Defaults to the configured token.
            server_url: API server URL. Defaults to the configured server,
                which is https://api.github.com unless overridden.
            timeout: Request timeout in seconds.
        """
        settings = get_settings()
        self.token = token or settings.token
        self.server_url = server_url or settings.server_url or API_BASE
        self.timeout = timeout if timeout is not None else settings.timeout
        self.user_agent = settings.user_agent or USER_AGENT
        self._client: httpx.AsyncClient | None = None

        if not self.token:
            raise ValueError(
                "No GitHub API token given. Set GITHUB_API_TOKEN or run 'ghsteps config'."
            )

    async def __aenter__(self) -> "GitHubClient":
        self._client = httpx.AsyncClient(
            timeout=self.timeout,
            follow_redirects=True,
        )
        return self

    async def __aexit__(self, *args) -> None:
        if self._client:
            await self._client.aclose()
            self._client = None

    @property
    def client(self) -> httpx.AsyncClient:
        """Get the underlying httpx client.

        Raises:
            RuntimeError: If accessed outside async context manager
        """
        if not self._client:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._client

    def describe(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> RequestDescriptor:
        """Build a request descriptor bound to this client's token and server."""
        return RequestDescriptor(
            method=method,
            path=path,
            token=self.token,
            base_url=self.server_url,
            params=params,
            headers=headers,
            json_body=json_body,
            user_agent=self.user_agent,
        )

    async def request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        json_body: Any = None,
    ) -> Envelope:
        """Perform one API call.

        Args:
            method: HTTP method
            path: Endpoint path, e.g. "/repos/owner/repo/labels"
            params: Query parameters for GET/DELETE, JSON body otherwise
            headers: Header overrides such as a preview Accept type
            json_body: Explicit JSON body (e.g. for DELETE with a body)

        Returns:
            Envelope with status, raw body and parsed JSON

        Raises:
            TransportError: If the request could not be completed
            ValueError: If the request is malformed
        """
        descriptor = self.describe(method, path, params, headers, json_body)
        return await send_request(self.client, descriptor)

    async def get(self, path: str, params: dict[str, Any] | None = None, **kwargs) -> Envelope:
        return await self.request("GET", path, params=params, **kwargs)

    async def post(self, path: str, params: dict[str, Any] | None = None, **kwargs) -> Envelope:
        return await self.request("POST", path, params=params, **kwargs)

    async def put(self, path: str, params: dict[str, Any] | None = None, **kwargs) -> Envelope:
        return await self.request("PUT", path, params=params, **kwargs)

    async def patch(self, path: str, params: dict[str, Any] | None = None, **kwargs) -> Envelope:
        return await self.request("PATCH", path, params=params, **kwargs)

    async def delete(self, path: str, params: dict[str, Any] | None = None, **kwargs) -> Envelope:
        return await self.request("DELETE", path, params=params, **kwargs)


async def github_api_request(
    token: str,
    path: str,
    params: dict[str, Any] | None = None,
    method: str = "GET",
    server_url: str = API_BASE,
    headers: dict[str, str] | None = None,
    json_body: Any = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Envelope:
    """Make a single request to the GitHub API without a long-lived client.

    Args:
        token: GitHub API token
        path: API endpoint path
        params: Query parameters for GET/DELETE or body parameters otherwise
        method: HTTP method
        server_url: GitHub API server URL
        headers: Additional headers, overriding defaults of the same name
        json_body: Explicit JSON body
        timeout: Request timeout in seconds

    Returns:
        Envelope with status, raw body and parsed JSON

    Raises:
        TransportError: If no response could be obtained
    """
    descriptor = RequestDescriptor(
        method=method,
        path=path,
        token=token,
        base_url=server_url,
        params=params,
        headers=headers,
        json_body=json_body,
    )
    async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
        return await send_request(client, descriptor)
