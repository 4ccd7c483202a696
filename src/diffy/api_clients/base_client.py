"""Base Diffy API Client.

Owns the connection state shared by every resource operation: API key,
bearer token, base URL and the pooled HTTP client. Exchanges the API key
for a token and executes authenticated JSON and multipart requests.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import httpx

from .models import TokenResponse

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://app.diffy.website/api/"
DEFAULT_TIMEOUT = 30.0


class DiffyError(Exception):
    """Base exception for Diffy client errors."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidArgumentsError(DiffyError, ValueError):
    """Exception raised when caller-supplied parameters fail validation."""

    pass


class AuthenticationError(DiffyError):
    """Exception raised when the API key cannot be exchanged for a token."""

    pass


class RequestError(DiffyError):
    """Exception raised when an API request fails."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
    ):
        super().__init__(message, status_code)
        self.response_body = response_body


class ResponseValidationError(RequestError):
    """Exception raised when a response does not have the expected shape."""

    pass


class DataNotLoadedError(DiffyError, LookupError):
    """Exception raised when reading data a resource handle does not hold."""

    pass


@dataclass(frozen=True)
class MultipartField:
    """One named part of a multipart/form-data body.

    Plain form fields leave ``filename`` unset; file parts carry the base
    filename and the raw bytes.
    """

    name: str
    contents: Union[str, bytes]
    filename: Optional[str] = None
    content_type: Optional[str] = None

    def to_httpx(self) -> Tuple[str, Tuple[Optional[str], bytes, Optional[str]]]:
        contents = self.contents
        if isinstance(contents, str):
            contents = contents.encode("utf-8")
        return self.name, (self.filename, contents, self.content_type)


def _response_detail(response: httpx.Response) -> str:
    try:
        payload = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    if isinstance(payload, dict):
        for key in ("message", "error", "detail"):
            if payload.get(key):
                return str(payload[key])
    return response.text


class DiffyAPIClient:
    """Authenticated client for the Diffy API.

    One instance holds one set of credentials. Resource operations
    (``Project``, ``Screenshot``, ``Diff``) take the instance as their first
    argument, so several accounts can be used side by side in one process.
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: Optional[httpx.Client] = None,
    ):
        """Initialize the client, exchanging ``api_key`` for a token if given.

        Args:
            api_key: Diffy API key
            base_url: API base URL, overridable for self-hosted deployments
            timeout: Request timeout in seconds
            http_client: Pre-built httpx client to use instead of creating one

        Raises:
            AuthenticationError: If the token exchange fails
        """
        self._base_url = base_url if base_url.endswith("/") else base_url + "/"
        self._timeout = timeout
        self._api_key: Optional[str] = None
        self._api_token: Optional[str] = None
        self._token_lock = threading.Lock()
        self._owns_session = http_client is None
        self._session = http_client

        if api_key is not None:
            self.set_api_key(api_key)

    @classmethod
    def from_config(cls, config) -> "DiffyAPIClient":
        """Create a client from a ``DiffyConfig``."""
        return cls(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
        )

    @property
    def session(self) -> httpx.Client:
        """Get or create the shared HTTP session."""
        if self._session is None or self._session.is_closed:
            self._session = httpx.Client(
                base_url=self._base_url,
                timeout=self._timeout,
                headers={"Accept": "application/json"},
            )
            self._owns_session = True
        return self._session

    @property
    def api_key(self) -> Optional[str]:
        return self._api_key

    @property
    def api_token(self) -> Optional[str]:
        return self._api_token

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_api_key(self, api_key: str) -> None:
        """Store the API key and exchange it for a fresh bearer token.

        Raises:
            AuthenticationError: If the exchange fails or returns no token
        """
        with self._token_lock:
            token = self._exchange_token(api_key)
            self._api_key = api_key
            self._api_token = token

    def set_api_token(self, api_token: Optional[str]) -> None:
        """Install a bearer token obtained elsewhere."""
        with self._token_lock:
            self._api_token = api_token

    def refresh_token(self) -> None:
        """Exchange the current API key for a new token."""
        if not self._api_key:
            raise AuthenticationError("API key is not set")
        self.set_api_key(self._api_key)

    def _exchange_token(self, api_key: str) -> str:
        """Call ``auth/key`` and return the issued token.

        Does not go through ``request``: no token exists yet, and the body
        carries only the API key.
        """
        logger.debug("Exchanging API key for token")
        try:
            response = self.session.post(
                self._url("auth/key"),
                json={"key": api_key},
                headers={"Accept": "application/json"},
            )
        except httpx.HTTPError as e:
            logger.error(f"Token exchange failed: {e}")
            raise AuthenticationError(f"Token exchange failed: {e}") from e

        if response.is_error:
            detail = _response_detail(response)
            logger.error(f"Token exchange rejected with HTTP {response.status_code}")
            raise AuthenticationError(
                f"Token exchange failed: {detail}", response.status_code
            )

        try:
            token = TokenResponse.model_validate(response.json()).token
        except ValueError as e:
            raise AuthenticationError(
                f"Token exchange returned an invalid response: {e}",
                response.status_code,
            ) from e

        if not token:
            logger.error("Token exchange response did not contain a token")
            raise AuthenticationError(
                "Token exchange response did not contain a token",
                response.status_code,
            )
        return token

    def _url(self, path: str) -> str:
        return self._base_url + path.lstrip("/")

    def _auth_headers(
        self, headers: Optional[Mapping[str, str]] = None
    ) -> httpx.Headers:
        merged = httpx.Headers({"Accept": "application/json"})
        merged.update(headers or {})
        merged["Authorization"] = f"Bearer {self._api_token}"
        return merged

    def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        logger.debug(f"{method} {path}")
        try:
            response = self.session.request(method, self._url(path), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise RequestError(f"{method} {path} failed: {e}") from e

        if response.is_error:
            logger.error(f"{method} {path} returned HTTP {response.status_code}")
            raise RequestError(
                f"{method} {path} failed: {_response_detail(response)}",
                response.status_code,
                response.text,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise RequestError(
                f"{method} {path} returned a non-JSON body",
                response.status_code,
                response.text,
            ) from e

    def request(
        self,
        method: str,
        path: str,
        json_body: Optional[Mapping[str, Any]] = None,
        extra_params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Make an authenticated request with an optional JSON body.

        Args:
            method: HTTP method (GET, POST, PUT, ...)
            path: Endpoint path relative to the base URL
            json_body: JSON payload, attached only when non-empty
            extra_params: Additional httpx request arguments

        Returns:
            Decoded JSON response, or None for an empty body

        Raises:
            RequestError: On transport failure or non-success status
        """
        kwargs: Dict[str, Any] = dict(extra_params or {})
        kwargs["headers"] = self._auth_headers(kwargs.get("headers"))
        if json_body:
            kwargs["json"] = dict(json_body)
        return self._send(method, path, **kwargs)

    def multipart_request(
        self,
        method: str,
        path: str,
        parts: Sequence[MultipartField],
        extra_params: Optional[Mapping[str, Any]] = None,
    ) -> Any:
        """Make an authenticated multipart/form-data request.

        Parts are encoded in the order given.
        """
        kwargs: Dict[str, Any] = dict(extra_params or {})
        kwargs["headers"] = self._auth_headers(kwargs.get("headers"))
        files: List[Tuple[str, Tuple[Optional[str], bytes, Optional[str]]]] = [
            part.to_httpx() for part in parts
        ]
        kwargs["files"] = files
        return self._send(method, path, **kwargs)

    def close(self) -> None:
        """Close the HTTP session if this client created it."""
        if self._session is not None and self._owns_session:
            self._session.close()

    def __enter__(self) -> "DiffyAPIClient":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
