"""
Shared utilities for the DeepL API wrapper.

This module provides the building blocks used by the API client:
- Exception hierarchy tagged with an ErrorKind
- APIConfig for configuration (constructor arguments or environment)
- BaseResponse with to_dict() / to_json() for all data models
- BaseAPI with session management and the HTTP request plumbing
"""

import asyncio
import json
import logging
import os
from dataclasses import dataclass, asdict
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple

import aiohttp

from .types import Headers, ServerErrorDict


# Configure logging
logger = logging.getLogger(__name__)


# ==================== Error Kinds ====================

class ErrorKind(str, Enum):
    """The kind of an error."""

    AUTHORIZATION = "authorization"
    """The provided API key was refused by the DeepL server."""

    SERVER = "server"
    """The server could not process a request."""

    DESERIALIZATION = "deserialization"
    """The response data could not be deserialized."""

    TRANSPORT = "transport"
    """The request never got a response (network error, timeout)."""

    INVALID_INPUT = "invalid_input"
    """The arguments were rejected before sending a request."""

    IO = "io"
    """Reading local input failed."""


# ==================== Custom Exceptions ====================

class DeepLError(Exception):
    """
    Base exception for all DeepL API errors.

    Attributes:
        message: Human readable description
        status_code: HTTP status code, if a response was received
        endpoint: API endpoint that was called
        response_text: Raw response body, if any
        original_error: Underlying exception, if any
    """

    kind: ErrorKind = ErrorKind.SERVER

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        endpoint: Optional[str] = None,
        response_text: Optional[str] = None,
        original_error: Optional[BaseException] = None
    ):
        self.message = message
        self.status_code = status_code
        self.endpoint = endpoint
        self.response_text = response_text
        self.original_error = original_error
        super().__init__(message)

    def __str__(self) -> str:
        parts = [self.message]
        if self.status_code is not None:
            parts.append(f"status={self.status_code}")
        if self.endpoint:
            parts.append(f"endpoint={self.endpoint}")
        return " | ".join(parts)

    def to_dict(self) -> Dict[str, Any]:
        """Convert error details to dictionary."""
        return {
            "kind": self.kind.value,
            "message": self.message,
            "status_code": self.status_code,
            "endpoint": self.endpoint,
        }


class AuthorizationError(DeepLError):
    """Raised when the DeepL server refuses the API key (401/403)."""

    kind = ErrorKind.AUTHORIZATION

    def __init__(self, message: str = "Authorization failed, is your API key correct?", **kwargs):
        super().__init__(message, **kwargs)


class ServerError(DeepLError):
    """Raised when the server reports an error; carries its message if one was sent."""

    kind = ErrorKind.SERVER

    def __init__(self, message: str, **kwargs):
        self.server_message = message
        super().__init__(
            f"An error occurred while communicating with the DeepL server: '{message}'.",
            **kwargs
        )


class DeserializationError(DeepLError):
    """Raised when response data cannot be deserialized."""

    kind = ErrorKind.DESERIALIZATION

    def __init__(self, message: str = "An error occurred while deserializing the response data.", **kwargs):
        super().__init__(message, **kwargs)


class TransportError(DeepLError):
    """Raised on network failures and timeouts."""

    kind = ErrorKind.TRANSPORT


class InvalidInputError(DeepLError):
    """Raised when arguments are invalid."""

    kind = ErrorKind.INVALID_INPUT


class FileError(DeepLError):
    """Raised when a local input file cannot be read."""

    kind = ErrorKind.IO


# ==================== Configuration ====================

_TRUE_VALUES = ("1", "true", "yes", "on")


@dataclass
class APIConfig:
    """
    Configuration for the DeepL client.

    Example:
        config = APIConfig(api_key="key:fx", timeout=10)
        config = APIConfig.from_env()
    """
    api_key: str = ""
    free_tier: Optional[bool] = None
    timeout: float = 30
    base_url: Optional[str] = None

    @classmethod
    def from_env(cls) -> "APIConfig":
        """
        Build a configuration from environment variables.

        Reads DEEPL_API_KEY, DEEPL_FREE_TIER, DEEPL_TIMEOUT and DEEPL_BASE_URL.
        Unset variables keep their defaults.
        """
        free_tier: Optional[bool] = None
        free_env = os.environ.get("DEEPL_FREE_TIER")
        if free_env:
            free_tier = free_env.strip().lower() in _TRUE_VALUES

        timeout_env = os.environ.get("DEEPL_TIMEOUT")
        try:
            timeout = float(timeout_env) if timeout_env else 30
        except ValueError:
            raise InvalidInputError(f"DEEPL_TIMEOUT must be a number, got '{timeout_env}'")

        return cls(
            api_key=os.environ.get("DEEPL_API_KEY", ""),
            free_tier=free_tier,
            timeout=timeout,
            base_url=os.environ.get("DEEPL_BASE_URL") or None,
        )


# ==================== Base Response ====================

def _plain(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, list):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


@dataclass
class BaseResponse:
    """Base class for data models: provides to_dict() and to_json()."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {k: _plain(v) for k, v in asdict(self).items()}

    def to_json(self, indent: Optional[int] = None) -> str:
        """
        Convert to JSON string.

        Args:
            indent: Number of spaces for indentation (None for compact JSON)

        Returns:
            JSON string representation
        """
        return json.dumps(self.to_dict(), indent=indent, ensure_ascii=False)


def require_field(data: Any, name: str, expected: type, endpoint: Optional[str] = None) -> Any:
    """
    Fetch a required field from a response payload.

    Raises:
        DeserializationError: If data is not a dict, the field is missing or has the wrong type
    """
    if not isinstance(data, dict) or name not in data:
        raise DeserializationError(endpoint=endpoint, response_text=repr(data)[:200])
    value = data[name]
    # bool is an int subclass
    if not isinstance(value, expected) or (isinstance(value, bool) and expected is not bool):
        raise DeserializationError(endpoint=endpoint, response_text=repr(data)[:200])
    return value


# ==================== Base API Client ====================

FormFields = List[Tuple[str, str]]


class BaseAPI:
    """
    Base class for async API clients.

    Provides:
    - Session management (async context manager, or one session per call)
    - Header creation
    - Response validation and error mapping

    Subclasses set FREE_URL / PRO_URL.
    """

    PRO_URL = ""
    FREE_URL = ""

    def __init__(
        self,
        api_key: Optional[str] = None,
        free_tier: Optional[bool] = None,
        timeout: Optional[float] = None,
        base_url: Optional[str] = None,
        config: Optional[APIConfig] = None
    ):
        """
        Initialize the API client.

        Args:
            api_key: DeepL API key (falls back to config.api_key)
            free_tier: Use the free API endpoint. None detects it from the key suffix ':fx'
            timeout: Request timeout in seconds (default: 30)
            base_url: Override the API base URL (e.g. for a proxy or tests)
            config: Optional APIConfig providing defaults for all of the above

        Raises:
            InvalidInputError: If no API key is available
        """
        config = config or APIConfig()

        self.api_key = api_key if api_key is not None else config.api_key
        if not self.api_key or not self.api_key.strip():
            raise InvalidInputError("API key cannot be empty")

        if free_tier is None:
            free_tier = config.free_tier
        if free_tier is None:
            free_tier = self.api_key.endswith(":fx")
        self.free_tier = free_tier

        base_url = base_url or config.base_url
        if not base_url:
            base_url = self.FREE_URL if self.free_tier else self.PRO_URL
        self.base_url = base_url.rstrip("/")

        self.timeout = aiohttp.ClientTimeout(total=timeout if timeout is not None else config.timeout)
        self._session: Optional[aiohttp.ClientSession] = None

        logger.info(f"{type(self).__name__} client initialized (free_tier={self.free_tier})")

    async def __aenter__(self):
        """Async context manager entry."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=self.timeout)
            logger.debug("HTTP session created")
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
        return False

    async def close(self) -> None:
        """Close the HTTP session, if one is open."""
        if self._session is not None:
            await self._session.close()
            self._session = None
            logger.debug("HTTP session closed")

    def _get_headers(self) -> Headers:
        """Get request headers with authentication."""
        return {
            "Authorization": f"DeepL-Auth-Key {self.api_key}",
            "Accept": "application/json",
        }

    async def _make_request(self, endpoint: str, form: Optional[FormFields] = None) -> Any:
        """
        POST form fields to an endpoint and return the decoded JSON body.

        Args:
            endpoint: API endpoint path, e.g. "/translate"
            form: Form fields; repeated keys are kept in order

        Returns:
            Decoded JSON response

        Raises:
            AuthorizationError: On 401 / 403
            ServerError: On any other non-2xx status
            DeserializationError: If the success body is not UTF-8 JSON
            TransportError: On network errors and timeouts
        """
        session = self._session
        close_session = False
        if session is None or session.closed:
            session = aiohttp.ClientSession(timeout=self.timeout)
            close_session = True

        url = f"{self.base_url}{endpoint}"
        logger.debug(f"POST {endpoint} with {len(form or [])} form fields")

        try:
            async with session.post(url, headers=self._get_headers(), data=form) as response:
                if response.status in (401, 403):
                    raise AuthorizationError(status_code=response.status, endpoint=endpoint)

                raw = await response.read()

                if not 200 <= response.status < 300:
                    body = raw.decode("utf-8", errors="replace")
                    raise ServerError(
                        self._server_message(response.status, response.reason, body),
                        status_code=response.status,
                        response_text=body,
                        endpoint=endpoint
                    )

                try:
                    data = json.loads(raw.decode("utf-8"))
                except ValueError as e:
                    # UnicodeDecodeError is a ValueError
                    raise DeserializationError(
                        status_code=response.status,
                        endpoint=endpoint,
                        response_text=raw.decode("utf-8", errors="replace"),
                        original_error=e
                    )

                logger.debug(f"Request successful: {endpoint}")
                return data

        except DeepLError as e:
            logger.error(f"Request to {endpoint} failed: {e}")
            raise
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Request error: {str(e)}")
            raise TransportError(
                f"Network error: {str(e) or type(e).__name__}",
                endpoint=endpoint,
                original_error=e
            )
        finally:
            if close_session:
                await session.close()

    @staticmethod
    def _server_message(status: int, reason: Optional[str], body: str) -> str:
        """DeepL sends error messages in the body; fall back to the status line."""
        try:
            payload: ServerErrorDict = json.loads(body)
        except ValueError:
            payload = {"message": ""}
        if isinstance(payload, dict) and isinstance(payload.get("message"), str) and payload["message"]:
            return payload["message"]
        return f"{status} {reason or ''}".strip()
