"""
Base API Connector
HTTP plumbing shared by remote store connectors: session, timeouts,
error conversion and retry with exponential backoff
"""
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar
from dataclasses import dataclass
import logging
import time

import requests

from recipe_core.errors import TransientRemoteError

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class APIConfig:
    """Configuration for API connection"""
    api_name: str
    base_url: str
    api_key: Optional[str] = None
    headers: Optional[Dict[str, str]] = None
    probe_timeout: float = 5.0    # availability probe
    read_timeout: float = 10.0    # list / by-id reads
    write_timeout: float = 15.0   # create / update / delete
    max_retries: int = 3
    retry_delay: float = 1.0      # seconds before the first retry, doubled after each


def retry_api_call(
    call: Callable[[], T],
    max_attempts: int = 3,
    initial_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Run ``call`` until it succeeds or attempts run out.

    Only TransientRemoteError is retried; the delay doubles after each failed
    attempt. Any other exception propagates immediately.

    Raises:
        TransientRemoteError: The last failure once all attempts are used
    """
    delay = initial_delay
    last_error: Optional[TransientRemoteError] = None

    for attempt in range(1, max_attempts + 1):
        try:
            return call()
        except TransientRemoteError as e:
            last_error = e
            logger.warning(f"API call attempt {attempt}/{max_attempts} failed: {e.message}")
            if attempt < max_attempts:
                logger.info(f"Retrying in {delay:.1f}s")
                sleep(delay)
                delay *= 2

    raise last_error


class BaseAPIConnector(ABC):
    """Abstract base class for remote store connectors"""

    def __init__(
        self,
        config: APIConfig,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self.config = config
        self.session = session or requests.Session()
        self._sleep = sleep

        # Set default headers
        self.session.headers.update({"Content-Type": "application/json"})
        if config.headers:
            self.session.headers.update(config.headers)

        # Add API key to headers if provided
        if config.api_key:
            self._set_auth_header()

    @abstractmethod
    def _set_auth_header(self):
        """Set authentication header based on API requirements"""
        pass

    @abstractmethod
    def check_health(self) -> bool:
        """Report whether the remote store is reachable and healthy"""
        pass

    def _url(self, endpoint: str) -> str:
        return f"{self.config.base_url.rstrip('/')}/{endpoint.lstrip('/')}"

    def _make_request(
        self,
        endpoint: str,
        method: str = "GET",
        timeout: Optional[float] = None,
        data: Optional[Dict[str, Any]] = None,
        allow_not_found: bool = False,
    ) -> requests.Response:
        """
        Make HTTP request with error handling

        Args:
            endpoint: API endpoint (appended to base_url)
            method: HTTP method (GET, POST, etc.)
            timeout: Seconds before the request is abandoned
            data: JSON request body
            allow_not_found: Return a 404 response instead of raising

        Returns:
            Response object

        Raises:
            TransientRemoteError: On network failure, timeout or non-2xx status
        """
        url = self._url(endpoint)

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                timeout=timeout or self.config.read_timeout,
            )
        except requests.exceptions.RequestException as e:
            raise TransientRemoteError(
                f"API request failed for {self.config.api_name}: {e}",
                endpoint=f"{method} {endpoint}",
            ) from e

        if allow_not_found and response.status_code == 404:
            return response

        if not response.ok:
            message = f"HTTP {response.status_code}: {response.reason}"
            server_error = self._server_error_text(response)
            if server_error:
                message += f" - {server_error}"
            raise TransientRemoteError(
                message,
                status_code=response.status_code,
                endpoint=f"{method} {endpoint}",
            )

        return response

    @staticmethod
    def _server_error_text(response: requests.Response) -> Optional[str]:
        try:
            body = response.json()
        except ValueError:
            return None
        if isinstance(body, dict) and body.get("error"):
            return str(body["error"])
        return None

    def _json(self, response: requests.Response, endpoint: str) -> Any:
        """Decode a success body; an unreadable body counts as a transient failure"""
        try:
            return response.json()
        except ValueError as e:
            raise TransientRemoteError(
                f"Invalid JSON from {self.config.api_name}: {e}",
                status_code=response.status_code,
                endpoint=endpoint,
            ) from e

    def _with_retry(self, call: Callable[[], T]) -> T:
        return retry_api_call(
            call,
            max_attempts=self.config.max_retries,
            initial_delay=self.config.retry_delay,
            sleep=self._sleep,
        )

    def test_connection(self) -> Dict[str, Any]:
        """
        Test API connection and return status

        Returns:
            Dict with status and message
        """
        if self.check_health():
            return {
                "status": "success",
                "message": f"Successfully connected to {self.config.api_name}",
            }
        return {
            "status": "error",
            "message": f"Could not reach {self.config.api_name} at {self.config.base_url}",
        }
