"""
Base HTTP client for the Scale Dynamix API.

Handles session management, the API key header, TLS settings and
response envelope validation.
"""

import logging
import ssl
from typing import Optional, Dict, Any

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .. import __version__
from ..config import ScaleDynamixConfig
from ..exceptions import (
    APIError,
    AuthenticationError,
    MalformedResponseError,
    NotAuthenticatedError,
    UnimplementedError,
)

logger = logging.getLogger(__name__)

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


class TLSAdapter(HTTPAdapter):
    """HTTP adapter that negotiates at most TLS 1.3."""

    def init_poolmanager(self, *args, **kwargs):
        kwargs["ssl_maximum_version"] = ssl.TLSVersion.TLSv1_3
        return super().init_poolmanager(*args, **kwargs)


class HTTPClient:
    """
    Base HTTP client for the Scale Dynamix API.

    Handles:
    - Session lifecycle (open on login, close on logout)
    - The ``Key`` authentication header
    - Envelope validation: ``{"success": bool, "result": ...}``
    """

    def __init__(self, config: Optional[ScaleDynamixConfig] = None):
        """
        Initialize the HTTP client.

        Args:
            config: Optional configuration. Uses defaults if not provided.
        """
        self.config = config or ScaleDynamixConfig()
        self._session: Optional[requests.Session] = None
        self._api_key: str = ""

    @property
    def is_open(self) -> bool:
        """Whether a session with an API key is currently established."""
        return self._session is not None

    @property
    def api_key(self) -> str:
        """The API key of the open session, or an empty string."""
        return self._api_key

    def open(self, api_key: str) -> None:
        """
        Create the HTTP session for an API key.

        Args:
            api_key: Scale Dynamix API key, sent as the ``Key`` header
        """
        session = requests.Session()

        if self.config.max_retries > 0:
            retry_strategy = Retry(
                total=self.config.max_retries,
                backoff_factor=1,
                status_forcelist=[429, 502, 503, 504],
                allowed_methods=["GET"],
            )
            adapter = TLSAdapter(max_retries=retry_strategy)
        else:
            adapter = TLSAdapter()
        session.mount("https://", adapter)
        session.mount("http://", adapter)

        session.headers.update({
            "User-Agent": f"scaledynamix/{__version__}",
            "Accept": "application/json",
            "Key": api_key,
        })

        self._api_key = api_key
        self._session = session

    def ensure_open(self) -> requests.Session:
        """Return the current session or raise NotAuthenticatedError."""
        if self._session is None:
            raise NotAuthenticatedError(
                "API not available; you must login() first"
            )
        return self._session

    def _handle_response(self, response: requests.Response, method: str, url: str) -> Any:
        """Validate the response envelope and return its ``result`` member."""
        logger.debug(f"Response: {response.status_code} for {method} {url}")

        if response.status_code == 401:
            raise AuthenticationError(f"You are not authorized to {method} {url}")

        try:
            body = response.json()
        except ValueError:
            raise MalformedResponseError(
                f"Unexpected API response to {method} {url}",
                status_code=response.status_code,
                details="response body is not JSON"
            )

        if not isinstance(body, dict) or not isinstance(body.get("success"), bool):
            raise MalformedResponseError(
                f"Unexpected API response to {method} {url}",
                status_code=response.status_code,
                response_data=body
            )

        if body["success"] is not True:
            logger.warning(f"API request failed: {method} {url} -> {response.status_code}")
            raise APIError(
                f"API request failed for {method} {url}; received {body!r}",
                status_code=response.status_code,
                response_data=body
            )

        return body.get("result")

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Make an API request.

        Args:
            method: HTTP method (GET, POST, PUT or DELETE)
            path: API path relative to the versioned endpoint, e.g. ``sites/42``
            params: Query parameters for GET, form fields otherwise

        Returns:
            The ``result`` member of the response envelope
        """
        method = method.upper()
        if method not in SUPPORTED_METHODS:
            raise UnimplementedError(f"Unsupported API request type: {method}")

        session = self.ensure_open()
        url = self.config.api_url(path)

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        logger.debug(f"Request: {method} {url}")

        try:
            if method == "GET":
                response = session.request(
                    method=method,
                    url=url,
                    params=params,
                    timeout=self.config.timeout,
                    verify=self.config.verify_ssl,
                )
            else:
                response = session.request(
                    method=method,
                    url=url,
                    data=params,
                    timeout=self.config.timeout,
                    verify=self.config.verify_ssl,
                )
        except requests.exceptions.ConnectionError as e:
            raise APIError(f"Connection failed: {e}")
        except requests.exceptions.Timeout as e:
            raise APIError(f"Request timed out: {e}")
        except requests.exceptions.RequestException as e:
            raise APIError(f"Request failed: {e}")

        return self._handle_response(response, method, url)

    def close(self) -> None:
        """Close the HTTP session and forget the API key."""
        if self._session:
            self._session.close()
        self._session = None
        self._api_key = ""
