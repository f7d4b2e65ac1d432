"""
HTTP transport for the qBittorrent Web API.

The SDK core only needs something with a ``send(method, endpoint, params, files)``
method; RequestsTransport implements it on top of a requests.Session, which
also keeps the SID cookie handed out by /auth/login for later calls.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional, Tuple

import requests

from .config import Config
from .exceptions import ApiError, AuthenticationError, NetworkError
from .logger import logger


class Transport(ABC):
    @abstractmethod
    def send(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, str]] = None,
        files: Optional[List[Tuple[str, Tuple[str, bytes, str]]]] = None,
    ) -> Any:
        """
        Send one call to the Web API.

        Args:
            method: "GET" or "POST"
            endpoint: Path below the API root, e.g. "/torrents/info"
            params: Wire parameters, sent as the query string for GET and form data for POST
            files: Multipart file fields

        Returns:
            Decoded JSON when the server sends JSON, otherwise the response text.

        Raises:
            NetworkError: The server could not be reached.
            AuthenticationError: The server answered 401 or 403.
            ApiError: Any other error status.
        """


class RequestsTransport(Transport):
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None,
                 session: Optional[requests.Session] = None):
        if base_url is None:
            base_url = Config().API_BASE_URL
        self.base_url = base_url.rstrip('/')
        self.timeout = Config.QBT_TIMEOUT if timeout is None else timeout
        self.session = session or requests.Session()
        # qBittorrent rejects POSTs whose Referer does not match its own origin
        self.session.headers.update({"Referer": self.base_url})

    def send(self, method, endpoint, params=None, files=None) -> Any:
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        method = method.upper()
        kwargs: Dict[str, Any] = {"timeout": self.timeout}
        if method == "GET":
            kwargs["params"] = params or {}
        else:
            kwargs["data"] = params or {}
            if files:
                kwargs["files"] = files

        logger.debug(f"{method} {url}")
        try:
            response = self.session.request(method, url, **kwargs)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else None
            detail = e.response.text.strip() if e.response is not None and e.response.text else str(e)
            logger.error(f"{method} {endpoint} failed with HTTP {status}: {detail}")
            if status in (401, 403):
                raise AuthenticationError(f"Not authorized for {endpoint}: {detail}", status) from e
            raise ApiError(f"API Error: {detail}", status) from e
        except (requests.exceptions.ConnectionError, requests.exceptions.Timeout) as e:
            logger.error(f"Could not connect to qBittorrent at {self.base_url}: {e}")
            raise NetworkError(f"Could not connect to qBittorrent at {self.base_url}") from e

        if not response.content:
            return None
        if "json" in response.headers.get("Content-Type", ""):
            try:
                return response.json()
            except ValueError as e:
                raise ApiError(f"Invalid JSON from {endpoint}", response.status_code) from e
        return response.text

    def close(self) -> None:
        self.session.close()
