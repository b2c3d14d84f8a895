"""
HTTP client for the CouchDB API
"""

import requests
import logging
from typing import Dict, Any, Optional
from .config import ConnectionSettings
from .exceptions import TransportError

logger = logging.getLogger(__name__)

class CouchClient:
    """Low-level HTTP transport bound to one CouchDB server"""

    def __init__(self, settings: Optional[ConnectionSettings] = None):
        """
        Initialize CouchDB client

        Args:
            settings: Connection settings (default: localhost:5984)
        """
        self.settings = settings or ConnectionSettings()
        self.base_url = self.settings.base_url.rstrip('/')
        self.timeout = self.settings.timeout
        self.session = requests.Session()
        self.session.headers.update({
            "Accept": "application/json"
        })
        if self.settings.auth:
            self.session.auth = self.settings.auth

    def _request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Optional[bytes] = None
    ) -> bytes:
        """
        Make HTTP request to the server

        Args:
            method: HTTP method (GET, POST, PUT, DELETE)
            path: Path relative to the base URL
            params: Query parameters
            body: Encoded request body

        Returns:
            Raw response body, whatever the status code

        Raises:
            TransportError: When no response could be obtained
        """
        url = f"{self.base_url}{path}"

        # Prepare headers
        headers = {}
        if body is not None:
            headers["Content-Type"] = "application/json"

        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                data=body,
                headers=headers,
                timeout=self.timeout
            )
        except requests.exceptions.Timeout:
            raise TransportError(f"{method} {path}: request timeout", status_code=408)
        except requests.exceptions.ConnectionError as e:
            raise TransportError(f"{method} {path}: connection failed: {str(e)}", status_code=503)
        except requests.exceptions.RequestException as e:
            raise TransportError(f"{method} {path}: request failed: {str(e)}")

        logger.debug(f"{method} {path} -> {response.status_code}")
        return response.content

    def get(self, path: str = "/", params: Optional[Dict[str, Any]] = None) -> bytes:
        """Make GET request"""
        return self._request("GET", path, params=params)

    def post(self, path: str, body: bytes) -> bytes:
        """Make POST request"""
        return self._request("POST", path, body=body)

    def put(self, path: str, body: bytes) -> bytes:
        """Make PUT request"""
        return self._request("PUT", path, body=body)

    def delete(self, path: str, params: Optional[Dict[str, Any]] = None) -> bytes:
        """Make DELETE request"""
        return self._request("DELETE", path, params=params)

    def close(self):
        """Release the underlying session"""
        self.session.close()
