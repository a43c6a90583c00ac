"""
Redfish client for making API requests with session auth and error parsing.
"""

import json
import sys
from datetime import datetime
from typing import Any, Dict, Optional, Tuple, Union
from urllib.parse import urljoin

import requests

from .constants import DEFAULT_HEADERS, DEFAULT_MAX_RESPONSE_SIZE, DEFAULT_TIMEOUT
from .errors import TransportError


class RedfishClient:
    """Client for reading resources from, and posting actions to, a Redfish service."""

    def __init__(self, endpoint: str, auth: Optional[Union[Tuple[str, str], Dict[str, str]]] = None,
                 verbose: bool = False, verify: bool = True, timeout: float = DEFAULT_TIMEOUT,
                 verbose_errors: bool = False, max_response_size: int = DEFAULT_MAX_RESPONSE_SIZE):
        self.endpoint = endpoint.rstrip('/')
        self.auth = auth
        self.verbose = verbose
        self.timeout = timeout
        self.verbose_errors = verbose_errors
        self.max_response_size = max_response_size
        self.session = requests.Session()
        self.session.verify = verify

        # Handle different auth types
        if auth:
            if isinstance(auth, tuple) and len(auth) == 2:
                # Basic auth
                self.session.auth = auth
                self.auth_type = "basic"
            elif isinstance(auth, dict):
                # Session token headers, e.g. {"X-Auth-Token": "..."}
                self.session.headers.update(auth)
                self.auth_type = "token"
            else:
                raise ValueError("Auth must be either (username, password) tuple or headers dict")
        else:
            self.auth_type = "none"
        self.session.headers.update(DEFAULT_HEADERS)

    def __enter__(self) -> "RedfishClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _log_verbose(self, message: str):
        """Prints message to stderr only if verbose mode is enabled."""
        if self.verbose:
            timestamp = datetime.now().strftime('%Y-%m-%d %H:%M:%S.%f')[:-3]
            print(f"[{timestamp} Client VERBOSE] {message}", file=sys.stderr)

    def _url(self, uri: str) -> str:
        """Resolve a resource URI against the service endpoint."""
        if uri.startswith(('http://', 'https://')):
            return uri
        return urljoin(self.endpoint + '/', uri)

    def _make_request(self, method: str, uri: str, **kwargs) -> requests.Response:
        """Internal helper to make requests, turning transport failures into TransportError."""
        url = self._url(uri)
        kwargs.setdefault('timeout', self.timeout)
        self._log_verbose(f"{method} {url}")
        try:
            response = self.session.request(method, url, **kwargs)
        except requests.exceptions.RequestException as e:
            self._log_verbose(f"Request failed with exception: {e}")
            raise TransportError(f"{method} {uri} failed: {e}", uri=uri) from e

        self._log_verbose(f"{method} {url} -> {response.status_code} ({len(response.content)} bytes)")
        self._check_response(response, uri)
        return response

    def _check_response(self, response: requests.Response, uri: str):
        """Raise TransportError with the service's own message on HTTP errors."""
        try:
            response.raise_for_status()
        except requests.exceptions.HTTPError as http_err:
            error_message = self._parse_redfish_error(response)
            # Error, print regardless of verbosity
            print(f"ERROR: Redfish HTTP Error: {response.status_code} {response.reason}. Message: {error_message}", file=sys.stderr)
            raise TransportError(f"Redfish request failed ({response.status_code}): {error_message}",
                                 uri=uri, status_code=response.status_code) from http_err

        if self.max_response_size and len(response.content) > self.max_response_size:
            raise TransportError(f"Response size ({len(response.content)} bytes) exceeds maximum allowed ({self.max_response_size} bytes)",
                                 uri=uri, status_code=response.status_code)

    def _parse_redfish_error(self, response: requests.Response) -> str:
        """Attempt to extract a meaningful error message from a Redfish error response."""
        if not response.content:
            return f"HTTP {response.status_code}: {response.reason}"

        try:
            error_data = response.json()
        except ValueError:
            # Not JSON, return first 500 chars of text
            text = response.text.strip()
            return text[:500] if text else f"HTTP {response.status_code}: {response.reason}"

        error_obj = error_data.get('error') if isinstance(error_data, dict) else None
        if not isinstance(error_obj, dict):
            return json.dumps(error_data)[:1000]

        message = error_obj.get('message') or f"HTTP {response.status_code}: {response.reason}"
        if not self.verbose_errors:
            return str(message)

        # Verbose errors enabled - append the extended info messages
        details = []
        for info in error_obj.get('@Message.ExtendedInfo') or []:
            if isinstance(info, dict):
                detail = info.get('Message') or info.get('MessageId')
                if detail:
                    details.append(str(detail))
        if details:
            return f"{message} ({'; '.join(details)})"
        if error_obj.get('code'):
            return f"{error_obj['code']}: {message}"
        return str(message)

    def get(self, uri: str) -> bytes:
        """Read a resource and return the response body unmodified."""
        return self._make_request('GET', uri).content

    def post(self, uri: str, payload: Dict[str, Any]) -> requests.Response:
        """POST a JSON payload, e.g. to invoke an action target."""
        return self._make_request('POST', uri, json=payload)

    def close(self):
        self.session.close()
