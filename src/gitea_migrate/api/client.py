"""Blocking HTTP client shared by the hosting service clients."""

from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests
from loguru import logger
from pydantic import BaseModel

from .exceptions import (
    APIError,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    RateLimitError,
)
from .rate_limiter import RateLimiter

USER_AGENT = 'gitea-migrate/0.1.0'
DEFAULT_RETRY_AFTER = 60


def parse_retry_after(value: Optional[str]) -> int:
    """Seconds to wait according to a ``Retry-After`` header.

    The header holds either a number of seconds or an HTTP-date; anything
    unparseable falls back to ``DEFAULT_RETRY_AFTER``.
    """
    if value is None:
        return DEFAULT_RETRY_AFTER

    try:
        return max(0, int(value))
    except ValueError:
        pass

    try:
        retry_at = parsedate_to_datetime(value)
    except (TypeError, ValueError):
        return DEFAULT_RETRY_AFTER
    if retry_at.tzinfo is None:
        retry_at = retry_at.replace(tzinfo=timezone.utc)

    return max(0, int((retry_at - datetime.now(timezone.utc)).total_seconds()))


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


class APIClient:
    """Hosting service API client with token authentication."""

    def __init__(
        self,
        base_url: str,
        token: Optional[str] = None,
        timeout: int = 30,
        rate_limit_per_second: float = 10.0,
    ):
        """Initialize API client.

        Args:
            base_url: API root, e.g. ``https://api.github.com``
            token: Access token sent as ``Authorization: token <token>``
            timeout: Request timeout in seconds
            rate_limit_per_second: Maximum requests per second
        """
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.rate_limiter = RateLimiter(rate_limit_per_second)
        self.session = requests.Session()

        if token:
            self.session.headers.update({'Authorization': f'token {token}'})

        # Set common headers
        self.session.headers.update(
            {'Accept': 'application/json', 'User-Agent': USER_AGENT}
        )

        logger.debug(f'Initialized API client for {self.base_url}')

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response

        Returns:
            Standardized API response

        Raises:
            APIError: For various API errors
        """
        headers = dict(response.headers)

        # Handle rate limiting
        if response.status_code == 429:
            retry_after = parse_retry_after(headers.get('Retry-After'))
            raise RateLimitError(
                f'Rate limit exceeded. Retry after {retry_after} seconds',
                retry_after=retry_after,
                status_code=429,
            )

        if response.status_code in (401, 403):
            raise AuthenticationError(
                'Authentication failed', status_code=response.status_code
            )

        if response.status_code == 404:
            raise NotFoundError('Resource not found', status_code=404)

        if response.status_code == 409:
            raise ConflictError('Resource already exists', status_code=409)

        # Handle other client/server errors
        if response.status_code >= 400:
            error_data = None
            try:
                error_data = response.json()
                message = error_data.get('message', f'HTTP {response.status_code}')
            except (ValueError, AttributeError):
                message = f'HTTP {response.status_code}: {response.text}'

            raise APIError(
                f'API request failed: {message}',
                status_code=response.status_code,
                response_data=error_data,
            )

        # Parse response data
        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        return APIResponse(
            status_code=response.status_code,
            data=data,
            headers=headers,
            success=200 <= response.status_code < 300,
        )

    def _request(self, method: str, endpoint: str, **kwargs) -> APIResponse:
        url = self._build_url(endpoint)
        kwargs.setdefault('timeout', self.timeout)
        self.rate_limiter.acquire()

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.RequestException as e:
            logger.error(f'Network error during {method} request: {e}')
            raise APIError(f'Network error: {e}')

        return self._handle_response(response)

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make GET request.

        Args:
            endpoint: API endpoint
            params: Query parameters
            **kwargs: Additional request arguments

        Returns:
            API response
        """
        return self._request('GET', endpoint, params=params, **kwargs)

    def post(
        self, endpoint: str, data: Optional[Dict[str, Any]] = None, **kwargs
    ) -> APIResponse:
        """Make POST request.

        Args:
            endpoint: API endpoint
            data: Request body data, sent as JSON
            **kwargs: Additional request arguments

        Returns:
            API response
        """
        return self._request('POST', endpoint, json=data, **kwargs)

    def get_paginated(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        per_page: int = 100,
    ) -> List[Dict[str, Any]]:
        """Get all pages of a paginated endpoint.

        Pages are requested until one comes back empty.

        Args:
            endpoint: API endpoint
            params: Query parameters
            per_page: Items per page

        Returns:
            List of all items from all pages
        """
        all_items = []
        page = 1

        params = dict(params or {})
        params['per_page'] = per_page

        while True:
            params['page'] = page
            response = self.get(endpoint, params=dict(params))

            items = response.data
            if not items:
                break
            if not isinstance(items, list):
                raise APIError(
                    f'Unexpected response from {endpoint}: expected a list',
                    status_code=response.status_code,
                )

            all_items.extend(items)
            logger.debug(f'Page {page} of {endpoint}: {len(items)} items')
            page += 1

        logger.info(f'Retrieved {len(all_items)} items from {endpoint}')
        return all_items

    def test_connection(self) -> bool:
        """Test connection to the service.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response = self.get(self.connection_endpoint)
            return response.success
        except APIError as e:
            logger.error(f'Connection test failed for {self.base_url}: {e}')
            return False

    @property
    def connection_endpoint(self) -> str:
        return '/'

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.debug(f'API client session for {self.base_url} closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
