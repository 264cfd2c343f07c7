"""Base GitLab client mixin with HTTP primitives."""

import logging
from typing import Any
from urllib.parse import quote

import httpx

from gitlab_auto_mr.errors import AuthenticationError, ConfigurationError, NotFoundError, TransportError
from gitlab_auto_mr.models import Project

logger = logging.getLogger(__name__)

# Maximum length for response bodies carried in errors and logs
MAX_ERROR_DETAIL_LENGTH = 500


class BaseClientMixin:
    """Base mixin providing HTTP primitives and initialization."""

    token: str
    base_url: str
    api_url: str
    client: httpx.Client

    def __init__(self, token: str, base_url: str, insecure: bool = False, timeout: float = 30.0):
        """Initialize GitLab API client.

        Args:
            token: GitLab personal, project or CI access token
            base_url: GitLab instance URL (scheme and host)
            insecure: Skip TLS certificate verification
            timeout: Per-request timeout in seconds
        """
        self.token = token
        self.base_url = (base_url or "").rstrip("/")

        self._validate_configuration()

        self.api_url = f"{self.base_url}/api/v4"
        headers = {"PRIVATE-TOKEN": self.token, "Content-Type": "application/json"}
        self.client = httpx.Client(
            base_url=self.api_url,
            headers=headers,
            timeout=timeout,
            verify=not insecure,
        )
        if insecure:
            logger.warning("TLS certificate verification is disabled")
        logger.debug(f"GitLab client initialized for {self.base_url}")

    def _validate_configuration(self) -> None:
        """Validate token and URL configuration."""
        if not self.token:
            raise ConfigurationError("a GitLab access token is required")

        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"GitLab URL must start with http:// or https://, got: {self.base_url}")

    @staticmethod
    def _encode_project_id(project_id: str | int) -> str:
        """Encode project ID or path for use in a URL path."""
        return quote(str(project_id), safe="")

    @staticmethod
    def _check_response(method: str, endpoint: str, response: httpx.Response, expected: int = 200) -> None:
        """Raise the matching GitLabError when ``response`` is not ``expected``."""
        if response.status_code == expected:
            return

        body = response.text[:MAX_ERROR_DETAIL_LENGTH] if response.text else ""
        logger.error(f"GitLab API error for {method} {endpoint}: {response.status_code} - {body[:200]}")

        if response.status_code == 401:
            raise AuthenticationError("unauthorized access, check your access token is valid")
        if response.status_code == 404:
            raise NotFoundError(f"{endpoint} not found")
        raise TransportError(f"HTTP {response.status_code}: {body}", status_code=response.status_code, body=body)

    def _request(
        self,
        method: str,
        endpoint: str,
        expected: int = 200,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> httpx.Response:
        try:
            logger.debug(f"{method} {endpoint} with params={params}")
            response = self.client.request(method, endpoint, params=params, json=json)
        except httpx.RequestError as e:
            logger.error(f"Network error for {method} {endpoint}: {e}")
            raise TransportError(f"cannot reach GitLab at {self.base_url}: {e}") from e

        self._check_response(method, endpoint, response, expected)
        return response

    @staticmethod
    def _json(method: str, endpoint: str, response: httpx.Response) -> Any:
        """Decode a successful response body, which GitLab always sends as JSON."""
        try:
            return response.json()
        except ValueError as e:
            body = response.text[:MAX_ERROR_DETAIL_LENGTH]
            logger.error(f"Non-JSON response for {method} {endpoint}: {response.status_code} - {body[:200]}")
            raise TransportError(
                f"invalid JSON from GitLab for {method} {endpoint}: {e}",
                status_code=response.status_code,
                body=body,
            ) from e

    def get(self, endpoint: str, params: dict[str, Any] | None = None) -> Any:
        """GET request to GitLab API with error handling."""
        return self._json("GET", endpoint, self._request("GET", endpoint, params=params))

    def post(self, endpoint: str, data: dict[str, Any], expected: int = 201) -> Any:
        """POST request to GitLab API with error handling."""
        return self._json("POST", endpoint, self._request("POST", endpoint, expected=expected, json=data))

    def put(self, endpoint: str, data: dict[str, Any], expected: int = 200) -> Any:
        """PUT request to GitLab API with error handling."""
        return self._json("PUT", endpoint, self._request("PUT", endpoint, expected=expected, json=data))

    def get_paginated(
        self, endpoint: str, params: dict[str, Any] | None = None, per_page: int = 100, max_pages: int = 100
    ) -> list[Any]:
        """GET request with pagination support and safety limits.

        Args:
            endpoint: API endpoint to call
            params: Query parameters
            per_page: Results per page (max 100, GitLab limit)
            max_pages: Maximum number of pages to fetch (prevents infinite loops)

        Returns:
            List of results from all pages, in API order
        """
        params = dict(params or {})
        params["per_page"] = min(per_page, 100)  # GitLab maximum is 100
        params["page"] = 1

        all_results: list[Any] = []
        pages_fetched = 0
        truncated = False

        while pages_fetched < max_pages:
            response = self._request("GET", endpoint, params=params)
            results = self._json("GET", endpoint, response)

            if not results:
                break

            all_results.extend(results)
            pages_fetched += 1

            if not response.headers.get("x-next-page"):
                break

            if pages_fetched >= max_pages:
                truncated = True
                break

            params["page"] += 1

        if truncated:
            logger.warning(f"Hit max_pages limit ({max_pages}) for {endpoint}. Results may be incomplete.")

        logger.debug(f"Fetched {len(all_results)} results from {pages_fetched} pages for {endpoint}")
        return all_results

    def close(self) -> None:
        self.client.close()

    def get_project(self, project_id: str | int) -> Project:
        """Get a specific project by ID or path."""
        encoded_id = self._encode_project_id(project_id)
        return self.get(f"/projects/{encoded_id}")
