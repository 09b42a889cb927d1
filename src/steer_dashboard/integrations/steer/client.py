"""Steer API HTTP client.

Typed list/get/create/delete calls for HelmRelease and HelmTestJob
resources. The client never retries and keeps no cache; retry policy
belongs to callers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING, Any, Generic, Self, TypeVar
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from steer_dashboard.integrations.steer.exceptions import (
    SteerAPIError,
    SteerConnectionError,
    SteerDecodeError,
)
from steer_dashboard.integrations.steer.models import (
    Release,
    ResourceKind,
    SteerResource,
    TestJob,
)

if TYPE_CHECKING:
    from steer_dashboard.integrations.steer.config import SteerConnectionConfig

logger = structlog.get_logger()

R = TypeVar("R", bound=SteerResource)


class ResourceAPI(Generic[R]):
    """Operations on one resource collection, e.g. ``/helmreleases``."""

    def __init__(self, client: SteerClient, model: type[R]) -> None:
        self._client = client
        self._model = model
        self.kind: ResourceKind = model.resource_kind

    def _item_path(self, namespace: str, name: str) -> str:
        return f"{self.kind.value}/{quote(namespace, safe='')}/{quote(name, safe='')}"

    def _parse(self, data: Any, endpoint: str) -> R:
        if not isinstance(data, dict):
            raise SteerDecodeError(
                message=f"Expected a {self.kind.kind_name} document",
                endpoint=endpoint,
            )
        try:
            return self._model.from_document(data)
        except ValidationError as e:
            raise SteerDecodeError(
                message=f"Invalid {self.kind.kind_name} document: {e.error_count()} error(s)",
                endpoint=endpoint,
            ) from e

    async def list(self) -> Sequence[R]:
        """List all resources of this kind in backend order."""
        endpoint = self.kind.value
        data = await self._client.request("GET", endpoint)
        if data is None:
            return []
        if not isinstance(data, list):
            raise SteerDecodeError(
                message=f"Expected a list of {self.kind.kind_name} documents",
                endpoint=endpoint,
            )
        return [self._parse(item, endpoint) for item in data]

    async def get(self, namespace: str, name: str) -> R:
        """Fetch a single resource by identity."""
        endpoint = self._item_path(namespace, name)
        data = await self._client.request("GET", endpoint)
        return self._parse(data, endpoint)

    async def create(self, resource: R) -> R:
        """Submit a new resource and return the backend's copy of it."""
        endpoint = self.kind.value
        data = await self._client.request("POST", endpoint, json=resource.to_document())
        if data is None:
            return resource
        return self._parse(data, endpoint)

    async def delete(self, namespace: str, name: str) -> None:
        """Delete a resource by identity."""
        await self._client.request("DELETE", self._item_path(namespace, name))


class SteerClient:
    """Async HTTP client for the Steer API.

    Example:
        ```python
        from steer_dashboard.integrations.steer import SteerClient, SteerConnectionConfig

        async with SteerClient(SteerConnectionConfig()) as client:
            releases = await client.releases.list()
        ```
    """

    def __init__(
        self,
        connection_config: SteerConnectionConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the Steer API client.

        Args:
            connection_config: Connection settings (URL, timeout, SSL, token).
            transport: Optional httpx transport, used by tests.
        """
        self.connection_config = connection_config

        headers = {"Accept": "application/json"}
        if connection_config.token:
            headers["Authorization"] = f"Bearer {connection_config.token}"

        client_kwargs: dict[str, Any] = {
            "base_url": connection_config.api_url,
            "timeout": httpx.Timeout(connection_config.timeout),
            "verify": connection_config.verify_ssl,
            "headers": headers,
        }
        if transport is not None:
            client_kwargs["transport"] = transport

        self._client = httpx.AsyncClient(**client_kwargs)

        self.releases: ResourceAPI[Release] = ResourceAPI(self, Release)
        self.test_jobs: ResourceAPI[TestJob] = ResourceAPI(self, TestJob)

        logger.info(
            "Steer API client initialized",
            base_url=connection_config.api_url,
            auth="bearer" if connection_config.token else "none",
        )

    def api_for(self, kind: ResourceKind) -> ResourceAPI[Any]:
        """Return the collection API for a resource kind."""
        if kind is ResourceKind.RELEASE:
            return self.releases
        return self.test_jobs

    @staticmethod
    def _error_message(response: httpx.Response) -> tuple[str, dict[str, Any] | None]:
        """Extract the backend's error message and JSON body, if any."""
        try:
            body = response.json() if response.content else None
        except ValueError:
            body = None
        if isinstance(body, dict):
            message = body.get("message") or body.get("error")
            if message:
                return str(message), body
            return f"Steer API error: {response.status_code}", body
        text = response.text.strip()
        return text or f"Steer API error: {response.status_code}", None

    def _handle_response(self, response: httpx.Response, endpoint: str) -> Any:
        """Return the decoded body of a 2xx response.

        Raises:
            SteerAPIError: For every non-2xx status.
            SteerDecodeError: If a 2xx body is not valid JSON.
        """
        if not response.is_success:
            message, body = self._error_message(response)
            raise SteerAPIError(
                message=message,
                status_code=response.status_code,
                response_body=body,
                endpoint=endpoint,
            )

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as e:
            raise SteerDecodeError(
                message="Response body is not valid JSON",
                status_code=response.status_code,
                endpoint=endpoint,
            ) from e

    async def request(self, method: str, endpoint: str, **kwargs: Any) -> Any:
        """Make one HTTP request to the Steer API.

        Args:
            method: HTTP method (GET, POST, DELETE).
            endpoint: Path relative to the API prefix.
            **kwargs: Additional arguments to pass to httpx.

        Returns:
            Decoded JSON body, or None for empty responses.

        Raises:
            SteerConnectionError: If the backend cannot be reached.
            SteerAPIError: If the backend returns an error response.
        """
        url = f"/{endpoint.lstrip('/')}"
        log = logger.bind(method=method, endpoint=url)

        try:
            log.debug("Steer API request")
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            log.error("Steer request timeout", error=str(e))
            raise SteerConnectionError(
                message=f"Steer request timed out: {e}",
                endpoint=url,
                original_error=e,
            ) from e
        except httpx.TransportError as e:
            log.error("Steer connection error", error=str(e))
            raise SteerConnectionError(
                message=f"Failed to connect to Steer: {e}",
                endpoint=url,
                original_error=e,
            ) from e

        log.debug("Steer API response", status=response.status_code)
        return self._handle_response(response, url)

    async def aclose(self) -> None:
        """Close the HTTP client and release resources."""
        await self._client.aclose()
        logger.debug("Steer client closed")

    async def __aenter__(self) -> Self:
        """Async context manager entry."""
        return self

    async def __aexit__(self, *args: Any) -> None:
        """Async context manager exit."""
        await self.aclose()
