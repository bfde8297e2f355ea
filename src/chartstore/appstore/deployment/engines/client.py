"""
HTTP client for deployment engine APIs.

Both engines (direct apply and GitOps) speak JSON over HTTP; this wraps an
httpx AsyncClient and maps failures onto chartstore exceptions.
"""

from typing import Any

import httpx
import structlog

from ....exceptions import ConfigurationError, DeploymentEngineError, ResourceTreeNotFoundError

logger = structlog.get_logger(__name__)


class DeploymentEngineClient:
    """Async JSON client for one deployment engine endpoint."""

    def __init__(
        self,
        base_url: str | None = None,
        token: str | None = None,
        verify_ssl: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the client.

        Args:
            base_url: Engine server URL (e.g., https://helm-gateway.internal)
            token: Bearer token
            verify_ssl: Whether to verify SSL certificates
            timeout: Request timeout in seconds
            transport: Optional httpx transport (mock transports in tests)
        """
        self.base_url = base_url.rstrip("/") if base_url else None
        self.token = token
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def is_configured(self) -> bool:
        return self.base_url is not None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if not self.is_configured:
            raise ConfigurationError("Deployment engine URL is not configured")

        if self._client is None or self._client.is_closed:
            headers = {
                "Content-Type": "application/json",
                "Accept": "application/json",
            }
            if self.token:
                headers["Authorization"] = f"Bearer {self.token}"

            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers=headers,
                verify=self.verify_ssl,
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )

        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        data: dict[str, Any] | None = None,
        params: dict[str, Any] | None = None,
        token: str | None = None,
        resource_tree: bool = False,
    ) -> dict[str, Any]:
        """
        Make an HTTP request to the engine API.

        Args:
            method: HTTP method
            path: API path
            data: JSON body
            params: Query parameters
            token: Caller token overriding the configured one
            resource_tree: Map a 404 to ResourceTreeNotFoundError

        Returns:
            Response JSON, or an empty dict for 204 No Content

        Raises:
            DeploymentEngineError: On request failure
        """
        client = await self._get_client()
        headers = {"Authorization": f"Bearer {token}"} if token else None

        try:
            response = await client.request(
                method=method,
                url=path,
                json=data,
                params=params,
                headers=headers,
            )
        except httpx.TimeoutException as e:
            logger.error("Deployment engine request timeout", path=path, error=str(e))
            raise DeploymentEngineError(f"Request timeout: {path}") from e
        except httpx.RequestError as e:
            logger.error("Deployment engine request error", path=path, error=str(e))
            raise DeploymentEngineError(f"Request failed: {str(e)}") from e

        if response.status_code == 404 and resource_tree:
            raise ResourceTreeNotFoundError(f"Resource tree not found: {path}")

        if response.status_code >= 400:
            error_detail = response.text
            try:
                error_json = response.json()
                if isinstance(error_json, dict):
                    error_detail = error_json.get("detail", str(error_json))
            except ValueError:
                pass

            raise DeploymentEngineError(
                f"Deployment engine error: {error_detail}",
                status_code=response.status_code,
                context={"path": path, "method": method},
            )

        if response.status_code == 204 or not response.content:
            return {}

        return response.json()
