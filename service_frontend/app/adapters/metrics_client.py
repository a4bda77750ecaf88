"""
Metrics service client for the frontend gateway.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import httpx

from edge_shared.errors import ExternalServiceError
from edge_shared.logging import get_logger

from ..identity import CallerIdentity


class MetricsClient:
    """Forwards SDK metrics to the metrics service."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger("frontend.metrics_client")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def register_metrics(
        self,
        identity: CallerIdentity,
        metrics: Dict[str, Any],
        source_address: Optional[str],
    ) -> None:
        """Send the metrics payload unchanged, tagged with the caller's environment."""
        payload = {
            "environment": identity.environment,
            "sourceAddress": source_address,
            "metrics": metrics,
        }

        try:
            response = await self._client.post("/api/frontend/metrics", json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            self.logger.error("Metrics service request failed", error=str(exc))
            raise ExternalServiceError("metrics", str(exc)) from exc
