"""
Evaluation service client for the frontend gateway.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import httpx

from edge_shared.errors import ExternalServiceError
from edge_shared.logging import get_logger

from ..context import EvaluationContext
from ..identity import CallerIdentity


class EvaluationClient:
    """Asks the evaluation service which toggles an identity and context see."""

    def __init__(
        self,
        base_url: str,
        *,
        timeout: float = 10.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.logger = get_logger("frontend.evaluation_client")
        self._client = httpx.AsyncClient(base_url=self.base_url, timeout=timeout, transport=transport)

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()

    async def get_features(self, identity: CallerIdentity, context: EvaluationContext) -> List[Dict[str, Any]]:
        """Return the evaluated toggle entries for ``identity`` in ``context``."""
        payload = {
            "environment": identity.environment,
            "projects": list(identity.projects),
            "context": context.to_dict(),
        }

        try:
            response = await self._client.post("/api/frontend/evaluate", json=payload)
            response.raise_for_status()
            body = response.json()
        except httpx.HTTPError as exc:
            self.logger.error("Evaluation service request failed", error=str(exc))
            raise ExternalServiceError("evaluation", str(exc)) from exc
        except ValueError as exc:
            self.logger.error("Evaluation service returned invalid JSON", error=str(exc))
            raise ExternalServiceError("evaluation", "invalid JSON response") from exc

        toggles = body.get("toggles") if isinstance(body, dict) else None
        if not isinstance(toggles, list):
            raise ExternalServiceError("evaluation", "response has no toggle list")
        return toggles
