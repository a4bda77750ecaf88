"""
Evaluation context derivation for frontend requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional

from fastapi import Request

from .identity import CallerIdentity

REMOTE_ADDRESS = "remoteAddress"
ENVIRONMENT = "environment"


@dataclass(frozen=True)
class EvaluationContext:
    """Per-request context handed to the evaluation service."""

    environment: str
    remote_address: Optional[str] = None
    fields: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, str]:
        context = dict(self.fields)
        if self.remote_address:
            context[REMOTE_ADDRESS] = self.remote_address
        context[ENVIRONMENT] = self.environment
        return context


def build_evaluation_context(
    query: Mapping[str, str],
    identity: CallerIdentity,
    source_address: Optional[str] = None,
) -> EvaluationContext:
    """Build the evaluation context for a request.

    Query pairs are copied as-is. ``remoteAddress`` keeps the caller's value
    when it is non-empty and otherwise falls back to ``source_address``.
    ``environment`` always comes from the authenticated identity; a value
    supplied in the query is dropped.
    """
    fields = {key: value for key, value in query.items()}
    remote_address = fields.pop(REMOTE_ADDRESS, None) or source_address
    fields.pop(ENVIRONMENT, None)

    return EvaluationContext(
        environment=identity.environment,
        remote_address=remote_address or None,
        fields=fields,
    )


def get_source_address(request: Request, trust_proxy_headers: bool = False) -> Optional[str]:
    """Return the transport-observed address of the caller.

    Forwarding headers are honored only when the deployment sits behind a
    trusted proxy.
    """
    if trust_proxy_headers:
        forwarded_for = request.headers.get("X-Forwarded-For")
        if forwarded_for:
            return forwarded_for.split(",")[0].strip()
        real_ip = request.headers.get("X-Real-IP")
        if real_ip:
            return real_ip
    if request.client:
        return request.client.host
    return None
