"""
Frontend token authentication for the gateway.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple

from fastapi import Request

from edge_shared.errors import AuthenticationError
from edge_shared.logging import get_logger, set_user_context

ALL_PROJECTS = "*"
FRONTEND_TOKEN_TYPE = "frontend"


@dataclass(frozen=True)
class CallerIdentity:
    """Authenticated but unprivileged caller of the frontend API."""

    username: str
    environment: str
    projects: Tuple[str, ...] = (ALL_PROJECTS,)
    token_type: str = FRONTEND_TOKEN_TYPE


def parse_frontend_token(token: str) -> CallerIdentity:
    """Parse a ``<project>:<environment>.<secret>`` token into an identity.

    Raises ValueError when the token does not have that shape.
    """
    scope, sep, secret = token.partition(".")
    project, colon, environment = scope.partition(":")
    if not sep or not colon or not secret or not project or not environment:
        raise ValueError("Frontend tokens must look like '<project>:<environment>.<secret>'")
    return CallerIdentity(
        username=scope,
        environment=environment,
        projects=(project,),
    )


class ApiTokenAuthenticator:
    """Resolves the Authorization header against the configured frontend tokens."""

    def __init__(self, tokens: Iterable[str]) -> None:
        self.logger = get_logger("frontend.identity")
        self._identities: Dict[str, CallerIdentity] = {}
        for token in tokens:
            self._identities[token] = parse_frontend_token(token)

    def __len__(self) -> int:
        return len(self._identities)

    def resolve(self, token: str) -> Optional[CallerIdentity]:
        return self._identities.get(token)

    async def authenticate(self, request: Request) -> CallerIdentity:
        """Authenticate the request or raise AuthenticationError."""
        authorization = request.headers.get("Authorization")
        if not authorization:
            raise AuthenticationError("Missing Authorization header")

        token = authorization.strip()
        if token.startswith("Bearer "):
            token = token[7:].strip()

        identity = self.resolve(token)
        if identity is None:
            self.logger.warning("Rejected unknown frontend token", token_prefix=token[:8] + "...")
            raise AuthenticationError("Invalid frontend token")

        set_user_context(user_id=identity.username, environment=identity.environment)
        return identity


async def require_caller_identity(request: Request) -> CallerIdentity:
    """FastAPI dependency returning the caller identity for the request."""
    authenticator = getattr(request.app.state, "authenticator", None)
    if authenticator is None:
        raise AuthenticationError("No authenticator configured")
    return await authenticator.authenticate(request)
