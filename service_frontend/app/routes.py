"""
Fixed route table of the frontend API.

Every endpoint frontend SDKs may call is declared once in FRONTEND_ROUTES,
in dispatch order. An entry either names a handler on GatewayRouteTable or
is NOT_IMPLEMENTED: a known protocol path that answers 405 on purpose, so
SDKs can tell "unsupported here" apart from "unknown path".
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional, Tuple

from fastapi import APIRouter, Depends, Request, Response
from fastapi.responses import JSONResponse
from pydantic import ValidationError as PydanticValidationError

from edge_shared.errors import ExternalServiceError
from edge_shared.logging import get_logger

from .context import build_evaluation_context, get_source_address
from .identity import CallerIdentity, require_caller_identity
from .schemas import (
    FrontendClientSchema,
    FrontendFeaturesSchema,
    FrontendMetricsSchema,
    NotImplementedSchema,
)

# Authenticated caller, no specific permission.
NONE = "NONE"

NOT_IMPLEMENTED_MESSAGE = "The frontend API does not support this endpoint."


class RouteBehavior(str, Enum):
    HANDLER = "handler"
    NOT_IMPLEMENTED = "not_implemented"


@dataclass(frozen=True)
class GatewayRoute:
    """One (method, path) entry of the route table."""

    method: str
    path: str
    behavior: RouteBehavior
    handler: Optional[str] = None
    operation_id: Optional[str] = None
    permission: str = NONE


FRONTEND_ROUTES: Tuple[GatewayRoute, ...] = (
    GatewayRoute("GET", "", RouteBehavior.HANDLER, "get_frontend_features", "getFrontendFeatures"),
    GatewayRoute("POST", "", RouteBehavior.NOT_IMPLEMENTED),
    GatewayRoute("GET", "/client/features", RouteBehavior.NOT_IMPLEMENTED),
    GatewayRoute("POST", "/client/metrics", RouteBehavior.HANDLER, "register_frontend_metrics", "registerFrontendMetrics"),
    GatewayRoute("POST", "/client/register", RouteBehavior.HANDLER, "register_frontend_client", "registerFrontendClient"),
    GatewayRoute("GET", "/health", RouteBehavior.NOT_IMPLEMENTED),
    GatewayRoute("GET", "/internal-backstage/prometheus", RouteBehavior.NOT_IMPLEMENTED),
)


class GatewayRouteTable:
    """Binds FRONTEND_ROUTES to handlers backed by the upstream services.

    ``evaluation_service`` needs ``get_features(identity, context)`` and
    ``metrics_service`` needs ``register_metrics(identity, payload,
    source_address)``.
    """

    def __init__(
        self,
        evaluation_service,
        metrics_service,
        *,
        trust_proxy_headers: bool = False,
        routes: Tuple[GatewayRoute, ...] = FRONTEND_ROUTES,
    ) -> None:
        self.evaluation_service = evaluation_service
        self.metrics_service = metrics_service
        self.trust_proxy_headers = trust_proxy_headers
        self.routes = routes
        self.logger = get_logger("frontend.routes")

    def build_router(self, prefix: str = "") -> APIRouter:
        """Return an APIRouter with every table entry registered under ``prefix``."""
        router = APIRouter(prefix=prefix)
        for route in self.routes:
            path = route.path or ("" if prefix else "/")
            extra = {"x-permission": route.permission}

            if route.behavior is RouteBehavior.NOT_IMPLEMENTED:
                router.add_api_route(
                    path,
                    self.endpoint_not_implemented,
                    methods=[route.method],
                    name=f"not_implemented:{route.method} {route.path or '/'}",
                    include_in_schema=False,
                    responses={405: {"model": NotImplementedSchema}},
                    openapi_extra=extra,
                )
                continue

            router.add_api_route(
                path,
                self._handler(route),
                methods=[route.method],
                name=route.handler,
                operation_id=route.operation_id,
                tags=["Unstable"],
                response_model_exclude_none=True,
                openapi_extra=extra,
            )
        return router

    def _handler(self, route: GatewayRoute) -> Callable[..., Any]:
        handler = getattr(self, route.handler or "", None)
        if handler is None:
            raise ValueError(f"No handler named {route.handler!r} for {route.method} {route.path or '/'}")
        return handler

    def source_address(self, request: Request) -> Optional[str]:
        return get_source_address(request, self.trust_proxy_headers)

    async def endpoint_not_implemented(
        self,
        identity: CallerIdentity = Depends(require_caller_identity),
    ) -> JSONResponse:
        return JSONResponse(status_code=405, content={"message": NOT_IMPLEMENTED_MESSAGE})

    async def get_frontend_features(
        self,
        request: Request,
        identity: CallerIdentity = Depends(require_caller_identity),
    ) -> FrontendFeaturesSchema:
        context = build_evaluation_context(request.query_params, identity, self.source_address(request))
        toggles = await self.evaluation_service.get_features(identity, context)

        try:
            return FrontendFeaturesSchema(toggles=toggles)
        except PydanticValidationError as exc:
            self.logger.error(
                "Evaluation service returned invalid toggles",
                error_count=exc.error_count()
            )
            raise ExternalServiceError(
                "evaluation",
                "invalid toggle payload",
                details={"error_count": exc.error_count()}
            ) from exc

    async def register_frontend_metrics(
        self,
        request: Request,
        metrics: FrontendMetricsSchema,
        identity: CallerIdentity = Depends(require_caller_identity),
    ) -> Response:
        # The validated model gates the request; the raw body is what gets forwarded.
        payload = await request.json()
        await self.metrics_service.register_metrics(identity, payload, self.source_address(request))
        return Response(status_code=200)

    async def register_frontend_client(
        self,
        client: FrontendClientSchema,
        identity: CallerIdentity = Depends(require_caller_identity),
    ) -> Response:
        # Registration is not supported yet, but SDKs expect a 200 here.
        return Response(status_code=200)
