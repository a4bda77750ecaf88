"""
Frontend gateway service for flag-edge.
"""

from typing import Optional

from edge_shared.base_service import BaseService
from edge_shared.config import ServiceConfig

from .adapters import EvaluationClient, MetricsClient
from .cors import install_cors
from .identity import ApiTokenAuthenticator
from .routes import GatewayRouteTable


class FrontendService(BaseService):
    """Frontend API gateway service implementation."""

    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        *,
        evaluation_service=None,
        metrics_service=None,
    ):
        super().__init__("frontend", 8000, config)

        self.authenticator = ApiTokenAuthenticator(self.config.frontend_api_tokens)
        if not len(self.authenticator):
            self.logger.warning("No frontend API tokens configured; every request will be rejected")

        self._owned_clients = []
        if evaluation_service is None:
            evaluation_service = EvaluationClient(
                self.config.evaluation_service_url,
                timeout=self.config.upstream_timeout_seconds,
            )
            self._owned_clients.append(evaluation_service)
        if metrics_service is None:
            metrics_service = MetricsClient(
                self.config.metrics_service_url,
                timeout=self.config.upstream_timeout_seconds,
            )
            self._owned_clients.append(metrics_service)

        self.evaluation_service = evaluation_service
        self.metrics_service = metrics_service
        self.route_table = GatewayRouteTable(
            evaluation_service,
            metrics_service,
            trust_proxy_headers=self.config.trust_proxy_headers,
        )

        self.app.state.authenticator = self.authenticator
        self.app.include_router(self.route_table.build_router(self.config.frontend_api_prefix))
        self.cors_enabled = install_cors(
            self.app,
            self.config.frontend_api_prefix,
            self.config.frontend_api_origins,
        )

        @self.app.on_event("shutdown")
        async def _shutdown():
            for client in self._owned_clients:
                await client.close()

        # Expose service instance via app state for introspection/testing
        self.app.state.frontend_service = self


def create_app(config: Optional[ServiceConfig] = None, **services):
    """Create the frontend gateway FastAPI application."""
    return FrontendService(config, **services).app


def main() -> None:
    FrontendService().run()


if __name__ == "__main__":
    main()
