"""
Frontend gateway package for flag-edge.

The gateway serves evaluated feature toggles to browser and edge SDKs that
authenticate with low-trust frontend tokens.

Structure:
- app.main: FastAPI service wiring (config, adapters, routes, CORS).
- app.routes: the fixed gateway route table and its handlers.
- app.context: evaluation context derivation from a request.
- app.identity: frontend token authentication and caller identity.
- app.schemas: request/response models.
- app.cors: CORS gate scoped to the gateway prefix.
- app.adapters: HTTP clients for the evaluation and metrics services.
"""
