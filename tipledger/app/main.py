"""
Application principale FastAPI.

Ce module assemble tous les composants de l'application : middlewares, routes, métriques, gestion
des erreurs du domaine et conteneur de dépendances.

Responsabilités du module:
- Initialiser le logging structuré
- Construire l'application FastAPI avec son titre/debug
- Ajouter les middlewares (request id, timing, Prometheus)
- Monter les routers (santé, profils, registre, pourboires, tableaux de bord)
"""

from __future__ import annotations

import uvicorn
from fastapi import FastAPI

from tipledger.api.errors import register_error_handlers
from tipledger.api.routes_dashboard import router as dashboard_router
from tipledger.api.routes_health import router as health_router
from tipledger.api.routes_profiles import router as profiles_router
from tipledger.api.routes_roster import router as roster_router
from tipledger.api.routes_tips import router as tips_router
from tipledger.app.metrics import PrometheusMiddleware, metrics_router
from tipledger.core.container import Container
from tipledger.core.container import container as default_container
from tipledger.core.logging import setup_logging
from tipledger.middlewares.request_id import RequestIDMiddleware
from tipledger.middlewares.timing import TimingMiddleware


def create_app(container: Container | None = None) -> FastAPI:
    """
    Construit et retourne l'application FastAPI prête à l'usage.

    Args:
        container: Conteneur de dépendances; le singleton du module `core.container` par défaut.
    """
    container = container or default_container
    settings = container.settings
    setup_logging(settings.LOG_LEVEL, json_logs=settings.APP_ENV == "prod")
    app = FastAPI(title=settings.APP_NAME, debug=settings.APP_DEBUG)
    app.state.container = container
    app.add_middleware(PrometheusMiddleware)
    app.add_middleware(TimingMiddleware)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)
    app.include_router(health_router)
    app.include_router(profiles_router)
    app.include_router(roster_router)
    app.include_router(tips_router)
    app.include_router(dashboard_router)
    app.include_router(metrics_router)
    return app


app = create_app()


def run() -> None:
    """Lance le serveur uvicorn avec l'hôte et le port configurés."""
    settings = default_container.settings
    uvicorn.run(app, host=settings.APP_HOST, port=settings.APP_PORT)
