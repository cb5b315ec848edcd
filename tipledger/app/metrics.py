"""
Métriques Prometheus pour l'application.

Ce module définit les métriques HTTP et métier (pourboires, avis, registre) exposées sur `/metrics`.
"""

import time

from fastapi import APIRouter, Request
from prometheus_client import (
    CONTENT_TYPE_LATEST,
    Counter,
    Histogram,
    generate_latest,
)
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

metrics_router = APIRouter()

REQUEST_COUNT = Counter(
    "http_requests_total", "Total HTTP requests", ["method", "route", "status"]
)
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds", "Latency of HTTP requests", ["route"]
)

# Business metrics
TIPS_RECORDED = Counter(
    "tips_recorded_total",
    "Total tips recorded in the ledger",
)
REVIEWS_ATTACHED = Counter(
    "reviews_attached_total",
    "Total reviews attached to tips",
    ["visibility"],
)
REVIEWS_PUBLISHED = Counter(
    "reviews_published_total",
    "Promotion candidates handed to the review publication service",
    ["result"],
)
ROSTER_ADDITIONS = Counter(
    "roster_additions_total",
    "Roster add-worker requests",
    ["outcome"],
)


@metrics_router.get("/metrics")
def metrics():
    """
    Expose les métriques Prometheus au format texte.

    Returns:
        Response: Réponse HTTP contenant les métriques au format Prometheus.
    """
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


class PrometheusMiddleware(BaseHTTPMiddleware):
    """
    Middleware Prometheus pour mesurer les métriques HTTP.

    Le label `route` utilise le gabarit de route (`/workers/{worker_id}/tips`) plutôt que le chemin
    brut, pour borner la cardinalité.
    """

    async def dispatch(self, request: Request, call_next):
        start = time.perf_counter()
        response: Response = await call_next(request)
        route_obj = request.scope.get("route")
        route = getattr(route_obj, "path", None) or "unmatched"
        REQUEST_COUNT.labels(request.method, route, str(response.status_code)).inc()
        REQUEST_LATENCY.labels(route).observe(time.perf_counter() - start)
        return response
