"""Tests pour les métriques Prometheus.

Ce module teste que les métriques HTTP et métier sont exposées via l'endpoint /metrics.
"""

from tipledger.core.http_constants import HTTP_CREATED, HTTP_OK


def test_metrics_exposed(client):
    """Teste que l'endpoint /metrics expose les métriques Prometheus."""
    worker = client.post(
        "/profiles/workers", json={"name": "Asha", "email": "asha@example.com"}
    ).json()
    r = client.post("/tips", json={"worker_id": worker["id"], "amount": "10"})
    assert r.status_code == HTTP_CREATED

    r = client.get("/metrics")
    assert r.status_code == HTTP_OK
    assert b"http_requests_total" in r.content
    assert b"tips_recorded_total" in r.content
    # le label de route est le gabarit, pas le chemin brut
    assert b'route="/profiles/workers"' in r.content
    assert worker["id"].encode() not in r.content
