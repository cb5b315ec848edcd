"""
Endpoint de santé pour vérifier la disponibilité de l'API et des stockages.

Expose `/health` pour signaler l'état général de l'application, du registre et de l'annuaire.
"""

from fastapi import APIRouter, Depends

from tipledger.api.deps import get_container
from tipledger.core.container import Container

router = APIRouter(tags=["health"])
container_dep = Depends(get_container)


@router.get("/health")
def health(c: Container = container_dep):
    """Vérifie la disponibilité de l'API et indique les backends de stockage actifs."""
    return {
        "status": "ok",
        "storage": getattr(c, "storage_backend", "unknown"),
        "directory": getattr(c, "directory_backend", "unknown"),
        "review_publication": c.publisher is not None,
    }
