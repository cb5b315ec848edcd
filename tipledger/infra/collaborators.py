"""Adaptateurs simulés pour les collaborateurs externes (paiement, publication d'avis).

Ils remplacent la passerelle de paiement et l'API de publication d'avis en dev/tests: un délai
configurable imite la latence réseau et aucune donnée ne quitte le processus.
"""

from __future__ import annotations

import time
import uuid
from decimal import Decimal

import structlog

from tipledger.domain.collaborators import PaymentAuthorization
from tipledger.domain.entities import TipRecord, WorkerProfile


class SimulatedPaymentGateway:
    """Passerelle de paiement simulée: approuve tout montant positif."""

    def __init__(self, delay_ms: int = 0) -> None:
        self.delay_ms = delay_ms
        self._log = structlog.get_logger(__name__).bind(component="payment_gateway")

    def authorize(
        self, worker_id: str, amount: Decimal, reference: str | None = None
    ) -> PaymentAuthorization:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)
        ref = reference or f"pay_{uuid.uuid4().hex[:16]}"
        if amount <= 0:
            return PaymentAuthorization(approved=False, reference=ref, reason="invalid_amount")
        self._log.debug("payment_authorized", worker_id=worker_id, reference=ref)
        return PaymentAuthorization(approved=True, reference=ref)


class LoggingReviewPublisher:
    """Publication d'avis simulée: journalise l'avis et retourne une référence fictive."""

    def __init__(self, delay_ms: int = 0) -> None:
        self.delay_ms = delay_ms
        self._log = structlog.get_logger(__name__).bind(component="review_publisher")

    def publish(self, worker: WorkerProfile, tip: TipRecord) -> str:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)
        self._log.info(
            "review_publication_simulated",
            tip_id=tip.id,
            worker=worker.name,
            rating=tip.rating,
        )
        return f"sim-review-{tip.id}"
