"""Cycle de vie d'un pourboire: paiement, puis note/avis facultatif.

Machine à états par enregistrement (`TipRecord.state`):
- CREATED (initial): montant et travailleur fixés, ni note ni avis;
- RATED (terminal): note présente, avis facultatif.

La transition se fait via le registre (`LedgerStore.attach_review`); la visibilité de l'avis est
ensuite décidée par `classify` et seuls les candidats à la promotion sont transmis au service de
publication.
"""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import urlencode

import structlog
from pydantic import BaseModel

from tipledger.domain.collaborators import PaymentAuthorizer, ReviewPublisher
from tipledger.domain.entities import TipRecord, WorkerProfile
from tipledger.domain.errors import PaymentDeclined, TipNotFound, UpstreamError
from tipledger.domain.ledger import LedgerStore, normalize_customer_name, parse_amount
from tipledger.domain.visibility import Visibility, classify, rating_label


def tip_link(base_url: str, worker_id: str) -> str:
    """Lien encodé dans le QR code d'un travailleur."""
    return f"{base_url.rstrip('/')}/tip/{worker_id}"


def review_link(base_url: str, worker_id: str, amount: Decimal, customer_name: str) -> str:
    """Lien vers la page d'avis après paiement (ne porte pas l'identifiant du pourboire)."""
    query = urlencode({"amount": str(amount), "customer": customer_name})
    return f"{base_url.rstrip('/')}/review/{worker_id}?{query}"


class TipReceipt(BaseModel):
    """Accusé de création d'un pourboire."""

    tip_id: str
    worker_id: str
    amount: Decimal
    customer_name: str
    payment_reference: str
    review_url: str


class ReviewOutcome(BaseModel):
    """Résultat d'une soumission d'avis."""

    tip_id: str
    rating: int
    label: str | None = None
    visibility: Visibility
    published: bool = False
    publication_reference: str | None = None


class ReviewLifecycleController:
    """Orchestre les deux phases d'un pourboire.

    Responsabilités:
    - Faire confirmer le paiement par `payments` avant toute écriture au registre.
    - Amender l'enregistrement avec la note et l'avis, puis classer l'avis.
    - Transmettre les seuls candidats à la promotion à `publisher` (si fourni); un échec de
      publication n'annule jamais l'amendement.
    """

    def __init__(
        self,
        ledger: LedgerStore,
        payments: PaymentAuthorizer,
        publisher: ReviewPublisher | None = None,
        public_base_url: str = "",
    ):
        self.ledger = ledger
        self.payments = payments
        self.publisher = publisher
        self.public_base_url = public_base_url
        self._log = structlog.get_logger(__name__).bind(component="review_lifecycle")

    def submit_tip(
        self,
        worker_id: str,
        amount,
        customer_name: str | None = None,
        payment_reference: str | None = None,
    ) -> TipReceipt:
        """Autorise le paiement puis enregistre le pourboire.

        Raises:
            WorkerNotFound / InvalidAmount: entrée invalide (aucun appel au paiement).
            PaymentDeclined: paiement refusé, rien n'est écrit.
        """
        self.ledger.require_worker(worker_id)
        value = parse_amount(amount)
        auth = self.payments.authorize(worker_id, value, payment_reference)
        if not auth.approved:
            self._log.warning(
                "payment_declined", worker_id=worker_id, reference=auth.reference, reason=auth.reason
            )
            raise PaymentDeclined(
                auth.reason or "payment declined", details={"reference": auth.reference}
            )
        name = normalize_customer_name(customer_name, self.ledger.default_customer_name)
        tip_id = self.ledger.record_tip(worker_id, value, name)
        return TipReceipt(
            tip_id=tip_id,
            worker_id=worker_id,
            amount=value,
            customer_name=name,
            payment_reference=auth.reference,
            review_url=review_link(self.public_base_url, worker_id, value, name),
        )

    def submit_review(
        self,
        worker_id: str,
        customer_name: str | None,
        rating: int,
        review: str | None = None,
        tip_id: str | None = None,
    ) -> ReviewOutcome:
        """Amende le pourboire (par identifiant si fourni, sinon le plus récent du client).

        Toutes les lectures ont lieu avant l'amendement: une fois la note écrite, seule la
        publication peut encore échouer, et cet échec est absorbé.
        """
        worker = self.ledger.require_worker(worker_id)
        if tip_id:
            # un identifiant appartenant à un autre travailleur est traité comme introuvable
            if self.ledger.get_tip(tip_id).worker_id != worker_id:
                raise TipNotFound(f"tip not found: {tip_id}")
            record = self.ledger.attach_review_by_id(tip_id, rating, review)
        else:
            record = self.ledger.attach_review(worker_id, customer_name, rating, review)

        visibility = classify(record.rating)
        outcome = ReviewOutcome(
            tip_id=record.id,
            rating=record.rating,
            label=rating_label(record.rating),
            visibility=visibility,
        )
        if visibility is Visibility.PROMOTION_CANDIDATE:
            self._publish(worker, record, outcome)
        return outcome

    def _publish(self, worker: WorkerProfile, record: TipRecord, outcome: ReviewOutcome) -> None:
        if self.publisher is None:
            return
        try:
            outcome.publication_reference = self.publisher.publish(worker, record)
            outcome.published = True
            self._log.info("review_published", tip_id=record.id, worker_id=worker.id)
        except UpstreamError as err:
            self._log.warning(
                "review_publication_failed",
                tip_id=record.id,
                worker_id=worker.id,
                error=err.message,
            )
