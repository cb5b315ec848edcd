"""
Routes du cycle de vie d'un pourboire: paiement, puis note et avis.

- `POST /tips`: pourboire (paiement autorisé puis écriture au registre)
- `POST /workers/{worker_id}/reviews`: note du pourboire le plus récent du client
- `POST /tips/{tip_id}/review`: note d'un pourboire désigné explicitement
"""

from fastapi import APIRouter, Depends

from tipledger.api.deps import get_ledger, get_lifecycle
from tipledger.api.schemas import (
    ReviewRequest,
    ReviewSuggestions,
    TipRequest,
    TipReviewRequest,
    TipSuggestions,
)
from tipledger.app.metrics import REVIEWS_ATTACHED, REVIEWS_PUBLISHED, TIPS_RECORDED
from tipledger.core.http_constants import HTTP_CREATED
from tipledger.domain.entities import TipRecord
from tipledger.domain.ledger import SUGGESTED_TIP_AMOUNTS, LedgerStore
from tipledger.domain.review_lifecycle import (
    ReviewLifecycleController,
    ReviewOutcome,
    TipReceipt,
)
from tipledger.domain.visibility import QUICK_REVIEWS, RATING_LABELS, Visibility

router = APIRouter(tags=["tips"])
lifecycle_dep = Depends(get_lifecycle)
ledger_dep = Depends(get_ledger)


def _track(outcome: ReviewOutcome) -> ReviewOutcome:
    REVIEWS_ATTACHED.labels(outcome.visibility.value).inc()
    if outcome.visibility is Visibility.PROMOTION_CANDIDATE:
        REVIEWS_PUBLISHED.labels("ok" if outcome.published else "skipped").inc()
    return outcome


@router.post("/tips", status_code=HTTP_CREATED, response_model=TipReceipt)
def create_tip(payload: TipRequest, lifecycle: ReviewLifecycleController = lifecycle_dep):
    """Enregistre un pourboire et retourne le reçu avec le lien vers la page d'avis."""
    receipt = lifecycle.submit_tip(
        payload.worker_id,
        payload.amount,
        customer_name=payload.customer_name,
        payment_reference=payload.payment_reference,
    )
    TIPS_RECORDED.inc()
    return receipt


# déclarée avant /tips/{tip_id}
@router.get("/tips/suggestions", response_model=TipSuggestions)
def tip_suggestions():
    return TipSuggestions(amounts=list(SUGGESTED_TIP_AMOUNTS))


@router.get("/tips/{tip_id}", response_model=TipRecord)
def get_tip(tip_id: str, ledger: LedgerStore = ledger_dep):
    return ledger.get_tip(tip_id)


@router.post("/workers/{worker_id}/reviews", response_model=ReviewOutcome)
def submit_review(
    worker_id: str, payload: ReviewRequest, lifecycle: ReviewLifecycleController = lifecycle_dep
):
    """Note et avis; le pourboire ciblé est le plus récent de (worker_id, customer_name)
    sauf si `tip_id` est fourni."""
    outcome = lifecycle.submit_review(
        worker_id,
        payload.customer_name,
        payload.rating,
        review=payload.review,
        tip_id=payload.tip_id,
    )
    return _track(outcome)


@router.post("/tips/{tip_id}/review", response_model=ReviewOutcome)
def review_tip(
    tip_id: str,
    payload: TipReviewRequest,
    lifecycle: ReviewLifecycleController = lifecycle_dep,
    ledger: LedgerStore = ledger_dep,
):
    tip = ledger.get_tip(tip_id)
    outcome = lifecycle.submit_review(
        tip.worker_id, tip.customer_name, payload.rating, review=payload.review, tip_id=tip_id
    )
    return _track(outcome)


@router.get("/reviews/suggestions", response_model=ReviewSuggestions)
def review_suggestions():
    """Libellés des notes et avis rapides proposés au client."""
    return ReviewSuggestions(labels=RATING_LABELS, quick_reviews=list(QUICK_REVIEWS))
