"""Registre des pourboires: création puis amendement (note/avis).

Toutes les validations sont faites ici, à la frontière du stockage: un montant négatif ou une note
hors bornes échoue, rien n'est corrigé silencieusement.
"""

from __future__ import annotations

import uuid
from decimal import Decimal, InvalidOperation

import structlog

from tipledger.domain.collaborators import IdentityDirectory, TipRepository
from tipledger.domain.entities import (
    AMOUNT_PRECISION,
    AMOUNT_SCALE,
    REVIEW_MAX_LEN,
    TipRecord,
    WorkerProfile,
    utcnow,
)
from tipledger.domain.errors import (
    InvalidAmount,
    InvalidRating,
    ReviewTooLong,
    TipNotFound,
    WorkerNotFound,
)

DEFAULT_CUSTOMER_NAME = "Anonymous"
# montants proposés sur la page de pourboire
SUGGESTED_TIP_AMOUNTS = (Decimal("50"), Decimal("100"), Decimal("200"), Decimal("500"))
MIN_RATING = 1
MAX_RATING = 5


def normalize_customer_name(name: str | None, default: str = DEFAULT_CUSTOMER_NAME) -> str:
    """Nom client nettoyé, ou `default` s'il est absent ou vide."""
    cleaned = (name or "").strip()
    return cleaned or default


def _digit_counts(value: Decimal) -> tuple[int, int]:
    """(chiffres entiers, décimales significatives) d'un Decimal fini, sans arrondi."""
    _, digits, exponent = value.as_tuple()
    digits = list(digits)
    # les zéros de fin après la virgule ne comptent pas
    while exponent < 0 and len(digits) > 1 and digits[-1] == 0:
        digits.pop()
        exponent += 1
    return max(0, len(digits) + exponent), max(0, -exponent)


def parse_amount(amount) -> Decimal:
    """Convertit un montant en Decimal strictement positif et fini.

    Raises:
        InvalidAmount: montant non numérique, non fini, <= 0, ou plus précis que le stockage
            (AMOUNT_SCALE décimales, AMOUNT_PRECISION chiffres au total).
    """
    if isinstance(amount, bool):
        raise InvalidAmount("amount must be a number", details={"amount": amount})
    try:
        value = amount if isinstance(amount, Decimal) else Decimal(str(amount).strip())
    except (InvalidOperation, ValueError) as err:
        raise InvalidAmount("amount must be a number", details={"amount": str(amount)}) from err
    if not value.is_finite() or value <= 0:
        raise InvalidAmount("amount must be positive", details={"amount": str(amount)})
    integer_digits, places = _digit_counts(value)
    if places > AMOUNT_SCALE or integer_digits > AMOUNT_PRECISION - AMOUNT_SCALE:
        raise InvalidAmount(
            f"amount must have at most {AMOUNT_SCALE} decimal places"
            f" and {AMOUNT_PRECISION - AMOUNT_SCALE} integer digits",
            details={"amount": str(amount)},
        )
    return value


def validate_rating(rating) -> int:
    """Vérifie qu'une note est un entier de [1, 5]."""
    if isinstance(rating, bool) or not isinstance(rating, int):
        raise InvalidRating("rating must be an integer", details={"rating": rating})
    if not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRating(
            f"rating must be between {MIN_RATING} and {MAX_RATING}", details={"rating": rating}
        )
    return rating


def validate_review(review: str | None, max_len: int = REVIEW_MAX_LEN) -> str | None:
    """Avis nettoyé (None si vide); lève ReviewTooLong au-delà de `max_len` caractères."""
    if review is None:
        return None
    if len(review) > max_len:
        raise ReviewTooLong(
            f"review must be at most {max_len} characters",
            details={"length": len(review), "max": max_len},
        )
    cleaned = review.strip()
    return cleaned or None


class LedgerStore:
    """Point d'entrée unique des écritures sur les pourboires.

    Paramètres:
    - directory: annuaire d'identités (existence et rôle du travailleur).
    - tips: dépôt de pourboires (mémoire ou SQL).
    - default_customer_name / review_max_len: réglages issus de la configuration.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        tips: TipRepository,
        default_customer_name: str = DEFAULT_CUSTOMER_NAME,
        review_max_len: int = REVIEW_MAX_LEN,
    ):
        self.directory = directory
        self.tips = tips
        self.default_customer_name = default_customer_name
        self.review_max_len = review_max_len
        self._log = structlog.get_logger(__name__).bind(component="ledger")

    def require_worker(self, worker_id: str) -> WorkerProfile:
        """Retourne le profil travailleur ou lève WorkerNotFound."""
        worker = self.directory.get_worker(worker_id) if worker_id else None
        if worker is None:
            raise WorkerNotFound(f"worker not found: {worker_id}")
        return worker

    def record_tip(self, worker_id: str, amount, customer_name: str | None = None) -> str:
        """Ajoute un pourboire non noté et retourne son identifiant.

        Raises:
            WorkerNotFound: travailleur inconnu.
            InvalidAmount: montant non positif ou non numérique.
        """
        self.require_worker(worker_id)
        value = parse_amount(amount)
        record = TipRecord(
            id=uuid.uuid4().hex,
            worker_id=worker_id,
            amount=value,
            customer_name=normalize_customer_name(customer_name, self.default_customer_name),
            created_at=utcnow(),
        )
        self.tips.add(record)
        self._log.info(
            "tip_recorded", tip_id=record.id, worker_id=worker_id, amount=str(value)
        )
        return record.id

    def attach_review(
        self,
        worker_id: str,
        customer_name: str | None,
        rating: int,
        review: str | None = None,
    ) -> TipRecord:
        """Note le pourboire le plus récent de (worker_id, customer_name).

        La correspondance se fait par nom client et non par identifiant de pourboire; si un
        client laisse deux pourboires avant de noter, c'est le plus récent qui est amendé.
        Une nouvelle soumission écrase la précédente (dernière écriture gagnante).

        Raises:
            InvalidRating / ReviewTooLong: entrée invalide.
            TipNotFound: aucun pourboire pour cette paire.

        Returns:
            TipRecord: l'enregistrement tel qu'amendé.
        """
        rating = validate_rating(rating)
        review = validate_review(review, self.review_max_len)
        name = normalize_customer_name(customer_name, self.default_customer_name)
        record = self.tips.amend_latest(worker_id, name, rating, review)
        if record is None:
            raise TipNotFound(
                "no tip found for this worker and customer",
                details={"worker_id": worker_id, "customer_name": name},
            )
        self._log.info("review_attached", tip_id=record.id, worker_id=worker_id, rating=rating)
        return record

    def attach_review_by_id(
        self, tip_id: str, rating: int, review: str | None = None
    ) -> TipRecord:
        """Variante explicite: note le pourboire `tip_id`."""
        rating = validate_rating(rating)
        review = validate_review(review, self.review_max_len)
        record = self.tips.amend(tip_id, rating, review)
        if record is None:
            raise TipNotFound(f"tip not found: {tip_id}")
        self._log.info(
            "review_attached", tip_id=record.id, worker_id=record.worker_id, rating=rating
        )
        return record

    def get_tip(self, tip_id: str) -> TipRecord:
        record = self.tips.get(tip_id)
        if record is None:
            raise TipNotFound(f"tip not found: {tip_id}")
        return record

    def list_tips_for_worker(self, worker_id: str) -> list[TipRecord]:
        """Pourboires du travailleur, du plus récent au plus ancien."""
        return self.tips.list_for_worker(worker_id)
