"""Taxonomie des erreurs du registre de pourboires.

Quatre familles sont exposées à l'appelant sans transformation:
- `NotFoundError`: travailleur, propriétaire ou pourboire introuvable;
- `ValidationError`: montant, note ou avis invalide (jamais corrigé silencieusement);
- `ConflictError`: appartenance déjà existante au registre d'une entreprise;
- `UpstreamError`: annuaire d'identités, stockage ou collaborateur externe indisponible.
"""

from __future__ import annotations

from typing import Any


class LedgerError(Exception):
    """Erreur de base du domaine, porteuse d'un code stable et d'un message."""

    code = "LEDGER_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(LedgerError):
    code = "NOT_FOUND"


class ValidationError(LedgerError):
    code = "VALIDATION_ERROR"


class ConflictError(LedgerError):
    code = "CONFLICT"


class UpstreamError(LedgerError):
    code = "UPSTREAM_ERROR"


class WorkerNotFound(NotFoundError):
    code = "WORKER_NOT_FOUND"


class OwnerNotFound(NotFoundError):
    code = "OWNER_NOT_FOUND"


class TipNotFound(NotFoundError):
    code = "TIP_NOT_FOUND"


class InvalidAmount(ValidationError):
    code = "INVALID_AMOUNT"


class InvalidRating(ValidationError):
    code = "INVALID_RATING"


class ReviewTooLong(ValidationError):
    code = "REVIEW_TOO_LONG"


class DuplicateMembership(ConflictError):
    code = "DUPLICATE_MEMBERSHIP"


class PaymentDeclined(UpstreamError):
    code = "PAYMENT_DECLINED"


class IdentityUnavailable(UpstreamError):
    code = "IDENTITY_UNAVAILABLE"


class StorageUnavailable(UpstreamError):
    code = "STORAGE_UNAVAILABLE"
