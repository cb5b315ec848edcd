"""
Entités du domaine métier.

Ce module définit les profils (travailleur, propriétaire), l'appartenance au registre d'une
entreprise, l'enregistrement de pourboire et les agrégats dérivés.
"""

import enum
from datetime import UTC, datetime
from decimal import Decimal
from typing import Literal

from pydantic import BaseModel, Field, computed_field

Role = Literal["worker", "owner"]

# Limites de stockage des pourboires, partagées avec les modèles SQL.
# 15 chiffres significatifs restent exacts même stockés en flottant (SQLite).
AMOUNT_PRECISION = 15
AMOUNT_SCALE = 4
REVIEW_MAX_LEN = 200


class TipState(str, enum.Enum):
    CREATED = "created"
    RATED = "rated"


def utcnow() -> datetime:
    """Horodatage UTC courant (point unique pour faciliter les tests)."""
    return datetime.now(UTC)


class WorkerProfile(BaseModel):
    """Profil d'un travailleur pouvant recevoir des pourboires."""

    id: str
    name: str
    email: str
    payout_id: str | None = None
    role: Literal["worker"] = "worker"


class BusinessProfile(BaseModel):
    """Profil d'un propriétaire d'entreprise."""

    id: str
    business_name: str
    email: str
    role: Literal["owner"] = "owner"


class RosterEntry(BaseModel):
    """Appartenance d'un travailleur au registre d'une entreprise (paire unique)."""

    owner_id: str
    worker_id: str
    created_at: datetime = Field(default_factory=utcnow)


class TipRecord(BaseModel):
    """Pourboire versé à un travailleur, éventuellement complété d'une note et d'un avis."""

    id: str
    worker_id: str
    amount: Decimal = Field(gt=0)
    customer_name: str = "Anonymous"
    created_at: datetime = Field(default_factory=utcnow)
    rating: int | None = Field(default=None, ge=1, le=5)
    review: str | None = None

    @property
    def is_rated(self) -> bool:
        return self.rating is not None

    @computed_field
    @property
    def state(self) -> TipState:
        """CREATED tant qu'aucune note n'est posée, RATED ensuite (état terminal)."""
        return TipState.RATED if self.is_rated else TipState.CREATED


class WorkerAggregate(BaseModel):
    """Statistiques dérivées d'un travailleur (jamais persistées)."""

    worker_id: str | None = None
    total_earnings: Decimal = Decimal("0")
    total_tips: int = 0
    # None signifie "aucune note", distinct d'une note nulle
    average_rating: float | None = None


class BusinessAggregate(BaseModel):
    """Statistiques consolidées des travailleurs du registre d'une entreprise."""

    owner_id: str | None = None
    total_workers: int = 0
    total_earnings: Decimal = Decimal("0")
    total_tips: int = 0
    average_rating: float | None = None
