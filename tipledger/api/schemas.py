# Schémas Pydantic exposés par l'API (requêtes et réponses).

from decimal import Decimal

from pydantic import BaseModel, EmailStr


class WorkerSignup(BaseModel):
    """Inscription d'un travailleur dans l'annuaire.

    Champs:
    - name: str (nom affiché)
    - email: EmailStr
    - payout_id: str | None (identifiant de versement, ex. UPI)
    """

    name: str
    email: EmailStr
    payout_id: str | None = None


class OwnerSignup(BaseModel):
    """Inscription d'un propriétaire d'entreprise."""

    business_name: str
    email: EmailStr


class AddWorkerRequest(BaseModel):
    """Ajout d'un travailleur au registre par son email."""

    email: str


class RosterResponse(BaseModel):
    owner_id: str
    worker_ids: list[str]


class TipRequest(BaseModel):
    """Pourboire après autorisation du paiement.

    Champs:
    - worker_id: str
    - amount: Decimal (validé > 0 par le registre)
    - customer_name: str | None ("Anonymous" si absent)
    - payment_reference: str | None (référence de la passerelle, si déjà connue)
    """

    worker_id: str
    amount: Decimal
    customer_name: str | None = None
    payment_reference: str | None = None


class ReviewRequest(BaseModel):
    """Note (1 à 5) et avis facultatif (200 caractères max).

    `tip_id` permet de cibler explicitement le pourboire; sinon le plus récent du client est noté.
    """

    customer_name: str | None = None
    rating: int
    review: str | None = None
    tip_id: str | None = None


class TipReviewRequest(BaseModel):
    rating: int
    review: str | None = None


class ReviewSuggestions(BaseModel):
    labels: dict[int, str]
    quick_reviews: list[str]


class TipSuggestions(BaseModel):
    """Montants proposés au client sur la page de pourboire."""

    amounts: list[Decimal]
