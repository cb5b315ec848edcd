"""Contrats des collaborateurs du registre (stockage et services externes).

Le domaine ne dépend que de ces protocoles; les implémentations vivent dans `tipledger.infra`
(mémoire, SQL, Redis, adaptateurs simulés) et sont injectées par le conteneur.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Protocol

from pydantic import BaseModel

from tipledger.domain.entities import BusinessProfile, RosterEntry, TipRecord, WorkerProfile


class IdentityDirectory(Protocol):
    """Annuaire d'identités: résout un identifiant ou un email vers un profil et son rôle."""

    def get_worker(self, worker_id: str) -> WorkerProfile | None:
        """Retourne le profil travailleur `worker_id`, ou None (absent ou autre rôle)."""

    def get_owner(self, owner_id: str) -> BusinessProfile | None:
        """Retourne le profil propriétaire `owner_id`, ou None (absent ou autre rôle)."""

    def find_worker_by_email(self, email: str) -> WorkerProfile | None:
        """Recherche un travailleur par email."""

    def save(self, profile: WorkerProfile | BusinessProfile) -> WorkerProfile | BusinessProfile:
        """Enregistre ou remplace un profil."""


class TipRepository(Protocol):
    """Stockage des pourboires (ajout et amendement uniquement)."""

    def add(self, record: TipRecord) -> TipRecord:
        """Ajoute un enregistrement."""

    def get(self, tip_id: str) -> TipRecord | None:
        """Retourne un enregistrement par identifiant."""

    def list_for_worker(self, worker_id: str) -> list[TipRecord]:
        """Enregistrements d'un travailleur, du plus récent au plus ancien."""

    def amend_latest(
        self, worker_id: str, customer_name: str, rating: int, review: str | None
    ) -> TipRecord | None:
        """Note le pourboire le plus récent de (worker_id, customer_name), atomiquement.

        Returns:
            TipRecord | None: l'enregistrement modifié, None si aucun ne correspond.
        """

    def amend(self, tip_id: str, rating: int, review: str | None) -> TipRecord | None:
        """Note le pourboire `tip_id`."""


class RosterRepository(Protocol):
    """Stockage des appartenances (propriétaire, travailleur)."""

    def add(self, entry: RosterEntry) -> RosterEntry:
        """Insère une paire; lève `DuplicateMembership` si elle existe déjà."""

    def exists(self, owner_id: str, worker_id: str) -> bool:
        """Indique si la paire est déjà enregistrée."""

    def list_workers(self, owner_id: str) -> list[str]:
        """Identifiants des travailleurs du registre de `owner_id`."""


class PaymentAuthorization(BaseModel):
    """Résultat d'une autorisation de paiement."""

    approved: bool
    reference: str
    reason: str | None = None


class PaymentAuthorizer(Protocol):
    """Service d'autorisation de paiement (externe)."""

    def authorize(
        self, worker_id: str, amount: Decimal, reference: str | None = None
    ) -> PaymentAuthorization:
        """Autorise le paiement; `approved=False` signale un refus.

        Raises:
            UpstreamError: si le service est indisponible.
        """


class ReviewPublisher(Protocol):
    """Service de publication d'avis (agrégateur d'avis tiers)."""

    def publish(self, worker: WorkerProfile, tip: TipRecord) -> str:
        """Publie l'avis et retourne une référence externe.

        Raises:
            UpstreamError: en cas d'échec de publication.
        """
