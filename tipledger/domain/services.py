from __future__ import annotations

from datetime import UTC, date, datetime

from pydantic import BaseModel

from tipledger.domain.aggregation import (
    compute_business_aggregate,
    compute_worker_aggregate,
    count_tips_on,
    rank_workers_by_earnings,
)
from tipledger.domain.collaborators import IdentityDirectory
from tipledger.domain.entities import (
    BusinessAggregate,
    BusinessProfile,
    TipRecord,
    WorkerAggregate,
    WorkerProfile,
)
from tipledger.domain.errors import OwnerNotFound
from tipledger.domain.ledger import LedgerStore
from tipledger.domain.review_lifecycle import tip_link
from tipledger.domain.roster import RosterManager


class WorkerDashboard(BaseModel):
    worker: WorkerProfile
    aggregate: WorkerAggregate
    tips_today: int
    tip_url: str
    tips: list[TipRecord]


class RosterRow(BaseModel):
    worker: WorkerProfile
    aggregate: WorkerAggregate


class BusinessDashboard(BaseModel):
    owner: BusinessProfile
    aggregate: BusinessAggregate
    workers: list[RosterRow]


class DashboardService:
    """Service de lecture pour les tableaux de bord travailleur et propriétaire.

    Responsabilités:
    - Recalculer les agrégats à chaque appel depuis le registre (aucun cache entre écritures).
    - Consolider les travailleurs présents dans le registre d'une entreprise.
    - N'effectuer aucune écriture.
    """

    def __init__(
        self,
        directory: IdentityDirectory,
        ledger: LedgerStore,
        roster: RosterManager,
        public_base_url: str = "",
    ):
        self.directory = directory
        self.ledger = ledger
        self.roster = roster
        self.public_base_url = public_base_url

    def _require_owner(self, owner_id: str) -> BusinessProfile:
        owner = self.directory.get_owner(owner_id) if owner_id else None
        if owner is None:
            raise OwnerNotFound(f"owner not found: {owner_id}")
        return owner

    def get_worker_aggregate(self, worker_id: str) -> WorkerAggregate:
        """Agrégat d'un travailleur (WorkerNotFound s'il est inconnu)."""
        self.ledger.require_worker(worker_id)
        tips = self.ledger.list_tips_for_worker(worker_id)
        return compute_worker_aggregate(tips, worker_id=worker_id)

    def _roster_rows(self, owner_id: str) -> list[RosterRow]:
        rows = []
        # ordre stable pour un classement déterministe
        for worker_id in sorted(self.roster.list_workers_for_business(owner_id)):
            worker = self.directory.get_worker(worker_id)
            if worker is None:
                # profil disparu de l'annuaire: ignoré de la consolidation
                continue
            tips = self.ledger.list_tips_for_worker(worker_id)
            rows.append(RosterRow(worker=worker, aggregate=compute_worker_aggregate(tips, worker_id)))
        return rows

    def get_business_aggregate(self, owner_id: str) -> BusinessAggregate:
        """Agrégat consolidé des travailleurs du registre (OwnerNotFound si inconnu)."""
        self._require_owner(owner_id)
        rows = self._roster_rows(owner_id)
        return compute_business_aggregate((r.aggregate for r in rows), owner_id=owner_id)

    def worker_dashboard(self, worker_id: str, today: date | None = None) -> WorkerDashboard:
        """Pourboires récents, statistiques, nombre du jour et lien de pourboire."""
        worker = self.ledger.require_worker(worker_id)
        tips = self.ledger.list_tips_for_worker(worker_id)
        day = today or datetime.now(UTC).date()
        return WorkerDashboard(
            worker=worker,
            aggregate=compute_worker_aggregate(tips, worker_id=worker_id),
            tips_today=count_tips_on(tips, day),
            tip_url=tip_link(self.public_base_url, worker_id),
            tips=tips,
        )

    def business_dashboard(self, owner_id: str) -> BusinessDashboard:
        """Travailleurs classés par gains décroissants et agrégat de l'entreprise."""
        owner = self._require_owner(owner_id)
        rows = self._roster_rows(owner_id)
        return BusinessDashboard(
            owner=owner,
            aggregate=compute_business_aggregate((r.aggregate for r in rows), owner_id=owner_id),
            workers=rank_workers_by_earnings(rows),
        )
