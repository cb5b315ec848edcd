"""Gestion du registre des travailleurs d'une entreprise.

Le registre est en ajout seul: aucune opération de retrait n'est proposée.
"""

from __future__ import annotations

import structlog

from tipledger.domain.collaborators import IdentityDirectory, RosterRepository
from tipledger.domain.entities import RosterEntry
from tipledger.domain.errors import DuplicateMembership, OwnerNotFound, WorkerNotFound


class RosterManager:
    """Associe des travailleurs (par email) au registre d'un propriétaire.

    Responsabilités:
    - Résoudre l'email via l'annuaire d'identités (rôle travailleur obligatoire).
    - Détecter explicitement une paire (propriétaire, travailleur) déjà présente.
    """

    def __init__(self, directory: IdentityDirectory, roster_repo: RosterRepository):
        self.directory = directory
        self.roster = roster_repo
        self._log = structlog.get_logger(__name__).bind(component="roster")

    def add_worker_to_business(self, owner_id: str, worker_email: str) -> RosterEntry:
        """Ajoute le travailleur `worker_email` au registre de `owner_id`.

        Raises:
            OwnerNotFound: propriétaire inconnu.
            WorkerNotFound: email inconnu ou ne correspondant pas à un travailleur.
            DuplicateMembership: la paire existe déjà.
        """
        if self.directory.get_owner(owner_id) is None:
            raise OwnerNotFound(f"owner not found: {owner_id}")
        email = (worker_email or "").strip()
        worker = self.directory.find_worker_by_email(email) if email else None
        if worker is None:
            raise WorkerNotFound(
                "worker not found; they must register as a worker first",
                details={"email": email},
            )
        if self.roster.exists(owner_id, worker.id):
            self._log.info("roster_duplicate", owner_id=owner_id, worker_id=worker.id)
            raise DuplicateMembership(
                "worker is already part of this business",
                details={"owner_id": owner_id, "worker_id": worker.id},
            )
        entry = self.roster.add(RosterEntry(owner_id=owner_id, worker_id=worker.id))
        self._log.info("roster_worker_added", owner_id=owner_id, worker_id=worker.id)
        return entry

    def list_workers_for_business(self, owner_id: str) -> set[str]:
        """Ensemble des identifiants de travailleurs du registre de `owner_id`."""
        return set(self.roster.list_workers(owner_id))
