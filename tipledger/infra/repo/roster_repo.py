# ============================================================
# Module : tipledger/infra/repo/roster_repo.py
# Objet  : Accès SQL au registre des entreprises (paires uniques).
# ============================================================

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import sessionmaker

from ...domain.entities import RosterEntry
from ...domain.errors import DuplicateMembership
from .db import session_scope
from .models import RosterEntryORM


class SqlRosterRepo:
    """Registre des entreprises; contrainte d'unicité (owner_id, worker_id)."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._factory = session_factory

    def add(self, entry: RosterEntry) -> RosterEntry:
        """Insère la paire. Lève DuplicateMembership sur doublon (course entre vérification et insertion)."""
        with session_scope(self._factory) as session:
            session.add(
                RosterEntryORM(
                    owner_id=entry.owner_id,
                    worker_id=entry.worker_id,
                    created_at=entry.created_at,
                )
            )
            try:
                session.flush()
            except IntegrityError as err:
                raise DuplicateMembership(
                    "worker is already part of this business",
                    details={"owner_id": entry.owner_id, "worker_id": entry.worker_id},
                ) from err
        return entry

    def exists(self, owner_id: str, worker_id: str) -> bool:
        stmt = select(RosterEntryORM.id).where(
            RosterEntryORM.owner_id == owner_id, RosterEntryORM.worker_id == worker_id
        )
        with session_scope(self._factory) as session:
            return session.execute(stmt).first() is not None

    def list_workers(self, owner_id: str) -> list[str]:
        stmt = (
            select(RosterEntryORM.worker_id)
            .where(RosterEntryORM.owner_id == owner_id)
            .order_by(RosterEntryORM.id)
        )
        with session_scope(self._factory) as session:
            return list(session.execute(stmt).scalars().all())
