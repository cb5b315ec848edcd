# ============================================================
# Module : tipledger/infra/repo/tip_repo.py
# Objet  : Accès SQL au registre des pourboires (ajout, amendement, lecture).
# ============================================================

from __future__ import annotations

from datetime import UTC
from decimal import Decimal

from sqlalchemy import select, update
from sqlalchemy.orm import aliased, sessionmaker

from ...domain.entities import TipRecord
from .db import session_scope
from .models import TipORM


def _to_record(row: TipORM) -> TipRecord:
    created = row.created_at
    if created is not None and created.tzinfo is None:
        created = created.replace(tzinfo=UTC)
    return TipRecord(
        id=row.id,
        worker_id=row.worker_id,
        amount=Decimal(row.amount),
        customer_name=row.customer_name,
        created_at=created,
        rating=row.rating,
        review=row.review,
    )


class SqlTipRepo:
    """Registre des pourboires adossé à SQLAlchemy."""

    def __init__(self, session_factory: sessionmaker) -> None:
        self._factory = session_factory

    def add(self, record: TipRecord) -> TipRecord:
        with session_scope(self._factory) as session:
            session.add(
                TipORM(
                    id=record.id,
                    worker_id=record.worker_id,
                    amount=record.amount,
                    customer_name=record.customer_name,
                    created_at=record.created_at,
                    rating=record.rating,
                    review=record.review,
                )
            )
        return record

    def get(self, tip_id: str) -> TipRecord | None:
        with session_scope(self._factory) as session:
            row = session.execute(select(TipORM).where(TipORM.id == tip_id)).scalars().first()
            return _to_record(row) if row else None

    def list_for_worker(self, worker_id: str) -> list[TipRecord]:
        """Pourboires d'un travailleur (created_at desc, puis ordre d'insertion desc)."""
        stmt = (
            select(TipORM)
            .where(TipORM.worker_id == worker_id)
            .order_by(TipORM.created_at.desc(), TipORM.seq.desc())
        )
        with session_scope(self._factory) as session:
            return [_to_record(r) for r in session.execute(stmt).scalars().all()]

    def _apply(self, session, where, rating: int, review: str | None) -> TipRecord | None:
        stmt = (
            update(TipORM)
            .where(where)
            .values(rating=rating, review=review)
            .returning(TipORM.seq)
            .execution_options(synchronize_session=False)
        )
        seq = session.execute(stmt).scalar_one_or_none()
        if seq is None:
            return None
        row = session.execute(select(TipORM).where(TipORM.seq == seq)).scalars().one()
        return _to_record(row)

    def amend_latest(
        self, worker_id: str, customer_name: str, rating: int, review: str | None
    ) -> TipRecord | None:
        """Recherche du plus récent et mise à jour en une seule instruction UPDATE."""
        latest = aliased(TipORM)
        target = (
            select(latest.seq)
            .where(latest.worker_id == worker_id, latest.customer_name == customer_name)
            .order_by(latest.created_at.desc(), latest.seq.desc())
            .limit(1)
            .scalar_subquery()
        )
        with session_scope(self._factory) as session:
            return self._apply(session, TipORM.seq == target, rating, review)

    def amend(self, tip_id: str, rating: int, review: str | None) -> TipRecord | None:
        with session_scope(self._factory) as session:
            return self._apply(session, TipORM.id == tip_id, rating, review)
