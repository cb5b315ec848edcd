"""SQLAlchemy models for persistence layer (roster, tips)."""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import (
    Column,
    DateTime,
    Index,
    Integer,
    MetaData,
    Numeric,
    String,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase

from tipledger.domain.entities import AMOUNT_PRECISION, AMOUNT_SCALE, REVIEW_MAX_LEN


def _now() -> datetime:
    return datetime.now(UTC)


class Base(DeclarativeBase):
    """Classe de base pour tous les modèles SQLAlchemy."""

    metadata = MetaData()


class RosterEntryORM(Base):
    """Appartenance d'un travailleur au registre d'une entreprise."""

    __tablename__ = "business_workers"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(64), nullable=False)
    worker_id = Column(String(64), nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)

    __table_args__ = (UniqueConstraint("owner_id", "worker_id", name="uq_owner_worker"),)


class TipORM(Base):
    """Pourboire; `seq` départage deux enregistrements de même `created_at`."""

    __tablename__ = "tips"

    seq = Column(Integer, primary_key=True, autoincrement=True)
    id = Column(String(64), nullable=False, unique=True)
    worker_id = Column(String(64), nullable=False)
    amount = Column(Numeric(AMOUNT_PRECISION, AMOUNT_SCALE), nullable=False)
    customer_name = Column(String(255), nullable=False, default="Anonymous")
    created_at = Column(DateTime(timezone=True), nullable=False, default=_now)
    rating = Column(Integer, nullable=True)
    review = Column(String(REVIEW_MAX_LEN), nullable=True)

    __table_args__ = (
        Index("ix_tips_worker_customer_created", "worker_id", "customer_name", "created_at"),
    )
