"""DB utilities for SQLAlchemy sessions/engine.

Uses `DATABASE_URL` env var or falls back to `sqlite+pysqlite:///:memory:` for tests.
"""

from __future__ import annotations

import os
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from tipledger.domain.errors import LedgerError, StorageUnavailable
from tipledger.infra.repo.models import Base


def get_engine(url: str | None = None) -> Engine:
    """Crée un moteur SQLAlchemy à partir de l'URL de base de données."""
    db_url = url or os.getenv("DATABASE_URL") or "sqlite+pysqlite:///:memory:"
    kwargs: dict = {}
    if db_url.startswith("sqlite"):
        kwargs["connect_args"] = {"check_same_thread": False}
        if ":memory:" in db_url:
            # une seule connexion partagée, sinon chaque connexion voit une base vide
            kwargs["poolclass"] = StaticPool
    return create_engine(db_url, future=True, echo=False, **kwargs)


def init_schema(engine: Engine) -> None:
    """Crée les tables manquantes."""
    Base.metadata.create_all(engine)


def get_session_factory(engine: Engine) -> sessionmaker:
    """Crée une factory de sessions SQLAlchemy."""
    return sessionmaker(bind=engine, class_=Session, expire_on_commit=False)


@contextmanager
def session_scope(factory: sessionmaker) -> Iterator[Session]:
    """Contexte de session avec commit/rollback automatique.

    Les erreurs du domaine sont propagées telles quelles; les erreurs SQLAlchemy sont converties
    en `StorageUnavailable`. Aucun amendement partiel n'est conservé.
    """
    session = factory()
    try:
        yield session
        session.commit()
    except LedgerError:
        session.rollback()
        raise
    except SQLAlchemyError as err:
        session.rollback()
        raise StorageUnavailable("storage unavailable") from err
    finally:
        session.close()
