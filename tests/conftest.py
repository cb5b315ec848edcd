"""Configuration de test pour pytest.

Ce module ajoute la racine du projet au sys.path et fournit les dépôts (mémoire et SQLite en
mémoire), l'annuaire d'identités peuplé, les services du domaine et un client HTTP isolé.
"""

import os
import sys

import pytest

# Ensure project root is on sys.path so that
# imports like `from tipledger...` resolve.
CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, ".."))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fastapi.testclient import TestClient  # noqa: E402

from tipledger.core.settings import Settings  # noqa: E402
from tipledger.domain.entities import BusinessProfile, WorkerProfile  # noqa: E402
from tipledger.domain.ledger import LedgerStore  # noqa: E402
from tipledger.domain.roster import RosterManager  # noqa: E402
from tipledger.infra.repo.db import get_engine, get_session_factory, init_schema  # noqa: E402
from tipledger.infra.repo.roster_repo import SqlRosterRepo  # noqa: E402
from tipledger.infra.repo.tip_repo import SqlTipRepo  # noqa: E402
from tipledger.infra.repositories import (  # noqa: E402
    InMemoryIdentityDirectory,
    InMemoryRosterRepo,
    InMemoryTipRepo,
)

from tests.fakes import make_owner, make_worker  # noqa: E402


@pytest.fixture
def sql_factory():
    """Factory de sessions sur une base SQLite en mémoire avec schéma créé."""
    engine = get_engine("sqlite+pysqlite:///:memory:")
    init_schema(engine)
    yield get_session_factory(engine)
    engine.dispose()


@pytest.fixture
def directory() -> InMemoryIdentityDirectory:
    return InMemoryIdentityDirectory()


@pytest.fixture(params=["memory", "sql"])
def tip_repo(request):
    """Dépôt de pourboires, exécuté sur les deux backends."""
    if request.param == "memory":
        return InMemoryTipRepo()
    return SqlTipRepo(request.getfixturevalue("sql_factory"))


@pytest.fixture(params=["memory", "sql"])
def roster_repo(request):
    """Dépôt du registre des entreprises, exécuté sur les deux backends."""
    if request.param == "memory":
        return InMemoryRosterRepo()
    return SqlRosterRepo(request.getfixturevalue("sql_factory"))


@pytest.fixture
def ledger(directory, tip_repo) -> LedgerStore:
    return LedgerStore(directory, tip_repo)


@pytest.fixture
def roster(directory, roster_repo) -> RosterManager:
    return RosterManager(directory, roster_repo)


@pytest.fixture
def worker(directory) -> WorkerProfile:
    return make_worker(directory)


@pytest.fixture
def owner(directory) -> BusinessProfile:
    return make_owner(directory)


@pytest.fixture
def test_settings() -> Settings:
    """Paramètres isolés de l'environnement (mémoire, sans Redis)."""
    return Settings(
        _env_file=None,
        DATABASE_URL=None,
        REDIS_URL=None,
        REQUIRE_REDIS=False,
        PUBLIC_BASE_URL="https://tips.example.com",
        APP_ENV="test",
    )


@pytest.fixture
def client(test_settings):
    """Client HTTP sur une application dotée de son propre conteneur."""
    from tipledger.app.main import create_app  # noqa: PLC0415
    from tipledger.core.container import Container  # noqa: PLC0415

    app = create_app(Container(test_settings))
    with TestClient(app) as c:
        yield c
