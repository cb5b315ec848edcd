"""Tests pour les chemins de configuration du container.

Ce module teste le choix des backends (annuaire Redis ou mémoire, registre SQL ou mémoire) selon
les paramètres fournis au container.
"""

from __future__ import annotations

from typing import Any

import pytest
import redis

from tipledger.core.container import Container
from tipledger.core.settings import Settings
from tipledger.infra.repo.roster_repo import SqlRosterRepo
from tipledger.infra.repo.tip_repo import SqlTipRepo
from tipledger.infra.repositories import InMemoryIdentityDirectory, RedisIdentityDirectory
from tests.fakes import FakeRedis, make_owner, make_worker


def _settings(**overrides: Any) -> Settings:
    """Paramètres isolés de l'environnement et du fichier .env."""
    base: dict[str, Any] = {
        "DATABASE_URL": None,
        "REDIS_URL": None,
        "REQUIRE_REDIS": False,
    }
    base.update(overrides)
    return Settings(_env_file=None, **base)


class _DownRedis:
    def ping(self) -> bool:
        raise redis.ConnectionError("connection refused")


def test_container_memory_path() -> None:
    """Teste que le container utilise les backends mémoire par défaut."""
    c = Container(_settings())
    assert c.storage_backend == "memory"
    assert c.directory_backend == "memory"
    assert c.engine is None
    assert c.publisher is not None


def test_container_sql_path() -> None:
    """Teste le registre SQL quand DATABASE_URL est défini."""
    c = Container(_settings(DATABASE_URL="sqlite+pysqlite:///:memory:"))
    assert c.storage_backend == "sql"
    assert isinstance(c.tip_repo, SqlTipRepo)
    assert isinstance(c.roster_repo, SqlRosterRepo)

    worker = make_worker(c.directory)
    owner = make_owner(c.directory)
    c.roster.add_worker_to_business(owner.id, worker.email)
    c.lifecycle.submit_tip(worker.id, 42, "Ravi")
    assert c.dashboards.get_business_aggregate(owner.id).total_tips == 1
    c.engine.dispose()


def test_container_require_redis_without_url_raises() -> None:
    """Teste qu'un Redis exigé mais non configuré empêche le démarrage."""
    with pytest.raises(RuntimeError):
        Container(_settings(REQUIRE_REDIS=True))


def test_container_redis_path(monkeypatch: Any) -> None:
    """Teste l'annuaire Redis quand le serveur répond."""
    monkeypatch.setattr(redis.Redis, "from_url", lambda *a, **k: FakeRedis())
    c = Container(_settings(REDIS_URL="redis://localhost:6379/0"))
    assert c.directory_backend == "redis"
    assert isinstance(c.directory, RedisIdentityDirectory)


def test_container_redis_fallback(monkeypatch: Any) -> None:
    """Teste le repli en mémoire quand Redis est injoignable et non exigé."""
    monkeypatch.setattr(redis.Redis, "from_url", lambda *a, **k: _DownRedis())
    c = Container(_settings(REDIS_URL="redis://localhost:6379/0"))
    assert c.directory_backend == "memory-fallback"
    assert isinstance(c.directory, InMemoryIdentityDirectory)


def test_container_redis_required_but_down(monkeypatch: Any) -> None:
    """Teste qu'un Redis exigé et injoignable empêche le démarrage."""
    monkeypatch.setattr(redis.Redis, "from_url", lambda *a, **k: _DownRedis())
    with pytest.raises(RuntimeError):
        Container(_settings(REDIS_URL="redis://localhost:6379/0", REQUIRE_REDIS=True))


def test_container_without_review_publication() -> None:
    c = Container(_settings(REVIEW_PUBLICATION_ENABLED=False))
    assert c.publisher is None
    assert c.lifecycle.publisher is None
