"""
Conteneur d'injection de dépendances et configuration application.

Instancie les composants centraux (settings, annuaire, dépôts, services du registre) et expose un
singleton `container` utilisé par l'application.
"""

import structlog

from tipledger.core.settings import Settings, get_settings
from tipledger.domain.ledger import LedgerStore
from tipledger.domain.review_lifecycle import ReviewLifecycleController
from tipledger.domain.roster import RosterManager
from tipledger.domain.services import DashboardService
from tipledger.infra.collaborators import LoggingReviewPublisher, SimulatedPaymentGateway
from tipledger.infra.repo.db import get_engine, get_session_factory, init_schema
from tipledger.infra.repo.roster_repo import SqlRosterRepo
from tipledger.infra.repo.tip_repo import SqlTipRepo
from tipledger.infra.repositories import (
    InMemoryIdentityDirectory,
    InMemoryRosterRepo,
    InMemoryTipRepo,
    RedisIdentityDirectory,
)

log = structlog.get_logger(__name__)


class Container:
    def __init__(self, settings: Settings | None = None):
        self.settings = settings or get_settings()
        self._init_directory()
        self._init_ledger_storage()

        self.payments = SimulatedPaymentGateway(delay_ms=self.settings.PAYMENT_SIMULATED_DELAY_MS)
        self.publisher = (
            LoggingReviewPublisher(delay_ms=self.settings.REVIEW_PUBLICATION_DELAY_MS)
            if self.settings.REVIEW_PUBLICATION_ENABLED
            else None
        )
        self.ledger = LedgerStore(
            self.directory,
            self.tip_repo,
            default_customer_name=self.settings.DEFAULT_CUSTOMER_NAME,
            review_max_len=self.settings.REVIEW_MAX_LEN,
        )
        self.roster = RosterManager(self.directory, self.roster_repo)
        self.lifecycle = ReviewLifecycleController(
            self.ledger,
            self.payments,
            self.publisher,
            public_base_url=self.settings.PUBLIC_BASE_URL,
        )
        self.dashboards = DashboardService(
            self.directory,
            self.ledger,
            self.roster,
            public_base_url=self.settings.PUBLIC_BASE_URL,
        )

    def _init_directory(self) -> None:
        if self.settings.REDIS_URL:
            try:
                self.directory = RedisIdentityDirectory(self.settings.REDIS_URL)
                self.directory.client.ping()
                self.directory_backend = "redis"
                return
            except Exception as err:
                if self.settings.REQUIRE_REDIS:
                    raise RuntimeError("Redis required but unavailable") from err
                log.warning("identity_directory_memory_fallback", error=type(err).__name__)
                self.directory = InMemoryIdentityDirectory()
                self.directory_backend = "memory-fallback"
                return
        if self.settings.REQUIRE_REDIS:
            raise RuntimeError("Redis required but REDIS_URL not set")
        self.directory = InMemoryIdentityDirectory()
        self.directory_backend = "memory"

    def _init_ledger_storage(self) -> None:
        if self.settings.DATABASE_URL:
            self.engine = get_engine(self.settings.DATABASE_URL)
            init_schema(self.engine)
            factory = get_session_factory(self.engine)
            self.tip_repo = SqlTipRepo(factory)
            self.roster_repo = SqlRosterRepo(factory)
            self.storage_backend = "sql"
        else:
            self.engine = None
            self.tip_repo = InMemoryTipRepo()
            self.roster_repo = InMemoryRosterRepo()
            self.storage_backend = "memory"


container = Container()
