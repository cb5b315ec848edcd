"""Dépendances partagées pour les routes de l'API.

Le conteneur est attaché à `app.state.container` par `create_app`; les routes y accèdent via ces
dépendances, ce qui permet aux tests d'injecter un conteneur isolé.
"""

from fastapi import Request

from tipledger.core.container import Container
from tipledger.domain.ledger import LedgerStore
from tipledger.domain.review_lifecycle import ReviewLifecycleController
from tipledger.domain.roster import RosterManager
from tipledger.domain.services import DashboardService


def get_container(request: Request) -> Container:
    return request.app.state.container


def get_ledger(request: Request) -> LedgerStore:
    return get_container(request).ledger


def get_roster(request: Request) -> RosterManager:
    return get_container(request).roster


def get_lifecycle(request: Request) -> ReviewLifecycleController:
    return get_container(request).lifecycle


def get_dashboards(request: Request) -> DashboardService:
    return get_container(request).dashboards
