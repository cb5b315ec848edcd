"""
Routes de lecture: pourboires, agrégats et tableaux de bord.

Tous les agrégats sont recalculés à la demande depuis le registre.
"""

from fastapi import APIRouter, Depends

from tipledger.api.deps import get_dashboards, get_ledger
from tipledger.domain.entities import BusinessAggregate, TipRecord, WorkerAggregate
from tipledger.domain.ledger import LedgerStore
from tipledger.domain.services import BusinessDashboard, DashboardService, WorkerDashboard

router = APIRouter(tags=["dashboard"])
dashboards_dep = Depends(get_dashboards)
ledger_dep = Depends(get_ledger)


@router.get("/workers/{worker_id}/tips", response_model=list[TipRecord])
def list_worker_tips(worker_id: str, ledger: LedgerStore = ledger_dep):
    """Pourboires du travailleur, du plus récent au plus ancien."""
    ledger.require_worker(worker_id)
    return ledger.list_tips_for_worker(worker_id)


@router.get("/workers/{worker_id}/aggregate", response_model=WorkerAggregate)
def worker_aggregate(worker_id: str, dashboards: DashboardService = dashboards_dep):
    return dashboards.get_worker_aggregate(worker_id)


@router.get("/workers/{worker_id}/dashboard", response_model=WorkerDashboard)
def worker_dashboard(worker_id: str, dashboards: DashboardService = dashboards_dep):
    return dashboards.worker_dashboard(worker_id)


@router.get("/businesses/{owner_id}/aggregate", response_model=BusinessAggregate)
def business_aggregate(owner_id: str, dashboards: DashboardService = dashboards_dep):
    return dashboards.get_business_aggregate(owner_id)


@router.get("/businesses/{owner_id}/dashboard", response_model=BusinessDashboard)
def business_dashboard(owner_id: str, dashboards: DashboardService = dashboards_dep):
    """Travailleurs du registre classés par gains, et agrégat de l'entreprise."""
    return dashboards.business_dashboard(owner_id)
