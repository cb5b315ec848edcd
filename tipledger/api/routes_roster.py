"""
Routes du registre des entreprises (ajout et liste des travailleurs).

Un doublon renvoie 409 `DUPLICATE_MEMBERSHIP`, distinct d'une panne du stockage (502), pour que
le client puisse afficher un message précis.
"""

from fastapi import APIRouter, Depends

from tipledger.api.deps import get_roster
from tipledger.api.schemas import AddWorkerRequest, RosterResponse
from tipledger.app.metrics import ROSTER_ADDITIONS
from tipledger.core.http_constants import HTTP_CREATED
from tipledger.domain.entities import RosterEntry
from tipledger.domain.errors import LedgerError
from tipledger.domain.roster import RosterManager

router = APIRouter(prefix="/businesses", tags=["roster"])
roster_dep = Depends(get_roster)


@router.post("/{owner_id}/workers", status_code=HTTP_CREATED, response_model=RosterEntry)
def add_worker(owner_id: str, payload: AddWorkerRequest, roster: RosterManager = roster_dep):
    """Ajoute un travailleur inscrit (par email) au registre de l'entreprise."""
    try:
        entry = roster.add_worker_to_business(owner_id, payload.email)
    except LedgerError as err:
        ROSTER_ADDITIONS.labels(err.code.lower()).inc()
        raise
    ROSTER_ADDITIONS.labels("added").inc()
    return entry


@router.get("/{owner_id}/workers", response_model=RosterResponse)
def list_workers(owner_id: str, roster: RosterManager = roster_dep):
    return RosterResponse(
        owner_id=owner_id, worker_ids=sorted(roster.list_workers_for_business(owner_id))
    )
