"""
Routes d'inscription des profils (travailleurs et propriétaires).

L'annuaire d'identités est un collaborateur externe; ces endpoints n'en sont qu'un substitut
minimal pour alimenter l'annuaire en dev et en démonstration (aucune authentification).
"""

import uuid

from fastapi import APIRouter, Depends, HTTPException

from tipledger.api.deps import get_container
from tipledger.api.schemas import OwnerSignup, WorkerSignup
from tipledger.core.container import Container
from tipledger.core.http_constants import HTTP_CONFLICT, HTTP_CREATED, HTTP_NOT_FOUND
from tipledger.domain.entities import BusinessProfile, WorkerProfile

router = APIRouter(prefix="/profiles", tags=["profiles"])
container_dep = Depends(get_container)


@router.post("/workers", status_code=HTTP_CREATED, response_model=WorkerProfile)
def register_worker(p: WorkerSignup, c: Container = container_dep):
    """Inscrit un travailleur; 409 si l'email est déjà pris par un travailleur."""
    if c.directory.find_worker_by_email(str(p.email)):
        raise HTTPException(status_code=HTTP_CONFLICT, detail="email_exists")
    profile = WorkerProfile(
        id=uuid.uuid4().hex, name=p.name, email=str(p.email).lower(), payout_id=p.payout_id
    )
    return c.directory.save(profile)


@router.post("/owners", status_code=HTTP_CREATED, response_model=BusinessProfile)
def register_owner(p: OwnerSignup, c: Container = container_dep):
    """Inscrit un propriétaire d'entreprise."""
    profile = BusinessProfile(
        id=uuid.uuid4().hex, business_name=p.business_name, email=str(p.email).lower()
    )
    return c.directory.save(profile)


@router.get("/{profile_id}")
def get_profile(profile_id: str, c: Container = container_dep):
    """Retourne un profil (travailleur ou propriétaire)."""
    profile = c.directory.get_worker(profile_id) or c.directory.get_owner(profile_id)
    if profile is None:
        raise HTTPException(status_code=HTTP_NOT_FOUND, detail="profile_not_found")
    return profile
