"""
Repositories pour la gestion des données.

Ce module fournit les implémentations en mémoire (dev/tests) de l'annuaire d'identités, du registre
des entreprises et du registre des pourboires, ainsi qu'un annuaire adossé à Redis.
"""

import json
import threading

import redis

from tipledger.domain.entities import BusinessProfile, RosterEntry, TipRecord, WorkerProfile
from tipledger.domain.errors import DuplicateMembership, IdentityUnavailable

Profile = WorkerProfile | BusinessProfile


def _profile_from_dict(data: dict) -> Profile:
    if data.get("role") == "owner":
        return BusinessProfile.model_validate(data)
    return WorkerProfile.model_validate(data)


class InMemoryIdentityDirectory:
    """Annuaire d'identités en mémoire (email indexée par scan simple)."""

    def __init__(self):
        self._db: dict[str, Profile] = {}

    def get_worker(self, worker_id: str) -> WorkerProfile | None:
        profile = self._db.get(worker_id)
        return profile if isinstance(profile, WorkerProfile) else None

    def get_owner(self, owner_id: str) -> BusinessProfile | None:
        profile = self._db.get(owner_id)
        return profile if isinstance(profile, BusinessProfile) else None

    def find_worker_by_email(self, email: str) -> WorkerProfile | None:
        """Recherche un travailleur par email (insensible à la casse)."""
        needle = email.strip().lower()
        return next(
            (
                p
                for p in self._db.values()
                if isinstance(p, WorkerProfile) and p.email.lower() == needle
            ),
            None,
        )

    def save(self, profile: Profile) -> Profile:
        self._db[profile.id] = profile
        return profile


class RedisIdentityDirectory:
    """Annuaire d'identités via Redis avec index email->id (hash) pour les travailleurs."""

    def __init__(self, url: str):
        """Crée un client Redis à partir de l'URL fournie."""
        self.client = redis.Redis.from_url(url, decode_responses=True)
        self.idx_key = "profile:idx:worker_email"

    def _load(self, profile_id: str) -> Profile | None:
        try:
            raw = self.client.get(f"profile:{profile_id}")
        except redis.RedisError as err:
            raise IdentityUnavailable("identity directory unavailable") from err
        return _profile_from_dict(json.loads(raw)) if raw else None

    def get_worker(self, worker_id: str) -> WorkerProfile | None:
        profile = self._load(worker_id)
        return profile if isinstance(profile, WorkerProfile) else None

    def get_owner(self, owner_id: str) -> BusinessProfile | None:
        profile = self._load(owner_id)
        return profile if isinstance(profile, BusinessProfile) else None

    def find_worker_by_email(self, email: str) -> WorkerProfile | None:
        """Recherche un travailleur par email via l'index Redis."""
        try:
            worker_id = self.client.hget(self.idx_key, email.strip().lower())
        except redis.RedisError as err:
            raise IdentityUnavailable("identity directory unavailable") from err
        if not worker_id:
            return None
        return self.get_worker(worker_id)

    def save(self, profile: Profile) -> Profile:
        """Sauvegarde un profil et met à jour l'index email des travailleurs."""
        pipe = self.client.pipeline()
        pipe.set(f"profile:{profile.id}", profile.model_dump_json())
        if isinstance(profile, WorkerProfile):
            pipe.hset(self.idx_key, profile.email.lower(), profile.id)
        try:
            pipe.execute()
        except redis.RedisError as err:
            raise IdentityUnavailable("identity directory unavailable") from err
        return profile


class InMemoryRosterRepo:
    """Registre des entreprises en mémoire; la paire (owner, worker) est unique."""

    def __init__(self):
        self._entries: dict[tuple[str, str], RosterEntry] = {}
        self._lock = threading.Lock()

    def add(self, entry: RosterEntry) -> RosterEntry:
        key = (entry.owner_id, entry.worker_id)
        with self._lock:
            if key in self._entries:
                raise DuplicateMembership(
                    "worker is already part of this business",
                    details={"owner_id": entry.owner_id, "worker_id": entry.worker_id},
                )
            self._entries[key] = entry
        return entry

    def exists(self, owner_id: str, worker_id: str) -> bool:
        with self._lock:
            return (owner_id, worker_id) in self._entries

    def list_workers(self, owner_id: str) -> list[str]:
        with self._lock:
            return [w for (o, w) in self._entries if o == owner_id]


class InMemoryTipRepo:
    """Registre des pourboires en mémoire.

    Les enregistrements sont conservés dans l'ordre d'insertion; un verrou unique sérialise les
    ajouts et les amendements (recherche du plus récent puis mise à jour). Les lectures
    renvoient des copies.
    """

    def __init__(self):
        self._rows: list[TipRecord] = []
        self._lock = threading.Lock()

    def add(self, record: TipRecord) -> TipRecord:
        with self._lock:
            self._rows.append(record.model_copy())
        return record

    def get(self, tip_id: str) -> TipRecord | None:
        with self._lock:
            row = next((r for r in self._rows if r.id == tip_id), None)
            return row.model_copy() if row else None

    def _ordered(self, worker_id: str) -> list[TipRecord]:
        # created_at desc; à égalité, le dernier inséré d'abord
        indexed = [(i, r) for i, r in enumerate(self._rows) if r.worker_id == worker_id]
        indexed.sort(key=lambda pair: (pair[1].created_at, pair[0]), reverse=True)
        return [r for _, r in indexed]

    def list_for_worker(self, worker_id: str) -> list[TipRecord]:
        with self._lock:
            return [r.model_copy() for r in self._ordered(worker_id)]

    def amend_latest(
        self, worker_id: str, customer_name: str, rating: int, review: str | None
    ) -> TipRecord | None:
        with self._lock:
            row = next(
                (r for r in self._ordered(worker_id) if r.customer_name == customer_name), None
            )
            if row is None:
                return None
            row.rating = rating
            row.review = review
            return row.model_copy()

    def amend(self, tip_id: str, rating: int, review: str | None) -> TipRecord | None:
        with self._lock:
            row = next((r for r in self._rows if r.id == tip_id), None)
            if row is None:
                return None
            row.rating = rating
            row.review = review
            return row.model_copy()
