"""Définition et chargement des paramètres de configuration applicative.

Objectif du module
------------------
- Centraliser les paramètres (env/.env) via Pydantic Settings
- Résoudre le fichier `.env` à utiliser selon la stratégie: ENV_FILE > .env.{APP_ENV} > .env
"""

import os
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from tipledger.domain.entities import REVIEW_MAX_LEN as REVIEW_COLUMN_LEN


def _resolve_env_file() -> Path | str:
    """Retourne le chemin du fichier .env selon la priorité ENV_FILE > .env.{APP_ENV} > .env."""
    explicit = os.getenv("ENV_FILE")
    if explicit:
        return explicit
    cwd = Path.cwd()
    app_env = os.getenv("APP_ENV", "dev")
    specific = cwd / f".env.{app_env}"
    if specific.exists():
        return specific
    return cwd / ".env"


class Settings(BaseSettings):
    """Modèle de configuration chargé depuis l'environnement et .env."""

    model_config = SettingsConfigDict(
        env_file=_resolve_env_file(),
        env_file_encoding="utf-8",
        env_ignore_empty=True,
        case_sensitive=False,
        extra="ignore",
    )
    APP_NAME: str = "tipledger"
    APP_ENV: str = "dev"
    APP_DEBUG: bool = True
    APP_HOST: str = "0.0.0.0"
    APP_PORT: int = 8000
    LOG_LEVEL: str = "INFO"

    # Stockage: SQL pour le registre et les pourboires si DATABASE_URL est défini, mémoire sinon
    DATABASE_URL: str | None = None
    # Annuaire d'identités (profils travailleurs/propriétaires)
    REDIS_URL: str | None = None
    REQUIRE_REDIS: bool = False

    # Liens de pourboire/avis (le rendu QR reste côté client)
    PUBLIC_BASE_URL: str = "http://localhost:5173"
    DEFAULT_CUSTOMER_NAME: str = "Anonymous"
    # borné par la taille de la colonne `tips.review`
    REVIEW_MAX_LEN: int = Field(default=REVIEW_COLUMN_LEN, ge=1, le=REVIEW_COLUMN_LEN)

    # Collaborateurs simulés
    PAYMENT_SIMULATED_DELAY_MS: int = 0
    REVIEW_PUBLICATION_ENABLED: bool = True
    REVIEW_PUBLICATION_DELAY_MS: int = 0


def get_settings() -> Settings:
    """Construit et retourne la configuration de l'application."""
    return Settings()
