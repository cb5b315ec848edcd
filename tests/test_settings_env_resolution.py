"""
Tests pour la résolution des variables d'environnement.

Ce module teste le chargement et la résolution des variables d'environnement à partir de fichiers
.env personnalisés dans les settings.
"""

from __future__ import annotations

import importlib
from pathlib import Path

import pytest

EXPECTED_REVIEW_MAX_LEN = 120


def test_settings_reads_env_file(tmp_path: Path, monkeypatch) -> None:
    """
    Teste que les settings lisent correctement les fichiers d'environnement.

    Vérifie que les variables définies dans un fichier .env personnalisé sont correctement
    chargées et appliquées aux settings.
    """
    env = tmp_path / ".env.custom"
    env.write_text(
        "REVIEW_PUBLICATION_ENABLED=false\nREVIEW_MAX_LEN=120\n", encoding="utf-8"
    )
    monkeypatch.setenv("ENV_FILE", str(env))
    for key in ("REVIEW_PUBLICATION_ENABLED", "REVIEW_MAX_LEN"):
        monkeypatch.delenv(key, raising=False)

    # Reload settings module to pick up new ENV_FILE
    settings_mod = importlib.import_module("tipledger.core.settings")
    importlib.reload(settings_mod)

    s = settings_mod.get_settings()
    assert s.REVIEW_PUBLICATION_ENABLED is False
    assert s.REVIEW_MAX_LEN == EXPECTED_REVIEW_MAX_LEN


def test_env_file_priority(tmp_path: Path, monkeypatch) -> None:
    """Teste la priorité ENV_FILE > .env.{APP_ENV} > .env."""
    from tipledger.core.settings import _resolve_env_file  # noqa: PLC0415

    monkeypatch.chdir(tmp_path)
    monkeypatch.delenv("ENV_FILE", raising=False)
    monkeypatch.setenv("APP_ENV", "staging")
    assert Path(_resolve_env_file()) == tmp_path / ".env"

    (tmp_path / ".env.staging").write_text("APP_DEBUG=false\n", encoding="utf-8")
    assert Path(_resolve_env_file()) == tmp_path / ".env.staging"

    monkeypatch.setenv("ENV_FILE", "/etc/tipledger.env")
    assert _resolve_env_file() == "/etc/tipledger.env"


def test_review_max_len_cannot_exceed_column() -> None:
    """Teste que la longueur d'avis configurée reste dans la taille de la colonne SQL."""
    from pydantic import ValidationError  # noqa: PLC0415

    from tipledger.core.settings import Settings  # noqa: PLC0415
    from tipledger.domain.entities import REVIEW_MAX_LEN  # noqa: PLC0415

    with pytest.raises(ValidationError):
        Settings(_env_file=None, REVIEW_MAX_LEN=REVIEW_MAX_LEN + 1)
    assert Settings(_env_file=None, REVIEW_MAX_LEN=EXPECTED_REVIEW_MAX_LEN).REVIEW_MAX_LEN == (
        EXPECTED_REVIEW_MAX_LEN
    )
