"""Configuration de logging basée sur structlog.

Objectif du module
------------------
- Fournir une configuration de logs structurés lisibles en développement.
- Propager le contexte de requête (request_id) via les contextvars de structlog.
"""

import logging
import sys

import structlog


def setup_logging(level: str = "INFO", json_logs: bool = False):
    """Configure structlog pour produire des logs détaillés et filtrables.

    Args:
        level: Niveau minimal (DEBUG, INFO, WARNING...).
        json_logs: Rendu JSON (prod) au lieu du rendu console (dev).
    """
    renderer = (
        structlog.processors.JSONRenderer() if json_logs else structlog.dev.ConsoleRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="ISO"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(level.upper()) if isinstance(level, str) else level
        ),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )
