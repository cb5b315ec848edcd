"""Politique de visibilité des avis, conditionnée par la note.

- note >= 4: candidat à la promotion (publication externe possible)
- note <= 3: retour privé, conservé pour le suivi qualité interne
- pas de note: aucun retour
"""

from __future__ import annotations

import enum

PROMOTION_THRESHOLD = 4

RATING_LABELS = {
    1: "Poor",
    2: "Fair",
    3: "Good",
    4: "Very Good",
    5: "Excellent",
}

QUICK_REVIEWS = (
    "Excellent service!",
    "Very polite and helpful",
    "Quick and efficient",
    "Went above and beyond",
    "Professional attitude",
    "Made my day better",
)


class Visibility(str, enum.Enum):
    PROMOTION_CANDIDATE = "promotion_candidate"
    PRIVATE_FEEDBACK = "private_feedback"
    NO_FEEDBACK = "no_feedback"


def classify(rating: int | None) -> Visibility:
    """Classe un avis selon sa note (fonction pure)."""
    if rating is None:
        return Visibility.NO_FEEDBACK
    if rating >= PROMOTION_THRESHOLD:
        return Visibility.PROMOTION_CANDIDATE
    return Visibility.PRIVATE_FEEDBACK


def rating_label(rating: int | None) -> str | None:
    """Libellé affiché pour une note (None hors de [1, 5])."""
    if rating is None:
        return None
    return RATING_LABELS.get(rating)
