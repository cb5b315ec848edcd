"""Moteur d'agrégation: calculs purs sur les pourboires.

Les agrégats sont recalculés à chaque requête à partir des enregistrements du registre; aucune
fonction de ce module ne lève d'erreur sur une entrée vide.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import TypeVar

from tipledger.domain.entities import BusinessAggregate, TipRecord, WorkerAggregate

T = TypeVar("T")


def round_half_up(value: Decimal | float, places: int = 1) -> float:
    """Arrondit au demi supérieur (2.25 -> 2.3), contrairement à `round()` (arrondi bancaire)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def _mean(values: Sequence[Decimal]) -> Decimal | None:
    if not values:
        return None
    return sum(values, Decimal("0")) / len(values)


def compute_worker_aggregate(
    tips: Iterable[TipRecord], worker_id: str | None = None
) -> WorkerAggregate:
    """Calcule gains, nombre de pourboires et note moyenne d'un travailleur.

    Args:
        tips: Enregistrements du travailleur (ordre indifférent).
        worker_id: Identifiant reporté tel quel dans l'agrégat.

    Returns:
        WorkerAggregate: `average_rating` vaut None si aucune note n'est présente.
    """
    total = Decimal("0")
    count = 0
    ratings: list[Decimal] = []
    for tip in tips:
        total += Decimal(tip.amount)
        count += 1
        if tip.rating is not None:
            ratings.append(Decimal(tip.rating))
    mean = _mean(ratings)
    return WorkerAggregate(
        worker_id=worker_id,
        total_earnings=total,
        total_tips=count,
        average_rating=round_half_up(mean) if mean is not None else None,
    )


def compute_business_aggregate(
    worker_aggregates: Iterable[WorkerAggregate], owner_id: str | None = None
) -> BusinessAggregate:
    """Consolide les agrégats des travailleurs d'une entreprise.

    La note moyenne est la moyenne des moyennes *par travailleur* (déjà arrondies), restreinte
    aux travailleurs ayant au moins une note. Ce n'est pas la moyenne de toutes les notes.
    """
    total = Decimal("0")
    tips = 0
    workers = 0
    averages: list[Decimal] = []
    for agg in worker_aggregates:
        workers += 1
        total += agg.total_earnings
        tips += agg.total_tips
        if agg.average_rating is not None:
            averages.append(Decimal(str(agg.average_rating)))
    mean = _mean(averages)
    return BusinessAggregate(
        owner_id=owner_id,
        total_workers=workers,
        total_earnings=total,
        total_tips=tips,
        average_rating=round_half_up(mean) if mean is not None else None,
    )


def rank_workers_by_earnings(aggregates: Iterable[T]) -> list[T]:
    """Trie par gains décroissants; tri stable, les ex aequo gardent l'ordre d'entrée.

    Accepte des `WorkerAggregate` ou tout objet exposant `total_earnings` (ou `aggregate`).
    """

    def _earnings(item) -> Decimal:
        agg = getattr(item, "aggregate", item)
        return agg.total_earnings

    # reverse=True préserve la stabilité (les éléments égaux ne sont pas inversés)
    return sorted(aggregates, key=_earnings, reverse=True)


def count_tips_on(tips: Iterable[TipRecord], day: date) -> int:
    """Nombre de pourboires créés le jour `day` (date UTC de `created_at`)."""
    return sum(1 for t in tips if t.created_at.date() == day)
