"""
Tests du registre des pourboires (création, amendement, lecture).

Chaque test s'exécute sur le dépôt en mémoire et sur le dépôt SQL (SQLite en mémoire) via la
fixture paramétrée `tip_repo`.
"""

from __future__ import annotations

from decimal import Decimal

import pytest

from tipledger.domain.aggregation import compute_worker_aggregate
from tipledger.domain.errors import (
    InvalidAmount,
    InvalidRating,
    ReviewTooLong,
    TipNotFound,
    WorkerNotFound,
)
from tests.fakes import make_owner, make_worker

EXPECTED_COUNT_3 = 3


def test_record_tip_then_list(ledger, worker) -> None:
    """Teste qu'un pourboire enregistré apparaît une fois, sans note."""
    tip_id = ledger.record_tip(worker.id, Decimal("150"), "Ravi")
    tips = ledger.list_tips_for_worker(worker.id)
    assert len(tips) == 1
    assert tips[0].id == tip_id
    assert tips[0].amount == Decimal("150")
    assert tips[0].rating is None
    assert tips[0].review is None
    assert tips[0].customer_name == "Ravi"


def test_record_tip_accepts_numeric_inputs(ledger, worker) -> None:
    """Teste les montants int, float et chaîne numérique."""
    ledger.record_tip(worker.id, 20)
    ledger.record_tip(worker.id, 12.5)
    ledger.record_tip(worker.id, "7.25")
    amounts = sorted(t.amount for t in ledger.list_tips_for_worker(worker.id))
    assert amounts == [Decimal("7.25"), Decimal("12.5"), Decimal("20")]


def test_customer_name_defaults_to_anonymous(ledger, worker) -> None:
    """Teste le nom client par défaut quand il est absent ou vide."""
    ledger.record_tip(worker.id, 10)
    ledger.record_tip(worker.id, 10, "   ")
    names = {t.customer_name for t in ledger.list_tips_for_worker(worker.id)}
    assert names == {"Anonymous"}


@pytest.mark.parametrize("amount", [0, -5, Decimal("-0.01"), "abc", "NaN", "Infinity", True])
def test_invalid_amount_is_rejected(ledger, worker, amount) -> None:
    """Teste qu'un montant invalide échoue au lieu d'être corrigé."""
    with pytest.raises(InvalidAmount):
        ledger.record_tip(worker.id, amount)
    assert ledger.list_tips_for_worker(worker.id) == []


def test_record_tip_unknown_worker(ledger) -> None:
    """Teste qu'un travailleur inconnu est refusé."""
    with pytest.raises(WorkerNotFound):
        ledger.record_tip("missing", 10)


def test_record_tip_for_owner_identity_is_rejected(ledger, directory) -> None:
    """Teste qu'une identité de rôle propriétaire ne peut pas recevoir de pourboire."""
    owner = make_owner(directory)
    with pytest.raises(WorkerNotFound):
        ledger.record_tip(owner.id, 10)


def test_list_tips_most_recent_first(ledger, worker) -> None:
    """Teste l'ordre décroissant de création."""
    ids = [ledger.record_tip(worker.id, amount) for amount in (1, 2, 3)]
    listed = [t.id for t in ledger.list_tips_for_worker(worker.id)]
    assert listed == list(reversed(ids))


def test_list_tips_is_per_worker(ledger, directory, worker) -> None:
    """Teste l'isolation des pourboires entre travailleurs."""
    other = make_worker(directory, "Bala")
    ledger.record_tip(worker.id, 10)
    ledger.record_tip(other.id, 99)
    assert [t.amount for t in ledger.list_tips_for_worker(other.id)] == [Decimal("99")]


def test_attach_review_targets_most_recent_tip(ledger, worker) -> None:
    """Teste que l'avis est attaché au pourboire le plus récent du client."""
    older = ledger.record_tip(worker.id, 10, "Meera")
    newer = ledger.record_tip(worker.id, 20, "Meera")
    ledger.record_tip(worker.id, 30, "Someone else")

    updated = ledger.attach_review(worker.id, "Meera", 5, "Great chai")

    assert updated.id == newer
    assert ledger.get_tip(newer).rating == 5
    assert ledger.get_tip(newer).review == "Great chai"
    assert ledger.get_tip(older).rating is None


def test_attach_review_twice_updates_same_record(ledger, worker) -> None:
    """Teste la dernière écriture gagnante sans création d'enregistrement."""
    tip_id = ledger.record_tip(worker.id, 40, "Kiran")
    first = ledger.attach_review(worker.id, "Kiran", 2, "slow")
    second = ledger.attach_review(worker.id, "Kiran", 4, None)

    tips = ledger.list_tips_for_worker(worker.id)
    assert first.id == second.id == tip_id
    assert len(tips) == 1
    assert tips[0].rating == 4
    assert tips[0].review is None


def test_attach_review_anonymous_default(ledger, worker) -> None:
    """Teste la correspondance sur le nom par défaut quand le client est anonyme."""
    tip_id = ledger.record_tip(worker.id, 15)
    assert ledger.attach_review(worker.id, None, 3).id == tip_id


@pytest.mark.parametrize("rating", [0, 6, -1, 3.5, "4", True, None])
def test_attach_review_invalid_rating(ledger, worker, rating) -> None:
    """Teste qu'une note hors de [1, 5] ou non entière est refusée."""
    tip_id = ledger.record_tip(worker.id, 10, "Ana")
    with pytest.raises(InvalidRating):
        ledger.attach_review(worker.id, "Ana", rating)
    assert ledger.get_tip(tip_id).rating is None


def test_attach_review_length_limit(ledger, worker) -> None:
    """Teste la limite de 200 caractères pour l'avis."""
    tip_id = ledger.record_tip(worker.id, 10, "Ana")
    with pytest.raises(ReviewTooLong):
        ledger.attach_review(worker.id, "Ana", 4, "x" * 201)
    assert ledger.get_tip(tip_id).rating is None

    ledger.attach_review(worker.id, "Ana", 4, "y" * 200)
    assert ledger.get_tip(tip_id).review == "y" * 200


def test_attach_review_without_tip(ledger, worker) -> None:
    """Teste l'erreur quand aucun pourboire ne correspond."""
    ledger.record_tip(worker.id, 10, "Ana")
    with pytest.raises(TipNotFound):
        ledger.attach_review(worker.id, "Bob", 5)
    with pytest.raises(TipNotFound):
        ledger.attach_review("unknown-worker", "Ana", 5)


def test_attach_review_by_id(ledger, worker) -> None:
    """Teste la variante explicite par identifiant de pourboire."""
    first = ledger.record_tip(worker.id, 10, "Ana")
    ledger.record_tip(worker.id, 20, "Ana")
    assert ledger.attach_review_by_id(first, 1, "cold food").id == first
    assert ledger.get_tip(first).rating == 1
    with pytest.raises(TipNotFound):
        ledger.attach_review_by_id("nope", 3)


def test_aggregate_over_ledger(ledger, worker) -> None:
    """Teste l'agrégat calculé à partir du registre après amendements."""
    ledger.record_tip(worker.id, 100, "A")
    ledger.record_tip(worker.id, 200, "B")
    ledger.record_tip(worker.id, 300, "C")
    ledger.attach_review(worker.id, "B", 5)
    ledger.attach_review(worker.id, "C", 3)

    agg = compute_worker_aggregate(ledger.list_tips_for_worker(worker.id))
    assert agg.total_earnings == Decimal("600")
    assert agg.total_tips == EXPECTED_COUNT_3
    assert agg.average_rating == 4.0


@pytest.mark.parametrize("amount", ["1.23456", "0.00001", "123456789012", Decimal("1E-5")])
def test_amount_beyond_storage_precision_is_rejected(ledger, worker, amount) -> None:
    """Teste qu'un montant non représentable à l'identique est refusé, pas arrondi."""
    with pytest.raises(InvalidAmount):
        ledger.record_tip(worker.id, amount)
    assert ledger.list_tips_for_worker(worker.id) == []


@pytest.mark.parametrize(
    "amount", ["1.2345", "0.0001", "1.23450000", "12345678901.1234", Decimal("5E+2")]
)
def test_amount_within_storage_precision_reads_back_unchanged(ledger, worker, amount) -> None:
    """Teste que les deux backends relisent exactement le montant enregistré."""
    tip_id = ledger.record_tip(worker.id, amount)
    assert ledger.get_tip(tip_id).amount == Decimal(amount)
    agg = compute_worker_aggregate(ledger.list_tips_for_worker(worker.id))
    assert agg.total_earnings == Decimal(amount)
