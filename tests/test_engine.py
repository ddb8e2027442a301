"""Unit tests for the scoring engine — pure functions, no I/O."""

from __future__ import annotations

import random
from datetime import datetime, timedelta, timezone

import pytest

from src.decision_matrix.criteria import preset
from src.decision_matrix.engine import score, summarize, validate_inputs
from src.decision_matrix.errors import InvalidInput
from src.decision_matrix.models import DecisionMatrixWeights, Proposal

_T0 = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)


def _make_proposal(
    pid: str,
    price: float = 1000.0,
    delivery: float = 10,
    shipping: float = 50.0,
    warranty: float = 12,
    sla: float = 80,
    reputation: float = 4.0,
    submitted_minutes: int | None = 0,
) -> Proposal:
    return Proposal(
        id=pid,
        supplier_name=f"Supplier {pid}",
        total_price=price,
        delivery_time=delivery,
        shipping_cost=shipping,
        warranty_months=warranty,
        sla_score=sla,
        reputation=reputation,
        submitted_at=(
            _T0 + timedelta(minutes=submitted_minutes)
            if submitted_minutes is not None else None
        ),
    )


def _random_proposals(rng: random.Random, n: int) -> list[Proposal]:
    return [
        _make_proposal(
            f"p{i}",
            price=rng.choice([500, 900, 1000, 1200, 5000]),
            delivery=rng.randint(1, 30),
            shipping=rng.choice([0, 25, 80]),
            warranty=rng.choice([0, 6, 12, 24]),
            sla=rng.randint(0, 100),
            reputation=round(rng.uniform(0, 5), 1),
            submitted_minutes=rng.randint(0, 600),
        )
        for i in range(n)
    ]


def _random_weights(rng: random.Random) -> DecisionMatrixWeights:
    values = [rng.choice([0, 0, 5, 10, 25, 40]) for _ in range(6)]
    if not any(values):
        values[0] = 1
    return DecisionMatrixWeights(
        price=values[0], delivery_time=values[1], shipping_cost=values[2],
        warranty=values[3], reputation=values[4], sla=values[5],
    )


def _ranks(results) -> dict[str, int]:
    return {r.proposal_id: r.rank for r in results}


class TestScenarios:
    def test_price_only_difference_ranks_by_price(self):
        proposals = [
            _make_proposal("A", price=1000),
            _make_proposal("B", price=1200),
            _make_proposal("C", price=900),
        ]
        weights = {
            "price": 40, "delivery": 20, "shipping": 10,
            "warranty": 10, "reputation": 20,
        }
        results = score(proposals, weights)
        assert [r.proposal_id for r in results] == ["C", "A", "B"]
        assert _ranks(results) == {"C": 1, "A": 2, "B": 3}

    def test_price_scenario_totals(self):
        proposals = [
            _make_proposal("A", price=1000),
            _make_proposal("B", price=1200),
            _make_proposal("C", price=900),
        ]
        results = {r.proposal_id: r for r in score(
            proposals, DecisionMatrixWeights(price=40, delivery_time=20,
                                             shipping_cost=10, warranty=10,
                                             reputation=20),
        )}
        assert results["C"].scores.price == 100.0
        assert results["B"].scores.price == 0.0
        assert results["A"].scores.price == pytest.approx(200 / 3)
        assert results["C"].total == 100.0
        assert results["B"].total == 60.0

    def test_single_proposal(self):
        results = score([_make_proposal("solo")], preset("balanced"))
        assert len(results) == 1
        assert results[0].rank == 1
        assert all(v == 100.0 for v in results[0].scores.model_dump().values())
        assert results[0].total == 100.0

    def test_negative_weight_rejected(self):
        with pytest.raises(InvalidInput, match="non-negative"):
            score(
                [_make_proposal("A"), _make_proposal("B", price=10)],
                {"price": -5, "warranty": 50},
            )


class TestValidation:
    def test_empty_proposals(self):
        with pytest.raises(InvalidInput):
            score([], preset("balanced"))

    def test_missing_numeric_field(self):
        incomplete = Proposal(id="X", total_price=100.0, delivery_time=3)
        with pytest.raises(InvalidInput, match="shipping_cost"):
            score([_make_proposal("A"), incomplete], preset("balanced"))

    def test_missing_field_in_mapping(self):
        raw = {"id": "X", "totalPrice": 100.0, "deliveryTime": 3}
        with pytest.raises(InvalidInput, match="missing"):
            score([raw], preset("balanced"))

    def test_malformed_mapping(self):
        with pytest.raises(InvalidInput, match="malformed"):
            score([{"id": "X", "total_price": "cheap"}], preset("balanced"))

    def test_non_finite_field_rejected(self):
        for bad in (float("nan"), float("inf")):
            raw = _make_proposal("A").model_dump()
            raw["warranty_months"] = bad
            with pytest.raises(InvalidInput):
                score([raw], preset("balanced"))

    def test_zero_weight_sum(self):
        with pytest.raises(InvalidInput, match="greater than zero"):
            score([_make_proposal("A")], DecisionMatrixWeights())

    def test_unknown_weight_key(self):
        with pytest.raises(InvalidInput, match="weights"):
            score([_make_proposal("A")], {"price": 50, "colour": 50})

    def test_duplicate_ids(self):
        with pytest.raises(InvalidInput, match="duplicate"):
            score([_make_proposal("A"), _make_proposal("A")], preset("balanced"))

    def test_mapping_inputs_accepted(self):
        proposals, weights = validate_inputs(
            [{
                "id": "M",
                "supplierName": "Mapping Co",
                "totalPrice": 10,
                "deliveryTime": 2,
                "shippingCost": 0,
                "warrantyMonths": 3,
                "deliveryScore": 70,
                "reputation": 4.5,
            }],
            {"price": 100},
        )
        assert proposals[0].supplier_name == "Mapping Co"
        assert proposals[0].sla_score == 70
        assert weights.price == 100

    def test_inputs_not_mutated(self):
        proposals = [_make_proposal("A"), _make_proposal("B", price=2000)]
        before = [p.model_dump() for p in proposals]
        weights = preset("urgent")
        score(proposals, weights)
        assert [p.model_dump() for p in proposals] == before
        assert weights == preset("urgent")


class TestTieBreaks:
    def test_identical_proposals_all_hundred(self):
        proposals = [
            _make_proposal("A", submitted_minutes=30),
            _make_proposal("B", submitted_minutes=10),
            _make_proposal("C", submitted_minutes=20),
        ]
        results = score(proposals, preset("balanced"))
        for r in results:
            assert all(v == 100.0 for v in r.scores.model_dump().values())
            assert r.total == 100.0
        assert [r.proposal_id for r in results] == ["B", "C", "A"]

    def test_equal_totals_prefer_lower_price(self):
        # price carries no weight, so totals tie while prices differ
        proposals = [
            _make_proposal("pricey", price=2000),
            _make_proposal("cheap", price=1500),
        ]
        results = score(proposals, {"warranty": 100})
        assert results[0].total == results[1].total
        assert results[0].proposal_id == "cheap"

    def test_missing_timestamp_sorts_last(self):
        proposals = [
            _make_proposal("undated", submitted_minutes=None),
            _make_proposal("dated", submitted_minutes=500),
        ]
        results = score(proposals, preset("balanced"))
        assert [r.proposal_id for r in results] == ["dated", "undated"]

    def test_naive_and_aware_timestamps_mix(self):
        naive = _make_proposal("naive").model_copy(
            update={"submitted_at": datetime(2025, 3, 1, 11, 0)},
        )
        aware = _make_proposal("aware", submitted_minutes=0)
        results = score([aware, naive], preset("balanced"))
        assert [r.proposal_id for r in results] == ["naive", "aware"]


class TestProperties:
    def test_bounds_and_dense_ranks(self):
        rng = random.Random(1234)
        for _ in range(200):
            n = rng.randint(1, 8)
            proposals = _random_proposals(rng, n)
            results = score(proposals, _random_weights(rng))

            assert len(results) == n
            assert sorted(r.rank for r in results) == list(range(1, n + 1))
            assert {r.proposal_id for r in results} == {p.id for p in proposals}
            for r in results:
                for v in r.scores.model_dump().values():
                    assert 0.0 <= v <= 100.0
                assert 0.0 <= r.total <= 100.0

    def test_results_ordered_by_rank(self):
        rng = random.Random(7)
        results = score(_random_proposals(rng, 6), preset("quality_focus"))
        assert [r.rank for r in results] == list(range(1, 7))
        totals = [r.total for r in results]
        assert totals == sorted(totals, reverse=True)

    def test_idempotent(self):
        rng = random.Random(99)
        proposals = _random_proposals(rng, 5)
        weights = _random_weights(rng)
        assert score(proposals, weights) == score(proposals, weights)

    def test_weight_scale_invariance(self):
        rng = random.Random(5)
        proposals = _random_proposals(rng, 5)
        base = preset("balanced")
        doubled = DecisionMatrixWeights(**{k: v * 2 for k, v in base.as_dict().items()})
        assert score(proposals, base) == score(proposals, doubled)

    def test_lower_price_never_worsens_rank(self):
        rng = random.Random(42)
        for _ in range(50):
            proposals = _random_proposals(rng, rng.randint(2, 6))
            weights = _random_weights(rng)
            target = proposals[0]
            prev_rank = _ranks(score(proposals, weights))[target.id]
            price = target.total_price
            for _ in range(5):
                price = price * 0.8
                proposals[0] = target.model_copy(update={"total_price": price})
                rank = _ranks(score(proposals, weights))[target.id]
                assert rank <= prev_rank
                prev_rank = rank


class TestSummarize:
    def test_winner_and_gaps(self):
        proposals = [
            _make_proposal("A", price=1000),
            _make_proposal("B", price=1200),
            _make_proposal("C", price=900),
        ]
        summary = summarize(score(proposals, {"price": 50, "warranty": 50}))
        assert summary.winner_id == "C"
        assert summary.winner_name == "Supplier C"
        assert summary.gaps["C"] == 0.0
        assert summary.gaps["B"] == pytest.approx(50.0)

    def test_top_three_are_candidates(self):
        proposals = [_make_proposal(f"p{i}", price=1000 + i * 100) for i in range(5)]
        summary = summarize(score(proposals, {"price": 100}))
        assert summary.winner_id == "p0"
        assert summary.negotiation_candidates[:2] == ["p1", "p2"]
        assert "p0" not in summary.negotiation_candidates

    def test_close_runner_up_outside_top_three(self):
        proposals = [
            _make_proposal("a", price=1000),
            _make_proposal("b", price=1001),
            _make_proposal("c", price=1002),
            _make_proposal("d", price=1003),
            _make_proposal("far", price=2000),
        ]
        summary = summarize(score(proposals, {"price": 60, "warranty": 40}))
        assert "d" in summary.negotiation_candidates
        assert "far" not in summary.negotiation_candidates

    def test_empty_ranking(self):
        with pytest.raises(InvalidInput):
            summarize([])
