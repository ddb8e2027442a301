"""Criteria catalogue — the six comparison criteria and the built-in presets.

Deterministic lookup tables only. This is where a deployment would tune the
preset weights or add a criterion label for a different market.
"""

from __future__ import annotations

import math
from typing import Literal, NamedTuple

from src.decision_matrix.errors import InvalidInput
from src.decision_matrix.models import DecisionMatrixWeights, Proposal

Direction = Literal["higher", "lower"]


# ---------------------------------------------------------------------------
# Criterion table
# ---------------------------------------------------------------------------

class Criterion(NamedTuple):
    key: str
    field: str
    label: str
    direction: Direction


CRITERIA: tuple[Criterion, ...] = (
    Criterion("price", "total_price", "Price", "lower"),
    Criterion("delivery_time", "delivery_time", "Delivery time", "lower"),
    Criterion("shipping_cost", "shipping_cost", "Shipping cost", "lower"),
    Criterion("warranty", "warranty_months", "Warranty", "higher"),
    Criterion("reputation", "reputation", "Reputation", "higher"),
    Criterion("sla", "sla_score", "SLA", "higher"),
)

CRITERION_KEYS: tuple[str, ...] = tuple(c.key for c in CRITERIA)

_BY_KEY: dict[str, Criterion] = {c.key: c for c in CRITERIA}


def criterion(key: str) -> Criterion:
    return _BY_KEY[key]


def higher_is_better(key: str) -> bool:
    return _BY_KEY[key].direction == "higher"


def raw_value(proposal: Proposal, key: str) -> float | None:
    return getattr(proposal, _BY_KEY[key].field)


def missing_fields(proposal: Proposal) -> list[str]:
    """Return criterion fields that are absent or not finite."""
    missing = []
    for c in CRITERIA:
        value = getattr(proposal, c.field)
        if value is None or not math.isfinite(value):
            missing.append(c.field)
    return missing


def proposal_metrics(proposal: Proposal) -> dict[str, float | None]:
    return {c.key: raw_value(proposal, c.key) for c in CRITERIA}


# ---------------------------------------------------------------------------
# Built-in presets (seeded as system templates)
# ---------------------------------------------------------------------------

PRESETS: dict[str, DecisionMatrixWeights] = {
    "balanced": DecisionMatrixWeights(
        price=30, delivery_time=20, shipping_cost=10,
        warranty=15, reputation=15, sla=10,
    ),
    "price_focus": DecisionMatrixWeights(
        price=50, delivery_time=15, shipping_cost=15,
        warranty=10, reputation=5, sla=5,
    ),
    "quality_focus": DecisionMatrixWeights(
        price=15, delivery_time=10, shipping_cost=5,
        warranty=30, reputation=25, sla=15,
    ),
    "urgent": DecisionMatrixWeights(
        price=20, delivery_time=45, shipping_cost=5,
        warranty=5, reputation=10, sla=15,
    ),
}

PRESET_DESCRIPTIONS: dict[str, str] = {
    "balanced": "Even trade-off between cost, speed and supplier quality.",
    "price_focus": "Lowest total cost wins unless the gap is small.",
    "quality_focus": "Warranty and supplier track record dominate.",
    "urgent": "Fastest reliable delivery, price secondary.",
}


def preset(name: str) -> DecisionMatrixWeights:
    return PRESETS[name]


# ---------------------------------------------------------------------------
# Advisory weight checks
# ---------------------------------------------------------------------------

WEIGHT_TARGET = 100.0
_WEIGHT_TOLERANCE = 0.01


def weights_total(weights: DecisionMatrixWeights) -> float:
    return weights.total()


def invalid_weights(weights: DecisionMatrixWeights) -> list[str]:
    """Return weight keys that are negative or not finite."""
    return [
        k for k, v in weights.as_dict().items()
        if not math.isfinite(v) or v < 0
    ]


def is_balanced(weights: DecisionMatrixWeights) -> bool:
    """True when the weights sum to 100 (the convention the UI enforces)."""
    return abs(weights_total(weights) - WEIGHT_TARGET) <= _WEIGHT_TOLERANCE


def rebalance(
    weights: DecisionMatrixWeights, key: str, value: float,
) -> DecisionMatrixWeights:
    """Set one weight and rescale the others so the vector sums to 100.

    ``value`` is clamped to [0, 100] and rounded to a whole percentage. The
    other weights keep their proportions; rounding leftovers go to the
    largest fractional parts, so no weight goes negative and the sum is
    exact. When every other weight is zero the remainder is split evenly.
    """
    if key not in _BY_KEY:
        raise InvalidInput(f"unknown criterion {key!r}")
    if not math.isfinite(value):
        raise InvalidInput(f"weight for {key!r} must be a finite number")

    target = int(WEIGHT_TARGET)
    fixed = min(max(int(math.floor(value + 0.5)), 0), target)
    remaining = target - fixed

    current = weights.as_dict()
    others = [k for k in CRITERION_KEYS if k != key]
    others_total = sum(max(current[k], 0.0) for k in others)

    if others_total > 0:
        exact = {k: max(current[k], 0.0) * remaining / others_total for k in others}
    else:
        exact = {k: remaining / len(others) for k in others}

    new = {k: math.floor(exact[k]) for k in others}
    leftover = remaining - sum(new.values())
    by_fraction = sorted(others, key=lambda k: (-(exact[k] - new[k]), -new[k]))
    for k in by_fraction[:leftover]:
        new[k] += 1

    new[key] = fixed
    return DecisionMatrixWeights(**{k: float(new[k]) for k in CRITERION_KEYS})
