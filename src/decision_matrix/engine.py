"""Top-level orchestrator — turns proposals and weights into a ranking.

Pipeline:
  1. Coerce proposals / weights (model instances or plain mappings)
  2. Validate everything up front                (InvalidInput, no partial output)
  3. Normalize each criterion to 0-100           (min/max over the compared set)
  4. Weighted mean per proposal                  (divided by the weight sum)
  5. Rank: total desc, price asc, submission asc
  6. Summarize: winner, gaps, negotiation candidates (optional)

Pure functions throughout: nothing here performs I/O except the sample
data loaders, and inputs are never mutated.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Mapping, Sequence

from pydantic import ValidationError

from src.decision_matrix.config import NegotiationThresholds, settings
from src.decision_matrix.criteria import invalid_weights, missing_fields
from src.decision_matrix.errors import InvalidInput
from src.decision_matrix.models import (
    DecisionMatrixResult,
    DecisionMatrixWeights,
    Proposal,
    RankingSummary,
)
from src.decision_matrix.scoring.composite import composite_score
from src.decision_matrix.scoring.normalization import normalize_all
from src.decision_matrix.scoring.ranking import rank_order

logger = logging.getLogger(__name__)

DATA_DIR = Path(__file__).resolve().parent.parent.parent / "data"

ProposalLike = Proposal | Mapping[str, Any]
WeightsLike = DecisionMatrixWeights | Mapping[str, Any]


def load_sample_proposals() -> list[Proposal]:
    path = DATA_DIR / "sample_proposals.json"
    with open(path) as f:
        raw = json.load(f)
    return [Proposal.model_validate(p) for p in raw]


def load_proposals_from_json(data: list[dict]) -> list[Proposal]:
    return [Proposal.model_validate(p) for p in data]


# ---------------------------------------------------------------------------
# Input coercion / validation
# ---------------------------------------------------------------------------

def _coerce_proposal(item: ProposalLike, position: int) -> Proposal:
    if isinstance(item, Proposal):
        return item
    try:
        return Proposal.model_validate(item)
    except ValidationError as e:
        raise InvalidInput(f"proposal #{position + 1} is malformed: {e}") from e


def _coerce_weights(weights: WeightsLike) -> DecisionMatrixWeights:
    if isinstance(weights, DecisionMatrixWeights):
        return weights
    try:
        return DecisionMatrixWeights.model_validate(weights)
    except ValidationError as e:
        raise InvalidInput(f"weights are malformed: {e}") from e


def validate_inputs(
    proposals: Sequence[ProposalLike],
    weights: WeightsLike,
) -> tuple[list[Proposal], DecisionMatrixWeights]:
    """Coerce and check scoring inputs.  Raises InvalidInput on the first problem."""
    if not proposals:
        raise InvalidInput("at least one proposal is required")

    coerced = [_coerce_proposal(p, i) for i, p in enumerate(proposals)]
    w = _coerce_weights(weights)

    bad = invalid_weights(w)
    if bad:
        raise InvalidInput(
            f"weights must be non-negative numbers: {', '.join(bad)}"
        )
    if w.total() <= 0:
        raise InvalidInput("at least one weight must be greater than zero")

    seen: set[str] = set()
    for p in coerced:
        missing = missing_fields(p)
        if missing:
            raise InvalidInput(
                f"proposal {p.id!r} is missing numeric fields: {', '.join(missing)}"
            )
        if p.id in seen:
            raise InvalidInput(f"duplicate proposal id {p.id!r}")
        seen.add(p.id)

    return coerced, w


# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

def score(
    proposals: Sequence[ProposalLike],
    weights: WeightsLike,
    *,
    precision: int | None = None,
) -> list[DecisionMatrixResult]:
    """Rank ``proposals`` against ``weights``.

    Returns one result per proposal, ordered best first, with ranks 1..N.
    """
    items, w = validate_inputs(proposals, weights)
    digits = settings.score_precision if precision is None else precision

    normalized = normalize_all(items)
    totals = [round(composite_score(s, w), digits) for s in normalized]
    order = rank_order(totals, items)

    results = [
        DecisionMatrixResult(
            proposal_id=items[i].id,
            supplier_name=items[i].supplier_name,
            scores=normalized[i],
            total=totals[i],
            rank=rank,
        )
        for rank, i in enumerate(order, start=1)
    ]

    logger.info(
        "Scored %d proposals: winner=%s (%.2f)",
        len(results), results[0].proposal_id, results[0].total,
    )
    for r in results:
        logger.debug("  #%d %s total=%.4f", r.rank, r.proposal_id, r.total)
    return results


def summarize(
    results: Sequence[DecisionMatrixResult],
    thresholds: NegotiationThresholds | None = None,
) -> RankingSummary:
    """Winner, gap to the leader, and which runners-up are worth negotiating.

    A non-winning proposal qualifies when it sits in the top N, or when it
    scores at least ``min_score`` and trails the leader by no more than
    ``max_gap`` points.
    """
    if not results:
        raise InvalidInput("cannot summarize an empty ranking")

    t = thresholds or settings.negotiation
    ordered = sorted(results, key=lambda r: r.rank)
    leader = ordered[0]

    gaps: dict[str, float] = {}
    candidates: list[str] = []
    for r in ordered:
        gap = round(leader.total - r.total, settings.score_precision)
        gaps[r.proposal_id] = gap
        if r.rank == 1:
            continue
        close_enough = r.total >= t.min_score and gap <= t.max_gap
        if r.rank <= t.top_n or close_enough:
            candidates.append(r.proposal_id)

    return RankingSummary(
        winner_id=leader.proposal_id,
        winner_name=leader.supplier_name,
        winner_score=leader.total,
        gaps=gaps,
        negotiation_candidates=candidates,
    )
