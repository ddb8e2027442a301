"""Composite ranker — weighted mean of the normalized criterion scores."""

from __future__ import annotations

from src.decision_matrix.models import CriterionScores, DecisionMatrixWeights


def composite_score(scores: CriterionScores, weights: DecisionMatrixWeights) -> float:
    w = weights.as_dict()
    s = scores.model_dump()
    weighted = sum(s[key] * w[key] for key in w)
    return weighted / sum(w.values())
