"""Min/max normalization of raw criterion values onto a 0-100 scale.

Each criterion is rescaled against the compared set only, so a score says
how a proposal sits between the best and worst offer on the table, not how
good it is in absolute terms.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from src.decision_matrix.criteria import CRITERIA, raw_value
from src.decision_matrix.models import CriterionScores, Proposal

logger = logging.getLogger(__name__)

SCALE = 100.0


def normalize(values: np.ndarray, higher_is_better: bool) -> np.ndarray:
    """Rescale one criterion column to [0, 100].

    When every value is equal there is nothing to discriminate on and all
    proposals receive the full 100.
    """
    values = np.asarray(values, dtype=float)
    lo = values.min()
    hi = values.max()
    if hi == lo:
        return np.full(values.shape, SCALE)
    if higher_is_better:
        scaled = SCALE * ((values - lo) / (hi - lo))
    else:
        scaled = SCALE * ((hi - values) / (hi - lo))
    return np.clip(scaled, 0.0, SCALE)


def raw_matrix(proposals: Sequence[Proposal]) -> np.ndarray:
    """Stack raw criterion values into an (n_proposals, n_criteria) array."""
    return np.array(
        [[raw_value(p, c.key) for c in CRITERIA] for p in proposals],
        dtype=float,
    )


def normalize_all(proposals: Sequence[Proposal]) -> list[CriterionScores]:
    raw = raw_matrix(proposals)
    columns = []
    for idx, c in enumerate(CRITERIA):
        column = raw[:, idx]
        columns.append(normalize(column, c.direction == "higher"))
        logger.debug(
            "Normalized %s (%s is better): min=%.4g max=%.4g",
            c.key, c.direction, column.min(), column.max(),
        )
    normalized = np.column_stack(columns)
    return [
        CriterionScores(**{c.key: float(row[idx]) for idx, c in enumerate(CRITERIA)})
        for row in normalized
    ]
