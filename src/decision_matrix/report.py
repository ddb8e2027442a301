"""Tabular rendering of a ranking (pandas) for display and CSV export."""

from __future__ import annotations

from typing import Sequence

import pandas as pd

from src.decision_matrix.criteria import CRITERIA, raw_value
from src.decision_matrix.models import DecisionMatrixResult, Proposal


def to_frame(
    results: Sequence[DecisionMatrixResult],
    proposals: Sequence[Proposal] | None = None,
) -> pd.DataFrame:
    """One row per proposal, indexed by rank.

    Columns: supplier, total, one ``score_<criterion>`` per criterion and,
    when ``proposals`` is given, one ``raw_<criterion>`` per criterion.
    """
    by_id = {p.id: p for p in proposals or []}
    rows = []
    for r in sorted(results, key=lambda r: r.rank):
        row = {
            "rank": r.rank,
            "proposal_id": r.proposal_id,
            "supplier": r.supplier_name,
            "total": r.total,
        }
        scores = r.scores.model_dump()
        for c in CRITERIA:
            row[f"score_{c.key}"] = scores[c.key]
        p = by_id.get(r.proposal_id)
        if proposals is not None:
            for c in CRITERIA:
                row[f"raw_{c.key}"] = raw_value(p, c.key) if p else None
        rows.append(row)

    df = pd.DataFrame(rows)
    if df.empty:
        return df
    return df.set_index("rank")


def to_csv(
    results: Sequence[DecisionMatrixResult],
    proposals: Sequence[Proposal] | None = None,
    precision: int = 2,
) -> str:
    return to_frame(results, proposals).round(precision).to_csv()
