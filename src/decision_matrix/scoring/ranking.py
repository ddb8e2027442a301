"""Deterministic ordering of scored proposals.

Order: higher total first, then lower price, then earliest submission.
Proposals with no submission time go after timestamped ones, and the
proposal id settles anything still equal so the order is always total.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence

from src.decision_matrix.models import Proposal

_LATEST = float("inf")


def _submitted_key(submitted_at: datetime | None) -> float:
    if submitted_at is None:
        return _LATEST
    if submitted_at.tzinfo is None:
        submitted_at = submitted_at.replace(tzinfo=timezone.utc)
    return submitted_at.timestamp()


def rank_key(total: float, proposal: Proposal) -> tuple[float, float, float, str]:
    return (
        -total,
        proposal.total_price,
        _submitted_key(proposal.submitted_at),
        proposal.id,
    )


def rank_order(totals: Sequence[float], proposals: Sequence[Proposal]) -> list[int]:
    """Return indices into ``proposals`` from best to worst."""
    return sorted(
        range(len(proposals)),
        key=lambda i: rank_key(totals[i], proposals[i]),
    )
