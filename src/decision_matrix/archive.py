"""Saved decision matrices — snapshots of a ranking kept for later review.

A snapshot freezes the weights, scores and raw metrics as they were when the
buyer saved it; it is a record for display and export, never an input to
scoring.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

from src.decision_matrix.criteria import proposal_metrics
from src.decision_matrix.errors import MatrixNotFound
from src.decision_matrix.models import (
    DecisionMatrixResult,
    DecisionMatrixWeights,
    Proposal,
    ProposalSnapshot,
    SavedMatrix,
)

logger = logging.getLogger(__name__)


class MatrixArchive:
    def __init__(self) -> None:
        self._matrices: dict[str, SavedMatrix] = {}

    def __len__(self) -> int:
        return len(self._matrices)

    def save(
        self,
        name: str,
        quote_id: str,
        quote_title: str,
        weights: DecisionMatrixWeights,
        results: Sequence[DecisionMatrixResult],
        proposals: Sequence[Proposal],
        *,
        client_id: str,
    ) -> SavedMatrix:
        by_id = {p.id: p for p in proposals}
        snapshots = [
            ProposalSnapshot(
                id=r.proposal_id,
                name=r.supplier_name,
                score=r.total,
                rank=r.rank,
                metrics=proposal_metrics(by_id[r.proposal_id]) if r.proposal_id in by_id else {},
            )
            for r in sorted(results, key=lambda r: r.rank)
        ]
        matrix = SavedMatrix(
            client_id=client_id,
            name=name,
            quote_id=quote_id,
            quote_title=quote_title,
            weights=weights,
            proposals=snapshots,
        )
        self._matrices[matrix.id] = matrix
        logger.info(
            "Saved matrix %s for quote %s (%d proposals)",
            matrix.id, quote_id, len(snapshots),
        )
        return matrix

    def get(self, matrix_id: str) -> SavedMatrix:
        try:
            return self._matrices[matrix_id]
        except KeyError:
            raise MatrixNotFound(matrix_id) from None

    def list(self, client_id: str) -> list[SavedMatrix]:
        """Newest first."""
        own = [m for m in self._matrices.values() if m.client_id == client_id]
        return sorted(own, key=lambda m: m.created_at, reverse=True)

    def search(self, client_id: str, term: str) -> list[SavedMatrix]:
        needle = term.strip().lower()
        if not needle:
            return self.list(client_id)
        return [
            m for m in self.list(client_id)
            if needle in m.name.lower() or needle in m.quote_title.lower()
        ]

    def delete(self, matrix_id: str) -> None:
        self.get(matrix_id)
        del self._matrices[matrix_id]
        logger.info("Deleted matrix %s", matrix_id)

    def export(self, matrix_id: str) -> dict[str, Any]:
        """JSON-ready dump of one saved matrix."""
        return self.get(matrix_id).model_dump(mode="json")
