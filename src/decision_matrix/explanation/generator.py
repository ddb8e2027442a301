"""Consultant explanation — structured ranking to natural-language verdict.

Produces a short summary of why the leading proposal wins, plus strengths,
concerns and negotiation points.  The numbers come from the engine; the
model only puts them into words.
"""

from __future__ import annotations

import logging
from typing import Sequence

from anthropic import Anthropic, APIError

from src.decision_matrix.criteria import CRITERIA, raw_value
from src.decision_matrix.llm import call_llm_json, make_client
from src.decision_matrix.models import (
    ConsultantExplanation,
    DecisionMatrixResult,
    DecisionMatrixWeights,
    Proposal,
)

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = """\
You are a corporate procurement consultant. A buyer compared supplier
proposals for one quote request using a weighted decision matrix.
You receive the weights, each proposal's raw terms, its normalized
0-100 criterion scores and its weighted total.

Produce:
1. A 2-3 sentence summary of why the top-ranked proposal leads.
2. Up to 3 strengths of the top-ranked proposal.
3. Up to 3 concerns or risks the buyer should check before approving.
4. Up to 3 concrete points to raise when negotiating with the runner-up.

RULES:
- Only cite numbers present in the data. Never invent suppliers or terms.
- If the totals are within 5 points, say the decision is close.
- Keep each list item under 20 words.

Return ONLY valid JSON:
{
  "summary": "2-3 sentences",
  "strengths": ["..."],
  "concerns": ["..."],
  "negotiation_points": ["..."]
}
"""


def _build_user_message(
    results: Sequence[DecisionMatrixResult],
    proposals: Sequence[Proposal],
    weights: DecisionMatrixWeights,
) -> str:
    by_id = {p.id: p for p in proposals}
    w = weights.as_dict()
    parts = ["WEIGHTS:"]
    for c in CRITERIA:
        parts.append(f"  {c.label}: {w[c.key]:g}")

    parts.append("")
    parts.append("RANKING:")
    for r in sorted(results, key=lambda r: r.rank):
        parts.append(f"  #{r.rank} {r.supplier_name or r.proposal_id} — total {r.total:.1f}")
        p = by_id.get(r.proposal_id)
        scores = r.scores.model_dump()
        for c in CRITERIA:
            raw = raw_value(p, c.key) if p else None
            raw_text = f"{raw:g}" if raw is not None else "n/a"
            parts.append(f"    {c.label}: raw={raw_text} score={scores[c.key]:.1f}")
    return "\n".join(parts)


def _fallback(results: Sequence[DecisionMatrixResult]) -> ConsultantExplanation:
    leader = min(results, key=lambda r: r.rank)
    name = leader.supplier_name or leader.proposal_id
    return ConsultantExplanation(
        summary=(
            f"{name} ranks first with a weighted score of {leader.total:.1f} "
            f"out of 100 under the selected weights."
        ),
    )


def _as_list(value: object) -> list[str]:
    if isinstance(value, list):
        return [str(v) for v in value if v]
    return []


def generate_explanation(
    client: Anthropic | None,
    results: Sequence[DecisionMatrixResult],
    proposals: Sequence[Proposal],
    weights: DecisionMatrixWeights,
) -> ConsultantExplanation:
    """Ask the model for a verdict on ``results``.

    Falls back to a deterministic one-line summary when the API call fails
    or the reply carries no usable summary.  ``client=None`` builds one from
    settings.
    """
    if not results:
        return ConsultantExplanation()
    if client is None:
        client = make_client()

    user_msg = _build_user_message(results, proposals, weights)
    try:
        data = call_llm_json(client, _SYSTEM_PROMPT, user_msg, fast=False)
    except APIError as e:
        logger.warning("Consultant call failed (%s), using fallback", e)
        return _fallback(results)

    summary = str(data.get("summary") or "").strip()
    if not summary:
        logger.warning(
            "Empty consultant summary for %d proposals, using fallback",
            len(results),
        )
        return _fallback(results)

    return ConsultantExplanation(
        summary=summary,
        strengths=_as_list(data.get("strengths")),
        concerns=_as_list(data.get("concerns")),
        negotiation_points=_as_list(data.get("negotiation_points")),
    )
