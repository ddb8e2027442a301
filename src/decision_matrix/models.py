"""Pydantic v2 data models — the data contracts flowing through the system."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


# ---------------------------------------------------------------------------
# Type aliases
# ---------------------------------------------------------------------------

ProposalStatus = Literal["submitted", "selected", "rejected"]

CriterionKey = Literal[
    "price",
    "delivery_time",
    "shipping_cost",
    "warranty",
    "reputation",
    "sla",
]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _new_id() -> str:
    return uuid.uuid4().hex


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _aliases(*names: str) -> AliasChoices:
    return AliasChoices(*names)


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

class Proposal(BaseModel):
    """A supplier's priced response to a quote request.

    Criterion fields are optional because raw records coming from the quote
    layer may be incomplete; the engine refuses to score such records.
    Field names also accept the camelCase keys used by the quote layer.
    """

    model_config = ConfigDict(frozen=True)

    id: str
    quote_id: str | None = Field(default=None, validation_alias=_aliases("quote_id", "quoteId"))
    supplier_id: str | None = Field(default=None, validation_alias=_aliases("supplier_id", "supplierId"))
    supplier_name: str = Field(default="", validation_alias=_aliases("supplier_name", "supplierName"))

    total_price: float | None = Field(
        default=None, ge=0.0, validation_alias=_aliases("total_price", "totalPrice"),
    )
    delivery_time: float | None = Field(
        default=None, ge=0.0, validation_alias=_aliases("delivery_time", "deliveryTime"),
    )
    shipping_cost: float | None = Field(
        default=None, ge=0.0, validation_alias=_aliases("shipping_cost", "shippingCost"),
    )
    warranty_months: float | None = Field(
        default=None, ge=0.0, validation_alias=_aliases("warranty_months", "warrantyMonths"),
    )
    sla_score: float | None = Field(
        default=None, ge=0.0, validation_alias=_aliases("sla_score", "deliveryScore", "sla"),
    )
    reputation: float | None = Field(default=None, ge=0.0, le=5.0)

    submitted_at: datetime | None = Field(
        default=None, validation_alias=_aliases("submitted_at", "submittedAt", "created_at"),
    )
    status: ProposalStatus = "submitted"


class DecisionMatrixWeights(BaseModel):
    """Relative importance of each criterion.

    Conventionally sums to 100, but any non-negative vector with a positive
    sum is accepted at scoring time.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    price: float = 0.0
    delivery_time: float = Field(
        default=0.0, validation_alias=_aliases("delivery_time", "deliveryTime", "delivery"),
    )
    shipping_cost: float = Field(
        default=0.0, validation_alias=_aliases("shipping_cost", "shippingCost", "shipping"),
    )
    warranty: float = 0.0
    reputation: float = 0.0
    sla: float = Field(default=0.0, validation_alias=_aliases("sla", "deliveryScore"))

    def as_dict(self) -> dict[str, float]:
        return self.model_dump()

    def total(self) -> float:
        return sum(self.as_dict().values())


# ---------------------------------------------------------------------------
# Scoring / output types
# ---------------------------------------------------------------------------

class CriterionScores(BaseModel):
    price: float = 0.0
    delivery_time: float = 0.0
    shipping_cost: float = 0.0
    warranty: float = 0.0
    reputation: float = 0.0
    sla: float = 0.0


class DecisionMatrixResult(BaseModel):
    proposal_id: str
    supplier_name: str = ""
    scores: CriterionScores
    total: float = 0.0
    rank: int


class RankingSummary(BaseModel):
    winner_id: str
    winner_name: str = ""
    winner_score: float = 0.0
    gaps: dict[str, float] = Field(default_factory=dict)
    negotiation_candidates: list[str] = Field(default_factory=list)


class ConsultantExplanation(BaseModel):
    summary: str = ""
    strengths: list[str] = Field(default_factory=list)
    concerns: list[str] = Field(default_factory=list)
    negotiation_points: list[str] = Field(default_factory=list)


# ---------------------------------------------------------------------------
# Templates / saved matrices
# ---------------------------------------------------------------------------

class WeightTemplate(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str
    description: str = ""
    weights: DecisionMatrixWeights
    client_id: str | None = None
    is_system: bool = False
    created_at: datetime = Field(default_factory=_utcnow)
    updated_at: datetime = Field(default_factory=_utcnow)


class ProposalSnapshot(BaseModel):
    id: str
    name: str = ""
    score: float = 0.0
    rank: int
    metrics: dict[str, float | None] = Field(default_factory=dict)


class SavedMatrix(BaseModel):
    id: str = Field(default_factory=_new_id)
    client_id: str
    name: str
    quote_id: str
    quote_title: str = ""
    weights: DecisionMatrixWeights
    proposals: list[ProposalSnapshot] = Field(default_factory=list)
    created_at: datetime = Field(default_factory=_utcnow)
