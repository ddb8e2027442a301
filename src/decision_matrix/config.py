"""Configuration — ranking precision, negotiation thresholds, model parameters."""

from __future__ import annotations

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings


class NegotiationThresholds(BaseModel):
    min_score: float = Field(default=70.0, ge=0.0, le=100.0)
    max_gap: float = Field(default=15.0, ge=0.0, le=100.0)
    top_n: int = Field(default=3, ge=1)


class Settings(BaseSettings):
    anthropic_api_key: str = ""
    anthropic_model: str = "claude-sonnet-4-20250514"
    anthropic_fast_model: str = "claude-3-haiku-20240307"
    anthropic_max_tokens: int = Field(default=2048, ge=1)

    score_precision: int = Field(default=4, ge=0, le=12)
    default_template: str = "balanced"

    negotiation: NegotiationThresholds = NegotiationThresholds()

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
