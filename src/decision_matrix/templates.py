"""Weight template store — named presets per tenant plus system defaults.

Scores are recomputed on demand and never stored against a template, so
deleting a tenant template needs no reference check.
"""

from __future__ import annotations

import logging
from typing import Any, Mapping

from pydantic import ValidationError

from src.decision_matrix.config import settings
from src.decision_matrix.criteria import (
    PRESET_DESCRIPTIONS,
    PRESETS,
    WEIGHT_TARGET,
    invalid_weights,
    is_balanced,
    weights_total,
)
from src.decision_matrix.errors import TemplateError
from src.decision_matrix.models import DecisionMatrixWeights, WeightTemplate

logger = logging.getLogger(__name__)


def _system_templates() -> list[WeightTemplate]:
    return [
        WeightTemplate(
            id=f"system-{name}",
            name=name,
            description=PRESET_DESCRIPTIONS.get(name, ""),
            weights=weights,
            client_id=None,
            is_system=True,
        )
        for name, weights in PRESETS.items()
    ]


class TemplateStore:
    """In-process template repository.

    System presets are seeded on construction and are read-only.
    """

    def __init__(self, seed_system: bool = True) -> None:
        self._templates: dict[str, WeightTemplate] = {}
        self._builtin: set[str] = set()
        if seed_system:
            for t in _system_templates():
                self._templates[t.id] = t
                self._builtin.add(t.id)

    def __len__(self) -> int:
        return len(self._templates)

    def __contains__(self, template_id: object) -> bool:
        return template_id in self._templates

    def create(
        self,
        name: str,
        weights: DecisionMatrixWeights | Mapping[str, Any],
        *,
        client_id: str | None = None,
        description: str = "",
    ) -> WeightTemplate:
        name = name.strip()
        if not name:
            raise TemplateError("template name is required")

        if not isinstance(weights, DecisionMatrixWeights):
            try:
                weights = DecisionMatrixWeights.model_validate(weights)
            except ValidationError as e:
                raise TemplateError(f"invalid weights: {e}") from e

        bad = invalid_weights(weights)
        if bad:
            raise TemplateError(f"weights must be non-negative: {', '.join(bad)}")
        if not is_balanced(weights):
            raise TemplateError(
                f"weights must sum to {WEIGHT_TARGET:g} "
                f"(got {weights_total(weights):g})"
            )

        for existing in self._templates.values():
            if existing.client_id == client_id and existing.name.lower() == name.lower():
                raise TemplateError(f"template {name!r} already exists")

        template = WeightTemplate(
            name=name,
            description=description,
            weights=weights,
            client_id=client_id,
            is_system=client_id is None,
        )
        self._templates[template.id] = template
        logger.info(
            "Created template %s (%s) for %s",
            template.id, name, client_id or "system",
        )
        return template

    def get(self, template_id: str) -> WeightTemplate:
        try:
            return self._templates[template_id]
        except KeyError:
            raise TemplateError(f"unknown template {template_id!r}") from None

    def get_by_name(self, name: str, client_id: str | None = None) -> WeightTemplate:
        """Tenant template with this name, else the system one."""
        wanted = name.strip().lower()
        fallback = None
        for t in self._templates.values():
            if t.name.lower() != wanted:
                continue
            if t.client_id == client_id:
                return t
            if t.is_system:
                fallback = t
        if fallback is None:
            raise TemplateError(f"unknown template {name!r}")
        return fallback

    def default(self, client_id: str | None = None) -> WeightTemplate:
        return self.get_by_name(settings.default_template, client_id)

    def list(self, client_id: str | None = None) -> list[WeightTemplate]:
        """System templates first, then the tenant's own; each group by name."""
        system = [t for t in self._templates.values() if t.is_system]
        own = []
        if client_id is not None:
            own = [t for t in self._templates.values() if t.client_id == client_id]
        key = lambda t: t.name.lower()  # noqa: E731
        return sorted(system, key=key) + sorted(own, key=key)

    def delete(self, template_id: str) -> None:
        template = self.get(template_id)
        if template_id in self._builtin:
            raise TemplateError(f"built-in template {template.name!r} cannot be deleted")
        del self._templates[template_id]
        logger.info("Deleted template %s (%s)", template_id, template.name)
