"""Rules schemas: arithmetic, template rendering and limit breaks."""

from typing import Any

from pydantic import BaseModel, Field

from campaignforge.schemas.common import Number


class EvaluateRequest(BaseModel):
    expression: str


class EvaluateResponse(BaseModel):
    expression: str
    value: Number | None = Field(None, description="Null when the expression cannot be computed")


class RenderTemplateRequest(BaseModel):
    template: str
    context: dict[str, Any] = Field(default_factory=dict)


class RenderTemplateResponse(BaseModel):
    text: str


class LimitBreakThresholds(BaseModel):
    """Successes-times-potency needed for each tier."""
    power_ceiling: Number
    push: int
    break_: int = Field(..., alias="break")
    transcend: int

    model_config = {"populate_by_name": True}


class LimitBreakProfile(BaseModel):
    threshold_percent: int
    fail_forward_effect_id: str | None = None
    fail_forward_cost_a_id: str | None = None
    fail_forward_cost_b_id: str | None = None
