"""Rules API endpoints: arithmetic, templates and limit breaks."""

from fastapi import APIRouter, HTTPException, Query

from campaignforge.processors.arithmetic import evaluate_arithmetic
from campaignforge.processors.limit_break import (
    LimitBreakProfileError,
    compute_power_ceiling,
    tier_thresholds,
    validate_profile,
)
from campaignforge.processors.trait_templates import render_template
from campaignforge.schemas.common import MessageResponse
from campaignforge.schemas.rules import (
    EvaluateRequest,
    EvaluateResponse,
    LimitBreakProfile,
    LimitBreakThresholds,
    RenderTemplateRequest,
    RenderTemplateResponse,
)

router = APIRouter()


@router.post("/evaluate", response_model=EvaluateResponse)
async def evaluate(data: EvaluateRequest) -> EvaluateResponse:
    """Evaluate an arithmetic expression. value is null when it can't be computed."""
    return EvaluateResponse(expression=data.expression, value=evaluate_arithmetic(data.expression))


@router.post("/render-template", response_model=RenderTemplateResponse)
async def render(data: RenderTemplateRequest) -> RenderTemplateResponse:
    """Render a trait/attribute template against a token context."""
    return RenderTemplateResponse(text=render_template(data.template, data.context))


@router.get("/limit-break/thresholds", response_model=LimitBreakThresholds)
async def limit_break_thresholds(
    dice_count: int = Query(..., ge=0, description="Power dice count"),
    potency: int = Query(..., ge=0, description="Power potency"),
    personal_dice_max: int = Query(0, ge=0, description="Personal limit break dice maximum"),
) -> LimitBreakThresholds:
    """Intensity needed for each limit break tier."""
    ceiling = compute_power_ceiling(dice_count, potency, personal_dice_max)
    return tier_thresholds(ceiling)


@router.post("/limit-break/validate", response_model=MessageResponse)
async def validate_limit_break_profile(data: LimitBreakProfile) -> MessageResponse:
    """Check a limit break profile's threshold and fail-forward settings."""
    try:
        validate_profile(data)
    except LimitBreakProfileError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return MessageResponse(message="Profile is valid")
