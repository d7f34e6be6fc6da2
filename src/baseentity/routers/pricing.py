"""Pricing environment endpoint."""

from fastapi import APIRouter

from baseentity.dependencies import PricingEnv
from baseentity.schemas.pricing import PricingEnvironmentResponse

router = APIRouter()


@router.get("/pricing-environment", response_model=PricingEnvironmentResponse, status_code=200)
async def pricing_environment(env: PricingEnv) -> PricingEnvironmentResponse:
    """Report the pricing date and calculation environment of this process."""
    return PricingEnvironmentResponse.model_validate(env)
