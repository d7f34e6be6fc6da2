from datetime import date

from pydantic import BaseModel


class PricingEnvironmentResponse(BaseModel):
    """Pricing date and calculation environment this process runs under."""

    model_config = {"from_attributes": True}

    pricing_date: date
    calc_env: str
