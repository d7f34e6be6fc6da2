"""Shared FastAPI dependencies.

Reusable type aliases and dependency functions that routers import.
Defined here (not in main.py) to avoid circular imports when routers
are registered in main.
"""

from typing import Annotated

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from baseentity.db.session import get_db
from baseentity.pricing import HasPricingEnvironment


def get_pricing_environment(request: Request) -> HasPricingEnvironment:
    """The pricing environment fixed on app.state at startup; override in tests."""
    return request.app.state.pricing_environment


DB = Annotated[AsyncSession, Depends(get_db)]
PricingEnv = Annotated[HasPricingEnvironment, Depends(get_pricing_environment)]
