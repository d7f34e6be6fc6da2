"""Pricing-environment capability.

Components that need "as of when, under which environment" pricing context
depend on HasPricingEnvironment structurally. Any object exposing
``pricing_date`` and ``calc_env`` satisfies it without inheriting from
anything::

    def describe(env: HasPricingEnvironment) -> str:
        return f"{env.calc_env}@{env.pricing_date.isoformat()}"
"""

from dataclasses import dataclass
from datetime import date
from typing import Protocol, runtime_checkable


@runtime_checkable
class HasPricingEnvironment(Protocol):
    """Read-only pricing date and calculation environment name."""

    @property
    def pricing_date(self) -> date: ...

    @property
    def calc_env(self) -> str: ...


@dataclass(frozen=True, slots=True)
class PricingEnvironment:
    """Concrete pricing environment owned by the application context."""

    pricing_date: date
    calc_env: str

    def __post_init__(self) -> None:
        if not self.calc_env:
            raise ValueError("calc_env must be a non-empty environment name")
