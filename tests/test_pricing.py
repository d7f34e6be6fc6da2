import dataclasses
from datetime import date

import pytest

from baseentity.config import Settings
from baseentity.pricing import HasPricingEnvironment, PricingEnvironment


class _CurveSet:
    """Unrelated class that happens to expose a pricing environment."""

    def __init__(self) -> None:
        self._as_of = date(2024, 3, 28)

    @property
    def pricing_date(self) -> date:
        return self._as_of

    @property
    def calc_env(self) -> str:
        return "EOD"


def test_pricing_environment_satisfies_protocol() -> None:
    env = PricingEnvironment(pricing_date=date(2024, 1, 15), calc_env="Default")

    assert isinstance(env, HasPricingEnvironment)
    assert env.pricing_date == date(2024, 1, 15)
    assert env.calc_env == "Default"


def test_structural_implementation_satisfies_protocol() -> None:
    assert isinstance(_CurveSet(), HasPricingEnvironment)


def test_object_without_calc_env_does_not_satisfy_protocol() -> None:
    class DateOnly:
        pricing_date = date(2024, 1, 15)

    assert not isinstance(DateOnly(), HasPricingEnvironment)


def test_pricing_environment_requires_calc_env() -> None:
    with pytest.raises(ValueError):
        PricingEnvironment(pricing_date=date(2024, 1, 15), calc_env="")


def test_pricing_environment_is_read_only() -> None:
    env = PricingEnvironment(pricing_date=date(2024, 1, 15), calc_env="Default")

    with pytest.raises(dataclasses.FrozenInstanceError):
        env.calc_env = "Other"  # type: ignore[misc]


def test_settings_pricing_environment_defaults_to_today() -> None:
    env = Settings(pricing_date=None, calc_env="Default").pricing_environment()

    assert env.pricing_date == date.today()
    assert env.calc_env == "Default"


def test_settings_pricing_environment_explicit() -> None:
    env = Settings(pricing_date=date(2024, 1, 15), calc_env="EOD").pricing_environment()

    assert env == PricingEnvironment(pricing_date=date(2024, 1, 15), calc_env="EOD")
