"""Engine settings and the table of defaults applied to missing assumptions."""
from __future__ import annotations

from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class EngineSettings(BaseSettings):
    """Settings loaded from ``BUSINESS_CASE_*`` environment variables.

    Every value the engine substitutes for an undeclared assumption lives here,
    so tests and callers can see (and override) exactly what is assumed.
    """

    # Projection
    default_periods: int = Field(60, ge=1)

    # Growth patterns
    default_monthly_growth: float = 0.05
    default_monthly_flat_increase: float = 0.0
    default_yoy_growth: float = 0.0

    # Discounting
    default_interest_rate: float = 0.0

    # Implicit linear growth of opex line j, per period; lines past the table grow by 0
    opex_monthly_increase: List[float] = Field(default_factory=lambda: [300.0, 200.0, 100.0])

    # IRR search
    irr_lower_bound: float = -0.99
    irr_upper_bound: float = 10.0
    irr_tolerance: float = 1e-7
    irr_max_iterations: int = 200

    # Sensitivity
    sensitivity_max_workers: int = Field(4, ge=1)
    strict_driver_paths: bool = True

    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        env_prefix="BUSINESS_CASE_",
        env_file=".env",
        extra="ignore",
    )

    def opex_increase_for(self, index: int) -> float:
        if 0 <= index < len(self.opex_monthly_increase):
            return self.opex_monthly_increase[index]
        return 0.0


settings = EngineSettings()
