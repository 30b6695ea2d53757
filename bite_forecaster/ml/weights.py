"""
Model weight set.

``ModelWeights`` is the only mutable pydantic model in the package: the
trainer updates ``bias`` and the three trainable coefficients in place.
Everything else (reference optima, time/moon/season weights, penalties) keeps
its configured value for the life of the model.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

if TYPE_CHECKING:
    from bite_forecaster.config import WeightsConfig

# Safe ranges re-applied to the trainable coefficients after every pass.
TEMP_WEIGHT_RANGE: tuple[float, float] = (0.0, 0.5)
PRESSURE_WEIGHT_RANGE: tuple[float, float] = (0.0, 0.5)
WIND_WEIGHT_RANGE: tuple[float, float] = (0.0, 0.3)


class ModelWeights(BaseModel):
    """Coefficients, reference optima and penalties of the scoring model.

    Attributes:
        temp_weight: Coefficient of the temperature score (trainable).
        temp_threshold: Reference temperature in °C.
        pressure_weight: Coefficient of the pressure score (trainable).
        pressure_optimal: Reference pressure in hPa.
        wind_weight: Coefficient of the wind score (trainable).
        wind_optimal: Reference wind speed in m/s.
        morning_weight: Time-of-day score for the morning bucket.
        evening_weight: Time-of-day score for the evening bucket.
        moon_weight: Coefficient of the moon score.
        season_weight: Coefficient of the season factor.
        rain_penalty: Penalty coefficient for heavy precipitation.
        cloud_penalty: Penalty coefficient for cloud cover.
        bias: Intercept (trainable, unbounded).
    """

    model_config = ConfigDict(frozen=False)

    temp_weight: float = 0.25
    temp_threshold: float = 18.0
    pressure_weight: float = 0.20
    pressure_optimal: float = 1013.0
    wind_weight: float = 0.10
    wind_optimal: float = 4.0
    morning_weight: float = 0.15
    evening_weight: float = 0.12
    moon_weight: float = 0.08
    season_weight: float = 0.05
    rain_penalty: float = 0.15
    cloud_penalty: float = 0.05
    bias: float = 0.35

    @classmethod
    def from_config(cls, config: "WeightsConfig") -> "ModelWeights":
        return cls(**config.model_dump())

    def clamp_trainable(self) -> None:
        """Pull the trainable coefficients back into their safe ranges."""
        self.temp_weight = _clamp(self.temp_weight, *TEMP_WEIGHT_RANGE)
        self.pressure_weight = _clamp(self.pressure_weight, *PRESSURE_WEIGHT_RANGE)
        self.wind_weight = _clamp(self.wind_weight, *WIND_WEIGHT_RANGE)


def _clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))
