from typing import Optional

import yaml
from pydantic import BaseModel, Field, model_validator

from continuous_walk.utils import TIME_STEP, PLOT_Y_MIN, PLOT_Y_MAX, derive_num_steps


class LogConfig(BaseModel):
    level: str = "INFO"
    dir: Optional[str] = None
    rotation: str = "1 day"
    retention: str = "30 days"


class SimulationConfig(BaseModel):
    """
    Options for one simulate-and-plot run

    count is the requested number of walks; with extra_walk on (the
    historical behaviour) one more walk than requested is generated.
    y_min / y_max only reach the plot.
    """

    count: int = Field(default=5, ge=1)
    initial_value: float = 70.0
    duration: float = Field(default=1.0, ge=0)
    sd: float = Field(default=1.0, ge=0)
    time_step: float = Field(default=TIME_STEP, gt=0)
    y_min: float = PLOT_Y_MIN
    y_max: float = PLOT_Y_MAX
    seed: Optional[int] = None
    extra_walk: bool = True
    log: LogConfig = LogConfig()

    @model_validator(mode="after")
    def _check_y_range(self) -> "SimulationConfig":
        if self.y_min >= self.y_max:
            raise ValueError(f"y_min ({self.y_min}) must be below y_max ({self.y_max})")
        return self

    @property
    def num_steps(self) -> int:
        return derive_num_steps(self.duration, self.time_step)

    @classmethod
    def load(cls, path: str, **overrides) -> "SimulationConfig":
        """
        Load a YAML config file; keyword overrides that are not None win over file values
        """
        with open(path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}

        raw.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**raw)
