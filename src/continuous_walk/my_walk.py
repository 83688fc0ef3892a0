import numpy as np
import pandas as pd
from loguru import logger

from continuous_walk.utils import generate_multiple_walks, prepare_data_frame
from continuous_walk.utils import derive_num_steps, make_rng, plot_random_walks
from continuous_walk.utils import TIME_STEP
from continuous_walk.errors import InvalidParameter
from continuous_walk.config import SimulationConfig
from continuous_walk.logger import setup_logging


def simulate_walks(count: int, initial_value: float, duration: float, sd: float,
                   time_step: float = TIME_STEP, rng: np.random.Generator = None,
                   extra_walk: bool = True) -> pd.DataFrame:
  """
  Generate an ensemble of Gaussian random walks aligned on a time axis

  NOTE: with extra_walk=True (the default, kept for compatibility with
  earlier outputs) the table holds count + 1 walks, not count.
  Pass extra_walk=False to get exactly count walks.

  Returns a table with a 'time' column followed by one column per walk.
  """
  if count < 1:
    raise InvalidParameter(f"count must be >= 1, got {count}")
  effective_count = count + 1 if extra_walk else count

  #-walk length comes from the time grid, once-
  num_steps = derive_num_steps(duration, time_step)

  logger.info(
    "Simulating {} walks: initial_value={}, sd={}, duration={}, time_step={} ({} steps)",
    effective_count, initial_value, sd, duration, time_step, num_steps,
  )

  ensemble = generate_multiple_walks(effective_count, initial_value, num_steps, sd, rng=rng)
  return prepare_data_frame(ensemble, time_step, duration)


def run_simulation(config: SimulationConfig, plot: bool = True, show: bool = True):
  """Run one configured simulation; returns the table and the plot axes (None without plot)"""
  rng = make_rng(config.seed)

  df = simulate_walks(
    count=config.count,
    initial_value=config.initial_value,
    duration=config.duration,
    sd=config.sd,
    time_step=config.time_step,
    rng=rng,
    extra_walk=config.extra_walk,
  )

  ax = None
  if plot:
    ax = plot_random_walks(df, config.y_min, config.y_max, show=show)

  return df, ax


def main():
  setup_logging()

  #-Simulate a handful of walks starting at 70 over one time unit-
  config = SimulationConfig(count=5, initial_value=70, duration=1.0, sd=1.0, seed=42)
  df, _ = run_simulation(config)

  #-final value of every walk-
  logger.info("Final values: {}", df.iloc[-1, 1:].round(2).tolist())


if __name__ == "__main__":
  main()
