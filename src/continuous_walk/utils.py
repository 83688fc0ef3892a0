from typing import Sequence, Union, List
import numpy as np
import pandas as pd
import matplotlib.pyplot as plt
from loguru import logger

from continuous_walk.errors import InvalidParameter, DimensionMismatch

TIME_STEP = 0.01
PLOT_Y_MIN = 45
PLOT_Y_MAX = 100

# rounding slack so a grid like 0.04 / 0.01 keeps its endpoint
_SEQ_FUZZ = 1e-10

# ==================== RANDOM STREAM ====================

def make_rng(seed: int = None) -> np.random.Generator:
    """Create a random generator handle; unseeded when seed is None"""
    return np.random.default_rng(seed)


def spawn_rngs(seed: int, n: int) -> List[np.random.Generator]:
    """
    Create n statistically independent generators from one seed

    Each generator can be handed to a separate (possibly concurrent)
    generation call without sharing state with the others.
    """
    if n < 1:
        raise InvalidParameter(f"n must be >= 1, got {n}")
    children = np.random.SeedSequence(seed).spawn(n)
    return [np.random.default_rng(child) for child in children]


# ==================== RANDOM WALK GENERATION ====================

def generate_random_walk(initial_value: float, num_steps: int, sd: float,
                         rng: np.random.Generator = None) -> np.ndarray:
    """
    Generate a single Gaussian random walk

    Parameters:
    - initial_value: Starting value of the walk
    - num_steps: Number of samples in the walk, initial value included (>= 1)
    - sd: Standard deviation of the normal increments (>= 0)
    - rng: Generator the increments are drawn from. A fresh unseeded one is used when None

    Returns:
    - walk: A read-only array of shape (num_steps,). walk[0] is initial_value and
      every following sample adds one N(0, sd) draw to the previous one.
      Exactly num_steps - 1 draws are taken from rng.
    """
    _check_num_steps(num_steps)
    if not sd >= 0:
        raise InvalidParameter(f"sd must be >= 0, got {sd}")
    # -0.0 -> 0.0; numpy rejects a scale with the sign bit set
    sd = float(sd) + 0.0

    if rng is None:
        rng = make_rng()

    steps = np.empty(int(num_steps), dtype=float)
    steps[0] = initial_value
    if num_steps > 1:
        steps[1:] = rng.normal(loc=0.0, scale=sd, size=int(num_steps) - 1)

    # sequential accumulation: walk[i] == walk[i-1] + steps[i]
    walk = np.cumsum(steps)
    walk.flags.writeable = False
    return walk


def generate_multiple_walks(count: int, initial_value: float, num_steps: int, sd: float,
                            rng: np.random.Generator = None) -> np.ndarray:
    """
    Generates an ensemble of independent Gaussian random walks

    Args:
        count (int): The number of walks in the ensemble
        initial_value (float): Starting value for every walk
        num_steps (int): Number of samples per walk
        sd (float): Standard deviation of the normal increments
        rng (np.random.Generator): Shared generator; walk j draws right after walk j-1

    Returns:
        np.ndarray: A read-only array of shape (num_steps, count),
                    column j holding walk j
    """
    if isinstance(count, bool) or int(count) != count or count < 1:
        raise InvalidParameter(f"count must be an integer >= 1, got {count}")

    if rng is None:
        rng = make_rng()

    walks = [generate_random_walk(initial_value, num_steps, sd, rng=rng)
             for _ in range(int(count))]
    ensemble = np.column_stack(walks)

    logger.debug("Generated {} walks of {} steps (sd={})", int(count), int(num_steps), sd)

    ensemble.flags.writeable = False
    return ensemble


# ==================== TIME SERIES ASSEMBLY ====================

def derive_num_steps(duration: float, time_step: float = TIME_STEP) -> int:
    """
    Number of samples on the grid 0, time_step, ..., duration (endpoint included)

    This is the one place the walk length is derived from the time grid,
    so generation and assembly cannot disagree when both use it.
    """
    if not (np.isfinite(time_step) and time_step > 0):
        raise InvalidParameter(f"time_step must be finite and > 0, got {time_step}")
    if not (np.isfinite(duration) and duration >= 0):
        raise InvalidParameter(f"duration must be finite and >= 0, got {duration}")

    return int(np.floor(duration / time_step + _SEQ_FUZZ)) + 1


def make_time_axis(time_step: float, duration: float) -> np.ndarray:
    """Time column: 0, time_step, 2*time_step, ... up to and including duration"""
    length = derive_num_steps(duration, time_step)
    time = np.minimum(np.arange(length) * time_step, duration)

    # duration on the grid: last point is exactly duration, not a rounded multiple
    if abs(duration / time_step - (length - 1)) < _SEQ_FUZZ:
        time[-1] = duration

    return time


def prepare_data_frame(ensemble: Union[np.ndarray, Sequence[np.ndarray]],
                       time_step: float, duration: float) -> pd.DataFrame:
    """
    Align an ensemble of walks on a shared time axis

    Args:
        ensemble: Array of shape (num_steps, count), or a sequence of
                  equal-length 1D walks
        time_step: Spacing of the time axis
        duration: Last time value

    Returns:
        pd.DataFrame: Columns 'time', 'walk_1', ..., 'walk_<count>'.
                      Row i pairs time[i] with sample i of every walk.

    Raises:
        DimensionMismatch: when the time axis and the walks differ in length
    """
    time = make_time_axis(time_step, duration)
    walks = _as_ensemble(ensemble)

    num_steps, count = walks.shape
    if len(time) != num_steps:
        raise DimensionMismatch(
            f"time axis has {len(time)} points (time_step={time_step}, duration={duration}) "
            f"but walks have {num_steps} steps"
        )

    columns = {"time": time}
    for j in range(count):
        columns[f"walk_{j + 1}"] = walks[:, j]

    return pd.DataFrame(columns)


# ==================== STATISTICS ====================

def calculate_displacement_variance(ensemble: np.ndarray) -> np.ndarray:
    """
    Sample variance across walks of walk[i] - walk[0], for every step i

    For Gaussian increments this approaches i * sd**2 as the ensemble grows.
    """
    walks = _as_ensemble(ensemble)
    if walks.shape[1] < 2:
        raise InvalidParameter("at least two walks are needed to estimate a variance")

    displacements = walks - walks[0, :]
    return np.var(displacements, axis=1, ddof=1)


# ==================== VISUALIZATION ====================

def plot_random_walks(df: pd.DataFrame, y_min: float = PLOT_Y_MIN, y_max: float = PLOT_Y_MAX,
                      ax: plt.Axes = None, title: str = 'Continuous Random Walks',
                      show: bool = True) -> plt.Axes:
    """
    Plots every walk column of an assembled table against its first (time) column

    Each series gets point markers and the colour matching its column index.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=(10, 5))

    x = df.iloc[:, 0]
    names = df.columns[1:]
    # the default cycle has 10 colours; sample a colormap past that
    if len(names) > 10:
        colors = [tuple(c) for c in plt.cm.viridis(np.linspace(0, 1, len(names)))]
    else:
        colors = [f'C{i}' for i in range(len(names))]

    for name, color in zip(names, colors):
        ax.plot(x, df[name], marker='o', markersize=3, linewidth=1,
                color=color, label=name)

    ax.set_ylim(y_min, y_max)
    ax.set_xlabel('Time')
    ax.set_ylabel('Value')
    ax.set_title(title)
    ax.grid(True, linestyle='--', alpha=0.5)

    if show:
        plt.show()

    return ax


# ==================== HELPER FUNCTIONS ====================

def _check_num_steps(num_steps) -> None:
    if isinstance(num_steps, bool) or int(num_steps) != num_steps or num_steps < 1:
        raise InvalidParameter(f"num_steps must be an integer >= 1, got {num_steps}")


def _as_ensemble(ensemble) -> np.ndarray:
    """Turn an ensemble (2D array, single 1D walk or list of walks) into a (num_steps, count) array"""
    if isinstance(ensemble, np.ndarray):
        if ensemble.ndim == 2:
            return ensemble
        if ensemble.ndim == 1:
            return ensemble.reshape(-1, 1)
        raise InvalidParameter(f"ensemble array must be 1D or 2D, got {ensemble.ndim}D")

    walks = [np.asarray(w, dtype=float) for w in ensemble]
    if len(walks) == 0:
        raise InvalidParameter("ensemble must contain at least one walk")
    if any(w.ndim != 1 for w in walks):
        raise InvalidParameter("every walk in an ensemble must be a 1D sequence")
    lengths = {len(w) for w in walks}
    if len(lengths) != 1:
        raise DimensionMismatch(f"walks in an ensemble must share one length, got {sorted(lengths)}")

    return np.column_stack(walks)
