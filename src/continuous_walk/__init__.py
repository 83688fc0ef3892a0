from continuous_walk.errors import WalkError, InvalidParameter, DimensionMismatch
from continuous_walk.utils import (
    make_rng,
    spawn_rngs,
    generate_random_walk,
    generate_multiple_walks,
    derive_num_steps,
    make_time_axis,
    prepare_data_frame,
    calculate_displacement_variance,
    plot_random_walks,
)

__version__ = "0.1.0"
