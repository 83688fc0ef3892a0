import numpy as np
import pandas as pd
import pytest

from continuous_walk.errors import DimensionMismatch, InvalidParameter
from continuous_walk.utils import (
    derive_num_steps,
    make_time_axis,
    prepare_data_frame,
    generate_multiple_walks,
)


def test_time_axis_includes_duration():
    time = make_time_axis(time_step=0.01, duration=0.04)

    assert len(time) == 5
    np.testing.assert_allclose(time, [0, 0.01, 0.02, 0.03, 0.04])


def test_zero_duration_gives_single_point():
    assert make_time_axis(time_step=0.5, duration=0).tolist() == [0.0]
    assert derive_num_steps(0, 0.5) == 1


@pytest.mark.parametrize(
    "duration, time_step, expected",
    [(0.04, 0.01, 5), (0.05, 0.01, 6), (1.0, 0.01, 101), (1.0, 0.3, 4), (3.0, 1.0, 4)],
)
def test_derive_num_steps(duration, time_step, expected):
    assert derive_num_steps(duration, time_step) == expected


@pytest.mark.parametrize("time_step, duration", [(0, 1.0), (-0.1, 1.0), (0.1, -1.0)])
def test_invalid_time_grid(time_step, duration):
    with pytest.raises(InvalidParameter):
        make_time_axis(time_step=time_step, duration=duration)


def test_assemble_aligns_positionally(rng):
    ensemble = generate_multiple_walks(3, initial_value=70, num_steps=5, sd=1.0, rng=rng)

    df = prepare_data_frame(ensemble, time_step=0.01, duration=0.04)

    assert isinstance(df, pd.DataFrame)
    assert list(df.columns) == ["time", "walk_1", "walk_2", "walk_3"]
    assert df.shape == (5, 4)
    np.testing.assert_allclose(df["time"], [0, 0.01, 0.02, 0.03, 0.04])
    for j in range(3):
        assert df.iloc[:, j + 1].tolist() == ensemble[:, j].tolist()


def test_assemble_accepts_list_of_walks():
    walks = [np.array([1.0, 2.0, 3.0]), np.array([4.0, 5.0, 6.0])]

    df = prepare_data_frame(walks, time_step=0.5, duration=1.0)

    assert df["walk_1"].tolist() == [1.0, 2.0, 3.0]
    assert df["walk_2"].tolist() == [4.0, 5.0, 6.0]
    assert df["time"].tolist() == [0.0, 0.5, 1.0]


def test_assemble_rejects_longer_time_axis():
    """duration=0.05 gives 6 time points against 5-step walks"""
    ensemble = generate_multiple_walks(3, initial_value=70, num_steps=5, sd=0)

    with pytest.raises(DimensionMismatch):
        prepare_data_frame(ensemble, time_step=0.01, duration=0.05)


def test_assemble_rejects_ragged_walks():
    with pytest.raises(DimensionMismatch):
        prepare_data_frame([np.zeros(3), np.zeros(4)], time_step=1.0, duration=2.0)


def test_assemble_rejects_empty_ensemble():
    with pytest.raises(InvalidParameter):
        prepare_data_frame([], time_step=1.0, duration=2.0)


def test_assemble_does_not_scan_for_nan():
    walks = [np.array([0.0, np.nan, np.inf])]

    df = prepare_data_frame(walks, time_step=1.0, duration=2.0)

    assert np.isnan(df["walk_1"][1])
    assert np.isinf(df["walk_1"][2])


@pytest.mark.parametrize(
    "time_step, duration",
    [(0.1, 0.3), (0.1, 0.7), (0.01, 0.57), (0.3, 0.9), (0.01, 0.04), (0.01, 1.0)],
)
def test_time_axis_ends_exactly_at_duration(time_step, duration):
    time = make_time_axis(time_step=time_step, duration=duration)

    assert time[-1] == duration
    assert np.all(np.diff(time) > 0)


def test_time_axis_off_grid_stays_below_duration():
    time = make_time_axis(time_step=0.3, duration=1.0)

    assert len(time) == 4
    assert time[-1] <= 1.0
    assert time[-1] == pytest.approx(0.9)


@pytest.mark.parametrize(
    "time_step, duration",
    [(float("nan"), 1.0), (0.1, float("nan")), (np.inf, 1.0), (0.1, np.inf)],
)
def test_non_finite_time_grid_rejected(time_step, duration):
    with pytest.raises(InvalidParameter):
        derive_num_steps(duration, time_step)


def test_assemble_single_walk_array():
    df = prepare_data_frame(np.array([1.0, 2.0, 3.0]), time_step=0.5, duration=1.0)

    assert list(df.columns) == ["time", "walk_1"]
    assert df["walk_1"].tolist() == [1.0, 2.0, 3.0]


def test_assemble_rejects_non_walk_inputs():
    with pytest.raises(InvalidParameter):
        prepare_data_frame(np.zeros((3, 2, 1)), time_step=1.0, duration=2.0)
    with pytest.raises(InvalidParameter):
        prepare_data_frame([1.0, 2.0, 3.0], time_step=1.0, duration=2.0)
