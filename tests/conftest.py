import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt
import numpy as np
import pytest
from loguru import logger


@pytest.fixture(autouse=True)
def disable_logger():
    logger.remove()
    logger.add(lambda msg: None)
    yield


@pytest.fixture(autouse=True)
def close_figures():
    yield
    plt.close("all")


@pytest.fixture
def rng() -> np.random.Generator:
    return np.random.default_rng(1234)
