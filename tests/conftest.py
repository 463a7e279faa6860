import matplotlib
matplotlib.use('Agg')

import numpy as np
import pytest


@pytest.fixture
def injection():
    """Four-sample cumulative injection history: (time, volume)."""
    return np.array([0.0, 1.0, 2.0, 3.0]), np.array([0.0, 100.0, 300.0, 600.0])


@pytest.fixture
def catalog():
    """Three events inside the injection interval: (time, magnitude)."""
    return np.array([0.5, 1.5, 2.5]), np.array([2.0, 2.5, 3.0])


@pytest.fixture
def synthetic():
    """Larger injection + catalog drawn from the seismogenic index model."""
    rng = np.random.default_rng(7)
    t_inj = np.linspace(0.0, 100.0, 201)
    v_inj = 50.0 * t_inj ** 1.5
    t_eq = np.sort(rng.uniform(1.0, 99.0, 150))
    mags = 1.0 + rng.exponential(1.0 / np.log(10), 150)
    return t_inj, v_inj, t_eq, mags
