import pytest
import numpy as np

from pyDVHMetrics.analysis import DvhCurve


@pytest.fixture
def target_curve():
    return DvhCurve.from_samples(
        [(100.0, 0.0), (98.0, 45.0), (50.0, 50.0), (2.0, 55.0), (0.0, 56.0)], name="PTV"
    )


@pytest.fixture
def single_bin_curve():
    return DvhCurve.from_samples([(100.0, 0.0), (0.0, 60.0)], name="Heart")


@pytest.fixture
def oar_curve():
    # Anchor followed by a 0.1 Gy spaced cumulative DVH of a linear fall-off
    dose = np.arange(0, 701) * 0.1
    volume = np.clip(100.0 - dose * 1.5, 0.0, 100.0)
    return DvhCurve(volume=volume, dose=dose, name="Lung_L")
