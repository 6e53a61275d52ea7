"""Fixtures for benchmark tests."""

import numpy as np
import pytest

from lkfs.utils.generate_sample import generate_sin_frames


@pytest.fixture
def benchmark_frames() -> np.ndarray:
    """Generate a benchmark signal for performance testing.

    Returns 0.25 seconds of a 2-channel signal at 48000 Hz sampling rate
    containing 440 Hz and 880 Hz sine waves.

    Returns:
        np.ndarray: Frames of shape (n_samples, 2).
    """
    return generate_sin_frames(freqs=[440.0, 880.0], duration=0.25, sampling_rate=48000)


@pytest.fixture
def benchmark_powers() -> np.ndarray:
    """Block powers for one hour of 5-channel audio at 10 blocks per second."""
    rng = np.random.default_rng(0)
    return rng.random((36000, 5)) * 0.1
