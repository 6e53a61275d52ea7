# lkfs/utils/generate_sample.py

import itertools
from collections.abc import Iterator
from typing import Union

import dask.array as da
import numpy as np
from dask.array.core import Array as DaArray

from lkfs.utils.types import ArrayLike, NDArrayReal

_da_from_array = da.from_array  # type: ignore [unused-ignore]


def generate_sin_frames(
    freqs: Union[float, list[float]] = 1000,
    sampling_rate: int = 48000,
    duration: float = 1.0,
    amplitude: float = 1.0,
) -> NDArrayReal:
    """
    Generate sine waves as a sequence of multi-channel frames.

    Parameters
    ----------
    freqs : float or list of float, default=1000
        Frequency of the sine wave(s) in Hz.
        If multiple frequencies are specified, multiple channels will be created.
    sampling_rate : int, default=48000
        Sampling rate in Hz.
    duration : float, default=1.0
        Duration of the signal in seconds.
    amplitude : float, default=1.0
        Peak amplitude of every channel.

    Returns
    -------
    NDArrayReal
        Array of shape (n_samples, n_channels); iterating over it yields
        one frame per sample.
    """
    t = np.linspace(0, duration, int(sampling_rate * duration), endpoint=False)

    _freqs: list[float]
    if isinstance(freqs, (int, float)):
        _freqs = [float(freqs)]
    else:
        _freqs = list(freqs)

    channels = [amplitude * np.sin(2 * np.pi * freq * t) for freq in _freqs]
    return np.stack(channels, axis=1)


def generate_sin_lazy(
    freqs: Union[float, list[float]] = 1000,
    sampling_rate: int = 48000,
    duration: float = 1.0,
    amplitude: float = 1.0,
) -> DaArray:
    """Same as :func:`generate_sin_frames`, as a dask array of shape (channels, samples)."""
    frames = generate_sin_frames(freqs, sampling_rate, duration, amplitude)
    return _da_from_array(np.ascontiguousarray(frames.T), chunks=-1)


def repeat_frame(frame: ArrayLike) -> Iterator[NDArrayReal]:
    """Infinite stream repeating one frame."""
    return itertools.repeat(np.asarray(frame, dtype=np.float64))
