"""Input checks shared by the filters and the loudness aggregator."""

import numbers

import numpy as np

from lkfs.utils.types import ArrayLike, NDArrayReal


def validate_sample_rate(sample_rate: int) -> int:
    """
    Check that the sample rate is a positive integer number of Hz.

    Parameters
    ----------
    sample_rate : int
        Sample rate (Hz)

    Returns
    -------
    int
        The sample rate as a plain ``int``.

    Raises
    ------
    ValueError
        If the sample rate is not an integer or is not positive.
    """
    if isinstance(sample_rate, bool) or not isinstance(sample_rate, numbers.Integral):
        raise ValueError(
            f"Sample rate must be an integer:\n"
            f"  Given: {sample_rate!r} ({type(sample_rate).__name__})\n"
            f"\n"
            f"Solution:\n"
            f"  - Pass the sample rate in Hz as an int, e.g. 48000\n"
            f"\n"
            f"Background:\n"
            f"  K-weighting coefficients are derived for an exact integer\n"
            f"  sample rate as defined by ITU-R BS.1770."
        )
    if sample_rate <= 0:
        raise ValueError(
            f"Sample rate must be positive:\n"
            f"  Given: {sample_rate} Hz\n"
            f"  Minimum: > 0 Hz\n"
            f"\n"
            f"Solution:\n"
            f"  - Use the rate the audio was sampled at, e.g. 44100 or 48000\n"
            f"\n"
            f"Background:\n"
            f"  The bilinear transform maps analog frequencies relative to\n"
            f"  the sample rate, which must be a physical (positive) value."
        )
    return int(sample_rate)


def validate_n_channels(n_channels: int) -> int:
    """Check that a channel count is a positive integer."""
    if (
        isinstance(n_channels, bool)
        or not isinstance(n_channels, numbers.Integral)
        or n_channels <= 0
    ):
        raise ValueError(
            f"Channel count must be a positive integer:\n"
            f"  Given: {n_channels!r}\n"
            f"\n"
            f"Solution:\n"
            f"  - Use 1 for mono, 2 for stereo, 5 or 6 for surround layouts"
        )
    return int(n_channels)


def as_frame(frame: ArrayLike, n_channels: int, what: str = "Sample") -> NDArrayReal:
    """
    Convert one multi-channel vector to float64 and check its channel count.

    Parameters
    ----------
    frame : array_like
        One value per channel.
    n_channels : int
        Expected channel count.
    what : str, default="Sample"
        Name of the vector used in error messages.

    Returns
    -------
    NDArrayReal
        A new 1-D float64 array of length ``n_channels``.

    Raises
    ------
    ValueError
        If the input is not one-dimensional or its length differs from
        ``n_channels``.
    """
    x = np.array(frame, dtype=np.float64)
    if x.ndim != 1:
        raise ValueError(
            f"{what} must be a 1-D vector with one value per channel:\n"
            f"  Given shape: {x.shape}\n"
            f"\n"
            f"Solution:\n"
            f"  - Pass one frame at a time, e.g. [left, right]"
        )
    if x.shape[0] != n_channels:
        raise ValueError(
            f"{what} channel count mismatch:\n"
            f"  Given: {x.shape[0]} channels\n"
            f"  Expected: {n_channels} channels\n"
            f"\n"
            f"Solution:\n"
            f"  - Construct the filter or accumulator with n_channels={x.shape[0]}\n"
            f"  - Or fix the channel layout of the input\n"
            f"\n"
            f"Background:\n"
            f"  The channel count is fixed when the filter or accumulator is\n"
            f"  created; every later vector must have exactly that many channels."
        )
    return x


def as_block(block: ArrayLike, n_channels: int) -> NDArrayReal:
    """Convert a ``(n_samples, n_channels)`` block to float64 and check its shape."""
    x = np.asarray(block, dtype=np.float64)
    if x.ndim != 2 or x.shape[1] != n_channels:
        raise ValueError(
            f"Block shape mismatch:\n"
            f"  Given shape: {x.shape}\n"
            f"  Expected shape: (n_samples, {n_channels})\n"
            f"\n"
            f"Solution:\n"
            f"  - Arrange the block with one row per sample and one column per channel"
        )
    return x
