"""
K-weighting filters as defined by ITU-R BS.1770.

The K-weighting curve is a cascade of two biquad sections. The first is a
high shelf boost which accounts for the acoustic effect of the listener's
head, assumed to be roughly spherical. The second is a simple high-pass
filter. Both sections are evaluated in Direct-Form-II-Transposed, one
multi-channel frame at a time, so a filter can be driven by an unbounded
stream of samples.
"""

import logging
import math
import operator
from collections.abc import Iterable, Iterator, Sized
from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional

import numpy as np
from scipy import signal

from lkfs.processing.base import AudioOperation, register_operation
from lkfs.utils.types import ArrayLike, NDArrayReal
from lkfs.utils.validation import (
    as_block,
    as_frame,
    validate_n_channels,
    validate_sample_rate,
)

logger = logging.getLogger(__name__)

# Constants of the two analog prototypes, fixed by the standard.
SHELVING_F0 = 1681.974450955533
SHELVING_Q = 0.7071752369554196
SHELVING_HEIGHT_DB = 3.999843853973347
SHELVING_VB_EXPONENT = 0.4996667741545416

HIGH_PASS_F0 = 38.13547087602444
HIGH_PASS_Q = 0.5003270373238773


@dataclass(frozen=True)
class Coefficients:
    """
    Coefficients of a biquad digital filter at a particular sample rate.

    The ``a0`` coefficient is always normalized to 1.0 and therefore not
    stored.
    """

    b0: float
    b1: float
    b2: float
    a1: float
    a2: float

    def ba(self) -> tuple[NDArrayReal, NDArrayReal]:
        """Numerator and denominator arrays in the ``scipy.signal`` convention."""
        b = np.array([self.b0, self.b1, self.b2])
        a = np.array([1.0, self.a1, self.a2])
        return b, a

    def sos(self) -> NDArrayReal:
        """A single second-order-section row ``[b0, b1, b2, 1, a1, a2]``."""
        return np.array([self.b0, self.b1, self.b2, 1.0, self.a1, self.a2])


class FilterKind(Enum):
    """The two biquad sections making up the K-weighting curve."""

    SHELVING = "shelving"
    HIGH_PASS = "high_pass"

    @property
    def f0(self) -> float:
        """Center frequency of the analog prototype (Hz)."""
        if self is FilterKind.SHELVING:
            return SHELVING_F0
        return HIGH_PASS_F0

    @property
    def q(self) -> float:
        """Quality factor of the analog prototype."""
        if self is FilterKind.SHELVING:
            return SHELVING_Q
        return HIGH_PASS_Q

    def coefficients(self, sample_rate: int) -> Coefficients:
        """
        Derive the digital coefficients with the bilinear transform.

        Parameters
        ----------
        sample_rate : int
            Sample rate (Hz). Must be a positive integer.

        Returns
        -------
        Coefficients
            Normalized biquad coefficients for this kind and sample rate.

        Raises
        ------
        ValueError
            If the sample rate is not a positive integer.
        """
        sample_rate = validate_sample_rate(sample_rate)

        k = math.tan(math.pi * self.f0 / sample_rate)
        k_by_q = k / self.q
        k_sq = k * k

        a0 = 1.0 + k_by_q + k_sq
        a1 = 2.0 * (k_sq - 1.0) / a0
        a2 = (1.0 - k_by_q + k_sq) / a0

        if self is FilterKind.SHELVING:
            vh = 10.0 ** (SHELVING_HEIGHT_DB / 20.0)
            vb = vh**SHELVING_VB_EXPONENT

            b0 = (vh + vb * k_by_q + k_sq) / a0
            b1 = 2.0 * (k_sq - vh) / a0
            b2 = (vh - vb * k_by_q + k_sq) / a0
        else:
            b0, b1, b2 = 1.0, -2.0, 1.0

        coeff = Coefficients(b0=b0, b1=b1, b2=b2, a1=a1, a2=a2)
        logger.debug(f"{self.value} coefficients at {sample_rate} Hz: {coeff}")
        return coeff


class BiquadFilterPass:
    """
    One stateful biquad section applied identically to every channel.

    Parameters
    ----------
    coefficients : Coefficients
        Normalized filter coefficients.
    n_channels : int, default=1
        Number of channels of every frame passed to :meth:`apply`.
    """

    def __init__(self, coefficients: Coefficients, n_channels: int = 1):
        self.coefficients = coefficients
        self.n_channels = validate_n_channels(n_channels)
        self.m1: NDArrayReal = np.zeros(self.n_channels)
        self.m2: NDArrayReal = np.zeros(self.n_channels)

    @classmethod
    def from_kind(
        cls, kind: FilterKind, sample_rate: int, n_channels: int = 1
    ) -> "BiquadFilterPass":
        return cls(kind.coefficients(sample_rate), n_channels)

    def reset(self) -> None:
        """Return the delay state to equilibrium."""
        self.m1 = np.zeros(self.n_channels)
        self.m2 = np.zeros(self.n_channels)

    def apply(self, frame: ArrayLike) -> NDArrayReal:
        """
        Filter one multi-channel frame.

        Parameters
        ----------
        frame : array_like
            One value per channel, converted to float64.

        Returns
        -------
        NDArrayReal
            The filtered frame (float64).
        """
        x = as_frame(frame, self.n_channels)
        co = self.coefficients

        # https://www.earlevel.com/main/2012/11/26/biquad-c-source-code/
        out = self.m1 + x * co.b0
        self.m1 = self.m2 + (x * co.b1 + out * -co.a1)
        self.m2 = x * co.b2 + out * -co.a2

        return out

    def process_block(self, block: ArrayLike) -> NDArrayReal:
        """
        Filter a ``(n_samples, n_channels)`` block, continuing from the current
        state and leaving the state where the last sample left it.
        """
        x = as_block(block, self.n_channels)
        if x.shape[0] == 0:
            return x.copy()

        b, a = self.coefficients.ba()
        # lfilter's transposed direct form II state is exactly (m1, m2)
        zi = np.stack([self.m1, self.m2])
        y, zf = signal.lfilter(b, a, x, axis=0, zi=zi)
        self.m1 = np.array(zf[0])
        self.m2 = np.array(zf[1])

        logger.debug(f"Filtered block with shape: {x.shape}")
        result: NDArrayReal = y
        return result


class KWeightingFilter:
    """
    The two-pass K-weighting filter of ITU-R BS.1770-4.

    The shelving pass always runs before the high-pass pass.

    Parameters
    ----------
    sample_rate : int
        Sample rate (Hz).
    n_channels : int, default=1
        Number of channels of every frame.
    """

    def __init__(self, sample_rate: int, n_channels: int = 1):
        self.sample_rate = validate_sample_rate(sample_rate)
        self.n_channels = validate_n_channels(n_channels)
        self.shelving = BiquadFilterPass.from_kind(
            FilterKind.SHELVING, self.sample_rate, self.n_channels
        )
        self.high_pass = BiquadFilterPass.from_kind(
            FilterKind.HIGH_PASS, self.sample_rate, self.n_channels
        )
        logger.debug(
            f"Initialized K-weighting filter: sample_rate={self.sample_rate}, "
            f"n_channels={self.n_channels}"
        )

    def apply(self, frame: ArrayLike) -> NDArrayReal:
        return self.high_pass.apply(self.shelving.apply(frame))

    def process_block(self, block: ArrayLike) -> NDArrayReal:
        return self.high_pass.process_block(self.shelving.process_block(block))

    def reset(self) -> None:
        self.shelving.reset()
        self.high_pass.reset()

    def sos(self) -> NDArrayReal:
        """Both sections as a ``(2, 6)`` array for ``scipy.signal.sosfilt``."""
        return np.vstack(
            [self.shelving.coefficients.sos(), self.high_pass.coefficients.sos()]
        )


class FilteredSamples(Iterator[NDArrayReal]):
    """
    Iterator that performs the K-weighting step on each frame of an iterable.

    One filtered frame is produced for each frame pulled from ``samples``, in
    order, and the iterator is exhausted exactly when ``samples`` is. The
    filter state advances irreversibly, so the iterator cannot be restarted.

    Parameters
    ----------
    samples : iterable of array_like
        Finite or infinite source of multi-channel frames.
    sample_rate : int
        Sample rate (Hz).
    n_channels : int, optional
        Channel count. If omitted, it is taken from the first frame.

    Notes
    -----
    If ``samples`` is sized, ``operator.length_hint`` gives the exact number
    of frames still to come. Otherwise it passes through whatever hint the
    source's iterator gives, and reports no hint for unbounded sources.
    """

    def __init__(
        self,
        samples: Iterable[ArrayLike],
        sample_rate: int,
        n_channels: Optional[int] = None,
    ):
        self.sample_rate = validate_sample_rate(sample_rate)
        self._remaining: Optional[int] = (
            len(samples) if isinstance(samples, Sized) else None
        )
        self._samples = iter(samples)
        self.filter: Optional[KWeightingFilter] = None
        if n_channels is not None:
            self.filter = KWeightingFilter(self.sample_rate, n_channels)

    def __iter__(self) -> "FilteredSamples":
        return self

    def __next__(self) -> NDArrayReal:
        raw = next(self._samples)
        # The source item is consumed even if filtering rejects it.
        if self._remaining is not None:
            self._remaining -= 1
        if self.filter is None:
            self.filter = KWeightingFilter(self.sample_rate, np.size(raw))
        return self.filter.apply(raw)

    def __length_hint__(self) -> Any:
        if self._remaining is not None:
            return self._remaining
        hint = operator.length_hint(self._samples, -1)
        return NotImplemented if hint < 0 else hint


class KWeighting(AudioOperation[NDArrayReal, NDArrayReal]):
    """K-weighting of a whole (channels, samples) array"""

    name = "k_weighting"

    def __init__(self, sampling_rate: float):
        """
        Initialize K-weighting operation

        Parameters
        ----------
        sampling_rate : float
            Sampling rate (Hz). Must be a positive integer value.
        """
        super().__init__(sampling_rate)

    def validate_params(self) -> None:
        rate = self.sampling_rate
        if isinstance(rate, float) and rate.is_integer():
            rate = int(rate)
        self.sampling_rate = validate_sample_rate(rate)  # type: ignore [arg-type]

    def _setup_processor(self) -> None:
        """Precompute the two-section cascade"""
        self.sos = KWeightingFilter(int(self.sampling_rate)).sos()
        logger.debug(f"K-weighting sections calculated: sos={self.sos}")

    def calculate_output_dtype(self, input_dtype: np.dtype[Any]) -> np.dtype[Any]:
        # sosfilt promotes to the float64 section coefficients
        return np.dtype(np.float64)

    def _process_array(self, x: NDArrayReal) -> NDArrayReal:
        logger.debug(f"Applying K-weighting to array with shape: {x.shape}")
        result: NDArrayReal = signal.sosfilt(self.sos, x, axis=-1)
        logger.debug(f"K-weighting applied, returning result with shape: {result.shape}")
        return result


register_operation(KWeighting)
