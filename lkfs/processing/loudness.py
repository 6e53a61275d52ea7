"""
Gated integrated loudness (ITU-R BS.1770-4, equations 2 and 4 to 7).

The aggregator consumes one mean-square power vector per analysis block,
already K-weighted, together with the per-channel weights of the channel
layout, and reduces them to a single loudness value in LKFS.
"""

import logging
from collections.abc import Iterable
from typing import NamedTuple

import numpy as np
from pydantic import BaseModel, ConfigDict

from lkfs.processing.stats import PowerStats
from lkfs.utils.types import ArrayLike, NDArrayReal
from lkfs.utils.validation import as_frame

logger = logging.getLogger(__name__)

LOUDNESS_OFFSET = -0.691
ABSOLUTE_LOUDNESS_THRESHOLD = -70.0
RELATIVE_THRESHOLD_OFFSET = -10.0


def loudness_from_power(power: ArrayLike, weights: ArrayLike) -> float:
    """
    Loudness of a channel power vector.

    ``-0.691 + 10 * log10(sum_i weights[i] * power[i])``. A total weighted
    power of zero yields ``-inf``; NaN or infinite inputs propagate.

    Parameters
    ----------
    power : array_like
        Mean-square power per channel.
    weights : array_like
        Channel weights, same length as ``power``.

    Returns
    -------
    float
        Loudness in LKFS.
    """
    total = float(np.sum(np.multiply(weights, power)))
    with np.errstate(divide="ignore", invalid="ignore"):
        return LOUDNESS_OFFSET + 10.0 * float(np.log10(total))


class GatedBlock(NamedTuple):
    """A block that passed the absolute gate."""

    index: int
    loudness: float
    power: NDArrayReal


class GatedLoudness(BaseModel):  # type: ignore[misc]
    """
    Result of the gated loudness measurement.

    Attributes
    ----------
    integrated : float
        Integrated loudness after both gates (LKFS).
    absolute : float
        Loudness of the blocks above the absolute threshold (LKFS).
    relative_threshold : float
        ``absolute - 10`` (LKFS).
    n_blocks : int
        Number of blocks consumed.
    n_absolute_gated : int
        Blocks above the absolute threshold.
    n_relative_gated : int
        Blocks above both thresholds.
    """

    model_config = ConfigDict(frozen=True, ser_json_inf_nan="constants")

    integrated: float
    absolute: float
    relative_threshold: float
    n_blocks: int
    n_absolute_gated: int
    n_relative_gated: int

    def to_json(self) -> str:
        json_data: str = self.model_dump_json(indent=4)
        return json_data


def _mean_loudness(stats: PowerStats, weights: NDArrayReal, stage: str) -> float:
    if stats.count == 0:
        logger.warning(f"No block passed the {stage} gate, loudness is -inf")
        return float("-inf")
    return loudness_from_power(stats.mean, weights)


def absolute_gate(
    powers: Iterable[ArrayLike], weights: ArrayLike
) -> tuple[list[GatedBlock], PowerStats, int]:
    """
    First gating pass.

    Keeps every block whose loudness is strictly greater than
    ``ABSOLUTE_LOUDNESS_THRESHOLD``; all others are dropped for good.

    Returns
    -------
    blocks : list of GatedBlock
        Kept blocks, in input order.
    stats : PowerStats
        Running mean of the kept power vectors.
    n_blocks : int
        Number of blocks consumed in total.
    """
    w = np.asarray(weights, dtype=np.float64)
    stats = PowerStats(w.shape[0])
    blocks: list[GatedBlock] = []

    n_blocks = 0
    for j, power in enumerate(powers):
        p = as_frame(power, w.shape[0], what="Power vector")
        block_loudness = loudness_from_power(p, w)

        if block_loudness > ABSOLUTE_LOUDNESS_THRESHOLD:
            stats.add(p)
            blocks.append(GatedBlock(j, block_loudness, p))

        n_blocks += 1

    logger.debug(f"Num gates processed: {n_blocks}, kept: {len(blocks)}")
    return blocks, stats, n_blocks


def relative_gate(
    blocks: Iterable[GatedBlock], threshold: float, n_channels: int
) -> PowerStats:
    """
    Second gating pass.

    Averages the power of the blocks whose loudness is strictly greater than
    ``threshold``.
    """
    stats = PowerStats(n_channels)
    for block in blocks:
        if block.loudness > threshold:
            stats.add(block.power)
    return stats


class Loudness:
    """Integrated loudness from per-block channel powers."""

    @staticmethod
    def measure(powers: Iterable[ArrayLike], weights: ArrayLike) -> GatedLoudness:
        """
        Run the three-pass gating algorithm and return every intermediate value.

        Parameters
        ----------
        powers : iterable of array_like
            One mean-square power vector per block, in chronological order.
        weights : array_like
            Per-channel weights of the channel layout.

        Returns
        -------
        GatedLoudness
            Integrated loudness and gating diagnostics. If no block passes a
            gate, the loudness of that stage (and all later ones) is ``-inf``.

        Raises
        ------
        ValueError
            If a power vector's channel count differs from ``weights``.
        """
        w = as_frame(weights, np.size(weights), what="Channel weights")

        blocks, absolute_stats, n_blocks = absolute_gate(powers, w)

        # Equation 5: loudness of the mean power of the absolutely loud blocks.
        absolute_loudness = _mean_loudness(absolute_stats, w, "absolute")
        logger.info(f"Absolute loudness: {absolute_loudness} LKFS")

        # Equation 6.
        relative_threshold = absolute_loudness + RELATIVE_THRESHOLD_OFFSET
        logger.info(f"Relative threshold: {relative_threshold} LKFS")

        # Equation 7: only blocks above both thresholds are averaged.
        relative_stats = relative_gate(blocks, relative_threshold, w.shape[0])
        relative_loudness = _mean_loudness(relative_stats, w, "relative")
        logger.info(f"Relative loudness: {relative_loudness} LKFS")

        return GatedLoudness(
            integrated=relative_loudness,
            absolute=absolute_loudness,
            relative_threshold=relative_threshold,
            n_blocks=n_blocks,
            n_absolute_gated=absolute_stats.count,
            n_relative_gated=relative_stats.count,
        )

    @staticmethod
    def from_gated_powers(powers: Iterable[ArrayLike], weights: ArrayLike) -> float:
        """Integrated loudness (LKFS) of a sequence of block power vectors."""
        return Loudness.measure(powers, weights).integrated
