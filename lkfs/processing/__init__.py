"""Filtering and loudness aggregation."""

from .base import AudioOperation, create_operation, get_operation, register_operation
from .filters import (
    BiquadFilterPass,
    Coefficients,
    FilteredSamples,
    FilterKind,
    KWeighting,
    KWeightingFilter,
)
from .loudness import (
    ABSOLUTE_LOUDNESS_THRESHOLD,
    RELATIVE_THRESHOLD_OFFSET,
    GatedLoudness,
    Loudness,
    absolute_gate,
    loudness_from_power,
    relative_gate,
)
from .stats import PowerStats

__all__ = [
    "ABSOLUTE_LOUDNESS_THRESHOLD",
    "RELATIVE_THRESHOLD_OFFSET",
    "AudioOperation",
    "BiquadFilterPass",
    "Coefficients",
    "FilterKind",
    "FilteredSamples",
    "GatedLoudness",
    "KWeighting",
    "KWeightingFilter",
    "Loudness",
    "PowerStats",
    "absolute_gate",
    "create_operation",
    "get_operation",
    "loudness_from_power",
    "register_operation",
    "relative_gate",
]
