"""
Example: Integrated loudness calculation (ITU-R BS.1770)

This example demonstrates how to K-weight a multi-channel signal frame by
frame, compute block powers, and reduce them to integrated loudness with the
lkfs library.
"""

import numpy as np

import lkfs

lkfs.setup_lkfs_logging("INFO")

# Generate a stereo test signal: 997 Hz tone at 0 dBFS in both channels,
# with one second of silence in the middle.
sampling_rate = 48000
frames = lkfs.generate_sin_frames([997.0, 997.0], sampling_rate=sampling_rate, duration=4.0)
frames[sampling_rate : 2 * sampling_rate] = 0.0

print("Signal properties:")
print(f"  Duration: {len(frames) / sampling_rate:.2f} s")
print(f"  Sampling rate: {sampling_rate} Hz")
print(f"  Number of channels: {frames.shape[1]}")
print()

# ============================================================================
# K-weighting
# ============================================================================
print("=" * 70)
print("K-weighting (streaming)")
print("=" * 70)

filtered = np.array(list(lkfs.FilteredSamples(frames, sampling_rate)))
print(f"  Filtered samples: {len(filtered)}")
print()

# ============================================================================
# Block powers: 400 ms gating blocks with 75 % overlap
# ============================================================================
block_size = int(0.4 * sampling_rate)
step = block_size // 4
powers = [
    np.mean(filtered[start : start + block_size] ** 2, axis=0)
    for start in range(0, len(filtered) - block_size + 1, step)
]

# ============================================================================
# Gated loudness
# ============================================================================
print("=" * 70)
print("Gated loudness")
print("=" * 70)

# Channel weights for L and R
weights = [1.0, 1.0]
result = lkfs.Loudness.measure(powers, weights)

print("\nResults:")
print(f"  Integrated loudness: {result.integrated:.2f} LKFS")
print(f"  Absolute-gated loudness: {result.absolute:.2f} LKFS")
print(f"  Relative threshold: {result.relative_threshold:.2f} LKFS")
print(f"  Blocks: {result.n_blocks} total, {result.n_relative_gated} after gating")
print()
print(result.to_json())
