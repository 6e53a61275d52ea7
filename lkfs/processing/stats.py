import numpy as np

from lkfs.utils.types import ArrayLike, NDArrayReal
from lkfs.utils.validation import as_frame, validate_n_channels


class PowerStats:
    """
    Running per-channel arithmetic mean of power vectors.

    Parameters
    ----------
    n_channels : int
        Number of channels of every power vector.

    Notes
    -----
    Before the first :meth:`add`, the mean is undefined and :attr:`mean`
    returns an all-NaN vector. Callers that may see an empty sequence should
    check :attr:`count` first.
    """

    def __init__(self, n_channels: int):
        self.n_channels = validate_n_channels(n_channels)
        self.count = 0
        self._sum: NDArrayReal = np.zeros(self.n_channels)

    def add(self, power: ArrayLike) -> None:
        """Incorporate one power vector into the running mean."""
        x = as_frame(power, self.n_channels, what="Power vector")
        self.count += 1
        self._sum = self._sum + x

    @property
    def mean(self) -> NDArrayReal:
        """Mean of all power vectors added so far (NaN while empty)."""
        if self.count == 0:
            return np.full(self.n_channels, np.nan)
        return self._sum / self.count

    def __repr__(self) -> str:
        return f"PowerStats(n_channels={self.n_channels}, count={self.count})"
