import numpy as np
import numpy.typing as npt

NDArrayReal = npt.NDArray[np.float64]
ArrayLike = npt.ArrayLike
