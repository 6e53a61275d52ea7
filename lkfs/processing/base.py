import inspect
import logging
from typing import Any, ClassVar, Generic, TypeVar

import dask
import dask.array as da
import numpy as np
from dask.array.core import Array as DaArray

from lkfs.utils.types import NDArrayReal

logger = logging.getLogger(__name__)

_dask_delayed = dask.delayed  # type: ignore [unused-ignore]
_da_from_delayed = da.from_delayed  # type: ignore [unused-ignore]

InputArrayType = TypeVar("InputArrayType", bound=NDArrayReal)
OutputArrayType = TypeVar("OutputArrayType", bound=NDArrayReal)


class AudioOperation(Generic[InputArrayType, OutputArrayType]):
    """Abstract base class for lazy operations on (channels, samples) arrays"""

    # Operation name used as registry key
    name: ClassVar[str]

    def __init__(self, sampling_rate: float, **params: Any):
        """
        Initialize AudioOperation

        Parameters
        ----------
        sampling_rate : float
            Sampling rate (Hz)
        **params : Any
            Operation specific parameters
        """
        self.sampling_rate = sampling_rate
        self.params = params

        self.validate_params()

        self._setup_processor()

        logger.debug(
            f"Initialized {self.__class__.__name__} operation with params: {params}"
        )

    def validate_params(self) -> None:
        """Validate parameters (raise an exception if invalid)"""
        pass

    def _setup_processor(self) -> None:
        """Set up the processor (implemented by subclasses)"""
        pass

    def _process_array(self, x: InputArrayType) -> OutputArrayType:
        """Processing function (implemented by subclasses)"""
        raise NotImplementedError("Subclasses must implement this method.")

    def calculate_output_shape(self, input_shape: tuple[int, ...]) -> tuple[int, ...]:
        """
        Calculate the output data shape after the operation

        Parameters
        ----------
        input_shape : tuple
            Input data shape

        Returns
        -------
        tuple
            Output data shape
        """
        return input_shape

    def calculate_output_dtype(self, input_dtype: np.dtype[Any]) -> np.dtype[Any]:
        """Data type of the array returned by ``_process_array``."""
        return input_dtype

    def process(self, data: DaArray) -> DaArray:
        """
        Execute the operation lazily and return the result.
        The shape of ``data`` is (channels, samples).
        """
        logger.debug("Adding delayed operation to computation graph")
        delayed_result = _dask_delayed(self._process_array)(data)
        output_shape = self.calculate_output_shape(data.shape)
        output_dtype = self.calculate_output_dtype(data.dtype)
        return _da_from_delayed(delayed_result, shape=output_shape, dtype=output_dtype)


_OPERATION_REGISTRY: dict[str, type[AudioOperation[Any, Any]]] = {}


def register_operation(operation_class: type) -> None:
    """Register a new operation type"""

    if not issubclass(operation_class, AudioOperation):
        raise TypeError("Strategy class must inherit from AudioOperation.")
    if inspect.isabstract(operation_class):
        raise TypeError("Cannot register abstract AudioOperation class.")

    _OPERATION_REGISTRY[operation_class.name] = operation_class


def get_operation(name: str) -> type[AudioOperation[Any, Any]]:
    """Get an operation class by name"""
    if name not in _OPERATION_REGISTRY:
        raise ValueError(f"Unknown operation type: {name}")
    return _OPERATION_REGISTRY[name]


def create_operation(
    name: str, sampling_rate: float, **params: Any
) -> AudioOperation[Any, Any]:
    """Create an operation instance from its name and parameters"""
    operation_class = get_operation(name)
    return operation_class(sampling_rate, **params)
