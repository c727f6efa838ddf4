from __future__ import annotations

import numbers
from typing import Any, TypeGuard

import numpy as np
import numpy.typing as npt

from offsetranges.config import config, parse_default_dtype
from offsetranges.errors import InexactError


def is_integer(x: Any) -> TypeGuard[int]:
    return isinstance(x, numbers.Integral) and not isinstance(x, (bool, np.bool_))


def is_integer_array(x: Any) -> TypeGuard[npt.NDArray[np.integer[Any]]]:
    return not np.isscalar(x) and hasattr(x, "shape") and hasattr(x, "dtype") and x.dtype.kind in "ui"


def default_dtype() -> np.dtype[Any]:
    return parse_default_dtype(config.get("default_dtype"))


def parse_dtype(data: Any) -> np.dtype[Any]:
    """Normalize ``data`` to an integer numpy dtype, falling back to the configured default."""
    if data is None:
        return default_dtype()
    dtype = np.dtype(data)
    if dtype.kind not in "iu":
        raise TypeError(f"Expected an integer dtype. Got {dtype}.")
    return dtype


def parse_int(value: Any, dtype: np.dtype[Any]) -> int:
    """Return ``value`` as a python int, checking that ``dtype`` can represent it."""
    if not is_integer(value):
        raise TypeError(f"Expected an integer. Got {value!r} of type {type(value).__name__}.")
    value = int(value)
    info = np.iinfo(dtype)
    if value < info.min or value > info.max:
        raise InexactError(value, dtype)
    return value


def normalize_index(key: Any) -> Any:
    """
    Widen an integer or integer array index so that shifting it by an offset cannot wrap
    around in the index's own dtype.
    """
    if is_integer(key):
        return int(key)
    return np.asarray(key, dtype=np.int64)
