"""Default tolerance for floating-point comparisons of knots and parameters."""

from functools import cache
from typing import Any, cast

import numpy as np
from numpy import typing as npt

_DEFAULT_TOLERANCES: dict[str, float] = {
    "float32": 1e-6,
    "float64": 1e-12,
}


@cache
def _ensure_float_dtype_by_name(name: str) -> np.dtype[np.floating[Any]]:
    """Cached validator returning a floating dtype from its canonical name.

    Args:
        name (str): Canonical NumPy dtype name (e.g., "float64").

    Returns:
        np.dtype[np.floating[Any]]: Validated floating-point dtype.

    Raises:
        ValueError: If dtype is not a supported floating-point type.
    """
    if name not in _DEFAULT_TOLERANCES:
        raise ValueError(f"Unsupported dtype: {name}")
    return cast(np.dtype[np.floating[Any]], np.dtype(name))


def get_default_tolerance(dtype: npt.DTypeLike) -> float:
    """Get the default tolerance for knot and parameter comparisons.

    Args:
        dtype (npt.DTypeLike): NumPy floating-point data type, float32 or
            float64.

    Returns:
        float: Tolerance value.

    Raises:
        ValueError: If dtype is not a supported floating-point type.

    Example:
        >>> get_default_tolerance(np.float32)
        1e-06
        >>> get_default_tolerance("float64")
        1e-12
    """
    dtype_obj = _ensure_float_dtype_by_name(np.dtype(dtype).name)
    return _DEFAULT_TOLERANCES[dtype_obj.name]
