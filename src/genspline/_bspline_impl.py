"""Implementation functions for B-spline curve evaluation.

This module provides the span search and the De Boor recurrence, both in a
generic form working on any element type supporting affine combinations and
as Numba-accelerated kernels for numeric control arrays.

All functions work on logical knot sequences: with `n` control elements and
degree `d` there are `n + d - 1` knots and the domain is
`[knots[d - 1], knots[n - 1]]`.
"""

from __future__ import annotations

import bisect
from collections.abc import Callable, Sequence
from typing import TYPE_CHECKING, Any, TypeVar

import numba as nb
import numpy as np
import numpy.typing as npt

F = TypeVar("F", bound=Callable[..., Any])

if TYPE_CHECKING:
    # During type-checking, make the decorator a no-op that preserves types.
    def nb_jit(*args: object, **kwargs: object) -> Callable[[F], F]:
        def decorator(func: F) -> F:
            return func

        return decorator
else:
    # At runtime, use the real Numba decorator.
    nb_jit = nb.jit  # type: ignore[attr-defined]


def _find_span(knots: Sequence[Any], degree: int, num_elements: int, t: Any) -> int:
    """Get the index of the last knot smaller or equal than `t` inside the domain.

    The search is restricted to the indices `[degree, num_elements - 1)`, so
    the returned span lies in `[degree - 1, num_elements - 2]`. Parameters at
    the upper end of the domain fall into the last span.

    Args:
        knots (Sequence[Any]): Logical knot sequence (non-decreasing).
        degree (int): Degree of the curve.
        num_elements (int): Number of control elements.
        t (Any): Parameter, already clamped to the domain.

    Returns:
        int: Span index.

    Note:
        Inputs are assumed to be correct (no validation performed).
    """
    return bisect.bisect_right(knots, t, degree, num_elements - 1) - 1


def _de_boor(
    elements: Sequence[Any],
    knots: Sequence[Any],
    degree: int,
    span: int,
    t: Any,
    work: list[Any],
) -> Any:
    """Blend the control elements of a span with De Boor's algorithm.

    The `degree + 1` elements influencing the span are copied into `work`
    and blended in place in `degree` passes. A zero knot distance (repeated
    knots) gives a blending factor of 0.

    Args:
        elements (Sequence[Any]): Control elements. Each must support
            `element * scalar` and `element + element`.
        knots (Sequence[Any]): Logical knot sequence.
        degree (int): Degree of the curve.
        span (int): Span index as returned by `_find_span`.
        t (Any): Parameter inside the span.
        work (list[Any]): Buffer with at least `degree + 1` slots.

    Returns:
        Any: The blended element.

    Note:
        Inputs are assumed to be correct (no validation performed).
    """
    first = span - degree + 1
    for i in range(degree + 1):
        work[i] = elements[first + i]

    for r in range(1, degree + 1):
        for i in range(degree, r - 1, -1):
            k0 = knots[span - degree + i]
            diff = knots[span + i - r + 1] - k0
            alpha = 0.0 if diff == 0 else (t - k0) / diff
            work[i] = work[i - 1] * (1.0 - alpha) + work[i] * alpha

    return work[degree]


def _as_control_array(elements: Sequence[Any]) -> npt.NDArray[np.float64] | None:
    """Convert numeric control elements into a contiguous 2D float array.

    Args:
        elements (Sequence[Any]): Control elements.

    Returns:
        Optional[npt.NDArray[np.float64]]: Array of shape (n, dim), or None if
        the elements are not real scalars or real vectors of equal length.
    """
    try:
        arr = np.asarray(elements)
    except (TypeError, ValueError):
        return None
    if arr.dtype.kind not in "fiu" or arr.ndim not in (1, 2):
        return None
    return np.ascontiguousarray(arr.reshape(arr.shape[0], -1), dtype=np.float64)


def _knots_to_array(knots: Sequence[Any]) -> npt.NDArray[np.float64]:
    """Read a logical knot sequence into a float array.

    Args:
        knots (Sequence[Any]): Logical knot sequence.

    Returns:
        npt.NDArray[np.float64]: The knots.
    """
    return np.fromiter(knots, dtype=np.float64, count=len(knots))


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _find_spans_impl(
    knots: npt.NDArray[np.float64],
    degree: int,
    num_elements: int,
    pts: npt.NDArray[np.float64],
) -> npt.NDArray[np.int_]:
    """Get the span index of every point (vectorized `_find_span`).

    Args:
        knots (npt.NDArray[np.float64]): Logical knot sequence.
        degree (int): Degree of the curve.
        num_elements (int): Number of control elements.
        pts (npt.NDArray[np.float64]): Points, already clamped to the domain.

    Returns:
        npt.NDArray[np.int_]: Span indices, one for each point.

    Note:
        Inputs are assumed to be correct (no validation performed).
    """
    interior = knots[degree : num_elements - 1]
    return np.searchsorted(interior, pts, side="right") + degree - 1


@nb_jit(
    nopython=True,
    cache=True,
    parallel=False,
)
def _evaluate_de_boor_impl(
    knots: npt.NDArray[np.float64],
    ctrl: npt.NDArray[np.float64],
    degree: int,
    pts: npt.NDArray[np.float64],
    out: npt.NDArray[np.float64],
) -> None:
    """Evaluate a curve with numeric control points at many parameters.

    Points outside the domain are clamped to it. Results are written
    directly to `out` (C-style).

    Args:
        knots (npt.NDArray[np.float64]): Logical knot sequence.
        ctrl (npt.NDArray[np.float64]): Control points with shape (n, dim).
        degree (int): Degree of the curve.
        pts (npt.NDArray[np.float64]): Parameters (1D array).
        out (npt.NDArray[np.float64]): Output array with shape (n_pts, dim).

    Note:
        Inputs are assumed to be correct (no validation performed).
    """
    num_elements = ctrl.shape[0]
    dim = ctrl.shape[1]

    clamped = np.minimum(np.maximum(pts, knots[degree - 1]), knots[num_elements - 1])
    spans = _find_spans_impl(knots, degree, num_elements, clamped)

    work = np.empty((degree + 1, dim), dtype=ctrl.dtype)

    for pt_id in range(clamped.size):
        t = clamped[pt_id]
        span = spans[pt_id]
        first = span - degree + 1
        work[:, :] = ctrl[first : first + degree + 1, :]

        for r in range(1, degree + 1):
            for i in range(degree, r - 1, -1):
                k0 = knots[span - degree + i]
                diff = knots[span + i - r + 1] - k0
                alpha = 0.0 if diff == 0.0 else (t - k0) / diff
                for c in range(dim):
                    work[i, c] = work[i - 1, c] * (1.0 - alpha) + work[i, c] * alpha

        out[pt_id, :] = work[degree, :]


def _warmup_numba_functions() -> None:
    """Precompile numba functions with float64 signatures for faster first call."""
    knots_dummy = np.array([0.0, 0.0, 1.0, 1.0], dtype=np.float64)
    ctrl_dummy = np.array([[0.0], [1.0], [2.0]], dtype=np.float64)
    pts_dummy = np.array([0.5], dtype=np.float64)
    degree_dummy = 2

    _find_spans_impl(knots_dummy, degree_dummy, ctrl_dummy.shape[0], pts_dummy)
    out_dummy = np.empty((pts_dummy.size, ctrl_dummy.shape[1]), dtype=np.float64)
    _evaluate_de_boor_impl(knots_dummy, ctrl_dummy, degree_dummy, pts_dummy, out_dummy)


# Precompile numba functions on module import (skip during type checking)
if not TYPE_CHECKING:
    _warmup_numba_functions()
