"""B-spline curves over generic elements.

A B-spline curve blends a sequence of control elements with De Boor's
algorithm. Elements may be anything supporting `element * scalar` and
`element + element`: floats, numpy vectors, colors, or homogeneous points for
rational curves.

Knots follow a convention where the two outermost knots of the classical
definition are left out, because they never influence the curve: a curve of
degree `d` with `n` elements has `n + d - 1` (logical) knots and the domain
`[knots[d - 1], knots[n - 1]]`. `BoundaryMode` maps the supported input
conventions to this one.
"""

from __future__ import annotations

import functools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Sequence
from enum import Enum
from typing import TYPE_CHECKING, Any

import numpy as np
import numpy.typing as npt

from ._bspline_impl import (
    _as_control_array,
    _de_boor,
    _evaluate_de_boor_impl,
    _find_span,
    _knots_to_array,
)
from .errors import (
    InvalidDegreeError,
    InvalidNumberKnotsError,
    TooFewElementsError,
    TooSmallWorkspaceError,
)
from .homogeneous import Homogeneous, Weights
from .knots import BorderBuffer, BorderDeletion, check_sorted
from .tolerance import get_default_tolerance
from .workspace import Workspace

if TYPE_CHECKING:
    from .builder import BSplineBuilder

logger = logging.getLogger(__name__)


class BoundaryMode(Enum):
    """Boundary conventions of the knot sequence.

    With `n` control elements and `m` input knots:

    Attributes:
        OPEN (BoundaryMode): Knots are used as given. Degree is `m - n + 1`.
        CLAMPED (BoundaryMode): The `m` knots are a core sequence whose first
            and last knots are virtually repeated `n - m` times, so the curve
            starts and ends at its first and last element. Degree is
            `n - m + 1`.
        LEGACY (BoundaryMode): Knots in the classical convention, usually
            with repeated boundary knots. Degree is `m - n - 1`.
    """

    OPEN = "open"
    CLAMPED = "clamped"
    LEGACY = "legacy"

    def compute_degree(self, num_elements: int, num_knots: int) -> int:
        """Compute the degree implied by the number of elements and input knots.

        Args:
            num_elements (int): Number of control elements.
            num_knots (int): Number of knots as given by the user.

        Returns:
            int: The degree. It may be less than 1 for invalid configurations.
        """
        if self is BoundaryMode.OPEN:
            return num_knots - num_elements + 1
        if self is BoundaryMode.CLAMPED:
            return num_elements - num_knots + 1
        return num_knots - num_elements - 1

    def knot_count(self, num_elements: int, degree: int) -> int:
        """Compute the number of input knots needed for a given degree.

        Inverse of `compute_degree`.

        Args:
            num_elements (int): Number of control elements.
            degree (int): Degree of the curve.

        Returns:
            int: Number of knots the user has to provide.
        """
        if self is BoundaryMode.OPEN:
            return num_elements + degree - 1
        if self is BoundaryMode.CLAMPED:
            return num_elements - degree + 1
        return num_elements + degree + 1

    def adapt_knots(self, knots: Sequence[Any], num_elements: int) -> Sequence[Any]:
        """Turn input knots into the logical knot sequence of a curve.

        Args:
            knots (Sequence[Any]): Knots as given by the user.
            num_elements (int): Number of control elements.

        Returns:
            Sequence[Any]: Logical knot sequence. No knot is copied.

        Raises:
            InvalidDegreeError: If clamped knots outnumber the elements.
            InvalidNumberKnotsError: If fewer than 2 knots are given for the
                clamped or legacy modes, or legacy knots are all equal.
        """
        if self is BoundaryMode.OPEN:
            return knots
        if self is BoundaryMode.CLAMPED:
            duplicate = num_elements - len(knots)
            if duplicate < 0:
                raise InvalidDegreeError(duplicate + 1)
            if len(knots) < 2:  # noqa: PLR2004
                raise InvalidNumberKnotsError(len(knots), "at least 2")
            return BorderBuffer(knots, duplicate)
        return BorderDeletion(knots)


class Curve(ABC):
    """A mapping from a scalar parameter in a domain to an element."""

    @property
    @abstractmethod
    def domain(self) -> tuple[Any, Any]:
        """Start and end of the parameter domain."""

    @abstractmethod
    def evaluate(self, t: Any) -> Any:
        """Evaluate the curve at parameter `t`."""

    def __call__(self, t: Any) -> Any:
        return self.evaluate(t)

    def evaluate_many(self, pts: npt.ArrayLike) -> Any:
        """Evaluate the curve at several parameters.

        Args:
            pts (npt.ArrayLike): Parameters. Multi-dimensional inputs are
                flattened.

        Returns:
            Any: List of evaluated elements.
        """
        return [self.evaluate(float(t)) for t in np.asarray(pts, dtype=np.float64).ravel()]

    def take(self, num: int) -> Any:
        """Evaluate the curve at `num` evenly spaced parameters.

        The first and last parameters are the ends of the domain.

        Args:
            num (int): Number of samples. Must be non-negative.

        Returns:
            Any: The evaluated elements, as returned by `evaluate_many`.

        Raises:
            ValueError: If `num` is negative.
        """
        if num < 0:
            raise ValueError("num must be non-negative")
        lower, upper = self.domain
        return self.evaluate_many(np.linspace(lower, upper, num))

    def is_in_domain(self, pts: npt.ArrayLike, tol: float | None = None) -> npt.NDArray[np.bool_]:
        """Check if parameters are within the domain (up to tolerance).

        Parameters outside the domain are still accepted by `evaluate`, which
        clamps them to the nearest end.

        Args:
            pts (npt.ArrayLike): Parameters to check.
            tol (Optional[float]): Tolerance. Defaults to the default float64
                tolerance.

        Returns:
            npt.NDArray[np.bool_]: Mask with the shape of `pts`.
        """
        tol = get_default_tolerance(np.float64) if tol is None else tol
        pts_arr = np.asarray(pts, dtype=np.float64)
        lower, upper = self.domain
        return np.logical_and(  # type: ignore[no-any-return]
            (lower < pts_arr) | np.isclose(lower, pts_arr, atol=tol),
            (pts_arr < upper) | np.isclose(pts_arr, upper, atol=tol),
        )

    def chain(self, outer: Callable[[Any], Any]) -> ChainedCurve:
        """Compose this curve with another mapping.

        Args:
            outer (Callable[[Any], Any]): Mapping applied to the output of this
                curve, typically another curve taking scalars.

        Returns:
            ChainedCurve: The curve `t -> outer(self(t))` on the domain of this
            curve.
        """
        return ChainedCurve(self, outer)


class BSpline(Curve):
    """A B-spline curve.

    Instances are immutable. Every evaluation gets a fresh buffer from the
    workspace, so a curve may be evaluated concurrently.

    Attributes:
        _elements (Sequence[Any]): Control elements.
        _knots (Sequence[Any]): Logical knot sequence.
        _workspace (Workspace): Workspace provider.
        _degree (int): Degree of the curve.
    """

    def __init__(
        self, elements: Sequence[Any], knots: Sequence[Any], workspace: Workspace
    ) -> None:
        """Initialize a B-spline.

        Usually curves are created with `BSpline.builder()`, which also
        converts the boundary conventions.

        Args:
            elements (Sequence[Any]): Control elements.
            knots (Sequence[Any]): Logical knot sequence, see `BoundaryMode`.
            workspace (Workspace): Workspace provider.

        Raises:
            TooFewElementsError: If there are no elements or fewer than
                degree + 1.
            InvalidNumberKnotsError: If fewer than 2 knots are given.
            NotSortedError: If the knots are not non-decreasing.
            InvalidDegreeError: If the degree is less than 1.
            TooSmallWorkspaceError: If a fixed workspace cannot hold
                degree + 1 elements.
        """
        num_elements = len(elements)
        if num_elements == 0:
            raise TooFewElementsError(0, 2)

        num_knots = len(knots)
        if num_knots < 2:  # noqa: PLR2004
            raise InvalidNumberKnotsError(num_knots, "at least 2")

        check_sorted(knots)

        degree = num_knots - num_elements + 1
        if degree < 1:
            raise InvalidDegreeError(degree)
        if num_elements < degree + 1:
            raise TooFewElementsError(num_elements, degree + 1)
        if workspace.fixed and workspace.capacity < degree + 1:
            raise TooSmallWorkspaceError(workspace.capacity, degree + 1)

        self._elements = elements
        self._knots = knots
        self._workspace = workspace
        self._degree = degree

    @staticmethod
    def builder() -> BSplineBuilder:
        """Create a builder for B-spline curves.

        Returns:
            BSplineBuilder: A builder in open mode with nothing set.

        Example:
            >>> curve = (
            ...     BSpline.builder()
            ...     .clamped()
            ...     .elements([1.0, 3.0, 7.0])
            ...     .knots([0.0, 1.0])
            ...     .constant(3)
            ...     .build()
            ... )
            >>> curve(1.0)
            7.0
        """
        from .builder import BSplineBuilder

        return BSplineBuilder()

    @property
    def elements(self) -> Sequence[Any]:
        """The control elements."""
        return self._elements

    @property
    def knots(self) -> Sequence[Any]:
        """The logical knot sequence."""
        return self._knots

    @property
    def workspace(self) -> Workspace:
        """The workspace provider."""
        return self._workspace

    @property
    def degree(self) -> int:
        """The polynomial degree of the curve."""
        return self._degree

    @property
    def num_elements(self) -> int:
        """The number of control elements."""
        return len(self._elements)

    @functools.cached_property
    def domain(self) -> tuple[Any, Any]:
        """Start and end of the parameter domain."""
        return self._knots[self._degree - 1], self._knots[self.num_elements - 1]

    @functools.cached_property
    def _control_array(self) -> npt.NDArray[np.float64] | None:
        """Numeric control points as an (n, dim) array, if they are numeric."""
        return _as_control_array(self._elements)

    def evaluate(self, t: Any) -> Any:
        """Evaluate the curve at parameter `t`.

        Parameters outside the domain are clamped to the nearest end of the
        domain; this is not an error.

        Args:
            t (Any): Parameter.

        Returns:
            Any: The blended element.
        """
        lower, upper = self.domain
        t = min(max(t, lower), upper)
        span = _find_span(self._knots, self._degree, self.num_elements, t)
        work = self._workspace.provide(self._degree + 1)
        return _de_boor(self._elements, self._knots, self._degree, span, t, work)

    def evaluate_many(self, pts: npt.ArrayLike) -> Any:
        """Evaluate the curve at several parameters.

        Numeric control elements are evaluated at once by a compiled kernel.

        Args:
            pts (npt.ArrayLike): Parameters.

        Returns:
            Any: For numeric control elements, an array with the shape of
            `pts` (scalar elements) or with an extra last dimension (vector
            elements). Otherwise a list with one element per (flattened)
            parameter.
        """
        ctrl = self._control_array
        if ctrl is None:
            return super().evaluate_many(pts)

        pts_arr = np.asarray(pts, dtype=np.float64)
        flat_pts = np.ascontiguousarray(pts_arr.ravel())
        out = np.empty((flat_pts.size, ctrl.shape[1]), dtype=np.float64)
        _evaluate_de_boor_impl(_knots_to_array(self._knots), ctrl, self._degree, flat_pts, out)

        if np.ndim(self._elements[0]) == 0:
            return out.reshape(pts_arr.shape)
        return out.reshape(*pts_arr.shape, ctrl.shape[1])

    def is_clamped(self, tol: float | None = None) -> bool:
        """Check if the curve starts and ends at its first and last element.

        This is the case when the first and last `degree` logical knots are
        equal (up to tolerance).

        Args:
            tol (Optional[float]): Tolerance. Defaults to the default float64
                tolerance.

        Returns:
            bool: True if both ends have full multiplicity.
        """
        tol = get_default_tolerance(np.float64) if tol is None else tol
        knots = _knots_to_array(self._knots)
        degree = self._degree
        lower, upper = self.domain
        return bool(
            np.all(np.isclose(knots[:degree], lower, atol=tol))
            and np.all(np.isclose(knots[-degree:], upper, atol=tol))
        )

    def __repr__(self) -> str:
        return (
            f"BSpline(degree={self._degree}, num_elements={self.num_elements}, "
            f"domain={self.domain}, workspace={self._workspace!r})"
        )


class WeightedBSpline(Curve):
    """A rational B-spline curve.

    The control elements are lifted into homogeneous form, blended by an
    ordinary `BSpline`, and projected back by dividing by the blended weight.
    """

    def __init__(self, inner: BSpline) -> None:
        """Wrap a B-spline whose elements are `Weights`.

        Args:
            inner (BSpline): The B-spline over homogeneous elements.

        Raises:
            TypeError: If the elements of `inner` are not `Weights`.
        """
        if not isinstance(inner.elements, Weights):
            raise TypeError("the elements of a weighted B-spline must be Weights")
        self._inner = inner

    @property
    def inner(self) -> BSpline:
        """The B-spline over homogeneous elements."""
        return self._inner

    @property
    def elements(self) -> Sequence[Homogeneous]:
        """The lifted control elements."""
        return self._inner.elements

    @property
    def knots(self) -> Sequence[Any]:
        """The logical knot sequence."""
        return self._inner.knots

    @property
    def workspace(self) -> Workspace:
        """The workspace provider."""
        return self._inner.workspace

    @property
    def degree(self) -> int:
        """The polynomial degree of the curve."""
        return self._inner.degree

    @property
    def domain(self) -> tuple[Any, Any]:
        """Start and end of the parameter domain."""
        return self._inner.domain

    def evaluate_homogeneous(self, t: Any) -> Homogeneous:
        """Evaluate the curve at parameter `t` without projecting.

        Args:
            t (Any): Parameter. Clamped to the domain.

        Returns:
            Homogeneous: The blended homogeneous element.
        """
        return self._inner.evaluate(t)  # type: ignore[no-any-return]

    def evaluate(self, t: Any) -> Any:
        """Evaluate the curve at parameter `t`.

        Args:
            t (Any): Parameter. Clamped to the domain.

        Returns:
            Any: The projected element. If the blended weight is exactly zero
            the result is a direction, returned as the unprojected
            `Homogeneous` point at infinity.
        """
        point = self.evaluate_homogeneous(t)
        if point.is_infinity:
            logger.debug("Weighted B-spline evaluates to a point at infinity at t=%s.", t)
            return point
        return point.project()

    def is_clamped(self, tol: float | None = None) -> bool:
        """Check if the curve starts and ends at its first and last element."""
        return self._inner.is_clamped(tol)

    def __repr__(self) -> str:
        return (
            f"WeightedBSpline(degree={self.degree}, num_elements={len(self.elements)}, "
            f"domain={self.domain}, workspace={self.workspace!r})"
        )


class ChainedCurve(Curve):
    """Composition of a curve with another mapping (see `Curve.chain`)."""

    def __init__(self, first: Curve, second: Callable[[Any], Any]) -> None:
        """Initialize the composition `t -> second(first(t))`.

        Args:
            first (Curve): Curve evaluated first. Defines the domain.
            second (Callable[[Any], Any]): Mapping applied to its output.
        """
        self._first = first
        self._second = second

    @property
    def domain(self) -> tuple[Any, Any]:
        """Domain of the first curve."""
        return self._first.domain

    def evaluate(self, t: Any) -> Any:
        """Evaluate `second(first(t))`."""
        return self._second(self._first.evaluate(t))
