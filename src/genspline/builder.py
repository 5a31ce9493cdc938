"""Builders assembling validated B-spline curves.

A curve needs control elements, knots and a workspace; optionally a boundary
mode and weights. Two builders collect them:

- `BSplineDirector` raises as soon as a step fails.
- `BSplineBuilder` remembers the first failure, ignores every later step and
  raises the failure from `build()`.

Both record their choices in a `BSplineConfig` and validate every invariant
again when `build()` is called, so both produce the same curve (or the same
error) for the same sequence of calls.

Example:
    >>> curve = (
    ...     BSplineBuilder()
    ...     .elements([0.0, 5.0, 3.0, 6.0])
    ...     .equidistant()
    ...     .degree(2)
    ...     .normalized()
    ...     .dynamic()
    ...     .build()
    ... )
    >>> curve.degree, curve.domain
    (2, (0.25, 0.75))
"""

from __future__ import annotations

import functools
import logging
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .bspline import BoundaryMode, BSpline, WeightedBSpline
from .errors import (
    InvalidDegreeError,
    MissingFieldError,
    TooFewElementsError,
)
from .homogeneous import Weights
from .knots import Equidistant, Sorted
from .workspace import ConstWorkspace, DynWorkspace, Workspace

logger = logging.getLogger(__name__)


class WorkspaceKind(Enum):
    """Workspace strategies a builder can select.

    Attributes:
        CONSTANT (WorkspaceKind): `ConstWorkspace` with a user-given capacity.
        DYNAMIC (WorkspaceKind): `DynWorkspace` sized when the curve is built.
        CUSTOM (WorkspaceKind): A user-provided `Workspace`.
    """

    CONSTANT = "constant"
    DYNAMIC = "dynamic"
    CUSTOM = "custom"


@dataclass
class _EquidistantKnots:
    """Pending description of equidistant knots.

    The number of knots is given either by a degree or by a quantity; the
    placement by endpoints or by a start and a step.
    """

    degree: int | None = None
    quantity: int | None = None
    start: float | None = None
    end: float | None = None
    step: float | None = None

    def count(self, mode: BoundaryMode, num_elements: int) -> int:
        """Number of input knots to generate.

        Raises:
            MissingFieldError: If neither degree nor quantity was given.
        """
        if self.degree is not None:
            return mode.knot_count(num_elements, self.degree)
        if self.quantity is not None:
            return self.quantity
        raise MissingFieldError("knot degree or quantity")

    def generate(self, mode: BoundaryMode, num_elements: int) -> Equidistant:
        """Create the knot generator.

        Raises:
            MissingFieldError: If the count or the placement is missing.
            InvalidNumberKnotsError: If endpoints are given for fewer than
                2 knots.
        """
        count = self.count(mode, num_elements)
        if self.start is not None and self.step is not None:
            return Equidistant.from_step(count, self.start, self.step)
        if self.start is not None and self.end is not None:
            return Equidistant(count, self.start, self.end)
        raise MissingFieldError("knot domain")


@dataclass
class BSplineConfig:
    """Configuration of a B-spline being built.

    Every field is optional until `validate` runs.

    Attributes:
        mode (BoundaryMode): Boundary convention of the knots.
        elements (Optional[Sequence[Any]]): Control elements, or weighted
            elements if `weighted` is set.
        weighted (bool): Whether `elements` holds `(element, weight)` pairs
            or `Homogeneous` points.
        knots (Optional[Sorted]): Explicit input knots.
        equidistant (Optional[_EquidistantKnots]): Equidistant knot
            description, used instead of `knots`.
        workspace_kind (Optional[WorkspaceKind]): Selected workspace strategy.
        capacity (Optional[int]): Capacity for `WorkspaceKind.CONSTANT`.
        provider (Optional[Workspace]): Provider for `WorkspaceKind.CUSTOM`.
    """

    mode: BoundaryMode = BoundaryMode.OPEN
    elements: Sequence[Any] | None = None
    weighted: bool = False
    knots: Sorted | None = None
    equidistant: _EquidistantKnots | None = None
    workspace_kind: WorkspaceKind | None = None
    capacity: int | None = None
    provider: Workspace | None = field(default=None, repr=False)

    def _input_knots(self, num_elements: int) -> Sequence[Any]:
        if self.equidistant is not None:
            return self.equidistant.generate(self.mode, num_elements)
        if self.knots is None:
            raise MissingFieldError("knots")
        return self.knots

    def _make_workspace(self, num_knots: int, num_elements: int) -> Workspace:
        if self.workspace_kind is WorkspaceKind.CONSTANT and self.capacity is not None:
            return ConstWorkspace(self.capacity)
        if self.workspace_kind is WorkspaceKind.DYNAMIC:
            return DynWorkspace(max(num_knots - num_elements + 2, 0))
        if self.workspace_kind is WorkspaceKind.CUSTOM and self.provider is not None:
            return self.provider
        raise MissingFieldError("workspace")

    def validate(self) -> BSpline | WeightedBSpline:
        """Check every invariant and build the curve.

        Returns:
            BSpline | WeightedBSpline: The curve; weighted if the elements
            were given with weights.

        Raises:
            MissingFieldError: If elements, knots or workspace are missing.
            EmptyGeneratorError: If weighted elements are empty.
            NotSortedError: If the knots are not non-decreasing.
            InvalidDegreeError: If the degree is less than 1.
            TooFewElementsError: If there are fewer than degree + 1 elements.
            InvalidNumberKnotsError: If the number of knots does not fit the
                boundary mode.
            TooSmallWorkspaceError: If a fixed workspace is too small.
        """
        if self.elements is None:
            raise MissingFieldError("elements")
        if self.knots is None and self.equidistant is None:
            raise MissingFieldError("knots")
        if self.workspace_kind is None:
            raise MissingFieldError("workspace")

        elements: Sequence[Any] = Weights(self.elements) if self.weighted else self.elements
        num_elements = len(elements)
        knots = self.mode.adapt_knots(self._input_knots(num_elements), num_elements)
        workspace = self._make_workspace(len(knots), num_elements)

        curve = BSpline(elements, knots, workspace)
        logger.debug(
            "Built %s B-spline of degree %d with %d elements, %d knots and %r.",
            self.mode.value,
            curve.degree,
            num_elements,
            len(knots),
            workspace,
        )
        return WeightedBSpline(curve) if self.weighted else curve


class BSplineDirector:
    """Eager B-spline builder.

    Each step returns the director itself; fallible steps raise immediately.

    Before building, the director needs:

    - the elements, with `elements` or `elements_with_weights`;
    - the knots, with `knots` or with `equidistant` followed by `degree` or
      `quantity` and by `domain`, `normalized` or `distance`;
    - a workspace, with `constant`, `dynamic` or `workspace`.

    The boundary mode defaults to open.
    """

    def __init__(self) -> None:
        """Initialize an empty director in open mode."""
        self._config = BSplineConfig()

    @property
    def config(self) -> BSplineConfig:
        """The configuration collected so far."""
        return self._config

    def open(self) -> BSplineDirector:
        """Use the knots as given (see `BoundaryMode.OPEN`)."""
        self._config.mode = BoundaryMode.OPEN
        return self

    def clamped(self) -> BSplineDirector:
        """Virtually repeat the end knots (see `BoundaryMode.CLAMPED`)."""
        self._config.mode = BoundaryMode.CLAMPED
        return self

    def legacy(self) -> BSplineDirector:
        """Accept knots in the classical convention (see `BoundaryMode.LEGACY`)."""
        self._config.mode = BoundaryMode.LEGACY
        return self

    def elements(self, elements: Sequence[Any]) -> BSplineDirector:
        """Set the control elements.

        Args:
            elements (Sequence[Any]): Elements supporting `element * scalar`
                and `element + element`.

        Returns:
            BSplineDirector: The director.
        """
        self._config.elements = elements
        self._config.weighted = False
        return self

    def elements_with_weights(self, elements: Sequence[Any]) -> BSplineDirector:
        """Set weighted control elements; the curve becomes rational.

        Every pair `(e, w)` is lifted to `(e * w, w)`, so a pair with weight
        zero is a valid input that does not pull the curve. Directions are
        given as `Homogeneous.infinity(direction)` items. Where the blended
        weight is zero the curve evaluates to the unprojected point at
        infinity (see `WeightedBSpline.evaluate`).

        Args:
            elements (Sequence[Any]): `(element, weight)` pairs or
                `Homogeneous` points.

        Returns:
            BSplineDirector: The director.
        """
        self._config.elements = elements
        self._config.weighted = True
        return self

    def knots(self, knots: Sequence[Any]) -> BSplineDirector:
        """Set explicit knots.

        The degree follows from the number of elements and knots, see
        `BoundaryMode`.

        Args:
            knots (Sequence[Any]): Non-decreasing knot values.

        Returns:
            BSplineDirector: The director.

        Raises:
            TypeError: If the knots are not one-dimensional.
            NotSortedError: If the knots are not non-decreasing.
            InvalidDegreeError: If clamped knots outnumber the elements.
            InvalidNumberKnotsError: If the knots do not fit the clamped or
                legacy mode.
        """
        sorted_knots = Sorted(knots)
        if self._config.elements is not None:
            self._config.mode.adapt_knots(sorted_knots, len(self._config.elements))
        self._config.knots = sorted_knots
        self._config.equidistant = None
        return self

    def equidistant(self) -> BSplineDirector:
        """Use evenly spaced knots.

        Must be followed by `degree` or `quantity` and then by `domain`,
        `normalized` or `distance`.
        """
        self._config.equidistant = _EquidistantKnots()
        self._config.knots = None
        return self

    def _pending_equidistant(self) -> tuple[_EquidistantKnots, int]:
        if self._config.equidistant is None:
            raise MissingFieldError("equidistant knots")
        if self._config.elements is None:
            raise MissingFieldError("elements")
        return self._config.equidistant, len(self._config.elements)

    def _check_degree(self, degree: int, num_elements: int) -> None:
        if degree < 1:
            raise InvalidDegreeError(degree)
        if num_elements < degree + 1:
            raise TooFewElementsError(num_elements, degree + 1)

    def degree(self, degree: int) -> BSplineDirector:
        """Set the degree of a curve with equidistant knots.

        Args:
            degree (int): Degree. Must be at least 1 and less than the number
                of elements.

        Returns:
            BSplineDirector: The director.

        Raises:
            MissingFieldError: If `equidistant` or the elements were not set.
            InvalidDegreeError: If `degree` is less than 1.
            TooFewElementsError: If there are fewer than `degree + 1`
                elements.
        """
        pending, num_elements = self._pending_equidistant()
        self._check_degree(degree, num_elements)
        pending.degree = degree
        pending.quantity = None
        return self

    def quantity(self, quantity: int) -> BSplineDirector:
        """Set the number of equidistant knots.

        The degree follows from the boundary mode, see `BoundaryMode`.

        Args:
            quantity (int): Number of knots.

        Returns:
            BSplineDirector: The director.

        Raises:
            MissingFieldError: If `equidistant` or the elements were not set.
            InvalidDegreeError: If the implied degree is less than 1.
            TooFewElementsError: If there are too few elements for the
                implied degree.
        """
        pending, num_elements = self._pending_equidistant()
        self._check_degree(self._config.mode.compute_degree(num_elements, quantity), num_elements)
        pending.quantity = quantity
        pending.degree = None
        return self

    def domain(self, start: float, end: float) -> BSplineDirector:
        """Spread the equidistant knots over `[start, end]`.

        Args:
            start (float): First knot.
            end (float): Last knot.

        Returns:
            BSplineDirector: The director.

        Raises:
            MissingFieldError: If `equidistant`, the elements, or the degree
                or quantity were not set.
            InvalidNumberKnotsError: If fewer than 2 knots would be generated.
        """
        pending, num_elements = self._pending_equidistant()
        Equidistant(pending.count(self._config.mode, num_elements), start, end)
        pending.start, pending.end, pending.step = start, end, None
        return self

    def normalized(self) -> BSplineDirector:
        """Spread the equidistant knots over `[0, 1]` (see `domain`)."""
        return self.domain(0.0, 1.0)

    def distance(self, start: float, step: float) -> BSplineDirector:
        """Place the equidistant knots from `start` on, `step` apart.

        Args:
            start (float): First knot.
            step (float): Distance between consecutive knots.

        Returns:
            BSplineDirector: The director.

        Raises:
            MissingFieldError: If `equidistant`, the elements, or the degree
                or quantity were not set.
            InvalidNumberKnotsError: If the number of knots is negative.
        """
        pending, num_elements = self._pending_equidistant()
        Equidistant.from_step(pending.count(self._config.mode, num_elements), start, step)
        pending.start, pending.end, pending.step = start, None, step
        return self

    def constant(self, capacity: int) -> BSplineDirector:
        """Use a workspace of fixed capacity.

        The capacity must be at least the degree + 1 of the curve, which is
        checked by `build`.

        Args:
            capacity (int): Capacity of the workspace.

        Returns:
            BSplineDirector: The director.

        Raises:
            ValueError: If `capacity` is negative.
        """
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._config.workspace_kind = WorkspaceKind.CONSTANT
        self._config.capacity = capacity
        self._config.provider = None
        return self

    def dynamic(self) -> BSplineDirector:
        """Use a workspace allocated on every evaluation, sized by `build`."""
        self._config.workspace_kind = WorkspaceKind.DYNAMIC
        self._config.capacity = None
        self._config.provider = None
        return self

    def workspace(self, provider: Workspace) -> BSplineDirector:
        """Use a custom workspace provider.

        Args:
            provider (Workspace): The provider.

        Returns:
            BSplineDirector: The director.
        """
        self._config.workspace_kind = WorkspaceKind.CUSTOM
        self._config.capacity = None
        self._config.provider = provider
        return self

    def build(self) -> BSpline | WeightedBSpline:
        """Validate the configuration and build the curve.

        Returns:
            BSpline | WeightedBSpline: The curve.

        Raises:
            BSplineError: The first invariant violated, see
                `BSplineConfig.validate`.
        """
        return self._config.validate()


class BSplineBuilder:
    """Deferred B-spline builder.

    Offers the same steps as `BSplineDirector`. The first failing step is
    remembered and every later step does nothing; the failure is raised by
    `build`.

    Example:
        >>> builder = BSplineBuilder().elements([1.0, 2.0]).knots([1.0, 0.0])
        >>> type(builder.error).__name__
        'NotSortedError'
    """

    def __init__(self) -> None:
        """Initialize an empty builder in open mode."""
        self._director = BSplineDirector()
        self._error: Exception | None = None

    @property
    def error(self) -> Exception | None:
        """The first error raised by a step, if any."""
        return self._error

    @property
    def config(self) -> BSplineConfig:
        """The configuration collected so far."""
        return self._director.config

    def _apply(self, step: Callable[[], object]) -> BSplineBuilder:
        if self._error is None:
            try:
                step()
            except (TypeError, ValueError) as err:
                logger.debug("B-spline builder step failed, deferring error to build: %s", err)
                self._error = err
        return self

    def open(self) -> BSplineBuilder:
        """See `BSplineDirector.open`."""
        return self._apply(self._director.open)

    def clamped(self) -> BSplineBuilder:
        """See `BSplineDirector.clamped`."""
        return self._apply(self._director.clamped)

    def legacy(self) -> BSplineBuilder:
        """See `BSplineDirector.legacy`."""
        return self._apply(self._director.legacy)

    def elements(self, elements: Sequence[Any]) -> BSplineBuilder:
        """See `BSplineDirector.elements`."""
        return self._apply(functools.partial(self._director.elements, elements))

    def elements_with_weights(self, elements: Sequence[Any]) -> BSplineBuilder:
        """See `BSplineDirector.elements_with_weights`."""
        return self._apply(functools.partial(self._director.elements_with_weights, elements))

    def knots(self, knots: Sequence[Any]) -> BSplineBuilder:
        """See `BSplineDirector.knots`."""
        return self._apply(functools.partial(self._director.knots, knots))

    def equidistant(self) -> BSplineBuilder:
        """See `BSplineDirector.equidistant`."""
        return self._apply(self._director.equidistant)

    def degree(self, degree: int) -> BSplineBuilder:
        """See `BSplineDirector.degree`."""
        return self._apply(functools.partial(self._director.degree, degree))

    def quantity(self, quantity: int) -> BSplineBuilder:
        """See `BSplineDirector.quantity`."""
        return self._apply(functools.partial(self._director.quantity, quantity))

    def domain(self, start: float, end: float) -> BSplineBuilder:
        """See `BSplineDirector.domain`."""
        return self._apply(functools.partial(self._director.domain, start, end))

    def normalized(self) -> BSplineBuilder:
        """See `BSplineDirector.normalized`."""
        return self._apply(self._director.normalized)

    def distance(self, start: float, step: float) -> BSplineBuilder:
        """See `BSplineDirector.distance`."""
        return self._apply(functools.partial(self._director.distance, start, step))

    def constant(self, capacity: int) -> BSplineBuilder:
        """See `BSplineDirector.constant`."""
        return self._apply(functools.partial(self._director.constant, capacity))

    def dynamic(self) -> BSplineBuilder:
        """See `BSplineDirector.dynamic`."""
        return self._apply(self._director.dynamic)

    def workspace(self, provider: Workspace) -> BSplineBuilder:
        """See `BSplineDirector.workspace`."""
        return self._apply(functools.partial(self._director.workspace, provider))

    def build(self) -> BSpline | WeightedBSpline:
        """Raise the first deferred error, or validate and build the curve.

        Returns:
            BSpline | WeightedBSpline: The curve.

        Raises:
            ValueError: The first invalid value given to a step, or the first
                invariant violated (see `BSplineConfig.validate`).
            TypeError: If a step was given data of the wrong shape, such as
                two-dimensional knots.
        """
        if self._error is not None:
            raise self._error
        return self._director.build()
