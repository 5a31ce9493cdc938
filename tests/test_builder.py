"""Tests for the eager and deferred B-spline builders."""

from __future__ import annotations

import logging
from typing import Any

import numpy as np
import pytest

from genspline.bspline import BoundaryMode, BSpline, WeightedBSpline
from genspline.builder import (
    BSplineBuilder,
    BSplineConfig,
    BSplineDirector,
    WorkspaceKind,
    _EquidistantKnots,
)
from genspline.errors import (
    BSplineError,
    EmptyGeneratorError,
    InvalidDegreeError,
    InvalidNumberKnotsError,
    MissingFieldError,
    NotSortedError,
    TooFewElementsError,
    TooSmallWorkspaceError,
)
from genspline.knots import Sorted
from genspline.workspace import ConstWorkspace, DynWorkspace

Steps = list[tuple[str, tuple[Any, ...]]]

VALID_CONFIGURATIONS: list[Steps] = [
    [
        ("clamped", ()),
        ("elements", ([0.0, 1.0, 4.0, 2.0, 3.0],)),
        ("knots", ([0.0, 0.2, 0.9, 1.0],)),
        ("constant", (3,)),
    ],
    [
        ("legacy", ()),
        ("elements", ([0.0, 1.0, 4.0, 2.0, 3.0],)),
        ("equidistant", ()),
        ("degree", (3,)),
        ("distance", (-1.0, 0.5)),
        ("dynamic", ()),
    ],
    [
        ("elements", (np.array([[0.0, 0.0], [1.0, 2.0], [3.0, 1.0], [4.0, 4.0]]),)),
        ("equidistant", ()),
        ("quantity", (6,)),
        ("normalized", ()),
        ("dynamic", ()),
    ],
    [
        ("clamped", ()),
        ("elements_with_weights", ([(1.0, 1.0), (2.0, 0.5), (3.0, 2.0), (4.0, 1.0)],)),
        ("equidistant", ()),
        ("degree", (2,)),
        ("domain", (2.0, 4.0)),
        ("constant", (5,)),
    ],
]


def _configure(target: Any, steps: Steps) -> Any:
    for name, args in steps:
        target = getattr(target, name)(*args)
    return target


class TestBuilderEquivalence:
    """Test that eager and deferred builders agree."""

    @pytest.mark.parametrize("steps", VALID_CONFIGURATIONS)
    def test_same_curve(self, steps: Steps) -> None:
        """Test that both builders produce the same curve."""
        eager = _configure(BSplineDirector(), steps).build()
        deferred = _configure(BSplineBuilder(), steps).build()

        assert type(eager) is type(deferred)
        assert eager.degree == deferred.degree
        assert eager.domain == deferred.domain
        assert list(eager.knots) == list(deferred.knots)
        np.testing.assert_array_equal(eager.take(11), deferred.take(11))

    @pytest.mark.parametrize(
        ("steps", "error"),
        [
            ([("elements", ([1.0, 2.0],)), ("knots", ([1.0, 0.0],))], NotSortedError),
            (
                [("clamped", ()), ("elements", ([1.0, 2.0],)), ("knots", ([0.0, 0.5, 1.0],))],
                InvalidDegreeError,
            ),
            (
                [("legacy", ()), ("elements", ([1.0, 2.0],)), ("knots", ([1.0, 1.0, 1.0],))],
                InvalidNumberKnotsError,
            ),
            (
                [("elements", ([1.0, 2.0, 3.0],)), ("equidistant", ()), ("degree", (0,))],
                InvalidDegreeError,
            ),
            (
                [("elements", ([1.0, 2.0, 3.0],)), ("equidistant", ()), ("degree", (5,))],
                TooFewElementsError,
            ),
            (
                [("elements", ([1.0, 2.0, 3.0, 4.0],)), ("equidistant", ()), ("quantity", (2,))],
                InvalidDegreeError,
            ),
            ([("equidistant", ()), ("degree", (2,))], MissingFieldError),
            ([("elements", ([1.0, 2.0],)), ("degree", (1,))], MissingFieldError),
            (
                [("elements", ([1.0, 2.0],)), ("equidistant", ()), ("normalized", ())],
                MissingFieldError,
            ),
            ([("constant", (-1,))], ValueError),
            ([("elements", ([1.0, 2.0],)), ("knots", (np.zeros((2, 2)),))], TypeError),
        ],
    )
    def test_same_error(self, steps: Steps, error: type[Exception]) -> None:
        """Test that a failing step raises immediately or at build with the same error."""
        with pytest.raises(error):
            _configure(BSplineDirector(), steps)

        builder = _configure(BSplineBuilder(), steps)
        assert isinstance(builder.error, error)
        with pytest.raises(error):
            builder.build()


class TestBSplineDirector:
    """Test the eager builder."""

    def test_defaults_to_open(self) -> None:
        """Test the default boundary mode."""
        assert BSplineDirector().config.mode is BoundaryMode.OPEN

    def test_equidistant_degree(self) -> None:
        """Test equidistant knots given by a degree."""
        curve = (
            BSplineDirector()
            .elements([0.0, 5.0, 3.0, 6.0])
            .equidistant()
            .degree(2)
            .normalized()
            .dynamic()
            .build()
        )
        assert isinstance(curve, BSpline)
        assert curve.degree == 2  # noqa: PLR2004
        assert list(curve.knots) == [0.0, 0.25, 0.5, 0.75, 1.0]
        assert curve.domain == (0.25, 0.75)

    @pytest.mark.parametrize(
        ("mode", "quantity", "degree"),
        [("open", 5, 2), ("clamped", 3, 2), ("legacy", 7, 2), ("open", 4, 1)],
    )
    def test_equidistant_quantity(self, mode: str, quantity: int, degree: int) -> None:
        """Test equidistant knots given by their number."""
        director = getattr(BSplineDirector(), mode)()
        curve = (
            director.elements([0.0, 5.0, 3.0, 6.0])
            .equidistant()
            .quantity(quantity)
            .normalized()
            .dynamic()
            .build()
        )
        assert curve.degree == degree

    def test_clamped_equidistant_interpolates_ends(self) -> None:
        """Test that clamped curves start and end at the end elements."""
        elements = [0.5, 5.0, 3.0, 6.5]
        curve = (
            BSplineDirector()
            .clamped()
            .elements(elements)
            .equidistant()
            .degree(2)
            .normalized()
            .constant(3)
            .build()
        )
        assert curve.is_clamped()
        assert curve(0.0) == elements[0]
        assert curve(1.0) == elements[-1]

    def test_legacy_distance(self) -> None:
        """Test legacy knots placed by start and step."""
        curve = (
            BSplineDirector()
            .legacy()
            .elements([1.0, 3.0, 7.0])
            .equidistant()
            .degree(2)
            .distance(0.0, 1.0)
            .dynamic()
            .build()
        )
        assert list(curve.knots) == [1.0, 2.0, 3.0, 4.0]
        assert curve.domain == (2.0, 3.0)

    def test_dynamic_workspace_sized_to_degree(self) -> None:
        """Test that a dynamic workspace gets degree + 1 slots."""
        curve = (
            BSplineDirector()
            .clamped()
            .elements([1.0, 2.0, 3.0, 4.0, 5.0, 6.0])
            .knots([0.0, 0.5, 1.0])
            .dynamic()
            .build()
        )
        assert isinstance(curve.workspace, DynWorkspace)
        assert curve.workspace.capacity == curve.degree + 1

    def test_custom_workspace(self) -> None:
        """Test that a user-provided workspace is used as is."""
        provider = ConstWorkspace(10)
        curve = BSplineDirector().elements([1.0, 2.0]).knots([0.0, 1.0]).workspace(provider).build()
        assert curve.workspace is provider
        assert curve(0.25) == pytest.approx(1.25)

    def test_workspace_too_small(self) -> None:
        """Test that the capacity is checked when building."""
        director = BSplineDirector().elements([1.0, 3.0, 7.0]).knots([0.0, 0.0, 1.0, 1.0])
        with pytest.raises(TooSmallWorkspaceError) as exc_info:
            director.constant(2).build()
        assert exc_info.value.found == 2  # noqa: PLR2004
        assert exc_info.value.expected == 3  # noqa: PLR2004

    def test_knots_checked_again_at_build(self) -> None:
        """Test knots given before the elements are validated by build."""
        director = BSplineDirector().clamped().knots([0.0, 0.5, 1.0]).elements([1.0, 2.0])
        with pytest.raises(InvalidDegreeError):
            director.constant(2).build()

    def test_weighted_curve(self) -> None:
        """Test that weighted elements give a rational curve."""
        curve = (
            BSplineDirector()
            .elements_with_weights([(1.0, 1.0), (2.0, 2.0), (3.0, 0.0)])
            .equidistant()
            .degree(2)
            .domain(0.0, 5.0)
            .constant(3)
            .build()
        )
        assert isinstance(curve, WeightedBSpline)
        assert curve.degree == 2  # noqa: PLR2004

    def test_empty_weighted_elements(self) -> None:
        """Test that weighted curves need elements."""
        director = BSplineDirector().elements_with_weights([]).knots([0.0, 1.0]).dynamic()
        with pytest.raises(EmptyGeneratorError):
            director.build()

    def test_last_elements_call_wins(self) -> None:
        """Test that setting plain elements after weighted ones drops the weights."""
        curve = (
            BSplineDirector()
            .elements_with_weights([(1.0, 1.0), (2.0, 1.0)])
            .elements([1.0, 2.0])
            .knots([0.0, 1.0])
            .dynamic()
            .build()
        )
        assert isinstance(curve, BSpline)

    def test_last_knot_choice_wins(self) -> None:
        """Test that explicit and equidistant knots replace each other."""
        director = BSplineDirector().elements([1.0, 2.0, 3.0]).equidistant().degree(1)
        director.knots([0.0, 0.0, 1.0, 1.0])
        assert director.config.equidistant is None
        assert director.dynamic().build().degree == 2  # noqa: PLR2004

        director.equidistant()
        assert director.config.knots is None

    @pytest.mark.parametrize(
        ("steps", "field"),
        [
            ([], "elements"),
            ([("elements", ([1.0, 2.0],))], "knots"),
            ([("elements", ([1.0, 2.0],)), ("knots", ([0.0, 1.0],))], "workspace"),
            (
                [("elements", ([1.0, 2.0],)), ("equidistant", ()), ("dynamic", ())],
                "knot degree or quantity",
            ),
            (
                [
                    ("elements", ([1.0, 2.0],)),
                    ("equidistant", ()),
                    ("degree", (1,)),
                    ("dynamic", ()),
                ],
                "knot domain",
            ),
        ],
    )
    def test_missing_field(self, steps: Steps, field: str) -> None:
        """Test that premature builds name the missing field."""
        director = _configure(BSplineDirector(), steps)
        with pytest.raises(MissingFieldError) as exc_info:
            director.build()
        assert exc_info.value.field == field

    def test_config_without_workspace_details_names_field(self) -> None:
        """Test that a workspace kind without its capacity or provider is reported."""
        for kind in (WorkspaceKind.CONSTANT, WorkspaceKind.CUSTOM):
            config = BSplineConfig(
                elements=[1.0, 2.0], knots=Sorted([0.0, 1.0]), workspace_kind=kind
            )
            with pytest.raises(MissingFieldError) as exc_info:
                config.validate()
            assert exc_info.value.field == "workspace"

    def test_config_without_knot_end_names_field(self) -> None:
        """Test that equidistant knots with only a start are reported."""
        config = BSplineConfig(
            elements=[1.0, 2.0],
            equidistant=_EquidistantKnots(degree=1, start=0.0),
            workspace_kind=WorkspaceKind.DYNAMIC,
        )
        with pytest.raises(MissingFieldError) as exc_info:
            config.validate()
        assert exc_info.value.field == "knot domain"

    def test_step_without_prerequisite_names_field(self) -> None:
        """Test that dependent steps report what they need."""
        with pytest.raises(MissingFieldError) as exc_info:
            BSplineDirector().elements([1.0, 2.0]).degree(1)
        assert exc_info.value.field == "equidistant knots"

        with pytest.raises(MissingFieldError) as exc_info:
            BSplineDirector().equidistant().degree(1)
        assert exc_info.value.field == "elements"

    @pytest.mark.parametrize(
        ("elements", "knots", "capacity"),
        [([], [], 0), ([1.0], [1.0], 2), ([], [0.0, 1.0], 2), ([1.0, 2.0], [], 2)],
    )
    def test_degenerate_input_fails_cleanly(
        self, elements: list[float], knots: list[float], capacity: int
    ) -> None:
        """Test that degenerate configurations raise a construction error."""
        director = BSplineDirector().elements(elements).knots(knots).constant(capacity)
        with pytest.raises(BSplineError):
            director.build()


class TestBSplineBuilder:
    """Test the deferred builder."""

    def test_entry_point(self) -> None:
        """Test building through `BSpline.builder`."""
        curve = (
            BSpline.builder()
            .clamped()
            .elements([1.0, 3.0, 7.0])
            .knots([0.0, 1.0])
            .constant(3)
            .build()
        )
        assert curve(0.0) == 1.0
        assert curve(1.0) == 7.0  # noqa: PLR2004

    def test_config_is_shared(self) -> None:
        """Test that the builder exposes the collected configuration."""
        builder = BSplineBuilder().legacy().elements([1.0, 2.0]).dynamic()
        assert builder.config.mode is BoundaryMode.LEGACY
        assert builder.config.workspace_kind is WorkspaceKind.DYNAMIC
        assert builder.error is None

    def test_first_error_is_kept(self) -> None:
        """Test that steps after a failure are ignored."""
        builder = BSplineBuilder().elements([1.0, 2.0]).knots([1.0, 0.0])
        first = builder.error
        assert isinstance(first, NotSortedError)

        builder.clamped().knots([0.0, 0.5, 1.0]).constant(-1)
        assert builder.error is first
        assert builder.config.mode is BoundaryMode.OPEN
        with pytest.raises(NotSortedError):
            builder.build()

    def test_error_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that a deferred error is reported at debug level."""
        caplog.set_level(logging.DEBUG, logger="genspline")
        BSplineBuilder().elements([1.0, 2.0]).knots([1.0, 0.0])
        assert any("deferring error" in record.getMessage() for record in caplog.records)

    def test_build_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        """Test that building a curve is reported at debug level."""
        caplog.set_level(logging.DEBUG, logger="genspline")
        BSplineBuilder().elements([1.0, 2.0]).knots([0.0, 1.0]).dynamic().build()
        assert any("Built open B-spline" in record.getMessage() for record in caplog.records)
