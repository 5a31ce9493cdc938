"""Smoke tests for package metadata.

Validates public attributes exposed via the package API.
"""

from __future__ import annotations

import importlib
import logging
from typing import Final

import genspline


def test_package_all_exports() -> None:
    """Ensure all expected symbols are exported."""
    expected_metadata: Final[set[str]] = {"__version__", "__license__", "__author__"}
    assert expected_metadata.issubset(set(genspline.__all__))

    expected_public_api: Final[set[str]] = {
        # Curves
        "BSpline",
        "BoundaryMode",
        "ChainedCurve",
        "Curve",
        "WeightedBSpline",
        # Builders
        "BSplineBuilder",
        "BSplineConfig",
        "BSplineDirector",
        "WorkspaceKind",
        # Errors
        "BSplineError",
        "EmptyGeneratorError",
        "InvalidDegreeError",
        "InvalidNumberKnotsError",
        "MissingFieldError",
        "NotSortedError",
        "TooFewElementsError",
        "TooSmallWorkspaceError",
        # Homogeneous coordinates
        "Homogeneous",
        "Weights",
        "stack",
        # Knots
        "BorderBuffer",
        "BorderDeletion",
        "Equidistant",
        "Sorted",
        "check_sorted",
        # Tolerance
        "get_default_tolerance",
        # Workspaces
        "ConstWorkspace",
        "DynWorkspace",
        "Workspace",
    }

    assert expected_public_api.issubset(set(genspline.__all__))

    # Only metadata may start with an underscore
    private_in_all = {name for name in genspline.__all__ if name.startswith("_")}
    assert private_in_all.issubset(expected_metadata)

    assert set(genspline.__all__) == expected_metadata | expected_public_api


def test_package_metadata_values() -> None:
    """Validate the package metadata constants."""
    assert genspline.__version__ == "0.1.0"
    assert genspline.__license__ == "MIT"
    assert genspline.__author__ == "genspline developers"


def test_metadata_import_stability() -> None:
    """Verify metadata survives module reloads."""
    module = importlib.reload(genspline)
    assert module.__version__ == "0.1.0"


def test_library_logger_has_null_handler() -> None:
    """The package logger does not emit records unless the application configures logging."""
    handlers = logging.getLogger("genspline").handlers
    assert any(isinstance(handler, logging.NullHandler) for handler in handlers)
