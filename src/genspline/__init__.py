"""Public API surface for genspline.

Defines package metadata and exported interfaces.
"""

import logging
from typing import Final

# Private API imports (accessible but not in __all__)
# Users can access private functions via: genspline._bspline_impl._function_name, etc.
from . import _bspline_impl  # noqa: F401

# Public API imports
from .bspline import BoundaryMode, BSpline, ChainedCurve, Curve, WeightedBSpline
from .builder import BSplineBuilder, BSplineConfig, BSplineDirector, WorkspaceKind
from .errors import (
    BSplineError,
    EmptyGeneratorError,
    InvalidDegreeError,
    InvalidNumberKnotsError,
    MissingFieldError,
    NotSortedError,
    TooFewElementsError,
    TooSmallWorkspaceError,
)
from .homogeneous import Homogeneous, Weights, stack
from .knots import BorderBuffer, BorderDeletion, Equidistant, Sorted, check_sorted
from .tolerance import get_default_tolerance
from .workspace import ConstWorkspace, DynWorkspace, Workspace

logging.getLogger(__name__).addHandler(logging.NullHandler())

# Package metadata
__version__: Final[str] = "0.1.0"
__license__: Final[str] = "MIT"
__author__: Final[str] = "genspline developers"

# Public interface: only functions/classes that don't start with _
__all__ = [
    "BSpline",
    "BSplineBuilder",
    "BSplineConfig",
    "BSplineDirector",
    "BSplineError",
    "BorderBuffer",
    "BorderDeletion",
    "BoundaryMode",
    "ChainedCurve",
    "ConstWorkspace",
    "Curve",
    "DynWorkspace",
    "EmptyGeneratorError",
    "Equidistant",
    "Homogeneous",
    "InvalidDegreeError",
    "InvalidNumberKnotsError",
    "MissingFieldError",
    "NotSortedError",
    "Sorted",
    "TooFewElementsError",
    "TooSmallWorkspaceError",
    "WeightedBSpline",
    "Weights",
    "Workspace",
    "WorkspaceKind",
    "__author__",
    "__license__",
    "__version__",
    "check_sorted",
    "get_default_tolerance",
    "stack",
]
