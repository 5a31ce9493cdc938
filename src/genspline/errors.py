"""Errors raised while configuring and constructing B-spline curves.

Every error is detected before a curve exists. All of them derive from
`BSplineError`, itself a `ValueError`, so callers that only care about
invalid input can keep catching `ValueError`.
"""

from __future__ import annotations


class BSplineError(ValueError):
    """Base class for all B-spline construction errors."""


class NotSortedError(BSplineError):
    """Raised when a knot sequence is not non-decreasing.

    Attributes:
        index (int): First index `i` such that `knot[i] > knot[i + 1]`.
    """

    def __init__(self, index: int) -> None:
        """Initialize the error.

        Args:
            index (int): First index at which the order is violated.
        """
        self.index = index
        super().__init__(
            f"Knots must be non-decreasing, but knot {index} is greater than knot {index + 1}."
        )


class InvalidDegreeError(BSplineError):
    """Raised when the degree implied by the configuration is less than 1.

    Attributes:
        degree (int): The computed (invalid) degree.
    """

    def __init__(self, degree: int) -> None:
        """Initialize the error.

        Args:
            degree (int): The computed degree.
        """
        self.degree = degree
        super().__init__(f"The degree of a B-spline must be at least 1. Got degree {degree}.")


class TooFewElementsError(BSplineError):
    """Raised when too few control elements are given.

    Attributes:
        found (int): Number of elements given.
        expected (int): Minimum number of elements required.
    """

    def __init__(self, found: int, expected: int) -> None:
        """Initialize the error.

        Args:
            found (int): Number of elements given.
            expected (int): Minimum number of elements required.
        """
        self.found = found
        self.expected = expected
        super().__init__(
            f"Too few elements given for creation of a B-spline, {found} elements given, "
            f"but at least {expected} are necessary."
        )


class InvalidNumberKnotsError(BSplineError):
    """Raised when the number of knots does not fit the boundary convention.

    Attributes:
        found (int): Number of knots given.
        expected (str): Description of the number of knots needed.
    """

    def __init__(self, found: int, expected: str) -> None:
        """Initialize the error.

        Args:
            found (int): Number of knots given.
            expected (str): Description of the number of knots needed.
        """
        self.found = found
        self.expected = expected
        super().__init__(
            f"The amount of knots given for creation of a B-spline is not correct, "
            f"{found} knots given, but {expected} necessary."
        )


class TooSmallWorkspaceError(BSplineError):
    """Raised when a fixed-capacity workspace cannot hold degree + 1 elements.

    Attributes:
        found (int): Capacity of the workspace.
        expected (int): Capacity needed (degree + 1).
    """

    def __init__(self, found: int, expected: int) -> None:
        """Initialize the error.

        Args:
            found (int): Capacity of the workspace.
            expected (int): Capacity needed.
        """
        self.found = found
        self.expected = expected
        super().__init__(
            f"The workspace has a capacity of {found}, but at least {expected} is necessary."
        )


class EmptyGeneratorError(BSplineError):
    """Raised when a weighted B-spline is given no elements."""

    def __init__(self) -> None:
        """Initialize the error."""
        super().__init__("The weighted element sequence is empty.")


class MissingFieldError(BSplineError):
    """Raised when a builder step needs a field that was not set yet.

    Attributes:
        field (str): Name of the missing field.
    """

    def __init__(self, field: str) -> None:
        """Initialize the error.

        Args:
            field (str): Name of the missing field.
        """
        self.field = field
        super().__init__(f"The B-spline configuration is missing the {field}.")
