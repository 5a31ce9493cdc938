"""Knot sequences and boundary adaptors for B-splines.

This module provides the read-only knot sequences a B-spline curve is built
on: a sortedness guard, a lazy equidistant generator and the two adaptors that
realize the clamped and legacy boundary conventions without copying knots.
All of them behave as `collections.abc.Sequence` objects.
"""

from __future__ import annotations

from abc import abstractmethod
from collections.abc import Sequence
from typing import Any, overload

import numpy as np
import numpy.typing as npt

from .errors import InvalidDegreeError, InvalidNumberKnotsError, NotSortedError


def _normalize_index(index: int, length: int) -> int:
    """Convert a possibly negative index into a non-negative one.

    Args:
        index (int): Index to normalize.
        length (int): Length of the sequence.

    Returns:
        int: Index in [0, length).

    Raises:
        IndexError: If the index is out of range.
    """
    if index < 0:
        index += length
    if index < 0 or index >= length:
        raise IndexError("knot index out of range")
    return index


def check_sorted(knots: Sequence[Any] | npt.ArrayLike) -> None:
    """Check that a knot sequence is non-decreasing.

    Args:
        knots (Sequence[Any] | npt.ArrayLike): Knot values. Any indexable
            sequence of real scalars.

    Raises:
        TypeError: If `knots` is not one-dimensional.
        NotSortedError: If `knots[i] > knots[i + 1]` for some `i`. The error
            carries the first such index.
    """
    values = np.asarray(knots, dtype=np.float64)
    if values.ndim != 1:
        raise TypeError("knots must be a 1D sequence")
    decreasing = np.flatnonzero(np.diff(values) < 0.0)
    if decreasing.size > 0:
        raise NotSortedError(int(decreasing[0]))


class _KnotSequence(Sequence[Any]):
    """Common read-only indexing for knot sequences."""

    @abstractmethod
    def __len__(self) -> int:
        """Number of logical knots."""

    @abstractmethod
    def _get(self, index: int) -> Any:
        """Return the knot at a non-negative, in-range index."""

    @overload
    def __getitem__(self, index: int) -> Any: ...

    @overload
    def __getitem__(self, index: slice) -> list[Any]: ...

    def __getitem__(self, index: int | slice) -> Any:
        if isinstance(index, slice):
            return [self._get(i) for i in range(*index.indices(len(self)))]
        return self._get(_normalize_index(index, len(self)))

    def __repr__(self) -> str:
        return f"{type(self).__name__}({list(self)!r})"


class Sorted(_KnotSequence):
    """Knot sequence guaranteed to be non-decreasing.

    Attributes:
        _inner (Sequence[Any]): The wrapped knot sequence.
    """

    def __init__(self, knots: Sequence[Any]) -> None:
        """Wrap a knot sequence after checking its order.

        Args:
            knots (Sequence[Any]): Indexable sequence of knot values.

        Raises:
            NotSortedError: If the knots are not non-decreasing.
        """
        check_sorted(knots)
        self._inner = knots

    @property
    def inner(self) -> Sequence[Any]:
        """The wrapped knot sequence."""
        return self._inner

    def __len__(self) -> int:
        return len(self._inner)

    def _get(self, index: int) -> Any:
        return self._inner[index]


class Equidistant(_KnotSequence):
    """Lazily generated, evenly spaced knots.

    The value at index `i` is `start + i * step`. No knot is stored.

    Example:
        >>> list(Equidistant(5, 0.0, 1.0))
        [0.0, 0.25, 0.5, 0.75, 1.0]
    """

    _count: int
    _start: float
    _step: float
    _end: float | None

    def __init__(self, count: int, start: float, end: float) -> None:
        """Create `count` knots spanning `[start, end]`.

        Args:
            count (int): Number of knots. Must be at least 2.
            start (float): First knot.
            end (float): Last knot.

        Raises:
            InvalidNumberKnotsError: If `count` is less than 2.
        """
        if count < 2:  # noqa: PLR2004
            raise InvalidNumberKnotsError(count, "at least 2")
        self._setup(count, start, (end - start) / (count - 1), end)

    @classmethod
    def from_step(cls, count: int, start: float, step: float) -> Equidistant:
        """Create `count` knots starting at `start` separated by `step`.

        Args:
            count (int): Number of knots. Must be non-negative.
            start (float): First knot.
            step (float): Distance between consecutive knots.

        Returns:
            Equidistant: The knot generator.

        Raises:
            InvalidNumberKnotsError: If `count` is negative.
        """
        if count < 0:
            raise InvalidNumberKnotsError(count, "a non-negative number")
        knots = cls.__new__(cls)
        knots._setup(count, start, step, None)
        return knots

    @classmethod
    def normalized(cls, count: int) -> Equidistant:
        """Create `count` knots spanning `[0, 1]`.

        Args:
            count (int): Number of knots. Must be at least 2.

        Returns:
            Equidistant: The knot generator.
        """
        return cls(count, 0.0, 1.0)

    def _setup(self, count: int, start: float, step: float, end: float | None) -> None:
        self._count = count
        self._start = start
        self._step = step
        self._end = end

    @property
    def start(self) -> float:
        """First knot."""
        return self._start

    @property
    def step(self) -> float:
        """Distance between consecutive knots."""
        return self._step

    def __len__(self) -> int:
        return self._count

    def _get(self, index: int) -> float:
        # Endpoint-defined sequences end exactly on `end`.
        if self._end is not None and index == self._count - 1:
            return self._end
        return self._start + index * self._step

    def __repr__(self) -> str:
        return f"Equidistant(count={self._count}, start={self._start}, step={self._step})"


class BorderBuffer(_KnotSequence):
    """Clamped boundary adaptor.

    Virtually repeats the first and last knot of a core sequence `duplicate`
    times each. With a core of length `L` and `k` duplicates the logical
    length is `L + 2k`: indices in `[0, k)` read the first core knot, indices
    in `[L + k, L + 2k)` read the last one and the rest read `core[i - k]`.

    Example:
        >>> list(BorderBuffer([0.0, 0.5, 1.0], 2))
        [0.0, 0.0, 0.0, 0.5, 1.0, 1.0, 1.0]
    """

    def __init__(self, inner: Sequence[Any], duplicate: int) -> None:
        """Create the adaptor.

        Args:
            inner (Sequence[Any]): Core knot sequence. Must not be empty.
            duplicate (int): Number of virtual copies added at each end.

        Raises:
            InvalidDegreeError: If `duplicate` is negative. For a clamped
                curve the degree is `duplicate + 1`.
            InvalidNumberKnotsError: If `inner` is empty.
        """
        if duplicate < 0:
            raise InvalidDegreeError(duplicate + 1)
        if len(inner) == 0:
            raise InvalidNumberKnotsError(0, "at least 1")
        self._inner = inner
        self._duplicate = duplicate

    @property
    def inner(self) -> Sequence[Any]:
        """The core knot sequence."""
        return self._inner

    @property
    def duplicate(self) -> int:
        """Number of virtual copies at each end."""
        return self._duplicate

    def __len__(self) -> int:
        return len(self._inner) + 2 * self._duplicate

    def _get(self, index: int) -> Any:
        core_len = len(self._inner)
        if index < self._duplicate:
            return self._inner[0]
        if index >= core_len + self._duplicate:
            return self._inner[core_len - 1]
        return self._inner[index - self._duplicate]


class BorderDeletion(_KnotSequence):
    """Legacy boundary adaptor.

    Takes a knot vector in the classical convention, where `n + d + 1` knots
    describe a curve of degree `d` with `n` control elements, and hides its
    first and last knot. These two knots never influence the curve.

    Example:
        >>> knots = BorderDeletion([0.0, 0.0, 0.0, 1.0, 1.0, 1.0])
        >>> list(knots), knots.leading_multiplicity
        ([0.0, 0.0, 1.0, 1.0], 3)
    """

    def __init__(self, inner: Sequence[Any]) -> None:
        """Create the adaptor.

        Args:
            inner (Sequence[Any]): Classical knot vector.

        Raises:
            InvalidNumberKnotsError: If fewer than 2 knots are given or all
                knots share the same value.
        """
        num_knots = len(inner)
        if num_knots < 2:  # noqa: PLR2004
            raise InvalidNumberKnotsError(num_knots, "at least 2")

        leading = 1
        while leading < num_knots and inner[leading] == inner[0]:
            leading += 1
        if leading == num_knots:
            raise InvalidNumberKnotsError(num_knots, "knots spanning at least two distinct values")

        trailing = 1
        while inner[num_knots - 1 - trailing] == inner[num_knots - 1]:
            trailing += 1

        self._inner = inner
        self._leading = leading
        self._trailing = trailing

    @property
    def inner(self) -> Sequence[Any]:
        """The classical knot vector."""
        return self._inner

    @property
    def leading_multiplicity(self) -> int:
        """Number of knots equal to the first one at the start of the vector."""
        return self._leading

    @property
    def trailing_multiplicity(self) -> int:
        """Number of knots equal to the last one at the end of the vector."""
        return self._trailing

    def __len__(self) -> int:
        return len(self._inner) - 2

    def _get(self, index: int) -> Any:
        return self._inner[index + 1]
