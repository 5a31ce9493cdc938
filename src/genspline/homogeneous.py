"""Homogeneous coordinates for weighted (rational) B-splines.

An element `e` with weight `w` is lifted to the pair `(e * w, w)`. Blending
lifted pairs affinely and dividing by the blended weight at the end yields
rational interpolation. A lifted element with weight zero does not pull the
curve at all. Directions (points at infinity) are created explicitly with
`Homogeneous.infinity` and are carried through evaluation unchanged.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from typing import Any

import numpy as np

from .errors import EmptyGeneratorError


class Homogeneous:
    """Element in homogeneous form.

    Attributes:
        rational (Any): The element multiplied by its weight. For points at
            infinity it is the direction itself.
        weight (Any): The weight.
    """

    __slots__ = ("rational", "weight")

    def __init__(self, rational: Any, weight: Any) -> None:
        """Create a homogeneous element from its raw parts.

        Args:
            rational (Any): Element already multiplied by `weight`.
            weight (Any): Weight of the element.
        """
        self.rational = rational
        self.weight = weight

    @classmethod
    def new(cls, element: Any) -> Homogeneous:
        """Lift an element with weight 1.

        Args:
            element (Any): The element.

        Returns:
            Homogeneous: The lifted element.
        """
        return cls(element, 1.0)

    @classmethod
    def weighted(cls, element: Any, weight: Any) -> Homogeneous:
        """Lift an element with a non-zero weight.

        Args:
            element (Any): The element.
            weight (Any): Its weight. Must not be zero.

        Returns:
            Homogeneous: The lifted element.

        Raises:
            ValueError: If `weight` is zero. Use `infinity` for directions.
        """
        if weight == 0:
            raise ValueError("weight must be non-zero, use Homogeneous.infinity for directions")
        return cls.weighted_unchecked(element, weight)

    @classmethod
    def weighted_unchecked(cls, element: Any, weight: Any) -> Homogeneous:
        """Lift an element with any weight, without checks.

        Args:
            element (Any): The element.
            weight (Any): Its weight.

        Returns:
            Homogeneous: `(element * weight, weight)`.
        """
        return cls(element * weight, weight)

    @classmethod
    def infinity(cls, direction: Any) -> Homogeneous:
        """Create a point at infinity.

        Args:
            direction (Any): Direction of the point.

        Returns:
            Homogeneous: `(direction, 0)`.
        """
        return cls(direction, 0.0)

    @property
    def is_infinity(self) -> bool:
        """Whether the weight is exactly zero."""
        return bool(self.weight == 0)

    def project(self) -> Any:
        """Project back to the ordinary element.

        Returns:
            Any: `rational / weight`.

        Raises:
            ValueError: If the element is a point at infinity.
        """
        if self.is_infinity:
            raise ValueError("cannot project a point at infinity")
        return self.rational / self.weight

    def __add__(self, other: Homogeneous) -> Homogeneous:
        if not isinstance(other, Homogeneous):
            return NotImplemented
        return Homogeneous(self.rational + other.rational, self.weight + other.weight)

    def __mul__(self, scalar: Any) -> Homogeneous:
        return Homogeneous(self.rational * scalar, self.weight * scalar)

    __rmul__ = __mul__

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Homogeneous):
            return NotImplemented
        return bool(
            np.all(np.asarray(self.rational) == np.asarray(other.rational))
            and self.weight == other.weight
        )

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Homogeneous(rational={self.rational!r}, weight={self.weight!r})"


def _lift(item: Any) -> Homogeneous:
    """Convert an `(element, weight)` pair or a `Homogeneous` into homogeneous form.

    Args:
        item (Any): Item to convert.

    Returns:
        Homogeneous: The lifted item, `(element * weight, weight)` for pairs.

    Raises:
        TypeError: If the item is neither a pair nor a `Homogeneous`.
    """
    if isinstance(item, Homogeneous):
        return item
    try:
        element, weight = item
    except (TypeError, ValueError) as err:
        raise TypeError(
            f"weighted elements must be (element, weight) pairs or Homogeneous, got {item!r}"
        ) from err
    return Homogeneous.weighted_unchecked(element, weight)


class Weights(Sequence[Homogeneous]):
    """Read-only view lifting weighted elements on access.

    Example:
        >>> Weights([(1.0, 1.0), (2.0, 2.0)])[1]
        Homogeneous(rational=4.0, weight=2.0)
    """

    def __init__(self, items: Sequence[Any]) -> None:
        """Wrap a sequence of weighted elements.

        Args:
            items (Sequence[Any]): `(element, weight)` pairs or `Homogeneous`
                elements.

        Raises:
            EmptyGeneratorError: If `items` is empty.
        """
        if len(items) == 0:
            raise EmptyGeneratorError()
        self._items = items

    @property
    def inner(self) -> Sequence[Any]:
        """The wrapped weighted elements."""
        return self._items

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> Homogeneous:  # type: ignore[override]
        return _lift(self._items[index])


def stack(elements: Iterable[Any], weights: Iterable[Any]) -> list[tuple[Any, Any]]:
    """Pair elements with their weights.

    Args:
        elements (Iterable[Any]): The elements.
        weights (Iterable[Any]): The weights, one per element.

    Returns:
        list[tuple[Any, Any]]: `(element, weight)` pairs.

    Raises:
        ValueError: If both sequences have different lengths.

    Example:
        >>> stack([1.0, 2.0], [1.0, 0.5])
        [(1.0, 1.0), (2.0, 0.5)]
    """
    return list(zip(elements, weights, strict=True))
