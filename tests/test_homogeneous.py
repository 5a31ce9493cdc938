"""Tests for homogeneous coordinates and weighted element sequences."""

from __future__ import annotations

import numpy as np
import pytest

from genspline.errors import EmptyGeneratorError
from genspline.homogeneous import Homogeneous, Weights, stack


class TestHomogeneous:
    """Test homogeneous points."""

    def test_new_has_unit_weight(self) -> None:
        """Test lifting with weight 1."""
        point = Homogeneous.new(3.0)
        assert point.rational == 3.0  # noqa: PLR2004
        assert point.weight == 1.0
        assert point.project() == 3.0  # noqa: PLR2004

    def test_weighted_round_trip(self) -> None:
        """Test that projecting undoes the weighting."""
        point = Homogeneous.weighted(np.array([1.0, -2.0]), 4.0)
        np.testing.assert_array_equal(point.rational, [4.0, -8.0])
        np.testing.assert_array_equal(point.project(), [1.0, -2.0])

    def test_weighted_rejects_zero(self) -> None:
        """Test that the checked constructor refuses a zero weight."""
        with pytest.raises(ValueError, match="non-zero"):
            Homogeneous.weighted(1.0, 0.0)

    def test_weighted_unchecked_accepts_zero(self) -> None:
        """Test that the unchecked constructor gives a point at infinity."""
        point = Homogeneous.weighted_unchecked(2.0, 0.0)
        assert point.is_infinity

    def test_infinity(self) -> None:
        """Test that a direction keeps its value and cannot be projected."""
        point = Homogeneous.infinity(np.array([0.0, 1.0]))
        assert point.is_infinity
        np.testing.assert_array_equal(point.rational, [0.0, 1.0])
        with pytest.raises(ValueError, match="infinity"):
            point.project()

    def test_affine_combination(self) -> None:
        """Test that blending acts on both parts."""
        a = Homogeneous.weighted(1.0, 1.0)
        b = Homogeneous.weighted(2.0, 2.0)
        blended = a * 0.5 + 0.5 * b
        assert blended == Homogeneous(2.5, 1.5)
        assert blended.project() == pytest.approx(5.0 / 3.0)

    def test_add_rejects_other_types(self) -> None:
        """Test that plain values are not silently added."""
        with pytest.raises(TypeError):
            Homogeneous.new(1.0) + 1.0  # type: ignore[operator]

    def test_equality_with_vectors(self) -> None:
        """Test element-wise equality for array elements."""
        assert Homogeneous(np.array([1.0, 2.0]), 1.0) == Homogeneous(np.array([1.0, 2.0]), 1.0)
        assert Homogeneous(np.array([1.0, 2.0]), 1.0) != Homogeneous(np.array([1.0, 3.0]), 1.0)
        assert Homogeneous(1.0, 1.0) != Homogeneous(1.0, 2.0)


class TestWeights:
    """Test the lifting view over weighted elements."""

    def test_lifts_pairs_on_access(self) -> None:
        """Test that pairs are converted when read."""
        weights = Weights([(1.0, 1.0), (2.0, 2.0)])
        assert len(weights) == 2  # noqa: PLR2004
        assert weights[1] == Homogeneous(4.0, 2.0)
        assert weights[-1] == Homogeneous(4.0, 2.0)

    def test_zero_weight_pair_is_scaled(self) -> None:
        """Test that a pair with weight zero is lifted to `(0, 0)`, not an error."""
        weights = Weights([(1.0, 1.0), (3.0, 0.0)])
        assert weights[1] == Homogeneous(0.0, 0.0)
        assert weights[1].is_infinity

    def test_zero_weight_vector_pair_is_scaled(self) -> None:
        """Test that a vector element with weight zero is lifted to the zero vector."""
        lifted = Weights([(np.array([3.0, -1.0]), 0.0)])[0]
        np.testing.assert_array_equal(lifted.rational, [0.0, 0.0])
        assert lifted.weight == 0.0

    def test_accepts_homogeneous_items(self) -> None:
        """Test that already lifted items pass through."""
        point = Homogeneous.infinity(1.0)
        assert Weights([point])[0] is point

    def test_empty_raises(self) -> None:
        """Test that an empty sequence is rejected."""
        with pytest.raises(EmptyGeneratorError):
            Weights([])

    def test_invalid_item_raises(self) -> None:
        """Test that items which are neither pairs nor homogeneous fail on access."""
        weights = Weights([1.0])
        with pytest.raises(TypeError, match="pairs"):
            weights[0]


def test_stack() -> None:
    """Test pairing elements with weights."""
    assert stack([1.0, 2.0], [1.0, 0.5]) == [(1.0, 1.0), (2.0, 0.5)]
    with pytest.raises(ValueError):
        stack([1.0, 2.0], [1.0])
