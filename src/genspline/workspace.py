"""Scratch space providers used while evaluating B-splines.

Every evaluation asks its workspace for a buffer of `degree + 1` slots and
blends control elements in it. A buffer is never kept between calls, so a
curve can be evaluated from several threads at once.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from .errors import TooSmallWorkspaceError


class Workspace(ABC):
    """Interface for workspace providers.

    Attributes:
        fixed (bool): Whether the capacity is a hard limit checked when the
            curve is constructed.
    """

    fixed: bool = False

    @property
    @abstractmethod
    def capacity(self) -> int:
        """Number of slots the provider was configured with."""

    @abstractmethod
    def provide(self, length: int) -> list[Any]:
        """Return a fresh buffer with at least `length` slots.

        The contents of the buffer are unspecified; callers write every slot
        before reading it.

        Args:
            length (int): Number of slots needed.

        Returns:
            list[Any]: The buffer.
        """

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.capacity})"


class ConstWorkspace(Workspace):
    """Workspace with a capacity fixed when it is created.

    A curve using it can only be built if `capacity >= degree + 1`.
    """

    fixed = True

    def __init__(self, capacity: int) -> None:
        """Initialize the workspace.

        Args:
            capacity (int): Number of slots. Must be non-negative.

        Raises:
            ValueError: If `capacity` is negative.
        """
        if capacity < 0:
            raise ValueError("capacity must be non-negative")
        self._capacity = capacity

    @property
    def capacity(self) -> int:
        """Number of slots of every buffer."""
        return self._capacity

    def provide(self, length: int) -> list[Any]:
        """Return a buffer of exactly `capacity` slots.

        Args:
            length (int): Number of slots needed.

        Returns:
            list[Any]: The buffer.

        Raises:
            TooSmallWorkspaceError: If `length` exceeds the capacity.
        """
        if length > self._capacity:
            raise TooSmallWorkspaceError(self._capacity, length)
        return [None] * self._capacity


class DynWorkspace(Workspace):
    """Workspace allocating a new buffer on every call.

    Its length is computed when the curve is built (logical knot count minus
    element count plus 2, that is `degree + 1`). Requests for more slots are
    still served, so no capacity needs to be coordinated up front.
    """

    def __init__(self, length: int) -> None:
        """Initialize the workspace.

        Args:
            length (int): Default buffer length. Must be non-negative.

        Raises:
            ValueError: If `length` is negative.
        """
        if length < 0:
            raise ValueError("length must be non-negative")
        self._length = length

    @property
    def capacity(self) -> int:
        """Default buffer length."""
        return self._length

    def provide(self, length: int) -> list[Any]:
        """Allocate a buffer of `max(length, capacity)` slots.

        Args:
            length (int): Number of slots needed.

        Returns:
            list[Any]: The buffer.
        """
        return [None] * max(length, self._length)
