from __future__ import annotations

import numbers
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any

import numpy as np

from offsetranges.core.common import is_integer, is_integer_array, normalize_index
from offsetranges.errors import BoundsCheckError, NonUnitStepError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from typing import Self

    import numpy.typing as npt

__all__ = ["AbstractUnitRange", "selector_bounds"]


def selector_bounds(key: Any) -> tuple[int, int]:
    """Return the inclusive ``(first, last)`` positions of a unit range selector."""
    if isinstance(key, AbstractUnitRange):
        return key.first, key.last
    if isinstance(key, range):
        if key.step != 1:
            raise NonUnitStepError(key.step)
        return key.start, key.stop - 1
    if isinstance(key, slice):
        raise TypeError(
            "slices are not supported because indices are not 0-based; "
            "index with a unit range such as UnitRange(first, last) instead"
        )
    raise TypeError(f"unsupported index type {type(key).__name__}")


class AbstractUnitRange(ABC):
    """
    An inclusive, unit-stride range of integers.

    A range has values (``first`` to ``last``) and an index space, the positions
    that may be passed to ``__getitem__``, described by ``axes``. Indices are taken
    literally: there is no wraparound of negative positions.
    """

    @property
    @abstractmethod
    def first(self) -> int: ...

    @property
    @abstractmethod
    def last(self) -> int: ...

    dtype: np.dtype[Any]

    @property
    @abstractmethod
    def axes(self) -> tuple[AbstractUnitRange]:
        """A 1-tuple holding a range whose values are the valid indices of this range."""
        ...

    @classmethod
    @abstractmethod
    def from_range(cls, r: Any, dtype: Any = None) -> Self:
        """
        Convert ``r`` into this range type, preserving both its values and its indices.
        """
        ...

    @abstractmethod
    def astype(self, dtype: Any) -> Self: ...

    @property
    def firstindex(self) -> int:
        return self.axes[0].first

    @property
    def lastindex(self) -> int:
        return self.axes[0].last

    def __len__(self) -> int:
        return max(0, self.last - self.first + 1)

    def __iter__(self) -> Iterator[int]:
        return iter(range(self.first, self.last + 1))

    def __reversed__(self) -> Iterator[int]:
        return reversed(range(self.first, self.last + 1))

    def __contains__(self, value: object) -> bool:
        if is_integer(value):
            return self.first <= value <= self.last
        if (
            isinstance(value, numbers.Real)
            and not isinstance(value, (bool, np.bool_))
            and float(value).is_integer()
        ):
            return self.first <= value <= self.last
        return False

    def checkindex(self, key: Any) -> bool:
        """
        Return True when ``key`` is a valid index, or selection of indices, into this range.

        This never indexes the range, and gives the same answer as trying ``self[key]``.
        """
        if is_integer(key):
            return self.firstindex <= int(key) <= self.lastindex
        if is_integer_array(key):
            key = normalize_index(key)
            return bool(np.all((key >= self.firstindex) & (key <= self.lastindex)))
        first, last = selector_bounds(key)
        if last < first:
            return True
        return self.checkindex(first) and self.checkindex(last)

    def __getitem__(self, key: Any) -> Any:
        if is_integer(key):
            key = int(key)
            if not self.checkindex(key):
                raise BoundsCheckError(self, key)
            return self.first + (key - self.firstindex)
        if is_integer_array(key):
            key = normalize_index(key)
            if not self.checkindex(key):
                raise BoundsCheckError(self, _first_out_of_bounds(self, key))
            return np.asarray(key - self.firstindex + self.first, dtype=self.dtype)
        first, last = selector_bounds(key)
        if not self.checkindex(key):
            raise BoundsCheckError(self, f"{first}:{last}")
        # avoid circular import
        from offsetranges.core.ranges import UnitRange

        start = self.first + (first - self.firstindex)
        return UnitRange(start, start + (last - first), dtype=self.dtype)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, AbstractUnitRange):
            return NotImplemented
        if len(self) == 0 or len(other) == 0:
            return len(self) == len(other)
        return self.first == other.first and self.last == other.last

    def __hash__(self) -> int:
        if len(self) == 0:
            return hash((0,))
        return hash((len(self), self.first))

    def __array__(self, dtype: Any = None, copy: bool | None = None) -> npt.NDArray[Any]:
        return np.arange(self.first, self.last + 1, dtype=self.dtype if dtype is None else dtype)

    def __str__(self) -> str:
        return f"{self.first}:{self.last}"


def _first_out_of_bounds(r: AbstractUnitRange, key: npt.NDArray[Any]) -> int:
    bad = (key < r.firstindex) | (key > r.lastindex)
    return int(key[bad].flat[0])
