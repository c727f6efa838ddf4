from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from offsetranges.abc.range import AbstractUnitRange
from offsetranges.core.common import parse_dtype, parse_int
from offsetranges.errors import FirstElementError, FirstIndexError, NonUnitStepError
from offsetranges.registry import register_range_type

if TYPE_CHECKING:
    import numpy as np

__all__ = ["OneTo", "UnitRange", "as_unit_range"]


def as_unit_range(obj: Any, dtype: Any = None) -> AbstractUnitRange:
    """
    Normalize ``obj`` to an ``AbstractUnitRange``.

    A builtin ``range`` with step 1 is read as the values it produces, so
    ``range(11, 14)`` becomes ``UnitRange(11, 13)``.
    """
    if isinstance(obj, AbstractUnitRange):
        return obj if dtype is None else obj.astype(dtype)
    if isinstance(obj, range):
        if obj.step != 1:
            raise NonUnitStepError(obj.step)
        return UnitRange(obj.start, obj.stop - 1, dtype=dtype)
    raise TypeError(f"Expected a unit range. Got {obj!r} of type {type(obj).__name__}.")


@dataclass(frozen=True, eq=False)
class UnitRange(AbstractUnitRange):
    """
    The inclusive range ``start:stop``, indexed from 1.

    An empty range keeps its start and has ``stop == start - 1``.
    """

    start: int
    stop: int
    dtype: np.dtype[Any]

    def __init__(self, start: int, stop: int, dtype: Any = None) -> None:
        dtype_parsed = parse_dtype(dtype)
        start = parse_int(start, dtype_parsed)
        stop = parse_int(stop, dtype_parsed)
        object.__setattr__(self, "start", start)
        object.__setattr__(self, "stop", max(stop, start - 1))
        object.__setattr__(self, "dtype", dtype_parsed)

    @property
    def first(self) -> int:
        return self.start

    @property
    def last(self) -> int:
        return self.stop

    @property
    def axes(self) -> tuple[OneTo]:
        return (OneTo(len(self), dtype=self.dtype),)

    @classmethod
    def from_range(cls, r: Any, dtype: Any = None) -> UnitRange:
        r = as_unit_range(r)
        dtype_parsed = r.dtype if dtype is None else parse_dtype(dtype)
        if type(r) is cls and r.dtype == dtype_parsed:
            return r
        if r.firstindex != 1:
            raise FirstIndexError(r.firstindex)
        return cls(r.first, r.last, dtype=dtype_parsed)

    def astype(self, dtype: Any) -> UnitRange:
        dtype_parsed = parse_dtype(dtype)
        if dtype_parsed == self.dtype:
            return self
        return UnitRange(self.start, self.stop, dtype=dtype_parsed)

    def __repr__(self) -> str:
        return f"UnitRange({self.start}, {self.stop})"


@dataclass(frozen=True, eq=False)
class OneTo(AbstractUnitRange):
    """The inclusive range ``1:n``. Its index space is the range itself."""

    n: int
    dtype: np.dtype[Any]

    def __init__(self, n: int, dtype: Any = None) -> None:
        dtype_parsed = parse_dtype(dtype)
        object.__setattr__(self, "n", max(0, parse_int(n, dtype_parsed)))
        object.__setattr__(self, "dtype", dtype_parsed)

    @property
    def first(self) -> int:
        return 1

    @property
    def last(self) -> int:
        return self.n

    @property
    def axes(self) -> tuple[OneTo]:
        return (self,)

    @property
    def firstindex(self) -> int:
        return 1

    @property
    def lastindex(self) -> int:
        return self.n

    @classmethod
    def from_range(cls, r: Any, dtype: Any = None) -> OneTo:
        r = as_unit_range(r)
        dtype_parsed = r.dtype if dtype is None else parse_dtype(dtype)
        if type(r) is cls and r.dtype == dtype_parsed:
            return r
        if r.first != 1:
            raise FirstElementError(r.first)
        if r.firstindex != 1:
            raise FirstIndexError(r.firstindex)
        return cls(len(r), dtype=dtype_parsed)

    def astype(self, dtype: Any) -> OneTo:
        dtype_parsed = parse_dtype(dtype)
        if dtype_parsed == self.dtype:
            return self
        return OneTo(self.n, dtype=dtype_parsed)

    def __repr__(self) -> str:
        return f"OneTo({self.n})"


register_range_type("unit", UnitRange)
register_range_type("one_to", OneTo)
