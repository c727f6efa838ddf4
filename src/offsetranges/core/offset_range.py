from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import numpy as np

from offsetranges.abc.range import AbstractUnitRange, selector_bounds
from offsetranges.config import config
from offsetranges.core.coercion import convert_range, offset_coerce
from offsetranges.core.common import (
    is_integer,
    is_integer_array,
    normalize_index,
    parse_dtype,
    parse_int,
)
from offsetranges.core.ranges import UnitRange, as_unit_range
from offsetranges.registry import get_range_type, register_range_type

if TYPE_CHECKING:
    from collections.abc import Iterator

__all__ = ["IdOffsetRange"]


def _parse_parent_type(data: Any) -> type[AbstractUnitRange] | None:
    if data is None:
        return None
    return get_range_type(data)


@dataclass(frozen=True, eq=False)
class IdOffsetRange(AbstractUnitRange):
    """
    An "identity offset range": the values of ``parent`` shifted by ``offset``, indexed by
    the indices of ``parent`` shifted by the same ``offset``.

    When the parent range is indexed by its own values (``OneTo(n)`` or a ``UnitRange``
    starting at 1), the shifted range is too, so that ``r.axes == (r,)``.

    Parameters
    ----------
    parent : AbstractUnitRange or range
        The range before shifting.
    offset : int
        Added to every value and every index of ``parent``.

    Examples
    --------
    >>> from offsetranges import IdOffsetRange, OneTo, UnitRange
    >>> r = IdOffsetRange(UnitRange(1, 3), -2)
    >>> str(r)
    '-1:1'
    >>> r[-1]
    -1
    >>> r = IdOffsetRange(UnitRange(11, 13), -2)
    >>> str(r), r[-1]
    ('9:11', 9)
    >>> r[3]
    Traceback (most recent call last):
    ...
    offsetranges.errors.BoundsCheckError: attempt to access 3-element UnitRange(11, 13) at index [5]

    The constructor stores its arguments as given. Use ``IdOffsetRange.coerce`` to change the
    parent range type while preserving the values, and ``IdOffsetRange.convert`` to change
    it while preserving both the values and the indices:

    >>> r = IdOffsetRange.coerce(UnitRange(3, 4), parent_type=OneTo)
    >>> r.parent, r.offset, r[3]
    (OneTo(2), 2, 3)
    >>> IdOffsetRange.convert(UnitRange(3, 4), parent_type=OneTo)
    Traceback (most recent call last):
    ...
    offsetranges.errors.FirstElementError: first element must be 1, got 3
    """

    parent: AbstractUnitRange
    offset: int

    def __init__(self, parent: Any, offset: int = 0) -> None:
        parent = as_unit_range(parent)
        offset = parse_int(offset, parent.dtype)
        if len(parent) > 0:
            parse_int(parent.first + offset, parent.dtype)
            parse_int(parent.last + offset, parent.dtype)
        object.__setattr__(self, "parent", parent)
        object.__setattr__(self, "offset", offset)

    @classmethod
    def coerce(
        cls,
        r: Any,
        offset: int = 0,
        *,
        dtype: Any = None,
        parent_type: str | type[AbstractUnitRange] | None = None,
    ) -> IdOffsetRange:
        """
        Build an ``IdOffsetRange`` whose values are those of ``r`` plus ``offset``.

        The indices of the result may differ from those of ``r`` when ``parent_type`` cannot
        represent ``r`` directly: coercing ``UnitRange(3, 4)`` into a ``OneTo`` parent gives
        ``OneTo(2)`` with offset 2, indexed at 3 and 4.

        Parameters
        ----------
        r : AbstractUnitRange or range
            The values to wrap.
        offset : int
            Extra shift applied on top of whatever shift the coercion introduces.
        dtype : np.dtype-like, optional
            Element type of the result. Defaults to the element type of ``r``.
        parent_type : str or type, optional
            Parent range type, as a class or a registered name. Defaults to the
            ``default_parent_type`` config value, and when that is unset the
            representation of ``r`` is kept.
        """
        if parent_type is None:
            parent_type = config.get("default_parent_type")
        kind = _parse_parent_type(parent_type)

        if isinstance(r, IdOffsetRange):
            if kind is None:
                parent = r.parent if dtype is None else r.parent.astype(dtype)
                if parent is r.parent and offset == 0:
                    return r
                return cls(parent, r.offset + offset)
            dtype_parsed = r.dtype if dtype is None else parse_dtype(dtype)
            if type(r.parent) is kind and r.dtype == dtype_parsed and offset == 0:
                return r
            rc, residual = offset_coerce(kind, r.parent, dtype_parsed)
            return cls(rc, r.offset + residual + offset)

        r = as_unit_range(r)
        if kind is None:
            return cls(r if dtype is None else r.astype(dtype), offset)
        rc, residual = offset_coerce(kind, r, dtype)
        return cls(rc, residual + offset)

    @classmethod
    def convert(
        cls,
        r: Any,
        *,
        dtype: Any = None,
        parent_type: str | type[AbstractUnitRange] | None = None,
    ) -> IdOffsetRange:
        """
        Convert ``r`` to an ``IdOffsetRange`` with the same values at the same indices.

        ``parent_type`` defaults to the parent type of ``r`` when it is an ``IdOffsetRange``,
        and to ``UnitRange`` otherwise.

        Raises
        ------
        ArgumentError
            If a ``parent_type`` range cannot hold the values of ``r`` at its indices, for
            example converting ``UnitRange(3, 4)`` into a ``OneTo`` parent.
        """
        kind = _parse_parent_type(parent_type)
        if isinstance(r, IdOffsetRange):
            kind = kind or type(r.parent)
            if type(r.parent) is kind and (dtype is None or parse_dtype(dtype) == r.dtype):
                return r
            return cls(convert_range(kind, r.parent, dtype), r.offset)
        return cls(convert_range(kind or UnitRange, r, dtype), 0)

    @classmethod
    def from_range(cls, r: Any, dtype: Any = None) -> IdOffsetRange:
        return cls.convert(r, dtype=dtype)

    def astype(self, dtype: Any) -> IdOffsetRange:
        parent = self.parent.astype(dtype)
        if parent is self.parent:
            return self
        return IdOffsetRange(parent, self.offset)

    @property
    def dtype(self) -> np.dtype[Any]:
        return self.parent.dtype

    @property
    def first(self) -> int:
        return self.parent.first + self.offset

    @property
    def last(self) -> int:
        return self.parent.last + self.offset

    @property
    def axes(self) -> tuple[IdOffsetRange]:
        return (IdOffsetRange(self.parent.axes[0], self.offset),)

    @property
    def firstindex(self) -> int:
        return self.parent.firstindex + self.offset

    @property
    def lastindex(self) -> int:
        return self.parent.lastindex + self.offset

    def __len__(self) -> int:
        return len(self.parent)

    def __iter__(self) -> Iterator[int]:
        offset = self.offset
        return (value + offset for value in self.parent)

    def __reversed__(self) -> Iterator[int]:
        offset = self.offset
        return (value + offset for value in reversed(self.parent))

    def checkindex(self, key: Any) -> bool:
        if is_integer(key) or is_integer_array(key):
            return self.parent.checkindex(normalize_index(key) - self.offset)
        first, last = selector_bounds(key)
        return self.parent.checkindex(range(first - self.offset, last - self.offset + 1))

    def __getitem__(self, key: Any) -> Any:
        if is_integer(key) or is_integer_array(key):
            return self.parent[normalize_index(key) - self.offset] + self.offset
        first, last = selector_bounds(key)
        values = self.parent[range(first - self.offset, last - self.offset + 1)]
        return UnitRange(values.first + self.offset, values.last + self.offset, dtype=self.dtype)

    def __repr__(self) -> str:
        return f"IdOffsetRange(parent={self.parent!r}, offset={self.offset})"


register_range_type("id_offset", IdOffsetRange)
