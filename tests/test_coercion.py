from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

import numpy as np
import pytest

from offsetranges import (
    AbstractUnitRange,
    IdOffsetRange,
    OneTo,
    UnitRange,
    config,
    congruent,
    convert_range,
    offset_coerce,
    register_offset_coercion,
)
from offsetranges.core.common import parse_dtype, parse_int
from offsetranges.errors import (
    ArgumentError,
    BoundsCheckError,
    FirstElementError,
    FirstIndexError,
    InexactError,
    UnsupportedCoercionError,
)


@dataclass(frozen=True, eq=False)
class TenTo(AbstractUnitRange):
    """A range that always starts at 10, used to exercise the coercion fallback."""

    n: int
    dtype: np.dtype[Any]

    def __init__(self, n: int, dtype: Any = None) -> None:
        dtype_parsed = parse_dtype(dtype)
        object.__setattr__(self, "n", max(0, parse_int(n, dtype_parsed)))
        object.__setattr__(self, "dtype", dtype_parsed)

    @property
    def first(self) -> int:
        return 10

    @property
    def last(self) -> int:
        return 9 + self.n

    @property
    def axes(self) -> tuple[OneTo]:
        return (OneTo(self.n, dtype=self.dtype),)

    @classmethod
    def from_range(cls, r: Any, dtype: Any = None) -> TenTo:
        if r.first != 10:
            raise ArgumentError(f"first element must be 10, got {r.first}")
        return cls(len(r), dtype=r.dtype if dtype is None else dtype)

    def astype(self, dtype: Any) -> TenTo:
        return TenTo(self.n, dtype=dtype)


class ShiftedTenTo(TenTo):
    pass


# offset_coerce


def test_offset_coerce_unit_range() -> None:
    rc, residual = offset_coerce(UnitRange, OneTo(3))
    assert isinstance(rc, UnitRange)
    assert (rc.first, rc.last, residual) == (1, 3, 0)
    r = UnitRange(3, 4)
    assert offset_coerce(UnitRange, r) == (r, 0)
    assert offset_coerce(UnitRange, r)[0] is r
    rc, residual = offset_coerce(UnitRange, r, dtype="int16")
    assert rc.dtype == np.dtype("int16")


@pytest.mark.parametrize(
    ("r", "expected_last", "expected_residual"),
    [
        (UnitRange(3, 4), 2, 2),
        (UnitRange(1, 4), 4, 0),
        (UnitRange(-5, -3), 3, -6),
        (UnitRange(7, 6), 0, 6),
        (range(11, 14), 3, 10),
    ],
)
def test_offset_coerce_one_to(r: Any, expected_last: int, expected_residual: int) -> None:
    rc, residual = offset_coerce(OneTo, r)
    assert isinstance(rc, OneTo)
    assert rc.last == expected_last
    assert residual == expected_residual
    assert [v + residual for v in rc] == list(r)


def test_offset_coerce_one_to_from_one_to() -> None:
    r = OneTo(5)
    assert offset_coerce(OneTo, r) == (r, 0)
    assert offset_coerce(OneTo, r)[0] is r
    rc, residual = offset_coerce(OneTo, r, dtype="int32")
    assert (rc.dtype, residual) == (np.dtype("int32"), 0)


def test_offset_coerce_one_to_from_offset_range() -> None:
    r = IdOffsetRange(UnitRange(11, 13), -2)
    rc, residual = offset_coerce(OneTo, r)
    assert rc == OneTo(3)
    assert residual == 8
    assert [v + residual for v in rc] == list(r)


def test_offset_coerce_fallback_converts() -> None:
    rc, residual = offset_coerce(TenTo, UnitRange(10, 12))
    assert isinstance(rc, TenTo)
    assert (rc.first, rc.last, residual) == (10, 12, 0)


def test_offset_coerce_fallback_failure(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.DEBUG, logger="offsetranges.core.coercion"):
        with pytest.raises(UnsupportedCoercionError, match="TenTo") as e:
            offset_coerce(TenTo, UnitRange(3, 4))
    assert isinstance(e.value.__cause__, ArgumentError)
    assert isinstance(e.value, TypeError)
    assert "falling back to conversion" in caplog.text


def test_offset_coerce_rejects_non_range_kinds() -> None:
    with pytest.raises(UnsupportedCoercionError):
        offset_coerce(list, UnitRange(1, 3))  # type: ignore[arg-type]


def test_register_offset_coercion() -> None:
    @register_offset_coercion(ShiftedTenTo)
    def _coerce(kind: type[AbstractUnitRange], r: AbstractUnitRange, dtype: Any) -> Any:
        shift = r.first - 10
        return kind(len(r), dtype=dtype), shift

    rc, residual = offset_coerce(ShiftedTenTo, UnitRange(3, 4))
    assert isinstance(rc, ShiftedTenTo)
    assert residual == -7
    r = IdOffsetRange.coerce(UnitRange(3, 4), parent_type=ShiftedTenTo)
    assert list(r) == [3, 4]
    assert (r.firstindex, r.lastindex) == (-6, -5)


# IdOffsetRange.coerce


@pytest.mark.parametrize("parent_type", [UnitRange, OneTo, "unit", "one_to"])
@pytest.mark.parametrize(("a", "b"), [(3, 4), (-2, 5), (1, 8), (6, 5)])
@pytest.mark.parametrize("offset", [-3, 0, 4])
def test_coerce_preserves_values(parent_type: Any, a: int, b: int, offset: int) -> None:
    r = IdOffsetRange.coerce(UnitRange(a, b), offset, parent_type=parent_type)
    assert len(r) == max(0, b - a + 1)
    assert list(r) == list(range(a + offset, b + offset + 1))
    if b >= a:
        assert (r.first, r.last) == (a + offset, b + offset)


def test_coerce_may_change_indices() -> None:
    r = IdOffsetRange.coerce(UnitRange(3, 4), parent_type=UnitRange)
    assert (r[1], r[2]) == (3, 4)
    r = IdOffsetRange.coerce(UnitRange(3, 4), parent_type=OneTo)
    assert r.parent == OneTo(2)
    assert r.offset == 2
    assert (r[3], r[4]) == (3, 4)
    with pytest.raises(BoundsCheckError):
        r[1]
    # the index space now coincides with the values
    assert r.axes == (r,)


def test_coerce_keeps_representation_by_default() -> None:
    r = IdOffsetRange.coerce(UnitRange(3, 4), 2)
    assert r.parent == UnitRange(3, 4)
    assert isinstance(r.parent, UnitRange)
    assert r.offset == 2
    assert IdOffsetRange.coerce(OneTo(3)).parent == OneTo(3)
    assert IdOffsetRange.coerce(range(2, 5), dtype="int32").dtype == np.dtype("int32")


def test_coerce_identity() -> None:
    r = IdOffsetRange(OneTo(3), 5)
    assert IdOffsetRange.coerce(r) is r
    assert IdOffsetRange.coerce(r, parent_type=OneTo) is r
    assert IdOffsetRange.coerce(r, dtype=r.dtype) is r


def test_coerce_zero_offset_one_based_range() -> None:
    r = IdOffsetRange.coerce(OneTo(4), 0, parent_type=OneTo)
    assert r.parent == OneTo(4)
    assert type(r.parent) is OneTo
    assert r.offset == 0
    r = IdOffsetRange.coerce(UnitRange(1, 4), 0, parent_type=OneTo)
    assert r.parent == OneTo(4)
    assert r.offset == 0


def test_coerce_from_offset_range() -> None:
    r = IdOffsetRange(UnitRange(11, 13), -2)
    coerced = IdOffsetRange.coerce(r, parent_type=OneTo)
    assert coerced.parent == OneTo(3)
    assert coerced.offset == 8
    assert list(coerced) == list(r)
    # extra offsets compose with the stored offset
    shifted = IdOffsetRange.coerce(r, 5)
    assert shifted.parent is r.parent
    assert shifted.offset == 3
    assert list(shifted) == [v + 5 for v in r]
    retyped = IdOffsetRange.coerce(r, dtype="int32")
    assert retyped.dtype == np.dtype("int32")
    assert retyped.offset == -2


def test_coerce_into_offset_range_parent() -> None:
    r = IdOffsetRange.coerce(UnitRange(3, 5), 1, parent_type="id_offset")
    assert isinstance(r.parent, IdOffsetRange)
    assert list(r) == [4, 5, 6]


def test_coerce_round_trip() -> None:
    for parent_type in (UnitRange, OneTo):
        original = UnitRange(-4, 2)
        r = IdOffsetRange.coerce(original, 7, parent_type=parent_type)
        back = IdOffsetRange.coerce(r, -7, parent_type=parent_type)
        assert back == original


def test_coerce_overflow() -> None:
    with pytest.raises(InexactError):
        IdOffsetRange.coerce(UnitRange(1, 200), dtype="int8")


def test_coerce_default_parent_type_from_config() -> None:
    with config.set({"default_parent_type": "one_to"}):
        r = IdOffsetRange.coerce(UnitRange(3, 4))
    assert isinstance(r.parent, OneTo)
    assert r.offset == 2
    with config.use_parent_type("unit"):
        r = IdOffsetRange.coerce(OneTo(3), 1)
    assert type(r.parent) is UnitRange
    r = IdOffsetRange.coerce(OneTo(3), 1)
    assert type(r.parent) is OneTo


def test_coerce_unknown_parent_type() -> None:
    with pytest.raises(KeyError, match="not found"):
        IdOffsetRange.coerce(UnitRange(1, 3), parent_type="strided")


# conversion


def test_convert_to_unconstrained_parent() -> None:
    r = IdOffsetRange.convert(UnitRange(3, 4), parent_type=UnitRange)
    assert r.offset == 0
    assert r.parent == UnitRange(3, 4)
    assert (r[1], r[2]) == (3, 4)
    assert r == UnitRange(3, 4)
    assert congruent(r, UnitRange(3, 4))
    assert IdOffsetRange.convert(OneTo(3)).parent == UnitRange(1, 3)


def test_convert_to_one_to_parent() -> None:
    with pytest.raises(FirstElementError, match="first element must be 1, got 3"):
        IdOffsetRange.convert(UnitRange(3, 4), parent_type=OneTo)
    r = IdOffsetRange.convert(UnitRange(1, 4), parent_type=OneTo)
    assert r.first == 1
    assert isinstance(r.parent, OneTo)
    assert congruent(r, UnitRange(1, 4))


def test_convert_between_offset_ranges() -> None:
    r = IdOffsetRange(UnitRange(1, 3), 5)
    converted = IdOffsetRange.convert(r, parent_type=OneTo)
    assert isinstance(converted.parent, OneTo)
    assert converted.offset == 5
    assert congruent(converted, r)
    assert IdOffsetRange.convert(r) is r
    with pytest.raises(ArgumentError, match="got 11"):
        IdOffsetRange.convert(IdOffsetRange(UnitRange(11, 13), -2), parent_type=OneTo)


def test_convert_range() -> None:
    assert convert_range(UnitRange, OneTo(3)) == UnitRange(1, 3)
    r = convert_range(IdOffsetRange, UnitRange(3, 4))
    assert isinstance(r, IdOffsetRange)
    assert congruent(r, UnitRange(3, 4))
    # a plain unit range cannot hold values at shifted indices
    with pytest.raises(FirstIndexError, match="first index must be 1, got -1"):
        convert_range(UnitRange, IdOffsetRange(OneTo(3), -2))
    with pytest.raises(TypeError):
        convert_range(int, OneTo(3))  # type: ignore[arg-type]


def test_congruent() -> None:
    a = IdOffsetRange(UnitRange(11, 13), -2)
    b = IdOffsetRange(OneTo(3), 8)
    # same values, different indices
    assert a == b
    assert not congruent(a, b)
    assert congruent(b, IdOffsetRange.coerce(UnitRange(9, 11), parent_type=OneTo))
    assert congruent(UnitRange(5, 4), IdOffsetRange(OneTo(0), 7))
