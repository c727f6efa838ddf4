"""
Offset coercion and conversion of unit ranges.

``offset_coerce`` rebuilds a range as a given parent range type while preserving its values.
Some types cannot represent every starting value (``OneTo`` always starts at 1), so the
coercion also returns the residual offset that must be added back to recover the values.

``convert_range`` preserves both the values and the indices of its input, and raises when
the target type cannot do that.

Support for a new parent range type is added with one ``register_offset_coercion`` rule.
Types without a rule fall back to ``convert_range`` with a residual offset of 0.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, TypeAlias

import numpy as np

from offsetranges.abc.range import AbstractUnitRange
from offsetranges.core.common import parse_dtype
from offsetranges.core.ranges import OneTo, UnitRange, as_unit_range
from offsetranges.errors import ArgumentError, InexactError, UnsupportedCoercionError

__all__ = [
    "congruent",
    "convert_range",
    "offset_coerce",
    "register_offset_coercion",
]

logger = logging.getLogger(__name__)

OffsetCoercion: TypeAlias = Callable[
    [type[AbstractUnitRange], AbstractUnitRange, np.dtype[Any]], tuple[AbstractUnitRange, int]
]

__offset_coercions: dict[type[AbstractUnitRange], OffsetCoercion] = {}


def register_offset_coercion(kind: type[AbstractUnitRange]) -> Callable[[OffsetCoercion], OffsetCoercion]:
    """
    Register the decorated function as the offset coercion rule for ``kind`` and its
    subclasses.

    The rule is called as ``rule(kind, r, dtype)`` and must return ``(coerced, residual)``
    where ``coerced`` is an instance of ``kind`` and ``coerced[i] + residual`` are the values
    of ``r``.
    """

    def decorator(func: OffsetCoercion) -> OffsetCoercion:
        __offset_coercions[kind] = func
        logger.debug("Registered offset coercion %s for %s", func.__qualname__, kind.__qualname__)
        return func

    return decorator


def _get_offset_coercion(kind: type[AbstractUnitRange]) -> OffsetCoercion | None:
    for cls in kind.__mro__:
        if cls in __offset_coercions:
            return __offset_coercions[cls]
    return None


def _check_kind(kind: Any, r: Any) -> type[AbstractUnitRange]:
    if not (isinstance(kind, type) and issubclass(kind, AbstractUnitRange)):
        raise UnsupportedCoercionError(r, getattr(kind, "__name__", repr(kind)))
    return kind


def offset_coerce(
    kind: type[AbstractUnitRange], r: Any, dtype: Any = None
) -> tuple[AbstractUnitRange, int]:
    """
    Coerce ``r`` into the parent range type ``kind``, preserving its values.

    Parameters
    ----------
    kind : type[AbstractUnitRange]
        The parent range type of the result.
    r : AbstractUnitRange or range
        The range to coerce.
    dtype : np.dtype-like, optional
        The element type of the result. Defaults to the element type of ``r``.

    Returns
    -------
    tuple[AbstractUnitRange, int]
        The coerced range and the residual offset to add to its values.
    """
    kind = _check_kind(kind, r)
    r = as_unit_range(r)
    dtype_parsed = r.dtype if dtype is None else parse_dtype(dtype)
    rule = _get_offset_coercion(kind)
    if rule is not None:
        return rule(kind, r, dtype_parsed)

    logger.debug(
        "No offset coercion registered for %s, falling back to conversion", kind.__qualname__
    )
    try:
        return convert_range(kind, r, dtype_parsed), 0
    except (ArgumentError, InexactError, TypeError) as e:
        raise UnsupportedCoercionError(r, kind.__qualname__) from e


@register_offset_coercion(UnitRange)
def _coerce_unit_range(
    kind: type[AbstractUnitRange], r: AbstractUnitRange, dtype: np.dtype[Any]
) -> tuple[AbstractUnitRange, int]:
    if type(r) is kind and r.dtype == dtype:
        return r, 0
    return kind(r.first, r.last, dtype=dtype), 0


@register_offset_coercion(OneTo)
def _coerce_one_to(
    kind: type[AbstractUnitRange], r: AbstractUnitRange, dtype: np.dtype[Any]
) -> tuple[AbstractUnitRange, int]:
    if isinstance(r, OneTo):
        return kind.from_range(r, dtype), 0
    shift = r.first - 1
    return kind(r.last - shift, dtype=dtype), shift


def convert_range(kind: type[AbstractUnitRange], r: Any, dtype: Any = None) -> AbstractUnitRange:
    """
    Convert ``r`` into the range type ``kind``, preserving both its values and its indices.

    Raises
    ------
    ArgumentError
        If ``kind`` cannot hold the values of ``r`` at the same indices.
    """
    if not (isinstance(kind, type) and issubclass(kind, AbstractUnitRange)):
        raise TypeError(f"Expected a subclass of AbstractUnitRange. Got {kind!r}.")
    return kind.from_range(r, dtype)


def congruent(a: Any, b: Any) -> bool:
    """Return True if ``a`` and ``b`` hold the same values at the same indices."""
    a = as_unit_range(a)
    b = as_unit_range(b)
    return a == b and a.axes[0] == b.axes[0]
