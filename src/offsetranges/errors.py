from __future__ import annotations

from typing import Any

__all__ = [
    "ArgumentError",
    "BaseRangeError",
    "BoundsCheckError",
    "FirstElementError",
    "FirstIndexError",
    "InexactError",
    "NonUnitStepError",
    "UnsupportedCoercionError",
]


class BaseRangeError(ValueError):
    """
    Base error which all offsetranges value errors are sub-classed from.

    The message is built by formatting the ``_msg`` class template with the
    constructor arguments.
    """

    _msg: str = "{}"

    def __init__(self, *args: object) -> None:
        super().__init__(self._msg.format(*args))


class ArgumentError(BaseRangeError):
    """
    Raised when a conversion cannot preserve both the values and the indices
    of its input.
    """


class FirstElementError(ArgumentError):
    """Raised when a range that must start at 1 is given a different first value."""

    _msg = "first element must be 1, got {}"


class FirstIndexError(ArgumentError):
    """Raised when a conversion would move the first index away from 1."""

    _msg = "first index must be 1, got {}"


class InexactError(BaseRangeError):
    """Raised when a value cannot be represented by the requested element type."""

    _msg = "cannot represent {!r} as {}"


class NonUnitStepError(BaseRangeError):
    _msg = "only ranges with step 1 are supported, got step {}"


class UnsupportedCoercionError(BaseRangeError, TypeError):
    """
    Raised when no offset coercion rule exists for the requested parent range
    type and direct conversion into that type fails as well.
    """

    _msg = "cannot coerce {!r} into a parent range of type {}"


class BoundsCheckError(IndexError):
    """
    Raised when an index lies outside the index space of a range.

    Attributes
    ----------
    collection
        The range that was indexed.
    index
        The offending position, or range of positions.
    """

    def __init__(self, collection: Any, index: Any) -> None:
        self.collection = collection
        self.index = index
        super().__init__(
            f"attempt to access {len(collection)}-element {collection!r} at index [{index}]"
        )
