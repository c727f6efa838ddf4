"""
The registry module maps names to parent range types, so that callers and the config can
select a representation with a string such as ``"one_to"`` instead of importing its class.

Range types register themselves when their module is imported, for example::

    register_range_type("unit", UnitRange)
"""

from __future__ import annotations

import logging
from typing import Any

from offsetranges.abc.range import AbstractUnitRange

__all__ = [
    "get_range_type",
    "list_range_types",
    "register_range_type",
]

logger = logging.getLogger(__name__)

__range_type_registry: dict[str, type[AbstractUnitRange]] = {}


def _check_range_type(cls: Any) -> type[AbstractUnitRange]:
    if not (isinstance(cls, type) and issubclass(cls, AbstractUnitRange)):
        raise TypeError(f"Expected a subclass of AbstractUnitRange. Got {cls!r}.")
    return cls


def register_range_type(name: str, cls: type[AbstractUnitRange]) -> None:
    __range_type_registry[name] = _check_range_type(cls)
    logger.debug("Registered range type %r as %s", name, cls.__qualname__)


def get_range_type(key: str | type[AbstractUnitRange]) -> type[AbstractUnitRange]:
    """
    Resolve ``key``, either a registered name or a range class, to a range class.
    """
    if isinstance(key, str):
        if key not in __range_type_registry:
            raise KeyError(
                f"Range type {key!r} not found in registered range types: "
                f"{list_range_types()}"
            )
        return __range_type_registry[key]
    return _check_range_type(key)


def list_range_types() -> list[str]:
    return sorted(__range_type_registry)
