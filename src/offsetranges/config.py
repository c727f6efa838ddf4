"""
The config module holds the runtime configuration of offsetranges and is based on the Donfig
python library.

Example:
    Ranges built from plain Python integers use the ``default_dtype`` element type. It can be
    changed programmatically,

    ```python
    from offsetranges.config import config

    config.set({"default_dtype": "int32"})
    ```

    or with the environment variable ``OFFSETRANGES_DEFAULT_DTYPE=int32``. The double
    underscore ``__`` is used to indicate nested access.

For more information, see the Donfig documentation at https://github.com/pytroll/donfig.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np
from donfig import Config as DConfig

if TYPE_CHECKING:
    from donfig.config_obj import ConfigSet


class BadConfigError(ValueError):
    pass


class Config(DConfig):  # type: ignore[misc]
    """The Config will collect configuration from config files and environment variables

    Example environment variables:
    Grabs environment variables of the form "OFFSETRANGES_FOO__BAR_BAZ=123" and
    turns these into config variables of the form ``{"foo": {"bar-baz": 123}}``
    It transforms the key and value in the following way:

    -  Lower-cases the key text
    -  Treats ``__`` (double-underscore) as nested access
    -  Calls ``ast.literal_eval`` on the value

    """

    def reset(self) -> None:
        self.clear()
        self.refresh()

    def use_parent_type(self, name: str | None) -> ConfigSet:
        """
        Make ``IdOffsetRange.coerce`` use the parent range type registered under ``name``
        when the caller does not pass one.
        """
        return self.set({"default_parent_type": name})


# The default configuration for offsetranges
config = Config(
    "offsetranges",
    defaults=[
        {
            "default_dtype": "int64",
            "default_parent_type": None,
        }
    ],
)


def parse_default_dtype(data: Any) -> np.dtype[Any]:
    try:
        dtype = np.dtype(data)
    except TypeError as e:
        raise BadConfigError(f"default_dtype must be a numpy integer dtype. Got {data!r}.") from e
    if dtype.kind not in "iu":
        raise BadConfigError(f"default_dtype must be a numpy integer dtype. Got {data!r}.")
    return dtype
