from offsetranges._version import version as __version__
from offsetranges.abc.range import AbstractUnitRange
from offsetranges.config import config
from offsetranges.core.coercion import (
    congruent,
    convert_range,
    offset_coerce,
    register_offset_coercion,
)
from offsetranges.core.offset_range import IdOffsetRange
from offsetranges.core.ranges import OneTo, UnitRange, as_unit_range
from offsetranges.registry import get_range_type, list_range_types, register_range_type


def print_debug_info() -> None:
    """
    Print version info for use in bug reports.
    """
    import platform
    from importlib.metadata import version

    def print_packages(packages: list[str]) -> None:
        not_installed = []
        for package in packages:
            try:
                print(f"{package}: {version(package)}")
            except ModuleNotFoundError:
                not_installed.append(package)
        if not_installed:
            print("\n**Not Installed:**")
            for package in not_installed:
                print(package)

    required = [
        "numpy",
        "donfig",
    ]
    optional = [
        "pytest",
        "hypothesis",
    ]

    print(f"platform: {platform.platform()}")
    print(f"python: {platform.python_version()}")
    print(f"offsetranges: {__version__}\n")
    print("**Required dependencies:**")
    print_packages(required)
    print("\n**Optional dependencies:**")
    print_packages(optional)


__all__ = [
    "AbstractUnitRange",
    "IdOffsetRange",
    "OneTo",
    "UnitRange",
    "__version__",
    "as_unit_range",
    "config",
    "congruent",
    "convert_range",
    "get_range_type",
    "list_range_types",
    "offset_coerce",
    "print_debug_info",
    "register_offset_coercion",
    "register_range_type",
]
