"""
ObjPrinter entry points.

    >>> print(print_to_string(person))
    >>> print(print_to_string(person, lambda cfg: cfg.exclude_member(lambda p: p.age)))
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .config import PrintingConfig
from .errors import ConfigurationError
from .utils import fmt_type


# Methods --------------------------------------------------------------------------------------------------------------

def for_type(owner: type) -> PrintingConfig:
    """Return a default PrintingConfig for objects of the owner type."""
    return PrintingConfig(owner)


def print_to_string(obj: Any,
                    configure: Callable[[PrintingConfig], PrintingConfig | None] | None = None) -> str:
    """
    Print obj as an indented text tree.

    Args:
        obj: Object to print.
        configure: Optional callable receiving a fresh PrintingConfig for type(obj) and returning
                   the config to print with. Returning None keeps the passed config.

    Returns:
        str: Printed text.

    Raises:
        ConfigurationError: If configure produces an invalid configuration.

    Examples:
        >>> print(print_to_string({"a": 1}), end="")
        dict<str, int>
            Key = a
            Value = 1

        >>> print_to_string(person, lambda cfg: cfg.select_member(lambda p: p.name).with_trim_length(3))
    """
    config = for_type(type(obj))

    if configure is not None:
        if not callable(configure):
            raise ConfigurationError(f"configure must be callable, got {fmt_type(configure)}")
        configured = configure(config)
        if configured is not None:
            if not isinstance(configured, PrintingConfig):
                raise ConfigurationError(f"configure must return a PrintingConfig or None, got {fmt_type(configured)}")
            config = configured

    return config.print_to_string(obj)
