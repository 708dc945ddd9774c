"""
ObjPrinter utilities shared across the package.

Contains functions used by multiple modules to avoid circular imports.
"""

# Standard library -----------------------------------------------------------------------------------------------------
from typing import Any


# Methods --------------------------------------------------------------------------------------------------------------


def class_name(obj: Any, fully_qualified: bool = False) -> str:
    """
    Get the class name of an object or a class.

    Returns class name whether given an instance or the class itself.
    For example, both `class_name(10)` and `class_name(int)` return 'int'.

    Parameters:
        obj (Any): An object or a class.
        fully_qualified (bool): If true, returns the fully qualified name for non-builtin classes.

    Returns:
        str: The class name.

    Examples:
        >>> class_name(10)
        'int'
        >>> class C: ...
        >>> class_name(C())
        'C'
        >>> class_name(C, fully_qualified=True)
        'objprinter.utils.C'
    """
    cls = obj if isinstance(obj, type) else obj.__class__

    try:
        name = cls.__name__
    except AttributeError:
        return str(cls)

    module = getattr(cls, "__module__", None)
    if fully_qualified and module and module != "builtins":
        return f"{module}.{name}"
    return name


def fmt_type(obj: Any) -> str:
    """
    Format type information for exception messages.

    Examples:
        >>> fmt_type(42)
        '<type: int>'
        >>> fmt_type(int)
        '<type: int>'
    """
    return f"<type: {class_name(obj)}>"


def fmt_value(x: Any, max_repr: int = 120) -> str:
    """
    Format a single value as a type-value pair for exception messages.

    Handles broken __repr__ and extremely long representations gracefully.

    Examples:
        >>> fmt_value(42)
        '<int: 42>'
        >>> fmt_value("hello world", max_repr=8)
        "<str: 'hell...>"
    """
    t = class_name(x) if not isinstance(x, type) else "type"
    try:
        base_repr = repr(x)
    except Exception as e:
        base_repr = f"<{t} object (repr failed: {type(e).__name__})>"

    if len(base_repr) > max_repr:
        base_repr = base_repr[:max(max_repr - 3, 0)] + "..."
    return f"<{t}: {base_repr}>"
