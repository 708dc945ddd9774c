"""
Display names for runtime types, generic aliases and arrays.

``format_type_name()`` renders a type descriptor the way headers and markers of the
object printer show it: generic parameters in angle brackets, arrays with rank suffixes.

``type_of()`` derives such a descriptor from a runtime value. Python containers do not carry
their type parameters, so homogeneous builtin containers get them inferred from elements.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import array
import functools
import logging
import types
import typing

from collections import deque
from dataclasses import dataclass
from typing import Any

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import class_name, fmt_value

logger = logging.getLogger(__name__)

# Classes --------------------------------------------------------------------------------------------------------------

# array.array typecodes grouped by the Python type of their items
_ARRAY_TYPECODES = {
    **dict.fromkeys("bBhHiIlLqQ", int),
    **dict.fromkeys("fd", float),
    **dict.fromkeys("uw", str),
}

# Builtin containers which get their element type inferred by type_of()
_INFERRED_SEQUENCES = (list, set, frozenset, deque)
_MAX_INFER_DEPTH = 8


@dataclass(frozen=True)
class ArrayType:
    """
    Descriptor of a typed array.

    Attributes:
        element: Element type descriptor: a class, generic alias, dtype name or a nested ArrayType.
        rank: Number of dimensions, 1 for a vector, 2 for a matrix, etc.

    Examples:
        >>> format_type_name(ArrayType(int))
        'int[]'
        >>> format_type_name(ArrayType(int, rank=2))
        'int[,]'
        >>> format_type_name(ArrayType(ArrayType(int)))
        'int[][]'
    """
    element: Any
    rank: int = 1

    def __post_init__(self) -> None:
        if isinstance(self.rank, bool) or not isinstance(self.rank, int):
            raise TypeError(f"ArrayType.rank must be an int, got {fmt_value(self.rank)}")
        if self.rank < 1:
            raise ValueError(f"ArrayType.rank must be >=1, but got {fmt_value(self.rank)}")


# Methods --------------------------------------------------------------------------------------------------------------

def format_type_name(descriptor: Any) -> str:
    """
    Return the display name of a type descriptor.

    Args:
        descriptor: A class, a generic alias (``list[int]``, ``typing.Dict[str, int]``, ``Box[T]``),
                    a union, a TypeVar, a forward reference or an ArrayType.

    Returns:
        str: Simple class name with generic arguments in angle brackets and array suffixes.

    Examples:
        >>> format_type_name(int)
        'int'
        >>> format_type_name(dict[str, list[int]])
        'dict<str, list<int>>'
        >>> format_type_name(int | None)
        'int | None'
        >>> format_type_name(ArrayType(float, rank=3))
        'float[,,]'

    Note:
        Results are memoized for hashable descriptors.
    """
    try:
        hash(descriptor)
    except TypeError:
        return _format_type_name(descriptor)
    return _format_type_name_cached(descriptor)


def type_of(value: Any) -> Any:
    """
    Return the runtime type descriptor of a value for display with format_type_name().

    - ``array.array`` gives a rank-1 ArrayType of its item type
    - ndarray-like objects (exposing ``dtype``, ``ndim`` and ``shape``) give an ArrayType of
      their dtype name and rank; object arrays holding arrays give nested ArrayTypes
    - non-empty list, set, frozenset and deque with a single element type give ``list[T]`` etc.
    - non-empty dict with single key and value types gives ``dict[K, V]``
    - anything else gives ``type(value)``

    Examples:
        >>> format_type_name(type_of([1, 2]))
        'list<int>'
        >>> format_type_name(type_of([1, "a"]))
        'list'
        >>> format_type_name(type_of({"a": [1]}))
        'dict<str, list<int>>'

    Note:
        Containers which hold themselves are not expanded at the point of re-entry,
        and inference stops after a fixed nesting depth.
    """
    return _type_of(value, inferring=frozenset())


# Private Methods ------------------------------------------------------------------------------------------------------

def _type_of(value: Any, inferring: frozenset[int]) -> Any:
    cls = type(value)

    if isinstance(value, array.array):
        return ArrayType(_ARRAY_TYPECODES.get(value.typecode, object))

    if _is_ndarray_like(value):
        try:
            return _ndarray_type(value)
        except Exception as e:
            logger.debug("Cannot read array type of %s: %s: %s", class_name(value), type(e).__name__, e)
            return cls

    if id(value) in inferring or len(inferring) >= _MAX_INFER_DEPTH:
        return cls
    inferring = inferring | {id(value)}

    if cls in _INFERRED_SEQUENCES and value:
        element = _uniform_type(value, inferring)
        if element is not None:
            return types.GenericAlias(cls, (element,))

    if cls is dict and value:
        key = _uniform_type(value.keys(), inferring)
        val = _uniform_type(value.values(), inferring)
        if key is not None and val is not None:
            return types.GenericAlias(dict, (key, val))

    return cls


@functools.lru_cache(maxsize=1024)
def _format_type_name_cached(descriptor: Any) -> str:
    return _format_type_name(descriptor)


def _format_type_name(descriptor: Any) -> str:
    if descriptor is None or descriptor is type(None):
        return "None"

    if descriptor is Ellipsis:
        return "..."

    if isinstance(descriptor, ArrayType):
        return format_type_name(descriptor.element) + "[" + "," * (descriptor.rank - 1) + "]"

    if isinstance(descriptor, str):
        # Forward reference or dtype name
        return descriptor

    if isinstance(descriptor, typing.ForwardRef):
        return descriptor.__forward_arg__

    if isinstance(descriptor, list):
        # Parameter list of Callable[[...], R]
        return "[" + ", ".join(format_type_name(a) for a in descriptor) + "]"

    origin = typing.get_origin(descriptor)
    if origin is not None:
        args = typing.get_args(descriptor)

        if origin is typing.Union or origin is types.UnionType:
            return " | ".join(format_type_name(a) for a in args)

        if origin is typing.Annotated:
            return format_type_name(args[0])

        if origin is typing.Literal:
            return "Literal<" + ", ".join(repr(a) for a in args) + ">"

        name = _origin_name(origin)
        if not args:
            return name
        return name + "<" + ", ".join(format_type_name(a) for a in args) + ">"

    if isinstance(descriptor, type):
        return descriptor.__name__

    if isinstance(descriptor, typing.TypeVar):
        return descriptor.__name__

    # typing special forms (Any, NoReturn) and other exotic descriptors
    name = getattr(descriptor, "_name", None) or getattr(descriptor, "__name__", None)
    return name if isinstance(name, str) else repr(descriptor)


def _origin_name(origin: Any) -> str:
    """Name of a generic origin without module qualification."""
    name = getattr(origin, "__name__", None) or getattr(origin, "_name", None)
    return name if isinstance(name, str) else repr(origin)


def _is_ndarray_like(value: Any) -> bool:
    """True for array objects like numpy.ndarray; numpy scalars (ndim == 0) are excluded."""
    if isinstance(value, type):
        return False
    try:
        if not (hasattr(value, "dtype") and hasattr(value, "shape")):
            return False
        ndim = getattr(value, "ndim", None)
    except Exception as e:
        # Failing attributes of ordinary objects mean "not an array"
        logger.debug("Cannot inspect %s as an array: %s: %s", class_name(value), type(e).__name__, e)
        return False
    return isinstance(ndim, int) and ndim > 0


def _ndarray_type(value: Any) -> ArrayType:
    dtype = value.dtype
    element = getattr(dtype, "name", None) or str(dtype)

    if element == "object" and getattr(value, "size", 0):
        flat = getattr(value, "flat", None)
        first = flat[0] if flat is not None else None
        if _is_ndarray_like(first):
            element = _ndarray_type(first)

    return ArrayType(element, rank=value.ndim)


def _uniform_type(items: typing.Iterable[Any], inferring: frozenset[int]) -> Any:
    """
    Return descriptor of the first item when all items share its exact runtime type, else None.
    """
    iterator = iter(items)
    try:
        first = next(iterator)
    except StopIteration:
        return None

    first_cls = type(first)
    if all(type(item) is first_cls for item in iterator):
        return _type_of(first, inferring)
    return None
