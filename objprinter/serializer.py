"""
ObjPrinter serialization engine.

Walks an object graph depth-first and writes one line per node into a text buffer:
scalars as text, mappings/iterables/composites as a type-name header followed by their
indented children, and markers for excluded types, exceeded depth and cyclic references.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import collections.abc as abc
import datetime as dt
import io
import logging
import uuid

from decimal import Decimal
from enum import Enum
from fractions import Fraction
from typing import TYPE_CHECKING, Any

# Local ----------------------------------------------------------------------------------------------------------------
from .members import Member, MemberKey, iter_members
from .typenames import format_type_name, type_of
from .utils import class_name

if TYPE_CHECKING:
    from .config import PrintingConfig

logger = logging.getLogger(__name__)

# Values printed as a single line of text; date also covers datetime
SCALAR_TYPES = (
    str, bytes, bytearray,
    bool, int, float, complex, Decimal, Fraction,
    dt.date, dt.time, dt.timedelta,
    uuid.UUID,
    Enum,
    type,
)


# Classes --------------------------------------------------------------------------------------------------------------

class SerializationContext:
    """
    State of a single print_to_string() call.

    Attributes:
        config: Printing configuration, read-only while printing.
        visited: Non-scalar objects already entered during this call, by id().
        buffer: Output text.

    Note:
        A context must never be reused: objects left in `visited` would be reported as cyclic.
        Visited objects are kept referenced until the call ends, so their ids cannot be reused
        by temporaries such as values of computed properties.
    """

    def __init__(self, config: "PrintingConfig") -> None:
        self.config = config
        self.visited: dict[int, Any] = {}
        self.buffer = io.StringIO()

    def indent(self, level: int) -> None:
        self.buffer.write(self.config.indent * level)

    def write(self, text: str) -> None:
        self.buffer.write(text)

    def write_line(self, text: str) -> None:
        """Write text terminated with exactly one newline."""
        self.buffer.write(text.rstrip("\r\n"))
        self.buffer.write(self.config.newline)

    def getvalue(self) -> str:
        return self.buffer.getvalue()


# Methods --------------------------------------------------------------------------------------------------------------

def serialize_object(obj: Any, config: "PrintingConfig") -> str:
    """
    Print obj as an indented text tree.

    Args:
        obj: Any object, including None and cyclic object graphs.
        config: PrintingConfig with overrides and the nesting limit.

    Returns:
        str: Printed text, every line terminated with config.newline.

    Node Kinds, in order of precedence:
        1. None → "null"
        2. Excluded runtime type → "[Excluded <type>]"
        3. Nesting level >= max_nesting_level → "[MaxDepth <type>]"
        4. Object already entered during this call → "[CyclicRef <type>]"
        5. Custom formatter of the exact runtime type → formatter(obj), trimmed
        6. Scalar → culture-aware or str() text, trimmed
        7. Mapping → header, then "Key = ..." and "Value = ..." for each item
        8. Other iterable → header, then "[i] = ..." for each item
        9. Composite → header, then "<member> = ..." for each public member

    Examples:
        >>> print(serialize_object([10, 20], PrintingConfig()), end="")
        list<int>
            [0] = 10
            [1] = 20
    """
    ctx = SerializationContext(config)
    _serialize(obj, 0, None, None, ctx)
    return ctx.getvalue()


# Private Methods ------------------------------------------------------------------------------------------------------

def _serialize(obj: Any, level: int, member: Member | None, member_type: Any, ctx: SerializationContext) -> None:
    """
    Write obj starting at the current buffer position.

    member and member_type describe the member obj was read from, they select member-level
    overrides and the declared type used for trimming.
    """
    if obj is None:
        ctx.write_line("null")
        return

    config = ctx.config

    if config.is_type_excluded(type(obj)):
        ctx.write_line(f"[Excluded {_type_name(obj)}]")
        return

    if level >= config.max_nesting_level:
        ctx.write_line(f"[MaxDepth {_type_name(obj)}]")
        return

    if _is_scalar(obj):
        _serialize_node(obj, level, member, member_type, ctx)
        return

    obj_id = id(obj)
    if obj_id in ctx.visited:
        ctx.write_line(f"[CyclicRef {_type_name(obj)}]")
        return

    ctx.visited[obj_id] = obj
    _serialize_node(obj, level, member, member_type, ctx)


def _serialize_node(obj: Any, level: int, member: Member | None, member_type: Any,
                    ctx: SerializationContext) -> None:
    config = ctx.config
    key = member.key if member is not None else None
    trim_type = member_type if member is not None else type(obj)

    if formatter := config.get_type_formatter(type(obj)):
        ctx.write_line(_trim(str(formatter(obj)), key, trim_type, config))
    elif _is_scalar(obj):
        ctx.write_line(_trim(_format_scalar(obj, config), key, trim_type, config))
    elif isinstance(obj, abc.Mapping):
        _serialize_mapping(obj, level, ctx)
    elif isinstance(obj, abc.Iterable):
        _serialize_iterable(obj, level, ctx)
    else:
        _serialize_composite(obj, level, ctx)


def _serialize_mapping(obj: abc.Mapping, level: int, ctx: SerializationContext) -> None:
    ctx.write_line(_type_name(obj))
    for key, value in obj.items():
        ctx.indent(level + 1)
        ctx.write("Key = ")
        _serialize(key, level + 1, None, None, ctx)

        ctx.indent(level + 1)
        ctx.write("Value = ")
        _serialize(value, level + 1, None, None, ctx)


def _serialize_iterable(obj: abc.Iterable, level: int, ctx: SerializationContext) -> None:
    ctx.write_line(_type_name(obj))
    for i, item in enumerate(obj):
        ctx.indent(level + 1)
        ctx.write(f"[{i}] = ")
        _serialize(item, level + 1, None, None, ctx)


def _serialize_composite(obj: Any, level: int, ctx: SerializationContext) -> None:
    config = ctx.config
    ctx.write_line(_type_name(obj))

    for member in iter_members(obj):
        if config.is_member_excluded(member.key):
            continue

        declared = member.declared_type
        if declared is not None and config.is_type_excluded(declared):
            continue

        value = _read_member(obj, member)

        # Members without annotation are typed by their value
        member_type = declared if declared is not None else type(value)
        if declared is None and value is not None and config.is_type_excluded(member_type):
            continue

        ctx.indent(level + 1)
        ctx.write(f"{member.name} = ")

        if formatter := config.get_member_formatter(member.key):
            text = "null" if value is None else str(formatter(value))
            ctx.write_line(_trim(text, member.key, member_type, config))
            continue

        _serialize(value, level + 1, member, member_type, ctx)


def _read_member(obj: Any, member: Member) -> Any:
    """Read member value, a failing getter reads as None."""
    try:
        return member.read(obj)
    except Exception as e:
        logger.debug("Cannot read %s.%s: %s: %s", class_name(obj), member.name, type(e).__name__, e)
        return None


def _format_scalar(obj: Any, config: "PrintingConfig") -> str:
    if isinstance(obj, str):
        return obj
    if isinstance(obj, type):
        return format_type_name(obj)

    culture = config.get_culture(type(obj))
    if culture is not None and culture.supports(obj):
        return culture.format(obj)
    return str(obj)


def _trim(text: str, key: MemberKey | None, typ: Any, config: "PrintingConfig") -> str:
    length = config.get_trim_length(key, typ)
    if length is not None and len(text) > length:
        return text[:length]
    return text


def _is_scalar(obj: Any) -> bool:
    return isinstance(obj, SCALAR_TYPES)


def _type_name(obj: Any) -> str:
    return format_type_name(type_of(obj))
