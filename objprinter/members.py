"""
Member discovery for composite objects.

Provides the ordered list of public members the printer shows for an object, together with
the stable MemberKey each member is configured by, and resolution of member selectors
like ``lambda p: p.name`` into such keys.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import dataclasses
import functools
import inspect
import logging
import types
import typing

from dataclasses import dataclass
from typing import Any, Callable, Iterator

# Local ----------------------------------------------------------------------------------------------------------------
from .errors import ConfigurationError
from .utils import class_name, fmt_value

logger = logging.getLogger(__name__)


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class MemberKey:
    """
    Identifier of a named member of a class.

    Attributes:
        owner: The class declaring the member (dataclass field, annotation, slot or property).
               For attributes only assigned on instances, the class of the instance.
        name: Member name.

    Note:
        Keys compare by (owner, name), so same-named members of unrelated classes never match,
        while a member inherited from a base class keeps the key of the base class.
    """
    owner: type
    name: str

    def __str__(self) -> str:
        return f"{self.owner.__qualname__}.{self.name}"


@dataclass(frozen=True)
class Member:
    """
    A public member of an object.

    Attributes:
        key: Stable member key used for configuration lookups.
        declared_type: Resolved annotation with Optional stripped, or None if the member is not annotated.
    """
    key: MemberKey
    declared_type: Any = None

    @property
    def name(self) -> str:
        return self.key.name

    def read(self, obj: Any) -> Any:
        """Read the member value from obj, exceptions of getters propagate."""
        return getattr(obj, self.key.name)


@dataclass(frozen=True)
class _Declared:
    """Members a class declares, resolved once per class."""
    data: tuple[Member, ...]
    properties: tuple[Member, ...]

    @functools.cached_property
    def names(self) -> frozenset[str]:
        return frozenset(m.name for m in self.data + self.properties)

    def get(self, name: str) -> Member | None:
        for member in self.data + self.properties:
            if member.name == name:
                return member
        return None


class _Accessed:
    """Result of an attribute access on _MemberRecorder."""
    __slots__ = ("name",)

    def __init__(self, name: str) -> None:
        self.name = name


class _MemberRecorder:
    """
    Records attribute accesses made by a member selector.

    Exposes no public names, so every public attribute access reaches __getattr__.
    """
    __slots__ = ("__accessed",)

    def __init__(self) -> None:
        self.__accessed: list[_Accessed] = []

    def __getattr__(self, name: str) -> _Accessed:
        token = _Accessed(name)
        self.__accessed.append(token)
        return token


# Methods --------------------------------------------------------------------------------------------------------------

def iter_members(obj: Any) -> Iterator[Member]:
    """
    Yield public members of obj in a stable order.

    Order:
        1. dataclass fields, in declaration order
        2. other annotated class attributes, base classes first
        3. __slots__ entries, base classes first
        4. remaining instance __dict__ entries with non-callable values, in insertion order
        5. properties, base classes first

    Names starting with underscore are skipped, a name is yielded once at its first position.
    """
    cls = type(obj)
    declared = _declared_members(cls)

    yield from declared.data

    instance_dict = getattr(obj, "__dict__", None)
    if isinstance(instance_dict, dict):
        for name, value in list(instance_dict.items()):
            if not isinstance(name, str) or not _is_public(name) or name in declared.names:
                continue
            if callable(value):
                continue
            yield Member(MemberKey(cls, name))

    yield from declared.properties


def resolve_member(owner: type, selector: "str | MemberKey | Callable[[Any], Any]") -> MemberKey:
    """
    Resolve a member selector to the MemberKey of a member of owner.

    Args:
        owner: Class the selector applies to.
        selector: A member name, a MemberKey, or a callable doing one direct attribute
                  access on its argument, e.g. ``lambda p: p.name``.

    Returns:
        MemberKey: Key of the selected member.

    Raises:
        ConfigurationError: If selector is not a direct access to a public data member of owner.

    Examples:
        >>> @dataclass
        ... class Person:
        ...     name: str
        >>> str(resolve_member(Person, lambda p: p.name))
        'Person.name'
        >>> resolve_member(Person, lambda p: p.name.upper())
        Traceback (most recent call last):
        ...
        ConfigurationError: Member selector must be a direct member access like 'lambda x: x.name' ...
    """
    if not isinstance(owner, type):
        raise ConfigurationError(f"owner must be a type, got {fmt_value(owner)}")

    if isinstance(selector, MemberKey):
        if not issubclass(owner, selector.owner):
            raise ConfigurationError(f"Member {selector} does not belong to {class_name(owner)}")
        return selector

    if isinstance(selector, str):
        name = selector
    elif callable(selector):
        name = _selected_name(selector)
    else:
        raise ConfigurationError(f"Member selector must be a str or a callable, got {fmt_value(selector)}")

    if not name.isidentifier() or not _is_public(name):
        raise ConfigurationError(f"Member selector must select a public member, got {fmt_value(name)}")

    declared = _declared_members(owner)
    if member := declared.get(name):
        return member.key

    static = inspect.getattr_static(owner, name, None)
    if callable(static) or isinstance(static, (staticmethod, classmethod)):
        raise ConfigurationError(f"{class_name(owner)}.{name} is a method, not a data member")

    if _is_fully_declared(owner):
        raise ConfigurationError(f"{class_name(owner)} has no member {fmt_value(name)}")

    return MemberKey(owner, name)


# Private Methods ------------------------------------------------------------------------------------------------------

def _selected_name(selector: Callable[[Any], Any]) -> str:
    """Run selector against a recorder and return the name of the single member it accesses."""
    message = "Member selector must be a direct member access like 'lambda x: x.name'"
    recorder = _MemberRecorder()
    try:
        result = selector(recorder)
    except Exception as e:
        raise ConfigurationError(f"{message}, but it failed with {type(e).__name__}: {e}") from e

    accessed = object.__getattribute__(recorder, "_MemberRecorder__accessed")
    if not isinstance(result, _Accessed):
        raise ConfigurationError(f"{message}, but it returned {fmt_value(result)}")
    if accessed != [result]:
        names = ", ".join(a.name for a in accessed)
        raise ConfigurationError(f"{message}, but it accessed: {names}")

    return result.name


@functools.lru_cache(maxsize=512)
def _declared_members(cls: type) -> _Declared:
    hints = _type_hints(cls)
    data: dict[str, Member] = {}
    properties: dict[str, Member] = {}

    def add(table: dict[str, Member], owner: type, name: str, declared: Any) -> None:
        if _is_public(name) and name not in data and name not in properties:
            table[name] = Member(MemberKey(owner, name), _normalize_declared(declared))

    mro = [klass for klass in reversed(cls.__mro__) if klass is not object]

    if dataclasses.is_dataclass(cls):
        for f in dataclasses.fields(cls):
            add(data, _annotation_owner(mro, f.name) or cls, f.name, hints.get(f.name))

    for klass in mro:
        for name in inspect.get_annotations(klass):
            hint = hints.get(name)
            if _is_classvar(hint, klass, name) or isinstance(hint, dataclasses.InitVar):
                continue
            add(data, klass, name, hint)

    for klass in mro:
        slots = klass.__dict__.get("__slots__", ())
        for name in (slots,) if isinstance(slots, str) else slots:
            add(data, klass, name, hints.get(name))

    for klass in mro:
        for name, attr in klass.__dict__.items():
            if isinstance(attr, property):
                add(properties, klass, name, _return_hint(attr.fget))
            elif isinstance(attr, functools.cached_property):
                add(properties, klass, name, _return_hint(attr.func))

    return _Declared(data=tuple(data.values()), properties=tuple(properties.values()))


def _annotation_owner(mro: list[type], name: str) -> type | None:
    for klass in mro:
        if name in inspect.get_annotations(klass):
            return klass
    return None


def _type_hints(cls: type) -> dict[str, Any]:
    """Resolved annotations of cls and its bases, empty if they cannot be resolved."""
    localns = {klass.__name__: klass for klass in cls.__mro__}
    try:
        return typing.get_type_hints(cls, localns=localns, include_extras=False)
    except Exception as e:
        logger.debug("Cannot resolve type hints of %s: %s: %s", class_name(cls), type(e).__name__, e)

    hints = {}
    for klass in reversed(cls.__mro__):
        for name, hint in inspect.get_annotations(klass).items():
            # Unresolved string annotations are treated as missing
            hints[name] = None if isinstance(hint, str) else hint
    return hints


def _return_hint(fn: Any) -> Any:
    try:
        return typing.get_type_hints(fn).get("return")
    except Exception as e:
        logger.debug("Cannot resolve return type of %s: %s: %s", fmt_value(fn), type(e).__name__, e)
        return None


def _is_classvar(hint: Any, klass: type, name: str) -> bool:
    if hint is typing.ClassVar or typing.get_origin(hint) is typing.ClassVar:
        return True
    raw = inspect.get_annotations(klass).get(name)
    return isinstance(raw, str) and raw.replace("typing.", "").startswith("ClassVar")


def _normalize_declared(declared: Any) -> Any:
    """Strip Optional[...] so that `X | None` is configured as X."""
    origin = typing.get_origin(declared)
    if origin is typing.Union or origin is types.UnionType:
        args = [a for a in typing.get_args(declared) if a is not type(None)]
        if len(args) == 1:
            return args[0]
    return declared


def _is_fully_declared(cls: type) -> bool:
    """True if instances of cls cannot carry undeclared attributes worth printing."""
    if dataclasses.is_dataclass(cls):
        return True
    slotted = [klass for klass in cls.__mro__ if klass is not object]
    return bool(slotted) and all(
        "__slots__" in klass.__dict__ and "__dict__" not in klass.__dict__["__slots__"]
        for klass in slotted
    )


def _is_public(name: str) -> bool:
    return not name.startswith("_")
