"""
ObjPrinter configuration.

PrintingConfig holds every override the printer consults while walking an object graph:
excluded types and members, custom formatters, trim lengths, cultures and the nesting limit.
It is populated with a fluent API, each call returns the config so calls chain.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import typing

from dataclasses import dataclass, field
from typing import Any, Callable

# Local ----------------------------------------------------------------------------------------------------------------
from .culture import Culture
from .errors import ConfigurationError
from .members import MemberKey, resolve_member
from .serializer import serialize_object
from .utils import class_name, fmt_type, fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass
class PrintingConfig:
    """
    Printing configuration for objects of the owner type.

    Attributes:
        owner: Root type which member selectors are resolved against.
        excluded_types: Types never shown; values get an excluded marker, members are omitted.
        excluded_members: Members omitted wherever their declaring class is printed.
        type_formatters: Custom formatters by exact runtime type.
        member_formatters: Custom formatters by member, take precedence over type formatters.
        trimmed_types: Max text length by type (declared type for members).
        trimmed_members: Max text length by member, takes precedence over trimmed_types.
        type_cultures: Cultures for numbers and dates by exact runtime type.
        indent: Indentation unit, repeated once per nesting level.
        newline: Line terminator.
        max_nesting_level: (property) Depth at which nested values are replaced with a marker.

    Examples:
        >>> config = (
        ...     PrintingConfig(Person)
        ...     .exclude_type(uuid.UUID)
        ...     .exclude_member(lambda p: p.age)
        ...     .select_type(int).with_formatter(lambda n: f"#{n}")
        ...     .select_type(float).with_locale(Culture.invariant())
        ...     .select_member(lambda p: p.name).with_trim_length(3)
        ...     .with_max_nesting_level(3)
        ... )
        >>> print(config.print_to_string(person))

    Note:
        Registrations are last-write-wins per key. A config can be reused for any number of
        print_to_string() calls but must not be modified while printing.
    """
    owner: type = object

    excluded_types: set[Any] = field(default_factory=set)
    excluded_members: set[MemberKey] = field(default_factory=set)
    type_formatters: dict[Any, Callable[[Any], str]] = field(default_factory=dict)
    member_formatters: dict[MemberKey, Callable[[Any], str]] = field(default_factory=dict)
    trimmed_types: dict[Any, int] = field(default_factory=dict)
    trimmed_members: dict[MemberKey, int] = field(default_factory=dict)
    type_cultures: dict[Any, Culture] = field(default_factory=dict)

    indent: str = "\t"
    newline: str = "\n"

    _max_nesting_level: int = field(default=5, init=False, repr=False)

    def __post_init__(self) -> None:
        if not isinstance(self.owner, type):
            raise ConfigurationError(f"owner must be a type, got {fmt_value(self.owner)}")
        for name in ("indent", "newline"):
            if not isinstance(getattr(self, name), str):
                raise ConfigurationError(f"{name} must be a str, got {fmt_type(getattr(self, name))}")

    # Builder Methods ----------------------------------

    def exclude_type(self, typ: Any) -> "PrintingConfig":
        """
        Omit every value of this type at any depth.

        Members declared with this type are omitted entirely, other values of the exact
        runtime type are replaced with an excluded marker.
        """
        self.excluded_types.add(_validated_type(typ))
        return self

    def exclude_member(self, selector: "str | MemberKey | Callable[[Any], Any]") -> "PrintingConfig":
        """
        Omit one member of the owner type, e.g. ``config.exclude_member(lambda p: p.age)``.

        Raises:
            ConfigurationError: If selector is not a direct member access.
        """
        self.excluded_members.add(resolve_member(self.owner, selector))
        return self

    def select_type(self, typ: Any) -> "TypePrintingConfig":
        """Start configuring how values of a type are printed."""
        return TypePrintingConfig(self, _validated_type(typ))

    def select_member(self, selector: "str | MemberKey | Callable[[Any], Any]") -> "MemberPrintingConfig":
        """
        Start configuring how one member of the owner type is printed.

        Raises:
            ConfigurationError: If selector is not a direct member access.
        """
        return MemberPrintingConfig(self, resolve_member(self.owner, selector))

    def with_max_nesting_level(self, level: int) -> "PrintingConfig":
        """Set max_nesting_level and return self."""
        self.max_nesting_level = level
        return self

    def print_to_string(self, obj: Any) -> str:
        """Print obj as an indented text tree using this configuration."""
        return serialize_object(obj, self)

    # Lookups ------------------------------------------

    def is_type_excluded(self, typ: Any) -> bool:
        return _lookup(self.excluded_types, typ, default=False)

    def is_member_excluded(self, key: MemberKey) -> bool:
        return key in self.excluded_members

    def get_type_formatter(self, typ: Any) -> Callable[[Any], str] | None:
        """Custom formatter by exact type match, inheritance is not considered."""
        return _lookup(self.type_formatters, typ)

    def get_member_formatter(self, key: MemberKey | None) -> Callable[[Any], str] | None:
        if key is None:
            return None
        return self.member_formatters.get(key)

    def get_culture(self, typ: Any) -> Culture | None:
        return _lookup(self.type_cultures, typ)

    def get_trim_length(self, key: MemberKey | None, typ: Any) -> int | None:
        """
        Resolve trim length: member-level table first, then type-level table, else None.
        """
        if key is not None and key in self.trimmed_members:
            return self.trimmed_members[key]
        return _lookup(self.trimmed_types, typ)

    # Properties ---------------------------------------

    @property
    def max_nesting_level(self) -> int:
        """
        Nesting level where printing stops; the root object is at level 0. Default is 5.
        """
        return self._max_nesting_level

    @max_nesting_level.setter
    def max_nesting_level(self, value: int) -> None:
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"max_nesting_level must be an int, got {fmt_type(value)}")
        if value <= 0:
            raise ConfigurationError(f"max_nesting_level must be >0, but got {fmt_value(value)}")
        self._max_nesting_level = value


class _Selection:
    """
    Base of type and member selections, writes to the type or member tables of the config.
    """

    def __init__(self, config: PrintingConfig, typ: Any = None, key: MemberKey | None = None) -> None:
        self._config = config
        self._type = typ
        self._key = key

    def with_formatter(self, formatter: Callable[[Any], str]) -> PrintingConfig:
        """Print selected values with formatter(value) -> str."""
        if not callable(formatter):
            raise ConfigurationError(f"formatter must be callable, got {fmt_type(formatter)}")

        if self._key is None:
            self._config.type_formatters[self._type] = formatter
        else:
            self._config.member_formatters[self._key] = formatter
        return self._config

    def with_trim_length(self, length: int) -> PrintingConfig:
        """Truncate printed text of selected values to at most length characters."""
        if isinstance(length, bool) or not isinstance(length, int):
            raise ConfigurationError(f"trim length must be an int, got {fmt_type(length)}")
        if length < 0:
            raise ConfigurationError(f"trim length must be >=0, but got {fmt_value(length)}")

        if self._key is None:
            self._config.trimmed_types[self._type] = length
        else:
            self._config.trimmed_members[self._key] = length
        return self._config


class TypePrintingConfig(_Selection):
    """
    Printing options of one type, created with PrintingConfig.select_type().
    """

    def __init__(self, config: PrintingConfig, typ: Any) -> None:
        super().__init__(config, typ=typ)

    def with_locale(self, culture: "Culture | str") -> PrintingConfig:
        """
        Format numbers and dates of this type with culture, a Culture or a culture name like "ru-RU".
        """
        if isinstance(culture, str):
            try:
                culture = Culture.from_name(culture)
            except ValueError as e:
                raise ConfigurationError(str(e)) from e
        if not isinstance(culture, Culture):
            raise ConfigurationError(f"culture must be a Culture or a culture name, got {fmt_type(culture)}")

        self._config.type_cultures[self._type] = culture
        return self._config

    def __repr__(self) -> str:
        return f"TypePrintingConfig({class_name(self._config.owner)}, type={self._type!r})"


class MemberPrintingConfig(_Selection):
    """
    Printing options of one member, created with PrintingConfig.select_member().

    Member options take precedence over options of the member's type.
    """

    def __init__(self, config: PrintingConfig, key: MemberKey) -> None:
        super().__init__(config, key=key)

    def with_locale(self, culture: Any) -> PrintingConfig:
        """Not supported: cultures apply to whole types, use select_type(...).with_locale()."""
        raise ConfigurationError(
            f"Culture cannot be set for member {self._key}, use select_type(...).with_locale() instead")

    def __repr__(self) -> str:
        return f"MemberPrintingConfig({class_name(self._config.owner)}, member={self._key})"


# Private Methods ------------------------------------------------------------------------------------------------------

def _validated_type(typ: Any) -> Any:
    """Accept classes and generic aliases like list[int] as type keys."""
    if isinstance(typ, type) or typing.get_origin(typ) is not None:
        try:
            hash(typ)
        except TypeError as e:
            raise ConfigurationError(f"type must be hashable, got {fmt_value(typ)}") from e
        return typ
    raise ConfigurationError(f"Expected a type, got {fmt_value(typ)}")


def _lookup(table: Any, key: Any, default: Any = None) -> Any:
    """Membership or item lookup which treats unhashable keys as missing."""
    try:
        if isinstance(table, set):
            return key in table
        return table.get(key, default)
    except TypeError:
        return default
