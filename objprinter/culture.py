"""
Culture descriptors for locale-aware formatting of numbers and dates.

A Culture is an immutable value, independent of the process-wide ``locale`` settings,
so different types can be printed with different cultures within a single call.
"""

# Standard library -----------------------------------------------------------------------------------------------------
import datetime as dt

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Any, ClassVar

# Local ----------------------------------------------------------------------------------------------------------------
from .utils import fmt_value


# Classes --------------------------------------------------------------------------------------------------------------

@dataclass(frozen=True)
class Culture:
    """
    Number and date formatting conventions.

    Attributes:
        name: Culture name, e.g. "ru-RU"; empty for the invariant culture.
        decimal_point: Separator between integer and fractional parts.
        thousands_sep: Digit group separator; empty string disables grouping.
        date_format: strftime() format for datetime.date values.
        time_format: strftime() format for datetime.time values.
        datetime_format: strftime() format for datetime.datetime values.

    Examples:
        >>> Culture.invariant().format(160.5)
        '160.5'
        >>> Culture.from_name("ru-RU").format(160.5)
        '160,5'
        >>> Culture(thousands_sep=" ").format(1234567)
        '1 234 567'
    """
    name: str = ""
    decimal_point: str = "."
    thousands_sep: str = ""
    date_format: str = "%m/%d/%Y"
    time_format: str = "%H:%M:%S"
    datetime_format: str = "%m/%d/%Y %H:%M:%S"

    _NAMED: ClassVar[dict[str, dict[str, str]]] = {
        "en-us": dict(date_format="%m/%d/%Y", time_format="%I:%M:%S %p", datetime_format="%m/%d/%Y %I:%M:%S %p"),
        "en-gb": dict(date_format="%d/%m/%Y", datetime_format="%d/%m/%Y %H:%M:%S"),
        "de-de": dict(decimal_point=",", date_format="%d.%m.%Y", datetime_format="%d.%m.%Y %H:%M:%S"),
        "fr-fr": dict(decimal_point=",", date_format="%d/%m/%Y", datetime_format="%d/%m/%Y %H:%M:%S"),
        "ru-ru": dict(decimal_point=",", date_format="%d.%m.%Y", datetime_format="%d.%m.%Y %H:%M:%S"),
    }

    def __post_init__(self) -> None:
        for name in ("name", "decimal_point", "thousands_sep", "date_format", "time_format", "datetime_format"):
            val = getattr(self, name)
            if not isinstance(val, str):
                raise TypeError(f"Culture.{name} must be a str, got {fmt_value(val)}")
        if not self.decimal_point:
            raise ValueError("Culture.decimal_point must be a non-empty str")

    @classmethod
    def invariant(cls) -> "Culture":
        """Culture-independent conventions: '.' decimal point, no grouping, month/day/year dates."""
        return cls()

    @classmethod
    def from_name(cls, name: str) -> "Culture":
        """
        Create a Culture from a known culture name (case-insensitive, '-' or '_' separated).

        Raises:
            ValueError: If the culture name is unknown.
        """
        if not isinstance(name, str):
            raise TypeError(f"name must be a str, got {fmt_value(name)}")

        key = name.strip().replace("_", "-").lower()
        if key in ("", "invariant"):
            return cls.invariant()
        if key not in cls._NAMED:
            known = ", ".join(sorted(cls._NAMED))
            raise ValueError(f"Unknown culture name {fmt_value(name)}, expected one of: {known}")

        return replace(cls(**cls._NAMED[key]), name=name)

    @staticmethod
    def supports(value: Any) -> bool:
        """True if value has a culture-dependent text representation."""
        if isinstance(value, bool):
            return False
        return isinstance(value, (int, float, Decimal, dt.date, dt.time))

    def format(self, value: Any) -> str:
        """
        Format a number or a date/time value according to this culture.

        Raises:
            TypeError: If value is not supported, see Culture.supports().
        """
        if not self.supports(value):
            raise TypeError(f"Culture cannot format {fmt_value(value)}")

        # datetime is a subclass of date, check it first
        if isinstance(value, dt.datetime):
            return value.strftime(self.datetime_format)
        if isinstance(value, dt.date):
            return value.strftime(self.date_format)
        if isinstance(value, dt.time):
            return value.strftime(self.time_format)

        as_str = format(value, "," if self.thousands_sep else "")
        return as_str.translate(str.maketrans({",": self.thousands_sep, ".": self.decimal_point}))
