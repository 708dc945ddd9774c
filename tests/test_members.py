#
# ObjPrinter - Members Tests
#

# Standard library -----------------------------------------------------------------------------------------------------
import functools
import logging

from dataclasses import dataclass, InitVar
from typing import ClassVar, Optional

# Third-party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from objprinter.errors import ConfigurationError
from objprinter.members import Member, MemberKey, iter_members, resolve_member
from objprinter.printer import print_to_string


# Classes --------------------------------------------------------------------------------------------------------------

class Base:
    kind: str = "base"

    @property
    def label(self) -> str:
        return "L"


class Mixed(Base):
    count: int

    def __init__(self):
        self.count = 1
        self.extra = "e"
        self._hidden = 0
        self.callback = print

    def method(self):
        return self.count


@dataclass
class WithExtras:
    a: int
    registry: ClassVar[int] = 0
    seed: InitVar[int] = 0
    b: Optional[str] = "x"

    def __post_init__(self, seed):
        self._seed = seed


class Slotted:
    __slots__ = ("x", "_y")

    def __init__(self):
        self.x = 1
        self._y = 2


@dataclass
class Animal:
    name: str


@dataclass
class Dog(Animal):
    breed: str = ""


@dataclass
class Car:
    name: str


@dataclass
class Download:
    size: int
    accessed: str


class Cached:
    def __init__(self):
        self.size = 3

    @functools.cached_property
    def area(self) -> int:
        return self.size ** 2


class Unresolvable:
    value: "Missing"

    def __init__(self):
        self.value = 1


# Tests ----------------------------------------------------------------------------------------------------------------

class TestIterMembers:

    def test_order(self):
        """Yield annotations base first, then instance attributes, then properties."""
        members = list(iter_members(Mixed()))
        assert [m.name for m in members] == ["kind", "count", "extra", "label"]
        assert [m.key.owner for m in members] == [Base, Mixed, Mixed, Base]

    def test_declared_types(self):
        members = {m.name: m.declared_type for m in iter_members(Mixed())}
        assert members == {"kind": str, "count": int, "extra": None, "label": str}

    def test_dataclass(self):
        """Skip ClassVar and InitVar, strip Optional from declared types."""
        members = list(iter_members(WithExtras(a=1)))
        assert [(m.name, m.declared_type) for m in members] == [("a", int), ("b", str)]

    def test_slots(self):
        assert [m.name for m in iter_members(Slotted())] == ["x"]

    def test_cached_property(self):
        assert [(m.name, m.declared_type) for m in iter_members(Cached())] == [("size", None), ("area", int)]

    def test_inherited_dataclass_field(self):
        members = list(iter_members(Dog("Rex", "pug")))
        assert [m.key for m in members] == [MemberKey(Animal, "name"), MemberKey(Dog, "breed")]

    def test_unresolvable_hints(self, caplog):
        """Treat unresolvable string annotations as undeclared and log it."""
        caplog.set_level(logging.DEBUG, logger="objprinter.members")
        members = list(iter_members(Unresolvable()))
        assert [(m.name, m.declared_type) for m in members] == [("value", None)]
        assert "Unresolvable" in caplog.text

    def test_read(self):
        member = Member(MemberKey(Slotted, "x"))
        assert member.read(Slotted()) == 1
        assert member.name == "x"


class TestMemberKey:

    def test_str(self):
        assert str(MemberKey(Dog, "breed")) == "Dog.breed"

    def test_equality(self):
        assert MemberKey(Animal, "name") == MemberKey(Animal, "name")
        assert MemberKey(Animal, "name") != MemberKey(Car, "name")
        assert len({MemberKey(Animal, "name"), MemberKey(Animal, "name")}) == 1


class TestResolveMember:

    @pytest.mark.parametrize(
        "selector",
        [
            pytest.param(lambda d: d.name, id="lambda"),
            pytest.param("name", id="str"),
            pytest.param(MemberKey(Animal, "name"), id="key"),
        ],
    )
    def test_selector_kinds(self, selector):
        assert resolve_member(Dog, selector) == MemberKey(Animal, "name")

    def test_inherited_member_matches_base(self):
        """Resolve inherited members to the key of the declaring class."""
        assert resolve_member(Dog, lambda d: d.name) == resolve_member(Animal, lambda a: a.name)
        assert resolve_member(Car, lambda c: c.name) != resolve_member(Animal, lambda a: a.name)

    def test_member_named_accessed(self):
        """Select members whose names could clash with the recording of accesses."""
        assert resolve_member(Download, lambda d: d.accessed) == MemberKey(Download, "accessed")
        out = print_to_string(Download(5, "now"), lambda c: c.select_member(lambda d: d.accessed).with_trim_length(0))
        assert out == "Download\n\tsize = 5\n\taccessed = \n"
        out = print_to_string(Download(5, "now"), lambda c: c.exclude_member(lambda d: d.accessed))
        assert out == "Download\n\tsize = 5\n"

    def test_property(self):
        assert resolve_member(Mixed, lambda m: m.label) == MemberKey(Base, "label")

    def test_undeclared_attribute(self):
        """Accept attributes only assigned on instances of open classes."""
        assert resolve_member(Mixed, lambda m: m.extra) == MemberKey(Mixed, "extra")

    @pytest.mark.parametrize(
        "owner, selector, match",
        [
            pytest.param(Animal, lambda a: a.name.upper(), "direct member access", id="method-call"),
            pytest.param(Animal, lambda a: a.name + "!", "direct member access", id="expression"),
            pytest.param(Dog, lambda d: d.name.breed, "direct member access", id="chained"),
            pytest.param(Animal, lambda a: 42, "direct member access", id="constant"),
            pytest.param(Animal, lambda a: a, "direct member access", id="identity"),
            pytest.param(Animal, lambda: None, "direct member access", id="no-args"),
            pytest.param(Animal, "_private", "public member", id="private"),
            pytest.param(Animal, "not a name", "public member", id="not-identifier"),
            pytest.param(Animal, "age", "has no member", id="missing-dataclass"),
            pytest.param(Slotted, "z", "has no member", id="missing-slots"),
            pytest.param(Mixed, "method", "is a method", id="method"),
            pytest.param(Animal, 123, "str or a callable", id="not-a-selector"),
            pytest.param(Animal, MemberKey(Car, "name"), "does not belong", id="foreign-key"),
            pytest.param("Animal", "name", "must be a type", id="owner-not-type"),
        ],
    )
    def test_invalid(self, owner, selector, match):
        with pytest.raises(ConfigurationError, match=match):
            resolve_member(owner, selector)

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            resolve_member(Animal, "age")
