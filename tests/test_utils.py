#
# ObjPrinter - Utils Tests
#

# Standard library -----------------------------------------------------------------------------------------------------

# Third party ----------------------------------------------------------------------------------------------------------
import pytest

# Local ----------------------------------------------------------------------------------------------------------------
from objprinter.utils import class_name, fmt_type, fmt_value


# Tests ----------------------------------------------------------------------------------------------------------------


class TestClassName:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(int, "int", id="builtin-class"),
            pytest.param(10, "int", id="builtin-instance"),
            pytest.param("abc", "str", id="builtin-str"),
            pytest.param(3.14, "float", id="builtin-float"),
            pytest.param(True, "bool", id="builtin-bool"),
            pytest.param(None, "NoneType", id="none"),
        ],
    )
    def test_builtin_names(self, obj, expected):
        """Return builtin class names without module."""
        assert class_name(obj) == expected

    def test_builtin_not_qualified(self):
        """Never prefix builtins with module name."""
        assert class_name(int, fully_qualified=True) == "int"

    @pytest.mark.parametrize(
        "as_class, fully_qualified",
        [
            pytest.param(True, True, id="class-fq"),
            pytest.param(False, True, id="instance-fq"),
            pytest.param(True, False, id="class-no-fq"),
            pytest.param(False, False, id="instance-no-fq"),
        ],
    )
    def test_user_class_fq_toggle(self, as_class, fully_qualified):
        """Return user class name respecting fully_qualified flag for class and instance."""

        class Custom:
            pass

        target = Custom if as_class else Custom()
        expected = f"{Custom.__module__}.{Custom.__name__}" if fully_qualified else Custom.__name__
        assert class_name(target, fully_qualified=fully_qualified) == expected

    def test_inherited_class_name(self):
        """Return correct name for subclass and instance."""

        class Base:
            pass

        class Sub(Base):
            pass

        assert class_name(Sub) == "Sub"
        assert class_name(Sub()) == "Sub"
        assert class_name(Sub, fully_qualified=True) == f"{Sub.__module__}.Sub"


class TestFmtType:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(42, "<type: int>", id="instance"),
            pytest.param(int, "<type: int>", id="class"),
            pytest.param(None, "<type: NoneType>", id="none"),
        ],
    )
    def test_fmt_type(self, obj, expected):
        assert fmt_type(obj) == expected


class TestFmtValue:
    @pytest.mark.parametrize(
        "obj, expected",
        [
            pytest.param(42, "<int: 42>", id="int"),
            pytest.param("a", "<str: 'a'>", id="str"),
            pytest.param(int, "<type: <class 'int'>>", id="class"),
        ],
    )
    def test_fmt_value(self, obj, expected):
        assert fmt_value(obj) == expected

    def test_truncate(self):
        """Truncate long reprs with ellipsis."""
        assert fmt_value("hello world", max_repr=8) == "<str: 'hell...>"
        assert len(fmt_value("x" * 500)) < 140

    def test_broken_repr(self):
        """Do not raise on failing __repr__."""

        class Broken:
            def __repr__(self):
                raise RuntimeError("no repr")

        assert fmt_value(Broken()) == "<Broken: <Broken object (repr failed: RuntimeError)>>"
