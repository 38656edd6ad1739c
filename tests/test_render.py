"""Tests for display and debug rendering of environment chains."""

from py_scopes.environment import Environment
from py_scopes.render import render_debug, render_display


class TestDisplay:
    """Verify the human-readable brace-block rendering."""

    def test_empty_root(self) -> None:
        """An empty root should render as an empty block."""
        assert str(Environment()) == "{\n}"

    def test_root_bindings(self) -> None:
        """Each local binding should appear as an indented line."""
        env = Environment({1: "a", 2: "b"})
        assert str(env) == "{\n  1 = a,\n  2 = b,\n}"

    def test_parent_nested_and_indented(self) -> None:
        """The parent block should be nested one indent deeper."""
        env = Environment({1: "a"}).extend()
        env.set(4, "d")
        assert str(env) == "{\n  4 = d,\n  parent = {\n    1 = a,\n  }\n}"

    def test_three_levels(self) -> None:
        """Indentation should accumulate per level."""
        env = Environment({1: "a"}).extend().extend()
        expected = "{\n  parent = {\n    parent = {\n      1 = a,\n    }\n  }\n}"
        assert str(env) == expected

    def test_no_levels(self) -> None:
        """Rendering an empty level list should give an empty block."""
        assert render_display([]) == "{\n}"


class TestDebug:
    """Verify the structural rendering."""

    def test_root(self) -> None:
        """A root should render its mapping positionally."""
        assert repr(Environment({1: "a"})) == "Environment({1: 'a'})"

    def test_with_parent(self) -> None:
        """A child should label its local mapping and parent."""
        env = Environment({1: "a"}).extend()
        env.set(4, "d")
        assert repr(env) == "Environment(local={4: 'd'}, parent=Environment({1: 'a'}))"

    def test_subclass_name(self) -> None:
        """The rendering should use the concrete class name."""

        class Scope(Environment[str, int]):
            """A named subclass."""

        assert repr(Scope({"x": 1}).extend()) == "Scope(local={}, parent=Scope({'x': 1}))"

    def test_no_levels(self) -> None:
        """Rendering an empty level list should give an empty mapping."""
        assert render_debug([], name="Env") == "Env({})"
