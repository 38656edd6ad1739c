"""End-to-end scenarios across a whole chain.

These walk through the life of a chain the way an interpreter would:
seed a global scope, open nested scopes, shadow and define names, then
inspect the result.
"""

from py_scopes import Environment, Precedence

EXPECTED_LEVELS = 3
DISTINCT_KEYS = 5
STORED_ENTRIES = 6


def _nested_scopes() -> Environment[int, str]:
    """Seed globals 1..3, then two nested scopes binding 4 and 5."""
    env = Environment.from_pairs([(1, "a"), (2, "b"), (3, "c")])
    env = env.extend()
    env.set(4, "d")
    env = env.extend()
    assert env.define(5, "e") is None
    assert env.set(4, "f") is None
    return env


class TestNestedScopes:
    """Verify a three-level chain built by extend, set, and define."""

    def test_lookup(self) -> None:
        """The innermost binding of 4 should win; globals stay visible."""
        env = _nested_scopes()
        assert env.get(4) == "f"
        assert env.get(1) == "a"
        assert env.get(5) == "e"

    def test_ancestor_untouched(self) -> None:
        """Shadowing 4 should leave the middle scope's binding intact."""
        env = _nested_scopes()
        middle = env.get_parent()
        assert middle is not None
        assert middle.get_locals() == {4: "d"}

    def test_counts(self) -> None:
        """Five distinct names are visible across six stored entries."""
        env = _nested_scopes()
        assert len(env) == DISTINCT_KEYS
        assert env.size() == STORED_ENTRIES
        assert env.depth == EXPECTED_LEVELS

    def test_flatten(self) -> None:
        """Flattening should keep one binding per name."""
        env = _nested_scopes()
        flat = env.flatten()
        assert flat.size() == DISTINCT_KEYS
        assert flat == Environment({1: "a", 2: "b", 3: "c", 4: "f", 5: "e"})
        assert env.flatten(Precedence.OUTERMOST).get(4) == "d"

    def test_stack(self) -> None:
        """The shadowed name should stack innermost first."""
        assert _nested_scopes().stack()[4] == ["f", "d"]

    def test_define_after_shadow_rejected(self) -> None:
        """A name visible in any scope cannot be defined again."""
        env = _nested_scopes()
        assert env.define(1, "z") == (1, "z")

    def test_display(self) -> None:
        """The display form should nest each parent block."""
        expected = (
            "{\n"
            "  5 = e,\n"
            "  4 = f,\n"
            "  parent = {\n"
            "    4 = d,\n"
            "    parent = {\n"
            "      1 = a,\n"
            "      2 = b,\n"
            "      3 = c,\n"
            "    }\n"
            "  }\n"
            "}"
        )
        assert str(_nested_scopes()) == expected


class TestDifference:
    """Verify the difference of two sibling scopes."""

    def test_difference(self) -> None:
        """Only keys missing from the other chain should survive."""
        env1 = Environment.from_pairs([("a", 8), ("b", 9), ("c", 10)])
        env2 = Environment.from_pairs([("a", 9), ("d", 11), ("b", 4)])
        assert env1.difference(env2) == Environment.from_pairs([("c", 10)])
