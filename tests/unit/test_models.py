"""Unit tests for command tree models."""

import pytest

from clidoc.models import Author, Command, Flag, FlagType


class TestFlag:
    """Test Flag construction and display helpers."""

    def test_name_string_is_wrapped(self):
        """A single name string becomes a one-element list."""
        flag = Flag(names="verbose")

        assert flag.names == ["verbose"]
        assert flag.name == "verbose"

    def test_requires_a_name(self):
        """Flags without a non-empty name are rejected."""
        with pytest.raises(ValueError, match="at least one non-empty name"):
            Flag(names=["", "  "])

    def test_type_string_is_coerced(self):
        """Type given as a string becomes a FlagType."""
        assert Flag(names=["count"], type="int").type is FlagType.INT

    def test_unknown_type_rejected(self):
        """Unknown type strings are rejected."""
        with pytest.raises(ValueError):
            Flag(names=["x"], type="complex")

    def test_bool_flag_takes_no_value(self):
        """Only boolean flags are given without a value."""
        assert not Flag(names=["force"], type=FlagType.BOOL).takes_value
        assert Flag(names=["name"]).takes_value
        assert Flag(names=["tags"], type=FlagType.STRING_LIST).takes_value

    @pytest.mark.parametrize(
        "flag,expected",
        [
            (Flag(names=["n"], default="world"), "world"),
            (Flag(names=["n"]), ""),
            (Flag(names=["n"], type=FlagType.INT, default=3), "3"),
            (Flag(names=["n"], type=FlagType.STRING_LIST, default=["a", "b"]), "a, b"),
            (Flag(names=["n"], type=FlagType.BOOL, default=True), "true"),
            (Flag(names=["n"], type=FlagType.BOOL), "false"),
            (Flag(names=["n"], default="x", default_text="computed"), "computed"),
        ],
    )
    def test_default_display(self, flag, expected):
        """Default values are shown as plain strings."""
        assert flag.default_display() == expected

    def test_list_types(self):
        """List flag types report is_list."""
        assert FlagType.INT_LIST.is_list
        assert not FlagType.PATH.is_list


class TestCommand:
    """Test Command helpers."""

    def test_names_include_aliases(self):
        """Names start with the command name."""
        assert Command(name="up", aliases=["u"]).names() == ["up", "u"]

    def test_visible_entries_keep_order(self, full_app):
        """Hidden flags and commands are dropped, order is kept."""
        assert [f.name for f in full_app.visible_flags()] == [
            "config",
            "verbose",
            "token",
            "legacy-auth",
        ]
        assert [c.name for c in full_app.visible_commands()] == ["up", "down"]


class TestAuthor:
    """Test author formatting."""

    def test_with_email(self):
        """Email is shown in angle brackets."""
        assert str(Author(name="Ada", email="ada@example.com")) == "Ada <ada@example.com>"

    def test_without_email(self):
        """Name alone is shown as is."""
        assert str(Author(name="Grace")) == "Grace"
