"""Unit tests for the render view.

Tests cover:
- Hidden flags and commands (with their subtrees) never reaching the view
- Declaration order and depth-first command order
- Category grouping
- Flag display and synopsis formatting
- Deep trees without recursion
"""

from clidoc.models import Command, Flag, FlagType
from clidoc.view import build_view, flag_display, flag_synopsis, group_flags


class TestHiddenEntries:
    """Test that hidden entries are excluded."""

    def test_hidden_flags_excluded(self, full_app):
        """Hidden flags are not in any flag list."""
        view = build_view(full_app)

        names = [flag.name for flag in view.flags]
        assert "--internal" not in names
        up = view.all_commands[0]
        assert "--debug-token" not in [flag.name for flag in up.flags]

    def test_hidden_command_subtree_excluded(self, full_app):
        """A hidden command hides its children too."""
        view = build_view(full_app)

        full_names = [command.full_name for command in view.all_commands]
        assert "secret" not in full_names
        assert "secret rotate" not in full_names

    def test_all_flags_hidden_leaves_no_groups(self):
        """A command with only hidden flags has no flag groups."""
        root = Command(name="app", flags=[Flag(names=["x"], hidden=True)])

        view = build_view(root)

        assert view.flags == []
        assert view.flag_groups == []
        assert view.synopsis_args == []


class TestOrdering:
    """Test traversal order."""

    def test_depth_first_declaration_order(self, full_app):
        """Commands are listed depth-first in declaration order."""
        view = build_view(full_app)

        assert [(c.full_name, c.level) for c in view.all_commands] == [
            ("up", 0),
            ("up status", 1),
            ("down", 0),
        ]

    def test_nested_commands(self, full_app):
        """Top-level views carry their children."""
        view = build_view(full_app)

        assert [c.name for c in view.commands] == ["up", "down"]
        assert [c.name for c in view.commands[0].commands] == ["status"]

    def test_flags_not_sorted(self):
        """Flags keep declaration order."""
        root = Command(name="app", flags=[Flag(names=["zeta"]), Flag(names=["alpha"])])

        view = build_view(root)

        assert [flag.name for flag in view.flags] == ["--zeta", "--alpha"]

    def test_deep_tree(self):
        """Trees deeper than the recursion limit are walked."""
        root = Command(name="app")
        node = root
        for i in range(3000):
            child = Command(name=f"c{i}")
            node.commands.append(child)
            node = child

        view = build_view(root)

        assert len(view.all_commands) == 3000
        assert view.all_commands[-1].level == 2999


class TestFlagGroups:
    """Test category grouping."""

    def test_uncategorized_first_then_first_appearance(self):
        """Groups follow first appearance, uncategorized first."""
        flags = [
            Flag(names=["a"], category="Net"),
            Flag(names=["b"]),
            Flag(names=["c"], category="Auth"),
            Flag(names=["d"], category="Net"),
        ]

        groups = group_flags(flags)

        assert [g.category for g in groups] == ["", "Net", "Auth"]
        assert [f.name for f in groups[1].flags] == ["-a", "-d"]

    def test_view_flags_follow_group_order(self, full_app):
        """The flat flag list follows the grouped order."""
        view = build_view(full_app)

        assert [flag.name for flag in view.flags] == [
            "--config",
            "--verbose",
            "--legacy-auth",
            "--token",
        ]


class TestFlagFormatting:
    """Test flag display strings."""

    def test_value_flag_with_default(self):
        """Value flags show an empty value and their default."""
        flag = Flag(names=["name", "n"], default="world", usage="who to greet")

        assert flag_display(flag) == '**--name, -n**="": who to greet (default: world)'

    def test_bool_flag(self):
        """Boolean flags show no value and no default."""
        flag = Flag(names=["verbose", "v"], type=FlagType.BOOL, usage="Verbose output")

        assert flag_display(flag) == "**--verbose, -v**: Verbose output"

    def test_markers(self):
        """Environment, required and deprecated markers are appended in order."""
        flag = Flag(
            names=["token"],
            usage="API token",
            env_vars=["A", "B"],
            required=True,
            deprecated=True,
        )

        assert flag_display(flag) == '**--token**="": API token [$A, $B] (required) (deprecated)'

    def test_synopsis(self):
        """Synopsis entries list every name."""
        assert flag_synopsis(Flag(names=["name", "n"])) == "[--name|-n]=[value]"
        assert flag_synopsis(Flag(names=["v"], type=FlagType.BOOL)) == "[-v]"


class TestRootFields:
    """Test root-level view fields."""

    def test_app_path_defaults_to_root_name(self, greet_app):
        """Display name falls back to the root name."""
        assert build_view(greet_app).app_path == "greet"
        assert build_view(greet_app, app_path="./greet").app_path == "./greet"

    def test_multiline_usage_collapsed(self, greet_app):
        """Root usage is joined onto one line."""
        greet_app.usage = "say\nhello to\nsomeone."

        assert build_view(greet_app).usage == "say hello to someone."

    def test_authors_formatted(self, full_app):
        """Authors are rendered as strings."""
        view = build_view(full_app)

        assert view.authors == ["Ada Lovelace <ada@example.com>", "Grace"]

    def test_tree_not_mutated(self, full_app):
        """Building a view leaves the tree untouched."""
        before = repr(full_app)

        build_view(full_app)

        assert repr(full_app) == before
