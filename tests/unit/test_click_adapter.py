"""Unit tests for building command trees from Click applications."""

import click
import pytest

from clidoc.click_adapter import from_click, load_click_object
from clidoc.exceptions import DefinitionError
from clidoc.models import FlagType
from clidoc.renderer import to_markdown, to_tabular_markdown

# ============================================================================
# SAMPLE CLICK APPLICATION
# ============================================================================


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
@click.option(
    "--profile", default="default", envvar="FILES_PROFILE", show_default=True, help="Profile name"
)
@click.option("--token", default="s3cret", show_default=False, help="API token")
def files(verbose, profile, token):
    """Manage files.

    Copies, moves and lists files
    across machines.
    """


@files.command(epilog="Example:\n  files copy a.txt b.txt")
@click.argument("src")
@click.argument("dest", required=False)
@click.option("--count", "-c", type=int, default=1, show_default=True, help="Number of copies")
@click.option("--tag", multiple=True, help="Tag to apply")
@click.option("--retries", type=float, default=0.5, show_default="half a try")
@click.option("--secret-key", hidden=True)
def copy(src, dest, count, tag, retries, secret_key):
    """Copy a file."""


@files.command(short_help="List files")
@click.argument("paths", nargs=-1)
@click.option("-q", "--quiet", count=True, help="Less output")
@click.option("--out", type=click.Path(), required=True, help="Output file")
def zlist(paths, quiet, out):
    """List files in a long and detailed way."""


@files.group()
def remote():
    """Manage remotes."""


@remote.command()
def add():
    """Add a remote."""


@files.command(hidden=True)
def debug():
    """Internal debugging."""


@click.group(context_settings={"show_default": True})
@click.option("--level", default="info", help="Log level")
def verbose_defaults(level):
    """Show every default."""


@verbose_defaults.command()
@click.option("--retries", type=int, default=3, help="Retry count")
@click.option("--key", default="k", show_default=False, help="Signing key")
def sync(retries, key):
    """Sync things."""


# ============================================================================
# TESTS
# ============================================================================


class TestFromClick:
    """Test Click command tree conversion."""

    @pytest.fixture
    def root(self):
        return from_click(files)

    def test_root_name_and_help(self, root):
        """First help line is the usage, the rest the description."""
        assert root.name == "files"
        assert root.usage == "Manage files."
        assert root.description == "Copies, moves and lists files\nacross machines."

    def test_name_override(self):
        """An explicit name replaces the Click name."""
        assert from_click(files, name="f").name == "f"

    def test_registration_order(self, root):
        """Children keep registration order, not alphabetical order."""
        assert [c.name for c in root.commands] == ["copy", "zlist", "remote", "debug"]

    def test_nested_group(self, root):
        """Subgroups are converted with their children."""
        remote_command = root.commands[2]

        assert [c.name for c in remote_command.commands] == ["add"]
        assert remote_command.commands[0].usage == "Add a remote."

    def test_hidden_command(self, root):
        """Hidden Click commands are marked hidden."""
        assert root.commands[3].hidden is True
        assert [c.name for c in root.visible_commands()] == ["copy", "zlist", "remote"]

    def test_bool_flag(self, root):
        """Flags are boolean and list long names first."""
        verbose = root.flags[0]

        assert verbose.names == ["verbose", "v"]
        assert verbose.type is FlagType.BOOL
        assert verbose.usage == "Verbose output"

    def test_env_var_and_default(self, root):
        """Environment variables and defaults are carried over."""
        profile = root.flags[1]

        assert profile.env_vars == ["FILES_PROFILE"]
        assert profile.default == "default"

    def test_unshown_default_not_published(self, root):
        """Defaults Click hides from --help stay out of the documentation."""
        token = root.flags[2]

        assert token.name == "token"
        assert token.default is None
        assert token.default_display() == ""
        assert "s3cret" not in to_tabular_markdown(root)
        assert "s3cret" not in to_markdown(root)

    def test_default_hidden_without_show_default(self, root):
        """Options without show_default follow Click and hide the default."""
        copy_command = root.commands[0]
        by_name = {flag.name: flag for flag in copy_command.flags}

        assert by_name["secret-key"].default is None
        assert by_name["tag"].default is None

    def test_context_show_default(self):
        """context_settings show_default applies to the group and its children."""
        root = from_click(verbose_defaults)
        sync_command = root.commands[0]
        by_name = {flag.name: flag for flag in sync_command.flags}

        assert root.flags[0].default == "info"
        assert by_name["retries"].default == 3
        assert by_name["key"].default is None

    def test_value_types(self, root):
        """Click parameter types map to flag types."""
        copy_command = root.commands[0]
        by_name = {flag.name: flag for flag in copy_command.flags}

        assert by_name["count"].type is FlagType.INT
        assert by_name["count"].default == 1
        assert by_name["tag"].type is FlagType.STRING_LIST
        assert by_name["retries"].type is FlagType.FLOAT
        assert by_name["retries"].default_text == "half a try"
        assert by_name["secret-key"].hidden is True

    def test_count_and_path_options(self, root):
        """Counting options are integers, paths are paths."""
        zlist_command = root.commands[1]
        by_name = {flag.name: flag for flag in zlist_command.flags}

        assert by_name["quiet"].type is FlagType.INT
        assert by_name["out"].type is FlagType.PATH
        assert by_name["out"].required is True

    def test_arguments(self, root):
        """Arguments become the args usage."""
        assert root.commands[0].args_usage == "SRC [DEST]"
        assert root.commands[1].args_usage == "[PATHS...]"

    def test_short_help_and_epilog(self, root):
        """short_help wins for usage; the epilog becomes usage text."""
        assert root.commands[1].usage == "List files"
        assert root.commands[0].usage_text == "Example:\nfiles copy a.txt b.txt"

    def test_renders(self, root):
        """The converted tree renders without hidden entries."""
        result = to_markdown(root)

        assert "## copy\n" in result
        assert "### add\n" in result
        assert "debug" not in result
        assert "secret-key" not in result


class TestLoadClickObject:
    """Test importing Click commands by path."""

    def test_load(self):
        """module:attribute resolves to the command."""
        from clidoc.cli import main

        assert load_click_object("clidoc.cli:main") is main

    def test_missing_colon(self):
        """The attribute part is required."""
        with pytest.raises(DefinitionError, match="module:attribute"):
            load_click_object("clidoc.cli")

    def test_missing_module(self):
        """Import failures are wrapped."""
        with pytest.raises(DefinitionError, match="Cannot import module"):
            load_click_object("no_such_module_xyz:main")

    def test_missing_attribute(self):
        """Missing attributes are reported."""
        with pytest.raises(DefinitionError, match="has no attribute"):
            load_click_object("clidoc.cli:no_such_command")

    def test_not_a_command(self):
        """Objects that are not Click commands are rejected."""
        with pytest.raises(DefinitionError, match="is not a Click command"):
            load_click_object("clidoc.cli:logger")
