"""CLI entry point for clidoc.

Commands:
    clidoc markdown              # Narrative Markdown to stdout
    clidoc tabular               # Tabular Markdown to stdout
    clidoc man --section 8       # troff man page
    clidoc inject README.md      # Replace the generated block in a file
    clidoc check README.md       # Exit 1 if the generated block is stale
    clidoc check --diff README.md  # ...and show what inject would change

The documented application is given with --app module:attribute (a Click
command) or --definition cli.yaml (a YAML definition).
"""

import difflib
import logging
import sys
from dataclasses import dataclass
from pathlib import Path

import click
from rich.console import Console
from rich.syntax import Syntax

from clidoc import __version__
from clidoc.click_adapter import from_click, load_click_object
from clidoc.config import ConfigError, ConfigManager, DocsConfig
from clidoc.exceptions import ClidocError, TargetFileNotFoundError
from clidoc.file_lock_manager import LockTimeoutError
from clidoc.loader import load_definition
from clidoc.models import Command
from clidoc.patcher import build_block, extract_between_tags, read_text, replace_between_tags
from clidoc.renderer import ManPageRenderer, MarkdownRenderer, TabularMarkdownRenderer

logger = logging.getLogger(__name__)


@dataclass
class CliState:
    """Options shared by all subcommands."""

    app_spec: str | None
    definition: str | None
    config: DocsConfig

    def load_root(self) -> Command:
        """Load the documented command tree.

        Raises:
            click.UsageError: If neither or both sources are given
            DefinitionError: If the source cannot be loaded
        """
        if bool(self.app_spec) == bool(self.definition):
            raise click.UsageError("Specify exactly one of --app or --definition")

        logger.debug(f"Loading command tree from {self.app_spec or self.definition}")
        if self.app_spec:
            return from_click(load_click_object(self.app_spec))
        return load_definition(self.definition)


def _fail(message: str) -> None:
    click.echo(f"Error: {message}", err=True)
    sys.exit(1)


def _write_output(document: str, output: str | None) -> None:
    if output is None or output == "-":
        click.echo(document, nl=False)
        return

    path = Path(output)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(document, encoding="utf-8")
    except OSError as e:
        _fail(f"Cannot write {path}: {e}")
    click.echo(f"✓ Wrote {path}", err=True)


def _print_diff(current: str, expected: str, file: str) -> None:
    diff = "".join(
        difflib.unified_diff(
            current.splitlines(keepends=True),
            expected.splitlines(keepends=True),
            fromfile=f"{file} (current)",
            tofile=f"{file} (generated)",
        )
    )
    Console(stderr=True).print(Syntax(diff, "diff", theme="ansi_dark", background_color="default"))


def _resolve_tags(start_tag: str | None, end_tag: str | None, config: DocsConfig) -> tuple[str, str]:
    if bool(start_tag) != bool(end_tag):
        raise click.UsageError("--start-tag and --end-tag must be given together")
    if start_tag and end_tag:
        return start_tag, end_tag
    return config.tags


output_option = click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    help="Write to FILE instead of stdout",
)
app_path_option = click.option(
    "--app-path",
    help="Display name used in headings and usage lines (default: application name)",
)
start_tag_option = click.option(
    "--start-tag", help="Opening delimiter line (default: <!--GENERATED:CLI_DOCS-->)"
)
end_tag_option = click.option(
    "--end-tag", help="Closing delimiter line (default: <!--/GENERATED:CLI_DOCS-->)"
)


@click.group(context_settings={"help_option_names": ["--help", "-h"]})
@click.option("--app", "app_spec", metavar="MODULE:ATTR", help="Click command to document")
@click.option(
    "--definition",
    type=click.Path(dir_okay=False),
    help="YAML file describing the command tree",
)
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="Config file path")
@click.option("--verbose", "-v", is_flag=True, help="Verbose output")
@click.version_option(version=__version__)
@click.pass_context
def main(
    ctx: click.Context,
    app_spec: str | None,
    definition: str | None,
    config_path: str | None,
    verbose: bool,
) -> None:
    """clidoc - render CLI documentation as Markdown or man pages.

    \b
    Examples:
        clidoc --app mypkg.cli:main markdown -o docs/cli.md
        clidoc --definition cli.yaml man --section 1 -o greet.1
        clidoc --app mypkg.cli:main inject README.md

    \b
    CONFIGURATION:
        .clidoc.toml or [tool.clidoc] in pyproject.toml
        Keys: app_path, section, start_tag, end_tag, annotate
    """
    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")

    try:
        config = ConfigManager.load_config(config_path)
    except ConfigError as e:
        _fail(str(e))

    ctx.obj = CliState(app_spec=app_spec, definition=definition, config=config)


@main.command()
@output_option
@click.pass_obj
def markdown(state: CliState, output: str | None) -> None:
    """Render narrative Markdown documentation."""
    try:
        document = MarkdownRenderer().render(state.load_root())
    except ClidocError as e:
        _fail(str(e))

    _write_output(document, output)


@main.command()
@app_path_option
@output_option
@click.pass_obj
def tabular(state: CliState, app_path: str | None, output: str | None) -> None:
    """Render tabular Markdown documentation."""
    try:
        document = TabularMarkdownRenderer().render(
            state.load_root(), app_path or state.config.app_path
        )
    except ClidocError as e:
        _fail(str(e))

    _write_output(document, output)


@main.command()
@click.option(
    "--section",
    type=click.IntRange(min=1),
    help="Man page section number (default: 1)",
)
@output_option
@click.pass_obj
def man(state: CliState, section: int | None, output: str | None) -> None:
    """Render a troff man page."""
    try:
        document = ManPageRenderer().render(state.load_root(), section or state.config.section)
    except ClidocError as e:
        _fail(str(e))

    _write_output(document, output)


@main.command()
@click.argument("file", type=click.Path(dir_okay=False))
@app_path_option
@start_tag_option
@end_tag_option
@click.option(
    "--annotate/--no-annotate",
    default=None,
    help="Insert the 'generated by' comment (default: on)",
)
@click.pass_obj
def inject(
    state: CliState,
    file: str,
    app_path: str | None,
    start_tag: str | None,
    end_tag: str | None,
    annotate: bool | None,
) -> None:
    """Replace the generated block in FILE with tabular Markdown."""
    tags = _resolve_tags(start_tag, end_tag, state.config)
    if annotate is None:
        annotate = state.config.annotate

    try:
        document = TabularMarkdownRenderer().render(
            state.load_root(), app_path or state.config.app_path
        )
        changed = replace_between_tags(file, document, *tags, annotate=annotate)
    except TargetFileNotFoundError:
        _fail(f"File not found: {file}")
    except (ClidocError, LockTimeoutError) as e:
        _fail(str(e))
    except UnicodeDecodeError as e:
        _fail(f"{file} is not valid UTF-8: {e.reason} at byte {e.start}")
    except OSError as e:
        _fail(f"Cannot update {file}: {e}")

    if changed:
        click.echo(f"✓ Updated {file}")
    else:
        click.echo(f"✓ {file} already up to date")


@main.command()
@click.argument("file", type=click.Path(dir_okay=False))
@app_path_option
@start_tag_option
@end_tag_option
@click.option(
    "--annotate/--no-annotate",
    default=None,
    help="Expect the 'generated by' comment (default: on)",
)
@click.option("--diff", "show_diff", is_flag=True, help="Show what inject would change")
@click.pass_obj
def check(
    state: CliState,
    file: str,
    app_path: str | None,
    start_tag: str | None,
    end_tag: str | None,
    annotate: bool | None,
    show_diff: bool,
) -> None:
    """Exit with status 1 if the generated block in FILE is out of date."""
    tags = _resolve_tags(start_tag, end_tag, state.config)
    if annotate is None:
        annotate = state.config.annotate

    try:
        document = TabularMarkdownRenderer().render(
            state.load_root(), app_path or state.config.app_path
        )
        current = extract_between_tags(read_text(Path(file)), *tags, source=file)
    except FileNotFoundError:
        _fail(f"File not found: {file}")
    except ClidocError as e:
        _fail(str(e))
    except UnicodeDecodeError as e:
        _fail(f"{file} is not valid UTF-8: {e.reason} at byte {e.start}")
    except OSError as e:
        _fail(f"Cannot read {file}: {e}")

    expected = build_block(document, annotate)
    if current != expected:
        if show_diff:
            _print_diff(current, expected, file)
        click.echo(f"✗ Documentation in {file} is out of date. Run: clidoc inject {file}", err=True)
        sys.exit(1)

    click.echo(f"✓ {file} is up to date")


if __name__ == "__main__":
    main()
