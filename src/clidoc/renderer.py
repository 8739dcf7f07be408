"""Documentation renderers.

Three renderers share one view (clidoc.view.DocView) of the command tree:

- MarkdownRenderer: narrative Markdown document
- TabularMarkdownRenderer: compact Markdown with flag tables
- ManPageRenderer: narrative Markdown converted to troff

A renderer owns its template text. To render with a different template,
construct another instance:

    >>> renderer = MarkdownRenderer(template="# {{ name }}\\n")
    >>> renderer.render(Command(name="greet"))
    '# greet\\n'

Philosophy:
- Renderers never mutate the command tree
- Same tree in, same bytes out
- Template failures are raised as TemplateRenderError, never swallowed
"""

import logging
import re

from jinja2 import DictLoader, Environment, StrictUndefined, TemplateError, TemplateSyntaxError

from .exceptions import TemplateRenderError
from .models import Command
from .roff import markdown_to_roff
from .templates import MARKDOWN_DOC_TEMPLATE, MARKDOWN_TABULAR_DOC_TEMPLATE
from .text import prepare_multiline_string
from .view import DocView, build_view

logger = logging.getLogger(__name__)

DEFAULT_MAN_SECTION = 1
DEFAULT_APP_PATH = "app"


class TemplateRenderer:
    """Renders a DocView through a Jinja2 template."""

    TEMPLATE_NAME = "cli"
    DEFAULT_TEMPLATE = ""

    def __init__(self, template: str | None = None):
        """Initialize renderer.

        Args:
            template: Jinja2 template text (default: the class template)
        """
        self.template = self.DEFAULT_TEMPLATE if template is None else template

    def _environment(self) -> Environment:
        env = Environment(
            loader=DictLoader({self.TEMPLATE_NAME: self.template}),
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        env.filters["oneline"] = prepare_multiline_string
        return env

    def render_view(self, view: DocView) -> str:
        """Render a prepared view.

        Raises:
            TemplateRenderError: If the template fails to parse or evaluate
        """
        try:
            template = self._environment().get_template(self.TEMPLATE_NAME)
        except TemplateSyntaxError as e:
            raise TemplateRenderError(
                f"template: {e.name or self.TEMPLATE_NAME}:{e.lineno}: {e.message}"
            ) from e

        try:
            return template.render(**vars(view))
        except TemplateError as e:
            raise TemplateRenderError(f"template: {self.TEMPLATE_NAME}: {e}") from e


class MarkdownRenderer(TemplateRenderer):
    """Renders the narrative Markdown document."""

    DEFAULT_TEMPLATE = MARKDOWN_DOC_TEMPLATE

    def render(self, root: Command, section: int = 0) -> str:
        """Render narrative Markdown for an application.

        Args:
            root: Root command of the application
            section: Man page section; when > 0 a "% name section" title
                block is emitted

        Returns:
            Markdown document

        Raises:
            TemplateRenderError: If template evaluation fails
        """
        logger.debug(f"Rendering markdown for {root.name!r}")
        return self.render_view(build_view(root, section=section))


class TabularMarkdownRenderer(TemplateRenderer):
    """Renders the tabular Markdown document."""

    DEFAULT_TEMPLATE = MARKDOWN_TABULAR_DOC_TEMPLATE

    def render(self, root: Command, app_path: str = "") -> str:
        """Render tabular Markdown for an application.

        Args:
            root: Root command of the application
            app_path: Display name used in the heading and usage lines
                (default: the root command name, then "app")

        Returns:
            Markdown document ending with exactly one newline
        """
        logger.debug(f"Rendering tabular markdown for {root.name!r}")
        view = build_view(root, app_path=app_path or root.name or DEFAULT_APP_PATH)
        return prettify(self.render_view(view))


class ManPageRenderer:
    """Renders a man page from the narrative Markdown document."""

    def __init__(self, markdown_renderer: MarkdownRenderer | None = None):
        self.markdown_renderer = markdown_renderer or MarkdownRenderer()

    def render(self, root: Command, section: int = DEFAULT_MAN_SECTION) -> str:
        """Render a troff man page.

        Args:
            root: Root command of the application
            section: Man page section number (must be >= 1)

        Returns:
            troff document

        Raises:
            ValueError: If section is below 1
            TemplateRenderError: If the markdown template fails
            ConversionError: If the markdown cannot be converted
        """
        if section < 1:
            raise ValueError(f"Man page section must be >= 1, got {section}")

        markdown = self.markdown_renderer.render(root, section=section)
        return markdown_to_roff(markdown)


def prettify(text: str) -> str:
    """Collapse blank-line runs and trim, leaving one trailing newline."""
    text = re.sub(r"\n{2,}", "\n\n", text)
    return text.strip(" \n") + "\n"


def to_markdown(root: Command) -> str:
    """Render narrative Markdown with the default template."""
    return MarkdownRenderer().render(root)


def to_tabular_markdown(root: Command, app_path: str = "") -> str:
    """Render tabular Markdown with the default template."""
    return TabularMarkdownRenderer().render(root, app_path)


def to_man(root: Command) -> str:
    """Render a man page in the default section."""
    return ManPageRenderer().render(root)


def to_man_with_section(root: Command, section: int) -> str:
    """Render a man page in the given section."""
    return ManPageRenderer().render(root, section)


__all__ = [
    "DEFAULT_APP_PATH",
    "DEFAULT_MAN_SECTION",
    "ManPageRenderer",
    "MarkdownRenderer",
    "TabularMarkdownRenderer",
    "TemplateRenderer",
    "prettify",
    "to_man",
    "to_man_with_section",
    "to_markdown",
    "to_tabular_markdown",
]
