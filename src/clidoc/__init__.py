"""clidoc - documentation renderer for command-line applications

Philosophy:
- Ruthless simplicity
- Brick architecture (self-contained modules)
- Same command tree in, same bytes out
- Fail fast with the offending file, tag or line in the message

clidoc renders narrative Markdown, tabular Markdown and man pages from a
command tree, and injects rendered documentation between delimiter lines
of an existing file (typically a README).
"""

from clidoc.click_adapter import from_click
from clidoc.exceptions import (
    ClidocError,
    ConversionError,
    DefinitionError,
    TagNotFoundError,
    TargetFileNotFoundError,
    TemplateRenderError,
)
from clidoc.loader import load_definition
from clidoc.models import Author, Command, Flag, FlagType
from clidoc.patcher import (
    extract_between_tags,
    replace_between_tags,
    to_tabular_file_between_tags,
)
from clidoc.renderer import (
    ManPageRenderer,
    MarkdownRenderer,
    TabularMarkdownRenderer,
    to_man,
    to_man_with_section,
    to_markdown,
    to_tabular_markdown,
)

__version__ = "0.1.0"
__all__ = [
    "Author",
    "ClidocError",
    "Command",
    "ConversionError",
    "DefinitionError",
    "Flag",
    "FlagType",
    "ManPageRenderer",
    "MarkdownRenderer",
    "TabularMarkdownRenderer",
    "TagNotFoundError",
    "TargetFileNotFoundError",
    "TemplateRenderError",
    "__version__",
    "extract_between_tags",
    "from_click",
    "load_definition",
    "replace_between_tags",
    "to_man",
    "to_man_with_section",
    "to_markdown",
    "to_tabular_file_between_tags",
    "to_tabular_markdown",
]
