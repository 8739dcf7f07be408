"""Free-text normalization for Markdown embedding.

Usage text written for a terminal is reshaped so it can be dropped into a
Markdown document without breaking it:

- A single line becomes a quote (">line")
- Several lines become a block indented by four spaces, so embedded Markdown
  (including ``` fences) stays inside one continuous code block
- Empty text produces nothing at all

All functions here are pure string transformations.
"""

from .models import Command

INDENT_WIDTH = 4
QUOTE_MARKER = ">"

# Characters removed from the end of single-line table text
_TRAILING_CHARS = ".\r\n\t"


def indent_block(text: str, indent: int = INDENT_WIDTH) -> str:
    """Prefix every line of text with `indent` spaces.

    Lines are split on "\\n" and each one, blank lines included, is
    terminated with "\\n". Fence lines receive the same prefix as their
    content so a fenced block stays matched.

    Args:
        text: Text to indent
        indent: Number of spaces to prefix

    Returns:
        Indented block, or "" for empty text

    Example:
        >>> indent_block("a\\n\\nb")
        '    a\\n    \\n    b\\n'
    """
    if not text:
        return ""

    prefix = " " * indent
    return "".join(f"{prefix}{line}\n" for line in text.split("\n"))


def normalize_usage_text(text: str, indent: int = INDENT_WIDTH) -> str:
    """Normalize free-form usage text for Markdown.

    Leading and trailing newlines are dropped first. Text still containing
    a newline is indented with indent_block(); a single line gets the quote
    marker instead.

    Args:
        text: Raw usage text
        indent: Indentation width for multi-line text

    Returns:
        Normalized block ending with "\\n", or "" for empty text
    """
    if not text:
        return ""

    trimmed = text.strip("\n")
    if "\n" in trimmed:
        return indent_block(trimmed, indent)

    return f"{QUOTE_MARKER}{trimmed}\n"


def prepare_usage_text(command: Command, indent: int = INDENT_WIDTH) -> str:
    """Return the command's usage text normalized for Markdown."""
    return normalize_usage_text(command.usage_text, indent)


def prepare_usage(command: Command, usage_text: str) -> str:
    """Return the command's one-line usage followed by its separator.

    A second newline is added only when a usage text block follows.
    """
    if not command.usage:
        return ""

    usage = command.usage + "\n"
    if usage_text:
        usage += "\n"

    return usage


def collapse_lines(text: str) -> str:
    """Join the lines of text with spaces, keeping the final punctuation."""
    return text.replace("\n", " ").strip()


def prepare_multiline_string(text: str) -> str:
    """Collapse text to one line for table cells and headings."""
    return collapse_lines(text).rstrip(_TRAILING_CHARS)


def split_lines(text: str) -> list[str]:
    """Return the non-empty lines of text."""
    return [line for line in text.split("\n") if line]


def format_flag_name(name: str) -> str:
    """Return a flag name with its dash prefix ("--name" or "-n")."""
    name = name.strip()
    if len(name) > 1:
        return f"--{name}"
    return f"-{name}"


__all__ = [
    "INDENT_WIDTH",
    "QUOTE_MARKER",
    "collapse_lines",
    "format_flag_name",
    "indent_block",
    "normalize_usage_text",
    "prepare_multiline_string",
    "prepare_usage",
    "prepare_usage_text",
    "split_lines",
]
