"""Markdown to troff (man) conversion.

Converts the Markdown subset produced by the narrative template into man(7)
markup. The input must start with a "% name section" title block.

Supported blocks:
- "#" headings (.SH) and deeper headings (.SS)
- Paragraphs (.PP)
- Fenced and four-space indented code (.EX/.EE)
- Block quotes (.RS/.RE)
- "-" and "*" bullet items (.IP)

Inline **bold**, *italic* and `code` spans are converted inside paragraphs,
quotes, list items and headings.
"""

import logging
import re

from .exceptions import ConversionError

logger = logging.getLogger(__name__)

FENCE = "```"
CODE_INDENT = "    "

_HEADING_RE = re.compile(r"^(#{1,6})(?:\s+(.*?))?\s*$")
_BULLET_RE = re.compile(r"^[-*]\s+(.*)$")
_BOLD_RE = re.compile(r"\*\*(.+?)\*\*")
_ITALIC_RE = re.compile(r"(?<![\w*])\*(?![\s*])(.+?)(?<![\s*])\*(?![\w*])")
_CODE_SPAN_RE = re.compile(r"`([^`]+)`")


def escape_roff(text: str) -> str:
    """Escape characters that are special to troff."""
    escaped = text.replace("\\", r"\e").replace("-", r"\-")
    if escaped.startswith(".") or escaped.startswith("'"):
        escaped = rf"\&{escaped}"
    return escaped


def render_inline(text: str) -> str:
    """Escape text and convert inline emphasis and code spans."""
    escaped = escape_roff(text)
    escaped = _CODE_SPAN_RE.sub(r"\\fB\1\\fP", escaped)
    escaped = _BOLD_RE.sub(r"\\fB\1\\fP", escaped)
    return _ITALIC_RE.sub(r"\\fI\1\\fP", escaped)


def _parse_title(line: str) -> tuple[str, str]:
    if not line.startswith("%"):
        raise ConversionError("Missing title block: document must start with '% name section'")

    parts = line[1:].split()
    if not parts:
        raise ConversionError("Title block has no page name")

    name = parts[0]
    section = parts[1] if len(parts) > 1 else "1"
    return name, section


def _is_block_start(line: str) -> bool:
    return (
        line.startswith(FENCE)
        or line.startswith(CODE_INDENT)
        or line.startswith(">")
        or bool(_HEADING_RE.match(line))
        or bool(_BULLET_RE.match(line))
    )


def _code_block(lines: list[str]) -> list[str]:
    return [".EX", *(escape_roff(line) for line in lines), ".EE"]


def markdown_to_roff(markdown: str) -> str:
    """Convert a Markdown document to troff man markup.

    Args:
        markdown: Markdown text starting with a "% name section" title block

    Returns:
        troff document ending with a newline

    Raises:
        ConversionError: If the title block is missing, a code fence is
            never closed, or a heading has no text

    Example:
        >>> print(markdown_to_roff("% greet 1\\n\\n# NAME\\n\\ngreet\\n"))
        .nh
        .TH greet 1
        .SH NAME
        .PP
        greet
    """
    lines = markdown.replace("\r\n", "\n").split("\n")

    # Skip blank lines before the title block
    index = 0
    while index < len(lines) and not lines[index].strip():
        index += 1
    if index == len(lines):
        raise ConversionError("Cannot convert an empty document")

    name, section = _parse_title(lines[index])
    out = [".nh", f".TH {escape_roff(name)} {escape_roff(section)}"]
    index += 1

    while index < len(lines):
        line = lines[index]

        if not line.strip():
            index += 1
            continue

        if line.startswith(FENCE):
            start = index
            index += 1
            body = []
            while index < len(lines) and not lines[index].startswith(FENCE):
                body.append(lines[index])
                index += 1
            if index == len(lines):
                raise ConversionError(f"Unterminated code fence opened on line {start + 1}")
            out.extend(_code_block(body))
            index += 1
            continue

        heading = _HEADING_RE.match(line)
        if heading:
            title = heading.group(2)
            if not title:
                raise ConversionError(f"Empty heading on line {index + 1}")
            macro = ".SH" if len(heading.group(1)) == 1 else ".SS"
            out.append(f"{macro} {render_inline(title)}")
            index += 1
            continue

        if line.startswith(CODE_INDENT):
            body = []
            while index < len(lines) and (
                lines[index].startswith(CODE_INDENT) or not lines[index].strip()
            ):
                body.append(lines[index][len(CODE_INDENT) :])
                index += 1
            while body and not body[-1].strip():
                body.pop()
            out.extend(_code_block(body))
            continue

        if line.startswith(">"):
            quoted = []
            while index < len(lines) and lines[index].startswith(">"):
                quoted.append(lines[index][1:].strip())
                index += 1
            out.extend([".PP", ".RS", *(render_inline(text) for text in quoted), ".RE"])
            continue

        bullet = _BULLET_RE.match(line)
        if bullet:
            out.extend([r".IP \(bu 2", render_inline(bullet.group(1))])
            index += 1
            continue

        paragraph = []
        while index < len(lines) and lines[index].strip():
            if paragraph and _is_block_start(lines[index]):
                break
            paragraph.append(render_inline(lines[index].strip()))
            index += 1
        out.append(".PP")
        out.extend(paragraph)

    logger.debug(f"Converted markdown to roff: {len(out)} lines for {name}({section})")
    return "\n".join(out) + "\n"


__all__ = ["escape_roff", "markdown_to_roff", "render_inline"]
