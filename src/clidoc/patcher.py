"""Injection of rendered documentation between delimiter lines.

A target file (typically a README) carries a pair of delimiter lines:

    <!--GENERATED:CLI_DOCS-->
    <!--/GENERATED:CLI_DOCS-->

Everything strictly between the first start line and the first end line
after it is replaced by a "generated by" comment followed by the rendered
document. The delimiters and the rest of the file are left untouched, so
running the injection again with the same document changes nothing.

Safety:
- The lock for the file (a ".NAME.lock" sidecar, see file_lock_manager) is
  held for the whole read-modify-write cycle
- New content is written to a temporary file in the same directory and
  renamed into place, preserving the file mode
- On any error the target is left unchanged
"""

import errno
import logging
import os
import stat
import tempfile
from contextlib import ExitStack
from pathlib import Path

from .exceptions import TagNotFoundError, TargetFileNotFoundError
from .file_lock_manager import acquire_file_lock
from .models import Command
from .renderer import TabularMarkdownRenderer

logger = logging.getLogger(__name__)

DEFAULT_START_TAG = "<!--GENERATED:CLI_DOCS-->"
DEFAULT_END_TAG = "<!--/GENERATED:CLI_DOCS-->"
GENERATED_COMMENT = "<!-- Documentation inside this block generated by clidoc; DO NOT EDIT -->"

LOCK_TIMEOUT = 5.0


def resolve_tags(tags: tuple[str, ...]) -> tuple[str, str]:
    """Return the (start, end) delimiter pair.

    Args:
        tags: Either empty (use the defaults) or exactly two delimiters

    Raises:
        ValueError: If tags is not empty or a pair of non-empty strings
    """
    if not tags:
        return DEFAULT_START_TAG, DEFAULT_END_TAG
    if len(tags) != 2:
        raise ValueError(f"Expected a start and an end tag, got {len(tags)} tag(s)")

    start, end = tags
    if not start or not end:
        raise ValueError("Tags must not be empty")
    return start, end


def find_region(content: str, start_tag: str, end_tag: str, source: str = "<string>") -> tuple[int, int]:
    """Locate the text between the delimiter lines.

    Delimiters match whole lines literally; a trailing "\\r" is ignored.

    Args:
        content: File content
        start_tag: Opening delimiter line
        end_tag: Closing delimiter line, searched after the opening one
        source: Name used in error messages

    Returns:
        (offset just past the start line, offset where the end line begins)

    Raises:
        TagNotFoundError: If either delimiter line is missing
    """
    offset = 0
    region_start: int | None = None

    for line in content.split("\n"):
        line_end = offset + len(line) + 1
        text = line[:-1] if line.endswith("\r") else line
        if region_start is None:
            if text == start_tag:
                region_start = line_end
        elif text == end_tag:
            return region_start, offset
        offset = line_end

    if region_start is None:
        raise TagNotFoundError(start_tag, source)
    raise TagNotFoundError(end_tag, source)


def build_block(document: str, annotate: bool = True) -> str:
    """Return the text placed between the delimiters."""
    if annotate:
        return f"{GENERATED_COMMENT}\n{document}\n"
    return f"{document}\n"


def extract_between_tags(content: str, *tags: str, source: str = "<string>") -> str:
    """Return the text strictly between the delimiter lines.

    Raises:
        TagNotFoundError: If either delimiter line is missing
    """
    start_tag, end_tag = resolve_tags(tags)
    region_start, region_end = find_region(content, start_tag, end_tag, source)
    return content[region_start:region_end]


def _not_found(path: Path) -> TargetFileNotFoundError:
    return TargetFileNotFoundError(errno.ENOENT, "Target file not found", str(path))


def read_text(path: Path) -> str:
    """Read a file without translating line endings."""
    with open(path, encoding="utf-8", newline="") as f:
        return f.read()


def atomic_write_text(path: Path, content: str) -> None:
    """Replace a file's content through a temporary file and rename.

    The existing file mode is kept. The temporary file is removed if
    anything fails before the rename.
    """
    mode = stat.S_IMODE(path.stat().st_mode)
    fd, temp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.", suffix=".tmp")
    temp_path = Path(temp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
            f.flush()
            os.fsync(f.fileno())
        os.chmod(temp_path, mode)
        os.replace(temp_path, path)
    except Exception:
        temp_path.unlink(missing_ok=True)
        raise


def replace_between_tags(
    file_path: str | Path,
    document: str,
    *tags: str,
    annotate: bool = True,
    lock_timeout: float = LOCK_TIMEOUT,
) -> bool:
    """Inject a rendered document between delimiter lines of a file.

    Args:
        file_path: File to patch
        document: Rendered document
        *tags: Optional (start, end) delimiter pair; defaults to
            DEFAULT_START_TAG and DEFAULT_END_TAG
        annotate: Insert GENERATED_COMMENT before the document
        lock_timeout: Seconds to wait for the file lock

    Returns:
        True if the file content changed, False if it was already current

    Raises:
        TargetFileNotFoundError: If the file does not exist
        TagNotFoundError: If a delimiter line is missing
        ValueError: If tags is not empty or a pair
        LockTimeoutError: If another process holds the file lock

    Example:
        >>> replace_between_tags("README.md", to_tabular_markdown(app))
        True
    """
    start_tag, end_tag = resolve_tags(tags)
    path = Path(file_path)
    if not path.exists():
        raise _not_found(path)
    path = path.resolve()

    with ExitStack() as stack:
        try:
            stack.enter_context(
                acquire_file_lock(path, timeout=lock_timeout, operation="documentation injection")
            )
        except FileNotFoundError as e:
            raise _not_found(path) from e

        content = read_text(path)
        region_start, region_end = find_region(content, start_tag, end_tag, str(path))
        updated = content[:region_start] + build_block(document, annotate) + content[region_end:]

        if updated == content:
            logger.debug(f"Documentation in {path} is up to date")
            return False

        atomic_write_text(path, updated)

    logger.debug(f"Injected {len(document)} characters of documentation into {path}")
    return True


def to_tabular_file_between_tags(
    root: Command,
    app_path: str,
    file_path: str | Path,
    *tags: str,
    annotate: bool = True,
    renderer: TabularMarkdownRenderer | None = None,
) -> bool:
    """Render tabular Markdown for an application and inject it into a file.

    Raises:
        TemplateRenderError: If rendering fails (the file is not touched)
        TargetFileNotFoundError: If the file does not exist
        TagNotFoundError: If a delimiter line is missing
    """
    document = (renderer or TabularMarkdownRenderer()).render(root, app_path)
    return replace_between_tags(file_path, document, *tags, annotate=annotate)


__all__ = [
    "DEFAULT_END_TAG",
    "DEFAULT_START_TAG",
    "GENERATED_COMMENT",
    "atomic_write_text",
    "build_block",
    "extract_between_tags",
    "find_region",
    "read_text",
    "replace_between_tags",
    "resolve_tags",
    "to_tabular_file_between_tags",
]
