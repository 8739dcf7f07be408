"""Custom exceptions for documentation rendering and injection."""


class ClidocError(Exception):
    """Base exception for clidoc errors."""

    pass


class TemplateRenderError(ClidocError):
    """Template failed to parse or to evaluate against the view."""

    pass


class ConversionError(ClidocError):
    """Markdown could not be converted to troff."""

    pass


class TagNotFoundError(ClidocError):
    """Delimiter line missing from the target file."""

    def __init__(self, tag: str, path: str):
        self.tag = tag
        self.path = path
        super().__init__(f"Tag {tag!r} not found in {path}")


class TargetFileNotFoundError(ClidocError, FileNotFoundError):
    """File to patch does not exist."""

    pass


class DefinitionError(ClidocError):
    """Command definition file is malformed."""

    pass
