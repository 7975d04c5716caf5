"""Error taxonomy shared by scanning, templating, and module rendering.

Every error derives from ``PromptlineError``. Callers decide per class whether
an error is a configuration bug (fail loudly once) or a data problem (log and
render nothing for that module).
"""

from __future__ import annotations


class PromptlineError(Exception):
    """Base class for all promptline errors."""


class ConfigError(PromptlineError):
    """Raised when an explicitly requested config file cannot be used."""


class DirectoryScanError(PromptlineError):
    """Raised when a directory cannot be enumerated for detection."""

    def __init__(self, directory: object, reason: BaseException) -> None:
        super().__init__(f"cannot scan {directory}: {reason}")
        self.directory = directory
        self.reason = reason


class TemplateSyntaxError(PromptlineError):
    """Malformed format string; ``position`` is a zero-based character offset."""

    def __init__(self, message: str, position: int, template: str = "") -> None:
        super().__init__(f"{message} at position {position}")
        self.message = message
        self.position = position
        self.template = template

    def __str__(self) -> str:
        if not self.template:
            return f"{self.message} at position {self.position}"
        pointer = " " * self.position + "^"
        return f"{self.message} at position {self.position}\n  {self.template}\n  {pointer}"


class ResolutionError(PromptlineError):
    """Hard failure while computing a template variable."""

    def __init__(self, message: str, variable: str | None = None) -> None:
        super().__init__(message)
        self.variable = variable


class VersionParseError(ResolutionError):
    """Version text is not a semantic version."""


class StyleError(PromptlineError):
    """Style string contains a word the style compiler does not understand."""


class VariableAbsent(Exception):
    """Internal signal: a variable legitimately has nothing to show.

    Raised inside the resolver and caught by the nearest enclosing group.
    """

    def __init__(self, name: str) -> None:
        super().__init__(name)
        self.name = name


__all__ = [
    "PromptlineError",
    "ConfigError",
    "DirectoryScanError",
    "TemplateSyntaxError",
    "ResolutionError",
    "VersionParseError",
    "StyleError",
    "VariableAbsent",
]
