"""Exception types raised by the content pipeline"""


class FrontmatterError(ValueError):
    """The YAML header of a content file could not be parsed into a mapping."""


class CompileError(ValueError):
    """An MDX body could not be compiled; `line` is 1-based within the body when known."""

    def __init__(self, message: str, line: int | None = None):
        self.line = line
        super().__init__(f"{message} (line {line})" if line else message)


class RenderError(RuntimeError):
    """A compiled document failed while executing against the component runtime."""
