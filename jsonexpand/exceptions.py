"""
Exceptions raised while compiling and expanding templates.
"""

from typing import Optional


class TemplateError(Exception):
    """Base exception for all template errors."""

    pass


class ConfigurationError(TemplateError):
    """Raised for invalid template options or unreadable bundle files."""

    pass


class ExpressionCompileError(TemplateError):
    """Raised by the expression engine when an expression cannot be compiled."""

    def __init__(self, expression: str, reason: str):
        self.expression = expression
        self.reason = reason
        super().__init__(f"Cannot compile expression '{expression}': {reason}")


class CompileError(TemplateError):
    """Raised when a template or fragment fails to compile."""

    def __init__(self, message: str, path: Optional[str] = None, expression: Optional[str] = None):
        self.path = path
        self.expression = expression
        if path:
            message = f"{message} (at {path})"
        super().__init__(message)


class FragmentNotFoundError(TemplateError):
    """Raised when an expression references an unregistered fragment."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Fragment not found: {name}")


class ExpansionError(TemplateError):
    """Raised when an expansion is aborted."""

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        if path:
            message = f"Error expanding '{path}': {message}"
        super().__init__(message)


class MissingKeyError(ExpansionError, KeyError):
    """Raised when a key or attribute lookup finds nothing."""

    def __init__(self, key: str, path: Optional[str] = None):
        self.key = key
        super().__init__(f"no such key: {key}", path)

    def __str__(self) -> str:
        # KeyError would repr() the message
        return self.args[0]


class RemoveSignal(Exception):
    """Control signal raised by remove_property(); never escapes the engine."""

    pass
