from __future__ import annotations


class InvalidImplementorMap(ValueError):
    """Raised when an implementor mapping does not have the ``{crate: [descriptor, ...]}`` shape."""


class ImplementorFileError(ValueError):
    """Raised when a generated ``implementors/*.js`` file cannot be decoded."""

    def __init__(self, message: str, *, path: str | None = None) -> None:
        self.path = path
        if path is not None:
            message = f"{path}: {message}"
        super().__init__(message)
