"""
Exceptions that reach the user.

Anything derived from LQUserError is an expected failure: the CLI prints
its message and exits with status 2 instead of showing a traceback.

Unclosed blocks, unmatched closers and non-iterable collections do not
raise. The resolvers report them through the context logger and keep going.
"""

from __future__ import annotations

from typing import Optional


class LQUserError(Exception):
    """
    Root of the lq error hierarchy.

    Covers problems fixable on the user side:
    malformed frontmatter, invalid settings, fatal template syntax.
    """
    pass


class LiquidSyntaxError(LQUserError):
    """
    Fatal template syntax error.

    Raised only by the legacy condition resolver for an ``else``/``elsif``
    that has no enclosing ``if``.
    """

    def __init__(self, message: str, position: int, path: Optional[str] = None):
        self.message = message
        self.position = position
        self.path = path
        where = f" in {path}" if path else ""
        super().__init__(f"{message} at position {position}{where}")


class FrontMatterError(LQUserError):
    """Malformed YAML frontmatter block."""

    def __init__(self, message: str, cause: Optional[Exception] = None):
        super().__init__(message)
        self.cause = cause


class SettingsError(LQUserError, ValueError):
    """Unknown or invalid resolver settings."""
    pass


__all__ = ["LQUserError", "LiquidSyntaxError", "FrontMatterError", "SettingsError"]
