"""Custom exception hierarchy for repobrowse.

Exception Hierarchy:
    RepoBrowseError (base)
    ├── GitError - Repository access
    │   ├── RepositoryNotFoundError
    │   ├── EmptyRepositoryError
    │   ├── PathNotFoundError
    │   └── GitCommandError
    └── ConfigurationError - Settings/configuration issues

Errors never escape the UI update loop. Backend tasks catch these and turn
them into messages: ``PaneError`` for a pane's own fetch, ``ErrorMsg``
otherwise.

Usage:
    from repobrowse.exceptions import GitCommandError

    try:
        ...
    except git.GitCommandError as e:
        raise GitCommandError("git show failed", command="show") from e
"""

from typing import Any, Optional


class RepoBrowseError(Exception):
    """Base exception for all repobrowse errors.

    Attributes:
        message: Human-readable error description
        context: Additional context about the error (paths, refs)
    """

    def __init__(self, message: str, **context: Any) -> None:
        self.message = message
        self.context = context
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format the error message with context."""
        if self.context:
            context_str = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


# =============================================================================
# Git Errors
# =============================================================================


class GitError(RepoBrowseError):
    """Base exception for repository access."""

    pass


class RepositoryNotFoundError(GitError):
    """The path is not a git repository."""

    def __init__(self, message: str = "Repository not found", **context: Any) -> None:
        super().__init__(message, **context)


class EmptyRepositoryError(GitError):
    """The repository has no commits, so HEAD cannot be resolved."""

    def __init__(self, message: str = "Repository is empty", **context: Any) -> None:
        super().__init__(message, **context)


class PathNotFoundError(GitError):
    """A path does not exist in the requested tree."""

    def __init__(
        self,
        message: str = "Path not found",
        *,
        path: Optional[str] = None,
        **context: Any,
    ) -> None:
        if path is not None:
            context["path"] = path
        super().__init__(message, **context)


class GitCommandError(GitError):
    """A git command failed."""

    def __init__(
        self,
        message: str = "Git command failed",
        *,
        command: Optional[str] = None,
        **context: Any,
    ) -> None:
        if command:
            context["command"] = command
        super().__init__(message, **context)


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(RepoBrowseError):
    """Invalid or missing configuration."""

    pass
