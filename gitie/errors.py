"""
Error taxonomy for gitie.

The resolver never raises; everything here comes from the dispatcher or the
collaborators it drives, and is turned into one user-facing line plus an exit
code by the CLI.
"""

from typing import Optional, Sequence


class GitieError(Exception):
    pass


class ConfigError(GitieError):
    def __init__(self, path, reason: str):
        self.path = str(path)
        self.reason = reason
        super().__init__(f"Failed to load configuration from '{self.path}': {reason}")


class ConfigMissingError(GitieError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(
            f"Configuration field '{field}' is required for AI actions but is not set."
        )


class PromptMissingError(GitieError):
    def __init__(self, path=None):
        self.path = str(path) if path is not None else None
        if self.path is None:
            message = "Commit prompt is unavailable: the gitie config directory could not be initialized."
        else:
            message = f"Commit prompt file '{self.path}' is missing, empty or unreadable."
        super().__init__(message)


class LlmRequestFailed(GitieError):
    pass


class ExternalToolFailed(GitieError):
    """A git query whose output gitie needed exited non-zero."""

    def __init__(self, args: Sequence[str], returncode: int, stderr: Optional[str] = ""):
        self.args_used = list(args)
        self.returncode = returncode
        self.stderr = stderr or ""
        super().__init__(f"Git command '{' '.join(self.args_used)}' failed with exit code {returncode}")
