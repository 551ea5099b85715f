"""
Subprocess runner for the git executable.
"""

import logging
import os
import subprocess
from typing import Dict, Optional, Sequence

logger = logging.getLogger(__name__)

# Keeps help output and diffs from opening an interactive pager while captured
NO_PAGER_ENV = {"GIT_PAGER": "cat", "PAGER": "cat", "MANPAGER": "cat"}


class GitRunner:
    """Runs git either attached to the terminal or with its output captured."""

    def __init__(self, executable: Optional[str] = None):
        self.executable = executable or os.environ.get("GITIE_GIT", "git")

    def _command(self, args: Sequence[str]):
        return [self.executable, *args]

    def run(self, args: Sequence[str]) -> int:
        """
        Run git with inherited stdin/stdout/stderr.

        Args:
            args: Arguments after the git executable

        Returns:
            Git's exit code
        """
        cmd = self._command(args)
        logger.info(f"Running: {' '.join(cmd)}")
        completed = subprocess.run(cmd)
        logger.info(f"git exited with code {completed.returncode}")
        return completed.returncode

    def capture(self, args: Sequence[str], env: Optional[Dict[str, str]] = None) -> subprocess.CompletedProcess:
        cmd = self._command(args)
        logger.info(f"Capturing: {' '.join(cmd)}")
        run_env = dict(os.environ, **NO_PAGER_ENV)
        if env:
            run_env.update(env)
        completed = subprocess.run(cmd, capture_output=True, text=True, env=run_env)
        logger.debug(
            f"git exited with code {completed.returncode}, "
            f"{len(completed.stdout or '')} chars of output"
        )
        return completed
