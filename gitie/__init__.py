"""
Gitie: an AI-assisted front end for Git.

This package intercepts git invocations, decides whether a call should pass
straight through, generate a commit message, or explain a command, and then
runs the chosen action.
"""

__version__ = "0.1.0"
