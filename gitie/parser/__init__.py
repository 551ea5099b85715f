"""
Parser package for gitie.

Contains the argument scanner and the intent resolver that together turn a
raw argument vector into one resolved action.
"""

from .resolver import DECISION_TABLE, resolve, resolve_invocation, suggest_subcommand
from .scanner import ArgumentScan, RawInvocation, scan_arguments

# Export key classes
__all__ = [
    'ArgumentScan',
    'DECISION_TABLE',
    'RawInvocation',
    'resolve',
    'resolve_invocation',
    'scan_arguments',
    'suggest_subcommand',
]
