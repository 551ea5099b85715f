"""
Intent resolver for gitie.

Classifies a scanned invocation into exactly one action using an ordered
decision table. The first row whose condition holds wins; the last row always
holds, so every invocation resolves and nothing here raises.
"""

import logging
from typing import Callable, NamedTuple, Optional

from rapidfuzz import fuzz, process

from gitie.intents import KNOWN_SUBCOMMANDS, Intent, ResolvedIntent, get_subcommand
from gitie.parser.scanner import ArgumentScan, scan_arguments

logger = logging.getLogger(__name__)

# Minimum similarity for a "did you mean" hint on an unknown subcommand
SUGGESTION_THRESHOLD = 80


class DecisionRow(NamedTuple):
    name: str
    condition: Callable[[ArgumentScan], bool]
    build: Callable[[ArgumentScan], ResolvedIntent]


def _not_activated(scan: ArgumentScan) -> bool:
    return not scan.activated


def _owned_by_subcommand(scan: ArgumentScan) -> bool:
    declared = get_subcommand(scan.subcommand)
    return declared is not None and declared.owns_activation_flag


def _help_requested(scan: ArgumentScan) -> bool:
    return scan.help_requested


def _always(scan: ArgumentScan) -> bool:
    return True


def _passthrough(scan: ArgumentScan) -> ResolvedIntent:
    return ResolvedIntent(
        intent=Intent.PASSTHROUGH,
        residual_args=scan.args,
        subcommand=scan.subcommand,
    )


def _subcommand_private(scan: ArgumentScan) -> ResolvedIntent:
    declared = get_subcommand(scan.subcommand)
    return ResolvedIntent(
        intent=declared.private_intent,
        residual_args=scan.without_activation(),
        subcommand=scan.subcommand,
    )


def _explain_help(scan: ArgumentScan) -> ResolvedIntent:
    return ResolvedIntent(
        intent=Intent.EXPLAIN_HELP,
        residual_args=scan.without_activation(),
        subcommand=scan.subcommand,
    )


def _explain_command(scan: ArgumentScan) -> ResolvedIntent:
    return ResolvedIntent(
        intent=Intent.EXPLAIN_COMMAND,
        residual_args=scan.without_activation(),
        subcommand=scan.subcommand,
    )


DECISION_TABLE = (
    DecisionRow("no-activation", _not_activated, _passthrough),
    DecisionRow("subcommand-owns-flag", _owned_by_subcommand, _subcommand_private),
    DecisionRow("help-requested", _help_requested, _explain_help),
    DecisionRow("explain-command", _always, _explain_command),
)


def resolve(scan: ArgumentScan) -> ResolvedIntent:
    """
    Resolve a scanned invocation to one action.

    Args:
        scan: Result of scan_arguments

    Returns:
        The ResolvedIntent of the first matching decision row
    """
    for row in DECISION_TABLE:
        if row.condition(scan):
            resolved = row.build(scan)
            logger.debug(
                f"Resolved {list(scan.args)} via '{row.name}' to {resolved.intent.name} "
                f"with residual {list(resolved.residual_args)}"
            )
            return resolved
    # The final row's condition is constant True
    raise AssertionError("decision table is not exhaustive")


def resolve_invocation(argv) -> ResolvedIntent:
    return resolve(scan_arguments(argv))


def suggest_subcommand(token: Optional[str]) -> Optional[str]:
    """
    Suggest a known subcommand for a token that looks like a misspelling of one.

    Args:
        token: Candidate subcommand name

    Returns:
        The closest known subcommand name, or None when nothing is close enough
    """
    if not token or token.startswith("-") or token in KNOWN_SUBCOMMANDS:
        return None
    match = process.extractOne(token, list(KNOWN_SUBCOMMANDS), scorer=fuzz.ratio)
    if match is None:
        return None
    name, score = match[0], match[1]
    if score >= SUGGESTION_THRESHOLD:
        return name
    return None
