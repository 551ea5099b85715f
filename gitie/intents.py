"""
Intent catalog and subcommand declarations for gitie.
Defines the actions an invocation can resolve to and the subcommands that
give the activation flag a private meaning.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

ACTIVATION_FLAG = "--ai"
HELP_FLAGS = frozenset({"-h", "--help"})


class Intent(Enum):
    PASSTHROUGH = "passthrough"
    GENERATE_COMMIT_MESSAGE = "generate-commit-message"
    EXPLAIN_HELP = "explain-help"
    EXPLAIN_COMMAND = "explain-command"

    @property
    def needs_llm(self) -> bool:
        return self is not Intent.PASSTHROUGH


@dataclass(frozen=True)
class KnownSubcommand:
    name: str
    # Intent the activation flag means for this subcommand, if it has its own
    private_intent: Optional[Intent] = None

    @property
    def owns_activation_flag(self) -> bool:
        return self.private_intent is not None


KNOWN_SUBCOMMANDS = {
    "commit": KnownSubcommand(
        name="commit",
        private_intent=Intent.GENERATE_COMMIT_MESSAGE,
    ),
}


@dataclass(frozen=True)
class ResolvedIntent:
    """The single action an invocation maps to, plus the arguments it acts on."""

    intent: Intent
    residual_args: Tuple[str, ...]
    subcommand: Optional[str] = None


def get_subcommand(name: Optional[str]) -> Optional[KnownSubcommand]:
    if name is None:
        return None
    return KNOWN_SUBCOMMANDS.get(name)

# E.X.: get_subcommand("commit").owns_activation_flag -> True
