"""
Argument scanner for gitie.

Walks the raw argument vector once and records where the activation flag and
the help flags occur, independent of their position. The scanner never fails:
any sequence of strings, including an empty one, produces a scan.
"""

from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from gitie.intents import ACTIVATION_FLAG, HELP_FLAGS


@dataclass(frozen=True)
class RawInvocation:
    """Argument tokens exactly as the caller supplied them."""

    args: Tuple[str, ...]

    @classmethod
    def from_argv(cls, argv: Iterable[str]) -> "RawInvocation":
        return cls(args=tuple(argv))


@dataclass(frozen=True)
class ArgumentScan:
    invocation: RawInvocation
    subcommand: Optional[str] = None
    subcommand_position: Optional[int] = None
    activation_positions: Tuple[int, ...] = field(default_factory=tuple)
    help_requested: bool = False

    @property
    def activated(self) -> bool:
        return bool(self.activation_positions)

    @property
    def args(self) -> Tuple[str, ...]:
        return self.invocation.args

    def without_activation(self) -> Tuple[str, ...]:
        """
        Return the raw tokens with every activation flag removed.

        Returns:
            Tuple of the remaining tokens in their original relative order
        """
        skip = set(self.activation_positions)
        return tuple(token for i, token in enumerate(self.args) if i not in skip)


def scan_arguments(argv) -> ArgumentScan:
    """
    Scan an argument vector for the activation flag and help flags.

    The subcommand is the first token that is not the activation flag, so
    `--ai log` and `log --ai` both name `log`. Help flags only count when
    they appear after the subcommand slot.

    Args:
        argv: A RawInvocation or any iterable of argument tokens

    Returns:
        ArgumentScan describing the invocation
    """
    invocation = argv if isinstance(argv, RawInvocation) else RawInvocation.from_argv(argv)

    activation_positions = []
    subcommand = None
    subcommand_position = None
    help_requested = False

    for i, token in enumerate(invocation.args):
        if token == ACTIVATION_FLAG:
            activation_positions.append(i)
        elif subcommand_position is None:
            subcommand = token
            subcommand_position = i
        elif token in HELP_FLAGS:
            help_requested = True

    return ArgumentScan(
        invocation=invocation,
        subcommand=subcommand,
        subcommand_position=subcommand_position,
        activation_positions=tuple(activation_positions),
        help_requested=help_requested,
    )
