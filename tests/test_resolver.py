import itertools

import pytest

from gitie.intents import ACTIVATION_FLAG, KNOWN_SUBCOMMANDS, Intent, KnownSubcommand
from gitie.parser import DECISION_TABLE, resolve_invocation, suggest_subcommand

TOKENS = ["--ai", "commit", "status", "--help", "-h", "-S", "log", "x"]


def _is_subsequence(short, long):
    it = iter(long)
    return all(token in it for token in short)


def test_no_activation_is_passthrough_unchanged():
    args = ["commit", "-m", "fix", "--help"]
    resolved = resolve_invocation(args)

    assert resolved.intent == Intent.PASSTHROUGH
    assert resolved.residual_args == tuple(args)


def test_commit_owns_activation_on_both_sides():
    resolved = resolve_invocation(["--ai", "commit", "--ai", "-S"])

    assert resolved.intent == Intent.GENERATE_COMMIT_MESSAGE
    assert resolved.residual_args == ("commit", "-S")
    assert resolved.subcommand == "commit"


@pytest.mark.parametrize(
    "args",
    [
        ["commit", "--ai"],
        ["--ai", "commit"],
        ["commit", "--ai", "--help"],
        ["commit", "-a", "--ai", "--ai"],
    ],
)
def test_commit_never_resolves_to_explanation(args):
    resolved = resolve_invocation(args)

    assert resolved.intent == Intent.GENERATE_COMMIT_MESSAGE
    assert ACTIVATION_FLAG not in resolved.residual_args


def test_help_with_activation_explains_help():
    resolved = resolve_invocation(["status", "-s", "--ai", "--help"])

    assert resolved.intent == Intent.EXPLAIN_HELP
    assert resolved.subcommand == "status"
    assert resolved.residual_args == ("status", "-s", "--help")


def test_activation_without_help_explains_command():
    resolved = resolve_invocation(["--ai", "log", "--oneline", "-n", "5"])

    assert resolved.intent == Intent.EXPLAIN_COMMAND
    assert resolved.subcommand == "log"
    assert resolved.residual_args == ("log", "--oneline", "-n", "5")


def test_multiple_activation_flags_all_stripped():
    resolved = resolve_invocation(["--ai", "status", "--ai"])

    assert resolved.intent == Intent.EXPLAIN_COMMAND
    assert resolved.residual_args == ("status",)


def test_unknown_subcommand_degrades_to_explain_command():
    resolved = resolve_invocation(["frobnicate", "--ai"])

    assert resolved.intent == Intent.EXPLAIN_COMMAND
    assert resolved.residual_args == ("frobnicate",)


def test_bare_activation_flag():
    resolved = resolve_invocation(["--ai"])

    assert resolved.intent == Intent.EXPLAIN_COMMAND
    assert resolved.subcommand is None
    assert resolved.residual_args == ()


def test_decision_table_ends_with_catch_all():
    assert DECISION_TABLE[-1].name == "explain-command"


def test_resolution_is_total_and_residual_is_subsequence():
    for length in range(0, 4):
        for args in itertools.product(TOKENS, repeat=length):
            resolved = resolve_invocation(list(args))

            assert resolved.intent in Intent
            assert ACTIVATION_FLAG not in resolved.residual_args
            assert _is_subsequence(resolved.residual_args, args)
            expected = [token for token in args if token != ACTIVATION_FLAG]
            assert list(resolved.residual_args) == expected
            if ACTIVATION_FLAG not in args:
                assert resolved.intent == Intent.PASSTHROUGH


def test_suggest_subcommand_for_misspelling():
    assert suggest_subcommand("comit") == "commit"
    assert suggest_subcommand("commti") == "commit"


@pytest.mark.parametrize("token", [None, "", "commit", "status", "-c", "log"])
def test_suggest_subcommand_none(token):
    assert suggest_subcommand(token) is None


def test_subcommand_ownership_follows_private_intent():
    assert KnownSubcommand(name="commit", private_intent=Intent.GENERATE_COMMIT_MESSAGE).owns_activation_flag
    assert not KnownSubcommand(name="status").owns_activation_flag
    assert all(
        declared.private_intent is not None
        for declared in KNOWN_SUBCOMMANDS.values()
        if declared.owns_activation_flag
    )
