"""
Action dispatcher for gitie.

Drives a resolved intent to its external effect: a git subprocess, a
language-model call, or both. Collaborators (config, git runner, LLM client,
commit prompt) are injected so every path can run against fakes.
"""

import logging
import shlex
from typing import Callable, List, NamedTuple, Optional, Sequence, Tuple

from gitie.config import AppConfig, require_commit_prompt
from gitie.errors import ExternalToolFailed
from gitie.intents import Intent, ResolvedIntent

logger = logging.getLogger(__name__)

STAGED_DIFF_ARGS = ("diff", "--staged")

EXPLAIN_HELP_PROMPT = """You are an assistant built into a Git command-line enhancer.
The user asked for help on a Git command and the text below is Git's own help output for it.
Explain that help text clearly and concisely: what the command is for, the options that matter most, and common usage.
If the text is an error (for example an unknown command), say what went wrong and what the user probably meant.
Answer directly, without greetings or remarks about being an AI."""

EXPLAIN_COMMAND_PROMPT = """You are an assistant built into a Git command-line enhancer.
The user wants to understand the Git command line that follows.
Explain what it does, what each option and argument contributes, and when someone would run it.
If the command looks incomplete, invalid or risky, point that out briefly.
Answer directly, without greetings or remarks about being an AI."""

NOTHING_STAGED_MESSAGE = "Nothing to commit: no changes are staged."
NO_HELP_OUTPUT_MESSAGE = (
    "The command produced no output to explain. It may not print anything "
    "or may need specific conditions to produce output."
)
NO_COMMAND_MESSAGE = "No git command was given to explain."


class ExplanationSource(NamedTuple):
    system_prompt: str
    read_text: Callable[[ResolvedIntent], str]
    empty_notice: str


# Short options of git commit that take a value; a cluster such as -am ends at the first one
SHORT_VALUE_OPTIONS = frozenset("mFCctSu")


def _short_cluster_message(token: str) -> Optional[Tuple[str, str]]:
    """
    Look for -m inside a cluster of short options.

    Args:
        token: A single-dash token longer than two characters, e.g. `-am` or `-amwip`

    Returns:
        Tuple of (flag letters before m, value attached after m), or None when
        the cluster does not carry -m
    """
    for pos in range(1, len(token)):
        letter = token[pos]
        if letter == "m":
            return token[1:pos], token[pos + 1:]
        if letter in SHORT_VALUE_OPTIONS:
            return None
    return None


def split_message_args(args: Sequence[str]) -> Tuple[List[str], List[str]]:
    """
    Separate user-supplied commit messages from the other commit arguments.

    Recognizes `-m VALUE`, `-mVALUE`, `--message VALUE`, `--message=VALUE` and
    short clusters ending in m (`-am VALUE`). The token after -m is always the
    message, even when it starts with a dash. Everything after a literal `--`
    is left alone as pathspec.

    Args:
        args: Commit arguments without the leading `commit`

    Returns:
        Tuple of (message values found, remaining arguments in original order)
    """
    args = list(args)
    pathspec: List[str] = []
    if "--" in args:
        cut = args.index("--")
        args, pathspec = args[:cut], args[cut:]

    messages: List[str] = []
    rest: List[str] = []
    i = 0
    while i < len(args):
        token = args[i]
        value = None
        if token in ("-m", "--message"):
            pass
        elif token.startswith("--message="):
            value = token[len("--message="):]
        elif token.startswith("-") and not token.startswith("--") and len(token) > 2:
            cluster = _short_cluster_message(token)
            if cluster is None:
                rest.append(token)
                i += 1
                continue
            flags, attached = cluster
            if flags:
                rest.append("-" + flags)
            if attached:
                value = attached
        else:
            rest.append(token)
            i += 1
            continue

        i += 1
        if value is None:
            if i >= len(args):
                logger.warning(f"'{token}' has no message value; dropping it")
                continue
            value = args[i]
            i += 1
        messages.append(value)

    return messages, rest + pathspec


class ActionDispatcher:
    """
    Executes resolved intents.

    Each dispatch returns the exit code for the process. Failures that need a
    user-facing message are raised as GitieError subclasses for the CLI to
    report.
    """

    # Diffs longer than this are cut before being sent to the model
    MAX_DIFF_CHARS = 8000
    TRUNCATION_MARKER = "... (truncated, too large)"

    def __init__(
        self,
        config: AppConfig,
        git,
        llm,
        commit_prompt: Optional[str] = None,
        prompt_path=None,
    ):
        self.config = config
        self.git = git
        self.llm = llm
        self.commit_prompt = commit_prompt
        self.prompt_path = prompt_path
        self.explanation_sources = {
            Intent.EXPLAIN_HELP: ExplanationSource(
                system_prompt=EXPLAIN_HELP_PROMPT,
                read_text=self._help_text,
                empty_notice=NO_HELP_OUTPUT_MESSAGE,
            ),
            Intent.EXPLAIN_COMMAND: ExplanationSource(
                system_prompt=EXPLAIN_COMMAND_PROMPT,
                read_text=self._command_text,
                empty_notice=NO_COMMAND_MESSAGE,
            ),
        }

    def dispatch(self, resolved: ResolvedIntent) -> int:
        logger.info(f"Dispatching {resolved.intent.name} for {list(resolved.residual_args)}")

        if resolved.intent == Intent.PASSTHROUGH:
            return self.git.run(list(resolved.residual_args))
        elif resolved.intent == Intent.GENERATE_COMMIT_MESSAGE:
            return self._generate_commit(resolved)
        elif resolved.intent in self.explanation_sources:
            return self._explain(resolved, self.explanation_sources[resolved.intent])

        raise ValueError(f"No handler for intent {resolved.intent}")

    def _complete(self, system_prompt: str, user_content: str) -> str:
        self.config.require_ai_settings()
        logger.info(f"Requesting completion from {self.config.model_name}")
        reply = self.llm.complete(
            system_prompt=system_prompt,
            user_content=user_content,
            model=self.config.model_name,
            temperature=self.config.temperature,
            api_key=self.config.api_key,
        )
        logger.info("Completion succeeded")
        return reply

    # Commit message generation

    def staged_diff(self) -> str:
        completed = self.git.capture(list(STAGED_DIFF_ARGS))
        if completed.returncode != 0:
            logger.error(f"Staged diff query failed with exit code {completed.returncode}")
            raise ExternalToolFailed(STAGED_DIFF_ARGS, completed.returncode, completed.stderr)
        return completed.stdout or ""

    def truncate_diff(self, diff: str) -> str:
        if len(diff) <= self.MAX_DIFF_CHARS:
            return diff
        logger.warning(
            f"Diff is too large ({len(diff)} chars), truncating to {self.MAX_DIFF_CHARS} chars"
        )
        keep = self.MAX_DIFF_CHARS - 3
        return diff[:keep] + self.TRUNCATION_MARKER

    def _generate_commit(self, resolved: ResolvedIntent) -> int:
        diff = self.staged_diff()
        if not diff.strip():
            logger.info("No staged changes; skipping message generation")
            print(NOTHING_STAGED_MESSAGE)
            return 0

        self.config.require_ai_settings()
        system_prompt = require_commit_prompt(self.commit_prompt, self.prompt_path)

        user_content = f"Generate a commit message for these changes:\n\n{self.truncate_diff(diff.strip())}"
        message = self._complete(system_prompt, user_content)

        # residual_args[0] is the subcommand token itself
        user_messages, commit_args = split_message_args(resolved.residual_args[1:])
        if user_messages:
            logger.warning("Ignoring -m/--message because the commit message is generated")
            print("Note: the provided -m/--message is replaced by the generated message.")

        print(f"Generated commit message:\n---\n{message}\n---")
        returncode = self.git.run([resolved.residual_args[0], "-m", message, *commit_args])
        if returncode == 0:
            logger.info("Committed with generated message")
        else:
            logger.error(f"git commit exited with code {returncode}")
        return returncode

    # Explanations

    def _help_text(self, resolved: ResolvedIntent) -> str:
        completed = self.git.capture(list(resolved.residual_args))
        text = (completed.stdout or "").strip()
        if not text:
            text = (completed.stderr or "").strip()
        return text

    def _command_text(self, resolved: ResolvedIntent) -> str:
        if not resolved.residual_args:
            return ""
        return "git " + shlex.join(resolved.residual_args)

    def _explain(self, resolved: ResolvedIntent, source: ExplanationSource) -> int:
        text = source.read_text(resolved)
        if not text:
            logger.info("Nothing to explain")
            print(source.empty_notice)
            return 0
        logger.debug(f"Explaining (first 200 chars): {text[:200]!r}")
        print(self._complete(source.system_prompt, text))
        return 0
