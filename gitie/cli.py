"""
Command-line entry point for gitie.

    gitie status                       # passed straight to git
    gitie commit --ai -S               # commit with a generated message
    gitie --ai log --oneline -n 5      # explain a command line
    gitie rebase --ai --help           # explain git's help for a command
"""

import logging
import os
import sys
from typing import Optional, Sequence

from gitie.config import AppConfig, initialize_config, load_commit_prompt
from gitie.dispatcher import ActionDispatcher
from gitie.errors import (
    ConfigError,
    ConfigMissingError,
    ExternalToolFailed,
    LlmRequestFailed,
    PromptMissingError,
)
from gitie.git import GitRunner
from gitie.intents import Intent
from gitie.llm import ChatCompletionClient
from gitie.parser import resolve, scan_arguments, suggest_subcommand

logger = logging.getLogger(__name__)

EXIT_CONFIG_ERROR = 2
EXIT_LLM_FAILURE = 3
EXIT_GIT_NOT_FOUND = 127
EXIT_INTERRUPTED = 130

LOG_LEVELS = {
    "debug": logging.DEBUG,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


def configure_logging() -> None:
    """Configure logging from the GITIE_LOG environment variable."""
    level_name = os.environ.get("GITIE_LOG", "warning").strip().lower()
    logging.basicConfig(
        level=LOG_LEVELS.get(level_name, logging.WARNING),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )


def build_dispatcher(needs_llm: bool) -> ActionDispatcher:
    """
    Load configuration and prompt once and wire up the dispatcher.

    Configuration problems are fatal only when the action needs the model;
    passthrough keeps working with defaults.
    """
    try:
        config_path, prompt_path = initialize_config()
    except OSError as e:
        logger.warning(f"Could not initialize config directory: {e}")
        config_path, prompt_path = None, None

    config = AppConfig()
    commit_prompt = None
    if config_path is not None:
        try:
            config = AppConfig.load(config_path)
        except ConfigError as e:
            if needs_llm:
                raise
            logger.warning(f"{e}; continuing with defaults")
        commit_prompt = load_commit_prompt(prompt_path)

    llm = ChatCompletionClient(api_url=config.api_url, timeout=config.request_timeout)
    return ActionDispatcher(
        config=config,
        git=GitRunner(),
        llm=llm,
        commit_prompt=commit_prompt,
        prompt_path=prompt_path,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging()
    if argv is None:
        argv = sys.argv[1:]

    scan = scan_arguments(argv)
    logger.debug(
        f"Scanned subcommand={scan.subcommand!r} activation={list(scan.activation_positions)} "
        f"help={scan.help_requested}"
    )
    resolved = resolve(scan)
    logger.info(f"Resolved intent: {resolved.intent.name}")

    if resolved.intent == Intent.EXPLAIN_COMMAND:
        suggestion = suggest_subcommand(resolved.subcommand)
        if suggestion:
            print(
                f"gitie: '{resolved.subcommand}' is not a gitie subcommand; did you mean '{suggestion}'?",
                file=sys.stderr,
            )

    try:
        dispatcher = build_dispatcher(resolved.intent.needs_llm)
        return dispatcher.dispatch(resolved)
    except (ConfigError, ConfigMissingError, PromptMissingError) as e:
        logger.error(str(e))
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_CONFIG_ERROR
    except LlmRequestFailed as e:
        logger.error(f"AI request failed: {e}")
        print(f"Error: AI request failed: {e}", file=sys.stderr)
        return EXIT_LLM_FAILURE
    except ExternalToolFailed as e:
        logger.error(str(e))
        if e.stderr:
            sys.stderr.write(e.stderr)
        return e.returncode
    except FileNotFoundError as e:
        logger.error(f"git executable not found: {e}")
        print(f"Error: could not run git: {e}", file=sys.stderr)
        return EXIT_GIT_NOT_FOUND
    except KeyboardInterrupt:
        return EXIT_INTERRUPTED


if __name__ == "__main__":
    sys.exit(main())
