"""
Configuration and prompt loading for gitie.

User settings live in a TOML file next to the commit-message prompt, both in
the gitie config directory. On first run the directory is seeded from the
templates shipped in `gitie/assets`.
"""

import logging
import os
import shutil
import tomllib
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Optional, Tuple

from gitie.errors import ConfigError, ConfigMissingError, PromptMissingError

logger = logging.getLogger(__name__)

CONFIG_FILE_NAME = "config.toml"
PROMPT_FILE_NAME = "commit-prompt"
CONFIG_TEMPLATE_NAME = "config.example.toml"
API_KEY_PLACEHOLDER = "YOUR_API_KEY_IF_NEEDED"

DEFAULT_TEMPERATURE = 0.7
DEFAULT_REQUEST_TIMEOUT = 60.0


def config_dir() -> Path:
    """Return the gitie config directory, honouring GITIE_CONFIG_DIR."""
    override = os.environ.get("GITIE_CONFIG_DIR")
    if override:
        return Path(override)
    return Path.home() / ".config" / "gitie"


def initialize_config(directory: Optional[Path] = None) -> Tuple[Path, Path]:
    """
    Make sure the config directory holds a config file and a commit prompt.

    Missing files are copied from the packaged templates; existing files are
    never overwritten.

    Args:
        directory: Config directory to seed. Defaults to config_dir().

    Returns:
        Tuple of (config file path, prompt file path)
    """
    directory = Path(directory) if directory is not None else config_dir()
    config_path = directory / CONFIG_FILE_NAME
    prompt_path = directory / PROMPT_FILE_NAME

    if config_path.exists() and prompt_path.exists():
        return config_path, prompt_path

    directory.mkdir(parents=True, exist_ok=True)
    templates = resources.files("gitie.assets")
    for target, template_name in ((config_path, CONFIG_TEMPLATE_NAME), (prompt_path, PROMPT_FILE_NAME)):
        if target.exists():
            continue
        with resources.as_file(templates / template_name) as source:
            shutil.copyfile(source, target)
        logger.info(f"Initialized {target} from template {template_name}")

    return config_path, prompt_path


@dataclass(frozen=True)
class AppConfig:
    api_url: Optional[str] = None
    model_name: Optional[str] = None
    temperature: float = DEFAULT_TEMPERATURE
    api_key: Optional[str] = None
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    @classmethod
    def from_dict(cls, data: dict, source="<config>") -> "AppConfig":
        """
        Build a config from the parsed TOML document.

        Args:
            data: Parsed TOML document; settings are read from its [ai] table
            source: Where the data came from, used in error messages

        Returns:
            AppConfig with defaults for absent optional fields
        """
        section = data.get("ai", {})
        if not isinstance(section, dict):
            raise ConfigError(source, "[ai] must be a table")

        api_key = section.get("api_key")
        if api_key in (None, "", API_KEY_PLACEHOLDER):
            if api_key is not None:
                logger.info("API key placeholder or empty string found; treating as no API key")
            api_key = None

        try:
            temperature = float(section.get("temperature", DEFAULT_TEMPERATURE))
            request_timeout = float(section.get("request_timeout", DEFAULT_REQUEST_TIMEOUT))
        except (TypeError, ValueError) as e:
            raise ConfigError(source, f"invalid number: {e}") from e

        if not 0.0 <= temperature <= 2.0:
            raise ConfigError(source, f"temperature must be between 0 and 2, got {temperature}")
        if request_timeout <= 0:
            raise ConfigError(source, f"request_timeout must be positive, got {request_timeout}")

        return cls(
            api_url=section.get("api_url") or None,
            model_name=section.get("model_name") or None,
            temperature=temperature,
            api_key=api_key,
            request_timeout=request_timeout,
        )

    @classmethod
    def load(cls, path: Path) -> "AppConfig":
        path = Path(path)
        if not path.exists():
            logger.info(f"No configuration file at {path}; using defaults")
            return cls()
        try:
            data = tomllib.loads(path.read_text(encoding="utf-8"))
        except OSError as e:
            raise ConfigError(path, str(e)) from e
        except UnicodeDecodeError as e:
            raise ConfigError(path, f"not valid UTF-8: {e}") from e
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(path, f"invalid TOML: {e}") from e
        logger.info(f"Loaded configuration from {path}")
        return cls.from_dict(data, source=path)

    def require_ai_settings(self) -> None:
        """Raise ConfigMissingError for the first AI setting that is not set."""
        for field_name in ("api_url", "model_name"):
            if not getattr(self, field_name):
                raise ConfigMissingError(field_name)


def load_commit_prompt(path: Path) -> Optional[str]:
    """
    Read the commit-message system prompt.

    Args:
        path: Prompt file path

    Returns:
        Prompt text, or None when the file does not exist or is blank
    """
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.info(f"No commit prompt at {path}")
        return None
    except OSError as e:
        logger.warning(f"Could not read commit prompt {path}: {e}")
        return None
    except UnicodeDecodeError as e:
        logger.warning(f"Commit prompt {path} is not valid UTF-8: {e}")
        return None
    if not text.strip():
        logger.warning(f"Commit prompt {path} is empty")
        return None
    return text


def require_commit_prompt(prompt: Optional[str], path: Path) -> str:
    if prompt is None:
        raise PromptMissingError(path)
    return prompt
