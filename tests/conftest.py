from __future__ import annotations

import subprocess
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from gitie.config import AppConfig


@dataclass(slots=True)
class FakeGit:
    diff: str = ""
    diff_returncode: int = 0
    diff_stderr: str = ""
    help_stdout: str = ""
    help_stderr: str = ""
    run_returncode: int = 0
    runs: list = field(default_factory=list)
    captures: list = field(default_factory=list)

    def run(self, args):
        self.runs.append(list(args))
        return self.run_returncode

    def capture(self, args, env=None):
        args = list(args)
        self.captures.append(args)
        if args == ["diff", "--staged"]:
            return subprocess.CompletedProcess(
                args, self.diff_returncode, stdout=self.diff, stderr=self.diff_stderr
            )
        return subprocess.CompletedProcess(
            args, 0, stdout=self.help_stdout, stderr=self.help_stderr
        )


@dataclass(slots=True)
class FakeLlm:
    reply: str = "feat: add greeting"
    error: Exception | None = None
    calls: list = field(default_factory=list)

    def complete(self, *, system_prompt, user_content, model, temperature, api_key=None):
        self.calls.append(
            {
                "system_prompt": system_prompt,
                "user_content": user_content,
                "model": model,
                "temperature": temperature,
                "api_key": api_key,
            }
        )
        if self.error is not None:
            raise self.error
        return self.reply


@pytest.fixture()
def fake_git() -> FakeGit:
    return FakeGit()


@pytest.fixture()
def fake_llm() -> FakeLlm:
    return FakeLlm()


@pytest.fixture()
def ai_config() -> AppConfig:
    return AppConfig(
        api_url="http://localhost:12345/v1/chat/completions",
        model_name="mock-model",
        temperature=0.1,
    )


@pytest.fixture()
def config_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    home = tmp_path / "gitie-config"
    monkeypatch.setenv("GITIE_CONFIG_DIR", str(home))
    return home
