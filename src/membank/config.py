"""Configuration loading from environment variables and membank.toml."""

from __future__ import annotations

import os
import sys
from dataclasses import dataclass, field

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib
from pathlib import Path

_DEFAULT_LOCAL_DIR = Path.home() / ".membank" / "banks"
_CONFIG_FILENAME = "membank.toml"


@dataclass
class GitHubConfig:
    """Where the memory bank lives on GitHub."""

    owner: str = "kimura00123"
    repo: str = "cline-memory-bank"
    path: str = "memory-bank.json"
    branch: str | None = None
    api_url: str = "https://api.github.com"
    token: str = ""
    timeout: float = 30.0


@dataclass
class MemBankConfig:
    """Top-level membank configuration."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    backend: str = "github"
    local_dir: Path = _DEFAULT_LOCAL_DIR
    log_level: str = "INFO"

    @property
    def bank_path(self) -> str:
        return self.github.path


def load_config(config_path: Path | None = None) -> MemBankConfig:
    """Load configuration from environment variables and optional membank.toml.

    Priority: environment variables > membank.toml > defaults.
    The GitHub token is only ever taken from the environment.
    """
    file_data: dict = {}
    if config_path and config_path.exists():
        file_data = tomllib.loads(config_path.read_text())
    else:
        # Search current dir and ~/.membank/
        for candidate in [Path.cwd() / _CONFIG_FILENAME, Path.home() / ".membank" / _CONFIG_FILENAME]:
            if candidate.exists():
                file_data = tomllib.loads(candidate.read_text())
                break

    github_data = file_data.get("github", {})

    config = MemBankConfig(
        github=GitHubConfig(
            owner=os.getenv("MEMBANK_OWNER", github_data.get("owner", "kimura00123")),
            repo=os.getenv("MEMBANK_REPO", github_data.get("repo", "cline-memory-bank")),
            path=os.getenv("MEMBANK_PATH", github_data.get("path", "memory-bank.json")),
            branch=os.getenv("MEMBANK_BRANCH", github_data.get("branch")),
            api_url=os.getenv(
                "GITHUB_API_URL", github_data.get("api_url", "https://api.github.com")
            ),
            token=os.getenv("GITHUB_TOKEN", ""),
            timeout=float(os.getenv("MEMBANK_TIMEOUT", github_data.get("timeout", 30.0))),
        ),
        backend=os.getenv("MEMBANK_BACKEND", file_data.get("backend", "github")),
        local_dir=Path(
            os.getenv("MEMBANK_LOCAL_DIR", file_data.get("local_dir", str(_DEFAULT_LOCAL_DIR)))
        ).expanduser(),
        log_level=os.getenv("MEMBANK_LOG_LEVEL", file_data.get("log_level", "INFO")),
    )
    return config
