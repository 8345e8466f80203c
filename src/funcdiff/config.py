"""Configuration management for funcdiff."""

import os
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

DEFAULT_SOURCE_EXTENSIONS: Tuple[str, ...] = (".java",)


@dataclass(frozen=True)
class AnalysisConfig:
    """Configuration for a function change analysis."""

    # Required parameters
    repo_path: str
    old_ref: str
    new_ref: str

    # Filtering
    target_scope: Optional[str] = None
    source_extensions: Tuple[str, ...] = DEFAULT_SOURCE_EXTENSIONS

    # Execution
    max_workers: int = 1
    git_timeout: float = 60.0

    # Output options
    json_output_path: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        if not self.old_ref or not self.old_ref.strip():
            raise ValueError("old_ref cannot be empty")
        if not self.new_ref or not self.new_ref.strip():
            raise ValueError("new_ref cannot be empty")
        if self.max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        if self.git_timeout <= 0:
            raise ValueError("git_timeout must be positive")
        if not self.source_extensions:
            raise ValueError("source_extensions cannot be empty")
        for ext in self.source_extensions:
            if not ext.startswith("."):
                raise ValueError(f"source extension must start with '.': {ext}")

    @property
    def git_env(self) -> Dict[str, str]:
        """Get Git environment variables for deterministic output."""
        return deterministic_git_env()

    def to_provenance_dict(self) -> Dict[str, Any]:
        """Convert config to provenance dictionary for output."""
        return {
            "repo_path": self.repo_path,
            "old_ref": self.old_ref,
            "new_ref": self.new_ref,
            "target_scope": self.target_scope,
            "source_extensions": sorted(self.source_extensions),
        }


def deterministic_git_env() -> Dict[str, str]:
    """Return a copy of the process environment locked down for git."""
    env = os.environ.copy()

    # Use platform-appropriate null device
    null_device = "NUL" if os.name == "nt" else "/dev/null"

    env.update(
        {
            "LC_ALL": "C",
            "GIT_CONFIG_GLOBAL": null_device,
            "GIT_CONFIG_SYSTEM": null_device,
            "GIT_TERMINAL_PROMPT": "0",
            "GIT_ASKPASS": "echo",
            "SSH_ASKPASS": "echo",
            "GCM_INTERACTIVE": "never",
        }
    )
    return env


def parse_extensions(value: str) -> Tuple[str, ...]:
    """Parse a comma separated extension list such as ``.java,.jav``."""
    extensions = []
    for item in value.split(","):
        item = item.strip().lower()
        if not item:
            continue
        if not item.startswith("."):
            item = "." + item
        extensions.append(item)
    return tuple(extensions)
