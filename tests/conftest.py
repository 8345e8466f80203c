"""Pytest configuration and fixtures for funcdiff tests."""

import os
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import Generator

import pytest

from funcdiff.vcs import GitRepository


@pytest.fixture
def temp_dir() -> Generator[Path, None, None]:
    """Create a temporary directory for tests."""
    temp_path = Path(tempfile.mkdtemp(prefix="funcdiff_test_"))
    try:
        yield temp_path
    finally:
        if temp_path.exists():
            shutil.rmtree(temp_path, ignore_errors=True)


def _git_env() -> dict:
    env = os.environ.copy()
    env.update({
        "GIT_AUTHOR_NAME": "Test User",
        "GIT_AUTHOR_EMAIL": "test@example.com",
        "GIT_COMMITTER_NAME": "Test User",
        "GIT_COMMITTER_EMAIL": "test@example.com",
    })
    return env


@pytest.fixture
def git_repo(temp_dir: Path) -> Generator[Path, None, None]:
    """Create a temporary git repository with one initial commit."""
    repo_path = temp_dir / "test_repo"
    repo_path.mkdir()
    env = _git_env()

    def run_git(args: list[str]) -> subprocess.CompletedProcess:
        return subprocess.run(
            ["git"] + args,
            cwd=repo_path,
            env=env,
            check=True,
            capture_output=True,
            text=True,
        )

    run_git(["init"])
    run_git(["config", "user.name", "Test User"])
    run_git(["config", "user.email", "test@example.com"])

    (repo_path / "README.md").write_text("# Test Repository\n")
    run_git(["add", "README.md"])
    run_git(["commit", "-m", "Initial commit"])

    yield repo_path


class GitRepoHelper:
    """Helper class for git repository operations in tests."""

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path
        self.env = _git_env()

    def run_git(self, args: list[str]) -> subprocess.CompletedProcess:
        """Run git command in the repository."""
        return subprocess.run(
            ["git"] + args,
            cwd=self.repo_path,
            env=self.env,
            check=True,
            capture_output=True,
            text=True,
        )

    def create_file(self, path: str, content: str) -> None:
        """Create a file with content."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_text(content)

    def modify_file(self, path: str, content: str) -> None:
        """Modify an existing file."""
        self.create_file(path, content)

    def write_bytes(self, path: str, content: bytes) -> None:
        """Create a file with raw bytes."""
        file_path = self.repo_path / path
        file_path.parent.mkdir(parents=True, exist_ok=True)
        file_path.write_bytes(content)

    def delete_file(self, path: str) -> None:
        """Delete a file."""
        file_path = self.repo_path / path
        if file_path.exists():
            file_path.unlink()

    def add_and_commit(self, message: str) -> str:
        """Stage everything, commit, and return the commit SHA."""
        self.run_git(["add", "-A"])
        self.run_git(["commit", "--allow-empty", "-m", message])
        return self.get_current_sha()

    def get_current_sha(self) -> str:
        """Get current commit SHA."""
        result = self.run_git(["rev-parse", "HEAD"])
        return result.stdout.strip()


@pytest.fixture
def git_helper(git_repo: Path) -> GitRepoHelper:
    """Create a git repository helper."""
    return GitRepoHelper(git_repo)


@pytest.fixture
def open_repo(git_repo: Path) -> Generator[GitRepository, None, None]:
    """An opened GitRepository handle on the test repository."""
    with GitRepository(str(git_repo)) as repo:
        yield repo


def java_class(name: str, *members: str, package: str = "") -> str:
    """Render a Java class with the given member declarations."""
    header = f"package {package};\n\n" if package else ""
    body = "\n".join(f"    {member}" for member in members)
    return f"{header}public class {name} {{\n{body}\n}}\n"
