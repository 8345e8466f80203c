"""Version control system operations for funcdiff."""

import logging
import re
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Sequence

from .config import deterministic_git_env
from .errors import (
    ContentReadError,
    GitCommandTimeoutError,
    GitVersionUnsupportedError,
    RepositoryOpenError,
    RevisionResolutionError,
)

logger = logging.getLogger(__name__)

MIN_GIT_VERSION = (2, 30)


@dataclass(frozen=True)
class TreeSnapshot:
    """Immutable view of the file tree at one resolved revision."""

    ref: str
    commit: str
    tree: str


@dataclass(frozen=True)
class RawChange:
    """One entry of a recursive tree comparison."""

    status: str  # A, M, D, T
    path_old: Optional[str]
    path_new: Optional[str]


class GitRepository:
    """Handle on an existing local Git repository.

    The handle is acquired with ``open()`` (or by entering it as a context
    manager) and released exactly once by ``close()``. Analyses borrow the
    handle and never close it themselves.
    """

    def __init__(
        self,
        repo_path: str,
        timeout: float = 60.0,
        env: Optional[Dict[str, str]] = None,
    ):
        """Initialize with the repository path; nothing is touched until open()."""
        self.repo_path = repo_path
        self.timeout = timeout
        self.git_dir: Optional[str] = None
        self._git_version: Optional[str] = None
        self._env = env if env is not None else deterministic_git_env()
        self._opened = False
        self._closed = False

    def __enter__(self) -> "GitRepository":
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit, releasing the handle on every path."""
        self.close()

    @property
    def is_open(self) -> bool:
        return self._opened and not self._closed

    def open(self) -> "GitRepository":
        """Validate the repository path and the git installation."""
        if self._closed:
            raise RepositoryOpenError(self.repo_path, "handle already closed")
        if self._opened:
            return self

        path = Path(self.repo_path)
        if not path.exists():
            raise RepositoryOpenError(self.repo_path, "path does not exist")
        if not path.is_dir():
            raise RepositoryOpenError(self.repo_path, "path is not a directory")

        self.validate_git_version()

        try:
            result = self._invoke(["rev-parse", "--git-dir"], check=True)
        except subprocess.CalledProcessError as e:
            reason = (e.stderr or "").strip() or "not a git repository"
            raise RepositoryOpenError(self.repo_path, reason) from e
        except OSError as e:
            raise RepositoryOpenError(self.repo_path, str(e)) from e

        self.git_dir = result.stdout.strip()
        self._opened = True
        logger.info(
            "Repository opened",
            extra={"repo_path": self.repo_path, "git_dir": self.git_dir},
        )
        return self

    def close(self) -> None:
        """Release the handle. Safe to call more than once."""
        if self._closed:
            return
        self._closed = True
        if self._opened:
            logger.debug("Repository closed", extra={"repo_path": self.repo_path})

    def validate_git_version(self) -> str:
        """Validate Git version meets minimum requirements."""
        if self._git_version:
            return self._git_version

        required = ".".join(str(part) for part in MIN_GIT_VERSION)
        try:
            result = subprocess.run(
                ["git", "--version"],
                capture_output=True,
                text=True,
                check=True,
                timeout=10,
            )
        except (OSError, subprocess.CalledProcessError, subprocess.TimeoutExpired) as e:
            raise GitVersionUnsupportedError("unavailable", required) from e

        # Extract version number from "git version 2.34.1"
        match = re.search(r"git version (\d+)\.(\d+)(?:\.(\d+))?", result.stdout)
        if not match:
            raise GitVersionUnsupportedError("unknown", required)

        major, minor = int(match.group(1)), int(match.group(2))
        version_str = match.group(0).split()[-1]
        if (major, minor) < MIN_GIT_VERSION:
            raise GitVersionUnsupportedError(version_str, required)

        self._git_version = version_str
        return version_str

    def run_git(
        self,
        args: Sequence[str],
        check: bool = True,
        text: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a git command against the open repository."""
        if not self.is_open:
            raise RuntimeError("Repository handle is not open")
        return self._invoke(args, check=check, text=text)

    def _invoke(
        self,
        args: Sequence[str],
        check: bool = True,
        text: bool = True,
    ) -> subprocess.CompletedProcess:
        # Enforce deterministic git behavior across platforms
        cmd = [
            "git",
            "-c",
            "core.autocrlf=false",
            "-c",
            "core.quotepath=false",
            "-c",
            "color.ui=false",
        ] + list(args)
        try:
            if text:
                return subprocess.run(
                    cmd,
                    cwd=self.repo_path,
                    env=self._env,
                    timeout=self.timeout,
                    check=check,
                    capture_output=True,
                    text=True,
                    encoding="utf-8",
                    errors="replace",
                )
            return subprocess.run(
                cmd,
                cwd=self.repo_path,
                env=self._env,
                timeout=self.timeout,
                check=check,
                capture_output=True,
            )
        except subprocess.TimeoutExpired as e:
            operation = next((arg for arg in args if not arg.startswith("-")), args[0])
            raise GitCommandTimeoutError(operation, self.timeout) from e

    def diff_trees(self, old_tree: str, new_tree: str) -> List[RawChange]:
        """Compare two trees entry by entry, recursively."""
        result = self.run_git(
            [
                "diff-tree",
                "-r",
                "-z",
                "--no-renames",
                "--name-status",
                old_tree,
                new_tree,
            ],
            text=False,
        )
        return parse_name_status(decode_paths(result.stdout))


def decode_paths(output: bytes) -> str:
    """Decode git path output so undecodable bytes survive a round trip.

    Paths decoded this way are passed back to git as arguments unchanged,
    which subprocess re-encodes with the same error handler.
    """
    return output.decode("utf-8", errors="surrogateescape")


def parse_name_status(output: str) -> List[RawChange]:
    """Parse NUL separated ``--name-status`` records."""
    changes = []
    fields = output.split("\0")
    i = 0
    while i + 1 < len(fields):
        status, path = fields[i], fields[i + 1]
        i += 2
        if not status or not path:
            continue

        letter = status[0]
        if letter == "A":
            changes.append(RawChange(letter, None, path))
        elif letter == "D":
            changes.append(RawChange(letter, path, None))
        else:
            changes.append(RawChange(letter, path, path))
    return changes


class RevisionResolver:
    """Resolves revision identifiers to tree snapshots."""

    def __init__(self, repo: GitRepository):
        self.repo = repo

    def resolve(self, ref: str) -> TreeSnapshot:
        """Resolve a commit id, abbreviated hash or symbolic name."""
        candidate = (ref or "").strip()
        # A leading dash would be read as an option by rev-parse
        if not candidate or candidate.startswith("-"):
            raise RevisionResolutionError(ref, self.repo.repo_path)

        commit = self._rev_parse(f"{candidate}^{{commit}}")
        if commit is None:
            raise RevisionResolutionError(ref, self.repo.repo_path)

        tree = self._rev_parse(f"{commit}^{{tree}}")
        if tree is None:
            raise RevisionResolutionError(ref, self.repo.repo_path)

        logger.debug(
            "Resolved revision",
            extra={"ref": ref, "commit": commit, "tree": tree},
        )
        return TreeSnapshot(ref=ref, commit=commit, tree=tree)

    def _rev_parse(self, revision: str) -> Optional[str]:
        result = self.repo.run_git(["rev-parse", "--verify", "--quiet", revision], check=False)
        sha = result.stdout.strip()
        if result.returncode != 0 or not sha:
            return None
        return sha


class ContentFetcher:
    """Reads file text out of a tree snapshot."""

    def __init__(self, repo: GitRepository):
        self.repo = repo

    def get_content(self, path: str, snapshot: TreeSnapshot) -> Optional[str]:
        """Return the UTF-8 text of ``path`` or None when it is absent."""
        logger.debug(
            "Getting file content",
            extra={"path": path, "commit": snapshot.commit},
        )

        # Paths from diff-tree are root-relative whatever the working directory is
        try:
            listing = self.repo.run_git(
                [
                    "--literal-pathspecs",
                    "ls-tree",
                    "--full-tree",
                    "-z",
                    snapshot.tree,
                    "--",
                    path,
                ],
                text=False,
            )
        except subprocess.CalledProcessError as e:
            raise ContentReadError(path, snapshot.ref, _stderr_text(e)) from e

        object_id = _find_blob(decode_paths(listing.stdout), path)
        if object_id is None:
            logger.debug("File not found", extra={"path": path, "commit": snapshot.commit})
            return None

        try:
            blob = self.repo.run_git(["cat-file", "blob", object_id], text=False)
        except subprocess.CalledProcessError as e:
            raise ContentReadError(path, snapshot.ref, _stderr_text(e)) from e

        try:
            return blob.stdout.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ContentReadError(path, snapshot.ref, f"not valid UTF-8: {e}") from e


def _stderr_text(error: subprocess.CalledProcessError) -> str:
    if not error.stderr:
        return str(error)
    return error.stderr.decode("utf-8", errors="replace").strip()


def _find_blob(listing: str, path: str) -> Optional[str]:
    """Return the blob id for ``path`` from NUL separated ls-tree output."""
    for record in listing.split("\0"):
        if not record:
            continue
        meta, _, entry_path = record.partition("\t")
        parts = meta.split()
        # Expected: "<mode> <type> <object>\t<path>"
        if len(parts) >= 3 and entry_path == path and parts[1] == "blob":
            return parts[2]
    return None
