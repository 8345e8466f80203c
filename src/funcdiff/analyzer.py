"""Function change analysis across two revisions."""

import logging
import subprocess
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import List, Optional, Set

from .changes import ChangedFile, TreeDiffer
from .classify import ChangeClassifier, FileClassification
from .config import AnalysisConfig
from .errors import (
    AnalysisError,
    ContentReadError,
    FuncDiffError,
    GitCommandTimeoutError,
)
from .extractor import FunctionExtractor, FunctionInventory
from .policies import SourcePolicies
from .vcs import ContentFetcher, GitRepository, RevisionResolver, TreeSnapshot

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    """Aggregate of all per-file classifications."""

    old_ref: str
    new_ref: str
    added_functions: Set[str] = field(default_factory=set)
    deleted_functions: Set[str] = field(default_factory=set)
    changed_functions: Set[str] = field(default_factory=set)
    files_analyzed: int = 0

    def merge(self, classification: FileClassification) -> None:
        self.added_functions |= classification.qualified(classification.added)
        self.deleted_functions |= classification.qualified(classification.deleted)
        self.changed_functions |= classification.qualified(classification.changed)
        self.files_analyzed += 1

    @property
    def total_changes(self) -> int:
        return len(self.added_functions) + len(self.deleted_functions) + len(self.changed_functions)


class AnalysisOrchestrator:
    """Runs resolve, diff, fetch, extract and classify over a borrowed repository."""

    def __init__(
        self,
        repo: GitRepository,
        policies: Optional[SourcePolicies] = None,
        max_workers: int = 1,
        extractor: Optional[FunctionExtractor] = None,
        classifier: Optional[ChangeClassifier] = None,
    ):
        if max_workers < 1:
            raise ValueError("max_workers must be at least 1")
        self.repo = repo
        self.max_workers = max_workers
        self.resolver = RevisionResolver(repo)
        self.differ = TreeDiffer(repo, policies)
        self.fetcher = ContentFetcher(repo)
        self.extractor = extractor or FunctionExtractor()
        self.classifier = classifier or ChangeClassifier()

    def analyze(self, old_ref: str, new_ref: str) -> AnalysisResult:
        """Classify every function of every changed source file.

        Failures before the per-file loop raise AnalysisError. Failures
        inside it only empty the affected side of that one file.
        """
        logger.info(
            "Analyzing function changes",
            extra={"old_ref": old_ref, "new_ref": new_ref},
        )

        try:
            old = self.resolver.resolve(old_ref)
            new = self.resolver.resolve(new_ref)
            changed_files = self.differ.diff(old, new)
        except (FuncDiffError, subprocess.CalledProcessError, RuntimeError, OSError) as e:
            logger.error("Error analyzing function changes: %s", e)
            raise AnalysisError(old_ref, new_ref, e) from e

        logger.info("Found changed source files", extra={"files": len(changed_files)})

        result = AnalysisResult(old_ref=old_ref, new_ref=new_ref)
        for classification in self._classify_all(changed_files, old, new):
            result.merge(classification)

        logger.info(
            "Analysis completed",
            extra={
                "added": len(result.added_functions),
                "deleted": len(result.deleted_functions),
                "changed": len(result.changed_functions),
            },
        )
        return result

    def _classify_all(
        self, changed_files: List[ChangedFile], old: TreeSnapshot, new: TreeSnapshot
    ) -> List[FileClassification]:
        if self.max_workers == 1 or len(changed_files) < 2:
            return [self._classify_file(changed, old, new) for changed in changed_files]

        # Workers return partial results; merging stays on the calling thread
        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            return list(
                executor.map(lambda changed: self._classify_file(changed, old, new), changed_files)
            )

    def _classify_file(
        self, changed: ChangedFile, old: TreeSnapshot, new: TreeSnapshot
    ) -> FileClassification:
        logger.debug("Analyzing function changes in file", extra={"path": changed.path})

        old_content = self._content(changed.path, old)
        new_content = self._content(changed.path, new)
        if old_content is None and new_content is None:
            logger.warning(
                "Changed file has no readable content in either revision",
                extra={"path": changed.path, "status": changed.status},
            )

        return self.classifier.classify(
            changed.path,
            self._inventory(changed.path, old_content, old),
            self._inventory(changed.path, new_content, new),
        )

    def _content(self, path: str, snapshot: TreeSnapshot) -> Optional[str]:
        try:
            return self.fetcher.get_content(path, snapshot)
        except (ContentReadError, GitCommandTimeoutError) as e:
            logger.warning(
                "Treating unreadable file as empty: %s",
                e.message,
                extra={"path": path, "commit": snapshot.commit},
            )
            return None

    def _inventory(
        self, path: str, content: Optional[str], snapshot: TreeSnapshot
    ) -> FunctionInventory:
        inventory = self.extractor.extract(content)
        if inventory.parse_failed:
            logger.warning(
                "Parse failure degraded inventory to empty",
                extra={"path": path, "commit": snapshot.commit},
            )
        return inventory


def analyze(
    repo: GitRepository,
    old_ref: str,
    new_ref: str,
    policies: Optional[SourcePolicies] = None,
    max_workers: int = 1,
) -> AnalysisResult:
    """Analyze function changes between two revisions of an open repository."""
    return AnalysisOrchestrator(repo, policies=policies, max_workers=max_workers).analyze(
        old_ref, new_ref
    )


def run_analysis(config: AnalysisConfig) -> AnalysisResult:
    """Open the configured repository, analyze, and release it."""
    policies = SourcePolicies(config.source_extensions, config.target_scope)
    repo = GitRepository(config.repo_path, timeout=config.git_timeout, env=config.git_env)
    try:
        repo.open()
    except FuncDiffError as e:
        repo.close()
        raise AnalysisError(config.old_ref, config.new_ref, e) from e

    with repo:
        return analyze(
            repo,
            config.old_ref,
            config.new_ref,
            policies=policies,
            max_workers=config.max_workers,
        )
