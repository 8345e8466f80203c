"""Changed-file discovery and filtering for funcdiff."""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional

from .policies import SourcePolicies
from .vcs import GitRepository, RawChange, TreeSnapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ChangedFile:
    """A source path that changed between two snapshots and survived filtering."""

    path: str
    status: str
    path_old: Optional[str] = None


class TreeDiffer:
    """Finds changed source files between two tree snapshots."""

    def __init__(self, repo: GitRepository, policies: Optional[SourcePolicies] = None):
        self.repo = repo
        self.policies = policies or SourcePolicies()

    def diff(self, old: TreeSnapshot, new: TreeSnapshot) -> List[ChangedFile]:
        """Return changed source files ordered by path."""
        raw_changes = self.repo.diff_trees(old.tree, new.tree)
        return self.filter_changes(raw_changes)

    def filter_changes(self, raw_changes: List[RawChange]) -> List[ChangedFile]:
        """Apply the deletion, extension and scope filters in that order."""
        kept: Dict[str, ChangedFile] = {}
        excluded = 0

        for change in raw_changes:
            file_path = change.path_new

            # Pure deletions have no new-side path
            if file_path is None:
                logger.debug("Excluding deleted file", extra={"path": change.path_old})
                excluded += 1
                continue

            if not self.policies.is_source_file(file_path):
                logger.debug(
                    "Excluding file",
                    extra={
                        "path": file_path,
                        "category": self.policies.get_file_category(file_path),
                    },
                )
                excluded += 1
                continue

            if not self.policies.in_scope(file_path):
                logger.debug("Excluding file outside target scope", extra={"path": file_path})
                excluded += 1
                continue

            logger.debug("Including file for analysis", extra={"path": file_path})
            kept[file_path] = ChangedFile(
                path=file_path,
                status=change.status,
                path_old=change.path_old,
            )

        changed_files = [kept[path] for path in sorted(kept)]
        logger.info(
            "File filtering complete",
            extra={
                "total": len(raw_changes),
                "excluded": excluded,
                "included": len(changed_files),
            },
        )
        return changed_files
