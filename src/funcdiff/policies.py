"""File type and scope policies for funcdiff."""

from typing import Iterable, Optional, Tuple

from .config import DEFAULT_SOURCE_EXTENSIONS


class SourcePolicies:
    """Decides which changed paths are analyzable source files."""

    # Extensions that never hold functions
    EXCLUDED_EXTENSIONS = {
        # Markup and configuration
        ".xml",
        ".properties",
        ".yml",
        ".yaml",
        ".json",
        ".md",
        ".txt",
        # Repository metadata
        ".gitignore",
        ".gitattributes",
        ".ds_store",
        # Build outputs and archives
        ".class",
        ".jar",
        ".war",
        ".ear",
        ".zip",
        ".tar",
        ".gz",
        # Scripts
        ".sql",
        ".sh",
        ".bat",
    }

    def __init__(
        self,
        source_extensions: Iterable[str] = DEFAULT_SOURCE_EXTENSIONS,
        target_scope: Optional[str] = None,
    ):
        self.source_extensions = tuple(ext.lower() for ext in source_extensions)
        self.scope_parts = self.scope_segments(target_scope)

    @staticmethod
    def scope_segments(target_scope: Optional[str]) -> Tuple[str, ...]:
        """Split ``com.example.app`` or ``com/example/app`` into segments."""
        if not target_scope:
            return ()
        normalized = target_scope.strip().replace("\\", "/")
        if "/" not in normalized:
            normalized = normalized.replace(".", "/")
        return tuple(part for part in normalized.split("/") if part)

    @classmethod
    def is_excluded(cls, file_path: str) -> bool:
        """Check if the path ends with a non-source extension."""
        lower = file_path.lower()
        return any(lower.endswith(ext) for ext in cls.EXCLUDED_EXTENSIONS)

    def is_source_file(self, file_path: str) -> bool:
        """Check if the path is an analyzable source file."""
        if self.is_excluded(file_path):
            return False
        lower = file_path.lower()
        return any(lower.endswith(ext) for ext in self.source_extensions)

    def in_scope(self, file_path: str) -> bool:
        """Check if the path lies under the target scope directory."""
        if not self.scope_parts:
            return True

        # The scope directory may sit below a source root such as src/main/java
        directories = file_path.split("/")[:-1]
        width = len(self.scope_parts)
        for start in range(len(directories) - width + 1):
            if tuple(directories[start:start + width]) == self.scope_parts:
                return True
        return False

    def get_file_category(self, file_path: str) -> str:
        """Get category of file for notes/logging."""
        if self.is_excluded(file_path):
            return "excluded"
        elif not self.is_source_file(file_path):
            return "non_source"
        elif not self.in_scope(file_path):
            return "out_of_scope"
        else:
            return "source"
