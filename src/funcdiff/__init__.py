"""funcdiff: function-level change analysis between two Git revisions.

Reports which methods were added, deleted or changed between two commits
of a Java code base, for change-impact analysis in review and CI tooling.
"""

__version__ = "1.0.0"
__author__ = "funcdiff developers"

__all__ = ["__version__"]
