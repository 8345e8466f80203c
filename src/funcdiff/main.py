"""Main CLI entry point for funcdiff."""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .analyzer import AnalysisResult, run_analysis
from .config import AnalysisConfig, parse_extensions
from .errors import FuncDiffError
from .logging_utils import configure_logging
from .serialize import ResultSerializer
from .settings import get_repository_path, get_target_scope

logger = logging.getLogger(__name__)


def create_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        prog="funcdiff",
        description="Report functions added, deleted or changed between two Git revisions",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  funcdiff --old abc123 --new def456
  funcdiff --repo /path/to/repo --old v1.0 --new v2.0 --json output.json
  funcdiff --repo /path/to/repo --old HEAD~3 --new HEAD \\
           --scope com.example.myapp --workers 4 --summary
        """,
    )

    # Required arguments
    parser.add_argument(
        "--old",
        required=True,
        help="Old revision (commit SHA, abbreviated hash, tag or branch)",
    )
    parser.add_argument(
        "--new",
        required=True,
        help="New revision (commit SHA, abbreviated hash, tag or branch)",
    )

    # Optional arguments
    parser.add_argument(
        "--repo",
        default=None,
        help="Local repository path (default: $FUNCDIFF_REPO_PATH or .)",
    )
    parser.add_argument(
        "--scope",
        default=None,
        help="Target package or directory, e.g. com.example.myapp "
        "(default: $FUNCDIFF_TARGET_SCOPE, or every path)",
    )
    parser.add_argument(
        "--extensions",
        default=".java",
        help="Comma separated source extensions to analyze (default: .java)",
    )
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Number of files analyzed in parallel (default: 1)",
    )
    parser.add_argument(
        "--json",
        help="Output JSON to file instead of stdout",
    )
    parser.add_argument(
        "--summary",
        action="store_true",
        help="Also log a human-readable summary of the changes",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
        help="Log level (default: $LOG_LEVEL or INFO)",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate command line arguments."""
    if args.workers < 1:
        raise ValueError("--workers must be at least 1")
    if not parse_extensions(args.extensions):
        raise ValueError("--extensions cannot be empty")


def create_config(args: argparse.Namespace) -> AnalysisConfig:
    """Create configuration from command line arguments."""
    return AnalysisConfig(
        repo_path=args.repo or get_repository_path(),
        old_ref=args.old,
        new_ref=args.new,
        target_scope=args.scope if args.scope is not None else get_target_scope(),
        source_extensions=parse_extensions(args.extensions),
        max_workers=args.workers,
        json_output_path=args.json,
    )


def log_summary(result: AnalysisResult) -> None:
    """Log the analysis results in a readable form."""
    logger.info("=== Function Change Analysis Results ===")
    logger.info("Old Commit: %s", result.old_ref)
    logger.info("New Commit: %s", result.new_ref)
    logger.info("Total Changes: %d functions", result.total_changes)

    for title, marker, entries in (
        ("ADDED", "+", result.added_functions),
        ("DELETED", "-", result.deleted_functions),
        ("CHANGED", "*", result.changed_functions),
    ):
        if entries:
            logger.info("=== %s Functions (%d) ===", title, len(entries))
            for entry in sorted(entries):
                logger.info("  %s %s", marker, entry)

    if result.total_changes == 0:
        logger.info("No function changes detected in the target scope")


def output_result(result: dict, output_path: Optional[str]) -> None:
    """Output result to stdout or file."""
    json_str = ResultSerializer().to_json_string(result)

    if output_path:
        Path(output_path).write_text(json_str, encoding="utf-8")
    else:
        print(json_str)


def main() -> int:
    """Main entry point."""
    parser = create_parser()
    args = parser.parse_args()
    configure_logging(args.log_level)
    serializer = ResultSerializer()

    try:
        # Validate arguments
        validate_args(args)

        # Create configuration
        config = create_config(args)

        # Analyze
        result = run_analysis(config)
        if args.summary:
            log_summary(result)

        # Create success envelope
        serializer = ResultSerializer(config)
        envelope = serializer.create_success_envelope(serializer.serialize_result(result))
        output_result(envelope, config.json_output_path)
        return 0

    except FuncDiffError as e:
        logger.error("%s", e.message)
        envelope = serializer.create_error_envelope(e.code, e.message, e.details)
        output_result(envelope, args.json)
        return 1

    except ValueError as e:
        envelope = serializer.create_error_envelope("INVALID_ARGUMENT", str(e))
        output_result(envelope, args.json)
        return 1

    except Exception as e:
        logger.exception("Unexpected error during analysis")
        envelope = serializer.create_error_envelope(
            "INTERNAL_ERROR",
            f"Internal error: {str(e)}",
            {"type": type(e).__name__},
        )
        output_result(envelope, args.json)
        return 1


if __name__ == "__main__":
    sys.exit(main())
