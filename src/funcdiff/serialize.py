"""Deterministic serialization for funcdiff results."""

import hashlib
import json
import logging
from typing import Any, Dict, Iterable, List, Optional

from .analyzer import AnalysisResult
from .config import AnalysisConfig

logger = logging.getLogger(__name__)


class ResultSerializer:
    """Handles deterministic JSON serialization with stable ordering."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """Initialize with the configuration echoed into the output."""
        self.config = config

    def serialize_result(self, result: AnalysisResult) -> Dict[str, Any]:
        """Serialize an analysis result to a deterministic dictionary."""
        logger.debug(
            "Serializing result",
            extra={
                "added": len(result.added_functions),
                "deleted": len(result.deleted_functions),
                "changed": len(result.changed_functions),
            },
        )

        payload: Dict[str, Any] = {
            "old_commit": result.old_ref,
            "new_commit": result.new_ref,
            "added_functions": _display_entries(result.added_functions),
            "deleted_functions": _display_entries(result.deleted_functions),
            "changed_functions": _display_entries(result.changed_functions),
            "files_analyzed": result.files_analyzed,
        }
        if self.config is not None:
            payload["provenance"] = self.config.to_provenance_dict()

        payload["checksum"] = self._compute_checksum(payload)
        return payload

    def _compute_checksum(self, payload: Dict[str, Any]) -> str:
        """Compute SHA-256 checksum of the payload without its checksum field."""
        stripped = {key: value for key, value in payload.items() if key != "checksum"}
        checksum = hashlib.sha256(self._to_deterministic_json_bytes(stripped)).hexdigest()
        logger.debug("Computed payload checksum", extra={"checksum": checksum})
        return checksum

    def _to_deterministic_json_bytes(self, obj: Any) -> bytes:
        """Convert object to deterministic JSON bytes."""
        json_str = json.dumps(
            obj,
            ensure_ascii=False,
            sort_keys=True,
            separators=(",", ":"),
            indent=None,
        )
        return json_str.encode("utf-8", errors="replace")

    def to_json_string(self, payload: Dict[str, Any]) -> str:
        """Convert payload to pretty-printed JSON string."""
        return json.dumps(
            payload,
            ensure_ascii=False,
            sort_keys=True,
            indent=2,
        )

    def create_success_envelope(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        """Create success envelope around payload."""
        return {"ok": True, "data": payload}

    def create_error_envelope(
        self, error_code: str, error_message: str, details: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        """Create error envelope."""
        logger.debug("Creating error envelope", extra={"code": error_code})
        error_data: Dict[str, Any] = {
            "code": error_code,
            "message": error_message,
        }
        if details:
            error_data["details"] = details

        return {"ok": False, "error": error_data}


def _display_entries(entries: Iterable[str]) -> List[str]:
    """Sort entries, showing undecodable path bytes as replacement characters."""
    return sorted(
        entry.encode("utf-8", errors="surrogateescape").decode("utf-8", errors="replace")
        for entry in entries
    )
