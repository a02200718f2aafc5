"""Manifest helpers for recording pipeline run metadata."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from landmark_warp.utils.run_context import RunContext


def _safe_json(value: Any) -> Any:
    """Ensure value is JSON-serializable; fallback to string."""
    try:
        json.dumps(value)
        return value
    except TypeError:
        return str(value)


def build_manifest(
    context: RunContext,
    outputs: Optional[Dict[str, Any]] = None,
    warnings: Optional[List[str]] = None,
    errors: Optional[List[str]] = None,
) -> Dict[str, Any]:
    """Build the run manifest payload."""
    return {
        "manifest_version": context.schema_version,
        "run_id": context.run_id,
        "created_utc": context.created_utc or datetime.now(timezone.utc).isoformat(),
        "context": context.to_dict(),
        "stages": [stage.to_dict() for stage in context.stages],
        "outputs": {key: _safe_json(value) for key, value in (outputs or {}).items()},
        "warnings": warnings if warnings is not None else context.messages("warn"),
        "errors": errors if errors is not None else context.messages("error"),
    }


def write_manifest(path: Union[str, Path], manifest: Dict[str, Any]) -> None:
    """Write the manifest as indented JSON."""
    Path(path).write_text(json.dumps(manifest, indent=2, sort_keys=True))
