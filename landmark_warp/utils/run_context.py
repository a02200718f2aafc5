"""Run context with structured logging and stage timings."""

from __future__ import annotations

import contextlib
from dataclasses import dataclass, field
from datetime import datetime, timezone
import json
import threading
import time
import uuid
from typing import Any, Dict, Iterator, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from landmark_warp.config import LandmarkWarpConfig


SCHEMA_VERSION = "landmark_warp_manifest_v1"


@dataclass
class StageTiming:
    """Timing information for a pipeline stage on one sample."""

    stage: str
    elapsed_ms: float
    started_utc: str
    sample_id: Optional[str] = None

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict."""
        return {
            "stage": self.stage,
            "elapsed_ms": self.elapsed_ms,
            "started_utc": self.started_utc,
            "sample_id": self.sample_id,
        }


@dataclass
class RunContext:
    """Execution context shared by the stages of one pipeline run."""

    run_id: str = field(default_factory=lambda: uuid.uuid4().hex)
    created_utc: str = field(
        default_factory=lambda: datetime.now(timezone.utc).isoformat()
    )
    schema_version: str = SCHEMA_VERSION
    verbose: bool = True
    stages: List[StageTiming] = field(default_factory=list)
    logs: List[Dict[str, object]] = field(default_factory=list)
    config: Optional["LandmarkWarpConfig"] = None
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def log(self, level: str, message: str, **fields: Any) -> str:
        """Emit a structured log line tagged with the current run_id."""
        ordered_fields = " ".join(f"{key}={fields[key]}" for key in sorted(fields))
        line = f"[landmark_warp] run_id={self.run_id} level={level} msg={message}"
        if ordered_fields:
            line = f"{line} {ordered_fields}"
        if self.verbose:
            print(line)
        with self._lock:
            self.logs.append({"level": level, "message": message, **fields})
        return line

    @contextlib.contextmanager
    def time_block(self, stage: str, sample_id: Optional[str] = None) -> Iterator[None]:
        """Context manager that records elapsed time for a stage."""
        start = time.perf_counter()
        started_utc = datetime.now(timezone.utc).isoformat()
        try:
            yield
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000.0
            timing = StageTiming(
                stage=stage,
                elapsed_ms=elapsed_ms,
                started_utc=started_utc,
                sample_id=sample_id,
            )
            with self._lock:
                self.stages.append(timing)

    def messages(self, level: str) -> List[str]:
        """Logged messages of one level, in emission order."""
        with self._lock:
            return [
                str(entry["message"]) for entry in self.logs if entry["level"] == level
            ]

    def to_dict(self) -> Dict[str, object]:
        """Return a JSON-serializable dict describing this context."""
        data: Dict[str, object] = {
            "run_id": self.run_id,
            "created_utc": self.created_utc,
            "schema_version": self.schema_version,
        }
        if self.config is not None:
            data["config"] = self.config.to_dict()
        try:
            json.dumps(data)
        except TypeError as exc:
            raise ValueError("RunContext contains non-serializable values") from exc
        return data
