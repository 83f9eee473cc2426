from __future__ import annotations

from dataclasses import dataclass, field
import json
from pathlib import Path
import sys
from typing import Any, Dict, List, Optional

from .pipeline.gate import GateDecision
from .schemas import ExtractionCandidate, LookupRequest, LookupResult


@dataclass
class LookupTrace:
    """What happened during one run; feeds the ops record only."""
    mode: str  # "playwright" or "static"
    url: Optional[str] = None
    status_code: Optional[int] = None
    gate: Optional[GateDecision] = None
    strategies: List[str] = field(default_factory=list)
    skipped_locators: List[str] = field(default_factory=list)
    candidate: Optional[ExtractionCandidate] = None
    navigate_s: float = 0.0
    extract_s: float = 0.0


def build_ops_record(
    request: Optional[LookupRequest],
    trace: LookupTrace,
    result: LookupResult,
    total_s: float,
) -> Dict[str, Any]:
    gate = trace.gate
    return {
        "pnl_ops": 1,
        "phone_number": request.phone_number if request else None,
        "url": trace.url,
        "mode": trace.mode,
        "status_code": trace.status_code,
        "gate": bool(gate and gate.gated),
        "gate_markers": list(gate.markers) if gate else [],
        "strategies": list(trace.strategies),
        "skipped_locators": list(trace.skipped_locators),
        "success": result.success,
        "source": result.source.value if result.source else None,
        "locator": trace.candidate.locator if trace.candidate else None,
        "error": result.error,
        "durations": {
            "navigate_s": round(trace.navigate_s, 4),
            "extract_s": round(trace.extract_s, 4),
            "total_s": round(max(0.0, total_s), 4),
        },
    }


class OpsLogger:
    """Appends one JSON line per lookup run to a file.

    stdout carries the lookup result, so records only ever go to the file;
    a failed write is reported on stderr and never fails the run.
    """

    def __init__(self, file_path: Path) -> None:
        self.file_path = Path(file_path)

    def log_run(
        self,
        request: Optional[LookupRequest],
        trace: LookupTrace,
        result: LookupResult,
        total_s: float,
    ) -> None:
        self.write(build_ops_record(request, trace, result, total_s))

    def write(self, record: Dict[str, Any]) -> None:
        line = json.dumps(record, ensure_ascii=False, default=str)
        try:
            self.file_path.parent.mkdir(parents=True, exist_ok=True)
            with self.file_path.open("a", encoding="utf-8") as f:
                f.write(line + "\n")
        except OSError as e:
            print(f"Ops log write failed ({self.file_path}): {e}", file=sys.stderr)
