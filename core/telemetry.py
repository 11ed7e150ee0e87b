#!/usr/bin/env python3
"""JSON-lines run events for PanicPoint."""

from __future__ import annotations

import datetime as dt
import json
from pathlib import Path
from typing import Any, Dict, List, Optional

from core.errors import PanicPointError, TelemetryError
from core.task_model import RunContext


ROOT = Path(__file__).resolve().parents[1]
DEFAULT_EVENTS_FILE = ROOT / "logs" / "telemetry" / "events.jsonl"


def _iso_now() -> str:
    return dt.datetime.now().isoformat(timespec="seconds")


class TelemetryClient:
    """Appends one JSON object per event; relative paths resolve against the project root."""

    def __init__(self, *, events_file: Path = DEFAULT_EVENTS_FILE, module: str = "panicpoint"):
        events_file = Path(events_file)
        self.events_file = events_file if events_file.is_absolute() else ROOT / events_file
        try:
            self.events_file.parent.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise TelemetryError(f"cannot create {self.events_file.parent}: {exc.strerror or exc}", path=str(self.events_file)) from exc
        self.module = module

    def emit(
        self,
        *,
        action: str,
        status: str,
        ctx: RunContext,
        latency_ms: int = 0,
        error: Optional[PanicPointError] = None,
        meta: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "ts": _iso_now(),
            "module": self.module,
            "action": action,
            "status": status,
            "trace_id": ctx.trace_id,
            "run_id": ctx.run_id,
            "input_mode": ctx.input_mode,
            "latency_ms": int(latency_ms or 0),
            "error_code": error.code if error else "",
            "error_message": error.message if error else "",
            "meta": meta or {},
        }
        try:
            with self.events_file.open("a", encoding="utf-8") as f:
                f.write(json.dumps(payload, ensure_ascii=False) + "\n")
        except OSError as exc:
            raise TelemetryError(f"cannot append to {self.events_file}: {exc.strerror or exc}", path=str(self.events_file)) from exc
        return payload


def read_events(path: Path) -> List[Dict[str, Any]]:
    path = Path(path)
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines() if line.strip()]
