#!/usr/bin/env python3
"""PanicPoint: turn an outline into a .pptx presentation."""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from core.archive_writer import write_package
from core.config import CONFIG_FILE, load_config
from core.deck_model import PresentationInput, default_output_filename, presentation_from_dict
from core.errors import OutlineError, PanicPointError, TelemetryError
from core.package_builder import build_package
from core.task_model import RunContext, create_run_context
from core.telemetry import TelemetryClient
from scripts.outline_prompt import RULE, collect_presentation, show_welcome


def load_outline(path: Path) -> PresentationInput:
    try:
        obj = json.loads(Path(path).read_text(encoding="utf-8"))
    except OSError as exc:
        raise OutlineError(f"cannot read outline {path}: {exc.strerror or exc}", path=str(path)) from exc
    except json.JSONDecodeError as exc:
        raise OutlineError(f"outline {path} is not valid JSON: {exc}", path=str(path)) from exc
    return presentation_from_dict(obj)


def create_presentation(presentation: PresentationInput, out_path: Path, *, creator: str) -> Dict[str, Any]:
    parts = build_package(presentation, creator=creator)
    write_package(parts, out_path)
    return {"out_pptx": str(out_path), "slides": len(presentation.slides), "parts": len(parts)}


def _telemetry(cfg: Dict[str, Any], args: argparse.Namespace) -> Optional[TelemetryClient]:
    tcfg = cfg.get("telemetry", {})
    if args.no_telemetry or not tcfg.get("enabled", True):
        return None
    events_file = args.events_file or str(tcfg.get("events_file", "logs/telemetry/events.jsonl"))
    try:
        return TelemetryClient(events_file=Path(events_file))
    except TelemetryError as exc:
        _warn_telemetry(exc)
        return None


def _warn_telemetry(exc: TelemetryError) -> None:
    print(f"⚠️  Telemetry not recorded: {exc}", file=sys.stderr)


def _emit(
    client: Optional[TelemetryClient],
    ctx: RunContext,
    *,
    status: str,
    started: float,
    meta: Dict[str, Any],
    error: Optional[PanicPointError] = None,
) -> None:
    if client is None:
        return
    try:
        client.emit(
            action="build",
            status=status,
            ctx=ctx,
            latency_ms=int((time.monotonic() - started) * 1000),
            error=error,
            meta=meta,
        )
    except TelemetryError as exc:
        _warn_telemetry(exc)


def build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a .pptx presentation from an outline")
    parser.add_argument("--outline-json", default="", help="read the outline from a JSON file instead of prompting")
    parser.add_argument("--out-pptx", default="", help="output path (default: <prefix>_<title>.pptx)")
    parser.add_argument("--config", default=str(CONFIG_FILE))
    parser.add_argument("--events-file", default="")
    parser.add_argument("--no-telemetry", action="store_true")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_cli().parse_args(argv)
    interactive = not args.outline_json
    started = time.monotonic()
    ctx = create_run_context(input_mode="interactive" if interactive else "json")
    client: Optional[TelemetryClient] = None
    meta: Dict[str, Any] = {"input_mode": ctx.input_mode}
    try:
        cfg = load_config(Path(args.config))
        client = _telemetry(cfg, args)
        if interactive:
            show_welcome()
            presentation = collect_presentation(ask=input)
            print(f"\n{RULE}\n")
            print("⚡ Creating your presentation... Almost there!")
        else:
            presentation = load_outline(Path(args.outline_json))
        if args.out_pptx:
            out_path = Path(args.out_pptx)
        else:
            out_dir = Path(str(cfg["output"].get("directory", ".")))
            out_path = out_dir / default_output_filename(presentation.title, str(cfg["output"]["prefix"]))
        ctx.out_pptx = str(out_path)
        meta["out_pptx"] = ctx.out_pptx
        result = create_presentation(presentation, out_path, creator=str(cfg["document"]["creator"]))
    except PanicPointError as exc:
        _emit(client, ctx, status="failed", started=started, meta=meta, error=exc)
        print(f"\n😱 Error: {exc}", file=sys.stderr)
        print(json.dumps({"ok": False, "error": exc.to_dict(), "trace_id": ctx.trace_id, "run_id": ctx.run_id}, ensure_ascii=False, indent=2))
        return 1

    meta.update(slides=result["slides"], parts=result["parts"])
    _emit(client, ctx, status="ok", started=started, meta=meta)
    if interactive:
        print(f"\n🎉 Success! Presentation saved as: {result['out_pptx']}")
    print(json.dumps({"ok": True, **result, "trace_id": ctx.trace_id, "run_id": ctx.run_id}, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
