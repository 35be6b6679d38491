"""Designer CLI entrypoints."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

from .assets.categories import AssetCategory, category_spec
from .engine import DesignerEngine
from .gallery.state import SUCCESS
from .providers import default_registry
from .utils import load_dotenv


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="designer", description="Reference-driven UI asset designer")
    sub = parser.add_subparsers(dest="command")

    design = sub.add_parser("design", help="Analyze a reference image and generate all assets")
    design.add_argument("--reference", required=True, help="Path to reference image")
    design.add_argument("--out", required=True, help="Session output directory")
    design.add_argument("--note", default="", help="Extra design requirements blended into every prompt")
    design.add_argument("--events", help="Path to events.jsonl")
    design.add_argument("--provider", default="gemini", choices=["gemini", "dryrun"])

    serve = sub.add_parser("serve", help="Run the local gallery web app")
    serve.add_argument("--out", required=True, help="Session output directory")
    serve.add_argument("--events", help="Path to events.jsonl")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8765)
    serve.add_argument("--provider", default="gemini", choices=["gemini", "dryrun"])

    return parser


def _build_engine(args: argparse.Namespace) -> DesignerEngine:
    run_dir = Path(args.out)
    events_path = Path(args.events) if args.events else None
    return DesignerEngine(run_dir, events_path, provider=args.provider, provider_registry=default_registry())


def _handle_design(args: argparse.Namespace) -> int:
    reference = Path(args.reference)
    if not reference.is_file():
        print(f"Reference image not found: {reference}")
        return 1
    engine = _build_engine(args)
    try:
        engine.set_reference_path(reference)
        engine.set_note(args.note)
        print("• Analyzing reference style")
        started = time.monotonic()
        futures = engine.start_design_process()
        if futures is None:
            print(f"Style analysis failed: {engine.session.analysis_error}")
            return 1
        analysis = engine.session.analysis
        print(f"Style: {analysis.text if analysis else ''}")
        print(f"• Generating {len(futures)} assets")
        statuses = engine.wait(futures)
        failed = 0
        for category in AssetCategory:
            label = category_spec(category).label
            if statuses.get(category) == SUCCESS:
                path = engine.save_asset(category)
                print(f"  {label}: {path}")
            else:
                failed += 1
                print(f"  {label}: failed ({engine.session.record(category).error_message})")
        print(f"Done in {time.monotonic() - started:.1f}s")
        return 1 if failed else 0
    finally:
        engine.close()


def _handle_serve(args: argparse.Namespace) -> int:
    from .server import serve

    engine = _build_engine(args)
    return serve(engine, host=args.host, port=args.port)


def main() -> None:
    load_dotenv()
    parser = _build_parser()
    args = parser.parse_args()
    if args.command == "design":
        raise SystemExit(_handle_design(args))
    if args.command == "serve":
        raise SystemExit(_handle_serve(args))
    parser.print_help()
    raise SystemExit(1)


if __name__ == "__main__":
    main()
