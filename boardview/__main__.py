"""Command-line summary of an XZZ board file.

Usage:
    python -m boardview board.pcb
    python -m boardview board.pcb --json --fold
"""
import argparse
import json
import sys
from dataclasses import asdict

from .config import LOG_LEVEL, configure_logging
from .pcb import describe
from .xzz import BoardLoadError, LoadOptions, load_board


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="boardview", description="Decode an XZZ board file")
    parser.add_argument("file", help="Path to the .pcb file")
    parser.add_argument("--json", action="store_true", help="Print the summary as JSON")
    parser.add_argument("--fold", action="store_true", help="Fold a two-sided board file")
    parser.add_argument("--mirror", action="store_true", help="Mirror the board along X")
    parser.add_argument("--no-resolve", action="store_true",
                        help="Skip pin orientation inference")
    parser.add_argument("--components", action="store_true", help="List every component")
    parser.add_argument("--log-level", default=LOG_LEVEL, help="Logging level (default: %(default)s)")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level.upper())

    options = LoadOptions(resolve_pins=not args.no_resolve, fold=args.fold, mirror_x=args.mirror)
    try:
        board = load_board(args.file, options)
    except (OSError, BoardLoadError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    info = board.get_board_info()
    if args.json:
        summary = asdict(info)
        summary["width"] = info.width
        summary["height"] = info.height
        if args.components:
            summary["components"] = [describe(c, board) for c in board.components]
        print(json.dumps(summary, indent=2))
        return 0

    print(f"Board: {info.name}")
    print(f"  Size: {info.width:.4f} x {info.height:.4f}")
    print(f"  Origin offset: ({info.origin_offset[0]:.4f}, {info.origin_offset[1]:.4f})")
    print(f"  Components: {info.component_count} ({info.pin_count} pins)")
    print(f"  Nets: {info.net_count}")
    print(f"  Traces: {info.trace_count}, arcs: {info.arc_count}, "
          f"vias: {info.via_count}, labels: {info.label_count}")
    if info.folded:
        print("  Folded: yes")
    if args.components:
        for component in board.components:
            print(f"    {describe(component, board)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
