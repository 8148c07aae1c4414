#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
RSTAB link command line runner with three modes:
1) build  : 曲线文件 -> 结构图 (.npz / .xlsx)
2) export : 曲线文件 -> 结构图 -> RSTAB
3) import : RSTAB -> 结构图 (.npz / .xlsx)
"""

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional

from rstab_link.common.config import SETTINGS
from rstab_link.common.errors import ERROR_MESSAGES, ErrorCode
from rstab_link.conversion import export_graph, import_graph
from rstab_link.geometry_modeling import build_graph, load_anchor_points, load_curve_groups
from rstab_link.graph_dataset import save_graph_snapshot, write_graph_workbook
from rstab_link.model import StructuralGraph


def _log(message: str) -> None:
    print(message, flush=True)


def _default_snapshot_path() -> Path:
    return Path(SETTINGS.paths.output_directory) / SETTINGS.paths.snapshot_name


def _write_outputs(graph: StructuralGraph, args: argparse.Namespace) -> None:
    out_path = args.out or _default_snapshot_path()
    save_graph_snapshot(graph, out_path)
    if args.xlsx:
        write_graph_workbook(graph, args.xlsx)


def _build_from_file(args: argparse.Namespace) -> StructuralGraph:
    _log(f"\n[阶段1] 读取曲线: {args.curves}")
    groups, labels = load_curve_groups(args.curves)
    _log(f"- 曲线分组: {len(groups)}, 曲线数: {sum(len(g) for g in groups)}")
    graph = build_graph(groups, labels, tolerance=args.tolerance, deduplicate=args.dedup)
    _log(f"- 结构图: {len(graph.nodes)} 节点, {len(graph.edges)} 杆件, {len(graph.cross_sections)} 截面")
    return graph


def _report(code: int, message: str) -> int:
    if code == 0:
        _log("[完成] No errors")
    else:
        _log(f"[错误] code={code}: {message}")
    return 0 if code == 0 else 1


def _report_local(exc: Exception) -> int:
    """Bad curve geometry or an unreadable input file."""
    code = getattr(exc, "code", ErrorCode.LOCAL_LINE)
    return _report(int(code), f"{ERROR_MESSAGES[code]}: {exc}")


def cmd_build(args: argparse.Namespace) -> int:
    try:
        graph = _build_from_file(args)
    except (ValueError, OSError) as exc:
        return _report_local(exc)
    _log("\n[阶段2] 写出结构图")
    _write_outputs(graph, args)
    return 0


def cmd_export(args: argparse.Namespace) -> int:
    try:
        graph = _build_from_file(args)
        anchors = load_anchor_points(args.anchors) if args.anchors else None
    except (ValueError, OSError) as exc:
        return _report_local(exc)
    if anchors is not None:
        _log(f"- 支座锚点: {len(anchors)}")

    _log("\n[阶段2] 写入 RSTAB")
    code, message = export_graph(
        graph,
        anchor_points=anchors,
        tolerance=args.tolerance,
        delete_existing=not args.keep_existing,
    )
    return _report(code, message)


def cmd_import(args: argparse.Namespace) -> int:
    _log("\n[阶段1] 读取 RSTAB 模型")
    graph, code, message = import_graph(selected_only=args.selected_only, include_dummy=args.include_dummy)
    status = _report(code, message)
    if code != 0:
        return status

    _log(f"- 结构图: {len(graph.nodes)} 节点, {len(graph.edges)} 杆件, {len(graph.cross_sections)} 截面")
    _log("\n[阶段2] 写出结构图")
    _write_outputs(graph, args)
    return status


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--out", type=Path, default=None, help="Snapshot path (.npz). Defaults to the output directory.")
    parser.add_argument("--xlsx", type=Path, default=None, help="Also write an Excel workbook here.")


def _add_build_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("curves", type=Path, help="Curve groups (.csv / .xlsx / .json).")
    parser.add_argument("--tolerance", type=float, default=None, help="Endpoint merge tolerance.")
    parser.add_argument("--dedup", action="store_true", help="Skip members duplicating an existing one.")


def build_parser() -> argparse.ArgumentParser:
    example = """Examples:
  python -m rstab_link.main build frame.csv --tolerance 0.01 --xlsx frame.xlsx
  python -m rstab_link.main export frame.json --anchors supports.csv
  python -m rstab_link.main import --selected-only --out model.npz
"""
    parser = argparse.ArgumentParser(
        description="Convert CAD curve groups to RSTAB structures and back.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=example,
    )
    sub = parser.add_subparsers(dest="command", required=True)

    build = sub.add_parser("build", help="Build the structural graph and save it.")
    _add_build_args(build)
    _add_output_args(build)
    build.set_defaults(func=cmd_build)

    export = sub.add_parser("export", help="Build the structural graph and write it into RSTAB.")
    _add_build_args(export)
    export.add_argument("--anchors", type=Path, default=None, help="Support anchor points (.csv / .xlsx / .json).")
    export.add_argument("--keep-existing", action="store_true", help="Do not clear the RSTAB model first.")
    export.set_defaults(func=cmd_export)

    imp = sub.add_parser("import", help="Read the active RSTAB model into a structural graph.")
    imp.add_argument("--selected-only", action="store_true", help="Only read selected objects.")
    imp.add_argument("--include-dummy", action="store_true", help="Keep dummy members.")
    _add_output_args(imp)
    imp.set_defaults(func=cmd_import)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    _log("=" * 80)
    _log(f"RSTAB link: {args.command}")
    _log("=" * 80)
    start = time.perf_counter()
    try:
        return args.func(args)
    finally:
        _log(f"\n总耗时: {time.perf_counter() - start:.2f} 秒")


if __name__ == "__main__":
    sys.exit(main())
