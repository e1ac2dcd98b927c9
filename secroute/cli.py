"""Command-line interface for secroute."""

from __future__ import annotations

import argparse
import json
import logging
import math
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from secroute.algorithms.bellman_ford import bellman_ford_complexity, run_bellman_ford
from secroute.algorithms.compare import compare_all
from secroute.algorithms.dijkstra import run_dijkstra
from secroute.algorithms.metrics import compute_metrics
from secroute.config import ROUTING_CONFIG
from secroute.graph.io import load_topology_yaml
from secroute.graph.strict_multigraph import StrictMultiGraph
from secroute.logging import (
    disable_debug_logging,
    enable_debug_logging,
    get_logger,
    set_global_log_level,
)
from secroute.model.policy import RoutingPolicy
from secroute.model.trace import final_step, has_negative_cycle, steps_to_dicts
from secroute.types.base import Algorithm

logger = get_logger(__name__)


def _format_table(headers: List[str], rows: List[List[str]], min_width: int = 6) -> str:
    """Format rows as a simple ASCII table."""
    if not rows:
        return ""

    all_data = [headers] + rows
    col_widths = [
        max(min_width, max(len(str(row[i])) for row in all_data))
        for i in range(len(headers))
    ]

    def format_row(row_data: List[str]) -> str:
        return "   " + " | ".join(
            f"{str(item):<{col_widths[i]}}" for i, item in enumerate(row_data)
        )

    lines = [format_row(headers)]
    lines.append("   " + "-+-".join("-" * width for width in col_widths))
    lines.extend(format_row(row) for row in rows)
    return "\n".join(lines)


def _format_number(value: Optional[float]) -> str:
    """Format with up to three decimals; ``-`` for None, ``inf`` for infinity."""
    if value is None:
        return "-"
    if math.isinf(value):
        return "inf"
    s = f"{value:,.3f}"
    return s.rstrip("0").rstrip(".") if "." in s else s


def _format_path(nodes: Any) -> str:
    return " -> ".join(str(n) for n in nodes) if nodes else "-"


def _load_graph(path: Path) -> StrictMultiGraph:
    logger.info(f"Loading topology from: {path}")
    graph = load_topology_yaml(path.read_text())
    logger.info(
        f"Topology loaded: {graph.number_of_nodes()} nodes, "
        f"{graph.number_of_edges()} links"
    )
    return graph


def _write_results(results: Dict[str, Any], path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(results, indent=2, default=str))
    logger.info(f"Results written to: {path}")
    print(f"✅ Results written to: {path}")


def _run_command(args: argparse.Namespace) -> None:
    graph = _load_graph(args.topology)
    algorithm = Algorithm.from_string(args.algorithm)
    policy = RoutingPolicy.from_values(args.mode, args.beta)

    if algorithm == Algorithm.BELLMAN_FORD:
        steps = run_bellman_ford(graph, args.start, policy, default_risk=args.default_risk)
        logger.info(bellman_ford_complexity(graph))
    else:
        steps = run_dijkstra(
            graph,
            args.start,
            policy,
            risk_threshold=args.risk_threshold,
            default_risk=args.default_risk,
        )

    final = final_step(steps)
    if final is None:
        raise ValueError("Engine returned an empty trace")
    print(f"{algorithm.name.replace('_', '-').title()} from {args.start}, {policy.describe()}")
    print(f"   {len(steps)} steps; last: {final.message}")
    if not final.is_terminal:
        print(
            f"   Start node '{args.start}' is not in the topology; nothing was routed."
        )
    if has_negative_cycle(steps):
        print("⚠️  Negative cycle detected: distances are unreliable.")

    rows: List[List[str]] = []
    for node in graph.nodes:
        if node == args.start:
            continue
        metrics = compute_metrics(graph, steps, args.start, node, args.default_risk)
        rows.append(
            [
                str(node),
                _format_number(final.distance_to(node)),
                _format_number(metrics.total_distance if metrics else None),
                _format_number(metrics.total_security_risk if metrics else None),
                str(metrics.hop_count) if metrics else "-",
                _format_path(metrics.path_nodes if metrics else None),
            ]
        )
    table = _format_table(["Node", "Cost", "Distance", "Risk", "Hops", "Path"], rows)
    if table:
        print(table)

    if args.results is not None:
        payload: Dict[str, Any] = {
            "algorithm": algorithm.name.lower(),
            "start": args.start,
            "policy": {"mode": policy.mode.name.lower(), "beta": policy.beta},
            "final": final.to_dict(),
        }
        if args.steps:
            payload["steps"] = list(steps_to_dicts(steps))
        _write_results(payload, args.results)


def _compare_command(args: argparse.Namespace) -> None:
    graph = _load_graph(args.topology)
    algorithm = Algorithm.from_string(args.algorithm)
    result = compare_all(
        graph,
        args.start,
        RoutingPolicy.classic(),
        RoutingPolicy.security_aware(args.beta),
        algorithm=algorithm,
        risk_threshold=args.risk_threshold,
        default_risk=args.default_risk,
    )

    rows = [
        [
            node,
            record.outcome.name.lower(),
            _format_path(record.classic.path_nodes if record.classic else None),
            _format_path(record.sar.path_nodes if record.sar else None),
            _format_number(record.risk_reduction_pct),
            _format_number(record.distance_increase_pct),
        ]
        for node, record in result.per_destination.items()
    ]
    table = _format_table(
        ["Node", "Outcome", "Classic path", "SAR path", "Risk -%", "Dist +%"], rows
    )
    if table:
        print(table)

    s = result.summary
    print(
        f"\nDestinations: {s.destinations} | Classic reachable: {s.classic_reachable}"
        f" | SAR reachable: {s.sar_reachable} | Route changes: {s.route_changes}"
    )
    print(
        f"Avg risk reduction: {s.avg_risk_reduction_pct:+.1f}%"
        f" | Avg distance increase: {s.avg_distance_increase_pct:+.1f}%"
    )

    if args.results is not None:
        _write_results(result.to_dict(), args.results)


def main(argv: Optional[List[str]] = None) -> None:
    """Entry point for the ``secroute`` command.

    Args:
        argv: Optional list of command-line arguments. If ``None``, ``sys.argv``
            is used.
    """
    parser = argparse.ArgumentParser(
        prog="secroute",
        description="Security-aware shortest-path routing over a topology file.",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging"
    )
    parser.add_argument(
        "--quiet", action="store_true", help="Only log warnings and errors"
    )

    subparsers = parser.add_subparsers(
        dest="command",
        required=True,
        title="Available commands",
        metavar="{run,compare}",
        help="Available commands",
    )

    run_parser = subparsers.add_parser("run", help="Run one engine under one policy")
    run_parser.add_argument(
        "--mode",
        "-m",
        default="classic",
        help="Routing mode: classic or sar (default: classic)",
    )
    run_parser.add_argument(
        "--steps",
        action="store_true",
        help="Include the full step trace in the results file",
    )

    compare_parser = subparsers.add_parser(
        "compare", help="Compare classic and security-aware routing"
    )

    for p in (run_parser, compare_parser):
        p.add_argument("topology", type=Path, help="Path to topology YAML")
        p.add_argument("--start", "-s", required=True, help="Source node id")
        p.add_argument(
            "--algorithm",
            "-a",
            default="dijkstra",
            help="dijkstra or bellman-ford (default: dijkstra)",
        )
        p.add_argument(
            "--beta",
            "-b",
            type=float,
            default=ROUTING_CONFIG.default_beta,
            help=f"Security weight in [0, 1] (default: {ROUTING_CONFIG.default_beta})",
        )
        p.add_argument(
            "--risk-threshold",
            type=float,
            default=ROUTING_CONFIG.risk_threshold,
            help="Dijkstra SAR admission cutoff: skip edges with higher risk",
        )
        p.add_argument(
            "--default-risk",
            type=float,
            default=None,
            help="Risk assumed for links without one "
            f"(default: {ROUTING_CONFIG.default_risk})",
        )
        p.add_argument(
            "--results",
            "-r",
            type=Path,
            default=None,
            help="Write JSON results to this file",
        )

    effective_args = sys.argv[1:] if argv is None else argv
    if not effective_args:
        parser.print_help()
        raise SystemExit(0)

    args = parser.parse_args(effective_args)

    if args.verbose:
        enable_debug_logging()
        logger.debug("Debug logging enabled")
    elif args.quiet:
        set_global_log_level(logging.WARNING)
    else:
        disable_debug_logging()

    try:
        if args.command == "run":
            _run_command(args)
        elif args.command == "compare":
            _compare_command(args)
    except FileNotFoundError:
        logger.error(f"Topology file not found: {args.topology}")
        print(f"❌ ERROR: Topology file not found: {args.topology}")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Failed to run {args.command}: {type(e).__name__}: {e}")
        print(f"❌ ERROR: Failed to run {args.command}: {type(e).__name__}: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
