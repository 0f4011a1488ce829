"""reachcount CLI entry point.

Usage: reachcount count FILE --start you --target out [--via dac --via fft]
"""
import argparse
import logging
import sys

from reachcount.config import DEFAULT_RECURSION_LIMIT, CountConfig
from reachcount.graph.adjacency import UnknownNode, build_graph
from reachcount.graph.cycle_detector import CycleDetected
from reachcount.graph.queries import count_all_paths, count_constrained_paths
from reachcount.parser import parse_connections


def _add_count_parser(subparsers: argparse._SubParsersAction) -> None:
    p = subparsers.add_parser(
        "count",
        help="Count simple paths between two nodes of a connection file.",
    )
    p.add_argument(
        "file",
        help="Connection file, one 'node: successor ...' line per node.",
    )
    p.add_argument(
        "--start", required=True,
        help="Label of the start node.",
    )
    p.add_argument(
        "--target", required=True,
        help="Label of the target node.",
    )
    p.add_argument(
        "--via", action="append", default=[], metavar="NODE",
        help="A node every counted path must visit (repeatable).",
    )
    p.add_argument(
        "--shortcut", action="store_true",
        help="Answer revisited nodes from resolver sets instead of exact totals.",
    )
    p.add_argument(
        "--strict-cycles", action="store_true",
        help="Fail instead of counting around cycles that can reach the target.",
    )
    p.add_argument(
        "--recursion-limit", type=int, default=DEFAULT_RECURSION_LIMIT,
        help=f"Minimum recursion limit during counting (default: {DEFAULT_RECURSION_LIMIT})",
    )


def _run_count(args: argparse.Namespace) -> int:
    try:
        config = CountConfig(
            recursion_limit=args.recursion_limit,
            resolver_shortcut=args.shortcut,
            strict_cycles=args.strict_cycles,
        )
        with open(args.file, encoding="utf-8") as fh:
            edges = parse_connections(fh)
        graph = build_graph(edges)
        total = count_all_paths(graph, args.start, args.target, config)
        print(f"Total paths: {total}")
        if args.via:
            constrained = count_constrained_paths(
                graph, args.start, args.target, args.via, config,
            )
            print(f"Paths via {', '.join(args.via)}: {constrained}")
    except (OSError, ValueError, UnknownNode, CycleDetected) as exc:
        print(f"reachcount: error: {exc}", file=sys.stderr)
        return 1
    except RecursionError:
        print(
            "reachcount: error: graph too deep for the recursion limit; "
            "raise it with --recursion-limit",
            file=sys.stderr,
        )
        return 1
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="reachcount",
        description="Count simple paths, optionally through required waypoints.",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true",
        help="Log query details to stderr.",
    )
    subparsers = parser.add_subparsers(dest="command")

    _add_count_parser(subparsers)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "count":
        return _run_count(args)
    return 2


if __name__ == "__main__":
    sys.exit(main())
