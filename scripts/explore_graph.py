#!/usr/bin/env python3
"""CLI for exploring a strategic knowledge graph snapshot.

The snapshot is a JSON file with "nodes" and "relationships" arrays, as
exported from the entity store.

Usage:
    python scripts/explore_graph.py snapshot.json neighbors node-1
    python scripts/explore_graph.py snapshot.json relevant --filter "Acme" --expand node-7
    python scripts/explore_graph.py snapshot.json path node-1 node-9
    python scripts/explore_graph.py snapshot.json candidates node-1 node-9 --max-depth 3
    python scripts/explore_graph.py snapshot.json rank node-1 node-9 --oracle llm
    python scripts/explore_graph.py snapshot.json clusters --filter "AI"
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent))

import structlog
from dotenv import load_dotenv
load_dotenv()  # Must run before any src.* imports

from src.exploration import ExplorationSession, Outcome, SelectionMode
from src.graph import Node, Relationship
from src.ranking import HeuristicRankingOracle, LLMRankingOracle

structlog.configure(
    processors=[
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.dev.ConsoleRenderer(),
    ]
)
logger = structlog.get_logger()


def load_session(snapshot_path: Path, oracle_name: str = "heuristic") -> ExplorationSession:
    """Load a JSON snapshot into a fresh exploration session."""
    data = json.loads(snapshot_path.read_text())
    nodes = [Node.from_dict(n) for n in data.get("nodes", [])]
    relationships = [Relationship.from_dict(r) for r in data.get("relationships", [])]

    oracle = LLMRankingOracle() if oracle_name == "llm" else HeuristicRankingOracle()

    logger.info(
        "snapshot_loaded",
        path=str(snapshot_path),
        nodes=len(nodes),
        relationships=len(relationships),
    )
    return ExplorationSession.from_snapshot(
        nodes,
        relationships,
        oracle=oracle,
        selection_mode=SelectionMode.MULTI,
    )


def print_path(session: ExplorationSession, path: list[str]) -> None:
    candidate = session.path_finder.to_candidate(path)
    print(f"  ({candidate.hops} hops) {candidate.path_string}")


def cmd_neighbors(session: ExplorationSession, args) -> None:
    connections = session.index.connections(args.node_id)
    if not connections:
        print(f"No connections for {args.node_id}")
        return

    for conn in connections:
        arrow = "->" if conn.direction.value == "outgoing" else "<-"
        print(f"  {arrow} [{conn.relationship_type}] {conn.node.label} ({conn.node.type})")


def cmd_relevant(session: ExplorationSession, args) -> None:
    for node_id in args.expand or []:
        session.toggle_expansion(node_id)

    nodes = session.relevant_nodes(args.filter or [])
    nodes = session.relevance_filter.search(nodes, args.search, args.type)

    print(f"{len(nodes)} relevant nodes")
    for node in nodes:
        print(f"  - {node.label} ({node.type})")


def cmd_path(session: ExplorationSession, args) -> None:
    session.toggle_multi_select(args.start_id)
    session.toggle_multi_select(args.end_id)

    result = session.request_shortest_path()
    print(result.message)
    if result.ok:
        print_path(session, result.path)


def cmd_candidates(session: ExplorationSession, args) -> None:
    candidates = session.path_finder.find_candidate_paths(
        args.start_id,
        args.end_id,
        max_depth=args.max_depth,
    )
    print(candidates.summary())
    for path in candidates.paths:
        print_path(session, path)


async def cmd_rank(session: ExplorationSession, args) -> None:
    session.toggle_multi_select(args.start_id)
    session.toggle_multi_select(args.end_id)

    result = await session.request_ranked_path()
    print(result.message)
    for warning in result.warnings:
        print(f"  ! {warning}")

    if result.outcome != Outcome.OK:
        return

    print_path(session, result.path)
    annotation = session.state.path_annotation
    if annotation and annotation.rationale:
        print(f"\nRationale ({annotation.score:.2f}): {annotation.rationale}")
        for opportunity in annotation.opportunities:
            print(f"  * {opportunity}")


def cmd_clusters(session: ExplorationSession, args) -> None:
    clusters = session.clusters(args.filter or [])
    if not clusters:
        print("Relevant set too small to cluster")
        return

    for cluster in clusters:
        print(f"  {cluster.type}: {cluster.count}")


def main():
    parser = argparse.ArgumentParser(description="Explore a strategic knowledge graph snapshot")
    parser.add_argument("snapshot", type=Path, help="JSON snapshot with nodes and relationships")
    parser.add_argument(
        "--oracle",
        choices=["heuristic", "llm"],
        default="heuristic",
        help="Ranking oracle for the rank command (default: heuristic)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    neighbors = subparsers.add_parser("neighbors", help="List a node's connections")
    neighbors.add_argument("node_id")

    relevant = subparsers.add_parser("relevant", help="Show the relevant node set")
    relevant.add_argument("--filter", action="append", help="Context label (repeatable)")
    relevant.add_argument("--expand", action="append", help="Node id to expand (repeatable)")
    relevant.add_argument("--search", help="Narrow by label substring")
    relevant.add_argument("--type", help="Narrow by node type")

    path = subparsers.add_parser("path", help="Shortest path between two nodes")
    path.add_argument("start_id")
    path.add_argument("end_id")

    candidates = subparsers.add_parser("candidates", help="Enumerate candidate paths")
    candidates.add_argument("start_id")
    candidates.add_argument("end_id")
    candidates.add_argument("--max-depth", type=int, default=None)

    rank = subparsers.add_parser("rank", help="Rank candidate paths with an oracle")
    rank.add_argument("start_id")
    rank.add_argument("end_id")

    clusters = subparsers.add_parser("clusters", help="Summarize the relevant set by type")
    clusters.add_argument("--filter", action="append", help="Context label (repeatable)")

    args = parser.parse_args()
    session = load_session(args.snapshot, args.oracle)

    if args.command == "neighbors":
        cmd_neighbors(session, args)
    elif args.command == "relevant":
        cmd_relevant(session, args)
    elif args.command == "path":
        cmd_path(session, args)
    elif args.command == "candidates":
        cmd_candidates(session, args)
    elif args.command == "rank":
        asyncio.run(cmd_rank(session, args))
    elif args.command == "clusters":
        cmd_clusters(session, args)


if __name__ == "__main__":
    main()
