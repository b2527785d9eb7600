"""Generic A* best-first search."""

from __future__ import annotations

from dataclasses import dataclass
import heapq
from itertools import count
import logging
from time import perf_counter
from typing import Callable, Generic, Iterable, TypeVar

from .metrics import SearchStats

logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT")


@dataclass(frozen=True)
class GraphTools(Generic[NodeT]):
    """Problem callbacks driving :func:`search`.

    ``estimate_goal_distance`` must not overestimate the remaining cost for
    the returned path to be the cheapest one.
    """

    check_if_goal_reached: Callable[[NodeT], bool]
    compute_nodes_distance: Callable[[NodeT, NodeT], float]
    estimate_goal_distance: Callable[[NodeT], float]
    find_neighbors: Callable[[NodeT], Iterable[NodeT]]


@dataclass
class NodeRecord(Generic[NodeT]):
    node: NodeT
    g_score: float
    f_score: float
    previous: NodeRecord[NodeT] | None = None
    closed: bool = False


def _build_path(record: NodeRecord[NodeT]) -> list[NodeT]:
    path: list[NodeT] = []
    current: NodeRecord[NodeT] | None = record
    while current is not None:
        path.append(current.node)
        current = current.previous
    path.reverse()
    return path


def search(
    start: NodeT,
    tools: GraphTools[NodeT],
    *,
    stats: SearchStats | None = None,
) -> list[NodeT]:
    """Return the path from ``start`` to the first goal closed, oldest first.

    Nodes must be hashable; records are keyed by node equality. An empty list
    means the reachable graph was exhausted without meeting a goal. Among
    open records with the same f-score the most recently discovered one is
    closed first.
    """
    stats = stats if stats is not None else SearchStats()
    started = perf_counter()

    records: dict[NodeT, NodeRecord[NodeT]] = {}
    open_heap: list[tuple[float, int, NodeRecord[NodeT]]] = []
    sequence = count()

    def install(record: NodeRecord[NodeT]) -> None:
        records[record.node] = record
        heapq.heappush(open_heap, (record.f_score, -next(sequence), record))

    install(NodeRecord(start, 0, tools.estimate_goal_distance(start)))
    stats.nodes_discovered += 1

    path: list[NodeT] = []
    while open_heap:
        _, _, current = heapq.heappop(open_heap)
        if current.closed or records.get(current.node) is not current:
            continue

        current.closed = True
        stats.nodes_visited += 1
        if tools.check_if_goal_reached(current.node):
            stats.solutions_found += 1
            path = _build_path(current)
            break

        stats.nodes_expanded += 1
        for neighbor in tools.find_neighbors(current.node):
            g_score = current.g_score + tools.compute_nodes_distance(
                current.node, neighbor
            )
            f_score = g_score + tools.estimate_goal_distance(neighbor)
            known = records.get(neighbor)
            if known is None:
                stats.nodes_discovered += 1
            elif known.closed or known.f_score <= f_score:
                continue
            install(NodeRecord(neighbor, g_score, f_score, previous=current))

    stats.elapsed_ms = (perf_counter() - started) * 1000
    logger.debug(
        f"A* finished: path_length={len(path)}, visited={stats.nodes_visited}, "
        f"discovered={stats.nodes_discovered}"
    )
    return path
