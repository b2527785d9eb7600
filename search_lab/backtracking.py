"""Generic depth-first backtracking, eager and step-by-step.

The engine only knows a problem through two callbacks: one that lists the
successors of a node in the order they should be tried, and one that tells
whether a node is a solution. ``None`` is reserved as the "not found" marker,
so it can never be a node.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from time import perf_counter
from typing import Callable, Generic, Iterator, Sequence, TypeVar

from .metrics import SearchStats

logger = logging.getLogger(__name__)

NodeT = TypeVar("NodeT")


class IllegalStepError(RuntimeError):
    """Raised when a step is advanced after the search ended or twice."""


@dataclass(frozen=True)
class ProblemDefinition(Generic[NodeT]):
    find_sorted_successors: Callable[[NodeT], Sequence[NodeT]]
    check_if_solution: Callable[[NodeT], bool]


def resolve(
    root: NodeT,
    problem: ProblemDefinition[NodeT],
    *,
    stats: SearchStats | None = None,
) -> NodeT | None:
    """Run the depth-first search to completion.

    Returns the first solution met in successor order, or ``None`` once the
    whole tree below ``root`` is exhausted. Recursion depth equals the depth
    of the search tree.
    """
    stats = stats if stats is not None else SearchStats()
    start = perf_counter()

    def backtrack(node: NodeT) -> NodeT | None:
        stats.nodes_visited += 1
        if problem.check_if_solution(node):
            return node

        stats.nodes_expanded += 1
        for successor in problem.find_sorted_successors(node):
            found = backtrack(successor)
            if found is not None:
                return found
        stats.backtracks += 1
        logger.debug(f"Backtracking from {node!r}")
        return None

    solution = backtrack(root)
    if solution is not None:
        stats.solutions_found += 1
    stats.elapsed_ms = (perf_counter() - start) * 1000
    logger.debug(
        f"Backtracking finished: solved={solution is not None}, "
        f"visited={stats.nodes_visited}, backtracks={stats.backtracks}"
    )
    return solution


@dataclass
class _Frame(Generic[NodeT]):
    node: NodeT
    successors: Iterator[NodeT]


@dataclass
class Step(Generic[NodeT]):
    """One paused point of an incremental backtracking search.

    ``candidate`` is the node most recently reached on the current path. A
    final step carries the solution, or ``None`` when the search space was
    exhausted. Non-final steps own the frame stack; ``advance`` hands it over
    to the next step, so each step can be advanced only once.
    """

    candidate: NodeT | None
    is_final: bool
    stats: SearchStats
    _problem: ProblemDefinition[NodeT] | None = field(default=None, repr=False)
    _frames: list[_Frame[NodeT]] | None = field(default=None, repr=False)

    def advance(self) -> Step[NodeT]:
        if self.is_final:
            raise IllegalStepError("Search already finished; no next step.")
        if self._frames is None or self._problem is None:
            raise IllegalStepError("Step was already advanced.")

        frames, problem = self._frames, self._problem
        self._frames = None
        start = perf_counter()
        try:
            while frames:
                successor = next(frames[-1].successors, None)
                if successor is None:
                    exhausted = frames.pop()
                    self.stats.backtracks += 1
                    logger.debug(f"Backtracking from {exhausted.node!r}")
                    continue
                return _enter(successor, frames, problem, self.stats)
            logger.debug(
                f"Incremental search exhausted after {self.stats.nodes_visited} nodes"
            )
            return Step(candidate=None, is_final=True, stats=self.stats)
        finally:
            self.stats.elapsed_ms += (perf_counter() - start) * 1000


def _enter(
    node: NodeT,
    frames: list[_Frame[NodeT]],
    problem: ProblemDefinition[NodeT],
    stats: SearchStats,
) -> Step[NodeT]:
    stats.nodes_visited += 1
    if problem.check_if_solution(node):
        stats.solutions_found += 1
        logger.debug(f"Incremental search solved after {stats.nodes_visited} nodes")
        return Step(candidate=node, is_final=True, stats=stats)

    stats.nodes_expanded += 1
    frames.append(_Frame(node, iter(problem.find_sorted_successors(node))))
    return Step(
        candidate=node,
        is_final=False,
        stats=stats,
        _problem=problem,
        _frames=frames,
    )


def resolve_incrementally(
    root: NodeT,
    problem: ProblemDefinition[NodeT],
    *,
    stats: SearchStats | None = None,
) -> Step[NodeT]:
    """Start a search that advances one node per ``Step.advance`` call.

    Visits nodes in the same order as :func:`resolve` and ends on the same
    solution; the number of advances equals the eager run's expanded nodes.
    """
    stats = stats if stats is not None else SearchStats()
    start = perf_counter()
    step = _enter(root, [], problem, stats)
    stats.elapsed_ms += (perf_counter() - start) * 1000
    return step
