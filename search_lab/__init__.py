"""Search Lab package exports."""

from .astar import GraphTools, NodeRecord, search
from .backtracking import (
    IllegalStepError,
    ProblemDefinition,
    Step,
    resolve,
    resolve_incrementally,
)
from .metrics import SearchStats
from .nqueens import (
    NQueensResult,
    NQueensStep,
    QueensNode,
    advance,
    empty_node,
    render_nqueens_board,
    solve,
    solve_incrementally,
    solve_nqueens,
)

__all__ = [
    "GraphTools",
    "IllegalStepError",
    "NQueensResult",
    "NQueensStep",
    "NodeRecord",
    "ProblemDefinition",
    "QueensNode",
    "SearchStats",
    "Step",
    "advance",
    "empty_node",
    "render_nqueens_board",
    "resolve",
    "resolve_incrementally",
    "search",
    "solve",
    "solve_incrementally",
    "solve_nqueens",
]
