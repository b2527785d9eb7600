from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Literal, Sequence

from . import astar, backtracking
from .backtracking import IllegalStepError
from .metrics import SearchStats

logger = logging.getLogger(__name__)

Engine = Literal["backtracking", "a-star"]
ENGINES: tuple[Engine, ...] = ("backtracking", "a-star")

Square = tuple[int, int]
Placement = tuple[Square, ...]


@dataclass(frozen=True)
class QueensNode:
    """Queens placed row by row, plus the squares none of them attack.

    Two nodes are equal when they hold the same queens on the same board;
    ``available_squares`` follows from those and stays out of comparisons.
    """

    board_size: int
    placed_queens: Placement
    available_squares: tuple[Square, ...] = field(compare=False, repr=False)

    @property
    def queen_count(self) -> int:
        return len(self.placed_queens)

    @property
    def available_count(self) -> int:
        return len(self.available_squares)


def attacks(queen: Square, square: Square) -> bool:
    row, col = queen
    other_row, other_col = square
    return (
        row == other_row
        or col == other_col
        or row - col == other_row - other_col
        or row + col == other_row + other_col
    )


def empty_node(board_size: int) -> QueensNode:
    if board_size < 1:
        raise ValueError("Board size must be at least 1.")
    squares = tuple((row, col) for row in range(board_size) for col in range(board_size))
    return QueensNode(board_size=board_size, placed_queens=(), available_squares=squares)


def place_queen(node: QueensNode, square: Square) -> QueensNode:
    return QueensNode(
        board_size=node.board_size,
        placed_queens=node.placed_queens + (square,),
        available_squares=tuple(
            candidate
            for candidate in node.available_squares
            if not attacks(square, candidate)
        ),
    )


def successors(node: QueensNode) -> list[QueensNode]:
    next_row = node.placed_queens[-1][0] + 1 if node.placed_queens else 0
    return [
        place_queen(node, square)
        for square in node.available_squares
        if square[0] == next_row
    ]


def is_solution(node: QueensNode) -> bool:
    return node.queen_count == node.board_size


def _most_available_first(node: QueensNode) -> list[QueensNode]:
    return sorted(successors(node), key=lambda child: child.available_count, reverse=True)


BACKTRACKING_PROBLEM: backtracking.ProblemDefinition[QueensNode] = backtracking.ProblemDefinition(
    find_sorted_successors=_most_available_first,
    check_if_solution=is_solution,
)

# Negative scores favour states that keep the most squares free; this is a
# best-first heuristic, not an admissible distance.
GRAPH_TOOLS: astar.GraphTools[QueensNode] = astar.GraphTools(
    check_if_goal_reached=is_solution,
    compute_nodes_distance=lambda _, to: -to.available_count,
    estimate_goal_distance=lambda node: -node.available_count,
    find_neighbors=successors,
)


@dataclass
class NQueensResult:
    size: int
    engine: Engine
    placement: Placement | None
    stats: SearchStats

    @property
    def solved(self) -> bool:
        return self.placement is not None

    def to_dict(self, include_board: bool = False) -> dict[str, object]:
        payload: dict[str, object] = {
            "size": self.size,
            "engine": self.engine,
            "solved": self.solved,
            "stats": self.stats.to_dict(),
        }
        if self.placement is not None:
            payload["placement"] = [list(square) for square in self.placement]
            if include_board:
                payload["board"] = render_nqueens_board(
                    self.size, self.placement
                ).splitlines()
        return payload


def solve_nqueens(board_size: int, *, engine: Engine = "backtracking") -> NQueensResult:
    if engine not in ENGINES:
        raise ValueError(f"Unknown engine {engine!r}; expected one of {', '.join(ENGINES)}.")

    root = empty_node(board_size)
    stats = SearchStats()
    logger.debug(f"Solving {board_size}-queens with {engine}")

    if engine == "backtracking":
        final = backtracking.resolve(root, BACKTRACKING_PROBLEM, stats=stats)
    else:
        path = astar.search(root, GRAPH_TOOLS, stats=stats)
        final = path[-1] if path else None

    placement = final.placed_queens if final is not None else None
    if placement is None:
        logger.info(f"No {board_size}-queens solution found with {engine}")
    return NQueensResult(size=board_size, engine=engine, placement=placement, stats=stats)


def solve(board_size: int, *, engine: Engine = "backtracking") -> Placement | None:
    """Return one conflict-free placement of ``board_size`` queens, or ``None``."""
    return solve_nqueens(board_size, engine=engine).placement


@dataclass(frozen=True)
class NQueensStep:
    """Snapshot of an incremental N-Queens search.

    ``candidate`` lists the queens on the path currently explored; it is
    ``None`` only on the final step of an unsolvable board.
    """

    board_size: int
    is_final: bool
    candidate: Placement | None
    stats: SearchStats
    _step: backtracking.Step[QueensNode] = field(repr=False, compare=False)

    @classmethod
    def _wrap(cls, board_size: int, step: backtracking.Step[QueensNode]) -> NQueensStep:
        candidate = step.candidate.placed_queens if step.candidate is not None else None
        return cls(
            board_size=board_size,
            is_final=step.is_final,
            candidate=candidate,
            stats=step.stats,
            _step=step,
        )

    def advance(self) -> NQueensStep:
        return NQueensStep._wrap(self.board_size, self._step.advance())


def solve_incrementally(board_size: int) -> NQueensStep:
    root = empty_node(board_size)
    return NQueensStep._wrap(
        board_size, backtracking.resolve_incrementally(root, BACKTRACKING_PROBLEM)
    )


def advance(step: NQueensStep) -> NQueensStep:
    """Produce the step after ``step``; raises IllegalStepError once final."""
    if step.is_final:
        raise IllegalStepError("Search already finished; no next step.")
    return step.advance()


def render_nqueens_board(board_size: int, queens: Sequence[Square]) -> str:
    placed = set(queens)
    rows = []
    for row in range(board_size):
        cells = []
        for col in range(board_size):
            if (row, col) in placed:
                cells.append("Q")
            elif any(attacks(queen, (row, col)) for queen in placed):
                cells.append("x")
            else:
                cells.append(".")
        rows.append(" ".join(cells))
    return "\n".join(rows)
