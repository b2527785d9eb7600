import unittest

from search_lab.backtracking import (
    IllegalStepError,
    ProblemDefinition,
    Step,
    resolve,
    resolve_incrementally,
)
from search_lab.metrics import SearchStats


def _tree_problem(tree: dict[str, list[str]], solutions: set[str]) -> ProblemDefinition:
    return ProblemDefinition(
        find_sorted_successors=lambda node: tree[node],
        check_if_solution=lambda node: node in solutions,
    )


TREE = {
    "a": ["b", "c"],
    "b": ["d"],
    "c": ["e", "f"],
    "d": [],
    "e": [],
    "f": [],
}


def _drain(step: Step[str]) -> tuple[Step[str], list[str | None], int]:
    candidates = [step.candidate]
    advances = 0
    while not step.is_final:
        step = step.advance()
        advances += 1
        candidates.append(step.candidate)
    return step, candidates, advances


class ResolveTests(unittest.TestCase):
    def test_returns_first_solution_in_successor_order(self) -> None:
        stats = SearchStats()
        found = resolve("a", _tree_problem(TREE, {"e", "f"}), stats=stats)
        self.assertEqual(found, "e")
        self.assertEqual(stats.nodes_visited, 5)
        self.assertEqual(stats.nodes_expanded, 4)
        self.assertEqual(stats.backtracks, 2)
        self.assertEqual(stats.solutions_found, 1)

    def test_root_solution_is_returned_without_expansion(self) -> None:
        stats = SearchStats()
        self.assertEqual(resolve("a", _tree_problem(TREE, {"a"}), stats=stats), "a")
        self.assertEqual(stats.nodes_expanded, 0)

    def test_exhausted_search_returns_none(self) -> None:
        self.assertIsNone(resolve("a", _tree_problem(TREE, set())))

    def test_backtracks_are_logged(self) -> None:
        with self.assertLogs("search_lab.backtracking", level="DEBUG") as logs:
            resolve("a", _tree_problem(TREE, {"e"}))
        backtracked = [line for line in logs.output if "Backtracking from" in line]
        self.assertEqual(len(backtracked), 2)


class ResolveIncrementallyTests(unittest.TestCase):
    def test_walks_the_same_path_as_eager_search(self) -> None:
        problem = _tree_problem(TREE, {"e", "f"})
        eager_stats = SearchStats()
        eager = resolve("a", problem, stats=eager_stats)

        final, candidates, advances = _drain(resolve_incrementally("a", problem))
        self.assertTrue(final.is_final)
        self.assertEqual(final.candidate, eager)
        self.assertEqual(candidates, ["a", "b", "d", "c", "e"])
        self.assertEqual(advances, eager_stats.nodes_expanded)
        self.assertEqual(final.stats.backtracks, eager_stats.backtracks)

    def test_exhausted_search_ends_without_candidate(self) -> None:
        problem = _tree_problem(TREE, set())
        eager_stats = SearchStats()
        resolve("a", problem, stats=eager_stats)

        final, candidates, advances = _drain(resolve_incrementally("a", problem))
        self.assertIsNone(final.candidate)
        self.assertEqual(candidates[:-1], ["a", "b", "d", "c", "e", "f"])
        self.assertEqual(advances, eager_stats.nodes_expanded)

    def test_backtracks_are_logged_while_stepping(self) -> None:
        with self.assertLogs("search_lab.backtracking", level="DEBUG") as logs:
            final, _, _ = _drain(resolve_incrementally("a", _tree_problem(TREE, {"e"})))
        backtracked = [line for line in logs.output if "Backtracking from" in line]
        self.assertEqual(len(backtracked), final.stats.backtracks)
        self.assertEqual(len(backtracked), 2)

    def test_root_solution_gives_final_first_step(self) -> None:
        step = resolve_incrementally("a", _tree_problem(TREE, {"a"}))
        self.assertTrue(step.is_final)
        self.assertEqual(step.candidate, "a")

    def test_advancing_final_step_raises(self) -> None:
        step = resolve_incrementally("a", _tree_problem(TREE, {"a"}))
        with self.assertRaises(IllegalStepError):
            step.advance()

    def test_step_can_only_be_advanced_once(self) -> None:
        step = resolve_incrementally("a", _tree_problem(TREE, {"f"}))
        step.advance()
        with self.assertRaises(IllegalStepError):
            step.advance()

    def test_successors_are_requested_lazily(self) -> None:
        requested: list[str] = []

        def successors(node: str) -> list[str]:
            requested.append(node)
            return TREE[node]

        problem = ProblemDefinition(
            find_sorted_successors=successors,
            check_if_solution=lambda node: node == "f",
        )
        step = resolve_incrementally("a", problem)
        self.assertEqual(requested, ["a"])
        step = step.advance()
        self.assertEqual(step.candidate, "b")
        self.assertEqual(requested, ["a", "b"])


if __name__ == "__main__":
    unittest.main()
