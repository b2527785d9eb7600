from dataclasses import asdict, dataclass


@dataclass
class SearchStats:
    """Counters filled by both engines.

    ``nodes_visited`` counts goal tests and ``nodes_expanded`` successor
    generations. ``nodes_discovered`` is A* records created for unseen nodes;
    ``backtracks`` is exhausted depth-first frames.
    """

    nodes_visited: int = 0
    nodes_expanded: int = 0
    nodes_discovered: int = 0
    backtracks: int = 0
    solutions_found: int = 0
    elapsed_ms: float = 0.0

    def to_dict(self) -> dict[str, int | float]:
        return asdict(self)
