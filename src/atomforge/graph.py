# src/atomforge/graph.py
"""Dependency ordering for atoms.

An edge `(a, b)` means atom `a` depends on atom `b`, so `b` must come first
in the output. Ordering uses in-degree counting (Kahn's algorithm) with a
FIFO ready queue: nodes that become ready at the same time are emitted in
the order they were discovered, so a fixed input always gives the same
output.
"""

from collections import deque
from collections.abc import Iterable

from atomforge.exceptions import AtomforgeError


class CycleError(AtomforgeError):
    """Raised when the dependency graph cannot be fully ordered.

    Attributes:
        remaining: Every node left unsorted, in input order. This contains
            each cycle plus anything that depends on one.
    """

    def __init__(self, remaining: list[str]) -> None:
        super().__init__(
            f"Cycle detected in dependency graph. Involved atoms: {', '.join(remaining)}"
        )
        self.remaining = remaining


def topological_sort(nodes: Iterable[str], edges: Iterable[tuple[str, str]]) -> list[str]:
    """Order nodes so every dependency precedes its dependents.

    Edges that reference a node outside `nodes` are dropped, and so are
    self-edges; neither blocks the sort.

    Args:
        nodes: Node names. Duplicates are ignored.
        edges: `(dependent, depends_on)` pairs.

    Returns:
        Node names in dependency order.

    Raises:
        CycleError: If some nodes can never reach zero in-degree.
    """
    in_degree: dict[str, int] = {}
    for node in nodes:
        in_degree.setdefault(node, 0)

    dependents: dict[str, list[str]] = {node: [] for node in in_degree}
    for dependent, depends_on in edges:
        if dependent == depends_on:
            continue
        if dependent not in in_degree or depends_on not in in_degree:
            continue
        dependents[depends_on].append(dependent)
        in_degree[dependent] += 1

    ready = deque(node for node, degree in in_degree.items() if degree == 0)
    order: list[str] = []

    while ready:
        current = ready.popleft()
        order.append(current)
        for dependent in dependents[current]:
            in_degree[dependent] -= 1
            if in_degree[dependent] == 0:
                ready.append(dependent)

    if len(order) < len(in_degree):
        sorted_set = set(order)
        raise CycleError([node for node in in_degree if node not in sorted_set])

    return order
