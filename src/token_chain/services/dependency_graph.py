"""Token dependency graph construction, cycle detection and chain tracing."""

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum

from token_chain.domain.tokens import Token


class _Color(int, Enum):
    WHITE = 0  # unvisited
    GRAY = 1  # on the current DFS path
    BLACK = 2  # fully explored


@dataclass
class ChainLink:
    name: str
    value: str | None


@dataclass
class DependencyGraph:
    """Directed graph: each defined token points at every name it references.

    Nodes keep definition order so traversal, and therefore every report
    built on it, is deterministic.
    """

    edges: dict[str, list[str]] = field(default_factory=dict)
    values: dict[str, str] = field(default_factory=dict)

    @property
    def nodes(self) -> list[str]:
        return list(self.edges)

    def referenced_names(self) -> set[str]:
        """Every name that appears as the target of some edge."""
        return {dep for deps in self.edges.values() for dep in deps}

    def dependents(self, name: str) -> list[str]:
        return [node for node, deps in self.edges.items() if name in deps]

    def trace(self, name: str) -> list[ChainLink]:
        """Follow the first reference of each token down to a literal.

        The chain stops at a token holding a raw value, at an undefined name
        (value None), or when a name repeats.
        """
        chain: list[ChainLink] = []
        seen: set[str] = set()
        current: str | None = name
        while current is not None and current not in seen:
            seen.add(current)
            chain.append(ChainLink(name=current, value=self.values.get(current)))
            deps = self.edges.get(current)
            current = deps[0] if deps else None
        return chain


def build_graph(tokens: Iterable[Token]) -> DependencyGraph:
    graph = DependencyGraph()
    for token in tokens:
        graph.edges[token.name] = list(token.refs)
        graph.values[token.name] = token.value
    return graph


def find_cycles(edges: Mapping[str, Sequence[str]] | DependencyGraph) -> list[list[str]]:
    """Find every cycle with an iterative white/gray/black DFS.

    A back edge to a gray node closes a cycle; the cycle runs from that
    node's position on the current path to the current node, with the
    closing name repeated. Edges to names outside the graph are skipped.

    Runs in O(V + E) with an explicit stack, so deep chains cannot exhaust
    the interpreter's recursion limit.

    Args:
        edges: Adjacency mapping, or a DependencyGraph.

    Returns:
        Cycles as ordered name lists, e.g. ``["--a", "--b", "--a"]``.
    """
    adjacency = edges.edges if isinstance(edges, DependencyGraph) else edges
    color = {node: _Color.WHITE for node in adjacency}
    cycles: list[list[str]] = []

    for start in adjacency:
        if color[start] is not _Color.WHITE:
            continue

        color[start] = _Color.GRAY
        path = [start]
        # Each frame: (node, index of the next dependency to examine)
        stack: list[list] = [[start, 0]]

        while stack:
            frame = stack[-1]
            node, index = frame
            deps = adjacency.get(node, ())

            if index >= len(deps):
                color[node] = _Color.BLACK
                stack.pop()
                path.pop()
                continue

            frame[1] = index + 1
            dep = deps[index]
            dep_color = color.get(dep)

            if dep_color is None:
                continue
            if dep_color is _Color.GRAY:
                cycle_start = path.index(dep)
                cycles.append(path[cycle_start:] + [dep])
            elif dep_color is _Color.WHITE:
                color[dep] = _Color.GRAY
                path.append(dep)
                stack.append([dep, 0])

    return cycles


__all__ = ["ChainLink", "DependencyGraph", "build_graph", "find_cycles"]
