"""Directed preference graph used by the lock-graph strategy.

All traversals are iterative, so stack depth does not grow with the
number of candidates.
"""

import heapq


class PreferenceGraph:
    """Adjacency-list graph of locked "winner beats loser" edges."""

    def __init__(self, nodes: list[int] | None = None):
        self._adjacent: dict[int, list[int]] = {}
        for node in nodes or []:
            self.add_node(node)

    @property
    def nodes(self) -> list[int]:
        return sorted(self._adjacent)

    @property
    def edges(self) -> list[tuple[int, int]]:
        return [(a, b) for a in self.nodes for b in self._adjacent[a]]

    def add_node(self, node: int) -> None:
        self._adjacent.setdefault(node, [])

    def add_edge(self, source: int, target: int) -> None:
        self.add_node(source)
        self.add_node(target)
        if target not in self._adjacent[source]:
            self._adjacent[source].append(target)

    def has_edge(self, source: int, target: int) -> bool:
        return target in self._adjacent.get(source, [])

    def successors(self, node: int) -> list[int]:
        return list(self._adjacent.get(node, []))

    def reaches(self, source: int, target: int) -> bool:
        """True if there is a path from source to target over existing edges."""
        if source == target:
            return True
        visited = {source}
        stack = [source]
        while stack:
            node = stack.pop()
            for nxt in self._adjacent.get(node, []):
                if nxt == target:
                    return True
                if nxt not in visited:
                    visited.add(nxt)
                    stack.append(nxt)
        return False

    def would_create_cycle(self, source: int, target: int) -> bool:
        """True if adding source → target would close a cycle.

        That happens exactly when target can already reach source.
        """
        return self.reaches(target, source)

    def is_acyclic(self) -> bool:
        """Iterative three-colour DFS over the whole graph."""
        in_progress, done = 1, 2
        state: dict[int, int] = {}
        for root in self.nodes:
            if root in state:
                continue
            state[root] = in_progress
            stack = [(root, iter(self._adjacent[root]))]
            while stack:
                node, children = stack[-1]
                for child in children:
                    child_state = state.get(child)
                    if child_state == in_progress:
                        return False
                    if child_state is None:
                        state[child] = in_progress
                        stack.append((child, iter(self._adjacent[child])))
                        break
                else:
                    state[node] = done
                    stack.pop()
        return True

    def topological_order(self) -> list[int]:
        """Kahn's algorithm; among ready nodes, the lowest id goes first.

        Raises:
            ValueError: If the graph contains a cycle
        """
        in_degree = {node: 0 for node in self._adjacent}
        for targets in self._adjacent.values():
            for target in targets:
                in_degree[target] += 1

        ready = [node for node, degree in in_degree.items() if degree == 0]
        heapq.heapify(ready)
        order = []
        while ready:
            node = heapq.heappop(ready)
            order.append(node)
            for target in self._adjacent[node]:
                in_degree[target] -= 1
                if in_degree[target] == 0:
                    heapq.heappush(ready, target)

        if len(order) != len(in_degree):
            raise ValueError("Graph contains a cycle; no topological order exists")
        return order
