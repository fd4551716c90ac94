import numpy as np
from typing import Optional, Hashable, Mapping, Callable

EDGES_TYPE = Mapping[Hashable, Mapping[Hashable, float]]


class Node:
    """
    A search node. Nodes are equal when they describe the same state (same key),
    no matter which path (parent, depth) led to them.
    """

    def __init__(self, key: Hashable, parent: Optional["Node"] = None, cost: float = 1):
        self.key = key
        self.id = hash(key)
        self.parent = parent

        if parent is None:
            self.depth = float("inf")
        else:
            self.depth = parent.depth + cost

        self.heuristic_value = None
        self.possible_moves = None

    def get_possible_moves(self) -> tuple[list["Node"], bool]:
        """
        :return: The child nodes (without going back to the parent) and whether the moves were computed now
        """
        raise NotImplementedError()

    def update_information(self, other: "Node"):
        """
        Copy the path independent caches of an equal node
        """
        self.heuristic_value = other.heuristic_value
        self.possible_moves = other.possible_moves

    def path(self) -> list["Node"]:
        node = self
        path = [node]
        while (node := node.parent) is not None:
            path.append(node)
        return path[::-1]

    def __eq__(self, other):
        if not isinstance(other, Node):
            return NotImplemented
        return self.key == other.key

    def __hash__(self):
        return self.id

    def __repr__(self):
        return f"{type(self).__name__}({self.key!r}, depth={self.depth})"


class Vertex(Node):
    def __init__(self, name: Hashable, edges: EDGES_TYPE, parent: Optional["Vertex"] = None, cost: float = 1):
        super().__init__(name, parent, cost)
        self.edges = edges

    @property
    def name(self) -> Hashable:
        return self.key

    def get_possible_moves(self) -> tuple[list["Vertex"], bool]:
        has_expanded = False
        if self.possible_moves is None:
            self.possible_moves = list(self.edges.get(self.key, {}).items())
            has_expanded = True

        return [Vertex(name, self.edges, self, weight) for name, weight in self.possible_moves
                if self.parent is None or name != self.parent.key], has_expanded


class SearchProblem:
    def __init__(self, initial_state: Node):
        self.initial_state = initial_state

        self.expanded_nodes = None
        self.reset()

    def reset(self, new_initial_state: Optional[Node] = None):
        if new_initial_state is not None:
            self.initial_state = new_initial_state
        self.initial_state.parent = None
        self.initial_state.depth = 0
        self.initial_state.heuristic_value = None
        self.expanded_nodes = 0

    def is_solved(self, state: Node) -> bool:
        raise NotImplementedError()

    def heuristic(self, state: Node) -> float:
        raise NotImplementedError()

    def expand(self, state: Node) -> list[Node]:
        moves, new_expand = state.get_possible_moves()
        if new_expand:
            self.expanded_nodes += 1
        return moves


def manhattan_distance(target: tuple[int, int]) -> Callable[[tuple[int, int]], float]:
    """
    :return: Admissible heuristic towards target on a grid graph with unit weights
    """
    target_y, target_x = target

    def distance(cell: tuple[int, int]) -> float:
        y, x = cell
        return abs(y - target_y) + abs(x - target_x)

    return distance


class GraphProblem(SearchProblem):
    def __init__(self, edges: EDGES_TYPE, source: Hashable, target: Optional[Hashable] = None,
                 heuristic: Optional[Callable[[Hashable], float]] = None):
        """

        :param edges: Adjacency mapping: source vertex -> {target vertex: weight}
        :param source: Vertex to start the search from
        :param target: Goal vertex (None to relax the whole graph)
        :param heuristic: Admissible estimation of the remaining distance to the target (default: 0)
        """
        assert all(0 <= weight for neighbors in edges.values() for weight in neighbors.values()), \
            "Edge weights must be non-negative"

        self.edges = edges
        self.names = list(dict.fromkeys([*edges, *(name for neighbors in edges.values() for name in neighbors)]))
        assert source in self.names, f"Unknown source vertex: {source}"
        assert target is None or target in self.names, f"Unknown target vertex: {target}"

        self.target = target
        self._heuristic = heuristic

        super().__init__(Vertex(source, edges))

    def vertices(self) -> list[Vertex]:
        """
        :return: The initial vertex followed by a fresh (unreached) vertex for every other name
        """
        source = self.initial_state
        return [source] + [Vertex(name, self.edges) for name in self.names if name != source.key]

    def is_solved(self, state: Vertex) -> bool:
        return state.key == self.target

    def heuristic(self, state: Vertex) -> float:
        if self._heuristic is None:
            return 0
        if state.heuristic_value is None:
            state.heuristic_value = self._heuristic(state.key)
        return state.heuristic_value

    @staticmethod
    def random(num_vertices: int, edge_probability: float = 0.3, max_weight: int = 10,
               rng: Optional[np.random.Generator] = None) -> dict[int, dict[int, float]]:
        """
        :return: Adjacency mapping of a random directed graph with integer weights in [1, max_weight]
        """
        assert 0 < num_vertices, "A graph must have at least one vertex"
        assert 0 <= edge_probability <= 1, "Edge probability must be between 0 and 1"
        if rng is None:
            rng = np.random.default_rng()

        mask = rng.random((num_vertices, num_vertices)) < edge_probability
        np.fill_diagonal(mask, False)
        weights = rng.integers(1, max_weight, size=(num_vertices, num_vertices), endpoint=True)

        return {
            source: {target: float(weights[source, target]) for target in np.flatnonzero(mask[source]).tolist()}
            for source in range(num_vertices)
        }

    @staticmethod
    def grid(height: int, width: int, blocked_probability: float = 0.2,
             rng: Optional[np.random.Generator] = None) -> dict[tuple[int, int], dict[tuple[int, int], float]]:
        """
        :return: Adjacency mapping of a 4-connected grid with unit weights; blocked cells have no edges.
                 The corners (0, 0) and (height - 1, width - 1) are never blocked
        """
        assert 0 < height and 0 < width, "A grid must have at least one cell"
        assert 0 <= blocked_probability < 1, "Blocked probability must be in [0, 1)"
        if rng is None:
            rng = np.random.default_rng()

        blocked = rng.random((height, width)) < blocked_probability
        blocked[0, 0] = blocked[-1, -1] = False

        edges = {}
        for y, x in np.argwhere(~blocked).tolist():
            edges[(y, x)] = {
                (y + dy, x + dx): 1.0
                for dy, dx in ((0, 1), (1, 0), (0, -1), (-1, 0))
                if 0 <= y + dy < height and 0 <= x + dx < width and not blocked[y + dy, x + dx]
            }
        return edges
