from typing import Optional, Iterator, Any

from sorted_queue import SortedQueue, Ordering
from problems import Node, SearchProblem, GraphProblem

GOAL_FOUND = "Goal Found"


class SearchAlgorithm:
    def __init__(self, problem: SearchProblem):
        self.problem = problem

    def search(self) -> Iterator[tuple[list[Node], Optional[str], Any]]:
        """
        :return: Iterator over (solution path, stop reason, information); the last item has a stop reason.
                 Nothing is yielded if no solution exists
        """
        self.problem.reset()
        for goal, stop, information in self._search():
            yield goal.path(), stop, information
            if stop is not None:
                return

    def _search(self) -> Iterator[tuple[Node, Optional[str], Any]]:
        raise NotImplementedError()


class Dijkstra(SearchAlgorithm):
    """
    Every vertex is enqueued up front (the source at 0, the rest at infinity) and edges are relaxed
    by lowering the priority of the enqueued vertex in place.
    """

    def __init__(self, problem: GraphProblem):
        super().__init__(problem)
        self.distances: dict = {}
        self.relaxations = 0

    def _search(self) -> Iterator[tuple[Node, Optional[str], dict]]:
        self.distances = {}
        self.relaxations = 0

        open_set: SortedQueue[Node, float] = SortedQueue(Ordering.ASCENDING)
        for vertex in self.problem.vertices():
            open_set.enqueue(vertex.depth, vertex)

        while open_set:
            distance, current = open_set.dequeue()
            if distance == float("inf"):
                # The remaining vertices are unreachable
                break

            self.distances[current.key] = distance
            if self.problem.is_solved(current):
                yield current, GOAL_FOUND, self.distances
                return

            for neighbor in self.problem.expand(current):
                if neighbor not in open_set:
                    continue  # Already settled

                if neighbor.depth < open_set.get_weight(neighbor):
                    open_set.set_ref(open_set.get_element(neighbor), neighbor)
                    open_set.change_priority(neighbor.depth, neighbor)
                    self.relaxations += 1

    def shortest_distances(self) -> dict:
        """
        :return: Distance from the source to every reachable vertex
        """
        for _ in self.search():
            pass
        return self.distances

    def __str__(self):
        return "Dijkstra"


class WeightedAStar(SearchAlgorithm):
    def __init__(self, problem: SearchProblem, weight: float = 1):
        super().__init__(problem)

        assert 1 <= weight, "Weight must be greater than 1"
        self.weight = weight

    def _priority(self, state: Node) -> float:
        return state.depth + self.weight * self.problem.heuristic(state)

    def _search(self) -> Iterator[tuple[Node, Optional[str], None]]:
        open_set: SortedQueue[Node, float] = SortedQueue(Ordering.ASCENDING)
        open_set.enqueue(self._priority(self.problem.initial_state), self.problem.initial_state)

        closed_set: dict[Node, Node] = dict()

        while open_set:
            weighted_f_score, current_state = open_set.dequeue()

            if self.problem.is_solved(current_state):
                yield current_state, GOAL_FOUND, None
                return
            closed_set[current_state] = current_state

            for neighbor in self.problem.expand(current_state):
                # If neighbor is already in open_set, repoint it to the shorter path in place
                if neighbor in open_set:
                    old_neighbor = open_set.get_element(neighbor)
                    if neighbor.depth < old_neighbor.depth:
                        neighbor.update_information(old_neighbor)
                        open_set.set_ref(old_neighbor, neighbor)
                        open_set.change_priority(self._priority(neighbor), neighbor)
                    continue

                if neighbor in closed_set:
                    old_neighbor = closed_set[neighbor]
                    if old_neighbor.depth <= neighbor.depth:
                        continue
                    # Reopen
                    neighbor.update_information(old_neighbor)
                    del closed_set[neighbor]

                open_set.enqueue(self._priority(neighbor), neighbor)

    def __str__(self):
        if self.weight == 1:
            return "A*"
        return f"{self.weight} Weighted A*"
