import os
import time
import numpy as np
import pandas as pd
from print_color import print
from typing import Optional, Sequence, Callable

from problems import GraphProblem, manhattan_distance
from algorithms import SearchAlgorithm, Dijkstra, WeightedAStar

GRID_HEIGHT = 60
GRID_WIDTH = 80
BLOCKED_PROBABILITY = 0.25
REPETITIONS = 10
WEIGHTS = [1, 1.5, 3]
GRAPH_SIZES = [100, 200, 400, 800]
EDGE_PROBABILITY = 0.05
SEED = 0
OUTPUT_FOLDER = "data"

PENDING = "\033[41m\033[30m Pending \033[39m\033[49m"  # Background color: red
FINISHED = "\033[42m\033[30m Finished \033[39m\033[49m"  # Background color: green
UNREACHABLE = "\033[43m\033[30m Unreachable \033[39m\033[49m"  # Background color: yellow


def run_algorithm(algorithm: SearchAlgorithm) -> tuple[float, int, Optional[float]]:
    """
    :return: Run time, expanded nodes count and solution cost (None if the target is unreachable)
    """
    start_time = time.perf_counter()
    solution = None
    for solution, _, _ in algorithm.search():
        pass
    end_time = time.perf_counter()

    solution_cost = None if solution is None else solution[-1].depth
    return end_time - start_time, algorithm.problem.expanded_nodes, solution_cost


def grid_algorithms(edges: dict, target: tuple[int, int], weights: Sequence[float]) -> list[SearchAlgorithm]:
    source = (0, 0)
    heuristic = manhattan_distance(target)

    algorithms: list[SearchAlgorithm] = [Dijkstra(GraphProblem(edges, source, target))]
    for weight in weights:
        try:
            algorithms.append(WeightedAStar(GraphProblem(edges, source, target, heuristic), weight))
        except AssertionError as exception:
            print(f"weight={weight}: {exception}", tag="WARNING", tag_color="yellow")
    return algorithms


def evaluate(grids: Sequence[dict], target: tuple[int, int],
             make_algorithms: Callable[[dict, tuple[int, int]], list[SearchAlgorithm]],
             verbose: bool = True) -> pd.DataFrame:
    """
    Route from the top left corner to target on every grid with every algorithm
    :return: One row per (grid, algorithm)
    """
    task_status = None
    rows = []
    for i, edges in enumerate(grids):
        algorithms = make_algorithms(edges, target)
        if task_status is None:
            task_status = pd.DataFrame(columns=[j + 1 for j in range(len(grids))],
                                       index=[str(algorithm) for algorithm in algorithms], dtype=str)
            task_status[:] = PENDING

        optimal_score = None
        for algorithm in algorithms:
            run_time, expanded_nodes_count, solution_score = run_algorithm(algorithm)
            if optimal_score is None:
                optimal_score = solution_score

            rows.append({
                "grid": i,
                "algorithm": str(algorithm),
                "optimal_length": optimal_score,
                "solution_length": solution_score,
                "suboptimality": None if solution_score is None else solution_score / max(optimal_score, 1),
                "run_time": run_time,
                "expanded_nodes": expanded_nodes_count,
            })
            task_status.at[str(algorithm), i + 1] = UNREACHABLE if solution_score is None else FINISHED

        if verbose:
            if optimal_score is None:
                print(f"Grid {i + 1}/{len(grids)}: target unreachable", tag="SKIP", tag_color="yellow")
            else:
                print(f"Grid {i + 1}/{len(grids)}: optimal length {optimal_score}", tag="SUCCESS", tag_color="green")

    if verbose and task_status is not None:
        print("\n")
        print(task_status.to_markdown(tablefmt="grid"))

    return pd.DataFrame(rows)


def relaxation_benchmark(graph_sizes: Sequence[int], edge_probability: float,
                         rng: Optional[np.random.Generator] = None, verbose: bool = True) -> pd.DataFrame:
    if rng is None:
        rng = np.random.default_rng()

    rows = []
    for num_vertices in graph_sizes:
        edges = GraphProblem.random(num_vertices, edge_probability, rng=rng)
        algorithm = Dijkstra(GraphProblem(edges, source=0))

        start_time = time.perf_counter()
        distances = algorithm.shortest_distances()
        end_time = time.perf_counter()

        rows.append({
            "vertices": num_vertices,
            "edges": sum(len(neighbors) for neighbors in edges.values()),
            "reachable": len(distances),
            "relaxations": algorithm.relaxations,
            "expanded_nodes": algorithm.problem.expanded_nodes,
            "run_time": end_time - start_time,
        })
        if verbose:
            print(f"{num_vertices} vertices relaxed in {end_time - start_time:.3f} seconds",
                  tag="DIJKSTRA", tag_color="cyan")

    return pd.DataFrame(rows)


def main():
    rng = np.random.default_rng(SEED)
    target = (GRID_HEIGHT - 1, GRID_WIDTH - 1)

    grids = [GraphProblem.grid(GRID_HEIGHT, GRID_WIDTH, BLOCKED_PROBABILITY, rng) for _ in range(REPETITIONS)]

    os.makedirs(OUTPUT_FOLDER, exist_ok=True)

    results = evaluate(grids, target, lambda edges, goal: grid_algorithms(edges, goal, WEIGHTS))
    results.to_csv(f"{OUTPUT_FOLDER}/grid_results.csv", index=False)

    summary = results.dropna(subset=["solution_length"]) \
        .groupby("algorithm")[["suboptimality", "run_time", "expanded_nodes"]].mean()
    print("\n")
    print(summary.to_markdown(tablefmt="grid"))

    relaxations = relaxation_benchmark(GRAPH_SIZES, EDGE_PROBABILITY, rng)
    relaxations.to_csv(f"{OUTPUT_FOLDER}/relaxation_results.csv", index=False)
    print("\n")
    print(relaxations.to_markdown(tablefmt="grid", index=False))


if __name__ == '__main__':
    program_start_time = time.perf_counter()
    main()
    program_end_time = time.perf_counter()
    print(f"\tProgram finished in {program_end_time - program_start_time:.3f} seconds")
