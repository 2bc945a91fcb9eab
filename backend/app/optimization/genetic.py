"""
Multi-Objective Optimizer for Business Scenarios
Weighted-sum genetic search with hill-climbing refinement and Pareto reporting
"""

import time
import numpy as np
from dataclasses import fields
from typing import Callable, Dict, List, Optional, Sequence, Union
import logging

from app.optimization.models import (
    BusinessBaseline,
    Constraint,
    Objective,
    OptimizationConfig,
    OptimizationInputError,
    OptimizationResult,
    Solution,
    Variable
)
from app.optimization.constraints import ensure_valid_problem
from app.optimization.local_search import hill_climb
from app.optimization.objectives import evaluate_solution
from app.optimization.pareto import (
    annotate_dominance,
    compute_hypervolume_indicator,
    find_pareto_front
)
from app.optimization.tradeoffs import calculate_trade_offs

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class PopulationSearch:
    """
    Genetic-algorithm population search over a fixed problem

    Holds the problem definition and random source for one run; every
    solution it produces is a new immutable object.
    """

    def __init__(
        self,
        objectives: Sequence[Objective],
        variables: Sequence[Variable],
        constraints: Sequence[Constraint],
        config: OptimizationConfig,
        baseline: BusinessBaseline,
        rng: np.random.Generator
    ):
        self.objectives = list(objectives)
        self.variables = list(variables)
        self.constraints = list(constraints)
        self.config = config
        self.baseline = baseline
        self.rng = rng

    def evaluate(self, assignment: Dict[str, float]) -> Solution:
        return evaluate_solution(
            assignment,
            self.variables,
            self.objectives,
            self.constraints,
            self.baseline
        )

    def refine(self, solution: Solution, max_iterations: int) -> Solution:
        return hill_climb(
            solution,
            self.variables,
            self.objectives,
            self.constraints,
            self.baseline,
            max_iterations=max_iterations,
            feasibility_policy=self.config.feasibility_policy
        )

    def rank_key(self, solution: Solution):
        """
        Sort key, lower is better

        Soft policy ranks by score only; hard policy puts every feasible
        solution ahead of every infeasible one.
        """
        if self.config.feasibility_policy == 'hard':
            return (not solution.feasible, -solution.score)
        return -solution.score

    def random_solution(self) -> Solution:
        """Uniform random assignment within each variable's bounds"""
        assignment = {
            v.id: float(self.rng.uniform(v.min_value, v.max_value)) if v.max_value > v.min_value else v.min_value
            for v in self.variables
        }
        return self.evaluate(assignment)

    def initial_population(self) -> List[Solution]:
        return [
            self.refine(self.random_solution(), self.config.initial_local_search_iterations)
            for _ in range(self.config.population_size)
        ]

    def tournament_select(self, ranked: List[Solution]) -> Solution:
        """
        Tournament selection on a population sorted best-first

        The best contestant is the one with the lowest index.
        """
        contestants = self.rng.integers(0, len(ranked), size=self.config.tournament_size)
        return ranked[int(contestants.min())]

    def crossover_and_mutate(self, parent1: Solution, parent2: Solution) -> Dict[str, float]:
        """
        Uniform crossover followed by per-variable mutation

        Each value comes from either parent with equal probability, then
        with probability `mutation_rate` moves by up to one step size in
        either direction, clamped to the variable's bounds.
        """
        child = {}
        for v in self.variables:
            if self.rng.random() < 0.5:
                value = parent1.variables.get(v.id, v.current_value)
            else:
                value = parent2.variables.get(v.id, v.current_value)

            if self.rng.random() < self.config.mutation_rate:
                value = v.clamp(value + float(self.rng.uniform(-v.step_size, v.step_size)))

            child[v.id] = value
        return child

    def next_generation(self, population: List[Solution]) -> List[Solution]:
        """
        Elites carry over unchanged; the rest are refined offspring
        """
        size = self.config.population_size
        ranked = sorted(population, key=self.rank_key)
        n_elite = min(size, max(1, int(size * self.config.elite_fraction)))

        new_population = list(ranked[:n_elite])

        while len(new_population) < size:
            parent1 = self.tournament_select(ranked)
            parent2 = self.tournament_select(ranked)
            child = self.evaluate(self.crossover_and_mutate(parent1, parent2))
            new_population.append(
                self.refine(child, self.config.offspring_local_search_iterations)
            )

        return new_population

    def best(self, population: Sequence[Solution]) -> Solution:
        # min() keeps the first of equally ranked solutions
        return min(population, key=self.rank_key)


def select_optimal(population: Sequence[Solution]) -> Solution:
    """
    Highest-scoring feasible solution, or highest-scoring overall when
    nothing is feasible. Ties go to the lowest population index.
    """
    feasible = [s for s in population if s.feasible]
    candidates = feasible if feasible else list(population)

    optimal = candidates[0]
    for s in candidates[1:]:
        if s.score > optimal.score:
            optimal = s
    return optimal


def multi_objective_optimize(
    objectives: Sequence[Objective],
    variables: Sequence[Variable],
    constraints: Sequence[Constraint] = (),
    config: Optional[Union[OptimizationConfig, Dict]] = None,
    baseline: Optional[BusinessBaseline] = None,
    should_cancel: Optional[Callable[[], bool]] = None,
    rng: Optional[np.random.Generator] = None
) -> OptimizationResult:
    """
    Run the weighted-sum genetic search and analyze the final population

    Args:
        objectives: Weighted objectives over business metrics
        variables: Bounded decision variables with impact coefficients
        constraints: Feasibility predicates
        config: OptimizationConfig or a dict of its fields (defaults for the rest)
        baseline: Baseline business metrics (restaurant defaults if None)
        should_cancel: Checked between generations; returning True stops
                       the run early with the best population so far
        rng: Random source; when None one is seeded from `config.seed`

    Returns:
        OptimizationResult with optimal solution, Pareto front, trade-offs
        and convergence history

    Raises:
        OptimizationInputError: If the problem is malformed
    """
    start_time = time.perf_counter()

    if config is None:
        config = OptimizationConfig()
    elif isinstance(config, dict):
        unknown = sorted(set(config) - {f.name for f in fields(OptimizationConfig)})
        if unknown:
            raise OptimizationInputError(f"Invalid optimization problem: unknown config fields: {', '.join(unknown)}")
        config = OptimizationConfig(**config)
    baseline = baseline or BusinessBaseline()

    ensure_valid_problem(objectives, variables, constraints, config)

    rng = rng if rng is not None else np.random.default_rng(config.seed)
    search = PopulationSearch(objectives, variables, constraints, config, baseline, rng)

    logger.info("Initializing population search...")
    logger.info(f"Population size: {config.population_size}")
    logger.info(f"Max generations: {config.max_iterations}")
    logger.info(f"Feasibility policy: {config.feasibility_policy}")

    population = search.initial_population()

    convergence_history = []
    previous_best = None
    iterations = 0
    converged = False
    cancelled = False

    while iterations < config.max_iterations and not converged:
        if should_cancel is not None and should_cancel():
            logger.warning(f"Optimization cancelled after {iterations} generations")
            cancelled = True
            break

        population = search.next_generation(population)

        current_best = search.best(population).score
        convergence_history.append(current_best)

        if previous_best is not None and abs(current_best - previous_best) < config.convergence_threshold:
            converged = True
        previous_best = current_best
        iterations += 1

    logger.info(f"Search complete after {iterations} generations (converged={converged})")

    population = annotate_dominance(population, objectives)
    pareto_front = find_pareto_front(population, objectives)
    optimal = select_optimal(population)
    trade_offs = calculate_trade_offs(optimal, variables, objectives, baseline)
    feasible_count = sum(1 for s in population if s.feasible)

    if constraints and feasible_count == 0:
        logger.warning("No solution in the final population satisfies all constraints")

    execution_time = time.perf_counter() - start_time

    logger.info(f"Optimal score: {optimal.score:.2f} (feasible={optimal.feasible})")
    logger.info(f"Pareto front size: {len(pareto_front)}")
    logger.info(f"Feasible solutions: {feasible_count}/{len(population)}")
    logger.info(f"Execution time: {execution_time:.2f}s")

    return OptimizationResult(
        optimal=optimal,
        pareto_front=pareto_front,
        trade_offs=trade_offs,
        convergence_history=convergence_history,
        iterations=iterations,
        execution_time=execution_time,
        population=population,
        converged=converged,
        cancelled=cancelled,
        feasible_count=feasible_count,
        hypervolume=compute_hypervolume_indicator(pareto_front, objectives)
    )


if __name__ == "__main__":
    from app.optimization.presets import (
        default_constraints,
        default_objectives,
        default_variables
    )
    from app.optimization.recommendations import generate_recommendations

    objectives = default_objectives()
    variables = default_variables()

    print("Running restaurant optimization...")
    result = multi_objective_optimize(
        objectives,
        variables,
        default_constraints(),
        config=OptimizationConfig(population_size=30, max_iterations=50, seed=42)
    )

    print(f"\nOptimization Results:")
    print(f"  Score: {result.optimal.score:.2f} (feasible={result.optimal.feasible})")
    print(f"  Generations: {result.iterations}")
    print(f"  Pareto front size: {len(result.pareto_front)}")
    for v in variables:
        print(f"  {v.name}: {v.current_value} -> {result.optimal.variables[v.id]:.1f}")

    print("\nRecommendations:")
    for rec in generate_recommendations(result, variables, objectives):
        print(f"  [{rec.priority}] {rec.action} ({rec.timeframe})")
