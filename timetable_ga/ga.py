import enum
import random
from typing import Callable, Dict, List, Optional, Sequence

from .config import GAConfig
from .constraints import Constraint
from .evaluation import evaluate
from .initial_population import SlotPlanner
from .model import Schedule
from .operators import mutate, single_point_crossover, tournament_select


class SolverState(enum.Enum):
    SEEDED = "seeded"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    RECOMBINING = "recombining"
    MUTATING = "mutating"
    REPLACED = "replaced"
    CONVERGED = "converged"
    TERMINATED = "terminated"


class GeneticSolver:
    def __init__(
        self,
        planner: SlotPlanner,
        constraints: Sequence[Constraint],
        cfg: GAConfig,
        rng: Optional[random.Random] = None,
    ):
        self.planner = planner
        self.constraints = list(constraints)
        self.cfg = cfg
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self.state = SolverState.SEEDED
        self.generations_run = 0
        self.history: List[Dict] = []

    def _evaluate_all(self, population: List[Schedule]) -> None:
        self.state = SolverState.EVALUATING
        for ind in population:
            if not ind.evaluated:
                evaluate(ind, self.constraints, self.cfg.base_score)

    def _select(self, population: List[Schedule]) -> List[Schedule]:
        self.state = SolverState.SELECTING
        n_parents = max(1, len(population) // 2)
        ranked = sorted(population, key=lambda x: x.fitness, reverse=True)
        # Elitismo
        parents = ranked[: min(self.cfg.elite_size, n_parents)]
        parents += tournament_select(population, n_parents - len(parents), self.cfg.tournament_size, self.rng)
        return parents

    def _recombine(self, parents: List[Schedule], n_children: int) -> List[Schedule]:
        self.state = SolverState.RECOMBINING
        children: List[Schedule] = []
        for i in range(n_children):
            p1 = parents[(2 * i) % len(parents)]
            p2 = parents[(2 * i + 1) % len(parents)]
            children.append(single_point_crossover(p1, p2, self.rng))
        return children

    def converged(self, population: List[Schedule]) -> bool:
        fits = [ind.fitness for ind in population]
        best = max(fits)
        avg = sum(fits) / len(fits)
        return (best - avg) < self.cfg.convergence_threshold

    def evolve(
        self,
        population: List[Schedule],
        generations: Optional[int] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> List[Schedule]:
        """
        Evoluciona la población y devuelve la población final ya evaluada.
        `should_stop` se consulta entre generaciones; si devuelve True se corta
        y se devuelve lo alcanzado hasta ahí.
        """
        generations = self.cfg.generations if generations is None else generations
        size = len(population)
        self.state = SolverState.SEEDED
        self.history = []
        self.generations_run = 0
        if size == 0:
            self.state = SolverState.TERMINATED
            return population

        self._evaluate_all(population)

        for gen in range(generations):
            if should_stop is not None and should_stop():
                break

            parents = self._select(population)
            children = self._recombine(parents, size - len(parents))
            self.state = SolverState.MUTATING
            children = mutate(children, self.planner, self.cfg.mutation_rate, self.rng)

            population = parents + children
            self.state = SolverState.REPLACED
            self._evaluate_all(population)
            self.generations_run = gen + 1

            best = max(ind.fitness for ind in population)
            avg = sum(ind.fitness for ind in population) / len(population)
            self.history.append({"gen": gen, "best_fitness": best, "avg_fitness": avg})

            if self.cfg.verbose and (gen % self.cfg.log_every == 0 or gen == generations - 1):
                print(f"Gen {gen}: Mejor Fitness={best:.2f} Avg={avg:.2f}")

            if self.converged(population):
                self.state = SolverState.CONVERGED
                if self.cfg.verbose:
                    print(f"Convergencia en la generación {gen} (brecha < {self.cfg.convergence_threshold})")
                break

        self.state = SolverState.TERMINATED
        return population
