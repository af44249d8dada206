import random
from typing import List

from .initial_population import Occupancy, SlotPlanner
from .model import Schedule


def tournament_select(population: List[Schedule], n_parents: int, k: int, rng: random.Random) -> List[Schedule]:
    """Selección por torneo: muestra k candidatos y se queda con el de mayor fitness."""
    size = min(k, len(population))
    selected: List[Schedule] = []
    for _ in range(n_parents):
        contenders = rng.sample(population, size)
        # max() devuelve el primero ante empates
        selected.append(max(contenders, key=lambda ind: ind.fitness))
    return selected


def single_point_crossover(p1: Schedule, p2: Schedule, rng: random.Random) -> Schedule:
    """Cruce en un punto sobre la lista de slots (misma posición = mismo requerimiento)."""
    n = len(p1.slots)
    point = rng.randrange(n) if n else 0
    return Schedule(slots=p1.slots[:point] + p2.slots[point:])


def mutate_slot(ind: Schedule, planner: SlotPlanner, rng: random.Random) -> Schedule:
    """Reubica un slot elegido al azar con las mismas reglas de factibilidad que la generación."""
    if not ind.slots:
        return ind
    idx = rng.randrange(len(ind.slots))
    others = ind.slots[:idx] + ind.slots[idx + 1:]
    new_slot = planner.place(idx, Occupancy(others), rng)
    slots = ind.slots[:idx] + (new_slot,) + ind.slots[idx + 1:]
    return Schedule(slots=slots)


def mutate(offspring: List[Schedule], planner: SlotPlanner, mutation_rate: float, rng: random.Random) -> List[Schedule]:
    out: List[Schedule] = []
    for child in offspring:
        if rng.random() < mutation_rate:
            child = mutate_slot(child, planner, rng)
        out.append(child)
    return out
