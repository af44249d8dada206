# timetable_ga/ranking.py
from typing import Dict, List, Sequence

import numpy as np

from .config import GAConfig
from .conflicts import detect_conflicts
from .domains import SchedulingProblem
from .model import OptimizationResult, Schedule, TimetableSlot

STRATEGY_LABELS = [
    ("score", "Multi-Objective Balance"),
    ("classroom_utilization", "High Utilization Focus"),
    ("faculty_workload_balance", "Balanced Workload"),
    ("conflict_count", "Minimal Conflicts"),
]


def classroom_utilization(slots: Sequence[TimetableSlot], n_rooms: int, cfg: GAConfig) -> float:
    available = n_rooms * len(cfg.days) * len(cfg.time_slots)
    if available == 0:
        return 0.0
    used = {(s.day, s.time, s.room_id) for s in slots}
    return round(min(100.0, 100.0 * len(used) / available), 1)


def faculty_workload_balance(slots: Sequence[TimetableSlot], faculty_ids: Sequence[str]) -> float:
    """100 menos el coeficiente de variación (en %) de las sesiones por docente."""
    load: Dict[str, int] = {fid: 0 for fid in faculty_ids}
    for s in slots:
        load[s.faculty_id] = load.get(s.faculty_id, 0) + 1
    loads = np.array(list(load.values()), dtype=float)
    if loads.size == 0 or loads.mean() == 0:
        return 100.0
    cv = loads.std() / loads.mean()
    return float(round(max(0.0, 100.0 - 100.0 * cv), 1))


def composite_score(fitness: float, utilization: float, balance: float, cfg: GAConfig) -> float:
    w = cfg.score_weights
    total = w["fitness"] + w["utilization"] + w["workload_balance"]
    if total <= 0:
        return float(round(fitness, 1))
    score = (w["fitness"] * fitness + w["utilization"] * utilization + w["workload_balance"] * balance) / total
    return float(round(min(100.0, max(0.0, score)), 1))


def distinct_top(population: Sequence[Schedule], top_n: int) -> List[Schedule]:
    # sorted() es estable: ante empates manda el orden de inserción
    ranked = sorted(population, key=lambda ind: ind.fitness, reverse=True)
    seen = set()
    out: List[Schedule] = []
    for ind in ranked:
        key = ind.key()
        if key in seen:
            continue
        seen.add(key)
        out.append(ind)
        if len(out) >= top_n:
            break
    return out


def _assign_labels(results: List[OptimizationResult]) -> None:
    free = list(range(len(results)))
    for metric, label in STRATEGY_LABELS:
        if not free:
            break
        if metric == "conflict_count":
            pick = min(free, key=lambda i: results[i].conflict_count)
        else:
            pick = max(free, key=lambda i: getattr(results[i], metric))
        results[pick].title = label
        free.remove(pick)
    for n, i in enumerate(free, start=1):
        results[i].title = f"Optimized Solution {n}"


def rank_results(
    population: Sequence[Schedule],
    problem: SchedulingProblem,
    cfg: GAConfig,
) -> List[OptimizationResult]:
    faculty_ids = [f.id for f in problem.faculty]
    results: List[OptimizationResult] = []
    for ind in distinct_top(population, cfg.top_n):
        util = classroom_utilization(ind.slots, len(problem.rooms), cfg)
        balance = faculty_workload_balance(ind.slots, faculty_ids)
        results.append(
            OptimizationResult(
                id="",
                title="",
                classroom_utilization=util,
                faculty_workload_balance=balance,
                conflict_count=len(detect_conflicts(ind.slots, cfg.days)),
                score=composite_score(ind.fitness, util, balance, cfg),
                status="GENERATED",
                schedule_data=list(ind.slots),
                fitness=ind.fitness,
            )
        )

    _assign_labels(results)
    results.sort(key=lambda r: r.score, reverse=True)
    for i, r in enumerate(results, start=1):
        r.id = str(i)
    return results
