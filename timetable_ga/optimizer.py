"""
Punto de entrada del optimizador.

Recibe la foto de entidades como argumentos y devuelve datos nuevos; nunca
toca estado global. Quien mantenga el estado de la aplicación llama a
`optimize_timetable` y confirma el resultado (ver `state.TimetableStore`).
"""
import random
import uuid
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence

from .config import GAConfig, OptimizationParameters
from .constraints import build_constraints
from .domains import build_problem, build_requirement_domains
from .ga import GeneticSolver
from .initial_population import SlotPlanner, build_initial_population
from .model import Faculty, OptimizationResult, Room, SchoolClass, Subject, Timetable
from .ranking import rank_results
from .validation import parameters_from_entities


def optimize_timetable(
    classes: Sequence[SchoolClass],
    subjects: Sequence[Subject],
    faculty: Sequence[Faculty],
    rooms: Sequence[Room],
    params: Optional[OptimizationParameters] = None,
    cfg: Optional[GAConfig] = None,
    rng: Optional[random.Random] = None,
    should_stop: Optional[Callable[[], bool]] = None,
    history: Optional[List[Dict]] = None,
) -> List[OptimizationResult]:
    """
    Corre el algoritmo genético completo sobre la foto de entidades dada.
    Si se pasa `history`, se le agregan las métricas por generación.
    """
    cfg = cfg or GAConfig()
    rng = rng if rng is not None else random.Random(cfg.seed)
    if params is None:
        params = parameters_from_entities(classes, subjects, faculty, rooms, cfg=cfg)

    problem = build_problem(classes, subjects, faculty, rooms)
    domains = build_requirement_domains(problem, cfg)
    constraints = build_constraints(problem, params, cfg)
    planner = SlotPlanner(problem, domains, cfg, params.max_classes_per_day)

    population = build_initial_population(planner, max(1, cfg.population_size), rng)
    solver = GeneticSolver(planner, constraints, cfg, rng)
    population = solver.evolve(population, cfg.generations, should_stop=should_stop)
    if history is not None:
        history.extend(solver.history)

    return rank_results(population, problem, cfg)


def result_to_timetable(
    result: OptimizationResult,
    title: Optional[str] = None,
    description: str = "",
    department: str = "",
    semester: str = "",
    year: str = "",
    shift: str = "MORNING",
    timetable_id: Optional[str] = None,
) -> Timetable:
    now = datetime.now()
    return Timetable(
        id=timetable_id or uuid.uuid4().hex,
        title=title or result.title,
        slots=tuple(result.schedule_data),
        description=description or f"Generated timetable (score {result.score})",
        department=department,
        semester=semester,
        year=year or str(now.year),
        shift=shift,
        created_at=now,
        updated_at=now,
    )


def get_optimization_suggestions(results: Sequence[OptimizationResult]) -> List[str]:
    suggestions: List[str] = []
    if not results:
        return suggestions

    best = results[0]
    worst = results[-1]

    if best.conflict_count > 0:
        suggestions.append(
            f"Consider adding more classrooms to reduce conflicts ({best.conflict_count} detected)"
        )
    if best.faculty_workload_balance < 80:
        suggestions.append(
            "Faculty workload is unbalanced. Consider redistributing subjects or hiring additional faculty."
        )
    if best.classroom_utilization < 85:
        suggestions.append(
            "Classroom utilization is below optimal. Consider consolidating smaller classes or adding more subjects."
        )
    if len(results) > 1:
        diff = best.score - worst.score
        if diff > 10:
            suggestions.append(
                f"Significant optimization potential exists ({diff:.1f}% score difference between best and worst options)"
            )
    return suggestions
