"""
Restricciones del horario.

Cada restricción es un par (peso, función pura) que cuenta violaciones sobre
la lista de slots de un candidato. Se arman como clausuras sobre la foto de
entidades y los parámetros de la corrida, así se pueden probar y combinar
por separado.
"""
from dataclasses import dataclass
from typing import Callable, Dict, List, Sequence

import numpy as np

from .config import GAConfig, OptimizationParameters
from .domains import SchedulingProblem, faculty_weekly_capacity
from .model import TimetableSlot

CheckFn = Callable[[Sequence[TimetableSlot]], int]


@dataclass(frozen=True)
class Constraint:
    name: str
    weight: int
    check: CheckFn


def _counts(keys: List[str]) -> np.ndarray:
    if not keys:
        return np.zeros(0, dtype=int)
    _, counts = np.unique(np.array(keys, dtype=str), return_counts=True)
    return counts


def colliding_pairs(keys: List[str]) -> int:
    counts = _counts(keys)
    return int((counts * (counts - 1) // 2).sum())


def excess_over(keys: List[str], limit: int) -> int:
    counts = _counts(keys)
    return int(np.maximum(counts - limit, 0).sum())


def room_collisions(slots: Sequence[TimetableSlot]) -> int:
    return colliding_pairs([f"{s.day}|{s.time}|{s.room_id}" for s in slots])


def batch_collisions(slots: Sequence[TimetableSlot]) -> int:
    return colliding_pairs([f"{s.day}|{s.time}|{s.class_id}" for s in slots])


def faculty_check(problem: SchedulingProblem, cfg: GAConfig) -> CheckFn:
    faculty = problem.faculty_by_id
    capacity = {fid: faculty_weekly_capacity(f, cfg) for fid, f in faculty.items()}

    def check(slots: Sequence[TimetableSlot]) -> int:
        violations = colliding_pairs([f"{s.day}|{s.time}|{s.faculty_id}" for s in slots])
        load: Dict[str, int] = {}
        for s in slots:
            load[s.faculty_id] = load.get(s.faculty_id, 0) + 1
            fac = faculty.get(s.faculty_id)
            if fac is not None and not fac.is_available(s.day, s.time, s.duration):
                violations += 1
        for fid, sessions in load.items():
            if fid in capacity:
                violations += max(0, sessions - capacity[fid])
        return violations

    return check


def subject_frequency_check(problem: SchedulingProblem) -> CheckFn:
    subjects = problem.subject_by_id

    def check(slots: Sequence[TimetableSlot]) -> int:
        weekly: Dict[str, List[str]] = {}
        daily: Dict[str, List[str]] = {}
        for s in slots:
            weekly.setdefault(s.subject_id, []).append(s.class_id)
            daily.setdefault(s.subject_id, []).append(f"{s.class_id}|{s.day}")
        violations = 0
        for sid, keys in weekly.items():
            subj = subjects.get(sid)
            if subj is None:
                continue
            violations += excess_over(keys, subj.max_classes_per_week)
            violations += excess_over(daily[sid], subj.max_classes_per_day)
        return violations

    return check


def time_slot_load_check(max_per_day: int) -> CheckFn:
    def check(slots: Sequence[TimetableSlot]) -> int:
        return excess_over([f"{s.class_id}|{s.day}" for s in slots], max_per_day)

    return check


def build_constraints(
    problem: SchedulingProblem,
    params: OptimizationParameters,
    cfg: GAConfig,
) -> List[Constraint]:
    w = cfg.weights
    return [
        Constraint("room", w["room"], room_collisions),
        Constraint("faculty", w["faculty"], faculty_check(problem, cfg)),
        Constraint("subject_frequency", w["subject_frequency"], subject_frequency_check(problem)),
        Constraint("time_slot_load", w["time_slot_load"], time_slot_load_check(params.max_classes_per_day)),
        Constraint("batch", w["batch"], batch_collisions),
    ]
