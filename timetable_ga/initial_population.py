# timetable_ga/initial_population.py
from collections import Counter
from typing import Dict, Iterable, List, Optional, Tuple
import random

from .config import GAConfig
from .domains import RequirementDomain, SchedulingProblem, faculty_weekly_capacity
from .model import Schedule, TimetableSlot


class Occupancy:
    """Contadores de uso de recursos de un candidato parcial."""

    def __init__(self, slots: Iterable[TimetableSlot] = ()):
        self.room: Counter = Counter()
        self.faculty: Counter = Counter()
        self.klass: Counter = Counter()
        self.class_day: Counter = Counter()
        self.subject_day: Counter = Counter()
        self.faculty_load: Counter = Counter()
        for s in slots:
            self.add(s)

    def _update(self, s: TimetableSlot, delta: int) -> None:
        self.room[(s.day, s.time, s.room_id)] += delta
        self.faculty[(s.day, s.time, s.faculty_id)] += delta
        self.klass[(s.day, s.time, s.class_id)] += delta
        self.class_day[(s.class_id, s.day)] += delta
        self.subject_day[(s.class_id, s.subject_id, s.day)] += delta
        self.faculty_load[s.faculty_id] += delta

    def add(self, s: TimetableSlot) -> None:
        self._update(s, 1)

    def remove(self, s: TimetableSlot) -> None:
        self._update(s, -1)


class SlotPlanner:
    """
    Asigna (día, hora, docente, aula) a cada requerimiento de sesión.

    Primero intenta una opción factible elegida al azar; si no queda ninguna,
    cae a la opción con menos choques y acepta la violación (la penaliza el
    fitness, nunca se lanza un error).
    """

    def __init__(
        self,
        problem: SchedulingProblem,
        domains: Dict[int, RequirementDomain],
        cfg: GAConfig,
        max_classes_per_day: int,
    ):
        self.problem = problem
        self.domains = domains
        self.cfg = cfg
        self.max_classes_per_day = max_classes_per_day
        self.faculty = problem.faculty_by_id
        self.subjects = problem.subject_by_id
        self.capacity = {fid: faculty_weekly_capacity(f, cfg) for fid, f in self.faculty.items()}

    def _slot(self, idx: int, day: str, time: str, faculty_id: str, room_id: str) -> TimetableSlot:
        req = self.problem.requirements[idx]
        return TimetableSlot(
            id=req.slot_id,
            day=day,
            time=time,
            duration=self.cfg.session_duration,
            subject_id=req.subject_id,
            faculty_id=faculty_id,
            room_id=room_id,
            class_id=req.class_id,
            type=self.domains[idx].session_type,
        )

    def _faculty_ok(self, fid: str, day: str, time: str, occ: Occupancy) -> bool:
        return (
            occ.faculty[(day, time, fid)] == 0
            and occ.faculty_load[fid] < self.capacity.get(fid, 0)
            and self.faculty[fid].is_available(day, time, self.cfg.session_duration)
        )

    def _day_ok(self, idx: int, day: str, occ: Occupancy) -> bool:
        req = self.problem.requirements[idx]
        subj = self.subjects[req.subject_id]
        return (
            occ.class_day[(req.class_id, day)] < self.max_classes_per_day
            and occ.subject_day[(req.class_id, req.subject_id, day)] < subj.max_classes_per_day
        )

    def feasible_choice(self, idx: int, occ: Occupancy, rng: random.Random) -> Optional[TimetableSlot]:
        req = self.problem.requirements[idx]
        dom = self.domains[idx]
        times = list(dom.allowed_times)
        rng.shuffle(times)
        for day, time in times:
            if occ.klass[(day, time, req.class_id)] or not self._day_ok(idx, day, occ):
                continue
            facs = [f for f in dom.faculty_ids if self._faculty_ok(f, day, time, occ)]
            if not facs:
                continue
            rooms = [r for r in dom.room_ids if occ.room[(day, time, r)] == 0]
            if not rooms:
                continue
            return self._slot(idx, day, time, rng.choice(facs), rng.choice(rooms))
        return None

    def greedy_choice(self, idx: int, occ: Occupancy) -> TimetableSlot:
        req = self.problem.requirements[idx]
        dom = self.domains[idx]
        best: Optional[Tuple[int, str, str, str, str]] = None

        def faculty_cost(fid: str, day: str, time: str) -> int:
            cost = occ.faculty[(day, time, fid)]
            if not self.faculty[fid].is_available(day, time, self.cfg.session_duration):
                cost += 1
            if occ.faculty_load[fid] >= self.capacity.get(fid, 0):
                cost += 1
            return cost

        for day, time in dom.allowed_times:
            cost = occ.klass[(day, time, req.class_id)]
            if not self._day_ok(idx, day, occ):
                cost += 1
            fid = min(dom.faculty_ids, key=lambda f: faculty_cost(f, day, time))
            rid = min(dom.room_ids, key=lambda r: occ.room[(day, time, r)])
            cost += faculty_cost(fid, day, time) + occ.room[(day, time, rid)]
            if best is None or cost < best[0]:
                best = (cost, day, time, fid, rid)
                if cost == 0:
                    break

        _, day, time, fid, rid = best
        return self._slot(idx, day, time, fid, rid)

    def place(self, idx: int, occ: Occupancy, rng: random.Random) -> TimetableSlot:
        slot = self.feasible_choice(idx, occ, rng)
        if slot is None:
            slot = self.greedy_choice(idx, occ)
        return slot


def build_random_schedule(planner: SlotPlanner, rng: random.Random) -> Schedule:
    n = len(planner.problem.requirements)
    order = list(range(n))
    rng.shuffle(order)
    occ = Occupancy()
    placed: List[Optional[TimetableSlot]] = [None] * n
    for idx in order:
        slot = planner.place(idx, occ, rng)
        occ.add(slot)
        placed[idx] = slot
    return Schedule(slots=tuple(placed))


def build_initial_population(planner: SlotPlanner, pop_size: int, rng: random.Random) -> List[Schedule]:
    return [build_random_schedule(planner, rng) for _ in range(pop_size)]
