# timetable_ga/domains.py
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

from .config import GAConfig
from .model import Faculty, Room, SchoolClass, SessionRequirement, Subject


@dataclass(frozen=True)
class RequirementDomain:
    faculty_ids: List[str]
    room_ids: List[str]
    allowed_times: List[Tuple[str, str]]  # (día, hora)
    session_type: str = "lecture"


@dataclass(frozen=True)
class SchedulingProblem:
    """Foto inmutable de las entidades con la que trabaja una corrida completa."""
    classes: Tuple[SchoolClass, ...]
    subjects: Tuple[Subject, ...]
    faculty: Tuple[Faculty, ...]
    rooms: Tuple[Room, ...]
    requirements: Tuple[SessionRequirement, ...]
    unknown_subjects: Tuple[Tuple[str, str], ...] = ()  # (clase, nombre)

    @property
    def class_by_id(self) -> Dict[str, SchoolClass]:
        return {c.id: c for c in self.classes}

    @property
    def subject_by_id(self) -> Dict[str, Subject]:
        return {s.id: s for s in self.subjects}

    @property
    def faculty_by_id(self) -> Dict[str, Faculty]:
        return {f.id: f for f in self.faculty}

    @property
    def room_by_id(self) -> Dict[str, Room]:
        return {r.id: r for r in self.rooms}


def sessions_per_week(subject: Subject) -> int:
    """Sesiones semanales de una asignatura: créditos acotados por su máximo semanal."""
    return max(1, min(int(subject.credits), int(subject.max_classes_per_week)))


def find_subject(name: str, subjects: Sequence[Subject]) -> Optional[Subject]:
    for s in subjects:
        if s.name == name:
            return s
    # las clases a veces referencian por código o id
    for s in subjects:
        if name in (s.code, s.id):
            return s
    return None


def build_problem(
    classes: Sequence[SchoolClass],
    subjects: Sequence[Subject],
    faculty: Sequence[Faculty],
    rooms: Sequence[Room],
) -> SchedulingProblem:
    requirements: List[SessionRequirement] = []
    unknown: List[Tuple[str, str]] = []
    for c in classes:
        for name in c.subjects:
            subj = find_subject(name, subjects)
            if subj is None:
                unknown.append((c.id, name))
                continue
            for n in range(sessions_per_week(subj)):
                requirements.append(SessionRequirement(class_id=c.id, subject_id=subj.id, index=n + 1))

    if requirements and (not faculty or not rooms):
        raise ValueError("Se requiere al menos un docente y un aula para generar horarios")

    return SchedulingProblem(
        classes=tuple(classes),
        subjects=tuple(subjects),
        faculty=tuple(faculty),
        rooms=tuple(rooms),
        requirements=tuple(requirements),
        unknown_subjects=tuple(unknown),
    )


def calendar_slots(cfg: GAConfig) -> List[Tuple[str, str]]:
    return [(d, t) for d in cfg.days for t in cfg.time_slots]


def faculty_weekly_capacity(fac: Faculty, cfg: GAConfig) -> int:
    """
    Sesiones que un docente puede dictar por semana: slots del calendario dentro
    de su jornada (sin recesos), descontada la fracción de días de licencia.
    """
    if cfg.leave_period_days <= 0:
        raise ValueError(f"leave_period_days must be greater than 0 (got {cfg.leave_period_days})")
    available = sum(
        1 for d, t in calendar_slots(cfg) if fac.is_available(d, t, cfg.session_duration)
    )
    fraction = max(0.0, 1.0 - fac.leave_days / float(cfg.leave_period_days))
    return int(available * fraction)


def capable_faculty(subject: Subject, faculty: Sequence[Faculty]) -> List[str]:
    if subject.faculty_id and any(f.id == subject.faculty_id for f in faculty):
        return [subject.faculty_id]
    return [f.id for f in faculty if subject.name in f.subjects]


def build_requirement_domains(problem: SchedulingProblem, cfg: GAConfig) -> Dict[int, RequirementDomain]:
    domains: Dict[int, RequirementDomain] = {}
    classes = problem.class_by_id
    subjects = problem.subject_by_id
    all_faculty = [f.id for f in problem.faculty]
    allowed_times = calendar_slots(cfg)
    if problem.requirements and not allowed_times:
        raise ValueError("El calendario no tiene días u horas configurados")

    for idx, req in enumerate(problem.requirements):
        subj = subjects[req.subject_id]
        klass = classes[req.class_id]

        faculty_ids = capable_faculty(subj, problem.faculty) or all_faculty

        big_enough = [r for r in problem.rooms if r.capacity >= klass.student_count]
        if subj.type == "lab":
            labs = [r for r in big_enough if r.type == "lab"]
            big_enough = labs or big_enough
        if not big_enough:
            # ninguna alcanza: se ofrecen todas, de mayor a menor capacidad
            big_enough = sorted(problem.rooms, key=lambda r: r.capacity, reverse=True)

        domains[idx] = RequirementDomain(
            faculty_ids=faculty_ids,
            room_ids=[r.id for r in big_enough],
            allowed_times=allowed_times,
            session_type=subj.type,
        )

    return domains
