# timetable_ga/model.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional, Tuple

Weekday = str
TimeLabel = str  # "HH:MM"

SESSION_TYPES = ("lecture", "lab", "tutorial")
ROOM_TYPES = ("classroom", "lab", "auditorium")
RESOURCE_KINDS = ("room", "faculty", "class")


def time_to_minutes(label: TimeLabel) -> int:
    h, m = label.strip().split(":")
    return int(h) * 60 + int(m)


def parse_interval(text: str) -> Tuple[int, int]:
    """'12:00-13:00' -> (720, 780)"""
    start, end = text.split("-")
    return time_to_minutes(start), time_to_minutes(end)


@dataclass(frozen=True)
class SchoolClass:
    id: str
    name: str
    batch: str
    semester: str
    department: str
    student_count: int
    subjects: Tuple[str, ...] = ()  # nombres de asignatura


@dataclass(frozen=True)
class Subject:
    id: str
    name: str
    code: str
    credits: int
    type: str                  # "lecture", "lab", "tutorial"
    faculty_id: Optional[str]  # puede quedar sin asignar
    max_classes_per_week: int
    max_classes_per_day: int

    def __post_init__(self):
        if self.max_classes_per_day > self.max_classes_per_week:
            raise ValueError(
                f"Subject {self.id}: max_classes_per_day ({self.max_classes_per_day}) "
                f"exceeds max_classes_per_week ({self.max_classes_per_week})"
            )


@dataclass(frozen=True)
class DayAvailability:
    start: TimeLabel
    end: TimeLabel
    breaks: Tuple[str, ...] = ()

    def covers(self, time: TimeLabel, duration: int) -> bool:
        """True si la sesión [time, time+duration) cae dentro de la jornada y fuera de los recesos."""
        begin = time_to_minutes(time)
        finish = begin + duration
        if begin < time_to_minutes(self.start) or finish > time_to_minutes(self.end):
            return False
        for b in self.breaks:
            b_start, b_end = parse_interval(b)
            if begin < b_end and b_start < finish:
                return False
        return True


@dataclass(frozen=True)
class Faculty:
    id: str
    name: str
    email: str
    department: str
    subjects: Tuple[str, ...] = ()
    # Sin entradas = disponible en todo el calendario institucional
    availability: Dict[Weekday, DayAvailability] = field(default_factory=dict)
    leave_days: int = 0

    def __post_init__(self):
        if self.leave_days < 0:
            raise ValueError(f"Faculty {self.id}: leave_days cannot be negative")

    def __hash__(self):
        return hash(self.id)

    def is_available(self, day: Weekday, time: TimeLabel, duration: int) -> bool:
        if not self.availability:
            return True
        window = self.availability.get(day)
        return window is not None and window.covers(time, duration)

    def can_teach(self, subject: Subject) -> bool:
        return subject.faculty_id == self.id or subject.name in self.subjects


@dataclass(frozen=True)
class Room:
    id: str
    name: str
    capacity: int
    type: str = "classroom"
    equipment: Tuple[str, ...] = ()


@dataclass(frozen=True)
class TimetableSlot:
    id: str
    day: Weekday
    time: TimeLabel
    duration: int
    subject_id: str
    faculty_id: str
    room_id: str
    class_id: str
    type: str = "lecture"

    def resource(self, kind: str) -> str:
        if kind == "room":
            return self.room_id
        if kind == "faculty":
            return self.faculty_id
        if kind == "class":
            return self.class_id
        raise ValueError(f"Unknown resource kind: {kind}")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "time": self.time,
            "duration": self.duration,
            "subjectId": self.subject_id,
            "facultyId": self.faculty_id,
            "roomId": self.room_id,
            "classId": self.class_id,
            "type": self.type,
        }


@dataclass(frozen=True)
class Timetable:
    id: str
    title: str
    slots: Tuple[TimetableSlot, ...] = ()
    description: str = ""
    department: str = ""
    semester: str = ""
    year: str = ""
    shift: str = "MORNING"  # "MORNING" | "EVENING"
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def references(self, entity_id: str) -> bool:
        return any(
            entity_id in (s.class_id, s.subject_id, s.faculty_id, s.room_id)
            for s in self.slots
        )


@dataclass(frozen=True)
class Conflict:
    # Derivado: nunca se persiste por separado del horario
    day: Weekday
    time: TimeLabel
    resource_kind: str            # "room" | "faculty" | "class"
    slot_ids: Tuple[str, ...]
    id: str = ""
    severity: str = "high"
    description: str = ""
    suggestion: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "day": self.day,
            "time": self.time,
            "resourceKind": self.resource_kind,
            "collidingSlotIds": list(self.slot_ids),
            "severity": self.severity,
            "description": self.description,
            "suggestion": self.suggestion,
        }


@dataclass(frozen=True)
class SessionRequirement:
    # Una sesión semanal que una clase debe recibir de una asignatura
    class_id: str
    subject_id: str
    index: int

    @property
    def slot_id(self) -> str:
        return f"{self.class_id}-{self.subject_id}-{self.index}"


@dataclass
class Schedule:
    # Un candidato = una asignación completa (un slot por requerimiento, mismo orden)
    slots: Tuple[TimetableSlot, ...]
    penalty: float = 0.0
    fitness: float = 0.0
    violations: Dict[str, int] = field(default_factory=dict)
    evaluated: bool = False

    def key(self) -> Tuple[Tuple[str, str, str, str], ...]:
        return tuple((s.day, s.time, s.faculty_id, s.room_id) for s in self.slots)


@dataclass
class OptimizationResult:
    id: str
    title: str
    classroom_utilization: float
    faculty_workload_balance: float
    conflict_count: int
    score: float
    status: str
    schedule_data: List[TimetableSlot]
    fitness: float = 0.0

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "classroomUtilization": self.classroom_utilization,
            "facultyWorkloadBalance": self.faculty_workload_balance,
            "conflictCount": self.conflict_count,
            "score": self.score,
            "status": self.status,
            "scheduleData": [s.to_dict() for s in self.schedule_data],
        }
