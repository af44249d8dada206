"""
Validación previa a la optimización.

Nunca lanza excepciones: devuelve la lista de mensajes y el llamador decide
si aborta o sigue con una advertencia.
"""
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from .config import GAConfig, OptimizationParameters
from .domains import capable_faculty, find_subject
from .model import Faculty, Room, SchoolClass, Subject


@dataclass
class ValidationResult:
    valid: bool
    errors: List[str] = field(default_factory=list)


def _is_int(value) -> bool:
    # bool es subclase de int y no cuenta como cantidad
    return isinstance(value, int) and not isinstance(value, bool)


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def validate_parameters(params: OptimizationParameters, cfg: Optional[GAConfig] = None) -> ValidationResult:
    working_days = cfg.working_days if cfg is not None else 5
    leave_period = cfg.leave_period_days if cfg is not None else 30
    errors: List[str] = []

    counts = [
        ("classroom_count", "Number of classrooms"),
        ("batch_count", "Number of batches"),
        ("subject_count", "Number of subjects"),
        ("faculty_count", "Number of faculty"),
        ("max_classes_per_day", "Max classes per day"),
        ("max_classes_per_subject_per_week", "Max classes per subject per week"),
        ("max_classes_per_subject_per_day", "Max classes per subject per day"),
    ]
    for attr, label in counts:
        value = getattr(params, attr)
        if not _is_int(value):
            errors.append(f"{label} must be a whole number (got {value!r})")
        elif value <= 0:
            errors.append(f"{label} must be greater than 0")
    numeric = all(_is_int(getattr(params, attr)) for attr, _ in counts)

    if numeric and params.max_classes_per_subject_per_day > params.max_classes_per_subject_per_week:
        errors.append("Max classes per subject per day cannot exceed max classes per subject per week")

    if not _is_number(params.faculty_leave_days):
        errors.append(f"Faculty leave days must be a number (got {params.faculty_leave_days!r})")
        numeric = False
    elif params.faculty_leave_days < 0:
        errors.append("Faculty leave days cannot be negative")

    if not _is_number(leave_period) or leave_period <= 0:
        errors.append(f"Leave period must be greater than 0 days (got {leave_period!r})")
        numeric = False

    if not numeric:
        return ValidationResult(valid=False, errors=errors)

    # Capacidad agregada
    total_weekly_slots = params.classroom_count * params.max_classes_per_day * working_days
    required_slots = params.subject_count * params.max_classes_per_subject_per_week

    if required_slots > total_weekly_slots:
        errors.append(
            f"Insufficient classroom slots: {required_slots} required, {total_weekly_slots} available"
        )

    total_faculty_slots = (
        params.faculty_count * params.max_classes_per_day * working_days
        * (1 - params.faculty_leave_days / float(leave_period))
    )
    if required_slots > total_faculty_slots:
        errors.append(
            f"Insufficient faculty capacity: {required_slots} required, {int(total_faculty_slots)} available"
        )

    return ValidationResult(valid=not errors, errors=errors)


def parameters_from_entities(
    classes: Sequence[SchoolClass],
    subjects: Sequence[Subject],
    faculty: Sequence[Faculty],
    rooms: Sequence[Room],
    max_classes_per_day: Optional[int] = None,
    cfg: Optional[GAConfig] = None,
) -> OptimizationParameters:
    """Deriva los parámetros agregados a partir de las listas de entidades."""
    n_slots = len(cfg.time_slots) if cfg is not None else 10
    return OptimizationParameters(
        classroom_count=len(rooms),
        batch_count=len(classes),
        subject_count=len(subjects),
        faculty_count=len(faculty),
        max_classes_per_day=max_classes_per_day or n_slots,
        max_classes_per_subject_per_week=max((s.max_classes_per_week for s in subjects), default=0),
        max_classes_per_subject_per_day=max((s.max_classes_per_day for s in subjects), default=0),
        faculty_leave_days=max((f.leave_days for f in faculty), default=0),
    )


def validate_entities(
    classes: Sequence[SchoolClass],
    subjects: Sequence[Subject],
    faculty: Sequence[Faculty],
    rooms: Sequence[Room],
) -> ValidationResult:
    errors: List[str] = []
    largest_room = max((r.capacity for r in rooms), default=0)
    for c in classes:
        for name in c.subjects:
            if find_subject(name, subjects) is None:
                errors.append(f"Class {c.name} requires unknown subject '{name}'")
        if rooms and c.student_count > largest_room:
            errors.append(
                f"Class {c.name} has {c.student_count} students but the largest room holds {largest_room}"
            )
    for s in subjects:
        if not capable_faculty(s, faculty):
            errors.append(f"No faculty member can teach subject '{s.name}'")
    return ValidationResult(valid=not errors, errors=errors)
