# timetable_ga/data_loader.py
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Tuple
import pandas as pd

from .config import DEFAULT_DAYS
from .model import DayAvailability, Faculty, Room, SchoolClass, Subject

LIST_SEP = ";"


@dataclass(frozen=True)
class DataBundle:
    classes: Tuple[SchoolClass, ...]
    subjects: Tuple[Subject, ...]
    faculty: Tuple[Faculty, ...]
    rooms: Tuple[Room, ...]


def _split(value) -> Tuple[str, ...]:
    if pd.isna(value) or str(value).strip() == "":
        return ()
    return tuple(p.strip() for p in str(value).split(LIST_SEP) if p.strip())


def _join(values) -> str:
    return LIST_SEP.join(values)


def _text(value, default: str = "") -> str:
    if pd.isna(value):
        return default
    return str(value)


def _optional(value):
    if pd.isna(value) or str(value).strip() == "":
        return None
    return str(value)


def _availability(row) -> Dict[str, DayAvailability]:
    # Jornada única para los días listados (columna `days`, por defecto lunes-viernes)
    start = _optional(row.get("available_start"))
    end = _optional(row.get("available_end"))
    if start is None or end is None:
        return {}
    days = _split(row.get("days")) or tuple(DEFAULT_DAYS)
    window = DayAvailability(start=start, end=end, breaks=_split(row.get("breaks")))
    return {d: window for d in days}


def load_entities(data_dir: str) -> DataBundle:
    clases = pd.read_csv(f"{data_dir}/classes.csv", dtype={"id": str})
    asignaturas = pd.read_csv(f"{data_dir}/subjects.csv", dtype={"id": str, "faculty_id": str})
    docentes = pd.read_csv(f"{data_dir}/faculty.csv", dtype={"id": str})
    aulas = pd.read_csv(f"{data_dir}/rooms.csv", dtype={"id": str})

    classes = tuple(
        SchoolClass(
            id=str(r["id"]),
            name=str(r["name"]),
            batch=_text(r.get("batch")),
            semester=_text(r.get("semester")),
            department=_text(r.get("department")),
            student_count=int(r["student_count"]),
            subjects=_split(r.get("subjects")),
        )
        for _, r in clases.iterrows()
    )
    subjects = tuple(
        Subject(
            id=str(r["id"]),
            name=str(r["name"]),
            code=_text(r.get("code"), str(r["id"])),
            credits=int(float(_text(r.get("credits"), "1"))),
            type=_text(r.get("type"), "lecture").strip().lower(),
            faculty_id=_optional(r.get("faculty_id")),
            max_classes_per_week=int(r["max_classes_per_week"]),
            max_classes_per_day=int(r["max_classes_per_day"]),
        )
        for _, r in asignaturas.iterrows()
    )
    faculty = tuple(
        Faculty(
            id=str(r["id"]),
            name=str(r["name"]),
            email=_text(r.get("email")),
            department=_text(r.get("department")),
            subjects=_split(r.get("subjects")),
            availability=_availability(r),
            leave_days=int(float(_text(r.get("leave_days"), "0"))),
        )
        for _, r in docentes.iterrows()
    )
    rooms = tuple(
        Room(
            id=str(r["id"]),
            name=_text(r.get("name"), str(r["id"])),
            capacity=int(r["capacity"]),
            type=_text(r.get("type"), "classroom").strip().lower(),
            equipment=_split(r.get("equipment")),
        )
        for _, r in aulas.iterrows()
    )

    return DataBundle(classes=classes, subjects=subjects, faculty=faculty, rooms=rooms)


def _faculty_row(f: Faculty) -> dict:
    row = {
        "id": f.id,
        "name": f.name,
        "email": f.email,
        "department": f.department,
        "subjects": _join(f.subjects),
        "leave_days": f.leave_days,
        "available_start": "",
        "available_end": "",
        "breaks": "",
        "days": "",
    }
    if f.availability:
        # el CSV guarda una jornada común; se toma la del primer día
        first = next(iter(f.availability.values()))
        row.update(
            available_start=first.start,
            available_end=first.end,
            breaks=_join(first.breaks),
            days=_join(f.availability.keys()),
        )
    return row


def save_entities(bundle: DataBundle, data_dir: str) -> None:
    out = Path(data_dir)
    out.mkdir(parents=True, exist_ok=True)
    pd.DataFrame(
        [
            {
                "id": c.id, "name": c.name, "batch": c.batch, "semester": c.semester,
                "department": c.department, "student_count": c.student_count,
                "subjects": _join(c.subjects),
            }
            for c in bundle.classes
        ],
        columns=["id", "name", "batch", "semester", "department", "student_count", "subjects"],
    ).to_csv(out / "classes.csv", index=False)
    pd.DataFrame(
        [
            {
                "id": s.id, "name": s.name, "code": s.code, "credits": s.credits, "type": s.type,
                "faculty_id": s.faculty_id or "", "max_classes_per_week": s.max_classes_per_week,
                "max_classes_per_day": s.max_classes_per_day,
            }
            for s in bundle.subjects
        ],
        columns=["id", "name", "code", "credits", "type", "faculty_id",
                 "max_classes_per_week", "max_classes_per_day"],
    ).to_csv(out / "subjects.csv", index=False)
    pd.DataFrame(
        [_faculty_row(f) for f in bundle.faculty],
        columns=["id", "name", "email", "department", "subjects", "leave_days",
                 "available_start", "available_end", "breaks", "days"],
    ).to_csv(out / "faculty.csv", index=False)
    pd.DataFrame(
        [
            {"id": r.id, "name": r.name, "capacity": r.capacity, "type": r.type,
             "equipment": _join(r.equipment)}
            for r in bundle.rooms
        ],
        columns=["id", "name", "capacity", "type", "equipment"],
    ).to_csv(out / "rooms.csv", index=False)
