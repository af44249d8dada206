"""
Guardado, carga, exportación e importación de horarios en JSON.
"""
import json
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from .model import Timetable, TimetableSlot

INDEX_FILE = "saved_timetables.json"


class TimetableImportError(ValueError):
    """Datos de horario persistidos mal formados."""


def slot_from_dict(d: Dict[str, Any]) -> TimetableSlot:
    return TimetableSlot(
        id=str(d["id"]),
        day=str(d["day"]),
        time=str(d["time"]),
        duration=int(d.get("duration", 60)),
        subject_id=str(d["subjectId"]),
        faculty_id=str(d["facultyId"]),
        room_id=str(d["roomId"]),
        class_id=str(d["classId"]),
        type=str(d.get("type", "lecture")),
    )


def timetable_to_dict(tt: Timetable) -> Dict[str, Any]:
    return {
        "id": tt.id,
        "title": tt.title,
        "description": tt.description,
        "department": tt.department,
        "semester": tt.semester,
        "year": tt.year,
        "shift": tt.shift,
        "slots": [s.to_dict() for s in tt.slots],
        "createdAt": tt.created_at.isoformat(),
        "updatedAt": tt.updated_at.isoformat(),
    }


def _parse_timestamp(value: Any) -> datetime:
    if not value:
        return datetime.now()
    return datetime.fromisoformat(str(value))


def timetable_from_dict(d: Dict[str, Any]) -> Timetable:
    if not isinstance(d, dict) or not d.get("id") or not d.get("title"):
        raise TimetableImportError("Invalid timetable data: 'id' and 'title' are required")
    try:
        slots = tuple(slot_from_dict(s) for s in d.get("slots") or [])
        return Timetable(
            id=str(d["id"]),
            title=str(d["title"]),
            slots=slots,
            description=str(d.get("description", "")),
            department=str(d.get("department", "")),
            semester=str(d.get("semester", "")),
            year=str(d.get("year", "")),
            shift=str(d.get("shift", "MORNING")),
            created_at=_parse_timestamp(d.get("createdAt")),
            updated_at=_parse_timestamp(d.get("updatedAt")),
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise TimetableImportError(f"Failed to import timetable: {exc}") from exc


def export_timetable(tt: Timetable) -> str:
    return json.dumps(timetable_to_dict(tt), indent=2)


def import_timetable(data: str) -> Timetable:
    try:
        raw = json.loads(data)
    except json.JSONDecodeError as exc:
        raise TimetableImportError(f"Failed to import timetable: {exc}") from exc
    return timetable_from_dict(raw)


class TimetableRepository:
    """Horarios guardados como `timetable_<id>.json` más un índice con todos ellos."""

    def __init__(self, directory: str):
        self.directory = Path(directory)

    def _path(self, timetable_id: str) -> Path:
        return self.directory / f"timetable_{timetable_id}.json"

    def _read_index(self) -> List[Dict[str, Any]]:
        index = self.directory / INDEX_FILE
        if not index.exists():
            return []
        return json.loads(index.read_text(encoding="utf-8"))

    def save(self, tt: Timetable) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        self._path(tt.id).write_text(export_timetable(tt), encoding="utf-8")
        # el índice reemplaza la entrada previa con el mismo id
        entries = [e for e in self._read_index() if e.get("id") != tt.id]
        entries.append({"id": tt.id, "title": tt.title, "updatedAt": tt.updated_at.isoformat()})
        (self.directory / INDEX_FILE).write_text(json.dumps(entries, indent=2), encoding="utf-8")

    def load(self, timetable_id: str) -> Optional[Timetable]:
        path = self._path(timetable_id)
        if not path.exists():
            return None
        return import_timetable(path.read_text(encoding="utf-8"))

    def list_ids(self) -> List[str]:
        return [e["id"] for e in self._read_index()]
