"""
Detección determinística de choques sobre cualquier horario concreto.

Sirve tanto para el ranking de candidatos como para mostrar al usuario la
lista explícita de choques de un horario importado o editado a mano.
"""
from collections import defaultdict
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .config import DEFAULT_DAYS
from .model import RESOURCE_KINDS, Conflict, Timetable, TimetableSlot, time_to_minutes

_SUGGESTIONS = {
    "room": "Move one session to a free room",
    "faculty": "Move one session to a different time slot or assign another faculty member",
    "class": "Move one session to a different time slot",
}


def _day_order(day: str, days: Sequence[str]) -> Tuple[int, str]:
    try:
        return days.index(day), day
    except ValueError:
        return len(days), day


def _time_order(time: str) -> Tuple[int, str]:
    try:
        return time_to_minutes(time), time
    except ValueError:
        return -1, time


def detect_conflicts(
    timetable: Union[Timetable, Iterable[TimetableSlot]],
    days: Optional[Sequence[str]] = None,
) -> List[Conflict]:
    slots = list(timetable.slots if isinstance(timetable, Timetable) else timetable)
    days = list(days or DEFAULT_DAYS)

    by_time: Dict[Tuple[str, str], List[TimetableSlot]] = defaultdict(list)
    for s in slots:
        by_time[(s.day, s.time)].append(s)

    conflicts: List[Conflict] = []
    ordered = sorted(by_time, key=lambda k: (_day_order(k[0], days), _time_order(k[1])))
    for day, time in ordered:
        group = by_time[(day, time)]
        if len(group) < 2:
            continue
        for kind in RESOURCE_KINDS:
            by_resource: Dict[str, List[str]] = defaultdict(list)
            for s in group:
                by_resource[s.resource(kind)].append(s.id)
            colliding = [sid for ids in by_resource.values() if len(ids) > 1 for sid in ids]
            if not colliding:
                continue
            resources = sorted(r for r, ids in by_resource.items() if len(ids) > 1)
            conflicts.append(
                Conflict(
                    day=day,
                    time=time,
                    resource_kind=kind,
                    slot_ids=tuple(sorted(colliding)),
                    id=f"{kind}-{day}-{time}",
                    severity="high",
                    description=f"{kind.capitalize()} conflict on {day} at {time}: {', '.join(resources)}",
                    suggestion=_SUGGESTIONS[kind],
                )
            )
    return conflicts


def conflict_count(timetable: Union[Timetable, Iterable[TimetableSlot]]) -> int:
    return len(detect_conflicts(timetable))
