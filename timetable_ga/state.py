"""
Estado en memoria de la aplicación (entidades + horario vigente).

Las operaciones devuelven un estado nuevo; el `TimetableStore` serializa las
corridas del optimizador: toma la foto al inicio, calcula sobre ella y
confirma el horario y sus choques en un solo reemplazo.
"""
import threading
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from .config import GAConfig, OptimizationParameters
from .conflicts import detect_conflicts
from .model import Conflict, Faculty, OptimizationResult, Room, SchoolClass, Subject, Timetable
from .optimizer import optimize_timetable, result_to_timetable

_COLLECTIONS = {
    SchoolClass: "classes",
    Subject: "subjects",
    Faculty: "faculty",
    Room: "rooms",
}


@dataclass(frozen=True)
class TimetableState:
    classes: Tuple[SchoolClass, ...] = ()
    subjects: Tuple[Subject, ...] = ()
    faculty: Tuple[Faculty, ...] = ()
    rooms: Tuple[Room, ...] = ()
    current_timetable: Optional[Timetable] = None
    conflicts: Tuple[Conflict, ...] = ()
    stale: bool = False  # el horario vigente referencia entidades que cambiaron


def _mark_stale(state: TimetableState, entity_id: str) -> TimetableState:
    tt = state.current_timetable
    if tt is not None and tt.references(entity_id):
        return replace(state, stale=True)
    return state


def add_entity(state: TimetableState, entity) -> TimetableState:
    name = _COLLECTIONS[type(entity)]
    return replace(state, **{name: getattr(state, name) + (entity,)})


def update_entity(state: TimetableState, entity) -> TimetableState:
    name = _COLLECTIONS[type(entity)]
    items = tuple(entity if e.id == entity.id else e for e in getattr(state, name))
    return _mark_stale(replace(state, **{name: items}), entity.id)


def delete_entity(state: TimetableState, kind: type, entity_id: str) -> TimetableState:
    name = _COLLECTIONS[kind]
    items = tuple(e for e in getattr(state, name) if e.id != entity_id)
    return _mark_stale(replace(state, **{name: items}), entity_id)


def set_timetable(state: TimetableState, timetable: Optional[Timetable], days=None) -> TimetableState:
    conflicts = tuple(detect_conflicts(timetable, days)) if timetable is not None else ()
    return replace(state, current_timetable=timetable, conflicts=conflicts, stale=False)


class TimetableStore:
    def __init__(self, state: Optional[TimetableState] = None):
        self._state = state or TimetableState()
        self._lock = threading.Lock()      # protege lecturas/escrituras del estado
        self._run_lock = threading.Lock()  # una corrida de optimización a la vez

    @property
    def state(self) -> TimetableState:
        with self._lock:
            return self._state

    def dispatch(self, action: Callable[[TimetableState], TimetableState]) -> TimetableState:
        with self._lock:
            self._state = action(self._state)
            return self._state

    def run_optimization(
        self,
        params: Optional[OptimizationParameters] = None,
        cfg: Optional[GAConfig] = None,
        rng=None,
        title: Optional[str] = None,
        should_stop: Optional[Callable[[], bool]] = None,
    ) -> List[OptimizationResult]:
        """Optimiza sobre la foto actual y confirma el mejor resultado como horario vigente."""
        cfg = cfg or GAConfig()
        with self._run_lock:
            snapshot = self.state
            results = optimize_timetable(
                snapshot.classes,
                snapshot.subjects,
                snapshot.faculty,
                snapshot.rooms,
                params=params,
                cfg=cfg,
                rng=rng,
                should_stop=should_stop,
            )
            timetable = result_to_timetable(results[0], title=title)

            def commit(current: TimetableState) -> TimetableState:
                committed = set_timetable(current, timetable, cfg.days)
                changed = any(
                    getattr(current, name) != getattr(snapshot, name) for name in _COLLECTIONS.values()
                )
                return replace(committed, stale=changed)

            self.dispatch(commit)
            return results
