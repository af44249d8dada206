import json
import os
import random
import tempfile
import unittest
from datetime import datetime
from pathlib import Path

from timetable_ga.config import GAConfig, load_config, load_parameters
from timetable_ga.data_loader import DataBundle, load_entities, save_entities
from timetable_ga.model import DayAvailability, Faculty, Room, SchoolClass, Subject, Timetable
from timetable_ga.persistence import (
    TimetableImportError,
    TimetableRepository,
    export_timetable,
    import_timetable,
)
from timetable_ga.state import (
    TimetableState,
    TimetableStore,
    add_entity,
    delete_entity,
    set_timetable,
    update_entity,
)

from sample_data import make_slot, quiet_config, scenario

DATA_DIR = Path(__file__).resolve().parent.parent / "data"


def _timetable():
    return Timetable(
        id="tt-1",
        title="Fall timetable",
        slots=(make_slot("b", time="10:00"), make_slot("a"), make_slot("c", day="friday", room="R2")),
        description="test",
        department="Science",
        semester="Fall 2024",
        year="2024",
        shift="EVENING",
        created_at=datetime(2024, 9, 1, 8, 30, 15, 120000),
        updated_at=datetime(2024, 9, 2, 9, 0),
    )


class ExportImportTests(unittest.TestCase):
    def test_round_trip_preserves_everything(self):
        tt = _timetable()
        back = import_timetable(export_timetable(tt))
        self.assertEqual(back.id, tt.id)
        self.assertEqual(back.title, tt.title)
        self.assertEqual(back.slots, tt.slots)
        self.assertEqual(back, tt)

    def test_import_requires_id_and_title(self):
        with self.assertRaises(TimetableImportError):
            import_timetable(json.dumps({"id": "x"}))
        with self.assertRaises(TimetableImportError):
            import_timetable(json.dumps({"title": "x", "slots": []}))
        with self.assertRaises(TimetableImportError):
            import_timetable("[1, 2]")

    def test_import_rejects_malformed_json_and_slots(self):
        with self.assertRaises(TimetableImportError):
            import_timetable("{not json")
        with self.assertRaises(ValueError):
            import_timetable(json.dumps({"id": "x", "title": "y", "slots": [{"day": "monday"}]}))


class RepositoryTests(unittest.TestCase):
    def test_save_load_and_index(self):
        with tempfile.TemporaryDirectory() as tmp:
            repo = TimetableRepository(os.path.join(tmp, "store"))
            self.assertIsNone(repo.load("missing"))
            tt = _timetable()
            repo.save(tt)
            repo.save(tt)
            self.assertEqual(repo.list_ids(), ["tt-1"])
            self.assertEqual(repo.load("tt-1"), tt)


class DataLoaderTests(unittest.TestCase):
    def test_sample_data_loads(self):
        bundle = load_entities(str(DATA_DIR))
        self.assertEqual(len(bundle.classes), 4)
        self.assertEqual(len(bundle.rooms), 4)
        f1 = next(f for f in bundle.faculty if f.id == "F1")
        self.assertFalse(f1.is_available("monday", "12:00", 60))
        self.assertTrue(f1.is_available("monday", "10:00", 60))
        s1 = next(s for s in bundle.subjects if s.id == "S1")
        self.assertIsNone(s1.faculty_id)

    def test_save_then_load(self):
        window = DayAvailability("09:00", "15:00", ("12:00-13:00",))
        bundle = DataBundle(
            classes=(SchoolClass("C1", "One", "B1", "1", "CS", 25, ("Algebra", "Lab")),),
            subjects=(
                Subject("S1", "Algebra", "MA1", 3, "lecture", "F1", 3, 1),
                Subject("S2", "Lab", "CS9", 2, "lab", None, 2, 1),
            ),
            faculty=(
                Faculty("F1", "Ana", "ana@x.edu", "CS", ("Algebra",), {"monday": window, "friday": window}, 3),
                Faculty("F2", "Luis", "luis@x.edu", "CS", ("Lab",)),
            ),
            rooms=(Room("R1", "A-1", 30, "lab", ("computers",)), Room("R2", "A-2", 40)),
        )
        with tempfile.TemporaryDirectory() as tmp:
            save_entities(bundle, tmp)
            self.assertEqual(load_entities(tmp), bundle)


class ConfigTests(unittest.TestCase):
    def test_missing_file_gives_defaults(self):
        cfg = load_config("does-not-exist.yaml")
        self.assertEqual(cfg.population_size, 50)
        self.assertEqual(cfg.generations, 100)
        self.assertEqual(cfg.weights["room"], 10)
        self.assertIsNone(load_parameters("does-not-exist.yaml"))

    def test_yaml_overrides_and_parameters(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "cfg.yaml")
            Path(path).write_text(
                "population_size: 10\nunknown_key: 1\nweights:\n  batch: 1\n"
                "parameters:\n  classroom_count: 2\n  batch_count: 2\n  subject_count: 2\n"
                "  faculty_count: 2\n  max_classes_per_day: 3\n  max_classes_per_subject_per_week: 2\n"
                "  max_classes_per_subject_per_day: 1\n",
                encoding="utf-8",
            )
            cfg = load_config(path)
            params = load_parameters(path)
        self.assertEqual(cfg.population_size, 10)
        self.assertEqual(cfg.weights["batch"], 1)
        self.assertEqual(cfg.weights["room"], 10)
        self.assertEqual(params.max_classes_per_day, 3)
        self.assertEqual(params.faculty_leave_days, 0)

    def test_non_mapping_rejected(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = os.path.join(tmp, "cfg.yaml")
            Path(path).write_text("- 1\n- 2\n", encoding="utf-8")
            with self.assertRaises(ValueError):
                load_config(path)

    def test_repo_config_file(self):
        cfg = load_config(str(DATA_DIR.parent / "config.yaml"))
        self.assertIsInstance(cfg, GAConfig)
        self.assertEqual(cfg.seed, 42)
        self.assertEqual(load_parameters(str(DATA_DIR.parent / "config.yaml")).classroom_count, 4)


class StateTests(unittest.TestCase):
    def setUp(self):
        classes, subjects, faculty, rooms = scenario()
        state = TimetableState()
        for e in classes + subjects + faculty + rooms:
            state = add_entity(state, e)
        self.state = state

    def test_reducers_return_new_state(self):
        klass = self.state.classes[0]
        renamed = SchoolClass(klass.id, "Renamed", klass.batch, klass.semester, klass.department,
                              klass.student_count, klass.subjects)
        updated = update_entity(self.state, renamed)
        self.assertEqual(updated.classes[0].name, "Renamed")
        self.assertEqual(self.state.classes[0].name, klass.name)
        removed = delete_entity(updated, Room, "R1")
        self.assertEqual([r.id for r in removed.rooms], ["R2", "R3", "R4"])

    def test_deleting_referenced_class_marks_timetable_stale(self):
        tt = Timetable(id="t", title="T", slots=(make_slot("a", klass="C1"),))
        state = set_timetable(self.state, tt)
        self.assertFalse(state.stale)
        self.assertFalse(delete_entity(state, SchoolClass, "C4").stale)
        self.assertTrue(delete_entity(state, SchoolClass, "C1").stale)

    def test_set_timetable_computes_conflicts(self):
        tt = Timetable(id="t", title="T", slots=(make_slot("a"), make_slot("b")))
        state = set_timetable(self.state, tt)
        self.assertEqual(len(state.conflicts), 3)

    def test_store_commits_best_result(self):
        store = TimetableStore(self.state)
        results = store.run_optimization(cfg=quiet_config(generations=2), rng=random.Random(8), title="Run")
        committed = store.state.current_timetable
        self.assertIsNotNone(committed)
        self.assertEqual(committed.title, "Run")
        self.assertEqual(list(committed.slots), results[0].schedule_data)
        self.assertFalse(store.state.stale)
        self.assertEqual(len(store.state.conflicts), results[0].conflict_count)


if __name__ == "__main__":
    unittest.main()
