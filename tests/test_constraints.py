import unittest

from timetable_ga.config import OptimizationParameters
from timetable_ga.constraints import (
    batch_collisions,
    build_constraints,
    colliding_pairs,
    excess_over,
    faculty_check,
    room_collisions,
    subject_frequency_check,
    time_slot_load_check,
)
from timetable_ga.domains import build_problem, faculty_weekly_capacity
from timetable_ga.model import DayAvailability, Faculty, Room, SchoolClass, Subject

from sample_data import make_slot, quiet_config


class CountingTests(unittest.TestCase):
    def test_pairs_and_excess(self):
        self.assertEqual(colliding_pairs([]), 0)
        self.assertEqual(colliding_pairs(["a", "a", "a", "b"]), 3)
        self.assertEqual(excess_over(["x", "x", "x", "y"], 2), 1)
        self.assertEqual(excess_over([], 1), 0)

    def test_room_and_batch_pairs(self):
        slots = [
            make_slot("1", room="R1", klass="C1"),
            make_slot("2", room="R1", klass="C2"),
            make_slot("3", room="R1", klass="C1"),
            make_slot("4", room="R1", klass="C1", time="10:00"),
        ]
        self.assertEqual(room_collisions(slots), 3)
        self.assertEqual(batch_collisions(slots), 1)


class FacultyConstraintTests(unittest.TestCase):
    def setUp(self):
        self.cfg = quiet_config()
        monday_only = {"monday": DayAvailability("09:00", "11:00")}
        self.fac = Faculty("F1", "A", "a@x", "CS", ("Algebra",), monday_only)
        subj = Subject("S1", "Algebra", "A", 3, "lecture", None, 3, 3)
        klass = SchoolClass("C1", "One", "B", "1", "CS", 20, ("Algebra",))
        self.problem = build_problem([klass], [subj], [self.fac], [Room("R1", "Room", 30)])

    def test_weekly_capacity(self):
        self.assertEqual(faculty_weekly_capacity(self.fac, self.cfg), 2)
        on_leave = Faculty("F2", "B", "b@x", "CS", leave_days=15)
        # 5 días x 10 horas, la mitad del período de licencia
        self.assertEqual(faculty_weekly_capacity(on_leave, self.cfg), 25)

    def test_zero_leave_period_is_rejected(self):
        with self.assertRaises(ValueError):
            faculty_weekly_capacity(self.fac, quiet_config(leave_period_days=0))

    def test_overload_and_unavailable_time(self):
        check = faculty_check(self.problem, self.cfg)
        slots = [
            make_slot("1", day="monday", time="09:00"),
            make_slot("2", day="monday", time="10:00"),
            make_slot("3", day="tuesday", time="09:00"),
        ]
        # martes fuera de disponibilidad (1) + una sesión sobre la capacidad de 2 (1)
        self.assertEqual(check(slots), 2)

    def test_double_booking(self):
        check = faculty_check(self.problem, self.cfg)
        slots = [make_slot("1", room="R1"), make_slot("2", room="R2", klass="C2")]
        self.assertEqual(check(slots), 1)


class FrequencyConstraintTests(unittest.TestCase):
    def test_weekly_and_daily_limits(self):
        subj = Subject("S1", "Algebra", "A", 2, "lecture", None, 2, 1)
        klass = SchoolClass("C1", "One", "B", "1", "CS", 20, ("Algebra",))
        fac = Faculty("F1", "A", "a@x", "CS", ("Algebra",))
        problem = build_problem([klass], [subj], [fac], [Room("R1", "Room", 30)])
        check = subject_frequency_check(problem)
        slots = [
            make_slot("1", day="monday", time="09:00"),
            make_slot("2", day="monday", time="10:00"),
            make_slot("3", day="tuesday", time="09:00"),
        ]
        self.assertEqual(check(slots), 2)

    def test_daily_load_per_class(self):
        check = time_slot_load_check(2)
        slots = [make_slot(str(i), time=f"{9 + i:02d}:00") for i in range(3)]
        slots.append(make_slot("x", klass="C2"))
        self.assertEqual(check(slots), 1)


class ConstraintSetTests(unittest.TestCase):
    def test_default_weights(self):
        cfg = quiet_config()
        problem = build_problem([], [], [], [])
        params = OptimizationParameters(1, 1, 1, 1, 4, 3, 1)
        weights = {c.name: c.weight for c in build_constraints(problem, params, cfg)}
        self.assertEqual(
            weights,
            {"room": 10, "faculty": 8, "batch": 7, "subject_frequency": 6, "time_slot_load": 5},
        )

    def test_weights_are_configurable(self):
        cfg = quiet_config(weights={"room": 20})
        problem = build_problem([], [], [], [])
        params = OptimizationParameters(1, 1, 1, 1, 4, 3, 1)
        weights = {c.name: c.weight for c in build_constraints(problem, params, cfg)}
        self.assertEqual(weights["room"], 20)
        self.assertEqual(weights["faculty"], 8)


if __name__ == "__main__":
    unittest.main()
