import unittest

from timetable_ga.conflicts import conflict_count, detect_conflicts
from timetable_ga.model import Timetable

from sample_data import make_slot


class ConflictDetectorTests(unittest.TestCase):
    def test_no_overlaps_no_conflicts(self):
        tt = Timetable(id="t", title="T", slots=(
            make_slot("a", room="R1", faculty="F1", klass="C1"),
            make_slot("b", room="R2", faculty="F2", klass="C2"),
            make_slot("c", time="10:00"),
        ))
        self.assertEqual(detect_conflicts(tt), [])

    def test_two_slots_sharing_room(self):
        tt = Timetable(id="t", title="T", slots=(
            make_slot("a", room="R1", faculty="F1", klass="C1"),
            make_slot("b", room="R1", faculty="F2", klass="C2"),
        ))
        conflicts = detect_conflicts(tt)
        self.assertEqual(len(conflicts), 1)
        c = conflicts[0]
        self.assertEqual(c.resource_kind, "room")
        self.assertEqual(set(c.slot_ids), {"a", "b"})
        self.assertEqual((c.day, c.time), ("monday", "09:00"))

    def test_one_record_per_kind(self):
        slots = [
            make_slot("a", room="R1", faculty="F1", klass="C1"),
            make_slot("b", room="R1", faculty="F1", klass="C2"),
            make_slot("c", room="R2", faculty="F2", klass="C2"),
            make_slot("d", room="R2", faculty="F3", klass="C3"),
        ]
        by_kind = {c.resource_kind: set(c.slot_ids) for c in detect_conflicts(slots)}
        self.assertEqual(by_kind["room"], {"a", "b", "c", "d"})
        self.assertEqual(by_kind["faculty"], {"a", "b"})
        self.assertEqual(by_kind["class"], {"b", "c"})
        self.assertEqual(conflict_count(slots), 3)

    def test_deterministic_and_order_independent(self):
        slots = [
            make_slot("a", day="tuesday", room="R1", faculty="F1", klass="C1"),
            make_slot("b", day="tuesday", room="R1", faculty="F2", klass="C2"),
            make_slot("c", day="monday", time="10:00", faculty="F4", klass="C4"),
            make_slot("d", day="monday", time="10:00", faculty="F4", klass="C5", room="R9"),
        ]
        first = detect_conflicts(slots)
        second = detect_conflicts(slots)
        reversed_run = detect_conflicts(list(reversed(slots)))
        self.assertEqual(first, second)
        self.assertEqual(first, reversed_run)
        self.assertEqual([(c.day, c.resource_kind) for c in first], [("monday", "faculty"), ("tuesday", "room")])

    def test_conflict_serializes(self):
        c = detect_conflicts([make_slot("a"), make_slot("b")])[0]
        d = c.to_dict()
        self.assertEqual(set(d), {"id", "day", "time", "resourceKind", "collidingSlotIds",
                                  "severity", "description", "suggestion"})
        self.assertEqual(d["collidingSlotIds"], ["a", "b"])
        self.assertEqual(d["resourceKind"], "room")
        self.assertEqual((d["day"], d["time"]), ("monday", "09:00"))
        self.assertTrue(d["suggestion"])


if __name__ == "__main__":
    unittest.main()
