from timetable_ga.config import GAConfig
from timetable_ga.model import Faculty, Room, SchoolClass, Subject, TimetableSlot


def quiet_config(**overrides) -> GAConfig:
    data = {"population_size": 20, "generations": 10, "verbose": False}
    data.update(overrides)
    return GAConfig.from_dict(data)


def make_slot(sid, day="monday", time="09:00", room="R1", faculty="F1", klass="C1", subject="S1"):
    return TimetableSlot(
        id=sid,
        day=day,
        time=time,
        duration=60,
        subject_id=subject,
        faculty_id=faculty,
        room_id=room,
        class_id=klass,
    )


def scenario():
    """4 clases con 3 asignaturas cada una, 3 docentes que dictan todo, 4 aulas."""
    names = ["Algebra", "Physics", "Chemistry"]
    subjects = [
        Subject(f"S{i + 1}", n, f"SUB{i + 1}", 3, "lecture", None, 3, 1)
        for i, n in enumerate(names)
    ]
    classes = [
        SchoolClass(f"C{i + 1}", f"Class {i + 1}", f"B{i + 1}", "1", "Science", 30, tuple(names))
        for i in range(4)
    ]
    faculty = [
        Faculty(f"F{i + 1}", f"Prof {i + 1}", f"t{i + 1}@example.edu", "Science", tuple(names))
        for i in range(3)
    ]
    rooms = [Room(f"R{i + 1}", f"Room {i + 1}", 40) for i in range(4)]
    return classes, subjects, faculty, rooms
