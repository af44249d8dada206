# timetable_ga/evaluation.py
from dataclasses import dataclass
from typing import Dict, Sequence

from .constraints import Constraint
from .model import Schedule


@dataclass
class EvaluationResult:
    penalty: float
    fitness: float
    violations: Dict[str, int]


def evaluate(ind: Schedule, constraints: Sequence[Constraint], base_score: float = 100.0) -> EvaluationResult:
    violations: Dict[str, int] = {}
    penalty = 0.0
    for c in constraints:
        count = c.check(ind.slots)
        violations[c.name] = count
        penalty += count * c.weight

    ind.penalty = penalty
    ind.fitness = max(0.0, base_score - penalty)
    ind.violations = violations
    ind.evaluated = True

    return EvaluationResult(penalty=penalty, fitness=ind.fitness, violations=violations)
