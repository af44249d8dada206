"""
Configuración del optimizador genético de horarios.

Incluye un cargador desde YAML (o JSON) para dejar los parámetros del
algoritmo, los pesos de las restricciones y el calendario reproducibles
y configurables.
"""
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Dict, List, Optional, Any
import json

import yaml


DEFAULT_DAYS: List[str] = ["monday", "tuesday", "wednesday", "thursday", "friday"]

DEFAULT_TIME_SLOTS: List[str] = [
    "08:00", "09:00", "10:00", "11:00", "12:00",
    "13:00", "14:00", "15:00", "16:00", "17:00",
]

DEFAULT_WEIGHTS: Dict[str, int] = {
    "room": 10,
    "faculty": 8,
    "batch": 7,
    "subject_frequency": 6,
    "time_slot_load": 5,
}

# Combinación convexa -> el puntaje compuesto queda en [0, 100]
DEFAULT_SCORE_WEIGHTS: Dict[str, float] = {
    "fitness": 0.8,
    "utilization": 0.1,
    "workload_balance": 0.1,
}


@dataclass
class GAConfig:
    # Calendario
    days: List[str] = field(default_factory=lambda: list(DEFAULT_DAYS))
    time_slots: List[str] = field(default_factory=lambda: list(DEFAULT_TIME_SLOTS))
    session_duration: int = 60  # minutos
    leave_period_days: int = 30

    # Algoritmo genético
    population_size: int = 50
    generations: int = 100
    mutation_rate: float = 0.1
    tournament_size: int = 5
    elite_size: int = 1
    convergence_threshold: float = 1.0
    seed: Optional[int] = None

    # Pesos y fitness
    base_score: float = 100.0
    weights: Dict[str, int] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    score_weights: Dict[str, float] = field(default_factory=lambda: dict(DEFAULT_SCORE_WEIGHTS))

    # Resultados
    top_n: int = 4

    # Progreso por consola
    verbose: bool = True
    log_every: int = 5

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        # los pesos parciales se completan con los valores por defecto
        merged["weights"] = {**DEFAULT_WEIGHTS, **(data.get("weights") or {})}
        merged["score_weights"] = {**DEFAULT_SCORE_WEIGHTS, **(data.get("score_weights") or {})}
        return cls(**merged)

    @property
    def working_days(self) -> int:
        return len(self.days)


@dataclass
class OptimizationParameters:
    classroom_count: int
    batch_count: int
    subject_count: int
    faculty_count: int
    max_classes_per_day: int
    max_classes_per_subject_per_week: int
    max_classes_per_subject_per_day: int
    faculty_leave_days: int = 0
    # Texto libre reservado para extensiones futuras
    fixed_slots: Optional[str] = None
    preferences: Optional[str] = None
    restrictions: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "OptimizationParameters":
        known = set(cls.__dataclass_fields__)
        return cls(**{k: v for k, v in data.items() if k in known})


def _load_yaml_or_json(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    if path.suffix.lower() == ".json":
        return json.loads(text) if text.strip() else {}
    return yaml.safe_load(text) or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    cfg_path = Path(path)
    data = _load_yaml_or_json(cfg_path)
    if not isinstance(data, dict):
        raise ValueError("config.yaml debe contener un objeto mapeo")
    return GAConfig.from_dict(data)


def load_parameters(path: str = "config.yaml") -> Optional[OptimizationParameters]:
    """Lee el bloque opcional `parameters:` del mismo archivo de configuración."""
    data = _load_yaml_or_json(Path(path))
    block = data.get("parameters") if isinstance(data, dict) else None
    if not block:
        return None
    if not isinstance(block, dict):
        raise ValueError("'parameters' debe ser un objeto mapeo")
    return OptimizationParameters.from_dict(block)
