import argparse
import random
import time
from pathlib import Path
from typing import List, Sequence

import pandas as pd

from timetable_ga.config import GAConfig, load_config, load_parameters
from timetable_ga.conflicts import detect_conflicts
from timetable_ga.data_loader import DataBundle, load_entities
from timetable_ga.model import Conflict, OptimizationResult, Timetable
from timetable_ga.optimizer import get_optimization_suggestions, optimize_timetable, result_to_timetable
from timetable_ga.persistence import TimetableRepository
from timetable_ga.validation import parameters_from_entities, validate_entities, validate_parameters


def timetable_to_dataframe(tt: Timetable, bundle: DataBundle, cfg: GAConfig) -> pd.DataFrame:
    classes = {c.id: c.name for c in bundle.classes}
    subjects = {s.id: s.name for s in bundle.subjects}
    faculty = {f.id: f.name for f in bundle.faculty}
    rooms = {r.id: r.name for r in bundle.rooms}
    day_idx = {d: i for i, d in enumerate(cfg.days)}
    data = []
    for s in tt.slots:
        data.append(
            {
                "Dia": s.day,
                "Hora": s.time,
                "Duracion": s.duration,
                "Clase": classes.get(s.class_id, s.class_id),
                "Asignatura": subjects.get(s.subject_id, s.subject_id),
                "Tipo": s.type,
                "Docente": faculty.get(s.faculty_id, f"Doc {s.faculty_id}"),
                "Aula": rooms.get(s.room_id, s.room_id),
                "Slot": s.id,
            }
        )
    df = pd.DataFrame(data, columns=["Dia", "Hora", "Duracion", "Clase", "Asignatura", "Tipo", "Docente", "Aula", "Slot"])
    if df.empty:
        return df
    df["_d"] = df["Dia"].map(day_idx)
    return df.sort_values(["_d", "Hora", "Clase"]).drop(columns="_d").reset_index(drop=True)


def results_to_dataframe(results: Sequence[OptimizationResult]) -> pd.DataFrame:
    rows = [{k: v for k, v in r.to_dict().items() if k != "scheduleData"} for r in results]
    return pd.DataFrame(rows)


def export_outputs(df_schedule: pd.DataFrame, conflicts: List[Conflict], results: Sequence[OptimizationResult], out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    df_schedule.to_csv(out_dir / "schedule.csv", index=False)
    pd.DataFrame(
        [
            {"dia": c.day, "hora": c.time, "tipo": c.resource_kind, "slots": ";".join(c.slot_ids), "detalle": c.description}
            for c in conflicts
        ],
        columns=["dia", "hora", "tipo", "slots", "detalle"],
    ).to_csv(out_dir / "conflicts.csv", index=False)
    results_to_dataframe(results).to_csv(out_dir / "results.csv", index=False)


def print_results(results: Sequence[OptimizationResult]):
    print("\n" + "=" * 80)
    print(f"{'#':<3} {'Estrategia':<26} {'Util%':>7} {'Balance%':>9} {'Choques':>8} {'Score':>7}")
    print("=" * 80)
    for r in results:
        print(
            f"{r.id:<3} {r.title:<26} {r.classroom_utilization:>7.1f} "
            f"{r.faculty_workload_balance:>9.1f} {r.conflict_count:>8} {r.score:>7.1f}"
        )
    print("=" * 80 + "\n")


def main():
    parser = argparse.ArgumentParser(description="Generación de horarios con algoritmo genético")
    parser.add_argument("--config", default="config.yaml", help="Ruta al archivo de configuración")
    parser.add_argument("--data_dir", default="data", help="Directorio con los CSV de entidades")
    parser.add_argument("--out_dir", default="outputs", help="Directorio de salida")
    parser.add_argument("--seed", type=int, default=None, help="Semilla (sobrescribe la del archivo)")
    args = parser.parse_args()

    cfg = load_config(args.config)
    if args.seed is not None:
        cfg.seed = args.seed
    rng = random.Random(cfg.seed)

    print("Cargando datos...")
    bundle = load_entities(args.data_dir)
    params = load_parameters(args.config) or parameters_from_entities(
        bundle.classes, bundle.subjects, bundle.faculty, bundle.rooms, cfg=cfg
    )

    check = validate_parameters(params, cfg)
    entity_check = validate_entities(bundle.classes, bundle.subjects, bundle.faculty, bundle.rooms)
    for msg in check.errors + entity_check.errors:
        print(f"[validación] {msg}")
    if not check.valid:
        print("Parámetros no factibles; se continúa igualmente, el resultado tendrá violaciones.")

    print(f"Generaciones: {cfg.generations} | Población: {cfg.population_size}")
    history: List[dict] = []
    start = time.perf_counter()
    results = optimize_timetable(
        bundle.classes, bundle.subjects, bundle.faculty, bundle.rooms,
        params=params, cfg=cfg, rng=rng, history=history,
    )
    elapsed = time.perf_counter() - start

    print_results(results)
    print(f"Tiempo: {elapsed:.2f}s")
    for s in get_optimization_suggestions(results):
        print(f"- {s}")

    best = result_to_timetable(results[0], title="Generated Timetable")
    conflicts = detect_conflicts(best, cfg.days)
    out_dir = Path(args.out_dir)
    export_outputs(timetable_to_dataframe(best, bundle, cfg), conflicts, results, out_dir)
    if history:
        pd.DataFrame(history).to_csv(out_dir / "history.csv", index=False)
    TimetableRepository(str(out_dir / "timetables")).save(best)
    print(f"Se guardaron resultados en {out_dir}/ (horario {best.id})")


if __name__ == "__main__":
    main()
